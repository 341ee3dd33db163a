import logging
from collections import Counter
from contextlib import contextmanager
from typing import Any, Dict, Hashable, Optional

from scene_prompter.core.catalog import KIND_LABELS, DialogueType
from scene_prompter.core.errors import (
    GenerationServiceError,
    NotFoundError,
    StoreValidationError,
    SuggestionError,
    describe_generation_failure,
)
from scene_prompter.core.prompts import templates
from scene_prompter.schemas.entities import Character, SceneAttributes, SpokenDialogue
from scene_prompter.services.entity_store import EntityStore
from scene_prompter.services.llm_service import LLMService, llm_service

logger = logging.getLogger(__name__)

# Opening quote -> closing quotes that pair with it
QUOTE_PAIRS = {
    '"': '"',
    "'": "'",
    "“": "”",
    "„": "“”",
    "«": "»",
}


def strip_wrapping_quotes(text: str) -> str:
    """Drop quotes that wrap the whole text; quotes around a single word stay."""
    text = (text or "").strip()
    while len(text) >= 2 and text[-1] in QUOTE_PAIRS.get(text[0], ""):
        inner = text[1:-1]
        # "a" dan "b" starts and ends with quotes without being wrapped
        if text[0] in inner or text[-1] in inner:
            break
        text = inner.strip()
    return text


def build_action_instruction(character: Character) -> str:
    return templates.ACTION_SUGGESTION_TEMPLATE.format(
        name=character.name,
        kind=KIND_LABELS[character.kind],
    )


def build_dialogue_instruction(
    speaker: Character,
    dialogue_type: DialogueType,
    target: Optional[Character],
    scene: SceneAttributes,
) -> str:
    if dialogue_type == DialogueType.QUESTION and target is not None:
        head = templates.DIALOGUE_QUESTION_TEMPLATE.format(speaker=speaker.name, target=target.name)
    elif dialogue_type == DialogueType.ANSWER and target is not None:
        head = templates.DIALOGUE_ANSWER_TEMPLATE.format(speaker=speaker.name, target=target.name)
    elif dialogue_type == DialogueType.ADDRESS_AUDIENCE:
        head = templates.DIALOGUE_AUDIENCE_TEMPLATE.format(speaker=speaker.name)
    else:
        kind_label = "pertanyaan" if dialogue_type == DialogueType.QUESTION else "jawaban"
        head = templates.DIALOGUE_GENERIC_TEMPLATE.format(speaker=speaker.name, kind_label=kind_label)

    context = templates.DIALOGUE_CONTEXT.format(
        location=scene.location.strip() or templates.NO_LOCATION,
        time_of_day=scene.time_of_day.value if scene.time_of_day else templates.NO_TIME_OF_DAY,
    )
    return f"{head} {context} {templates.DIALOGUE_OUTPUT_RULE}"


class SuggestionService:
    """Fills single fields of the store with suggestions from the generation service.

    Requests are keyed by character id (actions) or spoken dialogue index
    (sentences). Nothing serializes requests on the same key: when two
    overlap, whichever response resolves last is the one left in the store.
    The loading flag of a key stays raised while any request on it is
    outstanding.
    """

    def __init__(self, store: EntityStore, llm: Optional[LLMService] = None):
        self.store = store
        self.llm = llm or llm_service
        self._in_flight: Counter = Counter()

    @contextmanager
    def _loading(self, key: Hashable):
        self._in_flight[key] += 1
        try:
            yield
        finally:
            self._in_flight[key] -= 1
            if self._in_flight[key] <= 0:
                del self._in_flight[key]

    def is_loading_action(self, char_id: str) -> bool:
        return self._in_flight[("action", char_id)] > 0

    def is_loading_dialogue(self, index: int) -> bool:
        return self._in_flight[("dialogue", index)] > 0

    def loading_state(self) -> Dict[str, Dict[Any, bool]]:
        state: Dict[str, Dict[Any, bool]] = {"actions": {}, "dialogue": {}}
        for (kind, key), count in self._in_flight.items():
            if count > 0:
                state["actions" if kind == "action" else "dialogue"][key] = True
        return state

    async def suggest_action(self, char_id: str) -> str:
        with self._loading(("action", char_id)):
            try:
                character = self.store.get_character(char_id)
            except NotFoundError as e:
                raise StoreValidationError("Karakter tidak ditemukan.") from e

            instruction = build_action_instruction(character)
            try:
                raw = await self.llm.generate_text(instruction, purpose="suggest_action")
            except GenerationServiceError as e:
                logger.error(f"Action suggestion failed for {char_id}: {e}")
                raise SuggestionError(describe_generation_failure("menyarankan aksi", e)) from e

            action = raw.strip()
            self.store.set_character_action(char_id, "action", action)
            logger.info("Action suggested for %s: %r", character.name, action)
            return action

    async def suggest_dialogue_sentence(self, index: int) -> str:
        with self._loading(("dialogue", index)):
            state = self.store.snapshot()
            if not 0 <= index < len(state.spoken_dialogue):
                raise NotFoundError(f"Spoken dialogue {index} not found")
            entry: SpokenDialogue = state.spoken_dialogue[index]
            speaker = state.find_character(entry.char_id)
            if speaker is None or entry.type is None:
                raise StoreValidationError("Pilih karakter dan jenis dialog terlebih dahulu.")

            target = state.find_character(entry.target_char_id)
            instruction = build_dialogue_instruction(speaker, entry.type, target, state.scene)
            try:
                raw = await self.llm.generate_text(instruction, purpose="suggest_dialogue")
            except GenerationServiceError as e:
                logger.error(f"Dialogue suggestion failed for entry {index}: {e}")
                raise SuggestionError(describe_generation_failure("menyarankan dialog", e)) from e

            sentence = strip_wrapping_quotes(raw)
            self.store.update_spoken_dialogue(index, sentence=sentence)
            logger.info("Dialogue suggested for %s (entry %s): %r", speaker.name, index, sentence)
            return sentence
