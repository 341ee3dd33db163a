import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from scene_prompter.core.catalog import Expression, parse_visual_style
from scene_prompter.core.errors import NotFoundError, StoreValidationError
from scene_prompter.schemas.entities import (
    Character,
    CharacterAction,
    DialogueLine,
    SceneAttributes,
    SpokenDialogue,
    StoreState,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ACTION_FIELDS = ("action", "is_main")
SCENE_FIELDS = (
    "location",
    "time_of_day",
    "camera_motion",
    "lighting",
    "visual_styles",
    "mood",
    "sound_music",
    "additional_details",
)


def new_character_id() -> str:
    return uuid.uuid4().hex


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        msg = str(err.get("msg") or "")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        loc = ".".join(str(p) for p in err.get("loc") or ())
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or str(exc)


def _validated(model_cls: Type[ModelT], data: Any) -> ModelT:
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        raise StoreValidationError(_validation_message(e)) from e


def _rekeyed_actions(actions: Dict[str, CharacterAction]) -> Dict[str, CharacterAction]:
    # Drafts are keyed by hand-editable JSON; the entry's own char_id wins
    rekeyed: Dict[str, CharacterAction] = {}
    for key, action in actions.items():
        if action.char_id != key:
            logger.warning("Draft action keyed %s belongs to %s", key, action.char_id)
        rekeyed.setdefault(action.char_id, action)
    return rekeyed


class EntityStore:
    """Single owner of the scene being authored.

    Every mutation works on a deep copy of the current state and swaps it in
    only when the whole operation succeeded, so a rejected edit leaves the
    store untouched and no reader ever sees half an update.
    """

    def __init__(self, state: Optional[StoreState] = None):
        self._state = state.model_copy(deep=True) if state is not None else StoreState()

    def snapshot(self) -> StoreState:
        return self._state.model_copy(deep=True)

    @contextmanager
    def _edit(self):
        draft = self._state.model_copy(deep=True)
        yield draft
        self._state = draft

    # Characters -------------------------------------------------------

    def upsert_character(self, name: str, attributes: Any, char_id: Optional[str] = None) -> Character:
        if isinstance(attributes, BaseModel):
            attributes = attributes.model_dump()
        character = _validated(Character, {
            "id": char_id or new_character_id(),
            "name": name,
            "attributes": attributes,
        })

        with self._edit() as state:
            for index, existing in enumerate(state.characters):
                if existing.id != character.id:
                    continue
                if existing.kind != character.kind:
                    raise StoreValidationError(
                        f"Character kind cannot change once saved ({existing.kind.value} -> {character.kind.value})."
                    )
                state.characters[index] = character
                break
            else:
                state.characters.append(character)
        return character.model_copy(deep=True)

    def remove_character(self, char_id: str) -> None:
        self._require_character(char_id)
        with self._edit() as state:
            state.characters = [c for c in state.characters if c.id != char_id]
            state.actions.pop(char_id, None)
            state.expressions.pop(char_id, None)

            # References are cleared rather than entries deleted so spoken
            # dialogue indices stay stable for in-flight suggestions.
            cleared = 0
            for entry in state.spoken_dialogue:
                if entry.char_id == char_id:
                    entry.char_id = None
                    cleared += 1
                if entry.target_char_id == char_id:
                    entry.target_char_id = None
                    cleared += 1
            for action in state.actions.values():
                for line in action.dialogue_lines:
                    if line.target_char_id == char_id:
                        line.target_char_id = None
                        cleared += 1
        logger.info("Removed character %s (cleared %s dialogue references)", char_id, cleared)

    def get_character(self, char_id: str) -> Character:
        return self._require_character(char_id).model_copy(deep=True)

    # Character actions ------------------------------------------------

    def set_character_action(self, char_id: str, field: str, value: Any) -> CharacterAction:
        if field not in ACTION_FIELDS:
            raise StoreValidationError(f"Unknown character action field: {field}")
        if field == "action" and value is None:
            value = ""
        self._require_character(char_id)
        with self._edit() as state:
            current = self._action_for(state, char_id)
            updated = _validated(CharacterAction, {**current.model_dump(), field: value})
            state.actions[char_id] = updated
        return updated.model_copy(deep=True)

    def toggle_main_character(self, char_id: str) -> bool:
        self._require_character(char_id)
        with self._edit() as state:
            action = self._action_for(state, char_id)
            action.is_main = not action.is_main
            state.actions[char_id] = action
        return action.is_main

    def add_dialogue_line(self, char_id: str, line: Optional[Dict[str, Any]] = None) -> int:
        self._require_character(char_id)
        with self._edit() as state:
            action = self._action_for(state, char_id)
            new_line = self._checked_line(state, DialogueLine, line or {}, speaker_id=char_id)
            action.dialogue_lines.append(new_line)
            state.actions[char_id] = action
        return len(action.dialogue_lines) - 1

    def update_dialogue_line(self, char_id: str, index: int, **changes) -> DialogueLine:
        with self._edit() as state:
            action = state.actions.get(char_id)
            if action is None or not 0 <= index < len(action.dialogue_lines):
                raise NotFoundError(f"Dialogue line {index} not found for character {char_id}")
            merged = {**action.dialogue_lines[index].model_dump(), **changes}
            line = self._checked_line(state, DialogueLine, merged, speaker_id=char_id)
            action.dialogue_lines[index] = line
        return line.model_copy(deep=True)

    def remove_dialogue_line(self, char_id: str, index: int) -> None:
        with self._edit() as state:
            action = state.actions.get(char_id)
            if action is None or not 0 <= index < len(action.dialogue_lines):
                raise NotFoundError(f"Dialogue line {index} not found for character {char_id}")
            del action.dialogue_lines[index]

    # Global spoken dialogue --------------------------------------------

    def add_spoken_dialogue(self, entry: Optional[Dict[str, Any]] = None) -> int:
        with self._edit() as state:
            data = dict(entry or {})
            new_entry = self._checked_line(state, SpokenDialogue, data, speaker_id=data.get("char_id"))
            state.spoken_dialogue.append(new_entry)
        return len(state.spoken_dialogue) - 1

    def update_spoken_dialogue(self, index: int, **changes) -> SpokenDialogue:
        with self._edit() as state:
            if not 0 <= index < len(state.spoken_dialogue):
                raise NotFoundError(f"Spoken dialogue {index} not found")
            merged = {**state.spoken_dialogue[index].model_dump(), **changes}
            entry = self._checked_line(state, SpokenDialogue, merged, speaker_id=merged.get("char_id"))
            state.spoken_dialogue[index] = entry
        return entry.model_copy(deep=True)

    def remove_spoken_dialogue(self, index: int) -> None:
        with self._edit() as state:
            if not 0 <= index < len(state.spoken_dialogue):
                raise NotFoundError(f"Spoken dialogue {index} not found")
            del state.spoken_dialogue[index]

    # Expressions and scene ---------------------------------------------

    def set_expression(self, char_id: str, value: Any) -> Optional[Expression]:
        self._require_character(char_id)
        if value in (None, ""):
            with self._edit() as state:
                state.expressions.pop(char_id, None)
            return None
        try:
            expression = Expression(value)
        except ValueError as e:
            raise StoreValidationError(f"Unknown expression: {value}") from e
        with self._edit() as state:
            state.expressions[char_id] = expression
        return expression

    def set_scene_attribute(self, field: str, value: Any) -> SceneAttributes:
        if field not in SCENE_FIELDS:
            raise StoreValidationError(f"Unknown scene attribute: {field}")
        if value is None and field in ("location", "sound_music", "additional_details"):
            value = ""
        with self._edit() as state:
            state.scene = _validated(SceneAttributes, {**state.scene.model_dump(), field: value})
        return state.scene.model_copy(deep=True)

    def toggle_visual_style(self, style: Any) -> bool:
        """Add the style if absent, drop it if present. Returns the new membership."""
        try:
            resolved = parse_visual_style(style)
        except ValueError as e:
            raise StoreValidationError(str(e)) from e
        with self._edit() as state:
            styles = state.scene.visual_styles
            if resolved in styles:
                styles.remove(resolved)
                selected = False
            else:
                styles.append(resolved)
                selected = True
        return selected

    # Outputs ------------------------------------------------------------

    def set_composed_prompt(self, text: str) -> None:
        with self._edit() as state:
            state.composed_prompt = text or ""

    def set_refined_prompt(self, text: str) -> None:
        with self._edit() as state:
            state.refined_prompt = text or ""

    def reset(self) -> None:
        self._state = StoreState()

    # Drafts -------------------------------------------------------------

    def to_draft(self) -> Dict[str, Any]:
        return self._state.model_dump(mode="json")

    def load_draft(self, payload: Optional[Dict[str, Any]]) -> None:
        """Replace the whole state from a saved draft.

        Each section that is missing or unreadable falls back to its empty
        default; the rest of the draft still loads.
        """
        payload = payload or {}
        defaults = StoreState()
        restored: Dict[str, Any] = {}
        for name in StoreState.model_fields:
            if name not in payload or payload[name] is None:
                restored[name] = getattr(defaults, name)
                continue
            try:
                restored[name] = getattr(StoreState.model_validate({name: payload[name]}), name)
            except ValidationError as e:
                logger.warning("Draft section %s unreadable, using default: %s", name, _validation_message(e))
                restored[name] = getattr(defaults, name)
        restored["actions"] = _rekeyed_actions(restored["actions"])
        self._state = StoreState(**restored)

    # Helpers -------------------------------------------------------------

    def _require_character(self, char_id: Optional[str]) -> Character:
        character = self._state.find_character(char_id)
        if character is None:
            raise NotFoundError(f"Character {char_id} not found")
        return character

    @staticmethod
    def _action_for(state: StoreState, char_id: str) -> CharacterAction:
        # Created lazily on the first edit for this character
        return state.actions.get(char_id) or CharacterAction(char_id=char_id)

    @staticmethod
    def _checked_line(state: StoreState, model_cls: Type[ModelT], data: Dict[str, Any], speaker_id: Optional[str]) -> ModelT:
        unknown = set(data) - set(model_cls.model_fields)
        if unknown:
            raise StoreValidationError(f"Unknown dialogue field(s): {', '.join(sorted(unknown))}")
        line = _validated(model_cls, data)

        speaker = getattr(line, "char_id", speaker_id)
        if speaker and state.find_character(speaker) is None:
            raise StoreValidationError(f"Speaker {speaker} is not a saved character")

        if line.target_char_id:
            if line.type is not None and not line.type.takes_target:
                line.target_char_id = None
            elif line.target_char_id == speaker:
                raise StoreValidationError("A character cannot address a question or answer to itself.")
            elif state.find_character(line.target_char_id) is None:
                raise StoreValidationError(f"Target {line.target_char_id} is not a saved character")
        return line
