"""Deterministic Indonesian narrative from a store snapshot.

The output is built in a fixed order: main-character callout, one
introduction per character, actions with embedded dialogue, scene
attributes, global spoken dialogue, additional details. Each step appends
zero or more sentences; sentences are joined with a single space.

Descriptive option values and free-text descriptions are lower-cased.
Names, dialogue sentences, the age descriptor phrase, camera labels and the
additional details keep their original case. Nothing here raises on a
dangling reference: entries whose character cannot be resolved are skipped.
"""
from typing import Callable, Dict, List, Optional

from scene_prompter.core.catalog import (
    CharacterKind,
    DialogueType,
    age_descriptor,
    camera_motion_label,
)
from scene_prompter.schemas.entities import (
    BipedAnimalAttributes,
    Character,
    FantasyCreatureAttributes,
    HumanAttributes,
    QuadrupedAnimalAttributes,
    SpokenDialogue,
    StoreState,
)

MAIN_CHARACTER_JOINER = " dan "


def _text(value) -> str:
    if value is None:
        return ""
    if hasattr(value, "value"):
        value = value.value
    return str(value).strip()


def _lower(value) -> str:
    return _text(value).lower()


def _clause(prefix: str, value, lower: bool = True) -> str:
    text = _lower(value) if lower else _text(value)
    if not text:
        return ""
    return f"{prefix}{text}"


def _article(character: Character) -> str:
    return "seorang" if character.kind == CharacterKind.HUMAN else "seekor"


def _describe_human(attrs: HumanAttributes) -> List[str]:
    return [
        _clause("manusia ", attrs.gender) or "manusia",
        _clause("berusia ", attrs.age),
        _clause("dengan kulit ", attrs.skin_color),
        _clause("berbadan ", attrs.body_type_posture),
        _clause("mengenakan ", attrs.clothing_accessories),
    ]


def _describe_quadruped(attrs: QuadrupedAnimalAttributes) -> List[str]:
    return [
        _clause("hewan ", attrs.animal_type) or "hewan",
        _clause("mengenakan ", attrs.clothing_accessories),
    ]


def _describe_biped(attrs: BipedAnimalAttributes) -> List[str]:
    descriptor = age_descriptor(attrs.age)
    return [
        _clause("hewan ", attrs.animal_type) or "hewan",
        "berjalan dengan dua kaki",
        _clause("berjenis kelamin ", attrs.gender),
        f"({descriptor})" if descriptor else "",
        _clause("berbadan ", attrs.body_shape_posture),
        _clause("dengan bulu ", attrs.fur_colors),
        _clause("yang ", attrs.fur_characteristic),
        _clause("mengenakan ", attrs.clothing_accessories),
    ]


def _describe_fantasy(attrs: FantasyCreatureAttributes) -> List[str]:
    return ["makhluk fantasi"]


_DESCRIBERS: Dict[CharacterKind, Callable] = {
    CharacterKind.HUMAN: _describe_human,
    CharacterKind.QUADRUPED_ANIMAL: _describe_quadruped,
    CharacterKind.BIPED_ANIMAL: _describe_biped,
    CharacterKind.FANTASY_CREATURE: _describe_fantasy,
}


def _sentence(text: str) -> str:
    text = text.strip()
    if not text:
        return ""
    if text[-1] in ".!?":
        return text
    return f"{text}."


def _quoted(speaker: str, verb: str, sentence: str) -> str:
    return f'{speaker} {verb}: "{sentence}"'


def describe_character(character: Character) -> str:
    """Introduction sentence for one character, dispatched on its kind."""
    clauses = [c for c in _DESCRIBERS[character.kind](character.attributes) if c]
    text = f"{character.name} adalah {_article(character)} {' '.join(clauses)}"

    attrs = character.attributes
    if isinstance(attrs, HumanAttributes):
        detail = _lower(attrs.additional_detail)
        if detail:
            text += f", {detail}"
    elif isinstance(attrs, FantasyCreatureAttributes):
        description = _lower(attrs.description)
        if description:
            return f"{_sentence(text)} {_sentence(description)}"
    return _sentence(text)


def _main_callout(state: StoreState) -> List[str]:
    names = []
    for char_id, action in state.actions.items():
        if not action.is_main:
            continue
        character = state.find_character(char_id)
        if character is not None:
            names.append(character.name)
    if not names:
        return []
    return [f"Karakter utama adalah {MAIN_CHARACTER_JOINER.join(names)}."]


def _introductions(state: StoreState) -> List[str]:
    return [describe_character(c) for c in state.characters]


def _actions(state: StoreState) -> List[str]:
    sentences = []
    for char_id, action in state.actions.items():
        character = state.find_character(char_id)
        if character is None:
            continue

        action_text = _lower(action.action)
        if action_text:
            text = f"{character.name} sedang {action_text}"
            expression = state.expressions.get(char_id)
            if expression is not None:
                text += f" dengan ekspresi {_lower(expression)}"
            sentences.append(_sentence(text))

        for line in action.dialogue_lines:
            if not line.sentence:
                continue
            # Lines that are not questions render as answers, AddressAudience included
            verb = "bertanya" if line.type == DialogueType.QUESTION else "menjawab"
            sentences.append(_quoted(character.name, verb, line.sentence))
    return sentences


def _scene(state: StoreState) -> List[str]:
    scene = state.scene
    sentences = []
    if _text(scene.location):
        sentences.append(_sentence(f"Adegan berlangsung di {_lower(scene.location)}"))
    if scene.time_of_day is not None:
        sentences.append(_sentence(f"Waktu kejadian adalah {_lower(scene.time_of_day)}"))
    if scene.camera_motion is not None:
        label = camera_motion_label(scene.camera_motion)
        if label:
            sentences.append(_sentence(f"Gerakan kamera: {label}"))
    if scene.lighting is not None:
        sentences.append(_sentence(f"Pencahayaan: {_lower(scene.lighting)}"))
    if scene.visual_styles:
        styles = ", ".join(_lower(s) for s in scene.visual_styles)
        sentences.append(_sentence(f"Gaya visual video adalah {styles}"))
    if scene.mood is not None:
        sentences.append(_sentence(f"Suasana video: {_lower(scene.mood)}"))
    if _text(scene.sound_music):
        sentences.append(_sentence(f"Latar belakang musik/suara: {_lower(scene.sound_music)}"))
    return sentences


def render_spoken_dialogue(state: StoreState, entry: SpokenDialogue) -> Optional[str]:
    speaker = state.find_character(entry.char_id)
    if speaker is None or not entry.sentence:
        return None

    if entry.type == DialogueType.ADDRESS_AUDIENCE:
        return _quoted(speaker.name, "berbicara kepada audiens", entry.sentence)
    if entry.type in (DialogueType.QUESTION, DialogueType.ANSWER):
        verb = "bertanya" if entry.type == DialogueType.QUESTION else "menjawab"
        target = state.find_character(entry.target_char_id)
        if target is not None:
            verb += f" kepada {target.name}"
        return _quoted(speaker.name, verb, entry.sentence)
    # No dialogue type chosen yet
    return None


def _spoken_dialogue(state: StoreState) -> List[str]:
    rendered = (render_spoken_dialogue(state, entry) for entry in state.spoken_dialogue)
    return [line for line in rendered if line]


def _additional_details(state: StoreState) -> List[str]:
    details = _text(state.scene.additional_details)
    if not details:
        return []
    return [_sentence(f"Detail tambahan: {details}")]


COMPOSITION_STEPS = (
    _main_callout,
    _introductions,
    _actions,
    _scene,
    _spoken_dialogue,
    _additional_details,
)


def compose(state: StoreState) -> str:
    sentences: List[str] = []
    for step in COMPOSITION_STEPS:
        sentences.extend(s for s in step(state) if s)
    return " ".join(sentences)
