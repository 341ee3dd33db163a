from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Annotated, List, Dict, Optional, Union, Literal

from scene_prompter.core.catalog import (
    AgeBracket,
    AnimalBodyShape,
    ArtisticStyle,
    BodyTypePosture,
    CameraMotion,
    CharacterKind,
    DialogueType,
    EarFeature,
    Expression,
    FaceFeature,
    FaceShape,
    FurCharacteristic,
    Gender,
    Lighting,
    SkinColor,
    StudioBrandStyle,
    TimeOfDay,
    VideoMood,
    VisualTechnique,
    parse_age_bracket,
    parse_visual_style,
)

VisualStyle = Union[VisualTechnique, ArtisticStyle, StudioBrandStyle]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EditorAttributes(BaseModel):
    # Editors send "" for an unselected dropdown or an untouched text box.
    # kind is the union discriminator and must reach validation untouched.
    @model_validator(mode="before")
    @classmethod
    def blank_to_none(cls, data):
        if not isinstance(data, dict):
            return data
        return {key: value if key == "kind" else _blank_to_none(value) for key, value in data.items()}


class HumanAttributes(EditorAttributes):
    kind: Literal[CharacterKind.HUMAN] = CharacterKind.HUMAN
    gender: Optional[Gender] = None
    face_shape: Optional[FaceShape] = None
    skin_color: Optional[SkinColor] = None
    body_type_posture: Optional[BodyTypePosture] = None
    age: Optional[str] = None  # free text, e.g. "25 tahun"
    height: Optional[str] = None
    clothing_accessories: Optional[str] = None
    additional_detail: Optional[str] = None


class QuadrupedAnimalAttributes(EditorAttributes):
    kind: Literal[CharacterKind.QUADRUPED_ANIMAL] = CharacterKind.QUADRUPED_ANIMAL
    animal_type: Optional[str] = None
    clothing_accessories: Optional[str] = None


class BipedAnimalAttributes(EditorAttributes):
    kind: Literal[CharacterKind.BIPED_ANIMAL] = CharacterKind.BIPED_ANIMAL
    animal_type: str
    gender: Optional[Gender] = None
    age: Optional[AgeBracket] = None
    body_shape_posture: Optional[AnimalBodyShape] = None
    nose_shape: Optional[str] = None
    face_feature: Optional[FaceFeature] = None
    ear_feature: Optional[EarFeature] = None
    fur_characteristic: Optional[FurCharacteristic] = None
    fur_colors: Optional[str] = None
    clothing_accessories: Optional[str] = None

    @field_validator("age", mode="before")
    @classmethod
    def resolve_age(cls, value):
        if value is None:
            return None
        return parse_age_bracket(value)


class FantasyCreatureAttributes(BaseModel):
    kind: Literal[CharacterKind.FANTASY_CREATURE] = CharacterKind.FANTASY_CREATURE
    description: str = ""


CharacterAttributes = Annotated[
    Union[HumanAttributes, QuadrupedAnimalAttributes, BipedAnimalAttributes, FantasyCreatureAttributes],
    Field(discriminator="kind"),
]


class Character(BaseModel):
    id: str
    name: str
    attributes: CharacterAttributes

    @property
    def kind(self) -> CharacterKind:
        return self.attributes.kind

    @field_validator("name")
    @classmethod
    def name_required(cls, value):
        if not value or not value.strip():
            raise ValueError("Character Name is required to save a character.")
        return value


class DialogueLine(BaseModel):
    type: Optional[DialogueType] = None
    sentence: str = ""
    target_char_id: Optional[str] = None

    @field_validator("type", "target_char_id", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)


class SpokenDialogue(DialogueLine):
    char_id: Optional[str] = None

    @field_validator("char_id", mode="before")
    @classmethod
    def blank_speaker_to_none(cls, value):
        return _blank_to_none(value)


class CharacterAction(BaseModel):
    char_id: str
    action: str = ""
    is_main: bool = False
    dialogue_lines: List[DialogueLine] = []


class SceneAttributes(BaseModel):
    location: str = ""
    time_of_day: Optional[TimeOfDay] = None
    camera_motion: Optional[CameraMotion] = None
    lighting: Optional[Lighting] = None
    visual_styles: List[VisualStyle] = []
    mood: Optional[VideoMood] = None
    sound_music: str = ""
    additional_details: str = ""

    @field_validator("time_of_day", "camera_motion", "lighting", "mood", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return _blank_to_none(value)

    @field_validator("visual_styles", mode="before")
    @classmethod
    def resolve_styles(cls, value):
        if value is None:
            return []
        resolved = []
        for item in value:
            style = parse_visual_style(item)
            if style not in resolved:
                resolved.append(style)
        return resolved


class StoreState(BaseModel):
    """Everything the Entity Store owns, plus the two generated outputs."""

    characters: List[Character] = []
    actions: Dict[str, CharacterAction] = {}
    expressions: Dict[str, Expression] = {}
    scene: SceneAttributes = SceneAttributes()
    spoken_dialogue: List[SpokenDialogue] = []
    composed_prompt: str = ""
    refined_prompt: str = ""

    def find_character(self, char_id: Optional[str]) -> Optional[Character]:
        if not char_id:
            return None
        for character in self.characters:
            if character.id == char_id:
                return character
        return None
