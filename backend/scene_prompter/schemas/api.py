from pydantic import BaseModel
from typing import List, Dict, Any, Optional

from scene_prompter.schemas.entities import CharacterAttributes, StoreState


class WorkspaceOut(BaseModel):
    id: str
    draft_key: Optional[str] = None
    state: StoreState


class CharacterUpsert(BaseModel):
    name: str
    attributes: CharacterAttributes


class ActionFieldUpdate(BaseModel):
    field: str
    value: Any = None


class DialogueLineIn(BaseModel):
    type: Optional[str] = None
    sentence: Optional[str] = None
    target_char_id: Optional[str] = None


class SpokenDialogueIn(DialogueLineIn):
    char_id: Optional[str] = None


class ExpressionUpdate(BaseModel):
    expression: Optional[str] = None


class SceneFieldUpdate(BaseModel):
    field: str
    value: Any = None


class VisualStyleToggle(BaseModel):
    style: str


class RefineRequest(BaseModel):
    # Defaults to the workspace's composed prompt
    composed_prompt: Optional[str] = None


class PromptOut(BaseModel):
    composed_prompt: str = ""
    refined_prompt: str = ""


class SuggestionOut(BaseModel):
    text: str


class LoadingOut(BaseModel):
    actions: Dict[str, bool] = {}
    dialogue: Dict[int, bool] = {}
    refinement: bool = False


class DraftSave(BaseModel):
    title: Optional[str] = None
    # Overwrite this draft instead of creating a new one
    draft_key: Optional[str] = None


class DraftOut(BaseModel):
    draft_key: str
    title: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    class Config:
        from_attributes = True


class DraftList(BaseModel):
    drafts: List[DraftOut] = []
