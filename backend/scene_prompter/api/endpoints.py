from fastapi import APIRouter, Depends, Request, Response
import logging
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from scene_prompter.core.catalog import catalog_options
from scene_prompter.core.config import settings
from scene_prompter.db.session import get_db
from scene_prompter.schemas.api import (
    ActionFieldUpdate,
    CharacterUpsert,
    DialogueLineIn,
    DraftList,
    DraftOut,
    DraftSave,
    ExpressionUpdate,
    LoadingOut,
    PromptOut,
    RefineRequest,
    SceneFieldUpdate,
    SpokenDialogueIn,
    SuggestionOut,
    VisualStyleToggle,
    WorkspaceOut,
)
from scene_prompter.schemas.entities import (
    Character,
    CharacterAction,
    DialogueLine,
    SceneAttributes,
    SpokenDialogue,
)
from scene_prompter.services.draft_service import draft_service
from scene_prompter.services.workspace_service import Workspace, WorkspaceRegistry, workspace_registry

from slowapi import Limiter
from slowapi.util import get_remote_address

# Shared with main.py, which registers it on app.state
limiter = Limiter(key_func=get_remote_address)

router = APIRouter()
logger = logging.getLogger("api_logger")


def get_registry() -> WorkspaceRegistry:
    return workspace_registry


def get_workspace(workspace_id: str, registry: WorkspaceRegistry = Depends(get_registry)) -> Workspace:
    return registry.get(workspace_id)


def _workspace_out(workspace: Workspace) -> WorkspaceOut:
    return WorkspaceOut(id=workspace.id, draft_key=workspace.draft_key, state=workspace.store.snapshot())


def _line_changes(payload: DialogueLineIn) -> Dict[str, Any]:
    changes = payload.model_dump(exclude_unset=True)
    if "sentence" in changes and changes["sentence"] is None:
        changes["sentence"] = ""
    return changes


# --- Catalog ---

@router.get("/catalog")
async def get_catalog():
    return catalog_options()


# --- Workspaces ---

@router.post("/workspaces", response_model=WorkspaceOut, status_code=201)
async def create_workspace(registry: WorkspaceRegistry = Depends(get_registry)):
    return _workspace_out(registry.create())


@router.get("/workspaces/{workspace_id}", response_model=WorkspaceOut)
async def read_workspace(workspace: Workspace = Depends(get_workspace)):
    return _workspace_out(workspace)


@router.delete("/workspaces/{workspace_id}", status_code=204)
async def delete_workspace(workspace_id: str, registry: WorkspaceRegistry = Depends(get_registry)):
    registry.discard(workspace_id)
    return Response(status_code=204)


@router.post("/workspaces/{workspace_id}/reset", response_model=WorkspaceOut)
async def reset_workspace(workspace: Workspace = Depends(get_workspace)):
    workspace.store.reset()
    workspace.draft_key = None
    return _workspace_out(workspace)


# --- Characters ---

@router.post("/workspaces/{workspace_id}/characters", response_model=Character, status_code=201)
async def create_character(payload: CharacterUpsert, workspace: Workspace = Depends(get_workspace)):
    character = workspace.store.upsert_character(payload.name, payload.attributes)
    logger.info("Character created in %s: %s (%s)", workspace.id, character.name, character.kind.value)
    return character


@router.put("/workspaces/{workspace_id}/characters/{char_id}", response_model=Character)
async def update_character(char_id: str, payload: CharacterUpsert, workspace: Workspace = Depends(get_workspace)):
    workspace.store.get_character(char_id)
    return workspace.store.upsert_character(payload.name, payload.attributes, char_id=char_id)


@router.get("/workspaces/{workspace_id}/characters/{char_id}", response_model=Character)
async def read_character(char_id: str, workspace: Workspace = Depends(get_workspace)):
    return workspace.store.get_character(char_id)


@router.delete("/workspaces/{workspace_id}/characters/{char_id}", status_code=204)
async def delete_character(char_id: str, workspace: Workspace = Depends(get_workspace)):
    workspace.store.remove_character(char_id)
    return Response(status_code=204)


# --- Actions & embedded dialogue ---

@router.put("/workspaces/{workspace_id}/actions/{char_id}", response_model=CharacterAction)
async def set_character_action(char_id: str, payload: ActionFieldUpdate, workspace: Workspace = Depends(get_workspace)):
    return workspace.store.set_character_action(char_id, payload.field, payload.value)


@router.post("/workspaces/{workspace_id}/actions/{char_id}/main")
async def toggle_main_character(char_id: str, workspace: Workspace = Depends(get_workspace)):
    return {"char_id": char_id, "is_main": workspace.store.toggle_main_character(char_id)}


@router.post("/workspaces/{workspace_id}/actions/{char_id}/dialogue_lines", status_code=201)
async def add_dialogue_line(char_id: str, payload: DialogueLineIn, workspace: Workspace = Depends(get_workspace)):
    index = workspace.store.add_dialogue_line(char_id, _line_changes(payload))
    return {"index": index}


@router.put("/workspaces/{workspace_id}/actions/{char_id}/dialogue_lines/{index}", response_model=DialogueLine)
async def update_dialogue_line(char_id: str, index: int, payload: DialogueLineIn, workspace: Workspace = Depends(get_workspace)):
    return workspace.store.update_dialogue_line(char_id, index, **_line_changes(payload))


@router.delete("/workspaces/{workspace_id}/actions/{char_id}/dialogue_lines/{index}", status_code=204)
async def delete_dialogue_line(char_id: str, index: int, workspace: Workspace = Depends(get_workspace)):
    workspace.store.remove_dialogue_line(char_id, index)
    return Response(status_code=204)


# --- Spoken dialogue ---

@router.post("/workspaces/{workspace_id}/spoken_dialogue", status_code=201)
async def add_spoken_dialogue(payload: SpokenDialogueIn, workspace: Workspace = Depends(get_workspace)):
    index = workspace.store.add_spoken_dialogue(_line_changes(payload))
    return {"index": index}


@router.put("/workspaces/{workspace_id}/spoken_dialogue/{index}", response_model=SpokenDialogue)
async def update_spoken_dialogue(index: int, payload: SpokenDialogueIn, workspace: Workspace = Depends(get_workspace)):
    return workspace.store.update_spoken_dialogue(index, **_line_changes(payload))


@router.delete("/workspaces/{workspace_id}/spoken_dialogue/{index}", status_code=204)
async def delete_spoken_dialogue(index: int, workspace: Workspace = Depends(get_workspace)):
    workspace.store.remove_spoken_dialogue(index)
    return Response(status_code=204)


# --- Expressions & scene ---

@router.put("/workspaces/{workspace_id}/expressions/{char_id}")
async def set_expression(char_id: str, payload: ExpressionUpdate, workspace: Workspace = Depends(get_workspace)):
    expression = workspace.store.set_expression(char_id, payload.expression)
    return {"char_id": char_id, "expression": expression.value if expression else None}


@router.put("/workspaces/{workspace_id}/scene", response_model=SceneAttributes)
async def set_scene_attribute(payload: SceneFieldUpdate, workspace: Workspace = Depends(get_workspace)):
    return workspace.store.set_scene_attribute(payload.field, payload.value)


@router.post("/workspaces/{workspace_id}/scene/visual_styles/toggle")
async def toggle_visual_style(payload: VisualStyleToggle, workspace: Workspace = Depends(get_workspace)):
    selected = workspace.store.toggle_visual_style(payload.style)
    return {"style": payload.style, "selected": selected}


# --- Composition, refinement, suggestions ---

@router.post("/workspaces/{workspace_id}/compose", response_model=PromptOut)
async def compose_prompt(workspace: Workspace = Depends(get_workspace)):
    workspace.compose()
    state = workspace.store.snapshot()
    return PromptOut(composed_prompt=state.composed_prompt, refined_prompt=state.refined_prompt)


@router.post("/workspaces/{workspace_id}/refine", response_model=PromptOut)
@limiter.limit(settings.GENERATION_RATE_LIMIT)
async def refine_prompt(
    request: Request,
    payload: Optional[RefineRequest] = None,
    workspace: Workspace = Depends(get_workspace),
):
    await workspace.refinement.refine(payload.composed_prompt if payload else None)
    state = workspace.store.snapshot()
    return PromptOut(composed_prompt=state.composed_prompt, refined_prompt=state.refined_prompt)


@router.post("/workspaces/{workspace_id}/suggestions/actions/{char_id}", response_model=SuggestionOut)
@limiter.limit(settings.GENERATION_RATE_LIMIT)
async def suggest_action(request: Request, char_id: str, workspace: Workspace = Depends(get_workspace)):
    return SuggestionOut(text=await workspace.suggestions.suggest_action(char_id))


@router.post("/workspaces/{workspace_id}/suggestions/dialogue/{index}", response_model=SuggestionOut)
@limiter.limit(settings.GENERATION_RATE_LIMIT)
async def suggest_dialogue(request: Request, index: int, workspace: Workspace = Depends(get_workspace)):
    return SuggestionOut(text=await workspace.suggestions.suggest_dialogue_sentence(index))


@router.get("/workspaces/{workspace_id}/loading", response_model=LoadingOut)
async def read_loading_state(workspace: Workspace = Depends(get_workspace)):
    return workspace.loading_state()


# --- Drafts ---

@router.post("/workspaces/{workspace_id}/drafts", response_model=DraftOut, status_code=201)
async def save_draft(
    payload: DraftSave,
    workspace: Workspace = Depends(get_workspace),
    db: Session = Depends(get_db),
):
    draft_key = payload.draft_key or workspace.draft_key
    draft = draft_service.save_draft(db, workspace.store, draft_key=draft_key, title=payload.title)
    workspace.draft_key = draft.draft_key
    return draft


@router.post("/workspaces/{workspace_id}/drafts/{draft_key}/load", response_model=WorkspaceOut)
async def load_draft(draft_key: str, workspace: Workspace = Depends(get_workspace), db: Session = Depends(get_db)):
    draft_service.load_draft(db, draft_key, workspace.store)
    workspace.draft_key = draft_key
    return _workspace_out(workspace)


@router.get("/drafts", response_model=DraftList)
async def list_drafts(db: Session = Depends(get_db)):
    return DraftList(drafts=[DraftOut.model_validate(d) for d in draft_service.list_drafts(db)])


@router.delete("/drafts/{draft_key}", status_code=204)
async def delete_draft(draft_key: str, db: Session = Depends(get_db)):
    draft_service.delete_draft(db, draft_key)
    return Response(status_code=204)
