import logging
import time
import uuid
from typing import Callable, Dict, Optional

from scene_prompter.core.config import settings
from scene_prompter.core.errors import NotFoundError
from scene_prompter.services.entity_store import EntityStore
from scene_prompter.services.llm_service import LLMService
from scene_prompter.services.prompt_composer import compose
from scene_prompter.services.refinement_service import RefinementService
from scene_prompter.services.suggestion_service import SuggestionService

logger = logging.getLogger(__name__)


class Workspace:
    """One editing session: a store plus the clients that write into it."""

    def __init__(self, workspace_id: str, llm: Optional[LLMService] = None):
        self.id = workspace_id
        self.store = EntityStore()
        self.suggestions = SuggestionService(self.store, llm)
        self.refinement = RefinementService(self.store, llm)
        self.draft_key: Optional[str] = None
        self.last_access = 0.0

    def compose(self) -> str:
        text = compose(self.store.snapshot())
        self.store.set_composed_prompt(text)
        return text

    def loading_state(self) -> Dict[str, object]:
        state = self.suggestions.loading_state()
        state["refinement"] = self.refinement.is_loading
        return state


class WorkspaceRegistry:
    """Workspaces by id.

    Every lookup refreshes a workspace's last access. Creating a workspace
    first drops the ones idle for longer than idle_seconds, then the least
    recently used ones until there is room under max_workspaces.
    """

    def __init__(
        self,
        llm: Optional[LLMService] = None,
        idle_seconds: Optional[int] = None,
        max_workspaces: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.llm = llm
        self.idle_seconds = idle_seconds if idle_seconds is not None else settings.WORKSPACE_IDLE_SECONDS
        self.max_workspaces = max(1, max_workspaces if max_workspaces is not None else settings.MAX_WORKSPACES)
        self.clock = clock
        self._workspaces: Dict[str, Workspace] = {}

    def create(self) -> Workspace:
        self._purge()
        workspace = Workspace(uuid.uuid4().hex, self.llm)
        workspace.last_access = self.clock()
        self._workspaces[workspace.id] = workspace
        logger.info("Workspace created: %s", workspace.id)
        return workspace

    def get(self, workspace_id: str) -> Workspace:
        workspace = self._workspaces.get(workspace_id)
        if workspace is None:
            raise NotFoundError(f"Workspace {workspace_id} not found")
        workspace.last_access = self.clock()
        return workspace

    def discard(self, workspace_id: str) -> None:
        self.get(workspace_id)
        del self._workspaces[workspace_id]
        logger.info("Workspace discarded: %s", workspace_id)

    def __len__(self) -> int:
        return len(self._workspaces)

    def __contains__(self, workspace_id: str) -> bool:
        return workspace_id in self._workspaces

    def _purge(self) -> None:
        now = self.clock()
        idle = [w.id for w in self._workspaces.values() if now - w.last_access > self.idle_seconds]
        for workspace_id in idle:
            del self._workspaces[workspace_id]
        if idle:
            logger.info("Purged %s idle workspaces", len(idle))

        overflow = len(self._workspaces) - self.max_workspaces + 1
        if overflow > 0:
            oldest = sorted(self._workspaces.values(), key=lambda w: w.last_access)[:overflow]
            for workspace in oldest:
                del self._workspaces[workspace.id]
            logger.warning("Workspace cap %s reached, evicted %s", self.max_workspaces, len(oldest))


workspace_registry = WorkspaceRegistry()
