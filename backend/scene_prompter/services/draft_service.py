import datetime
import logging
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from scene_prompter.core.errors import NotFoundError
from scene_prompter.models.all_models import PromptDraft
from scene_prompter.services.entity_store import EntityStore

logger = logging.getLogger(__name__)


class DraftService:
    def save_draft(self, db: Session, store: EntityStore, draft_key: Optional[str] = None, title: Optional[str] = None) -> PromptDraft:
        """Create a new draft, or overwrite the one named by draft_key."""
        payload = store.to_draft()
        now = datetime.datetime.utcnow().isoformat()

        if draft_key:
            draft = self._get(db, draft_key)
            draft.payload = payload
            draft.updated_at = now
            if title is not None:
                draft.title = title
            logger.info("Updating draft %s", draft_key)
        else:
            draft = PromptDraft(
                draft_key=uuid.uuid4().hex,
                title=title,
                payload=payload,
                created_at=now,
                updated_at=now,
            )
            db.add(draft)
            logger.info("Creating draft %s", draft.draft_key)

        db.commit()
        db.refresh(draft)
        return draft

    def load_draft(self, db: Session, draft_key: str, store: EntityStore) -> PromptDraft:
        draft = self._get(db, draft_key)
        store.load_draft(draft.payload or {})
        logger.info("Loaded draft %s", draft_key)
        return draft

    def list_drafts(self, db: Session) -> List[PromptDraft]:
        return db.query(PromptDraft).order_by(PromptDraft.id.desc()).all()

    def delete_draft(self, db: Session, draft_key: str) -> None:
        draft = self._get(db, draft_key)
        db.delete(draft)
        db.commit()
        logger.info("Deleted draft %s", draft_key)

    def _get(self, db: Session, draft_key: str) -> PromptDraft:
        draft = db.query(PromptDraft).filter(PromptDraft.draft_key == draft_key).first()
        if draft is None:
            raise NotFoundError(f"Draft {draft_key} not found")
        return draft


draft_service = DraftService()
