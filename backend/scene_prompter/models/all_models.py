from sqlalchemy import Column, Integer, String, JSON
from scene_prompter.db.session import Base
import datetime


class PromptDraft(Base):
    __tablename__ = "prompt_drafts"
    id = Column(Integer, primary_key=True, index=True)
    draft_key = Column(String, unique=True, index=True)  # opaque id handed to clients
    title = Column(String, nullable=True)

    # Full Entity Store snapshot, both generated prompts included
    payload = Column(JSON, default={})

    created_at = Column(String, default=lambda: datetime.datetime.utcnow().isoformat())
    updated_at = Column(String, default=lambda: datetime.datetime.utcnow().isoformat())
