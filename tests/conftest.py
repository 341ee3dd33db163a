from __future__ import annotations

import asyncio
import os
import tempfile
from typing import Any, Dict, List, Optional, Tuple

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LLM_CALL_LOG_DIR", os.path.join(tempfile.gettempdir(), "scene_prompter_test_logs"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from scene_prompter.db.init_db import init_db
from scene_prompter.services.entity_store import EntityStore
from scene_prompter.services.llm_service import LLMService


class DummyLLM(LLMService):
    """Answers from a script instead of calling the generation service."""

    def __init__(self, replies: Optional[List[str]] = None, error: Optional[Exception] = None) -> None:
        super().__init__(api_key="test-key", base_url="http://llm.test", model="test-model", timeout=1)
        self.replies = list(replies or [])
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    async def generate_text(self, instruction: str, purpose: str = "generate") -> str:
        self.calls.append((purpose, instruction))
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""


class GatedLLM(LLMService):
    """Holds every call open until the test resolves it, in any order."""

    def __init__(self) -> None:
        super().__init__(api_key="test-key", base_url="http://llm.test", model="test-model", timeout=1)
        self.pending: List[Dict[str, Any]] = []

    async def generate_text(self, instruction: str, purpose: str = "generate") -> str:
        call = {"gate": asyncio.Event(), "instruction": instruction, "purpose": purpose}
        self.pending.append(call)
        await call["gate"].wait()
        if call.get("error") is not None:
            raise call["error"]
        return call["text"]

    @staticmethod
    def resolve(call: Dict[str, Any], text: str = "", error: Optional[Exception] = None) -> None:
        call["text"] = text
        call["error"] = error
        call["gate"].set()

    async def wait_for_calls(self, count: int) -> None:
        while len(self.pending) < count:
            await asyncio.sleep(0)


@pytest.fixture
def store() -> EntityStore:
    return EntityStore()


@pytest.fixture
def aria(store):
    return store.upsert_character("Aria", {"kind": "human", "gender": "Female", "age": "25 tahun"})


@pytest.fixture
def bruno(store):
    return store.upsert_character("Bruno", {
        "kind": "animal2",
        "animal_type": "Beruang",
        "age": "Balita (3–5 tahun)",
    })


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()
