from __future__ import annotations

import pytest

from conftest import DummyLLM
from scene_prompter.core.errors import NotFoundError
from scene_prompter.services.workspace_service import WorkspaceRegistry


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_idle_workspaces_are_purged_on_create():
    clock = FakeClock()
    registry = WorkspaceRegistry(llm=DummyLLM(), idle_seconds=60, max_workspaces=10, clock=clock)
    idle = registry.create()
    clock.now += 30
    active = registry.create()

    clock.now += 45
    registry.get(active.id)
    fresh = registry.create()

    assert idle.id not in registry
    assert active.id in registry and fresh.id in registry
    with pytest.raises(NotFoundError):
        registry.get(idle.id)


def test_cap_evicts_least_recently_used():
    clock = FakeClock()
    registry = WorkspaceRegistry(llm=DummyLLM(), idle_seconds=3600, max_workspaces=2, clock=clock)
    first = registry.create()
    clock.now += 1
    second = registry.create()
    clock.now += 1
    registry.get(first.id)
    clock.now += 1
    third = registry.create()

    assert len(registry) == 2
    assert second.id not in registry
    assert first.id in registry and third.id in registry


def test_compose_stores_composed_prompt():
    registry = WorkspaceRegistry(llm=DummyLLM())
    workspace = registry.create()
    workspace.store.upsert_character("Aria", {"kind": "human"})
    text = workspace.compose()
    assert text == "Aria adalah seorang manusia."
    assert workspace.store.snapshot().composed_prompt == text


def test_discard():
    registry = WorkspaceRegistry(llm=DummyLLM())
    workspace = registry.create()
    registry.discard(workspace.id)
    assert len(registry) == 0
    with pytest.raises(NotFoundError):
        registry.discard(workspace.id)
