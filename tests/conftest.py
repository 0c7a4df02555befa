"""
Pytest configuration and shared fixtures.

This module provides fixtures that are available to all test modules.
"""

import copy
import os
import time
from typing import Any, Dict, List, Optional
from unittest.mock import patch

import pytest
import pytest_asyncio

from promptdeck.agents.generation.config import PersistenceConfig, get_config
from promptdeck.agents.generation.exceptions import NotFoundError
from promptdeck.agents.persistence.deck_persistence import DeckPersistence
from promptdeck.agents.persistence.local_stores import DurableLocalStore, EphemeralStore
from promptdeck.models.deck import Deck
from promptdeck.models.slide import Slide, SlideStyling
from promptdeck.models.theme import Theme


@pytest.fixture(autouse=True)
def clear_config_cache():
    """
    Clear the configuration cache before each test.

    This ensures each test gets fresh settings.
    """
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def mock_env_vars():
    env_vars = {
        "OPENAI_API_KEY": "sk-test-key-12345",
        "SUPABASE_URL": "https://test.supabase.co",
        "SUPABASE_KEY": "test-anon-key",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def sample_theme() -> Theme:
    return Theme(
        primaryColor="#1e3a8a",
        secondaryColor="#3b82f6",
        accentColor="#d97706",
        gradientStart="#1e3a8a",
        gradientEnd="#3b82f6",
        headingFont="Montserrat",
        bodyFont="Open Sans",
    )


@pytest.fixture
def sample_deck(sample_theme) -> Deck:
    return Deck(
        title="Quarterly Review",
        description="Results for Q3",
        theme=sample_theme,
        slides=[
            Slide(id=1, type="hero", title="Quarterly Review", subtitle="Q3", backgroundStyle="gradient"),
            Slide(id=2, type="content", title="Highlights", content=["Revenue up", "Churn down"]),
            Slide(id=3, type="stats", title="Numbers", content=["85% retention", "$2M revenue"]),
            Slide(
                id=4,
                type="quote",
                title="Voice of the customer",
                content="It just works.",
                author="A customer",
                backgroundStyle="image",
                imageUrl="https://images.unsplash.com/1600x900/?office",
                styling=SlideStyling(overlay="dark"),
            ),
        ],
    )


class FakeProjectStore:
    """In-memory stand-in for SupabaseProjectStore.

    ``fail_with`` makes every call raise; ``delay`` makes every call block.
    """

    def __init__(self):
        self.projects: Dict[str, Dict[str, Any]] = {}
        self.users: Dict[str, Dict[str, Any]] = {}
        self.fail_with: Optional[Exception] = None
        self.delay: float = 0.0
        self.calls: List[str] = []

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.delay:
            time.sleep(self.delay)
        if self.fail_with is not None:
            raise self.fail_with

    def insert_project(self, record):
        self._enter("insert_project")
        self.projects[record["id"]] = copy.deepcopy(record)
        return record

    def get_project(self, project_id):
        self._enter("get_project")
        if project_id not in self.projects:
            raise NotFoundError(f"Project {project_id} not found")
        return copy.deepcopy(self.projects[project_id])

    def update_project(self, project_id, patch):
        self._enter("update_project")
        if project_id not in self.projects:
            raise NotFoundError(f"Project {project_id} not found")
        self.projects[project_id].update(copy.deepcopy(patch))
        self.projects[project_id]["updatedAt"] = "2030-01-01T00:00:00+00:00"
        return copy.deepcopy(self.projects[project_id])

    def delete_project(self, project_id):
        self._enter("delete_project")
        if self.projects.pop(project_id, None) is None:
            raise NotFoundError(f"Project {project_id} not found")

    def list_projects(self, user_id, project_type=None):
        self._enter("list_projects")
        return [
            copy.deepcopy(record) for record in self.projects.values()
            if record["userId"] == user_id and (project_type is None or record.get("type") == project_type)
        ]

    def get_user(self, user_id):
        self._enter("get_user")
        return copy.deepcopy(self.users.get(user_id))

    def upsert_user(self, user_id, fields):
        self._enter("upsert_user")
        record = {**self.users.get(user_id, {}), **fields, "id": user_id}
        self.users[user_id] = record
        return copy.deepcopy(record)

    def adjust_project_count(self, user_id, delta):
        self._enter("adjust_project_count")
        user = self.users.setdefault(user_id, {"id": user_id, "projectCount": 0})
        user["projectCount"] = max(user.get("projectCount", 0) + delta, 0)
        return user["projectCount"]


@pytest.fixture
def fake_primary() -> FakeProjectStore:
    return FakeProjectStore()


@pytest.fixture
def persistence_config(tmp_path) -> PersistenceConfig:
    return PersistenceConfig(
        supabase_url="https://test.supabase.co",
        supabase_key="test-key",
        write_timeout_seconds=0.2,
        read_timeout_seconds=0.2,
        counter_timeout_seconds=0.2,
        local_store_dir=str(tmp_path / "local_store"),
    )


class OnlineFlag:
    def __init__(self):
        self.online = True

    def __call__(self):
        return self.online


@pytest.fixture
def online_flag() -> OnlineFlag:
    return OnlineFlag()


@pytest.fixture
def durable_store(persistence_config):
    store = DurableLocalStore(persistence_config.local_store_dir)
    yield store
    store.close()


@pytest_asyncio.fixture
async def persistence(fake_primary, durable_store, online_flag, persistence_config):
    persistence = DeckPersistence(
        primary=fake_primary,
        durable_local=durable_store,
        ephemeral=EphemeralStore(),
        is_online=online_flag,
        config=persistence_config,
    )
    yield persistence
    await persistence.drain()
