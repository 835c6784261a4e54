"""
Test fixtures for the GTD agent test suite.

Provides:
- Temporary data directory fixtures (isolated from the real .gtd/)
- Record builders for creating test tasks, projects and contexts
- A fake AI service for exercising advice and chat without the network
"""

import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Generator, List, Optional

import pytest

from gtd.constants import reset_config_manager
from gtd.core import GTDCore
from gtd.managers.events import EventBus
from gtd.managers.storage_manager import StorageManager
from gtd.managers.task_store import TaskStore
from gtd.models.base import Context, Project, Task


# =============================================================================
# Environment isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch) -> Generator[None, None, None]:
    """Keep the developer's AI settings and data dir out of the tests."""
    for var in ("AI_PROVIDER", "AI_API_KEY", "AI_BASE_URL", "AI_MODEL", "AI_TIMEOUT", "GTD_DATA_DIR"):
        monkeypatch.delenv(var, raising=False)
    reset_config_manager()
    yield
    reset_config_manager()


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test isolation."""
    temp_path = Path(tempfile.mkdtemp(prefix="gtd_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def data_dir(temp_dir: Path) -> Path:
    """Path of a (not yet created) .gtd/ directory."""
    return temp_dir / ".gtd"


@pytest.fixture
def storage(data_dir: Path) -> StorageManager:
    return StorageManager(data_dir)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def store(storage: StorageManager, event_bus: EventBus) -> TaskStore:
    task_store = TaskStore(storage, event_bus)
    task_store.load_all()
    return task_store


# =============================================================================
# Record Builders
# =============================================================================


class MockDataBuilder:
    """Helper class for building GTD records for testing."""

    @staticmethod
    def create_task(
        title: str = "Test Task",
        status: str = "inbox",
        priority: str = "medium",
        description: Optional[str] = None,
        project_id: Optional[str] = None,
        context_ids: Optional[List[str]] = None,
        due_date: Optional[datetime] = None,
        estimated_time: Optional[int] = None,
        id: Optional[str] = None,
    ) -> Task:
        """Create a Task for testing."""
        fields = dict(
            title=title,
            status=status,
            priority=priority,
            description=description,
            project_id=project_id,
            context_ids=context_ids or [],
            due_date=due_date,
            estimated_time=estimated_time,
        )
        if id:
            fields["id"] = id
        return Task(**fields)

    @staticmethod
    def create_project(name: str = "Test Project", id: Optional[str] = None) -> Project:
        """Create a Project for testing."""
        return Project(name=name, id=id) if id else Project(name=name)

    @staticmethod
    def create_context(name: str = "@desk", id: Optional[str] = None) -> Context:
        """Create a Context for testing."""
        return Context(name=name, id=id) if id else Context(name=name)


@pytest.fixture
def mock_data() -> MockDataBuilder:
    """Provide mock data builder for test record creation."""
    return MockDataBuilder()


# =============================================================================
# AI service double
# =============================================================================


class FakeAIService:
    """Records calls and answers with canned text."""

    def __init__(self, reply: str = "Do the dishes first.") -> None:
        self.reply = reply
        self.calls = []

    def _answer(self, name, *args, **kwargs) -> str:
        self.calls.append((name, args, kwargs))
        return self.reply

    def get_task_organization_advice(self, task, projects, contexts):
        return self._answer("organization", task, projects, contexts)

    def get_scheduling_advice(self, tasks, current_date=None):
        return self._answer("scheduling", tasks)

    def get_what_to_do_now_advice(self, tasks, contexts, current_context=None):
        return self._answer("what-to-do-now", tasks, contexts, current_context)

    def get_implementation_guidance(self, task):
        return self._answer("implementation", task)

    def chat(self, message, tasks=None, projects=None, current_task=None):
        return self._answer("chat", message, tasks=tasks, projects=projects,
                            current_task=current_task)


@pytest.fixture
def fake_ai() -> FakeAIService:
    return FakeAIService()


@pytest.fixture
def core(data_dir: Path, fake_ai: FakeAIService, event_bus: EventBus) -> GTDCore:
    return GTDCore(data_dir=data_dir, ai_service=fake_ai, event_bus=event_bus)
