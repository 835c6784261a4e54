"""
TaskStore for the GTD agent.

Single in-memory source of truth kept consistent with the local object store
by reloading after every write.
"""

import logging
from typing import Callable, List, Optional

from gtd.exceptions import GTDError
from gtd.managers.events import EventBus, EventType, StoreEvent, get_event_bus
from gtd.managers.repositories import RecordRepository
from gtd.managers.storage_manager import StorageManager
from gtd.models.base import (
    AIAdvice,
    Context,
    Project,
    Record,
    Reference,
    Task,
    TaskStatus,
    next_timestamp,
)

logger = logging.getLogger(__name__)


class TaskStore:
    """
    In-memory cache of tasks, projects, contexts and references.

    Handles:
    - Loading whole collections from storage
    - Writing through to storage, then reloading the touched collection
    - Stamping updated_at on every update
    - Derived views (inbox, next actions, by project, search)

    Storage errors are logged and swallowed: the in-memory state is simply
    left as it was and the mutator returns False.

    Usage:
        storage = StorageManager()
        store = TaskStore(storage)
        store.load_all()

        store.add_task(Task(title="Buy milk"))
        inbox = store.get_inbox_tasks()
    """

    def __init__(self, storage: StorageManager, event_bus: Optional[EventBus] = None) -> None:
        """
        Initialize TaskStore.

        Args:
            storage: StorageManager backing the store.
            event_bus: Bus to publish change events on. Defaults to the global bus.
        """
        self.storage = storage
        self.event_bus = event_bus if event_bus is not None else get_event_bus()
        self.tasks: List[Task] = []
        self.projects: List[Project] = []
        self.contexts: List[Context] = []
        self.references: List[Reference] = []
        self.is_loading = False

    def _publish(self, event_type: EventType, collection: str, count: int,
                 record_id: Optional[str] = None) -> None:
        self.event_bus.publish(
            StoreEvent(type=event_type, collection=collection, count=count, record_id=record_id)
        )

    def _reload(self, attr: str, repository: RecordRepository, event_type: EventType) -> bool:
        """Replace one in-memory collection with the store contents."""
        try:
            records = repository.get_all()
        except GTDError as e:
            logger.error(f"Failed to load {attr}: {e}")
            return False
        setattr(self, attr, records)
        self._publish(event_type, attr, len(records))
        return True

    def _write(self, action: Callable[[], None], description: str) -> bool:
        try:
            action()
        except GTDError as e:
            logger.error(f"Failed to {description}: {e}")
            return False
        return True

    def _stamped(self, record: Record, repository: RecordRepository) -> Record:
        """Copy of record with a fresh updated_at, later than the stored one."""
        stored = repository.get(record.id)
        previous = stored.updated_at if stored is not None else None
        return record.model_copy(update={"updated_at": next_timestamp(previous)})

    # =========================================================================
    # Loaders
    # =========================================================================

    def load_tasks(self) -> bool:
        self.is_loading = True
        try:
            return self._reload("tasks", self.storage.tasks, EventType.TASKS_CHANGED)
        finally:
            self.is_loading = False

    def load_projects(self) -> bool:
        return self._reload("projects", self.storage.projects, EventType.PROJECTS_CHANGED)

    def load_contexts(self) -> bool:
        return self._reload("contexts", self.storage.contexts, EventType.CONTEXTS_CHANGED)

    def load_references(self) -> bool:
        return self._reload("references", self.storage.references, EventType.REFERENCES_CHANGED)

    def load_all(self) -> bool:
        """Load every collection. Returns False if any of them failed."""
        results = [
            self.load_tasks(),
            self.load_projects(),
            self.load_contexts(),
            self.load_references(),
        ]
        return all(results)

    # =========================================================================
    # Tasks
    # =========================================================================

    def add_task(self, task: Task) -> bool:
        if not self._write(lambda: self.storage.tasks.add(task), "add task"):
            return False
        return self.load_tasks()

    def update_task(self, task: Task) -> bool:
        """Replace a task. updated_at is always re-stamped."""
        def _update() -> None:
            self.storage.tasks.update(self._stamped(task, self.storage.tasks))

        if not self._write(_update, "update task"):
            return False
        return self.load_tasks()

    def delete_task(self, task_id: str) -> bool:
        if not self._write(lambda: self.storage.tasks.delete(task_id), "delete task"):
            return False
        return self.load_tasks()

    # =========================================================================
    # Projects
    # =========================================================================

    def add_project(self, project: Project) -> bool:
        if not self._write(lambda: self.storage.projects.add(project), "add project"):
            return False
        return self.load_projects()

    def update_project(self, project: Project) -> bool:
        def _update() -> None:
            self.storage.projects.update(self._stamped(project, self.storage.projects))

        if not self._write(_update, "update project"):
            return False
        return self.load_projects()

    def delete_project(self, project_id: str) -> bool:
        """Delete a project. Its tasks keep their project_id."""
        if not self._write(lambda: self.storage.projects.delete(project_id), "delete project"):
            return False
        return self.load_projects()

    # =========================================================================
    # Contexts
    # =========================================================================

    def add_context(self, context: Context) -> bool:
        if not self._write(lambda: self.storage.contexts.add(context), "add context"):
            return False
        return self.load_contexts()

    def update_context(self, context: Context) -> bool:
        if not self._write(lambda: self.storage.contexts.update(context), "update context"):
            return False
        return self.load_contexts()

    def delete_context(self, context_id: str) -> bool:
        if not self._write(lambda: self.storage.contexts.delete(context_id), "delete context"):
            return False
        return self.load_contexts()

    # =========================================================================
    # References
    # =========================================================================

    def add_reference(self, reference: Reference) -> bool:
        if not self._write(lambda: self.storage.references.add(reference), "add reference"):
            return False
        return self.load_references()

    def update_reference(self, reference: Reference) -> bool:
        def _update() -> None:
            self.storage.references.update(self._stamped(reference, self.storage.references))

        if not self._write(_update, "update reference"):
            return False
        return self.load_references()

    def delete_reference(self, reference_id: str) -> bool:
        if not self._write(lambda: self.storage.references.delete(reference_id), "delete reference"):
            return False
        return self.load_references()

    # =========================================================================
    # AI advice log
    # =========================================================================

    def record_advice(self, advice: AIAdvice) -> bool:
        if not self._write(lambda: self.storage.advice.add(advice), "record advice"):
            return False
        self._publish(EventType.ADVICE_RECORDED, "advice", 1, record_id=advice.task_id)
        return True

    def get_advice_for_task(self, task_id: str) -> List[AIAdvice]:
        """Logged advice for a task, oldest first."""
        try:
            advice = self.storage.advice.get_by_task(task_id)
        except GTDError as e:
            logger.error(f"Failed to load advice: {e}")
            return []
        return sorted(advice, key=lambda a: a.timestamp)

    # =========================================================================
    # Lookups
    # =========================================================================

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def get_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def get_context(self, context_id: str) -> Optional[Context]:
        return next((c for c in self.contexts if c.id == context_id), None)

    def get_reference(self, reference_id: str) -> Optional[Reference]:
        return next((r for r in self.references if r.id == reference_id), None)

    # =========================================================================
    # Derived views
    # =========================================================================

    def get_tasks_by_status(self, status: str) -> List[Task]:
        return [task for task in self.tasks if task.status == status]

    def get_tasks_by_project(self, project_id: str) -> List[Task]:
        return [task for task in self.tasks if task.project_id == project_id]

    def get_inbox_tasks(self) -> List[Task]:
        return self.get_tasks_by_status(TaskStatus.INBOX)

    def get_next_actions(self) -> List[Task]:
        return self.get_tasks_by_status(TaskStatus.NEXT_ACTION)

    def get_scheduled_tasks(self) -> List[Task]:
        return self.get_tasks_by_status(TaskStatus.SCHEDULED)

    def get_someday_tasks(self) -> List[Task]:
        return self.get_tasks_by_status(TaskStatus.SOMEDAY)

    def get_reference_items(self) -> List[Task]:
        return self.get_tasks_by_status(TaskStatus.REFERENCE)

    def get_completed_tasks(self) -> List[Task]:
        return self.get_tasks_by_status(TaskStatus.COMPLETED)

    @staticmethod
    def search_tasks(tasks: List[Task], query: Optional[str]) -> List[Task]:
        """Case-insensitive match on title or description.

        A blank query returns the tasks unchanged.
        """
        if not query or not query.strip():
            return tasks
        needle = query.strip().lower()
        return [
            task for task in tasks
            if needle in task.title.lower()
            or (task.description is not None and needle in task.description.lower())
        ]
