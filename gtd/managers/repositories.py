"""
Typed per-collection views over the StorageManager.

Each repository binds the generic record operations to one collection,
so callers write storage.tasks.get_by_status("inbox") rather than
storage.get_all_by_index("tasks", "by-status", "inbox").
"""

from datetime import datetime
from typing import TYPE_CHECKING, Any, List, Optional, Union

from gtd.models.base import Record

if TYPE_CHECKING:
    from gtd.managers.storage_manager import StorageManager


class RecordRepository:
    """CRUD for a single collection."""

    def __init__(self, storage: "StorageManager", collection: str) -> None:
        self.storage = storage
        self.collection = collection

    def get_all(self) -> List[Any]:
        return self.storage.get_all(self.collection)

    def get(self, record_id: str) -> Optional[Any]:
        return self.storage.get(self.collection, record_id)

    def get_by_index(self, index: str, value: Any) -> List[Any]:
        return self.storage.get_all_by_index(self.collection, index, value)

    def add(self, record: Record) -> None:
        """Insert; raises DuplicateError if the id is taken."""
        self.storage.add(self.collection, record)

    def update(self, record: Record) -> None:
        """Insert or replace by id."""
        self.storage.put(self.collection, record)

    def delete(self, record_id: str) -> None:
        self.storage.delete(self.collection, record_id)


class TaskRepository(RecordRepository):
    """Task collection with its status, project and due-date indexes."""

    def get_by_status(self, status: str) -> List[Any]:
        return self.get_by_index("by-status", status)

    def get_by_project(self, project_id: str) -> List[Any]:
        return self.get_by_index("by-project", project_id)

    def get_by_due_date(self, due_date: Union[datetime, str]) -> List[Any]:
        """Tasks due at exactly due_date (a datetime or an ISO 8601 string)."""
        if isinstance(due_date, str):
            due_date = datetime.fromisoformat(due_date)
        return self.get_by_index("by-due-date", due_date)


class AdviceRepository(RecordRepository):
    """AI advice log, indexed by owning task."""

    def get_by_task(self, task_id: str) -> List[Any]:
        return self.get_by_index("by-task", task_id)
