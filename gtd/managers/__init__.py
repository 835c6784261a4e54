"""
Managers for the GTD agent.

This package contains focused manager classes:
- StorageManager: Local object store, one JSON file per collection
- RecordRepository / TaskRepository / AdviceRepository: Typed per-collection views
- TaskStore: In-memory source of truth with CRUD and derived views
- EventBus: Change notifications published by the TaskStore
"""

from gtd.managers.storage_manager import StorageManager, COLLECTIONS
from gtd.managers.repositories import (
    AdviceRepository,
    RecordRepository,
    TaskRepository,
)
from gtd.managers.task_store import TaskStore
from gtd.managers.defaults import initialize_default_contexts
from gtd.managers.events import (
    EventBus,
    Event,
    StoreEvent,
    EventType,
    EventListener,
    LoggingListener,
    get_event_bus,
)
from gtd.exceptions import StorageError

__all__ = [
    "StorageManager",
    "StorageError",
    "COLLECTIONS",
    "RecordRepository",
    "TaskRepository",
    "AdviceRepository",
    "TaskStore",
    "initialize_default_contexts",
    "EventBus",
    "Event",
    "StoreEvent",
    "EventType",
    "EventListener",
    "LoggingListener",
    "get_event_bus",
]
