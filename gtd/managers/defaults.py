"""
First-run seeding of the local object store.
"""

from gtd.constants import DEFAULT_CONTEXTS
from gtd.managers.storage_manager import StorageManager
from gtd.models.base import Context


def initialize_default_contexts(storage: StorageManager) -> int:
    """Seed the default contexts when the contexts collection is empty.

    Args:
        storage: StorageManager to seed.

    Returns:
        Number of contexts added (0 when contexts already exist).
    """
    if storage.contexts.get_all():
        return 0

    for data in DEFAULT_CONTEXTS:
        storage.contexts.add(Context(**data))
    return len(DEFAULT_CONTEXTS)
