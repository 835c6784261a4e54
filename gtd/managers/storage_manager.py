"""
Storage manager for the GTD agent.

The local object store: one JSON file per record collection in the data
directory, keyed by record id, with a handful of secondary indexes.
"""

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from gtd.constants import get_data_dir
from gtd.exceptions import DuplicateError, StorageError
from gtd.managers.repositories import (
    AdviceRepository,
    RecordRepository,
    TaskRepository,
)
from gtd.models.base import AIAdvice, Context, Project, Record, Reference, Task
from gtd.models.files import (
    AdviceFile,
    ConfigFile,
    ContextsFile,
    ProjectsFile,
    ReferencesFile,
    SchemaFile,
    TasksFile,
)


@dataclass(frozen=True)
class CollectionSpec:
    """Where a collection lives on disk and which indexes it declares.

    indexes maps index name to the record attribute it is keyed on.
    """

    filename: str
    file_model: Type[BaseModel]
    field_name: str
    record_model: Type[Record]
    indexes: Dict[str, str] = field(default_factory=dict)


COLLECTIONS: Dict[str, CollectionSpec] = {
    "tasks": CollectionSpec(
        "tasks.json",
        TasksFile,
        "tasks",
        Task,
        {"by-status": "status", "by-project": "project_id", "by-due-date": "due_date"},
    ),
    "projects": CollectionSpec("projects.json", ProjectsFile, "projects", Project),
    "contexts": CollectionSpec("contexts.json", ContextsFile, "contexts", Context),
    "ai_advice": CollectionSpec(
        "ai_advice.json", AdviceFile, "advice", AIAdvice, {"by-task": "task_id"}
    ),
    "references": CollectionSpec(
        "references.json", ReferencesFile, "references", Reference
    ),
}


class StorageManager:
    """
    Manages persistence of GTD records to JSON files in the data directory.

    Every operation touches a single record and is written atomically.
    The typed repositories (tasks, projects, contexts, advice, references)
    are thin per-collection views over the generic operations.

    Usage:
        storage = StorageManager(Path(".gtd"))
        storage.add("tasks", Task(title="Call Bob"))
        inbox = storage.get_all_by_index("tasks", "by-status", "inbox")
        inbox = storage.tasks.get_by_status("inbox")
    """

    def __init__(self, data_dir: Optional[Path] = None) -> None:
        """
        Initialize the StorageManager with a data directory path.

        Args:
            data_dir: Path to the data directory. Defaults to GTD_DATA_DIR or .gtd/.
        """
        self.data_dir = Path(data_dir) if data_dir else get_data_dir()
        self._ensure_data_dir()

        self.tasks = TaskRepository(self, "tasks")
        self.projects = RecordRepository(self, "projects")
        self.contexts = RecordRepository(self, "contexts")
        self.advice = AdviceRepository(self, "ai_advice")
        self.references = RecordRepository(self, "references")

    def _ensure_data_dir(self) -> None:
        """Create the data directory and, on first run, the schema and empty collections."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

        schema_path = self.data_dir / "schema.json"
        if schema_path.exists():
            return

        for spec in COLLECTIONS.values():
            file_path = self.data_dir / spec.filename
            if not file_path.exists():
                self._atomic_write(file_path, spec.file_model().model_dump(mode="json"))

        schema = SchemaFile(
            indexes={name: dict(spec.indexes) for name, spec in COLLECTIONS.items()}
        )
        self._atomic_write(schema_path, schema.model_dump(mode="json"))

    def _atomic_write(self, file_path: Path, data: Dict[str, Any]) -> None:
        """Write data to a JSON file atomically to prevent corruption.

        Args:
            file_path: Path to the file to write.
            data: Dictionary data to write as JSON.

        Raises:
            StorageError: If writing to file fails.
        """
        try:
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self.data_dir, prefix=".tmp_gtd_", suffix=".json"
            )
        except OSError as e:
            raise StorageError(f"Failed to write to {file_path}: {e}")

        try:
            with os.fdopen(temp_fd, "w") as temp_file:
                json.dump(data, temp_file, indent=2, ensure_ascii=False)
            os.replace(temp_path, file_path)
        except Exception as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise StorageError(f"Failed to write to {file_path}: {e}")

    def _spec(self, collection: str) -> CollectionSpec:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise StorageError(f"Unknown collection '{collection}'")

    def _load_records(self, collection: str) -> Dict[str, Record]:
        """Load a collection file and return its records keyed by id."""
        spec = self._spec(collection)
        file_path = self.data_dir / spec.filename
        if not file_path.exists():
            return {}

        try:
            with open(file_path, "r") as f:
                data = json.load(f)
            file_model = spec.file_model.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load {spec.filename}: {e}")

        return {record.id: record for record in getattr(file_model, spec.field_name)}

    def _save_records(self, collection: str, records: Dict[str, Record]) -> None:
        """Save a collection, ordered by primary key."""
        spec = self._spec(collection)
        ordered = [records[key] for key in sorted(records)]
        file_model = spec.file_model(**{spec.field_name: ordered})
        self._atomic_write(
            self.data_dir / spec.filename,
            file_model.model_dump(mode="json", by_alias=True, exclude_none=True),
        )

    def _check_record(self, collection: str, record: Record) -> None:
        spec = self._spec(collection)
        if not isinstance(record, spec.record_model):
            raise StorageError(
                f"Cannot store {type(record).__name__} in collection '{collection}'"
            )

    # =========================================================================
    # Generic record operations
    # =========================================================================

    def add(self, collection: str, record: Record) -> None:
        """Insert a record.

        Raises:
            DuplicateError: If a record with the same id already exists.
            StorageError: If the collection cannot be read or written.
        """
        self._check_record(collection, record)
        records = self._load_records(collection)
        if record.id in records:
            raise DuplicateError(
                f"Record '{record.id}' already exists in {collection}"
            )
        records[record.id] = record
        self._save_records(collection, records)

    def put(self, collection: str, record: Record) -> None:
        """Insert or replace a record by id."""
        self._check_record(collection, record)
        records = self._load_records(collection)
        records[record.id] = record
        self._save_records(collection, records)

    def get(self, collection: str, record_id: str) -> Optional[Record]:
        """Get a record by id, or None if absent."""
        return self._load_records(collection).get(record_id)

    def get_all(self, collection: str) -> List[Record]:
        """Get every record in a collection, ordered by id."""
        records = self._load_records(collection)
        return [records[key] for key in sorted(records)]

    def get_all_by_index(self, collection: str, index: str, value: Any) -> List[Record]:
        """Get records whose indexed attribute equals value, ordered by id.

        Records with the indexed attribute unset are not part of the index.

        Raises:
            StorageError: If the collection or index is unknown.
        """
        spec = self._spec(collection)
        if index not in spec.indexes:
            raise StorageError(f"Unknown index '{index}' on collection '{collection}'")
        attr = spec.indexes[index]
        return [
            record
            for record in self.get_all(collection)
            if getattr(record, attr) is not None and getattr(record, attr) == value
        ]

    def delete(self, collection: str, record_id: str) -> None:
        """Delete a record by id. Does nothing if the record is absent."""
        records = self._load_records(collection)
        if record_id not in records:
            return
        del records[record_id]
        self._save_records(collection, records)

    # =========================================================================
    # Schema File
    # =========================================================================

    def load_schema(self) -> SchemaFile:
        """Load schema.json and return as SchemaFile model."""
        file_path = self.data_dir / "schema.json"
        if not file_path.exists():
            return SchemaFile()

        try:
            with open(file_path, "r") as f:
                data = json.load(f)
            return SchemaFile.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load schema.json: {e}")

    # =========================================================================
    # Config File
    # =========================================================================

    def load_config(self) -> ConfigFile:
        """Load config.json and return as ConfigFile model."""
        file_path = self.data_dir / "config.json"
        if not file_path.exists():
            return ConfigFile()

        try:
            with open(file_path, "r") as f:
                data = json.load(f)
            return ConfigFile.model_validate(data)
        except (json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to load config.json: {e}")

    def save_config(self, data: ConfigFile) -> None:
        """Save ConfigFile model to config.json."""
        file_path = self.data_dir / "config.json"
        self._atomic_write(file_path, data.model_dump(mode="json", exclude_none=True))
