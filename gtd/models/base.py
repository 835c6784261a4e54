"""
Record models for the GTD agent.

Common base for the five record kinds kept in the local object store:
Task, Project, Context, Reference and AIAdvice.
"""

import uuid
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TaskStatus(str, Enum):
    """GTD buckets a task can sit in."""

    INBOX = "inbox"
    NEXT_ACTION = "next-action"
    SCHEDULED = "scheduled"
    SOMEDAY = "someday"
    COMPLETED = "completed"
    REFERENCE = "reference"


class Priority(str, Enum):
    """Priority levels, also used for energy levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ProjectStatus(str, Enum):
    """Project lifecycle states."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"


class ReferenceType(str, Enum):
    NOTE = "note"
    LINK = "link"
    FILE = "file"


class AdviceKind(str, Enum):
    """Kinds of AI suggestion logged against a task."""

    ORGANIZATION = "organization"
    SCHEDULING = "scheduling"
    IMPLEMENTATION = "implementation"
    SELECTION = "selection"
    REVIEW = "review"


def new_id() -> str:
    """Generate a record identifier."""
    return str(uuid.uuid4())


def next_timestamp(previous: Optional[datetime] = None) -> datetime:
    """Return the current time, strictly later than ``previous`` when given.

    Matches the timezone awareness of ``previous`` so the two can be compared.
    """
    if previous is None:
        return datetime.now()
    now = datetime.now(previous.tzinfo)
    return max(now, previous + timedelta(microseconds=1))


def _unique(values: List[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


class Record(BaseModel):
    """
    Base model for every stored record.

    Fields are snake_case in Python and camelCase on disk and on the wire;
    both spellings are accepted on input. Enum fields hold plain string
    values so they compare directly against "inbox", "high", etc.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_assignment=True,
    )

    id: str = Field(default_factory=new_id)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a camelCase JSON-compatible dict, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Task(Record):
    """A single GTD item.

    A task belongs to at most one project. Its status decides which
    view surfaces it (inbox, next actions, scheduled, someday, ...).
    """

    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.INBOX
    project_id: Optional[str] = None
    context_ids: List[str] = Field(default_factory=list)
    due_date: Optional[datetime] = None
    scheduled_date: Optional[datetime] = None
    priority: Priority = Priority.MEDIUM
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    energy_level: Optional[Priority] = None
    estimated_time: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not blank."""
        if not v or not v.strip():
            raise ValueError("Title is required and cannot be empty")
        return v.strip()

    @field_validator("context_ids")
    @classmethod
    def validate_context_ids(cls, v: List[str]) -> List[str]:
        """Context tags behave as a set; drop duplicates."""
        return _unique(v)


class Project(Record):
    """A multi-step outcome grouping tasks.

    Deleting a project leaves its tasks (and their project_id) untouched.
    """

    name: str
    description: Optional[str] = None
    tasks: List[str] = Field(default_factory=list)
    status: ProjectStatus = ProjectStatus.ACTIVE
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate name is not blank."""
        if not v or not v.strip():
            raise ValueError("Name is required and cannot be empty")
        return v.strip()


class Context(Record):
    """A reusable situational tag such as a place, a tool or an energy level."""

    name: str
    icon: Optional[str] = None
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Name is required and cannot be empty")
        return v.strip()


class Reference(Record):
    """GTD reference material: a note, a link or a file pointer."""

    title: str
    content: str = ""
    type: ReferenceType = ReferenceType.NOTE
    url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Title is required and cannot be empty")
        return v.strip()

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _unique(v)


class AIAdvice(Record):
    """A logged AI suggestion for a task."""

    task_id: str
    advice: str
    type: AdviceKind
    timestamp: datetime = Field(default_factory=datetime.now)
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)
