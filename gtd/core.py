"""
GTDCore - Core workflow logic for the GTD agent.

Orchestrates the object store, the in-memory TaskStore and the AI service
for the GTD workflow: capture, clarify, organize and ask for advice.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional, Type, TypeVar

from pydantic import ValidationError as PydanticValidationError

from gtd.constants import COMPLETED_STATUS, TASK_STATUSES
from gtd.exceptions import DuplicateError, GTDError, NotFoundError, ValidationError
from gtd.managers import (
    EventBus,
    StorageManager,
    TaskStore,
    initialize_default_contexts,
)
from gtd.models.base import (
    AdviceKind,
    AIAdvice,
    Context,
    Project,
    ProjectStatus,
    Record,
    Reference,
    Task,
    TaskStatus,
)
from gtd.services.ai_service import AIService

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)

# Advice request type -> kind recorded in the advice log
ADVICE_LOG_KINDS = {
    "organization": AdviceKind.ORGANIZATION,
    "scheduling": AdviceKind.SCHEDULING,
    "what-to-do-now": AdviceKind.SELECTION,
    "implementation": AdviceKind.IMPLEMENTATION,
}


def _build(model: Type[R], **fields: Any) -> R:
    """Construct a record, reporting bad field values as ValidationError."""
    try:
        return model.model_validate(fields)
    except PydanticValidationError as e:
        raise ValidationError(str(e))


def _replace(record: R, **changes: Any) -> R:
    """Validated copy of a record with some fields changed."""
    return _build(type(record), **{**record.model_dump(), **changes})


class GTDCore:
    """
    Core class for GTD workflow operations.

    Orchestrates:
    - StorageManager: Local object store in the data directory
    - TaskStore: In-memory state, CRUD and derived views
    - AIService: Advice and chat against the hosted AI backend

    Write methods return the record as reloaded from the store, or None when
    the store could not persist it (the error has already been logged).
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        ai_service: Optional[AIService] = None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize the GTDCore with a data directory.

        Args:
            data_dir: Path to the data directory. Defaults to GTD_DATA_DIR or .gtd/.
            ai_service: AI service to use. Defaults to one configured from the environment.
            event_bus: Bus the TaskStore publishes change events on.
        """
        self.storage = StorageManager(data_dir)
        try:
            initialize_default_contexts(self.storage)
        except GTDError as e:
            logger.error(f"Failed to initialize default contexts: {e}")

        self.store = TaskStore(self.storage, event_bus)
        self.store.load_all()
        self.ai_service = ai_service if ai_service is not None else AIService()

    def _require_task(self, task_id: str) -> Task:
        task = self.store.get_task(task_id)
        if task is None:
            raise NotFoundError(f"Task '{task_id}' not found.")
        return task

    def _require_project(self, project_id: str) -> Project:
        project = self.store.get_project(project_id)
        if project is None:
            raise NotFoundError(f"Project '{project_id}' not found.")
        return project

    # =========================================================================
    # Tasks
    # =========================================================================

    def capture(self, title: str, description: Optional[str] = None) -> Optional[Task]:
        """Quick-add a task to the inbox."""
        task = _build(Task, title=title, description=description)
        if not self.store.add_task(task):
            return None
        return self.store.get_task(task.id)

    def add_task(self, **fields: Any) -> Optional[Task]:
        """Add a fully specified task."""
        task = _build(Task, **fields)
        if task.status == COMPLETED_STATUS and task.completed_at is None:
            task.completed_at = datetime.now()
        if not self.store.add_task(task):
            return None
        return self.store.get_task(task.id)

    def edit_task(self, task_id: str, **changes: Any) -> Optional[Task]:
        """Replace a task with some fields changed."""
        task = self._require_task(task_id)
        if not self.store.update_task(_replace(task, **changes)):
            return None
        return self.store.get_task(task_id)

    def move_task(self, task_id: str, status: str) -> Optional[Task]:
        """Move a task to another GTD bucket.

        Moving into completed stamps completed_at; moving out clears it.
        """
        task = self._require_task(task_id)
        if status not in TASK_STATUSES:
            raise ValidationError(f"Invalid status '{status}'.")
        status = TaskStatus(status).value

        completed_at = task.completed_at
        if status == COMPLETED_STATUS:
            completed_at = completed_at or datetime.now()
        else:
            completed_at = None

        return self.edit_task(task_id, status=status, completed_at=completed_at)

    def complete_task(self, task_id: str) -> Optional[Task]:
        return self.move_task(task_id, TaskStatus.COMPLETED)

    def delete_task(self, task_id: str) -> bool:
        """Delete a task and drop it from its project's task list."""
        task = self._require_task(task_id)
        if not self.store.delete_task(task_id):
            return False

        project = self.store.get_project(task.project_id) if task.project_id else None
        if project is not None and task_id in project.tasks:
            self.store.update_project(
                _replace(project, tasks=[t for t in project.tasks if t != task_id])
            )
        return True

    # =========================================================================
    # Projects
    # =========================================================================

    def add_project(self, name: str, description: Optional[str] = None) -> Optional[Project]:
        project = _build(Project, name=name, description=description)
        if not self.store.add_project(project):
            return None
        return self.store.get_project(project.id)

    def assign_to_project(self, task_id: str, project_id: Optional[str]) -> Optional[Task]:
        """Put a task in a project, or take it out of any project with None.

        Keeps the project task lists in step with the task's project_id.
        """
        task = self._require_task(task_id)
        project = self._require_project(project_id) if project_id else None

        previous_id = task.project_id
        if previous_id and previous_id != project_id:
            previous = self.store.get_project(previous_id)
            if previous is not None and task_id in previous.tasks:
                self.store.update_project(
                    _replace(previous, tasks=[t for t in previous.tasks if t != task_id])
                )

        if project is not None and task_id not in project.tasks:
            self.store.update_project(_replace(project, tasks=project.tasks + [task_id]))

        return self.edit_task(task_id, project_id=project_id)

    def complete_project(self, project_id: str) -> Optional[Project]:
        project = self._require_project(project_id)
        updated = _replace(
            project,
            status=ProjectStatus.COMPLETED.value,
            completed_at=project.completed_at or datetime.now(),
        )
        if not self.store.update_project(updated):
            return None
        return self.store.get_project(project_id)

    def delete_project(self, project_id: str) -> bool:
        """Delete a project. Its tasks are kept, project_id included."""
        self._require_project(project_id)
        return self.store.delete_project(project_id)

    # =========================================================================
    # Contexts and references
    # =========================================================================

    def add_context(self, name: str, icon: Optional[str] = None,
                    color: Optional[str] = None) -> Optional[Context]:
        context = _build(Context, name=name, icon=icon, color=color)
        if any(c.name.lower() == context.name.lower() for c in self.store.contexts):
            raise DuplicateError(f"Context '{context.name}' already exists.")
        if not self.store.add_context(context):
            return None
        return self.store.get_context(context.id)

    def delete_context(self, context_id: str) -> bool:
        """Delete a context and untag the tasks that carry it."""
        if self.store.get_context(context_id) is None:
            raise NotFoundError(f"Context '{context_id}' not found.")
        for task in [t for t in self.store.tasks if context_id in t.context_ids]:
            self.store.update_task(
                _replace(task, context_ids=[c for c in task.context_ids if c != context_id])
            )
        return self.store.delete_context(context_id)

    def add_reference(self, title: str, **fields: Any) -> Optional[Reference]:
        reference = _build(Reference, title=title, **fields)
        if not self.store.add_reference(reference):
            return None
        return self.store.get_reference(reference.id)

    def delete_reference(self, reference_id: str) -> bool:
        if self.store.get_reference(reference_id) is None:
            raise NotFoundError(f"Reference '{reference_id}' not found.")
        return self.store.delete_reference(reference_id)

    # =========================================================================
    # AI
    # =========================================================================

    def request_advice(
        self,
        advice_type: str,
        task_id: Optional[str] = None,
        current_context: Optional[str] = None,
    ) -> str:
        """Ask the AI service for advice built from the current store state.

        When a task is involved the advice is logged against it.

        Raises:
            ValidationError: Unknown advice type, or a task-bound type without a task.
            NotFoundError: If task_id is unknown.
        """
        if advice_type not in ADVICE_LOG_KINDS:
            raise ValidationError(f"Invalid advice type '{advice_type}'.")

        task = self._require_task(task_id) if task_id else None
        if advice_type in ("organization", "implementation") and task is None:
            raise ValidationError(f"Advice type '{advice_type}' requires a task.")

        if advice_type == "organization":
            advice = self.ai_service.get_task_organization_advice(
                task, self.store.projects, self.store.contexts
            )
        elif advice_type == "implementation":
            advice = self.ai_service.get_implementation_guidance(task)
        elif advice_type == "scheduling":
            open_tasks = [t for t in self.store.tasks if t.status != COMPLETED_STATUS]
            advice = self.ai_service.get_scheduling_advice(open_tasks)
        else:
            advice = self.ai_service.get_what_to_do_now_advice(
                self.store.tasks, self.store.contexts, current_context
            )

        if task is not None:
            self.store.record_advice(
                AIAdvice(task_id=task.id, advice=advice, type=ADVICE_LOG_KINDS[advice_type])
            )
        return advice

    def chat(self, message: str, task_id: Optional[str] = None) -> str:
        """Open-ended chat seeded with the open tasks and project names."""
        current_task = self._require_task(task_id) if task_id else None
        open_tasks = [t for t in self.store.tasks if t.status != COMPLETED_STATUS]
        return self.ai_service.chat(
            message,
            tasks=open_tasks,
            projects=self.store.projects,
            current_task=current_task,
        )

    def advice_history(self, task_id: str) -> List[AIAdvice]:
        self._require_task(task_id)
        return self.store.get_advice_for_task(task_id)
