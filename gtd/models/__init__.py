"""
Data models for the GTD agent.

Import models explicitly from their modules:
    from gtd.models.base import Task, Project, Context, Reference, AIAdvice
    from gtd.models.files import TasksFile, ProjectsFile, ConfigFile, etc.
"""

from .base import (
    AdviceKind,
    AIAdvice,
    Context,
    Priority,
    Project,
    ProjectStatus,
    Record,
    Reference,
    ReferenceType,
    Task,
    TaskStatus,
)

__all__ = [
    "AdviceKind",
    "AIAdvice",
    "Context",
    "Priority",
    "Project",
    "ProjectStatus",
    "Record",
    "Reference",
    "ReferenceType",
    "Task",
    "TaskStatus",
]
