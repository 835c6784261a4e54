"""
File models for the GTD agent.

Models representing the structure of JSON files in the data directory.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from gtd.constants import DEFAULT_AI_PROVIDER, DEFAULT_AI_TIMEOUT, SCHEMA_VERSION

from .base import AIAdvice, Context, Project, Reference, Task


class TasksFile(BaseModel):
    """Model for tasks.json file."""

    tasks: List[Task] = Field(default_factory=list)


class ProjectsFile(BaseModel):
    """Model for projects.json file."""

    projects: List[Project] = Field(default_factory=list)


class ContextsFile(BaseModel):
    """Model for contexts.json file."""

    contexts: List[Context] = Field(default_factory=list)


class AdviceFile(BaseModel):
    """Model for ai_advice.json file."""

    advice: List[AIAdvice] = Field(default_factory=list)


class ReferencesFile(BaseModel):
    """Model for references.json file."""

    references: List[Reference] = Field(default_factory=list)


class SchemaFile(BaseModel):
    """Model for schema.json file.

    Written once when the data directory is first created. Records the
    collections and the secondary indexes declared on each of them.
    """

    schema_version: str = SCHEMA_VERSION
    indexes: Dict[str, Dict[str, str]] = Field(default_factory=dict)


class ConfigFile(BaseModel):
    """Model for config.json file.

    Non-secret settings only; the API key comes from the environment.
    Keys written by hand (such as ai_api_key) are kept on save.
    """

    model_config = ConfigDict(extra="allow")

    ai_provider: str = DEFAULT_AI_PROVIDER
    ai_base_url: Optional[str] = None
    ai_model: Optional[str] = None
    ai_timeout: int = DEFAULT_AI_TIMEOUT
