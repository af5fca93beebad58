"""Search schemas."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from tasklane.schemas.project import ProjectRead
from tasklane.schemas.task import TaskRead


class SearchType(str, Enum):
    ALL = "all"
    TASKS = "tasks"
    PROJECTS = "projects"


class SearchResponse(BaseModel):
    tasks: list[TaskRead]
    projects: list[ProjectRead]
