"""
Domain events related to projects.
Events for project lifecycle and status changes.
"""

from dataclasses import dataclass
from typing import Optional

from .base import DomainEvent


@dataclass(kw_only=True)
class ProjectCreated(DomainEvent):
    """Event fired when a new project is created."""

    project_id: int
    user_id: str
    project_name: str
    client: str


@dataclass(kw_only=True)
class ProjectUpdated(DomainEvent):
    """Event fired when name, client or rate of a project changes."""

    project_id: int
    user_id: str
    changes: str


@dataclass(kw_only=True)
class ProjectStatusChanged(DomainEvent):
    """Event fired when a project status changes."""

    project_id: int
    user_id: str
    old_status: str
    new_status: str


@dataclass(kw_only=True)
class ProjectDeleted(DomainEvent):
    """Event fired when a project and its time entries are removed."""

    project_id: int
    user_id: str
    removed_time_entries: Optional[int] = None
