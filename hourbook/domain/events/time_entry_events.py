"""
Domain events related to time tracking.
"""

from dataclasses import dataclass

from .base import DomainEvent


@dataclass(kw_only=True)
class TimeEntryLogged(DomainEvent):
    """Event fired when hours are logged against a project."""

    entry_id: int
    project_id: int
    user_id: str
    hours: str


@dataclass(kw_only=True)
class TimeEntryDeleted(DomainEvent):
    """Event fired when a single time entry is removed."""

    entry_id: int
    project_id: int
    user_id: str
