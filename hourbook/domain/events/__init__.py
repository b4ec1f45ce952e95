"""
Domain events for the application.
Event-driven architecture components for audit logging.
"""

from .base import DomainEvent, EventHandler, EventDispatcher, get_event_dispatcher, publish_event
from .invoice_events import InvoiceSent
from .project_events import ProjectCreated, ProjectUpdated, ProjectStatusChanged, ProjectDeleted
from .time_entry_events import TimeEntryLogged, TimeEntryDeleted

__all__ = [
    "DomainEvent",
    "EventHandler",
    "EventDispatcher",
    "get_event_dispatcher",
    "publish_event",
    "InvoiceSent",
    "ProjectCreated",
    "ProjectUpdated",
    "ProjectStatusChanged",
    "ProjectDeleted",
    "TimeEntryLogged",
    "TimeEntryDeleted",
]
