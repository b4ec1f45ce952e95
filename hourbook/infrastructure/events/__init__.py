"""
Infrastructure event handlers.
Handles domain events for the audit log.
"""

from .audit_handlers import AuditLogHandler, BillingAuditHandler
from .event_setup import setup_event_handlers, initialize_event_system

__all__ = [
    "AuditLogHandler",
    "BillingAuditHandler",
    "setup_event_handlers",
    "initialize_event_system",
]
