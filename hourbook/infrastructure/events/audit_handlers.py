"""
Event handlers for the audit log.
Turns domain events into structured log lines.
"""

import logging

from hourbook.domain.events.base import EventHandler, DomainEvent
from hourbook.domain.events.invoice_events import InvoiceSent
from hourbook.domain.events.project_events import ProjectDeleted, ProjectStatusChanged


logger = logging.getLogger("hourbook.audit")


class AuditLogHandler(EventHandler):
    """Logs every event with its payload."""

    def can_handle(self, event: DomainEvent) -> bool:
        return True

    async def handle(self, event: DomainEvent) -> None:
        record = event.to_dict()
        logger.info(f"{event.event_type} {record['data']}", extra={"event_id": event.event_id})


class BillingAuditHandler(EventHandler):
    """
    Warning-level trail for changes that affect what gets invoiced:
    status changes, deleted projects and sent invoices.
    """

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, (InvoiceSent, ProjectStatusChanged, ProjectDeleted))

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, InvoiceSent):
            logger.warning(
                f"Invoice for project {event.project_id} sent to {event.provider} "
                f"by {event.user_id}: {event.total_amount} (ref {event.reference})"
            )
        elif isinstance(event, ProjectStatusChanged):
            logger.warning(
                f"Project {event.project_id} moved {event.old_status} -> {event.new_status} by {event.user_id}"
            )
        elif isinstance(event, ProjectDeleted):
            logger.warning(
                f"Project {event.project_id} deleted by {event.user_id} "
                f"with {event.removed_time_entries} time entries"
            )
