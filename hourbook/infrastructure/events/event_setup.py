"""
Event system setup and configuration.
Registers all event handlers with the event dispatcher.
"""

import logging
from hourbook.domain.events.base import get_event_dispatcher
from .audit_handlers import AuditLogHandler, BillingAuditHandler

logger = logging.getLogger(__name__)


def setup_event_handlers():
    """Set up and register all event handlers."""

    dispatcher = get_event_dispatcher()
    dispatcher.clear_handlers()

    # Register global handler for logging
    dispatcher.register_global_handler(AuditLogHandler())

    billing_handler = BillingAuditHandler()
    dispatcher.register_handler("InvoiceSent", billing_handler)
    dispatcher.register_handler("ProjectStatusChanged", billing_handler)
    dispatcher.register_handler("ProjectDeleted", billing_handler)

    registered = dispatcher.get_registered_handlers()
    for event_type, handlers in registered.items():
        logger.info(f"Event {event_type}: {', '.join(handlers)} handlers")


def initialize_event_system():
    """Initialize the complete event system."""
    try:
        setup_event_handlers()
        logger.info("Event system initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize event system: {str(e)}")
        raise
