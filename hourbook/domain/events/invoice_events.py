"""
Domain events related to invoicing.
"""

from dataclasses import dataclass

from .base import DomainEvent


@dataclass(kw_only=True)
class InvoiceSent(DomainEvent):
    """Event fired when an invoice provider accepted an invoice for a project."""

    project_id: int
    provider: str
    reference: str
    total_amount: str
    user_id: str
