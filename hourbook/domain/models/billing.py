"""
Billing value objects.
The billing bundle consumed by the export formatter and the durable invoice dispatch record.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Dict, Any, Optional
from enum import Enum

from hourbook.domain.models.base import BaseEntity, DomainException, ValidationError
from hourbook.domain.models.project import Project
from hourbook.domain.models.time_entry import TimeEntry


class InvoiceProvider(str, Enum):
    """External bookkeeping systems an invoice can be sent to."""
    MONEYBIRD = "moneybird"
    TWINFIELD = "twinfield"

    @classmethod
    def parse(cls, value: Any) -> "InvoiceProvider":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown invoice provider: {value}", "provider")

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class BillingBundle:
    """
    Aggregate of a project with its entries and totals.
    total_amount is unrounded; rounding happens at presentation.
    """

    project: Project
    time_entries: List[TimeEntry]
    total_hours: Decimal
    total_amount: Decimal

    @property
    def entry_count(self) -> int:
        return len(self.time_entries)


@dataclass
class InvoiceDispatch(BaseEntity):
    """Record of an invoice that was accepted by a provider."""

    project_id: int
    provider: InvoiceProvider
    reference: str
    total_amount: Decimal
    idempotency_key: str
    payload: Dict[str, Any] = field(default_factory=dict)
    sent_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        self.provider = InvoiceProvider.parse(self.provider)
        if not self.idempotency_key:
            raise ValidationError("Idempotency key is required", "idempotency_key")


class InvoiceDeliveryError(DomainException):
    """Raised when a provider did not accept an invoice. Nothing was recorded."""

    def __init__(self, provider: InvoiceProvider, detail: Optional[str] = None):
        super().__init__(f"Fout bij het verzenden naar {provider.display_name}", "INVOICE_DELIVERY_ERROR")
        self.provider = provider
        self.detail = detail
