"""
Billing DTOs for the application layer.
Data Transfer Objects for the billing view, exports and invoice sends.
"""

from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from pydantic import Field

from .base_dto import BaseDTO, RequestDTO


class BillingEntryDTO(BaseDTO):
    """One invoice line, valued at the project rate."""

    id: Optional[int] = None
    entry_date: date = Field(alias="date")
    user_name: str
    description: str
    hours: Decimal
    amount: Decimal = Field(description="hours x project rate, rounded to cents")


class BillingProjectDTO(BaseDTO):
    id: int
    name: str
    client: str
    status: str
    hourly_rate: Decimal


class BillingBundleDTO(BaseDTO):
    project: BillingProjectDTO
    time_entries: List[BillingEntryDTO]
    entry_count: int
    total_hours: Decimal
    total_amount: Decimal = Field(description="Total rounded to cents")


class BillingOverviewResponseDTO(BaseDTO):
    """Projects waiting for an invoice, with portfolio totals."""

    bundles: List[BillingBundleDTO]
    total_amount: Decimal
    total_hours: Decimal
    project_count: int
    search: Optional[str] = None


class SendInvoiceRequestDTO(RequestDTO):
    provider: str = Field(description="moneybird or twinfield")
    idempotency_key: Optional[str] = Field(default=None, max_length=255)


class InvoiceDispatchResponseDTO(BaseDTO):
    id: Optional[int] = None
    project_id: int
    provider: str
    reference: str
    total_amount: Decimal
    idempotency_key: str
    sent_at: datetime
    already_sent: bool = Field(default=False, description="True when an earlier send with this key was reused")
    message: str


class CsvExportDTO(BaseDTO):
    filename: str
    content: str
    media_type: str = "text/csv; charset=utf-8"
