"""Export service for billing bundles and time-tracking rows.
Builds CSV documents and the invoice payloads sent to bookkeeping providers.
"""

import csv
import hashlib
import io
import json
import re
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from hourbook.domain.models.billing import BillingBundle, InvoiceProvider
from hourbook.domain.models.time_entry import TimeEntry
from .billing_service import (
    billing_rate,
    entry_display_rate,
    format_number,
    round_currency,
)


BILLING_CSV_HEADER = ["Project", "Client", "Date", "Employee", "Description", "Hours", "Rate", "Amount"]
TRACKING_CSV_HEADER = ["Datum", "Project", "Klant", "Beschrijving", "Uren", "Uurtarief", "Waarde"]
TOTAL_LABEL = "TOTAAL"

_WHITESPACE = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Whitespace runs become '-', everything lowercased."""
    return _WHITESPACE.sub("-", name).lower()


def localized_date(value: date) -> str:
    """Dutch short date without zero padding: 2024-03-05 -> '5-3-2024'."""
    return f"{value.day}-{value.month}-{value.year}"


def money(amount: Decimal, symbol: str = "€") -> str:
    return f"{symbol}{round_currency(amount)}"


def _quoted(text: Optional[str]) -> str:
    value = text or ""
    return '"' + value.replace('"', '""') + '"'


class ExportService:
    """
    Domain service for serializing billing data.
    Amounts are rounded to cents here and nowhere earlier.
    """

    def __init__(self, currency_symbol: str = "€", tax_rate_id: str = "21"):
        self.currency_symbol = currency_symbol
        self.tax_rate_id = tax_rate_id

    # CSV

    def billing_csv(self, bundle: BillingBundle) -> str:
        """
        One row per entry at the project rate, then a totals row:
        ,,,,TOTAAL,<hours>,,<amount>
        """
        project = bundle.project
        rate = billing_rate(project)

        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerow(BILLING_CSV_HEADER)
        for entry in bundle.time_entries:
            writer.writerow([
                project.name,
                project.client,
                localized_date(entry.entry_date),
                entry.logger_name,
                entry.description,
                format_number(entry.hours),
                f"{self.currency_symbol}{format_number(rate)}",
                money(entry.hours * rate, self.currency_symbol),
            ])
        writer.writerow([
            "", "", "", "", TOTAL_LABEL,
            format_number(bundle.total_hours),
            "",
            money(bundle.total_amount, self.currency_symbol),
        ])
        return buffer.getvalue().rstrip("\n")

    def tracking_csv(self, entries: Iterable[TimeEntry], include_employee: bool = False) -> str:
        """
        Time-tracking export valued at each entry's display rate.
        Free-text columns are always double quoted.
        """
        header = list(TRACKING_CSV_HEADER)
        if include_employee:
            header.append("Werknemer")

        lines = [",".join(header)]
        for entry in entries:
            rate = entry_display_rate(entry)
            row = [
                entry.entry_date.strftime("%d-%m-%Y"),
                _quoted(entry.project_name),
                _quoted(entry.project_client),
                _quoted(entry.description),
                format_number(entry.hours),
                f"{self.currency_symbol}{format_number(rate)}",
                money(entry.hours * rate, self.currency_symbol),
            ]
            if include_employee:
                row.append(_quoted(entry.logger_name))
            lines.append(",".join(row))
        return "\n".join(lines)

    @staticmethod
    def billing_filename(bundle: BillingBundle, today: Optional[date] = None) -> str:
        today = today or date.today()
        return f"factuur-{slugify(bundle.project.name)}-{today.isoformat()}.csv"

    @staticmethod
    def tracking_filename(today: Optional[date] = None) -> str:
        today = today or date.today()
        return f"tijdregistratie_{today.isoformat()}.csv"

    # Invoice payloads

    def moneybird_payload(self, bundle: BillingBundle, invoice_date: Optional[date] = None) -> Dict[str, Any]:
        project = bundle.project
        rate = billing_rate(project)
        invoice_date = invoice_date or date.today()
        return {
            "contact": {"company_name": project.client},
            "details_attributes": [
                {
                    "description": f"{entry.description} ({entry.logger_name})",
                    "amount": str(round_currency(entry.hours * rate)),
                    "tax_rate_id": self.tax_rate_id,
                    "period": entry.entry_date.isoformat(),
                }
                for entry in bundle.time_entries
            ],
            "reference": f"Project: {project.name}",
            "invoice_date": invoice_date.isoformat(),
        }

    @staticmethod
    def twinfield_payload(bundle: BillingBundle) -> Dict[str, Any]:
        project = bundle.project
        rate = billing_rate(project)
        return {
            "customer": project.client,
            "invoiceLines": [
                {
                    "description": f"{project.name} - {entry.description}",
                    "quantity": entry.hours,
                    "unitPrice": rate,
                    "amount": entry.hours * rate,
                    "employee": entry.logger_name,
                    "date": entry.entry_date.isoformat(),
                }
                for entry in bundle.time_entries
            ],
            "totalAmount": bundle.total_amount,
            "reference": f"PRJ-{_WHITESPACE.sub('-', project.name).upper()}",
        }

    def build_payload(
        self,
        provider: InvoiceProvider,
        bundle: BillingBundle,
        invoice_date: Optional[date] = None
    ) -> Dict[str, Any]:
        provider = InvoiceProvider.parse(provider)
        if provider == InvoiceProvider.MONEYBIRD:
            return self.moneybird_payload(bundle, invoice_date)
        return self.twinfield_payload(bundle)

    @staticmethod
    def payload_reference(payload: Dict[str, Any]) -> str:
        return str(payload.get("reference", ""))


def canonical_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """JSON-safe copy of a payload; decimals become plain number strings."""
    def encode(value):
        if isinstance(value, Decimal):
            return format_number(value)
        if isinstance(value, date):
            return value.isoformat()
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

    return json.loads(json.dumps(payload, default=encode))


def idempotency_key(provider: InvoiceProvider, project_id: Any, payload: Dict[str, Any]) -> str:
    """provider:project:sha256(canonical payload). Same bundle, same key."""
    provider = InvoiceProvider.parse(provider)
    body = json.dumps(canonical_payload(payload), sort_keys=True, separators=(",", ":"))
    digest = hashlib.sha256(body.encode("utf-8")).hexdigest()
    return f"{provider.value}:{project_id}:{digest}"


def parse_csv(text: str) -> List[List[str]]:
    """Read an exported CSV back into rows."""
    return list(csv.reader(io.StringIO(text)))
