"""Billing service for rate resolution and time aggregation.
Turns raw time entries into hour and money totals per project and per filter.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple

from hourbook.domain.models.billing import BillingBundle
from hourbook.domain.models.project import Project, DEFAULT_PROJECT_HOURLY_RATE
from hourbook.domain.models.time_entry import TimeEntry


FALLBACK_DISPLAY_RATE = Decimal("50")
ZERO = Decimal("0")
CENT = Decimal("0.01")


def billing_rate(project: Project) -> Decimal:
    """
    Rate used for invoices, the billing view and billing exports.
    Always the project's own rate; the logger's personal rate never applies here.
    """
    return project.hourly_rate


def display_rate(user_rate: Optional[Decimal], project_rate: Optional[Decimal]) -> Decimal:
    """
    Rate for the time-tracking value column.
    The logger's personal rate wins, then the project rate, then a flat 50.
    """
    for rate in (user_rate, project_rate):
        if rate:
            return Decimal(rate)
    return FALLBACK_DISPLAY_RATE


def entry_display_rate(entry: TimeEntry) -> Decimal:
    return display_rate(entry.user_hourly_rate, entry.project_hourly_rate)


def round_currency(amount: Decimal) -> Decimal:
    """Round to cents for presentation. Never used on intermediate sums."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def format_number(value: Decimal) -> str:
    """Plain number without trailing zeros: 3.50 -> '3.5', 75.00 -> '75'."""
    return format(Decimal(value).normalize(), "f")


@dataclass
class TimeEntryFilter:
    """Conjunctive filter over enriched time entries. Date bounds are inclusive."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = None
    user_id: Optional[str] = None
    project_id: Optional[int] = None

    def matches(self, entry: TimeEntry) -> bool:
        if self.date_from and entry.entry_date < self.date_from:
            return False
        if self.date_to and entry.entry_date > self.date_to:
            return False
        if self.user_id and entry.user_id != self.user_id:
            return False
        if self.project_id is not None and entry.project_id != self.project_id:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = (
                entry.description,
                entry.project_name,
                entry.project_client,
                entry.user_name,
            )
            if not any(text and needle in text.lower() for text in haystack):
                return False
        return True

    def apply(self, entries: Iterable[TimeEntry]) -> List[TimeEntry]:
        return [entry for entry in entries if self.matches(entry)]


@dataclass(frozen=True)
class TrackingTotals:
    """Summary cards of the time-tracking view."""

    total_hours: Decimal
    total_value: Decimal
    average_rate: Decimal
    project_count: int


@dataclass(frozen=True)
class PortfolioTotals:
    """Summary cards of the billing view."""

    total_amount: Decimal
    total_hours: Decimal
    project_count: int


class BillingService:
    """
    Domain service for billing calculations.
    Every total is computed from the entries passed in; nothing is cached or stored.
    """

    def __init__(self, fallback_project_rate: Decimal = DEFAULT_PROJECT_HOURLY_RATE):
        self.fallback_project_rate = fallback_project_rate

    @staticmethod
    def total_hours(entries: Iterable[TimeEntry]) -> Decimal:
        return sum((entry.hours for entry in entries), ZERO)

    @staticmethod
    def entry_billing_amount(project: Project, entry: TimeEntry) -> Decimal:
        return entry.hours * billing_rate(project)

    @staticmethod
    def entry_display_value(entry: TimeEntry) -> Decimal:
        return entry.hours * entry_display_rate(entry)

    def summarize_project(self, project: Project, entries: Iterable[TimeEntry]) -> BillingBundle:
        """
        Build the billing bundle of one project.
        total_amount = (sum of hours) x project rate, unrounded.
        """
        project_entries = [entry for entry in entries if entry.project_id == project.id]
        total_hours = self.total_hours(project_entries)
        return BillingBundle(
            project=project,
            time_entries=project_entries,
            total_hours=total_hours,
            total_amount=total_hours * billing_rate(project)
        )

    def build_billing_bundles(
        self,
        projects: Iterable[Project],
        entries: Iterable[TimeEntry]
    ) -> List[BillingBundle]:
        """Group entries by project id and summarize each project."""
        by_project: Dict[Any, List[TimeEntry]] = {}
        for entry in entries:
            by_project.setdefault(entry.project_id, []).append(entry)

        return [
            self.summarize_project(project, by_project.get(project.id, []))
            for project in projects
        ]

    def tracking_totals(self, entries: Iterable[TimeEntry]) -> TrackingTotals:
        """Totals for the time-tracking view, valued at each entry's display rate."""
        entries = list(entries)
        total_hours = self.total_hours(entries)
        total_value = sum((self.entry_display_value(entry) for entry in entries), ZERO)
        average_rate = total_value / total_hours if total_hours > 0 else ZERO
        return TrackingTotals(
            total_hours=total_hours,
            total_value=total_value,
            average_rate=average_rate,
            project_count=len({entry.project_id for entry in entries})
        )

    def project_board_totals(
        self,
        project: Project,
        entries: Iterable[TimeEntry]
    ) -> Tuple[Decimal, Decimal]:
        """Hours and value shown on a project card."""
        rate = project.hourly_rate or self.fallback_project_rate
        project_entries = [entry for entry in entries if entry.project_id == project.id]
        hours = self.total_hours(project_entries)
        return hours, hours * rate

    @staticmethod
    def portfolio_totals(bundles: Iterable[BillingBundle]) -> PortfolioTotals:
        bundles = list(bundles)
        return PortfolioTotals(
            total_amount=sum((bundle.total_amount for bundle in bundles), ZERO),
            total_hours=sum((bundle.total_hours for bundle in bundles), ZERO),
            project_count=len(bundles)
        )

    @staticmethod
    def search_bundles(bundles: Iterable[BillingBundle], term: Optional[str]) -> List[BillingBundle]:
        """Case-insensitive match on project name or client."""
        bundles = list(bundles)
        if not term:
            return bundles
        needle = term.lower()
        return [
            bundle for bundle in bundles
            if needle in bundle.project.name.lower() or needle in bundle.project.client.lower()
        ]
