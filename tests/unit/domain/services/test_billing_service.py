"""
Unit tests for billing service.
"""

import pytest
from datetime import date
from decimal import Decimal

from hourbook.domain.models.project import Project, ProjectStatus
from hourbook.domain.models.time_entry import TimeEntry
from hourbook.domain.services.billing_service import (
    BillingService,
    TimeEntryFilter,
    billing_rate,
    display_rate,
    format_number,
    round_currency,
)


def make_project(project_id=1, rate="75", **kwargs):
    defaults = dict(name="Website", client="Acme BV", created_by="admin-1")
    defaults.update(kwargs)
    return Project(id=project_id, hourly_rate=Decimal(rate), **defaults)


def make_entry(project_id=1, hours="1", user_id="employee-1", user_rate=None, project_rate="75", **kwargs):
    defaults = dict(
        description="Work",
        entry_date=date(2024, 3, 5),
        project_name="Website",
        project_client="Acme BV",
        user_name="Erik Employee",
    )
    defaults.update(kwargs)
    return TimeEntry(
        project_id=project_id,
        user_id=user_id,
        hours=Decimal(hours),
        user_hourly_rate=Decimal(user_rate) if user_rate else None,
        project_hourly_rate=Decimal(project_rate) if project_rate else None,
        **defaults
    )


class TestRates:
    """Rate resolution for billing and for the time-tracking view."""

    def test_billing_rate_is_project_rate(self):
        assert billing_rate(make_project(rate="80")) == Decimal("80")

    def test_display_rate_prefers_user_rate(self):
        assert display_rate(Decimal("60"), Decimal("80")) == Decimal("60")

    def test_display_rate_falls_back_to_project_rate(self):
        assert display_rate(None, Decimal("80")) == Decimal("80")

    def test_display_rate_falls_back_to_fifty(self):
        assert display_rate(None, None) == Decimal("50")

    def test_zero_user_rate_counts_as_missing(self):
        assert display_rate(Decimal("0"), Decimal("80")) == Decimal("80")

    def test_round_currency_half_up(self):
        assert round_currency(Decimal("2.675")) == Decimal("2.68")
        assert round_currency(Decimal("262.5")) == Decimal("262.50")

    def test_format_number(self):
        assert format_number(Decimal("3.50")) == "3.5"
        assert format_number(Decimal("75.00")) == "75"
        assert format_number(Decimal("100")) == "100"


class TestBillingService:
    """Test cases for BillingService."""

    def setup_method(self):
        self.service = BillingService()
        self.project = make_project(status=ProjectStatus.TO_INVOICE)

    def test_summarize_project(self):
        entries = [make_entry(hours="2"), make_entry(hours="1.5")]

        bundle = self.service.summarize_project(self.project, entries)

        assert bundle.total_hours == Decimal("3.5")
        assert bundle.total_amount == Decimal("262.50")
        assert bundle.entry_count == 2

    def test_billing_ignores_personal_rate(self):
        project = make_project(rate="80")
        entries = [make_entry(hours="2", user_rate="60", project_rate="80")]

        bundle = self.service.summarize_project(project, entries)

        assert bundle.total_amount == Decimal("160")
        assert self.service.entry_billing_amount(project, entries[0]) == Decimal("160")
        assert self.service.entry_display_value(entries[0]) == Decimal("120")

    def test_summarize_ignores_other_projects(self):
        entries = [make_entry(hours="2"), make_entry(project_id=2, hours="5")]

        bundle = self.service.summarize_project(self.project, entries)

        assert bundle.total_hours == Decimal("2")

    def test_total_is_not_rounded_per_entry(self):
        project = make_project(rate="0.125")
        entries = [make_entry(hours="1"), make_entry(hours="1")]

        bundle = self.service.summarize_project(project, entries)

        assert bundle.total_amount == Decimal("0.250")
        assert round_currency(bundle.total_amount) == Decimal("0.25")

    def test_build_billing_bundles_keeps_empty_projects(self):
        other = make_project(project_id=2, name="Audit", client="Globex", rate="95")
        entries = [make_entry(hours="2")]

        bundles = self.service.build_billing_bundles([self.project, other], entries)

        assert [b.project.id for b in bundles] == [1, 2]
        assert bundles[1].total_hours == Decimal("0")
        assert bundles[1].total_amount == Decimal("0")

    def test_portfolio_totals(self):
        other = make_project(project_id=2, name="Audit", client="Globex", rate="95")
        entries = [make_entry(hours="2"), make_entry(project_id=2, hours="1")]
        bundles = self.service.build_billing_bundles([self.project, other], entries)

        totals = self.service.portfolio_totals(bundles)

        assert totals.total_amount == Decimal("245")
        assert totals.total_hours == Decimal("3")
        assert totals.project_count == 2

    def test_search_bundles_matches_name_or_client(self):
        other = make_project(project_id=2, name="Audit", client="Globex")
        bundles = self.service.build_billing_bundles([self.project, other], [])

        assert len(self.service.search_bundles(bundles, "ACME")) == 1
        assert len(self.service.search_bundles(bundles, "audit")) == 1
        assert len(self.service.search_bundles(bundles, "")) == 2
        assert self.service.search_bundles(bundles, "initech") == []

    def test_tracking_totals_use_display_rate(self):
        entries = [
            make_entry(hours="2", user_rate="60"),
            make_entry(project_id=2, hours="1", project_rate="80"),
        ]

        totals = self.service.tracking_totals(entries)

        assert totals.total_hours == Decimal("3")
        assert totals.total_value == Decimal("200")
        assert round_currency(totals.average_rate) == Decimal("66.67")
        assert totals.project_count == 2

    def test_tracking_totals_without_entries(self):
        totals = self.service.tracking_totals([])

        assert totals.total_hours == Decimal("0")
        assert totals.average_rate == Decimal("0")
        assert totals.project_count == 0

    def test_project_board_totals(self):
        hours, value = self.service.project_board_totals(
            self.project, [make_entry(hours="2"), make_entry(project_id=9, hours="4")]
        )

        assert hours == Decimal("2")
        assert value == Decimal("150")


class TestTimeEntryFilter:
    """Filters are conjunctive and date bounds are inclusive."""

    def setup_method(self):
        self.entries = [
            make_entry(hours="1", entry_date=date(2024, 3, 1), description="Wireframes"),
            make_entry(hours="2", entry_date=date(2024, 3, 5), user_id="admin-1", user_name="Anna Admin"),
            make_entry(project_id=2, hours="3", entry_date=date(2024, 3, 10),
                       project_name="Audit", project_client="Globex"),
        ]

    def test_date_bounds_inclusive(self):
        entry_filter = TimeEntryFilter(date_from=date(2024, 3, 1), date_to=date(2024, 3, 5))

        assert len(entry_filter.apply(self.entries)) == 2

    def test_search_is_case_insensitive_over_text_fields(self):
        assert len(TimeEntryFilter(search="wire").apply(self.entries)) == 1
        assert len(TimeEntryFilter(search="GLOBEX").apply(self.entries)) == 1
        assert len(TimeEntryFilter(search="anna").apply(self.entries)) == 1

    def test_filters_combine(self):
        entry_filter = TimeEntryFilter(user_id="employee-1", project_id=1)

        result = entry_filter.apply(self.entries)

        assert [entry.description for entry in result] == ["Wireframes"]

    def test_empty_filter_keeps_everything(self):
        assert len(TimeEntryFilter().apply(self.entries)) == 3
