"""
Unit tests for time entry use cases and the time-tracking view.
"""

import pytest
from datetime import date
from decimal import Decimal

from pydantic import ValidationError as PydanticValidationError

from hourbook.application.dto.time_entry_dto import CreateTimeEntryRequestDTO, TimeTrackingFilterDTO
from hourbook.application.use_cases.time_entry_use_cases import (
    DeleteTimeEntryUseCase,
    ExportTimeTrackingCsvUseCase,
    GetTimeTrackingUseCase,
    LogTimeEntryUseCase,
)
from hourbook.domain.models.project import ProjectStatus
from hourbook.domain.services.access_policy import Caller
from fakes import Workspace


class TestLogTimeEntry:

    def setup_method(self):
        self.ws = Workspace()
        self.employee = Caller(Workspace.EMPLOYEE_ID, "employee")
        self.project = self.ws.add_project("Website", "Acme BV", rate="80")

    def log(self, **fields):
        request = CreateTimeEntryRequestDTO(**{
            "project_id": self.project.id,
            "description": "Wireframes",
            "hours": "1.5",
            "date": date(2024, 3, 5),
            **fields
        })
        use_case = LogTimeEntryUseCase(self.ws.entries, self.ws.projects)
        return use_case.set_caller(self.employee).execute(request)

    @pytest.mark.asyncio
    async def test_log_time_at_personal_rate(self):
        result = await self.log()

        assert result.success is True
        entry = result.data
        assert entry.hours == Decimal("1.5")
        assert entry.user_id == Workspace.EMPLOYEE_ID
        assert entry.user_name == "Erik Employee"
        assert entry.project_name == "Website"
        # Personal rate 60 beats the project's 80 in this view.
        assert entry.hourly_rate == Decimal("60")
        assert entry.value == Decimal("90.00")

    @pytest.mark.asyncio
    async def test_log_time_on_completed_project(self):
        self.ws.projects.update_status(self.project.id, ProjectStatus.COMPLETED)

        result = await self.log()

        assert result.success is True

    @pytest.mark.asyncio
    async def test_unknown_project(self):
        result = await self.log(project_id=999)

        assert result.error_code == "ENTITY_NOT_FOUND"
        assert self.ws.entries.entries == {}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("hours", ["0", "-2", "veel"])
    async def test_invalid_hours(self, hours):
        result = await self.log(hours=hours)

        assert result.error_code == "VALIDATION_ERROR"
        assert result.metadata["field"] == "hours"

    @pytest.mark.asyncio
    async def test_markup_is_stripped(self):
        result = await self.log(description="<script>x</script>Design & build")

        assert result.data.description == "xDesign & build"

    @pytest.mark.asyncio
    async def test_requires_caller(self):
        request = CreateTimeEntryRequestDTO(project_id=self.project.id, description="x", hours="1")

        result = await LogTimeEntryUseCase(self.ws.entries, self.ws.projects).execute(request)

        assert result.error_code == "AUTHORIZATION_ERROR"


class TestTimeTracking:

    def setup_method(self):
        self.ws = Workspace()
        self.admin = Caller(Workspace.ADMIN_ID, "admin")
        self.employee = Caller(Workspace.EMPLOYEE_ID, "employee")

        self.website = self.ws.add_project("Website", "Acme BV", rate="80")
        self.audit = self.ws.add_project("Audit", "Globex", created_by=Workspace.EMPLOYEE_ID)
        self.ws.log(self.website, "2", entry_date=date(2024, 3, 1))
        self.ws.log(self.audit, "1", entry_date=date(2024, 3, 8), description="Report")
        self.ws.log(self.website, "3", user_id=Workspace.ADMIN_ID, entry_date=date(2024, 3, 5))

    def view(self, caller, filters=None):
        use_case = GetTimeTrackingUseCase(self.ws.entries, self.ws.projects, self.ws.users)
        return use_case.set_caller(caller).execute(filters)

    @pytest.mark.asyncio
    async def test_employee_sees_own_entries(self):
        result = await self.view(self.employee)

        data = result.data
        assert {entry.user_id for entry in data.entries} == {Workspace.EMPLOYEE_ID}
        assert data.total_hours == Decimal("3")
        assert data.total_value == Decimal("180.00")
        assert data.average_rate == Decimal("60.00")
        assert data.is_admin is False
        assert data.users == []
        assert [p.name for p in data.projects] == ["Audit"]

    @pytest.mark.asyncio
    async def test_admin_sees_everything(self):
        result = await self.view(self.admin)

        data = result.data
        assert len(data.entries) == 3
        assert data.project_count == 2
        assert {user.full_name for user in data.users} == {"Anna Admin", "Erik Employee"}
        assert len(data.projects) == 2
        # Newest date first
        assert [entry.entry_date for entry in data.entries] == [
            date(2024, 3, 8), date(2024, 3, 5), date(2024, 3, 1)
        ]

    @pytest.mark.asyncio
    async def test_filters(self):
        filters = TimeTrackingFilterDTO(
            date_from=date(2024, 3, 1),
            date_to=date(2024, 3, 5),
            user_id=Workspace.ADMIN_ID
        )

        result = await self.view(self.admin, filters)

        assert [entry.hours for entry in result.data.entries] == [Decimal("3")]
        assert result.data.total_value == Decimal("240.00")

    @pytest.mark.asyncio
    async def test_employee_cannot_filter_into_other_rows(self):
        result = await self.view(self.employee, TimeTrackingFilterDTO(user_id=Workspace.ADMIN_ID))

        assert result.data.entries == []

    def test_date_range_must_be_ordered(self):
        with pytest.raises(PydanticValidationError):
            TimeTrackingFilterDTO(date_from=date(2024, 3, 5), date_to=date(2024, 3, 1))

    @pytest.mark.asyncio
    async def test_admin_export_has_employee_column(self):
        use_case = ExportTimeTrackingCsvUseCase(self.ws.entries, self.ws.projects, self.ws.users)

        result = await use_case.set_caller(self.admin).execute(TimeTrackingFilterDTO(search="globex"))

        lines = result.data.content.splitlines()
        assert lines[0].endswith(",Werknemer")
        assert len(lines) == 2
        assert result.data.filename.startswith("tijdregistratie_")

    @pytest.mark.asyncio
    async def test_employee_export(self):
        use_case = ExportTimeTrackingCsvUseCase(self.ws.entries, self.ws.projects, self.ws.users)

        result = await use_case.set_caller(self.employee).execute(None)

        lines = result.data.content.splitlines()
        assert "Werknemer" not in lines[0]
        assert len(lines) == 3


class TestDeleteTimeEntry:

    def setup_method(self):
        self.ws = Workspace()
        self.admin = Caller(Workspace.ADMIN_ID, "admin")
        self.employee = Caller(Workspace.EMPLOYEE_ID, "employee")
        project = self.ws.add_project()
        self.own = self.ws.log(project, "1")
        self.other = self.ws.log(project, "2", user_id=Workspace.ADMIN_ID)

    def delete(self, caller, entry_id):
        return DeleteTimeEntryUseCase(self.ws.entries).set_caller(caller).execute(entry_id)

    @pytest.mark.asyncio
    async def test_delete_own_entry(self):
        result = await self.delete(self.employee, self.own.id)

        assert result.success is True
        assert self.ws.entries.get_by_id(self.own.id) is None

    @pytest.mark.asyncio
    async def test_cannot_delete_someone_elses_entry(self):
        result = await self.delete(self.employee, self.other.id)

        assert result.error_code == "AUTHORIZATION_ERROR"
        assert self.ws.entries.get_by_id(self.other.id) is not None

    @pytest.mark.asyncio
    async def test_admin_deletes_any_entry(self):
        result = await self.delete(self.admin, self.own.id)

        assert result.success is True

    @pytest.mark.asyncio
    async def test_missing_entry(self):
        result = await self.delete(self.admin, 999)

        assert result.error_code == "ENTITY_NOT_FOUND"
