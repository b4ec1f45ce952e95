"""
Unit tests for project board use cases.
"""

import pytest
from unittest.mock import patch
from decimal import Decimal

from hourbook.application.cache import EntityCache
from hourbook.application.dto.project_dto import (
    CreateProjectRequestDTO,
    UpdateProjectRequestDTO,
    UpdateProjectStatusRequestDTO,
)
from hourbook.application.use_cases.project_use_cases import (
    ChangeProjectStatusUseCase,
    CreateProjectUseCase,
    DeleteProjectUseCase,
    GetProjectBoardUseCase,
    GetProjectDetailUseCase,
    UpdateProjectUseCase,
)
from hourbook.application.use_cases.time_entry_use_cases import PROJECT
from hourbook.domain.models.base import StoreError
from hourbook.domain.models.project import ProjectStatus
from hourbook.domain.services.access_policy import Caller
from hourbook.domain.services.lifecycle_service import LifecycleService, TransitionPolicy
from fakes import Workspace


class ProjectTestCase:

    def setup_method(self):
        self.ws = Workspace()
        self.admin = Caller(Workspace.ADMIN_ID, "admin")
        self.employee = Caller(Workspace.EMPLOYEE_ID, "employee")

        self.admins_project = self.ws.add_project("Website", "Acme BV")
        self.own_project = self.ws.add_project("Audit", "Globex", rate="95", created_by=Workspace.EMPLOYEE_ID)
        self.ws.log(self.admins_project, "2")
        self.ws.log(self.admins_project, "1", user_id=Workspace.ADMIN_ID)

    def build(self, use_case_class, caller, **kwargs):
        return use_case_class(self.ws.projects, self.ws.entries, **kwargs).set_caller(caller)


class TestProjectBoard(ProjectTestCase):

    @pytest.mark.asyncio
    async def test_columns_in_pipeline_order(self):
        self.ws.add_project("Shop", "Initech", status=ProjectStatus.COMPLETED)

        result = await self.build(GetProjectBoardUseCase, self.employee).execute()

        columns = result.data.columns
        assert [c.status for c in columns] == ["active", "to-invoice", "completed"]
        assert [c.label for c in columns] == ["Lopende Projecten", "Te Factureren", "Afgerond"]
        assert len(columns[0].projects) == 2
        assert columns[1].projects == []

    @pytest.mark.asyncio
    async def test_employee_sees_every_project_but_edits_own(self):
        result = await self.build(GetProjectBoardUseCase, self.employee).execute()

        cards = {card.name: card for card in result.data.columns[0].projects}
        assert cards["Website"].can_edit is False
        assert cards["Audit"].can_edit is True
        assert cards["Website"].creator_name == "Anna Admin"

    @pytest.mark.asyncio
    async def test_card_totals_at_project_rate(self):
        result = await self.build(GetProjectBoardUseCase, self.admin).execute()

        card = next(c for c in result.data.columns[0].projects if c.name == "Website")
        assert card.total_hours == Decimal("3")
        assert card.total_value == Decimal("225.00")
        assert card.can_edit is True

    @pytest.mark.asyncio
    async def test_detail(self):
        result = await self.build(GetProjectDetailUseCase, self.employee).execute(self.admins_project.id)

        assert result.data.project.name == "Website"
        assert len(result.data.time_entries) == 2

    @pytest.mark.asyncio
    async def test_detail_unknown_project(self):
        result = await self.build(GetProjectDetailUseCase, self.employee).execute(999)

        assert result.error_code == "ENTITY_NOT_FOUND"


class TestCreateProject(ProjectTestCase):

    @pytest.mark.asyncio
    async def test_create_with_default_rate(self):
        request = CreateProjectRequestDTO(name="Webshop", client="Initech")

        result = await self.build(CreateProjectUseCase, self.employee).execute(request)

        project = result.data
        assert project.status == "active"
        assert project.hourly_rate == Decimal("75")
        assert project.created_by == Workspace.EMPLOYEE_ID
        assert project.creator_name == "Erik Employee"
        assert project.can_edit is True

    @pytest.mark.asyncio
    async def test_create_with_rate(self):
        request = CreateProjectRequestDTO(name="Webshop", client="Initech", hourly_rate="110")

        result = await self.build(CreateProjectUseCase, self.admin).execute(request)

        assert result.data.hourly_rate == Decimal("110")

    @pytest.mark.asyncio
    async def test_name_that_is_only_markup(self):
        request = CreateProjectRequestDTO(name="<b></b>", client="Initech")

        result = await self.build(CreateProjectUseCase, self.admin).execute(request)

        assert result.error_code == "VALIDATION_ERROR"
        assert result.metadata["field"] == "name"
        assert len(self.ws.projects.projects) == 2


class TestUpdateProject(ProjectTestCase):

    def update(self, caller, project, **fields):
        use_case = self.build(UpdateProjectUseCase, caller).for_project(project.id)
        return use_case.execute(UpdateProjectRequestDTO(**fields))

    @pytest.mark.asyncio
    async def test_creator_updates_partially(self):
        result = await self.update(self.employee, self.own_project, hourly_rate="99")

        assert result.data.hourly_rate == Decimal("99")
        assert result.data.name == "Audit"

    @pytest.mark.asyncio
    async def test_non_creator_employee_denied(self):
        result = await self.update(self.employee, self.admins_project, name="Hijacked")

        assert result.error_code == "AUTHORIZATION_ERROR"
        assert self.ws.projects.get_by_id(self.admins_project.id).name == "Website"

    @pytest.mark.asyncio
    async def test_admin_updates_any_project(self):
        result = await self.update(self.admin, self.own_project, client="Globex Corp")

        assert result.data.client == "Globex Corp"

    @pytest.mark.asyncio
    async def test_invalid_rate_rejected(self):
        result = await self.update(self.admin, self.own_project, name="Renamed", hourly_rate="0")

        assert result.error_code == "VALIDATION_ERROR"
        assert self.ws.projects.get_by_id(self.own_project.id).name == "Audit"


class TestChangeProjectStatus(ProjectTestCase):

    def move(self, caller, project, status, policy=TransitionPolicy.PERMISSIVE):
        use_case = self.build(
            ChangeProjectStatusUseCase,
            caller,
            lifecycle_service=LifecycleService(policy)
        ).for_project(project.id)
        return use_case.execute(UpdateProjectStatusRequestDTO(status=status))

    @pytest.mark.asyncio
    async def test_creator_moves_project(self):
        result = await self.move(self.employee, self.own_project, "to-invoice")

        assert result.data.status == "to-invoice"
        assert result.data.status_label == "Te Factureren"
        assert self.ws.projects.get_by_id(self.own_project.id).status == ProjectStatus.TO_INVOICE

    @pytest.mark.asyncio
    async def test_non_creator_cannot_move(self):
        result = await self.move(self.employee, self.admins_project, "completed")

        assert result.error_code == "AUTHORIZATION_ERROR"
        assert self.ws.projects.status_writes == 0

    @pytest.mark.asyncio
    async def test_same_status_writes_nothing(self):
        result = await self.move(self.admin, self.admins_project, "active")

        assert result.success is True
        assert self.ws.projects.status_writes == 0

    @pytest.mark.asyncio
    async def test_strict_policy_rejects_skipping(self):
        result = await self.move(self.admin, self.admins_project, "completed", TransitionPolicy.STRICT)

        assert result.error_code == "BUSINESS_RULE_VIOLATION"

    @pytest.mark.asyncio
    async def test_unknown_status(self):
        result = await self.move(self.admin, self.admins_project, "archived")

        assert result.error_code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_failed_write_keeps_cached_status(self):
        cache = EntityCache()
        cached = cache.get(PROJECT, self.own_project.id, self.ws.projects.get_by_id)
        use_case = self.build(ChangeProjectStatusUseCase, self.employee, cache=cache).for_project(self.own_project.id)

        with patch.object(self.ws.projects, "update_status", side_effect=StoreError("projects.update_status")):
            result = await use_case.execute(UpdateProjectStatusRequestDTO(status="to-invoice"))

        assert result.error_code == "STORE_ERROR"
        assert cached.status == ProjectStatus.ACTIVE
        reread = cache.get(PROJECT, self.own_project.id, self.ws.projects.get_by_id)
        assert reread.status == ProjectStatus.ACTIVE


class TestDeleteProject(ProjectTestCase):

    @pytest.mark.asyncio
    async def test_delete_removes_time_entries(self):
        result = await self.build(DeleteProjectUseCase, self.admin).execute(self.admins_project.id)

        assert result.data.removed_time_entries == 2
        assert self.ws.projects.get_by_id(self.admins_project.id) is None
        assert self.ws.entries.list_by_project(self.admins_project.id) == []

    @pytest.mark.asyncio
    async def test_non_creator_cannot_delete(self):
        result = await self.build(DeleteProjectUseCase, self.employee).execute(self.admins_project.id)

        assert result.error_code == "AUTHORIZATION_ERROR"
        assert self.ws.projects.get_by_id(self.admins_project.id) is not None

    @pytest.mark.asyncio
    async def test_creator_deletes_own_project(self):
        result = await self.build(DeleteProjectUseCase, self.employee).execute(self.own_project.id)

        assert result.success is True
        assert result.data.removed_time_entries == 0
