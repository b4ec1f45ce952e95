"""
Unit tests for the project status lifecycle.
"""

import pytest

from hourbook.domain.models.base import BusinessRuleViolation, ValidationError
from hourbook.domain.models.project import Project, ProjectStatus
from hourbook.domain.services.lifecycle_service import LifecycleService, TransitionPolicy


def make_project(status=ProjectStatus.ACTIVE, project_id=1):
    return Project(id=project_id, name="Website", client="Acme", created_by="u1", status=status)


class TestPermissivePolicy:

    def setup_method(self):
        self.service = LifecycleService()

    @pytest.mark.parametrize("current,target", [
        (ProjectStatus.ACTIVE, ProjectStatus.COMPLETED),
        (ProjectStatus.COMPLETED, ProjectStatus.ACTIVE),
        (ProjectStatus.TO_INVOICE, ProjectStatus.ACTIVE),
    ])
    def test_any_move_allowed(self, current, target):
        project = make_project(current)

        assert self.service.change_status(project, target) is True
        assert project.status == target

    def test_same_status_is_a_no_op(self):
        project = make_project(ProjectStatus.TO_INVOICE)

        assert self.service.change_status(project, "to-invoice") is False
        assert project.updated_at is None

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            self.service.change_status(make_project(), "archived")


class TestStrictPolicy:

    def setup_method(self):
        self.service = LifecycleService(TransitionPolicy.STRICT)

    def test_one_step_forward(self):
        project = make_project()

        self.service.change_status(project, ProjectStatus.TO_INVOICE)
        self.service.change_status(project, ProjectStatus.COMPLETED)

        assert project.status == ProjectStatus.COMPLETED

    def test_skipping_a_step_rejected(self):
        project = make_project()

        with pytest.raises(BusinessRuleViolation):
            self.service.change_status(project, ProjectStatus.COMPLETED)
        assert project.status == ProjectStatus.ACTIVE

    def test_moving_back_rejected(self):
        with pytest.raises(BusinessRuleViolation):
            self.service.change_status(make_project(ProjectStatus.COMPLETED), ProjectStatus.ACTIVE)

    def test_policy_from_string(self):
        assert LifecycleService("strict").policy == TransitionPolicy.STRICT


class TestInvoicing:

    def setup_method(self):
        self.service = LifecycleService()

    def test_mark_invoiced_completes_project(self):
        project = make_project(ProjectStatus.TO_INVOICE)

        assert self.service.mark_invoiced(project) is True
        assert project.status == ProjectStatus.COMPLETED

    def test_mark_invoiced_twice_is_a_no_op(self):
        project = make_project(ProjectStatus.COMPLETED)

        assert self.service.mark_invoiced(project) is False

    def test_active_project_cannot_be_invoiced(self):
        with pytest.raises(BusinessRuleViolation):
            self.service.mark_invoiced(make_project(ProjectStatus.ACTIVE))

    def test_billing_working_set(self):
        projects = [
            make_project(ProjectStatus.ACTIVE, 1),
            make_project(ProjectStatus.TO_INVOICE, 2),
            make_project(ProjectStatus.COMPLETED, 3),
        ]

        assert [p.id for p in LifecycleService.billing_working_set(projects)] == [2]

    def test_group_by_status_has_every_column(self):
        columns = LifecycleService.group_by_status([make_project(ProjectStatus.COMPLETED)])

        assert list(columns) == [ProjectStatus.ACTIVE, ProjectStatus.TO_INVOICE, ProjectStatus.COMPLETED]
        assert columns[ProjectStatus.ACTIVE] == []
        assert len(columns[ProjectStatus.COMPLETED]) == 1
