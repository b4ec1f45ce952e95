"""
Project status lifecycle.
Applies status changes and decides which projects are eligible for invoicing.
"""

from enum import Enum
from typing import Dict, Iterable, List

from hourbook.domain.models.base import BusinessRuleViolation
from hourbook.domain.models.project import Project, ProjectStatus, PIPELINE


class TransitionPolicy(str, Enum):
    """
    PERMISSIVE allows writing any status (a board drop into any column).
    STRICT only allows one step forward along active -> to-invoice -> completed.
    """
    PERMISSIVE = "permissive"
    STRICT = "strict"


class LifecycleService:
    """Domain service for project status changes."""

    def __init__(self, policy: TransitionPolicy = TransitionPolicy.PERMISSIVE):
        self.policy = TransitionPolicy(policy)

    def is_allowed(self, current: ProjectStatus, target: ProjectStatus) -> bool:
        if current == target or self.policy == TransitionPolicy.PERMISSIVE:
            return True
        return PIPELINE.index(target) == PIPELINE.index(current) + 1

    def change_status(self, project: Project, target) -> bool:
        """
        Set the project status in memory.
        Returns False when the project already has that status; the caller persists otherwise.
        """
        target = ProjectStatus.parse(target)
        current = project.status

        if current == target:
            return False

        if not self.is_allowed(current, target):
            raise BusinessRuleViolation(
                f"Project status cannot change from '{current.value}' to '{target.value}'"
            )

        project.status = target
        project.mark_as_updated()
        return True

    def mark_invoiced(self, project: Project) -> bool:
        """Complete a project after its invoice was sent."""
        if project.status == ProjectStatus.COMPLETED:
            return False
        if project.status != ProjectStatus.TO_INVOICE:
            raise BusinessRuleViolation("Only projects waiting for an invoice can be invoiced")
        project.status = ProjectStatus.COMPLETED
        project.mark_as_updated()
        return True

    @staticmethod
    def billing_working_set(projects: Iterable[Project]) -> List[Project]:
        """Projects shown in the billing view: status to-invoice only."""
        return [project for project in projects if project.is_invoiceable]

    @staticmethod
    def group_by_status(projects: Iterable[Project]) -> Dict[ProjectStatus, List[Project]]:
        """Board columns in pipeline order; every column is present even when empty."""
        columns: Dict[ProjectStatus, List[Project]] = {status: [] for status in PIPELINE}
        for project in projects:
            columns[project.status].append(project)
        return columns
