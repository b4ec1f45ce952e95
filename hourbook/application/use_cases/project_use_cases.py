"""
Project use cases for the application layer.
Implements business logic for the project board and project mutations.
"""

import logging
from typing import Dict, List, Optional

from hourbook.application.cache import EntityCache
from hourbook.application.dto.project_dto import (
    BoardColumnDTO,
    CreateProjectRequestDTO,
    ProjectBoardResponseDTO,
    ProjectDeletedResponseDTO,
    ProjectDetailResponseDTO,
    ProjectResponseDTO,
    UpdateProjectRequestDTO,
    UpdateProjectStatusRequestDTO,
)
from hourbook.application.use_cases.base_use_case import (
    AuthorizedUseCase,
    CreateUseCase,
    DeleteUseCase,
    QueryUseCase,
    UpdateUseCase,
)
from hourbook.application.use_cases.time_entry_use_cases import (
    PROJECT,
    TIME_ENTRY,
    time_entry_to_dto,
)
from hourbook.domain.events.project_events import (
    ProjectCreated,
    ProjectDeleted,
    ProjectStatusChanged,
    ProjectUpdated,
)
from hourbook.domain.models.base import EntityNotFoundError
from hourbook.domain.models.project import Project
from hourbook.domain.models.time_entry import TimeEntry
from hourbook.domain.repositories.project_repository import ProjectRepository
from hourbook.domain.repositories.time_entry_repository import TimeEntryRepository
from hourbook.domain.services.access_policy import Caller, View, can_edit_project
from hourbook.domain.services.billing_service import BillingService, round_currency
from hourbook.domain.services.lifecycle_service import LifecycleService

logger = logging.getLogger(__name__)


def project_to_dto(
    project: Project,
    caller: Optional[Caller],
    entries: Optional[List[TimeEntry]] = None,
    billing_service: Optional[BillingService] = None
) -> ProjectResponseDTO:
    billing_service = billing_service or BillingService()
    hours, value = billing_service.project_board_totals(project, entries or [])
    return ProjectResponseDTO(
        id=project.id,
        name=project.name,
        client=project.client,
        status=project.status.value,
        status_label=project.status.label,
        hourly_rate=project.hourly_rate,
        created_by=project.created_by,
        creator_name=project.creator_name,
        can_edit=can_edit_project(caller, project),
        total_hours=hours,
        total_value=round_currency(value),
        created_at=project.created_at,
        updated_at=project.updated_at
    )


class _ProjectUseCase(AuthorizedUseCase):
    """Repository wiring and the load-or-404 step shared by project use cases."""

    def __init__(
        self,
        project_repository: ProjectRepository,
        time_entry_repository: TimeEntryRepository,
        billing_service: Optional[BillingService] = None,
        cache: Optional[EntityCache] = None
    ):
        super().__init__()
        self.project_repository = project_repository
        self.time_entry_repository = time_entry_repository
        self.billing_service = billing_service or BillingService()
        self.cache = cache or EntityCache()

    def _load_project(self, project_id: int) -> Project:
        project = self.cache.get(PROJECT, project_id, self.project_repository.get_by_id)
        if not project:
            raise EntityNotFoundError("Project", project_id)
        return project

    def _refetch(self, project_id: int) -> ProjectResponseDTO:
        """Invalidate, read the project and its entries again, and present them."""
        project = self.cache.refetch(PROJECT, project_id, self.project_repository.get_by_id)
        if not project:
            raise EntityNotFoundError("Project", project_id)
        entries = self.time_entry_repository.list_by_project(project_id)
        return project_to_dto(project, self.caller, entries, self.billing_service)


class GetProjectBoardUseCase(_ProjectUseCase, QueryUseCase[None, ProjectBoardResponseDTO]):
    """
    Project board: every project for every role, grouped by status.
    can_edit tells the caller which cards they may move, edit or delete.
    """

    async def _check_authorization(self, request) -> None:
        self._require(View.BOARD)

    async def _execute_business_logic(self, request) -> ProjectBoardResponseDTO:
        projects = self.cache.get_list(PROJECT, "all", self.project_repository.list_all)
        entries = self.cache.get_list(
            TIME_ENTRY,
            "all",
            self.time_entry_repository.list_all
        )

        by_project: Dict[int, List[TimeEntry]] = {}
        for entry in entries:
            by_project.setdefault(entry.project_id, []).append(entry)

        columns = LifecycleService.group_by_status(projects)
        return ProjectBoardResponseDTO(columns=[
            BoardColumnDTO(
                status=status.value,
                label=status.label,
                projects=[
                    project_to_dto(project, self.caller, by_project.get(project.id, []), self.billing_service)
                    for project in column
                ]
            )
            for status, column in columns.items()
        ])


class GetProjectDetailUseCase(_ProjectUseCase, QueryUseCase[int, ProjectDetailResponseDTO]):
    """Use case for a single project with its time entries."""

    async def _check_authorization(self, request) -> None:
        self._require(View.BOARD)

    async def _execute_business_logic(self, project_id: int) -> ProjectDetailResponseDTO:
        project = self._load_project(project_id)
        entries = self.time_entry_repository.list_by_project(project_id)
        return ProjectDetailResponseDTO(
            project=project_to_dto(project, self.caller, entries, self.billing_service),
            time_entries=[time_entry_to_dto(entry) for entry in entries]
        )


class CreateProjectUseCase(_ProjectUseCase, CreateUseCase[CreateProjectRequestDTO, ProjectResponseDTO]):
    """Use case for creating a new project. Any authenticated user may create one."""

    async def _check_authorization(self, request) -> None:
        self._require(View.BOARD)

    async def _execute_command_logic(self, request: CreateProjectRequestDTO) -> ProjectResponseDTO:
        project = Project(
            name=request.name,
            client=request.client,
            created_by=self.current_user_id,
            hourly_rate=(
                request.hourly_rate if request.hourly_rate is not None
                else self.billing_service.fallback_project_rate
            )
        )

        saved = self.project_repository.save(project)

        self._record_event(ProjectCreated(
            project_id=saved.id,
            user_id=self.current_user_id,
            project_name=saved.name,
            client=saved.client
        ))

        return self._refetch(saved.id)


class UpdateProjectUseCase(_ProjectUseCase, UpdateUseCase[UpdateProjectRequestDTO, ProjectResponseDTO]):
    """Use case for editing name, client and rate. Creator or admin only."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.project_id: Optional[int] = None

    def for_project(self, project_id: int) -> "UpdateProjectUseCase":
        self.project_id = project_id
        return self

    async def _execute_command_logic(self, request: UpdateProjectRequestDTO) -> ProjectResponseDTO:
        project = self._load_project(self.project_id)
        self._require(View.BOARD, owner_id=project.created_by, write=True)

        changes = request.model_dump(exclude_none=True)
        if not changes:
            return self._refetch(project.id)

        project.update_details(
            name=request.name,
            client=request.client,
            hourly_rate=request.hourly_rate
        )
        self.project_repository.save(project)

        self._record_event(ProjectUpdated(
            project_id=project.id,
            user_id=self.current_user_id,
            changes=", ".join(sorted(changes))
        ))

        return self._refetch(project.id)


class ChangeProjectStatusUseCase(_ProjectUseCase, UpdateUseCase[UpdateProjectStatusRequestDTO, ProjectResponseDTO]):
    """
    Use case for moving a project to another board column.
    Creator or admin only; which moves are allowed depends on the transition policy.
    """

    def __init__(self, *args, lifecycle_service: Optional[LifecycleService] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.lifecycle_service = lifecycle_service or LifecycleService()
        self.project_id: Optional[int] = None

    def for_project(self, project_id: int) -> "ChangeProjectStatusUseCase":
        self.project_id = project_id
        return self

    async def _execute_command_logic(self, request: UpdateProjectStatusRequestDTO) -> ProjectResponseDTO:
        project = self._load_project(self.project_id)
        self._require(View.BOARD, owner_id=project.created_by, write=True)

        old_status = project.status
        if not self.lifecycle_service.change_status(project, request.status):
            return self._refetch(project.id)

        # Status-only write; the cached project keeps its stored status when it fails.
        try:
            saved = self.project_repository.update_status(project.id, project.status)
        except Exception:
            project.status = old_status
            raise
        finally:
            self.cache.invalidate(PROJECT, project.id)
        if not saved:
            raise EntityNotFoundError("Project", project.id)

        self._record_event(ProjectStatusChanged(
            project_id=project.id,
            user_id=self.current_user_id,
            old_status=old_status.value,
            new_status=project.status.value
        ))

        return self._refetch(project.id)


class DeleteProjectUseCase(_ProjectUseCase, DeleteUseCase[int, ProjectDeletedResponseDTO]):
    """Use case for deleting a project together with its time entries. Creator or admin only."""

    async def _execute_command_logic(self, project_id: int) -> ProjectDeletedResponseDTO:
        project = self._load_project(project_id)
        self._require(View.BOARD, owner_id=project.created_by, write=True)

        removed = self.project_repository.delete(project_id)
        self.cache.invalidate(PROJECT)
        self.cache.invalidate(TIME_ENTRY)

        logger.info(f"Deleted project {project_id} with {removed} time entries")
        self._record_event(ProjectDeleted(
            project_id=project_id,
            user_id=self.current_user_id,
            removed_time_entries=removed
        ))

        return ProjectDeletedResponseDTO(id=project_id, removed_time_entries=removed)
