"""
Project board router.
Handles the board, project details and project mutations.
"""

from typing import Annotated
from fastapi import APIRouter, Depends, status

from hourbook.application.cache import EntityCache
from hourbook.application.dto.project_dto import (
    CreateProjectRequestDTO,
    ProjectBoardResponseDTO,
    ProjectDeletedResponseDTO,
    ProjectDetailResponseDTO,
    ProjectResponseDTO,
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
from hourbook.domain.services.access_policy import Caller
from hourbook.domain.services.billing_service import BillingService
from hourbook.domain.services.lifecycle_service import LifecycleService
from hourbook.infrastructure.auth.dependencies import (
    get_billing_service,
    get_current_caller,
    get_entity_cache,
    get_lifecycle_service,
    get_project_repository,
    get_time_entry_repository,
)
from hourbook.infrastructure.repositories import (
    SQLAlchemyProjectRepository,
    SQLAlchemyTimeEntryRepository,
)
from hourbook.infrastructure.web.middleware.error_handler import unwrap


router = APIRouter()

CurrentCaller = Annotated[Caller, Depends(get_current_caller)]


class ProjectUseCaseDeps:
    """Repositories and services every project endpoint needs."""

    def __init__(
        self,
        projects: Annotated[SQLAlchemyProjectRepository, Depends(get_project_repository)],
        time_entries: Annotated[SQLAlchemyTimeEntryRepository, Depends(get_time_entry_repository)],
        billing_service: Annotated[BillingService, Depends(get_billing_service)],
        cache: Annotated[EntityCache, Depends(get_entity_cache)]
    ):
        self.projects = projects
        self.time_entries = time_entries
        self.billing_service = billing_service
        self.cache = cache

    def build(self, use_case_class, **kwargs):
        return use_case_class(
            self.projects,
            self.time_entries,
            billing_service=self.billing_service,
            cache=self.cache,
            **kwargs
        )


Deps = Annotated[ProjectUseCaseDeps, Depends()]


@router.get("", response_model=ProjectBoardResponseDTO)
async def get_board(caller: CurrentCaller, deps: Deps):
    """
    Project board with one column per status.
    Every user sees every project; can_edit marks the cards the caller may change.
    """
    use_case = deps.build(GetProjectBoardUseCase).set_caller(caller)
    return unwrap(await use_case.execute())


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ProjectResponseDTO)
async def create_project(request: CreateProjectRequestDTO, caller: CurrentCaller, deps: Deps):
    """
    Create a new project in the active column.

    - **name**: Project name (required)
    - **client**: Client name (required)
    - **hourly_rate**: Hourly rate, defaults to the configured project rate
    """
    use_case = deps.build(CreateProjectUseCase).set_caller(caller)
    return unwrap(await use_case.execute(request))


@router.get("/{project_id}", response_model=ProjectDetailResponseDTO)
async def get_project(project_id: int, caller: CurrentCaller, deps: Deps):
    use_case = deps.build(GetProjectDetailUseCase).set_caller(caller)
    return unwrap(await use_case.execute(project_id))


@router.patch("/{project_id}", response_model=ProjectResponseDTO)
async def update_project(
    project_id: int,
    request: UpdateProjectRequestDTO,
    caller: CurrentCaller,
    deps: Deps
):
    """
    Edit a project. Creator or admin only.

    - **name**: Updated project name
    - **client**: Updated client name
    - **hourly_rate**: Updated hourly rate
    """
    use_case = deps.build(UpdateProjectUseCase).set_caller(caller)
    return unwrap(await use_case.for_project(project_id).execute(request))


@router.patch("/{project_id}/status", response_model=ProjectResponseDTO)
async def change_status(
    project_id: int,
    request: UpdateProjectStatusRequestDTO,
    caller: CurrentCaller,
    deps: Deps,
    lifecycle_service: Annotated[LifecycleService, Depends(get_lifecycle_service)]
):
    """
    Move a project to another column. Creator or admin only.

    - **status**: active, to-invoice or completed
    """
    use_case = deps.build(ChangeProjectStatusUseCase, lifecycle_service=lifecycle_service).set_caller(caller)
    return unwrap(await use_case.for_project(project_id).execute(request))


@router.delete("/{project_id}", response_model=ProjectDeletedResponseDTO)
async def delete_project(project_id: int, caller: CurrentCaller, deps: Deps):
    """Delete a project and all of its time entries. Creator or admin only."""
    use_case = deps.build(DeleteProjectUseCase).set_caller(caller)
    return unwrap(await use_case.execute(project_id))
