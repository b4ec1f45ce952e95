"""
Time tracking router.
Handles logging and deleting time, the time-tracking view and its CSV export.
"""

from typing import Annotated
from fastapi import APIRouter, Depends, Query, Response, status

from hourbook.application.cache import EntityCache
from hourbook.application.dto.time_entry_dto import (
    CreateTimeEntryRequestDTO,
    TimeEntryDeletedResponseDTO,
    TimeEntryResponseDTO,
    TimeTrackingFilterDTO,
    TimeTrackingResponseDTO,
)
from hourbook.application.use_cases.time_entry_use_cases import (
    DeleteTimeEntryUseCase,
    ExportTimeTrackingCsvUseCase,
    GetTimeTrackingUseCase,
    LogTimeEntryUseCase,
)
from hourbook.domain.services.access_policy import Caller
from hourbook.domain.services.billing_service import BillingService
from hourbook.domain.services.export_service import ExportService
from hourbook.infrastructure.auth.dependencies import (
    get_billing_service,
    get_current_caller,
    get_entity_cache,
    get_export_service,
    get_project_repository,
    get_time_entry_repository,
    get_user_repository,
)
from hourbook.infrastructure.repositories import (
    SQLAlchemyProjectRepository,
    SQLAlchemyTimeEntryRepository,
    SQLAlchemyUserRepository,
)
from hourbook.infrastructure.web.middleware.error_handler import unwrap
from hourbook.infrastructure.web.responses import csv_response


router = APIRouter()

CurrentCaller = Annotated[Caller, Depends(get_current_caller)]
TimeEntryRepository = Annotated[SQLAlchemyTimeEntryRepository, Depends(get_time_entry_repository)]
ProjectRepository = Annotated[SQLAlchemyProjectRepository, Depends(get_project_repository)]
UserRepository = Annotated[SQLAlchemyUserRepository, Depends(get_user_repository)]
Cache = Annotated[EntityCache, Depends(get_entity_cache)]
Filters = Annotated[TimeTrackingFilterDTO, Query()]


@router.get("", response_model=TimeTrackingResponseDTO)
async def get_time_tracking(
    filters: Filters,
    caller: CurrentCaller,
    time_entries: TimeEntryRepository,
    projects: ProjectRepository,
    users: UserRepository,
    billing_service: Annotated[BillingService, Depends(get_billing_service)],
    cache: Cache
):
    """
    Time-tracking view. Admins see every entry, employees only their own.

    - **date_from** / **date_to**: Inclusive date range
    - **search**: Matches description, project name or client
    - **user_id**: Employee filter (admins)
    - **project_id**: Project filter
    """
    use_case = GetTimeTrackingUseCase(
        time_entries, projects, users,
        billing_service=billing_service,
        cache=cache
    ).set_caller(caller)
    return unwrap(await use_case.execute(filters))


@router.get("/export", response_class=Response)
async def export_time_tracking(
    filters: Filters,
    caller: CurrentCaller,
    time_entries: TimeEntryRepository,
    projects: ProjectRepository,
    users: UserRepository,
    export_service: Annotated[ExportService, Depends(get_export_service)],
    cache: Cache
):
    """CSV of the filtered rows. Admin exports include the employee column."""
    use_case = ExportTimeTrackingCsvUseCase(
        time_entries, projects, users,
        export_service=export_service,
        cache=cache
    ).set_caller(caller)
    return csv_response(unwrap(await use_case.execute(filters)))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TimeEntryResponseDTO)
async def log_time(
    request: CreateTimeEntryRequestDTO,
    caller: CurrentCaller,
    time_entries: TimeEntryRepository,
    projects: ProjectRepository,
    cache: Cache
):
    """
    Log hours on a project.

    - **project_id**: Project ID (required)
    - **description**: What was done (required)
    - **hours**: Positive number, fractions allowed
    - **date**: Work date, defaults to today
    """
    use_case = LogTimeEntryUseCase(time_entries, projects, cache).set_caller(caller)
    return unwrap(await use_case.execute(request))


@router.delete("/{entry_id}", response_model=TimeEntryDeletedResponseDTO)
async def delete_time_entry(
    entry_id: int,
    caller: CurrentCaller,
    time_entries: TimeEntryRepository,
    cache: Cache
):
    """Delete a time entry. Allowed for the person who logged it and for admins."""
    use_case = DeleteTimeEntryUseCase(time_entries, cache).set_caller(caller)
    return unwrap(await use_case.execute(entry_id))
