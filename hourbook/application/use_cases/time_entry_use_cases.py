"""
Time entry use cases for the application layer.
Implements logging and deleting time, and the role-scoped time-tracking view.
"""

from datetime import date
from typing import Iterable, List, Optional

from hourbook.application.cache import EntityCache
from hourbook.application.dto.billing_dto import CsvExportDTO
from hourbook.application.dto.time_entry_dto import (
    CreateTimeEntryRequestDTO,
    ProjectOptionDTO,
    TimeEntryDeletedResponseDTO,
    TimeEntryResponseDTO,
    TimeTrackingFilterDTO,
    TimeTrackingResponseDTO,
    UserOptionDTO,
)
from hourbook.application.use_cases.base_use_case import (
    AuthorizedUseCase,
    CreateUseCase,
    DeleteUseCase,
    QueryUseCase,
)
from hourbook.domain.events.time_entry_events import TimeEntryDeleted, TimeEntryLogged
from hourbook.domain.models.base import EntityNotFoundError
from hourbook.domain.models.time_entry import TimeEntry
from hourbook.domain.repositories.project_repository import ProjectRepository
from hourbook.domain.repositories.time_entry_repository import TimeEntryRepository
from hourbook.domain.repositories.user_repository import UserRepositoryInterface
from hourbook.domain.services.access_policy import (
    View,
    scope_projects_for_tracking,
    scope_time_entries,
)
from hourbook.domain.services.billing_service import (
    BillingService,
    TimeEntryFilter,
    entry_display_rate,
    round_currency,
)
from hourbook.domain.services.export_service import ExportService

PROJECT = "project"
TIME_ENTRY = "time_entry"


def time_entry_to_dto(entry: TimeEntry) -> TimeEntryResponseDTO:
    """Entry as shown in time-tracking tables, valued at the display rate."""
    rate = entry_display_rate(entry)
    return TimeEntryResponseDTO(
        id=entry.id,
        project_id=entry.project_id,
        project_name=entry.project_name,
        project_client=entry.project_client,
        user_id=entry.user_id,
        user_name=entry.logger_name,
        description=entry.description,
        hours=entry.hours,
        entry_date=entry.entry_date,
        hourly_rate=rate,
        value=round_currency(entry.hours * rate),
        created_at=entry.created_at
    )


class LogTimeEntryUseCase(AuthorizedUseCase, CreateUseCase[CreateTimeEntryRequestDTO, TimeEntryResponseDTO]):
    """
    Use case for logging time.
    Any authenticated user may log against any project on the board, completed ones included.
    """

    def __init__(
        self,
        time_entry_repository: TimeEntryRepository,
        project_repository: ProjectRepository,
        cache: Optional[EntityCache] = None
    ):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.project_repository = project_repository
        self.cache = cache or EntityCache()

    async def _check_authorization(self, request: CreateTimeEntryRequestDTO) -> None:
        self._require(View.BOARD)

    async def _execute_command_logic(self, request: CreateTimeEntryRequestDTO) -> TimeEntryResponseDTO:
        entry = TimeEntry(
            project_id=request.project_id,
            user_id=self.current_user_id,
            description=request.description,
            hours=request.hours,
            entry_date=request.entry_date or date.today()
        )

        project = self.cache.get(PROJECT, request.project_id, self.project_repository.get_by_id)
        if not project:
            raise EntityNotFoundError("Project", request.project_id)

        saved = self.time_entry_repository.add(entry)
        self.cache.invalidate(TIME_ENTRY)
        fresh = self.cache.get(TIME_ENTRY, saved.id, self.time_entry_repository.get_by_id)

        self._record_event(TimeEntryLogged(
            entry_id=fresh.id,
            project_id=fresh.project_id,
            user_id=self.current_user_id,
            hours=str(fresh.hours)
        ))

        return time_entry_to_dto(fresh)


class DeleteTimeEntryUseCase(AuthorizedUseCase, DeleteUseCase[int, TimeEntryDeletedResponseDTO]):
    """Use case for deleting a time entry. Allowed for the person who logged it and for admins."""

    def __init__(self, time_entry_repository: TimeEntryRepository, cache: Optional[EntityCache] = None):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.cache = cache or EntityCache()

    async def _execute_command_logic(self, entry_id: int) -> TimeEntryDeletedResponseDTO:
        entry = self.cache.get(TIME_ENTRY, entry_id, self.time_entry_repository.get_by_id)
        if not entry:
            raise EntityNotFoundError("TimeEntry", entry_id)

        self._require(View.TIME_TRACKING, owner_id=entry.user_id, write=True)

        self.time_entry_repository.delete(entry_id)
        self.cache.invalidate(TIME_ENTRY)

        self._record_event(TimeEntryDeleted(
            entry_id=entry_id,
            project_id=entry.project_id,
            user_id=self.current_user_id
        ))

        return TimeEntryDeletedResponseDTO(id=entry_id, project_id=entry.project_id)


class _TimeTrackingQuery(AuthorizedUseCase, QueryUseCase):
    """Scoping and filtering shared by the time-tracking view and its CSV export."""

    def __init__(
        self,
        time_entry_repository: TimeEntryRepository,
        project_repository: ProjectRepository,
        user_repository: UserRepositoryInterface,
        billing_service: Optional[BillingService] = None,
        cache: Optional[EntityCache] = None
    ):
        super().__init__()
        self.time_entry_repository = time_entry_repository
        self.project_repository = project_repository
        self.user_repository = user_repository
        self.billing_service = billing_service or BillingService()
        self.cache = cache or EntityCache()

    def _scoped_entries(self) -> List[TimeEntry]:
        if self.caller.is_admin:
            entries = self.cache.get_list(TIME_ENTRY, "all", self.time_entry_repository.list_all)
        else:
            entries = self.cache.get_list(
                TIME_ENTRY,
                ("user", self.current_user_id),
                lambda: self.time_entry_repository.list_by_user(self.current_user_id)
            )
        # Store query narrows the rows; the policy decides.
        return scope_time_entries(self.caller, entries)

    def _filtered_entries(self, request: Optional[TimeTrackingFilterDTO]) -> List[TimeEntry]:
        entries = self._scoped_entries()
        if request is None:
            return entries
        entry_filter = TimeEntryFilter(
            date_from=request.date_from,
            date_to=request.date_to,
            search=request.search,
            user_id=request.user_id,
            project_id=request.project_id
        )
        return entry_filter.apply(entries)


class GetTimeTrackingUseCase(_TimeTrackingQuery):
    """Time-tracking view: admins see every entry, employees only their own."""

    async def _execute_business_logic(self, request: Optional[TimeTrackingFilterDTO]) -> TimeTrackingResponseDTO:
        entries = self._filtered_entries(request)
        totals = self.billing_service.tracking_totals(entries)

        projects = scope_projects_for_tracking(
            self.caller,
            self.cache.get_list(PROJECT, "all", self.project_repository.list_all)
        )

        users: Iterable = []
        if self.caller.is_admin:
            users = self.user_repository.list_all()

        return TimeTrackingResponseDTO(
            entries=[time_entry_to_dto(entry) for entry in entries],
            total_hours=totals.total_hours,
            total_value=round_currency(totals.total_value),
            average_rate=round_currency(totals.average_rate),
            project_count=totals.project_count,
            is_admin=self.caller.is_admin,
            users=[UserOptionDTO(id=user.id, full_name=user.full_name) for user in users],
            projects=[
                ProjectOptionDTO(id=project.id, name=project.name, client=project.client)
                for project in projects
            ]
        )


class ExportTimeTrackingCsvUseCase(_TimeTrackingQuery):
    """CSV of the filtered time-tracking rows. Admin exports carry an employee column."""

    def __init__(self, *args, export_service: Optional[ExportService] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.export_service = export_service or ExportService()

    async def _execute_business_logic(self, request: Optional[TimeTrackingFilterDTO]) -> CsvExportDTO:
        entries = self._filtered_entries(request)
        return CsvExportDTO(
            filename=self.export_service.tracking_filename(),
            content=self.export_service.tracking_csv(entries, include_employee=self.caller.is_admin)
        )
