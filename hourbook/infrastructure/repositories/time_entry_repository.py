"""
Time entry repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from sqlalchemy.orm import joinedload

from hourbook.domain.models.time_entry import TimeEntry
from hourbook.domain.repositories.time_entry_repository import TimeEntryRepository as TimeEntryRepositoryInterface
from hourbook.infrastructure.db.models import TimeEntryModel
from hourbook.infrastructure.mappers.time_entry_mapper import TimeEntryMapper
from .base import SQLAlchemyRepository


class SQLAlchemyTimeEntryRepository(SQLAlchemyRepository, TimeEntryRepositoryInterface):
    """SQLAlchemy implementation of time entry repository."""

    def __init__(self, session):
        super().__init__(session)
        self.mapper = TimeEntryMapper()

    def _query(self):
        """Entries joined with their project and logger, newest date first."""
        return self.session.query(TimeEntryModel).options(
            joinedload(TimeEntryModel.project),
            joinedload(TimeEntryModel.user)
        ).order_by(TimeEntryModel.date.desc(), TimeEntryModel.id.desc())

    def add(self, entry: TimeEntry) -> TimeEntry:
        with self._store_operation("time_entries.add"):
            model = self.mapper.domain_to_model(entry)
            self.session.add(model)
            self.session.flush()
            self.session.refresh(model)
            return self.mapper.model_to_domain(model)

    def get_by_id(self, entry_id: int) -> Optional[TimeEntry]:
        with self._store_operation("time_entries.get_by_id"):
            model = self._query().filter(TimeEntryModel.id == entry_id).first()
            return self.mapper.model_to_domain(model) if model else None

    def list_all(self) -> List[TimeEntry]:
        with self._store_operation("time_entries.list_all"):
            return [self.mapper.model_to_domain(model) for model in self._query().all()]

    def list_by_project(self, project_id: int) -> List[TimeEntry]:
        with self._store_operation("time_entries.list_by_project"):
            models = self._query().filter(TimeEntryModel.project_id == project_id).all()
            return [self.mapper.model_to_domain(model) for model in models]

    def list_by_projects(self, project_ids: List[int]) -> List[TimeEntry]:
        if not project_ids:
            return []
        with self._store_operation("time_entries.list_by_projects"):
            models = self._query().filter(TimeEntryModel.project_id.in_(project_ids)).all()
            return [self.mapper.model_to_domain(model) for model in models]

    def list_by_user(self, user_id: str) -> List[TimeEntry]:
        with self._store_operation("time_entries.list_by_user"):
            models = self._query().filter(TimeEntryModel.user_id == user_id).all()
            return [self.mapper.model_to_domain(model) for model in models]

    def delete(self, entry_id: int) -> bool:
        with self._store_operation("time_entries.delete"):
            model = self.session.query(TimeEntryModel).filter_by(id=entry_id).first()
            if not model:
                return False
            self.session.delete(model)
            self.session.flush()
            return True

    def delete_by_project(self, project_id: int) -> int:
        with self._store_operation("time_entries.delete_by_project"):
            removed = self.session.query(TimeEntryModel).filter(
                TimeEntryModel.project_id == project_id
            ).delete(synchronize_session=False)
            self.session.flush()
            return removed
