"""
Project repository implementation using SQLAlchemy.
"""

from typing import Optional, List
from sqlalchemy.orm import joinedload

from hourbook.domain.models.base import EntityNotFoundError
from hourbook.domain.models.project import Project, ProjectStatus
from hourbook.domain.repositories.project_repository import ProjectRepository as ProjectRepositoryInterface
from hourbook.infrastructure.db.models import ProjectModel, TimeEntryModel
from hourbook.infrastructure.mappers.project_mapper import ProjectMapper
from .base import SQLAlchemyRepository


class SQLAlchemyProjectRepository(SQLAlchemyRepository, ProjectRepositoryInterface):
    """SQLAlchemy implementation of project repository."""

    def __init__(self, session):
        super().__init__(session)
        self.mapper = ProjectMapper()

    def _query(self):
        return self.session.query(ProjectModel).options(joinedload(ProjectModel.creator))

    def save(self, project: Project) -> Project:
        """Save a project entity."""
        with self._store_operation("projects.save"):
            if project.is_new:
                model = self.mapper.domain_to_model(project)
                self.session.add(model)
            else:
                model = self.session.query(ProjectModel).filter_by(id=project.id).first()
                if not model:
                    raise EntityNotFoundError("Project", project.id)
                self.mapper.update_model(model, project)

            self.session.flush()
            self.session.refresh(model)
            return self.mapper.model_to_domain(model)

    def get_by_id(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        with self._store_operation("projects.get_by_id"):
            model = self._query().filter(ProjectModel.id == project_id).first()
            return self.mapper.model_to_domain(model) if model else None

    def list_all(self) -> List[Project]:
        with self._store_operation("projects.list_all"):
            models = self._query().order_by(
                ProjectModel.created_at.desc(), ProjectModel.id.desc()
            ).all()
            return [self.mapper.model_to_domain(model) for model in models]

    def list_by_status(self, status: ProjectStatus) -> List[Project]:
        """Get projects by status."""
        with self._store_operation("projects.list_by_status"):
            models = self._query().filter(
                ProjectModel.status == ProjectStatus.parse(status).value
            ).order_by(ProjectModel.created_at.desc(), ProjectModel.id.desc()).all()
            return [self.mapper.model_to_domain(model) for model in models]

    def list_by_creator(self, user_id: str) -> List[Project]:
        with self._store_operation("projects.list_by_creator"):
            models = self._query().filter(
                ProjectModel.created_by == user_id
            ).order_by(ProjectModel.created_at.desc(), ProjectModel.id.desc()).all()
            return [self.mapper.model_to_domain(model) for model in models]

    def update_status(self, project_id: int, status: ProjectStatus) -> bool:
        with self._store_operation("projects.update_status"):
            model = self.session.query(ProjectModel).filter_by(id=project_id).first()
            if not model:
                return False
            model.status = ProjectStatus.parse(status).value
            self.session.flush()
            return True

    def delete(self, project_id: int) -> int:
        """Delete the project's time entries first, then the project row."""
        with self._store_operation("projects.delete"):
            model = self.session.query(ProjectModel).filter_by(id=project_id).first()
            if not model:
                raise EntityNotFoundError("Project", project_id)

            removed = self.session.query(TimeEntryModel).filter(
                TimeEntryModel.project_id == project_id
            ).delete(synchronize_session="fetch")

            # Drop collections that may still hold the deleted entries
            self.session.expire(model)
            self.session.delete(model)
            self.session.flush()
            return removed
