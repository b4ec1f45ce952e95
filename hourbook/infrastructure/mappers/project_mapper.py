"""
Project mapper for converting between domain entities and database models.
"""

from hourbook.domain.models.project import Project, ProjectStatus
from hourbook.infrastructure.db.models import ProjectModel


class ProjectMapper:
    """Maps between Project domain entity and ProjectModel database model."""

    def domain_to_model(self, project: Project) -> ProjectModel:
        """Convert Project domain entity to ProjectModel."""
        return ProjectModel(
            id=project.id,
            name=project.name,
            client=project.client,
            status=project.status.value,
            hourly_rate=project.hourly_rate,
            created_by=project.created_by,
            created_at=project.created_at,
            updated_at=project.updated_at
        )

    def update_model(self, model: ProjectModel, project: Project) -> None:
        """Copy mutable fields; created_by is never rewritten."""
        model.name = project.name
        model.client = project.client
        model.status = project.status.value
        model.hourly_rate = project.hourly_rate
        model.updated_at = project.updated_at

    def model_to_domain(self, model: ProjectModel) -> Project:
        """Convert ProjectModel to Project domain entity, with the creator's name when loaded."""
        creator = model.creator
        return Project(
            id=model.id,
            name=model.name,
            client=model.client,
            status=ProjectStatus(model.status) if model.status else ProjectStatus.ACTIVE,
            hourly_rate=model.hourly_rate,
            created_by=model.created_by,
            creator_name=creator.full_name if creator is not None else None,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
