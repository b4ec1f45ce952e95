"""
Time entry mapper for converting between domain entities and database models.
"""

from hourbook.domain.models.time_entry import TimeEntry
from hourbook.infrastructure.db.models import TimeEntryModel


class TimeEntryMapper:
    """Maps between TimeEntry domain entity and TimeEntryModel database model."""

    def domain_to_model(self, time_entry: TimeEntry) -> TimeEntryModel:
        """Convert TimeEntry domain entity to TimeEntryModel."""
        return TimeEntryModel(
            id=time_entry.id,
            project_id=time_entry.project_id,
            user_id=time_entry.user_id,
            description=time_entry.description,
            hours=time_entry.hours,
            date=time_entry.entry_date,
            created_at=time_entry.created_at
        )

    def model_to_domain(self, model: TimeEntryModel) -> TimeEntry:
        """
        Convert TimeEntryModel to TimeEntry domain entity.
        Project and user rates are copied from the joined rows as they are now.
        """
        project = model.project
        user = model.user
        return TimeEntry(
            id=model.id,
            project_id=model.project_id,
            user_id=model.user_id,
            description=model.description,
            hours=model.hours,
            entry_date=model.date,
            project_name=project.name if project is not None else None,
            project_client=project.client if project is not None else None,
            project_hourly_rate=project.hourly_rate if project is not None else None,
            user_name=user.full_name if user is not None else None,
            user_hourly_rate=user.hourly_rate if user is not None else None,
            created_at=model.created_at
        )
