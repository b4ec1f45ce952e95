"""
TimeEntry domain model.
A single logged unit of work against a project by a user.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from hourbook.domain.models.base import (
    BaseEntity,
    ValidationError,
    parse_positive_decimal,
    require_text
)


@dataclass
class TimeEntry(BaseEntity):
    """
    TimeEntry entity.
    Entries are only created and deleted, never updated. The rate is not stored on the
    entry: the project and user fields below are join data resolved at read time.
    """

    project_id: int
    user_id: str
    description: str
    hours: Decimal
    entry_date: date = field(default_factory=date.today)

    # Join data (read-only)
    project_name: Optional[str] = None
    project_client: Optional[str] = None
    project_hourly_rate: Optional[Decimal] = None
    user_name: Optional[str] = None
    user_hourly_rate: Optional[Decimal] = None

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Validate time entry state."""
        if self.project_id is None:
            raise ValidationError("Project is required", "project_id")

        if not self.user_id:
            raise ValidationError("User is required", "user_id")

        self.description = require_text(self.description, "description", max_length=500)
        self.hours = parse_positive_decimal(self.hours, "hours")

    @property
    def logger_name(self) -> str:
        return self.user_name or "Unknown"
