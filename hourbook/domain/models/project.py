"""
Project domain model.
Represents a billable unit of work for a client with its own hourly rate and status.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Any
from enum import Enum

from hourbook.domain.models.base import (
    BaseEntity,
    ValidationError,
    parse_positive_decimal,
    require_text
)


DEFAULT_PROJECT_HOURLY_RATE = Decimal("75")


class ProjectStatus(str, Enum):
    """Project status, in pipeline order."""
    ACTIVE = "active"
    TO_INVOICE = "to-invoice"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: Any) -> "ProjectStatus":
        """Parse a status value, raising ValidationError for unknown statuses."""
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Invalid project status: {value}", "status")

    @property
    def label(self) -> str:
        """Dutch column title shown on the project board."""
        return STATUS_LABELS[self]


STATUS_LABELS = {
    ProjectStatus.ACTIVE: "Lopende Projecten",
    ProjectStatus.TO_INVOICE: "Te Factureren",
    ProjectStatus.COMPLETED: "Afgerond",
}

PIPELINE = (ProjectStatus.ACTIVE, ProjectStatus.TO_INVOICE, ProjectStatus.COMPLETED)


@dataclass
class Project(BaseEntity):
    """
    Project aggregate.
    created_by is fixed at creation; creator_name is filled from the users join on read.
    """

    name: str
    client: str
    created_by: str
    status: ProjectStatus = ProjectStatus.ACTIVE
    hourly_rate: Decimal = DEFAULT_PROJECT_HOURLY_RATE
    creator_name: Optional[str] = None

    def __post_init__(self):
        self.status = ProjectStatus.parse(self.status)
        self.validate()

    def validate(self) -> None:
        """Validate project state."""
        if not self.created_by:
            raise ValidationError("Creator is required", "created_by")

        self.name = require_text(self.name, "name")
        self.client = require_text(self.client, "client")
        self.hourly_rate = parse_positive_decimal(self.hourly_rate, "hourly_rate")

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        return user_id is not None and self.created_by == user_id

    @property
    def is_invoiceable(self) -> bool:
        """Only projects waiting for an invoice belong to the billing view."""
        return self.status == ProjectStatus.TO_INVOICE

    def update_details(
        self,
        name: Optional[str] = None,
        client: Optional[str] = None,
        hourly_rate: Optional[Any] = None
    ) -> None:
        """Apply a partial update; each field is validated before anything changes."""
        new_name = require_text(name, "name") if name is not None else self.name
        new_client = require_text(client, "client") if client is not None else self.client
        new_rate = (
            parse_positive_decimal(hourly_rate, "hourly_rate")
            if hourly_rate is not None else self.hourly_rate
        )

        self.name = new_name
        self.client = new_client
        self.hourly_rate = new_rate
        self.mark_as_updated()
