"""
Time entry DTOs for the application layer.
Data Transfer Objects for time entry operations and the time-tracking view.
"""

from typing import Optional, List, Union
from datetime import datetime, date
from decimal import Decimal
from pydantic import Field, field_validator, model_validator

from .base_dto import BaseDTO, RequestDTO, ResponseDTO, CreateRequestDTO
from hourbook.infrastructure.validation.validators import safe_text_validator


class CreateTimeEntryRequestDTO(CreateRequestDTO):
    """DTO for logging time against a project."""

    project_id: int = Field(description="Project ID")
    description: str = Field(max_length=500, description="What was done")
    hours: Union[Decimal, str] = Field(description="Hours worked, fractions allowed")
    entry_date: Optional[date] = Field(default=None, alias="date", description="Work date, defaults to today")

    @field_validator('description', mode='before')
    @classmethod
    def sanitize_description(cls, v):
        return safe_text_validator(v)


class TimeEntryResponseDTO(ResponseDTO):
    """
    A time entry with its join data.
    hourly_rate and value follow the time-tracking display rate.
    """

    project_id: int
    project_name: Optional[str] = None
    project_client: Optional[str] = None
    user_id: str
    user_name: str
    description: str
    hours: Decimal
    entry_date: date = Field(alias="date")
    hourly_rate: Decimal = Field(description="Display rate: personal, else project, else 50")
    value: Decimal = Field(description="hours x display rate, rounded to cents")


class TimeTrackingFilterDTO(RequestDTO):
    """Filters for the time-tracking view. All given filters must match."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search: Optional[str] = Field(default=None, max_length=255)
    user_id: Optional[str] = None
    project_id: Optional[int] = None

    @model_validator(mode='after')
    def validate_date_range(self):
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError('date_to must be on or after date_from')
        return self


class UserOptionDTO(BaseDTO):
    id: str
    full_name: str


class ProjectOptionDTO(BaseDTO):
    id: int
    name: str
    client: str


class TimeTrackingResponseDTO(BaseDTO):
    """Time-tracking view: scoped, filtered entries and their totals."""

    entries: List[TimeEntryResponseDTO]
    total_hours: Decimal
    total_value: Decimal
    average_rate: Decimal
    project_count: int
    is_admin: bool
    users: List[UserOptionDTO] = Field(default_factory=list, description="Filter options, admins only")
    projects: List[ProjectOptionDTO] = Field(default_factory=list)


class TimeEntryDeletedResponseDTO(BaseDTO):
    id: int
    project_id: int
    deleted_at: datetime = Field(default_factory=datetime.utcnow)
