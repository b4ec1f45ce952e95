"""
Project DTOs for the application layer.
Data Transfer Objects for project-related operations.
"""

from typing import Optional, List, Union
from decimal import Decimal
from pydantic import Field, field_validator

from .base_dto import BaseDTO, ResponseDTO, CreateRequestDTO, UpdateRequestDTO
from .time_entry_dto import TimeEntryResponseDTO
from hourbook.infrastructure.validation.validators import safe_text_validator


class CreateProjectRequestDTO(CreateRequestDTO):
    """DTO for creating a new project."""

    name: str = Field(max_length=255, description="Project name")
    client: str = Field(max_length=255, description="Client name")
    hourly_rate: Optional[Union[Decimal, str]] = Field(default=None, description="Hourly rate, defaults to 75")

    @field_validator('name', 'client', mode='before')
    @classmethod
    def sanitize_text(cls, v):
        return safe_text_validator(v)


class UpdateProjectRequestDTO(UpdateRequestDTO):
    """DTO for editing name, client or rate. Omitted fields are left unchanged."""

    name: Optional[str] = Field(default=None, max_length=255)
    client: Optional[str] = Field(default=None, max_length=255)
    hourly_rate: Optional[Union[Decimal, str]] = None

    @field_validator('name', 'client', mode='before')
    @classmethod
    def sanitize_text(cls, v):
        return safe_text_validator(v)


class UpdateProjectStatusRequestDTO(UpdateRequestDTO):
    """DTO for moving a project to another board column."""

    status: str = Field(description="active, to-invoice or completed")


class ProjectResponseDTO(ResponseDTO):
    """DTO for a project card."""

    name: str
    client: str
    status: str
    status_label: str
    hourly_rate: Decimal
    created_by: str
    creator_name: Optional[str] = None
    can_edit: bool = Field(default=False, description="Whether the caller may edit, move or delete it")
    total_hours: Decimal = Decimal("0")
    total_value: Decimal = Decimal("0")


class BoardColumnDTO(BaseDTO):
    status: str
    label: str
    projects: List[ProjectResponseDTO]


class ProjectBoardResponseDTO(BaseDTO):
    """All projects grouped by status, in pipeline order."""

    columns: List[BoardColumnDTO]


class ProjectDetailResponseDTO(BaseDTO):
    project: ProjectResponseDTO
    time_entries: List[TimeEntryResponseDTO]


class ProjectDeletedResponseDTO(BaseDTO):
    id: int
    removed_time_entries: int
