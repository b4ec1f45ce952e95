"""
User DTOs for the application layer.
Data Transfer Objects for identity and profile operations.
"""

from typing import Optional, Union
from datetime import datetime
from decimal import Decimal
from pydantic import Field, field_validator

from .base_dto import BaseDTO, RequestDTO, UpdateRequestDTO
from hourbook.infrastructure.validation.validators import safe_text_validator


class SignUpRequestDTO(RequestDTO):
    """DTO for account registration."""

    email: str = Field(max_length=255, description="Email address")
    password: str = Field(description="Password")
    full_name: str = Field(max_length=255, description="Full name")
    role: str = Field(default="employee", description="admin or employee")

    @field_validator('full_name', mode='before')
    @classmethod
    def sanitize_name(cls, v):
        return safe_text_validator(v)

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class SignInRequestDTO(RequestDTO):
    """DTO for signing in."""

    email: str = Field(max_length=255, description="Email address")
    password: str = Field(description="Password")


class UpdatePasswordRequestDTO(RequestDTO):
    """DTO for changing the own password."""

    new_password: str = Field(description="New password")
    confirm_password: str = Field(description="New password, repeated")


class UpdateProfileNameRequestDTO(UpdateRequestDTO):
    full_name: str = Field(max_length=255, description="Full name")

    @field_validator('full_name', mode='before')
    @classmethod
    def sanitize_name(cls, v):
        return safe_text_validator(v)


class UpdateHourlyRateRequestDTO(UpdateRequestDTO):
    """Rate may arrive as a number or as form text; the domain checks it is positive."""

    hourly_rate: Union[Decimal, str] = Field(description="Personal hourly rate")


class UserResponseDTO(BaseDTO):
    """DTO for a user profile."""

    id: str = Field(description="User ID")
    email: str = Field(description="Email address")
    full_name: str = Field(description="Full name")
    role: str = Field(description="admin or employee")
    hourly_rate: Optional[Decimal] = Field(default=None, description="Personal hourly rate")
    created_at: Optional[datetime] = None


class SignUpResponseDTO(BaseDTO):
    user_id: str = Field(description="New user ID")
    email: str = Field(description="Email address")
    pending_confirmation: bool = Field(description="Whether the email address still has to be confirmed")
    message: str = Field(description="User-facing message")


class SessionResponseDTO(BaseDTO):
    access_token: str = Field(description="Bearer token")
    refresh_token: Optional[str] = Field(default=None, description="Refresh token")
    token_type: str = Field(default="bearer")
    user: UserResponseDTO
