"""
User domain model.
Represents an account holder with a role and a personal hourly rate.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Dict, Any
from enum import Enum

from hourbook.domain.models.base import (
    BaseEntity,
    ValidationError,
    parse_positive_decimal,
    require_text
)


DEFAULT_USER_HOURLY_RATE = Decimal("50")


class UserRole(str, Enum):
    """System-wide user roles."""
    ADMIN = "admin"
    EMPLOYEE = "employee"

    @classmethod
    def parse(cls, value: Any) -> "UserRole":
        """Parse a role value, raising ValidationError for unknown roles."""
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(f"Invalid role: {value}", "role")


@dataclass
class User(BaseEntity):
    """
    User aggregate.
    The id is the identity provider's user id; the rest is the profile row.
    """

    email: str
    full_name: str
    role: UserRole = UserRole.EMPLOYEE
    hourly_rate: Optional[Decimal] = DEFAULT_USER_HOURLY_RATE

    def __post_init__(self):
        self.role = UserRole.parse(self.role)
        self.validate()

    def validate(self) -> None:
        """Validate user state."""
        if not self.email or "@" not in self.email:
            raise ValidationError("Ongeldig email adres", "email")

        self.full_name = require_text(self.full_name, "full_name")

        if self.hourly_rate is not None:
            self.hourly_rate = parse_positive_decimal(self.hourly_rate, "hourly_rate")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "Unknown User"

    def rename(self, full_name: str) -> None:
        self.full_name = require_text(full_name, "full_name")
        self.mark_as_updated()

    def change_hourly_rate(self, hourly_rate: Any) -> None:
        """Set the personal rate; it must be a positive number."""
        self.hourly_rate = parse_positive_decimal(hourly_rate, "hourly_rate")
        self.mark_as_updated()

    @classmethod
    def from_auth_user(
        cls,
        user_id: str,
        email: str,
        metadata: Optional[Dict[str, Any]] = None,
        role: UserRole = UserRole.EMPLOYEE
    ) -> "User":
        """
        Build a profile from identity provider data.
        The name falls back to the local part of the email address, then to "Gebruiker".
        """
        metadata = metadata or {}
        full_name = (metadata.get("full_name") or "").strip()
        if not full_name:
            full_name = email.split("@")[0] if email else ""
        return cls(
            id=user_id,
            email=email,
            full_name=full_name or "Gebruiker",
            role=role
        )
