"""
Base entity and domain exceptions.
This module contains the foundational classes for all domain entities.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Any, Dict
from abc import ABC
from dataclasses import dataclass, field
from enum import Enum


@dataclass(kw_only=True)
class BaseEntity(ABC):
    """
    Base class for all domain entities.
    Provides common attributes and behavior for all entities.
    """

    id: Optional[Any] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and are of the same type."""
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on entity ID."""
        if self.id is None:
            return hash(id(self))
        return hash((self.__class__.__name__, self.id))

    def mark_as_updated(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = datetime.utcnow()

    @property
    def is_new(self) -> bool:
        """Check if entity is new (not persisted)."""
        return self.id is None

    def validate(self) -> None:
        """
        Validate the entity's state.
        Should be overridden by subclasses to implement specific validation rules.
        Raises ValidationError if the entity is in an invalid state.
        """
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary representation."""
        data = {}
        for key, value in self.__dict__.items():
            if key.startswith('_'):
                continue
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, Enum):
                data[key] = value.value
            else:
                data[key] = value
        return data


class DomainException(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(DomainException):
    """Exception raised when entity or input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field


class BusinessRuleViolation(DomainException):
    """Exception raised when a business rule is violated."""

    def __init__(self, message: str):
        super().__init__(message, "BUSINESS_RULE_VIOLATION")


class EntityNotFoundError(DomainException):
    """Exception raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, "ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


class AuthorizationError(DomainException):
    """
    Raised when the caller lacks the role or ownership for a view or mutation.
    Carries the location the client should be sent to instead.
    """

    def __init__(self, message: str = "Toegang geweigerd", redirect_to: str = "/"):
        super().__init__(message, "AUTHORIZATION_ERROR")
        self.redirect_to = redirect_to


class AuthenticationError(DomainException):
    """Raised when the identity provider rejects a sign-in, sign-up or password change."""

    ALREADY_REGISTERED = "already_registered"
    INVALID_CREDENTIALS = "invalid_credentials"
    GENERIC = "generic"

    def __init__(self, message: str, kind: str = GENERIC):
        super().__init__(message, "AUTHENTICATION_ERROR")
        self.kind = kind


class StoreError(DomainException):
    """Raised when the entity store rejects a read or write."""

    def __init__(self, operation: str, detail: Optional[str] = None):
        super().__init__("Er is een fout opgetreden bij het opslaan of ophalen van gegevens", "STORE_ERROR")
        self.operation = operation
        self.detail = detail


def parse_positive_decimal(value: Any, field_name: str) -> Decimal:
    """Coerce a rate or hours value to a positive Decimal or raise ValidationError."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} must be a number", field_name)
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number", field_name)
    if not number.is_finite() or number <= 0:
        raise ValidationError(f"{field_name} must be greater than zero", field_name)
    return number


def require_text(value: Optional[str], field_name: str, max_length: int = 255) -> str:
    """Return the stripped text or raise ValidationError when it is empty or too long."""
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} is required", field_name)
    if len(text) > max_length:
        raise ValidationError(f"{field_name} too long (max {max_length} characters)", field_name)
    return text
