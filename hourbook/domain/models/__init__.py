"""
Domain models for the time tracking and invoicing system.
This module exports all domain entities and value objects.
"""

# Base classes
from .base import (
    BaseEntity,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    EntityNotFoundError,
    AuthorizationError,
    AuthenticationError,
    StoreError,
)

# Domain entities
from .user import User, UserRole, DEFAULT_USER_HOURLY_RATE

from .project import (
    Project,
    ProjectStatus,
    PIPELINE,
    DEFAULT_PROJECT_HOURLY_RATE,
)

from .time_entry import TimeEntry

from .billing import BillingBundle, InvoiceDispatch, InvoiceProvider, InvoiceDeliveryError

__all__ = [
    # Base classes
    "BaseEntity",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "EntityNotFoundError",
    "AuthorizationError",
    "AuthenticationError",
    "StoreError",

    # User
    "User",
    "UserRole",
    "DEFAULT_USER_HOURLY_RATE",

    # Project
    "Project",
    "ProjectStatus",
    "PIPELINE",
    "DEFAULT_PROJECT_HOURLY_RATE",

    # TimeEntry
    "TimeEntry",

    # Billing
    "BillingBundle",
    "InvoiceDispatch",
    "InvoiceProvider",
    "InvoiceDeliveryError",
]
