"""
Domain services for the time tracking and invoicing system.
This module exports all domain services for business logic spanning entities.
"""

from .billing_service import BillingService, TimeEntryFilter, billing_rate, display_rate
from .lifecycle_service import LifecycleService, TransitionPolicy
from .export_service import ExportService, idempotency_key
from .access_policy import Caller, Permissions, View, capabilities, require
from .auth_service import IdentityProvider, AuthIdentity, AuthSession, map_auth_error

__all__ = [
    "BillingService",
    "TimeEntryFilter",
    "billing_rate",
    "display_rate",
    "LifecycleService",
    "TransitionPolicy",
    "ExportService",
    "idempotency_key",
    "Caller",
    "Permissions",
    "View",
    "capabilities",
    "require",
    "IdentityProvider",
    "AuthIdentity",
    "AuthSession",
    "map_auth_error",
]
