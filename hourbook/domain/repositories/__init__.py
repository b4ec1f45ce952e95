"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .project_repository import ProjectRepository
from .time_entry_repository import TimeEntryRepository
from .user_repository import UserRepositoryInterface
from .invoice_dispatch_repository import InvoiceDispatchRepository

__all__ = [
    "ProjectRepository",
    "TimeEntryRepository",
    "UserRepositoryInterface",
    "InvoiceDispatchRepository",
]
