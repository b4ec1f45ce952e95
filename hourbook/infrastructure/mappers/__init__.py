"""
Infrastructure mappers module.
Contains mappers for converting between domain entities and database models.
"""

from .user_mapper import UserMapper
from .project_mapper import ProjectMapper
from .time_entry_mapper import TimeEntryMapper
from .invoice_dispatch_mapper import InvoiceDispatchMapper

__all__ = [
    "UserMapper",
    "ProjectMapper",
    "TimeEntryMapper",
    "InvoiceDispatchMapper",
]
