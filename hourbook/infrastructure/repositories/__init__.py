"""
Infrastructure repositories module.
Contains SQLAlchemy implementations of domain repositories.
"""

from .user_repository import SQLAlchemyUserRepository
from .project_repository import SQLAlchemyProjectRepository
from .time_entry_repository import SQLAlchemyTimeEntryRepository
from .invoice_dispatch_repository import SQLAlchemyInvoiceDispatchRepository

__all__ = [
    "SQLAlchemyUserRepository",
    "SQLAlchemyProjectRepository",
    "SQLAlchemyTimeEntryRepository",
    "SQLAlchemyInvoiceDispatchRepository",
]
