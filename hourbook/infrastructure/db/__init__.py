"""
Database infrastructure for Hourbook.
"""

from .database import engine, SessionLocal, get_db, Base, build_engine
from .models import UserModel, ProjectModel, TimeEntryModel, InvoiceDispatchModel

__all__ = [
    "engine",
    "SessionLocal",
    "get_db",
    "Base",
    "build_engine",
    "UserModel",
    "ProjectModel",
    "TimeEntryModel",
    "InvoiceDispatchModel",
]
