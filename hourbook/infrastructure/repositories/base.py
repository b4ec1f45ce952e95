"""
Shared helpers for SQLAlchemy repositories.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hourbook.domain.models.base import StoreError

logger = logging.getLogger(__name__)


class SQLAlchemyRepository:
    """Base class holding the session and translating driver errors."""

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _store_operation(self, operation: str) -> Iterator[None]:
        """Run a block against the store; SQLAlchemy errors become StoreError."""
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Store operation '{operation}' failed: {e}")
            self.session.rollback()
            raise StoreError(operation, str(e)) from e
