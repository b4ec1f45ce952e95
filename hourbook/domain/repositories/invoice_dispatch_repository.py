"""
Invoice dispatch repository interface.
Durable record of invoices accepted by a provider.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from hourbook.domain.models.billing import InvoiceDispatch


class InvoiceDispatchRepository(ABC):

    @abstractmethod
    def add(self, dispatch: InvoiceDispatch) -> InvoiceDispatch:
        """Store the record durably; it survives a later failure in the same request."""
        pass

    @abstractmethod
    def get_by_idempotency_key(self, key: str) -> Optional[InvoiceDispatch]:
        pass

    @abstractmethod
    def list_by_project(self, project_id: int) -> List[InvoiceDispatch]:
        pass
