"""
Invoice dispatch repository implementation using SQLAlchemy.
"""

from typing import Optional, List

from hourbook.domain.models.billing import InvoiceDispatch
from hourbook.domain.repositories.invoice_dispatch_repository import InvoiceDispatchRepository
from hourbook.infrastructure.db.models import InvoiceDispatchModel
from hourbook.infrastructure.mappers.invoice_dispatch_mapper import InvoiceDispatchMapper
from .base import SQLAlchemyRepository


class SQLAlchemyInvoiceDispatchRepository(SQLAlchemyRepository, InvoiceDispatchRepository):
    """SQLAlchemy implementation of the invoice dispatch log."""

    def __init__(self, session):
        super().__init__(session)
        self.mapper = InvoiceDispatchMapper()

    def add(self, dispatch: InvoiceDispatch) -> InvoiceDispatch:
        """
        Record an accepted send and commit it at once.
        A failure later in the same request must not roll the record back.
        """
        with self._store_operation("invoice_dispatches.add"):
            model = self.mapper.domain_to_model(dispatch)
            self.session.add(model)
            self.session.commit()
            self.session.refresh(model)
            return self.mapper.model_to_domain(model)

    def get_by_idempotency_key(self, key: str) -> Optional[InvoiceDispatch]:
        with self._store_operation("invoice_dispatches.get_by_idempotency_key"):
            model = self.session.query(InvoiceDispatchModel).filter_by(idempotency_key=key).first()
            return self.mapper.model_to_domain(model) if model else None

    def list_by_project(self, project_id: int) -> List[InvoiceDispatch]:
        with self._store_operation("invoice_dispatches.list_by_project"):
            models = self.session.query(InvoiceDispatchModel).filter_by(
                project_id=project_id
            ).order_by(InvoiceDispatchModel.sent_at.desc()).all()
            return [self.mapper.model_to_domain(model) for model in models]
