"""
Invoice dispatch mapper for converting between domain entities and database models.
"""

from hourbook.domain.models.billing import InvoiceDispatch, InvoiceProvider
from hourbook.infrastructure.db.models import InvoiceDispatchModel


class InvoiceDispatchMapper:
    """Maps between InvoiceDispatch and InvoiceDispatchModel."""

    def domain_to_model(self, dispatch: InvoiceDispatch) -> InvoiceDispatchModel:
        return InvoiceDispatchModel(
            id=dispatch.id,
            project_id=dispatch.project_id,
            provider=dispatch.provider.value,
            reference=dispatch.reference,
            total_amount=dispatch.total_amount,
            idempotency_key=dispatch.idempotency_key,
            payload=dispatch.payload,
            sent_at=dispatch.sent_at,
            created_at=dispatch.created_at
        )

    def model_to_domain(self, model: InvoiceDispatchModel) -> InvoiceDispatch:
        return InvoiceDispatch(
            id=model.id,
            project_id=model.project_id,
            provider=InvoiceProvider(model.provider),
            reference=model.reference,
            total_amount=model.total_amount,
            idempotency_key=model.idempotency_key,
            payload=model.payload or {},
            sent_at=model.sent_at,
            created_at=model.created_at
        )
