"""
Invoice gateway for sending invoices to bookkeeping providers.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from hourbook.domain.models.billing import InvoiceProvider


class InvoiceGateway(ABC):
    """
    Invoice gateway interface.
    Implementations raise InvoiceDeliveryError when the provider does not accept the invoice.
    """

    @abstractmethod
    async def send(
        self,
        provider: InvoiceProvider,
        payload: Dict[str, Any],
        idempotency_key: str
    ) -> str:
        """
        Send a formatted payload.
        Returns the reference the provider registered the invoice under.
        """
        pass
