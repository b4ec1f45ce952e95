"""
Invoice provider clients.
Moneybird and Twinfield are simulated: a fixed delay, then the payload is logged and accepted.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Iterable, Optional

from hourbook.domain.models.billing import InvoiceDeliveryError, InvoiceProvider
from hourbook.domain.services.export_service import canonical_payload
from hourbook.domain.services.invoice_gateway import InvoiceGateway

logger = logging.getLogger(__name__)


class SimulatedInvoiceGateway(InvoiceGateway):
    """
    Stand-in for the provider APIs.
    Providers listed in failing_providers reject every send, for exercising the failure path.
    """

    def __init__(
        self,
        delay_seconds: float = 2.0,
        failing_providers: Optional[Iterable[InvoiceProvider]] = None
    ):
        self.delay_seconds = delay_seconds
        self.failing_providers = {InvoiceProvider.parse(p) for p in (failing_providers or [])}
        self.sent: Dict[str, Dict[str, Any]] = {}

    async def send(
        self,
        provider: InvoiceProvider,
        payload: Dict[str, Any],
        idempotency_key: str
    ) -> str:
        provider = InvoiceProvider.parse(provider)

        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if provider in self.failing_providers:
            logger.error(f"{provider.display_name} rejected invoice {idempotency_key}")
            raise InvoiceDeliveryError(provider, "simulated rejection")

        body = canonical_payload(payload)
        if idempotency_key in self.sent:
            logger.info(f"{provider.display_name} already has invoice {idempotency_key}")
        else:
            logger.info(f"Sending to {provider.display_name}: {json.dumps(body, ensure_ascii=False)}")
            self.sent[idempotency_key] = body

        return str(body.get("reference", ""))
