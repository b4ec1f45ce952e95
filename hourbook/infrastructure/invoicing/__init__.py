"""
Invoice provider integrations.
"""

from .providers import SimulatedInvoiceGateway

__all__ = ["SimulatedInvoiceGateway"]
