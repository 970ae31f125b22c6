"""Models module initialization"""

from sage_payments.models.http import OutboundRequest, TransportResponse

__all__ = [
    "OutboundRequest",
    "TransportResponse",
]
