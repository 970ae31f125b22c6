"""Direct API (JSON) clients"""

from sage_payments.direct_api.client_base import DirectApiClient
from sage_payments.direct_api.client_factory import DirectApiClientFactory
from sage_payments.direct_api.resources import (
    DirectApiResource,
    ApiHealth,
    Charges,
    Credits,
)

__all__ = [
    "DirectApiClient",
    "DirectApiClientFactory",
    "DirectApiResource",
    "ApiHealth",
    "Charges",
    "Credits",
]
