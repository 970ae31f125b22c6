"""
Sage Payments SDK for Python

Main entry point for the SDK
"""

from sage_payments.exceptions import (
    SagePaymentsError,
    ErrorCategory,
    ConfigurationError,
    ArgumentError,
    RequestError,
    NetworkError,
)

# Transport
from sage_payments.client import (
    Transport,
    RequestsTransport,
    RawStreamTransport,
    RetryPolicy,
)

# Configuration
from sage_payments.config import (
    DirectApiConfig,
    SevdConfig,
    RetryRule,
    Environment,
    ConfigLoader,
    ConfigValidator,
    DIRECT_API_BASE_URL,
    SEVD_URL,
)

# Signing
from sage_payments.crypto import RequestSigner, SignatureResult

# Models
from sage_payments.models import OutboundRequest, TransportResponse

# Direct API
from sage_payments.direct_api import (
    DirectApiClient,
    DirectApiClientFactory,
    ApiHealth,
    Charges,
    Credits,
)

# SEVD
from sage_payments.sevd import (
    SevdClient,
    ChargeRequest,
    SevdClientFactory,
)

__version__ = "0.1.0"

__all__ = [
    # Errors
    "SagePaymentsError",
    "ErrorCategory",
    "ConfigurationError",
    "ArgumentError",
    "RequestError",
    "NetworkError",
    # Transport
    "Transport",
    "RequestsTransport",
    "RawStreamTransport",
    "RetryPolicy",
    # Configuration
    "DirectApiConfig",
    "SevdConfig",
    "RetryRule",
    "Environment",
    "ConfigLoader",
    "ConfigValidator",
    "DIRECT_API_BASE_URL",
    "SEVD_URL",
    # Signing
    "RequestSigner",
    "SignatureResult",
    # Models
    "OutboundRequest",
    "TransportResponse",
    # Direct API
    "DirectApiClient",
    "DirectApiClientFactory",
    "ApiHealth",
    "Charges",
    "Credits",
    # SEVD
    "SevdClient",
    "ChargeRequest",
    "SevdClientFactory",
]
