"""
HTTP Client module for the Sage Payments SDK
"""

from sage_payments.client.http_client import (
    Transport,
    RequestsTransport,
    RawStreamTransport,
    parse_status_lines,
    convert_header_lines,
    build_response,
    PASS_THROUGH_OPTIONS,
    STATUS_LINE_UNKNOWN_ERROR,
    STATUS_LINE_GATEWAY_TIMEOUT,
)
from sage_payments.client.retry import RetryPolicy

__all__ = [
    "Transport",
    "RequestsTransport",
    "RawStreamTransport",
    "parse_status_lines",
    "convert_header_lines",
    "build_response",
    "PASS_THROUGH_OPTIONS",
    "STATUS_LINE_UNKNOWN_ERROR",
    "STATUS_LINE_GATEWAY_TIMEOUT",
    "RetryPolicy",
]
