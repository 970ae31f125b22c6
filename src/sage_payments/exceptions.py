"""Exception classes for the Sage Payments SDK"""

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from sage_payments.models.http import OutboundRequest, TransportResponse


class ErrorCategory(str, Enum):
    """Error category codes"""
    CONFIG = "CONFIG"
    ARGUMENT = "ARGUMENT"
    REQUEST = "REQUEST"
    NETWORK = "NETWORK"
    UNKNOWN = "UNKNOWN"


# Header names whose values must never leave the SDK in diagnostics
SENSITIVE_FIELDS = [
    "authorization",
    "merchantkey",
    "merchant_key",
    "client_secret",
    "clientsecret",
]


def redact_sensitive_data(obj: Any) -> Any:
    """Redact sensitive values from a mapping (recursively) for diagnostics"""
    if isinstance(obj, list):
        return [redact_sensitive_data(item) for item in obj]

    if isinstance(obj, dict):
        redacted = {}
        for key, value in obj.items():
            lower_key = str(key).lower()
            if any(field in lower_key for field in SENSITIVE_FIELDS):
                redacted[key] = "[REDACTED]"
            elif isinstance(value, (dict, list)):
                redacted[key] = redact_sensitive_data(value)
            else:
                redacted[key] = value
        return redacted

    return obj


class SagePaymentsError(Exception):
    """
    Base exception for SDK errors

    All errors raised by the SDK extend from this class.
    Provides consistent error handling and categorization.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.cause = cause
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        self.category = self._determine_category(code)

    def _determine_category(self, code: Optional[str]) -> ErrorCategory:
        """Determine error category from code"""
        if not code:
            return ErrorCategory.UNKNOWN

        for category in ErrorCategory:
            if code.startswith(category.value):
                return category

        return ErrorCategory.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary"""
        return {
            "name": self.__class__.__name__,
            "message": str(self),
            "code": self.code,
            "status_code": self.status_code,
            "category": self.category.value,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }

    def has_code(self, code: str) -> bool:
        """Check if error has a specific code"""
        return self.code == code

    def is_category(self, category: ErrorCategory) -> bool:
        """Check if error belongs to a category"""
        return self.category == category

    def get_description(self) -> str:
        """Get human-readable error description"""
        parts = [str(self)]

        if self.code:
            parts.insert(0, f"[{self.code}]")

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        return " ".join(parts)


class ConfigurationError(SagePaymentsError):
    """
    Invalid or insufficient client configuration

    Raised when a client is constructed, before any network call.
    """

    def __init__(
        self,
        message: str,
        missing: Optional[List[str]] = None,
        code: str = "CONFIG_INVALID",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.missing = list(missing or [])


class ArgumentError(SagePaymentsError, ValueError):
    """Invalid per-call data supplied by the caller"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        missing: Optional[List[str]] = None,
        code: str = "ARGUMENT_INVALID",
    ) -> None:
        super().__init__(message, code=code)
        self.field = field
        self.missing = list(missing or [])


class RequestError(SagePaymentsError):
    """
    A request to the gateway failed

    Carries the outbound request and, where one was received, the response
    so that callers can inspect exactly what was sent and returned.
    """

    def __init__(
        self,
        message: str,
        request: "OutboundRequest",
        response: Optional["TransportResponse"] = None,
        code: str = "REQUEST_FAILED",
        cause: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message,
            code=code,
            status_code=response.status_code if response is not None else None,
            cause=cause,
        )
        self.request = request
        self.response = response

    @classmethod
    def create(
        cls,
        request: "OutboundRequest",
        response: "TransportResponse",
    ) -> "RequestError":
        """Create an error describing a response with an error status"""
        label = "Client error" if response.status_code < 500 else "Server error"
        reason = f" {response.reason_phrase}" if response.reason_phrase else ""
        message = (
            f"{label}: `{request.method} {request.url}` resulted in a "
            f"`{response.status_code}{reason}` response"
        )
        return cls(message, request=request, response=response)

    @property
    def reason(self) -> Optional[str]:
        """Reason phrase of the response, if any"""
        return self.response.reason_phrase if self.response is not None else None

    @property
    def body(self) -> Optional[str]:
        """Raw body of the response, if any"""
        return self.response.body if self.response is not None else None

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["request"] = {
            "method": self.request.method,
            "url": self.request.url,
            "headers": redact_sensitive_data(dict(self.request.headers)),
            "body": self.request.body,
        }
        data["response"] = None
        if self.response is not None:
            data["response"] = {
                "status_code": self.response.status_code,
                "reason_phrase": self.response.reason_phrase,
                "headers": dict(self.response.headers),
                "body": self.response.body,
            }
        return data


class NetworkError(RequestError):
    """
    Transport failure with no HTTP response (DNS, refused, reset, timeout)
    """

    def __init__(
        self,
        message: str,
        request: "OutboundRequest",
        cause: Optional[Exception] = None,
        code: str = "NETWORK_ERROR",
    ) -> None:
        super().__init__(message, request=request, response=None, code=code, cause=cause)

    @classmethod
    def timeout(cls, request: "OutboundRequest", cause: Optional[Exception] = None) -> "NetworkError":
        """Create a timeout error"""
        return cls("Request timed out", request=request, cause=cause, code="NETWORK_TIMEOUT")

    @classmethod
    def connection_failed(
        cls, request: "OutboundRequest", cause: Optional[Exception] = None
    ) -> "NetworkError":
        """Create a connection error"""
        return cls(
            f"Connection error: {cause}",
            request=request,
            cause=cause,
            code="NETWORK_CONNECTION",
        )
