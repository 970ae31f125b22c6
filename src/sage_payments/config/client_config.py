"""
Sage Payments Client Configuration Types and Schema
Type-safe, immutable configuration objects for the Direct API and SEVD clients
"""

from enum import Enum
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator


class Environment(str, Enum):
    """Gateway environment types"""
    SANDBOX = "sandbox"
    PRODUCTION = "production"


# The Direct API host is the same for sandbox and production
DIRECT_API_BASE_URL = "https://api-cert.sagepayments.com"

# Versioned path prefix shared by all Direct API endpoints
DIRECT_API_BASE_PATH = "bankcard/v1"

# Hosted checkout envelope endpoint for SEVD requests
SEVD_URL = "https://www.sageexchange.com/sevd/frmEnvelope.aspx"

DIRECT_API_REQUIRED_KEYS = (
    "client_id",
    "client_secret",
    "merchant_id",
    "merchant_key",
)

SEVD_REQUIRED_KEYS = (
    "application_id",
    "client_id",
    "client_secret",
    "merchant_id",
    "merchant_key",
    "language_id",
)


class ConfigDefaults:
    """Default configuration values"""
    ENVIRONMENT = Environment.SANDBOX
    RETRY_DELAY = 0
    RAW_STREAM_METHODS = ("POST", "PUT")


# Environment variable mapping
ENV_VAR_MAPPING = {
    "SAGE_CLIENT_ID": "client_id",
    "SAGE_CLIENT_SECRET": "client_secret",
    "SAGE_MERCHANT_ID": "merchant_id",
    "SAGE_MERCHANT_KEY": "merchant_key",
    "SAGE_APPLICATION_ID": "application_id",
    "SAGE_LANGUAGE_ID": "language_id",
    "SAGE_ENV": "env",
    "SAGE_BASE_URL": "base_url",
    "SAGE_SEVD_URL": "url",
    "SAGE_DEBUG": "debug",
    "SAGE_RETRY_DELAY": "retry_delay",
    "SAGE_TIMEOUT": "timeout",
}


def _validate_http_url(value: str, name: str) -> str:
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"{name} must be a valid HTTP/HTTPS URL")
    return value


class RetryRule(BaseModel):
    """
    Retry budget for one response status code

    `global` applies to every endpoint; `endpoints` maps an endpoint path
    (e.g. "charges") to a limit that replaces the global one.
    """

    global_limit: int = Field(..., alias="global", ge=0)
    endpoints: Dict[str, int] = Field(default_factory=dict)

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }

    @field_validator("endpoints")
    @classmethod
    def validate_endpoint_limits(cls, v: Dict[str, int]) -> Dict[str, int]:
        for endpoint, limit in v.items():
            if limit < 0:
                raise ValueError(f"retry limit for endpoint {endpoint} must be non-negative")
        return v


class BaseClientConfig(BaseModel):
    """Credentials and settings shared by both API families"""

    client_id: str = Field(..., description="Client ID", min_length=1)
    client_secret: str = Field(..., description="Client secret used to sign requests", min_length=1)
    merchant_id: str = Field(..., description="Merchant ID", min_length=1)
    merchant_key: str = Field(..., description="Merchant key", min_length=1)

    env: Environment = Field(
        default=ConfigDefaults.ENVIRONMENT,
        description="Environment: 'sandbox' or 'production'"
    )
    debug: bool = Field(
        default=False,
        description="Trace each request; defaults to True in the sandbox"
    )

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
        "coerce_numbers_to_str": True,
    }

    @model_validator(mode="before")
    @classmethod
    def resolve_debug(cls, data: Any) -> Any:
        """Default `debug` from the environment when not given explicitly"""
        if not isinstance(data, dict) or data.get("debug") is not None:
            return data

        data = dict(data)
        try:
            env = Environment(data.get("env") or ConfigDefaults.ENVIRONMENT)
        except ValueError:
            # Left for field validation to report
            return data
        data["debug"] = env == Environment.SANDBOX
        return data


class DirectApiConfig(BaseClientConfig):
    """
    Direct API client configuration

    Everything is resolved at construction time; the object is immutable.
    """

    base_url: str = Field(
        default=DIRECT_API_BASE_URL,
        description="Override the default base URL"
    )
    retries: Dict[int, RetryRule] = Field(
        default_factory=dict,
        description="Retry budget keyed by response status code"
    )
    retry_delay: int = Field(
        default=ConfigDefaults.RETRY_DELAY,
        description="Delay between retries in milliseconds",
        ge=0,
        le=60000
    )
    timeout: Optional[float] = Field(
        default=None,
        description="Socket timeout in seconds for the standard transport",
        gt=0
    )
    raw_stream_methods: Tuple[str, ...] = Field(
        default=ConfigDefaults.RAW_STREAM_METHODS,
        description="HTTP methods sent through the raw-stream transport"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_base_url(cls, data: Any) -> Any:
        """Use the default base URL when none is given"""
        if isinstance(data, dict) and data.get("base_url") is None:
            data = dict(data)
            data["base_url"] = DIRECT_API_BASE_URL
        return data

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        return _validate_http_url(v, "base_url").rstrip("/")

    @field_validator("retries")
    @classmethod
    def validate_status_codes(cls, v: Dict[int, RetryRule]) -> Dict[int, RetryRule]:
        for status_code in v:
            if not 400 <= status_code <= 599:
                raise ValueError(f"cannot retry on non-error status code {status_code}")
        return v

    @field_validator("raw_stream_methods")
    @classmethod
    def normalize_methods(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        return tuple(method.upper() for method in v)


class SevdConfig(BaseClientConfig):
    """SEVD (hosted checkout) client configuration"""

    application_id: str = Field(..., description="Application ID", min_length=1)
    language_id: str = Field(..., description="Language used by the hosted UI", min_length=1)
    url: str = Field(
        default=SEVD_URL,
        description="Override the default envelope URL"
    )

    @model_validator(mode="before")
    @classmethod
    def resolve_url(cls, data: Any) -> Any:
        """Use the default envelope URL when none is given"""
        if isinstance(data, dict) and data.get("url") is None:
            data = dict(data)
            data["url"] = SEVD_URL
        return data

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _validate_http_url(v, "url")
