"""
Configuration module
"""

from sage_payments.config.client_config import (
    BaseClientConfig,
    DirectApiConfig,
    SevdConfig,
    RetryRule,
    Environment,
    DIRECT_API_BASE_URL,
    DIRECT_API_BASE_PATH,
    SEVD_URL,
    DIRECT_API_REQUIRED_KEYS,
    SEVD_REQUIRED_KEYS,
    ENV_VAR_MAPPING,
    ConfigDefaults,
)
from sage_payments.config.config_loader import ConfigLoader, build_config
from sage_payments.config.config_validator import (
    ConfigValidator,
    ValidationResult,
    ValidationErrorDetail,
)

__all__ = [
    "BaseClientConfig",
    "DirectApiConfig",
    "SevdConfig",
    "RetryRule",
    "Environment",
    "DIRECT_API_BASE_URL",
    "DIRECT_API_BASE_PATH",
    "SEVD_URL",
    "DIRECT_API_REQUIRED_KEYS",
    "SEVD_REQUIRED_KEYS",
    "ENV_VAR_MAPPING",
    "ConfigDefaults",
    "ConfigLoader",
    "build_config",
    "ConfigValidator",
    "ValidationResult",
    "ValidationErrorDetail",
]
