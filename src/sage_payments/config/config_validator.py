"""
Configuration Validator
Validates client configuration with clear error messages
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional

from sage_payments.config.client_config import (
    DIRECT_API_REQUIRED_KEYS,
    Environment,
)


@dataclass
class ValidationErrorDetail:
    """Validation error detail"""
    field: str
    message: str
    value: Optional[Any] = None


@dataclass
class ValidationResult:
    """Validation result"""
    valid: bool
    errors: List[ValidationErrorDetail] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


class ConfigValidator:
    """
    ConfigValidator class
    Collects every problem with a configuration mapping in a single pass
    """

    def __init__(self, required_keys: Iterable[str] = DIRECT_API_REQUIRED_KEYS) -> None:
        self.required_keys = tuple(required_keys)
        self._errors: List[ValidationErrorDetail] = []
        self._missing: List[str] = []

    def validate(self, config: Mapping[str, Any]) -> ValidationResult:
        """
        Validate the entire configuration mapping

        Args:
            config: Configuration mapping to validate

        Returns:
            ValidationResult with any errors
        """
        self._errors = []
        self._missing = []

        self._validate_required(config)
        self._validate_urls(config)
        self._validate_environment(config)
        self._validate_retries(config)

        return ValidationResult(
            valid=len(self._errors) == 0,
            errors=self._errors.copy(),
            missing=self._missing.copy(),
        )

    def validate_or_raise(self, config: Mapping[str, Any]) -> None:
        """
        Validate and raise if invalid

        Args:
            config: Configuration mapping to validate

        Raises:
            ConfigurationError: If configuration is invalid; the message names
                every missing required key
        """
        from sage_payments.exceptions import ConfigurationError

        result = self.validate(config)
        if result.valid:
            return

        if result.missing:
            message = (
                "The following required items are missing from the client "
                f"configuration: {', '.join(result.missing)}."
            )
        else:
            message = "Client configuration validation failed: " + "; ".join(
                f"{e.field}: {e.message}" for e in result.errors
            )
        raise ConfigurationError(
            message,
            missing=result.missing,
            details={"errors": [{"field": e.field, "message": e.message} for e in result.errors]},
        )

    def _validate_required(self, config: Mapping[str, Any]) -> None:
        """Validate required fields are present and non-empty"""
        for field_name in self.required_keys:
            if field_name not in config or config[field_name] is None:
                self._missing.append(field_name)
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message=f"{field_name} is required"
                ))
                continue

            value = config[field_name]
            if isinstance(value, str) and value.strip() == "":
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message=f"{field_name} cannot be empty",
                    value=value
                ))

    def _validate_urls(self, config: Mapping[str, Any]) -> None:
        """Validate URL overrides"""
        for url_field in ("base_url", "url"):
            value = config.get(url_field)
            if value is None or value == "":
                continue
            if not isinstance(value, str) or not value.startswith(("http://", "https://")):
                self._errors.append(ValidationErrorDetail(
                    field=url_field,
                    message=f"{url_field} must be a valid HTTP/HTTPS URL",
                    value=value
                ))

    def _validate_environment(self, config: Mapping[str, Any]) -> None:
        """Validate environment setting"""
        environment = config.get("env")
        if environment is None:
            return

        valid_environments = [e.value for e in Environment]
        env_value = environment.value if isinstance(environment, Environment) else environment
        if env_value not in valid_environments:
            self._errors.append(ValidationErrorDetail(
                field="env",
                message=f"env must be one of: {', '.join(valid_environments)}",
                value=environment
            ))

    def _validate_retries(self, config: Mapping[str, Any]) -> None:
        """Validate the retry table shape: {status_code: {"global": n, "endpoints": {...}}}"""
        retries = config.get("retries")
        if retries is None:
            return

        if not isinstance(retries, Mapping):
            self._errors.append(ValidationErrorDetail(
                field="retries",
                message="retries must be a mapping of status codes to retry rules",
                value=retries
            ))
            return

        for status_code, rule in retries.items():
            field_name = f"retries.{status_code}"
            try:
                int(status_code)
            except (TypeError, ValueError):
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message="status code must be an integer",
                    value=status_code
                ))
                continue

            # Already-built rule models are validated by pydantic
            if not isinstance(rule, Mapping):
                if not hasattr(rule, "global_limit"):
                    self._errors.append(ValidationErrorDetail(
                        field=field_name,
                        message="retry rule must be a mapping",
                        value=rule
                    ))
                continue

            limit = rule.get("global", rule.get("global_limit"))
            if limit is None:
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message=(
                        f"The number of retries for the \"{status_code}\" "
                        "response status code has not been configured"
                    )
                ))
            elif not isinstance(limit, int) or isinstance(limit, bool) or limit < 0:
                self._errors.append(ValidationErrorDetail(
                    field=field_name,
                    message="global retry limit must be a non-negative integer",
                    value=limit
                ))
