"""
Configuration Loader
Loads client configuration from various sources
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from sage_payments.config.client_config import (
    BaseClientConfig,
    DirectApiConfig,
    SevdConfig,
    Environment,
    ENV_VAR_MAPPING,
    DIRECT_API_REQUIRED_KEYS,
    SEVD_REQUIRED_KEYS,
)
from sage_payments.config.config_validator import ConfigValidator
from sage_payments.exceptions import ConfigurationError


ConfigT = TypeVar("ConfigT", bound=BaseClientConfig)

ConfigSource = Union[Mapping[str, Any], BaseClientConfig]


def build_config(
    config: ConfigSource,
    model: Type[ConfigT],
    validator: ConfigValidator,
) -> ConfigT:
    """
    Validate a configuration mapping and build the immutable config model

    Args:
        config: Configuration mapping, or an already-built config model
        model: Config model class to build
        validator: Validator holding the required keys for the model

    Returns:
        The resolved config model

    Raises:
        ConfigurationError: If required keys are missing or values invalid
    """
    if isinstance(config, model):
        return config
    if isinstance(config, BaseClientConfig):
        config = config.model_dump(by_alias=True)

    validator.validate_or_raise(config)

    try:
        return model(**config)
    except PydanticValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(
            f"Client configuration validation failed: {errors}",
            code="CONFIG_INVALID_VALUE",
        ) from e


class ConfigLoader:
    """
    ConfigLoader class
    Provides multiple ways to load and merge configuration
    """

    def __init__(self) -> None:
        self._direct_api_validator = ConfigValidator(DIRECT_API_REQUIRED_KEYS)
        self._sevd_validator = ConfigValidator(SEVD_REQUIRED_KEYS)

    def from_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load configuration from a JSON file

        Args:
            path: Path to JSON configuration file

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigurationError: If file not found or invalid JSON
        """
        file_path = Path(path).resolve()

        if not file_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {file_path}",
                code="CONFIG_FILE_NOT_FOUND"
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in configuration file: {file_path}",
                code="CONFIG_PARSE_ERROR"
            ) from e

        if not isinstance(config, dict):
            raise ConfigurationError(
                f"Configuration file must contain a JSON object: {file_path}",
                code="CONFIG_PARSE_ERROR"
            )
        return config

    def from_environment(self) -> Dict[str, Any]:
        """
        Load configuration from environment variables

        Returns:
            Configuration dictionary from environment variables
        """
        config: Dict[str, Any] = {}

        for env_var, config_key in ENV_VAR_MAPPING.items():
            value = os.environ.get(env_var)
            if value is not None and value != "":
                config[config_key] = self._parse_env_value(config_key, value)

        return config

    def from_dict(self, config: Mapping[str, Any]) -> Dict[str, Any]:
        """Return a copy of the configuration mapping"""
        return dict(config)

    def merge(self, *sources: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configuration sources
        Priority: later sources override earlier sources

        Args:
            sources: Configuration mappings in order of increasing priority

        Returns:
            Merged configuration dictionary
        """
        merged: Dict[str, Any] = {}

        for source in sources:
            merged.update(self._filter_none(source))

        return merged

    def resolve_direct_api(self, config: ConfigSource) -> DirectApiConfig:
        """
        Resolve Direct API configuration with defaults and validation

        Raises:
            ConfigurationError: If configuration is invalid
        """
        return build_config(config, DirectApiConfig, self._direct_api_validator)

    def resolve_sevd(self, config: ConfigSource) -> SevdConfig:
        """
        Resolve SEVD configuration with defaults and validation

        Raises:
            ConfigurationError: If configuration is invalid
        """
        return build_config(config, SevdConfig, self._sevd_validator)

    def load_direct_api(
        self,
        file: Optional[Union[str, Path]] = None,
        env: bool = True,
        config: Optional[Mapping[str, Any]] = None,
    ) -> DirectApiConfig:
        """
        Load, merge, and resolve Direct API configuration

        Args:
            file: Path to JSON configuration file (optional)
            env: Whether to load from environment variables (default: True)
            config: Programmatic configuration mapping (optional)
        """
        return self.resolve_direct_api(self._collect(file, env, config))

    def load_sevd(
        self,
        file: Optional[Union[str, Path]] = None,
        env: bool = True,
        config: Optional[Mapping[str, Any]] = None,
    ) -> SevdConfig:
        """Load, merge, and resolve SEVD configuration"""
        return self.resolve_sevd(self._collect(file, env, config))

    def create_template(self, path: Union[str, Path]) -> None:
        """
        Create a configuration template file

        Args:
            path: Path to write template
        """
        template = {
            "client_id": "YOUR_CLIENT_ID",
            "client_secret": "YOUR_CLIENT_SECRET",
            "merchant_id": "YOUR_MERCHANT_ID",
            "merchant_key": "YOUR_MERCHANT_KEY",
            "application_id": "YOUR_APPLICATION_ID",
            "language_id": "EN",
            "env": Environment.SANDBOX.value,
            "retries": {
                "429": {"global": 2, "endpoints": {}},
            },
            "retry_delay": 0,
        }

        file_path = Path(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(template, f, indent=2)

    def _collect(
        self,
        file: Optional[Union[str, Path]],
        env: bool,
        config: Optional[Mapping[str, Any]],
    ) -> Dict[str, Any]:
        sources = []

        if file is not None:
            sources.append(self.from_file(file))

        if env:
            sources.append(self.from_environment())

        if config is not None:
            sources.append(config)

        return self.merge(*sources)

    def _parse_env_value(self, key: str, value: str) -> Any:
        """Parse environment variable value to appropriate type"""
        if key == "debug":
            return value.lower() in ("true", "1", "yes")

        if key == "retry_delay":
            try:
                return int(value)
            except ValueError:
                return value

        if key == "timeout":
            try:
                return float(value)
            except ValueError:
                return value

        if key == "env":
            try:
                return Environment(value.lower())
            except ValueError:
                return value

        return value

    def _filter_none(self, config: Mapping[str, Any]) -> Dict[str, Any]:
        """Filter out None values from config mapping"""
        return {k: v for k, v in config.items() if v is not None}
