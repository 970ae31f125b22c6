"""
Configuration Module Unit Tests
"""

import os
import json
import tempfile
from pathlib import Path
import pytest

from sage_payments.config import (
    DirectApiConfig,
    SevdConfig,
    Environment,
    ConfigLoader,
    ConfigValidator,
    ConfigDefaults,
    DIRECT_API_BASE_URL,
    SEVD_URL,
    SEVD_REQUIRED_KEYS,
)
from sage_payments.exceptions import ConfigurationError


class TestConfigValidator:
    """Tests for ConfigValidator"""

    @pytest.fixture
    def validator(self) -> ConfigValidator:
        return ConfigValidator()

    def test_validate_valid_config(self, validator: ConfigValidator, direct_api_config: dict):
        """Should pass with valid configuration"""
        result = validator.validate(direct_api_config)
        assert result.valid is True
        assert len(result.errors) == 0

    def test_validate_missing_client_id(self, validator: ConfigValidator, direct_api_config: dict):
        """Should fail when client_id is missing"""
        del direct_api_config["client_id"]
        result = validator.validate(direct_api_config)
        assert result.valid is False
        assert result.missing == ["client_id"]

    def test_validate_reports_every_missing_key(self, validator: ConfigValidator):
        """Should list all missing keys, not just the first"""
        result = validator.validate({"client_id": "abc"})
        assert result.missing == ["client_secret", "merchant_id", "merchant_key"]

    def test_validate_empty_value(self, validator: ConfigValidator, direct_api_config: dict):
        """Should fail when a required value is empty"""
        direct_api_config["merchant_key"] = "  "
        result = validator.validate(direct_api_config)
        assert result.valid is False
        assert any(
            e.field == "merchant_key" and "empty" in e.message
            for e in result.errors
        )

    def test_validate_invalid_environment(self, validator: ConfigValidator, direct_api_config: dict):
        """Should fail with invalid environment"""
        direct_api_config["env"] = "staging"
        result = validator.validate(direct_api_config)
        assert result.valid is False
        assert any(e.field == "env" for e in result.errors)

    def test_validate_invalid_base_url(self, validator: ConfigValidator, direct_api_config: dict):
        """Should fail with invalid base_url"""
        direct_api_config["base_url"] = "not-a-url"
        result = validator.validate(direct_api_config)
        assert result.valid is False
        assert any(e.field == "base_url" for e in result.errors)

    def test_validate_retry_rule_without_global(self, validator: ConfigValidator, direct_api_config: dict):
        """Should fail when a retry rule has no global limit"""
        direct_api_config["retries"] = {429: {"endpoints": {"charges": 1}}}
        result = validator.validate(direct_api_config)
        assert result.valid is False
        assert any(
            e.field == "retries.429" and "has not been configured" in e.message
            for e in result.errors
        )

    def test_validate_retry_negative_limit(self, validator: ConfigValidator, direct_api_config: dict):
        direct_api_config["retries"] = {429: {"global": -1}}
        result = validator.validate(direct_api_config)
        assert result.valid is False

    def test_validate_sevd_required_keys(self):
        """Should use the SEVD required keys when asked to"""
        validator = ConfigValidator(SEVD_REQUIRED_KEYS)
        result = validator.validate({})
        assert result.missing == list(SEVD_REQUIRED_KEYS)

    def test_validate_or_raise_lists_missing_keys(self, validator: ConfigValidator):
        """Should raise ConfigurationError naming every missing key"""
        with pytest.raises(ConfigurationError) as exc_info:
            validator.validate_or_raise({"client_secret": "s"})

        message = str(exc_info.value)
        assert "client_id" in message
        assert "merchant_id" in message
        assert "merchant_key" in message
        assert exc_info.value.missing == ["client_id", "merchant_id", "merchant_key"]


class TestConfigLoader:
    """Tests for ConfigLoader"""

    @pytest.fixture
    def loader(self) -> ConfigLoader:
        return ConfigLoader()

    def test_from_dict(self, loader: ConfigLoader, direct_api_config: dict):
        """Should return a copy of the configuration"""
        result = loader.from_dict(direct_api_config)
        assert result == direct_api_config
        assert result is not direct_api_config

    def test_from_environment(self, loader: ConfigLoader, monkeypatch):
        """Should load configuration from environment variables"""
        monkeypatch.setenv("SAGE_CLIENT_ID", "env-client")
        monkeypatch.setenv("SAGE_MERCHANT_ID", "123456789012")
        monkeypatch.setenv("SAGE_ENV", "production")
        monkeypatch.setenv("SAGE_RETRY_DELAY", "250")
        monkeypatch.setenv("SAGE_DEBUG", "false")

        result = loader.from_environment()

        assert result["client_id"] == "env-client"
        assert result["merchant_id"] == "123456789012"
        assert result["env"] == Environment.PRODUCTION
        assert result["retry_delay"] == 250
        assert result["debug"] is False

    def test_from_environment_boolean_parsing(self, loader: ConfigLoader, monkeypatch):
        """Should parse boolean values correctly"""
        monkeypatch.setenv("SAGE_DEBUG", "true")
        assert loader.from_environment()["debug"] is True

        monkeypatch.setenv("SAGE_DEBUG", "1")
        assert loader.from_environment()["debug"] is True

        monkeypatch.setenv("SAGE_DEBUG", "no")
        assert loader.from_environment()["debug"] is False

    def test_merge(self, loader: ConfigLoader):
        """Should merge multiple configurations with priority"""
        base = {"client_id": "111", "merchant_id": "M-BASE"}
        override = {"client_id": "222", "retry_delay": 5}

        result = loader.merge(base, override)

        assert result["client_id"] == "222"
        assert result["merchant_id"] == "M-BASE"
        assert result["retry_delay"] == 5

    def test_merge_filters_none(self, loader: ConfigLoader):
        """Should not include None values from overrides"""
        result = loader.merge({"client_id": "111"}, {"client_id": None})
        assert result["client_id"] == "111"

    def test_resolve_applies_defaults(self, loader: ConfigLoader, direct_api_config: dict):
        """Should apply default values"""
        result = loader.resolve_direct_api(direct_api_config)

        assert result.env == ConfigDefaults.ENVIRONMENT
        assert result.base_url == DIRECT_API_BASE_URL
        assert result.retry_delay == ConfigDefaults.RETRY_DELAY
        assert result.raw_stream_methods == ConfigDefaults.RAW_STREAM_METHODS
        assert result.retries == {}

    def test_resolve_missing_keys(self, loader: ConfigLoader):
        with pytest.raises(ConfigurationError) as exc_info:
            loader.resolve_direct_api({})
        assert exc_info.value.missing == [
            "client_id", "client_secret", "merchant_id", "merchant_key",
        ]

    def test_resolve_wraps_model_errors(self, loader: ConfigLoader, direct_api_config: dict):
        """Should report pydantic validation failures as ConfigurationError"""
        direct_api_config["retry_delay"] = -5
        with pytest.raises(ConfigurationError) as exc_info:
            loader.resolve_direct_api(direct_api_config)
        assert "retry_delay" in str(exc_info.value)

    def test_resolve_sevd(self, loader: ConfigLoader, sevd_config: dict):
        result = loader.resolve_sevd(sevd_config)
        assert isinstance(result, SevdConfig)
        assert result.url == SEVD_URL

    def test_from_file(self, loader: ConfigLoader, direct_api_config: dict):
        """Should load configuration from JSON file"""
        with tempfile.NamedTemporaryFile(
            mode="w", suffix=".json", delete=False
        ) as f:
            json.dump(direct_api_config, f)
            f.flush()

        try:
            result = loader.from_file(f.name)
            assert result["client_id"] == direct_api_config["client_id"]
        finally:
            os.unlink(f.name)

    def test_from_file_not_found(self, loader: ConfigLoader):
        """Should raise error for missing file"""
        with pytest.raises(ConfigurationError) as exc_info:
            loader.from_file("/nonexistent/path.json")

        assert exc_info.value.code == "CONFIG_FILE_NOT_FOUND"

    def test_from_file_invalid_json(self, loader: ConfigLoader):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "broken.json"
            path.write_text("{not json", encoding="utf-8")

            with pytest.raises(ConfigurationError) as exc_info:
                loader.from_file(path)

        assert exc_info.value.code == "CONFIG_PARSE_ERROR"

    def test_load_direct_api_from_config(self, loader: ConfigLoader, direct_api_config: dict):
        """Should load and resolve configuration from dict"""
        result = loader.load_direct_api(config=direct_api_config, env=False)

        assert result.client_id == direct_api_config["client_id"]
        assert result.env == Environment.SANDBOX

    def test_load_direct_api_environment_overridden_by_config(
        self, loader: ConfigLoader, direct_api_config: dict, monkeypatch
    ):
        monkeypatch.setenv("SAGE_CLIENT_ID", "from-env")
        monkeypatch.setenv("SAGE_ENV", "production")

        result = loader.load_direct_api(config=direct_api_config)

        assert result.client_id == direct_api_config["client_id"]
        assert result.env == Environment.PRODUCTION

    def test_create_template(self, loader: ConfigLoader):
        """Should create a template that loads once filled in"""
        with tempfile.TemporaryDirectory() as tmpdir:
            template_path = Path(tmpdir) / "config" / "template.json"
            loader.create_template(template_path)

            assert template_path.exists()
            result = loader.load_sevd(file=template_path, env=False)

        assert result.language_id == "EN"


class TestDirectApiConfig:
    """Tests for the DirectApiConfig model"""

    def test_create_valid_config(self, direct_api_config: dict):
        config = DirectApiConfig(**direct_api_config)
        assert config.client_id == "client-123"
        assert config.env == Environment.SANDBOX

    def test_debug_defaults_to_true_in_sandbox(self, direct_api_config: dict):
        assert DirectApiConfig(**direct_api_config).debug is True

    def test_debug_defaults_to_false_in_production(self, direct_api_config: dict):
        direct_api_config["env"] = "production"
        assert DirectApiConfig(**direct_api_config).debug is False

    def test_explicit_debug_wins(self, direct_api_config: dict):
        direct_api_config["debug"] = False
        assert DirectApiConfig(**direct_api_config).debug is False

        direct_api_config["env"] = Environment.PRODUCTION
        direct_api_config["debug"] = True
        assert DirectApiConfig(**direct_api_config).debug is True

    def test_custom_base_url(self, direct_api_config: dict):
        direct_api_config["base_url"] = "https://gateway.example.com/"
        config = DirectApiConfig(**direct_api_config)
        assert config.base_url == "https://gateway.example.com"

    def test_invalid_base_url(self, direct_api_config: dict):
        direct_api_config["base_url"] = "not-a-url"
        with pytest.raises(ValueError):
            DirectApiConfig(**direct_api_config)

    def test_numeric_merchant_id_is_coerced(self, direct_api_config: dict):
        direct_api_config["merchant_id"] = 999999999997
        assert DirectApiConfig(**direct_api_config).merchant_id == "999999999997"

    def test_retry_table_accepts_string_status_codes(self, direct_api_config: dict):
        """JSON files can only carry string keys"""
        direct_api_config["retries"] = {"429": {"global": 2, "endpoints": {"charges": 1}}}
        config = DirectApiConfig(**direct_api_config)

        assert config.retries[429].global_limit == 2
        assert config.retries[429].endpoints == {"charges": 1}

    def test_retry_on_success_status_rejected(self, direct_api_config: dict):
        direct_api_config["retries"] = {200: {"global": 1}}
        with pytest.raises(ValueError):
            DirectApiConfig(**direct_api_config)

    def test_raw_stream_methods_are_upper_cased(self, direct_api_config: dict):
        direct_api_config["raw_stream_methods"] = ["post"]
        assert DirectApiConfig(**direct_api_config).raw_stream_methods == ("POST",)

    def test_config_is_immutable(self, direct_api_config: dict):
        config = DirectApiConfig(**direct_api_config)
        with pytest.raises(ValueError):
            config.base_url = "https://other.example.com"
