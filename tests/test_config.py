"""
Tests for SDK configuration loading and logging setup
"""

import json
import logging

import pytest

from edgegrid_sdk import (
    SdkConfigManager,
    ConfigurationError,
    configure_logging,
    load_sdk_config_from_json,
    load_sdk_config_from_file,
    SignerConfig,
    ClientConfig,
    ResponseValidator,
)
from edgegrid_sdk.config.sdk_config import SDK_LOGGER_NAME


FULL_CONFIG = {
    "signing": {
        "headers_to_sign": ["X-Test1", "X-Test2"],
        "max_body_hash_size": 131072
    },
    "transport": {
        "base_url": "https://akab-host-xxx.luna.akamaiapis.net",
        "timeout": 10,
        "verify_ssl": True,
        "pool_connections": 4,
        "pool_maxsize": 8
    },
    "verification": {
        "max_clock_skew_seconds": 60
    },
    "logging": {
        "level": "debug"
    }
}


def with_override(section, key, value):
    data = json.loads(json.dumps(FULL_CONFIG))
    data[section][key] = value
    return data


@pytest.fixture
def sdk_logger():
    """SDK logger restored after the test."""
    logger = logging.getLogger(SDK_LOGGER_NAME)
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    logger.setLevel(level)
    logger.handlers = handlers


class TestSdkConfigManager:
    """Test configuration loading"""

    def test_from_json(self):
        """Test loading a full configuration"""
        manager = SdkConfigManager.from_json(json.dumps(FULL_CONFIG))

        signer_config = manager.to_signer_config()
        assert isinstance(signer_config, SignerConfig)
        assert signer_config.headers_to_sign == ["X-Test1", "X-Test2"]
        assert signer_config.max_body_hash_size == 131072

        client_config = manager.to_client_config()
        assert isinstance(client_config, ClientConfig)
        assert client_config.base_url == "https://akab-host-xxx.luna.akamaiapis.net/"
        assert client_config.timeout == 10
        assert client_config.pool_maxsize == 8

        validator = manager.to_response_validator()
        assert isinstance(validator, ResponseValidator)
        assert validator.max_clock_skew_seconds == 60

        assert manager.get_logging_config().level == "debug"

    def test_defaults(self):
        """Test that only the transport base URL is required"""
        manager = SdkConfigManager.from_dict({"transport": {"base_url": "https://example.com"}})

        assert manager.to_signer_config().headers_to_sign == []
        assert manager.to_signer_config().max_body_hash_size == 2048
        assert manager.to_client_config().timeout == 30.0
        assert manager.to_response_validator().max_clock_skew_seconds == 30
        assert manager.get_logging_config().level == "WARNING"

    def test_null_body_hash_size(self):
        """Test that null max_body_hash_size means hash the whole body"""
        manager = SdkConfigManager.from_json(json.dumps(with_override("signing", "max_body_hash_size", None)))
        assert manager.to_signer_config().max_body_hash_size is None

    def test_unknown_keys_ignored(self):
        """Test forward compatibility with unknown keys"""
        data = with_override("signing", "future_option", True)
        data["extra_section"] = {"a": 1}

        manager = SdkConfigManager.from_dict(data)
        assert manager.to_signer_config().headers_to_sign == ["X-Test1", "X-Test2"]

    def test_signer_config_is_independent(self):
        """Test that converted configs do not share lists"""
        manager = SdkConfigManager.from_dict(FULL_CONFIG)
        signer_config = manager.to_signer_config()
        signer_config.headers_to_sign.append("X-Other")

        assert manager.to_signer_config().headers_to_sign == ["X-Test1", "X-Test2"]

    def test_from_file(self, tmp_path):
        """Test loading from a file"""
        path = tmp_path / "edgegrid.json"
        path.write_text(json.dumps(FULL_CONFIG), encoding='utf-8')

        assert load_sdk_config_from_file(path).to_signer_config().max_body_hash_size == 131072
        assert load_sdk_config_from_file(str(path)).to_client_config().pool_connections == 4

    def test_module_helper(self):
        """Test loading through the module helper"""
        manager = load_sdk_config_from_json(json.dumps(FULL_CONFIG))
        assert isinstance(manager, SdkConfigManager)


class TestConfigErrors:
    """Test configuration validation errors"""

    def test_missing_file(self, tmp_path):
        """Test a missing configuration file"""
        with pytest.raises(ConfigurationError) as exc_info:
            SdkConfigManager.from_file(tmp_path / "absent.json")
        assert exc_info.value.code == "FILE_ERROR"

    def test_invalid_json(self):
        """Test malformed JSON"""
        with pytest.raises(ConfigurationError) as exc_info:
            SdkConfigManager.from_json("{not json")
        assert exc_info.value.code == "PARSE_ERROR"

    def test_not_an_object(self):
        """Test a JSON document that is not an object"""
        with pytest.raises(ConfigurationError) as exc_info:
            SdkConfigManager.from_json("[1, 2]")
        assert exc_info.value.code == "INVALID_FORMAT"

    def test_missing_transport(self):
        """Test that the transport section is required"""
        with pytest.raises(ConfigurationError) as exc_info:
            SdkConfigManager.from_dict({"signing": {}})
        assert exc_info.value.code == "MISSING_SECTION"

    def test_missing_base_url(self):
        """Test that the base URL is required"""
        with pytest.raises(ConfigurationError) as exc_info:
            SdkConfigManager.from_dict({"transport": {"timeout": 5}})
        assert exc_info.value.code == "MISSING_FIELD"

    def test_section_not_object(self):
        """Test a section with the wrong shape"""
        data = dict(FULL_CONFIG, signing=["X-Test1"])
        with pytest.raises(ConfigurationError) as exc_info:
            SdkConfigManager.from_dict(data)
        assert exc_info.value.code == "INVALID_FORMAT"

    @pytest.mark.parametrize("section,key,value", [
        ("signing", "max_body_hash_size", "big"),
        ("signing", "max_body_hash_size", True),
        ("signing", "headers_to_sign", "X-Test1"),
        ("signing", "headers_to_sign", ["X-Test1", 3]),
        ("transport", "timeout", "fast"),
        ("transport", "verify_ssl", "yes"),
        ("transport", "pool_maxsize", 2.5),
        ("verification", "max_clock_skew_seconds", "30"),
    ])
    def test_invalid_types(self, section, key, value):
        """Test values of the wrong type"""
        with pytest.raises(ConfigurationError) as exc_info:
            SdkConfigManager.from_dict(with_override(section, key, value))
        assert exc_info.value.code == "INVALID_TYPE"

    @pytest.mark.parametrize("section,key,value", [
        ("signing", "max_body_hash_size", -1),
        ("transport", "timeout", 0),
        ("transport", "pool_connections", 0),
        ("verification", "max_clock_skew_seconds", -5),
        ("logging", "level", "LOUD"),
    ])
    def test_invalid_values(self, section, key, value):
        """Test values out of range"""
        with pytest.raises(ConfigurationError) as exc_info:
            SdkConfigManager.from_dict(with_override(section, key, value))
        assert exc_info.value.code == "INVALID_VALUE"


class TestConfigureLogging:
    """Test SDK logging setup"""

    def test_configure_logging(self, sdk_logger):
        """Test level and handler installation"""
        logger = configure_logging("debug")

        assert logger is sdk_logger
        assert logger.level == logging.DEBUG
        assert sum(1 for h in logger.handlers if getattr(h, '_edgegrid_sdk', False)) == 1

    def test_handler_added_once(self, sdk_logger):
        """Test repeated configuration does not duplicate handlers"""
        configure_logging("INFO")
        configure_logging(logging.ERROR)

        assert sdk_logger.level == logging.ERROR
        assert sum(1 for h in sdk_logger.handlers if getattr(h, '_edgegrid_sdk', False)) == 1

    def test_manager_configures_logging(self, sdk_logger):
        """Test applying the logging section"""
        SdkConfigManager.from_dict(FULL_CONFIG).configure_logging()
        assert sdk_logger.level == logging.DEBUG
