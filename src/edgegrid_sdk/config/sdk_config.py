"""
SDK configuration management

Loads signing, transport, verification and logging settings from a JSON
document and turns them into the objects the SDK consumes. The signer
itself never reads files or environment variables; this module is the
application-facing convenience layer on top of it.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..exceptions import EdgeGridSDKError
from ..http_client import ClientConfig, DEFAULT_USER_AGENT
from ..signing.types import SignerConfig, DEFAULT_MAX_BODY_HASH_SIZE
from ..verification import ResponseValidator, DEFAULT_MAX_CLOCK_SKEW_SECONDS

SDK_LOGGER_NAME = "edgegrid_sdk"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigurationError(EdgeGridSDKError):
    """Configuration loading and validation error"""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message, code or "CONFIG_ERROR")
        self.code = code


@dataclass
class SigningSettings:
    """Signing configuration"""
    headers_to_sign: List[str] = field(default_factory=list)
    max_body_hash_size: Optional[int] = DEFAULT_MAX_BODY_HASH_SIZE


@dataclass
class TransportSettings:
    """Transport configuration"""
    base_url: str
    timeout: float = 30.0
    verify_ssl: bool = True
    ca_bundle: Optional[str] = None
    client_cert: Optional[str] = None
    pool_connections: int = 10
    pool_maxsize: int = 10
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class VerificationSettings:
    """Response verification configuration"""
    max_clock_skew_seconds: float = DEFAULT_MAX_CLOCK_SKEW_SECONDS


@dataclass
class LoggingSettings:
    """Logging configuration"""
    level: str = "WARNING"


@dataclass
class SdkConfig:
    """SDK configuration structure"""
    signing: SigningSettings
    transport: TransportSettings
    verification: VerificationSettings
    logging: LoggingSettings


def _section(data: Dict[str, Any], name: str, required: bool = False) -> Dict[str, Any]:
    section = data.get(name)
    if section is None:
        if required:
            raise ConfigurationError(f"Missing '{name}' section", "MISSING_SECTION")
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Section '{name}' must be an object", "INVALID_FORMAT")
    return section


def _pick(section: Dict[str, Any], cls: type) -> Dict[str, Any]:
    # Unknown keys are ignored
    return {key: value for key, value in section.items() if key in cls.__dataclass_fields__}


def _check_type(section_name: str, key: str, value: Any, expected: tuple) -> None:
    if isinstance(value, bool) and bool not in expected:
        raise ConfigurationError(
            f"'{section_name}.{key}' has invalid type bool",
            "INVALID_TYPE"
        )
    if not isinstance(value, expected):
        raise ConfigurationError(
            f"'{section_name}.{key}' has invalid type {type(value).__name__}",
            "INVALID_TYPE"
        )


class SdkConfigManager:
    """SDK configuration manager"""

    def __init__(self, config: SdkConfig):
        self.config = config
        self._validate()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SdkConfigManager':
        """Load SDK configuration from a dictionary"""
        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a JSON object", "INVALID_FORMAT")
        return cls(cls._parse_config_dict(data))

    @classmethod
    def from_json(cls, json_string: str) -> 'SdkConfigManager':
        """Load SDK configuration from JSON string"""
        try:
            data = json.loads(json_string)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Failed to parse configuration JSON: {e}", "PARSE_ERROR")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'SdkConfigManager':
        """Load SDK configuration from file"""
        try:
            path = Path(file_path)
            with open(path, 'r', encoding='utf-8') as f:
                json_string = f.read()
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}", "FILE_ERROR")
        return cls.from_json(json_string)

    def to_signer_config(self) -> SignerConfig:
        """Convert to signer configuration"""
        signing = self.config.signing
        return SignerConfig(
            headers_to_sign=list(signing.headers_to_sign),
            max_body_hash_size=signing.max_body_hash_size,
        )

    def to_client_config(self) -> ClientConfig:
        """Convert to HTTP client configuration"""
        transport = self.config.transport
        return ClientConfig(
            base_url=transport.base_url,
            timeout=transport.timeout,
            verify_ssl=transport.verify_ssl,
            ca_bundle=transport.ca_bundle,
            client_cert=transport.client_cert,
            pool_connections=transport.pool_connections,
            pool_maxsize=transport.pool_maxsize,
            user_agent=transport.user_agent,
        )

    def to_response_validator(self) -> ResponseValidator:
        """Build a response validator"""
        return ResponseValidator(self.config.verification.max_clock_skew_seconds)

    def get_logging_config(self) -> LoggingSettings:
        """Get logging configuration"""
        return self.config.logging

    def configure_logging(self) -> logging.Logger:
        """Apply the logging section to the SDK logger"""
        return configure_logging(self.config.logging.level)

    def _validate(self) -> None:
        """Validate the configuration"""
        signing = self.config.signing
        if not isinstance(signing.headers_to_sign, list):
            raise ConfigurationError("'signing.headers_to_sign' must be a list", "INVALID_TYPE")
        for name in signing.headers_to_sign:
            if not isinstance(name, str) or not name:
                raise ConfigurationError(
                    "'signing.headers_to_sign' entries must be non-empty strings",
                    "INVALID_TYPE"
                )
        # null hashes the whole body
        if signing.max_body_hash_size is not None:
            _check_type('signing', 'max_body_hash_size', signing.max_body_hash_size, (int,))
            if signing.max_body_hash_size < 0:
                raise ConfigurationError("'signing.max_body_hash_size' must be non-negative", "INVALID_VALUE")

        transport = self.config.transport
        _check_type('transport', 'base_url', transport.base_url, (str,))
        _check_type('transport', 'timeout', transport.timeout, (int, float))
        _check_type('transport', 'verify_ssl', transport.verify_ssl, (bool,))
        for key in ('pool_connections', 'pool_maxsize'):
            value = getattr(transport, key)
            _check_type('transport', key, value, (int,))
            if value <= 0:
                raise ConfigurationError(f"'transport.{key}' must be positive", "INVALID_VALUE")
        if transport.timeout <= 0:
            raise ConfigurationError("'transport.timeout' must be positive", "INVALID_VALUE")

        skew = self.config.verification.max_clock_skew_seconds
        _check_type('verification', 'max_clock_skew_seconds', skew, (int, float))
        if skew < 0:
            raise ConfigurationError(
                "'verification.max_clock_skew_seconds' must be non-negative",
                "INVALID_VALUE"
            )

        level = self.config.logging.level
        if not isinstance(level, str) or not isinstance(logging.getLevelName(level.upper()), int):
            raise ConfigurationError(f"Unknown logging level: {level!r}", "INVALID_VALUE")

    @staticmethod
    def _parse_config_dict(data: Dict[str, Any]) -> SdkConfig:
        """Parse configuration dictionary into structured objects"""
        transport_data = _pick(_section(data, 'transport', required=True), TransportSettings)
        if 'base_url' not in transport_data:
            raise ConfigurationError("Missing 'transport.base_url'", "MISSING_FIELD")

        return SdkConfig(
            signing=SigningSettings(**_pick(_section(data, 'signing'), SigningSettings)),
            transport=TransportSettings(**transport_data),
            verification=VerificationSettings(**_pick(_section(data, 'verification'), VerificationSettings)),
            logging=LoggingSettings(**_pick(_section(data, 'logging'), LoggingSettings)),
        )


def configure_logging(level: Union[str, int] = "WARNING") -> logging.Logger:
    """
    Send SDK log records to stderr at the given level.

    Args:
        level: Logging level name or number

    Returns:
        logging.Logger: The SDK root logger
    """
    if isinstance(level, str):
        level = level.upper()

    logger = logging.getLogger(SDK_LOGGER_NAME)
    logger.setLevel(level)

    if not any(getattr(handler, '_edgegrid_sdk', False) for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._edgegrid_sdk = True
        logger.addHandler(handler)

    return logger


def load_sdk_config_from_json(json_string: str) -> SdkConfigManager:
    """Load SDK configuration from JSON string"""
    return SdkConfigManager.from_json(json_string)


def load_sdk_config_from_file(file_path: Union[str, Path]) -> SdkConfigManager:
    """Load SDK configuration from file"""
    return SdkConfigManager.from_file(file_path)
