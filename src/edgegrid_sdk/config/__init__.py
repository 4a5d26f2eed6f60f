"""
Configuration management for EdgeGrid Python SDK

This module loads SDK settings from JSON documents and configures SDK
logging.
"""

from .sdk_config import (
    SdkConfig,
    SdkConfigManager,
    SigningSettings,
    TransportSettings,
    VerificationSettings,
    LoggingSettings,
    ConfigurationError,
    configure_logging,
    load_sdk_config_from_json,
    load_sdk_config_from_file,
)

__all__ = [
    'SdkConfig',
    'SdkConfigManager',
    'SigningSettings',
    'TransportSettings',
    'VerificationSettings',
    'LoggingSettings',
    'ConfigurationError',
    'configure_logging',
    'load_sdk_config_from_json',
    'load_sdk_config_from_file',
]
