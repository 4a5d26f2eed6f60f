"""
Configuration management for request signing

This module provides a fluent builder and validation for EdgeGrid signer
configuration.
"""

from typing import List, Optional

from .types import (
    SignerConfig,
    SignatureAlgorithm,
    DigestAlgorithm,
    SigningError,
    SigningErrorCodes,
    NonceGenerator,
    TimestampGenerator,
    DEFAULT_MAX_BODY_HASH_SIZE,
)


class SignerConfigBuilder:
    """
    Builder for creating signer configurations with fluent API
    """

    def __init__(self):
        self._headers: List[str] = []
        self._max_body_hash_size: Optional[int] = DEFAULT_MAX_BODY_HASH_SIZE
        self._nonce_generator: Optional[NonceGenerator] = None
        self._timestamp_generator: Optional[TimestampGenerator] = None

    def headers(self, headers: List[str]) -> 'SignerConfigBuilder':
        """
        Replace the ordered list of headers to sign.

        Args:
            headers: Header names, in signing order

        Returns:
            SignerConfigBuilder: Self for method chaining
        """
        self._headers = list(headers)
        return self

    def add_header(self, header_name: str) -> 'SignerConfigBuilder':
        """
        Append a header to the signing order.

        Args:
            header_name: Header name, matched case-insensitively

        Returns:
            SignerConfigBuilder: Self for method chaining
        """
        self._headers.append(header_name)
        return self

    def max_body_hash_size(self, size: Optional[int]) -> 'SignerConfigBuilder':
        """
        Set the number of leading POST body bytes that are hashed.

        Args:
            size: Byte count, or None to hash the whole body

        Returns:
            SignerConfigBuilder: Self for method chaining
        """
        self._max_body_hash_size = size
        return self

    def nonce_generator(self, generator: NonceGenerator) -> 'SignerConfigBuilder':
        """Set custom nonce generator."""
        self._nonce_generator = generator
        return self

    def timestamp_generator(self, generator: TimestampGenerator) -> 'SignerConfigBuilder':
        """Set custom timestamp generator."""
        self._timestamp_generator = generator
        return self

    def build(self) -> SignerConfig:
        """
        Build the signer configuration.

        Returns:
            SignerConfig: Validated configuration

        Raises:
            SigningError: If configuration is invalid
        """
        config = SignerConfig(
            headers_to_sign=list(self._headers),
            max_body_hash_size=self._max_body_hash_size,
            algorithm=SignatureAlgorithm.EG1_HMAC_SHA256,
            digest_algorithm=DigestAlgorithm.SHA256,
            nonce_generator=self._nonce_generator,
            timestamp_generator=self._timestamp_generator,
        )
        validate_signer_config(config)
        return config


def create_signer_config() -> SignerConfigBuilder:
    """
    Create a new signer configuration builder.

    Returns:
        SignerConfigBuilder: New builder instance
    """
    return SignerConfigBuilder()


def validate_signer_config(config: SignerConfig) -> None:
    """
    Validate signer configuration.

    Args:
        config: Configuration to validate

    Raises:
        SigningError: If configuration is invalid
    """
    if not isinstance(config, SignerConfig):
        raise SigningError(
            "Config must be a SignerConfig instance",
            SigningErrorCodes.INVALID_CONFIG,
            {"config_type": str(type(config))}
        )

    for name, generator in (("nonce_generator", config.nonce_generator),
                            ("timestamp_generator", config.timestamp_generator)):
        if generator is not None and not callable(generator):
            raise SigningError(
                f"{name} must be callable",
                SigningErrorCodes.INVALID_CONFIG,
                {"field": name}
            )
