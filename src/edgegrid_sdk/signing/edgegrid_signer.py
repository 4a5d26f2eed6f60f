"""
EdgeGrid EG1-HMAC-SHA256 request signer

This module provides the main signer implementation. Signing is stateless:
every call draws a fresh timestamp and nonce, builds the canonical request,
derives a per-timestamp signing key from the client secret and computes the
Authorization header value.
"""

import logging
from typing import Optional, TYPE_CHECKING

from .types import (
    SignableRequest,
    SignerConfig,
    SigningOptions,
    SigningResult,
    SigningError,
    SigningErrorCodes,
    SignatureAlgorithm,
    AuthMetadata,
    AUTHORIZATION_HEADER,
)
from .utils import (
    generate_nonce,
    generate_timestamp,
    format_edgegrid_timestamp,
    validate_nonce,
    keyed_hash,
    to_base64,
    mask_token,
    PerformanceTimer,
)
from .canonical_request import CanonicalRequestBuilder
from .signing_config import validate_signer_config

if TYPE_CHECKING:
    from ..credential import ClientCredential

logger = logging.getLogger(__name__)

SLOW_SIGNING_THRESHOLD_MS = 10


def build_auth_data(
    credential: 'ClientCredential',
    timestamp: str,
    nonce: str,
    algorithm: SignatureAlgorithm = SignatureAlgorithm.EG1_HMAC_SHA256
) -> str:
    """
    Build the authentication metadata string.

    Returns:
        str: ``"{alg} client_token=..;access_token=..;timestamp=..;nonce=..;"``
    """
    return AuthMetadata(
        algorithm=algorithm,
        client_token=credential.client_token,
        access_token=credential.access_token,
        timestamp=timestamp,
        nonce=nonce,
    ).to_auth_data()


def derive_signing_key(
    secret: str,
    timestamp: str,
    algorithm: SignatureAlgorithm = SignatureAlgorithm.EG1_HMAC_SHA256
) -> str:
    """
    Derive the per-request signing key.

    Args:
        secret: Client secret
        timestamp: Formatted signing timestamp

    Returns:
        str: Base64 text of HMAC(secret, timestamp)
    """
    return to_base64(keyed_hash(secret, timestamp, algorithm))


def compute_signature(
    signing_key: str,
    canonical_request: str,
    auth_data: str,
    algorithm: SignatureAlgorithm = SignatureAlgorithm.EG1_HMAC_SHA256
) -> str:
    """
    Compute the request signature.

    The base64 text of the signing key (not the raw digest) is the HMAC key.

    Returns:
        str: Base64 text of HMAC(signing_key, canonical_request + auth_data)
    """
    return to_base64(keyed_hash(signing_key, canonical_request + auth_data, algorithm))


def build_authorization_header(auth_data: str, signature: str) -> str:
    """Join auth data and signature into the Authorization header value."""
    return f"{auth_data}signature={signature}"


class EdgeGridSigner:
    """
    EdgeGrid request signer

    A signer holds only read-only configuration and may be shared between
    threads.
    """

    def __init__(self, config: Optional[SignerConfig] = None):
        """
        Initialize the signer with configuration.

        Args:
            config: Signer configuration (defaults: no headers, 2048 byte body hash)

        Raises:
            SigningError: If configuration is invalid
        """
        config = config or SignerConfig()
        validate_signer_config(config)
        self.config = self._copy_config(config)

    def sign_request(
        self,
        request: SignableRequest,
        credential: 'ClientCredential',
        options: Optional[SigningOptions] = None
    ) -> SigningResult:
        """
        Sign a request.

        Any Authorization header already on ``request`` is removed first and
        never contributes to the canonical request.

        Args:
            request: Request to sign
            credential: Client credential
            options: Optional fixed timestamp/nonce for this call

        Returns:
            SigningResult: Authorization header value and signing inputs

        Raises:
            SigningError: If signing fails
        """
        timer = PerformanceTimer()
        options = options or SigningOptions()

        try:
            timestamp = self._resolve_timestamp(options)
            nonce = self._resolve_nonce(options)

            if request.remove_header(AUTHORIZATION_HEADER):
                logger.debug("Removed existing Authorization header before signing")

            canonical_request = CanonicalRequestBuilder(request, self.config).build().to_string()
            auth_data = build_auth_data(credential, timestamp, nonce, self.config.algorithm)

            signing_key = derive_signing_key(credential.secret, timestamp, self.config.algorithm)
            signature = compute_signature(signing_key, canonical_request, auth_data, self.config.algorithm)
            authorization = build_authorization_header(auth_data, signature)

        except SigningError:
            raise
        except Exception as e:
            raise SigningError(
                f"Request signing failed: {e}",
                SigningErrorCodes.SIGNING_FAILED,
                {"original_error": str(e)}
            ) from e

        elapsed_ms = timer.elapsed_ms()
        if elapsed_ms > SLOW_SIGNING_THRESHOLD_MS:
            logger.warning(f"Signing operation took {elapsed_ms:.2f}ms (target: <{SLOW_SIGNING_THRESHOLD_MS}ms)")

        logger.debug(
            f"Signed {request.method} request to {request.url} "
            f"for client token {mask_token(credential.client_token)}"
        )

        return SigningResult(
            authorization=authorization,
            canonical_request=canonical_request,
            auth_data=auth_data,
            timestamp=timestamp,
            nonce=nonce,
            headers={AUTHORIZATION_HEADER: authorization},
        )

    def _resolve_timestamp(self, options: SigningOptions) -> str:
        """
        Pick and format the signing timestamp.

        Raises:
            InvalidTimestamp: If the timestamp is missing or not a datetime
        """
        timestamp = options.timestamp
        if timestamp is None:
            timestamp_gen = self.config.timestamp_generator or generate_timestamp
            timestamp = timestamp_gen()
        return format_edgegrid_timestamp(timestamp)

    def _resolve_nonce(self, options: SigningOptions) -> str:
        """
        Pick the nonce for this call.

        Raises:
            SigningError: If the nonce is empty or malformed
        """
        nonce = options.nonce
        if nonce is None:
            nonce_gen = self.config.nonce_generator or generate_nonce
            nonce = nonce_gen()

        if not validate_nonce(nonce):
            raise SigningError(
                f"Invalid nonce format: {nonce!r}",
                SigningErrorCodes.INVALID_NONCE,
                {"nonce": repr(nonce)}
            )
        return nonce

    def _copy_config(self, config: SignerConfig) -> SignerConfig:
        """
        Copy configuration so later changes to the caller's list do not leak in.
        """
        return SignerConfig(
            headers_to_sign=list(config.headers_to_sign),
            max_body_hash_size=config.max_body_hash_size,
            algorithm=config.algorithm,
            digest_algorithm=config.digest_algorithm,
            nonce_generator=config.nonce_generator,
            timestamp_generator=config.timestamp_generator,
        )


def create_signer(config: Optional[SignerConfig] = None) -> EdgeGridSigner:
    """
    Create a new EdgeGrid signer.

    Args:
        config: Signer configuration

    Returns:
        EdgeGridSigner: Configured signer instance
    """
    return EdgeGridSigner(config)


def sign_request(
    request: SignableRequest,
    credential: 'ClientCredential',
    config: Optional[SignerConfig] = None,
    options: Optional[SigningOptions] = None
) -> SigningResult:
    """
    Sign a request with the given configuration.

    Args:
        request: Request to sign
        credential: Client credential
        config: Signer configuration
        options: Optional signing options

    Returns:
        SigningResult: Signing result
    """
    signer = create_signer(config)
    return signer.sign_request(request, credential, options)
