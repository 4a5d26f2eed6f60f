"""
EdgeGrid Python SDK - Request Signing Module

EG1-HMAC-SHA256 request signing: canonical request construction, signing
key derivation and Authorization header generation.
"""

from .types import (
    SignableRequest,
    SignerConfig,
    SigningOptions,
    SigningResult,
    CanonicalRequest,
    AuthMetadata,
    SigningError,
    SigningErrorCodes,
    InvalidRequest,
    InvalidTimestamp,
    StreamNotReadable,
    StreamNotSeekable,
    DigestAlgorithm,
    SignatureAlgorithm,
    AUTHORIZATION_HEADER,
    DEFAULT_MAX_BODY_HASH_SIZE,
)

from .edgegrid_signer import (
    EdgeGridSigner,
    create_signer,
    sign_request,
    build_auth_data,
    derive_signing_key,
    compute_signature,
    build_authorization_header,
)

from .canonical_request import (
    CanonicalRequestBuilder,
    build_canonical_request,
)

from .signing_config import (
    SignerConfigBuilder,
    create_signer_config,
    validate_signer_config,
)

from .utils import (
    generate_nonce,
    generate_timestamp,
    format_edgegrid_timestamp,
    calculate_body_hash,
    normalize_header_value,
    validate_nonce,
    parse_url,
    mask_token,
)

from .integration import (
    EdgeGridAuth,
    EdgeGridSession,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'EdgeGridSigner',
    'create_signer',
    'sign_request',
    'build_auth_data',
    'derive_signing_key',
    'compute_signature',
    'build_authorization_header',
    'CanonicalRequestBuilder',
    'build_canonical_request',
    # Types
    'SignableRequest',
    'SignerConfig',
    'SigningOptions',
    'SigningResult',
    'CanonicalRequest',
    'AuthMetadata',
    'SigningError',
    'SigningErrorCodes',
    'InvalidRequest',
    'InvalidTimestamp',
    'StreamNotReadable',
    'StreamNotSeekable',
    'DigestAlgorithm',
    'SignatureAlgorithm',
    'AUTHORIZATION_HEADER',
    'DEFAULT_MAX_BODY_HASH_SIZE',
    # Configuration
    'SignerConfigBuilder',
    'create_signer_config',
    'validate_signer_config',
    # Utilities
    'generate_nonce',
    'generate_timestamp',
    'format_edgegrid_timestamp',
    'calculate_body_hash',
    'normalize_header_value',
    'validate_nonce',
    'parse_url',
    'mask_token',
    # HTTP Integration
    'EdgeGridAuth',
    'EdgeGridSession',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
]
