"""
EdgeGrid Python SDK
EG1-HMAC-SHA256 request signing for EdgeGrid-protected APIs
"""

from .version import __version__
from .credential import ClientCredential
from .exceptions import (
    EdgeGridSDKError,
    ValidationError,
    CredentialError,
    InvalidCredential,
    MissingField,
    ServerCommunicationError,
    ClockSkewSuspected,
    UnexpectedResponse,
)
from .signing import (
    # Core signing functionality
    EdgeGridSigner,
    create_signer,
    sign_request,
    build_canonical_request,
    # Types
    SignableRequest,
    SignerConfig,
    SigningOptions,
    SigningResult,
    SigningError,
    InvalidRequest,
    InvalidTimestamp,
    StreamNotReadable,
    StreamNotSeekable,
    SignatureAlgorithm,
    DigestAlgorithm,
    # Configuration
    SignerConfigBuilder,
    create_signer_config,
    # HTTP Integration
    EdgeGridAuth,
    EdgeGridSession,
    SigningSession,
    create_signing_session,
    sign_prepared_request,
)
from .verification import (
    ResponseValidator,
    validate_response,
)
from .http_client import (
    EdgeGridHttpClient,
    ClientConfig,
    create_client,
)
from .config import (
    SdkConfigManager,
    ConfigurationError,
    configure_logging,
    load_sdk_config_from_json,
    load_sdk_config_from_file,
)

__all__ = [
    '__version__',
    # Credential
    'ClientCredential',
    # Exceptions
    'EdgeGridSDKError',
    'ValidationError',
    'CredentialError',
    'InvalidCredential',
    'MissingField',
    'ServerCommunicationError',
    'ClockSkewSuspected',
    'UnexpectedResponse',
    # Signing
    'EdgeGridSigner',
    'create_signer',
    'sign_request',
    'build_canonical_request',
    'SignableRequest',
    'SignerConfig',
    'SigningOptions',
    'SigningResult',
    'SigningError',
    'InvalidRequest',
    'InvalidTimestamp',
    'StreamNotReadable',
    'StreamNotSeekable',
    'SignatureAlgorithm',
    'DigestAlgorithm',
    'SignerConfigBuilder',
    'create_signer_config',
    'EdgeGridAuth',
    'EdgeGridSession',
    'SigningSession',
    'create_signing_session',
    'sign_prepared_request',
    # Verification
    'ResponseValidator',
    'validate_response',
    # HTTP client
    'EdgeGridHttpClient',
    'ClientConfig',
    'create_client',
    # Configuration
    'SdkConfigManager',
    'ConfigurationError',
    'configure_logging',
    'load_sdk_config_from_json',
    'load_sdk_config_from_file',
]
