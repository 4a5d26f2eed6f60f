"""
Type definitions for request signing functionality

This module provides type definitions and data classes for the EdgeGrid
EG1-HMAC-SHA256 request signing scheme.
"""

import io
from datetime import datetime
from typing import Dict, List, Optional, Union, Callable, Any, BinaryIO
from dataclasses import dataclass, field
from enum import Enum

from requests.structures import CaseInsensitiveDict

from ..exceptions import EdgeGridSDKError

DEFAULT_MAX_BODY_HASH_SIZE = 2048
AUTHORIZATION_HEADER = "Authorization"


class SignatureAlgorithm(str, Enum):
    """Keyed-hash signing algorithms"""
    EG1_HMAC_SHA256 = "EG1-HMAC-SHA256"


class DigestAlgorithm(str, Enum):
    """Request body hash algorithms"""
    SHA256 = "SHA-256"


class SigningError(EdgeGridSDKError):
    """
    Error class for signing operations

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, code, details)
        self.code = code

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message='{self.message}', code='{self.code}', details={self.details})"


# Common signing error codes
class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Configuration errors
    INVALID_CONFIG = "INVALID_CONFIG"

    # Request errors
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_URL = "INVALID_URL"
    INVALID_HEADERS = "INVALID_HEADERS"

    # Body hashing errors
    STREAM_NOT_READABLE = "STREAM_NOT_READABLE"
    STREAM_NOT_SEEKABLE = "STREAM_NOT_SEEKABLE"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"

    # Validation errors
    INVALID_NONCE = "INVALID_NONCE"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"


class InvalidRequest(SigningError):
    """Raised when the request cannot be canonicalized (e.g. empty method)"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, SigningErrorCodes.INVALID_REQUEST, details)


class InvalidTimestamp(SigningError):
    """Raised when no usable signing timestamp is available"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, SigningErrorCodes.INVALID_TIMESTAMP, details)


class StreamNotReadable(SigningError):
    """Raised when the body stream cannot be read to compute its hash"""

    def __init__(self, message: str = "Cannot read stream to compute hash",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, SigningErrorCodes.STREAM_NOT_READABLE, details)


class StreamNotSeekable(SigningError):
    """Raised when the body stream cannot be rewound after hashing"""

    def __init__(self, message: str = "Stream must be seekable",
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, SigningErrorCodes.STREAM_NOT_SEEKABLE, details)


# Type aliases for convenience
NonceGenerator = Callable[[], str]
TimestampGenerator = Callable[[], datetime]
HeaderDict = Dict[str, str]
RequestBody = Union[BinaryIO, bytes, str, None]


@dataclass
class SignableRequest:
    """
    Request to be signed

    Attributes:
        method: HTTP method (GET, POST, etc.), used as given
        url: Complete request URL
        headers: Request headers; names are matched case-insensitively
        body: Optional body stream. bytes and str are wrapped in a BytesIO
    """
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: RequestBody = None

    def __post_init__(self):
        """Validate request after initialization"""
        if not self.url:
            raise InvalidRequest("Request URL cannot be empty")

        if self.headers is None:
            self.headers = {}

        if not isinstance(self.headers, (dict, CaseInsensitiveDict)):
            raise SigningError(
                "Headers must be a dictionary",
                SigningErrorCodes.INVALID_HEADERS,
                {"headers_type": str(type(self.headers))}
            )

        self.headers = CaseInsensitiveDict(self.headers)

        if isinstance(self.body, str):
            self.body = io.BytesIO(self.body.encode('utf-8'))
        elif isinstance(self.body, (bytes, bytearray)):
            self.body = io.BytesIO(bytes(self.body))

    def get_header(self, name: str) -> Optional[str]:
        """Return the header value for ``name`` (case-insensitive), if present."""
        return self.headers.get(name)

    def remove_header(self, name: str) -> bool:
        """Remove a header; returns True if it was present."""
        if name in self.headers:
            del self.headers[name]
            return True
        return False


@dataclass
class SignerConfig:
    """
    Configuration for request signing

    Attributes:
        headers_to_sign: Ordered header names to include in the signature
        max_body_hash_size: Number of leading POST body bytes to hash
            (None hashes the whole body)
        algorithm: Keyed-hash signing algorithm
        digest_algorithm: Body hash algorithm
        nonce_generator: Optional custom nonce generator function
        timestamp_generator: Optional custom timestamp generator function
    """
    headers_to_sign: List[str] = field(default_factory=list)
    max_body_hash_size: Optional[int] = DEFAULT_MAX_BODY_HASH_SIZE
    algorithm: SignatureAlgorithm = SignatureAlgorithm.EG1_HMAC_SHA256
    digest_algorithm: DigestAlgorithm = DigestAlgorithm.SHA256
    nonce_generator: Optional[NonceGenerator] = None
    timestamp_generator: Optional[TimestampGenerator] = None

    def __post_init__(self):
        """Validate signing configuration"""
        if self.headers_to_sign is None:
            self.headers_to_sign = []

        if isinstance(self.headers_to_sign, str) or not all(
            isinstance(name, str) and name for name in self.headers_to_sign
        ):
            raise SigningError(
                "Headers to sign must be a list of non-empty header names",
                SigningErrorCodes.INVALID_CONFIG,
                {"headers_to_sign": repr(self.headers_to_sign)}
            )

        # Order matters and duplicates are kept
        self.headers_to_sign = list(self.headers_to_sign)

        if self.max_body_hash_size is not None:
            if isinstance(self.max_body_hash_size, bool) or not isinstance(self.max_body_hash_size, int) \
                    or self.max_body_hash_size < 0:
                raise SigningError(
                    "Max body hash size must be a non-negative integer",
                    SigningErrorCodes.INVALID_CONFIG,
                    {"max_body_hash_size": self.max_body_hash_size}
                )

        if not isinstance(self.algorithm, SignatureAlgorithm):
            raise SigningError(
                f"Unsupported signing algorithm: {self.algorithm}",
                SigningErrorCodes.INVALID_CONFIG
            )

        if not isinstance(self.digest_algorithm, DigestAlgorithm):
            raise SigningError(
                f"Unsupported digest algorithm: {self.digest_algorithm}",
                SigningErrorCodes.INVALID_CONFIG
            )


@dataclass
class SigningOptions:
    """
    Signing options for individual requests

    Attributes:
        timestamp: Fixed timestamp for this request
        nonce: Fixed nonce for this request
    """
    timestamp: Optional[datetime] = None
    nonce: Optional[str] = None


@dataclass(frozen=True)
class CanonicalRequest:
    """Canonical form of a request, computed fresh for every signing call."""
    method: str
    scheme: str
    host: str
    path_and_query: str
    headers: str
    body_hash: str

    def to_string(self) -> str:
        return (
            f"{self.method}\t{self.scheme}\t{self.host}\t"
            f"{self.path_and_query}\t{self.headers}\t{self.body_hash}\t"
        )

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class AuthMetadata:
    """Authentication metadata, signed alongside the canonical request."""
    algorithm: SignatureAlgorithm
    client_token: str
    access_token: str
    timestamp: str
    nonce: str

    def to_auth_data(self) -> str:
        return (
            f"{self.algorithm.value} client_token={self.client_token};"
            f"access_token={self.access_token};timestamp={self.timestamp};"
            f"nonce={self.nonce};"
        )


@dataclass
class SigningResult:
    """
    Generated signature result

    Attributes:
        authorization: Authorization header value
        canonical_request: Canonical request string that was signed
        auth_data: Authentication metadata prefix of the header value
        timestamp: Signing timestamp in EdgeGrid format
        nonce: Nonce used for this request
        headers: All headers that should be added to the request
    """
    authorization: str
    canonical_request: str
    auth_data: str
    timestamp: str
    nonce: str
    headers: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate signature result"""
        if not self.authorization:
            raise ValueError("Authorization value cannot be empty")

        if not self.headers:
            self.headers = {AUTHORIZATION_HEADER: self.authorization}
