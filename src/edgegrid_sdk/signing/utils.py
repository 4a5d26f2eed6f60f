"""
Utility functions for request signing

This module provides utility functions for EdgeGrid request signing,
including nonce generation, timestamp handling, body hashing, keyed hashing
and URL parsing.
"""

import re
import time
import uuid
import base64
import hashlib
from datetime import datetime, timezone
from typing import Dict, Optional, BinaryIO
from urllib.parse import urlsplit

from cryptography.hazmat.primitives import hashes, hmac

from .types import (
    SigningError,
    SigningErrorCodes,
    SignatureAlgorithm,
    DigestAlgorithm,
    InvalidRequest,
    InvalidTimestamp,
    StreamNotReadable,
    StreamNotSeekable,
)

EDGEGRID_TIMESTAMP_FORMAT = '%Y%m%dT%H:%M:%S+0000'

_BODY_READ_CHUNK_SIZE = 8192
_WHITESPACE_RUN = re.compile(r'\s+')

_HMAC_HASHES = {
    SignatureAlgorithm.EG1_HMAC_SHA256: hashes.SHA256,
}

_BODY_DIGESTS = {
    DigestAlgorithm.SHA256: hashlib.sha256,
}


def generate_nonce() -> str:
    """
    Generate a UUID v4 nonce for replay protection.

    Returns:
        str: Lowercase hyphenated UUID v4 string
    """
    return str(uuid.uuid4()).lower()


def generate_timestamp() -> datetime:
    """
    Generate the current UTC time, truncated to whole seconds.

    Returns:
        datetime: Timezone-aware UTC datetime
    """
    return datetime.now(timezone.utc).replace(microsecond=0)


def format_edgegrid_timestamp(timestamp: Optional[datetime]) -> str:
    """
    Format a timestamp the way EdgeGrid expects it (``20140321T19:34:21+0000``).

    Naive datetimes are taken to be UTC already.

    Args:
        timestamp: Datetime to format

    Returns:
        str: Formatted timestamp

    Raises:
        InvalidTimestamp: If timestamp is None or not a datetime
    """
    if timestamp is None:
        raise InvalidTimestamp("timestamp cannot be null")

    if not isinstance(timestamp, datetime):
        raise InvalidTimestamp(
            f"Timestamp must be a datetime, got {type(timestamp).__name__}",
            {"timestamp": repr(timestamp)}
        )

    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    return timestamp.astimezone(timezone.utc).strftime(EDGEGRID_TIMESTAMP_FORMAT)


def validate_nonce(nonce: str) -> bool:
    """
    Validate nonce (non-empty string without whitespace or separators).

    Args:
        nonce: Nonce string to validate

    Returns:
        bool: True if nonce can be embedded in the auth data
    """
    if not isinstance(nonce, str) or not nonce:
        return False

    return not any(ch.isspace() or ch == ';' for ch in nonce)


def parse_url(url: str) -> Dict[str, str]:
    """
    Parse URL to extract components needed for signing.

    Args:
        url: URL string to parse

    Returns:
        dict: Dictionary with parsed URL components:
            - scheme: lowercase URI scheme
            - host: host name without port
            - path_and_query: path (with leading /) plus ?query, not re-encoded

    Raises:
        InvalidRequest: If URL format is invalid
    """
    try:
        parsed = urlsplit(url)
        host = parsed.hostname
    except ValueError as e:
        raise InvalidRequest(
            f"Failed to parse URL: {e}",
            {"url": url, "original_error": str(e)}
        )

    if not parsed.scheme or not host:
        raise InvalidRequest(f"Invalid URL format: {url}", {"url": url})

    # Only allow HTTP/HTTPS schemes for signing
    if parsed.scheme not in ('http', 'https'):
        raise InvalidRequest(
            f"Unsupported URL scheme: {parsed.scheme}",
            {"url": url, "scheme": parsed.scheme}
        )

    if ':' in host:
        host = f"[{host}]"

    path = parsed.path or "/"
    # urlsplit drops an empty query; a bare trailing "?" is still part of the target
    has_query = bool(parsed.query) or url.split('#', 1)[0].endswith('?')
    query = f"?{parsed.query}" if has_query else ""

    return {
        "scheme": parsed.scheme,
        "host": host,
        "path_and_query": path + query,
    }


def normalize_header_value(value: str) -> str:
    """
    Trim a header value and collapse internal whitespace runs to one space.

    Args:
        value: Raw header value

    Returns:
        str: Normalized value
    """
    return _WHITESPACE_RUN.sub(' ', value.strip())


def calculate_body_hash(
    stream: Optional[BinaryIO],
    max_size: Optional[int],
    algorithm: DigestAlgorithm = DigestAlgorithm.SHA256
) -> str:
    """
    Hash up to ``max_size`` bytes of a body stream and rewind it.

    Reading starts at the current stream position; afterwards the stream is
    positioned at its start so it can be transmitted.

    Args:
        stream: Body stream (None yields an empty hash)
        max_size: Maximum number of bytes to hash (None for the whole body)
        algorithm: Digest algorithm to use

    Returns:
        str: Base64-encoded digest, or "" when there is no body

    Raises:
        StreamNotReadable: If the stream cannot be read
        StreamNotSeekable: If the stream cannot be rewound
    """
    if stream is None:
        return ""

    stream_type = type(stream).__name__

    # Closed streams raise ValueError from readable() and seekable()
    readable = getattr(stream, 'readable', None)
    try:
        can_read = callable(getattr(stream, 'read', None)) and (readable is None or readable())
    except (OSError, ValueError) as e:
        raise StreamNotReadable(
            f"Cannot read stream to compute hash: {e}",
            {"stream_type": stream_type, "original_error": str(e)}
        )
    if not can_read:
        raise StreamNotReadable(details={"stream_type": stream_type})

    seekable = getattr(stream, 'seekable', None)
    try:
        can_seek = seekable is not None and seekable()
    except (OSError, ValueError) as e:
        raise StreamNotSeekable(
            f"Cannot rewind stream after hashing: {e}",
            {"stream_type": stream_type, "original_error": str(e)}
        )
    if not can_seek:
        raise StreamNotSeekable(details={"stream_type": stream_type})

    digest_factory = _BODY_DIGESTS.get(algorithm)
    if digest_factory is None:
        raise SigningError(
            f"Unsupported digest algorithm: {algorithm}",
            SigningErrorCodes.INVALID_CONFIG,
            {"algorithm": algorithm}
        )

    hasher = digest_factory()
    remaining = max_size
    try:
        while remaining is None or remaining > 0:
            size = _BODY_READ_CHUNK_SIZE if remaining is None else min(_BODY_READ_CHUNK_SIZE, remaining)
            chunk = stream.read(size)
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode('utf-8')
            hasher.update(chunk)
            if remaining is not None:
                remaining -= len(chunk)
    except (OSError, ValueError) as e:
        raise StreamNotReadable(
            f"Cannot read stream to compute hash: {e}",
            {"stream_type": stream_type, "original_error": str(e)}
        )

    try:
        stream.seek(0)
    except (OSError, ValueError) as e:
        raise StreamNotSeekable(
            f"Cannot rewind stream after hashing: {e}",
            {"stream_type": stream_type, "original_error": str(e)}
        )
    return to_base64(hasher.digest())


def keyed_hash(
    key: str,
    message: str,
    algorithm: SignatureAlgorithm = SignatureAlgorithm.EG1_HMAC_SHA256
) -> bytes:
    """
    Compute an HMAC over the UTF-8 bytes of ``message``.

    Args:
        key: Key text; its UTF-8 bytes are the HMAC key
        message: Message text
        algorithm: Signing algorithm selecting the hash function

    Returns:
        bytes: Raw HMAC digest
    """
    hash_class = _HMAC_HASHES.get(algorithm)
    if hash_class is None:
        raise SigningError(
            f"Unsupported signing algorithm: {algorithm}",
            SigningErrorCodes.INVALID_CONFIG,
            {"algorithm": algorithm}
        )

    mac = hmac.HMAC(key.encode('utf-8'), hash_class())
    mac.update(message.encode('utf-8'))
    return mac.finalize()


def to_base64(data: bytes) -> str:
    """
    Standard base64 encoding with padding.

    Args:
        data: Bytes to encode

    Returns:
        str: Base64 text
    """
    return base64.b64encode(data).decode('ascii')


def mask_token(token: Optional[str], visible: int = 4) -> str:
    """Mask all but the last few characters of a token for logging."""
    if not token:
        return ""
    if len(token) <= visible:
        return "*" * len(token)
    return "*" * (len(token) - visible) + token[-visible:]


class PerformanceTimer:
    """Simple performance timer for monitoring signing operations."""

    def __init__(self):
        self.start_time = time.perf_counter()

    def elapsed_ms(self) -> float:
        """Get elapsed time in milliseconds."""
        return (time.perf_counter() - self.start_time) * 1000
