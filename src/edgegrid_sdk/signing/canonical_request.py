"""
Canonical request construction for EdgeGrid signatures

The canonical request is six tab-separated fields, each followed by a tab:

    METHOD \\t SCHEME \\t HOST \\t PATH_AND_QUERY \\t HEADERS \\t BODYHASH \\t
"""

import logging
from typing import List

from .types import (
    SignableRequest,
    SignerConfig,
    CanonicalRequest,
    InvalidRequest,
)
from .utils import (
    parse_url,
    normalize_header_value,
    calculate_body_hash,
)

logger = logging.getLogger(__name__)

# Compared case-sensitively: "post" or PUT/PATCH bodies are not hashed
BODY_HASH_METHOD = "POST"


class CanonicalRequestBuilder:
    """
    Canonical request builder for EdgeGrid signatures
    """

    def __init__(self, request: SignableRequest, config: SignerConfig):
        """
        Initialize canonical request builder.

        Args:
            request: Request to canonicalize
            config: Signer configuration (headers to sign, body hash limit)
        """
        self.request = request
        self.headers_to_sign: List[str] = config.headers_to_sign
        self.max_body_hash_size = config.max_body_hash_size
        self.digest_algorithm = config.digest_algorithm

    def build(self) -> CanonicalRequest:
        """
        Build the canonical request.

        Returns:
            CanonicalRequest: Canonical request fields

        Raises:
            InvalidRequest: If the method is empty or the URL is unusable
            StreamNotReadable: If the POST body cannot be read
            StreamNotSeekable: If the POST body cannot be rewound
        """
        method = self.request.method
        if not method:
            raise InvalidRequest("Invalid request: empty request method")

        url_parts = parse_url(self.request.url)

        canonical = CanonicalRequest(
            method=method.upper(),
            scheme=url_parts['scheme'],
            host=url_parts['host'],
            path_and_query=url_parts['path_and_query'],
            headers=self._build_headers(),
            body_hash=self._build_body_hash(method),
        )

        logger.debug(
            f"Canonicalized {canonical.method} {canonical.scheme}://{canonical.host}"
            f"{canonical.path_and_query} (body hashed: {bool(canonical.body_hash)})"
        )
        return canonical

    def _build_headers(self) -> str:
        """
        Build the flattened header field.

        Every configured header present with a non-empty value contributes
        ``name:value\\t``; absent headers are skipped.

        Returns:
            str: Concatenated header entries
        """
        entries = []
        for name in self.headers_to_sign:
            value = self.request.get_header(name)
            if value:
                entries.append(f"{name}:{normalize_header_value(str(value))}\t")
        return "".join(entries)

    def _build_body_hash(self, method: str) -> str:
        """
        Build the body hash field.

        Args:
            method: Request method as supplied by the caller

        Returns:
            str: Base64 body hash for POST requests with a body, else ""
        """
        if method != BODY_HASH_METHOD:
            return ""

        return calculate_body_hash(
            self.request.body,
            self.max_body_hash_size,
            self.digest_algorithm
        )


def build_canonical_request(request: SignableRequest, config: SignerConfig) -> str:
    """
    Build canonical request string for signing.

    Args:
        request: Request to canonicalize
        config: Signer configuration

    Returns:
        str: Canonical request string
    """
    return CanonicalRequestBuilder(request, config).build().to_string()
