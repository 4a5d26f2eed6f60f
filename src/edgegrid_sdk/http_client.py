"""
HTTP client for EdgeGrid-protected APIs

This module provides the transport side of the SDK: it prepares a request,
signs it, sends it with ``requests`` and classifies failed responses. TLS
and connection-pool settings are explicit configuration of each client
rather than process-wide state.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Any, Union, Tuple
from urllib.parse import urljoin, urlparse

import requests
from requests.adapters import HTTPAdapter

from .credential import ClientCredential
from .exceptions import ServerCommunicationError, ValidationError
from .signing import EdgeGridSigner, SignerConfig, sign_prepared_request
from .signing.types import RequestBody
from .verification import ResponseValidator
from .version import __version__

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"EdgeGrid-Python-SDK/{__version__}"
WRITE_METHODS = ("PUT", "POST", "PATCH")


@dataclass
class ClientConfig:
    """Configuration for an EdgeGrid API connection."""
    base_url: str
    timeout: float = 30.0
    verify_ssl: bool = True
    ca_bundle: Optional[str] = None
    client_cert: Optional[Union[str, Tuple[str, str]]] = None
    pool_connections: int = 10
    pool_maxsize: int = 10
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        """Validate client configuration."""
        if not self.base_url:
            raise ValidationError("Base URL cannot be empty")

        # Ensure base_url ends with /
        if not self.base_url.endswith('/'):
            self.base_url += '/'

        parsed = urlparse(self.base_url)
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise ValidationError(f"Invalid base URL format: {self.base_url}")

        if self.timeout <= 0:
            raise ValidationError("Timeout must be positive")

        if self.pool_connections <= 0 or self.pool_maxsize <= 0:
            raise ValidationError("Connection pool sizes must be positive")

        if not self.user_agent:
            raise ValidationError("User agent cannot be empty")

    @classmethod
    def for_host(cls, host: str, **kwargs) -> 'ClientConfig':
        """Build a configuration for ``https://{host}/``."""
        return cls(base_url=f"https://{host}/", **kwargs)


def _is_stream(body: Any) -> bool:
    return hasattr(body, 'read')


def _is_seekable(body: Any) -> bool:
    seekable = getattr(body, 'seekable', None)
    return bool(seekable is not None and seekable())


class EdgeGridHttpClient:
    """
    HTTP client that signs every request with EdgeGrid.

    Failed responses are classified by a ResponseValidator; no retry or
    rate-limit handling is performed. Redirects are not followed, so a 3xx
    response is raised as UnexpectedResponse.
    """

    def __init__(
        self,
        config: ClientConfig,
        credential: ClientCredential,
        signer: Optional[EdgeGridSigner] = None,
        validator: Optional[ResponseValidator] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the HTTP client.

        Args:
            config: Connection settings
            credential: Client credential used for signing
            signer: Signer (default: no signed headers, 2048 byte body hash)
            validator: Response validator (default: 30s clock skew threshold)
            session: Optional pre-built requests session
        """
        if not isinstance(credential, ClientCredential):
            raise ValidationError("credential must be a ClientCredential instance")

        self.config = config
        self.credential = credential
        self.signer = signer or EdgeGridSigner()
        self.validator = validator or ResponseValidator()
        self.session = session or self._create_session()

        logger.info(f"Initialized EdgeGrid HTTP client for {config.base_url}")

    def _create_session(self) -> requests.Session:
        """Create HTTP session with the configured TLS and pool settings."""
        session = requests.Session()

        adapter = HTTPAdapter(
            pool_connections=self.config.pool_connections,
            pool_maxsize=self.config.pool_maxsize,
            max_retries=0,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.verify = self.config.ca_bundle if self.config.ca_bundle else self.config.verify_ssl
        if self.config.client_cert:
            session.cert = self.config.client_cert

        session.headers.update({
            'Accept': '*/*',
            'User-Agent': self.config.user_agent,
        })

        return session

    def build_url(self, path: str) -> str:
        """Resolve ``path`` against the base URL (absolute URLs pass through)."""
        return urljoin(self.config.base_url, path.lstrip('/'))

    def prepare(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        body: RequestBody = None
    ) -> requests.PreparedRequest:
        """
        Prepare and sign a request without sending it.

        Args:
            method: HTTP method
            path: Path relative to the base URL, or an absolute URL
            headers: Request headers
            body: Optional body (bytes, str or binary stream)

        Returns:
            requests.PreparedRequest: Signed request

        Raises:
            SigningError: If signing fails
        """
        # Sent bytes must equal the hashed bytes
        if isinstance(body, str):
            body = body.encode('utf-8')

        request = requests.Request(method, self.build_url(path), headers=headers or {}, data=body)
        prepared = self.session.prepare_request(request)

        self._prepare_body(prepared, body, headers or {})
        sign_prepared_request(prepared, self.signer, self.credential)
        return prepared

    def _prepare_body(
        self,
        prepared: requests.PreparedRequest,
        body: RequestBody,
        caller_headers: Dict[str, str]
    ) -> None:
        """
        Apply body framing headers.

        Write methods always carry a body (empty if none was given). Streams
        that cannot be rewound are sent chunked.
        """
        if body is None or body == b"" or body == "":
            if prepared.method in WRITE_METHODS:
                prepared.body = b""
                prepared.headers['Content-Length'] = '0'
            return

        if _is_stream(body):
            if _is_seekable(body):
                prepared.headers.pop('Transfer-Encoding', None)
                # The whole stream is transmitted, as after a body hash rewind
                body.seek(0, 2)
                prepared.headers['Content-Length'] = str(body.tell())
                body.seek(0)
            else:
                prepared.headers.pop('Content-Length', None)
                prepared.headers['Transfer-Encoding'] = 'chunked'

        if not any(name.lower() == 'content-type' for name in caller_headers):
            prepared.headers['Content-Type'] = 'application/json'

    def execute(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        body: RequestBody = None
    ) -> requests.Response:
        """
        Sign and send a request.

        Args:
            method: HTTP method
            path: Path relative to the base URL, or an absolute URL
            headers: Request headers
            body: Optional body (bytes, str or binary stream)

        Returns:
            requests.Response: Successful response

        Raises:
            SigningError: If signing fails
            ClockSkewSuspected: If a failed response points at clock drift
            UnexpectedResponse: For other non-success responses
            ServerCommunicationError: On network errors
        """
        prepared = self.prepare(method, path, headers, body)

        try:
            logger.debug(f"Making {prepared.method} request to {prepared.url}")
            # A followed redirect would resend the signature to another target
            response = self.session.send(prepared, timeout=self.config.timeout, allow_redirects=False)
        except requests.exceptions.Timeout:
            raise ServerCommunicationError(
                f"Request timeout after {self.config.timeout} seconds",
                "TIMEOUT"
            )
        except requests.exceptions.ConnectionError as e:
            raise ServerCommunicationError(f"Connection error: {e}", "CONNECTION_ERROR")
        except requests.exceptions.RequestException as e:
            raise ServerCommunicationError(f"Request failed: {e}", "REQUEST_FAILED")

        self.validator.validate_response(response)
        return response

    def get(self, path: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.execute('GET', path, **kwargs)

    def post(self, path: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.execute('POST', path, **kwargs)

    def put(self, path: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.execute('PUT', path, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.execute('DELETE', path, **kwargs)

    def close(self) -> None:
        """Close the HTTP session."""
        if self.session:
            self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


def create_client(
    base_url: str,
    credential: ClientCredential,
    headers_to_sign: Optional[list] = None,
    **kwargs
) -> EdgeGridHttpClient:
    """
    Create an EdgeGrid HTTP client.

    Args:
        base_url: API base URL
        credential: Client credential
        headers_to_sign: Ordered header names to include in signatures
        **kwargs: Additional ClientConfig parameters

    Returns:
        EdgeGridHttpClient: Configured client
    """
    config = ClientConfig(base_url=base_url, **kwargs)
    signer = EdgeGridSigner(SignerConfig(headers_to_sign=headers_to_sign or []))
    return EdgeGridHttpClient(config, credential, signer=signer)
