"""
HTTP client integration for request signing

This module connects the EdgeGrid signer to the ``requests`` library:
prepared requests can be signed directly, through an auth hook, or by a
session wrapper that signs every outbound request.
"""

import logging
from typing import Optional, TYPE_CHECKING

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest
from requests.structures import CaseInsensitiveDict

from .types import SignableRequest, SigningResult, AUTHORIZATION_HEADER
from .edgegrid_signer import EdgeGridSigner

if TYPE_CHECKING:
    from ..credential import ClientCredential

logger = logging.getLogger(__name__)


def sign_prepared_request(
    prepared_request: PreparedRequest,
    signer: EdgeGridSigner,
    credential: 'ClientCredential'
) -> SigningResult:
    """
    Sign a prepared request in place.

    Args:
        prepared_request: Prepared request to sign
        signer: Signer to use
        credential: Client credential

    Returns:
        SigningResult: Signing result (the header is already applied)

    Raises:
        SigningError: If signing fails
    """
    if prepared_request.headers is None:
        prepared_request.headers = CaseInsensitiveDict()

    # A stale signature must never be carried over
    prepared_request.headers.pop(AUTHORIZATION_HEADER, None)

    # http.client would send str bodies as latin-1, not the hashed UTF-8
    if isinstance(prepared_request.body, str):
        prepared_request.body = prepared_request.body.encode('utf-8')

    # An empty body is signed as no body
    signable_request = SignableRequest(
        method=prepared_request.method or "",
        url=prepared_request.url or "",
        headers=prepared_request.headers,
        body=prepared_request.body or None
    )

    result = signer.sign_request(signable_request, credential)
    prepared_request.headers.update(result.headers)
    return result


class EdgeGridAuth(AuthBase):
    """
    ``requests`` auth hook that signs each request with EdgeGrid.

    Usage::

        requests.get(url, auth=EdgeGridAuth(signer, credential))

    A signature is only valid for the request it was computed over, so the
    header is dropped before ``requests`` follows a redirect. Use
    SigningSession to have redirected requests signed again.
    """

    def __init__(self, signer: EdgeGridSigner, credential: 'ClientCredential'):
        self.signer = signer
        self.credential = credential

    def __call__(self, request: PreparedRequest) -> PreparedRequest:
        sign_prepared_request(request, self.signer, self.credential)
        if self.handle_redirect not in request.hooks['response']:
            request.register_hook('response', self.handle_redirect)
        return request

    def handle_redirect(self, response: requests.Response, **kwargs) -> requests.Response:
        """Remove the signature from a request that is about to be redirected."""
        if response.is_redirect and response.request is not None:
            if response.request.headers.pop(AUTHORIZATION_HEADER, None) is not None:
                logger.debug(f"Dropped Authorization header before following redirect from {response.url}")
        return response


class EdgeGridSession(requests.Session):
    """
    requests.Session that signs each same-host redirect with a fresh
    timestamp and nonce.

    Redirects to another host are sent unsigned.
    """

    def __init__(self, auth: EdgeGridAuth):
        super().__init__()
        self.edgegrid_auth = auth

    def rebuild_auth(self, prepared_request: PreparedRequest, response: requests.Response) -> None:
        super().rebuild_auth(prepared_request, response)

        if self.should_strip_auth(response.request.url, prepared_request.url):
            prepared_request.headers.pop(AUTHORIZATION_HEADER, None)
            return

        # 307/308 keep a stream body that the previous send consumed
        body = prepared_request.body
        if callable(getattr(body, 'seek', None)):
            body.seek(0)

        self.edgegrid_auth(prepared_request)


class SigningSession:
    """
    HTTP session wrapper with automatic request signing.

    This class wraps a requests.Session and signs every outgoing request.
    Signing failures are raised to the caller. Same-host redirects are
    signed again; redirects to another host carry no signature.
    """

    def __init__(
        self,
        signer: EdgeGridSigner,
        credential: 'ClientCredential',
        session: Optional[requests.Session] = None
    ):
        """
        Initialize signing session.

        Args:
            signer: Signer to use
            credential: Client credential
            session: Optional existing requests session to wrap. Redirects
                are only signed again when it is an EdgeGridSession.
        """
        self.signer = signer
        self.auth = EdgeGridAuth(signer, credential)
        self.session = session or EdgeGridSession(self.auth)

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make a signed HTTP request.

        Args:
            method: HTTP method
            url: Request URL
            **kwargs: Additional arguments for requests

        Returns:
            requests.Response: HTTP response
        """
        kwargs['auth'] = self.auth
        logger.debug(f"Sending signed {method} request to {url}")
        return self.session.request(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def patch(self, url: str, **kwargs) -> requests.Response:
        """Make PATCH request."""
        return self.request('PATCH', url, **kwargs)

    def head(self, url: str, **kwargs) -> requests.Response:
        """Make HEAD request."""
        return self.request('HEAD', url, **kwargs)

    def options(self, url: str, **kwargs) -> requests.Response:
        """Make OPTIONS request."""
        return self.request('OPTIONS', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, *args):
        """Context manager exit."""
        self.close()


def create_signing_session(
    signer: EdgeGridSigner,
    credential: 'ClientCredential',
    **session_kwargs
) -> SigningSession:
    """
    Create a new signing session.

    Args:
        signer: Signer to use
        credential: Client credential
        **session_kwargs: Attributes to set on the new EdgeGridSession

    Returns:
        SigningSession: Configured signing session
    """
    signing_session = SigningSession(signer, credential)

    for key, value in session_kwargs.items():
        if hasattr(signing_session.session, key):
            setattr(signing_session.session, key, value)

    return signing_session
