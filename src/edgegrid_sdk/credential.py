"""
Client credential for EdgeGrid request signing

A credential is the triple of client token, access token and client secret
issued for an API client. It is immutable once constructed.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .exceptions import CredentialError, InvalidCredential, MissingField
from .signing.utils import mask_token

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("clientToken", "accessToken", "secret")
HOST_KEY = "host"


def find_value(text: str, key: str) -> Optional[str]:
    """
    Find the value for ``key`` in a key-value text blob.

    The value is the run of non-whitespace characters following the first
    ``key:`` occurrence that has one, after any whitespace (newlines
    included). No trimming or format checks are applied to the value.

    Args:
        text: Text to scan
        key: Key name, matched case-sensitively

    Returns:
        str or None: The value, or None if no occurrence has a value
    """
    marker = f"{key}:"
    start = text.find(marker)
    while start != -1:
        pos = start + len(marker)
        while pos < len(text) and text[pos].isspace():
            pos += 1

        end = pos
        while end < len(text) and not text[end].isspace():
            end += 1

        if end > pos:
            return text[pos:end]

        start = text.find(marker, start + 1)
    return None


@dataclass(frozen=True)
class ClientCredential:
    """
    Represents the client credential that is used in service requests.

    Attributes:
        client_token: Token identifying the API client
        access_token: Token representing the client's authorizations
        secret: Client secret used to derive signing keys
        host: Optional API hostname the credential was issued for
    """
    client_token: str
    access_token: str
    secret: str = field(repr=False)
    host: Optional[str] = None

    def __post_init__(self):
        """Validate credential after initialization"""
        for name in ("client_token", "access_token", "secret"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise InvalidCredential(f"{name} cannot be empty.", {"field": name})

    @classmethod
    def from_key_value_text(cls, text: str) -> 'ClientCredential':
        """
        Parse a credential from ``clientToken: ...`` style text.

        Args:
            text: Text containing clientToken, accessToken and secret keys,
                and optionally host. Order and extra content are ignored.

        Returns:
            ClientCredential: Parsed credential

        Raises:
            MissingField: If a required key has no value
        """
        if text is None:
            raise InvalidCredential("Credential text cannot be empty.")

        values = {}
        for key in REQUIRED_KEYS:
            value = find_value(text, key)
            if value is None:
                raise MissingField(key)
            values[key] = value

        return cls(
            client_token=values["clientToken"],
            access_token=values["accessToken"],
            secret=values["secret"],
            host=find_value(text, HOST_KEY),
        )

    @classmethod
    def from_file(cls, file_path: Union[str, Path]) -> 'ClientCredential':
        """
        Load a credential from a key-value text file.

        Args:
            file_path: Path to the credential file

        Returns:
            ClientCredential: Parsed credential

        Raises:
            InvalidCredential: If the path is empty
            CredentialError: If the file cannot be read
            MissingField: If a required key has no value
        """
        if not file_path:
            raise InvalidCredential("filepath cannot be empty.")

        path = Path(file_path)
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as e:
            raise CredentialError(
                f"Failed to read credential file: {e}",
                "FILE_ERROR",
                {"path": str(path)}
            )

        credential = cls.from_key_value_text(text)
        logger.info(f"Loaded credential for client token {mask_token(credential.client_token)} from {path}")
        return credential
