"""
Response validation for signed requests

Classifies non-success responses. The most common cause of a rejected
signature is a local clock that has drifted from the server's, so a failed
response whose Date header is far from local time is reported as suspected
clock skew.
"""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Mapping, Optional

import requests
from requests.structures import CaseInsensitiveDict

from ..exceptions import ClockSkewSuspected, UnexpectedResponse

logger = logging.getLogger(__name__)

DEFAULT_MAX_CLOCK_SKEW_SECONDS = 30

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_http_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an HTTP Date header into an aware UTC datetime.

    Args:
        value: Header value, e.g. ``Tue, 15 Nov 1994 08:12:31 GMT``

    Returns:
        datetime or None: Parsed date, or None if missing or unparseable
    """
    if not value:
        return None

    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        logger.warning(f"Ignoring unparseable Date header: {value!r}")
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class ResponseValidator:
    """
    Validator for responses to signed requests.

    No retry is attempted; every failure is raised to the caller.
    """

    def __init__(
        self,
        max_clock_skew_seconds: float = DEFAULT_MAX_CLOCK_SKEW_SECONDS,
        clock: Optional[Clock] = None
    ):
        """
        Initialize the validator.

        Args:
            max_clock_skew_seconds: Skew above which failures are attributed
                to the local clock
            clock: Source of the current time (aware datetime)
        """
        if max_clock_skew_seconds < 0:
            raise ValueError("max_clock_skew_seconds must be non-negative")

        self.max_clock_skew_seconds = max_clock_skew_seconds
        self.clock = clock or _utc_now

    def validate(
        self,
        status_code: int,
        headers: Optional[Mapping[str, str]] = None,
        reason: str = "",
        body: str = ""
    ) -> None:
        """
        Validate a response.

        Args:
            status_code: HTTP status code
            headers: Response headers
            reason: HTTP reason phrase
            body: Response body text, for diagnostics

        Raises:
            ClockSkewSuspected: If the Date header is too far from local time
            UnexpectedResponse: For any other non-success response
        """
        if self.is_success(status_code):
            return

        headers = CaseInsensitiveDict(headers or {})
        date_header = headers.get('Date')
        server_date = parse_http_date(date_header)

        if server_date is not None:
            skew = abs((self.clock() - server_date).total_seconds())
            if skew > self.max_clock_skew_seconds:
                logger.warning(
                    f"Request failed with {status_code} and local clock is {skew:.0f}s "
                    f"away from server Date {date_header!r}"
                )
                raise ClockSkewSuspected(
                    skew_seconds=skew,
                    server_date=date_header,
                    http_status=status_code,
                    max_skew_seconds=self.max_clock_skew_seconds
                )

        raise UnexpectedResponse(status_code, reason, dict(headers), body)

    def validate_response(self, response: requests.Response) -> None:
        """
        Validate a ``requests`` response.

        Args:
            response: Response to validate

        Raises:
            ClockSkewSuspected: If the Date header is too far from local time
            UnexpectedResponse: For any other non-success response
        """
        if self.is_success(response.status_code):
            return

        self.validate(
            response.status_code,
            response.headers,
            response.reason or "",
            response.text
        )

    @staticmethod
    def is_success(status_code: int) -> bool:
        return 200 <= status_code < 300


def validate_response(
    response: requests.Response,
    max_clock_skew_seconds: float = DEFAULT_MAX_CLOCK_SKEW_SECONDS
) -> None:
    """
    Validate a response with a default validator.

    Args:
        response: Response to validate
        max_clock_skew_seconds: Clock skew threshold

    Raises:
        ClockSkewSuspected: If the Date header is too far from local time
        UnexpectedResponse: For any other non-success response
    """
    ResponseValidator(max_clock_skew_seconds).validate_response(response)
