"""
Response verification module for EdgeGrid Python SDK

Classifies failed responses to signed requests, detecting clock skew
between the local machine and the API server.
"""

from .response_validator import (
    ResponseValidator,
    DEFAULT_MAX_CLOCK_SKEW_SECONDS,
    parse_http_date,
    validate_response,
)

__all__ = [
    'ResponseValidator',
    'DEFAULT_MAX_CLOCK_SKEW_SECONDS',
    'parse_http_date',
    'validate_response',
]
