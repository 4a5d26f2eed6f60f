"""
Exception classes for EdgeGrid Python SDK
"""

from typing import Optional, Dict, Any


class EdgeGridSDKError(Exception):
    """Base exception for all EdgeGrid SDK errors"""
    
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class ValidationError(EdgeGridSDKError):
    """Exception raised for validation failures"""
    pass


class CredentialError(EdgeGridSDKError):
    """Exception raised for client credential problems"""
    pass


class InvalidCredential(CredentialError):
    """Exception raised when a credential field is empty or missing"""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "INVALID_CREDENTIAL", details)


class MissingField(CredentialError):
    """Exception raised when a credential source lacks a required key"""
    
    def __init__(self, field: str):
        super().__init__(
            f"Could not find value for key: {field}",
            "MISSING_FIELD",
            {"field": field}
        )
        self.field = field


class ServerCommunicationError(EdgeGridSDKError):
    """Exception raised for server communication errors"""
    
    def __init__(self, message: str, error_code: str = "SERVER_ERROR", 
                 http_status: int = 0, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code, details)
        self.http_status = http_status


class ClockSkewSuspected(ServerCommunicationError):
    """
    Exception raised when a failed response suggests the local clock is out
    of sync with the server. Resynchronize the local clock (e.g. via NTP).
    """
    
    def __init__(self, skew_seconds: float, server_date: str, http_status: int = 0,
                 max_skew_seconds: float = 30):
        super().__init__(
            f"Local server Date is more than {max_skew_seconds:g}s out of sync with "
            f"Remote server ({skew_seconds:.0f}s); resynchronize the local clock",
            "CLOCK_SKEW_SUSPECTED",
            http_status,
            {"skew_seconds": skew_seconds, "server_date": server_date}
        )
        self.skew_seconds = skew_seconds
        self.server_date = server_date


class UnexpectedResponse(ServerCommunicationError):
    """Exception raised for non-success responses without a clock skew signal"""
    
    def __init__(self, status_code: int, reason: str = "", 
                 headers: Optional[Dict[str, str]] = None, body: str = ""):
        headers = dict(headers or {})
        header_lines = "\n".join(f"{name}: {value}" for name, value in headers.items())
        super().__init__(
            f"Unexpected Response from Server: {status_code} {reason}\n{header_lines}\n\n{body}",
            "UNEXPECTED_RESPONSE",
            status_code,
            {"status_code": status_code, "reason": reason}
        )
        self.status_code = status_code
        self.reason = reason
        self.headers = headers
        self.body = body
