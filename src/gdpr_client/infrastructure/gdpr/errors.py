"""Errors raised by the GDPR service client"""

from typing import Optional


class GDPRClientError(RuntimeError):
    """Base class for GDPR client failures."""


class TransportError(GDPRClientError):
    """The request could not be completed at the network level."""


class HTTPStatusError(GDPRClientError):
    """The service answered with a non-200 HTTP status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Request failed with status {status_code}: {body}")


class ResponseDecodeError(GDPRClientError):
    """The response body is not a valid envelope or payload."""


class ServiceError(GDPRClientError):
    """The envelope reported a non-200 status code."""

    def __init__(self, message: Optional[str], status_code: int):
        self.message = message
        self.status_code = status_code
        super().__init__(f"GDPR service returned error: {message} (statusCode={status_code})")


class RequestNotFoundError(ServiceError):
    """The requested record does not exist."""
