"""Exceptions raised by the Unstructured client."""

from typing import Any, Optional


class ClientError(Exception):
    """Base exception for all client errors."""
    pass


class InvalidBaseURLError(ClientError):
    """The configured base URL could not be parsed."""
    pass


class FileAccessError(ClientError):
    """The local file could not be read."""

    def __init__(self, path, message: str):
        super().__init__(f"Could not read {path}: {message}")
        self.path = path


class TransportError(ClientError):
    """The request never produced an HTTP response."""
    pass


class RequestTimeoutError(TransportError):
    """The request timed out."""
    pass


class APIError(ClientError):
    """The service answered with a non-success status code."""

    def __init__(self, status_code: int, body: str, detail: Optional[Any] = None):
        super().__init__(f"Request didn't succeed ({status_code}): {body}")
        self.status_code = status_code
        self.body = body
        self.detail = detail


class DecodeError(ClientError):
    """The response body did not have the expected shape."""
    pass
