"""
Storage client exceptions.

Only transport and server faults are raised; signing and verification
report failure through their return values.
"""
from typing import Dict, Optional

import httpx


class CentralStorageException(Exception):
    """Base class for central storage client errors."""


class StorageServerException(CentralStorageException):
    """
    The storage server could not be reached or answered with an error.

    Attributes:
        response: Raw response body, when one was received
        response_headers: Response headers, when a response was received
    """

    def __init__(
        self,
        message: str,
        response: Optional[str] = None,
        response_headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(message)
        self.response = response
        self.response_headers = response_headers

    @classmethod
    def make(cls, error: httpx.HTTPError) -> "StorageServerException":
        """Wrap an httpx error, keeping the response body/headers if any."""
        ex = cls(f"Central Storage Server Exception: {error}")
        if isinstance(error, httpx.HTTPStatusError):
            ex.response = error.response.text
            ex.response_headers = dict(error.response.headers)
        return ex

    @classmethod
    def make_from_content(cls, body: str) -> "StorageServerException":
        """The server answered, but not with a JSON object."""
        return cls("Central Storage returned invalid content (no json)", response=body)
