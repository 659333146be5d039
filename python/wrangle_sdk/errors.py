"""
Location: python/wrangle_sdk/errors.py

Summary:
    Exception hierarchy for the wrangle-sdk.

Usage:
    Raised by client.py, transport.py and stream.py. Catch WrangleError to
    handle every SDK failure, or a subclass for a specific one.

Example:
    from wrangle_sdk.errors import APIError

    try:
        await client.keys.verify()
    except APIError as e:
        print(e.status_code, e.message)
"""

from typing import Optional


class WrangleError(Exception):
    """Base exception for all wrangle-sdk errors."""
    pass


class APIError(WrangleError):
    """
    Exception raised when the gateway answers with a non-2xx status.

    Attributes:
        status_code: HTTP status code of the response
        message: Error message extracted from the response body
    """

    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"WrangleAI Error [{status_code}]: {message}")


class APIConnectionError(WrangleError):
    """Exception raised when the request never produced a response."""
    pass


class StreamError(WrangleError):
    """Exception raised when the byte source fails in the middle of a stream."""
    pass


class InvalidResponseError(WrangleError):
    """Exception raised when a successful response body is not valid JSON."""
    pass
