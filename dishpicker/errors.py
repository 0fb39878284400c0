"""
Error taxonomy for the dish picker.

Connector failures are raised as exceptions (like the connector errors used
by the API layer) and converted into outcome values by the dish selector and
the category loader, so nothing below the route handlers crashes a request.
"""

from typing import Optional


class DishPickerError(Exception):
    """
    Base class for errors talking to the Rakuten Recipe API.

    Attributes:
        url: Request URL with the application id redacted (if known)
        status_code: HTTP status code of the failed response (if any)
        body: Response body of the failed response (if any)
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.body = body


class TransportError(DishPickerError):
    """
    Raised when the upstream request fails.

    Covers connection errors, timeouts and any non-2xx HTTP status.
    """
    pass


class ParseError(DishPickerError):
    """Raised when a response is not valid JSON or lacks a required field."""
    pass
