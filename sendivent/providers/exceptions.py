"""Provider exceptions."""

from typing import Optional


class ProviderError(Exception):
    """Base exception for provider errors."""
    pass


class DispatchError(ProviderError):
    """Exception raised when a send request fails.

    Wraps the underlying transport failure; ``status`` and ``body`` are set
    when the service answered with an HTTP error.
    """

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body
