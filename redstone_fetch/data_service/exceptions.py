"""Custom exceptions for the RedStone data service client."""


class RedstoneFetchError(Exception):
    """Base exception for redstone-fetch operations."""


class UsageError(RedstoneFetchError):
    """Raised when a command line tool is invoked with invalid arguments."""


class InvalidRequestConfigError(RedstoneFetchError, ValueError):
    """Raised when a request configuration violates its constraints."""


class ExternalServiceError(RedstoneFetchError):
    """Raised when the RedStone gateway fails or returns an unusable response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InsufficientSignersError(ExternalServiceError):
    """Raised when fewer distinct signers than requested are available for a feed."""


class DataShapeError(RedstoneFetchError):
    """Raised when a data package does not have the shape needed to read or serialize it."""
