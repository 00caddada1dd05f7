"""
Custom exception classes for the frontend service.

These provide a hierarchy of typed exceptions for better error handling.
"""


class FrontendError(Exception):
    """Base exception for frontend-related errors."""

    pass


class ConfigError(FrontendError):
    """Exception raised when a configuration source cannot be loaded."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
