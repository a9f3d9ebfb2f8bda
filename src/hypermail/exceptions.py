"""Custom exceptions for Hypermail."""

from __future__ import annotations


class HypermailError(Exception):
    """Base exception for all Hypermail errors."""


class ConfigurationError(HypermailError):
    """Exception raised for configuration related errors."""


class AuthenticationError(HypermailError):
    """Exception raised when the provider rejects the API key."""


class ResendAPIError(HypermailError):
    """Exception raised for Resend API related errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class StoreError(HypermailError):
    """Exception raised when the local config file cannot be written."""


class ValidationError(HypermailError):
    """Exception raised for data validation errors."""
