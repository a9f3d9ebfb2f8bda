"""Resend API access.

The remote provider is treated as an opaque service: this package only maps
its JSON onto Hypermail's models and its failures onto Hypermail's errors.
"""

from .client import ResendClient, validate_api_key

__all__ = ["ResendClient", "validate_api_key"]
