"""Local persistence.

This package owns the single JSON document holding the API key, sender
preferences, drafts, contacts and the locally tracked read/archived IDs.
"""

from .local_store import LocalStore

__all__ = ["LocalStore"]
