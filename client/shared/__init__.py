"""
Shared infrastructure for the BillPoint client.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- storage: Local key-value persistence
- exceptions: Base exception classes

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .storage import (
    IKeyValueStore,
    InMemoryStore,
    JsonFileStore,
    get_storage,
    reset_storage,
)
from .exceptions import (
    BillPointError,
    AuthenticationError,
    StorageError,
)

__all__ = [
    "Settings",
    "get_settings",
    "IKeyValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "get_storage",
    "reset_storage",
    "BillPointError",
    "AuthenticationError",
    "StorageError",
]
