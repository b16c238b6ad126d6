"""Shared protocol for key-value persistence backends."""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Protocol for string key-value backends used for persisted user state."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None if absent."""

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    def delete(self, key: str) -> None:
        """Delete a key without raising if it is absent."""

    def clear(self) -> None:
        """Remove every key owned by this store."""
