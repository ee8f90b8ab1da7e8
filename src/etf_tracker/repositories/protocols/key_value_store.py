"""Key-value store protocol for the local history cache."""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """String store addressed by a fixed key."""

    def get(self, key: str) -> Optional[str]:
        """Return the stored string, or None when the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite the value for key."""
        ...

    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...
