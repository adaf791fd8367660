"""In-memory key-value storage for testing."""

from typing import Dict, Iterable, Mapping, Optional

from myflix.domain.ports.key_value_storage import IKeyValueStorage


class InMemoryKeyValueStorage(IKeyValueStorage):
    """In-memory implementation of durable storage for testing.

    Nothing survives the process. Useful for unit tests and for running
    the client without touching the filesystem.

    Examples:
        >>> storage = InMemoryKeyValueStorage()
        >>> storage.set_items({"token": "abc"})
        >>> storage.get("token")
        'abc'
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None) -> None:
        """Initialize storage, optionally pre-populated."""
        self._items: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        return self._items.get(key)

    def set_items(self, items: Mapping[str, str]) -> None:
        """Write all items, overwriting existing values."""
        self._items.update(items)

    def remove_items(self, keys: Iterable[str]) -> None:
        """Erase the given keys."""
        for key in keys:
            self._items.pop(key, None)

    def clear(self) -> None:
        """Clear everything.

        Useful for test cleanup.
        """
        self._items.clear()

    def snapshot(self) -> Dict[str, str]:
        """Copy of all stored items."""
        return dict(self._items)
