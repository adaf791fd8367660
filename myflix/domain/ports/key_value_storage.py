"""
Port for durable key-value storage.

The client persists its session as string values under fixed keys,
the way a browser client uses local storage.
"""

from typing import Iterable, Mapping, Optional, Protocol, runtime_checkable


@runtime_checkable
class IKeyValueStorage(Protocol):
    """
    Durable string key-value store.

    Batch writes and deletes must land together: after ``set_items`` or
    ``remove_items`` returns, a reader sees either all of the change or,
    on error, none of it. Last writer wins, there is no locking.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        ...

    def set_items(self, items: Mapping[str, str]) -> None:
        """Write all items, overwriting existing values."""
        ...

    def remove_items(self, keys: Iterable[str]) -> None:
        """Erase the given keys. Missing keys are ignored."""
        ...
