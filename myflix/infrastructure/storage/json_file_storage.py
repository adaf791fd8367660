"""
JSON file key-value storage.

Keeps all items in a single JSON object on disk. Every write rewrites the
file through a temporary file and an atomic rename, so a batch of keys
lands together or not at all.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional

import structlog

from myflix.domain.ports.key_value_storage import IKeyValueStorage

logger = structlog.get_logger(__name__)


class JsonFileKeyValueStorage(IKeyValueStorage):
    """Durable storage in a JSON file.

    The file is read once on construction and the in-memory copy is kept
    in sync with every write. An unreadable file is treated as empty (and
    replaced on the next write).

    Examples:
        >>> storage = JsonFileKeyValueStorage(Path("~/.myflix/storage.json"))
        >>> storage.set_items({"user": "{...}", "token": "abc"})
    """

    def __init__(self, path: Path) -> None:
        """Open (or lazily create) the storage file.

        Args:
            path: File location; parent directories are created on write
        """
        self.path = Path(path).expanduser()
        self._items: Dict[str, str] = self._load()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(
                "Unreadable storage file, starting empty",
                path=str(self.path),
                error=str(e),
            )
            return {}

        if not isinstance(data, dict):
            logger.warning("Storage file is not an object, starting empty", path=str(self.path))
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        return self._items.get(key)

    def set_items(self, items: Mapping[str, str]) -> None:
        """Write all items in one atomic file replacement."""
        updated = {**self._items, **items}
        self._write(updated)
        self._items = updated

    def remove_items(self, keys: Iterable[str]) -> None:
        """Erase the given keys in one atomic file replacement."""
        drop = set(keys)
        if not drop & self._items.keys():
            return
        updated = {k: v for k, v in self._items.items() if k not in drop}
        self._write(updated)
        self._items = updated

    def _write(self, items: Mapping[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Storage written", path=str(self.path), keys=sorted(items))
