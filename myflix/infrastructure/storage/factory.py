"""Storage factory for configuration-based selection.

Creates the durable storage implementation named by ``Settings.storage``:
- "file": JsonFileKeyValueStorage (default)
- "inmemory": InMemoryKeyValueStorage (for testing)
"""

from myflix.config import Settings
from myflix.domain.ports.key_value_storage import IKeyValueStorage
from myflix.infrastructure.storage.in_memory_storage import InMemoryKeyValueStorage
from myflix.infrastructure.storage.json_file_storage import JsonFileKeyValueStorage


def create_storage(settings: Settings) -> IKeyValueStorage:
    """Create storage based on configuration.

    Args:
        settings: Client settings

    Returns:
        IKeyValueStorage: The configured storage implementation

    Raises:
        ValueError: If the storage backend is unknown
    """
    storage_type = settings.storage.lower()

    if storage_type == "file":
        return JsonFileKeyValueStorage(settings.storage_path)

    elif storage_type == "inmemory":
        return InMemoryKeyValueStorage()

    else:
        raise ValueError(
            f"Invalid MYFLIX_STORAGE value: {storage_type}. "
            "Expected 'file' or 'inmemory'"
        )
