"""
Per-user serialization of profile operations.

Operations on the same username (refresh, edit, delete, favorite changes)
must not overlap: a pending refresh cannot be cancelled, so a later delete
waits for it instead of racing it.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog

logger = structlog.get_logger(__name__)


class UserOperationGate:
    """One asyncio lock per username, created on first use."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, username: str) -> asyncio.Lock:
        lock = self._locks.get(username)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[username] = lock
        return lock

    def is_busy(self, username: str) -> bool:
        """True while an operation for username is in flight."""
        lock = self._locks.get(username)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, username: str) -> AsyncIterator[None]:
        """
        Run the enclosed block exclusively for username.

        Example:
            >>> async with gate.hold("ana"):
            ...     await synchronizer_step()
        """
        lock = self._lock_for(username)
        if lock.locked():
            logger.debug("Waiting for in-flight operation", username=username)
        async with lock:
            yield
