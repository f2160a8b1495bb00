# This module serializes price writes per storefront variant.
# Each variant id maps to one asyncio.Lock that exists only while a task holds or waits on it.
# Different variant ids never wait on each other; the same id never has two writes in flight.
# The registry is in-memory and per-process, so exclusion does not span replicas.

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

LOGGER = logging.getLogger("protection")


class VariantLockRegistry:
    """Per-process mapping from variant id to a mutex."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    async def acquire(self, key: str) -> None:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
            self._users[key] = 0
        self._users[key] += 1

        if lock.locked():
            LOGGER.debug("waiting for variant lock key=%s", key)
        try:
            await lock.acquire()
        except BaseException:
            self._forget(key)
            raise

    def release(self, key: str) -> None:
        lock = self._locks.get(key)
        if lock is None or not lock.locked():
            raise RuntimeError(f"Variant lock is not held: {key!r}")
        lock.release()
        self._forget(key)

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        """Hold the lock for `key` for the duration of the block, releasing on every exit path."""

        await self.acquire(key)
        try:
            yield
        finally:
            self.release(key)

    def is_locked(self, key: str) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def active_keys(self) -> set[str]:
        return set(self._locks)

    def _forget(self, key: str) -> None:
        remaining = self._users[key] - 1
        if remaining <= 0:
            del self._users[key]
            del self._locks[key]
        else:
            self._users[key] = remaining
