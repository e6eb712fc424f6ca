"""Keyed asyncio locks serialising units of work on the same rows."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class KeyedLockRegistry:
    """Hands out one ``asyncio.Lock`` per key, dropping it once nobody holds or waits on it.

    Several keys are always acquired in sorted order so two units asking for
    overlapping key sets cannot deadlock each other.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def _checkout(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._users[key] = self._users.get(key, 0) + 1
        return lock

    def _checkin(self, key: str) -> None:
        remaining = self._users[key] - 1
        if remaining:
            self._users[key] = remaining
        else:
            del self._users[key]
            del self._locks[key]

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        ordered = sorted(set(keys))
        locks = [self._checkout(key) for key in ordered]
        acquired: list[asyncio.Lock] = []
        try:
            for lock in locks:
                await lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for key in ordered:
                self._checkin(key)


def account_key(account_id: str) -> str:
    return f"account:{account_id}"


def item_key(item_id: str) -> str:
    return f"item:{item_id}"


__all__ = ["KeyedLockRegistry", "account_key", "item_key"]
