"""Locks por chave que somem quando ninguem mais usa."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class KeyedLocks:
    """Um ``asyncio.Lock`` por chave, criado sob demanda.

    A entrada e removida quando o ultimo coroutine que segurava ou esperava
    o lock sai, entao o mapa so guarda chaves em uso.

    Example:
        >>> locks = KeyedLocks()
        >>> async with locks.hold("quiz:1"):
        ...     ...
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._holders: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def __contains__(self, key: object) -> bool:
        return key in self._locks

    @asynccontextmanager
    async def hold(self, key: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._locks[key]
