"""
Per-tenant keyed locks.

The availability check and the reservation insert are two statements; holding
the (tenant, item) lock across both, inside one transaction, is what keeps two
concurrent requests from reserving the same window. Keys always include the
tenant id so no lock is ever shared between stores.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable, Iterable, List, Tuple
from uuid import UUID

INVOICE_NUMBER_KEY = ("invoice-number",)


def item_key(item_id: int) -> Tuple[str, int]:
    return ("item", item_id)


class ItemLockRegistry:
    def __init__(self):
        self._locks: Dict[Tuple[UUID, Hashable], asyncio.Lock] = {}
        self._holders: Dict[Tuple[UUID, Hashable], int] = {}

    def _checkout(self, key: Tuple[UUID, Hashable]) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._holders[key] = self._holders.get(key, 0) + 1
        return lock

    def _checkin(self, key: Tuple[UUID, Hashable]) -> None:
        remaining = self._holders[key] - 1
        if remaining:
            self._holders[key] = remaining
        else:
            del self._holders[key]
            del self._locks[key]

    @asynccontextmanager
    async def hold(self, tenant_id: UUID, keys: Iterable[Hashable]) -> AsyncIterator[None]:
        """
        Hold every key for tenant_id until the block exits.

        Keys are acquired in a fixed order so overlapping key sets cannot deadlock.
        """
        ordered = sorted({(tenant_id, key) for key in keys}, key=repr)
        acquired: List[Tuple[UUID, Hashable]] = []
        try:
            for full_key in ordered:
                lock = self._checkout(full_key)
                try:
                    await lock.acquire()
                except BaseException:
                    self._checkin(full_key)
                    raise
                acquired.append(full_key)
            yield
        finally:
            for full_key in reversed(acquired):
                self._locks[full_key].release()
                self._checkin(full_key)

    def active_keys(self) -> int:
        return len(self._locks)
