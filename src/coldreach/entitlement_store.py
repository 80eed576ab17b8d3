"""Entitlement store: get-or-default and merge-then-persist over a backend.

The backend holds a single email -> record mapping that is rewritten whole
on every mutation. Reads never persist anything.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from coldreach.entitlement import UserRecord

if TYPE_CHECKING:
    from coldreach.store_backend import StoreBackend

logger = logging.getLogger(__name__)


class EntitlementStore:
    """Entitlement records keyed by email.

    - ``get()`` returns the stored record or the free-tier default.
    - ``update()`` merges a patch over the current record and persists it.
    - ``session()`` holds the email's lock across a read-check-write
      sequence so concurrent requests for one user cannot interleave.
    - Per-user asyncio locks serialise updates to the same email; a
      store-wide write lock serialises full-mapping rewrites.
    - A backend read failure degrades ``get()`` to the default record but
      fails ``update()``, so the mapping is never rewritten from a bad read.
    """

    def __init__(self, backend: StoreBackend) -> None:
        self._backend = backend
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        self._write_lock = asyncio.Lock()

    @property
    def backend(self) -> StoreBackend:
        return self._backend

    @asynccontextmanager
    async def _user_lock(self, email: str) -> AsyncIterator[None]:
        """Hold a per-user lock; it is discarded once nobody holds or awaits it."""
        lock = self._locks.get(email)
        if lock is None:
            lock = self._locks[email] = asyncio.Lock()
        self._lock_users[email] = self._lock_users.get(email, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[email] -= 1
            if not self._lock_users[email]:
                del self._lock_users[email]
                del self._locks[email]

    async def _load_all(self) -> dict[str, dict[str, Any]]:
        """Load the full mapping, returning an empty one on backend error."""
        try:
            return await self._backend.load_all()
        except Exception:
            logger.warning("Failed to load user store; treating as empty.", exc_info=True)
            return {}

    # -- unlocked primitives --------------------------------------------------

    async def _read(self, email: str) -> UserRecord:
        users = await self._load_all()
        raw = users.get(email)
        if raw is None:
            return UserRecord(email=email)
        return UserRecord.from_dict(email, raw)

    async def _merge(self, email: str, patch: dict[str, Any]) -> UserRecord:
        async with self._write_lock:
            # Strict load: a failed read is never saved back.
            users = await self._backend.load_all()
            current = users.get(email) or UserRecord(email=email).to_dict()
            merged = {**current, **patch}
            users[email] = merged
            await self._backend.save_all(users)
        return UserRecord.from_dict(email, merged)

    # -- public API -----------------------------------------------------------

    async def get(self, email: str) -> UserRecord:
        """Return the stored record for ``email`` or the free-tier default."""
        return await self._read(email)

    async def update(self, email: str, patch: dict[str, Any]) -> UserRecord:
        """Merge ``patch`` (stored-form keys) over the record and persist it.

        Raises whatever the backend raises when the current mapping cannot be
        loaded or saved; nothing is written in the load case.
        """
        async with self._user_lock(email):
            return await self._merge(email, patch)

    @asynccontextmanager
    async def session(self, email: str) -> AsyncIterator[EntitlementSession]:
        """Hold ``email``'s lock for the duration of the block."""
        async with self._user_lock(email):
            yield EntitlementSession(self, email)

    async def count(self) -> int:
        """Number of persisted records."""
        return len(await self._load_all())


class EntitlementSession:
    """Read/update handle for one email, valid only inside ``store.session()``."""

    def __init__(self, store: EntitlementStore, email: str) -> None:
        self._store = store
        self.email = email

    async def get(self) -> UserRecord:
        return await self._store._read(self.email)

    async def update(self, patch: dict[str, Any]) -> UserRecord:
        return await self._store._merge(self.email, patch)
