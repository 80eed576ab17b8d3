"""MemoryBackend: process-local StoreBackend, for tests and ephemeral runs."""

from __future__ import annotations

import copy
from typing import Any


class MemoryBackend:
    """Keeps the mapping in memory. Copies on the way in and out so callers
    can never mutate stored state without going through ``save_all``."""

    def __init__(self, users: dict[str, dict[str, Any]] | None = None) -> None:
        self._users: dict[str, dict[str, Any]] = copy.deepcopy(users or {})
        self.saves = 0

    async def load_all(self) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(self._users)

    async def save_all(self, users: dict[str, dict[str, Any]]) -> None:
        self._users = copy.deepcopy(users)
        self.saves += 1
