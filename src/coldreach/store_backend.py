"""Abstract persistence interface for entitlement state.

Defines the StoreBackend Protocol that EntitlementStore depends on.
Concrete implementations live in ``coldreach.backends``.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StoreBackend(Protocol):
    """Async persistence backend for the email -> user record mapping.

    The mapping is always read and written whole; there are no partial
    updates. ``load_all`` returns an empty mapping when nothing has been
    stored yet, and raises when the stored mapping cannot be read.
    """

    async def load_all(self) -> dict[str, dict[str, Any]]: ...

    async def save_all(self, users: dict[str, dict[str, Any]]) -> None: ...
