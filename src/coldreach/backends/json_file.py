"""JsonFileBackend: StoreBackend persisted as one indented JSON file.

The whole mapping is rewritten on every save. Writes go to a sibling
temporary file first and are moved into place with ``os.replace`` so a
crash mid-write never leaves a truncated store behind.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any


class JsonFileBackend:
    """Human-readable file store implementing the ``StoreBackend`` protocol.

    - ``load_all()`` returns ``{}`` only when the file does not exist yet.
      An unreadable file raises ``OSError`` and a corrupt one ``ValueError``,
      so a failed read can never be saved back over the real data.
    - ``save_all()`` raises ``OSError`` on write failure; callers decide.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def load_all(self) -> dict[str, dict[str, Any]]:
        return await asyncio.to_thread(self._read)

    async def save_all(self, users: dict[str, dict[str, Any]]) -> None:
        await asyncio.to_thread(self._write, users)

    # -- blocking helpers -----------------------------------------------------

    def _read(self) -> dict[str, dict[str, Any]]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValueError(f"User store {self._path} is corrupt: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"User store {self._path} is not a mapping")
        return {k: v for k, v in data.items() if isinstance(v, dict)}

    def _write(self, users: dict[str, dict[str, Any]]) -> None:
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.", suffix=".tmp", dir=directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(users, fh, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
