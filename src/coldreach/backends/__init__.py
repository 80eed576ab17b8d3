"""Concrete StoreBackend implementations."""

from coldreach.backends.json_file import JsonFileBackend
from coldreach.backends.memory import MemoryBackend

__all__ = ["JsonFileBackend", "MemoryBackend"]
