"""Catalog persistence: the store and its pluggable backends."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .backends import JsonFileBackend, MemoryBackend, StorageBackend
from .catalog import CatalogStore, IdGenerator
from .sqlite import SQLiteBackend

if TYPE_CHECKING:
    from ..config import AppConfig

__all__ = [
    "CatalogStore",
    "IdGenerator",
    "StorageBackend",
    "JsonFileBackend",
    "MemoryBackend",
    "SQLiteBackend",
    "create_storage",
    "open_store",
]


def create_storage(config: AppConfig) -> StorageBackend:
    """Create a storage backend based on configuration."""
    backend_name = config.store.backend

    match backend_name:
        case "json":
            return JsonFileBackend(config.store.path)
        case "sqlite":
            return SQLiteBackend(Path(config.store.path).expanduser() / "catalog.db")
        case "memory":
            return MemoryBackend()
        case _:
            raise ValueError(
                f"Unknown store backend: {backend_name!r} "
                f"(choose from json / sqlite / memory)"
            )


def open_store(config: AppConfig) -> CatalogStore:
    return CatalogStore(
        create_storage(config), seed_defaults=config.store.seed_defaults
    )
