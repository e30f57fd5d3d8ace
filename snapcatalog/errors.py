"""Exception hierarchy for catalog, persistence and identification failures."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for all snapcatalog errors."""


class ValidationError(CatalogError):
    """Input rejected before it reaches the store. Nothing was persisted."""


class PersistenceError(CatalogError):
    """Reading or writing the persisted catalog failed."""


class CorruptCatalogError(PersistenceError):
    """Persisted catalog data could not be decoded."""


class InferenceError(CatalogError):
    """The vision service call failed or returned an unusable payload.

    Raised inside vision backends and the response parser; the
    identification engine converts it into a rejection ``MatchResult``.
    """

    def __init__(self, message: str, kind: str = "service") -> None:
        super().__init__(message)
        self.kind = kind


class ScanInProgressError(CatalogError):
    """A scan was requested while another one is still outstanding."""
