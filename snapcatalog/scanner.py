"""One-at-a-time scan flow: capture, identify, resolve the product."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import ScanInProgressError
from .models import MatchResult, Product

if TYPE_CHECKING:
    from .camera import CameraCapture
    from .engine import IdentificationEngine
    from .store import CatalogStore

logger = logging.getLogger(__name__)

NOT_FOUND_REASON = "Product not found in the catalog."


@dataclass
class ScanOutcome:
    product: Product | None
    reason: str
    result: MatchResult

    @property
    def matched(self) -> bool:
        return self.product is not None


class ScanSession:
    """Runs scans for one capture surface.

    Only one identification may be outstanding at a time; a second
    :meth:`scan` while the first is awaiting the vision service raises
    :class:`ScanInProgressError` instead of racing for ``last_outcome``.
    """

    def __init__(
        self,
        store: CatalogStore,
        engine: IdentificationEngine,
        capture: Callable[[], CameraCapture] | None = None,
    ) -> None:
        self._store = store
        self._engine = engine
        self._capture = capture
        self._busy = False
        self.last_outcome: ScanOutcome | None = None

    @property
    def busy(self) -> bool:
        return self._busy

    def clear(self) -> None:
        self.last_outcome = None

    async def scan(self, image: bytes | str | None = None) -> ScanOutcome:
        """Identify ``image``, or a fresh camera frame when none is given."""
        if self._busy:
            raise ScanInProgressError("A scan is already in progress.")

        self._busy = True
        self.last_outcome = None
        try:
            if image is None:
                if self._capture is None:
                    raise ValueError("No image given and no capture surface attached.")
                frame = await asyncio.to_thread(self._capture)
                logger.debug("Captured frame from camera %d", frame.camera_index)
                image = frame.image

            products = await asyncio.to_thread(self._store.get_products)
            result = await self._engine.identify(image, products)
            outcome = self._resolve(result, products)
        finally:
            self._busy = False

        self.last_outcome = outcome
        return outcome

    @staticmethod
    def _resolve(result: MatchResult, products: list[Product]) -> ScanOutcome:
        if result.matched_product_id is not None:
            product = next(
                (p for p in products if p.id == result.matched_product_id), None
            )
            return ScanOutcome(product=product, reason=result.reason, result=result)
        return ScanOutcome(
            product=None, reason=result.reason or NOT_FOUND_REASON, result=result
        )
