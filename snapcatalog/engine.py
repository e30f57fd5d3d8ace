"""Match a captured image against the catalog through a vision backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .errors import InferenceError
from .images import decode_image_payload
from .models import MatchResult, Product

if TYPE_CHECKING:
    from .vision import VisionBackend

logger = logging.getLogger(__name__)

_PROMPT = """\
You are a smart cashier assistant.
Analyze the provided image. Identify the main product shown.
Compare it strictly against the following database of products:

{candidates}

If the product in the image closely matches one in the list (considering
visual appearance, brand, and likely product type), return its ID.
If it does not match any known product, return null.

Reply with a single JSON object and nothing else:
{{"matchedProductId": "<ID from the list>" or null, "reason": "<short explanation>"}}
"""

FAILURE_REASONS = {
    "service": "Error connecting to AI service.",
    "malformed_response": "The AI service returned an unreadable answer.",
    "unknown_product": "The AI service suggested a product that is not in the catalog.",
    "bad_image": "The captured image could not be read.",
}


def build_candidate_list(products: Sequence[Product]) -> str:
    """Describe each product on one line. Images are never included."""
    return "\n".join(
        f"ID: {p.id}, Name: {p.name}, Brand: {p.brand}, Price: {p.price}"
        for p in products
    )


def build_prompt(products: Sequence[Product]) -> str:
    return _PROMPT.format(candidates=build_candidate_list(products))


def parse_match_response(text: str, products: Sequence[Product]) -> MatchResult:
    """Parse and check the JSON object returned by the vision model.

    Raises:
        InferenceError: If the payload isn't the expected object, or names a
            product id that isn't among the candidates.
    """
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InferenceError(
            f"Response is not valid JSON: {e}", kind="malformed_response"
        ) from None

    if not isinstance(data, dict):
        raise InferenceError(
            f"Expected a JSON object, got {type(data).__name__}",
            kind="malformed_response",
        )

    reason = data.get("reason")
    if not isinstance(reason, str) or not reason.strip():
        raise InferenceError("Response has no reason", kind="malformed_response")

    matched_id = data.get("matchedProductId")
    if matched_id is not None and not isinstance(matched_id, str):
        raise InferenceError(
            f"matchedProductId must be a string or null, got {matched_id!r}",
            kind="malformed_response",
        )

    if matched_id is not None and all(p.id != matched_id for p in products):
        raise InferenceError(
            f"Matched id {matched_id!r} is not in the candidate list",
            kind="unknown_product",
        )

    return MatchResult(matched_product_id=matched_id, reason=reason)


class IdentificationEngine:
    """Decides whether an image shows a known product.

    Each :meth:`identify` call makes exactly one backend request. Results
    are not cached and nothing is retried; every failure comes back as a
    rejection with an explanatory reason.
    """

    def __init__(self, backend: VisionBackend) -> None:
        self._backend = backend

    async def identify(
        self, image: bytes | str, products: Sequence[Product]
    ) -> MatchResult:
        """Identify the product in ``image`` among ``products``.

        Args:
            image: JPEG bytes, or a data URL / base64 string.
            products: Catalog snapshot to compare against.

        Returns:
            A MatchResult. Never raises for service or payload failures.
        """
        try:
            image_bytes = decode_image_payload(image)
        except ValueError:
            logger.warning("Discarding scan: image payload is not decodable")
            return _failure("bad_image")

        logger.info(
            "Identifying product among %d candidates via %s",
            len(products),
            self._backend.name,
        )
        try:
            text = await self._backend.complete(image_bytes, build_prompt(products))
            result = parse_match_response(text, products)
        except InferenceError as e:
            logger.warning("Identification failed (%s): %s", e.kind, e)
            return _failure(e.kind)
        except Exception:
            logger.exception("Vision service call failed")
            return _failure("service")

        if result.matched:
            logger.info("Matched product %s: %s", result.matched_product_id, result.reason)
        else:
            logger.info("No match: %s", result.reason)
        return result


def _failure(kind: str) -> MatchResult:
    reason = FAILURE_REASONS.get(kind, FAILURE_REASONS["service"])
    return MatchResult(matched_product_id=None, reason=reason, error_kind=kind)
