"""Vision backend base class and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..config import AppConfig


class VisionBackend(ABC):
    """Abstract base for a single image + prompt round-trip to a vision model."""

    name: str = "vision"

    @abstractmethod
    async def complete(self, image: bytes, prompt: str) -> str:
        """Send one JPEG image and the prompt, return the model's raw text.

        Raises:
            InferenceError: On a missing API key or an empty response.
        """
        ...


def create_backend(config: AppConfig) -> VisionBackend:
    """Create a vision backend based on configuration."""
    backend_name = config.vision.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiVisionBackend

            return GeminiVisionBackend(
                api_key=config.vision.gemini.api_key,
                model=config.vision.gemini.model,
            )
        case "claude":
            from .claude import ClaudeVisionBackend

            return ClaudeVisionBackend(
                api_key=config.vision.claude.api_key,
                model=config.vision.claude.model,
            )
        case _:
            raise ValueError(
                f"Unknown vision backend: {backend_name!r} "
                f"(choose from gemini / claude)"
            )
