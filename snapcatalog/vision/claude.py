"""Claude API vision backend."""

from __future__ import annotations

import base64

from ..errors import InferenceError
from . import VisionBackend


class ClaudeVisionBackend(VisionBackend):
    """Identify products using Claude's vision capability."""

    name = "claude"

    def __init__(
        self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929"
    ) -> None:
        self._api_key = api_key
        self._model = model

    async def complete(self, image: bytes, prompt: str) -> str:
        if not self._api_key:
            raise InferenceError(
                "Anthropic API key is not configured. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install anthropic"
            ) from None

        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": "image/jpeg",
                    "data": base64.standard_b64encode(image).decode(),
                },
            },
            {"type": "text", "text": prompt},
        ]

        client = anthropic.AsyncAnthropic(api_key=self._api_key)
        response = await client.messages.create(
            model=self._model,
            max_tokens=1024,
            messages=[{"role": "user", "content": content}],
        )

        texts = [block.text for block in response.content if getattr(block, "text", None)]
        if not texts:
            raise InferenceError("Empty response from Claude", kind="malformed_response")
        return texts[0]
