"""Gemini API vision backend."""

from __future__ import annotations

from ..errors import InferenceError
from . import VisionBackend

_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "matchedProductId": {
            "type": "STRING",
            "nullable": True,
            "description": "The ID of the matching product from the list, "
            "or null if no match.",
        },
        "reason": {
            "type": "STRING",
            "description": "Short explanation of why it matched or didn't match.",
        },
    },
    "required": ["reason"],
}


class GeminiVisionBackend(VisionBackend):
    """Identify products using Google Gemini's vision capability."""

    name = "gemini"

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def complete(self, image: bytes, prompt: str) -> str:
        if not self._api_key:
            raise InferenceError(
                "Gemini API key is not configured. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(
            self._model,
            generation_config={
                "response_mime_type": "application/json",
                "response_schema": _RESPONSE_SCHEMA,
            },
        )

        response = await model.generate_content_async(
            [{"mime_type": "image/jpeg", "data": image}, prompt]
        )
        text = response.text
        if not text or not text.strip():
            raise InferenceError("Empty response from Gemini", kind="malformed_response")
        return text
