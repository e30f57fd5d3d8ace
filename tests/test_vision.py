"""Tests for vision backends (mocked API calls)."""

import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from snapcatalog.config import load_config
from snapcatalog.errors import InferenceError
from snapcatalog.vision import create_backend
from snapcatalog.vision.claude import ClaudeVisionBackend
from snapcatalog.vision.gemini import GeminiVisionBackend

REPLY = '{"matchedProductId": "prod_1", "reason": "Red can with Coca-Cola logo"}'


class TestCreateBackend:
    def test_create_gemini_backend(self):
        config = load_config()
        backend = create_backend(config)
        assert isinstance(backend, GeminiVisionBackend)

    def test_create_claude_backend(self):
        config = load_config()
        config.vision.backend = "claude"
        backend = create_backend(config)
        assert isinstance(backend, ClaudeVisionBackend)

    def test_create_unknown_backend(self):
        config = load_config()
        config.vision.backend = "unknown"
        with pytest.raises(ValueError, match="Unknown vision backend"):
            create_backend(config)


class TestGeminiVisionBackend:
    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        backend = GeminiVisionBackend(api_key="")
        with pytest.raises(InferenceError, match="API key"):
            await backend.complete(b"jpeg", "prompt")

    @pytest.mark.asyncio
    async def test_complete_mocked(self):
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(
            return_value=MagicMock(text=REPLY)
        )
        mock_genai = MagicMock()
        mock_genai.GenerativeModel.return_value = mock_model
        mock_google = MagicMock()
        mock_google.generativeai = mock_genai

        with patch.dict(
            sys.modules,
            {"google": mock_google, "google.generativeai": mock_genai},
        ):
            backend = GeminiVisionBackend(api_key="test-key", model="gemini-test")
            text = await backend.complete(b"\xff\xd8jpeg", "the prompt")

        assert text == REPLY
        mock_genai.configure.assert_called_once_with(api_key="test-key")

        args, kwargs = mock_genai.GenerativeModel.call_args
        assert args[0] == "gemini-test"
        gen_config = kwargs["generation_config"]
        assert gen_config["response_mime_type"] == "application/json"
        assert gen_config["response_schema"]["required"] == ["reason"]

        parts = mock_model.generate_content_async.call_args[0][0]
        assert parts[0] == {"mime_type": "image/jpeg", "data": b"\xff\xd8jpeg"}
        assert parts[1] == "the prompt"

    @pytest.mark.asyncio
    async def test_empty_response_raises(self):
        mock_model = MagicMock()
        mock_model.generate_content_async = AsyncMock(return_value=MagicMock(text=""))
        mock_genai = MagicMock()
        mock_genai.GenerativeModel.return_value = mock_model
        mock_google = MagicMock()
        mock_google.generativeai = mock_genai

        with patch.dict(
            sys.modules,
            {"google": mock_google, "google.generativeai": mock_genai},
        ):
            backend = GeminiVisionBackend(api_key="test-key")
            with pytest.raises(InferenceError) as exc_info:
                await backend.complete(b"jpeg", "prompt")

        assert exc_info.value.kind == "malformed_response"


class TestClaudeVisionBackend:
    @pytest.mark.asyncio
    async def test_requires_api_key(self):
        backend = ClaudeVisionBackend(api_key="")
        with pytest.raises(InferenceError, match="API key"):
            await backend.complete(b"jpeg", "prompt")

    @pytest.mark.asyncio
    async def test_complete_mocked(self):
        mock_response = MagicMock()
        mock_response.content = [MagicMock(text=REPLY)]

        mock_client = AsyncMock()
        mock_client.messages.create = AsyncMock(return_value=mock_response)

        mock_anthropic = MagicMock()
        mock_anthropic.AsyncAnthropic.return_value = mock_client

        with patch.dict(sys.modules, {"anthropic": mock_anthropic}):
            backend = ClaudeVisionBackend(api_key="test-key")
            text = await backend.complete(b"\xff\xd8jpeg", "the prompt")

        assert text == REPLY
        mock_anthropic.AsyncAnthropic.assert_called_once_with(api_key="test-key")

        kwargs = mock_client.messages.create.call_args.kwargs
        content = kwargs["messages"][0]["content"]
        assert content[0]["type"] == "image"
        assert content[0]["source"]["media_type"] == "image/jpeg"
        assert content[0]["source"]["data"] == "/9hqcGVn"
        assert content[1] == {"type": "text", "text": "the prompt"}
