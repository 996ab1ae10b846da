"""Tests for the Ollama client implementation."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from evoroulette.generation.client import GenerationRequest, GenerativeClientSettings
from evoroulette.generation.config import GenerationConfig, LLMProvider
from evoroulette.generation.providers.ollama import OllamaClient, OllamaClientError

ASYNC_CLIENT = "evoroulette.generation.providers.ollama.httpx.AsyncClient"


@pytest.fixture
def mock_config() -> GenerationConfig:
    """Create an Ollama config."""
    return GenerationConfig(
        _env_file=None,
        llm_provider=LLMProvider.OLLAMA,
        ollama_host="http://localhost:11434/",
        ollama_model="llama3",
        text_model="",
        llm_max_tokens=500,
        llm_temperature=0.7,
        llm_timeout=30.0,
    )


def _patched_http(response_json: object | None = None) -> tuple[MagicMock, AsyncMock]:
    """Patch target for httpx.AsyncClient plus its post mock."""
    response = MagicMock()
    response.json.return_value = response_json
    response.raise_for_status.return_value = None
    post = AsyncMock(return_value=response)

    http = MagicMock()
    http.post = post
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=http)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory, post


class TestOllamaClientInit:
    """Tests for OllamaClient initialization."""

    def test_init_with_config(self, mock_config: GenerationConfig) -> None:
        """Host trailing slashes are dropped and the model comes from config."""
        client = OllamaClient(config=mock_config)

        assert client._host == "http://localhost:11434"
        assert client._get_model() == "llama3"

    def test_text_model_overrides_ollama_model(self, mock_config: GenerationConfig) -> None:
        """TEXT_MODEL wins over OLLAMA_MODEL."""
        mock_config.text_model = "mistral"

        assert OllamaClient(config=mock_config)._get_model() == "mistral"

    def test_configure_without_model_keeps_original(self, mock_config: GenerationConfig) -> None:
        """configure() only replaces the model when one is given."""
        client = OllamaClient(config=mock_config)
        client.configure(GenerativeClientSettings(max_tokens=900))

        assert client._get_model() == "llama3"
        assert client._get_max_tokens() == 900

    def test_configure_keeps_unset_tuning(self, mock_config: GenerationConfig) -> None:
        """Only explicitly set fields override the config."""
        mock_config.llm_temperature = 0.3
        client = OllamaClient(config=mock_config)
        client.configure(GenerativeClientSettings(api_key="unused"))

        assert client._get_max_tokens() == 500
        assert client._get_temperature() == 0.3
        assert client._get_timeout() == 30.0


class TestOllamaGenerate:
    """Tests for text and structured generation."""

    def test_generate_text(self, mock_config: GenerationConfig) -> None:
        """The response field is returned and the payload is well formed."""
        factory, post = _patched_http({"response": "A cold-adapted grazer."})
        client = OllamaClient(config=mock_config)
        with patch(ASYNC_CLIENT, factory):
            text = asyncio.run(
                client.generate_text(GenerationRequest(prompt="Describe", system_message="Bio"))
            )

        assert text == "A cold-adapted grazer."
        url = post.call_args.args[0]
        payload = post.call_args.kwargs["json"]
        assert url == "http://localhost:11434/api/generate"
        assert payload["model"] == "llama3"
        assert payload["system"] == "Bio"
        assert payload["stream"] is False
        assert payload["options"] == {"temperature": 0.7, "num_predict": 500}
        assert "format" not in payload

    def test_generate_structured_sends_schema(self, mock_config: GenerationConfig) -> None:
        """The schema is passed as Ollama's format constraint."""
        schema = {"type": "object"}
        factory, post = _patched_http({"response": '{"generations": 4}'})
        client = OllamaClient(config=mock_config)
        with patch(ASYNC_CLIENT, factory):
            raw = asyncio.run(
                client.generate_structured(GenerationRequest(prompt="Analyze"), schema)
            )

        assert raw == '{"generations": 4}'
        assert post.call_args.kwargs["json"]["format"] == schema

    def test_empty_response_raises(self, mock_config: GenerationConfig) -> None:
        """An empty response field is an error."""
        factory, _ = _patched_http({"response": ""})
        client = OllamaClient(config=mock_config)
        with patch(ASYNC_CLIENT, factory):
            with pytest.raises(OllamaClientError, match="Empty"):
                asyncio.run(client.generate_text(GenerationRequest(prompt="Describe")))

    def test_not_running_gives_helpful_error(self, mock_config: GenerationConfig) -> None:
        """Connection failures tell the user to start Ollama."""
        factory, post = _patched_http()
        post.side_effect = httpx.ConnectError("Connection refused")
        client = OllamaClient(config=mock_config)
        with patch(ASYNC_CLIENT, factory):
            with pytest.raises(OllamaClientError) as exc_info:
                asyncio.run(client.generate_text(GenerationRequest(prompt="Describe")))

        assert "Cannot connect to Ollama" in str(exc_info.value)
        assert "ollama serve" in str(exc_info.value)

    def test_handles_timeout(self, mock_config: GenerationConfig) -> None:
        """Timeouts become OllamaClientError."""
        factory, post = _patched_http()
        post.side_effect = httpx.TimeoutException("Request timed out")
        client = OllamaClient(config=mock_config)
        with patch(ASYNC_CLIENT, factory):
            with pytest.raises(OllamaClientError, match="timed out"):
                asyncio.run(client.generate_text(GenerationRequest(prompt="Describe")))

    def test_handles_http_error(self, mock_config: GenerationConfig) -> None:
        """HTTP status errors become OllamaClientError."""
        factory, post = _patched_http()
        failed = MagicMock()
        failed.status_code = 500
        failed.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Internal Server Error", request=MagicMock(), response=failed
        )
        post.return_value = failed
        client = OllamaClient(config=mock_config)
        with patch(ASYNC_CLIENT, factory):
            with pytest.raises(OllamaClientError, match="HTTP error: 500"):
                asyncio.run(client.generate_text(GenerationRequest(prompt="Describe")))


class TestOllamaGenerateImage:
    """Tests for OllamaClient.generate_image()."""

    def test_images_unsupported(self, mock_config: GenerationConfig) -> None:
        """Ollama has no image endpoint."""
        client = OllamaClient(config=mock_config)

        with pytest.raises(OllamaClientError, match="image"):
            asyncio.run(client.generate_image(GenerationRequest(prompt="Draw")))
