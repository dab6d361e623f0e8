"""
Tests for Gemini Client adapter.
"""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import MagicMock, patch

import pytest

from docintake.config.errors import ErrorCode, LLMError

from .client import GeminiAPIError, GeminiClient, RateLimitError
from .models import GeminiConfig, GeminiResponse


@pytest.fixture
def mock_genai() -> Generator[MagicMock, None, None]:
    """Mock the google.generativeai module."""
    with patch("docintake.adapters.gemini.client.genai") as mock:
        mock_model = MagicMock()
        mock_model.generate_content.return_value = MagicMock(
            text="Test response",
            usage_metadata=MagicMock(
                prompt_token_count=10,
                candidates_token_count=20,
            ),
        )
        mock.GenerativeModel.return_value = mock_model
        yield mock


@pytest.fixture
def client(mock_genai: MagicMock) -> GeminiClient:
    """Create a GeminiClient with mocked dependencies."""
    return GeminiClient()


def _set_response(mock_genai: MagicMock, text: str) -> None:
    mock_genai.GenerativeModel.return_value.generate_content.return_value = MagicMock(
        text=text, usage_metadata=None
    )


# --- Model Tests ---


def test_gemini_config_defaults() -> None:
    """Test GeminiConfig default values."""
    config = GeminiConfig()
    assert config.model == "gemini-2.0-flash"
    assert config.temperature == 0.2
    assert config.max_output_tokens == 8192
    assert config.rate_limit_rpm == 60


def test_gemini_config_temperature_validation() -> None:
    """Test GeminiConfig temperature must be between 0 and 2."""
    assert GeminiConfig(temperature=0.0).temperature == 0.0
    assert GeminiConfig(temperature=2.0).temperature == 2.0

    with pytest.raises(ValueError):
        GeminiConfig(temperature=-0.1)
    with pytest.raises(ValueError):
        GeminiConfig(temperature=2.1)


def test_gemini_response_model() -> None:
    response = GeminiResponse(
        text="{}",
        model="gemini-2.0-flash",
        prompt_tokens=10,
        completion_tokens=5,
        total_tokens=15,
    )
    assert response.total_tokens == 15


# --- Generate Tests ---


async def test_generate_basic(client: GeminiClient) -> None:
    response = await client.generate("Hello")
    assert isinstance(response, GeminiResponse)
    assert response.text == "Test response"
    assert response.total_tokens == 30


async def test_generate_with_system_instruction(
    client: GeminiClient, mock_genai: MagicMock
) -> None:
    await client.generate(prompt="Classify", system_instruction="You organize plans.")

    contents = mock_genai.GenerativeModel.return_value.generate_content.call_args.args[0]
    assert contents[0]["parts"] == ["You organize plans."]
    assert contents[-1]["parts"] == ["Classify"]


async def test_generate_passes_response_mime_type(
    client: GeminiClient, mock_genai: MagicMock
) -> None:
    await client.generate("Hello", response_mime_type="application/json")

    kwargs = mock_genai.GenerativeModel.return_value.generate_content.call_args.kwargs
    assert kwargs["generation_config"] == {"response_mime_type": "application/json"}
    assert kwargs["request_options"] == {"timeout": 120}


async def test_generate_json_valid(client: GeminiClient, mock_genai: MagicMock) -> None:
    _set_response(mock_genai, '{"documentTitle": "Plan", "items": []}')
    result = await client.generate_json("Return JSON")
    assert result == {"documentTitle": "Plan", "items": []}


async def test_generate_json_extracts_from_text(
    client: GeminiClient, mock_genai: MagicMock
) -> None:
    _set_response(mock_genai, 'Here you go:\n```json\n{"extracted": true}\n```')
    result = await client.generate_json("Extract JSON")
    assert result == {"extracted": True}


async def test_generate_json_returns_non_dict_json(
    client: GeminiClient, mock_genai: MagicMock
) -> None:
    """Valid JSON that is not an object is returned for the caller to validate."""
    _set_response(mock_genai, "[1, 2, 3]")
    assert await client.generate_json("Return JSON") == [1, 2, 3]


async def test_generate_json_invalid_raises(
    client: GeminiClient, mock_genai: MagicMock
) -> None:
    _set_response(mock_genai, "Not JSON at all")

    with pytest.raises(LLMError) as exc:
        await client.generate_json("Return JSON")
    assert exc.value.code == ErrorCode.ANALYSIS_INVALID_RESPONSE


# --- Rate Limiting Tests ---


async def test_rate_limiting_allows_requests_within_limit(
    mock_genai: MagicMock,
) -> None:
    client = GeminiClient(config=GeminiConfig(rate_limit_rpm=5))
    for _ in range(5):
        await client.generate("Hello")
    assert len(client._request_times) == 5


# --- Error Handling Tests ---


async def test_generate_handles_rate_limit_error(
    client: GeminiClient, mock_genai: MagicMock
) -> None:
    mock_model = mock_genai.GenerativeModel.return_value
    mock_model.generate_content.side_effect = Exception("429 Rate limit exceeded")

    with pytest.raises(RateLimitError) as exc:
        await client.generate("Hello")
    assert exc.value.code == ErrorCode.LLM_RATE_LIMITED
    # Rate limits are not retried
    assert mock_model.generate_content.call_count == 1


async def test_generate_retries_then_raises_api_error(
    client: GeminiClient, mock_genai: MagicMock
) -> None:
    """API errors are retried three times, then re-raised."""
    mock_model = mock_genai.GenerativeModel.return_value
    mock_model.generate_content.side_effect = Exception("Connection failed")

    with pytest.raises(GeminiAPIError):
        await client.generate("Hello")
    assert mock_model.generate_content.call_count == 3


def test_errors_are_llm_errors() -> None:
    assert isinstance(RateLimitError("Too many requests"), LLMError)
    error = GeminiAPIError("API failure")
    assert error.code == ErrorCode.LLM_UNAVAILABLE
    assert error.message == "API failure"
