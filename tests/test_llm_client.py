"""Unit tests for LLMClient."""
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import httpx
import pytest
from unittest.mock import Mock, patch
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError

from models.chunk import ScoredChunk
from services.llm_client import LLMClient, LLMResponse, GenerationFailedError

GROQ_REQUEST = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")


def _groq_response(status_code):
    return httpx.Response(status_code, request=GROQ_REQUEST)


def _stream_chunk(content=None, usage=None):
    return Mock(
        choices=[Mock(delta=Mock(content=content))],
        x_groq=Mock(usage=usage) if usage is not None else None
    )


class TestLLMClient:
    """Test suite for LLMClient class."""

    def test_initialization_with_api_key(self):
        client = LLMClient(api_key="test_key")
        assert client.api_key == "test_key"
        assert client.model == "llama-3.1-8b-instant"

    def test_initialization_without_api_key_raises_error(self):
        with patch('services.llm_client.GROQ_API_KEY', None):
            with pytest.raises(ValueError, match="GROQ_API_KEY must be provided"):
                LLMClient()

    @patch('services.llm_client.Groq')
    def test_generate_success(self, mock_groq_class):
        mock_response = Mock()
        mock_response.choices = [Mock(message=Mock(content="Revenue grew 10%."))]
        mock_response.usage = Mock(prompt_tokens=150, completion_tokens=12)

        mock_client = Mock()
        mock_client.chat.completions.create.return_value = mock_response
        mock_groq_class.return_value = mock_client

        client = LLMClient(api_key="test_key")
        response = client.generate(prompt="What was the revenue?")

        assert isinstance(response, LLMResponse)
        assert response.text == "Revenue grew 10%."
        assert response.tokens_input == 150
        assert response.tokens_output == 12
        assert response.model_used == "llama-3.1-8b-instant"
        assert response.latency_ms >= 0

        call_kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert call_kwargs["messages"] == [{"role": "user", "content": "What was the revenue?"}]

    @patch('services.llm_client.Groq')
    def test_generate_stream_yields_tokens_then_metadata(self, mock_groq_class):
        mock_client = Mock()
        mock_client.chat.completions.create.return_value = iter([
            _stream_chunk("Revenue "),
            _stream_chunk("grew."),
            _stream_chunk(None, usage=Mock(prompt_tokens=40, completion_tokens=3)),
        ])
        mock_groq_class.return_value = mock_client

        client = LLMClient(api_key="test_key")
        items = list(client.generate_stream("prompt"))

        assert items[0] == {"type": "token", "content": "Revenue "}
        assert items[1] == {"type": "token", "content": "grew."}
        assert items[-1]["type"] == "metadata"
        assert items[-1]["data"]["tokens_input"] == 40
        assert items[-1]["data"]["tokens_output"] == 3
        assert mock_client.chat.completions.create.call_args.kwargs["stream"] is True

    @patch('services.llm_client.Groq')
    def test_rate_limit_error(self, mock_groq_class):
        mock_client = Mock()
        mock_client.chat.completions.create.side_effect = RateLimitError(
            message="Rate limit exceeded",
            response=_groq_response(429),
            body=None
        )
        mock_groq_class.return_value = mock_client

        client = LLMClient(api_key="test_key")

        with pytest.raises(GenerationFailedError) as exc_info:
            client.generate(prompt="Test")

        assert exc_info.value.error.code == "RATE_LIMIT_ERROR"
        assert exc_info.value.error.details["retry_after"] == 60

    @patch('services.llm_client.Groq')
    def test_authentication_error(self, mock_groq_class):
        mock_client = Mock()
        mock_client.chat.completions.create.side_effect = AuthenticationError(
            message="Invalid API key",
            response=_groq_response(401),
            body=None
        )
        mock_groq_class.return_value = mock_client

        client = LLMClient(api_key="test_key")

        with pytest.raises(GenerationFailedError) as exc_info:
            client.generate(prompt="Test")

        assert exc_info.value.error.code == "AUTHENTICATION_ERROR"

    @patch('services.llm_client.Groq')
    def test_timeout_error(self, mock_groq_class):
        mock_client = Mock()
        mock_client.chat.completions.create.side_effect = APITimeoutError(request=GROQ_REQUEST)
        mock_groq_class.return_value = mock_client

        client = LLMClient(api_key="test_key")

        with pytest.raises(GenerationFailedError) as exc_info:
            client.generate(prompt="Test")

        assert exc_info.value.error.code == "TIMEOUT_ERROR"

    @patch('services.llm_client.Groq')
    def test_api_error(self, mock_groq_class):
        mock_client = Mock()
        mock_client.chat.completions.create.side_effect = APIError(
            message="Service unavailable",
            request=GROQ_REQUEST,
            body=None
        )
        mock_groq_class.return_value = mock_client

        client = LLMClient(api_key="test_key")

        with pytest.raises(GenerationFailedError) as exc_info:
            client.generate(prompt="Test")

        assert exc_info.value.error.code == "API_ERROR"

    @patch('services.llm_client.Groq')
    def test_unexpected_error_during_stream(self, mock_groq_class):
        def broken_stream():
            yield _stream_chunk("partial")
            raise RuntimeError("connection reset")

        mock_client = Mock()
        mock_client.chat.completions.create.return_value = broken_stream()
        mock_groq_class.return_value = mock_client

        client = LLMClient(api_key="test_key")
        stream = client.generate_stream("prompt")

        assert next(stream) == {"type": "token", "content": "partial"}
        with pytest.raises(GenerationFailedError) as exc_info:
            next(stream)

        assert exc_info.value.error.code == "UNKNOWN_ERROR"
        assert exc_info.value.error.details["error_type"] == "RuntimeError"


class TestBuildPrompt:
    """Tests for prompt assembly."""

    def test_chunks_are_labelled_with_file_name(self):
        chunks = [
            ScoredChunk(text="Revenue grew 10%", score=1, file_name="alpha.pdf", index=0),
            ScoredChunk(text="Headcount is 40", score=0, file_name="beta.txt", index=2),
        ]

        prompt = LLMClient.build_prompt("What was the revenue?", chunks)

        assert "[From alpha.pdf]: Revenue grew 10%" in prompt
        assert "[From beta.txt]: Headcount is 40" in prompt
        assert "User question: What was the revenue?" in prompt
        assert "specifically asking about" not in prompt

    def test_mentions_are_named(self):
        prompt = LLMClient.build_prompt("compare", [], mentions=["alpha", "beta"])
        assert "The user is specifically asking about: alpha, beta." in prompt

    def test_history_included(self):
        history = "Conversation history:\nPrevious Q: hi\nPrevious A: hello"
        prompt = LLMClient.build_prompt("next?", None, conversation_history=history)
        assert history in prompt

    def test_without_history(self):
        prompt = LLMClient.build_prompt("next?", None)
        assert "Previous Q:" not in prompt
        assert "say so clearly" in prompt
