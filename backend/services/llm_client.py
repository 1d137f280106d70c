"""LLM Client for Groq API integration."""
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
import logging

from config import GROQ_API_KEY, LLM_MODEL, LLM_MAX_TOKENS
from models.chunk import ScoredChunk

logger = logging.getLogger(__name__)


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class GenerationFailedError(Exception):
    """The language model could not produce an answer."""

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class LLMClient:
    """Client for interfacing with Groq API for text generation."""

    def __init__(self, api_key: Optional[str] = None, model: str = LLM_MODEL):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model: Chat model used for every request
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.model = model
        self.client = Groq(api_key=self.api_key)
        logger.info(f"LLMClient initialized successfully (model: {model})")

    def generate(self, prompt: str, max_tokens: int = LLM_MAX_TOKENS) -> LLMResponse:
        """
        Generate a complete response.

        Args:
            prompt: Complete prompt with context and query
            max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse with text, token counts, and latency

        Raises:
            GenerationFailedError: Structured error with code, message, and details
        """
        start_time = time.time()

        try:
            logger.debug(f"Generating response with model: {self.model}")

            response = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=0.7
            )
        except Exception as e:
            raise self._generation_error(e, start_time) from e

        latency_ms = int((time.time() - start_time) * 1000)
        text = response.choices[0].message.content or ""
        tokens_input = response.usage.prompt_tokens
        tokens_output = response.usage.completion_tokens

        logger.info(
            f"Generated response: model={self.model}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
            f"latency={latency_ms}ms"
        )

        return LLMResponse(
            text=text,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            latency_ms=latency_ms,
            model_used=self.model
        )

    def generate_stream(self, prompt: str, max_tokens: int = LLM_MAX_TOKENS) -> Iterator[Dict[str, Any]]:
        """
        Stream a response token by token.

        Yields:
            {"type": "token", "content": str} for each fragment, then a single
            {"type": "metadata", "data": {...}} with token usage and latency

        Raises:
            GenerationFailedError: If the request or the stream fails
        """
        start_time = time.time()
        tokens_input = 0
        tokens_output = 0

        try:
            stream = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=0.7,
                stream=True
            )

            for chunk in stream:
                if chunk.choices:
                    content = chunk.choices[0].delta.content
                    if content:
                        yield {"type": "token", "content": content}

                # Groq reports usage on the final chunk
                usage = getattr(getattr(chunk, "x_groq", None), "usage", None)
                if usage is not None:
                    tokens_input = usage.prompt_tokens
                    tokens_output = usage.completion_tokens
        except Exception as e:
            raise self._generation_error(e, start_time) from e

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Streamed response: model={self.model}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
            f"latency={latency_ms}ms"
        )
        yield {
            "type": "metadata",
            "data": {
                "tokens_input": tokens_input,
                "tokens_output": tokens_output,
                "latency_ms": latency_ms,
                "model_used": self.model
            }
        }

    def _generation_error(self, e: Exception, start_time: float) -> GenerationFailedError:
        """Translate a Groq SDK exception into a GenerationFailedError and log it."""
        latency_ms = int((time.time() - start_time) * 1000)
        details = {
            "model": self.model,
            "latency_ms": latency_ms,
            "original_error": str(e)
        }

        if isinstance(e, RateLimitError):
            details["retry_after"] = 60
            error = LLMError(
                code="RATE_LIMIT_ERROR",
                message="Rate limit exceeded. Please try again in a few moments.",
                details=details
            )
        elif isinstance(e, AuthenticationError):
            error = LLMError(
                code="AUTHENTICATION_ERROR",
                message="Authentication failed. Please check your API key.",
                details=details
            )
        elif isinstance(e, APITimeoutError):
            error = LLMError(
                code="TIMEOUT_ERROR",
                message="Request timed out. Please try again.",
                details=details
            )
        elif isinstance(e, APIError):
            error = LLMError(
                code="API_ERROR",
                message=f"Groq API error: {str(e)}",
                details=details
            )
        else:
            details["error_type"] = type(e).__name__
            error = LLMError(
                code="UNKNOWN_ERROR",
                message=f"Unexpected error during generation: {str(e)}",
                details=details
            )

        logger.error(
            f"Generation failed ({error.code}): model={self.model}, latency={latency_ms}ms, error={e}",
            exc_info=True,
            extra={"error_code": error.code, "error_details": error.details}
        )
        return GenerationFailedError(error)

    @staticmethod
    def build_prompt(
        query: str,
        retrieved_chunks: Optional[List[ScoredChunk]] = None,
        mentions: Optional[List[str]] = None,
        conversation_history: Optional[str] = None
    ) -> str:
        """
        Build prompt template with context and query.

        Args:
            query: User question with mentions removed
            retrieved_chunks: Chunks selected by the retrieval engine
            mentions: Documents the user referenced with @mentions
            conversation_history: Formatted conversation history

        Returns:
            Complete prompt string
        """
        mention_section = ""
        if mentions:
            mention_section = f"The user is specifically asking about: {', '.join(mentions)}.\n"

        context_text = ""
        if retrieved_chunks:
            context_text = "\n\n".join(
                f"[From {chunk.file_name}]: {chunk.text}" for chunk in retrieved_chunks
            )

        history_section = ""
        if conversation_history:
            history_section = f"""{conversation_history}

"""

        prompt = f"""You are a helpful assistant that answers questions based on the provided document context.
{mention_section}
Context from uploaded documents:
{context_text}

{history_section}User question: {query}

Please provide a helpful, accurate answer based on the context above. If the context doesn't contain relevant information, say so clearly."""

        return prompt
