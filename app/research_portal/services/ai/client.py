"""
Completion client for the OpenAI chat completions API.

Wraps a single prompt -> text exchange: fixed system persona, explicit
per-call timeout, and translation of SDK failures into UpstreamError.
No retries are attempted here.
"""

import asyncio
import logging
from typing import Any

import openai
from pydantic import BaseModel, ConfigDict

from ...config import Settings, get_settings
from ...models import CompletionRequest, CompletionResponse, TokenUsage
from .exceptions import ConfigurationError, UpstreamError
from .prompts import SYSTEM_PROMPT, build_extraction_prompt

logger = logging.getLogger(__name__)


class ClientConfig(BaseModel):
    """
    Configuration for a CompletionClient.

    Built once at startup (see ``from_settings``) and passed to the client
    at construction time.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    model: str = "gpt-4-turbo-preview"
    temperature: float = 0.3
    max_tokens: int = 2000
    timeout_seconds: float = 30.0
    max_prompt_chars: int = 3000

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ClientConfig":
        """Build a client configuration from application settings."""
        settings = settings or get_settings()
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            timeout_seconds=settings.llm_timeout_seconds,
            max_prompt_chars=settings.max_prompt_chars,
        )


class CompletionClient:
    """
    Client for prompt-driven LLM completion calls.

    Uses OpenAI's async SDK. The SDK client is created lazily so that a
    missing API key only fails when a call is actually attempted.
    """

    def __init__(self, config: ClientConfig, client: Any | None = None):
        """
        Initialize the completion client.

        Args:
            config: Explicit client configuration.
            client: Optional pre-built SDK client (AsyncOpenAI-compatible).
        """
        self.config = config
        self._client = client

    @property
    def client(self) -> Any:
        """Lazy-load the OpenAI client."""
        if self._client is None:
            if not self.config.api_key:
                raise ConfigurationError(
                    "OPENAI_API_KEY not configured. Set OPENAI_API_KEY environment variable."
                )
            self._client = openai.AsyncOpenAI(
                api_key=self.config.api_key,
                timeout=self.config.timeout_seconds,
                max_retries=0,
            )
        return self._client

    async def complete(
        self, prompt: str, temperature: float | None = None
    ) -> CompletionResponse:
        """
        Send one prompt to the model and return its raw text.

        Args:
            prompt: The user prompt.
            temperature: Sampling temperature; defaults to the configured value.

        Returns:
            CompletionResponse with content and token usage.

        Raises:
            ConfigurationError: If no API key is configured.
            UpstreamError: On API, transport or timeout failure.
        """
        request = CompletionRequest(
            prompt=prompt,
            temperature=self.config.temperature if temperature is None else temperature,
        )
        client = self.client

        try:
            response = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.config.model,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": request.prompt},
                    ],
                    temperature=request.temperature,
                    max_tokens=self.config.max_tokens,
                ),
                timeout=self.config.timeout_seconds,
            )
        except (asyncio.TimeoutError, openai.APITimeoutError) as e:
            logger.error("Completion call timed out after %.1fs", self.config.timeout_seconds)
            raise UpstreamError(
                504, f"Request timed out after {self.config.timeout_seconds:g}s"
            ) from e
        except openai.APIStatusError as e:
            logger.error("Completion call failed with status %s: %s", e.status_code, e.message)
            raise UpstreamError(e.status_code, e.message) from e
        except openai.APIConnectionError as e:
            logger.error("Could not reach completion endpoint: %s", e)
            raise UpstreamError(None, str(e)) from e
        except openai.OpenAIError as e:
            logger.error("Completion call failed: %s", e)
            raise UpstreamError(None, str(e)) from e

        try:
            content = response.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            logger.error("Malformed completion response: %s", e)
            raise UpstreamError(None, f"Malformed completion response: {e}") from e

        usage = TokenUsage()
        if getattr(response, "usage", None) is not None:
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens or 0,
                completion_tokens=response.usage.completion_tokens or 0,
            )

        logger.info(
            "Completion finished: %d prompt tokens, %d completion tokens",
            usage.prompt_tokens,
            usage.completion_tokens,
        )
        return CompletionResponse(content=content, usage=usage)

    async def extract(
        self,
        text: str,
        instructions: str,
        json_schema: dict[str, Any] | None = None,
        temperature: float = 0.2,
    ) -> CompletionResponse:
        """
        Run an extraction prompt over the leading part of a document.

        Args:
            text: Full document text (truncated to ``max_prompt_chars``).
            instructions: Task-specific instructions.
            json_schema: Optional advisory schema for the prompt.
            temperature: Sampling temperature.

        Returns:
            CompletionResponse from the model.
        """
        if len(text) > self.config.max_prompt_chars:
            logger.info(
                "Document truncated for analysis: %d of %d characters sent",
                self.config.max_prompt_chars,
                len(text),
            )
        prompt = build_extraction_prompt(
            text, instructions, json_schema, max_chars=self.config.max_prompt_chars
        )
        return await self.complete(prompt, temperature=temperature)
