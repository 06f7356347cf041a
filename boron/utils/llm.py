"""
LLM provider abstraction and response parsing utilities.

Provides a provider-agnostic async interface for LLM API calls with automatic
retries, plus helpers for parsing structured JSON out of completions.

SDK exceptions never leave a provider: transport and API failures surface as
UpstreamServiceError, empty completions as MalformedResponseError.
"""

import asyncio
import json
import os
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Optional, TypeVar

from dotenv import load_dotenv
from loguru import logger

from boron.utils.errors import MalformedResponseError, UpstreamServiceError

load_dotenv()

# Retry configuration
MAX_RETRIES = 5
BASE_DELAY = 1.0

DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_TOKENS = 2048

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

T = TypeVar("T")


class _NeverRaised(Exception):
    """Placeholder for providers with no retryable or wrapped exception types."""


async def _retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    retryable_exception: type[Exception] | tuple[type[Exception], ...],
    error_message: str,
) -> T:
    """
    Await operation with exponential backoff retry on specific exceptions.

    Args:
        operation: Coroutine factory that performs the API request
        retryable_exception: Exception type(s) that trigger a retry
        error_message: Message prefix for retry logging (e.g., "Rate limit hit")
    """
    for attempt in range(MAX_RETRIES):
        try:
            return await operation()
        except retryable_exception:
            if attempt == MAX_RETRIES - 1:
                raise
            delay = BASE_DELAY * (2**attempt)
            logger.warning(
                f"{error_message}, retrying in {delay:.1f}s... "
                f"(attempt {attempt + 1}/{MAX_RETRIES})"
            )
            await asyncio.sleep(delay)


# --- LLM Provider Classes ---


@dataclass
class LLMResponse:
    """Response from an LLM provider."""

    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0


class LLMProvider(ABC):
    """
    Abstract base for async LLM providers.

    Subclasses must:
    - Set _provider_prefix class attribute (e.g., "openai", "groq")
    - Set _retryable_exception to the exception type(s) that trigger retry
    - Set _upstream_exception to the SDK exception type(s) wrapped as UpstreamServiceError
    - Set _retry_message for logging during retries
    - Implement _call_api() for the actual API call
    - Call update_model(model) in __init__ to set model and name
    """

    _provider_prefix: str
    _retryable_exception: type[Exception] | tuple[type[Exception], ...] = _NeverRaised
    _upstream_exception: type[Exception] | tuple[type[Exception], ...] = _NeverRaised
    _retry_message: str = "Transient API error"

    name: str
    model: str

    def update_model(self, model: str):
        """Update the model and refresh the provider name."""
        self.model = model
        self.name = f"{self._provider_prefix}/{model}"

    @abstractmethod
    async def _call_api(
        self,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool,
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        """Make a single API call (no retries). Implemented by subclasses."""

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool = False,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> LLMResponse:
        """
        Generate a completion with automatic retry on transient errors.

        Args:
            system_prompt: Instructions for the model
            user_prompt: Request content
            json_mode: Ask the model for a single JSON object
            temperature: Sampling temperature
            max_tokens: Completion token limit

        Raises:
            UpstreamServiceError: API unreachable or returned an error
            MalformedResponseError: API returned an empty completion
        """
        try:
            response = await _retry_with_backoff(
                partial(
                    self._call_api, system_prompt, user_prompt, json_mode, temperature, max_tokens
                ),
                self._retryable_exception,
                self._retry_message,
            )
        except self._upstream_exception as e:
            raise UpstreamServiceError(f"LLM request failed: {e}", service=self.name) from e

        if not response.content or not response.content.strip():
            raise MalformedResponseError("LLM returned an empty completion", service=self.name)
        return response


class OpenAIProvider(LLMProvider):
    """OpenAI chat-completions provider with exponential backoff retry."""

    _provider_prefix = "openai"
    _retry_message = "Rate limit hit"
    _api_key_env = "OPENAI_API_KEY"
    _base_url: Optional[str] = None

    def __init__(self, model: str = "gpt-4o", client: Any = None):
        # Lazy import - only load the SDK if this provider is used
        try:
            import openai
        except ImportError:
            raise ImportError("openai package required. Install with: pip install openai")

        if client is None:
            api_key = os.getenv(self._api_key_env)
            if not api_key:
                raise ValueError(f"{self._api_key_env} environment variable not set")
            client = openai.AsyncOpenAI(api_key=api_key, base_url=self._base_url)

        self.client = client
        self._retryable_exception = openai.RateLimitError
        self._upstream_exception = openai.OpenAIError
        self.update_model(model)

    async def _call_api(
        self,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool,
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        kwargs = {}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        response = await self.client.chat.completions.create(
            model=self.model,
            temperature=temperature,
            max_tokens=max_tokens,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            **kwargs,
        )
        usage = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            model=self.model,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
        )


class GroqProvider(OpenAIProvider):
    """Groq provider through its OpenAI-compatible endpoint."""

    _provider_prefix = "groq"
    _api_key_env = "GROQ_API_KEY"
    _base_url = GROQ_BASE_URL

    def __init__(self, model: str = "llama-3.3-70b-versatile", client: Any = None):
        super().__init__(model=model, client=client)


class AnthropicProvider(LLMProvider):
    """Anthropic Claude provider with exponential backoff retry."""

    _provider_prefix = "anthropic"
    _retry_message = "API overloaded"

    def __init__(self, model: str = "claude-sonnet-4-20250514", client: Any = None):
        # Lazy import - only load the SDK if this provider is used
        try:
            import anthropic
        except ImportError:
            raise ImportError("anthropic package required. Install with: pip install anthropic")

        if client is None:
            api_key = os.getenv("ANTHROPIC_API_KEY")
            if not api_key:
                raise ValueError("ANTHROPIC_API_KEY environment variable not set")
            client = anthropic.AsyncAnthropic(api_key=api_key)

        self.client = client
        self._retryable_exception = (anthropic.RateLimitError, anthropic.InternalServerError)
        self._upstream_exception = anthropic.AnthropicError
        self.update_model(model)

    async def _call_api(
        self,
        system_prompt: str,
        user_prompt: str,
        json_mode: bool,
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        # No native JSON mode; ask for it in the system prompt
        if json_mode:
            system_prompt = (
                f"{system_prompt}\n\nRespond with a single JSON object and nothing else."
            )

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        return LLMResponse(
            content=text,
            model=self.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )


# --- Provider Factory ---

PROVIDERS = {
    "groq": GroqProvider,
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}


def get_provider(provider_name: str = None, model: str = None) -> LLMProvider:
    """
    Get an LLM provider instance.

    Args:
        provider_name: "groq", "openai" or "anthropic" (default: LLM_PROVIDER env var, then groq)
        model: Model name (default: LLM_MODEL env var, then provider-specific default)

    Returns:
        LLMProvider instance

    Raises:
        ValueError: Unknown provider or missing API key
    """
    if provider_name is None:
        provider_name = os.getenv("LLM_PROVIDER", "groq")
    provider_name = provider_name.lower()

    if model is None:
        model = os.getenv("LLM_MODEL") or None

    provider_class = PROVIDERS.get(provider_name)
    if provider_class is None:
        raise ValueError(
            f"Unknown provider: {provider_name}. Use one of: {', '.join(sorted(PROVIDERS))}"
        )
    return provider_class(model=model) if model else provider_class()


# --- Response Parsing Utilities ---

_CODE_FENCE = re.compile(r"^```(?:json|JSON)?\s*\n?(.*?)\n?```$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if present."""
    text = text.strip()
    match = _CODE_FENCE.match(text)
    return match.group(1).strip() if match else text


def parse_json_object(text: str, stage: Optional[str] = None) -> dict:
    """
    Parse a single JSON object from an LLM completion.

    Accepts bare JSON, fenced JSON, or JSON embedded in surrounding prose.

    Raises:
        MalformedResponseError: No JSON object could be parsed
    """
    if not text or not text.strip():
        raise MalformedResponseError("Empty response", stage=stage)

    cleaned = strip_code_fences(text)
    try:
        result = json.loads(cleaned)
        if isinstance(result, dict):
            return result
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(result).__name__}", stage=stage, response_text=text
        )
    except json.JSONDecodeError:
        pass

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        try:
            result = json.loads(cleaned[start : end + 1])
            if isinstance(result, dict):
                return result
        except json.JSONDecodeError:
            pass

    raise MalformedResponseError("Response is not valid JSON", stage=stage, response_text=text)


def parse_json_array(text: str) -> Optional[list]:
    """
    Parse a JSON array from an LLM completion, or None if there isn't one.

    Accepts bare JSON, fenced JSON, or an array embedded in surrounding prose.
    """
    if not text:
        return None
    cleaned = strip_code_fences(text)

    try:
        result = json.loads(cleaned)
        if isinstance(result, list):
            return result
    except json.JSONDecodeError:
        pass

    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start != -1 and end > start:
        try:
            result = json.loads(cleaned[start : end + 1])
            if isinstance(result, list):
                return result
        except json.JSONDecodeError:
            pass

    return None
