"""LLM client with multi-provider support and streaming."""
import enum
from contextlib import aclosing
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from anthropic import AsyncAnthropic
from anthropic.types import TextBlock
from openai import AsyncOpenAI
from openai.types.chat import ChatCompletionSystemMessageParam, ChatCompletionUserMessageParam

from vidyagiri.core.config import settings


class LLMProvider(str, enum.Enum):
    """Supported LLM providers."""

    GROQ = "groq"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class GenerationError(Exception):
    """Raised when the generation provider fails to produce a complete answer."""


@dataclass(frozen=True)
class StreamEvent:
    """One item of a streamed completion.

    Text arrives as `delta` events; the final event has `done=True`.
    """

    delta: str = ""
    done: bool = False
    finish_reason: str | None = None


class LLMClient:
    """
    LLM client abstraction with multi-provider support.

    Groq is reached through its OpenAI-compatible endpoint, so Groq and OpenAI
    share one code path. No fallback between providers: a failing call
    propagates to the caller.
    """

    def __init__(
        self,
        provider: LLMProvider | str | None = None,
        model: str | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize LLM client.

        Args:
            provider: LLM provider to use (defaults to settings.llm_provider)
            model: Model name override (defaults to the provider's configured model)
            timeout: Request timeout in seconds (defaults to settings.generation_timeout)
        """
        self.provider = LLMProvider(provider or settings.llm_provider)
        self.model = model or self._default_model(self.provider)
        self.timeout = timeout if timeout is not None else settings.generation_timeout
        self._anthropic: Optional[AsyncAnthropic] = None
        self._openai: Optional[AsyncOpenAI] = None

    @staticmethod
    def _default_model(provider: LLMProvider) -> str:
        if provider == LLMProvider.GROQ:
            return settings.groq_model
        if provider == LLMProvider.ANTHROPIC:
            return settings.anthropic_model
        return settings.openai_model

    @property
    def anthropic(self) -> AsyncAnthropic:
        """Lazy-load Anthropic client."""
        if not self._anthropic:
            kwargs = {"api_key": settings.anthropic_api_key}
            if self.timeout is not None:
                kwargs["timeout"] = self.timeout
            self._anthropic = AsyncAnthropic(**kwargs)
        return self._anthropic

    @property
    def openai(self) -> AsyncOpenAI:
        """Lazy-load OpenAI-compatible client (OpenAI or Groq)."""
        if not self._openai:
            kwargs = {}
            if self.provider == LLMProvider.GROQ:
                kwargs["api_key"] = settings.groq_api_key
                kwargs["base_url"] = settings.groq_base_url
            else:
                kwargs["api_key"] = settings.openai_api_key
            if self.timeout is not None:
                kwargs["timeout"] = self.timeout
            self._openai = AsyncOpenAI(**kwargs)
        return self._openai

    @staticmethod
    def _build_messages(
        prompt: str, system: str
    ) -> list[ChatCompletionSystemMessageParam | ChatCompletionUserMessageParam]:
        messages: list[ChatCompletionSystemMessageParam | ChatCompletionUserMessageParam] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    async def complete(
        self,
        prompt: str,
        system: str = "",
        max_tokens: int = 2000,
        temperature: float = 0.7,
    ) -> dict:
        """
        Generate a single (non-streamed) completion.

        Args:
            prompt: User prompt/message
            system: System message/instructions
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0-1.0)

        Returns:
            Dictionary with completion response containing:
                - content: Generated text
                - provider: Provider used
                - model: Model name
                - input_tokens: Input token count
                - output_tokens: Output token count
        """
        if self.provider == LLMProvider.ANTHROPIC:
            return await self._complete_anthropic(prompt, system, max_tokens, temperature)
        return await self._complete_openai(prompt, system, max_tokens, temperature)

    async def _complete_anthropic(
        self, prompt: str, system: str, max_tokens: int, temperature: float
    ) -> dict:
        response = await self.anthropic.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
        first_block = response.content[0] if response.content else None
        content_text = first_block.text if isinstance(first_block, TextBlock) else ""

        return {
            "content": content_text,
            "provider": self.provider.value,
            "model": self.model,
            "input_tokens": response.usage.input_tokens,
            "output_tokens": response.usage.output_tokens,
        }

    async def _complete_openai(
        self, prompt: str, system: str, max_tokens: int, temperature: float
    ) -> dict:
        response = await self.openai.chat.completions.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=self._build_messages(prompt, system),
        )

        content = response.choices[0].message.content or ""
        prompt_tokens = response.usage.prompt_tokens if response.usage else 0
        completion_tokens = response.usage.completion_tokens if response.usage else 0

        return {
            "content": content,
            "provider": self.provider.value,
            "model": self.model,
            "input_tokens": prompt_tokens,
            "output_tokens": completion_tokens,
        }

    async def stream(
        self,
        prompt: str,
        system: str = "",
        max_tokens: int = 4096,
        temperature: float = 0.7,
    ) -> AsyncIterator[StreamEvent]:
        """
        Stream a completion as incremental text deltas.

        Yields delta events in arrival order, then exactly one event with
        done=True. A stream that closes without a finish signal raises
        GenerationError.

        Args:
            prompt: User prompt/message
            system: System message/instructions
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature (0.0-1.0)

        Yields:
            StreamEvent items
        """
        if self.provider == LLMProvider.ANTHROPIC:
            events = self._stream_anthropic(prompt, system, max_tokens, temperature)
        else:
            events = self._stream_openai(prompt, system, max_tokens, temperature)
        async with aclosing(events):
            async for event in events:
                yield event

    async def _stream_openai(
        self, prompt: str, system: str, max_tokens: int, temperature: float
    ) -> AsyncIterator[StreamEvent]:
        stream = await self.openai.chat.completions.create(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=self._build_messages(prompt, system),
            stream=True,
        )

        async with stream:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                choice = chunk.choices[0]
                text = choice.delta.content if choice.delta else None
                if text:
                    yield StreamEvent(delta=text)
                if choice.finish_reason:
                    yield StreamEvent(done=True, finish_reason=choice.finish_reason)
                    return

        raise GenerationError("Generation stream ended without a finish signal")

    async def _stream_anthropic(
        self, prompt: str, system: str, max_tokens: int, temperature: float
    ) -> AsyncIterator[StreamEvent]:
        async with self.anthropic.messages.stream(
            model=self.model,
            max_tokens=max_tokens,
            temperature=temperature,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        ) as stream:
            async for text in stream.text_stream:
                if text:
                    yield StreamEvent(delta=text)
            final_message = await stream.get_final_message()

        if not final_message.stop_reason:
            raise GenerationError("Generation stream ended without a finish signal")
        yield StreamEvent(done=True, finish_reason=final_message.stop_reason)
