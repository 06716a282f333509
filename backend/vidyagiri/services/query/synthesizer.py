"""Streamed answer synthesis."""
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import AsyncIterator

from vidyagiri.services.llm.client import GenerationError, LLMClient, StreamEvent
from vidyagiri.services.style.selector import Directive


class StreamedAnswer:
    """Append-only answer text, frozen once the stream completes."""

    def __init__(self) -> None:
        self._parts: list[str] = []
        self.frozen = False
        self.finish_reason: str | None = None

    def append(self, delta: str) -> None:
        if self.frozen:
            raise RuntimeError("Cannot append to a finalized answer")
        self._parts.append(delta)

    def freeze(self, finish_reason: str | None = None) -> None:
        self.frozen = True
        self.finish_reason = finish_reason

    @property
    def text(self) -> str:
        return "".join(self._parts)


@dataclass
class SynthesisResult:
    answer: str
    events: list[StreamEvent] = field(default_factory=list)


class StreamingSynthesizer:
    """Drives a streamed generation call and accumulates the answer."""

    def __init__(self, llm_client: LLMClient | None = None, max_tokens: int = 4096):
        self.llm_client = llm_client or LLMClient()
        self.max_tokens = max_tokens

    async def iter_answer(
        self,
        directive: Directive,
        user_content: str,
        answer: StreamedAnswer,
        events: list[StreamEvent] | None = None,
    ) -> AsyncIterator[str]:
        """
        Yield answer deltas in arrival order while accumulating them.

        `answer` is frozen when the terminal event arrives. If the stream
        breaks first the error propagates and `answer` stays unfrozen.

        Args:
            directive: System directive for the request
            user_content: Serialized evidence or the bare query
            answer: Accumulator receiving every delta
            events: Optional list receiving every raw stream event

        Yields:
            Text deltas
        """
        stream = self.llm_client.stream(
            prompt=user_content,
            system=directive.system_prompt,
            max_tokens=self.max_tokens,
        )
        async with aclosing(stream):
            async for event in stream:
                if events is not None:
                    events.append(event)
                if event.done:
                    answer.freeze(event.finish_reason)
                    return
                if event.delta:
                    answer.append(event.delta)
                    yield event.delta

        raise GenerationError("Generation stream ended without a finish signal")

    async def synthesize(self, directive: Directive, user_content: str) -> SynthesisResult:
        """
        Run a streamed generation to completion.

        Returns:
            SynthesisResult with the final answer and the raw stream events

        Raises:
            GenerationError: If the stream ends without completing
        """
        answer = StreamedAnswer()
        events: list[StreamEvent] = []
        async for _ in self.iter_answer(directive, user_content, answer, events):
            pass
        return SynthesisResult(answer=answer.text, events=events)
