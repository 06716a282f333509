"""Runs a query end to end and assembles the response payload."""
import logging
from contextlib import aclosing
from dataclasses import dataclass
from typing import AsyncIterator, Awaitable, Callable

from vidyagiri.schemas.evidence import FusedEvidenceSet
from vidyagiri.schemas.query import (
    QueryResponse,
    ResponseMode,
    ResponseOptions,
    SourceReference,
    VarkStyle,
)
from vidyagiri.services.llm.client import LLMClient
from vidyagiri.services.pipeline.orchestrator import EvidencePipeline
from vidyagiri.services.query.followups import generate_follow_up_questions
from vidyagiri.services.query.synthesizer import StreamedAnswer, StreamingSynthesizer
from vidyagiri.services.style.selector import Directive, StyleSelector
from vidyagiri.utils.sse import format_sse

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An error occurred processing your request"


@dataclass
class PreparedQuery:
    """Everything decided before generation starts."""

    style: VarkStyle
    directive: Directive
    user_content: str
    evidence: FusedEvidenceSet | None


class QueryResponder:
    """Style selection, evidence, synthesis and follow-ups for one request."""

    def __init__(
        self,
        llm_client: LLMClient | None = None,
        selector: StyleSelector | None = None,
        pipeline: EvidencePipeline | None = None,
        synthesizer: StreamingSynthesizer | None = None,
    ):
        self.llm_client = llm_client or LLMClient()
        self.selector = selector or StyleSelector()
        self.pipeline = pipeline or EvidencePipeline(llm_client=self.llm_client)
        self.synthesizer = synthesizer or StreamingSynthesizer(llm_client=self.llm_client)

    async def prepare(
        self,
        message: str,
        mode: ResponseMode,
        preferred_style: VarkStyle | None,
        options: ResponseOptions,
    ) -> PreparedQuery:
        style = self.selector.resolve_style(mode, message, preferred_style)
        logger.info(f"Selected VARK style {style.value} for {mode.value} request")

        directive = self.selector.select_directive(
            style, mode, message, embed_sources=options.embed_sources_in_answer
        )

        evidence = None
        if directive.requires_evidence:
            evidence = await self.pipeline.gather_evidence(message)

        user_content = self.selector.build_user_content(directive, message, evidence)
        return PreparedQuery(style, directive, user_content, evidence)

    async def follow_ups(self, answer_text: str, style: VarkStyle) -> list[str]:
        return await generate_follow_up_questions(
            answer_text,
            style,
            llm_client=self.llm_client,
            focus=self.selector.follow_up_focus(style),
        )

    @staticmethod
    def sources_for(prepared: PreparedQuery, options: ResponseOptions) -> list[SourceReference] | None:
        if not options.return_sources or prepared.evidence is None:
            return None
        return [
            SourceReference(title=hit.title, link=hit.link, snippet=hit.snippet)
            for hit in prepared.evidence.sources
        ]

    async def answer(
        self,
        message: str,
        mode: ResponseMode = ResponseMode.STANDARD,
        preferred_style: VarkStyle | None = None,
        options: ResponseOptions = ResponseOptions(),
    ) -> QueryResponse:
        """
        Answer a query in one piece.

        Upstream failures propagate to the caller.
        """
        prepared = await self.prepare(message, mode, preferred_style, options)

        result = await self.synthesizer.synthesize(prepared.directive, prepared.user_content)

        follow_ups = None
        if options.return_follow_up_questions:
            follow_ups = await self.follow_ups(result.answer, prepared.style)

        return QueryResponse(
            vark_style=prepared.style,
            answer=result.answer,
            sources=self.sources_for(prepared, options),
            follow_up_questions=follow_ups,
        )

    async def answer_stream(
        self,
        message: str,
        mode: ResponseMode = ResponseMode.STANDARD,
        preferred_style: VarkStyle | None = None,
        options: ResponseOptions = ResponseOptions(),
        is_disconnected: Callable[[], Awaitable[bool]] | None = None,
    ) -> AsyncIterator[str]:
        """
        Answer a query as Server-Sent Events.

        Events: sources (evidence modes, when requested), chunk (one per
        delta), answer (full text once generation completes), followups
        (when requested), done (full payload). Any failure ends the stream
        with a single error event; a partial answer is never reported as done.
        A client disconnect stops generation and skips follow-ups.

        Args:
            message: The user's question
            mode: Response mode
            preferred_style: Caller-chosen learning style
            options: Response shaping flags
            is_disconnected: Async callable reporting client disconnects

        Yields:
            SSE-formatted event strings
        """
        try:
            prepared = await self.prepare(message, mode, preferred_style, options)

            sources = self.sources_for(prepared, options)
            if sources is not None:
                yield format_sse("sources", {"sources": [s.model_dump() for s in sources]})

            answer = StreamedAnswer()
            deltas = self.synthesizer.iter_answer(prepared.directive, prepared.user_content, answer)
            async with aclosing(deltas):
                async for delta in deltas:
                    yield format_sse("chunk", {"content": delta})
                    if is_disconnected is not None and await is_disconnected():
                        logger.info("Client disconnected, stopping generation")
                        return

            yield format_sse("answer", {"answer": answer.text})

            follow_ups = None
            if options.return_follow_up_questions:
                follow_ups = await self.follow_ups(answer.text, prepared.style)
                yield format_sse("followups", {"followUpQuestions": follow_ups})

            payload = QueryResponse(
                vark_style=prepared.style,
                answer=answer.text,
                sources=sources,
                follow_up_questions=follow_ups,
            )
            yield format_sse("done", payload.model_dump(mode="json", by_alias=True, exclude_none=True))

        except Exception as e:
            logger.exception(f"Error processing streamed {mode.value} request")
            yield format_sse("error", {"error": GENERIC_ERROR, "details": str(e)})
