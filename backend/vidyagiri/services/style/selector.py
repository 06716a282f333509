"""Maps a learning style and response mode to a generation directive."""
from dataclasses import dataclass
from typing import Mapping

from vidyagiri.core.config import settings
from vidyagiri.schemas.evidence import FusedEvidenceSet
from vidyagiri.schemas.query import ResponseMode, VarkStyle
from vidyagiri.services.style.prompts import (
    AUDIO_INSTRUCTION,
    CITATION_INSTRUCTION,
    DIAGRAM_PROMPT,
    FOLLOW_UP_FOCUS,
    KINESTHETIC_INSTRUCTION,
    STANDARD_INSTRUCTION,
    STYLE_PROMPTS,
)


@dataclass(frozen=True)
class Directive:
    """System prompt for one request plus whether it needs web evidence."""

    style: VarkStyle
    mode: ResponseMode
    system_prompt: str
    requires_evidence: bool


class StyleSelector:
    """Builds prompts from an immutable style table."""

    def __init__(
        self,
        prompts: Mapping[VarkStyle, str] = STYLE_PROMPTS,
        follow_up_focus: Mapping[VarkStyle, str] = FOLLOW_UP_FOCUS,
        default_style: VarkStyle | str | None = None,
    ):
        missing = set(VarkStyle) - set(prompts)
        if missing:
            raise ValueError(f"No directive configured for styles: {sorted(s.value for s in missing)}")
        self.prompts = prompts
        self._follow_up_focus = follow_up_focus
        self.default_style = VarkStyle(default_style or settings.default_vark_style)

    def infer_style(self, message: str) -> VarkStyle:
        """Style used when the caller did not choose one."""
        return self.default_style

    def resolve_style(
        self, mode: ResponseMode, message: str, preferred: VarkStyle | None = None
    ) -> VarkStyle:
        """
        Pick the style for a request.

        Kinesthetic and diagram modes fix the style; other modes use the
        caller's preference or the inferred style.
        """
        if mode == ResponseMode.KINESTHETIC:
            return VarkStyle.KINESTHETIC
        if mode == ResponseMode.DIAGRAM:
            return VarkStyle.VISUAL
        return preferred or self.infer_style(message)

    def select_directive(
        self,
        style: VarkStyle,
        mode: ResponseMode,
        query: str,
        embed_sources: bool = False,
    ) -> Directive:
        """
        Compose the system prompt for a style/mode pair.

        Args:
            style: Learning style of the request
            mode: Response mode
            query: The literal user query, quoted into the prompt
            embed_sources: Ask for numbered source annotations (evidence modes only)

        Returns:
            Directive with the system prompt and evidence requirement
        """
        if mode == ResponseMode.DIAGRAM:
            return Directive(style, mode, DIAGRAM_PROMPT, requires_evidence=False)

        if mode == ResponseMode.KINESTHETIC:
            instruction = KINESTHETIC_INSTRUCTION.format(query=query)
            system_prompt = f"{self.prompts[style]}\n- {instruction}"
            return Directive(style, mode, system_prompt, requires_evidence=False)

        template = AUDIO_INSTRUCTION if mode == ResponseMode.AUDIO else STANDARD_INSTRUCTION
        lines = [self.prompts[style], f"- {template.format(query=query)}"]
        if embed_sources:
            lines.append(f"- {CITATION_INSTRUCTION}")
        return Directive(style, mode, "\n".join(lines), requires_evidence=True)

    def build_user_content(
        self,
        directive: Directive,
        query: str,
        evidence: FusedEvidenceSet | None = None,
    ) -> str:
        """User turn for the generation call."""
        if directive.mode == ResponseMode.DIAGRAM:
            return f"Topic: {query}"
        if not directive.requires_evidence:
            return f"Here is the query: {query}"

        evidence = evidence or FusedEvidenceSet()
        return f"Here are the relevant search results: {evidence.to_prompt_json()}"

    def follow_up_focus(self, style: VarkStyle) -> str:
        return self._follow_up_focus[style]
