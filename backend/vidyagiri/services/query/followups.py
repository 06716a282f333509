"""Follow-up question generation."""
from typing import Annotated

from pydantic import Field, TypeAdapter, ValidationError

from vidyagiri.schemas.query import VarkStyle
from vidyagiri.services.llm.client import LLMClient
from vidyagiri.services.style.prompts import FOLLOW_UP_FOCUS

FOLLOW_UP_COUNT = 3

FOLLOW_UP_SYSTEM_PROMPT = (
    "You are a question generator. Generate 3 follow-up questions based on the provided "
    "text. {focus}. Return the questions in an array format."
)

FOLLOW_UP_PROMPT = """Generate 3 follow-up questions based on the following text:

{text}

Return the questions in the following format: ["Question 1", "Question 2", "Question 3"]"""

_QUESTIONS = TypeAdapter(
    Annotated[list[str], Field(min_length=FOLLOW_UP_COUNT, max_length=FOLLOW_UP_COUNT)]
)


class FollowUpParseError(ValueError):
    """The model's reply was not a JSON array of exactly three strings."""

    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw


def parse_follow_up_questions(raw: str) -> list[str]:
    """
    Parse a model reply into exactly three questions.

    The reply must be a JSON array of three strings; nothing is repaired.

    Raises:
        FollowUpParseError: On any other shape
    """
    try:
        return _QUESTIONS.validate_json(raw)
    except ValidationError as e:
        raise FollowUpParseError(
            f"Expected a JSON array of {FOLLOW_UP_COUNT} strings: {e.error_count()} validation error(s)",
            raw=raw,
        ) from e


async def generate_follow_up_questions(
    answer_text: str,
    style: VarkStyle,
    llm_client: LLMClient | None = None,
    focus: str | None = None,
) -> list[str]:
    """
    Ask the model for three style-appropriate follow-up questions.

    Args:
        answer_text: The final answer the questions build on
        style: Learning style of the request
        llm_client: Optional LLM client instance (creates default if not provided)
        focus: Focus sentence override (defaults to the style's focus)

    Returns:
        List of exactly three questions

    Raises:
        FollowUpParseError: If the reply is not a three-item string array
    """
    client = llm_client or LLMClient()

    response = await client.complete(
        prompt=FOLLOW_UP_PROMPT.format(text=answer_text),
        system=FOLLOW_UP_SYSTEM_PROMPT.format(focus=focus or FOLLOW_UP_FOCUS[style]),
        max_tokens=500,
        temperature=0.7,
    )

    return parse_follow_up_questions(response["content"])
