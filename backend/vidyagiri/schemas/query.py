import enum
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


class VarkStyle(str, enum.Enum):
    """Learner modality controlling how answers are formatted."""

    VISUAL = "visual"
    AUDITORY = "auditory"
    READ_WRITE = "readWrite"
    KINESTHETIC = "kinesthetic"


class ResponseMode(str, enum.Enum):
    """Answer flavour, one per endpoint."""

    STANDARD = "standard"
    AUDIO = "audio"
    KINESTHETIC = "kinesthetic"
    DIAGRAM = "diagram"


class QueryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1)
    return_sources: bool = Field(default=True, alias="returnSources")
    return_follow_up_questions: bool = Field(default=True, alias="returnFollowUpQuestions")
    embed_sources_in_answer: bool = Field(default=False, alias="embedSourcesInLLMResponse")
    preferred_style: VarkStyle | None = Field(default=None, alias="preferredStyle")


class SourceReference(BaseModel):
    title: str
    link: str
    snippet: str


class QueryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vark_style: VarkStyle = Field(alias="varkStyle")
    answer: str
    sources: list[SourceReference] | None = None
    follow_up_questions: list[str] | None = Field(default=None, alias="followUpQuestions")


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None


@dataclass(frozen=True)
class ResponseOptions:
    """Caller flags shaping the response, read once per request."""

    return_sources: bool = True
    return_follow_up_questions: bool = True
    embed_sources_in_answer: bool = False

    @classmethod
    def from_request(cls, request: QueryRequest) -> "ResponseOptions":
        return cls(
            return_sources=request.return_sources,
            return_follow_up_questions=request.return_follow_up_questions,
            embed_sources_in_answer=request.embed_sources_in_answer,
        )
