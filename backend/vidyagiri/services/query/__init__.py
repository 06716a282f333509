"""Query answering services."""
from vidyagiri.services.query.followups import FollowUpParseError, generate_follow_up_questions
from vidyagiri.services.query.rephraser import RephraseMode, rephrase_query
from vidyagiri.services.query.synthesizer import StreamedAnswer, StreamingSynthesizer

__all__ = [
    "FollowUpParseError",
    "generate_follow_up_questions",
    "RephraseMode",
    "rephrase_query",
    "StreamedAnswer",
    "StreamingSynthesizer",
]
