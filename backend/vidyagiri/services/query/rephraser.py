"""Query rephrasing for search engines and diagram generation."""
import enum
import logging

from vidyagiri.services.llm.client import LLMClient

logger = logging.getLogger(__name__)


class RephraseMode(str, enum.Enum):
    SEARCH = "search"
    DIAGRAM = "diagram"


REPHRASE_PROMPTS = {
    RephraseMode.SEARCH: (
        "You are a rephraser and always respond with a rephrased version of the input "
        "that is given to a search engine API. Always be succinct and use the same words "
        "as the input. ONLY RETURN THE REPHRASED VERSION OF THE INPUT."
    ),
    RephraseMode.DIAGRAM: (
        "You are a rephraser and always respond with a rephrased version of the input "
        "that is given to a service that generates diagrams from a query. Rephrase the "
        "input so that it can be used to generate a diagram of the topic. "
        "ONLY RETURN THE REPHRASED VERSION OF THE INPUT."
    ),
}


async def rephrase_query(
    text: str,
    mode: RephraseMode = RephraseMode.SEARCH,
    llm_client: LLMClient | None = None,
) -> str:
    """
    Rewrite user input for a downstream consumer.

    Provider errors propagate: there is no fallback query.

    Args:
        text: Raw user input
        mode: Target consumer (search engine or diagram generator)
        llm_client: Optional LLM client instance (creates default if not provided)

    Returns:
        The rephrased text
    """
    client = llm_client or LLMClient()

    response = await client.complete(
        prompt=text,
        system=REPHRASE_PROMPTS[RephraseMode(mode)],
        max_tokens=200,
        temperature=0.2,
    )

    rephrased = response["content"].strip()
    logger.info(f"Rephrased ({RephraseMode(mode).value}) query: {rephrased!r}")
    return rephrased
