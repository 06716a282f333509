# backend/vidyagiri/services/pipeline/embedder.py
from openai import AsyncOpenAI
from vidyagiri.core.config import settings

EMBEDDING_MODEL = "text-embedding-3-small"
EMBEDDING_DIMENSIONS = 1536

# Rough character budget for the 8191-token input limit
MAX_INPUT_CHARS = 30000


def _embedding_client() -> AsyncOpenAI:
    kwargs = {"api_key": settings.openai_api_key}
    if settings.embedding_timeout is not None:
        kwargs["timeout"] = settings.embedding_timeout
    return AsyncOpenAI(**kwargs)


async def generate_embeddings_batch(texts: list[str]) -> list[list[float]]:
    """Generate embeddings for multiple texts in a single request.

    Args:
        texts: List of text strings to generate embeddings for.

    Returns:
        List of embedding vectors, in the same order as `texts`.

    Raises:
        openai.OpenAIError: If the embeddings request fails.
    """
    if not texts:
        return []

    client = _embedding_client()

    # Empty strings are rejected by the API
    inputs = [text[:MAX_INPUT_CHARS] or " " for text in texts]

    response = await client.embeddings.create(
        model=settings.embedding_model or EMBEDDING_MODEL,
        input=inputs,
    )

    ordered = sorted(response.data, key=lambda item: item.index)
    return [item.embedding for item in ordered]
