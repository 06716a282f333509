"""Ephemeral per-document similarity retrieval over text chunks."""
from typing import Awaitable, Callable, Sequence

import numpy as np

from vidyagiri.services.pipeline.embedder import generate_embeddings_batch

EmbedFn = Callable[[list[str]], Awaitable[list[list[float]]]]


def cosine_similarities(vectors: Sequence[Sequence[float]], anchor: Sequence[float]) -> np.ndarray:
    """Cosine similarity of every row of `vectors` to `anchor`.

    Zero-length vectors score 0.
    """
    matrix = np.asarray(vectors, dtype=float)
    target = np.asarray(anchor, dtype=float)
    if matrix.size == 0:
        return np.zeros(0)

    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(target)
    dots = matrix @ target
    return np.divide(dots, norms, out=np.zeros_like(dots), where=norms > 0)


def rank_by_similarity(
    vectors: Sequence[Sequence[float]],
    anchor: Sequence[float],
    k: int,
) -> list[tuple[int, float]]:
    """
    Rank vectors by cosine similarity to the anchor.

    Args:
        vectors: Candidate embedding vectors
        anchor: Embedding of the comparison text
        k: Maximum number of results

    Returns:
        Up to k (index, score) pairs, best first; equal scores keep input order
    """
    if k <= 0 or len(vectors) == 0:
        return []

    scores = cosine_similarities(vectors, anchor)
    order = np.argsort(-scores, kind="stable")[:k]
    return [(int(i), float(scores[i])) for i in order]


async def retrieve_indices(
    chunks: Sequence[str],
    anchor_query: str,
    k: int = 2,
    embed: EmbedFn | None = None,
) -> list[tuple[int, float]]:
    """
    Return the positions of the k chunks closest to `anchor_query`.

    The chunks and the anchor are embedded in one batch; the resulting
    vectors live only for this call.

    Args:
        chunks: Text chunks of one document
        anchor_query: Text to compare chunks against
        k: Maximum number of chunks to return
        embed: Embedding function (defaults to the OpenAI batch embedder)

    Returns:
        (index, similarity) pairs with non-increasing similarity; identical
        chunk texts keep their own positions
    """
    if not chunks or k <= 0:
        return []

    embed = embed or generate_embeddings_batch
    vectors = await embed([*chunks, anchor_query])
    chunk_vectors, anchor_vector = vectors[:-1], vectors[-1]

    return rank_by_similarity(chunk_vectors, anchor_vector, k)


async def retrieve(
    chunks: Sequence[str],
    anchor_query: str,
    k: int = 2,
    embed: EmbedFn | None = None,
) -> list[tuple[str, float]]:
    """Return (chunk, similarity) pairs for the k chunks closest to `anchor_query`."""
    ranked = await retrieve_indices(chunks, anchor_query, k=k, embed=embed)
    return [(chunks[index], score) for index, score in ranked]
