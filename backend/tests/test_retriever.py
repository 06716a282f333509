"""Tests for per-document similarity retrieval."""
import pytest
from unittest.mock import AsyncMock

from vidyagiri.services.pipeline.retriever import (
    cosine_similarities,
    rank_by_similarity,
    retrieve,
)


def fake_embedder(vectors_by_text: dict[str, list[float]]) -> AsyncMock:
    def embed(texts):
        return [vectors_by_text[text] for text in texts]

    return AsyncMock(side_effect=embed)


def test_cosine_similarities_basic():
    scores = cosine_similarities([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]], [1.0, 0.0])

    assert scores[0] == pytest.approx(1.0)
    assert scores[1] == pytest.approx(0.0)
    assert scores[2] == pytest.approx(0.7071, abs=1e-4)


def test_cosine_similarities_zero_vector_scores_zero():
    scores = cosine_similarities([[0.0, 0.0], [1.0, 0.0]], [1.0, 0.0])

    assert scores[0] == 0.0
    assert scores[1] == pytest.approx(1.0)


def test_rank_by_similarity_descending_and_bounded():
    vectors = [[0.0, 1.0], [1.0, 0.1], [1.0, 0.0], [0.5, 0.5]]

    ranked = rank_by_similarity(vectors, [1.0, 0.0], k=2)

    assert [index for index, _ in ranked] == [2, 1]
    scores = [score for _, score in ranked]
    assert scores == sorted(scores, reverse=True)


def test_rank_by_similarity_ties_keep_original_order():
    vectors = [[1.0, 0.0], [2.0, 0.0], [3.0, 0.0]]

    ranked = rank_by_similarity(vectors, [1.0, 0.0], k=3)

    assert [index for index, _ in ranked] == [0, 1, 2]


def test_rank_by_similarity_empty_or_zero_k():
    assert rank_by_similarity([], [1.0, 0.0], k=2) == []
    assert rank_by_similarity([[1.0, 0.0]], [1.0, 0.0], k=0) == []


@pytest.mark.asyncio
async def test_retrieve_returns_top_k_nearest_chunks():
    embed = fake_embedder({
        "about cats": [0.0, 1.0],
        "about mitosis": [1.0, 0.0],
        "about cell division": [0.9, 0.1],
        "mitosis": [1.0, 0.0],
    })

    result = await retrieve(
        ["about cats", "about mitosis", "about cell division"], "mitosis", k=2, embed=embed
    )

    assert [chunk for chunk, _ in result] == ["about mitosis", "about cell division"]
    assert result[0][1] >= result[1][1]
    # Chunks and anchor are embedded in one call, anchor last
    embed.assert_awaited_once_with(["about cats", "about mitosis", "about cell division", "mitosis"])


@pytest.mark.asyncio
async def test_retrieve_never_exceeds_k():
    embed = fake_embedder({"a": [1.0, 0.0], "b": [0.5, 0.5], "c": [0.0, 1.0], "q": [1.0, 0.0]})

    result = await retrieve(["a", "b", "c"], "q", k=2, embed=embed)

    assert len(result) == 2


@pytest.mark.asyncio
async def test_retrieve_fewer_chunks_than_k():
    embed = fake_embedder({"only": [1.0, 0.0], "q": [1.0, 0.0]})

    result = await retrieve(["only"], "q", k=2, embed=embed)

    assert len(result) == 1


@pytest.mark.asyncio
async def test_retrieve_empty_chunks_skips_embedding():
    embed = AsyncMock()

    assert await retrieve([], "q", k=2, embed=embed) == []
    embed.assert_not_awaited()
