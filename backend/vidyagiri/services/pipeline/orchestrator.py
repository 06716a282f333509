# backend/vidyagiri/services/pipeline/orchestrator.py
import asyncio
import logging

import httpx

from vidyagiri.core.config import settings
from vidyagiri.schemas.evidence import (
    EvidenceChunk,
    ExtractedDocument,
    FusedEvidenceSet,
    RetrievedEvidence,
    SearchHit,
    fuse_evidence,
)
from vidyagiri.services.llm.client import LLMClient
from vidyagiri.services.pipeline.chunker import split_text
from vidyagiri.services.pipeline.content_extractor import extract_main_content
from vidyagiri.services.pipeline.retriever import EmbedFn, retrieve_indices
from vidyagiri.services.pipeline.url_fetcher import build_fetch_client, fetch_page
from vidyagiri.services.query.rephraser import RephraseMode, rephrase_query
from vidyagiri.services.search import SearchClient, SearchProviderError, get_search_client

logger = logging.getLogger(__name__)


class EvidencePipeline:
    """Gathers web evidence for a question.

    rephrase -> search -> per hit, concurrently: fetch -> extract -> chunk ->
    retrieve -> fuse. A failing hit only removes that hit's evidence.
    """

    def __init__(
        self,
        llm_client: LLMClient | None = None,
        search_client: SearchClient | None = None,
        embed: EmbedFn | None = None,
        top_k: int | None = None,
        min_content_length: int | None = None,
        max_concurrency: int | None = None,
    ):
        self.llm_client = llm_client or LLMClient()
        self._search_client = search_client
        self.embed = embed
        self.top_k = top_k if top_k is not None else settings.evidence_top_k
        self.min_content_length = (
            min_content_length if min_content_length is not None else settings.min_content_length
        )
        self.max_concurrency = max_concurrency or settings.max_concurrent_fetches

    @property
    def search_client(self) -> SearchClient:
        """Lazy-load the configured search provider."""
        if self._search_client is None:
            self._search_client = get_search_client()
        return self._search_client

    async def gather_evidence(self, message: str, fanout: int | None = None) -> FusedEvidenceSet:
        """
        Retrieve and fuse evidence for a user message.

        Search failures degrade to an empty evidence set; a rephrasing failure
        propagates.

        Args:
            message: The user's question
            fanout: Number of search results to process (defaults to settings)

        Returns:
            FusedEvidenceSet with at most one entry per link
        """
        fanout = settings.evidence_fanout if fanout is None else fanout

        query = await rephrase_query(message, RephraseMode.SEARCH, llm_client=self.llm_client)

        try:
            hits = await self.search_client.search(query, fanout)
        except SearchProviderError as e:
            logger.warning(f"Search failed, continuing without evidence: {e}")
            hits = []
        logger.info(f"Received {len(hits)} search results")

        results = await self.collect(hits)
        fused = fuse_evidence(results)
        logger.info(
            f"Fused evidence from {len(fused)} of {len(hits)} sources"
        )
        return fused

    async def collect(self, hits: list[SearchHit]) -> list[RetrievedEvidence | None]:
        """Run every hit's branch concurrently and wait for all of them."""
        if not hits:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)
        async with build_fetch_client() as http_client:

            async def bounded(hit: SearchHit) -> RetrievedEvidence | None:
                async with semaphore:
                    return await self.process_hit(hit, http_client)

            return list(await asyncio.gather(*(bounded(hit) for hit in hits)))

    async def process_hit(
        self, hit: SearchHit, http_client: httpx.AsyncClient | None = None
    ) -> RetrievedEvidence | None:
        """
        Turn one search hit into its top-K evidence chunks.

        Never raises: any failure is logged and yields None.
        """
        try:
            document = await self.load_document(hit, http_client)
            if document is None:
                return None
            return await self.retrieve_from(document)
        except Exception as e:
            logger.warning(f"Error processing {hit.link}: {e}")
            return None

    async def load_document(
        self, hit: SearchHit, http_client: httpx.AsyncClient | None = None
    ) -> ExtractedDocument | None:
        html = await fetch_page(hit.link, http_client)
        body_text = extract_main_content(html)

        # Short or empty pages carry too little signal to embed
        if len(body_text) < self.min_content_length:
            logger.info(f"Skipping {hit.link}: {len(body_text)} characters of content")
            return None
        return ExtractedDocument(hit=hit, body_text=body_text)

    async def retrieve_from(self, document: ExtractedDocument) -> RetrievedEvidence | None:
        spans = split_text(
            document.body_text,
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
        )
        anchor = document.snippet or document.title

        ranked = await retrieve_indices(
            [span.text for span in spans],
            anchor,
            k=self.top_k,
            embed=self.embed,
        )
        if not ranked:
            return None

        return [
            EvidenceChunk(
                text=spans[index].text,
                source=document.hit,
                start=spans[index].start,
                end=spans[index].end,
                score=score,
            )
            for index, score in ranked
        ]
