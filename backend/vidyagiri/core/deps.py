# backend/vidyagiri/core/deps.py
from functools import lru_cache

from fastapi import Depends

from vidyagiri.services.llm.client import LLMClient
from vidyagiri.services.query.responder import QueryResponder
from vidyagiri.services.style.selector import StyleSelector


def get_llm_client() -> LLMClient:
    """Dependency for the generation client."""
    return LLMClient()


@lru_cache
def get_style_selector() -> StyleSelector:
    """Style table is loaded once per process."""
    return StyleSelector()


def get_query_responder(
    llm_client: LLMClient = Depends(get_llm_client),
    selector: StyleSelector = Depends(get_style_selector),
) -> QueryResponder:
    """Dependency for the per-request query runner."""
    return QueryResponder(llm_client=llm_client, selector=selector)
