"""Request-scoped evidence models produced by the evidence pipeline."""
import json
from typing import Iterable

from pydantic import BaseModel, Field, model_validator


class SearchHit(BaseModel):
    """A normalized web search result. `link` identifies the source."""
    title: str = ""
    link: str
    snippet: str = ""


class ExtractedDocument(BaseModel):
    """A search hit together with the readable text of its page."""
    hit: SearchHit
    body_text: str

    @property
    def link(self) -> str:
        return self.hit.link

    @property
    def title(self) -> str:
        return self.hit.title

    @property
    def snippet(self) -> str:
        return self.hit.snippet


class EvidenceChunk(BaseModel):
    """A slice of one document's body text, tagged with its source."""
    text: str
    source: SearchHit
    start: int = 0
    end: int = 0
    score: float | None = None


# Top-K chunks of a single document, best first
RetrievedEvidence = list[EvidenceChunk]


class FusedEvidence(BaseModel):
    """All retained passages of one source document."""
    source: SearchHit
    passages: list[str] = Field(default_factory=list)


class FusedEvidenceSet(BaseModel):
    """Evidence from every source, at most one entry per link."""
    entries: list[FusedEvidence] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique_links(self) -> "FusedEvidenceSet":
        links = [entry.source.link for entry in self.entries]
        if len(links) != len(set(links)):
            raise ValueError("Fused evidence entries must have distinct links")
        return self

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def links(self) -> list[str]:
        return [entry.source.link for entry in self.entries]

    @property
    def sources(self) -> list[SearchHit]:
        return [entry.source for entry in self.entries]

    def to_prompt_json(self) -> str:
        """Serialize for the generation prompt."""
        return json.dumps(
            [
                {
                    "title": entry.source.title,
                    "link": entry.source.link,
                    "snippet": entry.source.snippet,
                    "passages": entry.passages,
                }
                for entry in self.entries
            ],
            ensure_ascii=False,
        )


def fuse_evidence(results: Iterable[RetrievedEvidence | None]) -> FusedEvidenceSet:
    """
    Fuse per-document evidence into one set.

    Absent results are skipped. Entries are keyed by link: the first document
    seen for a link wins and later documents with the same link are dropped,
    preserving insertion order.

    Args:
        results: Per-document retrieved chunks, or None for failed branches

    Returns:
        FusedEvidenceSet with distinct links
    """
    entries: dict[str, FusedEvidence] = {}
    owners: dict[str, int] = {}

    for position, chunks in enumerate(results):
        if not chunks:
            continue
        for chunk in chunks:
            link = chunk.source.link
            if link not in entries:
                entries[link] = FusedEvidence(source=chunk.source)
                owners[link] = position
            if owners[link] == position:
                entries[link].passages.append(chunk.text)

    return FusedEvidenceSet(entries=list(entries.values()))
