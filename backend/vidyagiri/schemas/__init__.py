from vidyagiri.schemas.evidence import (
    EvidenceChunk,
    ExtractedDocument,
    FusedEvidence,
    FusedEvidenceSet,
    RetrievedEvidence,
    SearchHit,
    fuse_evidence,
)
from vidyagiri.schemas.query import (
    ErrorResponse,
    QueryRequest,
    QueryResponse,
    ResponseMode,
    ResponseOptions,
    SourceReference,
    VarkStyle,
)

__all__ = [
    "EvidenceChunk",
    "ExtractedDocument",
    "FusedEvidence",
    "FusedEvidenceSet",
    "RetrievedEvidence",
    "SearchHit",
    "fuse_evidence",
    "ErrorResponse",
    "QueryRequest",
    "QueryResponse",
    "ResponseMode",
    "ResponseOptions",
    "SourceReference",
    "VarkStyle",
]
