"""
Common data types for RAG modules.

These types define the interfaces between ingestion, retrieval and
generation components.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class ContentType(str, Enum):
    """Kind of source a chunk was extracted from."""

    DOCUMENT = "document"
    VIDEO = "video"


@dataclass(frozen=True)
class PageText:
    """Plain text of one PDF page."""

    page_number: int
    text: str


@dataclass(frozen=True)
class Chunk:
    """A bounded unit of source text with positional metadata.

    Attributes:
        chunk_id: Unique identifier, always ``{source_id}-{sequence_index}``
        text: The text content of the chunk
        source_id: File name or video ID the chunk came from
        content_type: Whether the source is a document or a video
        order_key: Page number for documents, chunk index for videos
        sequence_index: Position of the chunk within its source
        title: Optional human-readable source title
        token_count: Approximate number of tokens in ``text``
        embedding: Vector assigned once at ingestion time
    """

    chunk_id: str
    text: str
    source_id: str
    content_type: ContentType
    order_key: int
    sequence_index: int
    title: Optional[str] = None
    token_count: int = 0
    embedding: Optional[List[float]] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        """Validate chunk."""
        if not self.chunk_id:
            raise ValueError("chunk_id cannot be empty")
        if not self.text:
            raise ValueError("text cannot be empty")
        if not self.source_id:
            raise ValueError("source_id cannot be empty")

    def to_metadata(self) -> Dict[str, Any]:
        """Convert to the metadata dictionary stored next to the vector.

        None values are dropped because the vector store cannot hold them.
        """
        metadata: Dict[str, Any] = {
            "type": self.content_type.value,
            "source": self.source_id,
            "text": self.text,
            "chunk": self.sequence_index,
            "title": self.title,
        }
        if self.content_type is ContentType.DOCUMENT:
            metadata["page_number"] = self.order_key
        return {key: value for key, value in metadata.items() if value is not None}


@dataclass(frozen=True)
class DocumentChunkMetadata:
    """Validated metadata of a stored document chunk."""

    source: str
    text: str
    page_number: int
    chunk: int
    title: Optional[str] = None

    content_type = ContentType.DOCUMENT

    @property
    def order_key(self) -> int:
        return self.page_number

    @property
    def label(self) -> str:
        return f"[Page {self.page_number}]"


@dataclass(frozen=True)
class VideoChunkMetadata:
    """Validated metadata of a stored video transcript chunk."""

    source: str
    text: str
    chunk: int
    title: Optional[str] = None

    content_type = ContentType.VIDEO

    @property
    def order_key(self) -> int:
        return self.chunk

    @property
    def label(self) -> str:
        return f"[Part {self.chunk + 1}]"


ChunkMetadata = Union[DocumentChunkMetadata, VideoChunkMetadata]


def _as_int(value: Any) -> Optional[int]:
    """Return value as int if it is an integral number, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def parse_chunk_metadata(raw: Any) -> Optional[ChunkMetadata]:
    """Validate a raw metadata record from the vector store.

    Args:
        raw: Metadata dictionary as returned by the store

    Returns:
        The matching metadata variant, or None if the record is malformed
    """
    if not isinstance(raw, dict):
        return None

    source = raw.get("source")
    text = raw.get("text")
    chunk = _as_int(raw.get("chunk"))
    title = raw.get("title") if isinstance(raw.get("title"), str) else None
    if not isinstance(source, str) or not source:
        return None
    if not isinstance(text, str) or not text:
        return None
    if chunk is None:
        return None

    content_type = raw.get("type")
    if content_type == ContentType.DOCUMENT.value:
        page_number = _as_int(raw.get("page_number"))
        if page_number is None:
            return None
        return DocumentChunkMetadata(
            source=source, text=text, page_number=page_number, chunk=chunk, title=title
        )
    if content_type == ContentType.VIDEO.value:
        return VideoChunkMetadata(source=source, text=text, chunk=chunk, title=title)
    return None


@dataclass(frozen=True)
class SourceFilter:
    """Metadata filter scoping a query to exactly one source."""

    content_type: ContentType
    source_id: str

    def __post_init__(self):
        if self.content_type is not None and not isinstance(self.content_type, ContentType):
            object.__setattr__(self, "content_type", ContentType(self.content_type))

    def as_dict(self) -> Dict[str, str]:
        """Return the filter as ``{type, source}`` equality pairs."""
        return {"type": self.content_type.value, "source": self.source_id}


@dataclass
class VectorRecord:
    """A single vector store write: id, vector, metadata and raw text."""

    id: str
    values: List[float]
    metadata: Dict[str, Any]
    document: Optional[str] = None


@dataclass
class SearchResult:
    """Raw result from the vector store, before metadata validation.

    Attributes:
        chunk_id: Stored record id
        metadata: Metadata dictionary exactly as stored
        similarity_score: Similarity in [0,1]; 0.0 for metadata-only scans
        distance: Distance reported by the store, None for scans
    """

    chunk_id: str
    metadata: Dict[str, Any]
    similarity_score: float
    distance: Optional[float] = None

    def __post_init__(self):
        """Validate search result."""
        if not 0 <= self.similarity_score <= 1:
            raise ValueError(f"similarity_score must be in [0,1], got {self.similarity_score}")


@dataclass(frozen=True)
class Match:
    """A validated retrieval result."""

    chunk_id: str
    metadata: ChunkMetadata
    score: float

    @property
    def text(self) -> str:
        return self.metadata.text

    @property
    def source_id(self) -> str:
        return self.metadata.source

    @property
    def content_type(self) -> ContentType:
        return self.metadata.content_type

    @property
    def order_key(self) -> int:
        return self.metadata.order_key

    @property
    def sequence_index(self) -> int:
        return self.metadata.chunk

    @property
    def label(self) -> str:
        return self.metadata.label

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the context entry returned alongside answers."""
        entry: Dict[str, Any] = {
            "text": self.text,
            "source": self.source_id,
            "relevance": self.score,
        }
        if isinstance(self.metadata, DocumentChunkMetadata):
            entry["page"] = self.metadata.page_number
        else:
            entry["chunk"] = self.metadata.chunk
        return entry


@dataclass(frozen=True)
class ConversationTurn:
    """One prior message of a chat session."""

    role: str
    content: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversationTurn":
        return cls(role=str(data.get("role", "user")), content=str(data.get("content", "")))


@dataclass(frozen=True)
class DialogueLine:
    """One line of a generated podcast script."""

    speaker: str
    text: str


@dataclass(frozen=True)
class GenerationParams:
    """Sampling parameters passed to the completion provider."""

    temperature: float
    max_tokens: int
    top_p: Optional[float] = None
    frequency_penalty: Optional[float] = None
    presence_penalty: Optional[float] = None
    model: Optional[str] = None


@dataclass
class IngestResult:
    """Result from ingesting one PDF or video."""

    success: bool
    source_id: str
    content_type: ContentType
    chunks: int = 0
    skipped: bool = False
    skip_reason: Optional[str] = None
    message: Optional[str] = None
    processing_time_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging."""
        return {
            'success': self.success,
            'source_id': self.source_id,
            'content_type': self.content_type.value,
            'chunks': self.chunks,
            'skipped': self.skipped,
            'skip_reason': self.skip_reason,
            'message': self.message,
            'processing_time_seconds': self.processing_time_seconds,
        }


@dataclass
class QueryResult:
    """Answer to a chat request plus the relevance context used."""

    response: str
    context: List[Match] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'response': self.response,
            'context': [match.to_dict() for match in self.context],
        }
