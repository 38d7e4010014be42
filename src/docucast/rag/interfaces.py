"""
Provider interfaces injected into RAG components.

Any object implementing these methods satisfies the interface, so tests can
pass in-memory fakes and production code passes the sentence-transformers,
ChromaDB and Anthropic adapters.
"""

from typing import Any, Dict, List, Protocol, Sequence

from .types import GenerationParams, SearchResult, VectorRecord


class EmbeddingProvider(Protocol):
    """Turns text into a fixed-dimension vector."""

    def embed(self, text: str) -> List[float]:
        """Embed a single text. Raises EmbeddingError on failure."""
        ...


class VectorStore(Protocol):
    """Stores vectors with metadata and answers filtered queries."""

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        """Insert or overwrite records by id."""
        ...

    def query(
        self,
        vector: Sequence[float],
        top_k: int,
        where: Dict[str, Any],
    ) -> List[SearchResult]:
        """Similarity query restricted by metadata equality filter."""
        ...

    def scan(self, where: Dict[str, Any], limit: int) -> List[SearchResult]:
        """Metadata-only fetch; returned scores carry no meaning."""
        ...


class CompletionProvider(Protocol):
    """Produces text completions for a prompt."""

    def complete(self, prompt: str, params: GenerationParams) -> str:
        """Return the completion text. Raises ProviderError on failure."""
        ...
