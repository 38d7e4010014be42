"""RAG (Retrieval-Augmented Generation) core for Docucast.

This package turns PDF and transcript text into indexed chunks, retrieves
source-scoped context for a question, and generates answers and podcast
scripts from it.

Core Components:
- config: Configuration management for RAG features
- document_chunker: Fixed-window and sentence-bounded text chunking
- embedding_service: Text embedding generation using sentence-transformers
- vector_store: ChromaDB wrapper for vector storage and filtered search
- indexer: Concurrent embedding and batched upserts
- retriever: Source-scoped semantic queries and scans
- context_assembler: Positional and relevance ordering of matches
- prompts: Prompt template table and builder
- generator: Completion calls and the quality-gated dialogue loop
- completion_service: Anthropic completion provider
"""

from .config import RAGConfig, load_config_from_env
from .context_assembler import ContextAssembler
from .document_chunker import TextChunker, chunk_fixed, chunk_sentences
from .embedding_service import EmbeddingService, adjust_vector_dimension
from .exceptions import (
    DocucastError,
    EmbeddingError,
    EmptyContextError,
    ExtractionError,
    GenerationQualityError,
    ProviderError,
    RetrievalError,
)
from .generator import Generator, count_dialogue_lines, parse_dialogue
from .indexer import Indexer
from .prompts import PromptBuilder, PromptTask, TEMPLATES
from .retriever import RELEVANCE_THRESHOLD, Retriever
from .types import (
    Chunk,
    ContentType,
    ConversationTurn,
    DialogueLine,
    GenerationParams,
    IngestResult,
    Match,
    PageText,
    QueryResult,
    SourceFilter,
)
from .vector_store import ChromaVectorStore

__all__ = [
    "RAGConfig",
    "load_config_from_env",
    "ContextAssembler",
    "TextChunker",
    "chunk_fixed",
    "chunk_sentences",
    "EmbeddingService",
    "adjust_vector_dimension",
    "DocucastError",
    "EmbeddingError",
    "EmptyContextError",
    "ExtractionError",
    "GenerationQualityError",
    "ProviderError",
    "RetrievalError",
    "Generator",
    "count_dialogue_lines",
    "parse_dialogue",
    "Indexer",
    "PromptBuilder",
    "PromptTask",
    "TEMPLATES",
    "RELEVANCE_THRESHOLD",
    "Retriever",
    "Chunk",
    "ContentType",
    "ConversationTurn",
    "DialogueLine",
    "GenerationParams",
    "IngestResult",
    "Match",
    "PageText",
    "QueryResult",
    "SourceFilter",
    "ChromaVectorStore",
]
