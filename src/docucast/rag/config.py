"""Configuration management for RAG features.

This module provides the configuration dataclass and environment variable
loading for embedding, vector store, chunking and generation settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class RAGConfig:
    """Configuration for the Docucast RAG pipeline.

    Attributes:
        model_name: Name of the sentence-transformer model to use
        model_cache_dir: Directory to cache downloaded models
        vector_store_dir: Directory to persist ChromaDB data
        collection_name: Name of the ChromaDB collection
        embedding_dim: Vector dimension the collection was built with
        upsert_batch_size: Records per vector store upsert call
        embed_workers: Threads used to embed chunks during ingestion
        document_chunk_size: Characters per PDF chunk
        document_chunk_overlap: Overlapping characters between PDF chunks
        video_chunk_size: Characters per transcript chunk
        segment_max_length: Maximum characters per generation segment
        scan_limit: Upper bound on chunks fetched when scanning a whole source
        top_k: Number of semantic matches requested per question
        max_dialogue_retries: Extra attempts allowed for too-short podcast scripts
        min_dialogue_lines: Minimum speaker lines for a script to be accepted
        chat_model: Completion model for question answering
        podcast_model: Completion model for podcast scripts
    """

    model_name: str = "all-mpnet-base-v2"
    model_cache_dir: Path = Path.home() / ".cache" / "torch" / "sentence_transformers"
    vector_store_dir: Path = Path(".chroma_db")
    collection_name: str = "docucast"
    embedding_dim: int = 768
    upsert_batch_size: int = 100
    embed_workers: int = 8
    document_chunk_size: int = 500
    document_chunk_overlap: int = 50
    video_chunk_size: int = 1500
    segment_max_length: int = 4000
    scan_limit: int = 100
    top_k: int = 10
    max_dialogue_retries: int = 2
    min_dialogue_lines: int = 10
    chat_model: str = "claude-3-5-haiku-20241022"
    podcast_model: str = "claude-sonnet-4-5-20250929"

    def __post_init__(self):
        """Ensure Path objects are properly initialized."""
        if not isinstance(self.model_cache_dir, Path):
            self.model_cache_dir = Path(self.model_cache_dir)
        if not isinstance(self.vector_store_dir, Path):
            self.vector_store_dir = Path(self.vector_store_dir)
        if self.document_chunk_overlap >= self.document_chunk_size:
            raise ValueError("document_chunk_overlap must be smaller than document_chunk_size")


def load_config_from_env() -> RAGConfig:
    """Load RAG configuration from environment variables.

    Environment variables:
        RAG_MODEL: Sentence-transformer model name (default: all-mpnet-base-v2)
        RAG_MODEL_CACHE_DIR: Model cache directory path
        RAG_VECTOR_STORE_DIR: ChromaDB persistence directory
        RAG_COLLECTION_NAME: ChromaDB collection name (default: docucast)
        RAG_EMBEDDING_DIM: Vector dimension (default: 768)
        RAG_UPSERT_BATCH_SIZE: Records per upsert (default: 100)
        RAG_EMBED_WORKERS: Concurrent embedding threads (default: 8)
        RAG_DOCUMENT_CHUNK_SIZE: PDF chunk characters (default: 500)
        RAG_DOCUMENT_CHUNK_OVERLAP: PDF chunk overlap (default: 50)
        RAG_VIDEO_CHUNK_SIZE: Transcript chunk characters (default: 1500)
        RAG_SEGMENT_MAX_LENGTH: Generation segment characters (default: 4000)
        RAG_SCAN_LIMIT: Max chunks fetched per source scan (default: 100)
        RAG_TOP_K: Semantic matches per question (default: 10)
        RAG_MAX_DIALOGUE_RETRIES: Podcast script retries (default: 2)
        RAG_MIN_DIALOGUE_LINES: Minimum podcast lines (default: 10)
        CHAT_MODEL: Completion model for question answering
        PODCAST_MODEL: Completion model for podcast scripts

        # Legacy environment variables (for backwards compatibility)
        CHROMA_PERSIST_DIR: Alias for RAG_VECTOR_STORE_DIR
        MODEL_CACHE_DIR: Alias for RAG_MODEL_CACHE_DIR

    Returns:
        RAGConfig: Configuration object with values from environment
    """
    defaults = RAGConfig()

    def str_to_int(value: Optional[str], default: int) -> int:
        """Convert string to int with error handling."""
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            return default

    model_cache_dir_str = os.getenv('RAG_MODEL_CACHE_DIR') or os.getenv('MODEL_CACHE_DIR')
    vector_store_dir_str = os.getenv('RAG_VECTOR_STORE_DIR') or os.getenv('CHROMA_PERSIST_DIR')

    return RAGConfig(
        model_name=os.getenv('RAG_MODEL', defaults.model_name),
        model_cache_dir=Path(model_cache_dir_str) if model_cache_dir_str else defaults.model_cache_dir,
        vector_store_dir=Path(vector_store_dir_str) if vector_store_dir_str else defaults.vector_store_dir,
        collection_name=os.getenv('RAG_COLLECTION_NAME', defaults.collection_name),
        embedding_dim=str_to_int(os.getenv('RAG_EMBEDDING_DIM'), defaults.embedding_dim),
        upsert_batch_size=str_to_int(os.getenv('RAG_UPSERT_BATCH_SIZE'), defaults.upsert_batch_size),
        embed_workers=str_to_int(os.getenv('RAG_EMBED_WORKERS'), defaults.embed_workers),
        document_chunk_size=str_to_int(os.getenv('RAG_DOCUMENT_CHUNK_SIZE'), defaults.document_chunk_size),
        document_chunk_overlap=str_to_int(
            os.getenv('RAG_DOCUMENT_CHUNK_OVERLAP'), defaults.document_chunk_overlap
        ),
        video_chunk_size=str_to_int(os.getenv('RAG_VIDEO_CHUNK_SIZE'), defaults.video_chunk_size),
        segment_max_length=str_to_int(os.getenv('RAG_SEGMENT_MAX_LENGTH'), defaults.segment_max_length),
        scan_limit=str_to_int(os.getenv('RAG_SCAN_LIMIT'), defaults.scan_limit),
        top_k=str_to_int(os.getenv('RAG_TOP_K'), defaults.top_k),
        max_dialogue_retries=str_to_int(
            os.getenv('RAG_MAX_DIALOGUE_RETRIES'), defaults.max_dialogue_retries
        ),
        min_dialogue_lines=str_to_int(os.getenv('RAG_MIN_DIALOGUE_LINES'), defaults.min_dialogue_lines),
        chat_model=os.getenv('CHAT_MODEL', defaults.chat_model),
        podcast_model=os.getenv('PODCAST_MODEL', defaults.podcast_model),
    )
