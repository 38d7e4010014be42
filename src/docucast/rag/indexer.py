"""Ingestion of chunks into the vector store.

Workflow for one source:
1. Check whether the source is already indexed (skip if so)
2. Embed every chunk concurrently
3. Upsert the embedded chunks in sequential batches
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import List, Optional, Sequence

from .embedding_service import adjust_vector_dimension
from .interfaces import EmbeddingProvider, VectorStore
from .retriever import Retriever
from .types import Chunk, IngestResult, SourceFilter, VectorRecord

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100
DEFAULT_EMBED_WORKERS = 8


class Indexer:
    """Embeds chunks and writes them to the vector store.

    Attributes:
        embedding_provider: Provider used to embed chunk text
        vector_store: Store receiving the records
        retriever: Used for the already-indexed check
        batch_size: Records per upsert call
        embed_workers: Threads embedding chunks concurrently
        dimension: If set, vectors are padded or truncated to this length
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
        retriever: Optional[Retriever] = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        embed_workers: int = DEFAULT_EMBED_WORKERS,
        dimension: Optional[int] = None,
    ):
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if embed_workers <= 0:
            raise ValueError(f"embed_workers must be positive, got {embed_workers}")
        self.embedding_provider = embedding_provider
        self.vector_store = vector_store
        self.retriever = retriever or Retriever(vector_store)
        self.batch_size = batch_size
        self.embed_workers = embed_workers
        self.dimension = dimension

    def ingest(self, chunks: Sequence[Chunk]) -> IngestResult:
        """Index the chunks of a single source unless it is already indexed.

        Args:
            chunks: Chunks of exactly one source

        Returns:
            IngestResult with the chunk count, or ``skipped=True`` if the
            source was found in the store

        Raises:
            ValueError: If chunks is empty or spans several sources
            EmbeddingError: If any chunk fails to embed; nothing is written
            ProviderError: If an upsert fails
        """
        if not chunks:
            raise ValueError("Chunks list cannot be empty")

        first = chunks[0]
        if any(c.source_id != first.source_id or c.content_type != first.content_type for c in chunks):
            raise ValueError("All chunks of one ingest must share a source and content type")

        start_time = time.time()
        source_filter = SourceFilter(content_type=first.content_type, source_id=first.source_id)

        if self.retriever.source_exists(source_filter):
            logger.info(f"Source already indexed: {first.source_id}")
            return IngestResult(
                success=True,
                source_id=first.source_id,
                content_type=first.content_type,
                skipped=True,
                skip_reason="Already processed",
                processing_time_seconds=time.time() - start_time,
            )

        logger.debug(f"Generating embeddings for {len(chunks)} chunks of {first.source_id}")
        embedded = self.embed_chunks(chunks)
        self.upsert(embedded)

        processing_time = time.time() - start_time
        logger.info(
            f"Successfully indexed {first.source_id}: "
            f"{len(embedded)} chunks, {processing_time:.2f}s"
        )
        return IngestResult(
            success=True,
            source_id=first.source_id,
            content_type=first.content_type,
            chunks=len(embedded),
            processing_time_seconds=processing_time,
        )

    def embed_chunks(self, chunks: Sequence[Chunk]) -> List[Chunk]:
        """Return copies of the chunks with embeddings attached.

        Embedding runs on a bounded thread pool. All embeddings complete
        before this returns; the first failure is re-raised.
        """
        def embed_one(chunk: Chunk) -> Chunk:
            vector = self.embedding_provider.embed(chunk.text)
            if self.dimension is not None and len(vector) != self.dimension:
                vector = adjust_vector_dimension(vector, self.dimension)
            return replace(chunk, embedding=vector)

        with ThreadPoolExecutor(max_workers=self.embed_workers) as executor:
            return list(executor.map(embed_one, chunks))

    def upsert(self, chunks: Sequence[Chunk]) -> int:
        """Write embedded chunks in batches of ``batch_size``, one batch at a time.

        Returns:
            Number of records written

        Raises:
            ValueError: If a chunk has no embedding
        """
        records = [self._to_record(chunk) for chunk in chunks]
        total_batches = (len(records) + self.batch_size - 1) // self.batch_size
        for batch_number, start in enumerate(range(0, len(records), self.batch_size), 1):
            batch = records[start:start + self.batch_size]
            logger.debug(f"Upserting batch {batch_number}/{total_batches} ({len(batch)} records)")
            self.vector_store.upsert(batch)
        return len(records)

    @staticmethod
    def _to_record(chunk: Chunk) -> VectorRecord:
        if chunk.embedding is None:
            raise ValueError(f"Chunk {chunk.chunk_id} has no embedding")
        return VectorRecord(
            id=chunk.chunk_id,
            values=list(chunk.embedding),
            metadata=chunk.to_metadata(),
            document=chunk.text,
        )
