"""Vector store implementation using ChromaDB.

This module provides a wrapper around a persistent ChromaDB collection that
implements the VectorStore interface: batched upserts, filtered similarity
queries and metadata-only scans.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import chromadb
from chromadb.config import Settings

from .exceptions import ProviderError, RetrievalError
from .types import SearchResult, VectorRecord


logger = logging.getLogger(__name__)


class ChromaVectorStore:
    """ChromaDB-based vector store for chunk embeddings.

    The collection uses cosine space, so similarity is reported as
    ``1 - distance`` clipped to [0, 1].

    Attributes:
        persist_dir: Directory to persist ChromaDB data
        collection_name: Name of the ChromaDB collection
    """

    def __init__(
        self,
        persist_dir: str,
        collection_name: str = "docucast",
    ):
        """Initialize the vector store.

        Args:
            persist_dir: Directory to persist ChromaDB data
            collection_name: Name of the collection (default: docucast)
        """
        self.persist_dir = Path(persist_dir)
        self.collection_name = collection_name
        self._client: Optional[Any] = None
        self._collection: Optional[Any] = None

        logger.info(f"VectorStore initialized: persist_dir={persist_dir}, collection={collection_name}")

    @property
    def client(self) -> Any:
        """Lazy-load the persistent ChromaDB client.

        Raises:
            ProviderError: If client initialization fails
        """
        if self._client is None:
            try:
                logger.info("Initializing ChromaDB client")
                self.persist_dir.mkdir(parents=True, exist_ok=True)
                self._client = chromadb.PersistentClient(
                    path=str(self.persist_dir),
                    settings=Settings(anonymized_telemetry=False),
                )
                logger.info("ChromaDB client initialized successfully")
            except Exception as e:
                logger.error(f"Failed to initialize ChromaDB client: {e}")
                raise ProviderError(f"Could not initialize ChromaDB: {e}") from e

        return self._client

    @property
    def collection(self) -> Any:
        """Get or create the ChromaDB collection.

        Raises:
            ProviderError: If collection access fails
        """
        if self._collection is None:
            try:
                logger.info(f"Getting or creating collection: {self.collection_name}")
                self._collection = self.client.get_or_create_collection(
                    name=self.collection_name,
                    metadata={
                        "description": "PDF and YouTube transcript chunk embeddings",
                        "hnsw:space": "cosine",
                    },
                )
                logger.info(f"Collection ready: {self.collection_name}")
            except ProviderError:
                raise
            except Exception as e:
                logger.error(f"Failed to get/create collection: {e}")
                raise ProviderError(f"Could not access collection: {e}") from e

        return self._collection

    def upsert(self, records: Sequence[VectorRecord]) -> None:
        """Insert or overwrite records by id.

        Args:
            records: Records to write in one call

        Raises:
            ValueError: If records is empty
            ProviderError: If the write fails
        """
        if not records:
            raise ValueError("Records list cannot be empty")

        collection = self.collection
        try:
            logger.debug(f"Upserting {len(records)} records")
            collection.upsert(
                ids=[record.id for record in records],
                embeddings=[list(record.values) for record in records],
                metadatas=[
                    {k: v for k, v in record.metadata.items() if v is not None}
                    for record in records
                ],
                documents=[record.document or record.metadata.get("text", "") for record in records],
            )
        except Exception as e:
            logger.error(f"Failed to upsert records: {e}")
            raise ProviderError(f"Vector store upsert failed: {e}") from e

    def query(
        self,
        vector: Sequence[float],
        top_k: int,
        where: Dict[str, Any],
    ) -> List[SearchResult]:
        """Search for similar records using an embedding vector.

        Args:
            vector: Query embedding vector
            top_k: Number of results to return
            where: Equality filters, e.g. ``{"type": "video", "source": "abc"}``

        Returns:
            List of SearchResult objects, most similar first

        Raises:
            RetrievalError: If the query fails
        """
        if vector is None or len(vector) == 0:
            raise RetrievalError("Query vector cannot be empty")

        collection = self.collection
        try:
            logger.debug(f"Searching for top {top_k} similar chunks with filters: {where}")
            results = collection.query(
                query_embeddings=[list(vector)],
                n_results=top_k,
                where=self._build_where_clause(where),
                include=["metadatas", "documents", "distances"],
            )
        except Exception as e:
            logger.error(f"Search failed: {e}")
            raise RetrievalError(f"Similarity search failed: {e}") from e

        search_results = []
        if results and results.get('ids') and len(results['ids']) > 0:
            ids = results['ids'][0]
            metadatas = results['metadatas'][0]
            documents = results['documents'][0]
            distances = results['distances'][0]

            for i in range(len(ids)):
                distance = distances[i]
                # Cosine distance is in [0, 2]
                similarity = min(1.0, max(0.0, 1.0 - distance))
                search_results.append(SearchResult(
                    chunk_id=ids[i],
                    metadata=self._with_text(metadatas[i], documents[i]),
                    similarity_score=similarity,
                    distance=distance,
                ))

        logger.debug(f"Found {len(search_results)} similar chunks")
        return search_results

    def scan(self, where: Dict[str, Any], limit: int) -> List[SearchResult]:
        """Fetch up to ``limit`` records matching the filter, without ranking.

        Args:
            where: Equality filters
            limit: Maximum records to return

        Returns:
            SearchResult objects with a similarity score of 0.0

        Raises:
            RetrievalError: If the fetch fails
        """
        collection = self.collection
        try:
            logger.debug(f"Scanning up to {limit} chunks with filters: {where}")
            results = collection.get(
                where=self._build_where_clause(where),
                limit=limit,
                include=["metadatas", "documents"],
            )
        except Exception as e:
            logger.error(f"Scan failed: {e}")
            raise RetrievalError(f"Metadata scan failed: {e}") from e

        ids = results.get('ids') or []
        metadatas = results.get('metadatas') or [None] * len(ids)
        documents = results.get('documents') or [None] * len(ids)
        return [
            SearchResult(
                chunk_id=ids[i],
                metadata=self._with_text(metadatas[i], documents[i]),
                similarity_score=0.0,
            )
            for i in range(len(ids))
        ]

    @staticmethod
    def _with_text(metadata: Optional[Dict[str, Any]], document: Optional[str]) -> Dict[str, Any]:
        """Copy metadata, filling ``text`` from the stored document if absent."""
        merged = dict(metadata or {})
        if "text" not in merged and document:
            merged["text"] = document
        return merged

    @staticmethod
    def _build_where_clause(filters: Dict[str, Any]) -> Dict[str, Any]:
        """Build ChromaDB where clause from equality filters.

        ChromaDB accepts a single condition at the top level, so several
        filters are combined with ``$and``.
        """
        if not filters:
            raise RetrievalError("Filters cannot be empty")

        conditions = []
        for key, value in filters.items():
            if isinstance(value, dict):
                # Already an operator expression like {"$ne": ...}
                conditions.append({key: value})
            else:
                conditions.append({key: {"$eq": value}})

        if len(conditions) == 1:
            return conditions[0]
        return {"$and": conditions}
