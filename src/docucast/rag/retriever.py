"""Source-scoped retrieval over the vector store.

Two modes are offered:

- ``query``: semantic similarity search, keeping only matches scoring above
  RELEVANCE_THRESHOLD.
- ``scan_by_source``: a metadata-only fetch of a whole source. Scores carry no
  meaning in this mode and are reported as 0.0.

Both modes always filter on content type and source id, and both validate
every returned record before handing it on.
"""

import logging
from typing import List, Optional, Sequence

from .exceptions import RetrievalError
from .interfaces import VectorStore
from .types import Match, SearchResult, SourceFilter, parse_chunk_metadata

logger = logging.getLogger(__name__)

RELEVANCE_THRESHOLD = 0.7
DEFAULT_SCAN_LIMIT = 100


class Retriever:
    """Retrieves validated matches for a single source.

    Attributes:
        vector_store: Store queried for matches
        scan_limit: Assumed upper bound on chunks per source
    """

    def __init__(self, vector_store: VectorStore, scan_limit: int = DEFAULT_SCAN_LIMIT):
        self.vector_store = vector_store
        self.scan_limit = scan_limit

    def query(
        self,
        vector: Sequence[float],
        source_filter: SourceFilter,
        top_k: int = 10,
    ) -> List[Match]:
        """Find matches similar to ``vector`` within one source.

        Args:
            vector: Query embedding
            source_filter: Content type and source to search within
            top_k: Maximum number of candidates requested from the store

        Returns:
            Matches with score above RELEVANCE_THRESHOLD in store order;
            an empty list is a valid outcome

        Raises:
            RetrievalError: If the filter is malformed or the store fails
        """
        self._validate_filter(source_filter)
        try:
            results = self.vector_store.query(vector, top_k, source_filter.as_dict())
        except RetrievalError:
            raise
        except Exception as e:
            logger.error(f"Semantic query failed for {source_filter.source_id}: {e}")
            raise RetrievalError(f"Similarity search failed: {e}") from e

        matches = self._to_matches(results, source_filter)
        relevant = [match for match in matches if match.score > RELEVANCE_THRESHOLD]
        logger.debug(
            f"Semantic query on {source_filter.source_id}: "
            f"{len(relevant)}/{len(matches)} matches above {RELEVANCE_THRESHOLD}"
        )
        return relevant

    def scan_by_source(self, source_filter: SourceFilter, limit: Optional[int] = None) -> List[Match]:
        """Fetch the chunks of one source without similarity ranking.

        Args:
            source_filter: Content type and source to fetch
            limit: Maximum chunks to fetch (default: ``scan_limit``)

        Returns:
            Matches in store order, each with score 0.0

        Raises:
            RetrievalError: If the filter is malformed or the store fails
        """
        self._validate_filter(source_filter)
        if limit is None:
            limit = self.scan_limit
        try:
            results = self.vector_store.scan(source_filter.as_dict(), limit)
        except RetrievalError:
            raise
        except Exception as e:
            logger.error(f"Scan failed for {source_filter.source_id}: {e}")
            raise RetrievalError(f"Metadata scan failed: {e}") from e

        matches = self._to_matches(results, source_filter)
        logger.debug(f"Scanned {len(matches)} chunks of {source_filter.source_id}")
        return matches

    def source_exists(self, source_filter: SourceFilter) -> bool:
        """Return True if at least one chunk of the source is indexed."""
        return bool(self.scan_by_source(source_filter, limit=1))

    @staticmethod
    def _validate_filter(source_filter: SourceFilter) -> None:
        if source_filter is None:
            raise RetrievalError("A source filter is required")
        if not source_filter.source_id:
            raise RetrievalError("Source filter is missing a source id")
        if source_filter.content_type is None:
            raise RetrievalError("Source filter is missing a content type")

    @staticmethod
    def _to_matches(results: List[SearchResult], source_filter: SourceFilter) -> List[Match]:
        """Validate raw results, dropping malformed or out-of-scope records."""
        matches = []
        for result in results:
            metadata = parse_chunk_metadata(result.metadata)
            if metadata is None:
                logger.warning(f"Skipping record {result.chunk_id} with malformed metadata")
                continue
            if (metadata.content_type != source_filter.content_type
                    or metadata.source != source_filter.source_id):
                logger.warning(
                    f"Skipping record {result.chunk_id} outside filter "
                    f"{source_filter.as_dict()}"
                )
                continue
            matches.append(Match(
                chunk_id=result.chunk_id,
                metadata=metadata,
                score=result.similarity_score,
            ))
        return matches
