"""Unit tests for retriever module."""

import pytest
from unittest.mock import Mock

from fakes import InMemoryVectorStore

from docucast.rag.exceptions import RetrievalError
from docucast.rag.retriever import RELEVANCE_THRESHOLD, Retriever
from docucast.rag.types import ContentType, SearchResult, SourceFilter


def doc_meta(source, page, chunk, text=None):
    return {"type": "document", "source": source, "page_number": page, "chunk": chunk,
            "text": text or f"{source} chunk {chunk}"}


def video_meta(source, chunk, text=None):
    return {"type": "video", "source": source, "chunk": chunk, "text": text or f"{source} part {chunk}"}


class TestRetrieverQuery:
    """Tests for semantic queries."""

    def test_threshold_is_fixed(self):
        """Test the relevance threshold constant."""
        assert RELEVANCE_THRESHOLD == 0.7

    def test_keeps_only_scores_above_threshold(self):
        """Test that scores at or below 0.7 are dropped."""
        store = InMemoryVectorStore()
        store.add("doc1-0", doc_meta("doc1", 1, 0), score=0.9)
        store.add("doc1-1", doc_meta("doc1", 1, 1), score=0.65)
        store.add("doc1-2", doc_meta("doc1", 2, 2), score=0.72)
        store.add("doc1-3", doc_meta("doc1", 2, 3), score=0.7)

        matches = Retriever(store).query([1.0], SourceFilter(ContentType.DOCUMENT, "doc1"), top_k=10)

        assert [m.score for m in matches] == [0.9, 0.72]

    def test_empty_result_is_valid(self):
        """Test that an unknown source yields no matches rather than an error."""
        matches = Retriever(InMemoryVectorStore()).query(
            [1.0], SourceFilter(ContentType.VIDEO, "missing"))
        assert matches == []

    def test_filter_passed_to_store(self):
        """Test that both type and source are always sent."""
        store = InMemoryVectorStore()
        Retriever(store).query([1.0], SourceFilter(ContentType.VIDEO, "abc"), top_k=7)

        assert store.query_calls == [{"top_k": 7, "where": {"type": "video", "source": "abc"}}]

    def test_out_of_scope_records_are_skipped(self):
        """Test that a misbehaving store cannot leak other sources."""
        store = Mock()
        store.query.return_value = [
            _result("doc2-0", doc_meta("doc2", 1, 0), 0.95),
            _result("vid-0", video_meta("doc1", 0), 0.95),
            _result("doc1-0", doc_meta("doc1", 1, 0), 0.9),
        ]

        matches = Retriever(store).query([1.0], SourceFilter(ContentType.DOCUMENT, "doc1"))

        assert [m.chunk_id for m in matches] == ["doc1-0"]

    def test_malformed_records_are_skipped(self):
        """Test that records with invalid metadata are dropped."""
        store = Mock()
        store.query.return_value = [
            _result("bad-0", {"type": "document", "source": "doc1", "chunk": 0, "text": "no page"}, 0.9),
            _result("bad-1", {"type": "podcast", "source": "doc1", "chunk": 1, "text": "x"}, 0.9),
            _result("doc1-2", doc_meta("doc1", 3, 2), 0.8),
        ]

        matches = Retriever(store).query([1.0], SourceFilter(ContentType.DOCUMENT, "doc1"))

        assert [m.chunk_id for m in matches] == ["doc1-2"]
        assert matches[0].order_key == 3

    def test_store_failure_is_wrapped(self):
        """Test that unexpected store errors become RetrievalError."""
        store = Mock()
        store.query.side_effect = ConnectionError("down")

        with pytest.raises(RetrievalError):
            Retriever(store).query([1.0], SourceFilter(ContentType.DOCUMENT, "doc1"))

    @pytest.mark.parametrize("source_filter", [
        None,
        SourceFilter(ContentType.DOCUMENT, ""),
        SourceFilter(None, "doc1"),
    ])
    def test_incomplete_filter_rejected(self, source_filter):
        """Test that filters missing type or source are rejected."""
        with pytest.raises(RetrievalError):
            Retriever(InMemoryVectorStore()).query([1.0], source_filter)


class TestRetrieverScan:
    """Tests for source scans."""

    def test_scan_returns_zero_scores(self):
        """Test that scanned matches carry score 0.0."""
        store = InMemoryVectorStore()
        store.add("vid-0", video_meta("vid", 0))
        store.add("vid-1", video_meta("vid", 1))
        store.add("other-0", video_meta("other", 0))

        matches = Retriever(store).scan_by_source(SourceFilter(ContentType.VIDEO, "vid"))

        assert [m.chunk_id for m in matches] == ["vid-0", "vid-1"]
        assert all(m.score == 0.0 for m in matches)

    def test_scan_uses_default_limit(self):
        """Test that the scan limit defaults to the configured value."""
        store = InMemoryVectorStore()
        Retriever(store, scan_limit=42).scan_by_source(SourceFilter(ContentType.VIDEO, "vid"))
        Retriever(store).scan_by_source(SourceFilter(ContentType.VIDEO, "vid"), limit=3)

        assert [call["limit"] for call in store.scan_calls] == [42, 3]

    def test_explicit_zero_limit_is_kept(self):
        """Test that limit=0 is passed on rather than replaced by the default."""
        store = InMemoryVectorStore()
        store.add("vid-0", video_meta("vid", 0))

        matches = Retriever(store, scan_limit=42).scan_by_source(
            SourceFilter(ContentType.VIDEO, "vid"), limit=0)

        assert matches == []
        assert store.scan_calls[0]["limit"] == 0

    def test_source_exists(self):
        """Test the existence check."""
        store = InMemoryVectorStore()
        store.add("doc1-0", doc_meta("doc1", 1, 0))
        retriever = Retriever(store)

        assert retriever.source_exists(SourceFilter(ContentType.DOCUMENT, "doc1")) is True
        assert retriever.source_exists(SourceFilter(ContentType.VIDEO, "doc1")) is False
        assert store.scan_calls[0]["limit"] == 1

    def test_string_content_type_is_coerced(self):
        """Test that SourceFilter accepts plain strings."""
        assert SourceFilter("video", "vid").content_type is ContentType.VIDEO


def _result(chunk_id, metadata, score):
    return SearchResult(chunk_id=chunk_id, metadata=metadata, similarity_score=score)
