"""Unit tests for RAG configuration module."""

import os
from pathlib import Path
import pytest

from docucast.rag.config import RAGConfig, load_config_from_env


class TestRAGConfig:
    """Tests for RAGConfig dataclass."""

    def test_default_values(self):
        """Test that default configuration values are set correctly."""
        config = RAGConfig()

        assert config.model_name == "all-mpnet-base-v2"
        assert config.collection_name == "docucast"
        assert config.embedding_dim == 768
        assert config.upsert_batch_size == 100
        assert config.document_chunk_size == 500
        assert config.document_chunk_overlap == 50
        assert config.video_chunk_size == 1500
        assert config.segment_max_length == 4000
        assert config.scan_limit == 100
        assert config.top_k == 10
        assert config.max_dialogue_retries == 2
        assert config.min_dialogue_lines == 10

    def test_path_post_init(self):
        """Test that paths are properly converted in __post_init__."""
        config = RAGConfig(
            model_cache_dir="/tmp/cache",
            vector_store_dir="/tmp/store",
        )

        assert isinstance(config.model_cache_dir, Path)
        assert isinstance(config.vector_store_dir, Path)
        assert str(config.model_cache_dir) == "/tmp/cache"
        assert str(config.vector_store_dir) == "/tmp/store"

    def test_overlap_must_be_smaller_than_chunk(self):
        """Test that an overlap as large as the chunk size is rejected."""
        with pytest.raises(ValueError):
            RAGConfig(document_chunk_size=100, document_chunk_overlap=100)


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    @pytest.fixture(autouse=True)
    def clear_env(self, monkeypatch):
        for key in list(os.environ.keys()):
            if key.startswith('RAG_') or key in ('CHROMA_PERSIST_DIR', 'MODEL_CACHE_DIR',
                                                 'CHAT_MODEL', 'PODCAST_MODEL'):
                monkeypatch.delenv(key, raising=False)

    def test_load_with_no_env_vars(self):
        """Test loading config with no environment variables set."""
        assert load_config_from_env() == RAGConfig()

    def test_load_with_env_vars(self, monkeypatch):
        """Test loading config from environment variables."""
        monkeypatch.setenv('RAG_MODEL', 'test-model')
        monkeypatch.setenv('RAG_VECTOR_STORE_DIR', '/tmp/vectors')
        monkeypatch.setenv('RAG_TOP_K', '5')
        monkeypatch.setenv('RAG_MAX_DIALOGUE_RETRIES', '4')
        monkeypatch.setenv('PODCAST_MODEL', 'claude-test')

        config = load_config_from_env()

        assert config.model_name == 'test-model'
        assert config.vector_store_dir == Path('/tmp/vectors')
        assert config.top_k == 5
        assert config.max_dialogue_retries == 4
        assert config.podcast_model == 'claude-test'

    def test_legacy_env_vars(self, monkeypatch):
        """Test that legacy directory variables are honoured."""
        monkeypatch.setenv('CHROMA_PERSIST_DIR', '/legacy/chroma')
        monkeypatch.setenv('MODEL_CACHE_DIR', '/legacy/models')

        config = load_config_from_env()

        assert config.vector_store_dir == Path('/legacy/chroma')
        assert config.model_cache_dir == Path('/legacy/models')

    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Test that unparseable integers keep the default."""
        monkeypatch.setenv('RAG_UPSERT_BATCH_SIZE', 'lots')

        assert load_config_from_env().upsert_batch_size == 100
