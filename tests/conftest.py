"""
Pytest configuration and fixtures for Docucast tests.
"""
import sys
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

# Add src and the tests directory (for fakes) to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))
sys.path.insert(0, str(Path(__file__).parent))

from fakes import FakeEmbedder, InMemoryVectorStore, ScriptedCompletion  # noqa: E402


@pytest.fixture
def sample_video_urls():
    """Sample YouTube URLs for testing."""
    return {
        "standard": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "short": "https://youtu.be/dQw4w9WgXcQ",
        "playlist": "https://youtu.be/dQw4w9WgXcQ?list=PLSomePlaylist",
        "embed": "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "invalid": "https://example.com/not-a-video"
    }


@pytest.fixture
def sample_video_id():
    """Sample video ID for testing."""
    return "dQw4w9WgXcQ"


@pytest.fixture
def vector_store():
    """Empty in-memory vector store."""
    return InMemoryVectorStore()


@pytest.fixture
def embedder():
    """Deterministic embedder returning 768-dim vectors."""
    return FakeEmbedder()


@pytest.fixture
def completion():
    """Completion provider answering 'answer' to every prompt."""
    return ScriptedCompletion(default="answer")


@pytest.fixture
def dialogue_script():
    """A script with 12 speaker lines."""
    lines = []
    for i in range(6):
        lines.append(f"Alex: Point number {i} is worth discussing in detail.")
        lines.append(f"Sarah: I agree, and point {i} connects to the rest.")
    return "\n".join(lines)


@pytest.fixture
def mock_claude_api():
    """Mock Claude API responses."""
    with patch('anthropic.Anthropic') as mock_anthropic:
        mock_client = Mock()
        mock_response = Mock()
        mock_response.content = [Mock(type="text", text="Test answer from Claude.")]
        mock_client.messages.create.return_value = mock_response
        mock_anthropic.return_value = mock_client
        yield mock_client


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """Set up test environment variables."""
    monkeypatch.setenv("CLAUDE_API_KEY", "test-api-key")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-api-key")
