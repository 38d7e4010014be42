"""
Tests for the command-line interface.
"""
import json
from unittest.mock import Mock, patch

import pytest

from docucast.cli import build_parser, main, run
from docucast.rag.exceptions import EmptyContextError
from docucast.rag.types import (
    ContentType,
    DocumentChunkMetadata,
    IngestResult,
    Match,
    QueryResult,
)


@pytest.fixture
def service():
    service = Mock()
    service.ingest_pdf.return_value = IngestResult(
        success=True, source_id="paper.pdf", content_type=ContentType.DOCUMENT, chunks=4,
        message="Processed 2 pages")
    service.ingest_video.return_value = IngestResult(
        success=True, source_id="vid", content_type=ContentType.VIDEO, skipped=True,
        message="Video already processed")
    service.ask.return_value = QueryResult(
        response="The answer.",
        context=[Match("paper.pdf-0", DocumentChunkMetadata("paper.pdf", "text", 1, 0), 0.9)])
    service.podcast_chat.return_value = QueryResult(response="Chat reply.")
    service.generate_podcast.return_value = "Alex: Hi\nSarah: Hello"
    return service


def run_command(argv, service):
    return run(build_parser().parse_args(argv), service)


class TestRun:
    """Tests for command dispatch."""

    def test_ingest_pdf(self, service, tmp_path, capsys):
        """Test that PDF bytes and the file name are passed through."""
        pdf = tmp_path / "paper.pdf"
        pdf.write_bytes(b"%PDF-1.4")

        assert run_command(["ingest-pdf", str(pdf)], service) == 0

        service.ingest_pdf.assert_called_once_with(b"%PDF-1.4", "paper.pdf")
        assert "Processed 2 pages" in capsys.readouterr().out

    def test_ingest_pdf_custom_name(self, service, tmp_path):
        """Test overriding the source name."""
        pdf = tmp_path / "paper.pdf"
        pdf.write_bytes(b"%PDF")

        run_command(["ingest-pdf", str(pdf), "--name", "renamed.pdf"], service)

        service.ingest_pdf.assert_called_once_with(b"%PDF", "renamed.pdf")

    def test_ingest_video(self, service, capsys):
        """Test video ingestion output."""
        run_command(["ingest-video", "https://youtu.be/dQw4w9WgXcQ"], service)

        service.ingest_video.assert_called_once_with("https://youtu.be/dQw4w9WgXcQ")
        assert "already processed" in capsys.readouterr().out

    def test_ask_json(self, service, capsys):
        """Test the JSON output of ask."""
        run_command(["ask", "paper.pdf", "What?", "--json"], service)

        service.ask.assert_called_once_with("What?", [], "paper.pdf", ContentType.DOCUMENT)
        data = json.loads(capsys.readouterr().out)
        assert data["response"] == "The answer."
        assert data["context"][0]["page"] == 1

    def test_podcast_to_file(self, service, tmp_path):
        """Test writing the script to a file."""
        output = tmp_path / "script.txt"

        run_command(["podcast", "vid", "--type", "video", "--output", str(output)], service)

        service.generate_podcast.assert_called_once_with("vid", ContentType.VIDEO)
        assert output.read_text(encoding="utf-8") == "Alex: Hi\nSarah: Hello"

    def test_podcast_generic(self, service, capsys):
        """Test generation without a content type."""
        run_command(["podcast", "paper.pdf"], service)

        service.generate_podcast.assert_called_once_with("paper.pdf", None)
        assert "Alex: Hi" in capsys.readouterr().out

    def test_chat(self, service, tmp_path, capsys):
        """Test podcast chat reads the script file."""
        script = tmp_path / "script.txt"
        script.write_text("Alex: Hi", encoding="utf-8")

        run_command(["chat", "paper.pdf", "Why?", "--script", str(script), "-t", "document"], service)

        service.podcast_chat.assert_called_once_with("Why?", [], "paper.pdf", "Alex: Hi", ContentType.DOCUMENT)
        assert "Chat reply." in capsys.readouterr().out


class TestMain:
    """Tests for the entry point."""

    @patch('docucast.cli.configure_logging')
    @patch('docucast.cli.StudyPodcastService')
    def test_success_exits_zero(self, mock_service_class, mock_logging, service):
        """Test a successful command."""
        mock_service_class.from_config.return_value = service

        with pytest.raises(SystemExit) as exc_info:
            main(["--verbose", "podcast", "paper.pdf"])

        assert exc_info.value.code == 0
        mock_logging.assert_called_once_with(verbose=True, log_file=None)

    @patch('docucast.cli.configure_logging')
    @patch('docucast.cli.StudyPodcastService')
    def test_domain_error_exits_one(self, mock_service_class, mock_logging, service):
        """Test that DocucastError is reported with status 1."""
        service.generate_podcast.side_effect = EmptyContextError("No content found for source x")
        mock_service_class.from_config.return_value = service

        with pytest.raises(SystemExit) as exc_info:
            main(["podcast", "x"])

        assert exc_info.value.code == 1

    @patch('docucast.cli.configure_logging')
    @patch('docucast.cli.StudyPodcastService')
    def test_missing_file_exits_one(self, mock_service_class, mock_logging, service, tmp_path):
        """Test that unreadable files are reported with status 1."""
        mock_service_class.from_config.return_value = service

        with pytest.raises(SystemExit) as exc_info:
            main(["ingest-pdf", str(tmp_path / "missing.pdf")])

        assert exc_info.value.code == 1

    def test_command_required(self):
        """Test that a subcommand is required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args([])
