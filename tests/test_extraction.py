"""
Tests for PDF and YouTube text extraction.
"""
from unittest.mock import Mock, patch

import pytest
import requests

from docucast.extraction import (
    TranscriptFetcher,
    clean_transcript,
    extract_pdf_pages,
    get_video_id,
)
from docucast.rag.exceptions import ExtractionError


def snippet(text):
    return Mock(text=text, start=0.0, duration=1.0)


class TestGetVideoId:
    """Tests for video ID extraction."""

    @pytest.mark.parametrize("kind", ["standard", "short", "playlist", "embed"])
    def test_supported_urls(self, sample_video_urls, sample_video_id, kind):
        """Test the URL forms that carry a video ID."""
        assert get_video_id(sample_video_urls[kind]) == sample_video_id

    def test_watch_url_with_extra_params(self, sample_video_id):
        """Test a watch URL where v is not the first parameter."""
        assert get_video_id(f"https://www.youtube.com/watch?feature=share&v={sample_video_id}&t=42") == sample_video_id

    def test_invalid_url(self, sample_video_urls):
        """Test that URLs without an ID are rejected."""
        with pytest.raises(ExtractionError, match="Invalid YouTube URL"):
            get_video_id(sample_video_urls["invalid"])

    def test_id_too_short(self):
        """Test that truncated IDs are rejected."""
        with pytest.raises(ExtractionError):
            get_video_id("https://youtu.be/abc123")


class TestCleanTranscript:
    """Tests for transcript cleanup."""

    def test_strips_tags_and_noise(self):
        """Test removal of markup and caption noise."""
        raw = "<font color='#fff'>Hello</font>   [Music] world\n\nagain [Applause]"
        assert clean_transcript(raw) == "Hello world again"


class TestExtractPdfPages:
    """Tests for PDF extraction."""

    @patch('docucast.extraction.PdfReader')
    def test_pages_numbered_from_one(self, mock_reader):
        """Test that blank pages are skipped but numbering is kept."""
        pages = [Mock(), Mock(), Mock()]
        pages[0].extract_text.return_value = "First page."
        pages[1].extract_text.return_value = "   "
        pages[2].extract_text.return_value = "Third page."
        mock_reader.return_value = Mock(pages=pages)

        result = extract_pdf_pages(b"%PDF-1.4")

        assert [(p.page_number, p.text) for p in result] == [(1, "First page."), (3, "Third page.")]

    @patch('docucast.extraction.PdfReader')
    def test_no_text(self, mock_reader):
        """Test that an image-only PDF is an extraction error."""
        page = Mock()
        page.extract_text.return_value = None
        mock_reader.return_value = Mock(pages=[page])

        with pytest.raises(ExtractionError, match="No text"):
            extract_pdf_pages(b"%PDF-1.4")

    @patch('docucast.extraction.PdfReader')
    def test_unreadable(self, mock_reader):
        """Test that reader failures are wrapped."""
        mock_reader.side_effect = Exception("EOF marker not found")

        with pytest.raises(ExtractionError, match="Could not read PDF"):
            extract_pdf_pages(b"garbage")


class TestTranscriptFetcher:
    """Tests for TranscriptFetcher."""

    def make_session(self, status=200, payload=None):
        response = Mock(status_code=status)
        response.json.return_value = payload if payload is not None else {"title": "Test Video"}
        session = Mock()
        session.get.return_value = response
        return session

    def test_fetch(self, sample_video_id):
        """Test fetching, joining and cleaning a transcript."""
        api = Mock()
        api.fetch.return_value = [snippet("Never gonna"), snippet("<i>give you up</i>"), snippet("[Music]")]
        fetcher = TranscriptFetcher(api=api, session=self.make_session())

        transcript = fetcher.fetch(sample_video_id)

        api.fetch.assert_called_once_with(sample_video_id, languages=['en'])
        assert transcript.text == "Never gonna give you up"
        assert transcript.title == "Test Video"
        assert transcript.segment_count == 3

    def test_fetch_failure(self, sample_video_id):
        """Test that API failures become ExtractionError."""
        api = Mock()
        api.fetch.side_effect = Exception("Subtitles are disabled for this video")
        fetcher = TranscriptFetcher(api=api, session=self.make_session())

        with pytest.raises(ExtractionError, match="Could not get transcript"):
            fetcher.fetch(sample_video_id)

    def test_empty_transcript(self, sample_video_id):
        """Test that a transcript of noise only is rejected."""
        api = Mock()
        api.fetch.return_value = [snippet("[Music]")]

        with pytest.raises(ExtractionError, match="empty"):
            TranscriptFetcher(api=api, session=self.make_session()).fetch(sample_video_id)

    def test_title_uses_oembed(self, sample_video_id):
        """Test the oEmbed request."""
        session = self.make_session()
        title = TranscriptFetcher(api=Mock(), session=session).get_video_title(sample_video_id)

        assert title == "Test Video"
        url = session.get.call_args.args[0]
        assert "oembed" in url and sample_video_id in url

    def test_title_fallback_on_http_error(self, sample_video_id):
        """Test the fallback title for non-200 responses."""
        fetcher = TranscriptFetcher(api=Mock(), session=self.make_session(status=404))
        assert fetcher.get_video_title(sample_video_id) == f"Video_{sample_video_id}"

    def test_title_fallback_on_network_error(self, sample_video_id):
        """Test the fallback title when the request fails."""
        session = Mock()
        session.get.side_effect = requests.ConnectionError("offline")

        fetcher = TranscriptFetcher(api=Mock(), session=session)

        assert fetcher.get_video_title(sample_video_id) == f"Video_{sample_video_id}"
