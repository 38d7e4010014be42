"""
Text extraction for PDF uploads and YouTube videos.
"""
import io
import re
from dataclasses import dataclass
from typing import Any, List, Optional

import requests
from loguru import logger
from pypdf import PdfReader
from youtube_transcript_api import YouTubeTranscriptApi

from .rag.exceptions import ExtractionError
from .rag.types import PageText

VIDEO_ID_PATTERN = re.compile(r'(?:v=|/v/|youtu\.be/|/embed/|/shorts/)([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])')
OEMBED_URL = "https://www.youtube.com/oembed?url=https://www.youtube.com/watch?v={video_id}&format=json"


@dataclass
class Transcript:
    """Cleaned transcript of one video."""

    video_id: str
    title: str
    text: str
    segment_count: int = 0


def extract_pdf_pages(data: bytes) -> List[PageText]:
    """
    Extract the text of every page of a PDF.

    Args:
        data: Raw PDF bytes

    Returns:
        One PageText per page that has text, numbered from 1

    Raises:
        ExtractionError: If the PDF cannot be read or contains no text
    """
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = []
        for number, page in enumerate(reader.pages, 1):
            text = page.extract_text() or ""
            if text.strip():
                pages.append(PageText(page_number=number, text=text))
    except Exception as e:
        logger.error(f"Could not read PDF: {e}")
        raise ExtractionError(f"Could not read PDF: {e}") from e

    if not pages:
        raise ExtractionError("No text could be extracted from the PDF")

    logger.debug(f"Extracted text from {len(pages)} PDF pages")
    return pages


def get_video_id(url: str) -> str:
    """
    Extract the 11-character video ID from a YouTube URL.

    Raises:
        ExtractionError: If the URL carries no recognizable video ID
    """
    match = VIDEO_ID_PATTERN.search(url or "")
    if not match:
        raise ExtractionError("Invalid YouTube URL", {"url": url})
    return match.group(1)


def clean_transcript(text: str) -> str:
    """Strip markup tags and caption noise, collapsing whitespace."""
    text = re.sub(r'<[^>]*>', ' ', text)
    text = text.replace('[Music]', '').replace('[Applause]', '')
    return re.sub(r'\s+', ' ', text).strip()


class TranscriptFetcher:
    """Fetches transcripts and titles for YouTube videos."""

    def __init__(self, api: Optional[Any] = None, session: Optional[Any] = None,
                 languages: Optional[List[str]] = None, timeout: int = 10):
        self.api = api or YouTubeTranscriptApi()
        self.session = session or requests.Session()
        self.languages = languages or ['en']
        self.timeout = timeout

    def get_video_title(self, video_id: str) -> str:
        """
        Get video title from the oEmbed endpoint.

        Returns:
            The title, or ``Video_<id>`` if it cannot be fetched
        """
        try:
            response = self.session.get(OEMBED_URL.format(video_id=video_id), timeout=self.timeout)
            if response.status_code == 200:
                title = response.json().get('title')
                if title:
                    return title
            logger.warning(f"No title for {video_id} (HTTP {response.status_code})")
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Could not fetch video title for {video_id}: {e}")
        return f"Video_{video_id}"

    def fetch(self, video_id: str) -> Transcript:
        """
        Fetch and clean the transcript of a video.

        Raises:
            ExtractionError: If no transcript is available or it is empty
        """
        try:
            snippets = list(self.api.fetch(video_id, languages=self.languages))
        except Exception as e:
            logger.error(f"Could not fetch transcript for {video_id}: {e}")
            raise ExtractionError(f"Could not get transcript: {e}", {"video_id": video_id}) from e

        text = clean_transcript(' '.join(snippet.text for snippet in snippets))
        if not text:
            raise ExtractionError("Transcript is empty", {"video_id": video_id})

        logger.debug(f"Transcript char len {len(text)}")
        return Transcript(
            video_id=video_id,
            title=self.get_video_title(video_id),
            text=text,
            segment_count=len(snippets),
        )
