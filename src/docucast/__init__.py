"""Docucast package exports."""

from .extraction import TranscriptFetcher, extract_pdf_pages, get_video_id
from .study_podcast import StudyPodcastService

__all__ = [
    "__version__",
    "StudyPodcastService",
    "TranscriptFetcher",
    "extract_pdf_pages",
    "get_video_id",
]

__version__ = "0.1.0"
