"""Text chunking for RAG indexing and prompt segmentation.

This module splits extracted PDF pages and video transcripts into bounded,
ordered chunks, and splits oversized prompt context at sentence boundaries.
"""

import logging
import re
from typing import Iterable, List, Optional

import tiktoken

from .types import Chunk, ContentType, PageText


logger = logging.getLogger(__name__)

# Split after terminal punctuation that is followed by whitespace
SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+')


def chunk_fixed(text: str, size: int, overlap: int = 0) -> List[str]:
    """Split text into fixed-size character windows.

    Consecutive windows start ``size - overlap`` characters apart and the last
    window always ends at the end of the text, so dropping the first
    ``overlap`` characters of every window but the first and concatenating
    gives back the original text.

    Args:
        text: Text to split
        size: Maximum characters per window
        overlap: Characters shared by consecutive windows

    Returns:
        Ordered list of windows (empty for empty text)

    Raises:
        ValueError: If size or overlap are out of range
    """
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")
    if overlap < 0 or overlap >= size:
        raise ValueError(f"overlap must be in [0, size), got {overlap}")
    if not text:
        return []

    windows = []
    start = 0
    while True:
        end = min(start + size, len(text))
        windows.append(text[start:end])
        if end >= len(text):
            break
        start = end - overlap
    return windows


def chunk_sentences(text: str, max_length: int = 4000) -> List[str]:
    """Group whole sentences into units of at most ``max_length`` characters.

    Sentences are joined with a single space. The rejoin is lossy: the
    whitespace that separated sentences in ``text`` (newlines, paragraph
    breaks, runs of spaces) is not kept, so the units do not concatenate
    back to the input. Whitespace inside a sentence is left as is. A sentence
    is never split, so one sentence longer than ``max_length`` becomes a
    unit of its own.

    Args:
        text: Text to split
        max_length: Maximum characters per unit

    Returns:
        Ordered list of non-empty units
    """
    if max_length <= 0:
        raise ValueError(f"max_length must be positive, got {max_length}")

    units = []
    current = ""
    for sentence in SENTENCE_BOUNDARY.split(text.strip()):
        if not sentence:
            continue
        if not current:
            current = sentence
        elif len(current) + 1 + len(sentence) > max_length:
            units.append(current)
            current = sentence
        else:
            current = f"{current} {sentence}"

    if current:
        units.append(current)

    oversized = sum(1 for unit in units if len(unit) > max_length)
    if oversized:
        logger.warning(f"{oversized} sentence(s) exceed {max_length} characters and were kept whole")
    return units


class TextChunker:
    """Chunks extracted source text for RAG indexing.

    Documents are split per page into overlapping windows, transcripts into
    sequential windows. Chunk ids are ``{source_id}-{sequence_index}`` so
    re-chunking the same source yields the same ids.

    Attributes:
        document_chunk_size: Characters per PDF chunk
        document_chunk_overlap: Characters shared by consecutive PDF chunks
        video_chunk_size: Characters per transcript chunk
        segment_max_length: Characters per prompt segment
    """

    def __init__(
        self,
        document_chunk_size: int = 500,
        document_chunk_overlap: int = 50,
        video_chunk_size: int = 1500,
        segment_max_length: int = 4000,
    ):
        """Initialize the chunker.

        Args:
            document_chunk_size: Characters per PDF chunk (default: 500)
            document_chunk_overlap: Overlap between PDF chunks (default: 50)
            video_chunk_size: Characters per transcript chunk (default: 1500)
            segment_max_length: Characters per prompt segment (default: 4000)
        """
        if document_chunk_overlap >= document_chunk_size:
            raise ValueError("document_chunk_overlap must be smaller than document_chunk_size")

        self.document_chunk_size = document_chunk_size
        self.document_chunk_overlap = document_chunk_overlap
        self.video_chunk_size = video_chunk_size
        self.segment_max_length = segment_max_length

        # Initialize tokenizer (using cl100k_base for general text)
        try:
            self.tokenizer = tiktoken.get_encoding("cl100k_base")
        except Exception as e:
            logger.warning(f"Failed to load tiktoken encoding: {e}, using approximate counting")
            self.tokenizer = None

    def chunk_document(
        self,
        source_id: str,
        pages: Iterable[PageText],
        title: Optional[str] = None,
    ) -> List[Chunk]:
        """Chunk a PDF page by page.

        Args:
            source_id: Identifier of the document (its file name)
            pages: Extracted pages in reading order
            title: Optional document title

        Returns:
            Chunks ordered by page, each keyed by its page number
        """
        chunks = []
        for page in pages:
            if not page.text.strip():
                logger.debug(f"Skipping blank page {page.page_number} of {source_id}")
                continue
            for window in chunk_fixed(page.text, self.document_chunk_size, self.document_chunk_overlap):
                if not window.strip():
                    continue
                chunks.append(self._create_chunk(
                    source_id=source_id,
                    content_type=ContentType.DOCUMENT,
                    text=window,
                    order_key=page.page_number,
                    sequence_index=len(chunks),
                    title=title,
                ))

        logger.info(f"Created {len(chunks)} chunks for document {source_id}")
        return chunks

    def chunk_transcript(
        self,
        source_id: str,
        text: str,
        title: Optional[str] = None,
    ) -> List[Chunk]:
        """Chunk a video transcript into sequential windows.

        Args:
            source_id: YouTube video ID
            text: Cleaned transcript text
            title: Optional video title

        Returns:
            Chunks keyed by their position in the transcript
        """
        chunks = []
        for window in chunk_fixed(text, self.video_chunk_size):
            if not window.strip():
                continue
            chunks.append(self._create_chunk(
                source_id=source_id,
                content_type=ContentType.VIDEO,
                text=window,
                order_key=len(chunks),
                sequence_index=len(chunks),
                title=title,
            ))

        logger.info(f"Created {len(chunks)} chunks for video {source_id}")
        return chunks

    def segment(self, text: str, max_length: Optional[int] = None) -> List[str]:
        """Split assembled context into sentence-bounded segments.

        Args:
            text: Context text
            max_length: Override for ``segment_max_length``

        Returns:
            Ordered segments
        """
        return chunk_sentences(text, max_length or self.segment_max_length)

    def _create_chunk(
        self,
        source_id: str,
        content_type: ContentType,
        text: str,
        order_key: int,
        sequence_index: int,
        title: Optional[str],
    ) -> Chunk:
        return Chunk(
            chunk_id=f"{source_id}-{sequence_index}",
            text=text,
            source_id=source_id,
            content_type=content_type,
            order_key=order_key,
            sequence_index=sequence_index,
            title=title,
            token_count=self._count_tokens(text),
        )

    def _count_tokens(self, text: str) -> int:
        """Count tokens in text using tiktoken.

        Args:
            text: Text to count tokens in

        Returns:
            Number of tokens
        """
        if self.tokenizer:
            try:
                return len(self.tokenizer.encode(text))
            except Exception as e:
                logger.debug(f"Tokenizer error, using approximation: {e}")

        # Fallback: approximate token count (1 token ≈ 4 characters)
        return len(text) // 4
