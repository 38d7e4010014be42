"""Context ranking and assembly for prompts.

Matches are ordered one of two ways before rendering:

- positional: source order (page, then chunk index), ignoring scores. Used
  for overviews and key points.
- relevance: score descending, dropping anything at or below the relevance
  threshold. Used to answer a specific question.

Rendered context that is too large for one prompt is split into
sentence-bounded segments.
"""

import logging
from typing import Iterable, List, Optional

from .document_chunker import TextChunker
from .retriever import RELEVANCE_THRESHOLD
from .types import Match

logger = logging.getLogger(__name__)


class ContextAssembler:
    """Orders, renders and segments retrieved matches.

    Attributes:
        chunker: Chunker providing sentence-mode segmentation
    """

    def __init__(self, chunker: Optional[TextChunker] = None):
        self.chunker = chunker or TextChunker()

    @staticmethod
    def positional(matches: Iterable[Match]) -> List[Match]:
        """Order matches by position in the source.

        Sort key is (order_key, sequence_index), so chunks on the same page
        keep their original order regardless of input order.
        """
        return sorted(matches, key=lambda match: (match.order_key, match.sequence_index))

    @staticmethod
    def relevance(matches: Iterable[Match]) -> List[Match]:
        """Keep matches above the relevance threshold, best first."""
        relevant = [match for match in matches if match.score > RELEVANCE_THRESHOLD]
        return sorted(relevant, key=lambda match: match.score, reverse=True)

    @staticmethod
    def render(
        matches: Iterable[Match],
        limit: Optional[int] = None,
        labelled: bool = True,
        separator: str = "\n\n",
    ) -> str:
        """Render matches as a text block.

        Args:
            matches: Matches in the order they should appear
            limit: Render only the first ``limit`` matches
            labelled: Prefix each text with its ``[Page N]``/``[Part N]`` label
            separator: String placed between entries

        Returns:
            Rendered context (empty string for no matches)
        """
        selected = list(matches)
        if limit is not None:
            selected = selected[:limit]
        if labelled:
            return separator.join(f"{match.label} {match.text}" for match in selected)
        return separator.join(match.text for match in selected)

    def segment(self, text: str, max_length: Optional[int] = None) -> List[str]:
        """Split rendered context into prompt-sized, sentence-bounded segments."""
        segments = self.chunker.segment(text, max_length)
        logger.debug(f"Context of {len(text)} characters split into {len(segments)} segment(s)")
        return segments
