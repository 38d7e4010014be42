"""Exception hierarchy for the Docucast RAG core.

Every failure that reaches a caller is a DocucastError subclass carrying a
human-readable message plus optional context for debugging.
"""

from typing import Any, Dict, Optional


class DocucastError(Exception):
    """Base exception for all Docucast errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ExtractionError(DocucastError):
    """Raised when no text can be extracted from a PDF or video."""


class EmbeddingError(DocucastError):
    """Raised when the embedding provider fails."""


class RetrievalError(DocucastError):
    """Raised when the vector store fails or a filter is malformed."""


class EmptyContextError(DocucastError):
    """Raised when a source has no indexed content at all.

    An empty relevance result is not an error; this is reserved for the
    case where the source itself cannot be found.
    """


class GenerationQualityError(DocucastError):
    """Raised when a dialogue script stays too short after all retries."""

    def __init__(self, message: str, line_count: int, attempts: int):
        super().__init__(message, {"line_count": line_count, "attempts": attempts})
        self.line_count = line_count
        self.attempts = attempts


class ProviderError(DocucastError):
    """Raised on a generic upstream failure (rate limit, outage, bad response)."""
