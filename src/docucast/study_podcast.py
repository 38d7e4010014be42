"""
Study podcast service: ingestion, question answering and podcast scripts
for PDF documents and YouTube videos.
"""
import time
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from loguru import logger

from .extraction import TranscriptFetcher, extract_pdf_pages, get_video_id
from .rag.completion_service import AnthropicCompletionService
from .rag.config import RAGConfig, load_config_from_env
from .rag.context_assembler import ContextAssembler
from .rag.document_chunker import TextChunker
from .rag.embedding_service import EmbeddingService, adjust_vector_dimension
from .rag.exceptions import DocucastError, EmptyContextError
from .rag.generator import DIALOGUE_PARAMS, PODCAST_CHAT_PARAMS, QA_PARAMS, Generator
from .rag.indexer import Indexer
from .rag.interfaces import CompletionProvider, EmbeddingProvider, VectorStore
from .rag.prompts import PromptBuilder
from .rag.retriever import Retriever
from .rag.types import (
    ContentType,
    ConversationTurn,
    IngestResult,
    Match,
    QueryResult,
    SourceFilter,
)
from .rag.vector_store import ChromaVectorStore

HistoryLike = Iterable[Union[ConversationTurn, Dict[str, Any]]]

KEY_POINTS = 3
SCRIPT_EXCERPT_CHARS = 1000
HISTORY_TURNS = 3
SOURCE_CHAT_SCAN = 10
SEGMENTED_CHAT_SCAN = 5
SEGMENTED_CHAT_TOP_K = 5
VIDEO_PODCAST_SCAN = 30
MIXED_PODCAST_SCAN = 30


def _turns(history: Optional[HistoryLike]) -> List[ConversationTurn]:
    """Accept turns as dataclasses or ``{role, content}`` dicts."""
    return [
        turn if isinstance(turn, ConversationTurn) else ConversationTurn.from_dict(turn)
        for turn in (history or [])
    ]


class StudyPodcastService:
    """Facade over the RAG core for PDFs and YouTube videos."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        vector_store: VectorStore,
        completion_provider: CompletionProvider,
        config: Optional[RAGConfig] = None,
        transcript_fetcher: Optional[TranscriptFetcher] = None,
    ):
        self.config = config or RAGConfig()
        self.embedding_provider = embedding_provider
        self.chunker = TextChunker(
            document_chunk_size=self.config.document_chunk_size,
            document_chunk_overlap=self.config.document_chunk_overlap,
            video_chunk_size=self.config.video_chunk_size,
            segment_max_length=self.config.segment_max_length,
        )
        self.retriever = Retriever(vector_store, scan_limit=self.config.scan_limit)
        self.indexer = Indexer(
            embedding_provider,
            vector_store,
            retriever=self.retriever,
            batch_size=self.config.upsert_batch_size,
            embed_workers=self.config.embed_workers,
            dimension=self.config.embedding_dim,
        )
        self.assembler = ContextAssembler(self.chunker)
        self.prompts = PromptBuilder()
        self.chat_generator = Generator(completion_provider, model=self.config.chat_model)
        self.podcast_generator = Generator(
            completion_provider,
            max_retries=self.config.max_dialogue_retries,
            min_lines=self.config.min_dialogue_lines,
            model=self.config.podcast_model,
        )
        self._transcript_fetcher = transcript_fetcher

    @classmethod
    def from_config(cls, config: Optional[RAGConfig] = None) -> "StudyPodcastService":
        """Build the service with sentence-transformers, ChromaDB and Claude."""
        config = config or load_config_from_env()
        return cls(
            embedding_provider=EmbeddingService(
                model_name=config.model_name,
                cache_dir=str(config.model_cache_dir),
            ),
            vector_store=ChromaVectorStore(
                persist_dir=str(config.vector_store_dir),
                collection_name=config.collection_name,
            ),
            completion_provider=AnthropicCompletionService(model=config.chat_model),
            config=config,
        )

    @property
    def transcript_fetcher(self) -> TranscriptFetcher:
        if self._transcript_fetcher is None:
            self._transcript_fetcher = TranscriptFetcher()
        return self._transcript_fetcher

    # Ingestion

    def ingest_pdf(self, data: bytes, filename: str) -> IngestResult:
        """
        Extract, chunk and index an uploaded PDF.

        The file name is the source ID, so uploading the same name again is
        reported as already processed.
        """
        if not filename:
            raise DocucastError("A file name is required for PDF ingestion")

        logger.info(f"Processing PDF: {filename}")
        pages = extract_pdf_pages(data)
        chunks = self.chunker.chunk_document(filename, pages)
        if not chunks:
            raise EmptyContextError(f"No content found for source {filename}")

        result = self.indexer.ingest(chunks)
        return self._report(result, f"Processed {len(pages)} pages")

    def ingest_video(self, url: str) -> IngestResult:
        """
        Fetch, chunk and index the transcript of a YouTube video.

        The transcript is not fetched when the video is already indexed.
        """
        start_time = time.time()
        video_id = get_video_id(url)
        logger.info(f"Processing video: {video_id}")

        if self.retriever.source_exists(SourceFilter(ContentType.VIDEO, video_id)):
            return self._report(IngestResult(
                success=True,
                source_id=video_id,
                content_type=ContentType.VIDEO,
                skipped=True,
                skip_reason="Already processed",
                processing_time_seconds=time.time() - start_time,
            ))

        transcript = self.transcript_fetcher.fetch(video_id)
        chunks = self.chunker.chunk_transcript(video_id, transcript.text, title=transcript.title)
        result = self.indexer.ingest(chunks)
        return self._report(result, f"Processed video: {transcript.title}")

    @staticmethod
    def _report(result: IngestResult, message: Optional[str] = None) -> IngestResult:
        if result.skipped:
            result.message = f"{result.content_type.value.capitalize()} already processed"
            logger.info(f"{result.source_id}: {result.message}")
        else:
            result.message = message
            logger.success(
                f"Indexed {result.source_id}: {result.chunks} chunks "
                f"in {result.processing_time_seconds:.2f}s"
            )
        return result

    # Question answering

    def ask(
        self,
        message: str,
        history: Optional[HistoryLike],
        source_id: str,
        content_type: Union[ContentType, str] = ContentType.DOCUMENT,
    ) -> QueryResult:
        """
        Answer a question about one document or video.

        An empty relevance context is not an error; the model is told what
        little context there is and answers accordingly.

        Returns:
            QueryResult with the answer and the relevant matches used
        """
        source_filter = SourceFilter(content_type, source_id)
        relevant = self._relevant(message, source_filter, self.config.top_k)
        if not relevant:
            logger.warning(f"No relevant context above threshold for {source_id}")

        prompt = self.prompts.question(
            source_filter.content_type,
            context=self.assembler.render(relevant),
            history=_turns(history),
            question=message,
        )
        response = self.chat_generator.generate(prompt, QA_PARAMS)
        return QueryResult(response=response, context=relevant)

    def podcast_chat(
        self,
        message: str,
        history: Optional[HistoryLike],
        source_id: str,
        script: str,
        content_type: Optional[Union[ContentType, str]] = None,
    ) -> QueryResult:
        """
        Answer a question about a source and the podcast generated from it.

        With a content type, one prompt combines key points, relevant
        sections, a script excerpt and recent history. Without one, the
        document is split into segments and each segment is answered in
        turn, the answers joined in order.
        """
        if not script:
            raise DocucastError("No podcast script provided")

        turns = _turns(history)
        if content_type is None:
            return self._segmented_podcast_chat(message, turns, source_id, script)

        source_filter = SourceFilter(content_type, source_id)
        ordered = self._scan_or_fail(source_filter, SOURCE_CHAT_SCAN)
        relevant = self._relevant(message, source_filter, self.config.top_k)

        prompt = self.prompts.podcast_source_chat(
            source_filter.content_type,
            key_points=self.assembler.render(ordered, limit=KEY_POINTS, labelled=False, separator="\n"),
            relevant=self.assembler.render(relevant, limit=KEY_POINTS, separator="\n"),
            script_excerpt=script[:SCRIPT_EXCERPT_CHARS],
            history=turns,
            question=message,
            history_turns=HISTORY_TURNS,
        )
        response = self.chat_generator.generate(prompt, PODCAST_CHAT_PARAMS)
        return QueryResult(response=response, context=relevant)

    def _segmented_podcast_chat(
        self,
        message: str,
        turns: Sequence[ConversationTurn],
        source_id: str,
        script: str,
    ) -> QueryResult:
        source_filter = SourceFilter(ContentType.DOCUMENT, source_id)
        ordered = self._scan_or_fail(source_filter, SEGMENTED_CHAT_SCAN)
        relevant = self._relevant(message, source_filter, SEGMENTED_CHAT_TOP_K)

        segments = self.assembler.segment(self.assembler.render(ordered, labelled=False))
        relevant_text = self.assembler.render(relevant)
        prompts = [
            self.prompts.podcast_segment_chat(
                segment=segment,
                part=index,
                total=len(segments),
                relevant=relevant_text,
                script=script,
                history=turns,
                question=message,
            )
            for index, segment in enumerate(segments, 1)
        ]
        logger.debug(f"Answering across {len(prompts)} document segment(s)")
        response = self.chat_generator.generate_segmented(prompts, PODCAST_CHAT_PARAMS)
        return QueryResult(response=response, context=relevant)

    # Podcast generation

    def generate_podcast(
        self,
        source_id: str,
        content_type: Optional[Union[ContentType, str]] = None,
    ) -> str:
        """
        Generate a two-speaker podcast script for an indexed source.

        Documents are rendered with page labels in page order, videos as
        plain text in transcript order. Without a content type the source
        is treated as a document and described generically.

        Raises:
            EmptyContextError: If the source has no indexed content
            GenerationQualityError: If every draft is too short
        """
        if content_type is None:
            ordered = self._scan_or_fail(SourceFilter(ContentType.DOCUMENT, source_id), MIXED_PODCAST_SCAN)
            content = self.assembler.render(ordered, labelled=False)
            prompt = self.prompts.dialogue(content)
        else:
            source_filter = SourceFilter(content_type, source_id)
            is_document = source_filter.content_type is ContentType.DOCUMENT
            limit = self.config.scan_limit if is_document else VIDEO_PODCAST_SCAN
            ordered = self._scan_or_fail(source_filter, limit)
            content = self.assembler.render(ordered, labelled=is_document)
            prompt = self.prompts.dialogue(content, source_filter.content_type)

        logger.info(f"Generating podcast script for {source_id} from {len(ordered)} chunks")
        script = self.podcast_generator.generate_dialogue(prompt, DIALOGUE_PARAMS)
        logger.success(f"Podcast script ready for {source_id}")
        return script

    # Helpers

    def _embed_query(self, text: str) -> List[float]:
        vector = self.embedding_provider.embed(text)
        if len(vector) != self.config.embedding_dim:
            vector = adjust_vector_dimension(vector, self.config.embedding_dim)
        return vector

    def _relevant(self, message: str, source_filter: SourceFilter, top_k: int) -> List[Match]:
        matches = self.retriever.query(self._embed_query(message), source_filter, top_k)
        return self.assembler.relevance(matches)

    def _scan_or_fail(self, source_filter: SourceFilter, limit: int) -> List[Match]:
        matches = self.retriever.scan_by_source(source_filter, limit)
        if not matches:
            raise EmptyContextError(
                f"No content found for source {source_filter.source_id}",
                source_filter.as_dict(),
            )
        return self.assembler.positional(matches)
