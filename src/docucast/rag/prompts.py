"""Prompt templates and rendering.

Templates are plain ``str.format`` strings keyed by task. Changing wording
only touches the tables in this module; retrieval and generation code never
see the template text.
"""

from enum import Enum
from typing import Dict, Iterable, Mapping, Optional

from .types import ContentType, ConversationTurn

SPEAKERS = ("Alex", "Sarah")
TARGET_DIALOGUE_LINES = 55
TARGET_LINES_PER_SPEAKER = 25


class PromptTask(str, Enum):
    """Kinds of prompt the pipeline renders."""

    DOCUMENT_QA = "document_qa"
    VIDEO_QA = "video_qa"
    PODCAST_CHAT = "podcast_chat"
    PODCAST_DOCUMENT_CHAT = "podcast_document_chat"
    PODCAST_VIDEO_CHAT = "podcast_video_chat"
    DIALOGUE = "dialogue"


TEMPLATES: Dict[PromptTask, str] = {
    PromptTask.DOCUMENT_QA: """You are a helpful AI assistant answering questions about a PDF document. Use the following context to answer the question. If you cannot find the answer in the context, say so clearly.

Context from the PDF:
{context}

Previous conversation:
{history}

Question: {question}

Provide a clear, concise answer based on the context. If citing specific parts, mention the page number.""",

    PromptTask.VIDEO_QA: """You are a helpful AI assistant answering questions about a YouTube video. Use the following transcript excerpts to answer the question. If you cannot find the answer in the transcript, say so clearly.

Transcript excerpts:
{context}

Previous conversation:
{history}

Question: {question}

Provide a clear, concise answer based on the transcript. If citing specific parts, mention the part number.""",

    PromptTask.PODCAST_CHAT: """You are an AI assistant analyzing both a PDF document and its podcast discussion by {speaker_a} and {speaker_b}. Provide detailed, informative responses.

Available Information:
1. Original Document Content (Part {part}/{total}):
{segment}

2. Most Relevant Document Sections:
{relevant}

3. Podcast Discussion:
{script}

Previous conversation:
{history}

User question: {question}

Response Guidelines:
1. Analyze the available content and provide a focused response
2. Reference specific details from the document and podcast
3. When citing the document, mention page numbers
4. When referencing the podcast, mention the speaker""",

    PromptTask.PODCAST_DOCUMENT_CHAT: """Analyze this PDF document and its podcast discussion. Answer the user's question.

Context:
1. Key Document Points:
{key_points}

2. Relevant Sections:
{relevant}

3. Podcast Excerpt:
{script}

Chat History:
{history}

Question: {question}

Guidelines:
- Reference specific content and page numbers
- Include relevant quotes from the document
- Mention speakers when citing the podcast discussion""",

    PromptTask.PODCAST_VIDEO_CHAT: """Analyze this YouTube video and its podcast discussion. Answer the user's question.

Context:
1. Key Video Points:
{key_points}

2. Relevant Sections:
{relevant}

3. Podcast Excerpt:
{script}

Chat History:
{history}

Question: {question}

Guidelines:
- Reference specific content
- Include relevant quotes
- Mention speakers when citing podcast""",

    PromptTask.DIALOGUE: """Create a detailed, in-depth podcast conversation between {speaker_a} and {speaker_b} discussing the following {material}. They MUST thoroughly analyze and discuss every aspect of the {subject} in AT LEAST {target_lines} conversation lines:

  {content}

  Guidelines:
  1. REQUIRED: Generate AT LEAST {target_lines} total lines of dialogue
  2. Structure the conversation to cover:
     - {overview} (10+ lines)
     - {main_points} (20+ lines)
     - {analysis} (15+ lines)
     - {applications} (5+ lines)
     - {takeaways} (5+ lines)
  3. Use natural conversation patterns with detailed responses
  4. Each speaker MUST have at least {lines_per_speaker} lines
  5. NO short responses - each reply should be detailed and meaningful

  Format:
  - Use ONLY "{speaker_a}:" and "{speaker_b}:" as speaker labels
  - Make the conversation flow naturally
  - Include thoughtful transitions
  - NO abbreviated or short exchanges""",
}

# Source-specific wording for the dialogue template; None covers mixed material
DIALOGUE_SOURCES: Dict[Optional[ContentType], Dict[str, str]] = {
    ContentType.DOCUMENT: {
        "material": "PDF document content",
        "subject": "document",
        "overview": "Document overview and initial impressions",
        "main_points": "Main points and key findings",
        "analysis": "Critical analysis of the content",
        "applications": "Real-world applications",
        "takeaways": "Personal takeaways",
    },
    ContentType.VIDEO: {
        "material": "YouTube video content",
        "subject": "video",
        "overview": "Video overview and initial impressions",
        "main_points": "Main points and key moments",
        "analysis": "Critical analysis of the content",
        "applications": "Real-world applications",
        "takeaways": "Personal takeaways",
    },
    None: {
        "material": "content",
        "subject": "material",
        "overview": "Detailed introduction",
        "main_points": "Main points and findings",
        "analysis": "Critical analysis",
        "applications": "Real-world implications",
        "takeaways": "Personal perspectives",
    },
}


def format_history(history: Iterable[ConversationTurn], last: Optional[int] = None) -> str:
    """Render prior turns as ``role: content`` lines."""
    turns = list(history)
    if last is not None:
        turns = turns[-last:] if last > 0 else []
    return "\n".join(f"{turn.role}: {turn.content}" for turn in turns)


class PromptBuilder:
    """Renders task prompts from a template table.

    Attributes:
        templates: Mapping of task to format string
        dialogue_sources: Source-specific wording for dialogue prompts
    """

    def __init__(
        self,
        templates: Optional[Mapping[PromptTask, str]] = None,
        dialogue_sources: Optional[Mapping[Optional[ContentType], Mapping[str, str]]] = None,
    ):
        self.templates = dict(templates or TEMPLATES)
        self.dialogue_sources = dict(dialogue_sources or DIALOGUE_SOURCES)

    def build(self, task: PromptTask, **fields: str) -> str:
        """Fill the template for ``task``.

        Raises:
            KeyError: If the task has no template or a field is missing
        """
        return self.templates[task].format(**fields)

    def question(
        self,
        content_type: ContentType,
        context: str,
        history: Iterable[ConversationTurn],
        question: str,
    ) -> str:
        """Prompt for a factual question about one document or video."""
        task = PromptTask.DOCUMENT_QA if content_type is ContentType.DOCUMENT else PromptTask.VIDEO_QA
        return self.build(task, context=context, history=format_history(history), question=question)

    def podcast_source_chat(
        self,
        content_type: ContentType,
        key_points: str,
        relevant: str,
        script_excerpt: str,
        history: Iterable[ConversationTurn],
        question: str,
        history_turns: int = 3,
    ) -> str:
        """Prompt for a question about one source and its podcast."""
        task = (PromptTask.PODCAST_DOCUMENT_CHAT if content_type is ContentType.DOCUMENT
                else PromptTask.PODCAST_VIDEO_CHAT)
        return self.build(
            task,
            key_points=key_points,
            relevant=relevant,
            script=script_excerpt,
            history=format_history(history, last=history_turns),
            question=question,
        )

    def podcast_segment_chat(
        self,
        segment: str,
        part: int,
        total: int,
        relevant: str,
        script: str,
        history: Iterable[ConversationTurn],
        question: str,
    ) -> str:
        """Prompt for one segment of a multi-segment podcast chat answer."""
        return self.build(
            PromptTask.PODCAST_CHAT,
            speaker_a=SPEAKERS[0],
            speaker_b=SPEAKERS[1],
            part=str(part),
            total=str(total),
            segment=segment,
            relevant=relevant,
            script=script,
            history=format_history(history),
            question=question,
        )

    def dialogue(self, content: str, content_type: Optional[ContentType] = None) -> str:
        """Prompt asking for a two-speaker podcast script about ``content``."""
        wording = self.dialogue_sources[content_type]
        return self.build(
            PromptTask.DIALOGUE,
            speaker_a=SPEAKERS[0],
            speaker_b=SPEAKERS[1],
            target_lines=str(TARGET_DIALOGUE_LINES),
            lines_per_speaker=str(TARGET_LINES_PER_SPEAKER),
            content=content,
            **wording,
        )
