"""
Completion orchestration: single prompts, segmented prompts and the
quality-gated dialogue loop used for podcast scripts.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

from .exceptions import GenerationQualityError, ProviderError
from .interfaces import CompletionProvider
from .prompts import SPEAKERS
from .types import DialogueLine, GenerationParams

logger = logging.getLogger(__name__)

QA_PARAMS = GenerationParams(temperature=0.7, max_tokens=500, top_p=0.9)
PODCAST_CHAT_PARAMS = GenerationParams(temperature=0.7, max_tokens=1000)
DIALOGUE_PARAMS = GenerationParams(
    temperature=0.9,
    max_tokens=8192,
    top_p=0.95,
    frequency_penalty=0.5,
    presence_penalty=0.5,
)

DEFAULT_MAX_RETRIES = 2
DEFAULT_MIN_LINES = 10


def count_dialogue_lines(script: Optional[str], speakers: Sequence[str] = SPEAKERS) -> int:
    """Count lines whose trimmed text starts with a ``Speaker:`` label."""
    if not script:
        return 0
    prefixes = tuple(f"{speaker}:" for speaker in speakers)
    return sum(1 for line in script.split("\n") if line.strip().startswith(prefixes))


def parse_dialogue(script: Optional[str], speakers: Sequence[str] = SPEAKERS) -> List[DialogueLine]:
    """Split a script into speaker lines, ignoring anything unlabelled."""
    lines = []
    for raw in (script or "").split("\n"):
        stripped = raw.strip()
        for speaker in speakers:
            prefix = f"{speaker}:"
            if stripped.startswith(prefix):
                lines.append(DialogueLine(speaker=speaker, text=stripped[len(prefix):].strip()))
                break
    return lines


class Generator:
    """Submits prompts to a completion provider.

    Attributes:
        completion_provider: Backend producing completions
        max_retries: Extra dialogue attempts after the first
        min_lines: Minimum speaker lines for an accepted dialogue
        model: Model name applied to params that do not set one
    """

    def __init__(
        self,
        completion_provider: CompletionProvider,
        max_retries: int = DEFAULT_MAX_RETRIES,
        min_lines: int = DEFAULT_MIN_LINES,
        model: Optional[str] = None,
    ):
        if max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {max_retries}")
        self.completion_provider = completion_provider
        self.max_retries = max_retries
        self.min_lines = min_lines
        self.model = model

    def generate(self, prompt: str, params: GenerationParams = QA_PARAMS) -> str:
        """Submit one prompt and return the completion text.

        Raises:
            ProviderError: If the completion is empty
        """
        text = self._complete(prompt, params)
        if not text:
            raise ProviderError("Completion returned no text", {"model": self._with_model(params).model})
        return text

    def generate_segmented(
        self,
        prompts: Sequence[str],
        params: GenerationParams = PODCAST_CHAT_PARAMS,
    ) -> str:
        """Submit one prompt per segment, in order, and join the outputs.

        Outputs are joined with a single space and the result is trimmed.
        A failure on any segment propagates and no partial answer is
        returned.
        """
        outputs = []
        for index, prompt in enumerate(prompts, 1):
            logger.debug(f"Generating segment {index}/{len(prompts)}")
            outputs.append(self.generate(prompt, params))
        return " ".join(outputs).strip()

    def generate_dialogue(self, prompt: str, params: GenerationParams = DIALOGUE_PARAMS) -> str:
        """Generate a podcast script, retrying drafts that are too short.

        The identical prompt is resubmitted while the draft is empty or has
        fewer than ``min_lines`` speaker lines, up to ``max_retries`` times.

        Returns:
            The raw script text of the first accepted draft

        Raises:
            GenerationQualityError: If every attempt falls short
        """
        attempts = self.max_retries + 1
        line_count = 0
        for attempt in range(1, attempts + 1):
            script = self._complete(prompt, params)
            line_count = count_dialogue_lines(script)
            if script and line_count >= self.min_lines:
                logger.info(f"Dialogue accepted with {line_count} lines on attempt {attempt}")
                return script
            logger.warning(
                f"Dialogue draft has {line_count} lines (minimum {self.min_lines}), "
                f"attempt {attempt}/{attempts}"
            )

        raise GenerationQualityError(
            f"Insufficient dialogue length: generated script has only {line_count} lines "
            f"(minimum {self.min_lines} required)",
            line_count=line_count,
            attempts=attempts,
        )

    def _complete(self, prompt: str, params: GenerationParams) -> str:
        params = self._with_model(params)
        logger.debug(f"Submitting prompt of {len(prompt)} characters (max_tokens={params.max_tokens})")
        return self.completion_provider.complete(prompt, params)

    def _with_model(self, params: GenerationParams) -> GenerationParams:
        if params.model or not self.model:
            return params
        return replace(params, model=self.model)
