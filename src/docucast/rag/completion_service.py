"""Completion provider backed by the Anthropic Messages API."""

import logging
import os
from typing import Any, Optional

import anthropic
from dotenv import load_dotenv

from .exceptions import ProviderError
from .types import GenerationParams

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-haiku-20241022"


def get_api_key() -> Optional[str]:
    """Get Claude API key from environment or .env file."""
    return os.getenv('CLAUDE_API_KEY') or os.getenv('ANTHROPIC_API_KEY')


class AnthropicCompletionService:
    """CompletionProvider implementation using Claude.

    Frequency and presence penalties have no Messages API equivalent and
    are dropped. Recent models reject ``temperature`` and ``top_p`` in the
    same request, so ``top_p`` is only sent when ``send_top_p`` is set.

    Attributes:
        model: Model used when the params do not name one
        send_top_p: Forward ``top_p`` alongside temperature
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        send_top_p: bool = False,
        client: Optional[Any] = None,
    ):
        self.model = model
        self.send_top_p = send_top_p
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> Any:
        """Lazy-create the Anthropic client.

        Raises:
            ProviderError: If no API key is configured
        """
        if self._client is None:
            api_key = self._api_key or get_api_key()
            if not api_key:
                raise ProviderError(
                    "Claude API key not found. Set CLAUDE_API_KEY or ANTHROPIC_API_KEY "
                    "in the environment or a .env file"
                )
            self._client = anthropic.Anthropic(api_key=api_key)
        return self._client

    def complete(self, prompt: str, params: GenerationParams) -> str:
        """Send one user message and return the text of the reply.

        A reply without text blocks yields an empty string; callers decide
        whether that is acceptable.

        Raises:
            ProviderError: If the request fails
        """
        request = {
            "model": params.model or self.model,
            "max_tokens": params.max_tokens,
            "temperature": params.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.send_top_p and params.top_p is not None:
            request["top_p"] = params.top_p
        if params.frequency_penalty is not None or params.presence_penalty is not None:
            logger.debug("Ignoring frequency/presence penalties unsupported by the Messages API")

        client = self.client
        try:
            response = client.messages.create(**request)
        except anthropic.APIError as e:
            logger.error(f"Completion request failed: {e}")
            raise ProviderError(f"Completion request failed: {e}", {"model": request["model"]}) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "text") == "text"
        )
        if not text:
            logger.warning(f"Completion from {request['model']} contained no text")
        return text
