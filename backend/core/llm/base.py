"""
Types and helpers for chat-completion providers.
"""
import json
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.errors import UpstreamFormatError

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


@dataclass
class Completion:
    """One provider reply."""
    content: str
    usage: Optional[Dict[str, Any]] = None  # forwarded to the caller as-is


class CompletionProvider(ABC):
    """Given a system + user prompt, return the model's text reply."""

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> Completion:
        """
        Make exactly one upstream call.

        Raises UpstreamUnavailable when the call fails and UpstreamEmptyReply
        when it succeeds without content.
        """
        ...


def parse_json_reply(content: str, require_object: bool = True) -> Any:
    """
    Decode JSON from model output (may be wrapped in markdown fences).
    Raises UpstreamFormatError if the text is not JSON, or with
    require_object=True, if it decodes to anything but an object.
    """
    cleaned = _FENCE_RE.sub("", content.strip())
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("LLM_REPLY could not parse JSON from: %s", content[:200])
        raise UpstreamFormatError() from e
    if require_object and not isinstance(data, dict):
        logger.error("LLM_REPLY expected JSON object, got %s", type(data).__name__)
        raise UpstreamFormatError()
    return data
