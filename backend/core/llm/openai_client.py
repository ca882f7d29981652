"""
OpenAI chat-completions connector.
POST {base}/chat/completions with a system + user message, JSON-object output.
"""
import logging
from typing import Any, Optional

import requests

from core.config import DEFAULT_OPENAI_API_BASE, DEFAULT_OPENAI_MODEL, DEFAULT_OPENAI_TIMEOUT, Settings
from core.errors import ConfigurationError, UpstreamEmptyReply, UpstreamUnavailable
from core.llm.base import Completion, CompletionProvider

logger = logging.getLogger(__name__)


class OpenAIChatProvider(CompletionProvider):
    """Single-attempt chat completion against the OpenAI REST API."""

    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_OPENAI_MODEL,
        base_url: str = DEFAULT_OPENAI_API_BASE,
        timeout: int = DEFAULT_OPENAI_TIMEOUT,
    ):
        self._api_key = api_key
        self._model = model
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "OpenAIChatProvider":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_api_base,
            timeout=settings.openai_timeout,
        )

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: float,
        max_tokens: int,
    ) -> Completion:
        if not self._api_key:
            raise ConfigurationError()

        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
            "max_tokens": max_tokens,
            "response_format": {"type": "json_object"},
        }
        try:
            resp = requests.post(
                self._url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error("OPENAI_CALL failed model=%s error=%s: %s", self._model, type(e).__name__, e)
            raise UpstreamUnavailable() from e

        if not resp.ok:
            logger.error(
                "OPENAI_CALL failed model=%s status=%s body=%s",
                self._model, resp.status_code, resp.text[:300],
            )
            raise UpstreamUnavailable()

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("OPENAI_CALL non-JSON envelope status=%s", resp.status_code)
            raise UpstreamEmptyReply() from e

        content = _first_message_content(data)
        if not content:
            logger.error("OPENAI_CALL empty reply model=%s", self._model)
            raise UpstreamEmptyReply()

        usage = data.get("usage") if isinstance(data, dict) else None
        logger.info("OPENAI_CALL ok model=%s chars=%d", self._model, len(content))
        return Completion(content=content, usage=usage)


def _first_message_content(data: Any) -> Optional[str]:
    """choices[0].message.content, or None if any level is missing."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str):
        return None
    return content
