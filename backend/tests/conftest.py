"""
Shared fixtures: a deterministic stand-in for the OpenAI provider.
"""
import json

import pytest

from core.llm.base import Completion, CompletionProvider


class StubProvider(CompletionProvider):
    """Returns a canned reply and records every call."""

    def __init__(self, reply="{}", usage=None, error=None):
        self.reply = reply if isinstance(reply, str) else json.dumps(reply)
        self.usage = usage if usage is not None else {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15}
        self.error = error
        self.calls = []

    def complete(self, system_prompt, user_prompt, *, temperature, max_tokens):
        self.calls.append({
            "system": system_prompt,
            "user": user_prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return Completion(content=self.reply, usage=self.usage)


@pytest.fixture
def stub_provider():
    """Factory: stub_provider(reply, usage=None, error=None)."""
    return StubProvider
