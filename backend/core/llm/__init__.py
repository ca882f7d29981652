"""
Chat-completion providers used by the categorizer and the parser.
"""
from .base import Completion, CompletionProvider, parse_json_reply
from .openai_client import OpenAIChatProvider

__all__ = [
    "Completion",
    "CompletionProvider",
    "parse_json_reply",
    "OpenAIChatProvider",
]
