"""Grounded answer generation."""

from .chat_service import FALLBACK_MESSAGE, ChatMessage, ChatResponse, ChatService
from .prompt import PromptOptions, PromptTemplate, Tone

__all__ = [
    "FALLBACK_MESSAGE",
    "ChatMessage",
    "ChatResponse",
    "ChatService",
    "PromptOptions",
    "PromptTemplate",
    "Tone",
]
