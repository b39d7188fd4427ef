"""
Chat Service

Retrieval-grounded answers:

1. Retrieve ranked results for the user message
2. EmptyContext or a retrieval ProviderError -> fixed fallback message
3. Otherwise assemble context and call the generation model
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from ..context.assembler import ContextAssembler
from ..context.citation import CitationStyle
from ..providers.base import GenerationClient, ProviderError
from ..retrieval.engine import RetrievalEngine
from ..schemas.search import EmptyContext, SearchResult
from .prompt import PromptOptions, PromptTemplate

logger = logging.getLogger(__name__)


FALLBACK_MESSAGE = (
    "I apologize, but I couldn't find specific information about that in the Condo Act. "
    "Could you try rephrasing your question or being more specific about what aspect of "
    "condo board responsibilities you're interested in?"
)


@dataclass
class ChatMessage:
    """One conversation turn."""
    role: str
    content: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatResponse:
    """Assistant reply plus the results it was grounded on."""
    content: str
    role: str = "assistant"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sources: List[SearchResult] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.content == FALLBACK_MESSAGE


class ChatService:
    """Wires retrieval, context assembly and generation together."""

    def __init__(
        self,
        engine: RetrievalEngine,
        generator: GenerationClient,
        options: Optional[PromptOptions] = None,
        template: Optional[PromptTemplate] = None,
        assembler: Optional[ContextAssembler] = None
    ):
        self.engine = engine
        self.generator = generator
        self.options = options or PromptOptions()
        self.template = template or PromptTemplate()
        self.assembler = assembler or ContextAssembler(CitationStyle.INLINE, include_relevance=True)

    def answer(
        self,
        message: str,
        history: Optional[Sequence[ChatMessage]] = None,
        final_count: Optional[int] = None
    ) -> ChatResponse:
        """
        Answer a user message.

        Args:
            message: User message
            history: Prior turns, oldest first
            final_count: Results used for grounding

        Returns:
            ChatResponse; `content` is FALLBACK_MESSAGE when no grounding exists

        Raises:
            ProviderError: If the generation call fails
        """
        try:
            outcome = self.engine.retrieve(message, final_count)
        except ProviderError as e:
            logger.error(f"Retrieval failed, answering with fallback: {e}")
            return ChatResponse(content=FALLBACK_MESSAGE, error=str(e))

        if isinstance(outcome, EmptyContext):
            logger.info(f"No relevant context for: {message[:50]}")
            return ChatResponse(content=FALLBACK_MESSAGE)

        context = self.assembler.assemble(outcome)
        instruction = self.template.render(self.options)
        turns = [turn.to_dict() for turn in history or []]

        try:
            text = self.generator.generate(
                instruction,
                context.text,
                turns,
                max_tokens=self.options.max_tokens,
                temperature=self.options.temperature,
            )
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(str(e), self.generator.name, "generate") from e

        return ChatResponse(content=text, sources=list(outcome))
