"""Knowledge retrieval for the grounding prompt.

A retriever answers one question: given a bot, which snippets (in order)
should ground the answer. Ranking strategies plug in here without touching
the turn handler.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List

from .firestore import FirestoreRepository

logger = logging.getLogger(__name__)


class KnowledgeRetriever(ABC):
    """Abstract base class for snippet retrieval."""

    @abstractmethod
    def retrieve(self, bot_id: str, query: str) -> List[str]:
        """Return the snippet texts to inject, most relevant first.

        ``query`` is the user's message; retrievers that do not rank ignore it.
        """


class FirstNKnowledgeRetriever(KnowledgeRetriever):
    """Flat cap: the first ``limit`` items the store yields, no ranking."""

    def __init__(self, repo: FirestoreRepository, limit: int = 5) -> None:
        self.repo = repo
        self.limit = limit

    def retrieve(self, bot_id: str, query: str) -> List[str]:
        items = self.repo.list_knowledge(bot_id, self.limit)
        # Guard against stores that ignore the limit.
        snippets = [item.content for item in items[: self.limit]]
        logger.debug("Retrieved %d knowledge snippets for bot %s", len(snippets), bot_id)
        return snippets
