"""Chat turn handling for the website widget."""

from __future__ import annotations

import logging
from typing import List

from ..errors import BotNotFound, ChatbotError, GenerationFailed, InvalidRequest
from ..models.domain import (
    Bot,
    BotProfile,
    ChatTurnRequest,
    ChatTurnResponse,
    MessageRole,
    TranscriptMessage,
)
from .firestore import FirestoreRepository
from .knowledge import KnowledgeRetriever
from .llm_service import GenerationClient
from .prompt import build_grounding_prompt
from .sessions import SessionResolver

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("bot_id", "message", "session_id", "api_key")


class ChatService:
    """Handles one widget chat turn end to end.

    Holds no per-conversation state; every call reads what it needs from the
    repository. Writes are not transactional: if generation fails the user
    message stays recorded and the next turn simply appends after it.
    """

    def __init__(
        self,
        repo: FirestoreRepository,
        sessions: SessionResolver,
        retriever: KnowledgeRetriever,
        generator: GenerationClient,
    ) -> None:
        self.repo = repo
        self.sessions = sessions
        self.retriever = retriever
        self.generator = generator

    # ─────────────────────────── Turn handling ───────────────────────────
    async def handle_turn(self, request: ChatTurnRequest) -> ChatTurnResponse:
        missing = [name for name in _REQUIRED_FIELDS if not getattr(request, name)]
        if missing:
            logger.info("Rejected chat turn, missing fields: %s", ", ".join(missing))
            raise InvalidRequest()

        bot = self._get_bot(request.bot_id)

        conversation = self.sessions.resolve(bot.id, request.session_id)
        self.repo.add_message(conversation.id, MessageRole.USER, request.message)

        try:
            knowledge = self.retriever.retrieve(bot.id, request.message)
            prompt = build_grounding_prompt(bot, knowledge)
            answer = await self.generator.generate(request.api_key, prompt, request.message)
            self.repo.add_message(conversation.id, MessageRole.ASSISTANT, answer)
        except ChatbotError:
            raise
        except Exception as exc:
            logger.error(
                "Turn failed after user message was stored (conversation %s): %s",
                conversation.id,
                exc,
                exc_info=True,
            )
            raise GenerationFailed() from exc

        logger.info(
            "Answered turn for bot %s in conversation %s (%d knowledge snippets)",
            bot.id,
            conversation.id,
            len(knowledge),
        )
        return ChatTurnResponse(answer=answer)

    # ─────────────────────────── Widget helpers ───────────────────────────
    def get_profile(self, bot_id: str) -> BotProfile:
        """Public persona plus the greeting the widget shows when opened."""
        bot = self._get_bot(bot_id)
        greeting = (
            f"Hello! I'm {bot.name}, your virtual assistant from {bot.company_name}. "
            "How can I help you?"
        )
        return BotProfile(id=bot.id, name=bot.name, company_name=bot.company_name, greeting=greeting)

    def get_transcript(self, bot_id: str, session_id: str) -> List[TranscriptMessage]:
        """Messages of a session in creation order; never creates a conversation."""
        bot = self._get_bot(bot_id)
        conversation = self.repo.get_conversation(bot.id, session_id)
        if conversation is None:
            return []
        return [
            TranscriptMessage(role=m.role, content=m.content, created_at=m.created_at)
            for m in self.repo.list_messages(conversation.id)
        ]

    def _get_bot(self, bot_id: str) -> Bot:
        bot = self.repo.get_active_bot(bot_id)
        if bot is None:
            raise BotNotFound()
        return bot
