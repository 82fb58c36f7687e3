from collections import defaultdict
from typing import Dict, List, Optional, Tuple

import pytest
from fastapi.testclient import TestClient

from embedbot.api.deps import get_chat_service
from embedbot.api.main import app
from embedbot.models.domain import Bot, Conversation, KnowledgeItem, Message, MessageRole
from embedbot.services.chat import ChatService
from embedbot.services.knowledge import FirstNKnowledgeRetriever
from embedbot.services.sessions import SessionResolver


class InMemoryRepository:
    """Stands in for FirestoreRepository; counts writes so tests can assert on them."""

    def __init__(self) -> None:
        self.bots: Dict[str, Bot] = {}
        self.knowledge: List[KnowledgeItem] = []
        self.conversations: Dict[Tuple[str, str], Conversation] = {}
        self.messages: Dict[str, List[Message]] = defaultdict(list)
        self.conversations_created = 0
        self.fail_on_role: Optional[MessageRole] = None
        self.fail_bot_lookup = False

    # seeding
    def add_bot(self, **fields) -> Bot:
        fields.setdefault("id", "bot-1")
        fields.setdefault("name", "Aria")
        fields.setdefault("company_name", "Acme")
        bot = Bot(**fields)
        self.bots[bot.id] = bot
        return bot

    def add_knowledge(self, bot_id: str, content: str) -> None:
        self.knowledge.append(
            KnowledgeItem(id=f"k{len(self.knowledge)}", bot_id=bot_id, content=content)
        )

    # repository surface
    def get_active_bot(self, bot_id: str) -> Optional[Bot]:
        if self.fail_bot_lookup:
            raise RuntimeError("store unavailable")
        bot = self.bots.get(bot_id)
        return bot if bot is not None and bot.is_active else None

    def list_knowledge(self, bot_id: str, limit: int) -> List[KnowledgeItem]:
        return [k for k in self.knowledge if k.bot_id == bot_id][:limit]

    def get_conversation(self, bot_id: str, session_id: str) -> Optional[Conversation]:
        return self.conversations.get((bot_id, session_id))

    def get_or_create_conversation(self, bot_id: str, session_id: str) -> Conversation:
        key = (bot_id, session_id)
        if key not in self.conversations:
            self.conversations_created += 1
            self.conversations[key] = Conversation(
                id=f"conv-{self.conversations_created}", bot_id=bot_id, session_id=session_id
            )
        return self.conversations[key]

    def add_message(self, conversation_id: str, role: MessageRole, content: str) -> Message:
        if role == self.fail_on_role:
            raise RuntimeError("write failed")
        message = Message(
            id=f"m{len(self.messages[conversation_id])}",
            conversation_id=conversation_id,
            role=role,
            content=content,
        )
        self.messages[conversation_id].append(message)
        return message

    def list_messages(self, conversation_id: str) -> List[Message]:
        return list(self.messages.get(conversation_id, []))

    @property
    def message_count(self) -> int:
        return sum(len(m) for m in self.messages.values())


class FakeGenerationClient:
    def __init__(self, answer: str = "Generated answer") -> None:
        self.answer = answer
        self.error: Optional[Exception] = None
        self.calls: List[dict] = []

    async def generate(self, api_key: str, grounding_prompt: str, message: str) -> str:
        self.calls.append({"api_key": api_key, "prompt": grounding_prompt, "message": message})
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def repo():
    return InMemoryRepository()


@pytest.fixture
def generator():
    return FakeGenerationClient()


@pytest.fixture
def chat_service(repo, generator):
    return ChatService(
        repo=repo,
        sessions=SessionResolver(repo),
        retriever=FirstNKnowledgeRetriever(repo, limit=5),
        generator=generator,
    )


@pytest.fixture
def client(chat_service):
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
