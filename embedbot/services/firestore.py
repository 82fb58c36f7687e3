import datetime as _dt
import hashlib
import logging
from typing import List, Optional

from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore
from google.cloud.firestore import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from embedbot.models.domain import Bot, Conversation, KnowledgeItem, Message, MessageRole

_BOTS = "bots"
_KNOWLEDGE = "knowledge_base"
_CONVERSATIONS = "conversations"
_MESSAGES = "messages"


def is_addressable_id(doc_id: str) -> bool:
    """False for ids Firestore rejects as a single document id."""
    if "/" in doc_id or doc_id in (".", "..") or len(doc_id.encode("utf-8")) > 1500:
        return False
    return not (doc_id.startswith("__") and doc_id.endswith("__"))


def conversation_key(bot_id: str, session_id: str) -> str:
    """Deterministic document id for the (bot, session) pair.

    Session ids are opaque caller strings and may contain characters Firestore
    rejects in document ids, so the pair is hashed.
    """
    raw = f"{bot_id}\x00{session_id}".encode("utf-8")
    return hashlib.sha256(raw).hexdigest()


class FirestoreRepository:
    """Bots, knowledge and conversations stored in Firestore."""

    def __init__(self, db: firestore.Client) -> None:
        self.db = db
        self._bots = self.db.collection(_BOTS)
        self._knowledge = self.db.collection(_KNOWLEDGE)
        self._conversations = self.db.collection(_CONVERSATIONS)
        logging.info(f"FirestoreRepository initialized for project '{db.project}'")

    # --------------------------------------------------------------------- #
    # Bot configuration (read-only)
    # --------------------------------------------------------------------- #
    def get_active_bot(self, bot_id: str) -> Optional[Bot]:
        """Returns the bot only while its ``is_active`` flag is set."""
        if not is_addressable_id(bot_id):
            return None
        snapshot = self._bots.document(bot_id).get()
        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        if data.get("is_active") is not True:
            return None
        return Bot(**{**data, "id": snapshot.id})

    def list_knowledge(self, bot_id: str, limit: int) -> List[KnowledgeItem]:
        """Up to ``limit`` knowledge items for the bot, in store order."""
        stream = (
            self._knowledge
            .where(filter=FieldFilter("bot_id", "==", bot_id))
            .limit(limit)
            .stream()
        )
        return [KnowledgeItem(**{**doc.to_dict(), "id": doc.id}) for doc in stream]

    # --------------------------------------------------------------------- #
    # Conversations
    # --------------------------------------------------------------------- #
    def get_conversation(self, bot_id: str, session_id: str) -> Optional[Conversation]:
        snapshot = self._conversations.document(conversation_key(bot_id, session_id)).get()
        if not snapshot.exists:
            return None
        return Conversation(**{**snapshot.to_dict(), "id": snapshot.id})

    def get_or_create_conversation(self, bot_id: str, session_id: str) -> Conversation:
        """Fetch the conversation for (bot, session), creating it on first use.

        ``create()`` fails if the document already exists, so two concurrent
        first turns end up sharing one conversation: the loser re-reads the
        winner's document.
        """
        conv_ref = self._conversations.document(conversation_key(bot_id, session_id))
        snapshot = conv_ref.get()
        if snapshot.exists:
            return Conversation(**{**snapshot.to_dict(), "id": snapshot.id})

        now = _dt.datetime.now(_dt.timezone.utc)
        conv_data = {"bot_id": bot_id, "session_id": session_id, "created_at": now}
        try:
            conv_ref.create(conv_data)
        except AlreadyExists:
            logging.info(f"Conversation {conv_ref.id} created concurrently; reusing it")
            snapshot = conv_ref.get()
            return Conversation(**{**snapshot.to_dict(), "id": snapshot.id})

        logging.info(f"Created conversation {conv_ref.id} for bot {bot_id}")
        return Conversation(id=conv_ref.id, **conv_data)

    # --------------------------------------------------------------------- #
    # Messages
    # --------------------------------------------------------------------- #
    def add_message(self, conversation_id: str, role: MessageRole, content: str) -> Message:
        message_ref = (
            self._conversations.document(conversation_id)
            .collection(_MESSAGES)
            .document()
        )
        message_ref.set({
            "role": role.value,
            "content": content,
            "created_at": SERVER_TIMESTAMP,
        })
        return Message(id=message_ref.id, conversation_id=conversation_id, role=role, content=content)

    def list_messages(self, conversation_id: str) -> List[Message]:
        """All messages of a conversation, oldest first."""
        stream = (
            self._conversations.document(conversation_id)
            .collection(_MESSAGES)
            .order_by("created_at", direction=firestore.Query.ASCENDING)
            .stream()
        )
        messages = []
        for doc in stream:
            data = doc.to_dict()
            messages.append(
                Message(
                    id=doc.id,
                    conversation_id=conversation_id,
                    role=data.get("role", MessageRole.USER.value),
                    content=data.get("content", ""),
                    created_at=data.get("created_at"),
                )
            )
        return messages
