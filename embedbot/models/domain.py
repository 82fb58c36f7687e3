"""Pydantic models shared across the service."""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CommunicationStyle(str, Enum):
    FORMAL = "formal"
    FRIENDLY = "friendly"
    HUMOROUS = "humorous"
    EXPERT = "expert"


class KnowledgeSource(str, Enum):
    FILE = "file"
    TEXT = "text"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


# --- Stored records ---

class Bot(BaseModel):
    id: str
    user_id: Optional[str] = None
    name: str
    company_name: str
    industry: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    # Kept as a plain string: values outside CommunicationStyle must not fail.
    style: Optional[str] = CommunicationStyle.FRIENDLY.value
    custom_prompt: Optional[str] = None
    language: Optional[str] = "ru"
    is_active: bool = True


class KnowledgeItem(BaseModel):
    id: str
    bot_id: str
    content: str
    source_type: KnowledgeSource = KnowledgeSource.TEXT
    source_name: Optional[str] = None


class Conversation(BaseModel):
    id: str
    bot_id: str
    session_id: str
    created_at: Optional[datetime.datetime] = None


class Message(BaseModel):
    id: Optional[str] = None
    conversation_id: str
    role: MessageRole
    content: str
    created_at: Optional[datetime.datetime] = None


# --- Wire models ---

class ChatTurnRequest(BaseModel):
    """Body of ``POST /chat``.

    Every field is optional at parse time; presence is checked by the turn
    handler so a missing field is reported as a 400 with the usual error body.
    """

    model_config = ConfigDict(populate_by_name=True)

    bot_id: Optional[str] = Field(default=None, alias="botId")
    message: Optional[str] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    # Caller-supplied provider credential; never stored, never logged.
    api_key: Optional[str] = Field(default=None, alias="apiKey", repr=False)


class ChatTurnResponse(BaseModel):
    answer: str


class ErrorResponse(BaseModel):
    error: str


class BotProfile(BaseModel):
    id: str
    name: str
    company_name: str
    greeting: str


class TranscriptMessage(BaseModel):
    role: MessageRole
    content: str
    created_at: Optional[datetime.datetime] = None
