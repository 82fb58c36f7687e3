import logging
from typing import List

from fastapi import APIRouter, Depends, Path

from embedbot.api.deps import get_chat_service
from embedbot.errors import ChatbotError
from embedbot.models.domain import BotProfile, ErrorResponse, TranscriptMessage
from embedbot.services.chat import ChatService

router = APIRouter(prefix="/bots", tags=["bots"], responses={404: {"model": ErrorResponse}})


@router.get("/{bot_id}/profile", response_model=BotProfile)
async def get_bot_profile(
    bot_id: str = Path(..., title="The ID of the bot"),
    chat_service: ChatService = Depends(get_chat_service),
):
    """Name, company and greeting the widget shows before the first message."""
    try:
        return chat_service.get_profile(bot_id)
    except ChatbotError:
        raise
    except Exception as e:
        logging.error(f"Error loading profile for bot {bot_id}: {e}", exc_info=True)
        raise ChatbotError() from e


@router.get("/{bot_id}/sessions/{session_id}/messages", response_model=List[TranscriptMessage])
async def get_session_messages(
    bot_id: str = Path(..., title="The ID of the bot"),
    session_id: str = Path(..., title="The widget session token"),
    chat_service: ChatService = Depends(get_chat_service),
):
    try:
        return chat_service.get_transcript(bot_id, session_id)
    except ChatbotError:
        raise
    except Exception as e:
        logging.error(f"Error reading transcript for bot {bot_id}: {e}", exc_info=True)
        raise ChatbotError() from e
