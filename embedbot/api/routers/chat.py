import logging

from fastapi import APIRouter, Depends

from embedbot.api.deps import get_chat_service
from embedbot.errors import ChatbotError
from embedbot.models.domain import ChatTurnRequest, ChatTurnResponse, ErrorResponse
from embedbot.services.chat import ChatService

router = APIRouter(tags=["chat"])


@router.post(
    "/chat",
    response_model=ChatTurnResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def post_chat_turn(
    body: ChatTurnRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """Answers one widget message and records both sides of the exchange."""
    try:
        return await chat_service.handle_turn(body)
    except ChatbotError:
        raise
    except Exception as e:
        logging.error(f"Error processing chat turn for bot {body.bot_id}: {e}", exc_info=True)
        raise ChatbotError() from e
