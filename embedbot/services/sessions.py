import logging

from embedbot.models.domain import Conversation

from .firestore import FirestoreRepository

logger = logging.getLogger(__name__)


class SessionResolver:
    """Maps a (bot, session) pair to its single Conversation.

    The session id is an opaque token chosen by the widget; it is not
    validated. Uniqueness per pair is enforced by the repository.
    """

    def __init__(self, repo: FirestoreRepository) -> None:
        self.repo = repo

    def resolve(self, bot_id: str, session_id: str) -> Conversation:
        conversation = self.repo.get_or_create_conversation(bot_id, session_id)
        logger.debug("Session resolved to conversation %s", conversation.id)
        return conversation
