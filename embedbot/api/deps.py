import logging
from functools import lru_cache

from fastapi import Depends
from google.cloud import firestore

from embedbot.config import get_settings
from embedbot.services.chat import ChatService
from embedbot.services.firestore import FirestoreRepository
from embedbot.services.knowledge import FirstNKnowledgeRetriever, KnowledgeRetriever
from embedbot.services.llm_service import GenerationClient
from embedbot.services.sessions import SessionResolver

settings = get_settings()  # Get settings at module level


@lru_cache()
def get_firestore_client() -> firestore.Client:
    logging.info("Initializing Firestore client...")
    return firestore.Client(project=settings.gcp_project_id, database=settings.firestore_database)


@lru_cache()
def get_repo() -> FirestoreRepository:
    """Provides the FirestoreRepository shared by all requests."""
    return FirestoreRepository(get_firestore_client())


@lru_cache()
def get_generation_client() -> GenerationClient:
    return GenerationClient(model_id=settings.generation_model)


def get_retriever(repo: FirestoreRepository = Depends(get_repo)) -> KnowledgeRetriever:
    return FirstNKnowledgeRetriever(repo, limit=settings.knowledge_limit)


def get_chat_service(
    repo: FirestoreRepository = Depends(get_repo),
    retriever: KnowledgeRetriever = Depends(get_retriever),
    generator: GenerationClient = Depends(get_generation_client),
) -> ChatService:
    """Provides a ChatService wired to the shared repository and Gemini client."""
    return ChatService(
        repo=repo,
        sessions=SessionResolver(repo),
        retriever=retriever,
        generator=generator,
    )
