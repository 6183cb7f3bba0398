"""
FastAPI dependency injection functions.
"""

from functools import lru_cache

from fastapi import Depends
from supabase import Client

from app.config import get_settings
from app.core.database import get_supabase_client
from app.core.llm_provider import create_llm
from app.features.documents.service import DocumentService
from app.features.query.generator import AnswerGenerator
from app.features.query.service import QueryService


def get_db() -> Client:
    """Dependency: get Supabase client."""
    return get_supabase_client()


@lru_cache
def get_answer_generator() -> AnswerGenerator:
    """Dependency: primary + fallback chat models (singleton)."""
    settings = get_settings()
    return AnswerGenerator(
        primary=lambda: create_llm(settings.LLM_MODEL, settings.LLM_MAX_TOKENS),
        fallback=lambda: create_llm(settings.LLM_FALLBACK_MODEL, settings.LLM_FALLBACK_MAX_TOKENS),
    )


def get_document_service(db: Client = Depends(get_db)) -> DocumentService:
    """Dependency: upload pipeline (embeddings model resolved lazily on first use)."""
    return DocumentService(db)


def get_query_service(
    db: Client = Depends(get_db),
    generator: AnswerGenerator = Depends(get_answer_generator),
) -> QueryService:
    return QueryService(db, generator)
