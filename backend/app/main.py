"""
Syllabus RAG - FastAPI Application Entry Point.

Feature-based modular architecture:
  Each feature in app/features/ has its own router, service, and schemas.
  documents → upload & index PDFs, query → answer questions, courses → selector data.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.core.logging_config import configure_logging

# ── Feature Routers ──────────────────────────────────────
from app.features.documents.router import router as documents_router
from app.features.query.router import router as query_router
from app.features.courses.router import router as courses_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup & shutdown."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    logger.info(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} starting...")
    logger.info(f"🤖 LLM Provider: {settings.LLM_PROVIDER} ({settings.LLM_MODEL}, fallback {settings.LLM_FALLBACK_MODEL})")
    logger.info(f"🧮 Embeddings: {settings.EMBEDDING_PROVIDER} ({settings.EMBEDDING_MODEL}, {settings.EMBEDDING_DIMENSIONS} dims)")
    logger.info(f"🔗 Supabase: {settings.SUPABASE_URL[:40]}...")
    yield
    logger.info("👋 Shutting down...")


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Course syllabus Q&A over uploaded PDFs",
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Register Feature Routers ─────────────────────────
    app.include_router(documents_router, prefix="/api/upload", tags=["Documents"])
    app.include_router(query_router, prefix="/api/query", tags=["Query"])
    app.include_router(courses_router, prefix="/api/courses", tags=["Courses"])

    # ── Health Check ─────────────────────────────────────
    @app.get("/health", tags=["System"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()
