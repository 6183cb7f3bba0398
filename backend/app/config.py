"""
Application configuration using Pydantic Settings.
All config is loaded from environment variables / .env file.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "syllabus-rag"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"  # comma-separated

    # ── Supabase ─────────────────────────────────────────
    SUPABASE_URL: str
    SUPABASE_SERVICE_KEY: str  # service_role key, server-side only
    STORAGE_BUCKET: str = "syllabus-pdfs"

    # ── LLM (Provider-Agnostic) ──────────────────────────
    LLM_PROVIDER: str = "gemini"  # gemini | openai | groq
    LLM_MODEL: str = "gemini-2.0-flash"
    LLM_FALLBACK_MODEL: str = "gemini-2.0-flash-lite"
    LLM_API_KEY: str = ""
    LLM_TEMPERATURE: float = 0.3
    LLM_MAX_TOKENS: int = 800
    LLM_FALLBACK_MAX_TOKENS: int = 500

    # ── Embedding ────────────────────────────────────────
    EMBEDDING_PROVIDER: str = "gemini"
    EMBEDDING_MODEL: str = "gemini-embedding-001"
    EMBEDDING_DIMENSIONS: int = 768
    EMBEDDING_DELAY_SECONDS: float = 0.1  # pause between sequential embed calls

    # ── Upload pipeline ──────────────────────────────────
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024
    MIN_DOCUMENT_CHARS: int = 100
    CHUNK_MAX_TOKENS: int = 200  # ~4 chars per token
    CHUNK_OVERLAP_CHARS: int = 50
    CHUNK_MIN_CHARS: int = 50
    CHUNK_INSERT_BATCH_SIZE: int = 20

    # ── Retrieval ────────────────────────────────────────
    MATCH_COUNT: int = 5

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (singleton)."""
    return Settings()
