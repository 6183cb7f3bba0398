"""
Knowledge feature: Embedding utility functions.
Wraps the LLM provider's embedding model for use across the app.
"""

import logging
import time

from app.config import get_settings
from app.core.llm_provider import create_embeddings

logger = logging.getLogger(__name__)

# Singleton embedding model (lazy init)
_embeddings_model = None


def get_embeddings_model():
    """Get or create the shared embeddings model instance."""
    global _embeddings_model
    if _embeddings_model is None:
        _embeddings_model = create_embeddings()
    return _embeddings_model


def _clean(text: str) -> str:
    return text.replace("\n", " ").strip()


def embed_text(text: str, model=None) -> list[float]:
    """Generate embedding vector for a single text string.

    Args:
        text: The text to embed.
        model: Embeddings instance; defaults to the shared provider model.

    Returns:
        A list of floats, truncated to EMBEDDING_DIMENSIONS.
    """
    settings = get_settings()
    model = model or get_embeddings_model()
    vector = model.embed_query(_clean(text))
    return vector[:settings.EMBEDDING_DIMENSIONS]


async def aembed_text(text: str, model=None) -> list[float]:
    """Async variant of embed_text for the request path."""
    settings = get_settings()
    model = model or get_embeddings_model()
    vector = await model.aembed_query(_clean(text))
    return vector[:settings.EMBEDDING_DIMENSIONS]


def embed_texts(
    texts: list[str],
    model=None,
    delay: float | None = None,
) -> list[list[float]]:
    """Generate embedding vectors for multiple texts, one call at a time.

    Calls are sequential with a fixed pause in between to stay inside
    the provider's rate limit; there is no batching.

    Args:
        texts: List of text strings to embed.
        model: Embeddings instance; defaults to the shared provider model.
        delay: Seconds to sleep between calls; defaults to EMBEDDING_DELAY_SECONDS.

    Returns:
        List of embedding vectors, same order as `texts`.
    """
    settings = get_settings()
    delay = settings.EMBEDDING_DELAY_SECONDS if delay is None else delay
    vectors = []
    for i, text in enumerate(texts):
        if i and delay > 0:
            time.sleep(delay)
        vectors.append(embed_text(text, model=model))
        if (i + 1) % 25 == 0:
            logger.info(f"🔄 Embedded {i + 1}/{len(texts)} chunks...")
    return vectors
