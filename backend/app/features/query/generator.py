"""
Query feature: Answer generation with a single fallback model.

Primary model → fallback model → fixed apology. Never raises.
"""

import logging
from typing import Callable

from langchain_core.language_models import BaseChatModel

from app.features.query.prompts import build_messages
from app.features.query.schemas import AnswerMode

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "I'm sorry, the AI service is temporarily unavailable. Please try again in a moment."
)


def _extract_text(content) -> str:
    """Flatten LangChain message content (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for item in content:
            if isinstance(item, dict) and item.get("type", "text") == "text" and "text" in item:
                parts.append(item["text"])
            elif isinstance(item, str):
                parts.append(item)
        return "".join(parts)
    return str(content)


class AnswerGenerator:
    """Wraps the primary and fallback chat models.

    Models are passed as factories so a provider misconfiguration surfaces
    on first use and is handled like any other model failure.
    """

    def __init__(
        self,
        primary: Callable[[], BaseChatModel],
        fallback: Callable[[], BaseChatModel],
    ):
        self._primary_factory = primary
        self._fallback_factory = fallback

    async def _invoke(self, factory: Callable[[], BaseChatModel], messages) -> str:
        llm = factory()
        response = await llm.ainvoke(messages)
        text = _extract_text(response.content).strip()
        if not text:
            raise ValueError("Model returned an empty answer")
        return text

    async def generate(
        self,
        question: str,
        context_chunks: list[str],
        mode: AnswerMode = AnswerMode.SIMPLE,
    ) -> str:
        messages = build_messages(question, context_chunks, mode)

        try:
            return await self._invoke(self._primary_factory, messages)
        except Exception as e:
            logger.warning(f"⚠️ Primary LLM failed, trying fallback: {e}")

        try:
            return await self._invoke(self._fallback_factory, messages)
        except Exception as e:
            logger.error(f"❌ Fallback LLM also failed: {e}")
            return UNAVAILABLE_MESSAGE
