"""
Query feature: Orchestrates cache → embed → vector search → LLM.
"""

import logging
import time
from supabase import Client

from app.config import get_settings
from app.core.exceptions import InvalidQueryError, SearchFailedError
from app.features.knowledge.embedding import aembed_text
from app.features.knowledge.service import KnowledgeService
from app.features.query.cache import QueryCache, hash_question
from app.features.query.generator import AnswerGenerator
from app.features.query.schemas import AnswerMode, QueryResult

logger = logging.getLogger(__name__)

NO_MATCHES_MESSAGE = (
    "No relevant content found in the syllabus for this course. "
    "Please make sure the syllabus has been uploaded."
)
SOURCE_PREVIEW_CHARS = 100


def format_source(match: dict) -> str:
    """Citation line shown under the answer, e.g. `[Chunk 3] (similarity: 81.2%) ...`."""
    content = match.get("content") or ""
    similarity = float(match.get("similarity") or 0) * 100
    return (
        f"[Chunk {match.get('chunk_index', 0) + 1}] "
        f"(similarity: {similarity:.1f}%) {content[:SOURCE_PREVIEW_CHARS]}..."
    )


def parse_mode(mode: str | None) -> AnswerMode:
    try:
        return AnswerMode(mode)
    except ValueError:
        raise InvalidQueryError(
            "Invalid mode. Use: simple, exam, or summary",
            detail=f"Got {mode!r}.",
        )


class QueryService:
    """Answers a student's question about one course's syllabus."""

    def __init__(self, db: Client, generator: AnswerGenerator, embeddings=None):
        self.db = db
        self.generator = generator
        self.embeddings = embeddings
        self.cache = QueryCache(db)
        self.knowledge = KnowledgeService(db)
        self.settings = get_settings()

    async def answer(self, question: str | None, course: str | None, mode: str | None) -> QueryResult:
        """Answer from cache or from retrieved syllabus context.

        Raises:
            InvalidQueryError: blank question/course or unknown mode.
            SearchFailedError: the similarity-search RPC failed.
        """
        started = time.perf_counter()

        if not question or not question.strip():
            raise InvalidQueryError("Question is required")
        if not course or not course.strip():
            raise InvalidQueryError("Course selection is required")
        answer_mode = parse_mode(mode)
        course = course.strip()

        # 1. Cache (a failed lookup counts as a miss)
        q_hash = hash_question(question, course, answer_mode.value)
        try:
            cached = self.cache.get(q_hash)
        except Exception as e:
            logger.warning(f"⚠️ Cache lookup failed, treating as miss: {e}")
            cached = None
        if cached:
            logger.info(f"💾 Cache hit for course '{course}' ({answer_mode.value})")
            return QueryResult(
                answer=cached.answer,
                sources=cached.sources,
                cached=True,
                response_time=_elapsed_ms(started),
            )

        # 2. Retrieve
        try:
            query_vector = await aembed_text(question, model=self.embeddings)
            matches = self.knowledge.match_chunks(query_vector, course, top_k=self.settings.MATCH_COUNT)
        except Exception as e:
            logger.error(f"❌ Vector search failed for course '{course}': {e}")
            raise SearchFailedError(detail=str(e)) from e

        if not matches:
            logger.info(f"🔍 No matches for course '{course}'")
            return QueryResult(answer=NO_MATCHES_MESSAGE, response_time=_elapsed_ms(started))

        # 3. Generate
        context_chunks = [m["content"] for m in matches]
        sources = [format_source(m) for m in matches]
        answer = await self.generator.generate(question, context_chunks, answer_mode)

        # 4. Cache the fresh answer
        try:
            self.cache.put(q_hash, question, course, answer_mode.value, answer, sources)
        except Exception as e:
            logger.warning(f"⚠️ Could not cache answer for course '{course}': {e}")

        return QueryResult(answer=answer, sources=sources, response_time=_elapsed_ms(started))

    def record_analytics(
        self,
        course: str,
        question: str,
        mode: str,
        cached: bool,
        response_time_ms: int,
    ) -> None:
        """Append one analytics row. Best-effort: failures are logged, never raised."""
        try:
            self.db.table("analytics").insert({
                "course_name": course,
                "question": question,
                "mode": mode,
                "cached": cached,
                "response_time_ms": response_time_ms,
            }).execute()
        except Exception as e:
            logger.warning(f"⚠️ Analytics logging failed: {e}")


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)
