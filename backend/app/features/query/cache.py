"""
Query feature: Answer cache in the `query_cache` table.

Keyed by a SHA-256 of the normalized (question, course, mode) triple, so
case and whitespace variants of the same question share one entry.
"""

import hashlib
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from supabase import Client

logger = logging.getLogger(__name__)


def _normalize(value: str) -> str:
    return " ".join(value.lower().split())


def hash_question(question: str, course: str, mode: str) -> str:
    """Deterministic cache key for a question + course + mode combination."""
    normalized = f"{_normalize(question)}|{_normalize(course)}|{mode}"
    return hashlib.sha256(normalized.encode("utf-8")).hexdigest()


@dataclass
class CachedAnswer:
    answer: str
    sources: list[str] = field(default_factory=list)


class QueryCache:
    """Point reads and upserts on `query_cache`."""

    def __init__(self, db: Client):
        self.db = db

    def get(self, question_hash: str) -> CachedAnswer | None:
        """Cached answer for the hash, or None on a miss.

        A hit bumps `hit_count` and refreshes `updated_at`.
        """
        res = (
            self.db.table("query_cache")
            .select("answer, sources, hit_count")
            .eq("question_hash", question_hash)
            .limit(1)
            .execute()
        )
        if not res.data:
            return None

        row = res.data[0]
        try:
            self.db.table("query_cache").update({
                "hit_count": (row.get("hit_count") or 0) + 1,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }).eq("question_hash", question_hash).execute()
        except Exception as e:
            logger.warning(f"⚠️ Could not bump hit_count: {e}")

        return CachedAnswer(answer=row["answer"], sources=row.get("sources") or [])

    def put(
        self,
        question_hash: str,
        question: str,
        course: str,
        mode: str,
        answer: str,
        sources: list[str],
    ) -> None:
        self.db.table("query_cache").upsert(
            {
                "question_hash": question_hash,
                "question": question,
                "course_name": course,
                "mode": mode,
                "answer": answer,
                "sources": sources,
                "hit_count": 1,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
            on_conflict="question_hash",
        ).execute()
