"""
Knowledge feature: Service layer for vector-based syllabus retrieval.
Similarity search runs in Postgres (pgvector) behind a Supabase RPC.
"""

import logging
from supabase import Client

logger = logging.getLogger(__name__)


class KnowledgeService:
    """Vector search operations using pgvector."""

    def __init__(self, db: Client):
        self.db = db

    def match_chunks(
        self,
        query_vector: list[float],
        course: str,
        top_k: int = 5,
    ) -> list[dict]:
        """Top-k syllabus chunks for a course by cosine similarity.

        Args:
            query_vector: Embedding of the student's question.
            course: Only chunks of this course's completed documents are searched.
            top_k: Number of results to return.

        Returns:
            List of `{content, chunk_index, similarity}` sorted by relevance.
        """
        result = self.db.rpc(
            "match_chunks",
            {
                "query_embedding": query_vector,
                "match_count": top_k,
                "filter_course": course,
            },
        ).execute()

        return result.data if result.data else []
