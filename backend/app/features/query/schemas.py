"""
Query feature: Schemas for request/response models.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class AnswerMode(str, Enum):
    """How the answer is formatted."""
    SIMPLE = "simple"    # plain explanation for a first-year student
    EXAM = "exam"        # structured, exam-ready answer
    SUMMARY = "summary"  # at most five bullet points


class QueryRequest(BaseModel):
    """Student question. Fields are validated by the service to return 400s, not 422s."""
    question: str | None = None
    course: str | None = None
    mode: str | None = AnswerMode.SIMPLE.value


class QueryResult(BaseModel):
    """Answer returned to the chat UI."""
    model_config = ConfigDict(populate_by_name=True)

    answer: str
    sources: list[str] = []
    cached: bool = False
    response_time: int = Field(default=0, alias="responseTime")  # milliseconds
