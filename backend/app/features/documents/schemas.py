"""
Documents feature: Schemas for request/response models.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class DocumentStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class UploadResult(BaseModel):
    """Response for a fully indexed upload."""
    model_config = ConfigDict(populate_by_name=True)

    status: str = "success"
    document_id: str = Field(alias="documentId")
    chunks_created: int = Field(alias="chunksCreated")
    message: str


class DocumentStatusResponse(BaseModel):
    """Processing status of a single document."""
    model_config = ConfigDict(populate_by_name=True)

    status: DocumentStatus
    chunks_created: int | None = Field(default=None, alias="chunksCreated")


class CoursesResponse(BaseModel):
    courses: list[str] = []
