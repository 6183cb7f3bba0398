"""
Courses feature: Courses that have an indexed syllabus.
"""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_document_service
from app.features.documents.schemas import CoursesResponse
from app.features.documents.service import DocumentService

router = APIRouter()


@router.get("", response_model=CoursesResponse)
async def list_courses(service: DocumentService = Depends(get_document_service)):
    """Course names with at least one completed document, for the course selector."""
    return CoursesResponse(courses=service.list_courses())
