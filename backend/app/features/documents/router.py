"""
Documents feature: Admin upload and processing status routes.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form, Query
from fastapi.concurrency import run_in_threadpool

from app.core.dependencies import get_document_service
from app.core.exceptions import AppBaseError, app_error_to_http
from app.features.documents.schemas import DocumentStatusResponse, UploadResult
from app.features.documents.service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=UploadResult)
async def upload_document(
    file: UploadFile | None = File(None),
    course: str | None = Form(None),
    service: DocumentService = Depends(get_document_service),
):
    """
    Upload a syllabus PDF and index it for a course.
    - Creates a `documents` row in `processing` state.
    - Stores the PDF in Supabase Storage.
    - Extracts, chunks and embeds the text, then marks the document `completed`.
    """
    try:
        if file and file.size is not None:
            # Reject oversized uploads before buffering them
            service.validate_upload(file.filename, file.size, course)
        file_bytes = await file.read() if file else b""
        course_name = service.validate_upload(
            file.filename if file else None, len(file_bytes), course
        )
        # Sequential embedding sleeps between calls; keep it off the event loop
        return await run_in_threadpool(service.ingest, file_bytes, file.filename, course_name)
    except AppBaseError as e:
        raise app_error_to_http(e)
    except Exception as e:
        logger.error(f"Upload failed: {str(e)}")
        raise HTTPException(status_code=500, detail="Internal server error during upload.")


@router.get("/status", response_model=DocumentStatusResponse)
async def get_upload_status(
    id: str | None = Query(None, description="Document ID returned by the upload"),
    service: DocumentService = Depends(get_document_service),
):
    """Processing status and chunk count of an uploaded document."""
    try:
        return service.get_status(id)
    except AppBaseError as e:
        raise app_error_to_http(e)
