"""
Custom exception classes for unified error handling.
"""

from fastapi import HTTPException, status


class AppBaseError(Exception):
    """Base exception for all application errors."""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


# ── Validation (400) ─────────────────────────────────────

class InvalidUploadError(AppBaseError):
    """Raised when the uploaded file or course field is missing or invalid."""


class InvalidQueryError(AppBaseError):
    """Raised when question, course or mode fails validation."""


class DocumentParseError(AppBaseError):
    """Raised when the PDF cannot be parsed."""
    def __init__(self, detail: str | None = None):
        super().__init__(
            message="Failed to parse PDF. Ensure it contains selectable text.",
            detail=detail,
        )


class InsufficientTextError(AppBaseError):
    """Raised when a PDF yields too little text to index."""
    def __init__(self, char_count: int):
        super().__init__(
            message="PDF contains insufficient text content.",
            detail=f"Only {char_count} characters of text were extracted.",
        )


# ── Lookup (404) ─────────────────────────────────────────

class DocumentNotFoundError(AppBaseError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, document_id: str):
        super().__init__(message="Document not found", detail=f"id={document_id}")


# ── Server side (500) ────────────────────────────────────

class DocumentRecordError(AppBaseError):
    """Raised when the documents row cannot be created."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str | None = None):
        super().__init__(message="Failed to create document record", detail=detail)


class ChunkStorageError(AppBaseError):
    """Raised when chunk embedding or persistence fails mid-pipeline."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str | None = None):
        super().__init__(message="Failed to store document chunks", detail=detail)


class SearchFailedError(AppBaseError):
    """Raised when the vector search RPC fails."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str | None = None):
        super().__init__(message="Failed to search syllabus content", detail=detail)


# ── Utility: convert to HTTPException ────────────────────

def app_error_to_http(error: AppBaseError, status_code: int | None = None) -> HTTPException:
    """Convert an AppBaseError to an HTTPException with consistent JSON body."""
    return HTTPException(
        status_code=status_code or error.status_code,
        detail={
            "error": error.message,
            "detail": error.detail,
            "type": type(error).__name__,
        },
    )
