"""
Documents feature: Upload pipeline for syllabus PDFs.

Flow: validate → documents row (processing) → Storage → extract text →
chunk → embed sequentially → insert chunks in batches → completed.
Any failure after the row exists leaves the document in `error`.
"""

import logging
import re
from supabase import Client

from app.config import get_settings
from app.core.exceptions import (
    ChunkStorageError,
    DocumentNotFoundError,
    DocumentRecordError,
    InsufficientTextError,
    InvalidUploadError,
)
from app.features.documents.chunking import chunk_text
from app.features.documents.extraction import extract_text_from_pdf
from app.features.documents.schemas import DocumentStatus, DocumentStatusResponse, UploadResult
from app.features.knowledge.embedding import embed_texts

logger = logging.getLogger(__name__)


def storage_path_for(course: str, document_id: str) -> str:
    """Storage key: `<course with whitespace as _>/<document id>.pdf`."""
    folder = re.sub(r"\s+", "_", course.strip())
    return f"{folder}/{document_id}.pdf"


class DocumentService:
    """Indexes syllabus PDFs into `documents` / `chunks` and reports status."""

    def __init__(self, db: Client, embeddings=None):
        self.db = db
        self.embeddings = embeddings
        self.settings = get_settings()

    # ── Validation ───────────────────────────────────────

    def validate_upload(self, filename: str | None, size: int, course: str | None) -> str:
        """Check the upload form fields. Returns the trimmed course name.

        Raises:
            InvalidUploadError: missing file, blank course, non-PDF or oversized file.
        """
        if not filename:
            raise InvalidUploadError("PDF file is required")
        if not course or not course.strip():
            raise InvalidUploadError("Course name is required")
        if not filename.lower().endswith(".pdf"):
            raise InvalidUploadError("Only PDF files are accepted")
        if size > self.settings.UPLOAD_MAX_BYTES:
            limit_mb = self.settings.UPLOAD_MAX_BYTES // (1024 * 1024)
            raise InvalidUploadError(
                f"File size must be under {limit_mb}MB",
                detail=f"Received {size} bytes.",
            )
        return course.strip()

    # ── Pipeline ─────────────────────────────────────────

    def ingest(self, file_bytes: bytes, filename: str, course: str) -> UploadResult:
        """Run the full upload pipeline synchronously.

        Raises:
            DocumentRecordError: the documents row could not be created.
            DocumentParseError / InsufficientTextError: bad PDF (document → error).
            ChunkStorageError: chunking, embedding or chunk insert failed (document → error).
        """
        course = course.strip()
        document_id = self._create_document(course, filename)
        logger.info(f"🚀 Processing document {document_id} ({filename}) for course '{course}'")

        self._store_pdf(document_id, course, file_bytes)

        try:
            text = extract_text_from_pdf(file_bytes)
            char_count = len(text.strip())
            if char_count < self.settings.MIN_DOCUMENT_CHARS:
                raise InsufficientTextError(char_count)
        except Exception:
            self._set_status(document_id, DocumentStatus.ERROR)
            raise

        try:
            chunks = chunk_text(
                text,
                max_tokens=self.settings.CHUNK_MAX_TOKENS,
                overlap=self.settings.CHUNK_OVERLAP_CHARS,
                min_chars=self.settings.CHUNK_MIN_CHARS,
            )
            logger.info(f"✅ Generated {len(chunks)} chunks from {len(text)} characters.")
            vectors = embed_texts(chunks, model=self.embeddings)
            self._insert_chunks(document_id, chunks, vectors)
            self.db.table("documents").update({
                "status": DocumentStatus.COMPLETED.value,
                "chunks_count": len(chunks),
            }).eq("id", document_id).execute()
        except Exception as e:
            logger.error(f"❌ Chunk pipeline failed for {document_id}: {e}")
            self._set_status(document_id, DocumentStatus.ERROR)
            raise ChunkStorageError(detail=str(e)) from e

        logger.info(f"🎉 Document {document_id} completed with {len(chunks)} chunks.")

        return UploadResult(
            document_id=document_id,
            chunks_created=len(chunks),
            message=f"Successfully processed {filename} into {len(chunks)} searchable chunks.",
        )

    def _create_document(self, course: str, filename: str) -> str:
        try:
            res = self.db.table("documents").insert({
                "course_name": course,
                "file_name": filename,
                "status": DocumentStatus.PROCESSING.value,
            }).execute()
        except Exception as e:
            logger.error(f"❌ Document insert failed: {e}")
            raise DocumentRecordError(detail=str(e)) from e
        if not res.data:
            raise DocumentRecordError(detail="Insert returned no row")
        return str(res.data[0]["id"])

    def _store_pdf(self, document_id: str, course: str, file_bytes: bytes) -> None:
        """Upload the original PDF. Indexing does not depend on it, so failures only warn."""
        path = storage_path_for(course, document_id)
        try:
            self.db.storage.from_(self.settings.STORAGE_BUCKET).upload(
                file=file_bytes,
                path=path,
                file_options={"content-type": "application/pdf", "upsert": "true"},
            )
            self.db.table("documents").update({"file_path": path}).eq("id", document_id).execute()
        except Exception as e:
            logger.warning(f"⚠️ Could not store {path} for document {document_id}: {e}")

    def _insert_chunks(self, document_id: str, chunks: list[str], vectors: list[list[float]]) -> None:
        if len(vectors) != len(chunks):
            raise ValueError("Mismatch between number of chunks and generated vectors.")

        rows = [
            {
                "document_id": document_id,
                "content": content,
                "embedding": vector,
                "chunk_index": index,
                "metadata": {"char_count": len(content)},
            }
            for index, (content, vector) in enumerate(zip(chunks, vectors))
        ]
        batch_size = self.settings.CHUNK_INSERT_BATCH_SIZE
        for i in range(0, len(rows), batch_size):
            self.db.table("chunks").insert(rows[i:i + batch_size]).execute()
        logger.info(f"✅ Inserted {len(rows)} chunks into DB.")

    def _set_status(self, document_id: str, status: DocumentStatus) -> None:
        self.db.table("documents").update({"status": status.value}).eq("id", document_id).execute()

    # ── Reads ────────────────────────────────────────────

    def get_status(self, document_id: str | None) -> DocumentStatusResponse:
        if not document_id or not document_id.strip():
            raise InvalidUploadError("Document ID required")
        res = (
            self.db.table("documents")
            .select("status, chunks_count")
            .eq("id", document_id)
            .limit(1)
            .execute()
        )
        if not res.data:
            raise DocumentNotFoundError(document_id)
        row = res.data[0]
        return DocumentStatusResponse(status=row["status"], chunks_created=row.get("chunks_count"))

    def list_courses(self) -> list[str]:
        """Distinct course names that have at least one completed document."""
        try:
            res = (
                self.db.table("documents")
                .select("course_name")
                .eq("status", DocumentStatus.COMPLETED.value)
                .order("course_name")
                .execute()
            )
        except Exception as e:
            logger.error(f"❌ Courses fetch failed: {e}")
            return []
        return sorted({row["course_name"] for row in res.data or []})
