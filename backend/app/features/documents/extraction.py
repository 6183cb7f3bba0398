import logging
import tempfile
import os

from langchain_community.document_loaders import PyPDFLoader

from app.core.exceptions import DocumentParseError

logger = logging.getLogger(__name__)


def extract_text_from_pdf(file_bytes: bytes) -> str:
    """
    Extract the text of every page of a PDF using the Langchain loader.
    Uses a temp file since the loader requires a file path.
    Pages are joined with a blank line so they stay separate paragraphs.
    """
    with tempfile.NamedTemporaryFile(delete=False, suffix=".pdf") as temp_file:
        temp_file.write(file_bytes)
        temp_path = temp_file.name

    try:
        pages = PyPDFLoader(temp_path).load()
    except Exception as e:
        logger.warning(f"⚠️ PDF parse failed: {e}")
        raise DocumentParseError(detail=str(e)) from e
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)

    logger.info(f"✅ Extracted {len(pages)} pages.")
    return "\n\n".join(page.page_content for page in pages)
