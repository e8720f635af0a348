"""
Resume upload parser: PDF, DOCX and plain-text extraction with validation.
Used by the resume wizard to pre-fill sections from an uploaded file.
"""
import io
import zipfile

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError
from docx import Document as DocxDocument
from docx.opc.exceptions import PackageNotFoundError

from talencor.config import get_settings
from talencor.utils.logger import get_logger

logger = get_logger(__name__)

# Magic bytes for PDF and DOCX
PDF_SIGNATURE = b"%PDF"
DOCX_SIGNATURE = b"PK"  # ZIP-based format
ALLOWED_PDF = "application/pdf"
ALLOWED_DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_TEXT = ("text/plain", "text/markdown")
TEXT_EXTENSIONS = (".txt", ".md")


class FileValidationError(Exception):
    """Raised when file type or size is invalid."""

    pass


def _read_pdf(content: bytes) -> str:
    """Extract text from PDF bytes."""
    reader = PdfReader(io.BytesIO(content))
    parts = []
    for page in reader.pages:
        text = page.extract_text()
        if text:
            parts.append(text)
    return "\n".join(parts).strip()


def _read_docx(content: bytes) -> str:
    """Extract text from DOCX bytes."""
    doc = DocxDocument(io.BytesIO(content))
    return "\n".join(p.text for p in doc.paragraphs if p.text).strip()


def _read_text(content: bytes) -> str:
    try:
        return content.decode("utf-8").strip()
    except UnicodeDecodeError:
        return content.decode("latin-1").strip()


def _is_text(content: bytes, content_type: str | None, filename: str | None) -> bool:
    if content_type and content_type.split(";")[0].strip() in ALLOWED_TEXT:
        return True
    if filename and filename.lower().endswith(TEXT_EXTENSIONS):
        return True
    return False


def detect_format(content: bytes, content_type: str | None, filename: str | None) -> str:
    """
    Validate size and type (magic bytes first) and return "pdf", "docx" or "text".
    Raises FileValidationError if invalid.
    """
    settings = get_settings()
    if len(content) > settings.resume_max_size_bytes:
        raise FileValidationError(
            f"File too large. Maximum size is {settings.resume_max_size_mb}MB."
        )
    if len(content) < 10:
        raise FileValidationError("File is too small or empty.")

    if content.startswith(PDF_SIGNATURE):
        if content_type and content_type not in (ALLOWED_PDF, "application/octet-stream"):
            logger.warning("Content-Type mismatch for PDF", extra={"content_type": content_type})
        return "pdf"
    if content[:2] == DOCX_SIGNATURE and b"word/document" in content[:5000]:
        if content_type and content_type not in (ALLOWED_DOCX, "application/octet-stream"):
            logger.warning("Content-Type mismatch for DOCX", extra={"content_type": content_type})
        return "docx"
    if _is_text(content, content_type, filename) and b"\x00" not in content[:1024]:
        return "text"
    raise FileValidationError("Invalid file type. Only PDF, DOCX and TXT are allowed.")


def extract_text(content: bytes, content_type: str | None, filename: str | None) -> str:
    """
    Validate and extract raw text. Raises FileValidationError on invalid or unreadable input.
    """
    fmt = detect_format(content, content_type, filename)
    try:
        if fmt == "pdf":
            text = _read_pdf(content)
        elif fmt == "docx":
            text = _read_docx(content)
        else:
            text = _read_text(content)
    except (PdfReadError, zipfile.BadZipFile, PackageNotFoundError, ValueError, KeyError) as e:
        logger.warning("Resume text extraction failed", extra={"format": fmt, "error": str(e)[:200]})
        raise FileValidationError("Could not read the uploaded file.") from e
    if not text:
        raise FileValidationError("No readable text found in the uploaded file.")
    return text
