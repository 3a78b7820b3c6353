"""PDF upload checks (pypdf). Documents are stored and sent to the AI as-is; no text is extracted here."""

from dataclasses import dataclass
from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from app.schemas.quiz import SourceDocument
from app.utils.logging_config import get_logger

logger = get_logger("pdf")

PDF_MIME_TYPE = "application/pdf"


@dataclass(frozen=True)
class PdfInfo:
    filename: str
    page_count: int
    size_bytes: int


def looks_like_pdf(filename: str, content_type: str | None) -> bool:
    return (content_type or "").lower() == PDF_MIME_TYPE or filename.lower().endswith(".pdf")


def inspect_pdf(file_content: bytes, filename: str = "document.pdf", max_pages: int = 300) -> PdfInfo:
    """
    Open PDF bytes with pypdf and check they are usable.
    Raises ValueError with a user-facing message otherwise.
    """
    if not file_content:
        raise ValueError(f"{filename} is empty.")
    try:
        reader = PdfReader(BytesIO(file_content))
    except Exception as e:
        logger.warning("PDF open failed", filename=filename, error=str(e))
        raise ValueError(f"Could not open {filename}: {e}") from e
    if reader.is_encrypted:
        raise ValueError(f"{filename} is encrypted. Please upload an unprotected PDF.")
    try:
        page_count = len(reader.pages)
    except PdfReadError as e:
        raise ValueError(f"Could not read the pages of {filename}: {e}") from e

    if page_count == 0:
        raise ValueError(f"{filename} appears to be empty.")
    if page_count > max_pages:
        raise ValueError(f"{filename} has {page_count} pages. Maximum is {max_pages}.")

    return PdfInfo(filename=filename, page_count=page_count, size_bytes=len(file_content))


def to_source_document(file_content: bytes, filename: str) -> SourceDocument:
    return SourceDocument(data=file_content, mime_type=PDF_MIME_TYPE, name=filename)
