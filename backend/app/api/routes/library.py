"""PDF library endpoints: upload a batch of PDFs, list and fetch entries."""

from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from app.api.deps import get_store
from app.config import Settings, get_settings
from app.schemas.responses import ApiResponse, PdfEntryResponse
from app.services.content_store import ContentStore
from app.services.pdf_validator import inspect_pdf, looks_like_pdf, to_source_document
from app.utils.logging_config import get_logger

logger = get_logger("api.library")

router = APIRouter(prefix="/pdf-library", tags=["Library"])

MAX_TITLE_LENGTH = 200


def _entry(row: dict) -> PdfEntryResponse:
    return PdfEntryResponse(
        id=str(row.get("id")),
        title=row.get("title") or "",
        file_sources=row.get("file_sources") or [],
        created_at=row.get("created_at"),
    )


@router.post("", response_model=ApiResponse[PdfEntryResponse])
async def upload_pdfs(
    title: str = Form(..., description="Title of this batch of documents"),
    files: List[UploadFile] = File(..., description="One or more PDF files"),
    settings: Settings = Depends(get_settings),
    store: ContentStore = Depends(get_store),
):
    """Store a batch of PDFs. Quizzes are generated from it on demand."""
    title = title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Please give this batch of PDF documents a title.")
    if len(title) > MAX_TITLE_LENGTH:
        raise HTTPException(status_code=400, detail=f"Title is too long (max {MAX_TITLE_LENGTH} characters).")
    if not files:
        raise HTTPException(status_code=400, detail="Please select one or more PDF files.")

    max_bytes = settings.max_upload_mb * 1024 * 1024
    file_names: List[str] = []
    data_uris: List[str] = []
    for upload in files:
        filename = (upload.filename or "").strip() or "document.pdf"
        if not looks_like_pdf(filename, upload.content_type):
            raise HTTPException(status_code=400, detail=f"{filename} is not a PDF. Please upload PDF files only.")
        content_bytes = await upload.read()
        if len(content_bytes) > max_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"{filename} is too large. Maximum size is {settings.max_upload_mb}MB.",
            )
        try:
            info = inspect_pdf(content_bytes, filename, max_pages=settings.max_pdf_pages)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        logger.info("PDF accepted", filename=filename, pages=info.page_count, size=info.size_bytes)
        file_names.append(filename)
        data_uris.append(to_source_document(content_bytes, filename).to_data_uri())

    row = store.add_pdf_batch(title, file_names, data_uris)
    return ApiResponse(
        data=_entry(row),
        message=f'"{title}" was added to the library. Quizzes are generated on demand.',
    )


@router.get("", response_model=ApiResponse[List[PdfEntryResponse]])
async def list_pdfs(store: ContentStore = Depends(get_store)):
    """List library entries, newest first."""
    return ApiResponse(data=[_entry(row) for row in store.list_pdf_entries()])


@router.get("/{entry_id}", response_model=ApiResponse[PdfEntryResponse])
async def get_pdf(entry_id: str, store: ContentStore = Depends(get_store)):
    row = store.get_pdf_entry(entry_id)
    if not row:
        raise HTTPException(status_code=404, detail="PDF entry not found.")
    return ApiResponse(data=_entry(row))
