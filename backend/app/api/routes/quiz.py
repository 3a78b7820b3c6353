"""Quiz generation endpoints: from a PDF library entry or from a general-knowledge topic."""

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_pipeline, get_store
from app.schemas.quiz import GeneratedQuizResult, SourceDocument
from app.schemas.requests import GenerateQuizFromPdfRequest, GenerateTopicQuizRequest
from app.schemas.responses import ApiResponse, QuizResponse
from app.services.content_store import ContentStore
from app.services.errors import GenerationUnavailableError, InvalidRequestError, NoUsableContentError
from app.services.quiz_pipeline import QuizGenerationPipeline
from app.utils.logging_config import get_logger

logger = get_logger("api.quiz")

router = APIRouter(prefix="/generate-quiz", tags=["Generation"])


def _response(result: GeneratedQuizResult, requested: int, source_title: str) -> ApiResponse[QuizResponse]:
    return ApiResponse(
        data=QuizResponse(
            quiz=result.quiz,
            flash_facts=result.flash_facts,
            requested_count=requested,
            count=len(result.quiz),
            source_title=source_title,
        ),
        message=None if result.quiz else "No valid questions could be generated. Try another source or fewer questions.",
    )


@router.post("/pdf/{entry_id}", response_model=ApiResponse[QuizResponse])
async def generate_quiz_from_pdf(
    entry_id: str,
    body: GenerateQuizFromPdfRequest,
    pipeline: QuizGenerationPipeline = Depends(get_pipeline),
    store: ContentStore = Depends(get_store),
):
    """Generate a quiz and flash facts from every document of a library entry."""
    entry = store.get_pdf_entry(entry_id, with_documents=True)
    if not entry:
        raise HTTPException(status_code=404, detail="PDF entry not found.")

    names = entry.get("file_sources") or []
    try:
        documents = [
            SourceDocument.from_data_uri(uri, name=names[i] if i < len(names) else f"document-{i + 1}.pdf")
            for i, uri in enumerate(entry.get("pdf_data_uris") or [])
        ]
    except ValueError as e:
        logger.warning("Stored PDF could not be decoded", entry_id=entry_id, error=str(e))
        raise HTTPException(status_code=500, detail="Stored PDF data is corrupted.")

    try:
        result = await pipeline.generate_quiz_from_documents(documents, body.num_questions)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoUsableContentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except GenerationUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    title = entry.get("title") or "PDF quiz"
    logger.info("PDF quiz generated", entry_id=entry_id, count=len(result.quiz), requested=body.num_questions)
    return _response(result, body.num_questions, title)


@router.post("/topic", response_model=ApiResponse[QuizResponse])
async def generate_topic_quiz(
    body: GenerateTopicQuizRequest,
    pipeline: QuizGenerationPipeline = Depends(get_pipeline),
):
    """Generate a French general-knowledge quiz on a topic."""
    try:
        result = await pipeline.generate_quiz_from_topic(body.topic, body.num_questions)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoUsableContentError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except GenerationUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return _response(result, body.num_questions, body.topic.strip())
