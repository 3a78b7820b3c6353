"""General-knowledge flash facts endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_pipeline
from app.schemas.requests import FlashFactsRequest
from app.schemas.responses import ApiResponse, FlashFactsResponse
from app.services.errors import GenerationUnavailableError, InvalidRequestError
from app.services.quiz_pipeline import QuizGenerationPipeline

router = APIRouter(prefix="/flash-facts", tags=["Generation"])


@router.post("", response_model=ApiResponse[FlashFactsResponse])
async def generate_flash_facts_endpoint(
    body: FlashFactsRequest,
    pipeline: QuizGenerationPipeline = Depends(get_pipeline),
):
    """Generate 3-5 flash facts. No usable fact is not an error: `flash_facts` is null."""
    try:
        result = await pipeline.generate_flash_facts(body.topic)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return ApiResponse(
        data=FlashFactsResponse(topic=result.topic, flash_facts=result.flash_facts),
        message=None if result.flash_facts else "No flash facts are available for this topic right now.",
    )
