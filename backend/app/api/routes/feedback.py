"""Educational feedback endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_generation_client
from app.schemas.requests import FeedbackRequest
from app.schemas.responses import ApiResponse, FeedbackResponse
from app.services.ai_service import GenerationClient
from app.services.errors import GenerationUnavailableError
from app.services.feedback_service import provide_educational_feedback

router = APIRouter(prefix="/feedback", tags=["Feedback"])


@router.post("", response_model=ApiResponse[FeedbackResponse])
async def feedback_endpoint(
    body: FeedbackRequest,
    client: GenerationClient = Depends(get_generation_client),
):
    """Explain, in French, why an answer was wrong and what to review."""
    context = body.context.strip() or (
        f'The user was asked: "{body.question}". They answered "{body.user_answer}", '
        f'but the correct answer was "{body.correct_answer}".'
    )
    try:
        feedback = await provide_educational_feedback(
            client, body.question, body.user_answer, body.correct_answer, context
        )
    except GenerationUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return ApiResponse(
        data=FeedbackResponse(explanation=feedback.explanation, study_suggestion=feedback.study_suggestion)
    )
