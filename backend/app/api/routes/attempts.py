"""Quiz attempt submission: grade, store, explain wrong answers."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_optional_generation_client, get_store
from app.schemas.requests import SubmitAttemptRequest
from app.schemas.responses import ApiResponse, AttemptResponse
from app.services.ai_service import GenerationClient
from app.services.content_store import ContentStore
from app.services.errors import InvalidRequestError
from app.services.feedback_service import explain_incorrect_answers, score_attempt

router = APIRouter(prefix="/quiz-attempts", tags=["Attempts"])


@router.post("", response_model=ApiResponse[AttemptResponse])
async def submit_attempt(
    body: SubmitAttemptRequest,
    store: ContentStore = Depends(get_store),
    client: Optional[GenerationClient] = Depends(get_optional_generation_client),
):
    """Grade a finished quiz and record it for the user's history."""
    profile = store.get_profile(body.email)
    if not profile:
        raise HTTPException(status_code=404, detail="Unknown user. Please register first.")

    try:
        graded = score_attempt(body.quiz, body.user_answers)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=str(e))

    title = body.quiz_title.strip() or "Quiz"
    row = store.record_attempt(
        user_id=str(profile.get("id")),
        quiz_title=title,
        score=graded.score,
        total_questions=graded.total_questions,
    )

    feedback = []
    if body.include_feedback and graded.incorrect and client is not None:
        feedback = await explain_incorrect_answers(client, graded.incorrect, title)

    return ApiResponse(
        data=AttemptResponse(
            attempt_id=str(row["id"]) if row.get("id") is not None else None,
            score=graded.score,
            total_questions=graded.total_questions,
            feedback=feedback,
        ),
        message=f"Score: {graded.score}/{graded.total_questions}",
    )
