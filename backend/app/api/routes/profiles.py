"""Registration by email and profile with attempt history."""

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_store
from app.schemas.requests import EMAIL_PATTERN, RegisterRequest
from app.schemas.responses import ApiResponse, AttemptSummary, ProfileResponse
from app.services.content_store import ContentStore

router = APIRouter(tags=["Profiles"])


def _summary(row: dict) -> AttemptSummary:
    return AttemptSummary(
        id=str(row.get("id")),
        score=row.get("score") or 0,
        total_questions=row.get("total_questions") or 0,
        attempted_at=row.get("attempted_at"),
        quiz_title=row.get("quiz_title"),
    )


@router.post("/register", response_model=ApiResponse[ProfileResponse])
async def register(body: RegisterRequest, store: ContentStore = Depends(get_store)):
    """Create the profile, or update the name of an existing one with the same email."""
    row = store.upsert_profile(body.name, body.email)
    if not row.get("id"):
        raise HTTPException(status_code=500, detail="Could not save the profile.")
    return ApiResponse(
        data=ProfileResponse(id=str(row["id"]), name=row.get("name") or body.name, email=body.email),
        message=f"Welcome, {body.name}!",
    )


@router.get("/profile", response_model=ApiResponse[ProfileResponse])
async def get_profile(
    email: str = Query(..., pattern=EMAIL_PATTERN),
    store: ContentStore = Depends(get_store),
):
    """Profile and quiz history, newest attempt first."""
    email = email.strip().lower()
    profile = store.get_profile(email)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found.")
    attempts = store.list_attempts(str(profile["id"]))
    return ApiResponse(
        data=ProfileResponse(
            id=str(profile["id"]),
            name=profile.get("name") or "",
            email=profile.get("email") or email,
            attempts=[_summary(row) for row in attempts],
        )
    )
