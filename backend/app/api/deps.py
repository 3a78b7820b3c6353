"""FastAPI dependencies. Routes receive their collaborators here so tests can override them."""

from typing import Optional

from fastapi import Depends, HTTPException

from app.config import Settings, get_settings
from app.services.ai_service import GenerationClient, build_generation_client
from app.services.content_store import ContentStore, get_supabase_client
from app.services.errors import GenerationUnavailableError
from app.services.quiz_pipeline import QuizGenerationPipeline
from app.utils.logging_config import get_logger

logger = get_logger("api.deps")


def get_generation_client(settings: Settings = Depends(get_settings)) -> GenerationClient:
    try:
        return build_generation_client(settings)
    except GenerationUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))


def get_pipeline(settings: Settings = Depends(get_settings)) -> QuizGenerationPipeline:
    """The client is built lazily so invalid requests get 400 even with no provider configured."""
    return QuizGenerationPipeline.from_settings(settings)


def get_store() -> ContentStore:
    try:
        return ContentStore(get_supabase_client())
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_optional_generation_client(settings: Settings = Depends(get_settings)) -> Optional[GenerationClient]:
    """Client for best-effort extras (feedback on submit). None when no provider is configured."""
    try:
        return build_generation_client(settings)
    except GenerationUnavailableError as e:
        logger.warning("No AI provider available", error=str(e))
        return None
