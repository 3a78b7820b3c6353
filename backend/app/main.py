"""QuizWhiz FastAPI application entry point."""

from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.routes import attempts, feedback, flash_facts, library, profiles, quiz
from app.config import get_settings
from app.utils.logging_config import configure_logging, get_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown."""
    # Load environment variables from .env before anything else
    load_dotenv()
    configure_logging(debug=get_settings().debug)
    get_logger("main").info("QuizWhiz API starting")
    yield
    get_logger("main").info("QuizWhiz API shutting down")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="QuizWhiz - Generate quizzes and flash facts from PDFs or general-knowledge topics",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(library.router)
    app.include_router(quiz.router)
    app.include_router(flash_facts.router)
    app.include_router(feedback.router)
    app.include_router(attempts.router)
    app.include_router(profiles.router)

    @app.get("/")
    async def root():
        """Root endpoint - API info."""
        return {
            "service": "QuizWhiz API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
            "endpoints": [
                "POST /pdf-library",
                "GET /pdf-library",
                "POST /generate-quiz/pdf/{entry_id}",
                "POST /generate-quiz/topic",
                "POST /flash-facts",
                "POST /feedback",
                "POST /quiz-attempts",
                "POST /register",
                "GET /profile",
            ],
        }

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "ok", "service": "quizwhiz-api"}

    return app


app = create_app()
