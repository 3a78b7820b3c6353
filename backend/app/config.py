"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "QuizWhiz API"
    debug: bool = False

    # Supabase
    supabase_url: str = ""
    supabase_service_key: str = ""
    supabase_anon_key: str = ""

    # OpenAI (optional)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    # Google Gemini - free tier (get key at https://aistudio.google.com/apikey)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"

    # AI provider for quiz/flash facts/feedback: "openai" | "gemini" | "auto" (auto = OpenAI if keyed, else Gemini)
    ai_provider: str = "auto"
    generation_temperature: float = 0.9
    generation_max_tokens: int = 8192

    # Quiz generation bounds
    pdf_quiz_min_questions: int = 5
    pdf_quiz_max_questions: int = 1000
    topic_quiz_min_questions: int = 5
    topic_quiz_max_questions: int = 50

    # Warn when fewer than this share of the requested questions survive validation
    under_generation_ratio: float = 0.5
    # Raise NoUsableContentError when neither questions nor flash facts survive
    fail_on_empty_result: bool = True

    # Upload limits
    max_upload_mb: int = 10
    max_pdf_pages: int = 300

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
