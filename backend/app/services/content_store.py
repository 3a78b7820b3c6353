"""Persistence in Supabase: PDF library, user profiles and quiz attempts."""

from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from app.config import get_settings
from app.utils.logging_config import get_logger

logger = get_logger("store")

PDF_TABLE = "pdf_generated_content"
PROFILES_TABLE = "profiles"
ATTEMPTS_TABLE = "quiz_attempts"

LIBRARY_COLUMNS = "id, title, file_sources, created_at"
ATTEMPT_COLUMNS = "id, score, total_questions, attempted_at, quiz_title"


def get_supabase_client() -> Client:
    """Create Supabase client. No proxy or custom httpx passed."""
    settings = get_settings()
    if not settings.supabase_url or not settings.supabase_service_key:
        raise ValueError("Supabase URL and service key must be configured")
    try:
        return create_client(settings.supabase_url, settings.supabase_service_key)
    except TypeError as e:
        if "proxy" in str(e).lower() or "proxies" in str(e).lower():
            raise ValueError(
                "Supabase/httpx version conflict. Install: pip install 'supabase>=2.10' 'httpx>=0.26,<0.28'"
            ) from e
        raise


class ContentStore:
    """Table access for the API. Takes the client so tests can pass a fake."""

    def __init__(self, client: Client):
        self.client = client

    # ---------- PDF library ----------

    def add_pdf_batch(self, title: str, file_sources: List[str], pdf_data_uris: List[str]) -> Dict[str, Any]:
        result = (
            self.client.table(PDF_TABLE)
            .insert(
                {
                    "title": title,
                    "file_sources": file_sources,
                    "pdf_data_uris": pdf_data_uris,
                }
            )
            .execute()
        )
        row = (result.data or [{}])[0]
        logger.info("PDF batch stored", entry_id=row.get("id"), files=len(file_sources))
        return {k: row.get(k) for k in ("id", "title", "file_sources", "created_at")}

    def list_pdf_entries(self) -> List[Dict[str, Any]]:
        result = (
            self.client.table(PDF_TABLE)
            .select(LIBRARY_COLUMNS)
            .order("created_at", desc=True)
            .execute()
        )
        return result.data or []

    def get_pdf_entry(self, entry_id: str, with_documents: bool = False) -> Optional[Dict[str, Any]]:
        columns = LIBRARY_COLUMNS + (", pdf_data_uris" if with_documents else "")
        result = (
            self.client.table(PDF_TABLE)
            .select(columns)
            .eq("id", entry_id)
            .limit(1)
            .execute()
        )
        rows = result.data or []
        return rows[0] if rows else None

    # ---------- Profiles ----------

    def upsert_profile(self, name: str, email: str) -> Dict[str, Any]:
        result = (
            self.client.table(PROFILES_TABLE)
            .upsert({"name": name, "email": email}, on_conflict="email")
            .execute()
        )
        row = (result.data or [{}])[0]
        logger.info("Profile upserted", profile_id=row.get("id"))
        return row

    def get_profile(self, email: str) -> Optional[Dict[str, Any]]:
        result = (
            self.client.table(PROFILES_TABLE)
            .select("id, name, email")
            .eq("email", email)
            .limit(1)
            .execute()
        )
        rows = result.data or []
        return rows[0] if rows else None

    # ---------- Quiz attempts ----------

    def record_attempt(
        self,
        user_id: Optional[str],
        quiz_title: str,
        score: int,
        total_questions: int,
    ) -> Dict[str, Any]:
        result = (
            self.client.table(ATTEMPTS_TABLE)
            .insert(
                {
                    "user_id": user_id,
                    "quiz_title": quiz_title,
                    "score": score,
                    "total_questions": total_questions,
                }
            )
            .execute()
        )
        row = (result.data or [{}])[0]
        logger.info("Quiz attempt recorded", attempt_id=row.get("id"), score=score, total=total_questions)
        return row

    def list_attempts(self, user_id: str) -> List[Dict[str, Any]]:
        result = (
            self.client.table(ATTEMPTS_TABLE)
            .select(ATTEMPT_COLUMNS)
            .eq("user_id", user_id)
            .order("attempted_at", desc=True)
            .execute()
        )
        return result.data or []
