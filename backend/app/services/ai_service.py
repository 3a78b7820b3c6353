"""Generation clients: OpenAI and Google Gemini (free tier) behind one interface.

A client sends one prompt plus optional documents, asks for JSON, and returns
whatever object the model produced. It does not validate content and never
retries; callers decide what to keep.
"""

import asyncio
import json
import re
from typing import Any, Dict, Optional, Sequence

from app.config import Settings
from app.schemas.quiz import SourceDocument
from app.services.errors import GenerationUnavailableError
from app.utils.logging_config import get_logger

logger = get_logger("ai")

QUOTA_EXCEEDED_MESSAGE = (
    "The AI provider rejected the request for quota or billing reasons. "
    "Set GEMINI_API_KEY in .env for free usage (get key at https://aistudio.google.com/apikey)."
)

NO_PROVIDER_MESSAGE = (
    "No AI provider configured. Set OPENAI_API_KEY or GEMINI_API_KEY "
    "(free at https://aistudio.google.com/apikey) in .env"
)

SYSTEM_INSTRUCTION = (
    "You are an expert educational content generator. "
    "Always answer with a single JSON object and nothing else."
)


def _describe_failure(e: Exception) -> str:
    msg = str(e).lower()
    if "429" in msg or "insufficient_quota" in msg or "quota" in msg or "billing" in msg:
        return QUOTA_EXCEEDED_MESSAGE
    return f"AI generation failed: {e}"


def parse_json_object(text: str, label: str) -> Dict[str, Any]:
    """Parse a JSON object from model output, stripping markdown code fences if present.

    JSON that is not an object yields {}. Text with no JSON at all raises
    GenerationUnavailableError.
    """
    raw = (text or "").strip()
    text = raw
    # Strip markdown code block: ```json ... ``` or ``` ... ```
    if "```" in text:
        match = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
        if match:
            text = match.group(1).strip()
        else:
            # No closing ``` (truncated or single fence): strip leading fence and take rest
            if text.startswith("```"):
                text = re.sub(r"^```(?:json)?\s*\n?", "", text)
            if text.endswith("```"):
                text = re.sub(r"\n?```\s*$", "", text)
            text = text.strip()
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        start = text.find("{")
        end = text.rfind("}")
        data = None
        if start != -1 and end > start:
            try:
                data = json.loads(text[start : end + 1])
            except json.JSONDecodeError:
                data = None
        if data is None:
            logger.warning(f"Failed to parse {label} JSON", error="invalid or truncated", raw=raw[:200])
            raise GenerationUnavailableError(f"The AI returned unreadable {label} output.")
    if not isinstance(data, dict):
        logger.warning(f"{label} JSON is not an object", kind=type(data).__name__)
        return {}
    return data


class GenerationClient:
    """Base class for provider clients."""

    provider = "none"

    async def generate(
        self,
        prompt: str,
        documents: Sequence[SourceDocument] = (),
        response_schema: Optional[Dict[str, Any]] = None,
        label: str = "generation",
    ) -> Dict[str, Any]:
        raise NotImplementedError


# ---------- Gemini (free tier) ----------


class GeminiGenerationClient(GenerationClient):
    provider = "gemini"

    def __init__(self, api_key: str, model: str, temperature: float = 0.9, max_tokens: int = 8192):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _generate_sync(
        self,
        prompt: str,
        documents: Sequence[SourceDocument],
        response_schema: Optional[Dict[str, Any]],
    ) -> str:
        """Sync Gemini call (run in executor)."""
        import google.generativeai as genai

        genai.configure(api_key=self.api_key)
        model = genai.GenerativeModel(self.model, system_instruction=SYSTEM_INSTRUCTION)
        config: Dict[str, Any] = {
            "max_output_tokens": self.max_tokens,
            "temperature": self.temperature,
            "response_mime_type": "application/json",
        }
        if response_schema:
            config["response_schema"] = response_schema
        parts: list = [{"mime_type": d.mime_type, "data": d.data} for d in documents]
        parts.append(prompt)
        response = model.generate_content(parts, generation_config=genai.types.GenerationConfig(**config))
        if not response or not response.text:
            return ""
        return response.text.strip()

    async def generate(self, prompt, documents=(), response_schema=None, label="generation"):
        loop = asyncio.get_event_loop()
        try:
            text = await loop.run_in_executor(
                None,
                lambda: self._generate_sync(prompt, documents, response_schema),
            )
        except Exception as e:
            logger.warning("Gemini call failed", label=label, error=str(e))
            raise GenerationUnavailableError(_describe_failure(e)) from e
        if not text:
            raise GenerationUnavailableError(f"Gemini returned an empty {label} response.")
        return parse_json_object(text, label)


# ---------- OpenAI ----------


class OpenAIGenerationClient(GenerationClient):
    provider = "openai"

    def __init__(self, api_key: str, model: str, temperature: float = 0.9, max_tokens: int = 8192):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def generate(self, prompt, documents=(), response_schema=None, label="generation"):
        from openai import AsyncOpenAI

        client = AsyncOpenAI(api_key=self.api_key)
        system = SYSTEM_INSTRUCTION
        if response_schema:
            system += f"\nThe object should follow this shape: {json.dumps(response_schema)}"
        content: list = [
            {"type": "file", "file": {"filename": d.name, "file_data": d.to_data_uri()}} for d in documents
        ]
        content.append({"type": "text", "text": prompt})
        try:
            response = await client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": system}, {"role": "user", "content": content}],
                response_format={"type": "json_object"},
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.warning("OpenAI call failed", label=label, error=str(e))
            raise GenerationUnavailableError(_describe_failure(e)) from e
        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise GenerationUnavailableError(f"OpenAI returned an empty {label} response.")
        return parse_json_object(text, label)


def build_generation_client(settings: Settings) -> GenerationClient:
    """Pick a provider: explicit setting, or "auto" (OpenAI when keyed, else Gemini)."""
    provider = (settings.ai_provider or "auto").strip().lower()
    use_gemini = provider == "gemini" or (provider == "auto" and not settings.openai_api_key)

    if use_gemini:
        if not settings.gemini_api_key:
            raise GenerationUnavailableError(NO_PROVIDER_MESSAGE)
        return GeminiGenerationClient(
            settings.gemini_api_key,
            settings.gemini_model,
            temperature=settings.generation_temperature,
            max_tokens=settings.generation_max_tokens,
        )
    if not settings.openai_api_key:
        raise GenerationUnavailableError(NO_PROVIDER_MESSAGE)
    return OpenAIGenerationClient(
        settings.openai_api_key,
        settings.openai_model,
        temperature=settings.generation_temperature,
        max_tokens=settings.generation_max_tokens,
    )
