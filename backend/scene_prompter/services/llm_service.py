import requests
import json
import asyncio
from typing import Dict, Any, Optional
import logging
from pathlib import Path
from logging.handlers import RotatingFileHandler

from scene_prompter.core.config import settings
from scene_prompter.core.errors import GenerationServiceError, GenerationTransportError, truncate_detail

logger = logging.getLogger(__name__)

_llm_call_logger = logging.getLogger("llm_call_audit")
if not _llm_call_logger.handlers:
    try:
        log_dir = Path(settings.LLM_CALL_LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / "llm_calls.log",
            maxBytes=settings.LLM_CALL_LOG_MAX_BYTES,
            backupCount=settings.LLM_CALL_LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter('%(asctime)s | %(levelname)s | %(message)s'))
        _llm_call_logger.addHandler(file_handler)
        _llm_call_logger.setLevel(logging.INFO)
        _llm_call_logger.propagate = False
    except Exception as e:
        logger.warning(f"Failed to initialize llm_call_audit logger: {e}")


def build_payload(instruction: str) -> Dict[str, Any]:
    """Single-turn generateContent request body."""
    return {"contents": [{"role": "user", "parts": [{"text": instruction}]}]}


def extract_text(data: Any) -> Optional[str]:
    """Text of the first candidate part, or None when the shape is not the expected one."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    if not isinstance(first, dict):
        return None
    content = first.get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    if not isinstance(text, str):
        return None
    return text


class LLMService:
    """Blocking HTTP client for the generation service, awaited through a worker thread.

    Every call is written to the llm_call_audit log with the key redacted.
    Non-success statuses and unexpected response shapes raise
    GenerationServiceError; failures of the call itself raise
    GenerationTransportError. Nothing is retried.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.base_url = base_url or settings.GEMINI_BASE_URL
        self.model = model or settings.GEMINI_MODEL
        self.timeout = timeout or settings.GEMINI_TIMEOUT_SECONDS

    def _safe_log_json(self, tag: str, payload: Dict[str, Any]) -> None:
        try:
            _llm_call_logger.info("%s %s", tag, json.dumps(payload, ensure_ascii=False, default=str))
        except Exception as e:
            logger.warning(f"Failed to write llm call audit log ({tag}): {e}")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/models/{self.model}:generateContent"

    def _post(self, payload: Dict[str, Any]) -> requests.Response:
        return requests.post(
            self.endpoint,
            params={"key": self.api_key},
            headers={"Content-Type": "application/json"},
            json=payload,
            timeout=self.timeout,
        )

    async def generate_text(self, instruction: str, purpose: str = "generate") -> str:
        payload = build_payload(instruction)
        url = self.endpoint

        logger.info(
            "Calling generation service: purpose=%s url=%s model=%s prompt_chars=%s",
            purpose,
            url,
            self.model,
            len(instruction),
        )
        self._safe_log_json("LLM_REQUEST", {
            "purpose": purpose,
            "url": url,
            "model": self.model,
            "key": "***REDACTED***",
            "payload": payload,
        })

        try:
            response = await asyncio.to_thread(self._post, payload)
        except requests.exceptions.RequestException as e:
            logger.error(f"Generation call failed ({purpose}): {e}")
            self._safe_log_json("LLM_TRANSPORT_ERROR", {"purpose": purpose, "url": url, "error": str(e)})
            raise GenerationTransportError(f"Connection to generation service failed: {e}", detail=str(e)) from e

        if not 200 <= response.status_code < 300:
            self._safe_log_json("LLM_RESPONSE_ERROR", {
                "purpose": purpose,
                "url": url,
                "model": self.model,
                "status_code": response.status_code,
                "response_text": response.text,
            })
            logger.error(f"API Error ({purpose}): {response.status_code} {truncate_detail(response.text, 200)}")
            raise GenerationServiceError(
                f"API Error {response.status_code} [model={self.model}]",
                status=response.status_code,
                detail=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationServiceError(
                "Generation service returned invalid JSON",
                status=response.status_code,
                detail=response.text,
            ) from e

        self._safe_log_json("LLM_RESPONSE", {
            "purpose": purpose,
            "url": url,
            "model": self.model,
            "status_code": response.status_code,
            "response": data,
        })

        text = extract_text(data)
        if text is None:
            logger.error(f"Unexpected response shape ({purpose}): {truncate_detail(json.dumps(data, default=str), 200)}")
            raise GenerationServiceError(
                "Unexpected response from generation service",
                status=response.status_code,
                detail=json.dumps(data, ensure_ascii=False, default=str),
            )

        logger.info("Generation response: purpose=%s output_chars=%s", purpose, len(text))
        return text


llm_service = LLMService()
