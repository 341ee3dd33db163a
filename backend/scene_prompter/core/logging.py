
import logging
import time
import re
from typing import Optional
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

# Configure standard loggers to be less noisy
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("uvicorn.error").setLevel(logging.ERROR)
logging.getLogger("fastapi").setLevel(logging.WARNING)


class _SuppressUvicornAccessPolling(logging.Filter):
    # The editor polls loading flags while a suggestion is outstanding
    _re = re.compile(r'"GET\s+/api/v1/workspaces/[^\s/]+/loading\s+HTTP/')

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            msg = record.getMessage()
        except Exception:
            return True
        return self._re.search(msg) is None


def configure_uvicorn_logging_noise_reduction() -> None:
    """Reduce meaningless uvicorn access log noise.

    Uvicorn may override logger levels via its own log_config after module import,
    so call this at app startup to ensure it takes effect.
    """
    access_logger = logging.getLogger("uvicorn.access")
    access_logger.setLevel(logging.WARNING)

    if not any(isinstance(f, _SuppressUvicornAccessPolling) for f in access_logger.filters):
        access_logger.addFilter(_SuppressUvicornAccessPolling())

logger = logging.getLogger("functional_activity")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
logger.addHandler(handler)

_WS = r"/api/v1/workspaces/[^/]+"

# Map Regex Patterns to Functional Names
FUNCTION_MAP = [
    # Workspaces
    (r"POST /api/v1/workspaces$", "Create Workspace"),
    (rf"GET {_WS}$", "View Workspace"),
    (rf"DELETE {_WS}$", "Discard Workspace"),
    (rf"POST {_WS}/reset$", "Reset Workspace"),

    # Characters
    (rf"POST {_WS}/characters$", "Create Character"),
    (rf"PUT {_WS}/characters/[^/]+$", "Update Character"),
    (rf"DELETE {_WS}/characters/[^/]+$", "Delete Character"),

    # Actions & Dialogue
    (rf"PUT {_WS}/actions/[^/]+$", "Update Character Action"),
    (rf"POST {_WS}/actions/[^/]+/main$", "Toggle Main Character"),
    (rf"(POST|PUT|DELETE) {_WS}/actions/[^/]+/dialogue_lines", "Edit Character Dialogue"),
    (rf"(POST|PUT|DELETE) {_WS}/spoken_dialogue", "Edit Spoken Dialogue"),

    # Scene
    (rf"PUT {_WS}/expressions/[^/]+$", "Set Expression"),
    (rf"PUT {_WS}/scene$", "Update Scene"),
    (rf"POST {_WS}/scene/visual_styles/toggle$", "Toggle Visual Style"),

    # Generation
    (rf"POST {_WS}/compose$", "Function: Compose Prompt"),
    (rf"POST {_WS}/refine$", "Function: AI Prompt Refinement"),
    (rf"POST {_WS}/suggestions/actions/", "Function: AI Action Suggestion"),
    (rf"POST {_WS}/suggestions/dialogue/", "Function: AI Dialogue Suggestion"),

    # Drafts
    (rf"POST {_WS}/drafts$", "Save Draft"),
    (rf"POST {_WS}/drafts/[^/]+/load$", "Load Draft"),
    (r"GET /api/v1/drafts$", "View Draft List"),
    (r"DELETE /api/v1/drafts/[^/]+$", "Delete Draft"),

    (r"GET /api/v1/catalog$", "View Option Catalog"),
]

def get_function_name(method: str, path: str):
    key = f"{method} {path}"
    for pattern, name in FUNCTION_MAP:
        if re.search(pattern, key):
            return name
    return None


def _resolve_workspace_id_for_logging(path: str) -> Optional[str]:
    m = re.search(r"/workspaces/([^/]+)", path or "")
    if not m:
        return None
    return m.group(1)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        # 1. Identify Function
        method = request.method
        path = request.url.path
        func_name = get_function_name(method, path)
        noise_prefixes = (
            "/docs",
            "/redoc",
        )
        noise_exact = {
            "/",
            "/openapi.json",
            "/favicon.ico",
            "/healthz",
        }
        is_noise = (
            path in noise_exact
            or any(path.startswith(p) for p in noise_prefixes)
            or (method == "GET" and path.endswith("/loading"))
        )

        # 2. Extract Client Info
        client_host = request.client.host if request.client else "unknown"
        workspace_id = _resolve_workspace_id_for_logging(path)

        try:
            response = await call_next(request)
        except Exception as e:
            process_ms = int((time.time() - start_time) * 1000)
            if not is_noise:
                action = func_name or f"API Call: {method} {path}"
                logger.error(
                    f"API Result | WorkspaceID: {workspace_id} | "
                    f"Action: {action} | Method: {method} | Path: {path} | "
                    f"Status: EXCEPTION | IP: {client_host} | Time: {process_ms}ms | Error: {type(e).__name__}: {str(e)[:200]}"
                )
            raise

        process_ms = int((time.time() - start_time) * 1000)

        # 3. Log every API endpoint call with key access factors and result status.
        if not is_noise:
            action = func_name or f"API Call: {method} {path}"
            content_length = request.headers.get("content-length")
            size_part = f" | ReqBytes: {content_length}" if content_length else ""
            line = (
                f"API Result | WorkspaceID: {workspace_id} | "
                f"Action: {action} | Method: {method} | Path: {path} | "
                f"Status: {response.status_code} | IP: {client_host} | Time: {process_ms}ms{size_part}"
            )

            if 200 <= response.status_code < 400:
                logger.info(line)
            elif 400 <= response.status_code < 500:
                logger.warning(line)
            else:
                logger.error(line)

        return response
