
import os
from pathlib import Path
from pydantic_settings import BaseSettings

# Build paths inside the project like this: BASE_DIR / 'subdir'.
# This points to the 'backend' directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent

class Settings(BaseSettings):
    BASE_DIR: Path = BASE_DIR
    PROJECT_NAME: str = "Scene Prompter"
    API_V1_STR: str = "/api/v1"

    # Drafts live in SQLite locally; Render-style postgres:// URLs need the postgresql:// scheme for SQLAlchemy
    _db_url: str = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR}/scene_prompter.db")
    if _db_url.startswith("postgres://"):
        _db_url = _db_url.replace("postgres://", "postgresql://", 1)

    DATABASE_URL: str = _db_url
    DB_POOL_PRE_PING: bool = True
    DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "5"))
    DB_MAX_OVERFLOW: int = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    DB_POOL_TIMEOUT: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    DB_POOL_RECYCLE: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))

    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")

    # Generation service (Gemini generateContent)
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    GEMINI_TIMEOUT_SECONDS: int = int(os.getenv("GEMINI_TIMEOUT_SECONDS", "60"))

    # Language of the composed narrative and of the refined output
    SOURCE_LANGUAGE: str = os.getenv("SOURCE_LANGUAGE", "Indonesian")
    TARGET_LANGUAGE: str = os.getenv("TARGET_LANGUAGE", "English")
    TARGET_MODEL_NAME: str = os.getenv("TARGET_MODEL_NAME", "Google Veo 3")

    # Audit log of every generation call (request/response JSON)
    LLM_CALL_LOG_DIR: str = os.getenv("LLM_CALL_LOG_DIR", str(BASE_DIR / "logs"))
    LLM_CALL_LOG_MAX_BYTES: int = int(os.getenv("LLM_CALL_LOG_MAX_BYTES", str(20 * 1024 * 1024)))
    LLM_CALL_LOG_BACKUP_COUNT: int = int(os.getenv("LLM_CALL_LOG_BACKUP_COUNT", "5"))

    # slowapi limit applied to suggestion / refinement routes
    GENERATION_RATE_LIMIT: str = os.getenv("GENERATION_RATE_LIMIT", "30/minute")

    # In-memory editing sessions: idle ones are purged, the oldest goes first at the cap
    WORKSPACE_IDLE_SECONDS: int = int(os.getenv("WORKSPACE_IDLE_SECONDS", str(6 * 60 * 60)))
    MAX_WORKSPACES: int = int(os.getenv("MAX_WORKSPACES", "500"))

    class Config:
        env_file = ".env"

settings = Settings()
