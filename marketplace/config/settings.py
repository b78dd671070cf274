# marketplace/config/settings.py
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./marketplace.db").strip()
DB_ECHO = _flag("DB_ECHO")

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploads")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sessionId")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(24 * 60 * 60)))
SESSION_COOKIE_SECURE = _flag("SESSION_COOKIE_SECURE")

# attempts before a create gives up on primary-key collisions
PK_RETRY_LIMIT = int(os.getenv("PK_RETRY_LIMIT", "20"))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
