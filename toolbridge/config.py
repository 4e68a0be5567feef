from pydantic import BaseModel
import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

# Load .env file if it exists (before reading os.getenv)
_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    with open(_env_path) as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                # Only set if not already in environment (env vars take precedence)
                if key not in os.environ:
                    os.environ[key] = value


def _sanitize_ascii(val: str) -> str:
    """Strip non-ASCII characters from config values (they end up in HTTP headers)"""
    return val.encode('ascii', errors='ignore').decode('ascii').strip()


class Settings(BaseModel):
    # Network
    host: str = os.getenv("TOOLBRIDGE_HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # Language model (OpenAI-compatible endpoint; API key comes with each chat request)
    model_base_url: str = _sanitize_ascii(os.getenv(
        "MODEL_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/"))
    chat_model: str = _sanitize_ascii(os.getenv("CHAT_MODEL", "gemini-2.0-flash"))
    model_timeout_s: float = float(os.getenv("MODEL_TIMEOUT", "30"))

    # Tools
    tool_timeout_s: float = float(os.getenv("TOOL_TIMEOUT", "15"))
    dictionary_base_url: str = _sanitize_ascii(os.getenv(
        "DICTIONARY_BASE_URL", "https://api.dictionaryapi.dev/api/v2/entries/en"))

    # Session store bounds
    session_max: int = int(os.getenv("SESSION_MAX", "1000"))
    session_ttl_s: float = float(os.getenv("SESSION_TTL", "3600"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def cors_origin_list(self) -> list:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()

logger.info(f"Config: model → {settings.model_base_url}, model={settings.chat_model}")
