import logging
import os

from dotenv import load_dotenv

load_dotenv(os.getenv("ENV_FILE"), override=True)

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = _env_bool("LOG_JSON", True)

# OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "2048"))
# Passed through to instructor; this package never retries on its own
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "1"))

# Langfuse
LANGFUSE_ENABLED = _env_bool("LANGFUSE_ENABLED", bool(os.getenv("LANGFUSE_PUBLIC_KEY")))

MS_PER_DAY = 1000 * 60 * 60 * 24

if not OPENAI_API_KEY:
    logger.warning("OPENAI_API_KEY is not set in the environment variables.")
