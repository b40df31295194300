import os
from dotenv import load_dotenv
from pathlib import Path
from enum import Enum

from utils.logger import get_logger

logger = get_logger(__name__)


class ModelType(Enum):
    """Supported model types."""
    OPENAI = "openai"
    GEMINI = "gemini"


DEFAULT_MODELS = {
    ModelType.OPENAI.value: "gpt-4o-mini",
    ModelType.GEMINI.value: "gemini-2.5-flash",
}


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


class Config:
    """Configuration management for the search pipeline."""

    def __init__(self):
        """Initialize configuration with environment variables."""
        # Load environment variables from .env file if it exists
        env_path = Path(__file__).parent.parent / '.env'
        if env_path.exists():
            load_dotenv(dotenv_path=env_path)

        # Search provider
        self.SEARCH_API_KEY = os.getenv('SEARCH_API_KEY')
        self.SEARCH_BASE_URL = os.getenv('SEARCH_BASE_URL', 'https://api.search.brave.com')
        self.SEARCH_TIMEOUT_SECONDS = _float_env('SEARCH_TIMEOUT_SECONDS', 8.0)
        self.SEARCH_RESULT_COUNT = _int_env('SEARCH_RESULT_COUNT', 3)

        # Language model
        self.OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
        self.GOOGLE_GEMINI_API_KEY = os.getenv('GOOGLE_GEMINI_API_KEY')
        self.MODEL_TYPE = os.getenv('MODEL_TYPE', ModelType.GEMINI.value).lower()
        self.DEFAULT_MODEL = os.getenv('DEFAULT_MODEL') or DEFAULT_MODELS.get(self.MODEL_TYPE, '')
        self.LLM_TIMEOUT_SECONDS = _float_env('LLM_TIMEOUT_SECONDS', 12.0)
        self.LLM_MAX_ATTEMPTS = _int_env('LLM_MAX_ATTEMPTS', 2)
        self.LLM_THREAD_POOL_SIZE = _int_env('LLM_THREAD_POOL_SIZE', 8)

        # Page fetching
        self.FETCH_THREAD_POOL_SIZE = _int_env('FETCH_THREAD_POOL_SIZE', 8)
        self.FETCH_HTTP_TIMEOUT_MS = _int_env('FETCH_HTTP_TIMEOUT_MS', 3000)
        self.FETCH_FUTURE_TIMEOUT_MS = _int_env('FETCH_FUTURE_TIMEOUT_MS', 4000)

        # Result cache
        self.RESULT_CACHE_TTL_SECONDS = _int_env('RESULT_CACHE_TTL_SECONDS', 600)
        self.RESULT_CACHE_MAX_ENTRIES = _int_env('RESULT_CACHE_MAX_ENTRIES', 1000)

    def validate(self) -> bool:
        """
        Validate that all required configuration is present.

        Returns:
            bool: True if configuration is valid, False otherwise
        """
        if not self.SEARCH_API_KEY:
            logger.error("SEARCH_API_KEY is not set. Please set it in the .env file.")
            return False

        if self.MODEL_TYPE == ModelType.OPENAI.value:
            if not self.OPENAI_API_KEY:
                logger.error("OPENAI_API_KEY is not set. Please set it in the .env file.")
                return False
        elif self.MODEL_TYPE == ModelType.GEMINI.value:
            if not self.GOOGLE_GEMINI_API_KEY:
                logger.error("GOOGLE_GEMINI_API_KEY is not set. Please set it in the .env file.")
                return False
        else:
            logger.error(
                f"Unknown MODEL_TYPE '{self.MODEL_TYPE}'. "
                f"Must be one of: {', '.join([e.value for e in ModelType])}"
            )
            return False

        return True

    def get_model_info(self) -> str:
        """
        Get information about the currently selected model.

        Returns:
            str: Formatted string with model information
        """
        if self.MODEL_TYPE == ModelType.OPENAI.value:
            return f"OpenAI ({self.DEFAULT_MODEL})"
        elif self.MODEL_TYPE == ModelType.GEMINI.value:
            return f"Google Gemini ({self.DEFAULT_MODEL})"
        return "Unknown"
