"""Application configuration helpers."""

from dataclasses import dataclass
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


@dataclass
class Settings:
    """Holds runtime configuration loaded from the environment."""

    openai_api_key: str
    openai_model: str = "gpt-4.1-mini"
    max_output_tokens: int = 4000
    extraction_timeout_s: float = 90.0
    suggestion_timeout_s: float = 60.0
    billing_api_url: Optional[str] = None
    billing_api_key: Optional[str] = None
    free_export_limit: int = 3


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache settings so every module shares the same values."""

    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        raise ValueError(
            "Please set OPENAI_API_KEY in the environment (e.g., via a .env file)."
        )

    return Settings(
        openai_api_key=api_key,
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4.1-mini"),
        max_output_tokens=int(os.getenv("TRIPSHEET_MAX_OUTPUT_TOKENS", "4000")),
        extraction_timeout_s=float(os.getenv("TRIPSHEET_EXTRACTION_TIMEOUT", "90")),
        suggestion_timeout_s=float(os.getenv("TRIPSHEET_SUGGESTION_TIMEOUT", "60")),
        billing_api_url=os.getenv("BILLING_API_URL"),
        billing_api_key=os.getenv("BILLING_API_KEY"),
        free_export_limit=int(os.getenv("TRIPSHEET_FREE_EXPORTS", "3")),
    )
