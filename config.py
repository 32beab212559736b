"""Runtime configuration.

Loads settings from environment variables, after reading a project-root
``.env`` file with python-dotenv when one exists.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ROOT_ENV = Path(__file__).resolve().parent / ".env"


def _optional_int(value):
    value = (value or "").strip()
    return int(value) if value else None


@dataclass
class Settings:
    """Recommendation settings."""

    # Who the pipeline filters for
    user_id: int = 0
    # Requested result count for the demo run
    fetch_size: int = 100

    # RetryDecorator attempts; 0 disables the decorator
    retry_count: int = 0

    # Served-history sorted set; no redis_url disables persistence
    memory_key: str = "recommender:memory"
    redis_url: Optional[str] = None

    # Fixed seed makes shuffles reproducible
    seed: Optional[int] = None

    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file=ROOT_ENV) -> "Settings":
        """Load configuration from environment variables."""
        if env_file and Path(env_file).exists():
            load_dotenv(env_file)

        return cls(
            user_id=int(os.getenv("RECOMMEND_USER_ID", "0")),
            fetch_size=int(os.getenv("RECOMMEND_FETCH_SIZE", "100")),
            retry_count=int(os.getenv("RECOMMEND_RETRY_COUNT", "0")),
            memory_key=os.getenv("RECOMMEND_MEMORY_KEY", "recommender:memory"),
            redis_url=os.getenv("RECOMMEND_REDIS_URL") or None,
            seed=_optional_int(os.getenv("RECOMMEND_SEED")),
            log_level=os.getenv("RECOMMEND_LOG_LEVEL", "INFO").upper(),
        )
