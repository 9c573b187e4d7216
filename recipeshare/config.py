"""
Application settings read from environment variables.

Values are computed once, when this module is first imported, so the
environment must be prepared before importing anything from the
package (the test suite does not rely on this; it overrides the
database session instead).
"""

import os
from dataclasses import dataclass, field
from typing import List


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Settings for the recipe sharing API."""

    project_name: str = os.getenv("PROJECT_NAME", "Recipe Share API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Any SQLAlchemy URL.  The default keeps a SQLite file next to the
    # working directory.
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./recipeshare.db")

    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "*"))
    )

    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))

    # Upper bound for the ``limit`` query parameter of the feed.
    feed_max_page_size: int = int(os.getenv("FEED_MAX_PAGE_SIZE", "100"))


settings = Settings()
