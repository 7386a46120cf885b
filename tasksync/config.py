"""Configuration for tasksync.

Settings come from environment variables, optionally loaded from a .env file
in the working directory:

- TASKSYNC_SERVER_URL: scheme and host of the task server (default http://localhost:8000)
- TASKSYNC_API_BASE: API base path (default /api); an absolute URL wins over the server URL
- TASKSYNC_REQUEST_TIMEOUT_SEC: transport timeout handed to requests (default: none)
- TASKSYNC_LOG_LEVEL: console log level (default INFO)
- TASKSYNC_LOG_FILE: optional log file path
"""

import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field

from tasksync.models.constants import DEFAULT_API_BASE, DEFAULT_SERVER_URL

load_dotenv()


class Settings(BaseModel):
    """Client settings."""

    server_url: str = Field(DEFAULT_SERVER_URL, description="Scheme and host of the task server")
    api_base: str = Field(DEFAULT_API_BASE, description="API base path or absolute URL")
    request_timeout_sec: Optional[float] = Field(None, gt=0, description="Transport timeout")
    log_level: str = Field("INFO", description="Console log level")
    log_file: Optional[str] = Field(None, description="Optional log file path")

    @property
    def base_url(self) -> str:
        """Full URL every API path is appended to (no trailing slash)."""
        base = (self.api_base or "").strip()
        if base.startswith(("http://", "https://")):
            return base.rstrip("/")
        server = self.server_url.rstrip("/")
        base = base.strip("/")
        return f"{server}/{base}" if base else server


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from e


def get_settings() -> Settings:
    """Read settings from the environment.

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    return Settings(
        server_url=os.getenv("TASKSYNC_SERVER_URL", DEFAULT_SERVER_URL),
        api_base=os.getenv("TASKSYNC_API_BASE", DEFAULT_API_BASE),
        request_timeout_sec=_optional_float("TASKSYNC_REQUEST_TIMEOUT_SEC"),
        log_level=os.getenv("TASKSYNC_LOG_LEVEL", "INFO").upper(),
        log_file=os.getenv("TASKSYNC_LOG_FILE") or None,
    )
