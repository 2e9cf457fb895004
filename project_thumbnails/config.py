"""
Runtime settings, read from the environment (and a local .env file).

  GEMINI_API_KEY                     — enables the AI tier; unset → skip straight to GitHub/placeholder
  GEMINI_IMAGE_MODEL                 — image model id (default gemini-2.5-flash-image)
  THUMBNAIL_TIMEOUT_SECONDS          — hard deadline for one generation request
  THUMBNAIL_BATCH_DELAY_SECONDS      — pause between projects in a batch run
  THUMBNAIL_RATE_LIMIT_WAIT_SECONDS  — pause before the single rate-limit retry in a batch run
  GITHUB_USERNAME / GITHUB_TOKEN     — used by `github-import`
  LOG_LEVEL                          — CLI log level
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_BATCH_DELAY_SECONDS = 2.0
DEFAULT_RATE_LIMIT_WAIT_SECONDS = 60.0

_ENV_FIELDS = {
    "GEMINI_API_KEY": "gemini_api_key",
    "GEMINI_IMAGE_MODEL": "image_model",
    "THUMBNAIL_TIMEOUT_SECONDS": "timeout_seconds",
    "THUMBNAIL_BATCH_DELAY_SECONDS": "batch_delay_seconds",
    "THUMBNAIL_RATE_LIMIT_WAIT_SECONDS": "rate_limit_wait_seconds",
    "GITHUB_USERNAME": "github_username",
    "GITHUB_TOKEN": "github_token",
    "LOG_LEVEL": "log_level",
}


class Settings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    gemini_api_key: Optional[str] = None
    image_model: str = DEFAULT_IMAGE_MODEL
    timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    batch_delay_seconds: float = Field(default=DEFAULT_BATCH_DELAY_SECONDS, ge=0)
    rate_limit_wait_seconds: float = Field(default=DEFAULT_RATE_LIMIT_WAIT_SECONDS, ge=0)
    github_username: Optional[str] = None
    github_token: Optional[str] = None
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()

    @property
    def ai_configured(self) -> bool:
        return bool(self.gemini_api_key)


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from `env` (default: os.environ after loading .env).

    Blank values count as unset so an empty `GEMINI_API_KEY=` line in .env
    disables the AI tier instead of sending an empty key.
    """
    if env is None:
        load_dotenv()
        env = os.environ

    values = {}
    for var, field_name in _ENV_FIELDS.items():
        raw = env.get(var)
        if raw is not None and raw.strip():
            values[field_name] = raw.strip()
    return Settings(**values)
