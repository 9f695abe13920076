"""
FitBot Configuration
====================
Environment-derived settings, built once at process start and handed to
every handler through the FastAPI app state.

Environment variables:
    DATABASE_URL              PostgreSQL connection string (questionnaire store)
    OPENAI_API_KEY            Chat-completion API key (AI advisor)
    OPENAI_BASE_URL           Completion API base URL
    OPENAI_MODEL              Completion model name
    OPENAI_TIMEOUT_SECONDS    Upstream request timeout
    FORM_SLUG                 Slug of the onboarding questionnaire
    DEBUG_ENDPOINTS_ENABLED   Mount the scoring debug endpoint
    ENVIRONMENT               Deployment environment name
    LOG_LEVEL                 Root log level
"""

import os
import logging
from typing import Optional, Mapping

from fastapi import Request
from pydantic import BaseModel, Field


DEFAULT_FORM_SLUG = "onboarding_v1"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

_TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Immutable process configuration."""

    model_config = {"frozen": True}

    database_url: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_timeout_seconds: float = Field(default=60.0, gt=0)
    form_slug: str = DEFAULT_FORM_SLUG
    debug_endpoints_enabled: bool = True
    environment: str = "development"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables (empty values count as unset)."""
        env = os.environ if environ is None else environ

        def _get(name: str) -> Optional[str]:
            value = env.get(name)
            if value is None or not value.strip():
                return None
            return value.strip()

        values = {
            "database_url": _get("DATABASE_URL"),
            "openai_api_key": _get("OPENAI_API_KEY"),
            "openai_base_url": (_get("OPENAI_BASE_URL") or DEFAULT_OPENAI_BASE_URL).rstrip("/"),
            "openai_model": _get("OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
            "form_slug": _get("FORM_SLUG") or DEFAULT_FORM_SLUG,
            "environment": _get("ENVIRONMENT") or "development",
            "log_level": (_get("LOG_LEVEL") or "INFO").upper(),
        }

        timeout = _get("OPENAI_TIMEOUT_SECONDS")
        if timeout:
            values["openai_timeout_seconds"] = float(timeout)

        debug_flag = _get("DEBUG_ENDPOINTS_ENABLED")
        if debug_flag is not None:
            values["debug_endpoints_enabled"] = debug_flag.lower() in _TRUE_VALUES
        else:
            values["debug_endpoints_enabled"] = values["environment"] != "production"

        return cls(**values)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def get_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings attached at app creation."""
    return request.app.state.settings
