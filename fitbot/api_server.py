"""
FitBot API Server
=================
Fitness-onboarding handlers: questionnaire form, run/answer management,
scoring, and the AI fitness advisor.

Every failure is returned as {error: message} with HTTP 400.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from fitbot import __version__
from fitbot.advisor import advisor_router
from fitbot.config import Settings, configure_logging
from fitbot.forms import form_router
from fitbot.health import health_router
from fitbot.questionnaire.router import router as questionnaire_router
from fitbot.scoring.router import router as scoring_debug_router
from fitbot.shared.cors import ALLOWED_HEADERS
from fitbot.shared.errors import FitbotException

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return f"{location}: {message}" if location else message


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app. Settings are read from the environment once."""
    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="FitBot Onboarding API",
        description="Questionnaire scoring and AI fitness advisor",
        version=__version__,
    )
    app.state.settings = settings

    # ============================================
    # CORS Configuration
    # ============================================
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["POST", "OPTIONS"],
        allow_headers=ALLOWED_HEADERS,
    )

    # ============================================
    # Error Handlers
    # ============================================
    @app.exception_handler(FitbotException)
    async def fitbot_exception_handler(request: Request, exc: FitbotException):
        logger.warning(f"{request.url.path} failed: {exc}")
        return JSONResponse(status_code=exc.http_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    # ============================================
    # Routers
    # ============================================
    app.include_router(health_router)
    app.include_router(form_router)
    app.include_router(questionnaire_router)
    app.include_router(advisor_router)

    if settings.debug_endpoints_enabled:
        app.include_router(scoring_debug_router)
        logger.info("Scoring debug endpoint enabled")

    logger.info(f"FitBot API {__version__} ready (environment={settings.environment})")
    return app


app = create_app()
