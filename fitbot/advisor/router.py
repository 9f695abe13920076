"""
AI Advisor Endpoint

- POST    /functions/v1/ai-fitness-advisor - Generated fitness plan
- OPTIONS /functions/v1/ai-fitness-advisor - CORS preflight

Failures return {error, success: false} with HTTP 400; upstream failures
also carry the upstream status and body.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from fitbot.config import Settings, get_settings
from fitbot.db import open_client
from fitbot.shared.cors import preflight_response
from fitbot.shared.errors import ErrorCode, FitbotException

from .models import AdvisorRequest
from .service import generate_advice

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["ai-fitness-advisor"])


def advisor_error_response(exc: FitbotException) -> JSONResponse:
    body: Dict[str, Any] = {"error": exc.message, "success": False}
    if exc.error_code == ErrorCode.AI_API_ERROR:
        body.update(exc.details)
    return JSONResponse(status_code=exc.http_code, content=body)


@router.options("/ai-fitness-advisor")
def advisor_preflight():
    return preflight_response()


@router.post("/ai-fitness-advisor")
def ai_fitness_advisor(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    settings: Settings = Depends(get_settings),
):
    try:
        request = AdvisorRequest.model_validate(payload or {})
        return generate_advice(settings, request, open_client)
    except ValidationError as e:
        return advisor_error_response(FitbotException(ErrorCode.INVALID_REQUEST, str(e)))
    except FitbotException as e:
        logger.warning(f"Advisor failed: {e}")
        return advisor_error_response(e)
