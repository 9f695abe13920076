"""
Scoring Debug Endpoint

- POST    /functions/v1/questionnaire-debug - Scoring trace for a user's latest run
- OPTIONS /functions/v1/questionnaire-debug - CORS preflight

Diagnostic only. Mounted when DEBUG_ENDPOINTS_ENABLED is true; put access
control in front of it before exposing it anywhere trusted.
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from fitbot.config import Settings, get_settings
from fitbot.db import TableClient, get_client
from fitbot.shared.cors import preflight_response
from fitbot.shared.types import RecordId

from .service import debug_scoring

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["questionnaire-debug"])


class DebugRequest(BaseModel):
    model_config = {"populate_by_name": True}

    user_id: RecordId = Field(alias="userId")


@router.options("/questionnaire-debug")
def debug_preflight():
    return preflight_response()


@router.post("/questionnaire-debug")
def questionnaire_debug(
    request: DebugRequest,
    settings: Settings = Depends(get_settings),
    client: TableClient = Depends(get_client),
):
    logger.info(f"Scoring debug requested for user {request.user_id}")
    return debug_scoring(client, request.user_id, settings.form_slug)
