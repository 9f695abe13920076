"""
Form Endpoint

- POST    /functions/v1/form - Questionnaire structure for the configured slug
- OPTIONS /functions/v1/form - CORS preflight
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends

from fitbot.config import Settings, get_settings
from fitbot.db import TableClient, get_client
from fitbot.shared.cors import preflight_response

from .models import FormRequest
from .service import get_form

router = APIRouter(prefix="/functions/v1", tags=["form"])


@router.options("/form")
def form_preflight():
    return preflight_response()


@router.post("/form")
def form_endpoint(
    request: Optional[FormRequest] = Body(default=None),
    settings: Settings = Depends(get_settings),
    client: TableClient = Depends(get_client),
):
    """Return {form: {id, title, sections: [...]}}."""
    return {"form": get_form(client, settings.form_slug)}
