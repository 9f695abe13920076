"""
Questionnaire Endpoint

- POST    /functions/v1/questionnaire - Action dispatch
- OPTIONS /functions/v1/questionnaire - CORS preflight

Actions: getStatus, getExistingRun, getForm, startRun, saveAnswers.
"""

import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends

from fitbot.config import Settings, get_settings
from fitbot.db import TableClient, get_client
from fitbot.forms.service import get_form
from fitbot.shared.cors import preflight_response
from fitbot.shared.errors import invalid_request

from .models import QuestionnaireAction, QuestionnaireRequest
from .runs import get_existing_run, get_status, save_answers, start_run

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/functions/v1", tags=["questionnaire"])


def _require_user(request: QuestionnaireRequest) -> str:
    if not request.user_id:
        raise invalid_request("userId is required")
    return request.user_id


def _get_status(request, client, settings):
    return get_status(client, _require_user(request), settings.form_slug)


def _get_existing_run(request, client, settings):
    return get_existing_run(client, _require_user(request), settings.form_slug)


def _get_form(request, client, settings):
    return {"form": get_form(client, settings.form_slug)}


def _start_run(request, client, settings):
    return start_run(client, _require_user(request), settings.form_slug)


def _save_answers(request, client, settings):
    if not request.run_id:
        raise invalid_request("runId is required")
    return save_answers(client, request.run_id, request.answers or [], request.status)


ACTIONS: Dict[str, Callable[..., Dict[str, Any]]] = {
    QuestionnaireAction.GET_STATUS.value: _get_status,
    QuestionnaireAction.GET_EXISTING_RUN.value: _get_existing_run,
    QuestionnaireAction.GET_FORM.value: _get_form,
    QuestionnaireAction.START_RUN.value: _start_run,
    QuestionnaireAction.SAVE_ANSWERS.value: _save_answers,
}


def known_action(request: QuestionnaireRequest) -> QuestionnaireRequest:
    """Reject unknown actions before a store connection is opened."""
    if request.action not in ACTIONS:
        raise invalid_request("Invalid action")
    return request


@router.options("/questionnaire")
def questionnaire_preflight():
    return preflight_response()


@router.post("/questionnaire")
def questionnaire_endpoint(
    request: QuestionnaireRequest = Depends(known_action),
    settings: Settings = Depends(get_settings),
    client: TableClient = Depends(get_client),
):
    logger.info(f"questionnaire action={request.action} user={request.user_id} run={request.run_id}")
    return ACTIONS[request.action](request, client, settings)
