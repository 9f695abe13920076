"""
Run/Answer Manager
==================
Creates or resumes a user's questionnaire run, replaces its answers, and on
submission triggers scoring.

State machine (per user + form):
    not_started (no row) -> in_progress -> submitted (terminal)

Only the most recently started run is current.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from fitbot.db import ANSWERS_TABLE, RUNS_TABLE, TableClient
from fitbot.forms.service import get_form_id
from fitbot.scoring.service import record_scores, score_run
from fitbot.shared.errors import ErrorCode, FitbotException, not_found

from .models import (
    ANSWER_COLUMNS,
    RUN_COLUMNS,
    QuestionnaireStatus,
    RunStatus,
    SelectionAnswer,
    TextAnswer,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def latest_run(
    client: TableClient,
    user_id: str,
    form_id: Any,
    columns: Optional[List[str]] = None,
) -> Optional[Dict[str, Any]]:
    """Most recently started run for (user, form), or None."""
    return client.select_one(
        RUNS_TABLE,
        columns=columns,
        filters={"user_id": user_id, "form_id": form_id},
        order_by="started_at",
        descending=True,
    )


def get_status(client: TableClient, user_id: str, form_slug: str) -> Dict[str, Any]:
    """not_started with no run, else in_progress/completed plus the run."""
    form_id = get_form_id(client, form_slug)
    run = latest_run(client, user_id, form_id, RUN_COLUMNS)

    if run is None:
        return {"status": QuestionnaireStatus.NOT_STARTED.value}

    if run["status"] == RunStatus.SUBMITTED.value:
        status = QuestionnaireStatus.COMPLETED
    else:
        status = QuestionnaireStatus.IN_PROGRESS
    return {"status": status.value, "run": run}


def get_existing_run(client: TableClient, user_id: str, form_slug: str) -> Dict[str, Any]:
    """Latest run with its full answer set. Raises NOT_FOUND if there is none."""
    form_id = get_form_id(client, form_slug)
    run = latest_run(client, user_id, form_id, RUN_COLUMNS)
    if run is None:
        raise not_found("No questionnaire run found")

    answers = client.select(ANSWERS_TABLE, columns=ANSWER_COLUMNS, filters={"run_id": run["id"]})
    return {"run": run, "answers": answers}


def start_run(client: TableClient, user_id: str, form_slug: str) -> Dict[str, Any]:
    """Return the latest run if one exists, otherwise create one in_progress."""
    form_id = get_form_id(client, form_slug)

    existing = latest_run(client, user_id, form_id, ["id", "status"])
    if existing is not None:
        logger.info(f"startRun: resuming run {existing['id']} for user {user_id}")
        return {"run": existing}

    created = client.insert(RUNS_TABLE, [{
        "user_id": user_id,
        "form_id": form_id,
        "status": RunStatus.IN_PROGRESS.value,
        "started_at": _utcnow(),
    }])
    if not created:
        raise FitbotException(ErrorCode.STORE_ERROR, "Run insert returned no row")

    logger.info(f"startRun: created run {created[0]['id']} for user {user_id}")
    return {"run": created[0]}


def save_answers(
    client: TableClient,
    run_id: str,
    answers: List[Union[TextAnswer, SelectionAnswer]],
    status: Optional[RunStatus] = None,
) -> Dict[str, Any]:
    """
    Replace the run's answers, then update its status.

    - Answers are replaced atomically (delete + insert in one transaction).
    - status defaults to in_progress.
    - submitted stamps submitted_at, scores the stored answers, stores the
      results on the run and propagates them to the user and history.
    - A submitted run is terminal: any further save is rejected.
    """
    status = status or RunStatus.IN_PROGRESS

    run = client.select_one(RUNS_TABLE, columns=["id", "user_id", "status"], filters={"id": run_id})
    if run is None:
        raise not_found(f"Run not found: {run_id}")
    if run["status"] == RunStatus.SUBMITTED.value:
        raise FitbotException(
            ErrorCode.RUN_ALREADY_SUBMITTED,
            "Questionnaire run has already been submitted",
        )

    client.replace(
        ANSWERS_TABLE,
        {"run_id": run["id"]},
        [answer.to_row(run["id"]) for answer in answers],
    )
    logger.info(f"saveAnswers: run {run_id} stored {len(answers)} answers, status={status.value}")

    update: Dict[str, Any] = {"status": status.value}
    result = None

    if status == RunStatus.SUBMITTED:
        now = _utcnow()
        update["submitted_at"] = now
        result = score_run(client, run["id"])
        update.update(result.to_run_columns())
        record_scores(client, run["user_id"], run["id"], result, now)

    updated = client.update(RUNS_TABLE, update, {"id": run["id"]})

    response: Dict[str, Any] = {"success": True, "run": updated[0] if updated else None}
    if result is not None:
        response["scores"] = result.summary()
    return response
