"""
Scoring Persistence

Loads a run's stored answers and their questions, scores them, and writes
the results to the user profile and the fitness history.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from fitbot.db import (
    ANSWERS_TABLE,
    FITNESS_HISTORY_TABLE,
    QUESTIONS_TABLE,
    RUNS_TABLE,
    USERS_TABLE,
    TableClient,
)
from fitbot.forms.models import QUESTION_SCORING_COLUMNS, Question
from fitbot.forms.service import get_form_id
from fitbot.questionnaire.models import ANSWER_COLUMNS, answers_from_rows
from fitbot.shared.errors import ErrorCode, FitbotException, not_found

from .engine import score_answers
from .models import ScoringResult

logger = logging.getLogger(__name__)


def load_scoring_inputs(client: TableClient, run_id: str) -> Tuple[List[Dict[str, Any]], list, List[Question]]:
    """Return (answer rows, typed answers, questions) for a run."""
    rows = client.select(ANSWERS_TABLE, columns=ANSWER_COLUMNS, filters={"run_id": run_id})
    question_rows = client.select(
        QUESTIONS_TABLE,
        columns=QUESTION_SCORING_COLUMNS,
        filters={"id": [r["question_id"] for r in rows]},
    )
    try:
        answers = answers_from_rows(rows)
        questions = [Question.model_validate(q) for q in question_rows]
    except ValidationError as e:
        raise FitbotException(ErrorCode.STORE_ERROR, f"Invalid stored questionnaire data: {e}")
    return rows, answers, questions


def score_run(client: TableClient, run_id: str) -> ScoringResult:
    """Score the answers currently stored for a run."""
    _, answers, questions = load_scoring_inputs(client, run_id)
    return score_answers(answers, questions)


def record_scores(
    client: TableClient,
    user_id: Any,
    run_id: Any,
    result: ScoringResult,
    now: Optional[datetime] = None,
) -> None:
    """
    Propagate scores to the user profile, then append a history entry.

    The two writes are sequential, not one transaction.
    """
    now = now or datetime.now(timezone.utc)

    client.update(
        USERS_TABLE,
        {
            "fitness_level": result.fitness_level,
            "fitness_level_updated_at": now,
            "risk_factor": result.risk_level.value,
            "risk_factor_updated_at": now,
        },
        {"id": user_id},
    )
    client.insert(FITNESS_HISTORY_TABLE, [{
        "user_id": user_id,
        "fitness_level": result.fitness_level,
        "risk_factor": result.risk_level.value,
        "fitness_level_score": result.fitness_score,
        "risk_factor_score": result.risk_score,
        "questionnaire_run_id": run_id,
    }])
    logger.info(
        f"Recorded scores for user {user_id} run {run_id}: "
        f"risk={result.risk_score} ({result.risk_level.value}), "
        f"fitness={result.fitness_score} (level {result.fitness_level})"
    )


def debug_scoring(client: TableClient, user_id: str, form_slug: str) -> Dict[str, Any]:
    """Full scoring trace for the user's latest run. Read-only."""
    form_id = get_form_id(client, form_slug)
    run = client.select_one(
        RUNS_TABLE,
        filters={"user_id": user_id, "form_id": form_id},
        order_by="started_at",
        descending=True,
    )
    if not run:
        raise not_found("No questionnaire runs found")

    rows, answers, questions = load_scoring_inputs(client, run["id"])
    result = score_answers(answers, questions)

    return {
        "run_info": run,
        "total_answers": len(rows),
        "risk_score": result.risk_score,
        "fitness_score": result.fitness_score,
        "calculated_risk_level": result.risk_level.value,
        "calculated_fitness_level": result.fitness_level,
        "debug_scoring": [t.model_dump() for t in result.trace],
    }
