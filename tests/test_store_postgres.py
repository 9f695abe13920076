"""
Store Integration Tests (real PostgreSQL)

Runs only when DATABASE_URL points at a disposable database. Applies the
schema, seeds a uniquely-named form, and exercises the handlers through the
real TableClient so every query is type-checked by Postgres (uuid columns).
"""

import os
import uuid

import pytest
import psycopg2

from fitbot.db import (
    FITNESS_HISTORY_TABLE,
    FORMS_TABLE,
    QUESTIONS_TABLE,
    RUNS_TABLE,
    SECTIONS_TABLE,
    USERS_TABLE,
    TableClient,
)
from fitbot.forms.service import get_form
from fitbot.migrations import ensure_schema
from fitbot.questionnaire.models import RunStatus, SelectionAnswer, TextAnswer
from fitbot.questionnaire.runs import get_existing_run, save_answers, start_run
from fitbot.scoring.service import debug_scoring

DATABASE_URL = os.getenv("DATABASE_URL")

pytestmark = pytest.mark.skipif(not DATABASE_URL, reason="DATABASE_URL not set")


@pytest.fixture
def pg_client():
    conn = psycopg2.connect(DATABASE_URL)
    ensure_schema(conn)
    try:
        yield TableClient(conn)
    finally:
        conn.close()


@pytest.fixture
def seeded(pg_client):
    slug = f"onboarding_test_{uuid.uuid4().hex[:8]}"
    user_id = str(uuid.uuid4())

    form = pg_client.insert(FORMS_TABLE, [{"slug": slug, "title": "Onboarding"}])[0]
    section = pg_client.insert(SECTIONS_TABLE, [
        {"form_id": form["id"], "title": "Health", "sort_order": 1},
    ])[0]
    smoker, workouts = pg_client.insert(QUESTIONS_TABLE, [
        {
            "section_id": section["id"], "key": "smoker", "prompt": "Do you smoke?",
            "type": "radio", "required": True, "options": ["yes", "no"], "sort_order": 1,
            "scoring_type": "risk_factor", "points_mapping": {"yes": 5, "no": 8},
        },
        {
            "section_id": section["id"], "key": "workouts", "prompt": "Workouts per week?",
            "type": "number", "required": True, "options": None, "sort_order": 2,
            "scoring_type": "fitness_level", "points_mapping": {"3": 10},
        },
    ])
    pg_client.insert(USERS_TABLE, [{"id": user_id, "name": "Ada", "surname": "Lovelace"}])

    yield {
        "slug": slug,
        "user_id": user_id,
        "smoker_id": str(smoker["id"]),
        "workouts_id": str(workouts["id"]),
    }

    runs = pg_client.select(RUNS_TABLE, columns=["id"], filters={"form_id": form["id"]})
    run_ids = [r["id"] for r in runs]
    if run_ids:
        pg_client.delete(FITNESS_HISTORY_TABLE, {"questionnaire_run_id": run_ids})
        pg_client.delete(RUNS_TABLE, {"id": run_ids})
    pg_client.delete(FORMS_TABLE, {"id": form["id"]})
    pg_client.delete(USERS_TABLE, {"id": user_id})


class TestPostgresStore:

    def test_get_form(self, pg_client, seeded):
        form = get_form(pg_client, seeded["slug"])

        questions = form["sections"][0]["questions"]
        assert [q["key"] for q in questions] == ["smoker", "workouts"]
        assert questions[0]["options"] == ["yes", "no"]

    def test_submission_scores_and_propagates(self, pg_client, seeded):
        run = start_run(pg_client, seeded["user_id"], seeded["slug"])["run"]

        result = save_answers(pg_client, str(run["id"]), [
            SelectionAnswer(question_id=seeded["smoker_id"], selected_values=["yes"]),
            TextAnswer(question_id=seeded["workouts_id"], text_value="3"),
        ], RunStatus.SUBMITTED)

        assert result["scores"] == {
            "riskScore": 5, "fitnessScore": 10, "riskLevel": "high", "fitnessLevel": 2,
        }
        assert result["run"]["status"] == "submitted"

        existing = get_existing_run(pg_client, seeded["user_id"], seeded["slug"])
        assert len(existing["answers"]) == 2

        user = pg_client.select_one(USERS_TABLE, filters={"id": seeded["user_id"]})
        assert (user["fitness_level"], user["risk_factor"]) == (2, "high")

        history = pg_client.select(FITNESS_HISTORY_TABLE, filters={"questionnaire_run_id": run["id"]})
        assert len(history) == 1

    def test_debug_scoring(self, pg_client, seeded):
        run = start_run(pg_client, seeded["user_id"], seeded["slug"])["run"]
        save_answers(pg_client, str(run["id"]), [
            TextAnswer(question_id=seeded["smoker_id"], text_value="no"),
        ])

        trace = debug_scoring(pg_client, seeded["user_id"], seeded["slug"])

        assert trace["total_answers"] == 1
        assert trace["risk_score"] == 8
        assert trace["calculated_risk_level"] == "moderate"
