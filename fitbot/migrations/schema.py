"""
Questionnaire Store Schema

Idempotent DDL for every table the handlers touch. Safe to run on every
deploy. "Users" is owned by the auth layer; only the columns this service
reads or maintains are declared here.
"""

import logging

import psycopg2

logger = logging.getLogger(__name__)


SCHEMA_SQL = """
CREATE EXTENSION IF NOT EXISTS pgcrypto;
CREATE SCHEMA IF NOT EXISTS questionnaire;

CREATE TABLE IF NOT EXISTS questionnaire.forms (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    slug VARCHAR(100) UNIQUE NOT NULL,
    title TEXT
);

CREATE TABLE IF NOT EXISTS questionnaire.sections (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    form_id UUID NOT NULL REFERENCES questionnaire.forms(id) ON DELETE CASCADE,
    title TEXT,
    sort_order INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS questionnaire.questions (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    section_id UUID NOT NULL REFERENCES questionnaire.sections(id) ON DELETE CASCADE,
    key VARCHAR(100) NOT NULL,
    prompt TEXT NOT NULL,
    type VARCHAR(50) NOT NULL DEFAULT 'text',
    required BOOLEAN NOT NULL DEFAULT FALSE,
    options JSONB,
    sort_order INTEGER NOT NULL DEFAULT 0,
    scoring_type VARCHAR(50),
    points_mapping JSONB
);

CREATE TABLE IF NOT EXISTS questionnaire.runs (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL,
    form_id UUID NOT NULL REFERENCES questionnaire.forms(id),
    status VARCHAR(20) NOT NULL DEFAULT 'in_progress',
    started_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    submitted_at TIMESTAMPTZ,
    risk_factor_score INTEGER,
    fitness_level_score INTEGER,
    calculated_risk_level VARCHAR(20),
    calculated_fitness_level INTEGER
);

CREATE INDEX IF NOT EXISTS idx_runs_user_form_started
    ON questionnaire.runs(user_id, form_id, started_at DESC);

CREATE TABLE IF NOT EXISTS questionnaire.answers (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    run_id UUID NOT NULL REFERENCES questionnaire.runs(id) ON DELETE CASCADE,
    question_id UUID NOT NULL REFERENCES questionnaire.questions(id),
    text_value TEXT,
    selected_values JSONB
);

CREATE INDEX IF NOT EXISTS idx_answers_run_id
    ON questionnaire.answers(run_id);

CREATE TABLE IF NOT EXISTS public."Users" (
    id UUID PRIMARY KEY,
    name TEXT,
    surname TEXT,
    height NUMERIC,
    weight NUMERIC,
    age INTEGER,
    fitness_level INTEGER,
    fitness_level_updated_at TIMESTAMPTZ,
    risk_factor VARCHAR(20),
    risk_factor_updated_at TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS public.fitness_history (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL,
    fitness_level INTEGER NOT NULL,
    risk_factor VARCHAR(20) NOT NULL,
    fitness_level_score INTEGER NOT NULL,
    risk_factor_score INTEGER NOT NULL,
    questionnaire_run_id UUID REFERENCES questionnaire.runs(id),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_fitness_history_user
    ON public.fitness_history(user_id, created_at);
"""


def ensure_schema(conn) -> bool:
    """Create the questionnaire tables if they don't exist."""
    try:
        with conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)
        logger.info("Questionnaire schema ready")
        return True
    except psycopg2.Error as e:
        logger.error(f"Schema creation failed: {e}")
        raise
