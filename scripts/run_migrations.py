#!/usr/bin/env python3
"""
FitBot Schema Bootstrap
=======================
Creates the questionnaire tables on startup.

Usage:
    python scripts/run_migrations.py

Or import and call:
    from scripts.run_migrations import run_schema_bootstrap
    run_schema_bootstrap()
"""

import sys
import logging
from typing import Optional

import psycopg2

from fitbot.config import Settings, configure_logging
from fitbot.migrations import ensure_schema

logger = logging.getLogger(__name__)


def run_schema_bootstrap(settings: Optional[Settings] = None) -> dict:
    """
    Apply the idempotent questionnaire schema.

    Returns:
        dict with 'success' and 'errors'
    """
    settings = settings or Settings.from_env()
    result = {'success': True, 'errors': []}

    if not settings.database_url:
        logger.error("DATABASE_URL is not configured")
        result['success'] = False
        result['errors'].append("DATABASE_URL is not configured")
        return result

    try:
        conn = psycopg2.connect(settings.database_url)
        logger.info("Database connection established")
    except psycopg2.Error as e:
        logger.error(f"Failed to connect to database: {e}")
        result['success'] = False
        result['errors'].append(str(e))
        return result

    try:
        ensure_schema(conn)
    except psycopg2.Error as e:
        result['success'] = False
        result['errors'].append(str(e))
    finally:
        conn.close()

    return result


if __name__ == "__main__":
    configure_logging()
    outcome = run_schema_bootstrap()
    sys.exit(0 if outcome['success'] else 1)
