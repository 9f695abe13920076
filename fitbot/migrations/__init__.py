"""Schema bootstrap for the questionnaire store."""

from .schema import SCHEMA_SQL, ensure_schema

__all__ = ["SCHEMA_SQL", "ensure_schema"]
