"""
FitBot Scoring Engine

Maps stored answers to a risk score and a fitness score using per-question
points mappings, then maps the scores to levels through fixed thresholds.

This module ONLY:
- Computes scores and levels (pure, see engine.py)
- Writes results to the user profile and fitness history
- Exposes a read-only scoring trace for debugging
"""

from .models import RiskLevel, AnswerTrace, ScoringResult
from .engine import (
    calculate_risk_level,
    calculate_fitness_level,
    score_answers,
    RISK_LEVEL_THRESHOLDS,
    FITNESS_LEVEL_THRESHOLDS,
)
from .service import score_run, record_scores, debug_scoring

__all__ = [
    # Models
    "RiskLevel",
    "AnswerTrace",
    "ScoringResult",
    # Engine
    "calculate_risk_level",
    "calculate_fitness_level",
    "score_answers",
    "RISK_LEVEL_THRESHOLDS",
    "FITNESS_LEVEL_THRESHOLDS",
    # Persistence
    "score_run",
    "record_scores",
    "debug_scoring",
]
