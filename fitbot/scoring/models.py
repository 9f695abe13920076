"""
Scoring Models

- RiskLevel: discrete risk classification
- AnswerTrace: per-answer scoring record (debug output)
- ScoringResult: raw scores, derived levels and the trace that produced them
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    HIGH = "high"
    MODERATE = "moderate"
    LOW = "low"


class AnswerTrace(BaseModel):
    """How one answer contributed to the scores."""
    question: str
    key: str
    scoring_type: Optional[str] = None
    answer: Optional[str] = None
    points_mapping: Optional[Dict[str, int]] = None
    points_awarded: int = 0


class ScoringResult(BaseModel):
    risk_score: int = 0
    fitness_score: int = 0
    risk_level: RiskLevel
    fitness_level: int = Field(ge=1, le=5)
    trace: List[AnswerTrace] = Field(default_factory=list)

    def to_run_columns(self) -> Dict[str, Any]:
        """Column values stored on the run at submission."""
        return {
            "risk_factor_score": self.risk_score,
            "fitness_level_score": self.fitness_score,
            "calculated_risk_level": self.risk_level.value,
            "calculated_fitness_level": self.fitness_level,
        }

    def summary(self) -> Dict[str, Any]:
        return {
            "riskScore": self.risk_score,
            "fitnessScore": self.fitness_score,
            "riskLevel": self.risk_level.value,
            "fitnessLevel": self.fitness_level,
        }
