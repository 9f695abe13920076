"""
Questionnaire Form Models

Pydantic models for the static questionnaire structure:
- ScoringType: which score a question contributes to
- Question: one question with its scoring metadata
- Section / Form: ordered containers returned by the form endpoint
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from fitbot.shared.types import PointsMapping, RecordId


class ScoringType(str, Enum):
    """Scoring category of a question (None means not scored)."""
    RISK_FACTOR = "risk_factor"
    FITNESS_LEVEL = "fitness_level"


# Columns exposed to clients; scoring columns stay server-side.
QUESTION_PUBLIC_COLUMNS = [
    "id", "section_id", "key", "prompt", "type", "required", "options", "sort_order",
]
QUESTION_SCORING_COLUMNS = ["id", "key", "prompt", "scoring_type", "points_mapping"]


class Question(BaseModel):
    id: RecordId
    section_id: Optional[RecordId] = None
    key: str
    prompt: str = ""
    type: Optional[str] = None
    required: bool = False
    options: Optional[List[Any]] = None
    sort_order: int = 0
    # Unknown categories are kept as-is and simply not scored.
    scoring_type: Optional[str] = None
    points_mapping: Optional[PointsMapping] = None


class Section(BaseModel):
    id: Any
    title: Optional[str] = None
    sort_order: int = 0
    questions: List[dict] = Field(default_factory=list)


class Form(BaseModel):
    id: Any
    title: Optional[str] = None
    sections: List[Section] = Field(default_factory=list)


class FormRequest(BaseModel):
    """Form endpoint body; the slug is fixed by configuration."""
    model_config = {"extra": "ignore"}
