"""
Questionnaire Run Models

Pydantic models for the run/answer workflow:
- RunStatus: stored run lifecycle (not_started is the absence of a row)
- QuestionnaireStatus: status reported to clients
- TextAnswer / SelectionAnswer: tagged union of answer shapes
- QuestionnaireRequest: action envelope of the questionnaire endpoint
"""

from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Discriminator, Field, Tag, TypeAdapter, field_validator

from fitbot.shared.types import RecordId


class RunStatus(str, Enum):
    """Stored run states. SUBMITTED is terminal."""
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"


class QuestionnaireStatus(str, Enum):
    """Status returned by getStatus."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class QuestionnaireAction(str, Enum):
    GET_STATUS = "getStatus"
    GET_EXISTING_RUN = "getExistingRun"
    GET_FORM = "getForm"
    START_RUN = "startRun"
    SAVE_ANSWERS = "saveAnswers"


RUN_COLUMNS = ["id", "status", "started_at", "submitted_at"]
ANSWER_COLUMNS = ["question_id", "text_value", "selected_values"]


# ============================================
# ANSWERS
# ============================================

def _stringify(value: Any) -> Any:
    # Numeric answers ("3" vs 3) must hit the same points-mapping key.
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


class TextAnswer(BaseModel):
    """Free-text (or single scalar) answer."""
    kind: Literal["text"] = "text"
    question_id: RecordId
    text_value: Optional[str] = None

    @field_validator("text_value", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Any:
        return _stringify(v)

    def effective_value(self) -> Optional[str]:
        return self.text_value or None

    def to_row(self, run_id: str) -> Dict[str, Any]:
        return {
            "run_id": run_id,
            "question_id": self.question_id,
            "text_value": self.text_value,
            "selected_values": None,
        }


class SelectionAnswer(BaseModel):
    """Answer picked from the question's options."""
    kind: Literal["selection"] = "selection"
    question_id: RecordId
    selected_values: List[str] = Field(default_factory=list)

    @field_validator("selected_values", mode="before")
    @classmethod
    def _coerce_selected(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_stringify(item) for item in v]
        return v

    def effective_value(self) -> Optional[str]:
        return self.selected_values[0] if self.selected_values else None

    def to_row(self, run_id: str) -> Dict[str, Any]:
        return {
            "run_id": run_id,
            "question_id": self.question_id,
            "text_value": None,
            "selected_values": list(self.selected_values),
        }


def _answer_kind(value: Any) -> Optional[str]:
    """Explicit ``kind`` wins; otherwise a non-empty selection means selection."""
    if isinstance(value, dict):
        if value.get("kind"):
            return value["kind"]
        return "selection" if value.get("selected_values") else "text"
    return getattr(value, "kind", None)


Answer = Annotated[
    Union[
        Annotated[TextAnswer, Tag("text")],
        Annotated[SelectionAnswer, Tag("selection")],
    ],
    Discriminator(_answer_kind),
]

_answer_list_adapter = TypeAdapter(List[Answer])


def answers_from_rows(rows: List[Dict[str, Any]]) -> List[Union[TextAnswer, SelectionAnswer]]:
    """Convert stored answer rows into typed answers."""
    return _answer_list_adapter.validate_python(rows)


# ============================================
# REQUEST ENVELOPE
# ============================================

class QuestionnaireRequest(BaseModel):
    """
    Body of the questionnaire endpoint.

    ``action`` stays a plain string so an unknown action yields
    "Invalid action" rather than a schema error.
    """
    model_config = {"populate_by_name": True, "extra": "ignore"}

    action: Optional[str] = None
    user_id: Optional[RecordId] = Field(default=None, alias="userId")
    run_id: Optional[RecordId] = Field(default=None, alias="runId")
    answers: Optional[List[Answer]] = None
    status: Optional[RunStatus] = None
