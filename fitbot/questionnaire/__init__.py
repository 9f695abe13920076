"""
FitBot Run/Answer Manager

Creates or resumes questionnaire runs, persists answers, and triggers
scoring on submission. The endpoint lives in ``fitbot.questionnaire.router``.
"""

from .models import (
    RunStatus,
    QuestionnaireStatus,
    QuestionnaireAction,
    TextAnswer,
    SelectionAnswer,
    Answer,
    QuestionnaireRequest,
    answers_from_rows,
)

__all__ = [
    "RunStatus",
    "QuestionnaireStatus",
    "QuestionnaireAction",
    "TextAnswer",
    "SelectionAnswer",
    "Answer",
    "QuestionnaireRequest",
    "answers_from_rows",
]
