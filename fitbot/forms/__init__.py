"""
FitBot Form Server

Serves the static questionnaire structure (sections -> questions) for a
named form.
"""

from .models import ScoringType, Question, Section, Form
from .service import get_form, get_form_id
from .router import router as form_router

__all__ = [
    "ScoringType",
    "Question",
    "Section",
    "Form",
    "get_form",
    "get_form_id",
    "form_router",
]
