"""
Form Server

Pure read composition across forms -> sections -> questions.
"""

import logging
from typing import Any, Dict

from fitbot.db import FORMS_TABLE, QUESTIONS_TABLE, SECTIONS_TABLE, TableClient
from fitbot.shared.errors import not_found

from .models import QUESTION_PUBLIC_COLUMNS, Form, Section

logger = logging.getLogger(__name__)


def get_form_id(client: TableClient, slug: str) -> Any:
    """Resolve a form slug to its id. Raises NOT_FOUND for unknown slugs."""
    form = client.select_one(FORMS_TABLE, columns=["id"], filters={"slug": slug})
    if not form:
        raise not_found(f"Form not found: {slug}")
    return form["id"]


def get_form(client: TableClient, slug: str) -> Dict[str, Any]:
    """
    Return the form with its sections and questions, both ordered by sort_order.

    Questions are grouped under their section; a section without questions
    gets an empty list.
    """
    form = client.select_one(FORMS_TABLE, columns=["id", "title"], filters={"slug": slug})
    if not form:
        raise not_found(f"Form not found: {slug}")

    sections = client.select(
        SECTIONS_TABLE,
        columns=["id", "title", "sort_order"],
        filters={"form_id": form["id"]},
        order_by="sort_order",
    )
    questions = client.select(
        QUESTIONS_TABLE,
        columns=QUESTION_PUBLIC_COLUMNS,
        filters={"section_id": [s["id"] for s in sections]},
        order_by="sort_order",
    )

    by_section: Dict[Any, list] = {}
    for question in questions:
        by_section.setdefault(question["section_id"], []).append(question)

    result = Form(
        id=form["id"],
        title=form.get("title"),
        sections=[
            Section(
                id=section["id"],
                title=section.get("title"),
                sort_order=section.get("sort_order") or 0,
                questions=by_section.get(section["id"], []),
            )
            for section in sections
        ],
    )
    logger.info(f"Form {slug}: {len(sections)} sections, {len(questions)} questions")
    return result.model_dump()
