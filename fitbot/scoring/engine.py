"""
Scoring Engine
==============
Pure function of (answers, questions) -> scores -> levels.

Rules:
1. Effective value = first selected value of a selection answer, else the
   free-text value.
2. Points = question.points_mapping[value]; a missing mapping or key gives 0.
   Answers whose question is unknown are skipped.
3. risk_factor questions add to the risk score, fitness_level questions to the
   fitness score; any other category is ignored.
4. Scores map to levels through the fixed thresholds below.

Both the submission path and the debug endpoint call score_answers(), so
they cannot diverge.
"""

from typing import Dict, Iterable, List, Optional

from fitbot.forms.models import Question, ScoringType
from fitbot.questionnaire.models import Answer

from .models import AnswerTrace, RiskLevel, ScoringResult


# Lower bound (inclusive) -> level, checked from the top down.
RISK_LEVEL_THRESHOLDS = [
    (15, RiskLevel.LOW),
    (8, RiskLevel.MODERATE),
]
FITNESS_LEVEL_THRESHOLDS = [
    (28, 5),
    (21, 4),
    (14, 3),
    (7, 2),
]


def calculate_risk_level(score: int) -> RiskLevel:
    """<8 high, 8..14 moderate, >=15 low."""
    for lower_bound, level in RISK_LEVEL_THRESHOLDS:
        if score >= lower_bound:
            return level
    return RiskLevel.HIGH


def calculate_fitness_level(score: int) -> int:
    """<7 -> 1, 7..13 -> 2, 14..20 -> 3, 21..27 -> 4, >=28 -> 5."""
    for lower_bound, level in FITNESS_LEVEL_THRESHOLDS:
        if score >= lower_bound:
            return level
    return 1


def points_for(question: Question, value: Optional[str]) -> int:
    if value is None or not question.points_mapping:
        return 0
    return question.points_mapping.get(value, 0)


def score_answers(answers: Iterable[Answer], questions: Iterable[Question]) -> ScoringResult:
    """Score a full answer set against its questions."""
    questions_by_id: Dict[str, Question] = {q.id: q for q in questions}

    risk_score = 0
    fitness_score = 0
    trace: List[AnswerTrace] = []

    for answer in answers:
        question = questions_by_id.get(answer.question_id)
        if question is None:
            continue

        value = answer.effective_value()
        points = points_for(question, value)

        trace.append(AnswerTrace(
            question=question.prompt,
            key=question.key,
            scoring_type=question.scoring_type,
            answer=value,
            points_mapping=question.points_mapping,
            points_awarded=points,
        ))

        if question.scoring_type == ScoringType.RISK_FACTOR.value:
            risk_score += points
        elif question.scoring_type == ScoringType.FITNESS_LEVEL.value:
            fitness_score += points

    return ScoringResult(
        risk_score=risk_score,
        fitness_score=fitness_score,
        risk_level=calculate_risk_level(risk_score),
        fitness_level=calculate_fitness_level(fitness_score),
        trace=trace,
    )
