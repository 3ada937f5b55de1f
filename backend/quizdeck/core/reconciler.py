# backend/quizdeck/core/reconciler.py

import logging
import math
from typing import Dict, List, Optional, Union

from .resolver import choice_text
from .schemas import (
    AttemptResult,
    Number,
    Question,
    Quiz,
    ReconciledAnswer,
    ReconciledResult,
    ResultAnswer,
)

logger = logging.getLogger("quizdeck.result")

NO_ANSWER = "No answer provided"


def percentage(score: Number, total_points: Number) -> int:
    """Whole-number percentage, rounding half up. A zero total yields 0."""
    if not total_points:
        return 0
    return int(math.floor(score / total_points * 100 + 0.5))


def _display(value: Union[str, List[str]], question: Question, matched: bool, by_index: bool) -> str:
    if isinstance(value, list):
        parts = value
        if matched and question.choices:
            parts = [choice_text(v, question.choices, by_index) for v in value]
        return ", ".join(parts)
    return value


def _merge(answer: ResultAnswer, question: Optional[Question]) -> ReconciledAnswer:
    matched = question is not None
    if matched:
        merged = question
    else:
        merged = answer.question

    user_display = _display(answer.user_answer, merged, matched, by_index=True) or NO_ANSWER
    return ReconciledAnswer(
        question_id=answer.question_id,
        question=merged,
        user_answer=answer.user_answer,
        correct_answer=answer.correct_answer,
        points_earned=answer.points_earned,
        is_correct=answer.is_correct,
        matched=matched,
        user_answer_display=user_display,
        correct_answer_display=_display(answer.correct_answer, merged, matched, by_index=False),
    )


def reconcile(result: AttemptResult, quiz: Optional[Quiz]) -> ReconciledResult:
    """
    Merge a scoring result with the quiz it was taken against.

    Outcomes are matched to questions by id, never by position. A matched
    outcome takes the question's text and declared points; an unmatched one
    (or every one, when `quiz` is None) keeps its placeholder and still
    renders. Matched outcomes follow quiz order, unmatched ones come after
    in the order the store returned them.
    """
    by_id: Dict[str, Question] = {}
    position: Dict[str, int] = {}
    if quiz is not None:
        for idx, q in enumerate(quiz.questions or []):
            if q.id is not None:
                by_id[q.id] = q
                position[q.id] = idx

    merged = [_merge(a, by_id.get(a.question_id)) for a in result.answers]
    unmatched = [a.question_id for a in merged if not a.matched]
    if quiz is not None and unmatched:
        logger.warning(
            f"Result {result.attempt_id}: {len(unmatched)} answer(s) without a matching question in quiz={quiz.id}"
        )

    # stable sort: unmatched entries keep response order after the matched ones
    merged.sort(key=lambda a: position.get(a.question_id, len(position)))

    return ReconciledResult(
        attempt_id=result.attempt_id,
        quiz_id=result.quiz_id,
        score=result.score,
        total_points=result.total_points,
        percentage=percentage(result.score, result.total_points),
        answers=merged,
    )
