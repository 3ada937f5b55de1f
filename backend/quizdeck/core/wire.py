# backend/quizdeck/core/wire.py
"""
Translation between the quiz store's wire shapes and the in-memory models.

The store speaks underscore keys on the attempt/score exchange and camel
keys on quiz/question documents. Nothing outside this module should know
either spelling.
"""

from typing import Any, Dict, List

from .schemas import (
    AttemptAnswer,
    AttemptResult,
    Question,
    Quiz,
    QuizForm,
    ResultAnswer,
    ScoringResponse,
)


# ------------------------------------------------------------
# Quiz
# ------------------------------------------------------------
def quiz_from_wire(data: Dict[str, Any]) -> Quiz:
    return Quiz.model_validate(data)


def quizzes_from_wire(data: List[Dict[str, Any]]) -> List[Quiz]:
    return [quiz_from_wire(item) for item in data]


def quiz_to_wire(form: QuizForm, slug: str) -> Dict[str, Any]:
    return {
        "title": form.title,
        "description": form.description,
        "slug": slug,
        "published": form.published,
    }


# ------------------------------------------------------------
# Question
# ------------------------------------------------------------
def question_from_wire(data: Dict[str, Any]) -> Question:
    return Question.model_validate(data)


# ------------------------------------------------------------
# Attempt
# ------------------------------------------------------------
def attempt_to_wire(answers: List[AttemptAnswer]) -> Dict[str, Any]:
    return {"answers": [a.model_dump(exclude_none=True) for a in answers]}


def attempt_from_wire(data: Dict[str, Any]) -> List[AttemptAnswer]:
    return [AttemptAnswer.model_validate(a) for a in data.get("answers", [])]


# ------------------------------------------------------------
# Scoring response
# ------------------------------------------------------------
def result_from_wire(data: Dict[str, Any]) -> AttemptResult:
    """
    Map a scoring response onto the in-memory result.

    Each answer carries a placeholder question (id, type, max points, no
    text) until it is reconciled against the quiz.
    """
    resp = ScoringResponse.model_validate(data)
    answers = []
    for ans in resp.answers:
        placeholder = Question(
            id=ans.question_id,
            quiz_id=resp.quiz_id,
            type=ans.type,
            text="",
            points=ans.max_points,
        )
        if ans.selected_choice_ids is not None:
            user_answer = ans.selected_choice_ids
        else:
            user_answer = ans.text_answer or ""
        answers.append(
            ResultAnswer(
                question_id=ans.question_id,
                question=placeholder,
                user_answer=user_answer,
                correct_answer=ans.correct_choice_texts or ans.correct_choice_ids,
                points_earned=ans.points_awarded,
                is_correct=ans.is_correct,
            )
        )
    return AttemptResult(
        attempt_id=resp.attempt_id,
        quiz_id=resp.quiz_id,
        score=resp.score,
        total_points=resp.max_score,
        answers=answers,
    )
