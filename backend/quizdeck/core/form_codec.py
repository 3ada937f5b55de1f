# backend/quizdeck/core/form_codec.py

import re
from typing import Any, Dict, List

from .encoder import BOOLEAN_CHOICES, derive_correct_answer, validate_question_form
from .errors import InvalidField, Outcome, QuizError
from .schemas import (
    MCQ_MULTI,
    MCQ_SINGLE,
    TRUE_FALSE,
    ChoiceForm,
    Question,
    QuestionForm,
    QuizForm,
)
from .wire import quiz_to_wire


# ------------------------------------------------------------
# Question form
# ------------------------------------------------------------
def default_form(question_type: str) -> QuestionForm:
    """Blank form for a type; True/False starts with its fixed pair unflagged."""
    choices: List[ChoiceForm] = []
    if question_type == TRUE_FALSE:
        choices = [ChoiceForm(text=t, is_correct=False) for t in BOOLEAN_CHOICES]
    return QuestionForm(type=question_type, choices=choices)


def encode_question_form(form: QuestionForm) -> Outcome[Dict[str, Any]]:
    """Validate an authoring form and build the store payload for it."""
    try:
        validate_question_form(form)
    except QuizError as e:
        return Outcome.failure(e)

    payload: Dict[str, Any] = {
        "type": form.type,
        "text": form.text,
        "points": form.points,
    }
    if form.type in (MCQ_SINGLE, MCQ_MULTI):
        payload["choices"] = [{"text": c.text, "isCorrect": c.is_correct} for c in form.choices]
        payload["correctAnswer"] = derive_correct_answer(form)
    elif form.type == TRUE_FALSE:
        payload["choices"] = [{"text": c.text, "is_correct": c.is_correct} for c in form.choices]
    return Outcome.success(payload)


def decode_question(question: Question) -> QuestionForm:
    """Rebuild the authoring form from a stored question."""
    correct = question.correct_answer
    choices: List[ChoiceForm] = []

    if question.type == TRUE_FALSE:
        if question.choices:
            choices = [ChoiceForm(text=c.text, is_correct=bool(c.is_correct)) for c in question.choices]
        else:
            true_correct = correct in ("true", "0")
            choices = [
                ChoiceForm(text=BOOLEAN_CHOICES[0], is_correct=true_correct),
                ChoiceForm(text=BOOLEAN_CHOICES[1], is_correct=not true_correct),
            ]

    elif question.type in (MCQ_SINGLE, MCQ_MULTI):
        keys = correct if isinstance(correct, list) else ([correct] if correct is not None else [])
        indices = {int(k) for k in keys if k.isdecimal()}
        choices = [
            ChoiceForm(text=c.text, is_correct=idx in indices)
            for idx, c in enumerate(question.choices or [])
        ]

    return QuestionForm(
        type=question.type,
        text=question.text,
        points=question.points,
        choices=choices,
    )


# ------------------------------------------------------------
# Quiz form
# ------------------------------------------------------------
def slugify(title: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
    return slug.strip("-")


def encode_quiz_form(form: QuizForm) -> Outcome[Dict[str, Any]]:
    if not form.title.strip():
        return Outcome.failure(InvalidField("Title is required"))
    return Outcome.success(quiz_to_wire(form, slugify(form.title)))
