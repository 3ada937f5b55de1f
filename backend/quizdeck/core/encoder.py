# backend/quizdeck/core/encoder.py

from typing import List, Union

from .errors import InvalidChoiceCount, InvalidField, MissingAnswer, NoCorrectChoice
from .resolver import resolve_choice, resolve_choices
from .schemas import (
    MCQ_MULTI,
    MCQ_SINGLE,
    SINGLE_SELECT_TYPES,
    TEXT,
    TRUE_FALSE,
    AttemptAnswer,
    ChoiceForm,
    ChoiceValue,
    DraftValue,
    MultiChoiceValue,
    Question,
    QuestionForm,
    TextValue,
)

BOOLEAN_CHOICES = ("True", "False")


# ------------------------------------------------------------
# Taking side
# ------------------------------------------------------------
def _selection(draft: DraftValue) -> List[str]:
    if isinstance(draft, MultiChoiceValue):
        return list(draft.values)
    if isinstance(draft, (ChoiceValue, TextValue)) and draft.value:
        return [draft.value]
    return []


def encode_answer(question: Question, draft: DraftValue) -> AttemptAnswer:
    """Build the wire answer for one question. Raises MissingAnswer when incomplete."""
    qid = question.id or ""

    if question.type == TEXT:
        text = draft.value if isinstance(draft, (TextValue, ChoiceValue)) else ""
        if not text.strip():
            raise MissingAnswer(f"Please answer: {question.text}", qid, question.text)
        return AttemptAnswer(question_id=qid, text_answer=text)

    selected = _selection(draft)

    if question.type in SINGLE_SELECT_TYPES:
        if len(selected) != 1:
            raise MissingAnswer(f"Please select an answer for: {question.text}", qid, question.text)
        return AttemptAnswer(
            question_id=qid,
            selected_choice_ids=[resolve_choice(selected[0], question.choices)],
        )

    if not selected:
        raise MissingAnswer(f"Please select at least one answer for: {question.text}", qid, question.text)
    # duplicates are left for the store to judge
    return AttemptAnswer(
        question_id=qid,
        selected_choice_ids=resolve_choices(selected, question.choices),
    )


# ------------------------------------------------------------
# Authoring side
# ------------------------------------------------------------
def flagged_indices(choices: List[ChoiceForm]) -> List[str]:
    return [str(idx) for idx, c in enumerate(choices) if c.is_correct]


def derive_correct_answer(form: QuestionForm) -> Union[str, List[str]]:
    """
    Derive `correctAnswer` for a choice question from its flagged choices.

    MCQ_SINGLE yields the first flagged index as a scalar, MCQ_MULTI every
    flagged index as a list. Raises NoCorrectChoice when nothing is flagged.
    """
    flagged = flagged_indices(form.choices)
    if not flagged:
        raise NoCorrectChoice("At least one choice must be marked as correct")
    if form.type == MCQ_SINGLE:
        return flagged[0]
    return flagged


def validate_question_form(form: QuestionForm) -> None:
    if not form.text.strip():
        raise InvalidField("Question text is required")
    if form.points < 1:
        raise InvalidField("Points must be at least 1")

    if form.type in (MCQ_SINGLE, MCQ_MULTI):
        if len(form.choices) < 2:
            raise InvalidChoiceCount("At least 2 choices are required for MCQ questions")
        derive_correct_answer(form)

    elif form.type == TRUE_FALSE:
        if len(form.choices) != 2:
            raise InvalidChoiceCount("True/False questions must have exactly 2 choices")
        if len(flagged_indices(form.choices)) != 1:
            raise NoCorrectChoice("Please select the correct answer")
