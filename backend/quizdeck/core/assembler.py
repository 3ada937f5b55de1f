# backend/quizdeck/core/assembler.py

import logging
from typing import Dict, List, Mapping, Union

from .encoder import encode_answer
from .errors import MissingAnswer, Outcome
from .schemas import (
    MCQ_MULTI,
    SINGLE_SELECT_TYPES,
    AttemptAnswer,
    ChoiceValue,
    DraftValue,
    MultiChoiceValue,
    Question,
    Quiz,
    TextValue,
)

logger = logging.getLogger("quizdeck.attempt")


def default_draft(question: Question) -> DraftValue:
    """Empty draft shaped for the question's type."""
    if question.type == MCQ_MULTI:
        return MultiChoiceValue()
    if question.type in SINGLE_SELECT_TYPES:
        return ChoiceValue()
    return TextValue()


def initial_drafts(quiz: Quiz) -> Dict[str, DraftValue]:
    return {q.id or "": default_draft(q) for q in quiz.questions or []}


def coerce_draft(question: Question, raw: Union[str, List[str], None]) -> DraftValue:
    """Turn a loose `str | list[str]` from the client into a typed draft."""
    if raw is None:
        return default_draft(question)
    if question.type == MCQ_MULTI:
        values = raw if isinstance(raw, list) else ([raw] if raw else [])
        return MultiChoiceValue(values=[str(v) for v in values])
    if isinstance(raw, list):
        # anything but exactly one entry is kept whole so the encoder rejects it
        if len(raw) != 1:
            return MultiChoiceValue(values=[str(v) for v in raw])
        raw = str(raw[0])
    if question.type in SINGLE_SELECT_TYPES:
        return ChoiceValue(value=raw)
    return TextValue(value=raw)


def assemble(quiz: Quiz, drafts: Mapping[str, DraftValue]) -> Outcome[List[AttemptAnswer]]:
    """
    Build the ordered attempt payload for a quiz.

    Questions are visited in quiz order and every one must be complete.
    The first incomplete question aborts assembly; its text is embedded in
    the returned MissingAnswer and no partial payload is produced.
    """
    answers: List[AttemptAnswer] = []
    for question in quiz.questions or []:
        draft = drafts.get(question.id or "")
        if draft is None:
            draft = default_draft(question)
        try:
            answers.append(encode_answer(question, draft))
        except MissingAnswer as e:
            logger.info(f"Attempt for quiz={quiz.id} incomplete at question={question.id}")
            return Outcome.failure(e)

    logger.debug(f"Assembled {len(answers)} answers for quiz={quiz.id}")
    return Outcome.success(answers)
