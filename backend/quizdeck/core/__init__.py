# backend/quizdeck/core/__init__.py
"""
Core package for quizdeck.
Answer normalization, attempt assembly and result reconciliation.
"""

from .assembler import assemble, coerce_draft, initial_drafts
from .errors import (
    InvalidChoiceCount,
    InvalidField,
    MissingAnswer,
    NetworkFailure,
    NoCorrectChoice,
    NotFound,
    Outcome,
    QuizError,
)
from .form_codec import decode_question, encode_question_form, encode_quiz_form, slugify
from .reconciler import percentage, reconcile
from .resolver import resolve_choice
from .result_slot import ResultSlot

__all__ = [
    "assemble",
    "coerce_draft",
    "initial_drafts",
    "decode_question",
    "encode_question_form",
    "encode_quiz_form",
    "slugify",
    "percentage",
    "reconcile",
    "resolve_choice",
    "ResultSlot",
    "Outcome",
    "QuizError",
    "MissingAnswer",
    "NoCorrectChoice",
    "InvalidChoiceCount",
    "InvalidField",
    "NotFound",
    "NetworkFailure",
]
