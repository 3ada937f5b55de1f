# backend/quizdeck/core/errors.py

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


# ------------------------------------------------------------
# Error taxonomy
# ------------------------------------------------------------
class QuizError(Exception):
    """Base class for every failure the core reports to its caller."""

    kind = "quiz_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingAnswer(QuizError):
    kind = "missing_answer"

    def __init__(self, message: str, question_id: str = "", question_text: str = ""):
        super().__init__(message)
        self.question_id = question_id
        self.question_text = question_text


class NoCorrectChoice(QuizError):
    kind = "no_correct_choice"


class InvalidChoiceCount(QuizError):
    kind = "invalid_choice_count"


class InvalidField(QuizError):
    kind = "invalid_field"


class NotFound(QuizError):
    kind = "not_found"


class NetworkFailure(QuizError):
    kind = "network_failure"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# ------------------------------------------------------------
# Typed outcome returned across the core boundary
# ------------------------------------------------------------
@dataclass
class Outcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[QuizError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: QuizError) -> "Outcome[T]":
        return cls(error=error)
