from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from typing import Annotated, Dict, List, Literal, Optional, Union

# ------------------------------------------------------------
# Question types
# ------------------------------------------------------------
QuestionType = Literal["MCQ_SINGLE", "MCQ_MULTI", "TRUE_FALSE", "TEXT"]

MCQ_SINGLE = "MCQ_SINGLE"
MCQ_MULTI = "MCQ_MULTI"
TRUE_FALSE = "TRUE_FALSE"
TEXT = "TEXT"

SINGLE_SELECT_TYPES = (MCQ_SINGLE, TRUE_FALSE)
CHOICE_TYPES = (MCQ_SINGLE, MCQ_MULTI, TRUE_FALSE)

Number = Union[int, float]


# ------------------------------------------------------------
# Quiz store entities
# ------------------------------------------------------------
class Choice(BaseModel):
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    text: str
    # authoring only, never trusted from the taking flow
    is_correct: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("isCorrect", "is_correct")
    )


class Question(BaseModel):
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    quiz_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("quizId", "quiz_id"))
    type: QuestionType
    text: str = ""
    points: Number = 1
    choices: Optional[List[Choice]] = None
    correct_answer: Optional[Union[str, List[str]]] = Field(
        default=None, validation_alias=AliasChoices("correctAnswer", "correct_answer")
    )

    @field_validator("correct_answer", mode="before")
    @classmethod
    def _stringify_keys(cls, v):
        # store sometimes sends indices as numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(int(v))
        if isinstance(v, list):
            return [str(x) for x in v]
        return v


class Quiz(BaseModel):
    id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id"))
    title: str
    description: str = ""
    slug: str = ""
    published: bool = False
    questions: Optional[List[Question]] = None
    question_count: Optional[int] = None   # list responses may omit questions
    created_at: Optional[str] = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))
    updated_at: Optional[str] = Field(default=None, validation_alias=AliasChoices("updatedAt", "updated_at"))


# ------------------------------------------------------------
# Draft answers (taking flow)
# ------------------------------------------------------------
class TextValue(BaseModel):
    kind: Literal["text"] = "text"
    value: str = ""


class ChoiceValue(BaseModel):
    kind: Literal["choice"] = "choice"
    value: str = ""


class MultiChoiceValue(BaseModel):
    kind: Literal["multi"] = "multi"
    values: List[str] = Field(default_factory=list)


DraftValue = Annotated[
    Union[TextValue, ChoiceValue, MultiChoiceValue],
    Field(discriminator="kind"),
]


# ------------------------------------------------------------
# Attempt & scoring wire models
# ------------------------------------------------------------
class AttemptAnswer(BaseModel):
    question_id: str
    selected_choice_ids: Optional[List[str]] = None
    text_answer: Optional[str] = None

    @model_validator(mode="after")
    def _one_answer_form(self):
        if (self.selected_choice_ids is None) == (self.text_answer is None):
            raise ValueError("exactly one of selected_choice_ids or text_answer is required")
        return self


class ScoringOutcome(BaseModel):
    question_id: str
    type: str
    is_correct: bool
    max_points: Number
    points_awarded: Number
    correct_choice_ids: List[str] = Field(default_factory=list)
    correct_choice_texts: List[str] = Field(default_factory=list)
    selected_choice_ids: Optional[List[str]] = None
    text_answer: Optional[str] = None


class ScoringResponse(BaseModel):
    attempt_id: str
    quiz_id: str
    score: Number
    max_score: Number
    answers: List[ScoringOutcome] = Field(default_factory=list)


# ------------------------------------------------------------
# Result models (in-memory)
# ------------------------------------------------------------
class ResultAnswer(BaseModel):
    question_id: str
    question: Question            # placeholder without text until reconciled
    user_answer: Union[str, List[str]]
    correct_answer: Union[str, List[str]]
    points_earned: Number
    is_correct: bool


class AttemptResult(BaseModel):
    attempt_id: str
    quiz_id: str
    score: Number
    total_points: Number
    answers: List[ResultAnswer] = Field(default_factory=list)


class ReconciledAnswer(ResultAnswer):
    matched: bool = False
    user_answer_display: str = ""
    correct_answer_display: str = ""


class ReconciledResult(BaseModel):
    attempt_id: str
    quiz_id: str
    score: Number
    total_points: Number
    percentage: int
    answers: List[ReconciledAnswer] = Field(default_factory=list)


# ------------------------------------------------------------
# Authoring forms
# ------------------------------------------------------------
class ChoiceForm(BaseModel):
    text: str = ""
    is_correct: bool = Field(default=False, validation_alias=AliasChoices("isCorrect", "is_correct"))


class QuestionForm(BaseModel):
    type: QuestionType = MCQ_SINGLE
    text: str = ""
    points: int = 1
    choices: List[ChoiceForm] = Field(default_factory=list)


class QuizForm(BaseModel):
    title: str = ""
    description: str = ""
    published: bool = False


# ------------------------------------------------------------
# Route request/response models
# ------------------------------------------------------------
class AttemptRequest(BaseModel):
    answers: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)


class AttemptSubmittedResponse(BaseModel):
    status: str
    result_id: str


class QuizDetailResponse(BaseModel):
    status: str
    quiz: Quiz
    drafts: Dict[str, DraftValue]


class ResultResponse(BaseModel):
    status: str
    result: ReconciledResult
