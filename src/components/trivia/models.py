"""
Trivia component input/output models.

Invariants: at most one grading row per (question, profile).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Literal

from src.domain.entities import DailyQuestion

CreditPolicy = Literal["every_correct_submission", "first_correct_only"]

EVERY_CORRECT_SUBMISSION: CreditPolicy = "every_correct_submission"
FIRST_CORRECT_ONLY: CreditPolicy = "first_correct_only"

# --- Error Codes ---

QUESTION_NOT_FOUND = "question_not_found"
ANSWER_NOT_FOUND = "answer_not_found"
CORRECT_ANSWER_NOT_FOUND = "correct_answer_not_found"
PROFILE_NOT_FOUND = "profile_not_found"
NO_ANSWERS = "no_answers"
INVALID_CORRECT_COUNT = "invalid_correct_count"
INVALID_POINTS = "invalid_points"


@dataclass(frozen=True)
class TriviaError:
    """Trivia operation error."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class TriviaConfig:
    """Trivia configuration from rules."""

    credit_policy: CreditPolicy = EVERY_CORRECT_SUBMISSION


# --- Input Models ---


@dataclass(frozen=True)
class AnswerInput:
    """Input for answering a daily question."""

    question_id: int
    answer_id: int
    profile_id: int


@dataclass(frozen=True)
class LastAnsweredInput:
    """Input for looking up when a profile last answered."""

    profile_id: int


@dataclass(frozen=True)
class AnswerDraft:
    """One answer choice of a question being created."""

    content: str
    correct: bool = False


@dataclass(frozen=True)
class CreateQuestionInput:
    """Input for creating a daily question with its answers."""

    question: str
    points: float
    date: date
    answers: tuple[AnswerDraft, ...]


@dataclass(frozen=True)
class GetQuestionInput:
    """Input for getting the question of a calendar date."""

    date: date


@dataclass(frozen=True)
class ListQuestionsInput:
    """Input for listing all questions."""

    pass


@dataclass(frozen=True)
class DeleteQuestionInput:
    """Input for deleting a question."""

    question_id: int


# --- Output Models ---


@dataclass(frozen=True)
class AnswerOutput:
    """Output for answering a question."""

    correct_content: str | None = None
    was_correct: bool = False
    points_awarded: float = 0.0
    errors: list[TriviaError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class LastAnsweredOutput:
    """Output for last-answered lookup."""

    answered: bool = False
    answered_at: datetime | None = None
    errors: list[TriviaError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class QuestionOutput:
    """Output containing a single question."""

    question: DailyQuestion | None = None
    errors: list[TriviaError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class QuestionListOutput:
    """Output containing a list of questions."""

    questions: tuple[DailyQuestion, ...] = ()
    errors: list[TriviaError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class DeleteQuestionOutput:
    """Output for deleting a question."""

    errors: list[TriviaError] = field(default_factory=list)
    success: bool = True
