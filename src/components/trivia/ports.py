"""
Trivia component port definitions.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import date, datetime
from typing import Protocol

from src.domain.entities import Answer, DailyQuestion, DailyQuestionProfile, Profile


class TriviaSessionPort(Protocol):
    """Store operations the trivia ledger needs inside a transaction."""

    def get_profile(self, profile_id: int) -> Profile | None: ...

    def save_profile(self, profile: Profile) -> Profile: ...

    def get_question(self, question_id: int) -> DailyQuestion | None:
        """Get a question with its answers."""
        ...

    def get_question_by_date(self, day: date) -> DailyQuestion | None: ...

    def list_questions(self) -> list[DailyQuestion]:
        """Newest date first."""
        ...

    def add_question(self, question: DailyQuestion) -> DailyQuestion: ...

    def delete_question(self, question_id: int) -> None: ...

    def get_answer(self, answer_id: int) -> Answer | None: ...

    def get_grading(self, question_id: int, profile_id: int) -> DailyQuestionProfile | None: ...

    def save_grading(self, grading: DailyQuestionProfile) -> DailyQuestionProfile:
        """Upsert on (question_id, profile_id)."""
        ...

    def latest_answered_at(self, profile_id: int) -> datetime | None: ...


class TriviaStorePort(Protocol):
    """Opens scoped transactions."""

    def transaction(self) -> AbstractContextManager[TriviaSessionPort]:
        """Commit on normal exit, roll back on exception."""
        ...


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
