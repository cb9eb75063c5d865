"""
Ledger Store Interfaces.

Protocol-based interfaces for the persistence collaborator.
Implementations: SQLite (`src.adapters.sqlite.repos`), in-memory
(`src.adapters.memory`).

Every mutation happens inside `LedgerStorePort.transaction()`: the session
it yields commits when the block exits normally and rolls back everything
written through it when the block raises. Components open one transaction
per reader-debit/author-credit pair, so a storage failure can never leave a
debit applied without its matching credit.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import date, datetime
from typing import Protocol

from src.domain.entities import (
    Answer,
    Book,
    Chapter,
    DailyQuestion,
    DailyQuestionProfile,
    Profile,
    Subscription,
)

# -----------------------------------------------------------------------------
# Session (one open transaction)
# -----------------------------------------------------------------------------


class LedgerSessionPort(Protocol):
    """
    Repository operations available inside one transaction.

    Invariants:
    - At most one Subscription row per (book_id, profile_id)
    - At most one DailyQuestionProfile row per (question_id, profile_id)
    """

    # --- Profiles ---

    def get_profile(self, profile_id: int) -> Profile | None:
        """Get profile by ID."""
        ...

    def save_profile(self, profile: Profile) -> Profile:
        """Save profile (upsert)."""
        ...

    # --- Books & Chapters ---

    def get_book(self, book_id: int) -> Book | None:
        """Get book by ID."""
        ...

    def save_book(self, book: Book) -> Book:
        """Save book (upsert)."""
        ...

    def list_chapters(self, book_id: int) -> list[Chapter]:
        """List chapters of a book in publication (id) order."""
        ...

    def add_chapter(self, chapter: Chapter) -> Chapter:
        """Insert a chapter and return it with its assigned ID."""
        ...

    # --- Subscriptions ---

    def get_subscription(self, book_id: int, profile_id: int) -> Subscription | None:
        """Get the (book, profile) subscription row in whatever state."""
        ...

    def list_active_subscriptions(self, book_id: int) -> list[Subscription]:
        """Active rows for a book, ordered by created_at then profile_id."""
        ...

    def list_profile_subscriptions(self, profile_id: int) -> list[Subscription]:
        """All rows of a profile, ordered by created_at."""
        ...

    def save_subscription(self, subscription: Subscription) -> Subscription:
        """Save subscription row (upsert on book_id, profile_id)."""
        ...

    # --- Daily Questions ---

    def get_question(self, question_id: int) -> DailyQuestion | None:
        """Get a question with its answers."""
        ...

    def get_question_by_date(self, day: date) -> DailyQuestion | None:
        """Get the question scheduled for a calendar date."""
        ...

    def list_questions(self) -> list[DailyQuestion]:
        """All questions with answers, newest date first."""
        ...

    def add_question(self, question: DailyQuestion) -> DailyQuestion:
        """Insert a question with its answers; returns it with IDs assigned."""
        ...

    def delete_question(self, question_id: int) -> None:
        """Delete a question, its answers and its grading rows."""
        ...

    def get_answer(self, answer_id: int) -> Answer | None:
        """Get answer by ID."""
        ...

    def get_grading(self, question_id: int, profile_id: int) -> DailyQuestionProfile | None:
        """Get the grading row for (question, profile)."""
        ...

    def save_grading(self, grading: DailyQuestionProfile) -> DailyQuestionProfile:
        """Save grading row (upsert on question_id, profile_id)."""
        ...

    def latest_answered_at(self, profile_id: int) -> datetime | None:
        """Most recent grading timestamp across all questions, or None."""
        ...


# -----------------------------------------------------------------------------
# Store (transaction factory)
# -----------------------------------------------------------------------------


class LedgerStorePort(Protocol):
    """Opens scoped transactions against the ledger store."""

    def transaction(self) -> AbstractContextManager[LedgerSessionPort]:
        """
        Open a transaction.

        Commits on normal exit; rolls back and re-raises on exception.
        """
        ...
