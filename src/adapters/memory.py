"""In-memory ledger store adapter.

This adapter implements LedgerStorePort with plain dicts. Transactions take a
snapshot on entry and restore it if the block raises, matching the SQLite
adapter's commit-or-rollback behaviour. Used by component tests and for
single-process experiments.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any

from src.domain.entities import (
    Answer,
    Book,
    Chapter,
    DailyQuestion,
    DailyQuestionProfile,
    Profile,
    Subscription,
)


class _State:
    def __init__(self) -> None:
        self.profiles: dict[int, Profile] = {}
        self.books: dict[int, Book] = {}
        self.chapters: dict[int, Chapter] = {}
        self.subscriptions: dict[tuple[int, int], Subscription] = {}
        self.questions: dict[int, DailyQuestion] = {}
        self.answers: dict[int, Answer] = {}
        self.gradings: dict[tuple[int, int], DailyQuestionProfile] = {}
        self.next_ids: dict[str, int] = {"chapter": 1, "question": 1, "answer": 1}

    def next_id(self, kind: str) -> int:
        value = self.next_ids[kind]
        self.next_ids[kind] = value + 1
        return value


class InMemoryLedgerSession:
    """Repository operations over the in-memory state."""

    def __init__(self, state: _State) -> None:
        self._s = state

    # --- Profiles ---

    def get_profile(self, profile_id: int) -> Profile | None:
        profile = self._s.profiles.get(profile_id)
        return profile.model_copy() if profile else None

    def save_profile(self, profile: Profile) -> Profile:
        self._s.profiles[profile.id] = profile.model_copy()
        return profile

    # --- Books & Chapters ---

    def get_book(self, book_id: int) -> Book | None:
        book = self._s.books.get(book_id)
        return book.model_copy() if book else None

    def save_book(self, book: Book) -> Book:
        self._s.books[book.id] = book.model_copy()
        return book

    def list_chapters(self, book_id: int) -> list[Chapter]:
        chapters = [c for c in self._s.chapters.values() if c.book_id == book_id]
        return [c.model_copy() for c in sorted(chapters, key=lambda c: c.id or 0)]

    def add_chapter(self, chapter: Chapter) -> Chapter:
        chapter_id = chapter.id if chapter.id is not None else self._s.next_id("chapter")
        if chapter_id >= self._s.next_ids["chapter"]:
            self._s.next_ids["chapter"] = chapter_id + 1
        stored = chapter.model_copy(update={"id": chapter_id})
        self._s.chapters[chapter_id] = stored
        return stored.model_copy()

    # --- Subscriptions ---

    def get_subscription(self, book_id: int, profile_id: int) -> Subscription | None:
        return self._s.subscriptions.get((book_id, profile_id))

    def list_active_subscriptions(self, book_id: int) -> list[Subscription]:
        rows = [
            s for s in self._s.subscriptions.values() if s.book_id == book_id and s.is_active
        ]
        return sorted(rows, key=lambda s: (s.created_at, s.profile_id))

    def list_profile_subscriptions(self, profile_id: int) -> list[Subscription]:
        rows = [s for s in self._s.subscriptions.values() if s.profile_id == profile_id]
        return sorted(rows, key=lambda s: (s.created_at, s.book_id))

    def save_subscription(self, subscription: Subscription) -> Subscription:
        # Subscription is frozen, no copy needed
        self._s.subscriptions[(subscription.book_id, subscription.profile_id)] = subscription
        return subscription

    # --- Daily Questions ---

    def _with_answers(self, question: DailyQuestion) -> DailyQuestion:
        answers = sorted(
            (a.model_copy() for a in self._s.answers.values() if a.question_id == question.id),
            key=lambda a: a.id or 0,
        )
        return question.model_copy(update={"answers": answers})

    def get_question(self, question_id: int) -> DailyQuestion | None:
        question = self._s.questions.get(question_id)
        return self._with_answers(question) if question else None

    def get_question_by_date(self, day: date) -> DailyQuestion | None:
        for question in sorted(self._s.questions.values(), key=lambda q: q.id or 0):
            if question.date == day:
                return self._with_answers(question)
        return None

    def list_questions(self) -> list[DailyQuestion]:
        ordered = sorted(
            self._s.questions.values(), key=lambda q: (q.date, q.id or 0), reverse=True
        )
        return [self._with_answers(q) for q in ordered]

    def add_question(self, question: DailyQuestion) -> DailyQuestion:
        question_id = self._s.next_id("question")
        self._s.questions[question_id] = question.model_copy(
            update={"id": question_id, "answers": []}
        )
        for answer in question.answers:
            answer_id = self._s.next_id("answer")
            self._s.answers[answer_id] = answer.model_copy(
                update={"id": answer_id, "question_id": question_id}
            )
        return self._with_answers(self._s.questions[question_id])

    def delete_question(self, question_id: int) -> None:
        self._s.questions.pop(question_id, None)
        stale = [a for a, ans in self._s.answers.items() if ans.question_id == question_id]
        for answer_id in stale:
            del self._s.answers[answer_id]
        for key in [k for k in self._s.gradings if k[0] == question_id]:
            del self._s.gradings[key]

    def get_answer(self, answer_id: int) -> Answer | None:
        answer = self._s.answers.get(answer_id)
        return answer.model_copy() if answer else None

    def get_grading(self, question_id: int, profile_id: int) -> DailyQuestionProfile | None:
        row = self._s.gradings.get((question_id, profile_id))
        return row.model_copy() if row else None

    def save_grading(self, grading: DailyQuestionProfile) -> DailyQuestionProfile:
        self._s.gradings[(grading.question_id, grading.profile_id)] = grading.model_copy()
        return grading

    def latest_answered_at(self, profile_id: int) -> datetime | None:
        stamps = [g.date_answered for g in self._s.gradings.values() if g.profile_id == profile_id]
        return max(stamps) if stamps else None


class InMemoryLedgerStore:
    """In-memory ledger storage - suitable for tests and single-process use."""

    session_class: type[InMemoryLedgerSession] = InMemoryLedgerSession

    def __init__(self) -> None:
        self._state = _State()

    @contextmanager
    def transaction(self) -> Iterator[InMemoryLedgerSession]:
        snapshot = copy.deepcopy(self._state)
        try:
            yield self.session_class(self._state)
        except Exception:
            self._state = snapshot
            raise

    # --- Seeding / Inspection (outside any transaction) ---

    def seed(self, *entities: Any) -> None:
        """Insert entities directly, bypassing transactions."""
        session = InMemoryLedgerSession(self._state)
        for entity in entities:
            if isinstance(entity, Profile):
                session.save_profile(entity)
            elif isinstance(entity, Book):
                session.save_book(entity)
            elif isinstance(entity, Chapter):
                session.add_chapter(entity)
            elif isinstance(entity, Subscription):
                session.save_subscription(entity)
            elif isinstance(entity, DailyQuestion):
                session.add_question(entity)
            elif isinstance(entity, DailyQuestionProfile):
                session.save_grading(entity)
            else:
                raise TypeError(f"Cannot seed {type(entity).__name__}")

    def session(self) -> InMemoryLedgerSession:
        """Direct, non-transactional access for assertions."""
        return InMemoryLedgerSession(self._state)

    def grading_count(self, question_id: int, profile_id: int | None = None) -> int:
        return sum(
            1
            for (qid, pid) in self._state.gradings
            if qid == question_id and (profile_id is None or pid == profile_id)
        )
