import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime
from typing import Any

from src.components.entitlements import decode, encode
from src.domain.entities import (
    Answer,
    Book,
    Chapter,
    DailyQuestion,
    DailyQuestionProfile,
    Profile,
    Subscription,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _ts(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def _parse_ts(value: str | None) -> datetime | None:
    if value is None:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class SQLiteLedgerSession:
    """Ledger repository operations bound to one open connection."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # --- Profiles ---

    def _row_to_profile(self, row: dict[str, Any]) -> Profile:
        return Profile(
            id=row["id"],
            user_id=row["user_id"],
            display_name=row["display_name"],
            points=row["points"],
        )

    def get_profile(self, profile_id: int) -> Profile | None:
        row = self.conn.execute("SELECT * FROM profiles WHERE id = ?", (profile_id,)).fetchone()
        return self._row_to_profile(row) if row else None

    def save_profile(self, profile: Profile) -> Profile:
        self.conn.execute(
            """
            INSERT INTO profiles (id, user_id, display_name, points)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                user_id=excluded.user_id,
                display_name=excluded.display_name,
                points=excluded.points
        """,
            (profile.id, profile.user_id, profile.display_name, profile.points),
        )
        return profile

    # --- Books & Chapters ---

    def _row_to_book(self, row: dict[str, Any]) -> Book:
        return Book(
            id=row["id"],
            author_profile_id=row["author_profile_id"],
            name=row["name"],
            chapter_price=row["chapter_price"],
            status=row["status"],
            status_comment=row["status_comment"],
            is_finished=bool(row["is_finished"]),
            created_at=_parse_ts(row["created_at"]),
        )

    def get_book(self, book_id: int) -> Book | None:
        row = self.conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()
        return self._row_to_book(row) if row else None

    def save_book(self, book: Book) -> Book:
        self.conn.execute(
            """
            INSERT INTO books (
                id, author_profile_id, name, chapter_price,
                status, status_comment, is_finished, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                author_profile_id=excluded.author_profile_id,
                name=excluded.name,
                chapter_price=excluded.chapter_price,
                status=excluded.status,
                status_comment=excluded.status_comment,
                is_finished=excluded.is_finished
        """,
            (
                book.id,
                book.author_profile_id,
                book.name,
                book.chapter_price,
                book.status,
                book.status_comment,
                1 if book.is_finished else 0,
                _ts(book.created_at),
            ),
        )
        return book

    def _row_to_chapter(self, row: dict[str, Any]) -> Chapter:
        return Chapter(
            id=row["id"],
            book_id=row["book_id"],
            name=row["name"],
            content=row["content"],
            created_at=_parse_ts(row["created_at"]),
        )

    def list_chapters(self, book_id: int) -> list[Chapter]:
        rows = self.conn.execute(
            "SELECT * FROM chapters WHERE book_id = ? ORDER BY id ASC", (book_id,)
        ).fetchall()
        return [self._row_to_chapter(r) for r in rows]

    def add_chapter(self, chapter: Chapter) -> Chapter:
        cursor = self.conn.execute(
            """
            INSERT INTO chapters (id, book_id, name, content, created_at)
            VALUES (?, ?, ?, ?, ?)
        """,
            (chapter.id, chapter.book_id, chapter.name, chapter.content, _ts(chapter.created_at)),
        )
        return chapter.model_copy(update={"id": cursor.lastrowid})

    # --- Subscriptions ---

    def _row_to_subscription(self, row: dict[str, Any]) -> Subscription:
        return Subscription(
            book_id=row["book_id"],
            profile_id=row["profile_id"],
            state=row["state"],
            owned_chapter_ids=decode(row["bought_chapter_list"]),
            bought_date=_parse_ts(row["bought_date"]),
            created_at=_parse_ts(row["created_at"]),
        )

    def get_subscription(self, book_id: int, profile_id: int) -> Subscription | None:
        row = self.conn.execute(
            "SELECT * FROM subscriptions WHERE book_id = ? AND profile_id = ?",
            (book_id, profile_id),
        ).fetchone()
        return self._row_to_subscription(row) if row else None

    def list_active_subscriptions(self, book_id: int) -> list[Subscription]:
        rows = self.conn.execute(
            """
            SELECT * FROM subscriptions
            WHERE book_id = ? AND state = 'active'
            ORDER BY created_at ASC, profile_id ASC
        """,
            (book_id,),
        ).fetchall()
        return [self._row_to_subscription(r) for r in rows]

    def list_profile_subscriptions(self, profile_id: int) -> list[Subscription]:
        rows = self.conn.execute(
            """
            SELECT * FROM subscriptions
            WHERE profile_id = ?
            ORDER BY created_at ASC, book_id ASC
        """,
            (profile_id,),
        ).fetchall()
        return [self._row_to_subscription(r) for r in rows]

    def save_subscription(self, subscription: Subscription) -> Subscription:
        self.conn.execute(
            """
            INSERT INTO subscriptions (
                book_id, profile_id, state, bought_chapter_list, bought_date, created_at
            ) VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(book_id, profile_id) DO UPDATE SET
                state=excluded.state,
                bought_chapter_list=excluded.bought_chapter_list,
                bought_date=excluded.bought_date
        """,
            (
                subscription.book_id,
                subscription.profile_id,
                subscription.state,
                encode(subscription.owned_chapter_ids),
                _ts(subscription.bought_date),
                _ts(subscription.created_at),
            ),
        )
        return subscription

    # --- Daily Questions ---

    def _row_to_answer(self, row: dict[str, Any]) -> Answer:
        return Answer(
            id=row["id"],
            question_id=row["question_id"],
            content=row["content"],
            correct=bool(row["correct"]),
        )

    def _row_to_question(self, row: dict[str, Any]) -> DailyQuestion:
        answer_rows = self.conn.execute(
            "SELECT * FROM answers WHERE question_id = ? ORDER BY id ASC", (row["id"],)
        ).fetchall()
        return DailyQuestion(
            id=row["id"],
            question=row["question"],
            points=row["points"],
            date=date.fromisoformat(row["date"]),
            answers=[self._row_to_answer(a) for a in answer_rows],
        )

    def get_question(self, question_id: int) -> DailyQuestion | None:
        row = self.conn.execute(
            "SELECT * FROM daily_questions WHERE id = ?", (question_id,)
        ).fetchone()
        return self._row_to_question(row) if row else None

    def get_question_by_date(self, day: date) -> DailyQuestion | None:
        row = self.conn.execute(
            "SELECT * FROM daily_questions WHERE date = ? ORDER BY id ASC LIMIT 1",
            (day.isoformat(),),
        ).fetchone()
        return self._row_to_question(row) if row else None

    def list_questions(self) -> list[DailyQuestion]:
        rows = self.conn.execute(
            "SELECT * FROM daily_questions ORDER BY date DESC, id DESC"
        ).fetchall()
        return [self._row_to_question(r) for r in rows]

    def add_question(self, question: DailyQuestion) -> DailyQuestion:
        cursor = self.conn.execute(
            "INSERT INTO daily_questions (question, points, date) VALUES (?, ?, ?)",
            (question.question, question.points, question.date.isoformat()),
        )
        question_id = cursor.lastrowid
        for answer in question.answers:
            self.conn.execute(
                "INSERT INTO answers (question_id, content, correct) VALUES (?, ?, ?)",
                (question_id, answer.content, 1 if answer.correct else 0),
            )
        row = self.conn.execute(
            "SELECT * FROM daily_questions WHERE id = ?", (question_id,)
        ).fetchone()
        return self._row_to_question(row)

    def delete_question(self, question_id: int) -> None:
        # answers and gradings cascade
        self.conn.execute("DELETE FROM daily_questions WHERE id = ?", (question_id,))

    def get_answer(self, answer_id: int) -> Answer | None:
        row = self.conn.execute("SELECT * FROM answers WHERE id = ?", (answer_id,)).fetchone()
        return self._row_to_answer(row) if row else None

    def get_grading(self, question_id: int, profile_id: int) -> DailyQuestionProfile | None:
        row = self.conn.execute(
            """
            SELECT * FROM daily_question_profiles
            WHERE question_id = ? AND profile_id = ?
        """,
            (question_id, profile_id),
        ).fetchone()
        if not row:
            return None
        return DailyQuestionProfile(
            question_id=row["question_id"],
            profile_id=row["profile_id"],
            is_correct=bool(row["is_correct"]),
            date_answered=_parse_ts(row["date_answered"]),
        )

    def save_grading(self, grading: DailyQuestionProfile) -> DailyQuestionProfile:
        self.conn.execute(
            """
            INSERT INTO daily_question_profiles (question_id, profile_id, is_correct, date_answered)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(question_id, profile_id) DO UPDATE SET
                is_correct=excluded.is_correct,
                date_answered=excluded.date_answered
        """,
            (
                grading.question_id,
                grading.profile_id,
                1 if grading.is_correct else 0,
                _ts(grading.date_answered),
            ),
        )
        return grading

    def latest_answered_at(self, profile_id: int) -> datetime | None:
        row = self.conn.execute(
            """
            SELECT date_answered FROM daily_question_profiles
            WHERE profile_id = ?
            ORDER BY date_answered DESC LIMIT 1
        """,
            (profile_id,),
        ).fetchone()
        return _parse_ts(row["date_answered"]) if row else None


class SQLiteLedgerStore:
    """
    SQLite-backed ledger store.

    Each transaction() opens a fresh connection and takes the write lock up
    front with BEGIN IMMEDIATE, so concurrent subscribe/payout/answer
    operations on the same file serialize rather than interleave.
    """

    def __init__(self, db_path: str, timeout: float = 5.0):
        self.db_path = db_path
        self.timeout = timeout

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout, isolation_level=None)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    @contextmanager
    def transaction(self) -> Iterator[SQLiteLedgerSession]:
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield SQLiteLedgerSession(conn)
            conn.execute("COMMIT")
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()
