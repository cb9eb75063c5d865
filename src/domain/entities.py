from datetime import UTC, date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Enums / Literals ---
BookStatus = Literal["submitted", "approved", "rejected"]
SubscriptionState = Literal["active", "lapsed"]

# --- Readers & Authors ---

class Profile(BaseModel):
    id: int
    user_id: str
    display_name: str = ""
    points: float = 0.0

# --- Books ---

class Book(BaseModel):
    id: int
    author_profile_id: int
    name: str
    chapter_price: float
    status: BookStatus = "submitted"
    status_comment: str | None = None
    is_finished: bool = False
    created_at: datetime = Field(default_factory=_utcnow)

class Chapter(BaseModel):
    id: int | None = None  # Assigned by the store on insert
    book_id: int
    name: str = ""
    content: str = ""
    created_at: datetime = Field(default_factory=_utcnow)

# --- Subscriptions ---

class Subscription(BaseModel):
    """
    One (book, profile) subscription row.

    The absence of a row is the "none" state; otherwise `state` tags the
    row as active or lapsed. The owned set survives lapsing so a later
    resubscription only pays for what was published in between.
    """

    model_config = ConfigDict(frozen=True)

    book_id: int
    profile_id: int
    state: SubscriptionState = "active"
    owned_chapter_ids: frozenset[int] = Field(default_factory=frozenset)
    bought_date: datetime | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_active(self) -> bool:
        return self.state == "active"

# --- Daily Questions ---

class Answer(BaseModel):
    id: int | None = None
    question_id: int | None = None
    content: str
    correct: bool = False

class DailyQuestion(BaseModel):
    id: int | None = None
    question: str
    points: float
    date: date
    answers: list[Answer] = Field(default_factory=list)

class DailyQuestionProfile(BaseModel):
    """Grading row: one per (question, profile)."""

    question_id: int
    profile_id: int
    is_correct: bool
    date_answered: datetime
