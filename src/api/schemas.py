from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

SubscriptionView = Literal["none", "active", "lapsed"]


# --- Subscriptions ---
class SubscriptionResponse(BaseModel):
    book_id: int
    profile_id: int
    state: Literal["active", "lapsed"]
    owned_chapter_ids: list[int]
    bought_date: datetime | None = None


class SubscribeResponse(BaseModel):
    subscription: SubscriptionResponse
    charged_amount: float
    newly_owned_chapter_ids: list[int]
    is_resubscription: bool


class EntitlementResponse(BaseModel):
    book_id: int
    profile_id: int
    state: SubscriptionView
    owned_chapter_ids: list[int]
    pending_chapter_ids: list[int]
    pending_cost: float


# --- Chapters ---
class PublishChapterRequest(BaseModel):
    name: str
    content: str
    source_format: str = "pdf"
    mark_book_finished: bool | None = None


class PublishChapterResponse(BaseModel):
    chapter_id: int
    book_id: int
    charged_count: int
    stopped_early: bool
    message: str


class ChapterSummaryResponse(BaseModel):
    id: int
    name: str
    created_at: datetime
    owned: bool


# --- Daily questions ---
class AnswerRequest(BaseModel):
    answer_id: int


class AnswerResponse(BaseModel):
    correct_answer: str
    was_correct: bool
    points_awarded: float


class LastAnsweredResponse(BaseModel):
    answered: bool
    answered_at: datetime | None = None


class AnswerChoice(BaseModel):
    content: str
    correct: bool = False


class QuestionCreateRequest(BaseModel):
    question: str
    points: float
    date: date
    answers: list[AnswerChoice] = Field(default_factory=list)


class AnswerChoiceResponse(BaseModel):
    id: int
    content: str


class QuestionResponse(BaseModel):
    id: int
    question: str
    points: float
    date: date
    answers: list[AnswerChoiceResponse]
