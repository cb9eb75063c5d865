"""
Payouts component input/output models.

Invariants:
- Author credit always equals the sum of subscriber debits
- No subscriber balance goes below zero
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from src.domain.entities import Chapter

# --- Batching Policy ---

PayoutPolicy = Literal[
    "stop_on_first_insufficient_balance",
    "skip_insufficient_and_continue",
]

STOP_ON_FIRST_INSUFFICIENT_BALANCE: PayoutPolicy = "stop_on_first_insufficient_balance"
SKIP_INSUFFICIENT_AND_CONTINUE: PayoutPolicy = "skip_insufficient_and_continue"

# --- Error Codes ---

BOOK_NOT_FOUND = "book_not_found"
CHAPTER_NOT_FOUND = "chapter_not_found"
PROFILE_NOT_FOUND = "profile_not_found"
CONTENT_TOO_LARGE = "content_too_large"
UNSUPPORTED_FORMAT = "unsupported_format"
NOT_BOOK_OWNER = "not_book_owner"


@dataclass(frozen=True)
class PayoutError:
    """Payout operation error."""

    code: str
    message: str
    field: str | None = None


# --- Configuration ---


@dataclass(frozen=True)
class PayoutConfig:
    """Payout and chapter ingestion configuration from rules."""

    policy: PayoutPolicy = STOP_ON_FIRST_INSUFFICIENT_BALANCE
    max_content_chars: int = 100_000
    allowed_formats: tuple[str, ...] = ("pdf",)


# --- Input Models ---


@dataclass(frozen=True)
class ChargeSubscribersInput:
    """Input for charging active subscribers for a newly published chapter."""

    book_id: int
    chapter_id: int


@dataclass(frozen=True)
class PublishChapterInput:
    """
    Input for publishing a chapter.

    `content` is the text already extracted from the upload and
    `source_format` the upload's declared format (e.g. "pdf").

    `acting_profile_id` is the caller; only the book's author or an
    administrator may publish. `None` marks an operator call (CLI) that
    skips the ownership check.
    """

    book_id: int
    name: str
    content: str
    source_format: str
    mark_book_finished: bool | None = None
    acting_profile_id: int | None = None
    acting_is_admin: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class SubscriberCharge:
    """One subscriber's charge within a batch."""

    profile_id: int
    chapter_ids: tuple[int, ...]
    amount: float


@dataclass(frozen=True)
class ChargeSubscribersOutput:
    """Output for a payout batch."""

    charged_count: int = 0
    charges: tuple[SubscriberCharge, ...] = ()
    skipped_profile_ids: tuple[int, ...] = ()
    stopped_early: bool = False
    total_credited: float = 0.0
    errors: list[PayoutError] = field(default_factory=list)
    success: bool = True

    @property
    def charged_profile_ids(self) -> tuple[int, ...]:
        return tuple(c.profile_id for c in self.charges)


@dataclass(frozen=True)
class PublishChapterOutput:
    """Output for publishing a chapter."""

    chapter: Chapter | None = None
    charged_count: int = 0
    payout: ChargeSubscribersOutput | None = None
    errors: list[PayoutError] = field(default_factory=list)
    success: bool = True

    @property
    def message(self) -> str:
        return f"{self.charged_count} readers were charged for this chapter."
