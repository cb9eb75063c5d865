"""
Subscriptions component input/output models.

Invariants: one row per (book, profile); owned set never shrinks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from src.domain.entities import Chapter, Subscription

SubscriptionView = Literal["none", "active", "lapsed"]

# --- Error Codes ---

BOOK_NOT_FOUND = "book_not_found"
PROFILE_NOT_FOUND = "profile_not_found"
BOOK_NOT_APPROVED = "book_not_approved"
BOOK_REJECTED = "book_rejected"
SELF_SUBSCRIPTION = "self_subscription"
ALREADY_SUBSCRIBED = "already_subscribed"
NOT_SUBSCRIBED = "not_subscribed"
INSUFFICIENT_POINTS = "insufficient_points"
ACCESS_DENIED = "access_denied"


@dataclass(frozen=True)
class SubscriptionError:
    """Subscription operation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class SubscribeInput:
    """Input for subscribing a profile to a book."""

    book_id: int
    profile_id: int


@dataclass(frozen=True)
class UnsubscribeInput:
    """Input for lapsing a subscription."""

    book_id: int
    profile_id: int


@dataclass(frozen=True)
class GetEntitlementInput:
    """Input for reading what a profile owns of a book."""

    book_id: int
    profile_id: int


@dataclass(frozen=True)
class ListSubscriptionsInput:
    """Input for listing a profile's subscriptions."""

    profile_id: int


@dataclass(frozen=True)
class ListChaptersInput:
    """Input for listing a book's chapters on behalf of a profile."""

    book_id: int
    profile_id: int
    is_admin: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class SubscribeOutput:
    """Output for subscribe."""

    subscription: Subscription | None = None
    charged_amount: float = 0.0
    newly_owned_chapter_ids: tuple[int, ...] = ()
    is_resubscription: bool = False
    errors: list[SubscriptionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class UnsubscribeOutput:
    """Output for unsubscribe."""

    subscription: Subscription | None = None
    errors: list[SubscriptionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class EntitlementOutput:
    """What a profile owns of a book and what subscribing would cost now."""

    state: SubscriptionView = "none"
    owned_chapter_ids: frozenset[int] = frozenset()
    pending_chapter_ids: tuple[int, ...] = ()
    pending_cost: float = 0.0
    errors: list[SubscriptionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class SubscriptionListOutput:
    """Output for listing subscriptions."""

    subscriptions: tuple[Subscription, ...] = ()
    errors: list[SubscriptionError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ChapterListOutput:
    """Chapters of a book and which of them the caller owns."""

    chapters: tuple[Chapter, ...] = ()
    owned_chapter_ids: frozenset[int] = frozenset()
    errors: list[SubscriptionError] = field(default_factory=list)
    success: bool = True
