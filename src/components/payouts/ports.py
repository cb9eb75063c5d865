"""
Payouts component port definitions.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol

from src.domain.entities import Book, Chapter, Profile, Subscription


class PayoutSessionPort(Protocol):
    """Store operations the payout batch needs inside a transaction."""

    def get_book(self, book_id: int) -> Book | None: ...

    def save_book(self, book: Book) -> Book: ...

    def get_profile(self, profile_id: int) -> Profile | None: ...

    def save_profile(self, profile: Profile) -> Profile: ...

    def list_chapters(self, book_id: int) -> list[Chapter]: ...

    def add_chapter(self, chapter: Chapter) -> Chapter: ...

    def get_subscription(self, book_id: int, profile_id: int) -> Subscription | None: ...

    def list_active_subscriptions(self, book_id: int) -> list[Subscription]:
        """Active rows in creation order; this order decides who is charged first."""
        ...

    def save_subscription(self, subscription: Subscription) -> Subscription: ...


class PayoutStorePort(Protocol):
    """Opens scoped transactions."""

    def transaction(self) -> AbstractContextManager[PayoutSessionPort]:
        """Commit on normal exit, roll back on exception."""
        ...
