"""
Subscriptions component port definitions.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from datetime import datetime
from typing import Protocol

from src.domain.entities import Book, Chapter, Profile, Subscription


class SubscriptionSessionPort(Protocol):
    """Store operations the subscription lifecycle needs inside a transaction."""

    def get_book(self, book_id: int) -> Book | None: ...

    def get_profile(self, profile_id: int) -> Profile | None: ...

    def save_profile(self, profile: Profile) -> Profile: ...

    def list_chapters(self, book_id: int) -> list[Chapter]: ...

    def get_subscription(self, book_id: int, profile_id: int) -> Subscription | None: ...

    def list_profile_subscriptions(self, profile_id: int) -> list[Subscription]: ...

    def save_subscription(self, subscription: Subscription) -> Subscription: ...


class SubscriptionStorePort(Protocol):
    """Opens scoped transactions."""

    def transaction(self) -> AbstractContextManager[SubscriptionSessionPort]:
        """Commit on normal exit, roll back on exception."""
        ...


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
