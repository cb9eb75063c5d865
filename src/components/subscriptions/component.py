"""
Subscriptions component - per-book subscription lifecycle.

Decides whether a subscribe request is a fresh subscription, a resumption of
a lapsed one (catch-up charge) or a no-op, and moves the points.

Invariants:
- No mutation on any error path, including insufficient points
- Reader debit and author credit are equal and land in one transaction
- A zero-cost resumption flips the row to active without touching balances
- Unsubscribing keeps the owned set so resumption charges only the gap
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from src.adapters.clock import SystemClock
from src.components.entitlements import charge_for, compute_newly_owed
from src.domain.entities import Book, Chapter, Subscription
from src.domain.state import activate, lapse

from .models import (
    ACCESS_DENIED,
    ALREADY_SUBSCRIBED,
    BOOK_NOT_APPROVED,
    BOOK_NOT_FOUND,
    BOOK_REJECTED,
    INSUFFICIENT_POINTS,
    NOT_SUBSCRIBED,
    PROFILE_NOT_FOUND,
    SELF_SUBSCRIPTION,
    ChapterListOutput,
    EntitlementOutput,
    GetEntitlementInput,
    ListChaptersInput,
    ListSubscriptionsInput,
    SubscribeInput,
    SubscribeOutput,
    SubscriptionError,
    SubscriptionListOutput,
    UnsubscribeInput,
    UnsubscribeOutput,
)
from .ports import SubscriptionStorePort, TimePort

logger = logging.getLogger(__name__)


# --- Pure Functions ---


def check_moderation(book: Book) -> SubscriptionError | None:
    """Return an error unless the book has passed moderation."""
    if book.status == "submitted":
        return SubscriptionError(
            code=BOOK_NOT_APPROVED,
            message="Book has not been approved yet",
            field="book_id",
        )
    if book.status == "rejected":
        comment = book.status_comment or ""
        message = f"Book was rejected: {comment}" if comment else "Book was rejected"
        return SubscriptionError(code=BOOK_REJECTED, message=message, field="book_id")
    return None


@dataclass(frozen=True)
class SubscriptionPlan:
    """What a subscribe request would charge; nothing is persisted."""

    newly_owed: tuple[int, ...]
    cost: float
    is_resubscription: bool


def plan_subscription(
    book: Book,
    chapters: list[Chapter],
    existing: Subscription | None,
) -> SubscriptionPlan:
    """
    Compute the chapters and points a subscribe request would charge.

    A fresh subscription buys every chapter published so far; a lapsed one
    only the chapters published since (catch-up charge).
    """
    chapter_ids = [c.id for c in chapters if c.id is not None]
    owned = existing.owned_chapter_ids if existing else frozenset()
    newly_owed = compute_newly_owed(chapter_ids, owned)
    return SubscriptionPlan(
        newly_owed=newly_owed,
        cost=charge_for(book.chapter_price, newly_owed),
        is_resubscription=existing is not None,
    )


def has_access(
    book: Book,
    profile_id: int,
    subscription: Subscription | None,
    is_admin: bool = False,
) -> bool:
    """
    Whether a profile may list a book's chapters.

    Authors and administrators always may; readers need a subscription row,
    lapsed rows included since they still own what they paid for.
    """
    if is_admin or book.author_profile_id == profile_id:
        return True
    return subscription is not None


def _fail(error: SubscriptionError) -> SubscribeOutput:
    return SubscribeOutput(errors=[error], success=False)


# --- Component Entry Points ---


def run_subscribe(
    inp: SubscribeInput,
    *,
    store: SubscriptionStorePort,
    time: TimePort | None = None,
) -> SubscribeOutput:
    """
    Subscribe a profile to a book, charging for owed chapters.

    Args:
        inp: Book and profile identifiers.
        store: Ledger store port.
        time: Optional time port (defaults to the system clock).

    Returns:
        SubscribeOutput with the updated row and charge, or errors.
    """
    clock = time or SystemClock()

    with store.transaction() as session:
        book = session.get_book(inp.book_id)
        if book is None:
            return _fail(SubscriptionError(BOOK_NOT_FOUND, "Book not found", "book_id"))

        moderation_error = check_moderation(book)
        if moderation_error:
            return _fail(moderation_error)

        reader = session.get_profile(inp.profile_id)
        if reader is None:
            return _fail(SubscriptionError(PROFILE_NOT_FOUND, "Profile not found", "profile_id"))

        if book.author_profile_id == reader.id:
            return _fail(
                SubscriptionError(
                    SELF_SUBSCRIPTION, "Authors cannot subscribe to their own book", "profile_id"
                )
            )

        existing = session.get_subscription(book.id, reader.id)
        if existing is not None and existing.is_active:
            return _fail(
                SubscriptionError(ALREADY_SUBSCRIBED, "Book is already subscribed", "book_id")
            )

        author = session.get_profile(book.author_profile_id)
        if author is None:
            return _fail(
                SubscriptionError(PROFILE_NOT_FOUND, "Author profile not found", "book_id")
            )

        plan = plan_subscription(book, session.list_chapters(book.id), existing)

        if reader.points < plan.cost:
            logger.debug(
                "Subscribe refused: profile=%s book=%s balance=%.2f cost=%.2f",
                reader.id,
                book.id,
                reader.points,
                plan.cost,
            )
            return _fail(
                SubscriptionError(
                    INSUFFICIENT_POINTS,
                    f"Not enough points: {plan.cost:g} needed, {reader.points:g} available",
                    "points",
                )
            )

        subscription = activate(
            existing,
            book_id=book.id,
            profile_id=reader.id,
            newly_owned=frozenset(plan.newly_owed),
            now=clock.now_utc(),
        )
        session.save_subscription(subscription)

        if plan.cost != 0:
            reader.points -= plan.cost
            author.points += plan.cost
            session.save_profile(reader)
            session.save_profile(author)

    logger.info(
        "Profile %s %s book %s: %d chapters, %.2f points to author %s",
        inp.profile_id,
        "resubscribed to" if plan.is_resubscription else "subscribed to",
        inp.book_id,
        len(plan.newly_owed),
        plan.cost,
        book.author_profile_id,
    )

    return SubscribeOutput(
        subscription=subscription,
        charged_amount=plan.cost,
        newly_owned_chapter_ids=plan.newly_owed,
        is_resubscription=plan.is_resubscription,
    )


def run_unsubscribe(
    inp: UnsubscribeInput,
    *,
    store: SubscriptionStorePort,
) -> UnsubscribeOutput:
    """
    Lapse an active subscription, keeping its owned set.

    Args:
        inp: Book and profile identifiers.
        store: Ledger store port.

    Returns:
        UnsubscribeOutput with the lapsed row, or errors.
    """
    with store.transaction() as session:
        existing = session.get_subscription(inp.book_id, inp.profile_id)
        if existing is None or not existing.is_active:
            return UnsubscribeOutput(
                errors=[SubscriptionError(NOT_SUBSCRIBED, "Book is not subscribed", "book_id")],
                success=False,
            )

        lapsed = lapse(existing)
        session.save_subscription(lapsed)

    logger.info("Profile %s unsubscribed from book %s", inp.profile_id, inp.book_id)
    return UnsubscribeOutput(subscription=lapsed)


def run_get_entitlement(
    inp: GetEntitlementInput,
    *,
    store: SubscriptionStorePort,
) -> EntitlementOutput:
    """
    Read a profile's owned chapters of a book and the pending catch-up.

    Read-only: the plan is computed and discarded.
    """
    with store.transaction() as session:
        book = session.get_book(inp.book_id)
        if book is None:
            return EntitlementOutput(
                errors=[SubscriptionError(BOOK_NOT_FOUND, "Book not found", "book_id")],
                success=False,
            )
        existing = session.get_subscription(book.id, inp.profile_id)
        plan = plan_subscription(book, session.list_chapters(book.id), existing)

    if existing is None:
        return EntitlementOutput(
            state="none",
            pending_chapter_ids=plan.newly_owed,
            pending_cost=plan.cost,
        )

    return EntitlementOutput(
        state=existing.state,
        owned_chapter_ids=existing.owned_chapter_ids,
        pending_chapter_ids=() if existing.is_active else plan.newly_owed,
        pending_cost=0.0 if existing.is_active else plan.cost,
    )


def run_list_subscriptions(
    inp: ListSubscriptionsInput,
    *,
    store: SubscriptionStorePort,
) -> SubscriptionListOutput:
    """List every subscription row of a profile, oldest first."""
    with store.transaction() as session:
        if session.get_profile(inp.profile_id) is None:
            return SubscriptionListOutput(
                errors=[SubscriptionError(PROFILE_NOT_FOUND, "Profile not found", "profile_id")],
                success=False,
            )
        rows = session.list_profile_subscriptions(inp.profile_id)

    return SubscriptionListOutput(subscriptions=tuple(rows))


def run_list_chapters(
    inp: ListChaptersInput,
    *,
    store: SubscriptionStorePort,
) -> ChapterListOutput:
    """
    List a book's chapters if the profile may see them.

    Authors and administrators own every chapter; a reader owns what their
    subscription row holds.
    """
    with store.transaction() as session:
        book = session.get_book(inp.book_id)
        if book is None:
            return ChapterListOutput(
                errors=[SubscriptionError(BOOK_NOT_FOUND, "Book not found", "book_id")],
                success=False,
            )
        subscription = session.get_subscription(book.id, inp.profile_id)
        if not has_access(book, inp.profile_id, subscription, inp.is_admin):
            return ChapterListOutput(
                errors=[
                    SubscriptionError(
                        ACCESS_DENIED, "Subscribe to read this book's chapters", "book_id"
                    )
                ],
                success=False,
            )
        chapters = session.list_chapters(book.id)

    if subscription is not None and not inp.is_admin:
        owned = subscription.owned_chapter_ids
    else:
        owned = frozenset(c.id for c in chapters if c.id is not None)

    return ChapterListOutput(chapters=tuple(chapters), owned_chapter_ids=owned)


# --- Run Function (Atomic Component Pattern) ---

SubscriptionInput = (
    SubscribeInput
    | UnsubscribeInput
    | GetEntitlementInput
    | ListSubscriptionsInput
    | ListChaptersInput
)


def run(
    input_data: SubscriptionInput,
    *,
    store: SubscriptionStorePort,
    time: TimePort | None = None,
) -> (
    SubscribeOutput
    | UnsubscribeOutput
    | EntitlementOutput
    | SubscriptionListOutput
    | ChapterListOutput
):
    """
    Run subscription operation based on input type.

    Args:
        input_data: One of the input types
        store: Ledger store port
        time: Optional time port

    Returns:
        Corresponding output type
    """
    if isinstance(input_data, SubscribeInput):
        return run_subscribe(input_data, store=store, time=time)

    if isinstance(input_data, UnsubscribeInput):
        return run_unsubscribe(input_data, store=store)

    if isinstance(input_data, GetEntitlementInput):
        return run_get_entitlement(input_data, store=store)

    if isinstance(input_data, ListSubscriptionsInput):
        return run_list_subscriptions(input_data, store=store)

    if isinstance(input_data, ListChaptersInput):
        return run_list_chapters(input_data, store=store)

    raise TypeError(f"Unknown input type: {type(input_data)}")
