"""
Payouts component - charging subscribers when a chapter is published.

Walks the active subscribers of a book in creation order and, for each one,
debits the chapter price and credits the author by the same amount.

Invariants:
- Each subscriber's debit, the matching author credit and the owned-set
  update commit together; there is no rollback across subscribers
- The loop is sequential; the author balance is re-read per subscriber
- A chapter already in a subscriber's owned set is never charged again
- Under stop_on_first_insufficient_balance nobody after the first short
  subscriber is charged in the same batch
"""

from __future__ import annotations

import logging
from typing import Any

from src.components.entitlements import charge_for, compute_newly_owed, merge_owned
from src.domain.entities import Book, Chapter

from .models import (
    BOOK_NOT_FOUND,
    CHAPTER_NOT_FOUND,
    CONTENT_TOO_LARGE,
    NOT_BOOK_OWNER,
    PROFILE_NOT_FOUND,
    SKIP_INSUFFICIENT_AND_CONTINUE,
    UNSUPPORTED_FORMAT,
    ChargeSubscribersInput,
    ChargeSubscribersOutput,
    PayoutConfig,
    PayoutError,
    PublishChapterInput,
    PublishChapterOutput,
    SubscriberCharge,
)
from .ports import PayoutStorePort

logger = logging.getLogger(__name__)


# --- Pure Functions ---


def normalize_format(source_format: str) -> str:
    """Lower-case a declared format and drop a leading dot or mime prefix."""
    fmt = source_format.strip().lower()
    if "/" in fmt:
        fmt = fmt.rsplit("/", 1)[1]
    return fmt.lstrip(".")


def validate_chapter_upload(
    content: str,
    source_format: str,
    config: PayoutConfig | None = None,
) -> list[PayoutError]:
    """
    Check an extracted chapter upload against the ingestion limits.

    Args:
        content: Extracted chapter text
        source_format: Declared upload format
        config: Payout configuration

    Returns:
        List of errors (empty when the upload is acceptable)
    """
    config = config or PayoutConfig()

    if normalize_format(source_format) not in config.allowed_formats:
        allowed = ", ".join(config.allowed_formats)
        return [
            PayoutError(
                code=UNSUPPORTED_FORMAT,
                message=f"Unsupported file format, allowed: {allowed}",
                field="source_format",
            )
        ]

    if len(content) > config.max_content_chars:
        return [
            PayoutError(
                code=CONTENT_TOO_LARGE,
                message=f"Chapter exceeds {config.max_content_chars} characters",
                field="content",
            )
        ]

    return []


def can_publish(book: Book, profile_id: int | None, is_admin: bool = False) -> bool:
    """Whether a caller may add chapters to a book (author or administrator)."""
    if profile_id is None or is_admin:
        return True
    return book.author_profile_id == profile_id


# --- Component Entry Points ---


def run_charge_subscribers(
    inp: ChargeSubscribersInput,
    *,
    store: PayoutStorePort,
    config: PayoutConfig | None = None,
) -> ChargeSubscribersOutput:
    """
    Charge every active subscriber of a book for a new chapter.

    Persistence errors propagate; subscribers charged before the failure
    stay charged.

    Args:
        inp: Book and newly published chapter identifiers.
        store: Ledger store port.
        config: Payout configuration (batching policy).

    Returns:
        ChargeSubscribersOutput with the charged count, or errors.
    """
    config = config or PayoutConfig()

    with store.transaction() as session:
        book = session.get_book(inp.book_id)
        if book is None:
            return ChargeSubscribersOutput(
                errors=[PayoutError(BOOK_NOT_FOUND, "Book not found", "book_id")],
                success=False,
            )
        if session.get_profile(book.author_profile_id) is None:
            return ChargeSubscribersOutput(
                errors=[PayoutError(PROFILE_NOT_FOUND, "Author profile not found", "book_id")],
                success=False,
            )
        chapter_ids = [c.id for c in session.list_chapters(book.id) if c.id is not None]
        if inp.chapter_id not in chapter_ids:
            return ChargeSubscribersOutput(
                errors=[PayoutError(CHAPTER_NOT_FOUND, "Chapter not found", "chapter_id")],
                success=False,
            )
        subscriber_ids = [s.profile_id for s in session.list_active_subscriptions(book.id)]

    charges: list[SubscriberCharge] = []
    skipped: list[int] = []
    stopped_early = False

    for profile_id in subscriber_ids:
        try:
            with store.transaction() as session:
                subscriber = session.get_profile(profile_id)
                author = session.get_profile(book.author_profile_id)
                subscription = session.get_subscription(book.id, profile_id)
                if subscriber is None or author is None or subscription is None:
                    logger.warning(
                        "Skipping subscriber %s of book %s: missing profile or row",
                        profile_id,
                        book.id,
                    )
                    skipped.append(profile_id)
                    continue

                if subscriber.points < book.chapter_price:
                    if config.policy == SKIP_INSUFFICIENT_AND_CONTINUE:
                        skipped.append(profile_id)
                        continue
                    stopped_early = True
                    break

                if subscription.is_active:
                    owed = compute_newly_owed([inp.chapter_id], subscription.owned_chapter_ids)
                else:
                    # Lapsed row: back-charge everything published since lapsing
                    owed = compute_newly_owed(chapter_ids, subscription.owned_chapter_ids)

                if not owed:
                    continue

                amount = charge_for(book.chapter_price, owed)
                if subscriber.points < amount:
                    if config.policy == SKIP_INSUFFICIENT_AND_CONTINUE:
                        skipped.append(profile_id)
                        continue
                    stopped_early = True
                    break

                subscriber.points -= amount
                author.points += amount

                session.save_subscription(
                    subscription.model_copy(
                        update={
                            "owned_chapter_ids": merge_owned(subscription.owned_chapter_ids, owed)
                        }
                    )
                )
                session.save_profile(subscriber)
                session.save_profile(author)
        except Exception:
            logger.exception(
                "Payout for book %s chapter %s failed at subscriber %s after %d charges",
                book.id,
                inp.chapter_id,
                profile_id,
                len(charges),
            )
            raise

        charges.append(SubscriberCharge(profile_id=profile_id, chapter_ids=owed, amount=amount))

    if stopped_early:
        logger.warning(
            "Payout for book %s chapter %s stopped at an insufficient balance: %d of %d charged",
            book.id,
            inp.chapter_id,
            len(charges),
            len(subscriber_ids),
        )

    total = sum(c.amount for c in charges)
    logger.info(
        "Charged %d subscribers of book %s for chapter %s, %.2f points to author %s",
        len(charges),
        book.id,
        inp.chapter_id,
        total,
        book.author_profile_id,
    )

    return ChargeSubscribersOutput(
        charged_count=len(charges),
        charges=tuple(charges),
        skipped_profile_ids=tuple(skipped),
        stopped_early=stopped_early,
        total_credited=total,
    )


def run_publish_chapter(
    inp: PublishChapterInput,
    *,
    store: PayoutStorePort,
    config: PayoutConfig | None = None,
) -> PublishChapterOutput:
    """
    Publish a chapter and charge the book's subscribers for it.

    Args:
        inp: Chapter data with the already extracted text.
        store: Ledger store port.
        config: Payout configuration.

    Returns:
        PublishChapterOutput with the stored chapter and charged count.
    """
    config = config or PayoutConfig()

    with store.transaction() as session:
        book = session.get_book(inp.book_id)
        if book is None:
            return PublishChapterOutput(
                errors=[PayoutError(BOOK_NOT_FOUND, "Book not found", "book_id")],
                success=False,
            )
        if not can_publish(book, inp.acting_profile_id, inp.acting_is_admin):
            logger.warning(
                "Profile %s tried to publish to book %s owned by %s",
                inp.acting_profile_id,
                book.id,
                book.author_profile_id,
            )
            return PublishChapterOutput(
                errors=[
                    PayoutError(
                        NOT_BOOK_OWNER, "Only the book's author can publish chapters", "book_id"
                    )
                ],
                success=False,
            )

        errors = validate_chapter_upload(inp.content, inp.source_format, config)
        if errors:
            return PublishChapterOutput(errors=errors, success=False)

        chapter = session.add_chapter(
            Chapter(book_id=book.id, name=inp.name, content=inp.content)
        )
        if inp.mark_book_finished is not None and inp.mark_book_finished != book.is_finished:
            book.is_finished = inp.mark_book_finished
            session.save_book(book)

    logger.info("Published chapter %s of book %s", chapter.id, book.id)

    payout = run_charge_subscribers(
        ChargeSubscribersInput(book_id=book.id, chapter_id=chapter.id or 0),
        store=store,
        config=config,
    )

    return PublishChapterOutput(
        chapter=chapter,
        charged_count=payout.charged_count,
        payout=payout,
        errors=list(payout.errors),
        success=payout.success,
    )


# --- Configuration Loader ---


def load_config_from_rules(rules: Any) -> PayoutConfig:
    """
    Load PayoutConfig from validated rules.

    Args:
        rules: `src.rules.models.Rules` instance

    Returns:
        PayoutConfig instance
    """
    return PayoutConfig(
        policy=rules.ledger.payout_policy,
        max_content_chars=rules.chapters.max_content_chars,
        allowed_formats=tuple(normalize_format(f) for f in rules.chapters.allowed_formats),
    )


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: ChargeSubscribersInput | PublishChapterInput,
    *,
    store: PayoutStorePort,
    config: PayoutConfig | None = None,
) -> ChargeSubscribersOutput | PublishChapterOutput:
    """
    Run payout operation based on input type.

    Args:
        input_data: One of the input types
        store: Ledger store port
        config: Payout configuration

    Returns:
        Corresponding output type
    """
    if isinstance(input_data, ChargeSubscribersInput):
        return run_charge_subscribers(input_data, store=store, config=config)

    if isinstance(input_data, PublishChapterInput):
        return run_publish_chapter(input_data, store=store, config=config)

    raise TypeError(f"Unknown input type: {type(input_data)}")
