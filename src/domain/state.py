from datetime import datetime

from src.domain.entities import Subscription, SubscriptionState


def can_transition(current: SubscriptionState | None, new: SubscriptionState) -> bool:
    """
    Determine if a subscription state transition is allowed.

    `None` stands for "no row yet".
    """
    if current is None:
        return new == "active"

    if current == "active":
        return new == "lapsed"

    if current == "lapsed":
        return new == "active"

    return False


def activate(
    subscription: Subscription | None,
    *,
    book_id: int,
    profile_id: int,
    newly_owned: frozenset[int],
    now: datetime,
) -> Subscription:
    """
    Return a NEW active Subscription with `newly_owned` merged in.
    Raises ValueError if the row is already active.
    """
    current = subscription.state if subscription else None
    if not can_transition(current, "active"):
        raise ValueError(f"Invalid transition from {current} to active")

    if subscription is None:
        return Subscription(
            book_id=book_id,
            profile_id=profile_id,
            state="active",
            owned_chapter_ids=newly_owned,
            bought_date=now,
            created_at=now,
        )

    return subscription.model_copy(
        update={
            "state": "active",
            "owned_chapter_ids": subscription.owned_chapter_ids | newly_owned,
            "bought_date": now,
        }
    )


def lapse(subscription: Subscription) -> Subscription:
    """
    Return a NEW lapsed Subscription; the owned set is kept as-is.
    Raises ValueError if the row is not active.
    """
    if not can_transition(subscription.state, "lapsed"):
        raise ValueError(f"Invalid transition from {subscription.state} to lapsed")
    return subscription.model_copy(update={"state": "lapsed"})
