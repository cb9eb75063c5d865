"""
Subscriptions component - per-book subscription lifecycle.
"""

from .component import (
    SubscriptionPlan,
    check_moderation,
    has_access,
    plan_subscription,
    run,
    run_get_entitlement,
    run_list_chapters,
    run_list_subscriptions,
    run_subscribe,
    run_unsubscribe,
)
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
from .ports import SubscriptionSessionPort, SubscriptionStorePort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_subscribe",
    "run_unsubscribe",
    "run_get_entitlement",
    "run_list_subscriptions",
    "run_list_chapters",
    # Pure functions
    "check_moderation",
    "has_access",
    "plan_subscription",
    "SubscriptionPlan",
    # Input models
    "GetEntitlementInput",
    "ListChaptersInput",
    "ListSubscriptionsInput",
    "SubscribeInput",
    "UnsubscribeInput",
    # Output models
    "ChapterListOutput",
    "EntitlementOutput",
    "SubscribeOutput",
    "SubscriptionError",
    "SubscriptionListOutput",
    "UnsubscribeOutput",
    # Error codes
    "ACCESS_DENIED",
    "ALREADY_SUBSCRIBED",
    "BOOK_NOT_APPROVED",
    "BOOK_NOT_FOUND",
    "BOOK_REJECTED",
    "INSUFFICIENT_POINTS",
    "NOT_SUBSCRIBED",
    "PROFILE_NOT_FOUND",
    "SELF_SUBSCRIPTION",
    # Ports
    "SubscriptionSessionPort",
    "SubscriptionStorePort",
    "TimePort",
]
