"""
Payouts component - subscriber charging on chapter publication.
"""

from .component import (
    can_publish,
    load_config_from_rules,
    normalize_format,
    run,
    run_charge_subscribers,
    run_publish_chapter,
    validate_chapter_upload,
)
from .models import (
    BOOK_NOT_FOUND,
    CHAPTER_NOT_FOUND,
    CONTENT_TOO_LARGE,
    NOT_BOOK_OWNER,
    PROFILE_NOT_FOUND,
    SKIP_INSUFFICIENT_AND_CONTINUE,
    STOP_ON_FIRST_INSUFFICIENT_BALANCE,
    UNSUPPORTED_FORMAT,
    ChargeSubscribersInput,
    ChargeSubscribersOutput,
    PayoutConfig,
    PayoutError,
    PayoutPolicy,
    PublishChapterInput,
    PublishChapterOutput,
    SubscriberCharge,
)
from .ports import PayoutSessionPort, PayoutStorePort

__all__ = [
    # Entry points
    "run",
    "run_charge_subscribers",
    "run_publish_chapter",
    # Pure functions
    "can_publish",
    "normalize_format",
    "validate_chapter_upload",
    "load_config_from_rules",
    # Models
    "ChargeSubscribersInput",
    "ChargeSubscribersOutput",
    "PayoutConfig",
    "PayoutError",
    "PayoutPolicy",
    "PublishChapterInput",
    "PublishChapterOutput",
    "SubscriberCharge",
    "SKIP_INSUFFICIENT_AND_CONTINUE",
    "STOP_ON_FIRST_INSUFFICIENT_BALANCE",
    # Error codes
    "BOOK_NOT_FOUND",
    "CHAPTER_NOT_FOUND",
    "CONTENT_TOO_LARGE",
    "NOT_BOOK_OWNER",
    "PROFILE_NOT_FOUND",
    "UNSUPPORTED_FORMAT",
    # Ports
    "PayoutSessionPort",
    "PayoutStorePort",
]
