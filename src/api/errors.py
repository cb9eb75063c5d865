from collections.abc import Sequence
from typing import Any

from fastapi import HTTPException, status

_STATUS_BY_CODE: dict[str, int] = {
    "book_not_found": status.HTTP_404_NOT_FOUND,
    "chapter_not_found": status.HTTP_404_NOT_FOUND,
    "profile_not_found": status.HTTP_404_NOT_FOUND,
    "question_not_found": status.HTTP_404_NOT_FOUND,
    "answer_not_found": status.HTTP_404_NOT_FOUND,
    "correct_answer_not_found": status.HTTP_404_NOT_FOUND,
    "book_not_approved": status.HTTP_409_CONFLICT,
    "book_rejected": status.HTTP_409_CONFLICT,
    "self_subscription": status.HTTP_409_CONFLICT,
    "already_subscribed": status.HTTP_409_CONFLICT,
    "not_subscribed": status.HTTP_409_CONFLICT,
    "not_book_owner": status.HTTP_403_FORBIDDEN,
    "access_denied": status.HTTP_403_FORBIDDEN,
    "insufficient_points": status.HTTP_402_PAYMENT_REQUIRED,
    "content_too_large": 413,
    "unsupported_format": status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
}


def status_for(code: str) -> int:
    """HTTP status for a component error code; 400 for validation codes."""
    return _STATUS_BY_CODE.get(code, status.HTTP_400_BAD_REQUEST)


def raise_for_errors(errors: Sequence[Any]) -> None:
    """Raise HTTPException for the first component error, if any."""
    if not errors:
        return
    first = errors[0]
    raise HTTPException(
        status_code=status_for(first.code),
        detail={"code": first.code, "message": first.message, "field": first.field},
    )
