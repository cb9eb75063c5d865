from fastapi import APIRouter, Depends, status

from src.api.deps import (
    Caller,
    get_clock,
    get_current_caller,
    get_current_profile_id,
    get_payout_config,
    get_store,
)
from src.api.errors import raise_for_errors
from src.api.schemas import (
    ChapterSummaryResponse,
    EntitlementResponse,
    PublishChapterRequest,
    PublishChapterResponse,
    SubscribeResponse,
    SubscriptionResponse,
)
from src.components.payouts import PayoutConfig, PublishChapterInput, run_publish_chapter
from src.components.subscriptions import (
    GetEntitlementInput,
    ListChaptersInput,
    SubscribeInput,
    UnsubscribeInput,
    run_get_entitlement,
    run_list_chapters,
    run_subscribe,
    run_unsubscribe,
)
from src.core.ports.db import LedgerStorePort
from src.core.ports.time import TimePort
from src.domain.entities import Subscription

router = APIRouter()


def _subscription_response(subscription: Subscription) -> SubscriptionResponse:
    return SubscriptionResponse(
        book_id=subscription.book_id,
        profile_id=subscription.profile_id,
        state=subscription.state,
        owned_chapter_ids=sorted(subscription.owned_chapter_ids),
        bought_date=subscription.bought_date,
    )


@router.post("/{book_id}/subscription", response_model=SubscribeResponse)
def subscribe(
    book_id: int,
    profile_id: int = Depends(get_current_profile_id),
    store: LedgerStorePort = Depends(get_store),
    clock: TimePort = Depends(get_clock),
) -> SubscribeResponse:
    """Subscribe the caller to a book, paying for every owed chapter."""
    result = run_subscribe(
        SubscribeInput(book_id=book_id, profile_id=profile_id), store=store, time=clock
    )
    raise_for_errors(result.errors)
    assert result.subscription is not None

    return SubscribeResponse(
        subscription=_subscription_response(result.subscription),
        charged_amount=result.charged_amount,
        newly_owned_chapter_ids=list(result.newly_owned_chapter_ids),
        is_resubscription=result.is_resubscription,
    )


@router.delete("/{book_id}/subscription", response_model=SubscriptionResponse)
def unsubscribe(
    book_id: int,
    profile_id: int = Depends(get_current_profile_id),
    store: LedgerStorePort = Depends(get_store),
) -> SubscriptionResponse:
    result = run_unsubscribe(UnsubscribeInput(book_id=book_id, profile_id=profile_id), store=store)
    raise_for_errors(result.errors)
    assert result.subscription is not None
    return _subscription_response(result.subscription)


@router.get("/{book_id}/entitlement", response_model=EntitlementResponse)
def get_entitlement(
    book_id: int,
    profile_id: int = Depends(get_current_profile_id),
    store: LedgerStorePort = Depends(get_store),
) -> EntitlementResponse:
    """What the caller owns of a book and what subscribing would cost now."""
    result = run_get_entitlement(
        GetEntitlementInput(book_id=book_id, profile_id=profile_id), store=store
    )
    raise_for_errors(result.errors)

    return EntitlementResponse(
        book_id=book_id,
        profile_id=profile_id,
        state=result.state,
        owned_chapter_ids=sorted(result.owned_chapter_ids),
        pending_chapter_ids=list(result.pending_chapter_ids),
        pending_cost=result.pending_cost,
    )


@router.post(
    "/{book_id}/chapters",
    response_model=PublishChapterResponse,
    status_code=status.HTTP_201_CREATED,
)
def publish_chapter(
    book_id: int,
    request: PublishChapterRequest,
    caller: Caller = Depends(get_current_caller),
    store: LedgerStorePort = Depends(get_store),
    config: PayoutConfig = Depends(get_payout_config),
) -> PublishChapterResponse:
    """Publish a chapter and charge the book's active subscribers (author or admin only)."""
    result = run_publish_chapter(
        PublishChapterInput(
            book_id=book_id,
            name=request.name,
            content=request.content,
            source_format=request.source_format,
            mark_book_finished=request.mark_book_finished,
            acting_profile_id=caller.profile_id,
            acting_is_admin=caller.is_admin,
        ),
        store=store,
        config=config,
    )
    raise_for_errors(result.errors)
    assert result.chapter is not None and result.chapter.id is not None

    return PublishChapterResponse(
        chapter_id=result.chapter.id,
        book_id=book_id,
        charged_count=result.charged_count,
        stopped_early=result.payout.stopped_early if result.payout else False,
        message=result.message,
    )


@router.get("/{book_id}/chapters", response_model=list[ChapterSummaryResponse])
def list_chapters(
    book_id: int,
    caller: Caller = Depends(get_current_caller),
    store: LedgerStorePort = Depends(get_store),
) -> list[ChapterSummaryResponse]:
    """Chapters of a book, for its author, an admin or a (former) subscriber."""
    result = run_list_chapters(
        ListChaptersInput(book_id=book_id, profile_id=caller.profile_id, is_admin=caller.is_admin),
        store=store,
    )
    raise_for_errors(result.errors)

    return [
        ChapterSummaryResponse(
            id=c.id or 0,
            name=c.name,
            created_at=c.created_at,
            owned=c.id in result.owned_chapter_ids,
        )
        for c in result.chapters
    ]
