from datetime import date

from fastapi import APIRouter, Depends, Response, status

from src.api.deps import (
    Caller,
    get_clock,
    get_current_profile_id,
    get_store,
    get_trivia_config,
    require_admin,
)
from src.api.errors import raise_for_errors
from src.api.schemas import (
    AnswerChoiceResponse,
    AnswerRequest,
    AnswerResponse,
    LastAnsweredResponse,
    QuestionCreateRequest,
    QuestionResponse,
)
from src.components.trivia import (
    AnswerDraft,
    AnswerInput,
    CreateQuestionInput,
    DeleteQuestionInput,
    GetQuestionInput,
    LastAnsweredInput,
    ListQuestionsInput,
    TriviaConfig,
    run_answer,
    run_create_question,
    run_delete_question,
    run_get_question,
    run_last_answered,
    run_list_questions,
)
from src.core.ports.db import LedgerStorePort
from src.core.ports.time import TimePort
from src.domain.entities import DailyQuestion

router = APIRouter()


def _question_response(question: DailyQuestion) -> QuestionResponse:
    # Correct flags stay server side
    return QuestionResponse(
        id=question.id or 0,
        question=question.question,
        points=question.points,
        date=question.date,
        answers=[AnswerChoiceResponse(id=a.id or 0, content=a.content) for a in question.answers],
    )


@router.get("", response_model=list[QuestionResponse])
def list_questions(store: LedgerStorePort = Depends(get_store)) -> list[QuestionResponse]:
    result = run_list_questions(ListQuestionsInput(), store=store)
    return [_question_response(q) for q in result.questions]


@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
def create_question(
    request: QuestionCreateRequest,
    _admin: Caller = Depends(require_admin),
    store: LedgerStorePort = Depends(get_store),
) -> QuestionResponse:
    """Schedule a question with its answer choices for a calendar date (admin only)."""
    result = run_create_question(
        CreateQuestionInput(
            question=request.question,
            points=request.points,
            date=request.date,
            answers=tuple(
                AnswerDraft(content=a.content, correct=a.correct) for a in request.answers
            ),
        ),
        store=store,
    )
    raise_for_errors(result.errors)
    assert result.question is not None
    return _question_response(result.question)


@router.get("/today", response_model=QuestionResponse)
def get_todays_question(
    store: LedgerStorePort = Depends(get_store),
    clock: TimePort = Depends(get_clock),
) -> QuestionResponse:
    return get_question_for_date(clock.today(), store=store)


@router.get("/by-date/{day}", response_model=QuestionResponse)
def get_question_for_date(
    day: date,
    store: LedgerStorePort = Depends(get_store),
) -> QuestionResponse:
    result = run_get_question(GetQuestionInput(date=day), store=store)
    raise_for_errors(result.errors)
    assert result.question is not None
    return _question_response(result.question)


@router.get("/last-answered", response_model=LastAnsweredResponse)
def last_answered(
    profile_id: int = Depends(get_current_profile_id),
    store: LedgerStorePort = Depends(get_store),
) -> LastAnsweredResponse:
    """When the caller last answered any question."""
    result = run_last_answered(LastAnsweredInput(profile_id=profile_id), store=store)
    raise_for_errors(result.errors)
    return LastAnsweredResponse(answered=result.answered, answered_at=result.answered_at)


@router.post("/{question_id}/answers", response_model=AnswerResponse)
def answer_question(
    question_id: int,
    request: AnswerRequest,
    profile_id: int = Depends(get_current_profile_id),
    store: LedgerStorePort = Depends(get_store),
    clock: TimePort = Depends(get_clock),
    config: TriviaConfig = Depends(get_trivia_config),
) -> AnswerResponse:
    """Grade the caller's answer and return the correct answer's text."""
    result = run_answer(
        AnswerInput(question_id=question_id, answer_id=request.answer_id, profile_id=profile_id),
        store=store,
        time=clock,
        config=config,
    )
    raise_for_errors(result.errors)

    return AnswerResponse(
        correct_answer=result.correct_content or "",
        was_correct=result.was_correct,
        points_awarded=result.points_awarded,
    )


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_question(
    question_id: int,
    _admin: Caller = Depends(require_admin),
    store: LedgerStorePort = Depends(get_store),
) -> Response:
    result = run_delete_question(DeleteQuestionInput(question_id=question_id), store=store)
    raise_for_errors(result.errors)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
