"""
Unit tests for the trivia component.

Tests:
- Grading row written once per (question, profile) and regraded in place
- Credit policies
- Question authoring validation
"""

from datetime import UTC, date, datetime

import pytest

from src.adapters.clock import FixedClock
from src.adapters.memory import InMemoryLedgerStore
from src.components.trivia import (
    ANSWER_NOT_FOUND,
    CORRECT_ANSWER_NOT_FOUND,
    FIRST_CORRECT_ONLY,
    INVALID_CORRECT_COUNT,
    INVALID_POINTS,
    NO_ANSWERS,
    PROFILE_NOT_FOUND,
    QUESTION_NOT_FOUND,
    AnswerDraft,
    AnswerInput,
    AnswerOutput,
    CreateQuestionInput,
    DeleteQuestionInput,
    GetQuestionInput,
    LastAnsweredInput,
    ListQuestionsInput,
    TriviaConfig,
    run,
    run_answer,
    run_create_question,
    run_delete_question,
    run_get_question,
    run_last_answered,
    run_list_questions,
    should_credit,
    validate_question,
)
from src.domain.entities import Answer, DailyQuestion, DailyQuestionProfile, Profile

PLAYER = 5
DAY = date(2026, 5, 4)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2026, 5, 4, 8, 30, tzinfo=UTC))


@pytest.fixture
def store() -> InMemoryLedgerStore:
    """Question 1 worth 10 points: answer 1 "Paris" (correct), answer 2 "Lyon"."""
    s = InMemoryLedgerStore()
    s.seed(
        Profile(id=PLAYER, user_id="player", points=0),
        DailyQuestion(
            question="Capital of France?",
            points=10,
            date=DAY,
            answers=[Answer(content="Paris", correct=True), Answer(content="Lyon")],
        ),
    )
    return s


def answer(store, clock, answer_id: int, config: TriviaConfig | None = None) -> AnswerOutput:
    return run_answer(
        AnswerInput(question_id=1, answer_id=answer_id, profile_id=PLAYER),
        store=store,
        time=clock,
        config=config,
    )


def balance(store: InMemoryLedgerStore) -> float:
    return store.session().get_profile(PLAYER).points


# --- Pure Functions ---


class TestShouldCredit:
    previous_correct = DailyQuestionProfile(
        question_id=1, profile_id=PLAYER, is_correct=True, date_answered=datetime.now(UTC)
    )
    previous_wrong = previous_correct.model_copy(update={"is_correct": False})

    def test_wrong_never_credits(self) -> None:
        assert should_credit(False, None) is False

    def test_default_policy_credits_every_correct(self) -> None:
        assert should_credit(True, self.previous_correct) is True

    def test_first_correct_only_blocks_repeat(self) -> None:
        config = TriviaConfig(credit_policy=FIRST_CORRECT_ONLY)
        assert should_credit(True, self.previous_correct, config) is False

    def test_first_correct_only_credits_after_wrong(self) -> None:
        config = TriviaConfig(credit_policy=FIRST_CORRECT_ONLY)
        assert should_credit(True, self.previous_wrong, config) is True


class TestValidateQuestion:
    def make(self, answers, points: float = 5) -> CreateQuestionInput:
        return CreateQuestionInput(question="q", points=points, date=DAY, answers=tuple(answers))

    def test_valid(self) -> None:
        inp = self.make([AnswerDraft("a", correct=True), AnswerDraft("b")])
        assert validate_question(inp) == []

    def test_no_answers(self) -> None:
        assert [e.code for e in validate_question(self.make([]))] == [NO_ANSWERS]

    def test_two_correct_answers(self) -> None:
        inp = self.make([AnswerDraft("a", correct=True), AnswerDraft("b", correct=True)])
        assert [e.code for e in validate_question(inp)] == [INVALID_CORRECT_COUNT]

    def test_no_correct_answer(self) -> None:
        inp = self.make([AnswerDraft("a"), AnswerDraft("b")])
        assert [e.code for e in validate_question(inp)] == [INVALID_CORRECT_COUNT]

    def test_negative_points(self) -> None:
        inp = self.make([AnswerDraft("a", correct=True)], points=-1)
        assert [e.code for e in validate_question(inp)] == [INVALID_POINTS]


# --- Answering ---


class TestAnswer:
    def test_wrong_answer_no_credit(self, store, clock) -> None:
        result = answer(store, clock, answer_id=2)

        assert result.success is True
        assert result.was_correct is False
        assert result.correct_content == "Paris"
        assert result.points_awarded == 0
        assert balance(store) == 0
        assert store.grading_count(1, PLAYER) == 1

    def test_correct_answer_credits_points(self, store, clock) -> None:
        result = answer(store, clock, answer_id=1)

        assert result.was_correct is True
        assert result.points_awarded == 10
        assert balance(store) == 10

    def test_resubmission_updates_single_row(self, store, clock) -> None:
        answer(store, clock, answer_id=2)
        clock.advance(seconds=60)
        answer(store, clock, answer_id=1)

        assert store.grading_count(1) == 1
        row = store.session().get_grading(1, PLAYER)
        assert row.is_correct is True
        assert row.date_answered == clock.now_utc()

    def test_repeat_correct_credits_again_by_default(self, store, clock) -> None:
        answer(store, clock, answer_id=2)
        answer(store, clock, answer_id=1)
        answer(store, clock, answer_id=1)

        assert balance(store) == 20
        assert store.grading_count(1, PLAYER) == 1

    def test_first_correct_only_policy(self, store, clock) -> None:
        config = TriviaConfig(credit_policy=FIRST_CORRECT_ONLY)
        answer(store, clock, answer_id=1, config=config)
        result = answer(store, clock, answer_id=1, config=config)

        assert result.was_correct is True
        assert result.points_awarded == 0
        assert balance(store) == 10

    def test_unknown_question(self, store, clock) -> None:
        result = run_answer(
            AnswerInput(question_id=99, answer_id=1, profile_id=PLAYER), store=store, time=clock
        )
        assert result.errors[0].code == QUESTION_NOT_FOUND

    def test_unknown_profile(self, store, clock) -> None:
        result = run_answer(
            AnswerInput(question_id=1, answer_id=1, profile_id=99), store=store, time=clock
        )
        assert result.errors[0].code == PROFILE_NOT_FOUND
        assert store.grading_count(1) == 0

    def test_answer_from_another_question(self, store, clock) -> None:
        store.seed(
            DailyQuestion(
                question="Other?",
                points=1,
                date=date(2026, 5, 5),
                answers=[Answer(content="Yes", correct=True)],
            )
        )
        result = answer(store, clock, answer_id=3)
        assert result.errors[0].code == ANSWER_NOT_FOUND
        assert store.grading_count(1) == 0

    def test_question_without_correct_answer(self, store, clock) -> None:
        store.seed(
            DailyQuestion(question="Broken?", points=1, date=DAY, answers=[Answer(content="x")])
        )
        result = run_answer(
            AnswerInput(question_id=2, answer_id=3, profile_id=PLAYER), store=store, time=clock
        )
        assert result.errors[0].code == CORRECT_ANSWER_NOT_FOUND


class TestLastAnswered:
    def test_never_answered(self, store) -> None:
        result = run_last_answered(LastAnsweredInput(profile_id=PLAYER), store=store)
        assert result.answered is False
        assert result.answered_at is None

    def test_returns_latest_timestamp(self, store, clock) -> None:
        answer(store, clock, answer_id=2)
        result = run_last_answered(LastAnsweredInput(profile_id=PLAYER), store=store)
        assert result.answered is True
        assert result.answered_at == clock.now_utc()

    def test_unknown_profile(self, store) -> None:
        result = run_last_answered(LastAnsweredInput(profile_id=99), store=store)
        assert result.errors[0].code == PROFILE_NOT_FOUND


# --- Authoring ---


class TestAuthoring:
    def test_create_and_fetch_by_date(self, store) -> None:
        created = run_create_question(
            CreateQuestionInput(
                question="2+2?",
                points=3,
                date=date(2026, 5, 6),
                answers=(AnswerDraft("4", correct=True), AnswerDraft("5")),
            ),
            store=store,
        )
        assert created.success is True
        assert created.question is not None
        assert [a.content for a in created.question.answers] == ["4", "5"]

        fetched = run_get_question(GetQuestionInput(date=date(2026, 5, 6)), store=store)
        assert fetched.question.id == created.question.id

    def test_invalid_question_not_stored(self, store) -> None:
        result = run_create_question(
            CreateQuestionInput(question="?", points=1, date=DAY, answers=()), store=store
        )
        assert result.success is False
        assert len(run_list_questions(ListQuestionsInput(), store=store).questions) == 1

    def test_get_missing_date(self, store) -> None:
        result = run_get_question(GetQuestionInput(date=date(2030, 1, 1)), store=store)
        assert result.errors[0].code == QUESTION_NOT_FOUND

    def test_list_newest_first(self, store) -> None:
        run_create_question(
            CreateQuestionInput(
                question="Later?",
                points=1,
                date=date(2026, 6, 1),
                answers=(AnswerDraft("y", correct=True),),
            ),
            store=store,
        )
        questions = run_list_questions(ListQuestionsInput(), store=store).questions
        assert [q.date for q in questions] == [date(2026, 6, 1), DAY]

    def test_delete_removes_question_and_gradings(self, store, clock) -> None:
        answer(store, clock, answer_id=1)

        result = run_delete_question(DeleteQuestionInput(question_id=1), store=store)

        assert result.success is True
        assert store.session().get_question(1) is None
        assert store.grading_count(1) == 0
        # Points already awarded stay with the profile
        assert balance(store) == 10

    def test_delete_missing(self, store) -> None:
        result = run_delete_question(DeleteQuestionInput(question_id=99), store=store)
        assert result.errors[0].code == QUESTION_NOT_FOUND


class TestRun:
    def test_dispatches_answer(self, store, clock) -> None:
        result = run(
            AnswerInput(question_id=1, answer_id=1, profile_id=PLAYER), store=store, time=clock
        )
        assert isinstance(result, AnswerOutput)

    def test_unknown_input_raises(self, store) -> None:
        with pytest.raises(TypeError):
            run(42, store=store)  # type: ignore[arg-type]
