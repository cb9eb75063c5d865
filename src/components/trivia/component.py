"""
Trivia component - daily question answers and point awards.

Records a profile's answer to a daily question exactly once per
(question, profile), regrading in place on resubmission.

Invariants:
- At most one grading row per (question, profile)
- Profile credit and grading row commit together
- Under every_correct_submission each correct submission credits the
  question's points again; first_correct_only credits only when the row
  moves into "correct"
"""

from __future__ import annotations

import logging
from typing import Any

from src.adapters.clock import SystemClock
from src.domain.entities import Answer, DailyQuestion, DailyQuestionProfile

from .models import (
    ANSWER_NOT_FOUND,
    CORRECT_ANSWER_NOT_FOUND,
    FIRST_CORRECT_ONLY,
    INVALID_CORRECT_COUNT,
    INVALID_POINTS,
    NO_ANSWERS,
    PROFILE_NOT_FOUND,
    QUESTION_NOT_FOUND,
    AnswerInput,
    AnswerOutput,
    CreateQuestionInput,
    DeleteQuestionInput,
    DeleteQuestionOutput,
    GetQuestionInput,
    LastAnsweredInput,
    LastAnsweredOutput,
    ListQuestionsInput,
    QuestionListOutput,
    QuestionOutput,
    TriviaConfig,
    TriviaError,
)
from .ports import TimePort, TriviaStorePort

logger = logging.getLogger(__name__)


# --- Pure Functions ---


def find_correct_answer(question: DailyQuestion) -> Answer | None:
    """Return the answer flagged correct, if any."""
    for answer in question.answers:
        if answer.correct:
            return answer
    return None


def should_credit(
    was_correct: bool,
    previous: DailyQuestionProfile | None,
    config: TriviaConfig | None = None,
) -> bool:
    """
    Decide whether a submission earns the question's points.

    Args:
        was_correct: Whether this submission picked the correct answer
        previous: Existing grading row before this submission
        config: Trivia configuration (credit policy)
    """
    config = config or TriviaConfig()
    if not was_correct:
        return False
    if config.credit_policy == FIRST_CORRECT_ONLY:
        return previous is None or not previous.is_correct
    return True


def validate_question(inp: CreateQuestionInput) -> list[TriviaError]:
    """Validate a new question: non-negative reward, exactly one correct answer."""
    errors: list[TriviaError] = []

    if inp.points < 0:
        errors.append(TriviaError(INVALID_POINTS, "Points cannot be negative", "points"))

    if not inp.answers:
        errors.append(TriviaError(NO_ANSWERS, "A question needs answers", "answers"))
        return errors

    correct_count = sum(1 for a in inp.answers if a.correct)
    if correct_count != 1:
        errors.append(
            TriviaError(
                INVALID_CORRECT_COUNT,
                f"Exactly one answer must be correct, got {correct_count}",
                "answers",
            )
        )

    return errors


# --- Component Entry Points ---


def run_answer(
    inp: AnswerInput,
    *,
    store: TriviaStorePort,
    time: TimePort | None = None,
    config: TriviaConfig | None = None,
) -> AnswerOutput:
    """
    Grade a profile's answer to a daily question.

    An answer id belonging to a different question is rejected with
    `answer_not_found` rather than graded as wrong, so a stray id never
    creates a grading row.

    Args:
        inp: Question, chosen answer and profile identifiers.
        store: Ledger store port.
        time: Optional time port.
        config: Trivia configuration.

    Returns:
        AnswerOutput with the correct answer's content and the verdict.
    """
    clock = time or SystemClock()

    with store.transaction() as session:
        question = session.get_question(inp.question_id)
        if question is None:
            return AnswerOutput(
                errors=[TriviaError(QUESTION_NOT_FOUND, "Question not found", "question_id")],
                success=False,
            )

        correct = find_correct_answer(question)
        if correct is None:
            return AnswerOutput(
                errors=[
                    TriviaError(CORRECT_ANSWER_NOT_FOUND, "Correct answer not found", "question_id")
                ],
                success=False,
            )

        profile = session.get_profile(inp.profile_id)
        if profile is None:
            return AnswerOutput(
                errors=[TriviaError(PROFILE_NOT_FOUND, "Profile not found", "profile_id")],
                success=False,
            )

        answer = session.get_answer(inp.answer_id)
        if answer is None or answer.question_id != question.id:
            return AnswerOutput(
                errors=[TriviaError(ANSWER_NOT_FOUND, "Answer not found", "answer_id")],
                success=False,
            )

        previous = session.get_grading(question.id, profile.id)
        was_correct = answer.id == correct.id
        credit = should_credit(was_correct, previous, config)

        session.save_grading(
            DailyQuestionProfile(
                question_id=question.id,
                profile_id=profile.id,
                is_correct=was_correct,
                date_answered=clock.now_utc(),
            )
        )

        awarded = question.points if credit else 0.0
        if credit:
            profile.points += awarded
            session.save_profile(profile)

    logger.info(
        "Profile %s answered question %s: correct=%s awarded=%.2f regrade=%s",
        profile.id,
        question.id,
        was_correct,
        awarded,
        previous is not None,
    )

    return AnswerOutput(
        correct_content=correct.content,
        was_correct=was_correct,
        points_awarded=awarded,
    )


def run_last_answered(
    inp: LastAnsweredInput,
    *,
    store: TriviaStorePort,
) -> LastAnsweredOutput:
    """Return when the profile last answered any question, or "never"."""
    with store.transaction() as session:
        if session.get_profile(inp.profile_id) is None:
            return LastAnsweredOutput(
                errors=[TriviaError(PROFILE_NOT_FOUND, "Profile not found", "profile_id")],
                success=False,
            )
        answered_at = session.latest_answered_at(inp.profile_id)

    return LastAnsweredOutput(answered=answered_at is not None, answered_at=answered_at)


def run_create_question(
    inp: CreateQuestionInput,
    *,
    store: TriviaStorePort,
) -> QuestionOutput:
    """Create a daily question together with its answer choices."""
    errors = validate_question(inp)
    if errors:
        return QuestionOutput(errors=errors, success=False)

    with store.transaction() as session:
        question = session.add_question(
            DailyQuestion(
                question=inp.question,
                points=inp.points,
                date=inp.date,
                answers=[Answer(content=a.content, correct=a.correct) for a in inp.answers],
            )
        )

    logger.info("Created daily question %s for %s", question.id, question.date)
    return QuestionOutput(question=question)


def run_get_question(
    inp: GetQuestionInput,
    *,
    store: TriviaStorePort,
) -> QuestionOutput:
    """Get the question scheduled for a calendar date."""
    with store.transaction() as session:
        question = session.get_question_by_date(inp.date)

    if question is None:
        return QuestionOutput(
            errors=[TriviaError(QUESTION_NOT_FOUND, f"No question for {inp.date}", "date")],
            success=False,
        )
    return QuestionOutput(question=question)


def run_list_questions(
    inp: ListQuestionsInput,
    *,
    store: TriviaStorePort,
) -> QuestionListOutput:
    """List all questions, newest first."""
    with store.transaction() as session:
        questions = session.list_questions()
    return QuestionListOutput(questions=tuple(questions))


def run_delete_question(
    inp: DeleteQuestionInput,
    *,
    store: TriviaStorePort,
) -> DeleteQuestionOutput:
    """Delete a question and its answers."""
    with store.transaction() as session:
        question = session.get_question(inp.question_id)
        if question is None or not question.answers:
            return DeleteQuestionOutput(
                errors=[TriviaError(QUESTION_NOT_FOUND, "Question not found", "question_id")],
                success=False,
            )
        session.delete_question(inp.question_id)

    logger.info("Deleted daily question %s", inp.question_id)
    return DeleteQuestionOutput()


# --- Configuration Loader ---


def load_config_from_rules(rules: Any) -> TriviaConfig:
    """Load TriviaConfig from validated rules."""
    return TriviaConfig(credit_policy=rules.trivia.credit_policy)


# --- Run Function (Atomic Component Pattern) ---


def run(
    input_data: AnswerInput
    | LastAnsweredInput
    | CreateQuestionInput
    | GetQuestionInput
    | ListQuestionsInput
    | DeleteQuestionInput,
    *,
    store: TriviaStorePort,
    time: TimePort | None = None,
    config: TriviaConfig | None = None,
) -> (
    AnswerOutput | LastAnsweredOutput | QuestionOutput | QuestionListOutput | DeleteQuestionOutput
):
    """
    Run trivia operation based on input type.

    Args:
        input_data: One of the input types
        store: Ledger store port
        time: Optional time port
        config: Trivia configuration

    Returns:
        Corresponding output type
    """
    if isinstance(input_data, AnswerInput):
        return run_answer(input_data, store=store, time=time, config=config)

    if isinstance(input_data, LastAnsweredInput):
        return run_last_answered(input_data, store=store)

    if isinstance(input_data, CreateQuestionInput):
        return run_create_question(input_data, store=store)

    if isinstance(input_data, GetQuestionInput):
        return run_get_question(input_data, store=store)

    if isinstance(input_data, ListQuestionsInput):
        return run_list_questions(input_data, store=store)

    if isinstance(input_data, DeleteQuestionInput):
        return run_delete_question(input_data, store=store)

    raise TypeError(f"Unknown input type: {type(input_data)}")
