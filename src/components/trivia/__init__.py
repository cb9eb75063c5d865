"""
Trivia component - daily question answers and point awards.
"""

from .component import (
    find_correct_answer,
    load_config_from_rules,
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
from .models import (
    ANSWER_NOT_FOUND,
    CORRECT_ANSWER_NOT_FOUND,
    EVERY_CORRECT_SUBMISSION,
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
    CreditPolicy,
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
from .ports import TimePort, TriviaSessionPort, TriviaStorePort

__all__ = [
    # Entry points
    "run",
    "run_answer",
    "run_create_question",
    "run_delete_question",
    "run_get_question",
    "run_last_answered",
    "run_list_questions",
    # Pure functions
    "find_correct_answer",
    "should_credit",
    "validate_question",
    "load_config_from_rules",
    # Input models
    "AnswerDraft",
    "AnswerInput",
    "CreateQuestionInput",
    "DeleteQuestionInput",
    "GetQuestionInput",
    "LastAnsweredInput",
    "ListQuestionsInput",
    # Output models
    "AnswerOutput",
    "DeleteQuestionOutput",
    "LastAnsweredOutput",
    "QuestionListOutput",
    "QuestionOutput",
    "TriviaError",
    # Config
    "CreditPolicy",
    "TriviaConfig",
    "EVERY_CORRECT_SUBMISSION",
    "FIRST_CORRECT_ONLY",
    # Error codes
    "ANSWER_NOT_FOUND",
    "CORRECT_ANSWER_NOT_FOUND",
    "INVALID_CORRECT_COUNT",
    "INVALID_POINTS",
    "NO_ANSWERS",
    "PROFILE_NOT_FOUND",
    "QUESTION_NOT_FOUND",
    # Ports
    "TimePort",
    "TriviaSessionPort",
    "TriviaStorePort",
]
