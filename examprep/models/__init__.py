"""Quiz Models - Enums, Schemas e State."""

from .enums import (
    Difficulty,
    QuestionType,
    QuizDifficulty,
    QuizStatus,
    SubscriptionPlan,
    UserRole,
)
from .schemas import (
    AnswerFeedback,
    EvaluationResult,
    GeneratedQuestion,
    GeneratedQuestions,
    GradeResult,
    PerformanceBreakdown,
    Question,
    QuestionFilters,
    QuestionUpdate,
    QuizOptions,
    QuizStatistics,
    QuizSummary,
    SubjectPerformance,
)
from .state import DifficultyState, QuizItem, QuizSession, QuotaState, User

__all__ = [
    # Enums
    "Difficulty",
    "QuestionType",
    "QuizDifficulty",
    "QuizStatus",
    "SubscriptionPlan",
    "UserRole",
    # Schemas
    "AnswerFeedback",
    "EvaluationResult",
    "GeneratedQuestion",
    "GeneratedQuestions",
    "GradeResult",
    "PerformanceBreakdown",
    "Question",
    "QuestionFilters",
    "QuestionUpdate",
    "QuizOptions",
    "QuizStatistics",
    "QuizSummary",
    "SubjectPerformance",
    # State
    "DifficultyState",
    "QuizItem",
    "QuizSession",
    "QuotaState",
    "User",
]
