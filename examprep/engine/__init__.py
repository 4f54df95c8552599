"""Engine do motor de quiz."""

from .answer_evaluator import PASS_THRESHOLD, AnswerEvaluator
from .difficulty_adapter import DifficultyAdapter, DifficultyEffect
from .generation_service import QuestionGenerationService
from .question_bank import QuestionBankService
from .quiz_engine import QuizEngine
from .quiz_session import RANDOM_QUIZ_TITLE, QuizSessionEngine, SubmitAnswerResult
from .quota_service import QuotaService
from .quota_tracker import DEFAULT_LIMITS, QuotaTracker, default_quota
from .statistics import StatisticsAggregator, summarize

__all__ = [
    "AnswerEvaluator",
    "PASS_THRESHOLD",
    "DifficultyAdapter",
    "DifficultyEffect",
    "QuestionGenerationService",
    "QuestionBankService",
    "QuizEngine",
    "QuizSessionEngine",
    "RANDOM_QUIZ_TITLE",
    "SubmitAnswerResult",
    "QuotaService",
    "QuotaTracker",
    "DEFAULT_LIMITS",
    "default_quota",
    "StatisticsAggregator",
    "summarize",
]
