"""Exam Prep - Motor de sessoes de quiz e avaliacao adaptativa.

Componentes:
- QuotaTracker / QuotaService: limites diarios e de armazenamento
- DifficultyAdapter: dificuldade adaptativa por sequencias de acertos/erros
- AnswerEvaluator: correcao por tipo com avaliador externo e fallback
- QuizSessionEngine / QuizEngine: ciclo de vida das sessoes
- StatisticsAggregator: desempenho agregado
"""

from .config import ExamPrepConfig, get_config, reload_config
from .engine import (
    AnswerEvaluator,
    DifficultyAdapter,
    QuestionBankService,
    QuestionGenerationService,
    QuizEngine,
    QuizSessionEngine,
    QuotaService,
    QuotaTracker,
    StatisticsAggregator,
)
from .exceptions import (
    ConcurrentUpdateError,
    ExamPrepError,
    ExternalServiceError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    OutOfRangeError,
    QuotaExceededError,
    UnauthorizedError,
)
from .storage import QuizStore

__version__ = "1.0.0"

__all__ = [
    "ExamPrepConfig",
    "get_config",
    "reload_config",
    "AnswerEvaluator",
    "DifficultyAdapter",
    "QuestionBankService",
    "QuestionGenerationService",
    "QuizEngine",
    "QuizSessionEngine",
    "QuotaService",
    "QuotaTracker",
    "StatisticsAggregator",
    "ExamPrepError",
    "InvalidInputError",
    "NotFoundError",
    "UnauthorizedError",
    "InvalidStateError",
    "OutOfRangeError",
    "ExternalServiceError",
    "QuotaExceededError",
    "ConcurrentUpdateError",
    "QuizStore",
]
