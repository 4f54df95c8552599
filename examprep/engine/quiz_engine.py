"""Quiz Engine - Orquestracao das sessoes sobre o QuizStore."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import datetime

from ..config import ExamPrepConfig, get_config
from ..exceptions import NotFoundError, UnauthorizedError
from ..llm.grader import AnswerGrader
from ..models.enums import QuizStatus
from ..models.schemas import (
    AnswerFeedback,
    QuestionFilters,
    QuizOptions,
    QuizStatistics,
)
from ..models.state import DifficultyState, QuizSession
from ..storage.locks import KeyedLocks
from ..storage.quiz_store import QuizStore
from .answer_evaluator import AnswerEvaluator
from .difficulty_adapter import DifficultyAdapter, DifficultyEffect
from .quiz_session import RANDOM_QUIZ_TITLE, QuizSessionEngine
from .scoring import local_now
from .statistics import StatisticsAggregator

logger = logging.getLogger(__name__)


class QuizEngine:
    """Servico de quiz usado pelo router.

    Responsabilidades alem do QuizSessionEngine:
    - carregar/gravar sessoes, usuarios e questoes
    - checar que a sessao pertence a quem chama
    - serializar operacoes de uma mesma sessao (complete nunca roda junto
      com um submit em andamento)
    - aplicar o ajuste de dificuldade como efeito "dispara e registra":
      falhas sao logadas e nunca chegam a quem respondeu

    Example:
        >>> engine = QuizEngine(QuizStore(agentfs.kv), grader=ClaudeAnswerGrader())
        >>> session = await engine.create_quiz("u1", ["q1", "q2"])
        >>> feedback = await engine.submit_answer(session.id, "u1", 0, "A")
        >>> session = await engine.complete_quiz(session.id, "u1")
    """

    def __init__(
        self,
        store: QuizStore,
        grader: AnswerGrader | None = None,
        config: ExamPrepConfig | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = local_now,
        session_engine: QuizSessionEngine | None = None,
        difficulty_adapter: DifficultyAdapter | None = None,
    ):
        self.store = store
        self.config = config or get_config()
        self.clock = clock
        self.session_engine = session_engine or QuizSessionEngine(
            AnswerEvaluator(grader, timeout=self.config.grader_timeout_seconds),
            rng=rng,
            clock=clock,
        )
        self.difficulty = difficulty_adapter or DifficultyAdapter()
        self.statistics = StatisticsAggregator(recent_limit=self.config.recent_quizzes_limit)
        self._session_locks = KeyedLocks()

    # =========================================================================
    # CRIACAO
    # =========================================================================

    async def create_quiz(
        self, user_id: str, question_ids: list[str], options: QuizOptions | None = None
    ) -> QuizSession:
        user = await self.store.require_user(user_id)
        questions = await self.store.get_questions(question_ids)
        session = self.session_engine.create(user, question_ids, questions, options)
        return await self.store.save_session(session)

    async def create_random_quiz(
        self,
        user_id: str,
        count: int | None = None,
        filters: QuestionFilters | None = None,
        title: str = RANDOM_QUIZ_TITLE,
    ) -> QuizSession:
        user = await self.store.require_user(user_id)
        pool = await self.store.list_questions(user_id)
        session = self.session_engine.create_random(
            user,
            pool,
            count if count is not None else self.config.default_random_quiz_size,
            filters,
            title,
        )
        return await self.store.save_session(session)

    # =========================================================================
    # LEITURA
    # =========================================================================

    async def get_quiz(self, quiz_id: str, user_id: str) -> QuizSession:
        """Carrega a sessao verificando o dono.

        Raises:
            NotFoundError: sessao inexistente
            UnauthorizedError: sessao de outro usuario
        """
        session = await self.store.get_session(quiz_id)
        if session is None:
            raise NotFoundError(f"Quiz {quiz_id} nao encontrado")
        if session.user_id != user_id:
            raise UnauthorizedError(f"Acesso nao autorizado ao quiz {quiz_id}")
        return session

    async def list_quizzes(self, user_id: str, status: QuizStatus | None = None) -> list[QuizSession]:
        await self.store.require_user(user_id)
        return await self.store.list_sessions(user_id, status)

    async def get_statistics(self, user_id: str) -> QuizStatistics:
        await self.store.require_user(user_id)
        sessions = await self.store.list_sessions(user_id, QuizStatus.COMPLETED)
        question_ids = [item.question_id for s in sessions for item in s.items]
        questions = await self.store.get_questions(question_ids)
        return self.statistics.aggregate(sessions, questions)

    async def get_adaptive_difficulty(self, user_id: str) -> DifficultyState:
        user = await self.store.require_user(user_id)
        return user.difficulty or self.difficulty.initial_state(self.clock())

    # =========================================================================
    # CICLO DE VIDA
    # =========================================================================

    async def submit_answer(
        self,
        quiz_id: str,
        user_id: str,
        index: int,
        user_answer: str | None,
        time_spent_seconds: int = 0,
    ) -> AnswerFeedback:
        async with self._session_locks.hold(quiz_id):
            session = await self.get_quiz(quiz_id, user_id)
            user = await self.store.require_user(user_id)
            questions = await self.store.get_questions(session.question_ids)
            result = await self.session_engine.submit_answer(
                session, index, user_answer, time_spent_seconds, questions, user.role
            )
            await self.store.save_session(session)

        if result.difficulty_effect is not None:
            await self.apply_difficulty_effect(result.difficulty_effect)
        return result.feedback

    async def apply_difficulty_effect(self, effect: DifficultyEffect) -> None:
        """Aplica o ajuste de dificuldade; nunca propaga erro."""
        try:
            await self.store.update_user(
                effect.user_id,
                lambda user: self.difficulty.apply(user, effect.is_correct, effect.occurred_at),
            )
        except Exception:
            logger.exception(f"Falha ao ajustar dificuldade adaptativa do usuario {effect.user_id}")

    async def complete_quiz(self, quiz_id: str, user_id: str) -> QuizSession:
        async with self._session_locks.hold(quiz_id):
            session = await self.get_quiz(quiz_id, user_id)
            self.session_engine.complete(session)
            return await self.store.save_session(session)

    async def abandon_quiz(self, quiz_id: str) -> QuizSession:
        """Usado pela rotina de limpeza (sem checagem de dono)."""
        async with self._session_locks.hold(quiz_id):
            session = await self.store.get_session(quiz_id)
            if session is None:
                raise NotFoundError(f"Quiz {quiz_id} nao encontrado")
            self.session_engine.abandon(session)
            return await self.store.save_session(session)

    async def delete_quiz(self, quiz_id: str, user_id: str) -> None:
        async with self._session_locks.hold(quiz_id):
            await self.get_quiz(quiz_id, user_id)
            await self.store.delete_session(quiz_id)
