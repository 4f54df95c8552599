"""Quiz Session Engine - Ciclo de vida de um quiz.

in-progress -> completed (terminal)
in-progress -> abandoned (terminal, limpeza externa)
"""

from __future__ import annotations

import logging
import random
import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime

from ..exceptions import (
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
    OutOfRangeError,
)
from ..models.enums import QuizStatus, UserRole
from ..models.schemas import (
    AnswerFeedback,
    EvaluationResult,
    Question,
    QuestionFilters,
    QuizOptions,
)
from ..models.state import QuizItem, QuizSession, User
from .answer_evaluator import AnswerEvaluator
from .difficulty_adapter import DifficultyEffect
from .scoring import local_now, percentage

logger = logging.getLogger(__name__)

RANDOM_QUIZ_TITLE = "Random Practice Quiz"


@dataclass
class SubmitAnswerResult:
    """Resultado de submit_answer.

    ``feedback`` vai para o aluno; ``difficulty_effect`` e o efeito colateral
    que o host aplica a parte (None quando o dono nao e aluno).
    """

    feedback: AnswerFeedback
    evaluation: EvaluationResult
    difficulty_effect: DifficultyEffect | None = None


class QuizSessionEngine:
    """Operacoes sobre QuizSession em memoria.

    Nao faz I/O alem da chamada ao avaliador; persistencia e serializacao
    por sessao ficam com o host (QuizEngine).

    Args:
        evaluator: Corretor de respostas
        rng: Fonte de aleatoriedade para embaralhar/sortear (injetavel em testes)
        clock: Relogio (injetavel em testes)
        id_factory: Gerador de IDs de sessao
    """

    def __init__(
        self,
        evaluator: AnswerEvaluator,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = local_now,
        id_factory: Callable[[], str] = lambda: uuid.uuid4().hex,
    ):
        self.evaluator = evaluator
        self.rng = rng or random.Random()
        self.clock = clock
        self.id_factory = id_factory

    # =========================================================================
    # CRIACAO
    # =========================================================================

    def create(
        self,
        user: User,
        question_ids: list[str],
        questions: Mapping[str, Question],
        options: QuizOptions | None = None,
    ) -> QuizSession:
        """Cria uma sessao a partir de IDs explicitos.

        Raises:
            InvalidInputError: lista vazia, ID repetido, questao inexistente
                ou de outro usuario
        """
        options = options or QuizOptions()
        if not question_ids:
            raise InvalidInputError("Informe ao menos uma questao")

        if len(set(question_ids)) != len(question_ids):
            raise InvalidInputError("IDs de questao repetidos")

        missing = [
            qid
            for qid in question_ids
            if qid not in questions or questions[qid].owner_id != user.user_id
        ]
        if missing:
            raise InvalidInputError(
                "Algumas questoes nao existem ou nao pertencem ao usuario",
                details={"question_ids": missing},
            )

        ordered = list(question_ids)
        if options.shuffle_questions:
            self.rng.shuffle(ordered)

        return self._new_session(user, ordered, options)

    def create_random(
        self,
        user: User,
        candidate_pool: Iterable[Question],
        count: int,
        filters: QuestionFilters | None = None,
        title: str = RANDOM_QUIZ_TITLE,
    ) -> QuizSession:
        """Sorteia ate ``count`` questoes do banco do usuario, sem repeticao.

        Raises:
            InvalidInputError: count < 1 ou nenhuma questao passa pelos filtros
        """
        filters = filters or QuestionFilters()
        if count < 1:
            raise InvalidInputError("Quantidade de questoes deve ser positiva", {"count": count})

        pool = [
            q for q in candidate_pool if q.owner_id == user.user_id and filters.matches(q)
        ]
        if not pool:
            raise InvalidInputError("Nenhuma questao encontrada com os filtros informados")

        selected = self.rng.sample(pool, min(count, len(pool)))
        options = QuizOptions(
            title=title or RANDOM_QUIZ_TITLE,
            subject=filters.subject or "",
            difficulty=filters.difficulty or QuizOptions().difficulty,
            shuffle_questions=True,
        )
        return self._new_session(user, [q.id for q in selected], options)

    def _new_session(self, user: User, ordered_ids: list[str], options: QuizOptions) -> QuizSession:
        session = QuizSession(
            id=self.id_factory(),
            user_id=user.user_id,
            items=[QuizItem(question_id=qid) for qid in ordered_ids],
            title=options.title,
            subject=options.subject,
            difficulty=options.difficulty,
            status=QuizStatus.IN_PROGRESS,
            total_questions=len(ordered_ids),
            started_at=self.clock(),
            time_limit_minutes=options.time_limit_minutes,
            shuffle_questions=options.shuffle_questions,
        )
        logger.info(f"[Quiz {session.id}] Criado com {session.total_questions} questoes")
        return session

    # =========================================================================
    # RESPOSTAS
    # =========================================================================

    async def submit_answer(
        self,
        session: QuizSession,
        index: int,
        user_answer: str | None,
        time_spent_seconds: int,
        questions: Mapping[str, Question],
        owner_role: UserRole,
    ) -> SubmitAnswerResult:
        """Corrige e grava a resposta de um item (ultima escrita vence).

        Raises:
            InvalidStateError: sessao nao esta em andamento
            OutOfRangeError: indice fora de 0..total_questions-1
            NotFoundError: questao do item nao existe mais
        """
        if session.status is not QuizStatus.IN_PROGRESS:
            raise InvalidStateError(
                f"Quiz {session.id} nao esta em andamento",
                details={"status": session.status.value},
            )
        if not 0 <= index < len(session.items):
            raise OutOfRangeError(
                f"Indice de questao invalido: {index}",
                details={"index": index, "total_questions": len(session.items)},
            )
        if time_spent_seconds < 0:
            raise InvalidInputError("Tempo gasto nao pode ser negativo")

        item = session.items[index]
        question = questions.get(item.question_id)
        if question is None:
            raise NotFoundError(f"Questao {item.question_id} nao encontrada")

        evaluation = await self.evaluator.evaluate(question, user_answer)

        item.user_answer = user_answer or ""
        item.time_spent_seconds = time_spent_seconds
        item.is_correct = evaluation.is_correct
        if question.type.is_open_ended:
            item.ai_score = evaluation.score
            item.ai_feedback = evaluation.feedback

        effect = None
        if owner_role is UserRole.STUDENT:
            effect = DifficultyEffect(
                user_id=session.user_id,
                is_correct=evaluation.is_correct,
                occurred_at=self.clock(),
            )

        feedback = AnswerFeedback(
            index=index,
            is_correct=evaluation.is_correct,
            correct_answer=question.correct_answer,
            explanation=question.explanation,
            ai_score=item.ai_score,
            ai_feedback=item.ai_feedback,
            fallback=evaluation.fallback,
        )
        return SubmitAnswerResult(feedback=feedback, evaluation=evaluation, difficulty_effect=effect)

    # =========================================================================
    # FINALIZACAO
    # =========================================================================

    def complete(self, session: QuizSession) -> QuizSession:
        """Finaliza a sessao e calcula o resultado.

        Questoes sem resposta contam como erradas.

        Raises:
            InvalidStateError: sessao ja finalizada ou abandonada
        """
        if session.status is not QuizStatus.IN_PROGRESS:
            raise InvalidStateError(
                f"Quiz {session.id} ja finalizado",
                details={"status": session.status.value},
            )

        for item in session.items:
            if item.is_correct is None:
                item.is_correct = False

        session.status = QuizStatus.COMPLETED
        session.completed_at = self.clock()
        session.total_time_spent_seconds = sum(item.time_spent_seconds for item in session.items)
        session.correct_count = sum(1 for item in session.items if item.is_correct is True)
        session.percentage = percentage(session.correct_count, session.total_questions)
        session.score = session.correct_count

        logger.info(
            f"[Quiz {session.id}] Finalizado: {session.correct_count}/"
            f"{session.total_questions} ({session.percentage}%)"
        )
        return session

    def abandon(self, session: QuizSession) -> QuizSession:
        """Marca a sessao como abandonada (usado pela limpeza externa)."""
        if session.status is not QuizStatus.IN_PROGRESS:
            raise InvalidStateError(
                f"Quiz {session.id} nao esta em andamento",
                details={"status": session.status.value},
            )
        for item in session.items:
            if item.is_correct is None:
                item.is_correct = False
        session.status = QuizStatus.ABANDONED
        logger.info(f"[Quiz {session.id}] Abandonado")
        return session
