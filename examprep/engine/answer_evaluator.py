"""Answer Evaluator - Correcao por tipo de questao com fallback deterministico."""

from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError

from ..llm.grader import AnswerGrader
from ..models.schemas import EvaluationResult, GradeResult, Question

logger = logging.getLogger(__name__)

# Nota minima para considerar uma resposta aberta correta
PASS_THRESHOLD = 70

NO_ANSWER_FEEDBACK = "No answer provided"
FALLBACK_FEEDBACK = "AI evaluation unavailable, using exact match"

# (nota minima, faixa)
SCORE_BANDS = [
    (90, "full"),
    (70, "minor_omissions"),
    (50, "partial"),
    (30, "significant_gaps"),
    (0, "incorrect"),
]


def normalize_answer(answer: str | None) -> str:
    return (answer or "").strip().lower()


def exact_match(user_answer: str | None, correct_answer: str | None) -> bool:
    """Igualdade sem diferenciar maiusculas e ignorando espacos nas pontas."""
    return normalize_answer(user_answer) == normalize_answer(correct_answer)


def score_band(score: int) -> str:
    """Faixa de correcao correspondente a uma nota 0-100."""
    for minimum, band in SCORE_BANDS:
        if score >= minimum:
            return band
    return SCORE_BANDS[-1][1]


class AnswerEvaluator:
    """Decide se uma resposta esta correta.

    - mcq / truefalse: match exato, sem chamada externa
    - short / application: avaliador externo com limite de tempo; qualquer
      falha (timeout, cancelamento, resposta malformada, excecao) cai em uma
      unica tentativa de match exato contra a resposta de referencia

    Example:
        >>> evaluator = AnswerEvaluator(grader, timeout=10)
        >>> result = await evaluator.evaluate(question, "photosynthesis")
        >>> result.is_correct, result.score, result.fallback
    """

    def __init__(self, grader: AnswerGrader | None, timeout: float = 15.0):
        self.grader = grader
        self.timeout = timeout

    async def evaluate(self, question: Question, user_answer: str | None) -> EvaluationResult:
        if not question.type.is_open_ended:
            return EvaluationResult(
                is_correct=exact_match(user_answer, question.correct_answer)
            )

        answer = (user_answer or "").strip()
        if not answer:
            return EvaluationResult(is_correct=False, score=0, feedback=NO_ANSWER_FEEDBACK)

        grade = await self._grade(question, answer)
        if grade is None:
            return self._fallback(question, answer)

        return EvaluationResult(
            is_correct=grade.score >= PASS_THRESHOLD,
            score=grade.score,
            feedback=grade.feedback,
        )

    async def _grade(self, question: Question, answer: str) -> GradeResult | None:
        """Chama o avaliador externo. Retorna None em qualquer falha."""
        if self.grader is None:
            logger.warning(f"Sem avaliador configurado para questao {question.id}")
            return None

        task = asyncio.ensure_future(
            self.grader.grade(
                question.question,
                question.correct_answer.strip(),
                answer,
                question.explanation or "",
            )
        )
        try:
            done, _ = await asyncio.wait({task}, timeout=self.timeout)
        except asyncio.CancelledError:
            # Cancelamento de quem chamou: nao deixar a chamada externa orfa
            task.cancel()
            raise

        if not done:
            task.cancel()
            logger.warning(f"Avaliador excedeu {self.timeout}s na questao {question.id}")
            return None
        if task.cancelled():
            logger.warning(f"Chamada ao avaliador cancelada na questao {question.id}")
            return None

        error = task.exception()
        if error is not None:
            logger.warning(f"Avaliador falhou na questao {question.id}: {error}")
            return None

        try:
            return GradeResult.model_validate(task.result())
        except ValidationError as e:
            logger.warning(f"Resposta malformada do avaliador na questao {question.id}: {e}")
            return None

    def _fallback(self, question: Question, answer: str) -> EvaluationResult:
        is_correct = exact_match(answer, question.correct_answer)
        return EvaluationResult(
            is_correct=is_correct,
            score=100 if is_correct else 0,
            feedback=FALLBACK_FEEDBACK,
            fallback=True,
        )
