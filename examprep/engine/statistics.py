"""Statistics Aggregator - Relatorios de desempenho a partir de quizzes finalizados."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime

from ..models.enums import QuizStatus
from ..models.schemas import Question, QuizStatistics, QuizSummary, SubjectPerformance
from ..models.state import QuizSession
from .scoring import difficulty_breakdown, percentage

_OLDEST = datetime.min


def _completed_key(session: QuizSession) -> datetime:
    moment = session.completed_at
    if moment is None:
        return _OLDEST
    # Comparacao entre datas com e sem fuso: normaliza para ingenuo local
    return moment.astimezone().replace(tzinfo=None) if moment.tzinfo else moment


def summarize(session: QuizSession) -> QuizSummary:
    return QuizSummary(
        quiz_id=session.id,
        title=session.title,
        subject=session.subject,
        status=session.status,
        total_questions=session.total_questions,
        correct_count=session.correct_count,
        percentage=session.percentage,
        score=session.score,
        total_time_spent_seconds=session.total_time_spent_seconds,
        completed_at=session.completed_at,
    )


class StatisticsAggregator:
    """Agregacoes somente leitura sobre os quizzes finalizados de um usuario.

    Sessoes que nao estao ``completed`` sao ignoradas. Todos os percentuais
    sao inteiros com arredondamento half-up.
    """

    def __init__(self, recent_limit: int = 5):
        self.recent_limit = recent_limit

    def aggregate(
        self, sessions: Iterable[QuizSession], questions: Mapping[str, Question]
    ) -> QuizStatistics:
        completed = [s for s in sessions if s.status is QuizStatus.COMPLETED]
        if not completed:
            return QuizStatistics(performance_by_difficulty=difficulty_breakdown([], questions))

        total_quizzes = len(completed)
        total_questions = sum(s.total_questions for s in completed)
        total_correct = sum(s.correct_count for s in completed)

        by_subject: dict[str, SubjectPerformance] = {}
        for session in completed:
            if not session.subject:
                continue
            entry = by_subject.setdefault(session.subject, SubjectPerformance())
            entry.total += session.total_questions
            entry.correct += session.correct_count
            entry.quiz_count += 1
        for entry in by_subject.values():
            entry.percentage = percentage(entry.correct, entry.total)

        all_items = [item for s in completed for item in s.items]
        recent = sorted(completed, key=_completed_key, reverse=True)[: self.recent_limit]

        return QuizStatistics(
            total_quizzes=total_quizzes,
            total_questions=total_questions,
            total_correct=total_correct,
            average_score=round(total_correct / total_quizzes, 2),
            average_percentage=percentage(total_correct, total_questions),
            total_time_spent_seconds=sum(s.total_time_spent_seconds for s in completed),
            recent_quizzes=[summarize(s) for s in recent],
            performance_by_difficulty=difficulty_breakdown(all_items, questions),
            performance_by_subject=by_subject,
        )
