"""Scoring - Arredondamento e agregacao por dificuldade."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import datetime

from ..models.enums import Difficulty
from ..models.schemas import PerformanceBreakdown, Question
from ..models.state import QuizItem


def local_now() -> datetime:
    """Instante atual com o fuso local do servidor."""
    return datetime.now().astimezone()


def round_half_up(value: float) -> int:
    """Arredonda .5 para cima (round() do Python arredonda para o par)."""
    return int(math.floor(value + 0.5))


def percentage(correct: int, total: int) -> int:
    """Percentual inteiro de acertos; 0 quando nao ha questoes."""
    if total <= 0:
        return 0
    return round_half_up(100 * correct / total)


def difficulty_breakdown(
    items: Iterable[QuizItem], questions: Mapping[str, Question]
) -> dict[str, PerformanceBreakdown]:
    """Acertos/total por dificuldade da propria questao.

    Itens cuja questao nao esta mais disponivel ficam de fora.
    """
    totals = {level.value: [0, 0] for level in Difficulty}
    for item in items:
        question = questions.get(item.question_id)
        if question is None:
            continue
        bucket = totals[question.difficulty.value]
        bucket[0] += 1
        if item.is_correct:
            bucket[1] += 1

    return {
        level: PerformanceBreakdown(total=total, correct=correct, percentage=percentage(correct, total))
        for level, (total, correct) in totals.items()
    }
