"""Difficulty Adapter - Ajuste de dificuldade por sequencias de acertos/erros."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from ..models.enums import Difficulty
from ..models.state import DifficultyState, User

LEVELS = [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]


@dataclass(frozen=True)
class DifficultyEffect:
    """Efeito colateral pendente de uma correcao.

    Devolvido ao lado do resultado da resposta para que o host aplique a
    atualizacao de dificuldade separadamente; falhar ao aplicar nunca
    invalida a resposta ja corrigida.
    """

    user_id: str
    is_correct: bool
    occurred_at: datetime


class DifficultyAdapter:
    """Maquina de estados easy <-> medium <-> hard.

    - 3 acertos seguidos sobem um nivel (nada acima de hard)
    - 2 erros seguidos descem um nivel (nada abaixo de easy)
    - mudar de nivel zera o contador que disparou a mudanca
    """

    PROMOTE_AFTER = 3
    DEMOTE_AFTER = 2

    def initial_state(self, now: datetime | None = None) -> DifficultyState:
        return DifficultyState(current_level=Difficulty.MEDIUM, last_updated=now)

    def record_outcome(
        self, state: DifficultyState, is_correct: bool, now: datetime
    ) -> DifficultyState:
        """Aplica um resultado ao estado e devolve o novo estado."""
        level = LEVELS.index(state.current_level)

        if is_correct:
            correct = state.consecutive_correct + 1
            incorrect = 0
            if correct >= self.PROMOTE_AFTER and level < len(LEVELS) - 1:
                level += 1
                correct = 0
        else:
            correct = 0
            incorrect = state.consecutive_incorrect + 1
            if incorrect >= self.DEMOTE_AFTER and level > 0:
                level -= 1
                incorrect = 0

        return replace(
            state,
            current_level=LEVELS[level],
            consecutive_correct=correct,
            consecutive_incorrect=incorrect,
            last_updated=now,
        )

    def apply(self, user: User, is_correct: bool, now: datetime) -> bool:
        """Atualiza o usuario no lugar. Retorna False se nao se aplica (nao e aluno)."""
        if not user.is_student:
            return False
        state = user.difficulty or self.initial_state(now)
        user.difficulty = self.record_outcome(state, is_correct, now)
        return True

    def current_level(self, user: User) -> Difficulty:
        if user.difficulty is None:
            return Difficulty.MEDIUM
        return user.difficulty.current_level
