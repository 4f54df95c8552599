# =============================================================================
# TESTES - Difficulty Adapter
# =============================================================================
# Testes unitarios para a maquina de estados easy <-> medium <-> hard
# =============================================================================

from datetime import datetime

NOW = datetime(2024, 3, 15, 10, 0, 0)


def _state(level="medium", correct=0, incorrect=0):
    from examprep.models import Difficulty, DifficultyState

    return DifficultyState(
        current_level=Difficulty(level),
        consecutive_correct=correct,
        consecutive_incorrect=incorrect,
    )


def _run(adapter, state, outcomes):
    for outcome in outcomes:
        state = adapter.record_outcome(state, outcome, NOW)
    return state


class TestDifficultyPromotion:
    """Testes para subida de nivel."""

    def test_three_correct_promotes(self):
        """Verifica medium -> hard apos 3 acertos seguidos."""
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty

        state = _run(DifficultyAdapter(), _state(), [True, True, True])

        assert state.current_level == Difficulty.HARD
        assert state.consecutive_correct == 0
        assert state.consecutive_incorrect == 0

    def test_two_correct_does_not_promote(self):
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty

        state = _run(DifficultyAdapter(), _state(), [True, True])

        assert state.current_level == Difficulty.MEDIUM
        assert state.consecutive_correct == 2

    def test_hard_stays_hard_and_keeps_counting(self):
        """Verifica que em hard o contador de acertos continua crescendo."""
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty

        state = _run(DifficultyAdapter(), _state("hard", correct=2), [True])

        assert state.current_level == Difficulty.HARD
        assert state.consecutive_correct == 3
        assert state.consecutive_incorrect == 0


class TestDifficultyDemotion:
    """Testes para descida de nivel."""

    def test_two_incorrect_demotes(self):
        """Verifica medium -> easy apos 2 erros seguidos."""
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty

        state = _run(DifficultyAdapter(), _state(), [False, False])

        assert state.current_level == Difficulty.EASY
        assert state.consecutive_incorrect == 0

    def test_easy_floor(self):
        """Verifica que easy nao desce mais."""
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty

        state = _run(DifficultyAdapter(), _state("easy"), [False, False, False])

        assert state.current_level == Difficulty.EASY
        assert state.consecutive_incorrect == 3

    def test_correct_resets_incorrect_streak(self):
        """Verifica que um acerto interrompe a sequencia de erros."""
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty

        state = _run(DifficultyAdapter(), _state(), [False, True, False])

        assert state.current_level == Difficulty.MEDIUM
        assert state.consecutive_incorrect == 1
        assert state.consecutive_correct == 0

    def test_incorrect_resets_correct_streak(self):
        from examprep.engine import DifficultyAdapter

        state = _run(DifficultyAdapter(), _state(), [True, True, False])

        assert state.consecutive_correct == 0
        assert state.consecutive_incorrect == 1


class TestDifficultyApply:
    """Testes para aplicacao no registro do usuario."""

    def test_apply_updates_student(self, make_user):
        from examprep.engine import DifficultyAdapter

        user = make_user("student-1")

        applied = DifficultyAdapter().apply(user, True, NOW)

        assert applied is True
        assert user.difficulty.consecutive_correct == 1
        assert user.difficulty.last_updated == NOW

    def test_apply_initializes_missing_state(self, make_user):
        """Verifica que aluno sem estado comeca em medium."""
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty

        user = make_user("student-1")
        user.difficulty = None

        DifficultyAdapter().apply(user, False, NOW)

        assert user.difficulty.current_level == Difficulty.MEDIUM
        assert user.difficulty.consecutive_incorrect == 1

    def test_apply_ignores_non_students(self, make_user):
        """Verifica que professor nao ganha estado de dificuldade."""
        from examprep.engine import DifficultyAdapter
        from examprep.models import UserRole

        user = make_user("faculty-1", UserRole.FACULTY)

        applied = DifficultyAdapter().apply(user, True, NOW)

        assert applied is False
        assert user.difficulty is None

    def test_current_level_defaults_to_medium(self, make_user):
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty, UserRole

        user = make_user("faculty-1", UserRole.FACULTY)

        assert DifficultyAdapter().current_level(user) == Difficulty.MEDIUM


class TestDifficultyScenarios:
    """Sequencias completas a partir dos estados iniciais."""

    def test_easy_three_correct(self):
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty

        state = _run(DifficultyAdapter(), _state("easy"), [True, True, True])

        assert (state.current_level, state.consecutive_correct, state.consecutive_incorrect) == (
            Difficulty.MEDIUM,
            0,
            0,
        )

    def test_hard_one_correct(self):
        from examprep.engine import DifficultyAdapter
        from examprep.models import Difficulty

        state = _run(DifficultyAdapter(), _state("hard"), [True])

        assert (state.current_level, state.consecutive_correct, state.consecutive_incorrect) == (
            Difficulty.HARD,
            1,
            0,
        )

    def test_last_updated_always_set(self):
        from examprep.engine import DifficultyAdapter

        state = DifficultyAdapter().record_outcome(_state(), False, NOW)

        assert state.last_updated == NOW
