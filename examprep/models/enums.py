"""Quiz Enums - Papeis, planos, tipos de questao e estados."""

from enum import Enum


class UserRole(str, Enum):
    """Tipo de usuario dono das sessoes e cotas."""

    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class SubscriptionPlan(str, Enum):
    """Planos de assinatura (definem os limites padrao de cota)."""

    FREE = "free"
    STUDENT = "student"
    EDUCATOR = "educator"
    ENTERPRISE = "enterprise"


class QuestionType(str, Enum):
    """Formato da questao."""

    MCQ = "mcq"
    SHORT = "short"
    TRUE_FALSE = "truefalse"
    APPLICATION = "application"

    @property
    def is_open_ended(self) -> bool:
        """Respostas abertas sao corrigidas pelo avaliador externo."""
        return self in (QuestionType.SHORT, QuestionType.APPLICATION)


class Difficulty(str, Enum):
    """Niveis de dificuldade das questoes (ordem crescente)."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class QuizDifficulty(str, Enum):
    """Dificuldade nominal de um quiz (pode misturar niveis)."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    MIXED = "mixed"


class QuizStatus(str, Enum):
    """Estados do ciclo de vida da sessao."""

    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"  # terminal
    ABANDONED = "abandoned"  # terminal, disparado pela limpeza externa

    @property
    def is_terminal(self) -> bool:
        return self is not QuizStatus.IN_PROGRESS
