"""Quiz State - Registros persistidos (usuario, cota, dificuldade, sessao)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .enums import Difficulty, QuizDifficulty, QuizStatus, SubscriptionPlan, UserRole


def _dt(value: str | datetime | None) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class QuotaState:
    """Contadores diarios e de armazenamento de um usuario.

    Limites ``None`` significam ilimitado. ``last_reset_date`` e comparado
    por dia de calendario, nao por instante.
    """

    storage_used: int = 0
    storage_limit: int | None = 0
    uploads_today: int = 0
    uploads_limit: int | None = 0
    generations_today: int = 0
    generations_limit: int | None = 0
    last_reset_date: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "storage_used": self.storage_used,
            "storage_limit": self.storage_limit,
            "uploads_today": self.uploads_today,
            "uploads_limit": self.uploads_limit,
            "generations_today": self.generations_today,
            "generations_limit": self.generations_limit,
            "last_reset_date": _iso(self.last_reset_date),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuotaState:
        return cls(
            storage_used=data.get("storage_used", 0),
            storage_limit=data.get("storage_limit", 0),
            uploads_today=data.get("uploads_today", 0),
            uploads_limit=data.get("uploads_limit", 0),
            generations_today=data.get("generations_today", 0),
            generations_limit=data.get("generations_limit", 0),
            last_reset_date=_dt(data.get("last_reset_date")),
        )


@dataclass(frozen=True)
class DifficultyState:
    """Estado da dificuldade adaptativa de um aluno."""

    current_level: Difficulty = Difficulty.MEDIUM
    consecutive_correct: int = 0
    consecutive_incorrect: int = 0
    last_updated: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "current_level": self.current_level.value,
            "consecutive_correct": self.consecutive_correct,
            "consecutive_incorrect": self.consecutive_incorrect,
            "last_updated": _iso(self.last_updated),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DifficultyState:
        return cls(
            current_level=Difficulty(data.get("current_level", "medium")),
            consecutive_correct=data.get("consecutive_correct", 0),
            consecutive_incorrect=data.get("consecutive_incorrect", 0),
            last_updated=_dt(data.get("last_updated")),
        )


@dataclass
class User:
    """Usuario referenciado pelo motor.

    Um unico registro para todos os papeis; ``difficulty`` so tem
    significado quando ``role`` e ``student``.
    """

    user_id: str
    role: UserRole
    quota: QuotaState
    subscription_plan: SubscriptionPlan = SubscriptionPlan.FREE
    difficulty: DifficultyState | None = None
    version: int = 0

    @property
    def is_student(self) -> bool:
        return self.role is UserRole.STUDENT

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "role": self.role.value,
            "subscription_plan": self.subscription_plan.value,
            "quota": self.quota.to_dict(),
            "difficulty": self.difficulty.to_dict() if self.difficulty else None,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        difficulty = data.get("difficulty")
        return cls(
            user_id=data["user_id"],
            role=UserRole(data["role"]),
            subscription_plan=SubscriptionPlan(data.get("subscription_plan", "free")),
            quota=QuotaState.from_dict(data.get("quota", {})),
            difficulty=DifficultyState.from_dict(difficulty) if difficulty else None,
            version=data.get("version", 0),
        )


@dataclass
class QuizItem:
    """Uma questao dentro de uma sessao.

    ``is_correct`` e ``None`` enquanto a questao nao foi respondida.
    """

    question_id: str
    user_answer: str = ""
    is_correct: bool | None = None
    time_spent_seconds: int = 0
    ai_score: int | None = None
    ai_feedback: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "question_id": self.question_id,
            "user_answer": self.user_answer,
            "is_correct": self.is_correct,
            "time_spent_seconds": self.time_spent_seconds,
            "ai_score": self.ai_score,
            "ai_feedback": self.ai_feedback,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuizItem:
        return cls(
            question_id=data["question_id"],
            user_answer=data.get("user_answer", ""),
            is_correct=data.get("is_correct"),
            time_spent_seconds=data.get("time_spent_seconds", 0),
            ai_score=data.get("ai_score"),
            ai_feedback=data.get("ai_feedback"),
        )


@dataclass
class QuizSession:
    """Estado completo de um quiz.

    Attributes:
        id: ID unico da sessao
        user_id: Dono da sessao
        items: Questoes na ordem de apresentacao (fixada na criacao)
        status: in-progress, completed ou abandoned
        total_questions: Igual a len(items)
        correct_count: Acertos (calculado em complete)
        percentage: Aproveitamento inteiro 0-100 (calculado em complete)
        score: Pontuacao (= correct_count)
        version: Versao do registro para escrita otimista
    """

    id: str
    user_id: str
    items: list[QuizItem]
    title: str = "Practice Quiz"
    subject: str = ""
    difficulty: QuizDifficulty = QuizDifficulty.MIXED
    status: QuizStatus = QuizStatus.IN_PROGRESS
    total_questions: int = 0
    correct_count: int = 0
    percentage: int = 0
    score: int = 0
    started_at: datetime | None = None
    completed_at: datetime | None = None
    total_time_spent_seconds: int = 0
    time_limit_minutes: int = 0
    shuffle_questions: bool = False
    version: int = 0

    @property
    def question_ids(self) -> list[str]:
        return [item.question_id for item in self.items]

    @property
    def answered_count(self) -> int:
        return sum(1 for item in self.items if item.is_correct is not None)

    def to_dict(self) -> dict[str, Any]:
        """Converte para dicionario (para persistencia)."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "title": self.title,
            "subject": self.subject,
            "difficulty": self.difficulty.value,
            "status": self.status.value,
            "total_questions": self.total_questions,
            "correct_count": self.correct_count,
            "percentage": self.percentage,
            "score": self.score,
            "started_at": _iso(self.started_at),
            "completed_at": _iso(self.completed_at),
            "total_time_spent_seconds": self.total_time_spent_seconds,
            "time_limit_minutes": self.time_limit_minutes,
            "shuffle_questions": self.shuffle_questions,
            "version": self.version,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QuizSession:
        """Cria instancia a partir de dicionario."""
        items = [QuizItem.from_dict(item) for item in data.get("items", [])]
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            items=items,
            title=data.get("title", "Practice Quiz"),
            subject=data.get("subject", ""),
            difficulty=QuizDifficulty(data.get("difficulty", "mixed")),
            status=QuizStatus(data.get("status", "in-progress")),
            total_questions=data.get("total_questions", len(items)),
            correct_count=data.get("correct_count", 0),
            percentage=data.get("percentage", 0),
            score=data.get("score", 0),
            started_at=_dt(data.get("started_at")),
            completed_at=_dt(data.get("completed_at")),
            total_time_spent_seconds=data.get("total_time_spent_seconds", 0),
            time_limit_minutes=data.get("time_limit_minutes", 0),
            shuffle_questions=data.get("shuffle_questions", False),
            version=data.get("version", 0),
        )

