# =============================================================================
# CONFTEST - Fixtures compartilhadas para todos os testes
# =============================================================================
# KV em memoria no lugar do AgentFS, usuarios, questoes e avaliador mockado
# =============================================================================

import asyncio
import copy
import os
import random
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio

FIXED_NOW = datetime(2024, 3, 15, 10, 30, 0)


# =============================================================================
# DUBLES DO AGENTFS
# =============================================================================


class MemoryKV:
    """KV em memoria com a interface assincrona de ``AgentFS.kv``.

    Os valores sao copiados na entrada e na saida, como num banco real.
    """

    def __init__(self):
        self._data: dict[str, Any] = {}

    async def get(self, key: str) -> Any:
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def list(self, prefix: str = "") -> list[dict[str, Any]]:
        return [
            {"key": key, "value": copy.deepcopy(value)}
            for key, value in sorted(self._data.items())
            if key.startswith(prefix)
        ]


class YieldingKV(MemoryKV):
    """MemoryKV que cede o event loop em cada acesso (expoe corridas)."""

    async def get(self, key: str) -> Any:
        await asyncio.sleep(0)
        return await super().get(key)

    async def set(self, key: str, value: Any) -> None:
        await asyncio.sleep(0)
        await super().set(key, value)


class FakeAgentFS:
    """AgentFS de teste: um MemoryKV por id, preservado entre aberturas."""

    databases: dict[str, MemoryKV] = {}
    opened: list["FakeAgentFS"] = []

    def __init__(self, agent_id: str):
        self.id = agent_id
        self.kv = self.databases.setdefault(agent_id, MemoryKV())
        self.closed = False

    @classmethod
    async def open(cls, options) -> "FakeAgentFS":
        instance = cls(options.id)
        cls.opened.append(instance)
        return instance

    async def close(self) -> None:
        self.closed = True


# =============================================================================
# FIXTURES DE AMBIENTE
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_env():
    """Configura variaveis de ambiente e descarta singletons entre testes."""
    from examprep import app_state, config

    env_vars = {
        "ANTHROPIC_API_KEY": "test-key-123",
        "LOG_LEVEL": "ERROR",
        "GRADER_TIMEOUT_SECONDS": "15",
    }
    with patch.dict(os.environ, env_vars):
        config._config = None
        app_state.reset_state()
        yield
        config._config = None
        app_state.reset_state()


@pytest.fixture(autouse=True)
def agentfs_double():
    """Substitui o AgentFS do app_state por um banco em memoria."""
    FakeAgentFS.databases = {}
    FakeAgentFS.opened = []
    with patch("examprep.app_state.AgentFS", FakeAgentFS):
        yield FakeAgentFS


@pytest.fixture
def clean_env():
    """Limpa variaveis de ambiente para testes isolados."""
    with patch.dict(os.environ, {}, clear=True):
        yield


@pytest.fixture
def clock():
    """Relogio fixo (datetime ingenuo = horario local)."""
    return lambda: FIXED_NOW


# =============================================================================
# FIXTURES DE DOMINIO
# =============================================================================


@pytest.fixture
def make_question():
    """Factory de questoes com valores padrao."""
    from examprep.models import Difficulty, Question, QuestionType

    def _make(
        question_id: str,
        owner_id: str = "student-1",
        type: QuestionType = QuestionType.MCQ,
        difficulty: Difficulty = Difficulty.MEDIUM,
        correct_answer: str = "B",
        subject: str = "",
        **kwargs,
    ) -> Question:
        return Question(
            id=question_id,
            owner_id=owner_id,
            type=type,
            difficulty=difficulty,
            question=kwargs.pop("question", f"Pergunta {question_id}?"),
            options=kwargs.pop("options", ["A) um", "B) dois", "C) tres", "D) quatro"]),
            correct_answer=correct_answer,
            explanation=kwargs.pop("explanation", "Porque sim."),
            subject=subject,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_user():
    """Factory de usuarios com cota padrao do plano free."""
    from examprep.engine.quota_tracker import default_quota
    from examprep.models import DifficultyState, User, UserRole

    def _make(user_id: str = "student-1", role: UserRole = UserRole.STUDENT) -> User:
        return User(
            user_id=user_id,
            role=role,
            quota=default_quota(role, now=FIXED_NOW),
            difficulty=DifficultyState(last_updated=FIXED_NOW) if role is UserRole.STUDENT else None,
        )

    return _make


@pytest.fixture
def store():
    """QuizStore sobre KV em memoria."""
    from examprep.storage import QuizStore

    return QuizStore(MemoryKV())


@pytest.fixture
def yielding_store():
    """QuizStore sobre um KV que cede o loop entre leitura e escrita."""
    from examprep.storage import QuizStore

    return QuizStore(YieldingKV())


@pytest.fixture
def mock_grader():
    """Avaliador externo mockado (nota 85 por padrao)."""
    from examprep.models import GradeResult

    grader = AsyncMock()
    grader.grade = AsyncMock(return_value=GradeResult(score=85, feedback="Boa resposta"))
    return grader


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


@pytest.fixture
def engine(store, mock_grader, clock, seeded_rng):
    """QuizEngine completo sobre o store em memoria."""
    from examprep.config import ExamPrepConfig
    from examprep.engine import QuizEngine

    return QuizEngine(
        store,
        grader=mock_grader,
        config=ExamPrepConfig(grader_timeout_seconds=1.0),
        rng=seeded_rng,
        clock=clock,
    )


@pytest_asyncio.fixture
async def seeded_store(store, make_user, make_question):
    """Store com um aluno, um professor e quatro questoes do aluno."""
    from examprep.models import Difficulty, QuestionType, UserRole

    await store.save_user(make_user("student-1"))
    await store.save_user(make_user("faculty-1", UserRole.FACULTY))
    await store.save_question(make_question("q1", correct_answer="A", difficulty=Difficulty.EASY))
    await store.save_question(make_question("q2", correct_answer="C", difficulty=Difficulty.HARD))
    await store.save_question(
        make_question(
            "q3",
            type=QuestionType.SHORT,
            correct_answer="Photosynthesis",
            subject="biology",
        )
    )
    await store.save_question(
        make_question("q4", type=QuestionType.TRUE_FALSE, correct_answer="true", subject="biology")
    )
    await store.save_question(make_question("f1", owner_id="faculty-1", correct_answer="D"))
    return store
