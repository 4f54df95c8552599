"""Configuracao centralizada do motor de quiz (variaveis de ambiente)."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass
from typing import Any

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

VALID_MODELS = ("haiku", "sonnet", "opus")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _env_int(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Valor invalido para {name}: {raw!r}, usando {default}")
        return default
    if value < minimum:
        logger.warning(f"{name}={value} abaixo do minimo {minimum}, usando {default}")
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Valor invalido para {name}: {raw!r}, usando {default}")
        return default
    if value <= 0:
        return default
    return value


def _env_choice(name: str, default: str, choices: tuple[str, ...], upper: bool = False) -> str:
    raw = os.getenv(name, default)
    value = raw.upper() if upper else raw.lower()
    if value not in choices:
        logger.warning(f"Valor invalido para {name}: {raw!r}, usando {default}")
        return default
    return value


@dataclass
class ExamPrepConfig:
    """Configuracao do motor de quiz.

    Attributes:
        grader_model: Modelo Claude usado para corrigir respostas abertas
        generator_model: Modelo Claude usado para gerar questoes
        grader_timeout_seconds: Tempo maximo da chamada ao avaliador externo
        default_random_quiz_size: Tamanho padrao do quiz aleatorio
        recent_quizzes_limit: Quantos quizzes entram em "recent_quizzes"
        update_retries: Tentativas de read-modify-write em conflito de versao
        agentfs_id: ID do banco AgentFS (arquivo .agentfs/{id}.db)
        log_level: Nivel de log da aplicacao
    """

    grader_model: str = "haiku"
    generator_model: str = "sonnet"
    grader_timeout_seconds: float = 15.0
    default_random_quiz_size: int = 10
    recent_quizzes_limit: int = 5
    update_retries: int = 3
    agentfs_id: str = "examprep"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ExamPrepConfig:
        """Cria configuracao a partir das variaveis de ambiente."""
        return cls(
            grader_model=_env_choice("GRADER_MODEL", "haiku", VALID_MODELS),
            generator_model=_env_choice("GENERATOR_MODEL", "sonnet", VALID_MODELS),
            grader_timeout_seconds=_env_float("GRADER_TIMEOUT_SECONDS", 15.0),
            default_random_quiz_size=_env_int("DEFAULT_RANDOM_QUIZ_SIZE", 10, minimum=1),
            recent_quizzes_limit=_env_int("RECENT_QUIZZES_LIMIT", 5, minimum=1),
            update_retries=_env_int("UPDATE_RETRIES", 3, minimum=1),
            agentfs_id=os.getenv("AGENTFS_ID") or "examprep",
            log_level=_env_choice("LOG_LEVEL", "INFO", VALID_LOG_LEVELS, upper=True),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


_config: ExamPrepConfig | None = None


def get_config() -> ExamPrepConfig:
    """Retorna a configuracao global (carregada uma vez)."""
    global _config
    if _config is None:
        load_dotenv()
        _config = ExamPrepConfig.from_env()
    return _config


def reload_config() -> ExamPrepConfig:
    """Descarta a configuracao atual e le o ambiente de novo."""
    global _config
    _config = None
    return get_config()
