"""Estado compartilhado da aplicacao (instancias unicas por processo)."""

from __future__ import annotations

import logging
from typing import Optional

from agentfs_sdk import AgentFS, AgentFSOptions

from .config import get_config
from .engine.generation_service import QuestionGenerationService
from .engine.question_bank import QuestionBankService
from .engine.quiz_engine import QuizEngine
from .engine.quota_service import QuotaService
from .llm.generator import ClaudeQuestionGenerator
from .llm.grader import ClaudeAnswerGrader
from .storage.quiz_store import QuizStore

logger = logging.getLogger(__name__)

# =============================================================================
# INSTANCIAS GLOBAIS
# =============================================================================

agentfs: Optional[AgentFS] = None
store: Optional[QuizStore] = None
engine: Optional[QuizEngine] = None
quotas: Optional[QuotaService] = None
generation: Optional[QuestionGenerationService] = None
bank: Optional[QuestionBankService] = None


async def open_storage() -> QuizStore:
    """Abre o AgentFS do motor e monta o QuizStore sobre o KV dele."""
    global agentfs, store
    if store is None:
        config = get_config()
        agentfs = await AgentFS.open(AgentFSOptions(id=config.agentfs_id))
        store = QuizStore(agentfs.kv, update_retries=config.update_retries)
        logger.info(f"QuizStore aberto sobre AgentFS ({config.agentfs_id})")
    return store


async def close_storage() -> None:
    """Fecha o AgentFS e descarta as instancias que dependem dele."""
    global agentfs
    if agentfs is not None:
        try:
            await agentfs.close()
        except Exception as e:
            logger.warning(f"Erro ao fechar AgentFS: {e}")
        agentfs = None
        logger.info("AgentFS fechado")
    reset_state()


def get_store() -> QuizStore:
    if store is None:
        raise RuntimeError("Storage nao inicializado: chame open_storage() no startup")
    return store


def get_engine() -> QuizEngine:
    global engine
    if engine is None:
        engine = QuizEngine(get_store(), grader=ClaudeAnswerGrader(), config=get_config())
    return engine


def get_quota_service() -> QuotaService:
    global quotas
    if quotas is None:
        quotas = QuotaService(get_store())
    return quotas


def get_generation_service() -> QuestionGenerationService:
    global generation
    if generation is None:
        generation = QuestionGenerationService(
            get_store(), get_quota_service(), ClaudeQuestionGenerator()
        )
    return generation


def get_question_bank() -> QuestionBankService:
    global bank
    if bank is None:
        bank = QuestionBankService(get_store())
    return bank


def reset_state() -> None:
    """Descarta as instancias em memoria (os dados ficam no AgentFS)."""
    global agentfs, store, engine, quotas, generation, bank
    agentfs = None
    store = None
    engine = None
    quotas = None
    generation = None
    bank = None
