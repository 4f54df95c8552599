"""Question Generation Service - Gera e salva questoes no banco do usuario."""

from __future__ import annotations

import logging

from ..llm.generator import QuestionGenerator
from ..models.enums import Difficulty, QuestionType
from ..models.schemas import Question
from ..storage.quiz_store import QuizStore
from .question_bank import QuestionBankService
from .quota_service import QuotaService

logger = logging.getLogger(__name__)


class QuestionGenerationService:
    """Consome uma geracao da cota, chama o gerador e grava as questoes.

    A geracao e contada antes da chamada externa: uma falha do gerador
    tambem consome a cota do dia.
    """

    def __init__(self, store: QuizStore, quotas: QuotaService, generator: QuestionGenerator):
        self.store = store
        self.quotas = quotas
        self.generator = generator
        self.bank = QuestionBankService(store)

    async def generate(
        self,
        user_id: str,
        source_text: str,
        difficulty: Difficulty = Difficulty.MEDIUM,
        question_count: int = 5,
        question_types: list[QuestionType] | None = None,
        subject: str = "",
    ) -> list[Question]:
        await self.quotas.consume_generation(user_id)

        generated = await self.generator.generate(
            source_text,
            difficulty,
            question_count,
            question_types or list(QuestionType),
        )
        logger.debug(f"Gerador devolveu {len(generated.questions)} questoes para {user_id}")

        return await self.bank.save_questions(
            user_id,
            generated.questions,
            subject=subject,
            key_concepts=generated.key_concepts,
        )
