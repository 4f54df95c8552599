"""Question Generator - Geracao de questoes a partir de material de estudo."""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError

from ..exceptions import ExternalServiceError
from ..models.enums import Difficulty, QuestionType
from ..models.schemas import GeneratedQuestions
from ..prompts import GENERATOR_PROMPT
from .factory import LLMClientFactory
from .response import collect_text, extract_json

logger = logging.getLogger(__name__)


class QuestionGenerator(Protocol):
    async def generate(
        self,
        source_text: str,
        difficulty: Difficulty,
        question_count: int,
        question_types: list[QuestionType],
    ) -> GeneratedQuestions: ...


class ClaudeQuestionGenerator:
    """Gerador externo baseado no Claude Agent SDK.

    O motor confia nos campos ``type``, ``difficulty`` e ``correctAnswer``
    devolvidos; nao ha validacao pedagogica aqui.
    """

    def __init__(self, llm_factory: LLMClientFactory | None = None):
        self.llm_factory = llm_factory or LLMClientFactory()

    async def generate(
        self,
        source_text: str,
        difficulty: Difficulty,
        question_count: int,
        question_types: list[QuestionType],
    ) -> GeneratedQuestions:
        prompt = GENERATOR_PROMPT.format(
            question_count=question_count,
            difficulty=difficulty.value,
            question_types=", ".join(t.value for t in question_types),
            source_text=source_text,
        )
        logger.info(f"Gerando {question_count} questoes ({difficulty.value})")

        text = await collect_text(prompt, self.llm_factory.generator_options())
        data = extract_json(text)

        try:
            generated = GeneratedQuestions.model_validate(data)
        except ValidationError as e:
            raise ExternalServiceError(
                "Resposta do gerador fora do formato esperado",
                details={"errors": e.errors(include_url=False)},
            ) from e

        if not generated.questions:
            raise ExternalServiceError("Gerador nao retornou questoes")

        logger.info(f"{len(generated.questions)} questoes geradas")
        return generated
