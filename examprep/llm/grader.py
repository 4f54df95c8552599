"""Answer Grader - Correcao semantica de respostas abertas via Claude."""

from __future__ import annotations

import logging
from typing import Protocol

from pydantic import ValidationError

from ..exceptions import ExternalServiceError
from ..models.schemas import GradeResult
from ..prompts import GRADER_CONTEXT, GRADER_PROMPT
from .factory import LLMClientFactory
from .response import collect_text, extract_json

logger = logging.getLogger(__name__)


class AnswerGrader(Protocol):
    """Interface do avaliador externo usada pelo AnswerEvaluator."""

    async def grade(
        self,
        question: str,
        reference_answer: str,
        user_answer: str,
        explanation: str = "",
    ) -> GradeResult: ...


class ClaudeAnswerGrader:
    """Avaliador externo baseado no Claude Agent SDK.

    Qualquer resposta fora do contrato (texto sem JSON, nota fora de 0-100)
    vira ExternalServiceError; quem chama decide o fallback.
    """

    def __init__(self, llm_factory: LLMClientFactory | None = None):
        self.llm_factory = llm_factory or LLMClientFactory()

    def build_prompt(
        self, question: str, reference_answer: str, user_answer: str, explanation: str = ""
    ) -> str:
        context = GRADER_CONTEXT.format(explanation=explanation) if explanation else "\n"
        return GRADER_PROMPT.format(
            question=question,
            reference_answer=reference_answer,
            context=context,
            user_answer=user_answer,
        )

    async def grade(
        self,
        question: str,
        reference_answer: str,
        user_answer: str,
        explanation: str = "",
    ) -> GradeResult:
        prompt = self.build_prompt(question, reference_answer, user_answer, explanation)
        text = await collect_text(prompt, self.llm_factory.grader_options())
        data = extract_json(text)

        try:
            result = GradeResult.model_validate(data)
        except ValidationError as e:
            raise ExternalServiceError(
                "Resposta do avaliador fora do formato esperado",
                details={"errors": e.errors(include_url=False)},
            ) from e

        logger.debug(f"Resposta avaliada: score={result.score}")
        return result
