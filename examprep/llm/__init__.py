"""LLM - Avaliador e gerador externos (Claude Agent SDK)."""

from .factory import LLMClientFactory
from .generator import ClaudeQuestionGenerator, QuestionGenerator
from .grader import AnswerGrader, ClaudeAnswerGrader

__all__ = [
    "LLMClientFactory",
    "AnswerGrader",
    "ClaudeAnswerGrader",
    "QuestionGenerator",
    "ClaudeQuestionGenerator",
]
