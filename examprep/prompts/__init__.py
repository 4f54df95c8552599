"""Prompts do avaliador e do gerador."""

from .templates import (
    GENERATOR_PROMPT,
    GENERATOR_SYSTEM_PROMPT,
    GRADER_CONTEXT,
    GRADER_PROMPT,
    GRADER_SYSTEM_PROMPT,
)

__all__ = [
    "GRADER_SYSTEM_PROMPT",
    "GRADER_PROMPT",
    "GRADER_CONTEXT",
    "GENERATOR_SYSTEM_PROMPT",
    "GENERATOR_PROMPT",
]
