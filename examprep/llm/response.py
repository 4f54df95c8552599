"""Leitura das respostas do Claude Agent SDK."""

from __future__ import annotations

import json
import re
from typing import Any

from claude_agent_sdk import ClaudeAgentOptions, query

from ..exceptions import ExternalServiceError

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


async def collect_text(prompt: str, options: ClaudeAgentOptions) -> str:
    """Executa a query e concatena todos os blocos de texto da resposta."""
    text = ""
    async for message in query(prompt=prompt, options=options):
        if hasattr(message, "content") and isinstance(message.content, list):
            for block in message.content:
                if hasattr(block, "text"):
                    text += block.text
    return text


def extract_json(text: str) -> dict[str, Any]:
    """Extrai o objeto JSON de uma resposta do modelo.

    Aceita JSON puro, JSON dentro de bloco markdown ou JSON cercado de texto.

    Raises:
        ExternalServiceError: se nenhum objeto JSON valido for encontrado
    """
    if not text or not text.strip():
        raise ExternalServiceError("Resposta vazia do modelo")

    candidates = [text.strip()]
    fenced = _FENCE_RE.search(text)
    if fenced:
        candidates.insert(0, fenced.group(1).strip())
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    raise ExternalServiceError(
        "Resposta do modelo nao contem JSON valido",
        details={"preview": text[:200]},
    )
