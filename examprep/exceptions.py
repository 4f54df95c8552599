"""Excecoes do motor de quiz.

Cada erro carrega uma mensagem legivel, um dict de detalhes e o status HTTP
que o router usa ao converter o erro em resposta.
"""

from typing import Any


class ExamPrepError(Exception):
    """Erro base do pacote."""

    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidInputError(ExamPrepError):
    """Campos obrigatorios ausentes ou malformados (ex: lista de questoes vazia)."""

    status_code = 400


class NotFoundError(ExamPrepError):
    """Questao, sessao ou usuario referenciado nao existe."""

    status_code = 404


class UnauthorizedError(ExamPrepError):
    """Recurso acessado por quem nao e o dono."""

    status_code = 403


class InvalidStateError(ExamPrepError):
    """Operacao ilegal para o estado atual do ciclo de vida."""

    status_code = 409


class OutOfRangeError(ExamPrepError):
    """Indice de item invalido."""

    status_code = 400


class ExternalServiceError(ExamPrepError):
    """Falha do avaliador ou do gerador externo (LLM)."""

    status_code = 502


class QuotaExceededError(ExamPrepError):
    """Limite diario ou de armazenamento atingido."""

    status_code = 429


class ConcurrentUpdateError(ExamPrepError):
    """Versao do registro mudou entre a leitura e a escrita."""

    status_code = 409
