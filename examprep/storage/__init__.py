"""Storage - Registros versionados sobre KV."""

from .locks import KeyedLocks
from .quiz_store import KVBackend, QuizStore

__all__ = ["KVBackend", "KeyedLocks", "QuizStore"]
