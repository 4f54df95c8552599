"""Quiz Store - Persistencia versionada de usuarios, questoes e sessoes."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any, Protocol

from ..exceptions import ConcurrentUpdateError, NotFoundError
from ..models.enums import QuizStatus
from ..models.schemas import Question
from ..models.state import QuizSession, User
from .locks import KeyedLocks

logger = logging.getLogger(__name__)


class KVBackend(Protocol):
    async def get(self, key: str) -> Any: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def list(self, prefix: str = "") -> list[Any]: ...


class QuizStore:
    """Registros enderecaveis sobre um KV assincrono.

    Usuarios e sessoes sao gravados com escrita otimista: o objeto carrega a
    versao que foi lida e a gravacao falha com ConcurrentUpdateError se o
    registro mudou no meio tempo. Leitura-comparacao-escrita de uma mesma
    chave roda sob um lock por chave.

    Estrutura de chaves:
        - user:{user_id} -> User
        - question:{question_id} -> Question
        - quiz:{quiz_id}:state -> QuizSession

    Example:
        >>> store = QuizStore(agentfs.kv)
        >>> await store.save_session(session)
        >>> loaded = await store.get_session(session.id)
    """

    def __init__(self, kv: KVBackend, update_retries: int = 3):
        self.kv = kv
        self.update_retries = update_retries
        self._locks = KeyedLocks()

    # =========================================================================
    # CHAVES
    # =========================================================================

    def _user_key(self, user_id: str) -> str:
        return f"user:{user_id}"

    def _question_key(self, question_id: str) -> str:
        return f"question:{question_id}"

    def _session_key(self, quiz_id: str) -> str:
        return f"quiz:{quiz_id}:state"

    async def _keys(self, prefix: str) -> list[str]:
        entries = await self.kv.list(prefix=prefix)
        return [entry.get("key", "") if isinstance(entry, dict) else str(entry) for entry in entries]

    async def _versioned_set(self, key: str, record: Any) -> None:
        """Grava ``record`` se a versao no KV for a mesma que ele carrega."""
        async with self._locks.hold(key):
            current = await self.kv.get(key)
            current_version = current.get("version", 0) if current else 0
            if current_version != record.version:
                raise ConcurrentUpdateError(
                    f"Registro {key} foi alterado por outra requisicao",
                    details={"expected": record.version, "found": current_version},
                )
            data = record.to_dict()
            data["version"] = record.version + 1
            await self.kv.set(key, data)
            record.version += 1

    # =========================================================================
    # USUARIOS
    # =========================================================================

    async def get_user(self, user_id: str) -> User | None:
        data = await self.kv.get(self._user_key(user_id))
        return User.from_dict(data) if data else None

    async def require_user(self, user_id: str) -> User:
        user = await self.get_user(user_id)
        if user is None:
            raise NotFoundError(f"Usuario {user_id} nao encontrado")
        return user

    async def save_user(self, user: User) -> User:
        await self._versioned_set(self._user_key(user.user_id), user)
        return user

    async def update_user(self, user_id: str, mutate: Callable[[User], Any]) -> User:
        """Le, aplica ``mutate`` e grava; repete em conflito de versao.

        ``mutate`` pode levantar excecoes (ex: cota excedida) para abortar sem
        gravar nada.
        """
        for attempt in range(1, self.update_retries + 1):
            user = await self.require_user(user_id)
            mutate(user)
            try:
                return await self.save_user(user)
            except ConcurrentUpdateError:
                logger.debug(f"Conflito ao gravar usuario {user_id} (tentativa {attempt})")
                if attempt == self.update_retries:
                    raise
        raise ConcurrentUpdateError(f"Usuario {user_id} nao pode ser atualizado")

    # =========================================================================
    # QUESTOES
    # =========================================================================

    async def save_question(self, question: Question) -> None:
        await self.kv.set(self._question_key(question.id), question.model_dump(mode="json"))

    async def get_question(self, question_id: str) -> Question | None:
        data = await self.kv.get(self._question_key(question_id))
        return Question.model_validate(data) if data else None

    async def get_questions(self, question_ids: Iterable[str]) -> dict[str, Question]:
        """Busca varias questoes; IDs inexistentes ficam fora do dict."""
        found = {}
        for question_id in dict.fromkeys(question_ids):
            question = await self.get_question(question_id)
            if question is not None:
                found[question_id] = question
        return found

    async def list_questions(self, owner_id: str) -> list[Question]:
        questions = []
        for key in await self._keys("question:"):
            data = await self.kv.get(key)
            if data and data.get("owner_id") == owner_id:
                questions.append(Question.model_validate(data))
        return questions

    async def delete_question(self, question_id: str) -> None:
        await self.kv.delete(self._question_key(question_id))

    # =========================================================================
    # SESSOES
    # =========================================================================

    async def get_session(self, quiz_id: str) -> QuizSession | None:
        data = await self.kv.get(self._session_key(quiz_id))
        if not data:
            logger.debug(f"Quiz nao encontrado: {quiz_id}")
            return None
        return QuizSession.from_dict(data)

    async def save_session(self, session: QuizSession) -> QuizSession:
        await self._versioned_set(self._session_key(session.id), session)
        logger.debug(f"Quiz salvo: {session.id} (v{session.version})")
        return session

    async def delete_session(self, quiz_id: str) -> None:
        await self.kv.delete(self._session_key(quiz_id))
        logger.info(f"Quiz deletado: {quiz_id}")

    async def list_sessions(
        self, user_id: str, status: QuizStatus | None = None
    ) -> list[QuizSession]:
        """Sessoes do usuario, mais recentes primeiro."""
        sessions = []
        for key in await self._keys("quiz:"):
            data = await self.kv.get(key)
            if not data or data.get("user_id") != user_id:
                continue
            if status is not None and data.get("status") != status.value:
                continue
            sessions.append(QuizSession.from_dict(data))

        sessions.sort(key=lambda s: s.started_at.timestamp() if s.started_at else 0, reverse=True)
        return sessions
