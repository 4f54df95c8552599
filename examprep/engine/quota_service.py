"""Quota Service - Portao de uploads e geracoes sobre o QuotaTracker."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from ..exceptions import InvalidInputError, QuotaExceededError
from ..models.enums import SubscriptionPlan, UserRole
from ..models.state import QuotaState, User
from ..storage.quiz_store import QuizStore
from .difficulty_adapter import DifficultyAdapter
from .quota_tracker import QuotaTracker, default_quota
from .scoring import local_now

logger = logging.getLogger(__name__)


class QuotaService:
    """Consulta e consome cotas com gravacao versionada.

    Toda alteracao passa por ``QuizStore.update_user``: o lote inteiro e
    verificado contra a cota recem-lida e os contadores sao gravados numa
    unica escrita. Se a verificacao falhar nada e gravado.
    """

    def __init__(
        self,
        store: QuizStore,
        tracker: QuotaTracker | None = None,
        clock: Callable[[], datetime] = local_now,
    ):
        self.store = store
        self.tracker = tracker or QuotaTracker()
        self.clock = clock

    async def register_user(
        self,
        user_id: str,
        role: UserRole,
        plan: SubscriptionPlan = SubscriptionPlan.FREE,
    ) -> User:
        """Cria o registro de um usuario com a cota padrao do plano."""
        if await self.store.get_user(user_id) is not None:
            raise InvalidInputError(f"Usuario {user_id} ja existe")

        now = self.clock()
        user = User(
            user_id=user_id,
            role=role,
            subscription_plan=plan,
            quota=default_quota(role, plan, now),
            difficulty=DifficultyAdapter().initial_state(now) if role is UserRole.STUDENT else None,
        )
        await self.store.save_user(user)
        logger.info(f"Usuario registrado: {user_id} ({role.value}/{plan.value})")
        return user

    async def get_quota(self, user_id: str) -> QuotaState:
        """Cota atual; o reset diario e persistido quando acontece."""
        user = await self.store.require_user(user_id)
        fresh = self.tracker.ensure_fresh_day(user.quota, self.clock())
        if fresh is user.quota:
            return fresh

        def reset(record: User) -> None:
            record.quota = self.tracker.ensure_fresh_day(record.quota, self.clock())

        updated = await self.store.update_user(user_id, reset)
        return updated.quota

    async def register_uploads(self, user_id: str, sizes: list[int]) -> QuotaState:
        """Conta um lote de uploads (quantidade + bytes) atomicamente.

        Raises:
            InvalidInputError: lote vazio ou tamanho negativo
            QuotaExceededError: lote nao cabe no limite diario ou no armazenamento
        """
        if not sizes:
            raise InvalidInputError("Nenhum arquivo informado")
        if any(size < 0 for size in sizes):
            raise InvalidInputError("Tamanho de arquivo invalido", details={"sizes": sizes})

        def consume(record: User) -> None:
            quota = self.tracker.ensure_fresh_day(record.quota, self.clock())
            if not self.tracker.can_upload_many(quota, len(sizes)):
                raise QuotaExceededError(
                    "Limite diario de uploads atingido",
                    details={
                        "limit": quota.uploads_limit,
                        "remaining": self.tracker.remaining_uploads(quota),
                        "requested": len(sizes),
                    },
                )
            if not self.tracker.can_store(quota, sum(sizes)):
                raise QuotaExceededError(
                    "Limite de armazenamento atingido",
                    details={
                        "limit": quota.storage_limit,
                        "remaining": self.tracker.remaining_storage(quota),
                        "requested": sum(sizes),
                    },
                )
            record.quota = self.tracker.record_uploads(quota, sizes)

        updated = await self.store.update_user(user_id, consume)
        logger.info(f"Uploads registrados para {user_id}: {len(sizes)} arquivo(s), {sum(sizes)} bytes")
        return updated.quota

    async def release_storage(self, user_id: str, size_bytes: int) -> QuotaState:
        def release(record: User) -> None:
            record.quota = self.tracker.release_storage(record.quota, size_bytes)

        updated = await self.store.update_user(user_id, release)
        return updated.quota

    async def consume_generation(self, user_id: str) -> QuotaState:
        """Consome uma geracao de questoes do dia.

        Raises:
            QuotaExceededError: limite diario de geracoes atingido
        """

        def consume(record: User) -> None:
            quota = self.tracker.ensure_fresh_day(record.quota, self.clock())
            if not self.tracker.can_generate(quota):
                raise QuotaExceededError(
                    "Limite diario de geracoes atingido",
                    details={"limit": quota.generations_limit, "remaining": 0},
                )
            record.quota = self.tracker.record_generation(quota)

        updated = await self.store.update_user(user_id, consume)
        return updated.quota
