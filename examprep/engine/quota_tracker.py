"""Quota Tracker - Contadores diarios de upload, geracao e armazenamento."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

from ..models.enums import SubscriptionPlan, UserRole
from ..models.state import QuotaState

MB = 1024 * 1024

# (storage_limit, uploads_limit, generations_limit); None = ilimitado
PlanLimits = tuple[int | None, int | None, int | None]

DEFAULT_LIMITS: dict[SubscriptionPlan, dict[UserRole, PlanLimits]] = {
    SubscriptionPlan.FREE: {
        UserRole.STUDENT: (10 * MB, 5, 20),
        UserRole.FACULTY: (100 * MB, 50, 100),
        UserRole.ADMIN: (100 * MB, 50, 100),
    },
    SubscriptionPlan.STUDENT: {
        UserRole.STUDENT: (50 * MB, 20, 100),
        UserRole.FACULTY: (50 * MB, 20, 100),
        UserRole.ADMIN: (50 * MB, 20, 100),
    },
    SubscriptionPlan.EDUCATOR: {
        UserRole.STUDENT: (500 * MB, None, None),
        UserRole.FACULTY: (500 * MB, None, None),
        UserRole.ADMIN: (500 * MB, None, None),
    },
    SubscriptionPlan.ENTERPRISE: {
        UserRole.STUDENT: (None, None, None),
        UserRole.FACULTY: (None, None, None),
        UserRole.ADMIN: (None, None, None),
    },
}


def default_quota(
    role: UserRole,
    plan: SubscriptionPlan = SubscriptionPlan.FREE,
    now: datetime | None = None,
) -> QuotaState:
    """Cota inicial de um usuario novo, conforme papel e plano."""
    storage_limit, uploads_limit, generations_limit = DEFAULT_LIMITS[plan][role]
    return QuotaState(
        storage_limit=storage_limit,
        uploads_limit=uploads_limit,
        generations_limit=generations_limit,
        last_reset_date=now or datetime.now().astimezone(),
    )


def _local_day(moment: datetime) -> date:
    """Dia de calendario no fuso local do servidor."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone().date()


class QuotaTracker:
    """Operacoes puras sobre QuotaState.

    O tracker nao rejeita nada: ``can_*`` responde se cabe e ``record_*``
    apenas incrementa. Quem consome a cota verifica antes de registrar,
    o que permite checar um lote inteiro antes de gravar qualquer item.

    Example:
        >>> tracker = QuotaTracker()
        >>> quota = tracker.ensure_fresh_day(user.quota, now)
        >>> if tracker.can_upload(quota) and tracker.can_store(quota, size):
        ...     quota = tracker.record_upload(quota, size)
    """

    def ensure_fresh_day(self, quota: QuotaState, now: datetime) -> QuotaState:
        """Zera contadores diarios se o ultimo reset foi em outro dia."""
        if quota.last_reset_date is not None and _local_day(quota.last_reset_date) == _local_day(now):
            return quota
        return replace(quota, uploads_today=0, generations_today=0, last_reset_date=now)

    def can_upload(self, quota: QuotaState) -> bool:
        return self.can_upload_many(quota, 1)

    def can_upload_many(self, quota: QuotaState, count: int) -> bool:
        """Verifica se ``count`` uploads cabem no limite diario."""
        if quota.uploads_limit is None:
            return True
        return quota.uploads_today + count <= quota.uploads_limit

    def can_generate(self, quota: QuotaState) -> bool:
        if quota.generations_limit is None:
            return True
        return quota.generations_today < quota.generations_limit

    def can_store(self, quota: QuotaState, additional_bytes: int) -> bool:
        if quota.storage_limit is None:
            return True
        return quota.storage_used + additional_bytes <= quota.storage_limit

    def remaining_uploads(self, quota: QuotaState) -> int | None:
        if quota.uploads_limit is None:
            return None
        return max(0, quota.uploads_limit - quota.uploads_today)

    def remaining_storage(self, quota: QuotaState) -> int | None:
        if quota.storage_limit is None:
            return None
        return max(0, quota.storage_limit - quota.storage_used)

    def record_upload(self, quota: QuotaState, size_bytes: int) -> QuotaState:
        """Conta um upload e o espaco ocupado. Nao revalida limites."""
        return self.record_uploads(quota, [size_bytes])

    def record_uploads(self, quota: QuotaState, sizes: list[int]) -> QuotaState:
        """Conta um lote de uploads em uma unica atualizacao."""
        return replace(
            quota,
            uploads_today=quota.uploads_today + len(sizes),
            storage_used=quota.storage_used + sum(sizes),
        )

    def record_generation(self, quota: QuotaState) -> QuotaState:
        return replace(quota, generations_today=quota.generations_today + 1)

    def release_storage(self, quota: QuotaState, size_bytes: int) -> QuotaState:
        """Libera espaco de um documento removido (nunca fica negativo)."""
        return replace(quota, storage_used=max(0, quota.storage_used - size_bytes))
