# =============================================================================
# TESTES - Quota Tracker
# =============================================================================
# Testes unitarios para contadores diarios e armazenamento
# =============================================================================

from datetime import datetime

DAY_1 = datetime(2024, 3, 15, 9, 0, 0)
DAY_1_LATE = datetime(2024, 3, 15, 23, 59, 0)
DAY_2 = datetime(2024, 3, 16, 0, 1, 0)


def _quota(**overrides):
    from examprep.models import QuotaState

    values = {
        "storage_used": 0,
        "storage_limit": 10 * 1024 * 1024,
        "uploads_today": 0,
        "uploads_limit": 5,
        "generations_today": 0,
        "generations_limit": 20,
        "last_reset_date": DAY_1,
    }
    values.update(overrides)
    return QuotaState(**values)


class TestDefaultLimits:
    """Testes para a tabela de limites por papel e plano."""

    def test_student_free_limits(self):
        """Verifica limites do aluno no plano gratuito."""
        from examprep.engine.quota_tracker import MB, default_quota
        from examprep.models import UserRole

        quota = default_quota(UserRole.STUDENT, now=DAY_1)

        assert quota.storage_limit == 10 * MB
        assert quota.uploads_limit == 5
        assert quota.generations_limit == 20
        assert quota.uploads_today == 0
        assert quota.last_reset_date == DAY_1

    def test_faculty_free_limits(self):
        """Verifica limites do professor no plano gratuito."""
        from examprep.engine.quota_tracker import MB, default_quota
        from examprep.models import UserRole

        quota = default_quota(UserRole.FACULTY, now=DAY_1)

        assert quota.storage_limit == 100 * MB
        assert quota.uploads_limit == 50
        assert quota.generations_limit == 100

    def test_paid_plans_unlimited(self):
        """Verifica que planos pagos usam None como ilimitado."""
        from examprep.engine.quota_tracker import default_quota
        from examprep.models import SubscriptionPlan, UserRole

        educator = default_quota(UserRole.FACULTY, SubscriptionPlan.EDUCATOR, now=DAY_1)
        enterprise = default_quota(UserRole.STUDENT, SubscriptionPlan.ENTERPRISE, now=DAY_1)

        assert educator.uploads_limit is None
        assert educator.generations_limit is None
        assert educator.storage_limit is not None
        assert enterprise.storage_limit is None


class TestEnsureFreshDay:
    """Testes para o reset diario."""

    def test_same_day_unchanged(self):
        """Verifica que no mesmo dia nada muda."""
        from examprep.engine import QuotaTracker

        quota = _quota(uploads_today=3, generations_today=2)

        result = QuotaTracker().ensure_fresh_day(quota, DAY_1_LATE)

        assert result is quota

    def test_new_day_resets_counters(self):
        """Verifica reset de uploads e geracoes em novo dia."""
        from examprep.engine import QuotaTracker

        quota = _quota(uploads_today=5, generations_today=20, storage_used=1234)

        result = QuotaTracker().ensure_fresh_day(quota, DAY_2)

        assert result.uploads_today == 0
        assert result.generations_today == 0
        assert result.last_reset_date == DAY_2
        # Armazenamento nao e diario
        assert result.storage_used == 1234

    def test_reset_is_idempotent(self):
        """Verifica que aplicar duas vezes no mesmo instante e igual a uma."""
        from examprep.engine import QuotaTracker

        tracker = QuotaTracker()
        quota = _quota(uploads_today=4)

        once = tracker.ensure_fresh_day(quota, DAY_2)
        twice = tracker.ensure_fresh_day(once, DAY_2)

        assert once == twice

    def test_missing_reset_date_resets(self):
        """Verifica que cota sem data de reset e tratada como dia antigo."""
        from examprep.engine import QuotaTracker

        quota = _quota(uploads_today=2, last_reset_date=None)

        result = QuotaTracker().ensure_fresh_day(quota, DAY_1)

        assert result.uploads_today == 0
        assert result.last_reset_date == DAY_1


class TestQuotaChecks:
    """Testes para can_upload / can_store / can_generate."""

    def test_upload_at_boundary(self):
        """Verifica que o quinto upload cabe e o sexto nao."""
        from examprep.engine import QuotaTracker

        tracker = QuotaTracker()
        quota = _quota(uploads_today=4)

        assert tracker.can_upload(quota) is True

        quota = tracker.record_upload(quota, 100)

        assert quota.uploads_today == 5
        assert tracker.can_upload(quota) is False

    def test_upload_many_checks_whole_batch(self):
        """Verifica que um lote que nao cabe inteiro e recusado."""
        from examprep.engine import QuotaTracker

        tracker = QuotaTracker()
        quota = _quota(uploads_today=4)

        assert tracker.can_upload_many(quota, 1) is True
        assert tracker.can_upload_many(quota, 2) is False

    def test_store_exactly_at_limit(self):
        """Verifica que ocupar exatamente o limite e permitido."""
        from examprep.engine import QuotaTracker

        tracker = QuotaTracker()
        quota = _quota(storage_used=900, storage_limit=1000)

        assert tracker.can_store(quota, 100) is True
        assert tracker.can_store(quota, 101) is False

    def test_generate_limit(self):
        """Verifica limite diario de geracoes."""
        from examprep.engine import QuotaTracker

        tracker = QuotaTracker()

        assert tracker.can_generate(_quota(generations_today=19)) is True
        assert tracker.can_generate(_quota(generations_today=20)) is False

    def test_unlimited_quota(self):
        """Verifica que limites None nunca bloqueiam."""
        from examprep.engine import QuotaTracker

        tracker = QuotaTracker()
        quota = _quota(
            uploads_today=10_000,
            uploads_limit=None,
            storage_used=10**12,
            storage_limit=None,
            generations_today=10_000,
            generations_limit=None,
        )

        assert tracker.can_upload_many(quota, 500) is True
        assert tracker.can_store(quota, 10**12) is True
        assert tracker.can_generate(quota) is True
        assert tracker.remaining_uploads(quota) is None
        assert tracker.remaining_storage(quota) is None

    def test_remaining_never_negative(self):
        """Verifica que o restante nunca fica negativo."""
        from examprep.engine import QuotaTracker

        tracker = QuotaTracker()
        quota = _quota(uploads_today=7, storage_used=2000, storage_limit=1000)

        assert tracker.remaining_uploads(quota) == 0
        assert tracker.remaining_storage(quota) == 0


class TestQuotaRecording:
    """Testes para record_* e release_storage."""

    def test_record_uploads_batch(self):
        """Verifica que o lote soma quantidade e bytes numa unica atualizacao."""
        from examprep.engine import QuotaTracker

        quota = QuotaTracker().record_uploads(_quota(uploads_today=1, storage_used=10), [100, 200])

        assert quota.uploads_today == 3
        assert quota.storage_used == 310

    def test_record_generation(self):
        from examprep.engine import QuotaTracker

        quota = QuotaTracker().record_generation(_quota(generations_today=3))

        assert quota.generations_today == 4

    def test_release_storage_floors_at_zero(self):
        """Verifica que liberar mais do que o usado zera o armazenamento."""
        from examprep.engine import QuotaTracker

        tracker = QuotaTracker()

        assert tracker.release_storage(_quota(storage_used=500), 200).storage_used == 300
        assert tracker.release_storage(_quota(storage_used=500), 800).storage_used == 0

    def test_operations_do_not_mutate_input(self):
        """Verifica que o tracker devolve novos estados."""
        from examprep.engine import QuotaTracker

        original = _quota(uploads_today=1)

        QuotaTracker().record_upload(original, 50)

        assert original.uploads_today == 1
        assert original.storage_used == 0
