# =============================================================================
# TESTES - Question Generation Service
# =============================================================================
# Testes unitarios para geracao e gravacao de questoes
# =============================================================================

from unittest.mock import AsyncMock

import pytest


@pytest.fixture
def generated():
    from examprep.models import GeneratedQuestions

    return GeneratedQuestions.model_validate(
        {
            "questions": [
                {
                    "type": "mcq",
                    "difficulty": "easy",
                    "question": "2 + 2?",
                    "options": ["A) 3", "B) 4"],
                    "correctAnswer": "B",
                    "explanation": "Soma simples",
                },
                {
                    "type": "short",
                    "question": "Defina fotossintese",
                    "correctAnswer": "Conversao de luz em energia quimica",
                },
            ],
            "keyConcepts": ["soma", "fotossintese"],
        }
    )


@pytest.fixture
def service(store, clock, generated):
    from examprep.engine import QuestionGenerationService, QuotaService

    generator = AsyncMock()
    generator.generate = AsyncMock(return_value=generated)
    return QuestionGenerationService(store, QuotaService(store, clock=clock), generator)


class TestQuestionGeneration:
    """Testes para o fluxo cota -> gerador -> banco de questoes."""

    @pytest.mark.asyncio
    async def test_generate_saves_owned_questions(self, service, store, make_user):
        from examprep.models import Difficulty, QuestionType

        await store.save_user(make_user("student-1"))

        questions = await service.generate(
            "student-1", "texto de estudo", Difficulty.EASY, 2, subject="ciencias"
        )

        assert len(questions) == 2
        assert all(q.owner_id == "student-1" for q in questions)
        assert questions[1].type == QuestionType.SHORT
        assert questions[1].difficulty == Difficulty.MEDIUM
        assert questions[0].key_concepts == ["soma", "fotossintese"]
        assert questions[0].subject == "ciencias"
        stored = await store.list_questions("student-1")
        assert {q.id for q in stored} == {q.id for q in questions}
        assert (await store.get_user("student-1")).quota.generations_today == 1

    @pytest.mark.asyncio
    async def test_generate_passes_all_types_by_default(self, service, store, make_user):
        from examprep.models import Difficulty, QuestionType

        await store.save_user(make_user("student-1"))

        await service.generate("student-1", "texto")

        service.generator.generate.assert_awaited_once_with(
            "texto", Difficulty.MEDIUM, 5, list(QuestionType)
        )

    @pytest.mark.asyncio
    async def test_generate_without_quota_skips_generator(self, service, store, make_user):
        from dataclasses import replace

        from examprep.exceptions import QuotaExceededError

        user = make_user("student-1")
        user.quota = replace(user.quota, generations_today=20)
        await store.save_user(user)

        with pytest.raises(QuotaExceededError):
            await service.generate("student-1", "texto")

        service.generator.generate.assert_not_called()
