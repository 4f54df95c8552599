"""Quiz Router - Endpoints FastAPI do motor de quiz e das cotas."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query

from . import app_state
from .engine.generation_service import QuestionGenerationService
from .engine.question_bank import QuestionBankService
from .engine.quiz_engine import QuizEngine
from .engine.quota_service import QuotaService
from .models.enums import QuestionType, QuizDifficulty, QuizStatus
from .models.schemas import (
    AnswerFeedback,
    CreateQuizRequest,
    GenerateQuestionsRequest,
    Question,
    QuestionFilters,
    QuizOptions,
    QuizStatistics,
    RandomQuizRequest,
    RegisterUserRequest,
    ReleaseStorageRequest,
    SaveQuestionsRequest,
    SubmitAnswerRequest,
    UpdateQuestionRequest,
    UploadRequest,
    UserRequest,
)
from .models.state import QuotaState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["Quiz"])
quota_router = APIRouter(prefix="/quota", tags=["Quota"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


async def get_quiz_engine() -> QuizEngine:
    """Dependency para obter o QuizEngine do processo."""
    return app_state.get_engine()


async def get_quota_service() -> QuotaService:
    return app_state.get_quota_service()


async def get_generation_service() -> QuestionGenerationService:
    return app_state.get_generation_service()


async def get_question_bank() -> QuestionBankService:
    return app_state.get_question_bank()


def _quota_view(quota: QuotaState, quotas: QuotaService) -> dict[str, Any]:
    view = quota.to_dict()
    view["remaining_uploads"] = quotas.tracker.remaining_uploads(quota)
    view["remaining_storage"] = quotas.tracker.remaining_storage(quota)
    return view


# =============================================================================
# QUIZ
# =============================================================================


@router.post("")
async def create_quiz(request: CreateQuizRequest, engine: QuizEngine = Depends(get_quiz_engine)):
    """Cria um quiz com as questoes escolhidas pelo usuario."""
    options = QuizOptions.model_validate(request.model_dump(include=set(QuizOptions.model_fields)))
    session = await engine.create_quiz(request.user_id, request.question_ids, options)
    return session.to_dict()


@router.post("/random")
async def create_random_quiz(
    request: RandomQuizRequest, engine: QuizEngine = Depends(get_quiz_engine)
):
    """Sorteia um quiz do banco de questoes do usuario."""
    filters = QuestionFilters(
        difficulty=request.difficulty, subject=request.subject, type=request.type
    )
    session = await engine.create_random_quiz(
        request.user_id, request.question_count, filters, request.title
    )
    return session.to_dict()


@router.get("")
async def list_quizzes(
    user_id: str,
    status: QuizStatus | None = None,
    engine: QuizEngine = Depends(get_quiz_engine),
):
    sessions = await engine.list_quizzes(user_id, status)
    return {"quizzes": [s.to_dict() for s in sessions], "count": len(sessions)}


@router.get("/statistics", response_model=QuizStatistics)
async def get_statistics(user_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    return await engine.get_statistics(user_id)


@router.get("/difficulty")
async def get_adaptive_difficulty(user_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    state = await engine.get_adaptive_difficulty(user_id)
    return state.to_dict()


@router.post("/questions/generate", response_model=list[Question])
async def generate_questions(
    request: GenerateQuestionsRequest,
    service: QuestionGenerationService = Depends(get_generation_service),
):
    """Gera questoes a partir de um texto (consome uma geracao da cota)."""
    return await service.generate(
        request.user_id,
        request.source_text,
        request.difficulty,
        request.question_count,
        request.question_types,
        request.subject,
    )


# =============================================================================
# BANCO DE QUESTOES
# =============================================================================


@router.post("/questions", response_model=list[Question], status_code=201)
async def save_questions(
    request: SaveQuestionsRequest, bank: QuestionBankService = Depends(get_question_bank)
):
    """Salva questoes (ex: revisadas depois da geracao) no banco do usuario."""
    return await bank.save_questions(
        request.user_id,
        request.questions,
        subject=request.subject,
        tags=request.tags,
        key_concepts=request.key_concepts,
    )


@router.get("/questions")
async def list_questions(
    user_id: str,
    difficulty: QuizDifficulty | None = None,
    subject: str | None = None,
    type: QuestionType | None = None,
    tags: str | None = Query(None, description="Lista separada por virgula"),
    search: str | None = None,
    bank: QuestionBankService = Depends(get_question_bank),
):
    """Lista o banco de questoes do usuario com filtros opcionais."""
    filters = QuestionFilters(difficulty=difficulty, subject=subject, type=type)
    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else None
    questions = await bank.list_questions(user_id, filters, tag_list, search)
    return {
        "questions": [q.model_dump(mode="json") for q in questions],
        "count": len(questions),
    }


@router.get("/questions/{question_id}", response_model=Question)
async def get_question(
    question_id: str, user_id: str, bank: QuestionBankService = Depends(get_question_bank)
):
    return await bank.get_question(question_id, user_id)


@router.patch("/questions/{question_id}", response_model=Question)
async def update_question(
    question_id: str,
    request: UpdateQuestionRequest,
    bank: QuestionBankService = Depends(get_question_bank),
):
    return await bank.update_question(question_id, request.user_id, request.updates)


@router.delete("/questions/{question_id}")
async def delete_question(
    question_id: str,
    user_id: str = Query(...),
    bank: QuestionBankService = Depends(get_question_bank),
):
    await bank.delete_question(question_id, user_id)
    return {"success": True, "question_id": question_id}


@router.get("/{quiz_id}")
async def get_quiz(quiz_id: str, user_id: str, engine: QuizEngine = Depends(get_quiz_engine)):
    session = await engine.get_quiz(quiz_id, user_id)
    return session.to_dict()


@router.post("/{quiz_id}/answer", response_model=AnswerFeedback)
async def submit_answer(
    quiz_id: str,
    request: SubmitAnswerRequest,
    engine: QuizEngine = Depends(get_quiz_engine),
):
    """Corrige a resposta de um item e devolve o feedback imediato."""
    return await engine.submit_answer(
        quiz_id,
        request.user_id,
        request.question_index,
        request.user_answer,
        request.time_spent_seconds,
    )


@router.post("/{quiz_id}/complete")
async def complete_quiz(
    quiz_id: str, request: UserRequest, engine: QuizEngine = Depends(get_quiz_engine)
):
    session = await engine.complete_quiz(quiz_id, request.user_id)
    return session.to_dict()


@router.delete("/{quiz_id}")
async def delete_quiz(
    quiz_id: str, user_id: str = Query(...), engine: QuizEngine = Depends(get_quiz_engine)
):
    await engine.delete_quiz(quiz_id, user_id)
    return {"success": True, "quiz_id": quiz_id}


# =============================================================================
# COTAS
# =============================================================================


@quota_router.post("/users")
async def register_user(
    request: RegisterUserRequest, quotas: QuotaService = Depends(get_quota_service)
):
    user = await quotas.register_user(request.user_id, request.role, request.subscription_plan)
    return user.to_dict()


@quota_router.get("/{user_id}")
async def get_quota(user_id: str, quotas: QuotaService = Depends(get_quota_service)):
    quota = await quotas.get_quota(user_id)
    return _quota_view(quota, quotas)


@quota_router.post("/uploads")
async def register_uploads(
    request: UploadRequest, quotas: QuotaService = Depends(get_quota_service)
):
    quota = await quotas.register_uploads(request.user_id, request.file_sizes)
    return _quota_view(quota, quotas)


@quota_router.post("/release")
async def release_storage(
    request: ReleaseStorageRequest, quotas: QuotaService = Depends(get_quota_service)
):
    quota = await quotas.release_storage(request.user_id, request.size_bytes)
    return _quota_view(quota, quotas)
