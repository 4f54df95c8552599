"""Quiz Schemas - Modelos Pydantic de questoes, resultados e requests."""

from datetime import datetime

from pydantic import BaseModel, Field

from .enums import (
    Difficulty,
    QuestionType,
    QuizDifficulty,
    QuizStatus,
    SubscriptionPlan,
    UserRole,
)

# =============================================================================
# QUESTOES
# =============================================================================


class Question(BaseModel):
    """Questao salva no banco do usuario (somente leitura para o motor)."""

    id: str = Field(..., description="ID da questao")
    owner_id: str = Field(..., description="Usuario que gerou/salvou a questao")
    type: QuestionType = Field(..., description="Formato da questao")
    difficulty: Difficulty = Field(..., description="Nivel de dificuldade")
    question: str = Field(..., description="Enunciado")
    options: list[str] = Field(default_factory=list, description="Alternativas (apenas mcq)")
    correct_answer: str = Field(..., description="Resposta de referencia (letra para mcq)")
    explanation: str = Field(default="", description="Por que a resposta esta correta")
    hint: str = Field(default="", description="Dica exibida ao aluno")
    subject: str = Field(default="", description="Materia")
    tags: list[str] = Field(default_factory=list)
    key_concepts: list[str] = Field(default_factory=list)
    is_edited: bool = Field(default=False, description="Editada pelo dono depois de salva")


class GeneratedQuestion(BaseModel):
    """Questao como devolvida pelo gerador externo (antes de ganhar dono e ID)."""

    type: QuestionType
    difficulty: Difficulty = Difficulty.MEDIUM
    question: str
    options: list[str] = Field(default_factory=list)
    correct_answer: str = Field(..., alias="correctAnswer")
    hint: str = ""
    explanation: str = ""

    model_config = {"populate_by_name": True}


class GeneratedQuestions(BaseModel):
    """Resposta completa do gerador: questoes + conceitos-chave extraidos."""

    questions: list[GeneratedQuestion] = Field(default_factory=list)
    key_concepts: list[str] = Field(default_factory=list, alias="keyConcepts")

    model_config = {"populate_by_name": True}


# =============================================================================
# AVALIACAO
# =============================================================================


class GradeResult(BaseModel):
    """Resposta do avaliador externo para uma resposta aberta."""

    score: int = Field(..., ge=0, le=100, description="Nota 0-100")
    feedback: str = Field(default="", description="Justificativa da nota")


class EvaluationResult(BaseModel):
    """Resultado da correcao de uma resposta."""

    is_correct: bool
    score: int | None = Field(None, description="Nota 0-100 (apenas respostas abertas)")
    feedback: str | None = None
    fallback: bool = Field(False, description="Se a correcao caiu no match exato")


class AnswerFeedback(BaseModel):
    """Retorno imediato de submit_answer para o aluno."""

    index: int
    is_correct: bool
    correct_answer: str
    explanation: str
    ai_score: int | None = None
    ai_feedback: str | None = None
    fallback: bool = False


# =============================================================================
# CRIACAO DE QUIZ
# =============================================================================


class QuizOptions(BaseModel):
    """Opcoes de criacao de um quiz."""

    title: str = Field(default="Practice Quiz")
    subject: str = Field(default="")
    difficulty: QuizDifficulty = Field(default=QuizDifficulty.MIXED)
    shuffle_questions: bool = Field(default=False)
    time_limit_minutes: int = Field(default=0, ge=0, description="0 = sem limite")


class QuestionFilters(BaseModel):
    """Filtros do quiz aleatorio (None = sem filtro)."""

    difficulty: QuizDifficulty | None = None
    subject: str | None = None
    type: QuestionType | None = None

    def matches(self, question: Question) -> bool:
        if self.difficulty and self.difficulty != QuizDifficulty.MIXED:
            if question.difficulty.value != self.difficulty.value:
                return False
        if self.subject and question.subject != self.subject:
            return False
        if self.type and question.type != self.type:
            return False
        return True


# =============================================================================
# ESTATISTICAS
# =============================================================================


class PerformanceBreakdown(BaseModel):
    total: int = 0
    correct: int = 0
    percentage: int = 0


class SubjectPerformance(PerformanceBreakdown):
    quiz_count: int = 0


class QuizSummary(BaseModel):
    """Projecao resumida de um quiz finalizado."""

    quiz_id: str
    title: str
    subject: str
    status: QuizStatus
    total_questions: int
    correct_count: int
    percentage: int
    score: int
    total_time_spent_seconds: int
    completed_at: datetime | None


class QuizStatistics(BaseModel):
    """Visao agregada do desempenho de um usuario."""

    total_quizzes: int = 0
    total_questions: int = 0
    total_correct: int = 0
    average_score: float = 0.0
    average_percentage: int = 0
    total_time_spent_seconds: int = 0
    recent_quizzes: list[QuizSummary] = Field(default_factory=list)
    performance_by_difficulty: dict[str, PerformanceBreakdown] = Field(default_factory=dict)
    performance_by_subject: dict[str, SubjectPerformance] = Field(default_factory=dict)


# =============================================================================
# REQUESTS (router)
# =============================================================================


class CreateQuizRequest(QuizOptions):
    user_id: str
    question_ids: list[str] = Field(default_factory=list)


class RandomQuizRequest(BaseModel):
    user_id: str
    title: str = "Random Practice Quiz"
    question_count: int | None = Field(None, ge=1)
    difficulty: QuizDifficulty | None = None
    subject: str | None = None
    type: QuestionType | None = None


class SubmitAnswerRequest(BaseModel):
    user_id: str
    question_index: int
    user_answer: str = ""
    time_spent_seconds: int = Field(default=0, ge=0)


class UserRequest(BaseModel):
    user_id: str


class GenerateQuestionsRequest(BaseModel):
    user_id: str
    source_text: str = Field(..., min_length=1)
    difficulty: Difficulty = Difficulty.MEDIUM
    question_count: int = Field(default=5, ge=1, le=20)
    question_types: list[QuestionType] = Field(default_factory=lambda: list(QuestionType))
    subject: str = ""


class UploadRequest(BaseModel):
    user_id: str
    file_sizes: list[int] = Field(..., min_length=1)


class ReleaseStorageRequest(BaseModel):
    user_id: str
    size_bytes: int = Field(..., ge=0)


class RegisterUserRequest(BaseModel):
    user_id: str = Field(..., min_length=1)
    role: UserRole = UserRole.STUDENT
    subscription_plan: SubscriptionPlan = SubscriptionPlan.FREE


# =============================================================================
# BANCO DE QUESTOES
# =============================================================================


class QuestionUpdate(BaseModel):
    """Campos editaveis de uma questao (ausentes ficam como estao)."""

    type: QuestionType | None = None
    difficulty: Difficulty | None = None
    question: str | None = Field(None, min_length=1)
    options: list[str] | None = None
    correct_answer: str | None = Field(None, min_length=1)
    explanation: str | None = None
    hint: str | None = None
    subject: str | None = None
    tags: list[str] | None = None


class UpdateQuestionRequest(BaseModel):
    user_id: str
    updates: QuestionUpdate


class SaveQuestionsRequest(BaseModel):
    user_id: str
    questions: list[GeneratedQuestion] = Field(..., min_length=1)
    subject: str = ""
    tags: list[str] = Field(default_factory=list)
    key_concepts: list[str] = Field(default_factory=list, alias="keyConcepts")

    model_config = {"populate_by_name": True}
