"""Question Bank - Banco de questoes de cada usuario."""

from __future__ import annotations

import logging
import uuid

from ..exceptions import InvalidInputError, NotFoundError, UnauthorizedError
from ..models.schemas import GeneratedQuestion, Question, QuestionFilters, QuestionUpdate
from ..storage.quiz_store import QuizStore

logger = logging.getLogger(__name__)


class QuestionBankService:
    """Salva, lista, edita e remove questoes do banco de um usuario.

    E o mesmo banco que o quiz aleatorio sorteia. Toda operacao sobre uma
    questao existente confere o dono.

    Example:
        >>> bank = QuestionBankService(store)
        >>> saved = await bank.save_questions("u1", generated.questions, subject="bio")
        >>> mcqs = await bank.list_questions("u1", QuestionFilters(type=QuestionType.MCQ))
    """

    def __init__(self, store: QuizStore):
        self.store = store

    async def save_questions(
        self,
        user_id: str,
        questions: list[GeneratedQuestion],
        subject: str = "",
        tags: list[str] | None = None,
        key_concepts: list[str] | None = None,
    ) -> list[Question]:
        if not questions:
            raise InvalidInputError("Lista de questoes vazia")
        await self.store.require_user(user_id)

        saved = []
        for item in questions:
            question = Question(
                id=uuid.uuid4().hex,
                owner_id=user_id,
                type=item.type,
                difficulty=item.difficulty,
                question=item.question,
                options=item.options,
                correct_answer=item.correct_answer,
                explanation=item.explanation,
                hint=item.hint,
                subject=subject,
                tags=list(tags or []),
                key_concepts=list(key_concepts or []),
            )
            await self.store.save_question(question)
            saved.append(question)

        logger.info(f"{len(saved)} questoes salvas para {user_id}")
        return saved

    async def list_questions(
        self,
        user_id: str,
        filters: QuestionFilters | None = None,
        tags: list[str] | None = None,
        search: str | None = None,
    ) -> list[Question]:
        """Questoes do usuario que passam nos filtros.

        ``tags`` casa se a questao tiver qualquer uma delas; ``search`` procura
        sem diferenciar maiusculas no enunciado e nos conceitos-chave.
        """
        await self.store.require_user(user_id)
        questions = await self.store.list_questions(user_id)

        if filters is not None:
            questions = [q for q in questions if filters.matches(q)]
        if tags:
            wanted = set(tags)
            questions = [q for q in questions if wanted.intersection(q.tags)]
        if search:
            needle = search.lower()
            questions = [
                q
                for q in questions
                if needle in q.question.lower()
                or any(needle in concept.lower() for concept in q.key_concepts)
            ]
        return questions

    async def get_question(self, question_id: str, user_id: str) -> Question:
        """Carrega a questao verificando o dono.

        Raises:
            NotFoundError: questao inexistente
            UnauthorizedError: questao de outro usuario
        """
        question = await self.store.get_question(question_id)
        if question is None:
            raise NotFoundError(f"Questao {question_id} nao encontrada")
        if question.owner_id != user_id:
            raise UnauthorizedError(f"Acesso nao autorizado a questao {question_id}")
        return question

    async def update_question(
        self, question_id: str, user_id: str, updates: QuestionUpdate
    ) -> Question:
        question = await self.get_question(question_id, user_id)
        changes = updates.model_dump(exclude_none=True)
        if not changes:
            raise InvalidInputError("Nenhum campo para atualizar")

        data = question.model_dump()
        data.update(changes)
        data["is_edited"] = True
        edited = Question.model_validate(data)

        await self.store.save_question(edited)
        logger.info(f"Questao {question_id} editada ({', '.join(sorted(changes))})")
        return edited

    async def delete_question(self, question_id: str, user_id: str) -> None:
        await self.get_question(question_id, user_id)
        await self.store.delete_question(question_id)
        logger.info(f"Questao {question_id} removida por {user_id}")
