"""
Exam Prep Server - API do motor de quiz

FastAPI app com:
- Router de quizzes (criacao, respostas, finalizacao, estatisticas)
- Router de cotas (uploads, armazenamento, geracoes)
- Erros do motor convertidos em respostas JSON com o status de cada erro
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import app_state
from .config import get_config
from .exceptions import ExamPrepError
from .router import quota_router, router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Ciclo de vida da aplicacao."""
    logger.info("Iniciando Exam Prep API...")
    await app_state.open_storage()
    yield
    await app_state.close_storage()
    logger.info("Exam Prep API finalizada")


async def handle_exam_prep_error(request: Request, exc: ExamPrepError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app() -> FastAPI:
    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title="Exam Prep Quiz Engine",
        description="Sessoes de quiz, correcao adaptativa e cotas",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ExamPrepError, handle_exam_prep_error)
    app.include_router(router)
    app.include_router(quota_router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001)
