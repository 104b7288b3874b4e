import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import Engine

from app.agent.llm_client import LLMClient
from app.api.handlers import register_exception_handlers
from app.api.main import api_router
from app.api.routes import chat, utils
from app.core.config import settings
from app.core.db import create_db_engine, init_db
from app.core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    owns_engine = app.state.engine is None
    if owns_engine:
        app.state.engine = create_db_engine()
    init_db(app.state.engine)
    if app.state.llm_client is None:
        app.state.llm_client = LLMClient()
    logger.info("%s API ready (environment=%s)", settings.PROJECT_NAME, settings.ENVIRONMENT)
    yield
    if owns_engine:
        app.state.engine.dispose()


def create_app(engine: Engine | None = None, llm_client: LLMClient | None = None) -> FastAPI:
    """
    Build the API application. The database engine and LLM client are created
    once per process at startup unless supplied here.
    """
    app = FastAPI(title=f"{settings.PROJECT_NAME} API", lifespan=lifespan)
    app.state.engine = engine
    app.state.llm_client = llm_client

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(utils.router)
    app.include_router(api_router, prefix=settings.API_PREFIX)
    # Legacy mount kept for clients that predate the /api prefix.
    app.include_router(chat.router, prefix="/chat", tags=["chat"], include_in_schema=False)
    return app


app = create_app()
