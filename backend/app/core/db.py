import logging

from sqlalchemy import Engine
from sqlmodel import SQLModel, create_engine

from app.core.config import settings

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str | None = None, **kwargs) -> Engine:
    url = database_url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(url, **kwargs)


def init_db(engine: Engine) -> None:
    # Tables must be registered on the metadata before create_all.
    from app import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database schema ready (%s)", engine.url.get_backend_name())
