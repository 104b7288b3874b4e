from collections.abc import Generator, Sequence

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from app.agent.artifacts import ChatCompletion, LLMMessage
from app.core.db import init_db
from app.core.security import create_access_token
from app.main import create_app
from app.models import ProjectCreate


class FakeLLM:
    """Stands in for LLMClient; records every message list it is sent."""

    def __init__(self, reply: str = "Project: Test Idea", fail: Exception | None = None):
        self.reply = reply
        self.fail = fail
        self.calls: list[list[LLMMessage]] = []

    async def generate_chat(self, messages: Sequence[LLMMessage]) -> ChatCompletion:
        self.calls.append(list(messages))
        if self.fail is not None:
            raise self.fail
        return ChatCompletion(content=self.reply, timestamp="2024-01-01T00:00:00.000Z")


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def client(engine: Engine, fake_llm: FakeLLM) -> Generator[TestClient, None, None]:
    app = create_app(engine=engine, llm_client=fake_llm)  # type: ignore[arg-type]
    with TestClient(app) as c:
        yield c


def auth_headers(user_id: str, email: str | None = None) -> dict[str, str]:
    token = create_access_token(user_id, email=email or f"{user_id}@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return auth_headers("alice")


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return auth_headers("bob")


def make_project_in(**overrides) -> ProjectCreate:
    data = {
        "name": "Todo Tracker",
        "description": "A simple app to track todos across devices.",
        "category": "Web Development",
        "difficulty": "beginner",
        "estimatedDuration": "2 weeks",
        "techStack": ["React", "Node.js"],
        "features": ["Add tasks", "Mark complete"],
    }
    data.update(overrides)
    return ProjectCreate.model_validate(data)
