import os

# Point the application engine at an in-memory database before lectio is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from lectio.core.database import get_session
from lectio.main import app
from lectio.models import ImportantWord, Paragraph, ParagraphQuestion
from lectio.services.progress_store import ProgressStore

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session):
    return ProgressStore(session)


@pytest.fixture
def paragraph(session):
    """A stored paragraph with one question and two words."""
    paragraph = Paragraph(title="At the market", theme="Food", level="A1", content="Anna buys bread.")
    question = ParagraphQuestion(
        paragraph_id=paragraph.id,
        question="What does Anna buy?",
        answer="Bread",
        choices=["Bread", "Milk"],
    )
    bread = ImportantWord(paragraph_id=paragraph.id, term="bread", meaning="pain", usage_sentence="Anna buys bread.")
    buys = ImportantWord(paragraph_id=paragraph.id, term="buys", meaning="achète", usage_sentence="Anna buys bread.")
    session.add(paragraph)
    session.add(question)
    session.add(bread)
    session.add(buys)
    session.commit()
    return {
        "paragraph_id": paragraph.id,
        "question_id": question.id,
        "word_ids": [bread.id, buys.id],
    }


@pytest.fixture
def client(engine):
    def get_test_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_test_session
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
