# backend/tests/conftest.py
"""Shared fixtures: in-memory database, directory records, API client and tokens."""

from types import SimpleNamespace
from typing import Callable, Dict, Generator

from fastapi.testclient import TestClient
import pytest
from scheduling_helpers import make_engine, seed_directory
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.api.dependencies.database import get_db
from app.auth import create_access_token
from app.database import Base
from app.events.session_events import SessionEvents
from app.main import app as fastapi_app
from app.models import Skill


@pytest.fixture(autouse=True)
def _isolated_session_events() -> Generator[None, None, None]:
    SessionEvents.clear()
    yield
    SessionEvents.clear()


@pytest.fixture
def engine() -> Generator[Engine, None, None]:
    engine = make_engine()
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine: Engine) -> Generator[Session, None, None]:
    session = sessionmaker(bind=engine, expire_on_commit=False, future=True)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def directory(db: Session) -> SimpleNamespace:
    """
    Teachers Ada and Grace both offer Guitar; learners Lin and Mo.
    Chess exists but nobody teaches it.
    """
    seeded = seed_directory(db, teachers=("Ada", "Grace"), learners=("Lin", "Mo"), skills=("Guitar",))
    unoffered = Skill(name="Chess")
    db.add(unoffered)
    db.commit()
    return SimpleNamespace(
        teacher=seeded.teachers[0],
        other_teacher=seeded.teachers[1],
        learner=seeded.learners[0],
        other_learner=seeded.learners[1],
        skill=seeded.skills[0],
        unoffered_skill=unoffered,
    )


@pytest.fixture
def client(engine: Engine) -> Generator[TestClient, None, None]:
    TestingSession = sessionmaker(bind=engine, expire_on_commit=False, future=True)

    def override_get_db() -> Generator[Session, None, None]:
        session = TestingSession()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(fastapi_app) as test_client:
            yield test_client
    finally:
        fastapi_app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def auth_headers() -> Callable[[str, str], Dict[str, str]]:
    def _headers(user_id: str, role: str) -> Dict[str, str]:
        token = create_access_token({"userId": user_id, "role": role})
        return {"Authorization": f"Bearer {token}"}

    return _headers
