from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.orm import Session

from jobly.config import get_settings
from jobly.db import Base, get_engine
from jobly.main import app
from jobly.models import CompanyRecord, JobRecord


def make_token(username: str, *, is_admin: bool) -> str:
    settings = get_settings()
    return jwt.encode(
        {"username": username, "isAdmin": is_admin},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


@pytest.fixture(autouse=True)
def reset_api_caches() -> Iterator[None]:
    get_settings.cache_clear()
    get_engine.cache_clear()
    yield
    get_settings.cache_clear()
    get_engine.cache_clear()


@pytest.fixture
def engine(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    sqlite_db_path = tmp_path / "api-tests.db"
    monkeypatch.setenv("JOBLY_DATABASE_URL", f"sqlite+pysqlite:///{sqlite_db_path}")
    monkeypatch.setenv("JOBLY_DB_ECHO", "false")
    monkeypatch.setenv("JOBLY_SECRET_KEY", "test-secret")

    engine = get_engine()
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded_jobs(engine) -> dict[str, int]:
    with Session(engine) as session:
        session.add_all(
            [
                CompanyRecord(handle="c1", name="C1"),
                CompanyRecord(handle="c2", name="C2"),
            ]
        )
        accountant = JobRecord(title="accountant", salary=50000, equity=0.2, company_handle="c1")
        clerk = JobRecord(title="clerk", salary=40000, equity=0, company_handle="c2")
        session.add_all([accountant, clerk])
        session.commit()
        return {"accountant": accountant.id, "clerk": clerk.id}


@pytest.fixture
def client(engine, seeded_jobs) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(engine) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token('admin', is_admin=True)}"}


@pytest.fixture
def user_headers(engine) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token('u1', is_admin=False)}"}
