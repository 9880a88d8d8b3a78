import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.security import create_access_token
from app.crud import user as crud_user
from app.db import Base
from app.main import app
from app.schemas.user import StaffUserCreate


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role="TEACHER", name=None, is_active=True):
        counter["n"] += 1
        user_in = StaffUserCreate(
            name=name or f"{role.title()} {counter['n']}",
            email=f"user{counter['n']}@school.test",
            password="secret123",
            role=role,
        )
        user = crud_user.create_user(db, user_in, created_by="tests")
        if not is_active:
            user = crud_user.set_user_active(db, user, False)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = create_access_token(user.id, user.role)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
