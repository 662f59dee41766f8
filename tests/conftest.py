import os

import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

load_dotenv(os.path.join(os.getcwd(), ".env"))

from app import models  # noqa: E402,F401
from app.db import Base, get_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import SUPER_PRIVILEGE, Group, User  # noqa: E402
from app.services.events import events  # noqa: E402
from app.services.passwords import hash_password  # noqa: E402

TEST_PASSWORD = "correct horse"


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture(autouse=True)
def _clear_event_handlers():
    yield
    events.clear()


@pytest.fixture()
def make_user(db_session):
    def _make_user(username, privileges=None, groups=None, email=None, name=None, password=TEST_PASSWORD):
        user = User(
            username=username,
            name=name or username.title(),
            email=email if email is not None else f"{username}@example.com",
            password_hash=hash_password(password),
            privileges=dict(privileges or {}),
            parameters={"usergroups": list(groups or [])},
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture()
def make_group(db_session):
    def _make_group(title, privileges):
        group = Group(title=title, privileges=list(privileges))
        db_session.add(group)
        db_session.commit()
        db_session.refresh(group)
        return group

    return _make_group


@pytest.fixture()
def super_user(make_user):
    return make_user("root", privileges={SUPER_PRIVILEGE: True}, name="Root Admin")


@pytest.fixture()
def regular_user(make_user):
    return make_user("jdoe", privileges={"panopticon.view": True}, name="Jane Doe")


@pytest.fixture()
def client(db_session):
    def _get_db_override():
        yield db_session

    app.dependency_overrides[get_db] = _get_db_override
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        app.state.site_connection_checker = None


@pytest.fixture()
def login(client):
    def _login(username, password=TEST_PASSWORD):
        response = client.post(
            "/login",
            data={"username": username, "password": password},
            follow_redirects=False,
        )
        assert response.status_code == 303
        return response

    return _login
