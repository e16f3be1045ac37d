"""Shared fixtures: in-memory and file-backed databases, services and seeded users."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from campusqa.config.settings import Settings
from campusqa.db.base import Base
from campusqa.db.init_db import init_db
from campusqa.db.session import configure_sqlite_engine, create_engine_from_settings
from campusqa.services.base.service_factory import ServiceFactory


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite_engine(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def config():
    return Settings(ENFORCE_ROLE_CHECKS=True, LOG_LEVEL="DEBUG")


@pytest.fixture
def services(db, config):
    return ServiceFactory(db, config)


@pytest.fixture
def users(services):
    """
    alex and sam are reviewers, maan and riya are students, stella is
    staff and ivan is an instructor.
    """
    user_service = services.users()
    for username, roles in [
        ("alex", ["student", "reviewer"]),
        ("sam", ["reviewer"]),
        ("maan", ["student"]),
        ("riya", ["student"]),
        ("stella", ["staff"]),
        ("ivan", ["instructor"]),
    ]:
        assert user_service.register_user(username, roles).is_success
    return user_service


@pytest.fixture
def review_service(services, users):
    return services.reviews()


@pytest.fixture
def trust_service(services, users):
    return services.trust()


@pytest.fixture
def flag_service(services, users):
    return services.flags()


# ---------------------------------------------------------------------------
# File-backed database shared by independent connections
# ---------------------------------------------------------------------------


@pytest.fixture
def file_engine(tmp_path):
    """
    SQLite file database with a real connection pool, so each session
    holds its own connection and SQLite locking applies between them.
    """
    engine = create_engine_from_settings(
        f"sqlite:///{tmp_path / 'campusqa.db'}",
        connect_args={"check_same_thread": False, "timeout": 5},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_session_factory(file_engine):
    return sessionmaker(bind=file_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def open_config():
    return Settings(ENFORCE_ROLE_CHECKS=False, LOG_LEVEL="DEBUG")


@pytest.fixture
def two_sessions(file_session_factory):
    first, second = file_session_factory(), file_session_factory()
    yield first, second
    first.close()
    second.close()
