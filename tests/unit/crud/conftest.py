"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel

from postdraft.crud import models  # noqa: F401
from postdraft.crud.posts import SQLPostRepository


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="sql_repo")
def sql_repo_fixture(engine) -> SQLPostRepository:
    return SQLPostRepository(engine)
