from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

from postdraft.crud import models  # noqa: F401  registers the posts table


def make_engine(db_url: str) -> Engine:
    return create_engine(db_url, echo=False)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


def reset_db(engine: Engine) -> None:
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
