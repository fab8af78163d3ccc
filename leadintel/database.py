from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from leadintel.config import settings

_engine: Engine | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        db_path = settings.sqlite_path
        if db_path is not None:
            db_path.parent.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            settings.database_url,
            echo=False,
            connect_args={"check_same_thread": False},
        )
    return _engine


def init_db(engine: Engine | None = None) -> None:
    SQLModel.metadata.create_all(engine or get_engine())


def get_session(engine: Engine | None = None) -> Session:
    return Session(engine or get_engine())
