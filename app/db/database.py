# /app/db/database.py

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from ..config import DATABASE_URL
from .base_class import Base


def build_engine(database_url: str) -> Engine:
    """Creates an engine, adding the SQLite-only thread flag when needed."""
    # Worker threads of the aggregate fetch open their own connections,
    # so SQLite must not pin connections to the creating thread.
    engine_args = {"connect_args": {"check_same_thread": False}} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, **engine_args)


def build_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False keeps loaded attributes readable after the
    # session that produced them is closed.
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


engine = build_engine(DATABASE_URL)

# Each instance of this class is a database session.
SessionLocal = build_session_factory(engine)


def init_db(bind: Engine = engine) -> None:
    """Creates any missing catalog tables. Schema migrations are out of scope."""
    # Importing the registry makes sure every model is attached to Base.metadata.
    from . import base  # noqa: F401
    Base.metadata.create_all(bind=bind)


# Dependency to get a DB session. This will be used in our API routers.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_factory() -> sessionmaker:
    """Dependency providing the factory used for concurrent per-query sessions."""
    return SessionLocal
