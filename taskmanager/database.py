from contextlib import contextmanager

from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool, StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .config import DATABASE_URL

# Models must be imported so their tables are on SQLModel.metadata
from .models import Task, User  # noqa: F401


def create_db_engine(url: str):
    """Engine for ``url``.

    In-memory SQLite lives inside a single connection, so every session has to
    share it. Server databases get no pooling and a pre-ping, which suits
    short-lived serverless workers.
    """
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return create_engine(url, echo=False, **options)

    return create_engine(url, echo=False, pool_pre_ping=True, poolclass=NullPool)


engine = create_db_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, class_=Session)


def get_db():
    """Request-scoped session for FastAPI dependencies."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_session():
    """Same as ``get_db`` for scripts: ``with get_session() as db: ...``"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    """Create any missing tables on ``bind``, the app engine by default."""
    SQLModel.metadata.create_all(bind=bind or engine)
