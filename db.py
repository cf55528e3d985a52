# db.py
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from config import settings
from config.database import engine_options
from db_base import Base  # <- import Base from separate module


# ---------- Engine & Session ----------

def create_db_engine(url: str | None = None, *, echo: bool | None = None) -> Engine:
    """Build an engine for `url` (defaults to settings.DATABASE_URL)."""
    url = url or settings.DATABASE_URL
    return create_engine(
        url,
        echo=settings.DEBUG if echo is None else echo,
        future=True,
        **engine_options(url),
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


# ---------- Schema helper ----------

def init_db(engine: Engine) -> None:
    """
    Create tables from ORM metadata.

    Storage is process-local by default, so the schema is created on every
    application start.
    """
    # Import models so they are registered on Base.metadata
    import db_models  # noqa: F401

    Base.metadata.create_all(bind=engine)
