import logging
import re
from typing import Any, Dict, List, Sequence

from sqlalchemy import create_engine, text
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import Session, sessionmaker
from app.core.config import settings

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
    }


# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **_engine_kwargs(settings.DATABASE_URL))

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()

# $1, $2, ... as written in the SQL of the CRUD layer
_POSITIONAL_PARAM = re.compile(r"\$(\d+)")


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def run_query(db: Session, sql: str, values: Sequence[Any] = ()) -> List[Dict[str, Any]]:
    """
    Execute SQL written with positional placeholders and return rows as dicts.

    Placeholders are PostgreSQL-style ($1, $2, ...) and are bound by position
    to `values`, so callers never format values into the SQL text. They are
    rewritten to SQLAlchemy named binds (:p1, :p2, ...) before execution,
    which keeps the statements portable to SQLite for tests.

    Args:
        db: Database session
        sql: Statement text
        values: Values for $1..$n, in order

    Returns:
        List of row dicts keyed by column label (empty if the statement
        returns no rows)
    """
    params = {f"p{idx}": value for idx, value in enumerate(values, start=1)}
    statement = text(_POSITIONAL_PARAM.sub(r":p\1", sql))

    logger.debug("Executing query with %d bound value(s)", len(params))
    result = db.execute(statement, params)

    if not result.returns_rows:
        return []
    return [dict(row) for row in result.mappings()]


def init_db():
    """
    Initialize database.

    Imports the models so they register on Base.metadata. Tables are only
    created here when AUTO_CREATE_TABLES is enabled; otherwise the schema
    is expected to exist already.
    """
    from app.models import company, job  # noqa: F401  Import models to register them

    if settings.AUTO_CREATE_TABLES:
        logger.info("Creating database tables")
        Base.metadata.create_all(bind=engine)
