# crm_backend/db/session.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from crm_backend.core.config import get_settings
from crm_backend.core.logging import get_logger
from crm_backend.db.models import Base

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """
    Creates the SQLAlchemy engine for the given URL.
    SQLite engines get cross-thread access and foreign key enforcement,
    everything else gets a pre-pinged connection pool.
    """
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(database_url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    kwargs.setdefault("pool_pre_ping", True)
    kwargs.setdefault("pool_size", 10)
    kwargs.setdefault("max_overflow", 20)
    return create_engine(database_url, **kwargs)


settings = get_settings()

# Create the SQLAlchemy engine.
engine = create_db_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Creates the customers and addresses tables if they do not exist yet."""
    Base.metadata.create_all(bind=bind)
    logger.info("Customers and addresses tables created or already exist.")


def close_db(bind: Engine = engine) -> None:
    """Releases every pooled connection held by the engine."""
    bind.dispose()
    logger.info("Database connection closed.")


# Dependency to get a DB session
def get_db():
    """
    FastAPI dependency that provides a SQLAlchemy database session.
    It ensures the session is always closed after the request is finished.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
