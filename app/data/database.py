# app/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from app.utils.settings import DATABASE_URL, DB_ECHO, DB_POOL_SIZE

Base = declarative_base()


def build_engine(url: str, **kwargs) -> Engine:
    """
    PostgreSQL in production, SQLite for dev and tests.
    SQLite needs foreign keys switched on per connection for RESTRICT/CASCADE.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        kwargs.setdefault("pool_size", DB_POOL_SIZE)
        kwargs.setdefault("pool_pre_ping", True)

    engine = create_engine(url, echo=DB_ECHO, **kwargs)

    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_fk)

    return engine


def _enable_sqlite_fk(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    """One session per request, closed after the response."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
