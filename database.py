import os
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from settings import get_settings


def _build_database_url() -> str:
    """Determine the SQLAlchemy DB URL using settings/env vars with sensible fallbacks."""
    configured = get_settings().database_url
    if configured:
        return configured

    host = os.getenv("DB_HOST")
    if host:
        user = os.getenv("DB_USER", "postgres")
        password = os.getenv("DB_PASSWORD", "")
        port = os.getenv("DB_PORT", "5432")
        name = os.getenv("DB_NAME", "postgres")
        return f"postgresql://{user}:{password}@{host}:{port}/{name}"

    # Default to local SQLite file for simple local development
    return "sqlite:///./job_recruitment.db"


def build_engine(url: str):
    """Create an engine, applying the SQLite-only connect args and pragmas."""
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)

    sqlite_engine = create_engine(
        url,
        connect_args={
            "check_same_thread": False,
            "timeout": 15,
        },
        pool_pre_ping=True,
    )

    @event.listens_for(sqlite_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        # Transactions are opened explicitly by the "begin" hook below
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL;")
            cursor.execute("PRAGMA busy_timeout = 5000")
            cursor.execute("PRAGMA synchronous=NORMAL;")
            cursor.execute("PRAGMA foreign_keys=ON;")
        finally:
            cursor.close()

    @event.listens_for(sqlite_engine, "begin")
    def begin_immediate(conn):
        # Take the write lock up front; SQLite ignores SELECT ... FOR UPDATE
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return sqlite_engine


SQLALCHEMY_DATABASE_URL = _build_database_url()

engine = build_engine(SQLALCHEMY_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def create_db_and_tables():
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
