import pytest
import os
from pathlib import Path
from sqlalchemy.orm import sessionmaker

# --- Alembic Imports ---
from alembic.config import Config
from alembic import command
# --- End Alembic Imports ---

# Import database components needed for setup
from database import Base, build_engine
import models  # noqa: F401  # register tables on Base.metadata

PROJECT_ROOT = Path(__file__).resolve().parent
TEST_DATABASE_URL = "sqlite:///./job-recruitment-test.db"

test_engine = build_engine(TEST_DATABASE_URL)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def _remove_database_files(db_path: str) -> None:
    for path in (db_path, f"{db_path}-wal", f"{db_path}-shm"):
        if os.path.exists(path):
            try:
                os.unlink(path)
                print(f"Removed test database file: {path}")
            except OSError as e:
                print(f"Error removing test database file {path}: {e}")


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create the test database from models and stamp with Alembic head."""
    db_path = TEST_DATABASE_URL.split("///")[-1]
    _remove_database_files(db_path)

    print(f"Creating test database tables from models at {db_path}")
    # --- Create schema directly from models --- #
    Base.metadata.create_all(bind=test_engine)
    # --- End schema creation --- #

    print("Stamping database with Alembic head revision")
    # --- Stamp the database with the latest Alembic revision --- #
    alembic_cfg = Config(str(PROJECT_ROOT / "alembic.ini"))  # Load base config
    alembic_cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", TEST_DATABASE_URL)  # Point to test DB
    command.stamp(alembic_cfg, "head")  # Mark DB as up-to-date
    # --- End Alembic stamp --- #

    yield  # Tests run here

    test_engine.dispose()
    _remove_database_files(db_path)


@pytest.fixture
def session_factory(setup_test_database):
    """Session factory for tests that need more than one connection (e.g. one per thread)."""
    return TestSessionLocal


@pytest.fixture(scope="function")  # Function scope for session
def db_session(setup_test_database):  # Depends on DB setup
    """Yields a SQLAlchemy session directly from the test factory.

    Every table is emptied afterwards so tests never see each other's rows
    (id sequences included).
    """
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        for table in reversed(Base.metadata.sorted_tables):
            session.execute(table.delete())
        session.commit()
        session.close()
