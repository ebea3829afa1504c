from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from database import Base
import models  # noqa: F401  # register tables on Base.metadata

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def alembic_config(database_url: str) -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def test_upgrade_matches_models_and_downgrade_drops_everything(tmp_path):
    # 1. Arrange
    database_url = f"sqlite:///{tmp_path / 'migrations.db'}"
    cfg = alembic_config(database_url)
    engine = create_engine(database_url)

    try:
        # 2. Act: migrate a blank database to head
        command.upgrade(cfg, "head")

        # 3. Assert: same tables and columns as the models declare
        inspector = inspect(engine)
        migrated_tables = set(inspector.get_table_names()) - {"alembic_version"}
        assert migrated_tables == set(Base.metadata.tables)

        for table_name, table in Base.metadata.tables.items():
            migrated_columns = {column["name"] for column in inspector.get_columns(table_name)}
            assert migrated_columns == set(table.columns.keys()), table_name

        unique_constraints = {
            constraint["name"] for constraint in inspector.get_unique_constraints("question_responses")
        }
        assert "uq_question_responses_application_question" in unique_constraints

        # Back down to an empty schema
        command.downgrade(cfg, "base")
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
