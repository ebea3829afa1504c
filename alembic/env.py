"""Alembic migration environment for the job recruitment core."""
from __future__ import annotations

import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import engine_from_config, pool
from alembic import context

config = context.config

# Keep application loggers (structlog) alive when Alembic sets up its own.
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# Project modules live one directory up
sys.path.append(str(Path(__file__).resolve().parent.parent))

from database import SQLALCHEMY_DATABASE_URL, Base  # noqa: E402
import models  # noqa: E402,F401  # registers every table on Base.metadata

target_metadata = Base.metadata

_INI_DEFAULT_URL = "sqlite:///./job_recruitment.db"


def get_url() -> str:
    """A URL set on the Config (tests, `-x`) wins; otherwise use the app's own resolution."""
    configured = config.get_main_option("sqlalchemy.url")
    if configured and configured != _INI_DEFAULT_URL:
        return configured
    return SQLALCHEMY_DATABASE_URL


def _configure_kwargs(url: str) -> dict:
    # SQLite cannot ALTER most constraints in place
    return {
        "target_metadata": target_metadata,
        "render_as_batch": url.startswith("sqlite"),
        "compare_type": True,
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of connecting."""
    url = get_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = get_url()
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
        url=url,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs(url))

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
