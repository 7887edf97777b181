"""Alembic environment: migrates the database named by workhub's DATABASE_URL."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy.pool import NullPool

from workhub.core.config import settings
from workhub.core.database import build_engine

# Importing the package registers users, single_use_tokens, workspaces and
# workspace_memberships on Base.metadata.
from workhub.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = build_engine(settings.DATABASE_URL, poolclass=NullPool)
    with connectable.connect() as connection:
        # SQLite cannot ALTER constraints in place; batch mode recreates the table.
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
