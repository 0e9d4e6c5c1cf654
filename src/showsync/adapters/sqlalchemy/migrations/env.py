"""Alembic environment for the showsync catalog schema."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from alembic import context
from sqlalchemy import create_engine, pool

from showsync.adapters.sqlalchemy import mapper_registry, start_mappers
from showsync.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config

log = logging.getLogger("alembic.env")

start_mappers()


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _migrate(*, connection: Connection | None = None, url: str | None = None) -> None:
    # batch mode so column changes work on SQLite
    context.configure(
        connection=connection,
        url=url,
        target_metadata=mapper_registry.metadata,
        literal_binds=connection is None,
        render_as_batch=True,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    shared = config.attributes.get("connection")
    if shared is not None:
        _migrate(connection=shared)
        return

    url = _database_url()
    log.debug("Migrating catalog at %s", url)
    engine = create_engine(url, poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _migrate(connection=connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    _migrate(url=_database_url())
else:
    run_migrations_online()
