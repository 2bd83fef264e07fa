"""Alembic environment for the artist events schema.

The target URL is ``sqlalchemy.url`` when the caller sets one on the Alembic
config (tests do), otherwise ``settings.DATABASE_URL``. ``backend/`` is put on
``sys.path`` by ``prepend_sys_path`` in alembic.ini.
"""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from app.config import settings
from app.database import Base, enable_sqlite_foreign_keys

# Registered on Base.metadata for autogenerate.
from app.models.event import Event  # noqa: F401
from app.models.rsvp import EventRSVP  # noqa: F401
from app.models.notification import Notification  # noqa: F401

config = context.config

# Callers that already configured logging (e.g. the test suite) pass
# configure_logger=False so fileConfig does not disable their loggers.
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name)


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or settings.DATABASE_URL


def _configure_options(url: str) -> dict:
    # SQLite cannot ALTER most constraints in place; batch mode recreates the table.
    return {
        "target_metadata": Base.metadata,
        "compare_type": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    url = _database_url()
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = _database_url()
    engine = create_engine(url, poolclass=pool.NullPool)
    if url.startswith("sqlite"):
        enable_sqlite_foreign_keys(engine)

    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **_configure_options(url))
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
