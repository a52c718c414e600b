import logging
from logging.config import fileConfig

# The app module builds its Flask app at import time; we reuse its configured db
from app import app
from models import db

from alembic import context
from sqlalchemy import engine_from_config, pool

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
logger = logging.getLogger('alembic.env')

# Migrate whichever database the app is configured for (DATABASE_URL or local SQLite)
config.set_main_option('sqlalchemy.url', str(app.config.get('SQLALCHEMY_DATABASE_URI')).replace('%', '%%'))

target_metadata = db.metadata


def run_migrations_offline() -> None:
    """Emit SQL for the letterly schema without a live connection."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations against the configured database."""
    connectable = engine_from_config(
        config.get_section(config.config_main_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite cannot ALTER constraints in place
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()
        logger.info("Migrations applied to %s", connection.dialect.name)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
