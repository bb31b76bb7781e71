from flask import current_app
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError

from scorebook import db
from scorebook.errors import SchemaError


def ensure_schema() -> None:
    """Create the games, players and scores tables when absent, then verify them.

    Safe to call on every start. Tables that already exist are left alone, so
    a database created before a column was introduced fails the column check;
    ``flask --app scorebook db upgrade`` brings it up to date.
    Must run inside an application context.
    """
    # Registers the tables on db.metadata
    from scorebook import models  # noqa: F401

    try:
        db.create_all()
        inspector = inspect(db.engine)
        missing = []
        for table in db.metadata.sorted_tables:
            existing = {c['name'] for c in inspector.get_columns(table.name)}
            missing.extend(f"{table.name}.{c.name}" for c in table.columns if c.name not in existing)
    except SQLAlchemyError as exc:
        current_app.logger.error(f"[schema] failed to create tables: {exc}")
        raise SchemaError(f"Could not create database schema: {exc}") from exc

    if missing:
        current_app.logger.error(f"[schema] missing columns: {', '.join(missing)}")
        raise SchemaError(
            f"Database schema is out of date (missing {', '.join(missing)}); "
            "run 'flask --app scorebook db upgrade'"
        )
    current_app.logger.info('[schema] database initialized successfully')
