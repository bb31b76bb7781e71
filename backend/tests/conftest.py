import os
import sys
import pytest

# Ensure the backend root (containing the `scorebook` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scorebook import create_app, db
from scorebook.schema import ensure_schema


class TestConfig:
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SUPPORTED_VARIANTS = 'everdell,root'
    DEFAULT_VARIANT = 'everdell'
    CORS_ORIGINS = 'http://localhost:5173'
    LOG_LEVEL = 'DEBUG'
    MIGRATIONS_DIR = os.path.join(BACKEND_ROOT, 'migrations')


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        ensure_schema()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def row_counts(flask_app):
    """Callable returning (games, players, scores) row counts."""
    from scorebook.models import Game, Player, Score

    def _counts():
        return (
            db.session.query(Game).count(),
            db.session.query(Player).count(),
            db.session.query(Score).count(),
        )
    return _counts
