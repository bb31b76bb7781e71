import sqlite3

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.types import String, TypeDecorator

from scorebook import db
from scorebook.services.games.dates import parse_stored_date, to_stored


@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite only enforces REFERENCES when asked to, per connection
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


class StoredDate(TypeDecorator):
    """Game timestamps kept as text so older rows written in other layouts stay readable."""
    impl = String(64)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return to_stored(value)

    def process_result_value(self, value, dialect):
        return parse_stored_date(value)


class Game(db.Model):
    __tablename__ = 'games'
    __table_args__ = {'sqlite_autoincrement': True}
    id = db.Column(db.Integer, primary_key=True)
    game_date = db.Column(StoredDate(), index=True)
    game_type = db.Column(db.String(32), nullable=True, index=True)


class Player(db.Model):
    __tablename__ = 'players'
    __table_args__ = {'sqlite_autoincrement': True}
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.Text, unique=True, nullable=False)


class Score(db.Model):
    __tablename__ = 'scores'
    __table_args__ = {'sqlite_autoincrement': True}
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('games.id', ondelete='CASCADE'), nullable=False, index=True)
    player_id = db.Column(db.Integer, db.ForeignKey('players.id'), nullable=False)
    # Total-only variants
    total = db.Column(db.Integer, nullable=True)
    # Component breakdown; every column is independently nullable
    legacy_score = db.Column(db.Integer, nullable=True)
    base_cards = db.Column(db.Integer, nullable=True)
    extra_vp = db.Column(db.Integer, nullable=True)
    basic_events = db.Column(db.Integer, nullable=True)
    special_events = db.Column(db.Integer, nullable=True)
    prosperity_cards = db.Column(db.Integer, nullable=True)
    visitors = db.Column(db.Integer, nullable=True)
    journey = db.Column(db.Integer, nullable=True)
    garland_award = db.Column(db.Integer, nullable=True)
