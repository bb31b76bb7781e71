"""Transactional persistence for game aggregates.

A game aggregate is one ``games`` row, its ``scores`` rows and the
``players`` rows they point at. Every public method runs in exactly one
transaction: it commits on success and rolls back before any error leaves
the method, so no half-written game is ever visible to another reader.
"""
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List, Optional, Sequence

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from scorebook.errors import DataIntegrityError, GameNotFound, StoreError
from scorebook.models import Game, Player, Score
from scorebook.services.games.codec import ScoreCodec, ScoreEntry, Variant
from scorebook.services.games.dates import format_date

# Dialects that can express "insert unless the name already exists" in one statement
_INSERT_IF_ABSENT = {
    'sqlite': sqlite_insert,
    'postgresql': postgresql_insert,
}


@dataclass
class GameRecord:
    id: int
    game_date: datetime
    variant: Variant
    scores: List[ScoreEntry] = field(default_factory=list)

    def to_dict(self):
        codec = self.variant.codec
        return {
            'id': self.id,
            'game_type': self.variant.value,
            'game_date': format_date(self.game_date),
            'scores': [codec.encode(score) for score in self.scores],
        }


class GameRepository:
    """Create, read, replace and delete games through one SQLAlchemy session.

    Rows whose ``game_type`` is NULL predate the variant column and are
    treated as ``default_variant``. Use as a context manager to release the
    session when done.
    """

    def __init__(self, session, default_variant: Variant = Variant.EVERDELL):
        self._session = session
        self._default_variant = default_variant

    def __enter__(self) -> 'GameRepository':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    @contextmanager
    def _transaction(self, action: str) -> Iterator[None]:
        try:
            yield
            self._session.commit()
        except Exception as exc:
            self._session.rollback()
            if isinstance(exc, SQLAlchemyError):
                current_app.logger.error(f"[{action}] store error, rolled back: {exc}")
                raise StoreError(f"Failed to {action} game") from exc
            raise

    def _scope(self, query, variant: Optional[Variant]):
        if variant is None:
            return query
        if variant == self._default_variant:
            return query.filter(or_(Game.game_type == variant.value, Game.game_type.is_(None)))
        return query.filter(Game.game_type == variant.value)

    def _variant_of(self, game_type: Optional[str]) -> Variant:
        if game_type is None:
            return self._default_variant
        try:
            return Variant(game_type)
        except ValueError:
            raise DataIntegrityError(f"Unknown game type stored: {game_type!r}") from None

    # ------------------------------------------------------------------
    # Players and scores
    # ------------------------------------------------------------------

    def _find_player_id(self, name: str) -> Optional[int]:
        return self._session.query(Player.id).filter(Player.name == name).scalar()

    def _resolve_player(self, name: str) -> int:
        """Return the id of the player called *name*, creating the row if needed.

        Two writers may both miss the lookup and race to insert the same new
        name. The unique constraint lets one win; the other re-reads the
        winner's row. If the re-read finds nothing, the insert conflicted on
        something other than the name and the error stands.
        """
        player_id = self._find_player_id(name)
        if player_id is not None:
            return player_id

        insert = _INSERT_IF_ABSENT.get(self._session.get_bind().dialect.name)
        if insert is not None:
            stmt = insert(Player.__table__).values(name=name).on_conflict_do_nothing(index_elements=['name'])
            created = self._session.execute(stmt).rowcount == 1
        else:
            created = True
            try:
                with self._session.begin_nested():
                    self._session.add(Player(name=name))
            except IntegrityError:
                created = False
                if self._find_player_id(name) is None:
                    raise

        player_id = self._find_player_id(name)
        if player_id is None:
            raise StoreError(f"Could not resolve player '{name}'")
        if created:
            current_app.logger.info(f"[player] created name={name!r} id={player_id}")
        else:
            current_app.logger.info(f"[player] name={name!r} created concurrently, reusing id={player_id}")
        return player_id

    def _insert_scores(self, game_id: int, codec: ScoreCodec, entries: Sequence[ScoreEntry]) -> None:
        for entry in entries:
            player_id = self._resolve_player(entry.player_name)
            columns = {f.column: entry.values.get(f.name) for f in codec.fields}
            self._session.add(Score(game_id=game_id, player_id=player_id, **columns))
        self._session.flush()

    def _load_scores(self, game_id: int, codec: ScoreCodec) -> List[ScoreEntry]:
        rows = (
            self._session.query(Score, Player.name)
            .join(Player, Score.player_id == Player.id)
            .filter(Score.game_id == game_id)
            .order_by(Score.id)
            .all()
        )
        return [
            ScoreEntry(player_name=name, values={f.name: getattr(score, f.column) for f in codec.fields})
            for score, name in rows
        ]

    def _to_record(self, game: Game) -> GameRecord:
        variant = self._variant_of(game.game_type)
        return GameRecord(
            id=game.id,
            game_date=game.game_date,
            variant=variant,
            scores=self._load_scores(game.id, variant.codec),
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create_game(self, game_date: datetime, variant: Optional[Variant],
                    entries: Sequence[ScoreEntry]) -> int:
        codec = (variant or self._default_variant).codec
        with self._transaction('create'):
            game = Game(game_date=game_date, game_type=variant.value if variant else None)
            self._session.add(game)
            self._session.flush()
            game_id = game.id
            self._insert_scores(game_id, codec, entries)
        current_app.logger.info(
            f"[create] game={game_id} variant={variant.value if variant else None} players={len(entries)}"
        )
        return game_id

    def list_games(self, variant: Optional[Variant] = None) -> List[GameRecord]:
        """All games of *variant* (every game when None), newest first, scores included."""
        with self._transaction('list'):
            query = self._scope(self._session.query(Game), variant)
            games = query.order_by(Game.game_date.desc(), Game.id.desc()).all()
            records = [self._to_record(game) for game in games]
        current_app.logger.info(f"[list] variant={variant.value if variant else None} count={len(records)}")
        return records

    def get_game(self, game_id: int, variant: Optional[Variant] = None) -> GameRecord:
        with self._transaction('get'):
            game = self._scope(self._session.query(Game).filter(Game.id == game_id), variant).first()
            if game is None:
                raise GameNotFound(game_id, variant)
            record = self._to_record(game)
        return record

    def update_game(self, game_id: int, game_date: datetime, variant: Optional[Variant],
                    entries: Sequence[ScoreEntry]) -> None:
        """Replace the date and the whole score set of a game."""
        with self._transaction('update'):
            updated = self._scope(self._session.query(Game).filter(Game.id == game_id), variant).update(
                {Game.game_date: game_date}, synchronize_session=False
            )
            if updated == 0:
                raise GameNotFound(game_id, variant)
            if variant is None:
                variant = self._variant_of(
                    self._session.query(Game.game_type).filter(Game.id == game_id).scalar()
                )
            removed = self._session.query(Score).filter(Score.game_id == game_id).delete(synchronize_session=False)
            self._insert_scores(game_id, variant.codec, entries)
        current_app.logger.info(f"[update] game={game_id} replaced={removed} players={len(entries)}")

    def delete_game(self, game_id: int, variant: Optional[Variant] = None) -> None:
        with self._transaction('delete'):
            removed = self._session.query(Score).filter(Score.game_id == game_id).delete(synchronize_session=False)
            deleted = self._scope(self._session.query(Game).filter(Game.id == game_id), variant).delete(
                synchronize_session=False
            )
            if deleted == 0:
                raise GameNotFound(game_id, variant)
        current_app.logger.info(f"[delete] game={game_id} scores={removed}")
