from flask import Blueprint, current_app, jsonify, request
from typing import Optional, Tuple
from datetime import datetime

from scorebook import db
from scorebook.errors import ScorebookError, UnknownVariant, ValidationError
from scorebook.services.games.codec import Variant
from scorebook.services.games.dates import parse_submitted_date
from scorebook.services.games.repository import GameRepository


games = Blueprint('games', __name__)

GAME_METHODS = ['GET', 'POST', 'PUT', 'DELETE']


@games.errorhandler(ScorebookError)
def handle_scorebook_error(exc: ScorebookError):
    if exc.status_code >= 500:
        current_app.logger.error(f"[api] {request.method} {request.path} failed: {exc.message}")
    else:
        current_app.logger.warning(f"[api] {request.method} {request.path} rejected: {exc.message}")
    return jsonify({'error': exc.message}), exc.status_code


def _open_repository() -> GameRepository:
    settings = current_app.extensions['scorebook']
    return GameRepository(db.session, default_variant=settings['default_variant'])


def _resolve_variant(variant_name: Optional[str]) -> Variant:
    settings = current_app.extensions['scorebook']
    if variant_name is None:
        return settings['default_variant']
    try:
        variant = Variant(variant_name.lower())
    except ValueError:
        raise UnknownVariant(variant_name) from None
    if variant not in settings['variants']:
        raise UnknownVariant(variant_name)
    return variant


def _parse_game_id(raw) -> int:
    if raw is None or str(raw).strip() == '':
        raise ValidationError('Missing game ID')
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ValidationError('Invalid game ID') from None


def _parse_submission(variant: Variant) -> Tuple[datetime, list]:
    """Read date and player scores from a JSON or form-encoded body."""
    codec = variant.codec
    if request.is_json:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValidationError('Invalid request payload')
        raw_date = payload.get('date', payload.get('game_date'))
        entries = codec.decode_json(payload)
    else:
        raw_date = request.form.get('date')
        entries = codec.decode_form(request.form)
    return parse_submitted_date(raw_date), entries


@games.route('/games', methods=GAME_METHODS)
@games.route('/<string:variant_name>/games', methods=GAME_METHODS)
def variant_games(variant_name=None):
    variant = _resolve_variant(variant_name)

    if request.method == 'GET':
        with _open_repository() as repo:
            records = repo.list_games(variant)
        return jsonify([record.to_dict() for record in records])

    if request.method == 'POST':
        game_date, entries = _parse_submission(variant)
        with _open_repository() as repo:
            game_id = repo.create_game(game_date, variant, entries)
        return jsonify({'gameId': game_id}), 201

    game_id = _parse_game_id(request.args.get('id'))
    if request.method == 'PUT':
        return _update_game(variant, game_id)
    return _delete_game(variant, game_id)


@games.route('/games/<game_id>', methods=['GET', 'PUT', 'DELETE'])
@games.route('/<string:variant_name>/games/<game_id>', methods=['GET', 'PUT', 'DELETE'])
def variant_game(game_id, variant_name=None):
    variant = _resolve_variant(variant_name)
    game_id = _parse_game_id(game_id)

    if request.method == 'PUT':
        return _update_game(variant, game_id)
    if request.method == 'DELETE':
        return _delete_game(variant, game_id)

    with _open_repository() as repo:
        record = repo.get_game(game_id, variant)
    return jsonify(record.to_dict())


def _update_game(variant: Variant, game_id: int):
    game_date, entries = _parse_submission(variant)
    with _open_repository() as repo:
        repo.update_game(game_id, game_date, variant, entries)
    return jsonify({'message': f'Game {game_id} updated'}), 200


def _delete_game(variant: Variant, game_id: int):
    with _open_repository() as repo:
        repo.delete_game(game_id, variant)
    return jsonify({'message': f'Game {game_id} deleted'}), 200
