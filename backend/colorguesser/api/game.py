import random

from flask import Blueprint, jsonify, request, current_app
from colorguesser import db
from colorguesser.services.game.colors import Color
from colorguesser.services.game.leaderboard import LeaderboardStore
from colorguesser.services.game.players import ActivePlayersStore
from colorguesser.services.game.scoring import ranking_badge
from colorguesser.services.game.session import GameSession, OutsideWheelError, RoundStateError
from colorguesser.services.game.storage import SQLKeyValueStore


game = Blueprint('game', __name__)

SESSION_EXTENSION = 'colorguesser_session'


def build_stores(app):
    kv = SQLKeyValueStore(db)
    leaderboard = LeaderboardStore(kv, size=int(app.config.get('LEADERBOARD_SIZE', 10)), logger=app.logger)
    players = ActivePlayersStore(kv, logger=app.logger)
    return leaderboard, players


def get_session() -> GameSession:
    """The app's single game session, created and loaded on first use."""
    app = current_app._get_current_object()
    session = app.extensions.get(SESSION_EXTENSION)
    if session is None:
        leaderboard, players = build_stores(app)
        cfg = app.config
        seed = cfg.get('RANDOM_SEED')
        session = GameSession(
            leaderboard,
            players,
            rng=random.Random(seed) if seed is not None else None,
            streak_threshold=float(cfg.get('STREAK_THRESHOLD', 80)),
            streak_bonus_step=float(cfg.get('STREAK_BONUS_STEP', 0.10)),
            username_max_length=int(cfg.get('USERNAME_MAX_LENGTH', 20)),
            logger=app.logger,
        ).load()
        app.extensions[SESSION_EXTENSION] = session
    return session


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@game.route('/state', methods=['GET'])
def get_state():
    return jsonify(get_session().snapshot())


@game.route('/join', methods=['POST'])
def join():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    username = data.get('username')
    if not isinstance(username, str) or not username.strip():
        return jsonify({'error': 'Username is required'}), 400
    session = get_session()
    session.join(username)
    return jsonify(session.snapshot())


@game.route('/switch', methods=['POST'])
def switch_player():
    session = get_session()
    session.switch_player()
    return jsonify(session.snapshot())


@game.route('/guess', methods=['POST'])
def submit_guess():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    session = get_session()
    try:
        if 'color' in data:
            if not isinstance(data['color'], dict):
                return jsonify({'error': 'color must be an object with r, g and b'}), 400
            try:
                color = Color.from_dict(data['color'])
            except ValueError as exc:
                return jsonify({'error': str(exc)}), 400
            session.submit_color(color)
        else:
            x, y = data.get('x'), data.get('y')
            size = data.get('size', current_app.config.get('WHEEL_SIZE', 200))
            if not all(_is_number(v) for v in (x, y, size)):
                return jsonify({'error': 'x, y and size must be numbers'}), 400
            try:
                session.submit_click(x, y, size)
            except ValueError as exc:
                return jsonify({'error': str(exc)}), 400
    except OutsideWheelError as exc:
        return jsonify({'error': str(exc)}), 400
    except RoundStateError as exc:
        return jsonify({'error': str(exc)}), 409
    return jsonify(session.snapshot())


@game.route('/next', methods=['POST'])
def next_round():
    session = get_session()
    session.next_round()
    return jsonify(session.snapshot())


@game.route('/players/remove', methods=['POST'])
def remove_player():
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'error': 'Request body must be a JSON object'}), 400
    username = data.get('username')
    if not isinstance(username, str) or not username.strip():
        return jsonify({'error': 'Username is required'}), 400
    session = get_session()
    session.remove_player(username)
    return jsonify(session.snapshot())


@game.route('/leaderboard', methods=['GET'])
def get_leaderboard():
    return jsonify(get_session().leaderboard_payload())


@game.route('/leaderboard', methods=['DELETE'])
def clear_leaderboard():
    session = get_session()
    session.leaderboard.clear_leaderboard()
    current_app.logger.info("[leaderboard] cleared")
    return jsonify({'message': 'Leaderboard cleared'})


@game.route('/players/<string:username>/stats', methods=['GET'])
def get_player_stats(username):
    store = get_session().leaderboard
    record = store.get_player_stats(username)
    if not record:
        return jsonify({'error': 'Player not found'}), 404
    position = [p.username for p in store.get_leaderboard()].index(username) + 1
    return jsonify(dict(record.to_dict(), rank=position, ranking_badge=ranking_badge(position)))
