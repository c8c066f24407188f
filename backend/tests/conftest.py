import os
import sys
import random
import pytest

# Ensure the backend root (containing the `colorguesser` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from colorguesser import create_app, db
from colorguesser.services.game.leaderboard import LeaderboardStore
from colorguesser.services.game.players import ActivePlayersStore
from colorguesser.services.game.session import GameSession
from colorguesser.services.game.storage import MemoryKeyValueStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:5173']
    LEADERBOARD_SIZE = 10
    STREAK_THRESHOLD = 80
    STREAK_BONUS_STEP = 0.10
    USERNAME_MAX_LENGTH = 20
    WHEEL_SIZE = 200
    RANDOM_SEED = 1234


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def kv():
    return MemoryKeyValueStore()


@pytest.fixture()
def leaderboard(kv):
    return LeaderboardStore(kv)


@pytest.fixture()
def roster(kv):
    return ActivePlayersStore(kv)


@pytest.fixture()
def session(leaderboard, roster):
    return GameSession(leaderboard, roster, rng=random.Random(42)).load()
