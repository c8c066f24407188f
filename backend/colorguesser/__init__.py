from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=flask_app.config.get('CORS_ORIGINS', []))

    # Ensure models are registered on the metadata
    from colorguesser import models  # noqa: F401

    # Import and register blueprints here
    from colorguesser.main import main
    flask_app.register_blueprint(main)

    from colorguesser.api.game import game
    flask_app.register_blueprint(game, url_prefix='/api/game')

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('leaderboard-clear')
    def leaderboard_clear_command():
        """Deletes every leaderboard record."""
        from colorguesser.api.game import build_stores
        with flask_app.app_context():
            leaderboard, _ = build_stores(flask_app)
            leaderboard.clear_leaderboard()
            print('Leaderboard has been cleared!')

    @click.command('players-clear')
    def players_clear_command():
        """Empties the active players roster."""
        from colorguesser.api.game import build_stores
        with flask_app.app_context():
            _, players = build_stores(flask_app)
            players.clear_active_players()
            print('Active players have been cleared!')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(leaderboard_clear_command)
    flask_app.cli.add_command(players_clear_command)

    return flask_app
