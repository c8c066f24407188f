import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///colorguesser.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Frontend dev servers allowed to call the API
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',') if o.strip()
    ]
    # Leaderboard keeps only the top N players
    LEADERBOARD_SIZE = int(os.environ.get('LEADERBOARD_SIZE', '10'))
    # Guesses at or above this accuracy extend the streak
    STREAK_THRESHOLD = float(os.environ.get('STREAK_THRESHOLD', '80'))
    # Bonus per streak level beyond the first (0.10 = +10%)
    STREAK_BONUS_STEP = float(os.environ.get('STREAK_BONUS_STEP', '0.10'))
    USERNAME_MAX_LENGTH = int(os.environ.get('USERNAME_MAX_LENGTH', '20'))
    # Default canvas size (px) of the color wheel when a click omits it
    WHEEL_SIZE = int(os.environ.get('WHEEL_SIZE', '200'))
    # Fixed seed for target colors (tests, demos); unset means random
    RANDOM_SEED = int(os.environ['RANDOM_SEED']) if os.environ.get('RANDOM_SEED') else None
