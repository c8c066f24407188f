"""Game domain services: color math, scoring, storage and session state.

This package contains the core game mechanics. HTTP routes import it; the
only database-aware piece is ``storage.SQLKeyValueStore``, which goes
through the Flask-SQLAlchemy session. Everything else is plain Python.
"""
