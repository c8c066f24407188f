from datetime import datetime, timezone

from colorguesser import db


def _utcnow():
    return datetime.now(timezone.utc)


class StoredValue(db.Model):
    """A text value under a fixed string key (the game's local storage)."""
    __tablename__ = 'stored_value'
    key = db.Column(db.String(128), primary_key=True)
    value = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
