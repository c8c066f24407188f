"""Key-value text storage backing the leaderboard and the roster.

``SQLKeyValueStore`` keeps values in the ``stored_value`` table;
``MemoryKeyValueStore`` keeps them in a dict and is used by tests and by
callers that do not need durability.
"""

from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from colorguesser.models import StoredValue


class StorageError(Exception):
    pass


class KeyValueStore:
    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key):
        return self._data.get(key)

    def set_item(self, key, value):
        self._data[key] = value

    def remove_item(self, key):
        self._data.pop(key, None)


class SQLKeyValueStore(KeyValueStore):
    """Stores values through the Flask-SQLAlchemy session.

    Must be used inside an application context. Database failures roll the
    session back and surface as ``StorageError``.
    """

    def __init__(self, db):
        self.db = db

    def get_item(self, key):
        try:
            row = self.db.session.get(StoredValue, key)
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise StorageError(f'read failed for {key!r}: {exc}') from exc
        return row.value if row else None

    def set_item(self, key, value):
        try:
            row = self.db.session.get(StoredValue, key)
            if row:
                row.value = value
            else:
                row = StoredValue(key=key, value=value)
            self.db.session.add(row)
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise StorageError(f'write failed for {key!r}: {exc}') from exc

    def remove_item(self, key):
        try:
            StoredValue.query.filter_by(key=key).delete()
            self.db.session.commit()
        except SQLAlchemyError as exc:
            self.db.session.rollback()
            raise StorageError(f'delete failed for {key!r}: {exc}') from exc
