import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import List, Optional

from .storage import KeyValueStore, StorageError


LEADERBOARD_KEY = 'colorGuesserLeaderboard'
DEFAULT_LEADERBOARD_SIZE = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PlayerRecord:
    username: str
    total_score: int = 0
    games_played: int = 0
    best_accuracy: float = 0.0
    joined_at: str = ''

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data) -> Optional['PlayerRecord']:
        """Parse a stored entry; returns None when it is not a usable record."""
        if not isinstance(data, dict):
            return None
        username = data.get('username')
        if not isinstance(username, str) or not username:
            return None
        try:
            return cls(
                username=username,
                total_score=int(data.get('total_score') or 0),
                games_played=int(data.get('games_played') or 0),
                best_accuracy=float(data.get('best_accuracy') or 0.0),
                joined_at=str(data.get('joined_at') or ''),
            )
        except (TypeError, ValueError):
            return None


def _joined_sort_key(record: PlayerRecord) -> datetime:
    try:
        joined = datetime.fromisoformat(record.joined_at)
    except ValueError:
        return datetime.max.replace(tzinfo=timezone.utc)
    if joined.tzinfo is None:
        joined = joined.replace(tzinfo=timezone.utc)
    return joined


def sort_leaderboard(records: List[PlayerRecord]) -> List[PlayerRecord]:
    """Highest total score first; ties go to whoever joined earliest, then by name."""
    return sorted(records, key=lambda r: (-r.total_score, _joined_sort_key(r), r.username))


class LeaderboardStore:
    def __init__(self, kv: KeyValueStore, size: int = DEFAULT_LEADERBOARD_SIZE, clock=utcnow, logger=None):
        self.kv = kv
        self.size = size
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)

    def get_leaderboard(self) -> List[PlayerRecord]:
        try:
            raw = self.kv.get_item(LEADERBOARD_KEY)
            data = json.loads(raw) if raw else []
        except (StorageError, ValueError) as exc:
            self.logger.error(f"[storage] error reading leaderboard: {exc}")
            return []
        if not isinstance(data, list):
            self.logger.warning(f"[storage] leaderboard is not a list ({type(data).__name__}), ignoring")
            return []
        records = [PlayerRecord.from_dict(item) for item in data]
        return [r for r in records if r is not None]

    def save_leaderboard(self, records: List[PlayerRecord]) -> None:
        try:
            self.kv.set_item(LEADERBOARD_KEY, json.dumps([r.to_dict() for r in records]))
        except StorageError as exc:
            self.logger.error(f"[storage] error saving leaderboard: {exc}")

    def update_player_stats(self, username: str, score: int, accuracy: float) -> List[PlayerRecord]:
        """Add a round's points and accuracy to a player's record.

        Creates the record on the player's first round. The board is re-sorted
        and cut down to the top ``size`` players before it is saved.
        """
        leaderboard = self.get_leaderboard()
        player = next((p for p in leaderboard if p.username == username), None)
        if player:
            player.total_score += score
            player.games_played += 1
            player.best_accuracy = max(player.best_accuracy, accuracy)
        else:
            player = PlayerRecord(
                username=username,
                total_score=score,
                games_played=1,
                best_accuracy=accuracy,
                joined_at=self.clock().isoformat(),
            )
            leaderboard.append(player)

        top_players = sort_leaderboard(leaderboard)[:self.size]
        self.save_leaderboard(top_players)
        return top_players

    def get_player_stats(self, username: str) -> Optional[PlayerRecord]:
        return next((p for p in self.get_leaderboard() if p.username == username), None)

    def clear_leaderboard(self) -> None:
        try:
            self.kv.remove_item(LEADERBOARD_KEY)
        except StorageError as exc:
            self.logger.error(f"[storage] error clearing leaderboard: {exc}")
