import json
import logging
from typing import Iterable, List, Optional

from .storage import KeyValueStore, StorageError


ACTIVE_PLAYERS_KEY = 'colorGuesserActivePlayers'


def unique_usernames(players: Optional[Iterable]) -> List[str]:
    """Keep non-blank strings, first occurrence wins."""
    seen = set()
    result = []
    for p in players or []:
        if isinstance(p, str) and p.strip() and p not in seen:
            seen.add(p)
            result.append(p)
    return result


class ActivePlayersStore:
    """Turn order of the players in the current session, persisted."""

    def __init__(self, kv: KeyValueStore, logger=None):
        self.kv = kv
        self.logger = logger or logging.getLogger(__name__)

    def get_active_players(self) -> List[str]:
        try:
            raw = self.kv.get_item(ACTIVE_PLAYERS_KEY)
            data = json.loads(raw) if raw else []
        except (StorageError, ValueError) as exc:
            self.logger.error(f"[storage] error reading active players: {exc}")
            return []
        return unique_usernames(data) if isinstance(data, list) else []

    def save_active_players(self, players: Iterable[str]) -> None:
        try:
            self.kv.set_item(ACTIVE_PLAYERS_KEY, json.dumps(unique_usernames(players)))
        except StorageError as exc:
            self.logger.error(f"[storage] error saving active players: {exc}")

    def add_active_player(self, username: Optional[str]) -> List[str]:
        trimmed = (username or '').strip()
        if not trimmed:
            return self.get_active_players()
        players = self.get_active_players()
        if trimmed not in players:
            players.append(trimmed)
        self.save_active_players(players)
        return players

    def remove_active_player(self, username: Optional[str]) -> List[str]:
        trimmed = (username or '').strip()
        players = [p for p in self.get_active_players() if p != trimmed]
        self.save_active_players(players)
        return players

    def clear_active_players(self) -> None:
        try:
            self.kv.remove_item(ACTIVE_PLAYERS_KEY)
        except StorageError as exc:
            self.logger.error(f"[storage] error clearing active players: {exc}")
