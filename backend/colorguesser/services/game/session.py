"""Game state for one play session: roster, turn order and the current round."""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Union

from .colors import Color, calculate_color_similarity, generate_random_color, pixel_to_color
from .leaderboard import LeaderboardStore
from .players import ActivePlayersStore
from .scoring import (
    DEFAULT_STREAK_BONUS_STEP,
    DEFAULT_STREAK_THRESHOLD,
    accuracy_badge,
    achievements,
    ranking_badge,
    score_guess,
)


DEFAULT_USERNAME_MAX_LENGTH = 20


class GameError(Exception):
    pass


class RoundStateError(GameError):
    pass


class OutsideWheelError(GameError):
    pass


@dataclass(frozen=True)
class AwaitingGuess:
    target: Color
    stage = 'awaiting_guess'

    def to_dict(self):
        return {'stage': self.stage, 'target': self.target.to_dict()}


@dataclass(frozen=True)
class ShowingResult:
    target: Color
    selected: Color
    accuracy: float
    points_earned: int
    streak: int
    threshold: float = DEFAULT_STREAK_THRESHOLD
    stage = 'showing_result'

    def to_dict(self):
        badge = accuracy_badge(self.accuracy)
        return {
            'stage': self.stage,
            'target': self.target.to_dict(),
            'selected': self.selected.to_dict(),
            'accuracy': round(self.accuracy, 1),
            'points_earned': self.points_earned,
            'streak': self.streak,
            'badge': {'text': badge.text, 'class_name': badge.class_name},
            'achievements': achievements(self.accuracy, self.streak, threshold=self.threshold),
        }


RoundState = Union[AwaitingGuess, ShowingResult]


def clean_username(username: Optional[str], max_length: int = DEFAULT_USERNAME_MAX_LENGTH) -> str:
    return (username or '').strip()[:max_length].strip()


class GameSession:
    def __init__(
        self,
        leaderboard: LeaderboardStore,
        players: ActivePlayersStore,
        rng=None,
        streak_threshold: float = DEFAULT_STREAK_THRESHOLD,
        streak_bonus_step: float = DEFAULT_STREAK_BONUS_STEP,
        username_max_length: int = DEFAULT_USERNAME_MAX_LENGTH,
        logger=None,
    ):
        self.leaderboard = leaderboard
        self.players_store = players
        self.rng = rng or random.Random()
        self.streak_threshold = streak_threshold
        self.streak_bonus_step = streak_bonus_step
        self.username_max_length = username_max_length
        self.logger = logger or logging.getLogger(__name__)

        self.players: List[str] = []
        self.turn_index = 0
        self.current_player: Optional[str] = None
        self.current_score = 0
        self.streak = 0
        self.round: RoundState = AwaitingGuess(generate_random_color(self.rng))

    def load(self) -> 'GameSession':
        self.players = self.players_store.get_active_players()
        self.turn_index = 0
        self._set_current_player(self.players[0] if self.players else None, force=True)
        self.round = AwaitingGuess(self.round.target)
        return self

    def _set_current_player(self, username: Optional[str], force: bool = False) -> None:
        if username == self.current_player and not force:
            return
        self.current_player = username
        self.streak = 0
        if username:
            stats = self.leaderboard.get_player_stats(username)
            self.current_score = stats.total_score if stats else 0
        else:
            self.current_score = 0

    def _reset_round(self, new_target: bool = False) -> None:
        target = generate_random_color(self.rng) if new_target else self.round.target
        self.round = AwaitingGuess(target)

    def join(self, username: Optional[str]) -> None:
        name = clean_username(username, self.username_max_length)
        if not name:
            self.switch_player()
            return
        self.players = self.players_store.add_active_player(name)
        self._set_current_player(name)
        self.turn_index = self.players.index(name)
        self._reset_round()
        self.logger.info(f"[join] player={name} roster={self.players} turn={self.turn_index}")

    def switch_player(self) -> None:
        self._set_current_player(None)
        self._reset_round()

    def submit_click(self, px: float, py: float, size: float) -> ShowingResult:
        color = pixel_to_color(px, py, size)
        if color is None:
            raise OutsideWheelError('Click is outside the color wheel')
        return self.submit_color(color)

    def submit_color(self, color: Color) -> ShowingResult:
        if not self.current_player:
            raise RoundStateError('Join the game before guessing')
        if not isinstance(self.round, AwaitingGuess):
            raise RoundStateError('This round already has a result')

        target = self.round.target
        accuracy = calculate_color_similarity(target, color)
        points, self.streak = score_guess(
            accuracy, self.streak, threshold=self.streak_threshold, bonus_step=self.streak_bonus_step
        )
        self.round = ShowingResult(
            target=target,
            selected=color,
            accuracy=accuracy,
            points_earned=points,
            streak=self.streak,
            threshold=self.streak_threshold,
        )
        self.leaderboard.update_player_stats(self.current_player, points, accuracy)
        self.current_score += points
        self.logger.info(
            f"[guess] player={self.current_player} target={target.hex} selected={color.hex} "
            f"accuracy={accuracy:.1f} points={points} streak={self.streak}"
        )
        return self.round

    def next_round(self) -> None:
        if len(self.players) <= 1:
            self._reset_round(new_target=True)
            return
        self.turn_index = (self.turn_index + 1) % len(self.players)
        self._set_current_player(self.players[self.turn_index])
        self._reset_round(new_target=True)
        self.logger.info(f"[turn] player={self.current_player} turn={self.turn_index + 1}/{len(self.players)}")

    def remove_player(self, username: Optional[str]) -> None:
        self.players = self.players_store.remove_active_player(username)
        if not self.players:
            self._set_current_player(None)
            self.turn_index = 0
        else:
            self.turn_index = self.turn_index % len(self.players)
            self._set_current_player(self.players[self.turn_index])
        self.logger.info(f"[remove] player={username} roster={self.players} current={self.current_player}")

    @property
    def next_up(self) -> Optional[str]:
        if len(self.players) <= 1:
            return None
        return self.players[(self.turn_index + 1) % len(self.players)]

    def leaderboard_payload(self):
        return [
            dict(record.to_dict(), rank=position, ranking_badge=ranking_badge(position),
                 is_current=record.username == self.current_player)
            for position, record in enumerate(self.leaderboard.get_leaderboard(), start=1)
        ]

    def snapshot(self):
        return {
            'players': list(self.players),
            'current_player': self.current_player,
            'turn_index': self.turn_index,
            'next_up': self.next_up,
            'current_score': self.current_score,
            'streak': self.streak,
            'round': self.round.to_dict(),
            'leaderboard': self.leaderboard_payload(),
        }
