from typing import List, NamedTuple

from .colors import round_half_up


DEFAULT_STREAK_THRESHOLD = 80.0
DEFAULT_STREAK_BONUS_STEP = 0.10


class ScoreResult(NamedTuple):
    points_earned: int
    streak: int


class Badge(NamedTuple):
    text: str
    class_name: str


def score_guess(
    accuracy: float,
    streak: int,
    threshold: float = DEFAULT_STREAK_THRESHOLD,
    bonus_step: float = DEFAULT_STREAK_BONUS_STEP,
) -> ScoreResult:
    """Apply scoring for a single guess.

    Base points are the rounded accuracy. A guess at or above the threshold
    extends the streak; from the second consecutive hit onwards the points get
    a bonus of ``bonus_step`` per streak level beyond the first. A guess below
    the threshold resets the streak.
    """
    points = round_half_up(accuracy)
    if accuracy >= threshold:
        streak += 1
        if streak > 1:
            points = round_half_up(points * (1 + bonus_step * (streak - 1)))
    else:
        streak = 0
    return ScoreResult(points, streak)


def accuracy_badge(accuracy: float) -> Badge:
    if accuracy >= 95:
        return Badge('Perfect!', 'accuracy-perfect')
    if accuracy >= 85:
        return Badge('Excellent', 'accuracy-excellent')
    if accuracy >= 70:
        return Badge('Great', 'accuracy-great')
    if accuracy >= 50:
        return Badge('Good', 'accuracy-good')
    return Badge('Keep Trying', 'accuracy-poor')


def ranking_badge(position: int) -> str:
    # position is 1-based
    return {1: 'ranking-gold', 2: 'ranking-silver', 3: 'ranking-bronze'}.get(position, 'ranking-default')


def achievements(accuracy: float, streak: int, threshold: float = DEFAULT_STREAK_THRESHOLD) -> List[str]:
    messages = []
    if accuracy >= 95:
        messages.append('Perfect match! Amazing color vision!')
    if streak >= 3 and accuracy >= threshold:
        messages.append(f'On fire! {streak} great guesses in a row!')
    return messages
