import random

import pytest

from colorguesser.services.game.colors import Color
from colorguesser.services.game.session import (
    AwaitingGuess,
    GameSession,
    OutsideWheelError,
    RoundStateError,
    ShowingResult,
    clean_username,
)


def guess_target(session):
    return session.submit_color(session.round.target)


def test_fresh_session_has_no_player(session):
    assert session.current_player is None
    assert session.players == []
    assert isinstance(session.round, AwaitingGuess)


def test_load_picks_first_active_player(leaderboard, roster):
    roster.add_active_player('alice')
    roster.add_active_player('bob')
    session = GameSession(leaderboard, roster, rng=random.Random(1)).load()
    assert session.current_player == 'alice'
    assert session.turn_index == 0
    assert session.next_up == 'bob'


def test_guess_requires_player(session):
    with pytest.raises(RoundStateError):
        guess_target(session)


def test_exact_guess_scores_and_records(session):
    session.join('alice')
    result = guess_target(session)
    assert isinstance(result, ShowingResult)
    assert result.accuracy == 100
    assert result.points_earned == 100
    assert result.streak == 1
    assert session.current_score == 100
    stats = session.leaderboard.get_player_stats('alice')
    assert (stats.total_score, stats.games_played, stats.best_accuracy) == (100, 1, 100)


def test_cannot_guess_twice_in_a_round(session):
    session.join('alice')
    guess_target(session)
    with pytest.raises(RoundStateError):
        session.submit_color(Color(0, 0, 0))


def test_single_player_keeps_streak_across_rounds(session):
    session.join('alice')
    first = guess_target(session)
    session.next_round()
    assert session.current_player == 'alice'
    assert isinstance(session.round, AwaitingGuess)
    result = guess_target(session)
    assert result.streak == 2
    assert result.points_earned == 110
    assert session.current_score == first.points_earned + 110


def test_miss_resets_streak(session):
    session.join('alice')
    guess_target(session)
    session.next_round()
    target = session.round.target
    opposite = Color(255 - target.r, 255 - target.g, 255 - target.b)
    result = session.submit_color(opposite)
    assert result.accuracy < 80
    assert result.streak == 0
    assert session.streak == 0


def test_turns_rotate_and_reset_streak(session):
    session.join('alice')
    guess_target(session)
    session.join('bob')
    assert session.current_player == 'bob'
    assert session.turn_index == 1
    assert session.streak == 0
    guess_target(session)
    session.next_round()
    assert session.current_player == 'alice'
    assert session.turn_index == 0
    assert session.streak == 0
    assert session.current_score == 100
    session.next_round()
    assert session.current_player == 'bob'


def test_rejoining_current_player_keeps_streak(session):
    session.join('alice')
    guess_target(session)
    session.join(' alice ')
    assert session.players == ['alice']
    assert session.streak == 1
    assert isinstance(session.round, AwaitingGuess)


def test_join_keeps_target(session):
    target = session.round.target
    session.join('alice')
    assert session.round.target == target


def test_join_caps_username(session):
    session.join('  ' + 'x' * 25)
    assert session.current_player == 'x' * 20
    assert clean_username('  bob  ') == 'bob'


def test_blank_join_switches_player(session):
    session.join('alice')
    session.join('   ')
    assert session.current_player is None
    assert session.players == ['alice']


def test_switch_player(session):
    session.join('alice')
    guess_target(session)
    session.switch_player()
    assert session.current_player is None
    assert session.current_score == 0
    assert isinstance(session.round, AwaitingGuess)


def test_remove_player_adjusts_turn(session):
    for name in ('a', 'b', 'c'):
        session.join(name)
    assert session.turn_index == 2
    session.remove_player('c')
    assert session.players == ['a', 'b']
    assert session.turn_index == 0
    assert session.current_player == 'a'
    session.remove_player('a')
    assert session.current_player == 'b'
    session.remove_player('b')
    assert session.players == []
    assert session.current_player is None
    assert session.turn_index == 0


def test_click_outside_wheel(session):
    session.join('alice')
    with pytest.raises(OutsideWheelError):
        session.submit_click(0, 0, 200)
    assert isinstance(session.round, AwaitingGuess)


def test_click_on_centre_selects_white(session):
    session.join('alice')
    result = session.submit_click(100, 100, 200)
    assert result.selected == Color(255, 255, 255)


def test_score_loaded_when_player_returns(session):
    session.join('alice')
    guess_target(session)
    session.switch_player()
    session.join('alice')
    assert session.current_score == 100


def test_snapshot(session):
    session.join('alice')
    session.join('bob')
    guess_target(session)
    snap = session.snapshot()
    assert snap['players'] == ['alice', 'bob']
    assert snap['current_player'] == 'bob'
    assert snap['next_up'] == 'alice'
    assert snap['round']['stage'] == 'showing_result'
    assert snap['round']['badge']['text'] == 'Perfect!'
    assert snap['leaderboard'][0]['username'] == 'bob'
    assert snap['leaderboard'][0]['ranking_badge'] == 'ranking-gold'
    assert snap['leaderboard'][0]['is_current'] is True


def _near_miss(target):
    # 100 away in one channel: about 77% accurate
    r = target.r - 100 if target.r >= 100 else target.r + 100
    return Color(r, target.g, target.b)


def test_achievements_follow_configured_threshold(leaderboard, roster):
    session = GameSession(leaderboard, roster, rng=random.Random(5), streak_threshold=70).load()
    session.join('alice')
    for i in range(3):
        if i:
            session.next_round()
        result = session.submit_color(_near_miss(session.round.target))
        assert 70 <= result.accuracy < 80
    assert result.streak == 3
    assert 'On fire! 3 great guesses in a row!' in session.snapshot()['round']['achievements']
