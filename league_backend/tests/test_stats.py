"""
Tests for player stat aggregation: one appearance per player per game, counters per event.
"""
from __future__ import annotations

from datetime import datetime

import pytest

from league_backend.models import EventType, Game, GameEvent, GameStatus, PlayerId, PlayerStatLine, TeamId
from league_backend.services.errors import InvalidGameState
from league_backend.services.stats import apply_incremental_event, recompute_on_completion

HOME, AWAY = TeamId("home"), TeamId("away")
P1, P2 = PlayerId("p1"), PlayerId("p2")


def _game(events=(), status=GameStatus.COMPLETED.value, game_id="g1"):
    return Game(
        id=game_id,
        season_id="s1",
        home_team=HOME,
        away_team=AWAY,
        status=status,
        scheduled_at=datetime(2024, 1, 1, 12, 0),
        events=list(events),
    )


def _event(type_, player=P1, team=HOME, minute=10):
    return GameEvent(type=type_.value, player=player, team=team, minute=minute)


def test_hat_trick_and_assist_counts_one_appearance():
    game = _game([
        _event(EventType.GOAL),
        _event(EventType.GOAL, minute=30),
        _event(EventType.ASSIST, minute=50),
        _event(EventType.GOAL, minute=80),
    ])
    lines = {}
    touched = recompute_on_completion(game, lines)
    line = lines[P1]
    assert (line.games_played, line.goals, line.assists) == (1, 3, 1)
    assert list(touched) == [P1]
    assert game.credited_players == {P1}


def test_cards_and_other_events():
    game = _game([
        _event(EventType.YELLOW_CARD),
        _event(EventType.RED_CARD, minute=60),
        _event(EventType.SUBSTITUTION, player=P2, team=AWAY),
        _event(EventType.PENALTY, player=P2, team=AWAY),
        _event(EventType.OWN_GOAL, player=P2, team=AWAY),
    ])
    lines = {}
    recompute_on_completion(game, lines)
    assert (lines[P1].yellow_cards, lines[P1].red_cards) == (1, 1)
    p2 = lines[P2]
    assert p2.games_played == 1
    assert (p2.goals, p2.assists, p2.yellow_cards, p2.red_cards) == (0, 0, 0, 0)


def test_existing_lines_accumulate_across_games():
    lines = {P1: PlayerStatLine(player=P1, games_played=4, goals=2)}
    recompute_on_completion(_game([_event(EventType.GOAL)]), lines)
    recompute_on_completion(_game([_event(EventType.GOAL)], game_id="g2"), lines)
    assert (lines[P1].games_played, lines[P1].goals) == (6, 4)


def test_players_without_events_untouched():
    lines = {P2: PlayerStatLine(player=P2, games_played=3)}
    touched = recompute_on_completion(_game([_event(EventType.GOAL)]), lines)
    assert P2 not in touched
    assert lines[P2].games_played == 3


def test_incremental_event_credits_new_player_once():
    game = _game([_event(EventType.GOAL)])
    lines = {}
    recompute_on_completion(game, lines)
    late = _event(EventType.ASSIST, player=P2, minute=90)
    game.events.append(late)
    apply_incremental_event(game, late, lines)
    another = _event(EventType.GOAL, player=P2, minute=91)
    game.events.append(another)
    apply_incremental_event(game, another, lines)
    assert (lines[P2].games_played, lines[P2].assists, lines[P2].goals) == (1, 1, 1)


def test_incremental_event_for_credited_player_no_extra_appearance():
    game = _game([_event(EventType.GOAL)])
    lines = {}
    recompute_on_completion(game, lines)
    late = _event(EventType.GOAL, minute=95)
    game.events.append(late)
    touched = apply_incremental_event(game, late, lines)
    assert touched[P1].games_played == 1
    assert touched[P1].goals == 2


def test_incremental_and_recompute_agree():
    events = [
        _event(EventType.GOAL),
        _event(EventType.ASSIST, player=P2, team=AWAY),
        _event(EventType.GOAL, minute=70),
    ]
    full = {}
    recompute_on_completion(_game(events), full)

    incremental = {}
    game = _game(events[:1])
    recompute_on_completion(game, incremental)
    for e in events[1:]:
        game.events.append(e)
        apply_incremental_event(game, e, incremental)
    assert incremental == full


def test_incremental_requires_completed_game():
    game = _game(status=GameStatus.IN_PROGRESS.value)
    with pytest.raises(InvalidGameState):
        apply_incremental_event(game, _event(EventType.GOAL), {})
