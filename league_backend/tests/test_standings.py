"""
Tests for the standings ledger: 3/1/0 points, points for/against, unknown teams.
"""
from __future__ import annotations

from datetime import datetime

import pytest

from league_backend.models import Game, GameStatus, StandingRow, TeamId
from league_backend.services.errors import UnknownTeamInStandings
from league_backend.services.standings import apply_completion

A, B, C = TeamId("A"), TeamId("B"), TeamId("C")


def _standings(*teams):
    return {t: StandingRow(team=t) for t in teams}


def _game(home, away, home_score, away_score, game_id="g1"):
    return Game(
        id=game_id,
        season_id="s1",
        home_team=home,
        away_team=away,
        status=GameStatus.COMPLETED.value,
        scheduled_at=datetime(2024, 1, 1, 12, 0),
        home_score=home_score,
        away_score=away_score,
    )


def test_home_win():
    standings = _standings(A, B)
    home, away = apply_completion(standings, _game(A, B, 3, 1))
    assert (home.wins, home.losses, home.ties, home.points) == (1, 0, 0, 3)
    assert (away.wins, away.losses, away.ties, away.points) == (0, 1, 0, 0)
    assert (home.points_for, home.points_against) == (3, 1)
    assert (away.points_for, away.points_against) == (1, 3)
    assert home.games_played == away.games_played == 1
    assert home.differential == 2
    assert away.differential == -2


def test_away_win():
    standings = _standings(A, B)
    apply_completion(standings, _game(A, B, 0, 2))
    assert standings[B].points == 3
    assert standings[A].losses == 1


def test_tie_gives_one_point_each():
    standings = _standings(A, B)
    apply_completion(standings, _game(A, B, 2, 2))
    assert standings[A].ties == standings[B].ties == 1
    assert standings[A].points == standings[B].points == 1


def test_rows_mutated_in_place():
    standings = _standings(A, B)
    home, away = apply_completion(standings, _game(A, B, 1, 0))
    assert home is standings[A]
    assert away is standings[B]


def test_unknown_team_leaves_standings_untouched():
    standings = _standings(A, B)
    with pytest.raises(UnknownTeamInStandings) as exc:
        apply_completion(standings, _game(A, C, 1, 0, game_id="g9"))
    assert exc.value.team_id == "C"
    assert exc.value.game_id == "g9"
    assert standings[A] == StandingRow(team=A)


def test_ledger_totals_balance():
    standings = _standings(A, B, C)
    results = [(A, B, 2, 1), (B, C, 0, 0), (C, A, 4, 1), (A, B, 1, 1), (B, C, 3, 0)]
    for i, (h, a, hs, as_) in enumerate(results):
        apply_completion(standings, _game(h, a, hs, as_, game_id=f"g{i}"))
    rows = list(standings.values())
    assert sum(r.wins for r in rows) == sum(r.losses for r in rows)
    assert sum(r.ties for r in rows) % 2 == 0
    assert sum(r.points_for for r in rows) == sum(r.points_against for r in rows)
    assert sum(r.games_played for r in rows) == 2 * len(results)
    for r in rows:
        assert r.points == 3 * r.wins + r.ties
