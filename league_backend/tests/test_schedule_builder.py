"""
Tests for turning pairings into dated weeks, pending games and zeroed standings.
"""
from __future__ import annotations

from datetime import date, datetime

import pytest

from league_backend.models import GameStatus, Season, SeasonStatus, TeamId, TeamRef, Week
from league_backend.services.errors import InsufficientTeams, InvalidDateRange, InvalidSeasonState
from league_backend.services.schedule_builder import (
    DEFAULT_VENUE,
    assert_can_build,
    attach_created_games,
    build_season_schedule,
    validate_season_dates,
)
from league_backend.services.scheduling import round_robin_pairings


def _season(n_teams=4, status=SeasonStatus.DRAFT.value, start=date(2024, 1, 1), end=date(2024, 6, 30)):
    teams = [TeamRef(id=TeamId(f"T{i}"), name=f"Team {i}") for i in range(1, n_teams + 1)]
    return Season(id="s1", name="Spring", start_date=start, end_date=end, status=status, teams=teams)


def test_build_week_dates():
    season = _season(4)
    build = build_season_schedule(season, round_robin_pairings(season.team_ids))
    assert [w.week_number for w in build.weeks] == [1, 2, 3]
    assert [(w.start_date, w.end_date) for w in build.weeks] == [
        (date(2024, 1, 1), date(2024, 1, 7)),
        (date(2024, 1, 8), date(2024, 1, 14)),
        (date(2024, 1, 15), date(2024, 1, 21)),
    ]
    assert all(not w.is_completed for w in build.weeks)


def test_build_game_requests_pending_at_noon():
    season = _season(4)
    build = build_season_schedule(season, round_robin_pairings(season.team_ids))
    assert len(build.game_requests) == 6
    for req in build.game_requests:
        assert req.status == GameStatus.PENDING.value
        assert req.venue_name == DEFAULT_VENUE == "TBD"
        assert req.season_id == "s1"
    first = build.game_requests[0]
    assert first.scheduled_at == datetime(2024, 1, 1, 12, 0)
    assert first.home_team == TeamId("T1")
    assert first.away_team == TeamId("T4")
    assert build.game_requests[2].scheduled_at == datetime(2024, 1, 8, 12, 0)


def test_build_seeds_zeroed_standings_in_team_order():
    season = _season(5)
    build = build_season_schedule(season, round_robin_pairings(season.team_ids))
    assert list(build.standings) == season.team_ids
    for team_id, row in build.standings.items():
        assert row.team == team_id
        assert (row.games_played, row.wins, row.losses, row.ties, row.points) == (0, 0, 0, 0, 0)
        assert row.points_for == row.points_against == 0


@pytest.mark.parametrize("status", [SeasonStatus.ACTIVE.value, SeasonStatus.COMPLETED.value, SeasonStatus.CANCELLED.value])
def test_build_refused_outside_draft_and_registration(status):
    season = _season(4, status=status)
    with pytest.raises(InvalidSeasonState):
        build_season_schedule(season, round_robin_pairings(season.team_ids))


def test_build_allowed_in_registration():
    season = _season(4, status=SeasonStatus.REGISTRATION.value)
    assert_can_build(season)
    build = build_season_schedule(season, round_robin_pairings(season.team_ids))
    assert len(build.weeks) == 3


def test_build_empty_pairing_table():
    with pytest.raises(InsufficientTeams):
        build_season_schedule(_season(4), [])


def test_build_past_season_end_still_builds(caplog):
    season = _season(6, end=date(2024, 1, 10))
    build = build_season_schedule(season, round_robin_pairings(season.team_ids))
    assert len(build.weeks) == 5
    assert "past season end" in caplog.text


def test_validate_season_dates():
    with pytest.raises(InvalidDateRange):
        validate_season_dates(_season(4, start=date(2024, 2, 1), end=date(2024, 2, 1)))
    with pytest.raises(InvalidDateRange):
        validate_season_dates(_season(4, start=date(2024, 2, 1), end=date(2024, 1, 1)))
    season = _season(4)
    season.weeks = [Week(week_number=1, start_date=date(2024, 1, 7), end_date=date(2024, 1, 7))]
    with pytest.raises(InvalidDateRange):
        validate_season_dates(season)


def test_attach_created_games_in_creation_order():
    season = _season(4)
    build = build_season_schedule(season, round_robin_pairings(season.team_ids))
    ids = [f"g{i}" for i in range(len(build.game_requests))]
    attach_created_games(build.weeks, build.game_requests, ids)
    assert [w.game_ids for w in build.weeks] == [["g0", "g1"], ["g2", "g3"], ["g4", "g5"]]


def test_attach_created_games_length_mismatch():
    season = _season(4)
    build = build_season_schedule(season, round_robin_pairings(season.team_ids))
    with pytest.raises(ValueError):
        attach_created_games(build.weeks, build.game_requests, ["g0"])
