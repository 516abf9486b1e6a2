"""
Turns a pairing table into dated weeks, pending game payloads and zeroed standings.
Pure: the caller owns game creation and persistence. Regeneration requires the caller
to delete the season's games and clear its weeks first.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Sequence

from league_backend.models import (
    GameCreateRequest,
    Season,
    SeasonStatus,
    StandingRow,
    TeamId,
    TeamRef,
    Week,
)
from league_backend.services.errors import InsufficientTeams, InvalidDateRange, InvalidSeasonState
from league_backend.services.scheduling import PairingTable

logger = logging.getLogger(__name__)

WEEK_LENGTH = timedelta(days=7)
DEFAULT_VENUE = "TBD"
# Provisional kickoff until a venue/time is assigned: local noon on the week's first day
PROVISIONAL_KICKOFF = time(12, 0)

# Only these statuses may have a schedule (re)built
_BUILDABLE_STATUSES = {SeasonStatus.DRAFT.value, SeasonStatus.REGISTRATION.value}


@dataclass
class ScheduleBuild:
    """Output of build_season_schedule. game_requests are in creation order."""
    weeks: list[Week]
    game_requests: list[GameCreateRequest]
    standings: dict[TeamId, StandingRow]


def assert_can_build(season: Season) -> None:
    """Raise InvalidSeasonState unless the season is draft or registration."""
    if season.status not in _BUILDABLE_STATUSES:
        raise InvalidSeasonState(
            f"Cannot generate schedule for season {season.id}: status is {season.status}"
        )


def validate_season_dates(season: Season) -> None:
    """Season must end after it starts; every week must end after it starts."""
    if season.end_date <= season.start_date:
        raise InvalidDateRange(
            f"Season end date {season.end_date} must be after start date {season.start_date}"
        )
    for week in season.weeks:
        if week.end_date <= week.start_date:
            raise InvalidDateRange(f"Week {week.week_number} end date must be after start date")


def seed_standings(teams: Sequence[TeamRef]) -> dict[TeamId, StandingRow]:
    """One zeroed row per team, in team order."""
    return {t.id: StandingRow(team=t.id) for t in teams}


def build_season_schedule(season: Season, pairing_table: PairingTable) -> ScheduleBuild:
    """
    Build weeks k=0.. with start = season start + 7k days, end = start + 6 days
    (7 days minus one, at date resolution), one pending game request per matchup,
    and a fresh standings set.
    """
    assert_can_build(season)
    if not pairing_table:
        raise InsufficientTeams("Pairing table is empty; at least 2 teams are required")
    weeks: list[Week] = []
    requests: list[GameCreateRequest] = []
    for k, matchups in enumerate(pairing_table):
        week_start = season.start_date + k * WEEK_LENGTH
        week_end = week_start + WEEK_LENGTH - timedelta(days=1)
        week = Week(week_number=k + 1, start_date=week_start, end_date=week_end)
        weeks.append(week)
        kickoff = datetime.combine(week_start, PROVISIONAL_KICKOFF)
        for m in matchups:
            requests.append(
                GameCreateRequest(
                    season_id=season.id,
                    week_number=week.week_number,
                    home_team=m.home,
                    away_team=m.away,
                    scheduled_at=kickoff,
                    venue_name=DEFAULT_VENUE,
                )
            )
    if weeks[-1].end_date > season.end_date:
        logger.warning(
            "Season %s schedule runs to %s, past season end %s",
            season.id, weeks[-1].end_date, season.end_date,
        )
    return ScheduleBuild(weeks=weeks, game_requests=requests, standings=seed_standings(season.teams))


def attach_created_games(
    weeks: list[Week],
    requests: Sequence[GameCreateRequest],
    created_ids: Sequence[str],
) -> None:
    """Append each created game id to its request's week, in creation order."""
    if len(requests) != len(created_ids):
        raise ValueError(
            f"Expected {len(requests)} created game ids, got {len(created_ids)}"
        )
    by_number = {w.week_number: w for w in weeks}
    for req, game_id in zip(requests, created_ids):
        by_number[req.week_number].game_ids.append(game_id)
