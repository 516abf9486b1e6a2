"""
Deterministic round-robin schedule generation for a season.

Round-robin is used so every team plays every other team exactly once; season length
is N-1 weeks (N even) or N weeks (N odd). Each team plays at most one game per week.

BYE handling: when the number of teams is odd, we add a virtual BYE slot. Each week one
team is paired with BYE and sits out; that pairing is not emitted as a matchup.

Uses the circle method: fix slot 0, rotate the others one position each week. Same team
list ordering yields the same schedule. The lower slot index of a pair is home.
"""
from __future__ import annotations

from typing import Any, Sequence

from league_backend.models import Matchup, TeamId
from league_backend.services.errors import InsufficientTeams

# Sentinel slot for the bye when the number of teams is odd
BYE = None

PairingTable = list[list[Matchup]]


def expected_week_count(team_count: int) -> int:
    """N-1 weeks for even N, N weeks for odd N."""
    if team_count < 2:
        return 0
    return team_count - 1 if team_count % 2 == 0 else team_count


def round_robin_pairings(team_ids: Sequence[TeamId]) -> PairingTable:
    """
    Generate round-robin pairings as one list of matchups per week.
    Raises InsufficientTeams for fewer than 2 teams or duplicated ids.
    Deterministic: same team list => same schedule.
    """
    ids: list[TeamId | None] = list(team_ids)
    if len(ids) < 2:
        raise InsufficientTeams(f"At least 2 teams are required to generate a schedule (got {len(ids)})")
    if len(set(ids)) != len(ids):
        raise InsufficientTeams("Team list contains duplicates; a team cannot be scheduled against itself")
    if len(ids) % 2 == 1:
        ids.append(BYE)
    n = len(ids)  # n is even
    table: PairingTable = []
    # Circle method: indices 0..n-1. Fix 0, rotate 1..n-1 each week.
    # Week 0: pair (0, n-1), (1, n-2), (2, n-3), ...
    # Week 1: order becomes [0, n-1, 1, 2, ..., n-2]
    order = list(range(n))
    for _ in range(n - 1):
        week: list[Matchup] = []
        for i in range(n // 2):
            home_id = ids[order[i]]
            away_id = ids[order[n - 1 - i]]
            if home_id is BYE or away_id is BYE:
                continue
            week.append(Matchup(home=home_id, away=away_id))
        table.append(week)
        order = [order[0]] + [order[n - 1]] + order[1 : n - 1]
    return table


def generate_league_schedule(team_ids: Sequence[TeamId]) -> list[dict[str, Any]]:
    """
    Return a flat list of fixtures: { "week_number": int, "home_team_id": str, "away_team_id": str }.
    Byes are omitted. Deterministic; no duplicate matchups; max one game per team per week.
    """
    return [
        {"week_number": w, "home_team_id": m.home.value, "away_team_id": m.away.value}
        for w, week in enumerate(round_robin_pairings(team_ids), start=1)
        for m in week
    ]
