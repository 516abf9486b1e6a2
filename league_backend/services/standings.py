"""
Standings ledger: applies one completed game to the season's standings rows.

Scoring rule is fixed: win 3, tie 1, loss 0. The caller guarantees exactly-once
application at the non-completed -> completed transition; nothing here detects
a second application of the same game.
"""
from __future__ import annotations

from typing import MutableMapping

from league_backend.models import Game, StandingRow, TeamId
from league_backend.services.errors import UnknownTeamInStandings

WIN_POINTS = 3
TIE_POINTS = 1
LOSS_POINTS = 0


def apply_completion(standings: MutableMapping[TeamId, StandingRow], game: Game) -> tuple[StandingRow, StandingRow]:
    """
    Add the game's result to the home and away rows. Returns (home_row, away_row).
    Raises UnknownTeamInStandings before mutating anything if either team has no row.
    """
    home = standings.get(game.home_team)
    if home is None:
        raise UnknownTeamInStandings(game.home_team.value, game.id)
    away = standings.get(game.away_team)
    if away is None:
        raise UnknownTeamInStandings(game.away_team.value, game.id)

    home.games_played += 1
    away.games_played += 1
    home.points_for += game.home_score
    home.points_against += game.away_score
    away.points_for += game.away_score
    away.points_against += game.home_score

    if game.home_score > game.away_score:
        home.wins += 1
        away.losses += 1
        home.points += WIN_POINTS
        away.points += LOSS_POINTS
    elif game.away_score > game.home_score:
        away.wins += 1
        home.losses += 1
        away.points += WIN_POINTS
        home.points += LOSS_POINTS
    else:
        home.ties += 1
        away.ties += 1
        home.points += TIE_POINTS
        away.points += TIE_POINTS
    return home, away
