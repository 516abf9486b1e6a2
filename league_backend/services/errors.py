"""
Error kinds raised by the season engine.
The API maps these to HTTP status codes; nothing here wraps storage exceptions.
"""
from __future__ import annotations


class SeasonEngineError(ValueError):
    """Base class for rule violations reported by the engine."""


class InsufficientTeams(SeasonEngineError):
    """Fewer than 2 distinct teams at schedule generation time."""


class DuplicateTeam(SeasonEngineError):
    """A team registered more than once in the same season."""


class InvalidDateRange(SeasonEngineError):
    """Season end <= start, or a week ending on/before its start."""


class InvalidSeasonState(SeasonEngineError):
    """Operation not allowed in the season's current status (e.g. regenerate while active)."""


class UnknownTeamInStandings(SeasonEngineError):
    """A game references a team with no standings row: upstream data-integrity failure."""

    def __init__(self, team_id: str, game_id: str) -> None:
        super().__init__(f"Team {team_id} from game {game_id} has no standings row")
        self.team_id = team_id
        self.game_id = game_id


class InvalidGameState(SeasonEngineError):
    """Game status does not allow the requested operation."""


class InvalidEvent(SeasonEngineError):
    """Event payload inconsistent with its game (wrong team, minute out of range)."""


class NotFoundError(LookupError):
    """Season, game or player stat line not found."""
