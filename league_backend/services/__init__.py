"""
Service layer: scheduling, standings and stat aggregation.
Pure modules (scheduling, schedule_builder, standings, ranking, game_events, stats)
do no I/O; season_service orchestrates persistence.
"""
from .errors import (
    SeasonEngineError,
    InsufficientTeams,
    DuplicateTeam,
    InvalidDateRange,
    InvalidSeasonState,
    UnknownTeamInStandings,
    InvalidGameState,
    InvalidEvent,
    NotFoundError,
)
from .scheduling import round_robin_pairings, generate_league_schedule
from .schedule_builder import build_season_schedule, attach_created_games
from .standings import apply_completion
from .ranking import RankedStanding, rank_standings
from .game_events import record_event
from .stats import recompute_on_completion, apply_incremental_event
from .season_service import SeasonService

__all__ = [
    "SeasonEngineError",
    "InsufficientTeams",
    "DuplicateTeam",
    "InvalidDateRange",
    "InvalidSeasonState",
    "UnknownTeamInStandings",
    "InvalidGameState",
    "InvalidEvent",
    "NotFoundError",
    "round_robin_pairings",
    "generate_league_schedule",
    "build_season_schedule",
    "attach_created_games",
    "apply_completion",
    "RankedStanding",
    "rank_standings",
    "record_event",
    "recompute_on_completion",
    "apply_incremental_event",
    "SeasonService",
]
