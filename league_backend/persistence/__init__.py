"""
Persistence layer for seasons, games, standings and player stat lines.
No business logic: only read/write interfaces.
"""
from .db import get_connection, init_db
from .repositories import (
    SeasonRepository,
    StandingsRepository,
    GameRepository,
    PlayerStatsRepository,
)

__all__ = [
    "get_connection",
    "init_db",
    "SeasonRepository",
    "StandingsRepository",
    "GameRepository",
    "PlayerStatsRepository",
]
