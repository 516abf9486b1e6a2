"""
Data models for the league season engine.
Domain objects only: no persistence or API logic.

Season-centric architecture: a season registers teams; the schedule splits into
weeks; weeks hold games; completed games feed standings and player stat lines.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


# ---------- Identifiers ----------
@dataclass(frozen=True)
class TeamId:
    """Opaque team identifier. Equality is structural on the wrapped value."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PlayerId:
    """Opaque player identifier."""
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class TeamRef:
    """Team reference held by a season: id plus display name (name ignored for equality)."""
    id: TeamId
    name: str = field(default="", compare=False)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id.value, "name": self.name}


# ---------- Season status (state machine) ----------
class SeasonStatus(str, Enum):
    """Season lifecycle: draft → registration → active → completed (or cancelled)."""
    DRAFT = "draft"
    REGISTRATION = "registration"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# ---------- Game status ----------
class GameStatus(str, Enum):
    PENDING = "pending"
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"


# ---------- Game event type ----------
class EventType(str, Enum):
    GOAL = "goal"
    ASSIST = "assist"
    YELLOW_CARD = "yellow_card"
    RED_CARD = "red_card"
    SUBSTITUTION = "substitution"
    PENALTY = "penalty"
    OWN_GOAL = "own_goal"


# ---------- Matchup ----------
@dataclass(frozen=True)
class Matchup:
    """One pairing produced by the schedule generator for a single week."""
    home: TeamId
    away: TeamId

    def __post_init__(self) -> None:
        if self.home == self.away:
            raise ValueError(f"Team {self.home} cannot play itself")

    def pair(self) -> frozenset[TeamId]:
        """Unordered view of the matchup, for completeness checks."""
        return frozenset((self.home, self.away))


# ---------- Week ----------
@dataclass
class Week:
    """
    One 7-day block of the season. game_ids keep creation order.
    is_completed is set by the caller; nothing here derives it.
    """
    week_number: int  # 1-based
    start_date: date
    end_date: date
    game_ids: list[str] = field(default_factory=list)
    is_completed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "week_number": self.week_number,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "game_ids": list(self.game_ids),
            "is_completed": self.is_completed,
        }


# ---------- StandingRow ----------
@dataclass
class StandingRow:
    """Aggregate record for one team in one season."""
    team: TeamId
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: int = 0
    points_against: int = 0
    points: int = 0

    @property
    def differential(self) -> int:
        return self.points_for - self.points_against

    def to_dict(self) -> dict[str, Any]:
        return {
            "team_id": self.team.value,
            "games_played": self.games_played,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "points_for": self.points_for,
            "points_against": self.points_against,
            "points": self.points,
            "differential": self.differential,
        }


# ---------- Season ----------
@dataclass
class Season:
    """
    One league season. Owns its weeks and its standings.
    teams keeps registration order; that order seeds the schedule.
    standings is keyed by team id (one row per registered team).
    """
    id: str
    name: str
    start_date: date
    end_date: date
    status: str  # SeasonStatus value
    teams: list[TeamRef] = field(default_factory=list)
    weeks: list[Week] = field(default_factory=list)
    standings: dict[TeamId, StandingRow] = field(default_factory=dict)
    created_at: datetime | None = None

    @property
    def team_ids(self) -> list[TeamId]:
        return [t.id for t in self.teams]

    @property
    def total_weeks(self) -> int:
        return len(self.weeks)

    @property
    def completed_weeks(self) -> int:
        return sum(1 for w in self.weeks if w.is_completed)

    @property
    def progress_percentage(self) -> int:
        if not self.weeks:
            return 0
        return round(self.completed_weeks / self.total_weeks * 100)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "status": self.status,
            "teams": [t.to_dict() for t in self.teams],
            "weeks": [w.to_dict() for w in self.weeks],
            "total_weeks": self.total_weeks,
            "completed_weeks": self.completed_weeks,
            "progress_percentage": self.progress_percentage,
        }
        if self.created_at is not None:
            d["created_at"] = self.created_at.isoformat()
        return d


# ---------- GameEvent ----------
@dataclass
class GameEvent:
    """A single recorded incident in a game (goal, card, substitution...)."""
    type: str  # EventType value
    player: PlayerId
    team: TeamId
    minute: int  # 0-120
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "player_id": self.player.value,
            "team_id": self.team.value,
            "minute": self.minute,
            "description": self.description,
        }


# ---------- Game ----------
@dataclass
class Game:
    """
    A fixture between two season teams.
    credited_players: players already given their games_played increment for this game.
    stats_processed: True once standings and stat lines were both updated on completion.
    """
    id: str
    season_id: str
    home_team: TeamId
    away_team: TeamId
    status: str  # GameStatus value
    scheduled_at: datetime
    venue_name: str = "TBD"
    home_score: int = 0
    away_score: int = 0
    events: list[GameEvent] = field(default_factory=list)
    credited_players: set[PlayerId] = field(default_factory=set)
    stats_processed: bool = False
    week_number: int | None = None

    @property
    def winner(self) -> TeamId | str | None:
        """Winning team id, "tie", or None while the game is not completed."""
        if self.status != GameStatus.COMPLETED:
            return None
        if self.home_score > self.away_score:
            return self.home_team
        if self.away_score > self.home_score:
            return self.away_team
        return "tie"

    def opponent_of(self, team: TeamId) -> TeamId:
        if team == self.home_team:
            return self.away_team
        if team == self.away_team:
            return self.home_team
        raise ValueError(f"Team {team} is not playing in game {self.id}")

    def to_dict(self) -> dict[str, Any]:
        winner = self.winner
        d: dict[str, Any] = {
            "id": self.id,
            "season_id": self.season_id,
            "home_team_id": self.home_team.value,
            "away_team_id": self.away_team.value,
            "status": self.status,
            "scheduled_at": self.scheduled_at.isoformat(),
            "venue_name": self.venue_name,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "events": [e.to_dict() for e in self.events],
            "stats_processed": self.stats_processed,
        }
        if self.week_number is not None:
            d["week_number"] = self.week_number
        if winner is not None:
            d["winner"] = winner if isinstance(winner, str) else winner.value
        return d


# ---------- GameCreateRequest ----------
@dataclass(frozen=True)
class GameCreateRequest:
    """Pending game payload handed to the game store by the schedule builder."""
    season_id: str
    week_number: int
    home_team: TeamId
    away_team: TeamId
    scheduled_at: datetime
    venue_name: str = "TBD"
    status: str = GameStatus.PENDING.value


# ---------- PlayerStatLine ----------
@dataclass
class PlayerStatLine:
    """Cumulative stats for one player. Written only by the stat aggregator."""
    player: PlayerId
    games_played: int = 0
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_id": self.player.value,
            "games_played": self.games_played,
            "goals": self.goals,
            "assists": self.assists,
            "yellow_cards": self.yellow_cards,
            "red_cards": self.red_cards,
        }
