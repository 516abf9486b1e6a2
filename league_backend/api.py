"""
REST API for the league season engine.
Thin wrappers around SeasonService and persistence.
"""
from __future__ import annotations

from contextlib import asynccontextmanager, contextmanager
from datetime import date
from typing import Any, AsyncGenerator, Generator

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from league_backend import config
from league_backend.logging_config import setup_logging
from league_backend.models import EventType, GameEvent, GameStatus, PlayerId, SeasonStatus, TeamId, TeamRef
from league_backend.persistence import SeasonRepository, get_connection, init_db
from league_backend.persistence.db import get_db_path
from league_backend.services import (
    NotFoundError,
    SeasonEngineError,
    SeasonService,
    UnknownTeamInStandings,
)


@contextmanager
def db_conn() -> Generator:
    """Yield a DB connection, ensure close on exit."""
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def service_errors() -> Generator:
    """Map engine errors to HTTP errors: missing -> 404, integrity -> 409, rule violations -> 400."""
    try:
        yield
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnknownTeamInStandings as e:
        raise HTTPException(status_code=409, detail=str(e))
    except SeasonEngineError as e:
        raise HTTPException(status_code=400, detail=str(e))


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    init_db(db_path=get_db_path())
    yield


# ---------- FastAPI app ----------
app = FastAPI(
    title="League Season API",
    description="Round-robin scheduling, standings and player statistics",
    version="0.1.0",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Request models ----------


class TeamEntry(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = ""


class CreateSeasonRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    start_date: date
    end_date: date
    teams: list[TeamEntry] = Field(default_factory=list)
    status: SeasonStatus = SeasonStatus.DRAFT


class WeekCompletionRequest(BaseModel):
    is_completed: bool = True


class GameStatusRequest(BaseModel):
    status: GameStatus
    home_score: int | None = Field(None, ge=0)
    away_score: int | None = Field(None, ge=0)


class AddEventRequest(BaseModel):
    type: EventType
    player_id: str = Field(..., min_length=1)
    team_id: str = Field(..., min_length=1)
    minute: int = Field(..., ge=0, le=120)
    description: str = ""


# ---------- Seasons ----------


@app.post("/seasons", status_code=201)
def create_season(req: CreateSeasonRequest) -> dict[str, Any]:
    """Create a season with its registered teams. Team order seeds the schedule."""
    teams = [TeamRef(id=TeamId(t.id), name=t.name) for t in req.teams]
    with db_conn() as conn, service_errors():
        season = SeasonService().create_season(
            conn, req.name, req.start_date, req.end_date, teams, status=req.status.value
        )
        return season.to_dict()


@app.get("/seasons")
def list_seasons(
    status: SeasonStatus | None = Query(None, description="Filter by season status"),
) -> dict[str, Any]:
    with db_conn() as conn:
        seasons = SeasonRepository().list_all(conn, status=status.value if status else None)
        return {"seasons": [s.to_dict() for s in seasons]}


@app.get("/seasons/{season_id}")
def get_season(season_id: str) -> dict[str, Any]:
    with db_conn() as conn, service_errors():
        return SeasonService().get_season(conn, season_id).to_dict()


@app.post("/seasons/{season_id}/generate-schedule")
def generate_schedule(season_id: str) -> dict[str, Any]:
    """Delete existing games, build weeks and pending games, reset standings."""
    with db_conn() as conn, service_errors():
        season = SeasonService().generate_schedule(conn, season_id)
        return season.to_dict()


@app.post("/seasons/{season_id}/start")
def start_season(season_id: str) -> dict[str, Any]:
    with db_conn() as conn, service_errors():
        return SeasonService().start_season(conn, season_id).to_dict()


@app.post("/seasons/{season_id}/complete")
def complete_season(season_id: str) -> dict[str, Any]:
    with db_conn() as conn, service_errors():
        return SeasonService().complete_season(conn, season_id).to_dict()


@app.post("/seasons/{season_id}/cancel")
def cancel_season(season_id: str) -> dict[str, Any]:
    with db_conn() as conn, service_errors():
        return SeasonService().cancel_season(conn, season_id).to_dict()


@app.put("/seasons/{season_id}/weeks/{week_number}")
def set_week_completed(season_id: str, week_number: int, req: WeekCompletionRequest) -> dict[str, Any]:
    with db_conn() as conn, service_errors():
        season = SeasonService().set_week_completed(conn, season_id, week_number, req.is_completed)
        return season.to_dict()


@app.delete("/seasons/{season_id}")
def delete_season(season_id: str) -> dict[str, Any]:
    with db_conn() as conn, service_errors():
        deleted = SeasonService().delete_season(conn, season_id)
        return {"season_id": season_id, "deleted": True, "games_deleted": deleted}


@app.get("/seasons/{season_id}/standings")
def get_standings(season_id: str) -> dict[str, Any]:
    """Standings ranked by points, differential, wins."""
    with db_conn() as conn, service_errors():
        ranked = SeasonService().get_ranked_standings(conn, season_id)
        return {"season_id": season_id, "standings": [r.to_dict() for r in ranked]}


# ---------- Games ----------


@app.get("/games/{game_id}")
def get_game(game_id: str) -> dict[str, Any]:
    with db_conn() as conn, service_errors():
        return SeasonService().get_game(conn, game_id).to_dict()


@app.put("/games/{game_id}/status")
def update_game_status(game_id: str, req: GameStatusRequest) -> dict[str, Any]:
    """Change status/score. Completing a game updates standings and player stats once."""
    with db_conn() as conn, service_errors():
        game = SeasonService().transition_game(
            conn, game_id, req.status.value, home_score=req.home_score, away_score=req.away_score
        )
        return game.to_dict()


@app.post("/games/{game_id}/events")
def add_game_event(game_id: str, req: AddEventRequest) -> dict[str, Any]:
    """Append an event. A second yellow for the same player is stored as a red card."""
    event = GameEvent(
        type=req.type.value,
        player=PlayerId(req.player_id),
        team=TeamId(req.team_id),
        minute=req.minute,
        description=req.description,
    )
    with db_conn() as conn, service_errors():
        game, stored = SeasonService().append_event(conn, game_id, event)
        return {"message": "Event added successfully", "event": stored.to_dict(), "game": game.to_dict()}


@app.post("/games/{game_id}/reprocess")
def reprocess_game(game_id: str) -> dict[str, Any]:
    """Retry standings/stats processing for a completed game left unprocessed."""
    with db_conn() as conn, service_errors():
        return SeasonService().reprocess_game(conn, game_id).to_dict()


# ---------- Players ----------


@app.get("/players/{player_id}/stats")
def get_player_stats(player_id: str) -> dict[str, Any]:
    with db_conn() as conn, service_errors():
        return SeasonService().get_player_stats(conn, player_id).to_dict()


# ---------- Run with: uvicorn league_backend.api:app --reload ----------
