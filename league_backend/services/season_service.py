"""
Season-centric service: status transitions, schedule generation, game completion
and event processing. Persistence is delegated to repositories.

Completion processing: the game's new status is committed first, then standings,
stat lines, credited players and the stats_processed flag are written in one
transaction. If that transaction fails the game stays completed with
stats_processed = False and reprocess_game() retries it.
"""
from __future__ import annotations

import logging
import sqlite3
from datetime import date

from league_backend.models import (
    Game,
    GameEvent,
    GameStatus,
    PlayerId,
    PlayerStatLine,
    Season,
    SeasonStatus,
    TeamRef,
)
from league_backend.persistence.repositories import (
    GameRepository,
    PlayerStatsRepository,
    SeasonRepository,
    StandingsRepository,
)
from league_backend.services.errors import (
    DuplicateTeam,
    InvalidGameState,
    InvalidSeasonState,
    NotFoundError,
    UnknownTeamInStandings,
)
from league_backend.services.game_events import record_event
from league_backend.services.ranking import RankedStanding, rank_standings
from league_backend.services.schedule_builder import (
    assert_can_build,
    attach_created_games,
    build_season_schedule,
    validate_season_dates,
)
from league_backend.services.scheduling import round_robin_pairings
from league_backend.services.standings import apply_completion
from league_backend.services.stats import apply_incremental_event, recompute_on_completion

logger = logging.getLogger(__name__)

# ---------- Valid transitions ----------

_VALID_TRANSITIONS: dict[str, set[str]] = {
    SeasonStatus.DRAFT.value: {
        SeasonStatus.REGISTRATION.value, SeasonStatus.ACTIVE.value, SeasonStatus.CANCELLED.value,
    },
    SeasonStatus.REGISTRATION.value: {SeasonStatus.ACTIVE.value, SeasonStatus.CANCELLED.value},
    SeasonStatus.ACTIVE.value: {SeasonStatus.COMPLETED.value, SeasonStatus.CANCELLED.value},
    SeasonStatus.COMPLETED.value: set(),
    SeasonStatus.CANCELLED.value: set(),
}

_INITIAL_STATUSES = {SeasonStatus.DRAFT.value, SeasonStatus.REGISTRATION.value}

_GAME_STATUSES = {s.value for s in GameStatus}

# Game states that feed standings and stats; only reachable while the season is active
_PLAYED_STATUSES = {GameStatus.IN_PROGRESS.value, GameStatus.COMPLETED.value}


# ---------- SeasonService ----------


class SeasonService:
    """
    Domain logic for seasons and their games: lifecycle, scheduling, standings, stats.
    Every method takes an open connection; repositories commit their own writes.
    """

    def __init__(self) -> None:
        self._season_repo = SeasonRepository()
        self._standings_repo = StandingsRepository()
        self._game_repo = GameRepository()
        self._stats_repo = PlayerStatsRepository()

    # ---------- Lookups ----------

    def get_season(self, conn: sqlite3.Connection, season_id: str) -> Season:
        season = self._season_repo.get(conn, season_id)
        if season is None:
            raise NotFoundError(f"Season not found: {season_id}")
        return season

    def get_game(self, conn: sqlite3.Connection, game_id: str) -> Game:
        game = self._game_repo.get(conn, game_id)
        if game is None:
            raise NotFoundError(f"Game not found: {game_id}")
        return game

    def get_player_stats(self, conn: sqlite3.Connection, player_id: str) -> PlayerStatLine:
        line = self._stats_repo.get(conn, PlayerId(player_id))
        if line is None:
            raise NotFoundError(f"No stats recorded for player: {player_id}")
        return line

    # ---------- Season lifecycle ----------

    def create_season(
        self,
        conn: sqlite3.Connection,
        name: str,
        start_date: date,
        end_date: date,
        teams: list[TeamRef],
        status: str = SeasonStatus.DRAFT.value,
    ) -> Season:
        """
        Create a season with its registered teams (order kept). A new season starts in
        draft or registration; later statuses are only reached through transitions.
        """
        if status not in _INITIAL_STATUSES:
            raise InvalidSeasonState(
                f"A season cannot be created as {status}. Allowed: {sorted(_INITIAL_STATUSES)}"
            )
        if len({t.id for t in teams}) != len(teams):
            raise DuplicateTeam("A team can only be registered once per season")
        draft = Season(id="", name=name, start_date=start_date, end_date=end_date, status=status)
        validate_season_dates(draft)
        season = self._season_repo.create(conn, name, start_date, end_date, teams, status=status)
        logger.info("Created season %s (%s) with %d teams", season.id, name, len(teams))
        return season

    def transition_season_status(self, conn: sqlite3.Connection, season_id: str, new_status: str) -> Season:
        """
        Move a season to new_status if valid.
        Valid: draft -> registration -> active -> completed; anything not finished -> cancelled.
        """
        season = self.get_season(conn, season_id)
        try:
            target = SeasonStatus(new_status).value
        except ValueError:
            raise InvalidSeasonState(f"Unknown season status: {new_status}")
        current = season.status
        allowed = _VALID_TRANSITIONS.get(current, set())
        if target not in allowed:
            raise InvalidSeasonState(
                f"Invalid transition: {current} -> {target}. "
                f"Allowed from {current}: {sorted(allowed)}"
            )
        if target == SeasonStatus.ACTIVE.value and not season.weeks:
            raise InvalidSeasonState("Must generate schedule before starting season")
        self._season_repo.update_status(conn, season_id, target)
        season.status = target
        logger.info("Season %s: %s -> %s", season_id, current, target)
        return season

    def start_season(self, conn: sqlite3.Connection, season_id: str) -> Season:
        return self.transition_season_status(conn, season_id, SeasonStatus.ACTIVE.value)

    def complete_season(self, conn: sqlite3.Connection, season_id: str) -> Season:
        return self.transition_season_status(conn, season_id, SeasonStatus.COMPLETED.value)

    def cancel_season(self, conn: sqlite3.Connection, season_id: str) -> Season:
        return self.transition_season_status(conn, season_id, SeasonStatus.CANCELLED.value)

    def delete_season(self, conn: sqlite3.Connection, season_id: str) -> int:
        """Delete a non-active season and all of its games. Returns games deleted."""
        season = self.get_season(conn, season_id)
        if season.status == SeasonStatus.ACTIVE:
            raise InvalidSeasonState("Cannot delete active season")
        deleted = self._game_repo.delete_by_season(conn, season_id)
        self._season_repo.delete(conn, season_id)
        logger.info("Deleted season %s and %d games", season_id, deleted)
        return deleted

    def set_week_completed(
        self, conn: sqlite3.Connection, season_id: str, week_number: int, completed: bool = True
    ) -> Season:
        season = self.get_season(conn, season_id)
        if not any(w.week_number == week_number for w in season.weeks):
            raise NotFoundError(f"Week {week_number} not found in season {season_id}")
        self._season_repo.set_week_completed(conn, season_id, week_number, completed)
        return self.get_season(conn, season_id)

    # ---------- Scheduling ----------

    def generate_schedule(self, conn: sqlite3.Connection, season_id: str) -> Season:
        """
        (Re)generate the round-robin schedule: delete existing games, clear weeks,
        create one pending game per matchup, persist weeks and zeroed standings.
        Nothing is written if the state guard, team count or dates fail.
        """
        season = self.get_season(conn, season_id)
        assert_can_build(season)
        validate_season_dates(season)
        pairings = round_robin_pairings(season.team_ids)

        deleted = self._game_repo.delete_by_season(conn, season_id)
        if deleted:
            logger.info("Season %s: removed %d games before regenerating", season_id, deleted)
        season.weeks = []
        build = build_season_schedule(season, pairings)
        created_ids = [self._game_repo.create(conn, req).id for req in build.game_requests]
        attach_created_games(build.weeks, build.game_requests, created_ids)
        season.weeks = build.weeks
        season.standings = build.standings
        validate_season_dates(season)

        self._season_repo.replace_weeks(conn, season_id, season.weeks)
        self._standings_repo.replace(conn, season_id, season.standings)
        logger.info(
            "Season %s: generated %d weeks, %d games for %d teams",
            season_id, len(season.weeks), len(created_ids), len(season.teams),
        )
        return season

    # ---------- Games ----------

    def transition_game(
        self,
        conn: sqlite3.Connection,
        game_id: str,
        new_status: str,
        home_score: int | None = None,
        away_score: int | None = None,
    ) -> Game:
        """
        Update a game's status (and optionally its score). On the non-completed -> completed
        transition, apply the standings ledger and the stat aggregator exactly once.
        A completed game cannot be transitioned again. A game can only kick off or
        complete while its season is active.
        """
        if new_status not in _GAME_STATUSES:
            raise InvalidGameState(f"Unknown game status: {new_status}")
        game = self.get_game(conn, game_id)
        if game.status == GameStatus.COMPLETED.value:
            raise InvalidGameState(f"Game {game_id} is already completed")
        if new_status in _PLAYED_STATUSES:
            self._require_active_season(conn, game)
        if home_score is not None or away_score is not None:
            home = game.home_score if home_score is None else home_score
            away = game.away_score if away_score is None else away_score
            if home < 0 or away < 0:
                raise InvalidGameState("Scores must be non-negative")
            game.home_score, game.away_score = home, away
            self._game_repo.update_score(conn, game_id, home, away, commit=False)
        game.status = GameStatus(new_status).value
        self._game_repo.update_status(conn, game_id, game.status, commit=False)
        conn.commit()
        if game.status == GameStatus.COMPLETED:
            self._process_completion(conn, game)
        return game

    def _require_active_season(self, conn: sqlite3.Connection, game: Game) -> None:
        season = self.get_season(conn, game.season_id)
        if season.status != SeasonStatus.ACTIVE.value:
            raise InvalidSeasonState(
                f"Season {season.id} is {season.status}; games are played only in an active season"
            )

    def reprocess_game(self, conn: sqlite3.Connection, game_id: str) -> Game:
        """Retry standings/stat aggregation for a completed game whose processing failed."""
        game = self.get_game(conn, game_id)
        if game.status != GameStatus.COMPLETED:
            raise InvalidGameState(f"Game {game_id} is not completed (status {game.status})")
        if game.stats_processed:
            raise InvalidGameState(f"Game {game_id} was already processed")
        self._process_completion(conn, game)
        return game

    def _process_completion(self, conn: sqlite3.Connection, game: Game) -> None:
        season = self.get_season(conn, game.season_id)
        try:
            home_row, away_row = apply_completion(season.standings, game)
        except UnknownTeamInStandings:
            logger.error(
                "Season %s: game %s references a team outside the standings; ledger update skipped",
                season.id, game.id,
            )
            raise
        lines = self._stats_repo.get_many(conn, [e.player for e in game.events])
        touched = recompute_on_completion(game, lines)
        try:
            self._standings_repo.save_rows(conn, season.id, [home_row, away_row], commit=False)
            self._stats_repo.save_many(conn, touched.values(), commit=False)
            self._game_repo.save_credited_players(conn, game.id, game.credited_players, commit=False)
            self._game_repo.set_stats_processed(conn, game.id, True, commit=False)
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            logger.exception("Game %s: completion processing failed; left for reprocessing", game.id)
            raise
        game.stats_processed = True
        logger.info(
            "Game %s completed %d-%d: standings and %d stat lines updated",
            game.id, game.home_score, game.away_score, len(touched),
        )

    def append_event(self, conn: sqlite3.Connection, game_id: str, event: GameEvent) -> tuple[Game, GameEvent]:
        """
        Record one event (second yellow -> red, score update). For an already processed
        completed game, the event's stats are applied right away; otherwise they are
        picked up when the game completes (or is reprocessed).
        """
        game = self.get_game(conn, game_id)
        self._require_active_season(conn, game)
        stored = record_event(game, event)
        self._game_repo.add_event(conn, game_id, stored, commit=False)
        self._game_repo.update_score(conn, game_id, game.home_score, game.away_score, commit=False)
        if game.status == GameStatus.COMPLETED and game.stats_processed:
            lines = self._stats_repo.get_many(conn, [stored.player])
            touched = apply_incremental_event(game, stored, lines)
            self._stats_repo.save_many(conn, touched.values(), commit=False)
            self._game_repo.save_credited_players(conn, game_id, [stored.player], commit=False)
        conn.commit()
        return game, stored

    # ---------- Standings ----------

    def get_ranked_standings(self, conn: sqlite3.Connection, season_id: str) -> list[RankedStanding]:
        season = self.get_season(conn, season_id)
        return rank_standings(season.standings)
