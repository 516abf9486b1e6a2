"""
Repository interfaces for seasons, games, standings and player stat lines.
No business logic: only read/write operations.
"""
from __future__ import annotations

import sqlite3
import uuid
from datetime import date, datetime
from typing import Iterable, Mapping

from league_backend.models import (
    Game,
    GameCreateRequest,
    GameEvent,
    PlayerId,
    PlayerStatLine,
    Season,
    SeasonStatus,
    StandingRow,
    TeamId,
    TeamRef,
    Week,
)


def _parse_datetime(s: str | None) -> datetime:
    if s is None:
        raise ValueError("expected datetime string")
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _parse_date(s: str | None) -> date:
    if s is None:
        raise ValueError("expected date string")
    return date.fromisoformat(s[:10])


# ---------- SeasonRepository ----------


class SeasonRepository:
    """CRUD for seasons, their registered teams and their weeks."""

    def create(
        self,
        conn: sqlite3.Connection,
        name: str,
        start_date: date,
        end_date: date,
        teams: list[TeamRef],
        status: str = SeasonStatus.DRAFT.value,
        id: str | None = None,
    ) -> Season:
        sid = id or str(uuid.uuid4())
        now = datetime.utcnow().isoformat()
        conn.execute(
            "INSERT INTO seasons (id, name, start_date, end_date, status, created_at) VALUES (?, ?, ?, ?, ?, ?)",
            (sid, name, start_date.isoformat(), end_date.isoformat(), status, now),
        )
        conn.executemany(
            "INSERT INTO season_teams (season_id, team_id, team_name, position) VALUES (?, ?, ?, ?)",
            [(sid, t.id.value, t.name, i) for i, t in enumerate(teams)],
        )
        conn.commit()
        return Season(
            id=sid, name=name, start_date=start_date, end_date=end_date, status=status,
            teams=list(teams), created_at=datetime.fromisoformat(now),
        )

    def get(self, conn: sqlite3.Connection, season_id: str) -> Season | None:
        row = conn.execute(
            "SELECT id, name, start_date, end_date, status, created_at FROM seasons WHERE id = ?",
            (season_id,),
        ).fetchone()
        if row is None:
            return None
        return self._hydrate(conn, row)

    def list_all(self, conn: sqlite3.Connection, status: str | None = None) -> list[Season]:
        if status:
            rows = conn.execute(
                "SELECT id, name, start_date, end_date, status, created_at FROM seasons WHERE status = ? ORDER BY created_at DESC",
                (status,),
            ).fetchall()
        else:
            rows = conn.execute(
                "SELECT id, name, start_date, end_date, status, created_at FROM seasons ORDER BY created_at DESC"
            ).fetchall()
        return [self._hydrate(conn, r) for r in rows]

    def _hydrate(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Season:
        season_id = row["id"]
        return Season(
            id=season_id,
            name=row["name"],
            start_date=_parse_date(row["start_date"]),
            end_date=_parse_date(row["end_date"]),
            status=row["status"],
            teams=self.list_teams(conn, season_id),
            weeks=self.list_weeks(conn, season_id),
            standings=StandingsRepository().get_for_season(conn, season_id),
            created_at=_parse_datetime(row["created_at"]),
        )

    def list_teams(self, conn: sqlite3.Connection, season_id: str) -> list[TeamRef]:
        """Registered teams in registration order."""
        rows = conn.execute(
            "SELECT team_id, team_name FROM season_teams WHERE season_id = ? ORDER BY position",
            (season_id,),
        ).fetchall()
        return [TeamRef(id=TeamId(r["team_id"]), name=r["team_name"]) for r in rows]

    def list_weeks(self, conn: sqlite3.Connection, season_id: str) -> list[Week]:
        rows = conn.execute(
            "SELECT week_number, start_date, end_date, is_completed FROM weeks WHERE season_id = ? ORDER BY week_number",
            (season_id,),
        ).fetchall()
        game_rows = conn.execute(
            "SELECT week_number, game_id FROM week_games WHERE season_id = ? ORDER BY week_number, position",
            (season_id,),
        ).fetchall()
        ids_by_week: dict[int, list[str]] = {}
        for g in game_rows:
            ids_by_week.setdefault(g["week_number"], []).append(g["game_id"])
        return [
            Week(
                week_number=r["week_number"],
                start_date=_parse_date(r["start_date"]),
                end_date=_parse_date(r["end_date"]),
                game_ids=ids_by_week.get(r["week_number"], []),
                is_completed=bool(r["is_completed"]),
            )
            for r in rows
        ]

    def replace_weeks(self, conn: sqlite3.Connection, season_id: str, weeks: list[Week]) -> None:
        """Clear the season's weeks and write the given ones (with their game id lists)."""
        conn.execute("DELETE FROM week_games WHERE season_id = ?", (season_id,))
        conn.execute("DELETE FROM weeks WHERE season_id = ?", (season_id,))
        for w in weeks:
            conn.execute(
                "INSERT INTO weeks (season_id, week_number, start_date, end_date, is_completed) VALUES (?, ?, ?, ?, ?)",
                (season_id, w.week_number, w.start_date.isoformat(), w.end_date.isoformat(), int(w.is_completed)),
            )
            conn.executemany(
                "INSERT INTO week_games (season_id, week_number, game_id, position) VALUES (?, ?, ?, ?)",
                [(season_id, w.week_number, gid, i) for i, gid in enumerate(w.game_ids)],
            )
        conn.commit()

    def set_week_completed(self, conn: sqlite3.Connection, season_id: str, week_number: int, completed: bool) -> None:
        conn.execute(
            "UPDATE weeks SET is_completed = ? WHERE season_id = ? AND week_number = ?",
            (int(completed), season_id, week_number),
        )
        conn.commit()

    def update_status(self, conn: sqlite3.Connection, season_id: str, status: str) -> None:
        conn.execute("UPDATE seasons SET status = ? WHERE id = ?", (status, season_id))
        conn.commit()

    def delete(self, conn: sqlite3.Connection, season_id: str) -> None:
        """Delete season, teams, weeks and standings. Games are deleted via GameRepository."""
        conn.execute("DELETE FROM week_games WHERE season_id = ?", (season_id,))
        conn.execute("DELETE FROM weeks WHERE season_id = ?", (season_id,))
        conn.execute("DELETE FROM standings WHERE season_id = ?", (season_id,))
        conn.execute("DELETE FROM season_teams WHERE season_id = ?", (season_id,))
        conn.execute("DELETE FROM seasons WHERE id = ?", (season_id,))
        conn.commit()


# ---------- StandingsRepository ----------


class StandingsRepository:
    """Standings rows per season. position keeps team order."""

    def get_for_season(self, conn: sqlite3.Connection, season_id: str) -> dict[TeamId, StandingRow]:
        rows = conn.execute(
            """SELECT team_id, games_played, wins, losses, ties, points_for, points_against, points
               FROM standings WHERE season_id = ? ORDER BY position""",
            (season_id,),
        ).fetchall()
        return {
            TeamId(r["team_id"]): StandingRow(
                team=TeamId(r["team_id"]),
                games_played=r["games_played"],
                wins=r["wins"],
                losses=r["losses"],
                ties=r["ties"],
                points_for=r["points_for"],
                points_against=r["points_against"],
                points=r["points"],
            )
            for r in rows
        }

    def replace(self, conn: sqlite3.Connection, season_id: str, standings: Mapping[TeamId, StandingRow]) -> None:
        """Drop the season's rows and write the given set, in mapping order."""
        conn.execute("DELETE FROM standings WHERE season_id = ?", (season_id,))
        conn.executemany(
            """INSERT INTO standings (
                season_id, team_id, position, games_played, wins, losses, ties,
                points_for, points_against, points
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            [
                (season_id, r.team.value, i, r.games_played, r.wins, r.losses, r.ties,
                 r.points_for, r.points_against, r.points)
                for i, r in enumerate(standings.values())
            ],
        )
        conn.commit()

    def save_rows(self, conn: sqlite3.Connection, season_id: str, rows: Iterable[StandingRow], commit: bool = True) -> None:
        """Persist mutated rows in place."""
        conn.executemany(
            """UPDATE standings SET games_played = ?, wins = ?, losses = ?, ties = ?,
                   points_for = ?, points_against = ?, points = ?
               WHERE season_id = ? AND team_id = ?""",
            [
                (r.games_played, r.wins, r.losses, r.ties, r.points_for, r.points_against,
                 r.points, season_id, r.team.value)
                for r in rows
            ],
        )
        if commit:
            conn.commit()


# ---------- GameRepository ----------


class GameRepository:
    """CRUD for games, their event log and their credited-player set."""

    def create(self, conn: sqlite3.Connection, request: GameCreateRequest, id: str | None = None) -> Game:
        gid = id or str(uuid.uuid4())
        now = datetime.utcnow().isoformat()
        conn.execute(
            """INSERT INTO games (
                id, season_id, week_number, home_team_id, away_team_id, status,
                scheduled_at, venue_name, home_score, away_score, stats_processed, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, 0, 0, ?)""",
            (
                gid,
                request.season_id,
                request.week_number,
                request.home_team.value,
                request.away_team.value,
                request.status,
                request.scheduled_at.isoformat(),
                request.venue_name,
                now,
            ),
        )
        conn.commit()
        return Game(
            id=gid,
            season_id=request.season_id,
            home_team=request.home_team,
            away_team=request.away_team,
            status=request.status,
            scheduled_at=request.scheduled_at,
            venue_name=request.venue_name,
            week_number=request.week_number,
        )

    def get(self, conn: sqlite3.Connection, game_id: str) -> Game | None:
        row = conn.execute(
            """SELECT id, season_id, week_number, home_team_id, away_team_id, status,
                      scheduled_at, venue_name, home_score, away_score, stats_processed
               FROM games WHERE id = ?""",
            (game_id,),
        ).fetchone()
        if row is None:
            return None
        return self._hydrate(conn, row)

    def list_by_season(self, conn: sqlite3.Connection, season_id: str) -> list[Game]:
        rows = conn.execute(
            """SELECT id, season_id, week_number, home_team_id, away_team_id, status,
                      scheduled_at, venue_name, home_score, away_score, stats_processed
               FROM games WHERE season_id = ? ORDER BY week_number, created_at, rowid""",
            (season_id,),
        ).fetchall()
        return [self._hydrate(conn, r) for r in rows]

    def _hydrate(self, conn: sqlite3.Connection, row: sqlite3.Row) -> Game:
        game_id = row["id"]
        credited = conn.execute(
            "SELECT player_id FROM game_credited_players WHERE game_id = ?", (game_id,)
        ).fetchall()
        return Game(
            id=game_id,
            season_id=row["season_id"],
            home_team=TeamId(row["home_team_id"]),
            away_team=TeamId(row["away_team_id"]),
            status=row["status"],
            scheduled_at=_parse_datetime(row["scheduled_at"]),
            venue_name=row["venue_name"],
            home_score=row["home_score"],
            away_score=row["away_score"],
            events=self.list_events(conn, game_id),
            credited_players={PlayerId(r["player_id"]) for r in credited},
            stats_processed=bool(row["stats_processed"]),
            week_number=row["week_number"],
        )

    def list_events(self, conn: sqlite3.Connection, game_id: str) -> list[GameEvent]:
        rows = conn.execute(
            "SELECT type, player_id, team_id, minute, description FROM game_events WHERE game_id = ? ORDER BY seq",
            (game_id,),
        ).fetchall()
        return [
            GameEvent(
                type=r["type"],
                player=PlayerId(r["player_id"]),
                team=TeamId(r["team_id"]),
                minute=r["minute"],
                description=r["description"],
            )
            for r in rows
        ]

    def add_event(self, conn: sqlite3.Connection, game_id: str, event: GameEvent, commit: bool = True) -> int:
        """Append one event; returns its sequence number."""
        row = conn.execute(
            "SELECT COALESCE(MAX(seq), -1) + 1 AS next_seq FROM game_events WHERE game_id = ?",
            (game_id,),
        ).fetchone()
        seq = row["next_seq"]
        conn.execute(
            """INSERT INTO game_events (game_id, seq, type, player_id, team_id, minute, description, created_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                game_id, seq, getattr(event.type, "value", event.type), event.player.value, event.team.value,
                event.minute, event.description, datetime.utcnow().isoformat(),
            ),
        )
        if commit:
            conn.commit()
        return seq

    def update_status(self, conn: sqlite3.Connection, game_id: str, status: str, commit: bool = True) -> None:
        conn.execute("UPDATE games SET status = ? WHERE id = ?", (status, game_id))
        if commit:
            conn.commit()

    def update_score(
        self, conn: sqlite3.Connection, game_id: str, home_score: int, away_score: int, commit: bool = True
    ) -> None:
        conn.execute(
            "UPDATE games SET home_score = ?, away_score = ? WHERE id = ?",
            (home_score, away_score, game_id),
        )
        if commit:
            conn.commit()

    def set_stats_processed(self, conn: sqlite3.Connection, game_id: str, processed: bool, commit: bool = True) -> None:
        conn.execute("UPDATE games SET stats_processed = ? WHERE id = ?", (int(processed), game_id))
        if commit:
            conn.commit()

    def save_credited_players(
        self, conn: sqlite3.Connection, game_id: str, players: Iterable[PlayerId], commit: bool = True
    ) -> None:
        conn.executemany(
            "INSERT OR IGNORE INTO game_credited_players (game_id, player_id) VALUES (?, ?)",
            [(game_id, p.value) for p in players],
        )
        if commit:
            conn.commit()

    def delete_by_season(self, conn: sqlite3.Connection, season_id: str) -> int:
        """Delete every game of the season with its events. Returns number of games deleted."""
        ids = [r["id"] for r in conn.execute("SELECT id FROM games WHERE season_id = ?", (season_id,)).fetchall()]
        for gid in ids:
            conn.execute("DELETE FROM game_events WHERE game_id = ?", (gid,))
            conn.execute("DELETE FROM game_credited_players WHERE game_id = ?", (gid,))
        conn.execute("DELETE FROM games WHERE season_id = ?", (season_id,))
        conn.commit()
        return len(ids)


# ---------- PlayerStatsRepository ----------


class PlayerStatsRepository:
    """Stat lines keyed by player id. Missing players read as absent, not zero."""

    def get(self, conn: sqlite3.Connection, player_id: PlayerId) -> PlayerStatLine | None:
        lines = self.get_many(conn, [player_id])
        return lines.get(player_id)

    def get_many(self, conn: sqlite3.Connection, player_ids: Iterable[PlayerId]) -> dict[PlayerId, PlayerStatLine]:
        ids = list({p.value for p in player_ids})
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        rows = conn.execute(
            f"""SELECT player_id, games_played, goals, assists, yellow_cards, red_cards
                FROM player_stats WHERE player_id IN ({placeholders})""",
            ids,
        ).fetchall()
        return {
            PlayerId(r["player_id"]): PlayerStatLine(
                player=PlayerId(r["player_id"]),
                games_played=r["games_played"],
                goals=r["goals"],
                assists=r["assists"],
                yellow_cards=r["yellow_cards"],
                red_cards=r["red_cards"],
            )
            for r in rows
        }

    def save_many(self, conn: sqlite3.Connection, lines: Iterable[PlayerStatLine], commit: bool = True) -> None:
        conn.executemany(
            """INSERT INTO player_stats (player_id, games_played, goals, assists, yellow_cards, red_cards)
               VALUES (?, ?, ?, ?, ?, ?)
               ON CONFLICT(player_id) DO UPDATE SET
                   games_played = excluded.games_played,
                   goals = excluded.goals,
                   assists = excluded.assists,
                   yellow_cards = excluded.yellow_cards,
                   red_cards = excluded.red_cards""",
            [
                (l.player.value, l.games_played, l.goals, l.assists, l.yellow_cards, l.red_cards)
                for l in lines
            ],
        )
        if commit:
            conn.commit()
