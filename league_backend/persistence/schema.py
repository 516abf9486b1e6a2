"""
SQLite schema for the season engine's stores.
Migration-friendly: each table created with IF NOT EXISTS.
"""
from __future__ import annotations


def seasons_schema() -> str:
    """status: draft | registration | active | completed | cancelled."""
    return """
    CREATE TABLE IF NOT EXISTS seasons (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        start_date TEXT NOT NULL,
        end_date TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'draft',
        created_at TEXT NOT NULL
    );
    CREATE INDEX IF NOT EXISTS ix_seasons_status ON seasons(status);
    """


def season_teams_schema() -> str:
    """Registered teams; position keeps registration order (it seeds the schedule)."""
    return """
    CREATE TABLE IF NOT EXISTS season_teams (
        season_id TEXT NOT NULL,
        team_id TEXT NOT NULL,
        team_name TEXT NOT NULL DEFAULT '',
        position INTEGER NOT NULL,
        PRIMARY KEY (season_id, team_id),
        FOREIGN KEY (season_id) REFERENCES seasons(id)
    );
    """


def weeks_schema() -> str:
    """7-day blocks. is_completed is set externally."""
    return """
    CREATE TABLE IF NOT EXISTS weeks (
        season_id TEXT NOT NULL,
        week_number INTEGER NOT NULL,
        start_date TEXT NOT NULL,
        end_date TEXT NOT NULL,
        is_completed INTEGER NOT NULL DEFAULT 0,
        PRIMARY KEY (season_id, week_number),
        FOREIGN KEY (season_id) REFERENCES seasons(id)
    );
    CREATE TABLE IF NOT EXISTS week_games (
        season_id TEXT NOT NULL,
        week_number INTEGER NOT NULL,
        game_id TEXT NOT NULL,
        position INTEGER NOT NULL,
        PRIMARY KEY (season_id, week_number, position),
        FOREIGN KEY (game_id) REFERENCES games(id)
    );
    """


def games_schema() -> str:
    """status: pending | scheduled | in_progress | completed | cancelled | postponed."""
    return """
    CREATE TABLE IF NOT EXISTS games (
        id TEXT PRIMARY KEY,
        season_id TEXT NOT NULL,
        week_number INTEGER,
        home_team_id TEXT NOT NULL,
        away_team_id TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending',
        scheduled_at TEXT NOT NULL,
        venue_name TEXT NOT NULL DEFAULT 'TBD',
        home_score INTEGER NOT NULL DEFAULT 0 CHECK (home_score >= 0),
        away_score INTEGER NOT NULL DEFAULT 0 CHECK (away_score >= 0),
        stats_processed INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        FOREIGN KEY (season_id) REFERENCES seasons(id)
    );
    CREATE INDEX IF NOT EXISTS ix_games_season ON games(season_id);
    """


def game_events_schema() -> str:
    """Ordered event log per game (seq = append order)."""
    return """
    CREATE TABLE IF NOT EXISTS game_events (
        game_id TEXT NOT NULL,
        seq INTEGER NOT NULL,
        type TEXT NOT NULL,
        player_id TEXT NOT NULL,
        team_id TEXT NOT NULL,
        minute INTEGER NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL,
        PRIMARY KEY (game_id, seq),
        FOREIGN KEY (game_id) REFERENCES games(id)
    );
    CREATE TABLE IF NOT EXISTS game_credited_players (
        game_id TEXT NOT NULL,
        player_id TEXT NOT NULL,
        PRIMARY KEY (game_id, player_id),
        FOREIGN KEY (game_id) REFERENCES games(id)
    );
    """


def standings_schema() -> str:
    """One row per registered team per season."""
    return """
    CREATE TABLE IF NOT EXISTS standings (
        season_id TEXT NOT NULL,
        team_id TEXT NOT NULL,
        position INTEGER NOT NULL,
        games_played INTEGER NOT NULL DEFAULT 0,
        wins INTEGER NOT NULL DEFAULT 0,
        losses INTEGER NOT NULL DEFAULT 0,
        ties INTEGER NOT NULL DEFAULT 0,
        points_for INTEGER NOT NULL DEFAULT 0,
        points_against INTEGER NOT NULL DEFAULT 0,
        points INTEGER NOT NULL DEFAULT 0,
        PRIMARY KEY (season_id, team_id),
        FOREIGN KEY (season_id) REFERENCES seasons(id)
    );
    """


def player_stats_schema() -> str:
    """Stat lines of the external Player entity, written only by the aggregator."""
    return """
    CREATE TABLE IF NOT EXISTS player_stats (
        player_id TEXT PRIMARY KEY,
        games_played INTEGER NOT NULL DEFAULT 0,
        goals INTEGER NOT NULL DEFAULT 0,
        assists INTEGER NOT NULL DEFAULT 0,
        yellow_cards INTEGER NOT NULL DEFAULT 0,
        red_cards INTEGER NOT NULL DEFAULT 0
    );
    """


def all_schema_sql() -> str:
    """Combine all schema DDL for a single execution."""
    return "\n".join([
        seasons_schema(),
        season_teams_schema(),
        games_schema(),
        weeks_schema(),
        game_events_schema(),
        standings_schema(),
        player_stats_schema(),
    ])
