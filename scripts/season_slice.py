#!/usr/bin/env python3
"""
Vertical slice: Create season → Generate schedule → Play week 1 → Standings and stats.
Run from project root: python3 scripts/season_slice.py
"""
from __future__ import annotations

import json
import random
import sys
from datetime import date
from pathlib import Path

# Ensure project root on path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from league_backend.logging_config import setup_logging
from league_backend.models import EventType, GameEvent, GameStatus, PlayerId, TeamId, TeamRef
from league_backend.persistence import PlayerStatsRepository, get_connection, init_db
from league_backend.persistence.db import set_db_path
from league_backend.services import SeasonService


def main() -> None:
    setup_logging("INFO", access_log=False)
    # Use data/season_slice.db for demo (distinct from league.db)
    db_path = PROJECT_ROOT / "data" / "season_slice.db"
    set_db_path(db_path)
    init_db(db_path=db_path)

    rng = random.Random(2024)
    service = SeasonService()
    conn = get_connection()
    try:
        # 1. Season with five teams (odd count: one team sits out each week)
        teams = [TeamRef(id=TeamId(f"team-{c}"), name=f"FC {c.upper()}") for c in "abcde"]
        season = service.create_season(conn, "Demo Season", date(2024, 1, 1), date(2024, 3, 31), teams)
        print(f"Created season: {season.name} (id={season.id})")

        # 2. Schedule
        season = service.generate_schedule(conn, season.id)
        print(f"Generated {season.total_weeks} weeks")
        for week in season.weeks:
            print(f"  Week {week.week_number}: {week.start_date} to {week.end_date}, {len(week.game_ids)} games")
        service.start_season(conn, season.id)

        # 3. Play week 1 with random goals
        for game_id in season.weeks[0].game_ids:
            game = service.transition_game(conn, game_id, GameStatus.IN_PROGRESS.value)
            for team in (game.home_team, game.away_team):
                for _ in range(rng.randint(0, 3)):
                    event = GameEvent(
                        type=EventType.GOAL.value,
                        player=PlayerId(f"{team.value}-striker"),
                        team=team,
                        minute=rng.randint(1, 90),
                    )
                    service.append_event(conn, game_id, event)
            game = service.transition_game(conn, game_id, GameStatus.COMPLETED.value)
            print(f"  {game.home_team} {game.home_score}-{game.away_score} {game.away_team}")
        service.set_week_completed(conn, season.id, 1)

        # 4. Standings and stats
        print("\nStandings:")
        for ranked in service.get_ranked_standings(conn, season.id):
            r = ranked.row
            print(f"  {ranked.position}. {r.team} pts={r.points} W{r.wins} D{r.ties} L{r.losses} diff={r.differential:+d}")

        season = service.get_season(conn, season.id)
        print(f"\nProgress: {season.progress_percentage}%")
        strikers = [PlayerId(f"{t.id.value}-striker") for t in teams]
        lines = PlayerStatsRepository().get_many(conn, strikers)
        print(json.dumps([line.to_dict() for line in lines.values()], indent=2))

        print("\nSeason slice complete.")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
