"""
Event-recording boundary for games.

Runs when an event is appended, before any stat aggregation: validates the payload,
converts a player's second yellow card into a red card, appends the event and
updates the score. The stat aggregator only ever sees the stored (converted) event.
"""
from __future__ import annotations

import logging
from dataclasses import replace

from league_backend.models import EventType, Game, GameEvent, GameStatus, PlayerId
from league_backend.services.errors import InvalidEvent, InvalidGameState

logger = logging.getLogger(__name__)

MIN_MINUTE = 0
MAX_MINUTE = 120
SECOND_YELLOW_DESCRIPTION = "Second yellow card (automatic red card)"

# Events may only be added once the game is underway
_EVENT_STATUSES = {GameStatus.IN_PROGRESS.value, GameStatus.COMPLETED.value}


def _count_events(game: Game, event_type: EventType, player: PlayerId) -> int:
    return sum(1 for e in game.events if e.type == event_type and e.player == player)


def convert_second_yellow(game: Game, event: GameEvent) -> GameEvent:
    """Return the event to store: a second yellow for the same player becomes a red."""
    if event.type != EventType.YELLOW_CARD:
        return event
    if _count_events(game, EventType.YELLOW_CARD, event.player) < 1:
        return event
    logger.info(
        "Game %s: second yellow for player %s converted to red card", game.id, event.player
    )
    return replace(
        event,
        type=EventType.RED_CARD.value,
        description=event.description or SECOND_YELLOW_DESCRIPTION,
    )


def apply_score(game: Game, event: GameEvent) -> None:
    """goal: +1 for the event's team. own_goal: +1 for the opposing team."""
    if event.type == EventType.GOAL:
        scoring = event.team
    elif event.type == EventType.OWN_GOAL:
        scoring = game.opponent_of(event.team)
    else:
        return
    if scoring == game.home_team:
        game.home_score += 1
    else:
        game.away_score += 1


def validate_event(game: Game, event: GameEvent) -> None:
    if game.status not in _EVENT_STATUSES:
        raise InvalidGameState(
            f"Can only add events to games in progress or completed (game {game.id} is {game.status})"
        )
    if event.type not in {t.value for t in EventType}:
        raise InvalidEvent(f"Unknown event type: {event.type}")
    if not MIN_MINUTE <= event.minute <= MAX_MINUTE:
        raise InvalidEvent(f"Minute must be between {MIN_MINUTE} and {MAX_MINUTE} (got {event.minute})")
    if event.team not in (game.home_team, game.away_team):
        raise InvalidEvent(f"Team {event.team} is not playing in game {game.id}")


def record_event(game: Game, event: GameEvent) -> GameEvent:
    """Validate, convert, append and score one event. Returns the event as stored."""
    validate_event(game, event)
    stored = convert_second_yellow(game, event)
    game.events.append(stored)
    apply_score(game, stored)
    return stored
