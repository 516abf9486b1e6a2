"""
Player stat aggregation from game events.

Both entry points share one rule: a game remembers which players were already
credited with an appearance (game.credited_players), and a player's games_played
only moves when they are added to that set. Replaying every event at completion
and applying one late event after completion therefore count appearances the same way.
"""
from __future__ import annotations

from typing import MutableMapping

from league_backend.models import EventType, Game, GameEvent, GameStatus, PlayerId, PlayerStatLine
from league_backend.services.errors import InvalidGameState

StatLines = MutableMapping[PlayerId, PlayerStatLine]

# Event type -> PlayerStatLine counter. Other types only credit the appearance.
_STAT_FIELDS: dict[str, str] = {
    EventType.GOAL.value: "goals",
    EventType.ASSIST.value: "assists",
    EventType.YELLOW_CARD.value: "yellow_cards",
    EventType.RED_CARD.value: "red_cards",
}


def _line_for(lines: StatLines, player: PlayerId) -> PlayerStatLine:
    line = lines.get(player)
    if line is None:
        line = PlayerStatLine(player=player)
        lines[player] = line
    return line


def credit_appearance(game: Game, line: PlayerStatLine) -> bool:
    """Increment games_played once per player per game. Returns True if credited now."""
    if line.player in game.credited_players:
        return False
    game.credited_players.add(line.player)
    line.games_played += 1
    return True


def _apply_event(game: Game, event: GameEvent, lines: StatLines, touched: dict[PlayerId, PlayerStatLine]) -> None:
    line = _line_for(lines, event.player)
    credit_appearance(game, line)
    field_name = _STAT_FIELDS.get(event.type)
    if field_name is not None:
        setattr(line, field_name, getattr(line, field_name) + 1)
    touched[line.player] = line


def recompute_on_completion(game: Game, lines: StatLines) -> dict[PlayerId, PlayerStatLine]:
    """
    Replay every event of a just-completed game into the stat lines.
    Returns the lines that changed, keyed by player, for persistence.
    """
    touched: dict[PlayerId, PlayerStatLine] = {}
    for event in game.events:
        _apply_event(game, event, lines, touched)
    return touched


def apply_incremental_event(game: Game, event: GameEvent, lines: StatLines) -> dict[PlayerId, PlayerStatLine]:
    """Apply one event appended to an already completed game."""
    if game.status != GameStatus.COMPLETED:
        raise InvalidGameState(f"Game {game.id} is not completed (status {game.status})")
    touched: dict[PlayerId, PlayerStatLine] = {}
    _apply_event(game, event, lines, touched)
    return touched
