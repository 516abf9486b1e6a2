"""Read-side ordering of standings rows."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from league_backend.models import StandingRow, TeamId


@dataclass(frozen=True)
class RankedStanding:
    row: StandingRow
    position: int  # 1-based, distinct

    def to_dict(self) -> dict[str, Any]:
        d = self.row.to_dict()
        d["position"] = self.position
        return d


def _sort_key(row: StandingRow) -> tuple[int, int, int]:
    # points, then differential, then wins; all descending
    return (-row.points, -row.differential, -row.wins)


def rank_standings(
    standings: Mapping[TeamId, StandingRow] | Iterable[StandingRow],
) -> list[RankedStanding]:
    """
    Sort rows by points, differential, wins (descending). sorted() is stable, so rows
    tied on all three keys keep input order; each row still gets its own position.
    """
    rows = list(standings.values()) if isinstance(standings, Mapping) else list(standings)
    ordered = sorted(rows, key=_sort_key)
    return [RankedStanding(row=r, position=i) for i, r in enumerate(ordered, start=1)]
