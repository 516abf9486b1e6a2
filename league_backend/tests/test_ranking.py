"""
Tests for standings ranking: points, then differential, then wins; stable on full ties.
"""
from __future__ import annotations

from league_backend.models import StandingRow, TeamId
from league_backend.services.ranking import rank_standings


def _row(team, points, pf=0, pa=0, wins=0):
    return StandingRow(team=TeamId(team), points=points, points_for=pf, points_against=pa, wins=wins)


def test_rank_by_points_then_differential():
    rows = [_row("A", 9, pf=8, pa=7), _row("B", 9, pf=10, pa=5), _row("C", 6, pf=6, pa=3)]
    ranked = rank_standings(rows)
    assert [r.row.team.value for r in ranked] == ["B", "A", "C"]
    assert [r.position for r in ranked] == [1, 2, 3]


def test_rank_nine_nine_six():
    rows = [_row("C", 6, pf=2, pa=1), _row("B", 9, pf=4, pa=1), _row("A", 9, pf=6, pa=1)]
    ranked = rank_standings(rows)
    assert [r.row.team.value for r in ranked] == ["A", "B", "C"]
    assert [r.row.differential for r in ranked] == [5, 3, 1]


def test_rank_by_wins_after_differential():
    rows = [_row("A", 7, pf=5, pa=5, wins=1), _row("B", 7, pf=5, pa=5, wins=2)]
    ranked = rank_standings(rows)
    assert [r.row.team.value for r in ranked] == ["B", "A"]


def test_full_tie_keeps_input_order_with_distinct_positions():
    rows = [_row("X", 4, 3, 3, 1), _row("Y", 4, 3, 3, 1), _row("Z", 4, 3, 3, 1)]
    ranked = rank_standings(rows)
    assert [r.row.team.value for r in ranked] == ["X", "Y", "Z"]
    assert [r.position for r in ranked] == [1, 2, 3]


def test_rank_accepts_mapping():
    rows = {TeamId("A"): _row("A", 0), TeamId("B"): _row("B", 3)}
    ranked = rank_standings(rows)
    assert ranked[0].row.team == TeamId("B")
    d = ranked[0].to_dict()
    assert d["position"] == 1
    assert d["team_id"] == "B"
    assert d["differential"] == 0


def test_rank_empty():
    assert rank_standings([]) == []
