"""
Purpose: Rank scored routes (the "which is best" layer).
What it does:

Orders ScoredRoute entries by score ascending (fewer effective minutes = better).

Deterministic tie-breaking:
  1) fewer transfers
  2) earlier start time
  3) original input order (stable sort)

Optionally keeps only the best route per corridor so the response shows
genuinely different alternatives instead of several departures of one service.

Rule: Ranking never re-scores; it only orders.
"""

# journeys/scoring/ranking.py

from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .scorer import ScoredRoute


def _rank_key(route: ScoredRoute) -> Tuple[float, int, int]:
    s = route.corridor_score
    return (s.score, s.transfer_count, route.itinerary.start_time_ms)


def rank_routes(routes: Sequence[ScoredRoute]) -> List[ScoredRoute]:
    """
    Return a new list sorted best-first. sorted() is stable, so equal keys
    keep their input order.
    """
    if not routes:
        return []
    return sorted(routes, key=_rank_key)


def group_by_corridor(routes: Sequence[ScoredRoute]) -> Dict[str, List[ScoredRoute]]:
    """
    corridor_id -> routes in that corridor, each list ranked best-first.
    Corridors appear in order of first occurrence.
    """
    grouped: Dict[str, List[ScoredRoute]] = {}
    for route in routes:
        grouped.setdefault(route.corridor_score.corridor_id, []).append(route)

    return {key: rank_routes(members) for key, members in grouped.items()}


def best_per_corridor(routes: Sequence[ScoredRoute]) -> List[ScoredRoute]:
    """
    Best route of each corridor, with the corridors themselves ranked.
    """
    if not routes:
        return []
    grouped = group_by_corridor(routes)
    return rank_routes([members[0] for members in grouped.values()])
