"""
Team scoring algorithm.

Golf-style scoring: lower is better. For every pick in a lineup:

    base_points = actual position, or the category's max position + 1 when the
                  rider did not start / has no result / has no position
                  (FALLBACK_PENALTY_POSITION when nobody in the category has a position)
    delta       = |predicted - base_points|
    points      = base_points + delta

A perfect prediction therefore scores the rider's finishing position.

Everything in this module is a pure function over plain data so the same
inputs always produce the same total and breakdown.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from config.rules import FALLBACK_PENALTY_POSITION

logger = logging.getLogger(__name__)

STATUS_DNS = 'DNS'


@dataclass(frozen=True)
class ResultLine:
    """A persisted RaceResult row reduced to what scoring needs."""
    rider_id: int
    category: str
    position: Optional[int]
    status: str


@dataclass(frozen=True)
class RiderInfo:
    rider_id: int
    name: str
    category: str


@dataclass(frozen=True)
class LineupPick:
    rider_id: int
    predicted_position: int


def compute_max_positions(results: Iterable[ResultLine]) -> Dict[str, int]:
    """Highest non-null finishing position per category. Categories with no position are absent."""
    max_positions: Dict[str, int] = {}
    for line in results:
        if line.position is None:
            continue
        if line.position > max_positions.get(line.category, 0):
            max_positions[line.category] = line.position
    return max_positions


def penalty_position(category: str, max_positions: Mapping[str, int]) -> int:
    """Base points for a pick without a usable position."""
    max_position = max_positions.get(category)
    if max_position is None:
        return FALLBACK_PENALTY_POSITION
    return max_position + 1


def calculate_pick_points(
    predicted_position: int,
    result: Optional[ResultLine],
    category: str,
    max_positions: Mapping[str, int],
) -> Tuple[int, int, int]:
    """
    Score a single pick.

    Returns:
        (base_points, delta, points)
    """
    if result is None or result.status == STATUS_DNS or result.position is None:
        base_points = penalty_position(category, max_positions)
    else:
        base_points = result.position

    delta = abs(predicted_position - base_points)
    return base_points, delta, base_points + delta


def score_lineup(
    picks: Iterable[LineupPick],
    riders: Mapping[int, RiderInfo],
    results_by_rider: Mapping[int, ResultLine],
    max_positions: Mapping[str, int],
) -> Tuple[int, List[Dict]]:
    """
    Score every pick of one lineup.

    Picks referencing a rider missing from ``riders`` are skipped with a
    warning so the rest of the lineup is still scored.

    Returns:
        (total_points, breakdown) where breakdown has one dict per scored pick,
        in pick order.
    """
    total_points = 0
    breakdown = []

    for pick in picks:
        rider = riders.get(pick.rider_id)
        if rider is None:
            logger.warning(f"Skipping pick for unknown rider {pick.rider_id}")
            continue

        result = results_by_rider.get(pick.rider_id)
        base_points, delta, points = calculate_pick_points(
            pick.predicted_position, result, rider.category, max_positions
        )
        total_points += points

        breakdown.append({
            'rider_id': rider.rider_id,
            'rider_name': rider.name,
            'category': rider.category,
            'predicted_position': pick.predicted_position,
            'actual_position': result.position if result else None,
            'status': result.status if result else None,
            'base_points': base_points,
            'delta': delta,
            'points': points,
        })

    return total_points, breakdown
