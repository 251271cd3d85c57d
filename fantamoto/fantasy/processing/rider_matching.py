"""
Rider matching for classification payloads.

The MotoGP rider uuid is the canonical join key. Classification payloads
sometimes omit it, so a name match scoped to the category is the fallback.
Riders are never created from results.
"""

from typing import Optional, Tuple
from fantasy.models import Rider
import logging

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """Normalize rider name for comparison (case-insensitive, single spaces)."""
    return ' '.join(name.split()).title() if name else ""


def find_rider_for_result(
    category: str,
    external_id: str = None,
    full_name: str = None,
    number: Optional[int] = None,
) -> Tuple[Optional[Rider], str]:
    """
    Find the rider a classification entry refers to.

    Priority: external_id → name substring (within category) → normalized name (within category)

    When several riders of the category contain the name (two Marquez, two
    Espargaro), the one carrying the classified race number wins.

    Returns: (Rider or None, match_method)
    """
    # 1. External id
    if external_id and (rider := Rider.objects.filter(external_id=external_id).first()):
        return rider, "external_id"

    if not full_name:
        logger.warning(f"No match found: {external_id} (no name to fall back on)")
        return None, "no_match"

    # 2. Substring of stored name, same category
    candidates = Rider.objects.filter(
        category=category, name__icontains=full_name.strip()
    ).order_by('-is_active', 'id')
    if number is not None and (rider := candidates.filter(number=number).first()):
        logger.info(f"Matched by name and number: {full_name} #{number} -> {rider.name} ({category})")
        return rider, "name_contains"
    if rider := candidates.first():
        logger.info(f"Matched by name: {full_name} -> {rider.name} ({category})")
        return rider, "name_contains"

    # 3. Normalized name (handles spacing/case differences)
    normalized = normalize_name(full_name)
    for existing in Rider.objects.filter(category=category).order_by('-is_active', 'id'):
        if normalize_name(existing.name) == normalized:
            logger.info(f"Matched by normalized name: {full_name} -> {existing.name}")
            return existing, "normalized_name"

    logger.warning(f"No match found: {full_name} ({category}, id={external_id or '-'})")
    return None, "no_match"
