"""
One-rep-max estimation.

Estimates are used by the one-rep-max and personal-record challenge types.
Only the Brzycki formula is used; it is accurate for low rep ranges and
undefined at 37 reps and above.
"""
from typing import Iterable, Optional

from domain.models import SetEntry

# Brzycki's denominator reaches zero here
BRZYCKI_REP_LIMIT = 37


def calculate_1rm_brzycki(weight: float, reps: int) -> Optional[float]:
    """
    Calculate estimated 1RM using Brzycki formula.

    Formula: 1RM = weight * (36 / (37 - reps))

    Most accurate for rep ranges 1-10. Less reliable above 10 reps.

    Args:
        weight: Weight lifted
        reps: Number of reps completed

    Returns:
        Estimated 1RM, or None when reps is 0 or at least 37
    """
    if reps <= 0 or reps >= BRZYCKI_REP_LIMIT:
        return None
    return float(weight) * (36.0 / (BRZYCKI_REP_LIMIT - reps))


def best_estimated_1rm(
    sets: Iterable[SetEntry],
    *,
    max_reps: Optional[int] = None,
) -> Optional[float]:
    """
    Best Brzycki estimate across sets.

    Args:
        sets: Sets to evaluate
        max_reps: Ignore sets above this rep count (e.g. 10 for PR checks)

    Returns:
        Highest estimate, or None if no set produced one
    """
    best: Optional[float] = None
    for s in sets:
        if s.weight <= 0:
            continue
        if max_reps is not None and s.reps > max_reps:
            continue
        estimate = calculate_1rm_brzycki(s.weight, s.reps)
        if estimate is not None and (best is None or estimate > best):
            best = estimate
    return best
