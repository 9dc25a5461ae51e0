"""Canonical weighting table shared by every scorer."""
from __future__ import annotations

import math
from types import MappingProxyType
from typing import Iterable, Mapping

SKILLS = "skills"
LOCATION = "location"
REPUTATION = "reputation"
PRICE = "price"
AVAILABILITY = "availability"

DIMENSION_WEIGHTS: Mapping[str, float] = MappingProxyType({
    SKILLS: 0.30,
    LOCATION: 0.20,
    REPUTATION: 0.15,
    PRICE: 0.15,
    AVAILABILITY: 0.20,
})

if not math.isclose(sum(DIMENSION_WEIGHTS.values()), 1.0):
    raise RuntimeError("DIMENSION_WEIGHTS must sum to 1")


def normalized(dimensions: Iterable[str]) -> dict[str, float]:
    """Weights for a subset of dimensions, rescaled to sum to 1."""
    names = list(dict.fromkeys(dimensions))
    unknown = [n for n in names if n not in DIMENSION_WEIGHTS]
    if unknown:
        raise ValueError(f"Unknown weight dimension(s): {', '.join(unknown)}")
    total = sum(DIMENSION_WEIGHTS[n] for n in names)
    if not total:
        return {}
    return {n: DIMENSION_WEIGHTS[n] / total for n in names}


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (92.5 -> 93).

    The epsilon absorbs float noise from weighted sums such as 0.925 * 100.
    """
    return int(math.floor(value + 0.5 + 1e-9))
