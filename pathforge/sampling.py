"""
Random number helpers shared by the sampling code.

Every sampling routine in the package takes an optional
``numpy.random.Generator``. Passing one explicitly makes a render
reproducible and lets parallel workers draw from independent streams;
omitting it falls back to a process-wide default generator.
"""

from __future__ import annotations
from typing import List, Optional

import numpy as np

_default_rng = np.random.default_rng()


def resolve_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return ``rng`` or the shared default generator."""
    return _default_rng if rng is None else rng


def random_double(rng: Optional[np.random.Generator] = None) -> float:
    """Uniform float in [0, 1)."""
    return float(resolve_rng(rng).random())


def random_in(min_val: float, max_val: float, rng: Optional[np.random.Generator] = None) -> float:
    """Uniform float in [min_val, max_val)."""
    return min_val + (max_val - min_val) * random_double(rng)


def clamp(value: float, min_val: float, max_val: float) -> float:
    if value < min_val:
        return min_val
    if value > max_val:
        return max_val
    return value


def spawn_generators(seed: Optional[int], count: int) -> List[np.random.Generator]:
    """Create ``count`` statistically independent generators from one seed.

    Args:
        seed: Root seed (None draws fresh entropy from the OS)
        count: Number of generators to create

    Returns:
        Generators whose streams do not overlap, in a stable order
    """
    children = np.random.SeedSequence(seed).spawn(count)
    return [np.random.default_rng(child) for child in children]
