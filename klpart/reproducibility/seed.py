"""Seed management for reproducible partition runs.

The engine never touches global RNG state: the initial assignment draws
from an explicit numpy Generator built here. set_seed() exists for callers
that also use the global Python/NumPy RNGs (e.g. plotting jitter).
"""

import random

import numpy as np


def make_rng(seed: int | None) -> np.random.Generator:
    """Create the numpy Generator handed to the partitioner.

    Args:
        seed: Master seed, or None for OS entropy.
    """
    return np.random.default_rng(seed)


def derive_seed(seed: int, offset: int) -> int:
    """Derive a sub-seed for a secondary random stream.

    Keeps secondary streams (e.g. restarts with a different initial
    assignment) uncorrelated with the master stream while staying
    reproducible from the single master seed.
    """
    return int(np.random.SeedSequence([seed, offset]).generate_state(1)[0])


def set_seed(seed: int) -> None:
    """Seed the global Python and NumPy legacy RNGs.

    Args:
        seed: Master seed value (e.g., 42).
    """
    random.seed(seed)
    np.random.seed(seed)


def verify_seed_determinism(seed: int) -> bool:
    """Verify that equal seeds yield identical Generator draws.

    Draws a permutation from two Generators built from the
    same seed and from the global RNGs after re-seeding. Returns True if all
    sequences match.
    """
    g1 = make_rng(seed).permutation(100).tolist()
    g2 = make_rng(seed).permutation(100).tolist()

    set_seed(seed)
    r1 = [random.random() for _ in range(10)]
    n1 = np.random.rand(10).tolist()
    set_seed(seed)
    r2 = [random.random() for _ in range(10)]
    n2 = np.random.rand(10).tolist()

    return g1 == g2 and r1 == r2 and n1 == n2
