"""Reproducibility infrastructure: seed management and code provenance tracking."""

from klpart.reproducibility.seed import (
    derive_seed,
    make_rng,
    set_seed,
    verify_seed_determinism,
)
from klpart.reproducibility.git_hash import get_git_hash

__all__ = [
    "derive_seed",
    "make_rng",
    "set_seed",
    "verify_seed_determinism",
    "get_git_hash",
]
