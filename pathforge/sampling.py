"""
Per-thread random number generation.

Every render worker draws from its own numpy Generator so that no mutable
random state is shared between threads. The renderer reseeds the current
thread's generator at the start of each scanline from a child SeedSequence,
which makes an image reproducible for a fixed top-level seed no matter how
scanlines are distributed over workers.
"""

from __future__ import annotations
import threading
from typing import List, Optional, Union

import numpy as np

_local = threading.local()

SeedLike = Union[int, np.random.SeedSequence, None]


def get_rng() -> np.random.Generator:
    """Return the generator owned by the calling thread."""
    rng = getattr(_local, 'rng', None)
    if rng is None:
        rng = np.random.default_rng()
        _local.rng = rng
    return rng


def seed(value: SeedLike = None) -> np.random.Generator:
    """Install a fresh generator for the calling thread.

    Args:
        value: An int, a SeedSequence, or None for OS entropy

    Returns:
        The newly installed generator
    """
    _local.rng = np.random.default_rng(value)
    return _local.rng


def spawn_seeds(value: Optional[int], count: int) -> List[np.random.SeedSequence]:
    """Derive `count` independent child seeds from a top-level seed."""
    return np.random.SeedSequence(value).spawn(count)


def random_double(min_val: float = 0.0, max_val: float = 1.0) -> float:
    """Uniform float in [min_val, max_val)."""
    return float(get_rng().uniform(min_val, max_val))
