"""
Seedable random number generator management for reproducible sampling.

Derives independent, reproducible ``numpy.random.Generator`` streams from one
master seed, e.g. one stream per worker when sampling circuits in parallel.
"""

import numpy as np
from typing import Optional, Dict
from dataclasses import dataclass
import logging

logger = logging.getLogger(__name__)


@dataclass
class RNGState:
    """Container for RNG state and metadata."""

    seed: int
    generator: np.random.Generator
    call_count: int = 0


class RNGManager:
    """
    Named, seeded random generators derived from one master seed.

    Usage:
        >>> rng_mgr = RNGManager(global_seed=42)
        >>> sampling_rng = rng_mgr.get_rng("sampling")
        >>> worker_seeds = rng_mgr.seed_sequence("workers", n=4)
    """

    def __init__(self, global_seed: Optional[int] = None):
        """
        Args:
            global_seed: Master seed for all RNGs. If None, uses system entropy.
        """
        self.global_seed = global_seed
        self._rngs: Dict[str, RNGState] = {}
        self._seed_generator = np.random.default_rng(global_seed)

        logger.debug(f"RNGManager initialized with global_seed={global_seed}")

    def get_rng(self, name: str) -> np.random.Generator:
        """
        Get or create the generator for a named stream.

        Streams are seeded in creation order, so the same sequence of
        ``get_rng`` calls under the same master seed is reproducible.
        """
        if name not in self._rngs:
            stream_seed = int(self._seed_generator.integers(0, 2**31 - 1))
            self._rngs[name] = RNGState(
                seed=stream_seed,
                generator=np.random.default_rng(stream_seed),
            )
            logger.debug(f"Created RNG stream '{name}' with seed={stream_seed}")

        state = self._rngs[name]
        state.call_count += 1
        return state.generator

    def get_state_summary(self) -> Dict[str, Dict]:
        """Seed and call count of every stream, for logging."""
        return {
            name: {"seed": state.seed, "call_count": state.call_count}
            for name, state in self._rngs.items()
        }

    def seed_sequence(self, name: str, n: int) -> np.ndarray:
        """
        Generate ``n`` seeds for parallel workers from the named stream.
        """
        rng = self.get_rng(name)
        return rng.integers(0, 2**31 - 1, size=n)
