from __future__ import annotations

"""Integrated GameRNG module.

This module provides the deterministic random number generator used by every
stochastic stage of map generation.  All draws funnel through a single numpy
``Generator`` so a fixed seed reproduces a map exactly.

A process-wide instance is available through :func:`get_default_rng`.  It is
created lazily from system entropy unless :func:`seed_default_rng` installs a
seeded one first.  Generation code accepts an explicit ``rng`` argument
everywhere; pass one instance per run when generating maps re-entrantly.
"""

import random
from typing import Any, Dict, List, Optional, Sequence, TypeVar

import numpy as np
import structlog

log = structlog.get_logger()

T = TypeVar("T")


# ---------------------------------------------------------------------------
# RNG implementation
# ---------------------------------------------------------------------------


class GameRNG:
    def __init__(self, seed: Optional[int] = None) -> None:
        self.initial_seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.rng = np.random.default_rng(self.initial_seed)

    # ------------------------------------------------------------------
    # basic random helpers
    # ------------------------------------------------------------------
    def get_float(self, a: float = 0.0, b: float = 1.0) -> float:
        if a > b:
            raise ValueError("a <= b")
        val = float(self.rng.random())
        return a + (b - a) * val

    def uniform(self, min_value: float, max_value: float) -> float:
        """Float in ``[min_value, max_value)``."""
        return self.get_float(min_value, max_value)

    def get_int(self, a: int, b: int) -> int:
        if a > b:
            raise ValueError("a <= b")
        # Derived from get_float so every draw advances the same stream.
        return a + min(int(self.get_float() * (b - a + 1)), b - a)

    def coin_flip(self, heads_probability: float = 0.5) -> str:
        if not 0.0 <= heads_probability <= 1.0:
            raise ValueError("probability out of range")
        return "heads" if self.get_float() < heads_probability else "tails"

    # ------------------------------------------------------------------
    # sequence utilities
    # ------------------------------------------------------------------
    def shuffle(self, seq: Sequence[T]) -> List[T]:
        """Fisher-Yates shuffle. Returns a new list; ``seq`` is left untouched."""
        items = list(seq)
        for i in range(len(items) - 1, 0, -1):
            j = int(self.get_float() * (i + 1))
            items[i], items[j] = items[j], items[i]
        return items

    def sample_one(self, seq: Sequence[T]) -> Optional[T]:
        """Uniform pick from ``seq`` or ``None`` when it is empty."""
        if len(seq) == 0:
            return None
        return seq[int(self.get_float() * len(seq))]

    def pop_random(self, items: List[T]) -> T:
        """Removes and returns a uniformly chosen element of ``items``."""
        if not items:
            raise IndexError("pop from empty list")
        return items.pop(self.get_int(0, len(items) - 1))

    def sample(self, items: Sequence[T], k: int) -> List[T]:
        if k < 0:
            raise ValueError("k >= 0")
        if k > len(items):
            raise ValueError("k <= len(items) without replacement")
        return self.shuffle(items)[:k]

    # ------------------------------------------------------------------
    # weighted helpers
    # ------------------------------------------------------------------
    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> T:
        if len(items) != len(weights):
            raise ValueError("items/weights length mismatch")
        if not items:
            raise ValueError("items empty")
        total = float(sum(weights))
        if total <= 0:
            raise ValueError("weight sum must be positive")
        cdf = np.cumsum(np.asarray(weights, dtype=float))
        cdf[-1] = total
        r = self.get_float(0.0, total)
        idx = int(np.searchsorted(cdf, r, side="right"))
        return items[min(idx, len(items) - 1)]

    # ------------------------------------------------------------------
    # state management
    # ------------------------------------------------------------------
    def get_state(self) -> Dict[str, Any]:
        return {
            "random_state": self.rng.bit_generator.state,
            "initial_seed": self.initial_seed,
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        if "random_state" in state:
            self.rng.bit_generator.state = state["random_state"]
        if "initial_seed" in state:
            self.initial_seed = state["initial_seed"]


# ---------------------------------------------------------------------------
# Process-wide default instance
# ---------------------------------------------------------------------------

_default_rng: Optional[GameRNG] = None


def get_default_rng() -> GameRNG:
    """Return the process-wide RNG, creating it from entropy on first use."""
    global _default_rng
    if _default_rng is None:
        _default_rng = GameRNG()
        log.debug("Default GameRNG created", seed=_default_rng.initial_seed)
    return _default_rng


def seed_default_rng(seed: Optional[int]) -> GameRNG:
    """Install a new process-wide RNG. Meant to be called once at start-up."""
    global _default_rng
    _default_rng = GameRNG(seed=seed)
    log.info("Default GameRNG seeded", seed=_default_rng.initial_seed)
    return _default_rng


def resolve_rng(rng: Optional[GameRNG]) -> GameRNG:
    return rng if rng is not None else get_default_rng()


__all__ = [
    "GameRNG",
    "get_default_rng",
    "seed_default_rng",
    "resolve_rng",
]
