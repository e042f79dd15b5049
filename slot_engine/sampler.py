"""
REELFORGE — Spin Logic

Picks weighted stops from the virtual reels and maps them onto the
physical strip.

  1. Take the expanded stop list for the reel (72 entries, reference config)
  2. Pick a uniform index into it: floor(rng.random() * len)
  3. The entry is a physical position (0-21)
  4. Read the symbol straight off the physical reel

The random source is anything with a random() method returning a float
in [0, 1), normally random.Random(seed). Reels draw independently.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from slot_engine.reels import REEL_COUNT, ReelSet
from slot_engine.symbols import Symbol

# Convenience binding for callers that don't care about reproducibility
_default_rng = random.Random()


@dataclass(frozen=True)
class ReelStop:
    position: int
    symbol: Symbol


@dataclass(frozen=True)
class SpinOutcome:
    stops: tuple[ReelStop, ReelStop, ReelStop]

    @property
    def symbols(self) -> tuple[Symbol, Symbol, Symbol]:
        return tuple(s.symbol for s in self.stops)

    @property
    def positions(self) -> tuple[int, int, int]:
        return tuple(s.position for s in self.stops)


def pick_stop(reel_set: ReelSet, reel_id: int, rng=None) -> ReelStop:
    """Pick one weighted stop on a reel. O(1) per draw."""
    stops = reel_set.stop_list(reel_id)
    if rng is None:
        rng = _default_rng
    idx = int(rng.random() * len(stops))
    if idx >= len(stops):
        idx = len(stops) - 1
    position = stops[idx]
    return ReelStop(position=position, symbol=reel_set.physical_reel[position])


def spin(reel_set: ReelSet, rng=None) -> SpinOutcome:
    """Simulate a single spin: one independent draw per reel."""
    if rng is None:
        rng = _default_rng
    return SpinOutcome(stops=tuple(pick_stop(reel_set, r, rng) for r in range(REEL_COUNT)))
