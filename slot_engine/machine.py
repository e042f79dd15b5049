"""
REELFORGE — Slot Machine

Explicit composition of a validated reel set, a paytable and an injected
random source. Nothing here is global: build one machine per run and pass
it to the simulator.

Usage:
    import random
    from slot_engine import SlotMachine, reference_reel_set

    machine = SlotMachine(reference_reel_set(), rng=random.Random(7))
    outcome, result = machine.play(coins=2)
"""

from __future__ import annotations

import random
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

from slot_engine.payout import PayoutResult, evaluate, validate_paytable
from slot_engine.reels import ReelSet
from slot_engine.sampler import ReelStop, SpinOutcome, pick_stop, spin
from slot_engine.symbols import PAYTABLE, WinCategory


class SlotMachine:
    """A 3-reel, single-line machine."""

    def __init__(self, reel_set: ReelSet,
                 paytable: Mapping[WinCategory, int] = PAYTABLE,
                 rng: Optional[random.Random] = None):
        validate_paytable(paytable)
        self.reel_set = reel_set
        self.paytable = MappingProxyType(dict(paytable))
        self.rng = rng if rng is not None else random.Random()

    def pick_stop(self, reel_id: int) -> ReelStop:
        return pick_stop(self.reel_set, reel_id, self.rng)

    def spin(self) -> SpinOutcome:
        return spin(self.reel_set, self.rng)

    def evaluate(self, symbols: Sequence, coins: int = 1) -> PayoutResult:
        return evaluate(symbols, coins, self.paytable)

    def play(self, coins: int = 1) -> tuple[SpinOutcome, PayoutResult]:
        """Spin and score one game. coins must be a positive integer."""
        if isinstance(coins, bool) or not isinstance(coins, int) or coins < 1:
            raise ValueError(f"coins must be a positive integer, got {coins!r}")
        outcome = self.spin()
        return outcome, self.evaluate(outcome.symbols, coins)
