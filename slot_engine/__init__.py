"""
REELFORGE — 3-Reel Slot Math Engine

Weighted virtual-reel stop selection, wild-aware payout evaluation and a
Monte Carlo harness for RTP / hit frequency.

Usage:
    import random
    from slot_engine import SlotMachine, reference_reel_set, simulate

    machine = SlotMachine(reference_reel_set(), rng=random.Random(42))
    result = simulate(machine, spins=1_000_000)
    print(f"RTP {result.rtp * 100:.2f}%  hit {result.hit_frequency * 100:.2f}%")
"""

from slot_engine.errors import ConfigurationError, OutOfRangeError
from slot_engine.geometry import ReelGeometry, build_physical_geometry
from slot_engine.machine import SlotMachine
from slot_engine.par import ParSheet, compute_par_sheet
from slot_engine.payout import PayoutResult, evaluate, validate_paytable
from slot_engine.reels import (
    PHYSICAL_REEL, VIRTUAL_REEL_WEIGHTS, ReelSet, analyze_reel, expand,
    reference_reel_set, symbol_at,
)
from slot_engine.sampler import ReelStop, SpinOutcome, pick_stop, spin
from slot_engine.simulator import SimResult, simulate, simulate_parallel
from slot_engine.symbols import PAYTABLE, SYMBOL_HEIGHTS, Symbol, WinCategory

__all__ = [
    "ConfigurationError", "OutOfRangeError",
    "ReelGeometry", "build_physical_geometry",
    "SlotMachine",
    "ParSheet", "compute_par_sheet",
    "PayoutResult", "evaluate", "validate_paytable",
    "PHYSICAL_REEL", "VIRTUAL_REEL_WEIGHTS", "ReelSet", "analyze_reel", "expand",
    "reference_reel_set", "symbol_at",
    "ReelStop", "SpinOutcome", "pick_stop", "spin",
    "SimResult", "simulate", "simulate_parallel",
    "PAYTABLE", "SYMBOL_HEIGHTS", "Symbol", "WinCategory",
]
