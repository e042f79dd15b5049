"""
REELFORGE — Simulation Driver

Monte Carlo harness: spin → evaluate → accumulate, millions of times.

Tracks RTP, hit frequency, the outcome histogram behind the PAR sheet,
and per-reel stop / symbol counts for distribution checks. Runs can be
split across worker processes; each worker gets its own seeded RNG and
its own aggregate, merged once every worker is done.

Usage:
    from slot_engine import SlotMachine, reference_reel_set
    from slot_engine.simulator import simulate, simulate_parallel

    result = simulate(SlotMachine(reference_reel_set(), rng=random.Random(42)), 1_000_000)
    result = simulate_parallel(reference_reel_set(), 10_000_000, workers=8, seed=42)
    print(result.rtp, result.hit_frequency)
"""

from __future__ import annotations

import logging
import math
import multiprocessing as mp
import random
import time
from dataclasses import dataclass, field
from typing import Mapping, Optional

from slot_engine.machine import SlotMachine
from slot_engine.reels import REEL_COUNT, ReelSet
from slot_engine.symbols import PAYTABLE, Symbol, WinCategory

logger = logging.getLogger("reelforge.sim")

DEFAULT_PROGRESS_EVERY = 100_000


@dataclass
class OutcomeTally:
    """One symbol combination seen during a run."""
    symbols: tuple[Symbol, Symbol, Symbol]
    category: WinCategory
    payout: int
    count: int = 0

    @property
    def key(self) -> str:
        return "-".join(s.value for s in self.symbols)


@dataclass
class SimResult:
    """Aggregate of one simulation run (or several merged runs)."""
    spins: int = 0
    coins: int = 1
    total_wagered: int = 0
    total_won: int = 0
    total_hits: int = 0
    max_win: int = 0
    sum_squares: float = 0.0
    category_counts: dict = field(default_factory=dict)    # WinCategory.value -> count
    outcomes: dict = field(default_factory=dict)           # "A-B-C" -> OutcomeTally
    stop_counts: list = field(default_factory=list)        # [reel][position] -> count
    symbol_counts: list = field(default_factory=list)      # [reel] {symbol name: count}
    payouts: Optional[list] = None
    duration_seconds: float = 0.0
    seed: str = ""

    # ── Derived statistics ─────────────────────────────────

    @property
    def rtp(self) -> float:
        return self.total_won / self.total_wagered if self.total_wagered else 0.0

    @property
    def hit_frequency(self) -> float:
        return self.total_hits / self.spins if self.spins else 0.0

    @property
    def avg_win_per_hit(self) -> float:
        return self.total_won / self.total_hits if self.total_hits else 0.0

    @property
    def std_dev(self) -> float:
        """Standard deviation of the payout per spin."""
        if self.spins < 2:
            return 0.0
        mean = self.total_won / self.spins
        variance = (self.sum_squares - self.spins * mean * mean) / (self.spins - 1)
        return math.sqrt(max(variance, 0.0))

    @property
    def confidence_95(self) -> tuple[float, float]:
        """95% confidence interval for the RTP."""
        if not self.spins:
            return (0.0, 0.0)
        std_err = self.std_dev / math.sqrt(self.spins) / self.coins
        return (self.rtp - 1.96 * std_err, self.rtp + 1.96 * std_err)

    @property
    def spins_per_second(self) -> float:
        return self.spins / self.duration_seconds if self.duration_seconds > 0 else 0.0

    def winning_outcomes(self) -> list[OutcomeTally]:
        """Winning combinations, highest payout first."""
        wins = [o for o in self.outcomes.values() if o.payout > 0]
        return sorted(wins, key=lambda o: (-o.payout, -o.count, o.key))

    # ── Combination ────────────────────────────────────────

    def merge(self, other: "SimResult") -> "SimResult":
        """Combine two independent runs of the same machine and bet size."""
        if self.spins and other.spins and self.coins != other.coins:
            raise ValueError(f"Cannot merge runs at {self.coins} and {other.coins} coins")

        outcomes = {k: OutcomeTally(o.symbols, o.category, o.payout, o.count)
                    for k, o in self.outcomes.items()}
        for k, o in other.outcomes.items():
            if k in outcomes:
                outcomes[k].count += o.count
            else:
                outcomes[k] = OutcomeTally(o.symbols, o.category, o.payout, o.count)

        categories = dict(self.category_counts)
        for k, v in other.category_counts.items():
            categories[k] = categories.get(k, 0) + v

        stop_counts = _merge_rows(self.stop_counts, other.stop_counts)
        symbol_counts = []
        for r in range(max(len(self.symbol_counts), len(other.symbol_counts))):
            merged: dict = {}
            for source in (self.symbol_counts, other.symbol_counts):
                if r < len(source):
                    for sym, n in source[r].items():
                        merged[sym] = merged.get(sym, 0) + n
            symbol_counts.append(merged)

        payouts = None
        if self.payouts is not None or other.payouts is not None:
            payouts = (self.payouts or []) + (other.payouts or [])

        return SimResult(
            spins=self.spins + other.spins,
            coins=self.coins if self.spins else other.coins,
            total_wagered=self.total_wagered + other.total_wagered,
            total_won=self.total_won + other.total_won,
            total_hits=self.total_hits + other.total_hits,
            max_win=max(self.max_win, other.max_win),
            sum_squares=self.sum_squares + other.sum_squares,
            category_counts=categories,
            outcomes=outcomes,
            stop_counts=stop_counts,
            symbol_counts=symbol_counts,
            payouts=payouts,
            duration_seconds=max(self.duration_seconds, other.duration_seconds),
            seed=",".join(s for s in (self.seed, other.seed) if s),
        )

    def to_dict(self) -> dict:
        return {
            "spins": self.spins,
            "coins": self.coins,
            "total_wagered": self.total_wagered,
            "total_won": self.total_won,
            "total_hits": self.total_hits,
            "rtp": round(self.rtp, 6),
            "rtp_pct": round(self.rtp * 100, 4),
            "hit_frequency_pct": round(self.hit_frequency * 100, 4),
            "avg_win_per_hit": round(self.avg_win_per_hit, 4),
            "max_win": self.max_win,
            "std_dev": round(self.std_dev, 4),
            "confidence_95": [round(x, 6) for x in self.confidence_95],
            "categories": dict(sorted(self.category_counts.items())),
            "duration_s": round(self.duration_seconds, 2),
            "spins_per_sec": int(self.spins_per_second),
            "seed": self.seed,
        }


def _merge_rows(a: list, b: list) -> list:
    rows = []
    for r in range(max(len(a), len(b))):
        left = a[r] if r < len(a) else []
        right = b[r] if r < len(b) else []
        width = max(len(left), len(right))
        rows.append([(left[i] if i < len(left) else 0) + (right[i] if i < len(right) else 0)
                     for i in range(width)])
    return rows


# ═══════════════════════════════════════════════════════════════
# Drivers
# ═══════════════════════════════════════════════════════════════

def simulate(machine: SlotMachine, spins: int, coins: int = 1,
             keep_payouts: bool = False,
             progress_every: int = DEFAULT_PROGRESS_EVERY,
             seed: str = "") -> SimResult:
    """Run `spins` games on one machine and aggregate the results."""
    if spins < 1:
        raise ValueError(f"spins must be positive, got {spins}")
    if isinstance(coins, bool) or not isinstance(coins, int) or coins < 1:
        raise ValueError(f"coins must be a positive integer, got {coins!r}")

    physical_length = machine.reel_set.physical_length
    stop_counts = [[0] * physical_length for _ in range(REEL_COUNT)]
    outcomes: dict = {}
    categories: dict = {}
    payouts = [] if keep_payouts else None
    total_won = 0
    hits = 0
    max_win = 0
    sum_squares = 0

    logger.info(f"Simulating {spins:,} spins at {coins} coin(s)")
    t0 = time.time()
    for i in range(spins):
        outcome = machine.spin()
        symbols = outcome.symbols
        result = machine.evaluate(symbols, coins)
        payout = result.payout

        total_won += payout
        sum_squares += payout * payout
        if payout > 0:
            hits += 1
            if payout > max_win:
                max_win = payout
        if payouts is not None:
            payouts.append(payout)

        for r, position in enumerate(outcome.positions):
            stop_counts[r][position] += 1

        key = "-".join(s.value for s in symbols)
        tally = outcomes.get(key)
        if tally is None:
            tally = outcomes[key] = OutcomeTally(symbols, result.category, payout)
            categories.setdefault(result.category.value, 0)
        tally.count += 1
        categories[result.category.value] += 1

        if progress_every and (i + 1) % progress_every == 0:
            logger.info(f"{(i + 1) / spins * 100:.1f}% ({i + 1:,} spins)")
    duration = time.time() - t0

    symbol_counts = []
    for r in range(REEL_COUNT):
        counts: dict = {}
        for position, n in enumerate(stop_counts[r]):
            if n:
                name = machine.reel_set.physical_reel[position].value
                counts[name] = counts.get(name, 0) + n
        symbol_counts.append(counts)

    result = SimResult(
        spins=spins,
        coins=coins,
        total_wagered=spins * coins,
        total_won=total_won,
        total_hits=hits,
        max_win=max_win,
        sum_squares=float(sum_squares),
        category_counts=categories,
        outcomes=outcomes,
        stop_counts=stop_counts,
        symbol_counts=symbol_counts,
        payouts=payouts,
        duration_seconds=duration,
        seed=seed,
    )
    logger.info(f"Completed {spins:,} spins in {duration:.2f}s, RTP {result.rtp * 100:.4f}%, "
                f"hit frequency {result.hit_frequency * 100:.4f}%")
    return result


def _run_worker(reel_set: ReelSet, paytable: dict, spins: int, coins: int,
                seed: str, keep_payouts: bool, progress_every: int) -> SimResult:
    machine = SlotMachine(reel_set, paytable, rng=random.Random(seed))
    return simulate(machine, spins, coins, keep_payouts=keep_payouts,
                    progress_every=progress_every, seed=seed)


def split_spins(spins: int, workers: int) -> list[int]:
    """Split a spin count into `workers` near-equal chunks (no empty chunks)."""
    workers = max(1, min(workers, spins))
    base, extra = divmod(spins, workers)
    return [base + (1 if i < extra else 0) for i in range(workers)]


def simulate_parallel(reel_set: ReelSet, spins: int, workers: Optional[int] = None,
                      coins: int = 1, seed=42,
                      paytable: Mapping[WinCategory, int] = PAYTABLE,
                      keep_payouts: bool = False,
                      progress_every: int = DEFAULT_PROGRESS_EVERY) -> SimResult:
    """Split a run across worker processes and merge the aggregates.

    Worker i draws from random.Random(f"{seed}:{i}"), so the merged result
    is reproducible for a given (seed, workers) pair.
    """
    if spins < 1:
        raise ValueError(f"spins must be positive, got {spins}")
    workers = workers or mp.cpu_count()
    chunks = split_spins(spins, workers)
    jobs = [
        (reel_set, dict(paytable), n, coins, f"{seed}:{i}", keep_payouts, progress_every)
        for i, n in enumerate(chunks)
    ]

    t0 = time.time()
    if len(jobs) == 1:
        parts = [_run_worker(*jobs[0])]
    else:
        logger.info(f"Simulating {spins:,} spins across {len(jobs)} workers")
        with mp.Pool(processes=len(jobs)) as pool:
            parts = pool.starmap(_run_worker, jobs)

    merged = SimResult(coins=coins)
    for part in parts:
        merged = merged.merge(part)
    merged.duration_seconds = time.time() - t0
    return merged
