"""
REELFORGE — Exact PAR Sheet

Enumerates every symbol combination the virtual reels can produce and
scores it with the payout evaluator. Each reel collapses to symbol
weights first, so the reference machine needs 7^3 evaluations instead of
the full 72^3 = 373,248 cycle.

Each sheet produces:
  - Every winning combination with its hit count in the full cycle
  - P(combination) and its RTP contribution: P × payout
  - Theoretical RTP, hit frequency and payout variance
  - An RTP proof: Σ P = 1 and Σ(P × payout) = RTP
"""

from __future__ import annotations

import hashlib
import json
import math
from dataclasses import dataclass, field
from itertools import product
from typing import Mapping

from slot_engine.payout import evaluate, validate_paytable
from slot_engine.reels import REEL_COUNT, ReelSet
from slot_engine.symbols import PAYTABLE, Symbol, WinCategory


@dataclass
class ParEntry:
    symbols: tuple[Symbol, Symbol, Symbol]
    category: WinCategory
    payout: int
    hits: int              # combinations out of the full cycle
    probability: float
    contribution: float = 0

    def __post_init__(self):
        self.contribution = self.probability * self.payout

    def to_dict(self) -> dict:
        return {
            "symbols": [s.value for s in self.symbols],
            "type": self.category.value,
            "payout": self.payout,
            "hits": self.hits,
            "probability": round(self.probability, 10),
            "contribution": round(self.contribution, 10),
        }


@dataclass
class ParSheet:
    coins: int
    cycle: int
    entries: list[ParEntry] = field(default_factory=list)
    losing_hits: int = 0
    second_moment: float = 0.0   # E[payout²]
    sheet_hash: str = ""

    def __post_init__(self):
        data = json.dumps(
            [([s.value for s in e.symbols], e.payout, e.hits) for e in self.entries],
            sort_keys=True,
        )
        self.sheet_hash = hashlib.sha256(data.encode()).hexdigest()[:16]

    @property
    def total_return(self) -> float:
        return sum(e.contribution for e in self.entries)

    @property
    def theoretical_rtp(self) -> float:
        """Expected payout per coin wagered."""
        return self.total_return / self.coins

    @property
    def hit_frequency(self) -> float:
        return sum(e.hits for e in self.entries) / self.cycle

    @property
    def variance(self) -> float:
        """Variance of the payout per spin, in coins²."""
        return self.second_moment - self.total_return ** 2

    @property
    def std_dev(self) -> float:
        return math.sqrt(max(self.variance, 0.0))

    def category_totals(self) -> dict[str, dict]:
        totals: dict[str, dict] = {}
        for e in self.entries:
            t = totals.setdefault(e.category.value, {"hits": 0, "probability": 0.0, "contribution": 0.0})
            t["hits"] += e.hits
            t["probability"] += e.probability
            t["contribution"] += e.contribution
        return totals

    def rtp_proof(self) -> dict:
        prob_sum = (sum(e.hits for e in self.entries) + self.losing_hits) / self.cycle
        paytable_rtp = sum(e.hits * e.payout for e in self.entries) / self.cycle / self.coins
        return {
            "sheet_hash": self.sheet_hash,
            "cycle": self.cycle,
            "theoretical_rtp": round(self.theoretical_rtp, 8),
            "theoretical_rtp_pct": round(self.theoretical_rtp * 100, 4),
            "hit_frequency_pct": round(self.hit_frequency * 100, 4),
            "probability_sum": round(prob_sum, 10),
            "probability_sum_check": "PASS" if abs(prob_sum - 1.0) < 1e-9 else "FAIL",
            "rtp_check": "PASS" if abs(paytable_rtp - self.theoretical_rtp) < 1e-9 else "FAIL",
            "n_winning_combinations": len(self.entries),
        }

    def to_dict(self) -> dict:
        return {
            "coins": self.coins,
            "cycle": self.cycle,
            "theoretical_rtp": round(self.theoretical_rtp, 8),
            "hit_frequency": round(self.hit_frequency, 8),
            "std_dev": round(self.std_dev, 6),
            "categories": {
                k: {"hits": v["hits"], "probability": round(v["probability"], 10),
                    "contribution": round(v["contribution"], 10)}
                for k, v in self.category_totals().items()
            },
            "rtp_proof": self.rtp_proof(),
            "entries": [e.to_dict() for e in self.entries],
        }


def compute_par_sheet(reel_set: ReelSet,
                      paytable: Mapping[WinCategory, int] = PAYTABLE,
                      coins: int = 1) -> ParSheet:
    """Exact PAR sheet for a reel set. Entries are sorted by payout, then hits."""
    validate_paytable(paytable)
    reel_weights = [
        [(sym, w) for sym, w in reel_set.symbol_weights(r).items() if w > 0]
        for r in range(REEL_COUNT)
    ]
    cycle = reel_set.expected_total ** REEL_COUNT

    entries = []
    losing = 0
    second_moment = 0.0
    for combo in product(*reel_weights):
        symbols = tuple(sym for sym, _ in combo)
        hits = math.prod(w for _, w in combo)
        result = evaluate(symbols, coins, paytable)
        if result.payout > 0:
            p = hits / cycle
            entries.append(ParEntry(symbols, result.category, result.payout, hits, p))
            second_moment += p * result.payout ** 2
        else:
            losing += hits

    entries.sort(key=lambda e: (-e.payout, -e.hits, [s.value for s in e.symbols]))
    return ParSheet(coins=coins, cycle=cycle, entries=entries,
                    losing_hits=losing, second_moment=second_moment)
