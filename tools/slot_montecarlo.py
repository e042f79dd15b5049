"""
REELFORGE — Monte Carlo Validator

Simulates N spins of a reel configuration and validates:
  • Measured RTP within tolerance of the exact PAR-sheet RTP
  • Hit frequency matches the PAR sheet
  • Sampled stop frequencies fit weight / total (chi-squared per reel)
  • Zero-weight stops are never selected
  • Win/loss streaks and win-size distribution

Seeds are derived per run label so results are reproducible.

Usage:
    from tools.slot_montecarlo import MonteCarloValidator
    mc = MonteCarloValidator(tolerance=0.02)

    result = mc.validate(reference_reel_set(), n_spins=1_000_000)
    print(result.summary())

    # Same reels at several bet sizes
    report = mc.validate_all(reference_reel_set(), coin_levels=(1, 2, 3))
    print(report.to_json())
"""

from __future__ import annotations

import hashlib
import json
import logging
import math
import random
import statistics
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Mapping

from slot_engine.machine import SlotMachine
from slot_engine.par import compute_par_sheet
from slot_engine.reels import REEL_COUNT, ReelSet
from slot_engine.simulator import simulate
from slot_engine.symbols import PAYTABLE, WinCategory

logger = logging.getLogger("reelforge.montecarlo")


# ═══════════════════════════════════════════════════════════════
# Data Structures
# ═══════════════════════════════════════════════════════════════

@dataclass
class ReelFitResult:
    """Chi-squared goodness-of-fit of one reel's sampled stops."""
    reel: int
    chi_squared: float
    degrees_of_freedom: int
    critical_value: float
    zero_weight_hits: int = 0

    @property
    def passed(self) -> bool:
        return self.zero_weight_hits == 0 and self.chi_squared < self.critical_value

    def to_dict(self) -> dict:
        return {
            "reel": self.reel + 1,
            "chi_squared": round(self.chi_squared, 4),
            "dof": self.degrees_of_freedom,
            "critical_value": round(self.critical_value, 4),
            "zero_weight_hits": self.zero_weight_hits,
            "pass": self.passed,
        }


@dataclass
class SimulationResult:
    """Results from a Monte Carlo validation run."""
    label: str
    n_spins: int
    coins: int
    theoretical_rtp: float           # Exact, from the PAR sheet
    measured_rtp: float
    rtp_delta: float                 # |measured - theoretical|
    rtp_pass: bool
    tolerance: float = 0.02

    theoretical_hit_frequency: float = 0.0
    measured_hit_frequency: float = 0.0
    measured_std_dev: float = 0.0
    measured_max_win: int = 0
    confidence_95: tuple = (0.0, 0.0)

    win_distribution: dict = field(default_factory=dict)
    streak_analysis: dict = field(default_factory=dict)
    reel_fit: list = field(default_factory=list)

    duration_seconds: float = 0.0
    spins_per_second: float = 0.0
    seed: str = ""

    @property
    def chi_squared_pass(self) -> bool:
        return all(f.passed for f in self.reel_fit)

    @property
    def passed(self) -> bool:
        return self.rtp_pass and self.chi_squared_pass

    def summary(self) -> str:
        status = "✅ PASS" if self.rtp_pass else "❌ FAIL"
        fit = "✅ PASS" if self.chi_squared_pass else "❌ FAIL"
        lines = [
            f"═══ Monte Carlo: {self.label.upper()} ({self.coins} coin) ═══",
            f"  Spins:       {self.n_spins:,}",
            f"  Theoretical: {self.theoretical_rtp*100:.4f}%",
            f"  Measured:    {self.measured_rtp*100:.4f}%",
            f"  Delta:       {self.rtp_delta*100:.4f}%  (±{self.tolerance*100:.2f}%)",
            f"  95% CI:      {self.confidence_95[0]*100:.3f}% – {self.confidence_95[1]*100:.3f}%",
            f"  RTP Check:   {status}",
            f"  Hit Freq:    {self.measured_hit_frequency*100:.2f}% "
            f"(theory {self.theoretical_hit_frequency*100:.2f}%)",
            f"  Std Dev:     {self.measured_std_dev:.4f}",
            f"  Max Win:     {self.measured_max_win:,}",
            f"  Stop Fit:    {fit}",
        ]
        for f in self.reel_fit:
            lines.append(f"    Reel {f.reel + 1}: χ²={f.chi_squared:.2f} "
                         f"(dof={f.degrees_of_freedom}, crit={f.critical_value:.2f})")
        if self.streak_analysis:
            lines.append(f"  Max Loss Streak: {self.streak_analysis.get('max_loss_streak', 'N/A')}")
            lines.append(f"  Max Win Streak:  {self.streak_analysis.get('max_win_streak', 'N/A')}")
        lines.append(f"  Speed:       {self.spins_per_second:,.0f} spins/sec")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "n_spins": self.n_spins,
            "coins": self.coins,
            "theoretical_rtp_pct": round(self.theoretical_rtp * 100, 4),
            "measured_rtp_pct": round(self.measured_rtp * 100, 4),
            "rtp_delta_pct": round(self.rtp_delta * 100, 4),
            "rtp_pass": self.rtp_pass,
            "tolerance_pct": self.tolerance * 100,
            "confidence_95_pct": [round(x * 100, 4) for x in self.confidence_95],
            "hit_frequency": {
                "theoretical_pct": round(self.theoretical_hit_frequency * 100, 4),
                "measured_pct": round(self.measured_hit_frequency * 100, 4),
            },
            "volatility": {
                "std_dev": round(self.measured_std_dev, 4),
                "max_win": self.measured_max_win,
            },
            "distribution": self.win_distribution,
            "streak_analysis": self.streak_analysis,
            "reel_fit": [f.to_dict() for f in self.reel_fit],
            "performance": {
                "duration_s": round(self.duration_seconds, 2),
                "spins_per_sec": int(self.spins_per_second),
            },
            "seed": self.seed,
        }


@dataclass
class ValidationReport:
    """Validation runs across several bet sizes."""
    results: list[SimulationResult] = field(default_factory=list)
    overall_pass: bool = True
    generated_at: str = ""
    total_spins: int = 0
    total_duration: float = 0.0

    def __post_init__(self):
        self.generated_at = datetime.now(timezone.utc).isoformat()

    def add(self, result: SimulationResult):
        self.results.append(result)
        if not result.passed:
            self.overall_pass = False
        self.total_spins += result.n_spins
        self.total_duration += result.duration_seconds

    def summary(self) -> str:
        lines = [
            "═══════════════════════════════════════════════════",
            "    MONTE CARLO VALIDATION REPORT",
            "═══════════════════════════════════════════════════",
            f"  Generated: {self.generated_at}",
            f"  Total Spins: {self.total_spins:,}",
            f"  Total Time: {self.total_duration:.1f}s",
            f"  Overall: {'✅ ALL PASS' if self.overall_pass else '❌ SOME FAILED'}",
            "",
        ]
        for r in self.results:
            status = "✅" if r.passed else "❌"
            lines.append(
                f"  {status} {r.label:10s} x{r.coins} | "
                f"theory={r.theoretical_rtp*100:.2f}% "
                f"measured={r.measured_rtp*100:.2f}% "
                f"Δ={r.rtp_delta*100:.4f}% "
                f"hit={r.measured_hit_frequency*100:.1f}% "
                f"σ={r.measured_std_dev:.2f}"
            )
        return "\n".join(lines)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps({
            "report_type": "Monte Carlo Validation",
            "generated_at": self.generated_at,
            "overall_pass": self.overall_pass,
            "total_spins": self.total_spins,
            "total_duration_s": round(self.total_duration, 2),
            "runs": [r.to_dict() for r in self.results],
        }, indent=indent)


# ═══════════════════════════════════════════════════════════════
# Streak, Distribution & Fit Analysis
# ═══════════════════════════════════════════════════════════════

def _analyze_streaks(payouts: list[int]) -> dict:
    """Longest win/loss runs from a sequence of payouts."""
    if not payouts:
        return {}

    max_win = 0
    max_loss = 0
    cur_win = 0
    cur_loss = 0
    total_wins = 0

    for p in payouts:
        if p > 0:
            total_wins += 1
            cur_win += 1
            cur_loss = 0
            if cur_win > max_win:
                max_win = cur_win
        else:
            cur_loss += 1
            cur_win = 0
            if cur_loss > max_loss:
                max_loss = cur_loss

    return {
        "max_win_streak": max_win,
        "max_loss_streak": max_loss,
        "total_wins": total_wins,
        "total_losses": len(payouts) - total_wins,
    }


def _win_distribution(payouts: list[int], coins: int) -> dict:
    """Percentage of spins per win size, in multiples of the bet."""
    buckets = {"0x": 0, "1-5x": 0, "5-10x": 0, "10-25x": 0,
               "25-100x": 0, "100-500x": 0, "500x+": 0}
    for p in payouts:
        mult = p / coins
        if mult == 0:
            buckets["0x"] += 1
        elif mult < 5:
            buckets["1-5x"] += 1
        elif mult < 10:
            buckets["5-10x"] += 1
        elif mult < 25:
            buckets["10-25x"] += 1
        elif mult < 100:
            buckets["25-100x"] += 1
        elif mult < 500:
            buckets["100-500x"] += 1
        else:
            buckets["500x+"] += 1
    n = len(payouts)
    return {k: round(v / n * 100, 4) for k, v in buckets.items()} if n else buckets


def chi_squared_critical(dof: int, alpha: float) -> float:
    """Upper critical value of χ²(dof) via the Wilson–Hilferty approximation."""
    if dof < 1:
        return 0.0
    z = statistics.NormalDist().inv_cdf(1 - alpha)
    k = 2 / (9 * dof)
    return dof * (1 - k + z * math.sqrt(k)) ** 3


def reel_fit(reel_set: ReelSet, stop_counts: list[list[int]], alpha: float = 0.001) -> list[ReelFitResult]:
    """Chi-squared test of observed stop counts against weight / total, per reel."""
    results = []
    for r in range(REEL_COUNT):
        observed = stop_counts[r]
        n = sum(observed)
        weights = reel_set.weights[r]
        chi2 = 0.0
        cells = 0
        zero_hits = 0
        for position, w in enumerate(weights):
            if w == 0:
                zero_hits += observed[position]
                continue
            expected = n * w / reel_set.expected_total
            chi2 += (observed[position] - expected) ** 2 / expected
            cells += 1
        dof = cells - 1
        results.append(ReelFitResult(
            reel=r,
            chi_squared=chi2,
            degrees_of_freedom=dof,
            critical_value=chi_squared_critical(dof, alpha),
            zero_weight_hits=zero_hits,
        ))
    return results


# ═══════════════════════════════════════════════════════════════
# Monte Carlo Validator
# ═══════════════════════════════════════════════════════════════

class MonteCarloValidator:
    """Validates a reel configuration against its exact PAR sheet."""

    def __init__(self, tolerance: float = 0.02, seed: int = 42, alpha: float = 0.001):
        """
        Args:
            tolerance: Maximum allowed RTP deviation (0.02 = ±2%)
            seed: Base seed for reproducibility
            alpha: Significance level for the stop-frequency fit
        """
        self.tolerance = tolerance
        self.base_seed = seed
        self.alpha = alpha

    def _rng(self, label: str, coins: int) -> tuple[random.Random, str]:
        # Deterministic seed per run label
        seed = f"{self.base_seed}:{label}:{coins}"
        h = int(hashlib.md5(seed.encode()).hexdigest()[:8], 16)
        return random.Random(h), seed

    def validate(self, reel_set: ReelSet,
                 paytable: Mapping[WinCategory, int] = PAYTABLE,
                 n_spins: int = 500_000, coins: int = 1,
                 label: str = "classic") -> SimulationResult:
        """Validate a reel set, or a SlotMachine's reels and paytable.

        The machine's own RNG is not used; every run draws from a seed
        derived from (seed, label, coins).
        """
        if isinstance(reel_set, SlotMachine):
            reel_set, paytable = reel_set.reel_set, reel_set.paytable
        par = compute_par_sheet(reel_set, paytable, coins)
        rng, seed = self._rng(label, coins)
        machine = SlotMachine(reel_set, paytable, rng=rng)

        logger.info(f"Validating '{label}' over {n_spins:,} spins "
                    f"(theoretical RTP {par.theoretical_rtp * 100:.4f}%)")
        sim = simulate(machine, n_spins, coins, keep_payouts=True,
                       progress_every=0, seed=seed)

        rtp_delta = abs(sim.rtp - par.theoretical_rtp)
        result = SimulationResult(
            label=label,
            n_spins=n_spins,
            coins=coins,
            theoretical_rtp=par.theoretical_rtp,
            measured_rtp=sim.rtp,
            rtp_delta=rtp_delta,
            rtp_pass=rtp_delta <= self.tolerance,
            tolerance=self.tolerance,
            theoretical_hit_frequency=par.hit_frequency,
            measured_hit_frequency=sim.hit_frequency,
            measured_std_dev=sim.std_dev,
            measured_max_win=sim.max_win,
            confidence_95=sim.confidence_95,
            win_distribution=_win_distribution(sim.payouts, coins),
            streak_analysis=_analyze_streaks(sim.payouts),
            reel_fit=reel_fit(reel_set, sim.stop_counts, self.alpha),
            duration_seconds=sim.duration_seconds,
            spins_per_second=sim.spins_per_second,
            seed=seed,
        )
        if not result.passed:
            logger.warning(f"Validation failed for '{label}' x{coins}: "
                           f"Δ={rtp_delta * 100:.4f}%, fit={'ok' if result.chi_squared_pass else 'rejected'}")
        return result

    def validate_all(self, reel_set: ReelSet,
                     paytable: Mapping[WinCategory, int] = PAYTABLE,
                     n_spins: int = 500_000,
                     coin_levels: tuple = (1, 2, 3),
                     label: str = "classic") -> ValidationReport:
        """Validate the same reels at several bet sizes."""
        report = ValidationReport()
        for coins in coin_levels:
            report.add(self.validate(reel_set, paytable, n_spins, coins, label))
        return report
