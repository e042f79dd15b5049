#!/usr/bin/env python3
"""
Tests for Monte Carlo validation

Validates:
1. χ² critical values are close to tabulated ones
2. Perfect stop counts fit; a zero-weight hit fails the fit
3. Streak and win-size analysis
4. Simulated RTP of the reference machine lands within tolerance
5. Multi-bet validation report aggregates and serializes
"""

import json
import random
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from slot_engine.machine import SlotMachine
from slot_engine.par import compute_par_sheet
from slot_engine.reels import reference_reel_set
from tools.slot_montecarlo import (
    MonteCarloValidator, _analyze_streaks, _win_distribution, chi_squared_critical, reel_fit,
)


# ============================================================
# Tests
# ============================================================

def test_chi_squared_critical():
    """Wilson–Hilferty lands near the tabulated χ² critical values."""
    assert abs(chi_squared_critical(10, 0.05) - 18.307) < 0.1
    assert abs(chi_squared_critical(20, 0.001) - 45.315) < 0.5
    assert chi_squared_critical(0, 0.05) == 0.0
    print("✅ χ² critical values")


def test_reel_fit_exact_counts():
    """Counts exactly proportional to the weights give χ² = 0."""
    reels = reference_reel_set()
    counts = [[w * 1000 for w in reels.weights[r]] for r in range(3)]
    fits = reel_fit(reels, counts)
    assert len(fits) == 3
    for f in fits:
        assert f.chi_squared == 0.0
        assert f.degrees_of_freedom == 20, f"21 non-zero cells expected, dof={f.degrees_of_freedom}"
        assert f.passed
    print("✅ Exact counts pass the fit")


def test_reel_fit_flags_zero_weight_hit():
    """Any hit on a zero-weight stop fails the reel."""
    reels = reference_reel_set()
    counts = [[w * 1000 for w in reels.weights[r]] for r in range(3)]
    counts[1][17] = 1
    fits = reel_fit(reels, counts)
    assert fits[0].passed and fits[2].passed
    assert fits[1].zero_weight_hits == 1
    assert not fits[1].passed
    print("✅ Zero-weight hit rejected")


def test_reel_fit_flags_skewed_counts():
    reels = reference_reel_set()
    counts = [[w * 1000 for w in reels.weights[r]] for r in range(3)]
    counts[2][1] += 5000
    fits = reel_fit(reels, counts)
    assert not fits[2].passed
    print("✅ Skewed counts rejected")


def test_streaks():
    s = _analyze_streaks([0, 0, 5, 2, 0, 0, 0, 1])
    assert s == {"max_win_streak": 2, "max_loss_streak": 3, "total_wins": 3, "total_losses": 5}, s
    assert _analyze_streaks([]) == {}
    print("✅ Streak analysis")


def test_win_distribution():
    d = _win_distribution([0, 2, 10, 800], coins=1)
    assert d["0x"] == 25.0
    assert d["1-5x"] == 25.0
    assert d["10-25x"] == 25.0
    assert d["500x+"] == 25.0
    # Win size is measured in multiples of the bet
    d = _win_distribution([0, 10], coins=2)
    assert d["5-10x"] == 50.0
    print("✅ Win distribution")


def test_validate_reference_machine():
    """200k spins land well inside ±5% of the exact RTP."""
    reels = reference_reel_set()
    mc = MonteCarloValidator(tolerance=0.05, seed=42, alpha=1e-6)
    result = mc.validate(reels, n_spins=200_000)
    par = compute_par_sheet(reels)

    assert result.theoretical_rtp == par.theoretical_rtp
    assert result.rtp_pass, result.summary()
    assert result.chi_squared_pass, result.summary()
    assert all(f.zero_weight_hits == 0 for f in result.reel_fit)
    assert abs(result.measured_hit_frequency - par.hit_frequency) < 0.005
    assert result.streak_analysis["total_wins"] + result.streak_analysis["total_losses"] == 200_000
    assert "PASS" in result.summary()
    print(f"✅ Reference machine validated (Δ={result.rtp_delta * 100:.3f}%)")


def test_validation_is_reproducible():
    reels = reference_reel_set()
    a = MonteCarloValidator(seed=7).validate(reels, n_spins=5_000, label="repro")
    b = MonteCarloValidator(seed=7).validate(reels, n_spins=5_000, label="repro")
    assert a.measured_rtp == b.measured_rtp
    assert a.seed == b.seed == "7:repro:1"

    # A machine validates through its reels and paytable, not its RNG
    machine = SlotMachine(reels, rng=random.Random(0))
    c = MonteCarloValidator(seed=7).validate(machine, n_spins=5_000, label="repro")
    assert c.measured_rtp == a.measured_rtp
    print("✅ Seeded validation reproducible")


def test_validate_all_report():
    reels = reference_reel_set()
    mc = MonteCarloValidator(tolerance=0.1, alpha=1e-6)
    report = mc.validate_all(reels, n_spins=50_000, coin_levels=(1, 2, 3))
    assert len(report.results) == 3
    assert report.total_spins == 150_000
    assert [r.coins for r in report.results] == [1, 2, 3]
    assert report.overall_pass, report.summary()

    data = json.loads(report.to_json())
    assert data["overall_pass"] is True
    assert len(data["runs"]) == 3
    assert data["runs"][2]["coins"] == 3
    print("✅ Multi-bet report")


# ============================================================
# Runner
# ============================================================

if __name__ == "__main__":
    import logging
    logging.disable(logging.WARNING)

    tests = [
        test_chi_squared_critical,
        test_reel_fit_exact_counts,
        test_reel_fit_flags_zero_weight_hit,
        test_reel_fit_flags_skewed_counts,
        test_streaks,
        test_win_distribution,
        test_validate_reference_machine,
        test_validation_is_reproducible,
        test_validate_all_report,
    ]

    print(f"\n{'='*60}")
    print(f"Monte Carlo Validation Tests — {len(tests)} tests")
    print(f"{'='*60}\n")

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"❌ {test.__name__}: {e}")
            failed += 1

    print(f"\n{'='*60}")
    print(f"Results: {passed} passed, {failed} failed, {passed + failed} total")
    print(f"{'='*60}")

    sys.exit(0 if failed == 0 else 1)
