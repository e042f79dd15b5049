#!/usr/bin/env python3
"""
REELFORGE — Unit & Integration Test Suite

Run: python tests.py
     python tests.py -v              # verbose
     python tests.py TestPayout      # run specific class

Test categories:
  TestReelModel        — Weight expansion, symbol lookup, reel analysis
  TestStopSampler      — Weighted stop selection, index clamping
  TestPayoutEvaluator  — Rule precedence, wild multipliers, cherries
  TestSlotMachine      — Composition, reproducibility, bet validation
  TestGeometry         — Physical strip pixel layout
  TestParSheet         — Exact enumeration of the reference machine
  TestSimulation       — Aggregates, merging, parallel runs
  TestMachineSchema    — JSON machine definitions
"""

import itertools
import json
import math
import random
import sys
import tempfile
import unittest
from pathlib import Path

# ── Ensure project root is on sys.path ──
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.machine_schema import MachineDefinition, load_machine_definition
from slot_engine import (
    PAYTABLE, PHYSICAL_REEL, VIRTUAL_REEL_WEIGHTS, ConfigurationError, OutOfRangeError,
    ReelSet, SlotMachine, Symbol, WinCategory, analyze_reel, build_physical_geometry,
    compute_par_sheet, evaluate, expand, pick_stop, reference_reel_set, simulate,
    simulate_parallel, spin, symbol_at, validate_paytable,
)
from slot_engine.simulator import SimResult, split_spins

B, SB, DB, TB = Symbol.BLANK, Symbol.SINGLE_BAR, Symbol.DOUBLE_BAR, Symbol.TRIPLE_BAR
S7, DD, CH = Symbol.SEVEN, Symbol.DOUBLE_DIAMOND, Symbol.CHERRY

# Reference machine, counted by hand over the 72^3 cycle
CYCLE = 373_248
TOTAL_RETURN = 356_029
TOTAL_HITS = 54_667


class FixedRng:
    """Replays a fixed sequence of random() values."""

    def __init__(self, *values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


def _weights(*tables):
    return [dict(t) for t in tables]


# ============================================================
# Reel Model
# ============================================================

class TestReelModel(unittest.TestCase):

    def test_expand_repeats_positions_by_count(self):
        self.assertEqual(expand({0: 2, 1: 3, 2: 1}, 6, 3), (0, 0, 1, 1, 1, 2))

    def test_expand_zero_weight_is_valid(self):
        self.assertEqual(expand({0: 2, 1: 0, 2: 4}, 6, 3), (0, 0, 2, 2, 2, 2))

    def test_expand_rejects_wrong_total(self):
        with self.assertRaises(ConfigurationError) as ctx:
            expand({0: 2, 1: 2, 2: 1}, 6, 3)
        self.assertIn("sum to 6", str(ctx.exception))

    def test_expand_rejects_missing_position(self):
        with self.assertRaises(ConfigurationError) as ctx:
            expand({0: 6, 1: 0}, 6, 3)
        self.assertIn("position 2", str(ctx.exception))

    def test_expand_rejects_negative_count(self):
        with self.assertRaises(ConfigurationError):
            expand({0: 7, 1: -1, 2: 0}, 6, 3)

    def test_expand_rejects_out_of_range_key(self):
        with self.assertRaises(ConfigurationError):
            expand({0: 6, 1: 0, 2: 0, 5: 0}, 6, 3)

    def test_reference_stop_lists(self):
        reels = reference_reel_set()
        for r in range(3):
            stops = reels.stop_list(r)
            self.assertEqual(len(stops), 72)
            self.assertNotIn(17, stops)
            self.assertEqual(stops.count(3), 12)
            self.assertEqual(stops.count(15), 12)

    def test_reference_weights_sum(self):
        for name, table in VIRTUAL_REEL_WEIGHTS.items():
            self.assertEqual(sum(table.values()), 72, name)
            self.assertEqual(len(table), len(PHYSICAL_REEL))

    def test_symbol_at(self):
        self.assertEqual(symbol_at(0), B)
        self.assertEqual(symbol_at(13), S7)
        self.assertEqual(symbol_at(17), DD)
        self.assertEqual(symbol_at(21), DB)

    def test_symbol_at_out_of_range(self):
        with self.assertRaises(OutOfRangeError):
            symbol_at(22)
        with self.assertRaises(IndexError):
            symbol_at(-1)

    def test_symbol_at_rejects_non_int(self):
        for position in (True, 2.0, "3"):
            with self.assertRaises(TypeError):
                symbol_at(position)

    def test_bad_reel_id(self):
        with self.assertRaises(OutOfRangeError):
            reference_reel_set().stop_list(3)

    def test_symbol_weights(self):
        weights = reference_reel_set().symbol_weights(0)
        self.assertEqual(weights, {B: 35, S7: 2, SB: 24, DD: 1, TB: 2, CH: 1, DB: 7})

    def test_analyze_reel(self):
        analysis = analyze_reel(reference_reel_set(), 1)
        dd = analysis["DOUBLE_DIAMOND"]
        self.assertEqual(dd["count"], 1)
        self.assertEqual(dd["positions"], [{"position": 5, "count": 1}, {"position": 17, "count": 0}])
        self.assertEqual(dd["percentage"], 1.39)
        self.assertEqual(sum(e["count"] for e in analysis.values()), 72)

    def test_weight_table_is_a_copy(self):
        reels = reference_reel_set()
        table = reels.weight_table(0)
        table[0] = 99
        self.assertEqual(reels.weight_table(0)[0], 4)

    def test_from_weights_needs_three_tables(self):
        with self.assertRaises(ConfigurationError):
            ReelSet.from_weights(PHYSICAL_REEL, [VIRTUAL_REEL_WEIGHTS["REEL1"]] * 2)

    def test_from_weights_names_bad_reel(self):
        bad = dict(VIRTUAL_REEL_WEIGHTS["REEL2"])
        bad[0] += 1
        with self.assertRaises(ConfigurationError) as ctx:
            ReelSet.from_weights(PHYSICAL_REEL, [VIRTUAL_REEL_WEIGHTS["REEL1"], bad,
                                                 VIRTUAL_REEL_WEIGHTS["REEL3"]])
        self.assertTrue(str(ctx.exception).startswith("REEL2:"))

    def test_from_weights_unknown_symbol(self):
        strip = ["BLANK", "LEMON"]
        with self.assertRaises(ConfigurationError):
            ReelSet.from_weights(strip, _weights({0: 1, 1: 1}, {0: 1, 1: 1}, {0: 1, 1: 1}), 2)

    def test_custom_reel_set(self):
        reels = ReelSet.from_weights(["SEVEN", "BLANK"],
                                     _weights({0: 3, 1: 1}, {0: 2, 1: 2}, {0: 0, 1: 4}), 4)
        self.assertEqual(reels.physical_reel, (S7, B))
        self.assertEqual(reels.stop_list(0), (0, 0, 0, 1))
        self.assertEqual(reels.stop_list(2), (1, 1, 1, 1))


# ============================================================
# Stop Sampler
# ============================================================

class TestStopSampler(unittest.TestCase):

    def test_first_index(self):
        stop = pick_stop(reference_reel_set(), 0, FixedRng(0.0))
        self.assertEqual((stop.position, stop.symbol), (0, B))

    def test_index_maps_through_stop_list(self):
        # positions 0 (x4) then 1 (x1): index 4 is the first SEVEN stop
        stop = pick_stop(reference_reel_set(), 0, FixedRng(4.5 / 72))
        self.assertEqual((stop.position, stop.symbol), (1, S7))

    def test_last_index(self):
        stop = pick_stop(reference_reel_set(), 2, FixedRng(0.999999))
        self.assertEqual((stop.position, stop.symbol), (21, DB))

    def test_index_clamped(self):
        stop = pick_stop(reference_reel_set(), 0, FixedRng(1.0))
        self.assertEqual(stop.position, 21)

    def test_spin_draws_each_reel(self):
        outcome = spin(reference_reel_set(), FixedRng(0.0, 4.5 / 72, 0.999999))
        self.assertEqual(outcome.positions, (0, 1, 21))
        self.assertEqual(outcome.symbols, (B, S7, DB))

    def test_spin_default_rng(self):
        outcome = spin(reference_reel_set())
        self.assertEqual(len(outcome.stops), 3)
        for stop in outcome.stops:
            self.assertNotEqual(stop.position, 17)

    def test_zero_weight_never_drawn(self):
        rng = random.Random(3)
        reels = reference_reel_set()
        positions = {pick_stop(reels, 0, rng).position for _ in range(20_000)}
        self.assertNotIn(17, positions)
        self.assertEqual(len(positions), 21)


# ============================================================
# Payout Evaluator
# ============================================================

class TestPayoutEvaluator(unittest.TestCase):

    def assertPays(self, symbols, category, payout, coins=1):
        result = evaluate(symbols, coins)
        self.assertEqual((result.category, result.payout), (category, payout), symbols)

    def test_jackpot(self):
        self.assertPays([DD, DD, DD], WinCategory.JACKPOT, 800)

    def test_jackpot_scales_with_coins_only(self):
        self.assertPays([DD, DD, DD], WinCategory.JACKPOT, 2400, coins=3)

    def test_three_of_a_kind(self):
        self.assertPays([S7, S7, S7], WinCategory.SEVEN, 80)
        self.assertPays([TB, TB, TB], WinCategory.TRIPLE_BAR, 40)
        self.assertPays([DB, DB, DB], WinCategory.DOUBLE_BAR, 25)
        self.assertPays([SB, SB, SB], WinCategory.SINGLE_BAR, 10)

    def test_one_wild_doubles(self):
        self.assertPays([S7, DD, S7], WinCategory.SEVEN, 160)
        self.assertPays([SB, SB, DD], WinCategory.SINGLE_BAR, 20)

    def test_two_wilds_quadruple(self):
        self.assertPays([DD, S7, DD], WinCategory.SEVEN, 320)
        self.assertPays([DD, DD, TB], WinCategory.TRIPLE_BAR, 160)

    def test_mixed_bars(self):
        self.assertPays([SB, DB, TB], WinCategory.MIXED_BARS, 5)
        self.assertPays([SB, SB, DB], WinCategory.MIXED_BARS, 5)

    def test_mixed_bars_with_wild(self):
        self.assertPays([SB, DD, DB], WinCategory.MIXED_BARS, 10)

    def test_three_cherries(self):
        self.assertPays([CH, CH, CH], WinCategory.CHERRY_3, 10)

    def test_wild_does_not_count_as_cherry(self):
        self.assertPays([CH, CH, DD], WinCategory.CHERRY_2, 10)
        self.assertPays([CH, DD, DD], WinCategory.CHERRY_1, 8)

    def test_single_cherry(self):
        self.assertPays([CH, B, B], WinCategory.CHERRY_1, 2)
        self.assertPays([SB, CH, SB], WinCategory.CHERRY_1, 2)

    def test_losing_lines(self):
        for line in ([B, B, B], [B, DD, DD], [S7, SB, DB], [SB, SB, S7], [DD, B, S7]):
            self.assertPays(line, WinCategory.LOSE, 0)

    def test_coins_multiply(self):
        self.assertPays([SB, DD, DB], WinCategory.MIXED_BARS, 30, coins=3)
        self.assertPays([CH, B, B], WinCategory.CHERRY_1, 4, coins=2)

    def test_every_line_linear_in_coins_and_deterministic(self):
        for line in itertools.product(Symbol, repeat=3):
            base = evaluate(line, 1)
            self.assertEqual(evaluate(line, 1), base, line)
            for coins in (2, 3):
                result = evaluate(line, coins)
                self.assertEqual(result.category, base.category, line)
                self.assertEqual(result.payout, coins * base.payout, line)

    def test_three_of_a_kind_never_jackpot(self):
        for symbol in Symbol:
            if symbol != DD:
                self.assertNotEqual(evaluate([symbol] * 3).category, WinCategory.JACKPOT)

    def test_symbol_names_accepted(self):
        self.assertPays(["SEVEN", "SEVEN", "DOUBLE_DIAMOND"], WinCategory.SEVEN, 160)

    def test_wrong_length(self):
        with self.assertRaises(ValueError):
            evaluate([S7, S7])

    def test_unknown_symbol(self):
        with self.assertRaises(ValueError):
            evaluate(["SEVEN", "SEVEN", "LEMON"])

    def test_zero_payout_three_of_a_kind_falls_through(self):
        paytable = dict(PAYTABLE)
        paytable[WinCategory.SEVEN] = 0
        result = evaluate([S7, S7, S7], paytable=paytable)
        self.assertEqual(result.category, WinCategory.LOSE)

        paytable[WinCategory.SINGLE_BAR] = 0
        result = evaluate([SB, SB, SB], paytable=paytable)
        self.assertEqual((result.category, result.payout), (WinCategory.MIXED_BARS, 5))

    def test_result_dict(self):
        self.assertEqual(evaluate([TB, TB, DD]).to_dict(), {"type": "TRIPLE_BAR", "payout": 80})
        self.assertFalse(evaluate([B, B, B]).is_win)

    def test_validate_paytable(self):
        validate_paytable(PAYTABLE)
        missing = {k: v for k, v in PAYTABLE.items() if k != WinCategory.MIXED_BARS}
        with self.assertRaises(ConfigurationError):
            validate_paytable(missing)
        negative = {**PAYTABLE, WinCategory.CHERRY_1: -2}
        with self.assertRaises(ConfigurationError):
            validate_paytable(negative)
        with self.assertRaises(ConfigurationError):
            validate_paytable({**PAYTABLE, WinCategory.LOSE: 0})


# ============================================================
# Slot Machine
# ============================================================

class TestSlotMachine(unittest.TestCase):

    def test_same_seed_same_spins(self):
        a = SlotMachine(reference_reel_set(), rng=random.Random(99))
        b = SlotMachine(reference_reel_set(), rng=random.Random(99))
        self.assertEqual([a.spin().positions for _ in range(200)],
                         [b.spin().positions for _ in range(200)])

    def test_play(self):
        machine = SlotMachine(reference_reel_set(), rng=FixedRng(4.5 / 72, 4.5 / 72, 4.5 / 72))
        outcome, result = machine.play(coins=2)
        self.assertEqual(outcome.symbols, (S7, S7, S7))
        self.assertEqual((result.category, result.payout), (WinCategory.SEVEN, 160))

    def test_play_rejects_bad_coins(self):
        machine = SlotMachine(reference_reel_set(), rng=random.Random(1))
        for coins in (0, -1, 1.5, True):
            with self.assertRaises(ValueError):
                machine.play(coins=coins)

    def test_rejects_incomplete_paytable(self):
        paytable = {k: v for k, v in PAYTABLE.items() if k != WinCategory.JACKPOT}
        with self.assertRaises(ConfigurationError):
            SlotMachine(reference_reel_set(), paytable)

    def test_paytable_is_read_only(self):
        machine = SlotMachine(reference_reel_set())
        with self.assertRaises(TypeError):
            machine.paytable[WinCategory.JACKPOT] = 1


# ============================================================
# Geometry
# ============================================================

class TestGeometry(unittest.TestCase):

    def test_reference_layout(self):
        geo = build_physical_geometry(PHYSICAL_REEL)
        self.assertEqual(len(geo.stops), 22)
        self.assertEqual(geo.total_height, 11 * 105 + 11 * 210)
        self.assertEqual(geo.center_of(0), 52.5)
        self.assertEqual(geo.center_of(1), 210.0)
        self.assertEqual(geo.stops[1].height, 210)

    def test_center_of_out_of_range(self):
        geo = build_physical_geometry(PHYSICAL_REEL)
        self.assertEqual(geo.center_of(21), 3360.0)
        for position in (-1, 22):
            with self.assertRaises(OutOfRangeError):
                geo.center_of(position)

    def test_missing_height(self):
        heights = {s: 210 for s in Symbol if s != CH}
        with self.assertRaises(ConfigurationError) as ctx:
            build_physical_geometry(PHYSICAL_REEL, heights)
        self.assertIn("CHERRY", str(ctx.exception))


# ============================================================
# Exact PAR Sheet
# ============================================================

class TestParSheet(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.par = compute_par_sheet(reference_reel_set())

    def test_cycle(self):
        self.assertEqual(self.par.cycle, CYCLE)

    def test_theoretical_rtp(self):
        self.assertAlmostEqual(self.par.theoretical_rtp, TOTAL_RETURN / CYCLE, places=12)
        self.assertEqual(sum(e.hits * e.payout for e in self.par.entries), TOTAL_RETURN)

    def test_hit_frequency(self):
        self.assertEqual(sum(e.hits for e in self.par.entries), TOTAL_HITS)
        self.assertEqual(self.par.losing_hits, CYCLE - TOTAL_HITS)
        self.assertAlmostEqual(self.par.hit_frequency, TOTAL_HITS / CYCLE, places=12)

    def test_category_totals(self):
        totals = self.par.category_totals()
        self.assertEqual(totals["JACKPOT"]["hits"], 1)
        self.assertEqual(totals["SEVEN"]["hits"], 26)
        self.assertEqual(totals["DOUBLE_BAR"]["hits"], 511)
        self.assertEqual(totals["SINGLE_BAR"]["hits"], 15_624)
        self.assertEqual(totals["MIXED_BARS"]["hits"], 23_142)
        self.assertAlmostEqual(totals["MIXED_BARS"]["contribution"] * CYCLE, 122_610, places=4)

    def test_rtp_proof(self):
        proof = self.par.rtp_proof()
        self.assertEqual(proof["probability_sum_check"], "PASS")
        self.assertEqual(proof["rtp_check"], "PASS")
        self.assertEqual(len(proof["sheet_hash"]), 16)

    def test_entries_sorted_by_payout(self):
        top = self.par.entries[0]
        self.assertEqual(top.category, WinCategory.JACKPOT)
        payouts = [e.payout for e in self.par.entries]
        self.assertEqual(payouts, sorted(payouts, reverse=True))

    def test_rtp_per_coin_independent_of_bet(self):
        par3 = compute_par_sheet(reference_reel_set(), coins=3)
        self.assertAlmostEqual(par3.theoretical_rtp, self.par.theoretical_rtp, places=12)
        self.assertEqual(par3.entries[0].payout, 2400)

    def test_variance(self):
        self.assertGreater(self.par.std_dev, 3.0)
        self.assertLess(self.par.std_dev, 4.5)

    def test_to_dict_is_json(self):
        data = json.loads(json.dumps(self.par.to_dict()))
        self.assertEqual(data["cycle"], CYCLE)


# ============================================================
# Simulation
# ============================================================

class TestSimulation(unittest.TestCase):

    def _run(self, spins, seed=1, coins=1, **kw):
        machine = SlotMachine(reference_reel_set(), rng=random.Random(seed))
        return simulate(machine, spins, coins, progress_every=0, **kw)

    def test_aggregates_consistent(self):
        result = self._run(20_000)
        self.assertEqual(result.spins, 20_000)
        self.assertEqual(result.total_wagered, 20_000)
        self.assertEqual(sum(result.category_counts.values()), 20_000)
        self.assertEqual(result.total_won, sum(o.count * o.payout for o in result.outcomes.values()))
        self.assertEqual(result.total_hits, sum(o.count for o in result.winning_outcomes()))
        for r in range(3):
            self.assertEqual(sum(result.stop_counts[r]), 20_000)
            self.assertEqual(result.stop_counts[r][17], 0)
            self.assertEqual(sum(result.symbol_counts[r].values()), 20_000)

    def test_rtp_converges(self):
        result = self._run(200_000, seed=2024)
        par = compute_par_sheet(reference_reel_set())
        std_err = result.std_dev / math.sqrt(result.spins)
        self.assertLess(abs(result.rtp - par.theoretical_rtp), 5 * std_err)
        self.assertAlmostEqual(result.hit_frequency, par.hit_frequency, delta=0.005)

    def test_reproducible(self):
        a = self._run(5_000, seed=11)
        b = self._run(5_000, seed=11)
        self.assertEqual(a.total_won, b.total_won)
        self.assertEqual(a.stop_counts, b.stop_counts)

    def test_coins_scale_wager(self):
        result = self._run(1_000, coins=3)
        self.assertEqual(result.total_wagered, 3_000)
        for o in result.winning_outcomes():
            self.assertEqual(o.payout % 3, 0)

    def test_keep_payouts(self):
        result = self._run(1_000, keep_payouts=True)
        self.assertEqual(len(result.payouts), 1_000)
        self.assertEqual(sum(result.payouts), result.total_won)

    def test_rejects_bad_arguments(self):
        machine = SlotMachine(reference_reel_set(), rng=random.Random(1))
        with self.assertRaises(ValueError):
            simulate(machine, 0)
        with self.assertRaises(ValueError):
            simulate(machine, 10, coins=0)

    def test_merge(self):
        a = self._run(3_000, seed=1)
        b = self._run(2_000, seed=2)
        merged = a.merge(b)
        self.assertEqual(merged.spins, 5_000)
        self.assertEqual(merged.total_won, a.total_won + b.total_won)
        self.assertEqual(merged.total_hits, a.total_hits + b.total_hits)
        self.assertEqual(merged.max_win, max(a.max_win, b.max_win))
        self.assertEqual(sum(o.count for o in merged.outcomes.values()), 5_000)
        self.assertEqual(merged.stop_counts[0],
                         [x + y for x, y in zip(a.stop_counts[0], b.stop_counts[0])])

    def test_merge_into_empty(self):
        a = self._run(1_000, seed=5, coins=2)
        merged = SimResult(coins=1).merge(a)
        self.assertEqual(merged.coins, 2)
        self.assertEqual(merged.total_won, a.total_won)

    def test_merge_rejects_mixed_bets(self):
        with self.assertRaises(ValueError):
            self._run(100, coins=1).merge(self._run(100, coins=2))

    def test_split_spins(self):
        self.assertEqual(split_spins(10, 3), [4, 3, 3])
        self.assertEqual(split_spins(2, 8), [1, 1])
        self.assertEqual(sum(split_spins(1_000_003, 7)), 1_000_003)

    def test_parallel_single_worker_matches_worker_seed(self):
        par = simulate_parallel(reference_reel_set(), 2_000, workers=1, seed=7, progress_every=0)
        machine = SlotMachine(reference_reel_set(), rng=random.Random("7:0"))
        direct = simulate(machine, 2_000, progress_every=0)
        self.assertEqual(par.total_won, direct.total_won)
        self.assertEqual(par.stop_counts, direct.stop_counts)

    def test_parallel_workers(self):
        result = simulate_parallel(reference_reel_set(), 4_000, workers=2, seed=3, progress_every=0)
        self.assertEqual(result.spins, 4_000)
        self.assertEqual(sum(result.category_counts.values()), 4_000)
        self.assertEqual(result.seed, "3:0,3:1")

    def test_to_dict(self):
        data = self._run(1_000).to_dict()
        self.assertEqual(data["spins"], 1_000)
        self.assertIn("confidence_95", data)
        json.dumps(data)


# ============================================================
# Machine Definition Schema
# ============================================================

class TestMachineSchema(unittest.TestCase):

    def _write(self, tmp, data):
        path = Path(tmp) / "machine.json"
        path.write_text(data if isinstance(data, str) else json.dumps(data))
        return path

    def test_reference_builds(self):
        machine = MachineDefinition.reference().build_machine(rng=random.Random(1))
        self.assertEqual(machine.reel_set, reference_reel_set())

    def test_json_round_trip(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, MachineDefinition.reference().model_dump_json(indent=2))
            definition = load_machine_definition(path)
        self.assertEqual(definition.build_reel_set(), reference_reel_set())
        self.assertEqual(definition.paytable[WinCategory.JACKPOT], 800)

    def test_missing_file(self):
        with self.assertRaises(ConfigurationError):
            load_machine_definition("/nonexistent/machine.json")

    def test_invalid_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, "{not json")
            with self.assertRaises(ConfigurationError):
                load_machine_definition(path)

    def test_missing_reel(self):
        data = json.loads(MachineDefinition.reference().model_dump_json())
        del data["reel_weights"]["REEL3"]
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write(tmp, data)
            with self.assertRaises(ConfigurationError) as ctx:
                load_machine_definition(path)
        self.assertIn("REEL3", str(ctx.exception))

    def test_bad_weights_fail_at_build(self):
        data = json.loads(MachineDefinition.reference().model_dump_json())
        data["reel_weights"]["REEL1"]["0"] = 5
        definition = MachineDefinition.model_validate(data)
        with self.assertRaises(ConfigurationError):
            definition.build_machine()

    def test_negative_payout_fails_at_build(self):
        definition = MachineDefinition(paytable={**PAYTABLE, WinCategory.SEVEN: -1})
        with self.assertRaises(ConfigurationError):
            definition.build_machine()


# ============================================================
# Main
# ============================================================

if __name__ == "__main__":
    # Configure logging to suppress noise during tests
    import logging
    logging.disable(logging.WARNING)

    unittest.main(verbosity=2)
