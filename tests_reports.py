#!/usr/bin/env python3
"""
Tests for reports and the CLI

Validates:
1. generate_csvs() writes the four CSV files with the expected headers
2. CSV rows agree with the simulation aggregates
3. Console report renders through rich
4. CLI subcommands run end to end and map configuration errors to exit 2
"""

import csv
import io
import json
import random
import sys
import tempfile
from contextlib import redirect_stdout
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from rich.console import Console

from slot_engine.machine import SlotMachine
from slot_engine.par import compute_par_sheet
from slot_engine.reels import reference_reel_set
from slot_engine.simulator import simulate
from tools import slot_cli
from tools.par_report import generate_csvs, print_par_sheet, print_reel_analysis, print_report


def _result(spins=5_000, seed=8):
    machine = SlotMachine(reference_reel_set(), rng=random.Random(seed))
    return simulate(machine, spins, progress_every=0)


def _read(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


# ============================================================
# CSV
# ============================================================

def test_csv_files_and_headers():
    with tempfile.TemporaryDirectory() as tmp:
        files = generate_csvs(_result(), reference_reel_set(), Path(tmp) / "out")
        names = [f.name for f in files]
        assert names == ["summary.csv", "par_sheet.csv", "symbol_frequency.csv",
                         "virtual_reel_weights.csv"], names

        headers = {f.name: _read(f)[0] for f in files}
    assert headers["summary.csv"] == ["Metric", "Value"]
    assert headers["par_sheet.csv"] == ["Reel 1", "Reel 2", "Reel 3", "Win Type", "Payout",
                                        "Count", "Frequency %", "Contribution %"]
    assert headers["symbol_frequency.csv"] == ["Symbol", "Reel 1 Count", "Reel 1 %",
                                               "Reel 2 Count", "Reel 2 %",
                                               "Reel 3 Count", "Reel 3 %"]
    assert headers["virtual_reel_weights.csv"] == ["Symbol", "Reel 1 Stops", "Reel 1 Weight %",
                                                   "Reel 2 Stops", "Reel 2 Weight %",
                                                   "Reel 3 Stops", "Reel 3 Weight %"]
    print("✅ CSV files and headers")


def test_csv_contents():
    result = _result()
    with tempfile.TemporaryDirectory() as tmp:
        generate_csvs(result, reference_reel_set(), tmp)
        summary = dict(_read(Path(tmp) / "summary.csv")[1:])
        par_rows = _read(Path(tmp) / "par_sheet.csv")[1:]
        freq_rows = _read(Path(tmp) / "symbol_frequency.csv")[1:]
        weight_rows = {row[0]: row for row in _read(Path(tmp) / "virtual_reel_weights.csv")[1:]}

    assert summary["Total Spins"] == "5000"
    assert summary["Total Won"] == str(result.total_won)
    assert summary["RTP %"] == f"{result.rtp * 100:.4f}"
    assert list(summary) == ["Total Spins", "Total Wagered", "Total Won", "RTP %",
                             "Hit Frequency %", "Average Win Per Hit"]

    assert len(par_rows) == len(result.winning_outcomes())
    assert sum(int(r[5]) for r in par_rows) == result.total_hits
    assert all(int(r[4]) > 0 for r in par_rows)

    for col in (1, 3, 5):
        assert sum(int(r[col]) for r in freq_rows) == 5_000

    assert weight_rows["DOUBLE_DIAMOND"][1:3] == ["1", "1.39"]
    assert weight_rows["BLANK"][1:3] == ["35", "48.61"]
    assert weight_rows["SINGLE_BAR"][1:3] == ["24", "33.33"]
    print("✅ CSV contents match aggregates")


# ============================================================
# Console
# ============================================================

def test_console_report():
    buf = io.StringIO()
    console = Console(file=buf, width=160)
    reels = reference_reel_set()
    print_report(_result(), console, top=5, par=compute_par_sheet(reels))
    print_par_sheet(compute_par_sheet(reels), console)
    print_reel_analysis(reels, console)
    out = buf.getvalue()
    assert "OVERALL STATISTICS" in out
    assert "TOP 5 WINNING COMBINATIONS" in out
    assert "Theoretical RTP" in out
    assert "95.3867%" in out
    assert "MIXED_BARS" in out
    assert "DOUBLE_DIAMOND" in out
    print("✅ Console report renders")


# ============================================================
# CLI
# ============================================================

def test_cli_par_json():
    buf = io.StringIO()
    with redirect_stdout(buf):
        code = slot_cli.main(["par", "--json"])
    assert code == 0
    data = json.loads(buf.getvalue())
    assert data["cycle"] == 373_248
    assert data["rtp_proof"]["probability_sum_check"] == "PASS"
    print("✅ CLI par --json")


def test_cli_simulate_writes_csvs():
    with tempfile.TemporaryDirectory() as tmp:
        code = slot_cli.main(["simulate", "--spins", "2000", "--workers", "1",
                              "--output-dir", tmp])
        assert code == 0
        assert (Path(tmp) / "summary.csv").exists()
        assert (Path(tmp) / "virtual_reel_weights.csv").exists()
    print("✅ CLI simulate")


def test_cli_reels():
    assert slot_cli.main(["reels"]) == 0
    print("✅ CLI reels")


def test_cli_bad_machine_exits_2():
    assert slot_cli.main(["par", "--machine", "/nonexistent/machine.json"]) == 2

    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "bad.json"
        path.write_text(json.dumps({"expected_total": 70}))
        assert slot_cli.main(["reels", "--machine", str(path)]) == 2
    print("✅ CLI configuration errors exit 2")


# ============================================================
# Runner
# ============================================================

if __name__ == "__main__":
    import logging
    logging.disable(logging.WARNING)

    tests = [
        test_csv_files_and_headers,
        test_csv_contents,
        test_console_report,
        test_cli_par_json,
        test_cli_simulate_writes_csvs,
        test_cli_reels,
        test_cli_bad_machine_exits_2,
    ]

    print(f"\n{'='*60}")
    print(f"Report & CLI Tests — {len(tests)} tests")
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
