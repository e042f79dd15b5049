"""
REELFORGE — Simulation Reports

CSV exports and console tables for a simulation run.

Outputs:
  - summary.csv               Overall RTP and statistics
  - par_sheet.csv             Winning combinations PAR sheet
  - symbol_frequency.csv      Symbol appearance rates per reel
  - virtual_reel_weights.csv  Virtual reel distribution

Usage:
    from tools.par_report import generate_csvs, print_report
    files = generate_csvs(result, reel_set, output_dir="./output")
    print_report(result)
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from slot_engine.par import ParSheet
from slot_engine.reels import REEL_COUNT, ReelSet, analyze_reel
from slot_engine.simulator import SimResult

logger = logging.getLogger("reelforge.reports")

REEL_LABELS = [f"Reel {r + 1}" for r in range(REEL_COUNT)]


# ═══════════════════════════════════════════════════════════════
# CSV
# ═══════════════════════════════════════════════════════════════

def _write_rows(path: Path, header: list, rows: list) -> Path:
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)
    return path


def write_summary(result: SimResult, path: Path) -> Path:
    return _write_rows(path, ["Metric", "Value"], [
        ["Total Spins", result.spins],
        ["Total Wagered", result.total_wagered],
        ["Total Won", result.total_won],
        ["RTP %", f"{result.rtp * 100:.4f}"],
        ["Hit Frequency %", f"{result.hit_frequency * 100:.4f}"],
        ["Average Win Per Hit", f"{result.avg_win_per_hit:.2f}"],
    ])


def write_par_sheet(result: SimResult, path: Path) -> Path:
    rows = []
    for o in result.winning_outcomes():
        freq = o.count / result.spins * 100
        contribution = o.count * o.payout / result.total_won * 100 if result.total_won else 0.0
        rows.append([
            *(s.value for s in o.symbols),
            o.category.value, o.payout, o.count,
            f"{freq:.4f}", f"{contribution:.4f}",
        ])
    return _write_rows(path, [
        "Reel 1", "Reel 2", "Reel 3", "Win Type", "Payout", "Count",
        "Frequency %", "Contribution %",
    ], rows)


def write_symbol_frequency(result: SimResult, path: Path) -> Path:
    names = sorted({name for reel in result.symbol_counts for name in reel})
    rows = []
    for name in names:
        row = [name]
        for reel in result.symbol_counts:
            count = reel.get(name, 0)
            row += [count, f"{count / result.spins * 100:.4f}"]
        rows.append(row)
    header = ["Symbol"]
    for label in REEL_LABELS:
        header += [f"{label} Count", f"{label} %"]
    return _write_rows(path, header, rows)


def write_reel_weights(reel_set: ReelSet, path: Path) -> Path:
    analyses = [analyze_reel(reel_set, r) for r in range(REEL_COUNT)]
    names = sorted({name for a in analyses for name in a})
    rows = []
    for name in names:
        row = [name]
        for a in analyses:
            count = a.get(name, {}).get("count", 0)
            row += [count, f"{count / reel_set.expected_total * 100:.2f}"]
        rows.append(row)
    header = ["Symbol"]
    for label in REEL_LABELS:
        header += [f"{label} Stops", f"{label} Weight %"]
    return _write_rows(path, header, rows)


def generate_csvs(result: SimResult, reel_set: ReelSet, output_dir) -> list[Path]:
    """Write all four CSV reports into output_dir. Returns the file paths."""
    od = Path(output_dir)
    od.mkdir(parents=True, exist_ok=True)
    files = [
        write_summary(result, od / "summary.csv"),
        write_par_sheet(result, od / "par_sheet.csv"),
        write_symbol_frequency(result, od / "symbol_frequency.csv"),
        write_reel_weights(reel_set, od / "virtual_reel_weights.csv"),
    ]
    logger.info(f"Wrote {len(files)} CSV reports to {od}")
    return files


# ═══════════════════════════════════════════════════════════════
# Console
# ═══════════════════════════════════════════════════════════════

def print_report(result: SimResult, console: Optional[Console] = None, top: int = 20,
                 par: Optional[ParSheet] = None) -> None:
    """Overall statistics plus the top winning combinations."""
    console = console or Console()

    stats = Table(show_header=False, box=None)
    stats.add_column("Metric", style="cyan")
    stats.add_column("Value", justify="right")
    stats.add_row("Total Spins", f"{result.spins:,}")
    stats.add_row("Total Wagered", f"{result.total_wagered:,} coins")
    stats.add_row("Total Won", f"{result.total_won:,} coins")
    stats.add_row("RTP", f"{result.rtp * 100:.4f}%")
    if par is not None:
        stats.add_row("Theoretical RTP", f"{par.theoretical_rtp * 100:.4f}%")
    lo, hi = result.confidence_95
    stats.add_row("95% CI", f"{lo * 100:.3f}% – {hi * 100:.3f}%")
    stats.add_row("Hit Frequency", f"{result.hit_frequency * 100:.4f}%")
    stats.add_row("Average Win", f"{result.avg_win_per_hit:.2f} coins per hit")
    stats.add_row("Max Win", f"{result.max_win:,} coins")
    stats.add_row("Speed", f"{result.spins_per_second:,.0f} spins/sec")
    console.print(Panel(stats, title="OVERALL STATISTICS", border_style="green"))

    combos = Table(title=f"PAR SHEET - TOP {top} WINNING COMBINATIONS")
    combos.add_column("Combination")
    combos.add_column("Type")
    combos.add_column("Pays", justify="right")
    combos.add_column("Count", justify="right")
    combos.add_column("Frequency", justify="right")
    combos.add_column("Contribution", justify="right")
    for o in result.winning_outcomes()[:top]:
        freq = o.count / result.spins * 100
        contribution = o.count * o.payout / result.total_won * 100 if result.total_won else 0.0
        combos.add_row(
            " | ".join(s.value for s in o.symbols),
            o.category.value,
            str(o.payout),
            f"{o.count:,}",
            f"{freq:.4f}%",
            f"{contribution:.2f}%",
        )
    console.print(combos)


def print_par_sheet(par: ParSheet, console: Optional[Console] = None) -> None:
    """Exact PAR sheet grouped by win category."""
    console = console or Console()
    table = Table(title=f"EXACT PAR SHEET (cycle {par.cycle:,})")
    table.add_column("Win Type")
    table.add_column("Hits", justify="right")
    table.add_column("Probability", justify="right")
    table.add_column("RTP Contribution", justify="right")
    totals = par.category_totals()
    for name, t in sorted(totals.items(), key=lambda kv: -kv[1]["contribution"]):
        table.add_row(name, f"{t['hits']:,}", f"{t['probability'] * 100:.4f}%",
                      f"{t['contribution'] / par.coins * 100:.4f}%")
    console.print(table)
    proof = par.rtp_proof()
    console.print(
        f"Theoretical RTP: [bold]{proof['theoretical_rtp_pct']:.4f}%[/bold]  "
        f"Hit frequency: {proof['hit_frequency_pct']:.4f}%  "
        f"Std dev: {par.std_dev:.4f}  "
        f"P-sum: {proof['probability_sum_check']}  RTP: {proof['rtp_check']}"
    )


def print_reel_analysis(reel_set: ReelSet, console: Optional[Console] = None) -> None:
    """Per-reel weight distribution by symbol."""
    console = console or Console()
    analyses = [analyze_reel(reel_set, r) for r in range(REEL_COUNT)]
    table = Table(title=f"VIRTUAL REEL WEIGHTS ({reel_set.expected_total} stops per reel)")
    table.add_column("Symbol")
    for label in REEL_LABELS:
        table.add_column(f"{label} Stops", justify="right")
        table.add_column(f"{label} %", justify="right")
    for name in sorted({n for a in analyses for n in a}):
        row = [name]
        for a in analyses:
            entry = a.get(name, {"count": 0, "percentage": 0.0})
            row += [str(entry["count"]), f"{entry['percentage']:.2f}%"]
        table.add_row(*row)
    console.print(table)
