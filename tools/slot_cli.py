#!/usr/bin/env python3
"""
REELFORGE — Slot Simulation CLI

Usage:
    python -m tools.slot_cli simulate --spins 1000000
    python -m tools.slot_cli simulate --spins 10000000 --workers 8 --output-dir ./output
    python -m tools.slot_cli par --json
    python -m tools.slot_cli validate --spins 500000 --tolerance 0.02
    python -m tools.slot_cli reels --machine machines/custom.json
"""

import argparse
import json
import logging
import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console

from config.machine_schema import MachineDefinition, load_machine_definition
from config.settings import LOG_LEVEL, OUTPUT_DIR, MachineConfig, SimulationConfig, ValidationConfig
from slot_engine.errors import ConfigurationError
from slot_engine.par import compute_par_sheet
from slot_engine.simulator import simulate, simulate_parallel
from tools.par_report import generate_csvs, print_par_sheet, print_reel_analysis, print_report
from tools.slot_montecarlo import MonteCarloValidator

logger = logging.getLogger("reelforge.cli")
console = Console()


def _setup_logging(level: str) -> None:
    root = logging.getLogger("reelforge")
    if not root.handlers:
        _h = logging.StreamHandler()
        _h.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(message)s", datefmt="%H:%M:%S"))
        root.addHandler(_h)
    root.setLevel(level)


def _load_machine(path: str) -> MachineDefinition:
    if path:
        logger.info(f"Loading machine definition from {path}")
        return load_machine_definition(path)
    return MachineDefinition.reference()


def cmd_simulate(args) -> int:
    definition = _load_machine(args.machine)
    machine = definition.build_machine(rng=random.Random(args.seed))
    if args.workers == 1:
        result = simulate(machine, args.spins, args.coins,
                          progress_every=SimulationConfig.PROGRESS_EVERY, seed=str(args.seed))
    else:
        result = simulate_parallel(machine.reel_set, args.spins, workers=args.workers or None,
                                   coins=args.coins, seed=args.seed, paytable=machine.paytable,
                                   progress_every=SimulationConfig.PROGRESS_EVERY)

    par = compute_par_sheet(machine.reel_set, machine.paytable, args.coins)
    print_report(result, console, top=MachineConfig.TOP_COMBINATIONS, par=par)

    if not args.no_csv:
        files = generate_csvs(result, machine.reel_set, args.output_dir)
        for f in files:
            console.print(f"[green]✓ Created {f}[/green]")
    return 0


def cmd_par(args) -> int:
    definition = _load_machine(args.machine)
    machine = definition.build_machine()
    par = compute_par_sheet(machine.reel_set, machine.paytable, args.coins)
    if args.json:
        print(json.dumps(par.to_dict(), indent=2))
    else:
        print_par_sheet(par, console)
    return 0


def cmd_validate(args) -> int:
    definition = _load_machine(args.machine)
    machine = definition.build_machine()
    mc = MonteCarloValidator(tolerance=args.tolerance, seed=args.seed,
                             alpha=ValidationConfig.CHI_SQUARED_ALPHA)
    result = mc.validate(machine.reel_set, machine.paytable, n_spins=args.spins,
                         coins=args.coins, label=definition.name)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(result.summary())
    return 0 if result.passed else 1


def cmd_reels(args) -> int:
    definition = _load_machine(args.machine)
    print_reel_analysis(definition.build_reel_set(), console)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="3-reel slot math: simulate, PAR sheet, validation")
    parser.add_argument("--log-level", type=str, default=LOG_LEVEL)
    sub = parser.add_subparsers(dest="command", required=True)

    def _machine_arg(p):
        p.add_argument("--machine", type=str, default=MachineConfig.PATH,
                       help="JSON machine definition (default: reference machine)")

    p = sub.add_parser("simulate", help="Monte Carlo simulation with CSV reports")
    p.add_argument("--spins", type=int, default=SimulationConfig.SPINS)
    p.add_argument("--coins", type=int, default=SimulationConfig.COINS)
    p.add_argument("--seed", type=int, default=SimulationConfig.SEED)
    p.add_argument("--workers", type=int, default=SimulationConfig.WORKERS,
                   help="1 = in-process, 0 = one per CPU")
    p.add_argument("--output-dir", type=str, default=str(OUTPUT_DIR))
    p.add_argument("--no-csv", action="store_true")
    _machine_arg(p)
    p.set_defaults(func=cmd_simulate)

    p = sub.add_parser("par", help="Exact PAR sheet by enumeration")
    p.add_argument("--coins", type=int, default=1)
    p.add_argument("--json", action="store_true")
    _machine_arg(p)
    p.set_defaults(func=cmd_par)

    p = sub.add_parser("validate", help="Simulated vs theoretical RTP and stop fit")
    p.add_argument("--spins", type=int, default=ValidationConfig.SPINS)
    p.add_argument("--coins", type=int, default=1)
    p.add_argument("--tolerance", type=float, default=ValidationConfig.TOLERANCE)
    p.add_argument("--seed", type=int, default=SimulationConfig.SEED)
    p.add_argument("--json", action="store_true")
    _machine_arg(p)
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("reels", help="Virtual reel weight distribution")
    _machine_arg(p)
    p.set_defaults(func=cmd_reels)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.log_level.upper())

    if getattr(args, "spins", 1) < 1:
        parser.error("--spins must be positive")
    if getattr(args, "coins", 1) < 1:
        parser.error("--coins must be a positive integer")

    try:
        return args.func(args)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
