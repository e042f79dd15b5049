"""
ReelForge - Configuration

Environment-driven settings for simulation runs. Values come from the
process environment, with a local .env file loaded first.

    SIMULATION_SPINS=10000000
    SIMULATION_WORKERS=8
    MACHINE_CONFIG=machines/high_volatility.json
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "./output"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


# ============================================================
# Simulation
# ============================================================

class SimulationConfig:
    SPINS = int(os.getenv("SIMULATION_SPINS", "1000000"))
    SEED = int(os.getenv("SIMULATION_SEED", "42"))
    COINS = int(os.getenv("SIMULATION_COINS", "1"))
    # 1 = run in-process; 0 = one worker per CPU
    WORKERS = int(os.getenv("SIMULATION_WORKERS", "1"))
    PROGRESS_EVERY = int(os.getenv("SIM_PROGRESS_EVERY", "100000"))


# ============================================================
# Monte Carlo Validation
# ============================================================

class ValidationConfig:
    SPINS = int(os.getenv("MC_SPINS", "500000"))
    TOLERANCE = float(os.getenv("MC_TOLERANCE", "0.02"))   # ±2% RTP, ~4 std errors at 500k spins
    CHI_SQUARED_ALPHA = float(os.getenv("MC_CHI_SQUARED_ALPHA", "0.001"))


# ============================================================
# Machine definition
# ============================================================

class MachineConfig:
    # Path to a JSON machine definition; empty = reference machine
    PATH = os.getenv("MACHINE_CONFIG", "")
    TOP_COMBINATIONS = 20     # rows shown in the console PAR table
