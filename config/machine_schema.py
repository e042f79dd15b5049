"""
ReelForge — Machine Definition Schema

A machine definition is everything the engine needs to be rebuilt from
a JSON file: the physical strip, one weight table per reel, the virtual
reel total, the paytable and the display heights.

Usage:
    from config.machine_schema import MachineDefinition, load_machine_definition
    definition = load_machine_definition("machines/reference.json")
    machine = definition.build_machine(rng=random.Random(7))
    json_str = MachineDefinition.reference().model_dump_json(indent=2)
"""

from __future__ import annotations

import json
import random
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from slot_engine.errors import ConfigurationError
from slot_engine.geometry import ReelGeometry, build_physical_geometry
from slot_engine.machine import SlotMachine
from slot_engine.payout import validate_paytable
from slot_engine.reels import DEFAULT_TOTAL, PHYSICAL_REEL, VIRTUAL_REEL_WEIGHTS, ReelSet
from slot_engine.symbols import PAYTABLE, SYMBOL_HEIGHTS, Symbol, WinCategory

REEL_NAMES = ("REEL1", "REEL2", "REEL3")


class MachineDefinition(BaseModel):
    """Full machine definition; validated again when the reel set is built."""
    name: str = "Classic Double Diamond"
    physical_reel: list[Symbol] = Field(default_factory=lambda: list(PHYSICAL_REEL))
    expected_total: int = DEFAULT_TOTAL
    # REEL1..REEL3 -> {physical position: count}
    reel_weights: dict[str, dict[int, int]] = Field(
        default_factory=lambda: {k: dict(v) for k, v in VIRTUAL_REEL_WEIGHTS.items()}
    )
    paytable: dict[WinCategory, int] = Field(default_factory=lambda: dict(PAYTABLE))
    symbol_heights: dict[Symbol, int] = Field(default_factory=lambda: dict(SYMBOL_HEIGHTS))

    @field_validator("reel_weights")
    @classmethod
    def _reel_names(cls, v: dict) -> dict:
        missing = [name for name in REEL_NAMES if name not in v]
        if missing:
            raise ValueError(f"missing weight tables for {', '.join(missing)}")
        extra = sorted(set(v) - set(REEL_NAMES))
        if extra:
            raise ValueError(f"unknown reels {', '.join(extra)}")
        return v

    @classmethod
    def reference(cls) -> "MachineDefinition":
        return cls()

    def build_reel_set(self) -> ReelSet:
        return ReelSet.from_weights(
            self.physical_reel,
            [self.reel_weights[name] for name in REEL_NAMES],
            self.expected_total,
        )

    def build_geometry(self) -> ReelGeometry:
        return build_physical_geometry(self.physical_reel, self.symbol_heights)

    def build_machine(self, rng: Optional[random.Random] = None) -> SlotMachine:
        """Validate everything up front, then assemble the machine."""
        reel_set = self.build_reel_set()
        validate_paytable(self.paytable)
        self.build_geometry()
        return SlotMachine(reel_set, self.paytable, rng=rng)


def load_machine_definition(path) -> MachineDefinition:
    """Load a machine definition from JSON. Any problem is a ConfigurationError."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigurationError(f"Machine config not found at {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Machine config {path} is not valid JSON: {e}") from e
    try:
        return MachineDefinition.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Machine config {path} is invalid:\n{e}") from e
