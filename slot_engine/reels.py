"""
REELFORGE — Reel Definitions

Physical and virtual reel configuration.
  - Physical reel: 22 stops, the visual strip the player sees.
  - Virtual reels: a weight per physical position, 72 stops per reel in the
    reference configuration.

Weights are expanded once into a flat stop list of physical positions.
Sampling picks a uniform index into that list, so a position with count 12
lands 12/72 of the time. The order of the expanded list is irrelevant,
only the counts matter.

Usage:
    from slot_engine.reels import reference_reel_set
    reels = reference_reel_set()
    reels.stop_lists[0]      # (0, 0, 0, 0, 1, 2, ...) 72 positions
    reels.symbol_at(13)      # Symbol.SEVEN
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Sequence

from slot_engine.errors import ConfigurationError, OutOfRangeError
from slot_engine.symbols import Symbol, to_symbol

logger = logging.getLogger("reelforge.reels")

REEL_COUNT = 3
DEFAULT_TOTAL = 72

StopList = tuple[int, ...]


# ═══════════════════════════════════════════════════════════════
# Reference Configuration
# ═══════════════════════════════════════════════════════════════

PHYSICAL_REEL: tuple[Symbol, ...] = (
    Symbol.BLANK,           # 0
    Symbol.SEVEN,           # 1
    Symbol.BLANK,           # 2
    Symbol.SINGLE_BAR,      # 3
    Symbol.BLANK,           # 4
    Symbol.DOUBLE_DIAMOND,  # 5
    Symbol.BLANK,           # 6
    Symbol.TRIPLE_BAR,      # 7
    Symbol.BLANK,           # 8
    Symbol.CHERRY,          # 9
    Symbol.BLANK,           # 10
    Symbol.DOUBLE_BAR,      # 11
    Symbol.BLANK,           # 12
    Symbol.SEVEN,           # 13
    Symbol.BLANK,           # 14
    Symbol.SINGLE_BAR,      # 15
    Symbol.BLANK,           # 16
    Symbol.DOUBLE_DIAMOND,  # 17
    Symbol.BLANK,           # 18
    Symbol.TRIPLE_BAR,      # 19
    Symbol.BLANK,           # 20
    Symbol.DOUBLE_BAR,      # 21
)

_REFERENCE_WEIGHTS = {
    0: 4,    # BLANK           5.56%
    1: 1,    # SEVEN           1.39%
    2: 4,    # BLANK           5.56%
    3: 12,   # SINGLE_BAR     16.67%
    4: 3,    # BLANK           4.17%
    5: 1,    # DOUBLE_DIAMOND  1.39%
    6: 3,    # BLANK
    7: 1,    # TRIPLE_BAR
    8: 3,    # BLANK
    9: 1,    # CHERRY
    10: 3,   # BLANK
    11: 4,   # DOUBLE_BAR
    12: 3,   # BLANK
    13: 1,   # SEVEN
    14: 3,   # BLANK
    15: 12,  # SINGLE_BAR
    16: 3,   # BLANK
    17: 0,   # DOUBLE_DIAMOND  on the strip, never selected
    18: 3,   # BLANK
    19: 1,   # TRIPLE_BAR
    20: 3,   # BLANK
    21: 3,   # DOUBLE_BAR
}

VIRTUAL_REEL_WEIGHTS = MappingProxyType({
    "REEL1": MappingProxyType(dict(_REFERENCE_WEIGHTS)),
    "REEL2": MappingProxyType(dict(_REFERENCE_WEIGHTS)),
    "REEL3": MappingProxyType(dict(_REFERENCE_WEIGHTS)),
})


# ═══════════════════════════════════════════════════════════════
# Expansion & Lookup
# ═══════════════════════════════════════════════════════════════

def expand(weights: Mapping[int, int], expected_total: int = DEFAULT_TOTAL,
           physical_length: int = len(PHYSICAL_REEL)) -> StopList:
    """Expand a {position: count} table into a flat stop list.

    Example:
        {0: 2, 1: 3, 2: 1}  ->  (0, 0, 1, 1, 1, 2)

    Raises ConfigurationError when a count is negative, a key falls outside
    the physical reel, the counts do not sum to expected_total, or a
    physical position has no entry. Zero is a valid entry.
    """
    for position, count in weights.items():
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ConfigurationError(
                f"Weight for physical position {position} must be a non-negative integer, got {count!r}"
            )
        if not isinstance(position, int) or not 0 <= position < physical_length:
            raise ConfigurationError(
                f"Weight given for position {position!r} outside physical reel [0, {physical_length})"
            )

    total = sum(weights.values())
    if total != expected_total:
        raise ConfigurationError(
            f"Virtual reel weights must sum to {expected_total}, got {total}"
        )

    for position in range(physical_length):
        if position not in weights:
            raise ConfigurationError(f"Missing weight for physical position {position}")

    stops: list[int] = []
    for position in sorted(weights):
        stops.extend([position] * weights[position])
    return tuple(stops)


def symbol_at(position: int, physical_reel: Sequence[Symbol] = PHYSICAL_REEL) -> Symbol:
    """Symbol at a physical position (0-21 on the reference strip)."""
    if isinstance(position, bool) or not isinstance(position, int):
        raise TypeError(f"Physical position must be an int, got {position!r}")
    if not 0 <= position < len(physical_reel):
        raise OutOfRangeError(
            f"Physical position {position} outside [0, {len(physical_reel)})"
        )
    return physical_reel[position]


def _check_reel_id(reel_id: int) -> None:
    if not 0 <= reel_id < REEL_COUNT:
        raise OutOfRangeError(f"Reel id {reel_id} outside [0, {REEL_COUNT})")


# ═══════════════════════════════════════════════════════════════
# Reel Set
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ReelSet:
    """Validated, immutable reel configuration shared by sampler and tooling.

    weights[r][p] is the count for physical position p on reel r (dense);
    stop_lists[r] is the expanded stop list for reel r.
    """
    physical_reel: tuple[Symbol, ...]
    weights: tuple[tuple[int, ...], ...]
    stop_lists: tuple[StopList, ...]
    expected_total: int = DEFAULT_TOTAL

    @classmethod
    def from_weights(cls, physical_reel: Sequence, weight_tables: Sequence[Mapping[int, int]],
                     expected_total: int = DEFAULT_TOTAL) -> "ReelSet":
        if len(weight_tables) != REEL_COUNT:
            raise ConfigurationError(
                f"Expected {REEL_COUNT} weight tables, got {len(weight_tables)}"
            )
        if not physical_reel:
            raise ConfigurationError("Physical reel has no stops")
        if expected_total <= 0:
            raise ConfigurationError(f"Virtual reel total must be positive, got {expected_total}")
        try:
            strip = tuple(to_symbol(s) for s in physical_reel)
        except ValueError as e:
            raise ConfigurationError(f"Unknown symbol on physical reel: {e}") from e

        stop_lists = []
        dense = []
        for idx, table in enumerate(weight_tables):
            try:
                stop_lists.append(expand(table, expected_total, len(strip)))
            except ConfigurationError as e:
                raise ConfigurationError(f"REEL{idx + 1}: {e}") from e
            dense.append(tuple(table[p] for p in range(len(strip))))

        logger.debug(f"Reel set built: {len(strip)} physical stops, "
                     f"{expected_total} virtual stops per reel")
        return cls(
            physical_reel=strip,
            weights=tuple(dense),
            stop_lists=tuple(stop_lists),
            expected_total=expected_total,
        )

    @property
    def physical_length(self) -> int:
        return len(self.physical_reel)

    def symbol_at(self, position: int) -> Symbol:
        return symbol_at(position, self.physical_reel)

    def stop_list(self, reel_id: int) -> StopList:
        _check_reel_id(reel_id)
        return self.stop_lists[reel_id]

    def weight_table(self, reel_id: int) -> dict[int, int]:
        """Copy of a reel's {position: count} table, for reporting."""
        _check_reel_id(reel_id)
        return dict(enumerate(self.weights[reel_id]))

    def symbol_weights(self, reel_id: int) -> dict[Symbol, int]:
        """Summed stop count per symbol on one reel. Zero-weight symbols are kept."""
        _check_reel_id(reel_id)
        counts: dict[Symbol, int] = {}
        for position, count in enumerate(self.weights[reel_id]):
            sym = self.physical_reel[position]
            counts[sym] = counts.get(sym, 0) + count
        return counts


@lru_cache(maxsize=1)
def reference_reel_set() -> ReelSet:
    """The reference 22-stop / 72-weight configuration, validated once."""
    return ReelSet.from_weights(
        PHYSICAL_REEL,
        [VIRTUAL_REEL_WEIGHTS["REEL1"], VIRTUAL_REEL_WEIGHTS["REEL2"], VIRTUAL_REEL_WEIGHTS["REEL3"]],
        DEFAULT_TOTAL,
    )


def analyze_reel(reel_set: ReelSet, reel_id: int) -> dict:
    """Weight distribution of one reel grouped by symbol.

    Returns {symbol_name: {"count", "positions": [{"position", "count"}], "percentage"}}.
    """
    table = reel_set.weight_table(reel_id)
    analysis: dict[str, dict] = {}
    for position, count in table.items():
        name = reel_set.physical_reel[position].value
        entry = analysis.setdefault(name, {"count": 0, "positions": []})
        entry["count"] += count
        entry["positions"].append({"position": position, "count": count})

    for entry in analysis.values():
        entry["percentage"] = round(entry["count"] / reel_set.expected_total * 100, 2)
    return analysis
