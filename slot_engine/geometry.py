"""
REELFORGE — Physical Reel Geometry

Pixel layout of the physical strip for a rendering collaborator.
Blanks are half-height (105px), symbols full height (210px); each stop
gets the centre Y offset an animation should stop on.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from slot_engine.errors import ConfigurationError, OutOfRangeError
from slot_engine.symbols import SYMBOL_HEIGHTS, Symbol


@dataclass(frozen=True)
class StopGeometry:
    index: int
    symbol: Symbol
    height: int
    center_y: float


@dataclass(frozen=True)
class ReelGeometry:
    stops: tuple[StopGeometry, ...]
    total_height: int

    def center_of(self, position: int) -> float:
        if not 0 <= position < len(self.stops):
            raise OutOfRangeError(f"Physical position {position} outside [0, {len(self.stops)})")
        return self.stops[position].center_y


def build_physical_geometry(physical_reel: Sequence[Symbol],
                            heights: Mapping[Symbol, int] = SYMBOL_HEIGHTS) -> ReelGeometry:
    offset = 0
    stops = []
    for index, symbol in enumerate(physical_reel):
        height = heights.get(symbol)
        if not height or height <= 0:
            raise ConfigurationError(f"Missing height for symbol: {symbol.value}")
        stops.append(StopGeometry(index, symbol, height, offset + height / 2))
        offset += height
    return ReelGeometry(stops=tuple(stops), total_height=offset)
