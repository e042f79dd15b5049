"""
REELFORGE — Symbols & Paytable

Symbol set, win categories and the reference paytable for the
classic 3-reel Double Diamond style machine.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType


class Symbol(str, Enum):
    BLANK          = "BLANK"
    SINGLE_BAR     = "SINGLE_BAR"
    DOUBLE_BAR     = "DOUBLE_BAR"
    TRIPLE_BAR     = "TRIPLE_BAR"
    SEVEN          = "SEVEN"
    DOUBLE_DIAMOND = "DOUBLE_DIAMOND"
    CHERRY         = "CHERRY"


class WinCategory(str, Enum):
    JACKPOT    = "JACKPOT"
    SEVEN      = "SEVEN"
    TRIPLE_BAR = "TRIPLE_BAR"
    DOUBLE_BAR = "DOUBLE_BAR"
    SINGLE_BAR = "SINGLE_BAR"
    CHERRY_3   = "CHERRY_3"
    MIXED_BARS = "MIXED_BARS"
    CHERRY_2   = "CHERRY_2"
    CHERRY_1   = "CHERRY_1"
    LOSE       = "LOSE"


WILD = Symbol.DOUBLE_DIAMOND
BAR_SYMBOLS = frozenset({Symbol.SINGLE_BAR, Symbol.DOUBLE_BAR, Symbol.TRIPLE_BAR})

# Per 1 coin
PAYTABLE = MappingProxyType({
    WinCategory.JACKPOT:    800,   # 3x DOUBLE_DIAMOND
    WinCategory.SEVEN:      80,    # 3x SEVEN
    WinCategory.TRIPLE_BAR: 40,
    WinCategory.DOUBLE_BAR: 25,
    WinCategory.SINGLE_BAR: 10,
    WinCategory.CHERRY_3:   10,
    WinCategory.MIXED_BARS: 5,     # any 3 bars, mixed
    WinCategory.CHERRY_2:   5,
    WinCategory.CHERRY_1:   2,
})

# Display heights in pixels, consumed by the geometry builder only
SYMBOL_HEIGHTS = MappingProxyType({
    Symbol.BLANK:          105,
    Symbol.SINGLE_BAR:     210,
    Symbol.DOUBLE_BAR:     210,
    Symbol.TRIPLE_BAR:     210,
    Symbol.SEVEN:          210,
    Symbol.DOUBLE_DIAMOND: 210,
    Symbol.CHERRY:         210,
})


def to_symbol(value) -> Symbol:
    """Coerce a symbol name (or Symbol) to Symbol. Unknown names raise ValueError."""
    if isinstance(value, Symbol):
        return value
    return Symbol(value)
