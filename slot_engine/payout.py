"""
REELFORGE — Payout Evaluation

Evaluates a 3-symbol line against the paytable.
  - DOUBLE_DIAMOND is wild: it substitutes for any symbol and
    doubles the win per wild (1 wild = 2x, 2 wilds = 4x)
  - 3 wilds is the jackpot and is never multiplied
  - Mixed bars pay when all three are bars or wilds
  - Cherries pay on literal cherries only; wilds still multiply

The first matching rule wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from slot_engine.errors import ConfigurationError
from slot_engine.symbols import BAR_SYMBOLS, PAYTABLE, WILD, Symbol, WinCategory, to_symbol

WILD_MULTIPLIERS = {0: 1, 1: 2, 2: 4}

CHERRY_CATEGORIES = {
    3: WinCategory.CHERRY_3,
    2: WinCategory.CHERRY_2,
    1: WinCategory.CHERRY_1,
}

# Entries evaluate() reads regardless of which symbols landed
REQUIRED_CATEGORIES = (
    WinCategory.JACKPOT,
    WinCategory.MIXED_BARS,
    WinCategory.CHERRY_3,
    WinCategory.CHERRY_2,
    WinCategory.CHERRY_1,
)


@dataclass(frozen=True)
class PayoutResult:
    category: WinCategory
    payout: int

    @property
    def is_win(self) -> bool:
        return self.payout > 0

    def to_dict(self) -> dict:
        return {"type": self.category.value, "payout": self.payout}


LOSE = PayoutResult(WinCategory.LOSE, 0)


def validate_paytable(paytable: Mapping[WinCategory, int]) -> None:
    """Raise ConfigurationError if the paytable can't be evaluated against."""
    for category in REQUIRED_CATEGORIES:
        if category not in paytable:
            raise ConfigurationError(f"Paytable missing payout for {category.value}")
    for category, amount in paytable.items():
        if category == WinCategory.LOSE:
            raise ConfigurationError("Paytable must not carry a LOSE entry")
        if amount < 0:
            raise ConfigurationError(f"Negative payout for {category.value}: {amount}")


def _three_of_a_kind_base(symbol: Symbol, paytable: Mapping[WinCategory, int]) -> tuple:
    category = WinCategory.__members__.get(symbol.value)
    if category is None:
        return None, 0
    return category, paytable.get(category, 0)


def evaluate(symbols: Sequence, coins: int = 1,
             paytable: Mapping[WinCategory, int] = PAYTABLE) -> PayoutResult:
    """Evaluate a 3-symbol combination.

    Args:
        symbols: three Symbol members or symbol names
        coins: bet size; the caller validates it, no clamping here
        paytable: per-coin payouts keyed by WinCategory

    Returns:
        PayoutResult(category, payout)
    """
    if len(symbols) != 3:
        raise ValueError(f"Expected 3 symbols, got {len(symbols)}")
    line = [to_symbol(s) for s in symbols]

    wilds = line.count(WILD)
    non_wild = [s for s in line if s != WILD]

    # Jackpot: no multiplier
    if wilds == 3:
        return PayoutResult(WinCategory.JACKPOT, paytable[WinCategory.JACKPOT] * coins)

    mult = WILD_MULTIPLIERS[wilds]

    # 3-of-a-kind with wild substitution
    first = non_wild[0]
    if all(s == first for s in non_wild):
        category, base = _three_of_a_kind_base(first, paytable)
        if base > 0:
            return PayoutResult(category, base * mult * coins)

    if all(s in BAR_SYMBOLS or s == WILD for s in line):
        return PayoutResult(WinCategory.MIXED_BARS,
                            paytable[WinCategory.MIXED_BARS] * mult * coins)

    # Wilds multiply cherries but never count as one
    cherries = line.count(Symbol.CHERRY)
    if cherries:
        category = CHERRY_CATEGORIES[cherries]
        return PayoutResult(category, paytable[category] * mult * coins)

    return LOSE
