"""Integer arithmetic for the coin currency.

All balances, amounts, fees and payouts are plain int coins. No float, no Decimal.
"""

import random

from src.sa_common.errors import InvalidAmountError

# Return rates at or below -100% would make a withdrawal pay nothing (or less).
_MIN_RETURN_RATE = -99


def validate_amount(amount: object) -> int:
    """Return amount if it is a positive int, else raise InvalidAmountError.

    bool is rejected even though it subclasses int.
    """
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise InvalidAmountError(amount)
    return amount


def settlement_payout(amount: int, return_rate: int) -> int:
    """Principal plus return, floored: floor(amount * (1 + return_rate / 100)).

    Integer form: (amount * (100 + return_rate)) // 100
      1000 @ 35  -> 1350
      2750 @ -5  -> 2612
    """
    return (amount * (100 + return_rate)) // 100


def draw_return_rate(low: int, high: int, rng: random.Random | None = None) -> int:
    """Draw a whole-percent return rate uniformly from [low, high].

    low is clamped to -99 so a settlement always pays back something.
    """
    low = max(low, _MIN_RETURN_RATE)
    if high < low:
        raise ValueError(f"Return rate range is empty: [{low}, {high}]")
    return (rng or random).randint(low, high)


def coins_to_display(coins: int) -> str:
    """Thousands-separated display string: 15290 -> '15,290 coins', -50 -> '-50 coins'."""
    return f"{coins:,} coins"
