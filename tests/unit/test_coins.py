"""Unit tests for coin arithmetic helpers."""

import random

import pytest

from src.sa_common.coins import (
    coins_to_display,
    draw_return_rate,
    settlement_payout,
    validate_amount,
)
from src.sa_common.errors import InvalidAmountError


class TestValidateAmount:
    def test_positive_int_passes(self) -> None:
        assert validate_amount(1) == 1
        assert validate_amount(5000) == 5000

    @pytest.mark.parametrize("bad", [0, -1, -500])
    def test_non_positive_rejected(self, bad: int) -> None:
        with pytest.raises(InvalidAmountError):
            validate_amount(bad)

    @pytest.mark.parametrize("bad", [1.5, "10", None, True, False])
    def test_non_int_rejected(self, bad: object) -> None:
        with pytest.raises(InvalidAmountError):
            validate_amount(bad)

    def test_error_is_http_400(self) -> None:
        with pytest.raises(InvalidAmountError) as exc_info:
            validate_amount(0)
        assert exc_info.value.http_status == 400
        assert exc_info.value.code == 2002


class TestSettlementPayout:
    def test_positive_return(self) -> None:
        assert settlement_payout(1000, 35) == 1350

    def test_negative_return_floors(self) -> None:
        # 2750 * 0.95 = 2612.5
        assert settlement_payout(2750, -5) == 2612

    def test_zero_return_is_principal(self) -> None:
        assert settlement_payout(777, 0) == 777

    def test_fractional_result_floors(self) -> None:
        # 333 * 1.22 = 406.26
        assert settlement_payout(333, 22) == 406


class TestDrawReturnRate:
    def test_within_range(self) -> None:
        rng = random.Random(42)
        for _ in range(200):
            assert -5 <= draw_return_rate(-5, 35, rng) <= 35

    def test_degenerate_range(self) -> None:
        assert draw_return_rate(7, 7) == 7

    def test_low_clamped_above_minus_100(self) -> None:
        rng = random.Random(0)
        for _ in range(200):
            assert draw_return_rate(-500, -99, rng) == -99

    def test_empty_range_raises(self) -> None:
        with pytest.raises(ValueError):
            draw_return_rate(10, 5)


class TestCoinsToDisplay:
    def test_thousands_separator(self) -> None:
        assert coins_to_display(15290) == "15,290 coins"

    def test_negative(self) -> None:
        assert coins_to_display(-50) == "-50 coins"

    def test_zero(self) -> None:
        assert coins_to_display(0) == "0 coins"
