"""Tests for am_common.cents: integer arithmetic utilities."""

from src.am_common.cents import calculate_reservation, cents_to_display


class TestCentsToDisplay:
    def test_basic(self) -> None:
        assert cents_to_display(6500) == "$65.00"

    def test_zero(self) -> None:
        assert cents_to_display(0) == "$0.00"

    def test_one_cent(self) -> None:
        assert cents_to_display(1) == "$0.01"

    def test_large(self) -> None:
        assert cents_to_display(123456) == "$1,234.56"

    def test_negative(self) -> None:
        assert cents_to_display(-1200) == "-$12.00"


class TestCalculateReservation:
    def test_half_of_even_bid(self) -> None:
        assert calculate_reservation(20000, 5000) == 10000

    def test_odd_cent_rounds_up(self) -> None:
        # 10001 * 5000 / 10000 = 5000.5 → 5001
        assert calculate_reservation(10001, 5000) == 5001

    def test_full_reservation(self) -> None:
        assert calculate_reservation(777, 10000) == 777

    def test_zero_rate(self) -> None:
        assert calculate_reservation(6500, 0) == 0

    def test_zero_amount(self) -> None:
        assert calculate_reservation(0, 5000) == 0
