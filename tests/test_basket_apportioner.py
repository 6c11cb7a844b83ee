"""
Unit Tests for the Basket Apportioner

Covers discount mode, target mode with pinned rows, and the reverse
"discount needed" helper.
"""

from decimal import Decimal

import pytest

from fee_engine.calculators.basket import BasketApportioner, discount_needed_for_target
from fee_engine.models import LineItem


def _make_item(key, base_fee, enabled=True, pin=None, is_manual=False):
    return LineItem(
        key=key,
        label=key.replace("_", " ").title(),
        group="professional",
        vow=Decimal("0"),
        base_fee=Decimal(str(base_fee)),
        enabled=enabled,
        is_manual=is_manual,
        pinned_effective_pct=Decimal(str(pin)) if pin is not None else None,
    )


def _rows_by_key(result):
    return {row.key: row for row in result.rows}


class TestDiscountMode:
    """Every base fee is scaled by 1 - discount/100."""

    @pytest.fixture
    def apportioner(self):
        return BasketApportioner()

    def test_zero_discount_keeps_base_fees(self, apportioner):
        items = [_make_item("a", 1000), _make_item("b", 2500.5)]
        result = apportioner.apportion(items, Decimal("1000000"))

        assert result.mode == "discount"
        for row in result.rows:
            assert row.proposed_fee == row.base_fee

    def test_ten_percent_discount(self, apportioner):
        """1,000 × 0.9 = 900; 3,000 × 0.9 = 2,700"""
        items = [_make_item("a", 1000), _make_item("b", 3000)]
        result = apportioner.apportion(items, Decimal("1000000"), discount_pct=Decimal("10"))

        rows = _rows_by_key(result)
        assert rows["a"].proposed_fee == Decimal("900")
        assert rows["b"].proposed_fee == Decimal("2700")
        assert result.subtotal == Decimal("3600")
        assert result.total_base_fee == Decimal("4000")

    def test_pins_are_ignored_without_a_target(self, apportioner):
        items = [_make_item("a", 1000, pin=5)]
        result = apportioner.apportion(items, Decimal("1000000"), discount_pct=Decimal("10"))

        row = result.rows[0]
        assert row.proposed_fee == Decimal("900")
        assert row.is_pinned is True

    def test_discount_above_100_goes_negative(self, apportioner):
        """150% discount gives a factor of -0.5, which is not clamped."""
        items = [_make_item("a", 1000)]
        result = apportioner.apportion(items, Decimal("1000000"), discount_pct=Decimal("150"))

        assert result.rows[0].proposed_fee == Decimal("-500")
        assert result.subtotal == Decimal("-500")

    def test_target_without_vow_falls_back_to_discount(self, apportioner):
        items = [_make_item("a", 1000, pin=5)]
        result = apportioner.apportion(items, Decimal("0"), discount_pct=Decimal("20"), target_pct=Decimal("10"))

        assert result.mode == "discount"
        assert result.rows[0].proposed_fee == Decimal("800")
        assert result.rows[0].effective_pct == Decimal("0")


class TestTargetMode:
    """Pins are honoured exactly; unpinned rows share the remainder."""

    @pytest.fixture
    def apportioner(self):
        return BasketApportioner()

    def test_pin_at_five_percent_of_one_million(self, apportioner):
        """1,000,000 × 5% = 50,000 regardless of the target or other rows."""
        items = [_make_item("pinned", 123456, pin=5), _make_item("other", 999999)]
        result = apportioner.apportion(items, Decimal("1000000"), target_pct=Decimal("12"))

        row = _rows_by_key(result)["pinned"]
        assert row.proposed_fee == Decimal("50000")
        assert row.effective_pct == Decimal("5")
        assert row.is_pinned is True

    def test_proportional_split_of_remaining_target(self, apportioner):
        """
        Target 10% of 2,000,000 = 200,000; pin 3% = 60,000.
        Remaining 140,000 over bases 100,000 : 300,000 → factor 0.35.
        """
        items = [
            _make_item("pinned", 50000, pin=3),
            _make_item("small", 100000),
            _make_item("large", 300000),
        ]
        result = apportioner.apportion(items, Decimal("2000000"), target_pct=Decimal("10"))

        rows = _rows_by_key(result)
        assert result.mode == "target"
        assert result.target_amount == Decimal("200000")
        assert rows["pinned"].proposed_fee == Decimal("60000")
        assert rows["small"].proposed_fee == Decimal("35000")
        assert rows["large"].proposed_fee == Decimal("105000")
        assert result.subtotal == Decimal("200000")

    def test_unpinned_rows_conserve_remaining_target(self, apportioner):
        items = [
            _make_item("pinned", 0, pin=1.5),
            _make_item("a", 12345.67),
            _make_item("b", 76543.21),
            _make_item("c", 333.33),
        ]
        vow = Decimal("3000000")
        result = apportioner.apportion(items, vow, target_pct=Decimal("7"))

        remaining = vow * Decimal("7") / 100 - vow * Decimal("1.5") / 100
        unpinned_total = sum(r.proposed_fee for r in result.rows if not r.is_pinned)
        assert abs(unpinned_total - remaining) < Decimal("1e-10")

    def test_over_pinned_target_floors_unpinned_rows_at_zero(self, apportioner):
        """
        Target 5% of 1,000,000 = 50,000 but the pin alone is 100,000.
        Unpinned rows get exactly 0, unlike a discount above 100%.
        """
        items = [_make_item("pinned", 0, pin=10), _make_item("other", 1000)]
        result = apportioner.apportion(items, Decimal("1000000"), target_pct=Decimal("5"))

        rows = _rows_by_key(result)
        assert rows["pinned"].proposed_fee == Decimal("100000")
        assert rows["other"].proposed_fee == Decimal("0")
        assert result.subtotal == Decimal("100000")

    def test_zero_base_unpinned_rows_split_evenly(self, apportioner):
        """100,000 target over two zero-amount manual rows → 50,000 each."""
        items = [_make_item("m1", 0, is_manual=True), _make_item("m2", 0, is_manual=True)]
        result = apportioner.apportion(items, Decimal("1000000"), target_pct=Decimal("10"))

        for row in result.rows:
            assert row.proposed_fee == Decimal("50000")

    def test_even_split_can_go_negative(self, apportioner):
        """Pin 200,000 against a 100,000 target leaves -100,000 to split."""
        items = [
            _make_item("pinned", 0, pin=20),
            _make_item("m1", 0, is_manual=True),
            _make_item("m2", 0, is_manual=True),
        ]
        result = apportioner.apportion(items, Decimal("1000000"), target_pct=Decimal("10"))

        rows = _rows_by_key(result)
        assert rows["m1"].proposed_fee == Decimal("-50000")
        assert rows["m2"].proposed_fee == Decimal("-50000")
        assert result.subtotal == Decimal("100000")

    def test_all_rows_pinned(self, apportioner):
        items = [_make_item("a", 1000, pin=2), _make_item("b", 1000, pin=3)]
        result = apportioner.apportion(items, Decimal("1000000"), target_pct=Decimal("10"))

        assert result.subtotal == Decimal("50000")

    def test_zero_percent_pin_is_a_real_pin(self, apportioner):
        items = [_make_item("a", 1000, pin=0), _make_item("b", 1000)]
        result = apportioner.apportion(items, Decimal("1000000"), target_pct=Decimal("1"))

        rows = _rows_by_key(result)
        assert rows["a"].proposed_fee == Decimal("0")
        assert rows["a"].is_pinned is True
        assert rows["b"].proposed_fee == Decimal("10000")


class TestDisabledRows:
    """Disabled rows never contribute to the totals."""

    @pytest.fixture
    def apportioner(self):
        return BasketApportioner()

    def test_disabled_row_excluded_in_discount_mode(self, apportioner):
        items = [_make_item("on", 1000), _make_item("off", 5000, enabled=False)]
        result = apportioner.apportion(items, Decimal("1000000"), discount_pct=Decimal("10"))

        rows = _rows_by_key(result)
        assert rows["off"].proposed_fee == Decimal("0")
        assert result.subtotal == Decimal("900")
        assert result.total_base_fee == Decimal("1000")

    def test_disabled_row_excluded_in_target_mode(self, apportioner):
        items = [_make_item("on", 1000), _make_item("off", 5000, enabled=False, pin=4)]
        result = apportioner.apportion(items, Decimal("1000000"), target_pct=Decimal("2"))

        rows = _rows_by_key(result)
        assert rows["off"].proposed_fee == Decimal("0")
        assert rows["off"].is_pinned is True
        assert rows["on"].proposed_fee == Decimal("20000")
        assert result.subtotal == Decimal("20000")
        assert result.total_base_fee == Decimal("1000")


class TestNaNInputs:
    """NaN inputs fall back deterministically instead of raising."""

    @pytest.fixture
    def apportioner(self):
        return BasketApportioner()

    def test_nan_target_stays_in_discount_mode(self, apportioner):
        result = apportioner.apportion([_make_item("a", 1000)], Decimal("1000000"), target_pct=Decimal("NaN"))

        assert result.mode == "discount"
        assert result.rows[0].proposed_fee == Decimal("1000")
        assert result.rows[0].effective_pct == Decimal("0.1")

    def test_nan_vow_gives_zero_effective_pct(self, apportioner):
        result = apportioner.apportion([_make_item("a", 1000)], Decimal("NaN"), target_pct=Decimal("10"))

        assert result.mode == "discount"
        assert result.rows[0].proposed_fee == Decimal("1000")
        assert result.rows[0].effective_pct == Decimal("0")

    def test_nan_base_total_splits_target_evenly(self, apportioner):
        """A NaN base total is not positive, so the 100,000 target is split evenly."""
        items = [_make_item("a", "NaN"), _make_item("b", 1000)]
        result = apportioner.apportion(items, Decimal("1000000"), target_pct=Decimal("10"))

        rows = _rows_by_key(result)
        assert rows["a"].proposed_fee == Decimal("50000")
        assert rows["b"].proposed_fee == Decimal("50000")
        assert result.subtotal == Decimal("100000")

    def test_nan_pin_leaves_nothing_for_unpinned_rows(self, apportioner):
        items = [_make_item("pinned", 0, pin="NaN"), _make_item("other", 1000)]
        result = apportioner.apportion(items, Decimal("1000000"), target_pct=Decimal("10"))

        assert _rows_by_key(result)["other"].proposed_fee == Decimal("0")

    def test_nan_target_needs_no_discount(self):
        assert discount_needed_for_target(Decimal("1000"), Decimal("1000000"), Decimal("NaN")) == Decimal("0")

    def test_nan_vow_needs_no_discount(self):
        assert discount_needed_for_target(Decimal("1000"), Decimal("NaN"), Decimal("10")) == Decimal("0")


class TestDiscountNeededForTarget:
    """Reverse calculation behind the Apply action."""

    def test_half_of_base_needs_fifty_percent(self):
        """Target 10% of 1,000,000 = 100,000 against 200,000 base → 50%."""
        assert discount_needed_for_target(Decimal("200000"), Decimal("1000000"), Decimal("10")) == Decimal("50")

    def test_target_above_base_needs_no_discount(self):
        assert discount_needed_for_target(Decimal("1000"), Decimal("1000000"), Decimal("10")) == Decimal("0")

    def test_target_is_clamped_to_100(self):
        # 150% clamps to 100% of 100,000, so half of the 200,000 base must go
        assert discount_needed_for_target(Decimal("200000"), Decimal("100000"), Decimal("150")) == Decimal("50")

    def test_degenerate_inputs_need_no_discount(self):
        assert discount_needed_for_target(Decimal("0"), Decimal("1000000"), Decimal("10")) == Decimal("0")
        assert discount_needed_for_target(Decimal("200000"), Decimal("0"), Decimal("10")) == Decimal("0")
        assert discount_needed_for_target(Decimal("200000"), Decimal("1000000"), Decimal("-5")) == Decimal("0")
