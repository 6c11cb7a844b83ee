"""Tests for structural input validation."""

from decimal import Decimal

import pytest

from fee_engine.models import AecomSelection, BasketInput, BimInput, ManualRow, SacapInput
from fee_engine.validators import InputValidator


def _make_basket(**overrides):
    params = {"value_of_works": Decimal("1000000")}
    params.update(overrides)
    return BasketInput(**params)


class TestBasketValidation:

    @pytest.fixture
    def validator(self):
        return InputValidator()

    def test_valid_basket_passes(self, validator):
        validator.validate_basket(_make_basket(complexity_overrides={"architect": "high"}))

    def test_invalid_complexity_tier(self, validator):
        with pytest.raises(ValueError, match="complexity_overrides\\[architect\\]"):
            validator.validate_basket(_make_basket(complexity_overrides={"architect": "extreme"}))

    def test_manual_row_requires_id(self, validator):
        basket = _make_basket(manual_rows=[ManualRow(id="", name="Extra", amount=Decimal("1"))])
        with pytest.raises(ValueError, match="id is required"):
            validator.validate_basket(basket)

    def test_duplicate_manual_row_ids(self, validator):
        rows = [
            ManualRow(id="m1", name="A", amount=Decimal("1")),
            ManualRow(id="m1", name="B", amount=Decimal("2")),
        ]
        with pytest.raises(ValueError, match="duplicate manual row id"):
            validator.validate_basket(_make_basket(manual_rows=rows))

    def test_manual_row_cannot_reuse_discipline_key(self, validator):
        rows = [ManualRow(id="architect", name="Second architect", amount=Decimal("1"))]
        with pytest.raises(ValueError, match="discipline key"):
            validator.validate_basket(_make_basket(manual_rows=rows))

    def test_numeric_ranges_are_not_validated(self, validator):
        """Out-of-range numbers are passed through to the calculators."""
        validator.validate_basket(_make_basket(
            discount_pct=Decimal("150"),
            target_pct=Decimal("250"),
            manual_rows=[ManualRow(id="m1", name="Credit", amount=Decimal("-500"))],
        ))


class TestSectionValidation:

    @pytest.fixture
    def validator(self):
        return InputValidator()

    def test_sacap_complexity(self, validator):
        with pytest.raises(ValueError, match="Invalid complexity"):
            validator.validate_sacap(SacapInput(value_of_works=Decimal("1"), complexity="extreme"))

    def test_sacap_rate_choice(self, validator):
        sacap = SacapInput(value_of_works=Decimal("1"), aecom=AecomSelection(rate_choice="average"))
        with pytest.raises(ValueError, match="rate_choice"):
            validator.validate_sacap(sacap)

    def test_bim_method(self, validator):
        with pytest.raises(ValueError, match="Invalid method"):
            validator.validate_bim(BimInput(method="per_day"))

    def test_bim_preset(self, validator):
        with pytest.raises(ValueError, match="Invalid preset"):
            validator.validate_bim(BimInput(preset="mansion"))

    def test_valid_sections_pass(self, validator):
        validator.validate_sacap(SacapInput(value_of_works=Decimal("1"), complexity="high"))
        validator.validate_bim(BimInput(method="per_hour", preset="custom"))
