"""
Input Validation for the Fee Engine

Validates the structure of fee requests before processing begins.
Raises ValueError with clear messages for any constraint violations.

Numeric ranges are deliberately left alone: a discount above 100% or a
negative manual amount is passed through to the calculators unchanged.
"""

from .models import BasketInput, BimInput, ProjectInput, SacapInput
from .rates import AECOM_RATE_CHOICES
from .schedules import COMPLEXITY_TIERS, DISCIPLINE_RULES

BIM_METHODS = ('per_m2', 'per_hour')
BIM_PRESET_NAMES = ('auto', 'homes', 'large', 'custom')


class InputValidator:
    """Validates fee request parameters."""

    def validate_basket(self, basket: BasketInput) -> None:
        """Run all basket validations. Raises ValueError if any check fails."""
        for key, tier in basket.complexity_overrides.items():
            self.validate_complexity(tier, f"complexity_overrides[{key}]")
        self._validate_manual_rows(basket)

    def validate_sacap(self, sacap: SacapInput) -> None:
        self.validate_complexity(sacap.complexity, "complexity")
        if sacap.aecom.rate_choice not in AECOM_RATE_CHOICES:
            raise ValueError(
                f"Invalid aecom.rate_choice: {sacap.aecom.rate_choice}. "
                f"Must be one of {', '.join(AECOM_RATE_CHOICES)}"
            )

    def validate_bim(self, bim: BimInput) -> None:
        if bim.method not in BIM_METHODS:
            raise ValueError(f"Invalid method: {bim.method}. Must be 'per_m2' or 'per_hour'")
        if bim.preset not in BIM_PRESET_NAMES:
            raise ValueError(f"Invalid preset: {bim.preset}. Must be one of {', '.join(BIM_PRESET_NAMES)}")

    def validate_project(self, project: ProjectInput) -> None:
        self.validate_basket(project.basket)
        self.validate_sacap(project.sacap)
        self.validate_bim(project.bim)

    def validate_complexity(self, tier: str, field_name: str) -> None:
        if tier not in COMPLEXITY_TIERS:
            raise ValueError(f"Invalid {field_name}: {tier}. Must be 'low', 'medium' or 'high'")

    def _validate_manual_rows(self, basket: BasketInput) -> None:
        """Manual row ids key the pin map, so they must be unique and distinct from disciplines."""
        seen = set()
        for row in basket.manual_rows:
            if not row.id:
                raise ValueError("manual row id is required")
            if row.id in DISCIPLINE_RULES:
                raise ValueError(f"manual row id cannot reuse a discipline key: {row.id}")
            if row.id in seen:
                raise ValueError(f"duplicate manual row id: {row.id}")
            seen.add(row.id)
