"""
Bracket Fee Calculator

Computes a discipline's base fee from its progressive fee schedule.
Results are exact Decimals; rounding is left to the output layer.
"""

from decimal import Decimal

from ..schedules import (
    ARC_HIGH,
    ARCHITECT_SCHEDULES,
    DEFAULT_ARCHITECT_COMPLEXITY,
    DISCIPLINE_RULES,
    FeeBracket,
)

ZERO = Decimal('0')


def compute_bracket_fee(value: Decimal, schedule: tuple[FeeBracket, ...]) -> Decimal:
    """
    Evaluate a progressive schedule at `value`.

    The first bracket whose upper bound covers the value applies:
    fee = primary + max(0, value - over) * rate.

    Zero, negative and NaN values cost nothing. The last bracket of every
    schedule is unbounded; a value beyond a bounded last bracket yields 0.
    """
    if value.is_nan() or value <= 0:
        return ZERO

    for bracket in schedule:
        if bracket.upper_bound is None or value <= bracket.upper_bound:
            return bracket.primary + max(ZERO, value - bracket.over) * bracket.rate

    return ZERO


class FeeCalculator:
    """Maps each basket discipline to its base fee."""

    def calculate_fee(self, discipline: str, value: Decimal, complexity: str | None = None) -> Decimal:
        """
        Base fee for one discipline at the given value of works.

        Unknown disciplines cost nothing rather than raising. The architect's
        schedule is chosen by complexity tier (default medium).
        """
        if value.is_nan() or value <= 0:
            return ZERO

        rule = DISCIPLINE_RULES.get(discipline)
        if rule is None:
            return ZERO

        if rule.by_complexity:
            return compute_bracket_fee(value, self._architect_schedule(complexity))

        if rule.flat_rate is not None:
            return value * rule.flat_rate

        if rule.schedule is None:
            return ZERO

        return compute_bracket_fee(value, rule.schedule) * rule.multiplier

    def _architect_schedule(self, complexity: str | None) -> tuple[FeeBracket, ...]:
        if complexity is None:
            complexity = DEFAULT_ARCHITECT_COMPLEXITY
        # Any tier name outside low/medium falls through to the high table
        return ARCHITECT_SCHEDULES.get(complexity, ARC_HIGH)


_default_calculator = FeeCalculator()


def calculate_fee(discipline: str, value: Decimal, complexity: str | None = None) -> Decimal:
    """Module-level shortcut for FeeCalculator.calculate_fee."""
    return _default_calculator.calculate_fee(discipline, value, complexity)
