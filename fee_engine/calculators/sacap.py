"""
SACAP Stage Calculator

Splits the architect's statutory base fee over the SACAP work stages.
Each stage may carry its own discount or a fixed override amount, and an
overall discount is then applied across every stage.
"""

from decimal import ROUND_HALF_UP, Decimal

from ..models import AecomSelection, SacapInput, SacapResult, SacapStageResult
from ..rates import AECOM_M2_OPTIONS
from ..schedules import ARC_HIGH, ARCHITECT_SCHEDULES, FeeBracket

ZERO = Decimal('0')
HUNDRED = Decimal('100')


def _clamp(value: Decimal, low: Decimal, high: Decimal) -> Decimal:
    return max(low, min(high, value))


def aecom_rate(selection: AecomSelection) -> Decimal:
    """Rate per m2 for the selected building type, or 0 if unknown."""
    item = AECOM_M2_OPTIONS.get(selection.key)
    if item is None:
        return ZERO
    if selection.rate_choice == 'min':
        return item.min
    if selection.rate_choice == 'max':
        return item.max
    return item.mid


def estimate_value_of_works(selection: AecomSelection) -> Decimal:
    """
    Estimate a value of works as rate x building size, rounded to a whole rand.

    Unknown building types and non-positive sizes estimate to zero.
    """
    if selection.key not in AECOM_M2_OPTIONS:
        return ZERO
    size = max(ZERO, selection.size)
    estimate = (aecom_rate(selection) * size).to_integral_value(rounding=ROUND_HALF_UP)
    return max(ZERO, estimate)


class SacapCalculator:
    """Apportions the architect fee across work stages."""

    def calculate(self, sacap: SacapInput) -> SacapResult:
        schedule = ARCHITECT_SCHEDULES.get(sacap.complexity, ARC_HIGH)
        base_fee = self._base_fee(sacap.value_of_works, schedule)

        overall_pct = _clamp(sacap.overall_discount_pct, ZERO, HUNDRED)
        overall_factor = max(ZERO, 1 - overall_pct / HUNDRED)

        stages = [self._calculate_stage(stage, base_fee, overall_factor) for stage in sacap.stages]
        enabled = [s for s in stages if s.enabled]

        subtotal_before_overall = sum((s.pre_overall_amount for s in enabled), ZERO)
        subtotal = sum((s.amount for s in enabled), ZERO)

        return SacapResult(
            value_of_works=sacap.value_of_works,
            complexity=sacap.complexity,
            base_fee=base_fee,
            overall_discount_pct=overall_pct,
            stages=stages,
            subtotal_before_overall=subtotal_before_overall,
            subtotal=subtotal,
            total_discount_amount=subtotal_before_overall - subtotal,
            aecom_rate=aecom_rate(sacap.aecom),
            aecom_estimate=estimate_value_of_works(sacap.aecom),
        )

    def _base_fee(self, value: Decimal, schedule: tuple[FeeBracket, ...]) -> Decimal:
        """
        Statutory fee at `value`, scanning the table from the first bracket.

        Unlike compute_bracket_fee there is no short-circuit for a zero or
        negative value: it lands in the first bracket and pays its primary
        fee. A NaN value matches no bracket and costs nothing.
        """
        if value.is_nan():
            return ZERO

        for bracket in schedule:
            if bracket.upper_bound is None or value <= bracket.upper_bound:
                return bracket.primary + max(ZERO, value - bracket.over) * bracket.rate

        return ZERO

    def _calculate_stage(self, stage, base_fee: Decimal, overall_factor: Decimal) -> SacapStageResult:
        stage_fee = base_fee * stage.pct / HUNDRED
        discounted = stage_fee * max(ZERO, 1 - stage.discount_pct / HUNDRED)
        # A positive override replaces the computed stage fee before the overall discount
        pre_overall = stage.override if stage.override > 0 else discounted

        return SacapStageResult(
            name=stage.name,
            pct=stage.pct,
            override=stage.override,
            enabled=stage.enabled,
            discount_pct=stage.discount_pct,
            stage_fee=stage_fee,
            discounted_stage_fee=discounted,
            pre_overall_amount=pre_overall,
            amount=pre_overall * overall_factor,
        )
