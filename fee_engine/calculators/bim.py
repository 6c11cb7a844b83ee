"""
BIM Calculator

Prices a laser-scan survey and BIM model either per square metre (scanning,
point-cloud registration and modelling rates) or by hours at a flat BIM rate.
Both totals are always computed; the selected method decides the subtotal.
"""

from decimal import Decimal

from ..models import BimComponents, BimInput, BimResult, BimTimeline
from ..rates import (
    BIM_AUTO_HOMES_BELOW,
    BIM_AUTO_LARGE_ABOVE,
    BIM_PRESETS,
    HOURLY_BIM_RATE,
    HOURS_PER_DAY,
    MODEL_M2_PER_DAY,
    SCAN_M2_PER_DAY,
)

ZERO = Decimal('0')


class BimCalculator:
    """Calculates BIM scanning and modelling costs."""

    def calculate(self, bim: BimInput) -> BimResult:
        rates = self.resolve_rates(bim)

        amounts = BimComponents(
            scan=self._amount(bim.overrides.scan, rates.scan, bim.area),
            reg=self._amount(bim.overrides.reg, rates.reg, bim.area),
            model=self._amount(bim.overrides.model, rates.model, bim.area),
        )

        return BimResult(
            method=bim.method,
            preset=bim.preset,
            area=bim.area,
            rates=rates,
            amounts=amounts,
            per_m2_subtotal=amounts.total,
            hourly_subtotal=bim.hours.total * HOURLY_BIM_RATE,
            timeline=self.timeline(bim.area),
        )

    def resolve_rates(self, bim: BimInput) -> BimComponents:
        """
        Pick the per-m2 rates for this survey.

        Presets only apply to per-m2 pricing. 'auto' switches to the large
        preset above 1000 m2 and to the homes preset below 500 m2; between
        the two (and for 'custom') the supplied rates stand.
        """
        if bim.method != 'per_m2':
            return bim.rates

        preset = None
        if bim.preset in BIM_PRESETS:
            preset = bim.preset
        elif bim.preset == 'auto':
            if bim.area > BIM_AUTO_LARGE_ABOVE:
                preset = 'large'
            elif bim.area < BIM_AUTO_HOMES_BELOW:
                preset = 'homes'

        if preset is None:
            return bim.rates
        return BimComponents(*BIM_PRESETS[preset])

    def timeline(self, area: Decimal) -> BimTimeline:
        if area <= 0:
            return BimTimeline()

        scan_days = area / SCAN_M2_PER_DAY
        scan_hours = scan_days * HOURS_PER_DAY
        model_days = area / MODEL_M2_PER_DAY
        return BimTimeline(
            scan_days=scan_days,
            scan_hours=scan_hours,
            reg_hours_est=scan_hours / 8,
            model_days=model_days,
            model_hours_est=model_days * HOURS_PER_DAY,
        )

    def _amount(self, override: Decimal, rate: Decimal, area: Decimal) -> Decimal:
        if override > 0:
            return override
        return rate * area
