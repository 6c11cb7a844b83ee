"""
Hourly Billing Calculator

Totals phase-based hourly billing from role rates and hours per phase.
"""

from decimal import Decimal

from ..models import HourlyInput, HourlyPhaseResult, HourlyResult

ZERO = Decimal('0')


class HourlyCalculator:
    """Calculates hourly billing per phase."""

    def calculate(self, hourly: HourlyInput) -> HourlyResult:
        phases = [
            HourlyPhaseResult(
                key=phase.key,
                name=phase.name,
                hours=dict(phase.hours),
                amount=self._phase_amount(phase.hours, hourly.rates),
            )
            for phase in hourly.phases
        ]

        return HourlyResult(
            project_name=hourly.project_name,
            rates=dict(hourly.rates),
            phases=phases,
            subtotal=sum((p.amount for p in phases), ZERO),
        )

    def _phase_amount(self, hours: dict[str, Decimal], rates: dict[str, Decimal]) -> Decimal:
        """Sum of rate x hours over the phase's roles; unrated roles cost nothing."""
        return sum((rates.get(role, ZERO) * h for role, h in hours.items()), ZERO)
