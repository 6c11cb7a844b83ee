"""
Output Builder

Converts calculator results into API response dictionaries. Money is rounded
here and nowhere else; the calculators work with exact Decimals.
"""

from decimal import Decimal

from .models import (
    BasketResult,
    BimResult,
    FeeSnapshot,
    HourlyResult,
    ProjectDetails,
    SacapResult,
)
from .rates import ROLE_LABELS

HUNDRED = Decimal('100')


def to_money(value: Decimal) -> float:
    """Convert Decimal to float with 2 decimal places."""
    return round(float(value), 2)


def to_pct(value: Decimal) -> float:
    """Convert a percentage to float with 4 decimal places."""
    return round(float(value), 4)


def _fmt(value) -> str:
    """Format a number as currency string for descriptions."""
    return f"R{value:,.2f}"


def apply_vat(subtotal: Decimal, vat_pct: Decimal) -> tuple[Decimal, Decimal]:
    """Return (vat, total incl. VAT) for a subtotal."""
    vat = subtotal * vat_pct / HUNDRED
    return vat, subtotal + vat


class OutputBuilder:
    """Builds the output response for each fee section."""

    def build_basket(self, result: BasketResult, vat_pct: Decimal, discount_needed_pct: Decimal) -> dict:
        """Construct the basket of fees response."""
        enabled = [r for r in result.rows if r.enabled]
        subtotal = to_money(result.subtotal)
        summary = {
            "total_base_fee": {
                "value": to_money(result.total_base_fee),
                "description": f"Sum of base fees for {len(enabled)} selected professionals"
            },
            "subtotal": {
                "value": subtotal,
                "description": self._basket_subtotal_description(result, subtotal)
            },
            **self._vat_lines(result.subtotal, vat_pct),
            "discount_needed_pct": {
                "value": to_pct(discount_needed_pct),
                "description": "Global discount that would bring the unpinned basket to the target"
            },
        }
        if result.mode == "target":
            summary["target_amount"] = {
                "value": to_money(result.target_amount),
                "description": f"Target fee budget of {_fmt(to_money(result.target_amount))}"
            }

        return {
            "mode": result.mode,
            "rows": [
                {
                    "key": row.key,
                    "label": row.label,
                    "group": row.group,
                    "vow": to_money(row.vow),
                    "base_fee": to_money(row.base_fee),
                    "proposed_fee": to_money(row.proposed_fee),
                    "effective_pct": to_pct(row.effective_pct),
                    "enabled": row.enabled,
                    "is_manual": row.is_manual,
                    "is_pinned": row.is_pinned,
                }
                for row in result.rows
            ],
            "summary": summary,
        }

    def build_sacap(self, result: SacapResult, vat_pct: Decimal) -> dict:
        """Construct the SACAP stage apportionment response."""
        base_fee = to_money(result.base_fee)
        return {
            "value_of_works": to_money(result.value_of_works),
            "complexity": result.complexity,
            "stages": [
                {
                    "name": stage.name,
                    "pct": float(stage.pct),
                    "discount_pct": float(stage.discount_pct),
                    "override": to_money(stage.override),
                    "enabled": stage.enabled,
                    "stage_fee": to_money(stage.stage_fee),
                    "discounted_stage_fee": to_money(stage.discounted_stage_fee),
                    "pre_overall_amount": to_money(stage.pre_overall_amount),
                    "amount": to_money(stage.amount),
                }
                for stage in result.stages
            ],
            "summary": {
                "base_fee": {
                    "value": base_fee,
                    "description": f"SACAP {result.complexity} complexity fee on {_fmt(to_money(result.value_of_works))}"
                },
                "overall_discount_pct": {
                    "value": float(result.overall_discount_pct),
                    "description": "Overall discount applied to every stage, clamped to 0-100%"
                },
                "subtotal_before_overall": {
                    "value": to_money(result.subtotal_before_overall),
                    "description": "Enabled stages after stage discounts and overrides"
                },
                "total_discount_amount": {
                    "value": to_money(result.total_discount_amount),
                    "description": (
                        f"{_fmt(to_money(result.subtotal_before_overall))} - "
                        f"{_fmt(to_money(result.subtotal))} = {_fmt(to_money(result.total_discount_amount))}"
                    )
                },
                "subtotal": {
                    "value": to_money(result.subtotal),
                    "description": "Enabled stages after the overall discount (ex VAT)"
                },
                **self._vat_lines(result.subtotal, vat_pct),
            },
            "aecom": {
                "rate": to_money(result.aecom_rate),
                "estimate": to_money(result.aecom_estimate),
            },
        }

    def build_bim(self, result: BimResult, vat_pct: Decimal) -> dict:
        """Construct the BIM estimate response for both pricing methods."""
        per_m2_vat, per_m2_total = apply_vat(result.per_m2_subtotal, vat_pct)
        hourly_vat, hourly_total = apply_vat(result.hourly_subtotal, vat_pct)
        timeline = result.timeline

        return {
            "method": result.method,
            "preset": result.preset,
            "area": float(result.area),
            "rates": {k: float(v) for k, v in result.rates.to_dict().items()},
            "amounts": {k: to_money(v) for k, v in result.amounts.to_dict().items()},
            "summary": {
                "subtotal": {
                    "value": to_money(result.subtotal),
                    "description": "Per m2 pricing" if result.method == "per_m2" else "Hourly pricing"
                },
                **self._vat_lines(result.subtotal, vat_pct),
            },
            "per_m2_totals": {
                "subtotal": to_money(result.per_m2_subtotal),
                "vat": to_money(per_m2_vat),
                "total": to_money(per_m2_total),
            },
            "hourly_totals": {
                "subtotal": to_money(result.hourly_subtotal),
                "vat": to_money(hourly_vat),
                "total": to_money(hourly_total),
            },
            "timeline": {
                "scan_days": round(float(timeline.scan_days), 2),
                "scan_hours": round(float(timeline.scan_hours), 2),
                "reg_hours_est": round(float(timeline.reg_hours_est), 2),
                "model_days": round(float(timeline.model_days), 2),
                "model_hours_est": round(float(timeline.model_hours_est), 2),
            },
        }

    def build_hourly(self, result: HourlyResult, vat_pct: Decimal) -> dict:
        """Construct the hourly billing response."""
        return {
            "project_name": result.project_name,
            "rates": {
                role: {"label": ROLE_LABELS.get(role, role), "rate": to_money(rate)}
                for role, rate in result.rates.items()
            },
            "phases": [
                {
                    "key": phase.key,
                    "name": phase.name,
                    "hours": {role: float(h) for role, h in phase.hours.items()},
                    "amount": to_money(phase.amount),
                }
                for phase in result.phases
            ],
            "summary": {
                "subtotal": {
                    "value": to_money(result.subtotal),
                    "description": f"Sum of {len(result.phases)} phases"
                },
                **self._vat_lines(result.subtotal, vat_pct),
            },
        }

    def build_snapshot(self, snapshot: FeeSnapshot, discount_needed_pct: Decimal) -> dict:
        """Construct a complete fee snapshot across every section."""
        project = snapshot.project
        vat_amount, total_with_vat = apply_vat(snapshot.basket.subtotal, project.vat_pct)

        basket = self.build_basket(snapshot.basket, project.vat_pct, discount_needed_pct)
        basket["parameters"] = project.basket.to_dict()

        return {
            "client_name": project.client_name,
            "vat_pct": float(project.vat_pct),
            "global_vow": to_money(project.value_of_works),
            "active_tab": project.active_tab,
            "project_details": self._build_project_details(snapshot.project_details),
            "basket": basket,
            "sacap": self.build_sacap(snapshot.sacap, project.sacap.vat_pct),
            "bim": self.build_bim(snapshot.bim, project.bim.vat_pct),
            "hourly": self.build_hourly(snapshot.hourly, project.hourly.vat_pct),
            "totals": {
                "vat_amount": to_money(vat_amount),
                "total_with_vat": to_money(total_with_vat),
            },
            "saved_at": snapshot.saved_at,
        }

    def _build_project_details(self, details: ProjectDetails) -> dict:
        return {
            "client_name": details.client_name,
            "building_category": details.building_category,
            "building_type": details.building_type,
            "building_size_label": details.building_size_label,
            "complexity": details.complexity,
            "complexity_label": details.complexity_label,
            "rows": details.rows,
        }

    def _vat_lines(self, subtotal: Decimal, vat_pct: Decimal) -> dict:
        vat, total = apply_vat(subtotal, vat_pct)
        return {
            "vat": {
                "value": to_money(vat),
                "description": f"VAT at {float(vat_pct):g}% on {_fmt(to_money(subtotal))}"
            },
            "total": {
                "value": to_money(total),
                "description": f"{_fmt(to_money(subtotal))} + {_fmt(to_money(vat))} = {_fmt(to_money(total))} (inc VAT)"
            },
        }

    def _basket_subtotal_description(self, result: BasketResult, subtotal: float) -> str:
        if result.mode == "target":
            pinned = sum(1 for r in result.rows if r.enabled and r.is_pinned)
            return f"Target apportionment with {pinned} pinned rows = {_fmt(subtotal)}"
        return f"Base fees after global discount = {_fmt(subtotal)}"
