"""
Fee Processor - Main Orchestrator

Coordinates fee processing for every section through discrete, testable steps:
parse, validate, calculate, build output.
"""

import dataclasses
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict

from .calculators import (
    BasketApportioner,
    BimCalculator,
    FeeCalculator,
    HourlyCalculator,
    SacapCalculator,
    discount_needed_for_target,
)
from .models import (
    BasketInput,
    BasketResult,
    BimInput,
    BimResult,
    FeeSnapshot,
    HourlyInput,
    HourlyResult,
    LineItem,
    ProjectDetails,
    ProjectInput,
    SacapInput,
    SacapResult,
    to_decimal,
)
from .output import OutputBuilder, to_money
from .rates import AECOM_M2_OPTIONS, COMPLEXITY_LABELS
from .schedules import RESULT_ROWS
from .validators import InputValidator


class FeeProcessor:
    """
    Main orchestrator for fee processing.

    Each section follows the same pipeline:
    1. Validate Input
    2. Calculate
    3. Build Output
    """

    def __init__(self):
        # Initialize all calculators
        self.validator = InputValidator()
        self.fee_calculator = FeeCalculator()
        self.basket_apportioner = BasketApportioner()
        self.sacap_calculator = SacapCalculator()
        self.bim_calculator = BimCalculator()
        self.hourly_calculator = HourlyCalculator()
        self.output_builder = OutputBuilder()

    # =========================================================================
    # BASKET OF FEES
    # =========================================================================

    def build_line_items(self, basket: BasketInput) -> list[LineItem]:
        """
        Build one line item per discipline followed by the manual rows.

        A discipline's VOW override applies only when it is non-zero;
        otherwise the global value of works is used.
        """
        items = []
        for row in RESULT_ROWS:
            vow = basket.vow_overrides.get(row.key) or basket.value_of_works
            items.append(LineItem(
                key=row.key,
                label=row.label,
                group=row.group,
                vow=vow,
                base_fee=self.fee_calculator.calculate_fee(
                    row.key, vow, basket.complexity_overrides.get(row.key)
                ),
                enabled=row.key in basket.selected_rows,
                pinned_effective_pct=basket.effective_pct_overrides.get(row.key),
            ))

        for manual in basket.manual_rows:
            items.append(LineItem(
                key=manual.id,
                label=manual.name,
                group="professional",
                vow=Decimal("0"),
                base_fee=manual.amount,
                enabled=manual.enabled,
                is_manual=True,
                pinned_effective_pct=basket.effective_pct_overrides.get(manual.id),
            ))

        return items

    def process_basket(self, basket: BasketInput) -> BasketResult:
        """
        Apportion the basket of fees.

        Args:
            basket: Parsed basket parameters

        Returns:
            BasketResult with proposed fees per row and totals
        """
        self.validator.validate_basket(basket)
        items = self.build_line_items(basket)
        return self.basket_apportioner.apportion(
            items,
            basket.value_of_works,
            discount_pct=basket.discount_pct,
            target_pct=basket.target_pct
        )

    def process_basket_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a basket from raw dictionary input.

        Convenience method for API usage.
        """
        basket = BasketInput.from_dict(data)
        result = self.process_basket(basket)
        return self.output_builder.build_basket(
            result, basket.vat_pct, self._discount_needed(basket, result)
        )

    def apply_target(self, basket: BasketInput) -> BasketInput:
        """
        Replace the target with the equivalent global discount.

        The needed discount is rounded to 2 decimal places and all pins are
        cleared, since the discount cannot honour them.
        """
        result = self.process_basket(basket)
        if basket.target_pct <= 0 or not result.total_base_fee:
            raise ValueError("apply_target requires a positive target_pct and a non-zero total base fee")

        discount = self._discount_needed(basket, result).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return dataclasses.replace(basket, discount_pct=discount, effective_pct_overrides={})

    def apply_target_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        updated = self.apply_target(BasketInput.from_dict(data))
        return {
            "discount_pct": float(updated.discount_pct),
            "basket": updated.to_dict(),
        }

    def _discount_needed(self, basket: BasketInput, result: BasketResult) -> Decimal:
        return discount_needed_for_target(result.total_base_fee, basket.value_of_works, basket.target_pct)

    # =========================================================================
    # SINGLE DISCIPLINE FEE
    # =========================================================================

    def calculate_single_fee(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Base fee for one discipline, as used by the basket rows."""
        discipline = data.get("discipline")
        if not discipline:
            raise ValueError("discipline is required")

        complexity = data.get("complexity")
        if complexity is not None:
            self.validator.validate_complexity(complexity, "complexity")

        value = to_decimal(data.get("value_of_works"))
        return {
            "discipline": discipline,
            "value_of_works": to_money(value),
            "complexity": complexity,
            "base_fee": to_money(self.fee_calculator.calculate_fee(discipline, value, complexity)),
        }

    # =========================================================================
    # SACAP / BIM / HOURLY
    # =========================================================================

    def process_sacap(self, sacap: SacapInput) -> SacapResult:
        self.validator.validate_sacap(sacap)
        return self.sacap_calculator.calculate(sacap)

    def process_sacap_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        sacap = SacapInput.from_dict(data)
        return self.output_builder.build_sacap(self.process_sacap(sacap), sacap.vat_pct)

    def process_bim(self, bim: BimInput) -> BimResult:
        self.validator.validate_bim(bim)
        return self.bim_calculator.calculate(bim)

    def process_bim_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        bim = BimInput.from_dict(data)
        return self.output_builder.build_bim(self.process_bim(bim), bim.vat_pct)

    def process_hourly(self, hourly: HourlyInput) -> HourlyResult:
        return self.hourly_calculator.calculate(hourly)

    def process_hourly_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        hourly = HourlyInput.from_dict(data)
        return self.output_builder.build_hourly(self.process_hourly(hourly), hourly.vat_pct)

    # =========================================================================
    # SNAPSHOT
    # =========================================================================

    def process_snapshot(self, project: ProjectInput, saved_at: datetime | None = None) -> FeeSnapshot:
        """
        Calculate every section for a project in one pass.

        Args:
            project: Parsed project input
            saved_at: Snapshot time, defaults to now (UTC)
        """
        self.validator.validate_project(project)
        saved_at = saved_at or datetime.now(timezone.utc)

        return FeeSnapshot(
            project=project,
            project_details=self._build_project_details(project),
            basket=self.process_basket(project.basket),
            sacap=self.process_sacap(project.sacap),
            bim=self.process_bim(project.bim),
            hourly=self.process_hourly(project.hourly),
            saved_at=saved_at.isoformat(),
        )

    def process_snapshot_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        project = ProjectInput.from_dict(data)
        snapshot = self.process_snapshot(project)
        return self.output_builder.build_snapshot(
            snapshot, self._discount_needed(project.basket, snapshot.basket)
        )

    def _build_project_details(self, project: ProjectInput) -> ProjectDetails:
        """Describe the building from the SACAP building-cost selection."""
        aecom = project.sacap.aecom
        selected = AECOM_M2_OPTIONS.get(aecom.key)

        if selected is not None:
            category, building_type = selected.group, selected.label
        elif aecom.key:
            category, building_type = "Custom selection", "Custom rate selection"
        else:
            category, building_type = "Not specified", "Not specified"

        return ProjectDetails(
            client_name=project.client_name,
            building_category=category,
            building_type=building_type,
            building_size_label=f"{aecom.size:,} m²" if aecom.size > 0 else "Not specified",
            complexity=project.sacap.complexity,
            complexity_label=COMPLEXITY_LABELS.get(project.sacap.complexity, "Not specified"),
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def process_basket_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """Process a basket of fees from Python dict and return Python dict."""
    processor = FeeProcessor()
    return processor.process_basket_from_dict(input_data)


def process_snapshot_from_json(json_input: str) -> str:
    """
    Build a fee snapshot from JSON string input and return JSON string output.
    """
    import json

    try:
        input_data = json.loads(json_input)
        processor = FeeProcessor()
        result = processor.process_snapshot_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
