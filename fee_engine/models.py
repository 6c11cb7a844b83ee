"""
Domain Models for the Fee Engine

These dataclasses provide type-safe representations of all fee inputs and
results. All monetary values and percentages use Decimal for precision.

Numeric input is parsed leniently: a missing, empty or unparseable value
falls back to the field default instead of raising, so the calculators only
ever see finite Decimals.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from .rates import (
    AECOM_RATE_CHOICES,
    DEFAULT_AECOM_KEY,
    DEFAULT_AECOM_SIZE,
    DEFAULT_BIM_AREA,
    DEFAULT_BIM_RATES,
    DEFAULT_HOURLY_PHASES,
    DEFAULT_HOURLY_RATES,
    DEFAULT_SACAP_COMPLEXITY,
    DEFAULT_SACAP_STAGES,
    ROLE_LABELS,
)
from .schedules import DEFAULT_SELECTED_ROWS

ZERO = Decimal("0")


def to_decimal(value, default: Decimal = ZERO) -> Decimal:
    """Parse a number from JSON input, falling back to `default`."""
    if value is None or value == "" or isinstance(value, bool):
        return default
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    if not result.is_finite():
        return default
    return result


def _decimal_map(data: dict | None, keep_invalid: bool = True) -> dict[str, Decimal]:
    """Parse a sparse {key: number} map.

    With keep_invalid=False, entries whose value is null or unparseable are
    dropped so the key reads as absent rather than as zero.
    """
    result = {}
    for key, raw in (data or {}).items():
        value = to_decimal(raw, default=None)
        if value is None:
            if not keep_invalid:
                continue
            value = ZERO
        result[str(key)] = value
    return result


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass
class ManualRow:
    """A non-core consultant added by hand with a flat amount."""

    id: str
    name: str
    amount: Decimal
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "ManualRow":
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            amount=to_decimal(data.get("amount")),
            enabled=data.get("enabled", True),
        )


@dataclass
class BasketInput:
    """Parameters for one basket-of-fees calculation."""

    value_of_works: Decimal
    vat_pct: Decimal = ZERO
    discount_pct: Decimal = ZERO
    target_pct: Decimal = ZERO
    selected_rows: list[str] = field(default_factory=lambda: list(DEFAULT_SELECTED_ROWS))
    vow_overrides: dict[str, Decimal] = field(default_factory=dict)
    complexity_overrides: dict[str, str] = field(default_factory=dict)
    effective_pct_overrides: dict[str, Decimal] = field(default_factory=dict)
    manual_rows: list[ManualRow] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "BasketInput":
        selected = data.get("selected_rows")
        return cls(
            value_of_works=to_decimal(data.get("value_of_works")),
            vat_pct=to_decimal(data.get("vat_pct")),
            discount_pct=to_decimal(data.get("discount_pct")),
            target_pct=to_decimal(data.get("target_pct")),
            selected_rows=list(selected) if selected is not None else list(DEFAULT_SELECTED_ROWS),
            vow_overrides=_decimal_map(data.get("vow_overrides")),
            complexity_overrides={
                str(k): v for k, v in (data.get("complexity_overrides") or {}).items() if v is not None
            },
            # An unparseable pin is ignored, never read as a 0% pin
            effective_pct_overrides=_decimal_map(data.get("effective_pct_overrides"), keep_invalid=False),
            manual_rows=[ManualRow.from_dict(m) for m in data.get("manual_rows") or []],
        )

    def to_dict(self) -> dict:
        """Serialise the parameters back to their JSON shape."""
        return {
            "value_of_works": float(self.value_of_works),
            "vat_pct": float(self.vat_pct),
            "discount_pct": float(self.discount_pct),
            "target_pct": float(self.target_pct),
            "selected_rows": list(self.selected_rows),
            "vow_overrides": {k: float(v) for k, v in self.vow_overrides.items()},
            "complexity_overrides": dict(self.complexity_overrides),
            "effective_pct_overrides": {k: float(v) for k, v in self.effective_pct_overrides.items()},
            "manual_rows": [
                {"id": m.id, "name": m.name, "amount": float(m.amount), "enabled": m.enabled}
                for m in self.manual_rows
            ],
        }


@dataclass
class SacapStage:
    """A SACAP work stage and its share of the architect's base fee."""

    name: str
    pct: Decimal
    override: Decimal = ZERO
    enabled: bool = True
    discount_pct: Decimal = ZERO

    @classmethod
    def from_dict(cls, data: dict) -> "SacapStage":
        return cls(
            name=data.get("name", ""),
            pct=to_decimal(data.get("pct")),
            override=to_decimal(data.get("override")),
            enabled=data.get("enabled", True),
            discount_pct=to_decimal(data.get("discount_pct")),
        )


def default_sacap_stages() -> list[SacapStage]:
    return [SacapStage(name=name, pct=pct) for name, pct in DEFAULT_SACAP_STAGES]


@dataclass
class AecomSelection:
    """Building type and size used to estimate a value of works."""

    key: str = DEFAULT_AECOM_KEY
    size: Decimal = DEFAULT_AECOM_SIZE
    rate_choice: str = "mid"  # one of AECOM_RATE_CHOICES

    @classmethod
    def from_dict(cls, data: dict | None) -> "AecomSelection":
        data = data or {}
        return cls(
            key=data.get("key", DEFAULT_AECOM_KEY),
            size=to_decimal(data.get("size"), default=DEFAULT_AECOM_SIZE),
            rate_choice=data.get("rate_choice", AECOM_RATE_CHOICES[1]),
        )


@dataclass
class SacapInput:
    """Parameters for the SACAP stage apportionment."""

    value_of_works: Decimal
    complexity: str = DEFAULT_SACAP_COMPLEXITY
    stages: list[SacapStage] = field(default_factory=default_sacap_stages)
    overall_discount_pct: Decimal = ZERO
    vat_pct: Decimal = ZERO
    aecom: AecomSelection = field(default_factory=AecomSelection)

    @classmethod
    def from_dict(cls, data: dict, default_vow: Decimal = ZERO, default_vat: Decimal = ZERO) -> "SacapInput":
        stages = data.get("stages")
        return cls(
            value_of_works=to_decimal(data.get("value_of_works"), default=default_vow),
            complexity=data.get("complexity") or DEFAULT_SACAP_COMPLEXITY,
            stages=[SacapStage.from_dict(s) for s in stages] if stages is not None else default_sacap_stages(),
            overall_discount_pct=to_decimal(data.get("overall_discount_pct")),
            vat_pct=to_decimal(data.get("vat_pct"), default=default_vat),
            aecom=AecomSelection.from_dict(data.get("aecom")),
        )


@dataclass
class BimComponents:
    """One value each for scanning, registration and modelling."""

    scan: Decimal = ZERO
    reg: Decimal = ZERO
    model: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return self.scan + self.reg + self.model

    @classmethod
    def from_dict(cls, data: dict | None, default: "BimComponents | None" = None) -> "BimComponents":
        base = default or cls()
        data = data or {}
        return cls(
            scan=to_decimal(data.get("scan"), default=base.scan),
            reg=to_decimal(data.get("reg"), default=base.reg),
            model=to_decimal(data.get("model"), default=base.model),
        )

    def to_dict(self) -> dict:
        return {"scan": self.scan, "reg": self.reg, "model": self.model}


def default_bim_rates() -> BimComponents:
    return BimComponents(*DEFAULT_BIM_RATES)


@dataclass
class BimInput:
    """Parameters for the BIM scanning/modelling estimate."""

    method: str = "per_m2"  # 'per_m2' or 'per_hour'
    preset: str = "auto"  # 'auto', 'homes', 'large' or 'custom'
    area: Decimal = DEFAULT_BIM_AREA
    rates: BimComponents = field(default_factory=default_bim_rates)
    overrides: BimComponents = field(default_factory=BimComponents)
    hours: BimComponents = field(default_factory=BimComponents)
    vat_pct: Decimal = ZERO

    @classmethod
    def from_dict(cls, data: dict, default_vat: Decimal = ZERO) -> "BimInput":
        return cls(
            method=data.get("method") or "per_m2",
            preset=data.get("preset") or "auto",
            area=to_decimal(data.get("area"), default=DEFAULT_BIM_AREA),
            rates=BimComponents.from_dict(data.get("rates"), default=default_bim_rates()),
            overrides=BimComponents.from_dict(data.get("overrides")),
            hours=BimComponents.from_dict(data.get("hours")),
            vat_pct=to_decimal(data.get("vat_pct"), default=default_vat),
        )


@dataclass
class HourlyPhase:
    """A billing phase with hours per role."""

    key: str
    name: str
    hours: dict[str, Decimal] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "HourlyPhase":
        return cls(
            key=str(data.get("key", "")),
            name=data.get("name", ""),
            hours=_decimal_map(data.get("hours")),
        )


def default_hourly_phases() -> list[HourlyPhase]:
    return [
        HourlyPhase(key=key, name=name, hours={role: ZERO for role in ROLE_LABELS})
        for key, name in DEFAULT_HOURLY_PHASES
    ]


@dataclass
class HourlyInput:
    """Parameters for phase-based hourly billing."""

    project_name: str = ""
    rates: dict[str, Decimal] = field(default_factory=lambda: dict(DEFAULT_HOURLY_RATES))
    phases: list[HourlyPhase] = field(default_factory=default_hourly_phases)
    vat_pct: Decimal = ZERO

    @classmethod
    def from_dict(cls, data: dict, default_vat: Decimal = ZERO) -> "HourlyInput":
        rates = data.get("rates")
        phases = data.get("phases")
        return cls(
            project_name=data.get("project_name", ""),
            rates=_decimal_map(rates) if rates is not None else dict(DEFAULT_HOURLY_RATES),
            phases=[HourlyPhase.from_dict(p) for p in phases] if phases is not None else default_hourly_phases(),
            vat_pct=to_decimal(data.get("vat_pct"), default=default_vat),
        )


@dataclass
class ProjectInput:
    """Everything needed to build a complete fee snapshot."""

    client_name: str
    vat_pct: Decimal
    value_of_works: Decimal
    basket: BasketInput
    sacap: SacapInput
    bim: BimInput
    hourly: HourlyInput
    active_tab: str = "basket"

    @classmethod
    def from_dict(cls, data: dict) -> "ProjectInput":
        vow = to_decimal(data.get("value_of_works"))
        vat = to_decimal(data.get("vat_pct"))
        # Section VOW and VAT default to the project-wide values; the basket
        # always takes the project VAT
        basket_data = {"value_of_works": vow, **(data.get("basket") or {}), "vat_pct": vat}
        return cls(
            client_name=data.get("client_name", ""),
            vat_pct=vat,
            value_of_works=vow,
            basket=BasketInput.from_dict(basket_data),
            sacap=SacapInput.from_dict(data.get("sacap") or {}, default_vow=vow, default_vat=vat),
            bim=BimInput.from_dict(data.get("bim") or {}, default_vat=vat),
            hourly=HourlyInput.from_dict(data.get("hourly") or {}, default_vat=vat),
            active_tab=data.get("active_tab", "basket"),
        )


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass
class LineItem:
    """One discipline's (or manual row's) contribution to the basket."""

    key: str
    label: str
    group: str
    vow: Decimal
    base_fee: Decimal
    enabled: bool
    is_manual: bool = False
    pinned_effective_pct: Decimal | None = None


@dataclass
class BasketRow:
    """A line item after apportionment."""

    key: str
    label: str
    group: str
    vow: Decimal
    base_fee: Decimal
    proposed_fee: Decimal
    effective_pct: Decimal
    enabled: bool
    is_manual: bool
    is_pinned: bool


@dataclass
class BasketResult:
    """Output of one apportionment pass."""

    rows: list[BasketRow] = field(default_factory=list)
    subtotal: Decimal = ZERO
    total_base_fee: Decimal = ZERO
    mode: str = "discount"  # 'discount' or 'target'
    target_amount: Decimal = ZERO


@dataclass
class SacapStageResult:
    """A SACAP stage with its computed amounts."""

    name: str
    pct: Decimal
    override: Decimal
    enabled: bool
    discount_pct: Decimal
    stage_fee: Decimal
    discounted_stage_fee: Decimal
    pre_overall_amount: Decimal
    amount: Decimal


@dataclass
class SacapResult:
    """Results of the SACAP stage apportionment."""

    value_of_works: Decimal
    complexity: str
    base_fee: Decimal
    overall_discount_pct: Decimal
    stages: list[SacapStageResult] = field(default_factory=list)
    subtotal_before_overall: Decimal = ZERO
    subtotal: Decimal = ZERO
    total_discount_amount: Decimal = ZERO
    aecom_rate: Decimal = ZERO
    aecom_estimate: Decimal = ZERO


@dataclass
class BimTimeline:
    """Estimated production time for a BIM survey."""

    scan_days: Decimal = ZERO
    scan_hours: Decimal = ZERO
    reg_hours_est: Decimal = ZERO
    model_days: Decimal = ZERO
    model_hours_est: Decimal = ZERO


@dataclass
class BimResult:
    """Results of the BIM estimate for both pricing methods."""

    method: str
    preset: str
    area: Decimal
    rates: BimComponents
    amounts: BimComponents
    per_m2_subtotal: Decimal
    hourly_subtotal: Decimal
    timeline: BimTimeline = field(default_factory=BimTimeline)

    @property
    def subtotal(self) -> Decimal:
        """Subtotal for the selected method."""
        if self.method == "per_m2":
            return self.per_m2_subtotal
        return self.hourly_subtotal


@dataclass
class HourlyPhaseResult:
    key: str
    name: str
    hours: dict[str, Decimal]
    amount: Decimal


@dataclass
class HourlyResult:
    """Results of phase-based hourly billing."""

    project_name: str
    rates: dict[str, Decimal]
    phases: list[HourlyPhaseResult] = field(default_factory=list)
    subtotal: Decimal = ZERO


@dataclass
class ProjectDetails:
    """Descriptive project fields shown on every export."""

    client_name: str
    building_category: str
    building_type: str
    building_size_label: str
    complexity: str
    complexity_label: str

    @property
    def rows(self) -> list[list[str]]:
        return [
            ["Client / Project", self.client_name or "Not specified"],
            ["Building Category", self.building_category],
            ["Building Type", self.building_type],
            ["Building Size", self.building_size_label],
            ["Project Complexity", self.complexity_label],
        ]


@dataclass
class FeeSnapshot:
    """All four fee summaries for a project at one point in time."""

    project: ProjectInput
    project_details: ProjectDetails
    basket: BasketResult
    sacap: SacapResult
    bim: BimResult
    hourly: HourlyResult
    saved_at: str
