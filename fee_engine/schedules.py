"""
Fee Schedules and Discipline Rules

Progressive bracket tables for every discipline in the basket, and the
dispatch table that maps a discipline to its schedule and multiplier.

The tables are gazetted reference data and must stay bit-exact. They are
hand-authored, so a bracket's `over` is not always the previous bracket's
upper bound (the architect tables start each bracket one rand higher).
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class FeeBracket:
    """One row of a progressive fee schedule."""

    upper_bound: Decimal | None  # None = infinite
    primary: Decimal
    rate: Decimal
    over: Decimal


@dataclass(frozen=True)
class ResultRowDef:
    """A discipline row shown in the basket of fees."""

    key: str
    label: str
    group: str  # 'management' or 'professional'


def _brackets(rows: list[tuple]) -> tuple[FeeBracket, ...]:
    """Build a schedule from (upper_bound, primary, rate, over) rows."""
    return tuple(
        FeeBracket(
            upper_bound=Decimal(upper) if upper is not None else None,
            primary=Decimal(primary),
            rate=Decimal(rate),
            over=Decimal(over),
        )
        for upper, primary, rate, over in rows
    )


# =============================================================================
# QUANTITY SURVEYOR
# =============================================================================

QS_BRACKETS = _brackets([
    ("1000000", "23000", "0.1325", "0"),
    ("2000000", "155500", "0.13", "1000000"),
    ("4000000", "285500", "0.1275", "2000000"),
    ("8000000", "540500", "0.1095", "4000000"),
    ("16000000", "978500", "0.0955", "8000000"),
    ("32000000", "1742500", "0.083", "16000000"),
    ("64000000", "3070500", "0.074", "32000000"),
    ("128000000", "5438500", "0.0675", "64000000"),
    ("256000000", "9758500", "0.0538", "128000000"),
    ("500000000", "16644900", "0.052", "256000000"),
    ("1500000000", "29332400", "0.042", "500000000"),
    ("3000000000", "71332900", "0.0375", "1500000000"),
    ("10000000000", "127582900", "0.027", "3000000000"),
    (None, "316582900", "0.0225", "10000000000"),
])


# =============================================================================
# ENGINEERING (structural / mechanical share the same thresholds)
# =============================================================================

ENG_THRESHOLDS = (
    ("1899000", "850000"),
    ("9347000", "1899000"),
    ("19066000", "9347000"),
    ("47372000", "19066000"),
    ("94960000", "47372000"),
    ("572000000", "94960000"),
    (None, "572000000"),
)


def _engineering_brackets(primaries: list[str], rates_pct: list[str]) -> tuple[FeeBracket, ...]:
    """Combine the shared engineering thresholds with a primary/rate column."""
    return tuple(
        FeeBracket(
            upper_bound=Decimal(upper) if upper is not None else None,
            primary=Decimal(primary),
            rate=Decimal(rate_pct) / Decimal("100"),
            over=Decimal(over),
        )
        for (upper, over), primary, rate_pct in zip(ENG_THRESHOLDS, primaries, rates_pct)
    )


STRUCT_BRACKETS = _engineering_brackets(
    ["106300", "237400", "882400", "1857000", "4121400", "7454800", "40840800"],
    ["15.0", "12.0", "10.5", "10.0", "9.5", "9.0", "9.0"],
)

MECH_BRACKETS = _engineering_brackets(
    ["127500", "284900", "1224500", "2236400", "4926700", "9201700", "49764000"],
    ["18.0", "15.0", "12.5", "11.5", "11.0", "10.0", "10.0"],
)


# =============================================================================
# PROJECT MANAGEMENT / HEALTH & SAFETY
# =============================================================================

PM_BRACKETS = _brackets([
    ("1000000", "16650", "0.08", "0"),
    ("2000000", "96650", "0.08", "1000000"),
    ("4000000", "175400", "0.0795", "2000000"),
    ("8000000", "334400", "0.0785", "4000000"),
    ("16000000", "648400", "0.078", "8000000"),
    ("32000000", "1272400", "0.07", "16000000"),
    ("64000000", "2392340", "0.063", "32000000"),
    ("128000000", "4408340", "0.056", "64000000"),
    ("256000000", "7992400", "0.049", "128000000"),
    ("500000000", "14264400", "0.0424", "256000000"),
    ("1000000000", "24610000", "0.0366", "500000000"),
    ("2000000000", "42910000", "0.0316", "1000000000"),
    ("3000000000", "74510000", "0.0283", "2000000000"),
    (None, "102810000", "0.0258", "3000000000"),
])

OHS_BRACKETS = _brackets([
    ("10000000", "5195", "0.033", "0"),
    ("20000000", "335086", "0.0297", "10000000"),
    ("40000000", "632248", "0.0267", "20000000"),
    ("80000000", "1166309", "0.0241", "40000000"),
    ("160000000", "2128450", "0.0211", "80000000"),
    ("320000000", "3819989", "0.0186", "160000000"),
    ("640000000", "6795767", "0.016", "320000000"),
    ("1280000000", "11916103", "0.0138", "640000000"),
    ("2560000000", "20727063", "0.0118", "1280000000"),
    (None, "35888570", "0.0102", "2560000000"),
])


# =============================================================================
# ARCHITECT (SACAP) - one table per complexity tier
# =============================================================================

ARC_LOW = _brackets([
    ("200000", "11341.85", "0.1753", "1"),
    ("650000", "46393.33", "0.1685", "200001"),
    ("2000000", "122193.97", "0.1243", "650001"),
    ("4000000", "289927.74", "0.1023", "2000001"),
    ("6500000", "506559.8", "0.1055", "4000001"),
    ("13000000", "770251.28", "0.0916", "6500001"),
    ("40000000", "1365321.84", "0.0863", "13000001"),
    ("130000000", "3755421.23", "0.0885", "40000001"),
    ("260000000", "11717437.86", "0.0828", "130000001"),
    ("520000000", "22475739.42", "0.0808", "260000001"),
    ("1040000000", "43501431.14", "0.0787", "520000001"),
    (None, "84483711.59", "0.0728", "1040000001"),
])

ARC_MED = _brackets([
    ("200000", "13570.07", "0.2096", "1"),
    ("650000", "55507.74", "0.2016", "200001"),
    ("2000000", "146200.15", "0.1487", "650001"),
    ("4000000", "346886.84", "0.1296", "2000001"),
    ("6500000", "606078.35", "0.1262", "4000001"),
    ("13000000", "921574.57", "0.1095", "6500001"),
    ("40000000", "1633552.23", "0.1069", "13000001"),
    ("130000000", "4493209.33", "0.1059", "40000001"),
    ("260000000", "14019441.47", "0.0991", "130000001"),
    ("520000000", "26891315.09", "0.0968", "260000001"),
    ("1040000000", "52047706.61", "0.0943", "520000001"),
    (None, "101081351.13", "0.0871", "1040000001"),
])

ARC_HIGH = _brackets([
    ("200000", "15798.28", "0.2441", "1"),
    ("650000", "64622.16", "0.2347", "200001"),
    ("2000000", "170206.35", "0.1731", "650001"),
    ("4000000", "403845.93", "0.1509", "2000001"),
    ("6500000", "705596.52", "0.1469", "4000001"),
    ("13000000", "1072897.87", "0.1276", "6500001"),
    ("40000000", "1901782.84", "0.1233", "13000001"),
    ("130000000", "5230958.63", "0.1239", "40000001"),
    ("260000000", "16321445.09", "0.1152", "130000001"),
    ("520000000", "31306890.75", "0.1126", "260000001"),
    ("1040000000", "60593982.1", "0.1098", "520000001"),
    (None, "117678990.65", "0.1016", "1040000001"),
])

ARCHITECT_SCHEDULES = {
    "low": ARC_LOW,
    "medium": ARC_MED,
    "high": ARC_HIGH,
}

COMPLEXITY_TIERS = tuple(ARCHITECT_SCHEDULES)
DEFAULT_ARCHITECT_COMPLEXITY = "medium"


# =============================================================================
# DISCIPLINE DISPATCH
# =============================================================================


@dataclass(frozen=True)
class DisciplineRule:
    """How a discipline's base fee is derived.

    Exactly one of `schedule`, `flat_rate` or `by_complexity` applies; a rule
    with none of them always yields zero.
    """

    schedule: tuple[FeeBracket, ...] | None = None
    multiplier: Decimal = Decimal("1")
    flat_rate: Decimal | None = None
    by_complexity: bool = False


DISCIPLINE_RULES: dict[str, DisciplineRule] = {
    "quantity_surveyor": DisciplineRule(schedule=QS_BRACKETS),
    "engineer_structural": DisciplineRule(schedule=STRUCT_BRACKETS),
    # Mechanical is typically 40-60% of the engineering fee, electrical 30-40%
    "engineer_mechanical": DisciplineRule(schedule=MECH_BRACKETS, multiplier=Decimal("0.5")),
    "engineer_electrical": DisciplineRule(schedule=MECH_BRACKETS, multiplier=Decimal("0.35")),
    "engineer_civil": DisciplineRule(flat_rate=Decimal("0.06")),
    "engineer_fire": DisciplineRule(flat_rate=Decimal("0.015")),
    "project_manager": DisciplineRule(schedule=PM_BRACKETS),
    "principal_agent": DisciplineRule(schedule=PM_BRACKETS, multiplier=Decimal("0.25")),
    # Varies per engagement - entered manually by the caller
    "principal_consultant": DisciplineRule(),
    "ohs": DisciplineRule(schedule=OHS_BRACKETS),
    "architect": DisciplineRule(by_complexity=True),
}


# =============================================================================
# BASKET ROWS
# =============================================================================

RESULT_ROWS: tuple[ResultRowDef, ...] = (
    ResultRowDef(key="project_manager", label="Project Manager", group="management"),
    ResultRowDef(key="ohs", label="Health & Safety", group="management"),
    ResultRowDef(key="principal_agent", label="Principal Agent", group="management"),
    ResultRowDef(key="principal_consultant", label="Principal Consultant", group="management"),
    ResultRowDef(key="architect", label="Architect", group="professional"),
    ResultRowDef(key="engineer_civil", label="Engineer - Civil", group="professional"),
    ResultRowDef(key="engineer_structural", label="Engineer - Structural", group="professional"),
    ResultRowDef(key="engineer_electrical", label="Engineer - Electrical", group="professional"),
    ResultRowDef(key="engineer_mechanical", label="Engineer - Mechanical", group="professional"),
    ResultRowDef(key="engineer_fire", label="Engineer - Fire", group="professional"),
    ResultRowDef(key="quantity_surveyor", label="Quantity Surveyor", group="professional"),
)

DEFAULT_SELECTED_ROWS = (
    "project_manager",
    "architect",
    "quantity_surveyor",
    "engineer_structural",
)
