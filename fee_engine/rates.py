"""
Reference Rates

AECOM building cost ranges (used to estimate a value of works), BIM
production constants, hourly role rates and the default SACAP work stages.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

# =============================================================================
# BIM
# =============================================================================

HOURS_PER_DAY = Decimal("8")
SCAN_M2_PER_DAY = Decimal("850")
MODEL_M2_PER_DAY = Decimal("250")
HOURLY_BIM_RATE = Decimal("700")

# Rates per m2 as (scan, registration, modelling)
BIM_PRESETS = {
    "homes": (Decimal("8.62"), Decimal("3.45"), Decimal("27.6")),
    "large": (Decimal("8.35"), Decimal("2.5"), Decimal("9.75")),
}
DEFAULT_BIM_RATES = (Decimal("8.35"), Decimal("2.5"), Decimal("9.75"))
DEFAULT_BIM_AREA = Decimal("1000")

# Auto preset switches to "large" above this area and to "homes" below the floor
BIM_AUTO_LARGE_ABOVE = Decimal("1000")
BIM_AUTO_HOMES_BELOW = Decimal("500")


# =============================================================================
# HOURLY
# =============================================================================

ROLE_LABELS = {
    "director": "Director",
    "senior_architect": "Senior Architect",
    "architect": "Architect",
    "technologist": "Technologist / Technician",
    "junior": "Junior / Intern",
    "admin": "Admin / Support",
}

DEFAULT_HOURLY_RATES = {
    "director": Decimal("1400"),
    "senior_architect": Decimal("1100"),
    "architect": Decimal("900"),
    "technologist": Decimal("700"),
    "junior": Decimal("450"),
    "admin": Decimal("350"),
}

# (key, name) - every phase starts with zero hours for each role
DEFAULT_HOURLY_PHASES = (
    ("due_diligence", "Due diligence design"),
    ("concept", "Concept design"),
    ("sdp", "SDP Submission"),
    ("municipal", "Municipal submission"),
    ("docs", "Construction Documentation"),
    ("construction", "Construction"),
)


# =============================================================================
# SACAP
# =============================================================================

# (name, percentage of base fee)
DEFAULT_SACAP_STAGES = (
    ("Stage 1: Inception", Decimal("2")),
    ("Stage 2: Concept and Viability", Decimal("15")),
    ("Stage 3: Design Development", Decimal("20")),
    ("Stage 4.1: Documentation and Procurement", Decimal("10")),
    ("Stage 4.2: Documentation and Procurement", Decimal("20")),
    ("Stage 5: Construction", Decimal("30")),
    ("Stage 6: Handover and Close-out", Decimal("3")),
)

DEFAULT_SACAP_COMPLEXITY = "low"
DEFAULT_AECOM_SIZE = Decimal("1000")
AECOM_RATE_CHOICES = ("min", "mid", "max")

COMPLEXITY_LABELS = {
    "low": "Low Complexity",
    "medium": "Medium Complexity",
    "high": "High Complexity",
}


# =============================================================================
# AECOM BUILDING COST RATES
# =============================================================================


@dataclass(frozen=True)
class AecomRateItem:
    """A published building cost range."""

    key: str
    label: str
    unit: str  # 'm2', 'site', 'each', 'key', 'seat' or 'pitch'
    min: Decimal
    max: Decimal
    group: str

    @property
    def mid(self) -> Decimal:
        """Midpoint of the range, rounded to a whole rand."""
        return ((self.min + self.max) / 2).to_integral_value(rounding=ROUND_HALF_UP)


def _group(group: str, rows: list[tuple]) -> tuple[AecomRateItem, ...]:
    return tuple(
        AecomRateItem(key=key, label=label, unit=unit, min=Decimal(lo), max=Decimal(hi), group=group)
        for key, label, unit, lo, hi in rows
    )


AECOM_RATES: tuple[AecomRateItem, ...] = (
    _group("Offices", [
        ("office_low_standard", "Low-rise office (standard spec)", "m2", "11300", "13900"),
        ("office_low_prestige", "Low-rise office (prestigious)", "m2", "14600", "21700"),
        ("office_high_standard", "High-rise office (standard spec)", "m2", "16400", "21700"),
        ("office_high_prestige", "High-rise office (prestigious)", "m2", "21700", "27400"),
    ])
    + _group("Parking", [
        ("parking_grade", "Parking on grade (incl. landscaping)", "m2", "800", "1000"),
        ("parking_structured", "Structured parking", "m2", "5550", "6100"),
        ("parking_semi_basement", "Parking in semi-basement", "m2", "6100", "8300"),
        ("parking_basement", "Parking in basement", "m2", "6500", "11300"),
    ])
    + _group("Retail", [
        ("retail_convenience", "Local convenience centres (≤ 5,000m²)", "m2", "11100", "14600"),
        ("retail_neighbourhood", "Neighbourhood centres (5,000–12,000m²)", "m2", "12100", "16100"),
        ("retail_community", "Community centres (12,000–25,000m²)", "m2", "13300", "17100"),
        ("retail_minor_regional", "Minor regional centres (25,000–50,000m²)", "m2", "14100", "18100"),
        ("retail_regional", "Regional centres (50,000–100,000m²)", "m2", "15000", "18100"),
        ("retail_super_regional", "Super regional centres (≥ 100,000m²)", "m2", "16400", "21000"),
    ])
    + _group("Industrial", [
        ("industrial_steel_light", "Steel frame + cladding (light-duty)", "m2", "5800", "7400"),
        ("industrial_steel_heavy", "Steel frame + cladding (heavy-duty)", "m2", "6500", "9300"),
        ("industrial_admin", "Admin/offices, ablution and change rooms", "m2", "10500", "13400"),
        ("industrial_cold", "Cold storage facilities", "m2", "19600", "27900"),
    ])
    + _group("Residential (site + mass housing)", [
        ("res_site_low_cost", "Site services to low-cost housing stand (250–350m²) (per site)", "site", "71000", "114000"),
        ("res_rdp", "RDP housing", "m2", "3400", "3600"),
        ("res_low_cost", "Low-cost housing", "m2", "4300", "7400"),
        ("res_simple_lowrise_apart", "Simple low-rise apartment block", "m2", "10300", "14300"),
        ("res_duplex_economic", "Duplex townhouse — economic", "m2", "10300", "14700"),
        ("res_prestige_apart", "Prestige apartment block", "m2", "20000", "30000"),
    ])
    + _group("Private dwelling houses", [
        ("house_economic", "Economic", "m2", "7920", "7920"),
        ("house_standard", "Standard", "m2", "9850", "9850"),
        ("house_middle", "Middle-class", "m2", "11830", "11830"),
        ("house_luxury", "Luxury", "m2", "16350", "16350"),
        ("house_exclusive", "Exclusive", "m2", "26450", "26450"),
        ("house_exceptional", "Exceptional (super luxury)", "m2", "38000", "80000"),
        ("outbuildings_standard", "Outbuildings — standard", "m2", "7400", "7400"),
        ("outbuildings_luxury", "Outbuildings — luxury", "m2", "10400", "10400"),
        ("carport_shaded_single", "Carport (shaded) — single", "each", "6300", "6300"),
        ("carport_shaded_double", "Carport (shaded) — double", "each", "12800", "12800"),
        ("carport_covered_single", "Carport (covered) — single", "each", "10000", "10000"),
        ("carport_covered_double", "Carport (covered) — double", "each", "19500", "19500"),
        ("pool_upto_50kl", "Swimming pool ≤ 50 kl", "each", "135000", "135000"),
        ("pool_50_100kl", "Swimming pool 50–100 kl", "each", "240000", "240000"),
        ("tennis_court", "Tennis court", "each", "710000", "710000"),
        ("tennis_floodlit", "Tennis court — floodlit", "each", "880000", "880000"),
    ])
    + _group("Student residential", [
        ("student_highrise_standard", "High rise tower block (standard spec)", "m2", "16000", "17500"),
    ])
    + _group("Hotels (per key)", [
        ("hotel_budget", "Budget", "key", "890000", "1400000"),
        ("hotel_mid", "Mid-scale (3-star)", "key", "1401000", "2100000"),
        ("hotel_upper", "Upper-scale (4-star)", "key", "2101000", "3000000"),
        ("hotel_luxury", "Luxury (5-star)", "key", "3001000", "4000000"),
    ])
    + _group("Studios", [
        ("studio_dance_art", "Studios — dancing, art exhibitions, etc.", "m2", "19500", "28000"),
    ])
    + _group("Conference centres", [
        ("conf_international", "Conference centre to international standards", "m2", "36000", "46000"),
    ])
    + _group("Retirement centres", [
        ("ret_house_middle", "Dwelling houses — middle-class", "m2", "11600", "11600"),
        ("ret_house_luxury", "Dwelling houses — luxury", "m2", "16400", "16400"),
        ("ret_apartment_middle", "Apartment block — middle-class", "m2", "12000", "12000"),
        ("ret_apartment_luxury", "Apartment block — luxury", "m2", "18600", "18600"),
        ("ret_community_centre", "Community centre", "m2", "15800", "23000"),
        ("ret_frail_care", "Frail care", "m2", "18600", "18600"),
    ])
    + _group("Schools", [
        ("school_primary", "Primary school", "m2", "9300", "10700"),
        ("school_secondary", "Secondary school", "m2", "11100", "11900"),
    ])
    + _group("Hospitals", [
        ("hospital_district", "District hospital", "m2", "39000", "39000"),
    ])
    + _group("Stadiums", [
        ("stadium_psl_seat", "Stadium to PSL standards (per seat)", "seat", "48000", "74000"),
        ("stadium_fifa_seat", "Stadium to FIFA standards (per seat)", "seat", "110000", "146000"),
        ("stadium_pitch_fifa", "Stadium pitch to FIFA standards (per pitch)", "pitch", "32000000", "37000000"),
    ])
)

# Only area-based rates can estimate a value of works from a building size
AECOM_M2_OPTIONS = {item.key: item for item in AECOM_RATES if item.unit == "m2"}
DEFAULT_AECOM_KEY = next(iter(AECOM_M2_OPTIONS))
