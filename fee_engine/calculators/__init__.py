"""
Calculators Package

Provides all calculation components for fee processing.
"""

from .basket import BasketApportioner, discount_needed_for_target
from .bim import BimCalculator
from .brackets import FeeCalculator, calculate_fee, compute_bracket_fee
from .hourly import HourlyCalculator
from .sacap import SacapCalculator, aecom_rate, estimate_value_of_works

__all__ = [
    "FeeCalculator",
    "BasketApportioner",
    "SacapCalculator",
    "BimCalculator",
    "HourlyCalculator",
    "compute_bracket_fee",
    "calculate_fee",
    "discount_needed_for_target",
    "aecom_rate",
    "estimate_value_of_works",
]
