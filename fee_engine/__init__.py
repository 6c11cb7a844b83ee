"""
FEE PROPOSAL ENGINE
Basket of fees, SACAP stages, BIM and hourly billing
"""

from .models import BasketInput, BasketResult, ProjectInput
from .processor import FeeProcessor

__all__ = ['FeeProcessor', 'BasketInput', 'BasketResult', 'ProjectInput']
