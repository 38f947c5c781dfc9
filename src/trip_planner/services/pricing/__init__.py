"""Parking pricing services."""

from .calculator import PricingCalculator
from .selector import OptimalMeterSelector

__all__ = ["PricingCalculator", "OptimalMeterSelector"]
