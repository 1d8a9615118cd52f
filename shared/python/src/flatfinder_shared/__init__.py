"""
flatfinder_shared — shared models, constants and configuration for flatfinder.

Usage:
    from flatfinder_shared.config import settings
    from flatfinder_shared.models import UnitRecord, DemandRecord, FilterState
    from flatfinder_shared.labels import normalize_area, normalize_unit_type
    from flatfinder_shared.constants import PROBABILITY_CAP, SUPPLY_DISCOUNT_FLEXI
"""

__version__ = "0.1.0"
