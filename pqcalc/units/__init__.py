"""
Unit handling: pint registry, category catalog and the conversion gateway.
"""

from pqcalc.units.registry import ureg, UNITLESS, UNITLESS_CATEGORY
from pqcalc.units.catalog import UnitCategory, UnitCatalog, DEFAULT_CATALOG
from pqcalc.units.gateway import UnitGateway
from pqcalc.units.cache import UnitsCache

__all__ = [
    "ureg",
    "UNITLESS",
    "UNITLESS_CATEGORY",
    "UnitCategory",
    "UnitCatalog",
    "DEFAULT_CATALOG",
    "UnitGateway",
    "UnitsCache",
]
