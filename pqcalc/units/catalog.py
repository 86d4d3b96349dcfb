"""
Unit categories.

A category is a class of mutually convertible units with one canonical base
unit. Ids 220, 900, 901 and 903 are the ids quantity definitions already use;
the rest extend the catalog with other common engineering categories.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class UnitCategory:
    """A set of interchangeable units."""
    category_id: str
    name: str
    base_unit: str
    units: tuple[str, ...] = field(default_factory=tuple)


DEFAULT_CATEGORIES: tuple[UnitCategory, ...] = (
    UnitCategory("900", "Unitless", "ul", ("ul", "percent")),
    UnitCategory("901", "Length/Distance", "m", ("m", "km", "cm", "mm", "um", "in", "ft", "yd", "mi", "nmi")),
    UnitCategory("902", "Mass", "kg", ("kg", "g", "mg", "t", "lb", "oz")),
    UnitCategory("903", "Time", "s", ("s", "ms", "min", "h", "day", "week")),
    UnitCategory("904", "Temperature", "K", ("K", "degC", "degF", "degR")),
    UnitCategory("210", "Area", "m^2", ("m^2", "cm^2", "mm^2", "km^2", "ha", "ft^2", "in^2", "acre")),
    UnitCategory("211", "Volume", "m^3", ("m^3", "L", "mL", "cm^3", "ft^3", "in^3", "gal")),
    UnitCategory("220", "Velocity/Speed", "m/s", ("m/s", "km/h", "mph", "ft/s", "knot")),
    UnitCategory("221", "Acceleration", "m/s^2", ("m/s^2", "ft/s^2", "cm/s^2")),
    UnitCategory("230", "Force", "N", ("N", "kN", "MN", "lbf", "kgf", "dyn")),
    UnitCategory("231", "Pressure", "Pa", ("Pa", "kPa", "MPa", "bar", "psi", "atm", "mmHg")),
    UnitCategory("232", "Energy", "J", ("J", "kJ", "MJ", "Wh", "kWh", "cal", "kcal", "eV")),
    UnitCategory("233", "Power", "W", ("W", "kW", "MW", "hp")),
    UnitCategory("240", "Frequency", "Hz", ("Hz", "kHz", "MHz")),
)


class UnitCatalog:
    """Lookup of unit categories by id."""

    def __init__(self, categories: tuple[UnitCategory, ...] = DEFAULT_CATEGORIES):
        self._by_id = {c.category_id: c for c in categories}

    def __iter__(self):
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, category_id: str) -> Optional[UnitCategory]:
        """Category with this id, or None when the id is not catalogued."""
        return self._by_id.get(category_id)


DEFAULT_CATALOG = UnitCatalog()
