"""
Unit registry shared by the whole package.

Uses pint for parsing and converting units. The registry is created once and
only extended with the unitless marker used by quantity definitions.
"""

import pint

# Shared unit registry for the entire application
ureg = pint.UnitRegistry()

# "ul" marks a unitless quantity (default base unit of a definition)
ureg.define("unitless = 1 = ul")

# Category id for unitless quantities
UNITLESS_CATEGORY = "900"
UNITLESS = "ul"


def format_unit(unit: pint.Unit) -> str:
    """Short symbol form of a pint unit ("m / s", "kg", "" for dimensionless)."""
    return f"{unit:~}"
