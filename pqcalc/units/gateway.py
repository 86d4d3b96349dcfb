"""
Unit conversion gateway.

Converts scalar values between concrete units and the canonical (SI coherent)
base unit of their dimension, using the shared pint registry. Every pint
failure surfaces as UnitError so the engine only ever deals with one error
type for units.
"""

import math
from typing import Optional

import pint

from pqcalc.errors import UnitError
from pqcalc.units.catalog import DEFAULT_CATALOG, UnitCatalog, UnitCategory
from pqcalc.units.registry import ureg, format_unit

_PINT_ERRORS = (pint.errors.PintError, AttributeError, TypeError, ValueError, SyntaxError)


class UnitGateway:
    """
    Unit conversion gateway backed by pint.

    Base units are the SI coherent units pint reports for a dimension
    (m, s, m/s, kg, K, ...). Unitless values use "ul" or "".
    """

    def __init__(
        self,
        registry: pint.UnitRegistry = ureg,
        catalog: UnitCatalog = DEFAULT_CATALOG,
    ):
        self.registry = registry
        self.catalog = catalog

    def _parse(self, unit: str) -> pint.Unit:
        if unit is None:
            raise UnitError("Unit must be a string, got None")
        try:
            text = str(unit).strip()
            # An empty unit is a plain number
            return self.registry.Unit(text or "dimensionless")
        except _PINT_ERRORS as e:
            raise UnitError(f"Unknown unit '{unit}'") from e

    def _quantity(self, value: float, unit: str) -> pint.Quantity:
        return self.registry.Quantity(value, self._parse(unit))

    def is_known(self, unit: str) -> bool:
        """Whether the unit string parses."""
        try:
            self._parse(unit)
        except UnitError:
            return False
        return True

    def base_unit_of(self, unit: str) -> str:
        """Canonical base unit for the unit's dimension, in short form."""
        base = self._quantity(1.0, unit).to_base_units().units
        return format_unit(base)

    def is_base_unit(self, unit: str) -> bool:
        """
        Whether the unit is its own base unit.

        True when converting to base units neither scales nor offsets values,
        e.g. "m/s", "N", "ul"; False for "km", "degC".
        """
        scale = self._quantity(1.0, unit).to_base_units().magnitude
        offset = self._quantity(0.0, unit).to_base_units().magnitude
        return math.isclose(scale, 1.0, rel_tol=1e-12) and math.isclose(offset, 0.0, abs_tol=1e-12)

    def is_compatible(self, unit_a: str, unit_b: str) -> bool:
        """Whether both units share one dimension (raises UnitError if unknown)."""
        return self._parse(unit_a).dimensionality == self._parse(unit_b).dimensionality

    def convert_to_base(self, value: float, unit: str) -> float:
        """Convert a value given in `unit` into the canonical base unit."""
        try:
            return float(self._quantity(value, unit).to_base_units().magnitude)
        except UnitError:
            raise
        except _PINT_ERRORS as e:
            raise UnitError(f"Cannot convert {value} {unit} to base units: {e}") from e

    def convert_to_face(self, base_value: float, unit: str) -> float:
        """Convert a base-unit value into `unit`."""
        target = self._parse(unit)
        base = self.registry.Quantity(1.0, target).to_base_units().units
        try:
            return float(self.registry.Quantity(base_value, base).to(target).magnitude)
        except _PINT_ERRORS as e:
            raise UnitError(f"Cannot convert base value {base_value} to {unit}: {e}") from e

    def convert(self, value: float, from_unit: str, to_unit: str) -> float:
        """Convert between two concrete units of the same dimension."""
        source = self._quantity(value, from_unit)
        target = self._parse(to_unit)
        try:
            return float(source.to(target).magnitude)
        except pint.DimensionalityError as e:
            raise UnitError(
                f"Unit '{from_unit}' is not compatible with '{to_unit}'"
            ) from e
        except _PINT_ERRORS as e:
            raise UnitError(f"Cannot convert {from_unit} to {to_unit}: {e}") from e

    def category_for(self, category_id: str) -> Optional[UnitCategory]:
        """Catalog entry for a category id, if any."""
        return self.catalog.get(category_id)

    def category_of_unit(self, unit: str) -> Optional[UnitCategory]:
        """First catalog category whose base unit shares the unit's dimension."""
        dimensionality = self._parse(unit).dimensionality
        for category in self.catalog:
            if self._parse(category.base_unit).dimensionality == dimensionality:
                return category
        return None

    def compatible_units(self, unit: str) -> list[str]:
        """
        All advertised units interchangeable with `unit`.

        The unit itself is always first. Units without a catalog category
        fall back to the unit and its base unit.
        """
        category = self.category_of_unit(unit)
        if category is None:
            units = [unit, self.base_unit_of(unit)]
        else:
            units = [unit] + [u for u in category.units if self.is_known(u)]
        seen = set()
        result = []
        for u in units:
            if u not in seen:
                seen.add(u)
                result.append(u)
        return result
