"""
Quantity registry.

Holds the working copy of every quantity for one calculation and checks
the definitions before anything is scheduled.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from pqcalc.errors import DefinitionError, UnitError
from pqcalc.models.inputs import QuantityDefinition
from pqcalc.models.outputs import QuantityState
from pqcalc.units.gateway import UnitGateway

logger = logging.getLogger(__name__)


@dataclass
class Quantity:
    """Mutable per-calculation state of one quantity."""
    symbol: str
    expression: Optional[str]
    category_id: str
    base_value: float
    base_unit: str
    face_value: float
    face_unit: str
    state: QuantityState
    error: Optional[str] = None
    overridden: bool = False

    @classmethod
    def from_definition(cls, definition: QuantityDefinition) -> "Quantity":
        # Inputs already hold a value; derived quantities must be evaluated
        state = QuantityState.RESOLVED if definition.is_input else QuantityState.UNRESOLVED
        return cls(
            symbol=definition.symbol,
            expression=definition.expression,
            category_id=definition.category_id,
            base_value=definition.base_value,
            base_unit=definition.base_unit,
            face_value=definition.face_value,
            face_unit=definition.face_unit,
            state=state,
        )

    @property
    def is_input(self) -> bool:
        return self.expression is None

    @property
    def is_derived(self) -> bool:
        return self.expression is not None

    @property
    def is_resolved(self) -> bool:
        return self.state is QuantityState.RESOLVED

    @property
    def is_failed(self) -> bool:
        return self.state is QuantityState.FAILED

    def resolve(self, base_value: float, face_value: float, face_unit: str) -> None:
        self.base_value = base_value
        self.face_value = face_value
        self.face_unit = face_unit
        self.state = QuantityState.RESOLVED
        self.error = None

    def fail(self, message: str) -> None:
        self.state = QuantityState.FAILED
        self.error = message


class QuantityRegistry:
    """
    The flat set of quantities of one calculation.

    Iterates in definition order. Created fresh for every calculation.
    """

    def __init__(self, gateway: Optional[UnitGateway] = None):
        self.gateway = gateway or UnitGateway()
        self._quantities: dict[str, Quantity] = {}

    def __len__(self) -> int:
        return len(self._quantities)

    def __iter__(self) -> Iterator[Quantity]:
        return iter(self._quantities.values())

    def __contains__(self, symbol: str) -> bool:
        return symbol in self._quantities

    def __getitem__(self, symbol: str) -> Quantity:
        return self._quantities[symbol]

    def get(self, symbol: str) -> Optional[Quantity]:
        return self._quantities.get(symbol)

    @property
    def symbols(self) -> list[str]:
        return list(self._quantities)

    @property
    def inputs(self) -> list[Quantity]:
        return [q for q in self if q.is_input]

    @property
    def derived(self) -> list[Quantity]:
        return [q for q in self if q.is_derived]

    def load(self, definitions: Iterable[QuantityDefinition]) -> None:
        """
        Replace the working set with the given definitions.

        Raises:
            DefinitionError: duplicate symbols, unknown units, a base unit
                that is not canonical, or a face unit that does not belong to
                the base unit's dimension or to the declared category
        """
        quantities: dict[str, Quantity] = {}
        for definition in definitions:
            if definition.symbol in quantities:
                raise DefinitionError(f"Duplicate symbol '{definition.symbol}'")
            self._check_units(definition)
            quantities[definition.symbol] = Quantity.from_definition(definition)

        self._quantities = quantities
        logger.debug(
            "Loaded %d quantities (%d inputs, %d derived)",
            len(quantities), len(self.inputs), len(self.derived),
        )

    def _check_units(self, definition: QuantityDefinition) -> None:
        symbol = definition.symbol
        try:
            if not self.gateway.is_base_unit(definition.base_unit):
                raise DefinitionError(
                    f"'{symbol}': base unit '{definition.base_unit}' is not a base unit "
                    f"(expected '{self.gateway.base_unit_of(definition.base_unit)}')"
                )
            if not self.gateway.is_compatible(definition.face_unit, definition.base_unit):
                raise DefinitionError(
                    f"'{symbol}': face unit '{definition.face_unit}' is not compatible "
                    f"with base unit '{definition.base_unit}'"
                )
            category = self.gateway.category_for(definition.category_id)
            if category is not None and not self.gateway.is_compatible(
                definition.face_unit, category.base_unit
            ):
                raise DefinitionError(
                    f"'{symbol}': unit '{definition.face_unit}' does not belong to "
                    f"category {category.category_id} ({category.name})"
                )
        except UnitError as e:
            raise DefinitionError(f"'{symbol}': {e}") from e
