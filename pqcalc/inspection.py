"""
Inspection of quantity definitions without calculating them.

- describe_calculation: which quantities are inputs or outputs, and which
  units a caller may use for each category
- verify_definitions: human readable list of problems in a definition set
- count_by_kind: number of input and calculated quantities
"""

import logging
import math
from typing import Iterable, Optional

from pqcalc.engine.resolver import topological_order
from pqcalc.errors import CircularDependencyError, EvalError, UnitError
from pqcalc.expressions.evaluator import check_grammar
from pqcalc.expressions.tokens import is_math_name, variable_names
from pqcalc.models.inputs import QuantityDefinition
from pqcalc.models.outputs import CalculationMetadata, QuantityInfo, QuantityKind
from pqcalc.units.cache import UnitsCache
from pqcalc.units.gateway import UnitGateway

logger = logging.getLogger(__name__)


def _info(definition: QuantityDefinition) -> QuantityInfo:
    return QuantityInfo(
        symbol=definition.symbol,
        description=definition.description or definition.symbol,
        unit=definition.face_unit,
        base_unit=definition.base_unit,
        category_id=definition.category_id,
        kind=QuantityKind.INPUT if definition.is_input else QuantityKind.OUTPUT,
        expression=definition.expression,
        face_value=definition.face_value,
    )


def describe_calculation(
    definitions: Iterable[QuantityDefinition],
    gateway: Optional[UnitGateway] = None,
    cache: Optional[UnitsCache] = None,
) -> CalculationMetadata:
    """
    Describe the inputs and outputs of a calculation.

    Available units are looked up once per category, from the first
    quantity of that category. A cache passed in is consulted first and
    filled with the lookups made here.

    Args:
        definitions: Quantity definitions of the calculation
        gateway: Unit gateway used for compatible-unit lookups
        cache: Optional cache of category id -> units

    Returns:
        CalculationMetadata
    """
    gateway = gateway or UnitGateway()
    definitions = list(definitions)
    metadata = CalculationMetadata(total_quantities=len(definitions))

    for definition in definitions:
        info = _info(definition)
        if definition.is_input:
            metadata.input_quantities.append(info)
        else:
            metadata.output_quantities.append(info)

        category_id = definition.category_id
        if category_id in metadata.available_units:
            continue
        units = cache.get(category_id) if cache is not None else None
        if units is None:
            try:
                units = gateway.compatible_units(definition.face_unit)
            except UnitError as e:
                logger.warning("Could not load units for category %s: %s", category_id, e)
                units = [definition.face_unit, definition.base_unit]
            if cache is not None:
                cache.set(category_id, units)
        metadata.available_units[category_id] = units

    return metadata


def verify_definitions(
    definitions: Iterable[QuantityDefinition],
    gateway: Optional[UnitGateway] = None,
) -> list[str]:
    """
    Check a definition set and describe every problem found.

    Returns:
        List of issue descriptions; empty when the set is usable
    """
    gateway = gateway or UnitGateway()
    definitions = list(definitions)
    if not definitions:
        return ["No physical quantities found"]

    issues = []
    symbols = set()
    for definition in definitions:
        if definition.symbol in symbols:
            issues.append(f'Duplicate symbol "{definition.symbol}"')
        symbols.add(definition.symbol)
        if is_math_name(definition.symbol):
            issues.append(
                f'Symbol "{definition.symbol}" is hidden by the math name of the same '
                f'name inside expressions'
            )

    for definition in definitions:
        issues.extend(_unit_issues(definition, gateway))

    graph = {}
    for definition in definitions:
        if definition.is_input:
            graph[definition.symbol] = set()
            continue
        try:
            check_grammar(definition.expression)
        except EvalError as e:
            issues.append(f'"{definition.symbol}": {e}')
        names = variable_names(definition.expression)
        for name in names:
            if name not in symbols:
                issues.append(
                    f'Expression in "{definition.symbol}" references undefined symbol "{name}"'
                )
        graph[definition.symbol] = {n for n in names if n in symbols}

    try:
        topological_order(graph)
    except CircularDependencyError as e:
        issues.append(str(e))

    return issues


def _unit_issues(definition: QuantityDefinition, gateway: UnitGateway) -> list[str]:
    symbol = definition.symbol
    issues = []
    for unit in (definition.face_unit, definition.base_unit):
        if not gateway.is_known(unit):
            issues.append(f'"{symbol}" uses unknown unit "{unit}"')
    if issues:
        return issues

    if not gateway.is_base_unit(definition.base_unit):
        issues.append(
            f'"{symbol}" base unit "{definition.base_unit}" is not a base unit'
        )
        return issues
    if not gateway.is_compatible(definition.face_unit, definition.base_unit):
        issues.append(
            f'"{symbol}" face unit "{definition.face_unit}" is not compatible '
            f'with base unit "{definition.base_unit}"'
        )
        return issues

    category = gateway.category_for(definition.category_id)
    if category is not None and not gateway.is_compatible(definition.face_unit, category.base_unit):
        issues.append(
            f'"{symbol}" unit "{definition.face_unit}" does not belong to '
            f'category {category.category_id} ({category.name})'
        )

    if definition.is_input:
        expected = gateway.convert_to_base(definition.face_value, definition.face_unit)
        if not math.isclose(expected, definition.base_value, rel_tol=1e-6, abs_tol=1e-9):
            issues.append(
                f'"{symbol}" base value {definition.base_value} does not match '
                f'face value {definition.face_value} {definition.face_unit} ({expected})'
            )
    return issues


def count_by_kind(definitions: Iterable[QuantityDefinition]) -> dict[str, int]:
    """Count input and calculated quantities."""
    definitions = list(definitions)
    inputs = sum(1 for d in definitions if d.is_input)
    return {
        "inputs": inputs,
        "calculated": len(definitions) - inputs,
        "total": len(definitions),
    }
