"""
Evaluation scheduler.

Drives a registry to a fixed point: applies input overrides, records the
preferred output units, then evaluates derived quantities once everything
they read is resolved.

Resolution is bounded. The loop stops when the work queue is empty, when a
full rotation of the queue makes no progress, or when the pass budget runs
out. Whatever is still unresolved at that point is reported as failed
(circular or missing dependency, or pass budget exhausted) instead of
looping forever.
"""

import logging
import numbers
from collections import deque
from typing import Mapping, Optional

from pqcalc.config import EngineSettings
from pqcalc.engine.registry import Quantity, QuantityRegistry
from pqcalc.engine.resolver import DependencyGraph
from pqcalc.errors import DefinitionError, EvalError, UnitError, UnresolvableDependencyError
from pqcalc.expressions.evaluator import ExpressionEvaluator
from pqcalc.models.inputs import InputOverride, OutputPreference
from pqcalc.models.outputs import QuantityResult
from pqcalc.units.gateway import UnitGateway

logger = logging.getLogger(__name__)


class EvaluationScheduler:
    """
    Resolves every quantity of one registry.

    The evaluator can be any object with
    `evaluate(expression, bindings) -> float` raising EvalError on failure.
    """

    def __init__(
        self,
        registry: QuantityRegistry,
        graph: DependencyGraph,
        gateway: Optional[UnitGateway] = None,
        evaluator: Optional[ExpressionEvaluator] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self.registry = registry
        self.graph = graph
        self.gateway = gateway or registry.gateway
        self.evaluator = evaluator or ExpressionEvaluator()
        self.settings = settings or EngineSettings()
        self.preferred_units: dict[str, str] = {}
        self.evaluation_order: list[str] = []
        self.passes = 0

    def apply_overrides(self, overrides: Mapping[str, InputOverride]) -> None:
        """
        Replace the values of overridden input quantities.

        Missing values or units fall back to the quantity's own face value
        and unit. Applying the same override again gives the same result.
        An override of a derived quantity is ignored with a warning; the
        quantity is still calculated from its expression.

        Raises:
            DefinitionError: Override for an unknown quantity
            UnitError: Unknown unit, or one that does not fit the quantity.
                This aborts the calculation: everything downstream of the
                input would be wrong.
        """
        for symbol, override in overrides.items():
            quantity = self.registry.get(symbol)
            if quantity is None:
                raise DefinitionError(f"Input override for unknown symbol '{symbol}'")
            if quantity.is_derived:
                logger.warning(
                    "Override for calculated quantity %s ignored; using %s",
                    symbol, quantity.expression,
                )
                continue

            value = override.value if override.value is not None else quantity.face_value
            unit = override.unit if override.unit is not None else quantity.face_unit
            if not self.gateway.is_compatible(unit, quantity.base_unit):
                raise UnitError(
                    f"Input '{symbol}': unit '{unit}' is not compatible with "
                    f"base unit '{quantity.base_unit}'"
                )
            base_value = self.gateway.convert_to_base(value, unit)
            quantity.resolve(base_value, value, unit)
            quantity.overridden = True

    def set_output_preferences(self, preferences: Optional[Mapping[str, OutputPreference]]) -> None:
        """
        Record the units callers want results in.

        A unit that cannot be converted from the quantity's base unit is
        dropped with a warning; the quantity is then reported in its own unit.
        """
        self.preferred_units = {}
        for symbol, preference in (preferences or {}).items():
            quantity = self.registry.get(symbol)
            if quantity is None:
                logger.warning("Output preference for unknown symbol '%s' ignored", symbol)
                continue
            if not preference.unit:
                continue
            try:
                self.gateway.convert(1.0, quantity.base_unit, preference.unit)
            except UnitError as e:
                logger.warning(
                    "Invalid output unit %s for %s, keeping %s: %s",
                    preference.unit, symbol, quantity.face_unit or quantity.base_unit, e,
                )
                continue
            self.preferred_units[symbol] = preference.unit

    def run(self) -> dict[str, QuantityResult]:
        """
        Resolve all quantities.

        Returns:
            Symbol -> result, in definition order. Every quantity has an
            entry; failed ones carry an error message.
        """
        results: dict[str, QuantityResult] = {}
        queue = deque(self.registry.symbols)
        budget = self.settings.pass_budget(len(queue))
        stalled = 0
        stuck = False
        self.passes = 0

        while queue and self.passes < budget:
            symbol = queue.popleft()
            self.passes += 1
            quantity = self.registry[symbol]

            if quantity.is_input:
                results[symbol] = self._report_input(quantity)
                stalled = 0
                continue

            deps = sorted(self.graph.get(symbol, ()))
            failed_dep = next((d for d in deps if self.registry[d].is_failed), None)
            if failed_dep is not None:
                quantity.fail(str(UnresolvableDependencyError(
                    f"Depends on failed quantity '{failed_dep}'"
                )))
                results[symbol] = self._failure(quantity)
                stalled = 0
                continue

            if all(self.registry[d].is_resolved for d in deps):
                results[symbol] = self._evaluate(quantity, deps)
                stalled = 0
                continue

            queue.append(symbol)
            stalled += 1
            if stalled >= len(queue):
                # Every remaining symbol was deferred since the last progress
                stuck = True
                break

        # Dependencies may be unresolved only because the budget ran out
        exhausted = not stuck and self.passes >= budget
        for symbol in queue:
            quantity = self.registry[symbol]
            if quantity.is_input:
                results[symbol] = self._report_input(quantity)
                continue
            waiting = sorted(
                d for d in self.graph.get(symbol, ()) if not self.registry[d].is_resolved
            )
            if exhausted or not waiting:
                message = f"Not resolved within the pass budget of {budget}"
            else:
                message = (
                    f"Circular or missing dependency: '{symbol}' is waiting on "
                    + ", ".join(f"'{d}'" for d in waiting)
                )
            quantity.fail(str(UnresolvableDependencyError(message)))
            logger.warning("Could not resolve %s: %s", symbol, message)
            results[symbol] = self._failure(quantity)

        return {symbol: results[symbol] for symbol in self.registry.symbols}

    def _evaluate(self, quantity: Quantity, deps: list[str]) -> QuantityResult:
        bindings = {d: self.registry[d].base_value for d in deps}
        unit = self.preferred_units.get(quantity.symbol, quantity.face_unit)
        try:
            base_value = self._as_number(
                quantity.symbol, self.evaluator.evaluate(quantity.expression, bindings)
            )
            face_value = self.gateway.convert_to_face(base_value, unit)
        except (EvalError, UnitError) as e:
            logger.warning("Error calculating %s: %s", quantity.symbol, e)
            quantity.fail(str(e))
            return self._failure(quantity)

        quantity.resolve(base_value, face_value, unit)
        self.evaluation_order.append(quantity.symbol)
        return QuantityResult(
            symbol=quantity.symbol,
            value=face_value,
            unit=unit,
            base_value=base_value,
            base_unit=quantity.base_unit,
            expression=quantity.expression,
        )

    def _report_input(self, quantity: Quantity) -> QuantityResult:
        unit = quantity.face_unit
        value = quantity.face_value
        preferred = self.preferred_units.get(quantity.symbol)
        if preferred is not None and not quantity.overridden and preferred != unit:
            unit = preferred
            value = self.gateway.convert_to_face(quantity.base_value, preferred)
        return QuantityResult(
            symbol=quantity.symbol,
            value=value,
            unit=unit,
            base_value=quantity.base_value,
            base_unit=quantity.base_unit,
        )

    @staticmethod
    def _failure(quantity: Quantity) -> QuantityResult:
        return QuantityResult(
            symbol=quantity.symbol,
            value=0.0,
            unit=quantity.face_unit,
            base_value=0.0,
            base_unit=quantity.base_unit,
            expression=quantity.expression,
            error=quantity.error,
        )

    @staticmethod
    def _as_number(symbol: str, raw) -> float:
        # Non-numeric evaluator output is reported as 0, not as a failure
        if isinstance(raw, bool) or not isinstance(raw, numbers.Real):
            logger.warning("Non-numeric result %r for %s coerced to 0", raw, symbol)
            return 0.0
        return float(raw)
