"""
Stateless calculator.

Runs one calculation request end to end: registry, dependency graph,
scheduling and projection. Nothing survives between calls.
"""

import logging
from typing import Optional, Union

from pqcalc.config import EngineSettings
from pqcalc.engine.projector import ResultProjector
from pqcalc.engine.registry import QuantityRegistry
from pqcalc.engine.resolver import DependencyResolver
from pqcalc.engine.scheduler import EvaluationScheduler
from pqcalc.expressions.evaluator import ExpressionEvaluator
from pqcalc.models.inputs import CalculationRequest
from pqcalc.models.outputs import CalculationResponse, CalculationSummary
from pqcalc.units.gateway import UnitGateway

logger = logging.getLogger(__name__)


class Calculator:
    """
    Stateless physical-quantity calculator.

    Holds only its collaborators; every call builds its own registry, so one
    instance can serve any number of requests.
    """

    def __init__(
        self,
        gateway: Optional[UnitGateway] = None,
        evaluator: Optional[ExpressionEvaluator] = None,
        settings: Optional[EngineSettings] = None,
    ):
        """
        Initialize calculator with its collaborators.

        Args:
            gateway: Unit conversion gateway (pint based by default)
            evaluator: Expression evaluator (sympy based by default)
            settings: Engine limits (read from the environment by default)
        """
        self.gateway = gateway or UnitGateway()
        self.evaluator = evaluator or ExpressionEvaluator()
        self.settings = settings or EngineSettings.from_env()

    def calculate(self, request: Union[CalculationRequest, dict]) -> CalculationResponse:
        """
        Calculate all quantities of a request.

        Args:
            request: A CalculationRequest, or a dict in its JSON shape

        Returns:
            CalculationResponse with the inputs and outputs views

        Raises:
            pydantic.ValidationError: Malformed request
            DefinitionError: Malformed quantity definitions
            UnitError: An input override uses an unusable unit
        """
        if not isinstance(request, CalculationRequest):
            request = CalculationRequest.model_validate(request)

        registry = QuantityRegistry(self.gateway)
        registry.load(request.quantity_definitions)
        graph = DependencyResolver().build_graph(registry)

        scheduler = EvaluationScheduler(
            registry, graph, self.gateway, self.evaluator, self.settings
        )
        scheduler.apply_overrides(request.input_overrides)
        scheduler.set_output_preferences(request.output_preferences)
        results = scheduler.run()

        inputs, outputs = ResultProjector().project(
            results, request.input_overrides, request.output_preferences
        )
        failed_count = sum(1 for r in results.values() if not r.ok)
        logger.debug(
            "Calculated %d quantities in %d passes (%d failed)",
            len(results), scheduler.passes, failed_count,
        )

        return CalculationResponse(
            inputs=inputs,
            outputs=outputs,
            metadata=CalculationSummary(
                total_quantities=len(registry),
                input_count=len(inputs),
                output_count=len(outputs),
                failed_count=failed_count,
            ),
        )


def calculate(
    request: Union[CalculationRequest, dict],
    gateway: Optional[UnitGateway] = None,
    evaluator: Optional[ExpressionEvaluator] = None,
    settings: Optional[EngineSettings] = None,
) -> CalculationResponse:
    """Run one calculation with a throwaway Calculator."""
    return Calculator(gateway, evaluator, settings).calculate(request)
