"""
Calculation engine: registry, dependency resolver, scheduler and projector.
"""

from pqcalc.engine.registry import Quantity, QuantityRegistry
from pqcalc.engine.resolver import DependencyResolver, topological_order
from pqcalc.engine.scheduler import EvaluationScheduler
from pqcalc.engine.projector import ResultProjector
from pqcalc.engine.calculator import Calculator, calculate

__all__ = [
    "Quantity",
    "QuantityRegistry",
    "DependencyResolver",
    "topological_order",
    "EvaluationScheduler",
    "ResultProjector",
    "Calculator",
    "calculate",
]
