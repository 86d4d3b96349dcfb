"""
Exception hierarchy for the calculation engine.

Every engine error is a ValueError so callers that already treat bad input
as ValueError (as the request layer does) keep working.
"""


class PQCalcError(ValueError):
    """Base class for all calculation engine errors."""


class UnitError(PQCalcError):
    """A unit is unknown, or two units are not mutually convertible."""


class EvalError(PQCalcError):
    """An expression could not be evaluated."""


class DefinitionError(PQCalcError):
    """A quantity definition is malformed and cannot be scheduled."""


class UnresolvableDependencyError(PQCalcError):
    """A quantity could not be resolved (cycle, missing or failed dependency)."""


class CircularDependencyError(UnresolvableDependencyError):
    """The dependency graph contains a cycle."""

    def __init__(self, symbols):
        self.symbols = sorted(symbols)
        super().__init__(
            "Circular dependency among: " + ", ".join(self.symbols)
        )
