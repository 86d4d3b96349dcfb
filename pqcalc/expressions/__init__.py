"""
Expression lexing and evaluation.
"""

from pqcalc.expressions.tokens import identifiers, variable_names, is_math_name, MATH_NAMES
from pqcalc.expressions.evaluator import ExpressionEvaluator

__all__ = [
    "identifiers",
    "variable_names",
    "is_math_name",
    "MATH_NAMES",
    "ExpressionEvaluator",
]
