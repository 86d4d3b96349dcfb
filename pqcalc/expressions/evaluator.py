"""
Expression evaluator.

Parses formulas with sympy and evaluates them against numeric bindings.
Supported: numbers, + - * / ^ **, parentheses and the math names in
pqcalc.expressions.tokens. `^` means exponentiation.

Every expression is checked against that grammar on its Python AST before
sympy sees it, since sympy's parser evaluates the text as Python code.
"""

import ast
import math
import operator
from tokenize import TokenError
from typing import Mapping, Optional

import sympy
from sympy.parsing.sympy_parser import (
    convert_xor,
    parse_expr,
    standard_transformations,
)

from pqcalc.errors import EvalError
from pqcalc.expressions.tokens import SYMBOL_RE, identifiers, is_math_name, math_object

TRANSFORMATIONS = standard_transformations + (convert_xor,)

# Largest exponent allowed when it is made of constants only; sympy expands
# integer powers exactly, so 9^9^9 would never finish
MAX_CONSTANT_EXPONENT = 10_000

_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Pow: operator.pow,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_PARSE_ERRORS = (
    SyntaxError,
    NameError,
    TokenError,
    TypeError,
    ValueError,
    AttributeError,
    sympy.SympifyError,
)

_NON_FINITE = (sympy.zoo, sympy.nan, sympy.oo, -sympy.oo)


def _fold(node: ast.AST) -> Optional[float]:
    """Value of a constant-only subtree, or None if it reads names or calls."""
    if isinstance(node, ast.Constant):
        try:
            return float(node.value)
        except OverflowError:
            return math.inf
    if isinstance(node, ast.UnaryOp):
        operand = _fold(node.operand)
        return None if operand is None else _UNARY_OPS[type(node.op)](operand)
    if isinstance(node, ast.BinOp):
        left, right = _fold(node.left), _fold(node.right)
        if left is None or right is None:
            return None
        try:
            value = _BINARY_OPS[type(node.op)](left, right)
        except ZeroDivisionError:
            return None
        except OverflowError:
            return math.inf
        # Negative base with a fractional exponent
        return None if isinstance(value, complex) else value
    return None


def check_grammar(expression: str) -> None:
    """
    Reject anything outside the formula grammar.

    Allowed: numeric literals, identifiers, + - * / ^ ** (binary), unary + -,
    and calls of math functions by name. Attribute access, subscripts,
    strings, lambdas, comprehensions and the like raise EvalError, as do
    constant exponents above MAX_CONSTANT_EXPONENT.
    """
    try:
        tree = ast.parse(expression.replace("^", "**"), mode="eval")
    except (SyntaxError, ValueError, RecursionError) as e:
        raise EvalError(f"Invalid expression '{expression}': {e}") from e

    def walk(node):
        if isinstance(node, ast.Expression):
            walk(node.body)
        elif isinstance(node, ast.Constant):
            value = node.value
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise EvalError(f"Unsupported literal {value!r} in '{expression}'")
        elif isinstance(node, ast.Name):
            if not SYMBOL_RE.match(node.id):
                raise EvalError(f"Unsupported name '{node.id}' in '{expression}'")
        elif isinstance(node, ast.BinOp):
            if type(node.op) not in _BINARY_OPS:
                raise EvalError(
                    f"Unsupported operator {type(node.op).__name__} in '{expression}'"
                )
            walk(node.left)
            walk(node.right)
            if isinstance(node.op, ast.Pow):
                exponent = _fold(node.right)
                if exponent is not None and abs(exponent) > MAX_CONSTANT_EXPONENT:
                    raise EvalError(f"Exponent too large in '{expression}'")
        elif isinstance(node, ast.UnaryOp):
            if type(node.op) not in _UNARY_OPS:
                raise EvalError(
                    f"Unsupported operator {type(node.op).__name__} in '{expression}'"
                )
            walk(node.operand)
        elif isinstance(node, ast.Call):
            if not isinstance(node.func, ast.Name) or not is_math_name(node.func.id):
                raise EvalError(f"Unsupported function call in '{expression}'")
            if node.keywords:
                raise EvalError(f"Keyword arguments are not supported in '{expression}'")
            for arg in node.args:
                walk(arg)
        else:
            raise EvalError(f"Unsupported syntax {type(node).__name__} in '{expression}'")

    try:
        walk(tree)
    except RecursionError as e:
        raise EvalError(f"Expression '{expression}' is nested too deeply") from e


class ExpressionEvaluator:
    """Evaluate formulas over named numeric values."""

    def parse(self, expression: str) -> sympy.Expr:
        """Parse an expression, binding every non-math identifier to a Symbol."""
        if not expression or not expression.strip():
            raise EvalError("Expression is empty")
        check_grammar(expression)

        # Every identifier is mapped explicitly so names such as "N", "S",
        # "beta" or "gamma" never resolve to sympy builtins.
        local_dict = {}
        for name in identifiers(expression):
            local_dict[name] = math_object(name) if is_math_name(name) else sympy.Symbol(name)

        try:
            parsed = parse_expr(
                expression,
                local_dict=local_dict,
                transformations=TRANSFORMATIONS,
            )
        except _PARSE_ERRORS as e:
            raise EvalError(f"Invalid expression '{expression}': {e}") from e

        if not isinstance(parsed, sympy.Basic):
            raise EvalError(f"Expression '{expression}' is not a formula")
        return parsed

    def evaluate(self, expression: str, bindings: Mapping[str, float]) -> float:
        """
        Evaluate an expression.

        Args:
            expression: Formula text, e.g. "D/t" or "sqrt(2*g*h)"
            bindings: Variable name -> numeric value

        Returns:
            The value as a float

        Raises:
            EvalError: On syntax outside the formula grammar, unknown
                identifiers, division by zero and results that are not finite
                real numbers
        """
        parsed = self.parse(expression)

        substitutions = {
            sympy.Symbol(name): sympy.Float(value) if isinstance(value, float) else value
            for name, value in bindings.items()
        }
        try:
            value = parsed.subs(substitutions).evalf()
        except _PARSE_ERRORS as e:
            raise EvalError(f"Cannot evaluate '{expression}': {e}") from e

        unknown = sorted(str(s) for s in value.free_symbols)
        if unknown:
            raise EvalError(
                f"Unknown identifier(s) in '{expression}': {', '.join(unknown)}"
            )

        if any(value.has(bad) for bad in _NON_FINITE):
            raise EvalError(f"Division by zero or non-finite result in '{expression}'")

        try:
            result = float(value)
        except TypeError as e:
            raise EvalError(
                f"Expression '{expression}' did not evaluate to a real number: {value}"
            ) from e
        if not math.isfinite(result):
            raise EvalError(f"Non-finite result in '{expression}'")
        return result
