"""
Identifier lexer shared by the dependency resolver and the evaluator.

Both sides read identifiers with the same pattern, so whatever the resolver
treats as a dependency is exactly what the evaluator will bind.
"""

import re

import sympy

IDENTIFIER_PATTERN = r"[A-Za-z_][A-Za-z0-9_]*"
IDENTIFIER_RE = re.compile(rf"\b{IDENTIFIER_PATTERN}\b")
SYMBOL_RE = re.compile(rf"^{IDENTIFIER_PATTERN}$")

# Math functions and constants, keyed by lower-case name
MATH_NAMES = {
    "sin": sympy.sin,
    "cos": sympy.cos,
    "tan": sympy.tan,
    "asin": sympy.asin,
    "acos": sympy.acos,
    "atan": sympy.atan,
    "sinh": sympy.sinh,
    "cosh": sympy.cosh,
    "tanh": sympy.tanh,
    "sqrt": sympy.sqrt,
    "exp": sympy.exp,
    "log": sympy.log,
    "ln": sympy.log,
    "log10": lambda x: sympy.log(x, 10),
    "abs": sympy.Abs,
    "pi": sympy.pi,
    "e": sympy.E,
}


def is_math_name(token: str) -> bool:
    """Whether the token names a math function or constant (any case)."""
    return token.lower() in MATH_NAMES


def math_object(token: str):
    """Sympy function or constant for a math name."""
    return MATH_NAMES[token.lower()]


def identifiers(expression: str) -> list[str]:
    """Distinct identifiers in order of first appearance."""
    seen = set()
    result = []
    for match in IDENTIFIER_RE.findall(expression or ""):
        if match not in seen:
            seen.add(match)
            result.append(match)
    return result


def variable_names(expression: str) -> list[str]:
    """Identifiers that are not math names, i.e. candidate quantity symbols."""
    return [token for token in identifiers(expression) if not is_math_name(token)]
