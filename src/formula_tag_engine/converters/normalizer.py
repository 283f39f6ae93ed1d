"""
Normalizer - rewrite formula operators into the evaluator's syntax.
"""

# Formulas write powers as a ^ b; the evaluator reads a ** b.
POWER_OPERATOR = "^"
EVALUATOR_POWER_OPERATOR = "**"


def normalize(expression: str) -> str:
    """Replace every ^ with **. Nothing else is rewritten."""
    return expression.replace(POWER_OPERATOR, EVALUATOR_POWER_OPERATOR)
