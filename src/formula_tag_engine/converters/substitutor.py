"""
Substitutor - replace [variable] tags with their numeric values.
"""

import logging
from typing import Iterable, List

from ..models.evaluation_result import FormulaError, SubstitutionResult
from ..models.parser_models import FormulaSegment
from ..models.variable_models import VariableTable

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    """Canonical decimal text for a value: shortest round-trip repr.

    Integral values drop the trailing ".0", so 5.0 becomes "5".
    """
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_operand(value: float) -> str:
    """Number text safe to splice into an expression.

    Negative values are parenthesised so [x]^2 and 2-[x] keep the meaning
    they have when substituted by hand.
    """
    text = format_number(value)
    if text.startswith("-"):
        return f"({text})"
    return text


def substitute(
    segments: Iterable[FormulaSegment], table: VariableTable
) -> SubstitutionResult:
    """Build the plain arithmetic string for a tokenized formula.

    Fails as a whole on the first tag missing from the table; no partially
    substituted expression is ever returned.
    """
    parts: List[str] = []

    for segment in segments:
        if not segment.is_tag:
            parts.append(segment.text)
            continue

        variable = table.get(segment.text)
        if variable is None:
            logger.debug(f"Substitution failed, unknown variable: {segment.text}")
            return SubstitutionResult(
                success=False, error=FormulaError.unknown_variable(segment.text)
            )
        parts.append(format_operand(variable.value))

    expression = "".join(parts)
    logger.debug(f"Substituted expression: {expression}")
    return SubstitutionResult(success=True, expression=expression)
