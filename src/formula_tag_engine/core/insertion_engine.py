"""
Insertion Engine - turn the token the user is typing into a [variable] tag,
and retarget tags that are already in the formula.
"""

import logging
import re
from typing import List

from ..converters.tag_tokenizer import referenced_variables
from ..models.variable_models import Variable, VariableTable

logger = logging.getLogger(__name__)

OPERATORS = ("+", "-", "*", "/")

# Existing tags stay whole; otherwise split on whitespace runs and operators.
SEGMENT_PATTERN = re.compile(r"\[[^\]]+\]|\s+|[+\-*/]|[^\s+\-*/\[]+|\[")


def split_segments(formula: str) -> List[str]:
    """Split a formula into separator and operand segments.

    Joining the result gives back the formula unchanged.
    """
    return SEGMENT_PATTERN.findall(formula)


def insert_tag(formula: str, variable_name: str) -> str:
    """Replace the last operand in the formula with [variable_name].

    "a + b " becomes "a + [x]"; surrounding whitespace is dropped first. A
    formula with no operand (empty, or only operators and whitespace) is
    returned unchanged.
    """
    segments = split_segments(formula.strip())

    for index in range(len(segments) - 1, -1, -1):
        stripped = segments[index].strip()
        if stripped and stripped not in OPERATORS:
            segments[index] = f"[{variable_name}]"
            return "".join(segments)

    logger.debug(f"No operand to replace in formula {formula!r}")
    return formula


def replace_tag(formula: str, current_name: str, new_name: str) -> str:
    """Point the first [current_name] tag at new_name instead."""
    return formula.replace(f"[{current_name}]", f"[{new_name}]", 1)


def available_variables(formula: str, table: VariableTable) -> List[Variable]:
    """Variables not yet referenced by any tag, in table order."""
    used = set(referenced_variables(formula))
    return [variable for variable in table if variable.name not in used]
