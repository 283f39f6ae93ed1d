import re
from typing import List

from ..converters.substitutor import format_number
from ..models.variable_models import AutocompleteOption, Variable, VariableTable

SEARCH_TERM_PATTERN = re.compile(r"(\w+)\Z")


def search_term(formula: str) -> str:
    """The word being typed at the end of the formula, or ""."""
    match = SEARCH_TERM_PATTERN.search(formula)
    return match.group(1) if match else ""


def filter_candidates(formula: str, table: VariableTable) -> List[Variable]:
    """Variables whose name contains the search term, ignoring case.

    An empty search term matches every variable.
    """
    term = search_term(formula).lower()
    return [variable for variable in table if term in variable.name.lower()]


def autocomplete_options(formula: str, table: VariableTable) -> List[AutocompleteOption]:
    return [
        AutocompleteOption(
            value=variable.name,
            label=f"{variable.name} = {format_number(variable.value)}",
        )
        for variable in filter_candidates(formula, table)
    ]
