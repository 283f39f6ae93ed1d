from .formula_engine import FormulaEngine, evaluate_formula
from .formula_state import FormulaState
from .insertion_engine import available_variables, insert_tag, replace_tag
from .autocomplete import autocomplete_options, filter_candidates

__all__ = [
    "FormulaEngine",
    "evaluate_formula",
    "FormulaState",
    "insert_tag",
    "replace_tag",
    "available_variables",
    "filter_candidates",
    "autocomplete_options",
]
