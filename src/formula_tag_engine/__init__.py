"""Tagged formula engine.

This library evaluates arithmetic formulas that reference named variables
as [name] tags, and provides the editing helpers (tag insertion, tag
replacement, autocomplete) used while the formula is typed.
"""

from formula_tag_engine.config import EngineSettings, get_settings
from formula_tag_engine.converters.formula_parser import (
    ArithmeticEvaluator,
    ArithmeticParser,
    evaluate,
)
from formula_tag_engine.converters.normalizer import normalize
from formula_tag_engine.converters.substitutor import format_number, substitute
from formula_tag_engine.converters.tag_tokenizer import (
    TagTokenizer,
    referenced_variables,
    tokenize,
)
from formula_tag_engine.core.autocomplete import autocomplete_options, filter_candidates
from formula_tag_engine.core.formula_engine import FormulaEngine, evaluate_formula
from formula_tag_engine.core.formula_state import FormulaState
from formula_tag_engine.core.insertion_engine import (
    available_variables,
    insert_tag,
    replace_tag,
)
from formula_tag_engine.exceptions import FormulaEngineError, VariableSourceError
from formula_tag_engine.models.evaluation_result import (
    ErrorKind,
    EvaluationResult,
    FormulaError,
    SubstitutionResult,
)
from formula_tag_engine.models.parser_models import FormulaSegment, SegmentType
from formula_tag_engine.models.variable_models import (
    AutocompleteOption,
    Variable,
    VariableTable,
)
from formula_tag_engine.variable_source import VariableSource, fetch_variables

# Version
__version__ = "0.1.0"

# Public API
__all__ = [
    # Pipeline
    "tokenize",
    "TagTokenizer",
    "referenced_variables",
    "substitute",
    "format_number",
    "normalize",
    "evaluate",
    "ArithmeticParser",
    "ArithmeticEvaluator",
    "FormulaEngine",
    "evaluate_formula",
    "FormulaState",
    # Editing helpers
    "insert_tag",
    "replace_tag",
    "available_variables",
    "filter_candidates",
    "autocomplete_options",
    # Models
    "FormulaSegment",
    "SegmentType",
    "Variable",
    "VariableTable",
    "AutocompleteOption",
    "ErrorKind",
    "FormulaError",
    "SubstitutionResult",
    "EvaluationResult",
    # Configuration and errors
    "EngineSettings",
    "get_settings",
    "FormulaEngineError",
    "VariableSourceError",
    # Data source
    "VariableSource",
    "fetch_variables",
    # Version
    "__version__",
]
