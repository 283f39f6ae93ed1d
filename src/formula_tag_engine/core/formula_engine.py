import logging
from typing import Optional

from formula_tag_engine.config import EngineSettings, get_settings
from formula_tag_engine.converters.formula_parser import evaluate
from formula_tag_engine.converters.normalizer import normalize
from formula_tag_engine.converters.substitutor import substitute
from formula_tag_engine.converters.tag_tokenizer import TagTokenizer
from formula_tag_engine.models.evaluation_result import EvaluationResult
from formula_tag_engine.models.variable_models import VariableTable


class FormulaEngine:
    """Runs a tagged formula through the whole evaluation pipeline.

    Pipeline:
    1. Tokenize the formula into literal text and [variable] tags
    2. Substitute tag values from the variable table
    3. Normalize ^ to **
    4. Parse and evaluate the arithmetic expression

    The engine keeps no per-call state, so one instance can be shared.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        """Initialize the engine.

        Args:
            settings: Engine settings; loaded from the environment when omitted
        """
        self.logger = logging.getLogger(__name__)
        self.settings = settings or get_settings()
        self.tokenizer = TagTokenizer()

    def evaluate_formula(self, formula: str, table: VariableTable) -> EvaluationResult:
        """Evaluate a formula such as "[price] * (1 + [tax])".

        Args:
            formula: Raw formula with [name] tags and ^ for powers
            table: Snapshot of the known variables

        Returns:
            EvaluationResult with the value, or the first failure: an
            unknown_variable, syntax_error or non_finite_result error
        """
        segments = self.tokenizer.tokenize(formula)

        substitution = substitute(segments, table)
        if not substitution.success:
            self.logger.debug(f"Formula {formula!r} references an unknown variable")
            return EvaluationResult.failed(substitution.error)

        expression = normalize(substitution.expression)
        result = evaluate(expression, max_nesting_depth=self.settings.max_nesting_depth)

        self.logger.debug(
            f"Evaluated {formula!r} as {expression!r}: "
            f"{result.value if result.success else result.error_kind}"
        )
        return result


_default_engine: Optional[FormulaEngine] = None


def evaluate_formula(formula: str, table: VariableTable) -> EvaluationResult:
    """Evaluate a formula with a shared default engine."""
    global _default_engine
    if _default_engine is None:
        _default_engine = FormulaEngine()
    return _default_engine.evaluate_formula(formula, table)
