from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict

from formula_tag_engine.core.formula_engine import FormulaEngine, evaluate_formula
from formula_tag_engine.models.evaluation_result import EvaluationResult
from formula_tag_engine.models.variable_models import VariableTable


class FormulaState(BaseModel):
    """The formula being edited and the last value it produced.

    Passed explicitly between the input surface and the calculate action;
    every change returns a new state.
    """

    formula: str = ""
    result: Optional[float] = None

    model_config = ConfigDict(frozen=True)

    def with_formula(self, formula: str) -> "FormulaState":
        return self.model_copy(update={"formula": formula})

    def calculate(
        self, table: VariableTable, engine: Optional[FormulaEngine] = None
    ) -> Tuple["FormulaState", EvaluationResult]:
        """Evaluate the current formula.

        On failure the previous result is kept so the caller can keep
        showing it next to the error.
        """
        if engine is not None:
            evaluation = engine.evaluate_formula(self.formula, table)
        else:
            evaluation = evaluate_formula(self.formula, table)

        if not evaluation.success:
            return self, evaluation
        return self.model_copy(update={"result": evaluation.value}), evaluation
