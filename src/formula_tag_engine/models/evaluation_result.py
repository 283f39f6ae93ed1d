from enum import Enum
from typing import Optional
from pydantic import BaseModel


class ErrorKind(str, Enum):
    """Reason a formula could not produce a number"""

    UNKNOWN_VARIABLE = "unknown_variable"  # a tag has no entry in the table
    SYNTAX_ERROR = "syntax_error"  # expression does not parse
    NON_FINITE_RESULT = "non_finite_result"  # NaN or +/-Infinity


class FormulaError(BaseModel):
    """Details about why a formula failed"""

    kind: ErrorKind
    message: str
    variable_name: Optional[str] = None
    position: Optional[int] = None

    @classmethod
    def unknown_variable(cls, name: str) -> "FormulaError":
        return cls(
            kind=ErrorKind.UNKNOWN_VARIABLE,
            message=f"Unknown variable: {name}",
            variable_name=name,
        )


class SubstitutionResult(BaseModel):
    """Outcome of replacing tags with variable values"""

    success: bool
    expression: Optional[str] = None
    error: Optional[FormulaError] = None


class EvaluationResult(BaseModel):
    """Complete result of evaluating a formula or expression"""

    success: bool
    value: Optional[float] = None

    # Substituted and normalized expression, when one was produced
    expression: Optional[str] = None
    error: Optional[FormulaError] = None

    @classmethod
    def succeeded(cls, value: float, expression: str) -> "EvaluationResult":
        return cls(success=True, value=value, expression=expression)

    @classmethod
    def failed(
        cls, error: FormulaError, expression: Optional[str] = None
    ) -> "EvaluationResult":
        return cls(success=False, error=error, expression=expression)

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None
