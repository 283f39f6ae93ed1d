class FormulaEngineError(Exception):
    """Base class for errors raised by this package."""

    pass


class VariableSourceError(FormulaEngineError):
    """Raised when the variable list cannot be fetched or parsed."""

    pass
