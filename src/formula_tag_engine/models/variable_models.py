"""
Pydantic models for variables and the tables they are looked up in.
"""

import re
from typing import Dict, Iterator, List, Mapping, Optional
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

# Characters a variable name may not contain: tag brackets and whitespace
FORBIDDEN_NAME_PATTERN = re.compile(r"[\[\]\s]")


class Variable(BaseModel):
    """A named numeric value that formulas reference as [name]."""

    name: str = Field(min_length=1)
    value: float = Field(allow_inf_nan=False)

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={"examples": [{"name": "revenue", "value": 5.0}]},
    )

    @field_validator("name")
    @classmethod
    def _check_name(cls, name: str) -> str:
        match = FORBIDDEN_NAME_PATTERN.search(name)
        if match:
            raise ValueError(
                f"Variable name {name!r} contains forbidden character {match.group(0)!r}"
            )
        return name


class VariableRecord(BaseModel):
    """One entry of the JSON array served by the variable source."""

    id: int
    name: str
    value: float

    def to_variable(self) -> Variable:
        return Variable(name=self.name, value=self.value)


class VariableTable(BaseModel):
    """Ordered, read-only collection of variables with unique names.

    Refreshing from the source builds a new table; instances are never
    mutated while in use.
    """

    variables: List[Variable] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    _index: Dict[str, Variable] = PrivateAttr(default_factory=dict)

    @field_validator("variables")
    @classmethod
    def _check_unique(cls, variables: List[Variable]) -> List[Variable]:
        seen = set()
        for variable in variables:
            if variable.name in seen:
                raise ValueError(f"Duplicate variable name: {variable.name}")
            seen.add(variable.name)
        return variables

    def model_post_init(self, __context) -> None:
        self._index = {variable.name: variable for variable in self.variables}

    @classmethod
    def from_mapping(cls, values: Mapping[str, float]) -> "VariableTable":
        """Build a table from a name -> value mapping, keeping its order."""
        return cls(
            variables=[Variable(name=name, value=value) for name, value in values.items()]
        )

    def get(self, name: str) -> Optional[Variable]:
        """Exact, case-sensitive lookup."""
        return self._index.get(name)

    def names(self) -> List[str]:
        return [variable.name for variable in self.variables]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[Variable]:  # type: ignore[override]
        return iter(self.variables)

    def __len__(self) -> int:
        return len(self.variables)


class AutocompleteOption(BaseModel):
    """Option shown for a variable while the user types."""

    value: str
    label: str


__all__ = [
    "Variable",
    "VariableRecord",
    "VariableTable",
    "AutocompleteOption",
]
