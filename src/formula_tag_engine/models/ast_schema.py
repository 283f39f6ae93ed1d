"""
AST schema for substituted arithmetic expressions.
Only numbers, the four basic operators, power and unary signs are representable.
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .parser_models import ParserError


class NodeType(str, Enum):
    """AST node types for the arithmetic grammar."""

    # Leaf nodes
    NUMBER = "number"  # 12, 1.5

    # Binary operations
    ARITHMETIC = "arithmetic"  # +, -, *, /, **

    # Unary operations
    UNARY = "unary"  # -, +


class ASTNode(BaseModel):
    """
    Arithmetic AST node.
    Binary nodes use left/right, unary nodes use operand, number nodes use value.
    """

    node_type: NodeType

    # Binary operation fields
    operator: Optional[str] = None
    left: Optional["ASTNode"] = None
    right: Optional["ASTNode"] = None

    # Unary operation fields
    operand: Optional["ASTNode"] = None

    # Literal value fields
    value: Optional[float] = None

    # Offset of the token that produced this node
    position: Optional[int] = None

    model_config = ConfigDict(
        use_enum_values=True,
        extra="forbid",
        json_schema_extra={
            "examples": [
                {"node_type": "number", "value": 2.0},
                {
                    "node_type": "arithmetic",
                    "operator": "**",
                    "left": {"node_type": "number", "value": 2.0},
                    "right": {"node_type": "number", "value": 3.0},
                },
                {
                    "node_type": "unary",
                    "operator": "-",
                    "operand": {"node_type": "number", "value": 4.0},
                },
            ]
        },
    )


ASTNode.model_rebuild()


class ParseOutcome(BaseModel):
    """Result of parsing an arithmetic expression."""

    success: bool
    expression: str

    # Success case
    ast_root: Optional[ASTNode] = None

    # Error case
    errors: List[ParserError] = Field(default_factory=list)

    # Metadata
    tokens_count: int = 0

    @property
    def first_error(self) -> Optional[ParserError]:
        return self.errors[0] if self.errors else None


__all__ = ["NodeType", "ASTNode", "ParseOutcome"]
