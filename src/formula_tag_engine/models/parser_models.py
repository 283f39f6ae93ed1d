"""
Pydantic models for formula tokenization and arithmetic parsing.
Separated from parser logic for better organization.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict


class SegmentType(str, Enum):
    """Kinds of segments a raw formula is split into."""

    LITERAL = "literal"  # text outside any tag, kept verbatim
    TAG = "tag"  # [Variable Name]


class FormulaSegment(BaseModel):
    """One piece of a raw formula: either literal text or a variable tag."""

    segment_type: SegmentType
    text: str  # literal text, or the tag name without brackets

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {"segment_type": "tag", "text": "revenue"},
                {"segment_type": "literal", "text": " + "},
            ]
        },
    )

    @classmethod
    def literal(cls, text: str) -> "FormulaSegment":
        return cls(segment_type=SegmentType.LITERAL, text=text)

    @classmethod
    def tag(cls, name: str) -> "FormulaSegment":
        return cls(segment_type=SegmentType.TAG, text=name)

    @property
    def is_tag(self) -> bool:
        return self.segment_type == SegmentType.TAG

    def render(self) -> str:
        """Return the segment as it appears in the raw formula."""
        return f"[{self.text}]" if self.is_tag else self.text


class TokenType(Enum):
    """Token types for lexical analysis of substituted expressions."""

    # Literals
    NUMBER = "NUMBER"  # 12, 1.5, .5, 1e-07

    # Operators
    PLUS = "PLUS"  # +
    MINUS = "MINUS"  # -
    MULTIPLY = "MULTIPLY"  # *
    DIVIDE = "DIVIDE"  # /
    POWER = "POWER"  # **

    # Punctuation
    LEFT_PAREN = "LEFT_PAREN"  # (
    RIGHT_PAREN = "RIGHT_PAREN"  # )

    # Special
    EOF = "EOF"
    UNKNOWN = "UNKNOWN"


class Token(BaseModel):
    """Token with type, value, and position information."""

    type: TokenType
    value: str
    position: int


class ParserError(BaseModel):
    """Structured error information from parser."""

    message: str
    position: int
    token_value: Optional[str] = None
    expected: Optional[str] = None
    severity: str = "error"  # "error", "warning"

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "message": "Expected ')' after expression",
                    "position": 6,
                    "token_value": "",
                    "expected": ")",
                    "severity": "error",
                }
            ]
        }
    )


# Export all models
__all__ = [
    "SegmentType",
    "FormulaSegment",
    "TokenType",
    "Token",
    "ParserError",
]
