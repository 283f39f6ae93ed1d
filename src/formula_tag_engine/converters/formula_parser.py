"""
Arithmetic Parser - evaluate substituted formulas without a code evaluator.
Handles tokenization, parsing to an AST, and IEEE-754 evaluation of the AST.
"""

import logging
import math
import re
from typing import List, Optional

from ..config import DEFAULT_MAX_NESTING_DEPTH, get_settings
from ..models.ast_schema import ASTNode, NodeType, ParseOutcome
from ..models.evaluation_result import ErrorKind, EvaluationResult, FormulaError
from ..models.parser_models import ParserError, Token, TokenType

logger = logging.getLogger(__name__)


class ArithmeticLexer:
    """Tokenizer for substituted, normalized expressions."""

    # Token patterns (order matters!)
    TOKEN_PATTERNS = [
        # Numbers: 12, 1.5, 1., .5, each with an optional exponent
        (r"(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?", TokenType.NUMBER),
        # Multi-character operators
        (r"\*\*", TokenType.POWER),
        # Single character operators
        (r"\+", TokenType.PLUS),
        (r"-", TokenType.MINUS),
        (r"\*", TokenType.MULTIPLY),
        (r"/", TokenType.DIVIDE),
        # Punctuation
        (r"\(", TokenType.LEFT_PAREN),
        (r"\)", TokenType.RIGHT_PAREN),
    ]

    def __init__(self):
        self.compiled_patterns = [
            (re.compile(pattern), token_type)
            for pattern, token_type in self.TOKEN_PATTERNS
        ]

    def tokenize(self, expression: str) -> List[Token]:
        """Tokenize an arithmetic expression, ending with an EOF token."""
        tokens = []
        position = 0

        while position < len(expression):
            if expression[position].isspace():
                position += 1
                continue

            matched = False
            for pattern, token_type in self.compiled_patterns:
                match = pattern.match(expression, position)
                if match:
                    tokens.append(
                        Token(type=token_type, value=match.group(0), position=position)
                    )
                    position = match.end()
                    matched = True
                    break

            if not matched:
                # Unknown character; the parser reports it
                tokens.append(
                    Token(
                        type=TokenType.UNKNOWN,
                        value=expression[position],
                        position=position,
                    )
                )
                position += 1

        tokens.append(Token(type=TokenType.EOF, value="", position=position))
        return tokens


class ArithmeticParser:
    """Recursive descent parser for + - * / ** with unary signs and parentheses.

    Precedence, lowest first: + -, then * /, then unary - +, then **.
    ** is right associative; everything else is left associative.
    """

    def __init__(self, max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH):
        self.lexer = ArithmeticLexer()
        self.max_nesting_depth = max_nesting_depth
        self.tokens: List[Token] = []
        self.current = 0
        self.depth = 0
        self.errors: List[ParserError] = []

    def parse(self, expression: str) -> ParseOutcome:
        """Parse an expression and return the AST or the collected errors."""
        # Reset state
        self.tokens = self.lexer.tokenize(expression)
        self.current = 0
        self.depth = 0
        self.errors = []

        logger.debug(f"Parsing expression: {expression}")

        if self.is_at_end():
            self.error("Empty expression", self.peek())
            return ParseOutcome(success=False, expression=expression, errors=self.errors)

        try:
            ast_root = self.parse_expression()
        except RecursionError:
            self.errors.insert(
                0,
                ParserError(
                    message="Expression is nested too deeply",
                    position=self.peek().position,
                ),
            )
            return ParseOutcome(success=False, expression=expression, errors=self.errors)

        if not self.errors and not self.is_at_end():
            token = self.peek()
            self.error(f"Unexpected token: {token.value}", token)

        if self.errors:
            return ParseOutcome(success=False, expression=expression, errors=self.errors)

        return ParseOutcome(
            success=True,
            expression=expression,
            ast_root=ast_root,
            tokens_count=len(self.tokens) - 1,  # Exclude EOF
        )

    def parse_expression(self) -> ASTNode:
        """Parse a complete expression."""
        return self.parse_term()

    def parse_term(self) -> ASTNode:
        """Parse addition and subtraction."""
        left = self.parse_factor()

        while self.match(TokenType.PLUS, TokenType.MINUS):
            token = self.previous()
            right = self.parse_factor()
            left = ASTNode(
                node_type=NodeType.ARITHMETIC,
                operator=token.value,
                left=left,
                right=right,
                position=token.position,
            )

        return left

    def parse_factor(self) -> ASTNode:
        """Parse multiplication and division."""
        left = self.parse_unary()

        while self.match(TokenType.MULTIPLY, TokenType.DIVIDE):
            token = self.previous()
            right = self.parse_unary()
            left = ASTNode(
                node_type=NodeType.ARITHMETIC,
                operator=token.value,
                left=left,
                right=right,
                position=token.position,
            )

        return left

    def parse_unary(self) -> ASTNode:
        """Parse unary expressions.

        Every nested construct passes through here, so this is where the
        nesting depth is bounded.
        """
        if self.depth >= self.max_nesting_depth:
            self.error("Expression is nested too deeply", self.peek())
            return self.placeholder()

        self.depth += 1
        try:
            if self.match(TokenType.MINUS, TokenType.PLUS):
                token = self.previous()
                operand = self.parse_unary()
                return ASTNode(
                    node_type=NodeType.UNARY,
                    operator=token.value,
                    operand=operand,
                    position=token.position,
                )

            return self.parse_power()
        finally:
            self.depth -= 1

    def parse_power(self) -> ASTNode:
        """Parse power expressions."""
        left = self.parse_primary()

        if self.match(TokenType.POWER):
            token = self.previous()
            right = self.parse_unary()  # Right associative, allows 2 ** -1
            left = ASTNode(
                node_type=NodeType.ARITHMETIC,
                operator=token.value,
                left=left,
                right=right,
                position=token.position,
            )

        return left

    def parse_primary(self) -> ASTNode:
        """Parse numbers and parenthesized expressions."""
        if self.match(TokenType.LEFT_PAREN):
            expr = self.parse_expression()
            self.consume(TokenType.RIGHT_PAREN, "Expected ')' after expression")
            return expr

        if self.match(TokenType.NUMBER):
            token = self.previous()
            return ASTNode(
                node_type=NodeType.NUMBER,
                value=float(token.value),
                position=token.position,
            )

        token = self.peek()
        if token.type == TokenType.EOF:
            self.error("Unexpected end of expression", token)
        elif token.type == TokenType.UNKNOWN:
            self.error(f"Unexpected character: {token.value}", token)
        else:
            self.error(f"Unexpected token: {token.value}", token)
        return self.placeholder()

    # Helper methods
    def match(self, *types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def check(self, token_type: TokenType) -> bool:
        """Check if current token is of given type."""
        if self.is_at_end():
            return False
        return self.peek().type == token_type

    def advance(self) -> Token:
        """Consume and return current token."""
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def consume(self, token_type: TokenType, message: str) -> Token:
        """Consume token of expected type or add error."""
        if self.check(token_type):
            return self.advance()

        current_token = self.peek()
        self.errors.append(
            ParserError(
                message=f"{message}. Got {current_token.value or 'end of expression'}",
                position=current_token.position,
                token_value=current_token.value,
                expected=")" if token_type == TokenType.RIGHT_PAREN else None,
            )
        )
        return current_token

    def error(self, message: str, token: Token) -> None:
        self.errors.append(
            ParserError(message=message, position=token.position, token_value=token.value)
        )

    def placeholder(self) -> ASTNode:
        """Stand-in node returned after an error; never evaluated."""
        return ASTNode(node_type=NodeType.NUMBER, value=0.0, position=self.peek().position)


class ArithmeticEvaluator:
    """Walks an arithmetic AST and computes its value with IEEE-754 semantics.

    Division by zero, overflow and invalid powers produce inf or nan rather
    than raising; callers decide what a non-finite result means.
    """

    def evaluate(self, node: ASTNode) -> float:
        """Evaluate in post-order with an explicit stack.

        Long left-associative chains such as 1+1+...+1 produce deep trees,
        so the walk does not recurse.
        """
        values: List[float] = []
        stack = [(node, False)]

        while stack:
            current, children_done = stack.pop()

            if current.node_type == NodeType.NUMBER:
                values.append(float(current.value))
                continue

            if not children_done:
                stack.append((current, True))
                if current.node_type == NodeType.UNARY:
                    stack.append((current.operand, False))
                else:
                    stack.append((current.right, False))
                    stack.append((current.left, False))
                continue

            if current.node_type == NodeType.UNARY:
                values.append(self._apply_unary(current.operator, values.pop()))
            elif current.node_type == NodeType.ARITHMETIC:
                right = values.pop()
                left = values.pop()
                values.append(self._apply_binary(current.operator, left, right))
            else:
                raise ValueError(f"Unsupported node type: {current.node_type}")

        return values.pop()

    @staticmethod
    def _apply_unary(operator: str, operand: float) -> float:
        return -operand if operator == "-" else operand

    def _apply_binary(self, operator: str, left: float, right: float) -> float:
        if operator == "+":
            return left + right
        elif operator == "-":
            return left - right
        elif operator == "*":
            return left * right
        elif operator == "/":
            return self._divide(left, right)
        elif operator == "**":
            return self._power(left, right)
        raise ValueError(f"Unsupported operator: {operator}")

    @staticmethod
    def _divide(left: float, right: float) -> float:
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            # Sign follows both operands, including signed zero
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
        return left / right

    @staticmethod
    def _power(base: float, exponent: float) -> float:
        # x ** nan and (+/-1) ** inf are nan; math.pow would return 1 for base 1
        if math.isnan(exponent) or (math.isinf(exponent) and abs(base) == 1):
            return math.nan
        try:
            return math.pow(base, exponent)
        except OverflowError:
            if base < 0 and exponent.is_integer() and exponent % 2 == 1:
                return -math.inf
            return math.inf
        except ValueError:
            # Zero to a negative power, or a negative base with a fractional exponent
            return math.inf if base == 0 else math.nan


def evaluate(
    expression: str, max_nesting_depth: Optional[int] = None
) -> EvaluationResult:
    """Evaluate a normalized arithmetic expression.

    The nesting limit defaults to the configured max_nesting_depth
    (FORMULA_MAX_NESTING_DEPTH).

    Returns a failed result of kind syntax_error when the expression does not
    parse, and non_finite_result when it evaluates to NaN or +/-Infinity.
    """
    if max_nesting_depth is None:
        max_nesting_depth = get_settings().max_nesting_depth

    outcome = ArithmeticParser(max_nesting_depth=max_nesting_depth).parse(expression)
    if not outcome.success:
        first = outcome.first_error
        logger.debug(f"Syntax error in {expression!r}: {first.message}")
        return EvaluationResult.failed(
            FormulaError(
                kind=ErrorKind.SYNTAX_ERROR,
                message=first.message,
                position=first.position,
            ),
            expression=expression,
        )

    value = ArithmeticEvaluator().evaluate(outcome.ast_root)
    if not math.isfinite(value):
        logger.debug(f"Expression {expression!r} evaluated to {value}")
        return EvaluationResult.failed(
            FormulaError(
                kind=ErrorKind.NON_FINITE_RESULT,
                message=f"Expression did not produce a finite number ({value})",
            ),
            expression=expression,
        )

    return EvaluationResult.succeeded(value, expression)
