"""Sanitize, parse and evaluate inline arithmetic expressions safely."""
from collections.abc import Callable as ABCCallable
from decimal import ROUND_HALF_UP, Decimal
import math
import operator
import re
from typing import Callable, List, Optional, Tuple

from inline_calc.common.models import Token


ERROR: str = "ERROR"

# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]


class EvaluationError(ValueError):
    """Raised when a token sequence cannot be reduced to a single number."""


def _divide(a: float, b: float) -> float:
    """IEEE-754 division: dividing by zero gives an infinity or NaN instead of raising."""
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _remainder(a: float, b: float) -> float:
    """Floating-point remainder whose sign follows the dividend; NaN for a zero divisor."""
    if b == 0 or math.isinf(a):
        return math.nan
    return math.fmod(a, b)


# Mapping of operator symbols to (precedence, function)
OPERATORS: dict[str, Tuple[int, OperatorFn]] = {
    "+": (1, operator.add),
    "-": (1, operator.sub),
    "*": (2, operator.mul),
    "/": (2, _divide),
    "%": (2, _remainder),
}

# Everything except ASCII digits, '.', '%' and the operators / parentheses
_DISALLOWED = re.compile(r"[^0-9.%/*+\-()]")
_PERCENT = re.compile(r"([0-9])%")
# An operator immediately followed by another one is dropped, so a run keeps its last operator
_OPERATOR_RUN = re.compile(r"[+\-*/](?=[+\-*/])")
_TOKEN = re.compile(r"([0-9]+\.?[0-9]*|\.[0-9]+)|([+\-*/%^()])")
_TRAILING_ZEROS = re.compile(r"\.?0+$")


class ExpressionParser:
    """
    Turn the payload of a bracket expression into its display value.

    Design constraints:
        - No eval(), no dynamic code execution
        - Malformed input never raises past evaluate_expression; it becomes ERROR

    Algorithm:
        1. Sanitize: drop foreign characters, expand percentages, collapse operator runs
        2. Tokenize with a regular expression
        3. Convert to Reverse Polish Notation (RPN) using Shunting-yard
        4. Evaluate RPN using a stack
        5. Format the number for display

    Examples:
        - Payload: 2 + 3 * 4
        - Sanitized: 2+3*4
        - RPN: 2 3 4 * +
        - Result: 14
    """

    @staticmethod
    def sanitize(expr: str) -> str:
        """
        Strip an expression down to the characters the tokenizer understands.

        ``<digit>%`` becomes ``<digit>/100`` and a run of operators keeps only its last
        operator (``5+-3`` -> ``5-3``).

        :param str expr: Raw expression text

        :return: Sanitized expression
        :rtype: str
        """
        cleaned: str = _DISALLOWED.sub("", expr)
        cleaned = _PERCENT.sub(r"\1/100", cleaned)
        return _OPERATOR_RUN.sub("", cleaned)

    @staticmethod
    def tokenize(expr: str) -> List[Token]:
        """
        Split an expression into number and operator tokens.

        Characters that are neither part of a number nor an operator are skipped.

        :param str expr: Arithmetic expression (e.g. "3+4*2" or "3 + .5")

        :return: List of tokens in source order
        :rtype: List[Token]
        """
        tokens: List[Token] = []
        for match in _TOKEN.finditer(expr):
            number, symbol = match.groups()
            if number:
                tokens.append(Token.number(float(number)))
            else:
                tokens.append(Token.operator(symbol))
        return tokens

    @staticmethod
    def _precedence(token: Token) -> Optional[int]:
        """Precedence of an operator token, None for parentheses and unsupported operators."""
        entry = OPERATORS.get(token.value)
        return entry[0] if entry else None

    @staticmethod
    def to_rpn(tokens: List[Token]) -> List[Token]:
        """
        Convert a list of tokens into Reverse Polish Notation (RPN) using the Shunting-yard algorithm.

        A ')' without a matching '(' drains the stack instead of failing. Operators without a
        precedence (such as '^') are pushed but never pop, nor get popped by, other operators.

        :param List[Token] tokens: List of arithmetic tokens

        :return: List of tokens in RPN order, without parentheses
        :rtype: List[Token]
        """
        output: List[Token] = []
        stack: List[Token] = []

        for token in tokens:
            if token.is_number:
                output.append(token)
            elif token.value == "(":
                stack.append(token)
            elif token.value == ")":
                while stack and stack[-1].value != "(":
                    output.append(stack.pop())
                if stack:
                    # Discard the matching '('
                    stack.pop()
            else:
                prec = ExpressionParser._precedence(token)
                while stack:
                    top_prec = ExpressionParser._precedence(stack[-1])
                    if prec is None or top_prec is None or top_prec < prec:
                        break
                    output.append(stack.pop())
                stack.append(token)

        # Append remaining operators in reverse order (stack top first)
        output.extend(token for token in reversed(stack) if token.value not in "()")
        return output

    @staticmethod
    def evaluate_rpn(rpn: List[Token]) -> float:
        """
        Evaluate a token sequence in Reverse Polish Notation.

        :param List[Token] rpn: Tokens in RPN order

        :return: Computed result, possibly infinite or NaN
        :rtype: float
        :raises EvaluationError: If an operator lacks operands, is unsupported, or operands remain
        """
        stack: List[float] = []
        for token in rpn:
            if token.is_number:
                stack.append(token.value)
                continue
            # Operator requires two operands
            if len(stack) < 2:
                raise EvaluationError(f"Not enough operands for {token.value!r}")
            if token.value not in OPERATORS:
                raise EvaluationError(f"Unsupported operator {token.value!r}")
            b: float = stack.pop()
            a: float = stack.pop()
            stack.append(OPERATORS[token.value][1](a, b))

        if len(stack) != 1:
            raise EvaluationError(f"Expected a single result, got {len(stack)} values")

        return stack[0]

    @staticmethod
    def format_result(number: Optional[float], precision: int = 2) -> str:
        """
        Render a number the way it is spliced back into the text.

        Integral values lose their fraction; others are rounded half away from zero to
        ``precision`` digits, then trailing zeros and a dangling '.' are removed.

        :param float number: Evaluated value, or None when evaluation failed
        :param int precision: Maximum number of fraction digits

        :return: Display string or ERROR
        :rtype: str
        """
        if isinstance(number, bool) or not isinstance(number, (int, float)):
            return ERROR
        if not math.isfinite(number):
            return ERROR
        if float(number).is_integer():
            return str(int(number))

        quantum = Decimal(1).scaleb(-precision)
        text = format(Decimal(number).quantize(quantum, rounding=ROUND_HALF_UP), "f")
        if "." in text:
            text = _TRAILING_ZEROS.sub("", text)
        # Values like -0.001 round to -0
        return "0" if text in ("-0", "") else text

    @staticmethod
    def evaluate_expression(expr: str, precision: int = 2) -> str:
        """
        Evaluate a payload that no longer contains bracket expressions.

        :param str expr: Payload text
        :param int precision: Maximum number of fraction digits

        :return: Display string or ERROR
        :rtype: str
        :raises EvaluationError: If the expression is malformed
        """
        sanitized: str = ExpressionParser.sanitize(expr)
        tokens: List[Token] = ExpressionParser.tokenize(sanitized)
        rpn: List[Token] = ExpressionParser.to_rpn(tokens)
        return ExpressionParser.format_result(ExpressionParser.evaluate_rpn(rpn), precision)
