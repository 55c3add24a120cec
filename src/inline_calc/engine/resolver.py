"""Evaluate bracket payloads, resolving nested bracket expressions first."""
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from inline_calc.common.logger import logger
from inline_calc.common.models import EngineConfig, Match
from inline_calc.common.parser import ERROR, ExpressionParser
from inline_calc.engine.scanner import BracketScanner


class ExpressionResolver(BaseModel):
    """
    Evaluate the payload of a bracket expression.

    Nested ``=( ... )`` expressions are replaced by their own value (or ERROR) before the
    enclosing payload is sanitized and evaluated. Nesting deeper than ``settings.max_depth``
    evaluates to ERROR.
    """

    model_config = ConfigDict(frozen=True)

    settings: EngineConfig = Field(default_factory=EngineConfig, description="Engine settings")

    def resolve(self, payload: str, depth: int = 0) -> str:
        """
        Replace every nested bracket expression of ``payload`` by its value.

        :param str payload: Payload text of the enclosing expression
        :param int depth: Nesting level of ``payload``

        :return: Payload without bracket expressions
        :rtype: str
        """
        parts: List[str] = []
        cursor: int = 0
        for match in BracketScanner.scan(payload):
            parts.append(payload[cursor:match.start])
            parts.append(self.evaluate(match.raw, depth + 1))
            cursor = match.end
        if not parts:
            return payload
        parts.append(payload[cursor:])
        return "".join(parts)

    def evaluate(self, payload: str, depth: int = 0) -> str:
        """
        Evaluate a payload to its display value.

        :param str payload: Text between ``=(`` and its closing ``)``
        :param int depth: Nesting level, 0 for a top-level expression

        :return: Formatted number or ERROR
        :rtype: str
        """
        if depth > self.settings.max_depth:
            logger.warning(f"🧮❌ Nesting deeper than {self.settings.max_depth} levels: {payload!r}")
            return ERROR

        try:
            resolved: str = self.resolve(payload, depth)
            result: str = ExpressionParser.evaluate_expression(resolved, self.settings.precision)
        except Exception as exc:
            logger.warning(f"🧮❌ Could not evaluate {payload!r}: {exc}")
            return ERROR

        logger.debug(f"🧮✅ {payload!r} -> {result}")
        return result

    def evaluate_match(self, match: Match) -> str:
        """Evaluate the payload of a top-level match."""
        return self.evaluate(match.raw)
