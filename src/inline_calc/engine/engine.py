"""Top-level entry point: process one buffer snapshot."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from inline_calc.common.logger import logger
from inline_calc.common.models import EngineConfig, Match, PatchResult, Replacement, Selection
from inline_calc.engine.patcher import TextPatcher
from inline_calc.engine.resolver import ExpressionResolver
from inline_calc.engine.scanner import BracketScanner


class InlineCalcEngine(BaseModel):
    """
    Replace every ``=( ... )`` expression of a text with its value.

    The engine holds no per-call state: ``process`` is a pure function of the text and
    selection it receives, so one instance can be shared by every caller of a host process.

    Steps:
        1. Scan the text for bracket expressions.
        2. Evaluate each one, rightmost first, resolving nested expressions.
        3. Splice the values into the text and remap the selection.
    """

    model_config = ConfigDict(frozen=True)

    settings: EngineConfig = Field(default_factory=EngineConfig, description="Engine settings")

    @property
    def resolver(self) -> ExpressionResolver:
        return ExpressionResolver(settings=self.settings)

    def evaluate(self, expression: str) -> str:
        """
        Evaluate a bare payload, e.g. ``"2+3*4"`` or ``"1+=(2*3)"``.

        :param str expression: Payload without the enclosing ``=( )``

        :return: Formatted number or ERROR
        :rtype: str
        """
        return self.resolver.evaluate(expression)

    def process(self, text: str, selection: Optional[Selection] = None) -> PatchResult:
        """
        Evaluate every bracket expression of ``text``.

        :param str text: Buffer snapshot
        :param Selection selection: Caret or selection in ``text``, defaults to (0, 0)

        :return: Patched text, remapped selection and change flag
        :rtype: PatchResult
        """
        selection = selection or Selection()
        matches: List[Match] = BracketScanner.find_all(text)
        if not matches:
            return PatchResult(text=text, selection=selection, changed=False)

        resolver: ExpressionResolver = self.resolver
        replacements: List[Replacement] = [
            Replacement(match=match, text=resolver.evaluate_match(match)) for match in reversed(matches)
        ]
        result: PatchResult = TextPatcher.apply(text, replacements, selection)

        logger.info(
            f"✏️ Evaluated {len(replacements)} expression(s), "
            f"selection ({selection.start}, {selection.end}) -> "
            f"({result.selection.start}, {result.selection.end})"
        )
        return result
