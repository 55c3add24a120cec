"""Locate bracket expressions of the form ``=( ... )`` in free text."""
from typing import Dict, Iterator, List

from inline_calc.common.models import Match


OPENER: str = "=("


class BracketScanner:
    """
    Find every top-level ``=( ... )`` occurrence in a text buffer.

    The payload may contain balanced parentheses: an expression ends at the ``)`` paired
    with the ``(`` of its opener, i.e. the one that brings a depth counter seeded at 1 back
    to 0. An opener whose paren is never closed produces no match.

    Pairing is done once for the whole text, so scanning stays linear even when the text
    is full of unclosed openers.
    """

    @staticmethod
    def pair_parentheses(text: str) -> Dict[int, int]:
        """
        Map the offset of every closed ``(`` to the offset of its ``)``.

        Unmatched ``)`` are ignored and unclosed ``(`` get no entry.

        :param str text: Text buffer

        :return: Open offset -> close offset
        :rtype: Dict[int, int]
        """
        pairs: Dict[int, int] = {}
        open_stack: List[int] = []
        for position, char in enumerate(text):
            if char == "(":
                open_stack.append(position)
            elif char == ")" and open_stack:
                pairs[open_stack.pop()] = position
        return pairs

    @staticmethod
    def scan(text: str) -> Iterator[Match]:
        """
        Yield bracket expressions in ascending start order, without overlaps.

        :param str text: Text buffer

        :return: Lazy iterator of matches
        :rtype: Iterator[Match]
        """
        position: int = text.find(OPENER)
        if position == -1:
            return
        pairs: Dict[int, int] = BracketScanner.pair_parentheses(text)
        while position != -1:
            payload_start: int = position + len(OPENER)
            close = pairs.get(payload_start - 1)
            if close is None:
                # Unclosed opener: nested openers inside it may still match
                position = text.find(OPENER, payload_start)
                continue
            yield Match(start=position, end=close + 1, raw=text[payload_start:close])
            position = text.find(OPENER, close + 1)

    @staticmethod
    def find_all(text: str) -> List[Match]:
        """Collect every match of ``text`` into a list."""
        return list(BracketScanner.scan(text))
