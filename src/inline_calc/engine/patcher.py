"""Splice evaluated values into a text buffer and keep the selection in place."""
from typing import List, Sequence

from inline_calc.common.models import PatchResult, Replacement, Selection


class TextPatcher:
    """
    Apply replacements to a text buffer while remapping a selection.

    Replacements are applied rightmost first, so the offsets of the ones still pending
    keep pointing at the same characters.
    """

    @staticmethod
    def remap_offset(offset: int, start: int, end: int, replacement_length: int) -> int:
        """
        Move one selection offset across the replacement of ``[start, end)``.

        :param int offset: Offset before the replacement
        :param int start: Start of the replaced range
        :param int end: End of the replaced range
        :param int replacement_length: Length of the inserted text

        :return: Offset after the replacement
        :rtype: int
        """
        if offset > end:
            return offset + replacement_length - (end - start)
        if offset >= start:
            # Inside or touching the replaced range: land right after the inserted text
            return start + replacement_length
        return offset

    @staticmethod
    def apply(text: str, replacements: Sequence[Replacement], selection: Selection) -> PatchResult:
        """
        Apply every replacement to ``text`` and remap both selection offsets.

        :param str text: Original buffer
        :param Sequence[Replacement] replacements: Non-overlapping replacements, in any order
        :param Selection selection: Selection in ``text``

        :return: New buffer, remapped selection and whether the buffer changed
        :rtype: PatchResult
        """
        new_text: str = text
        sel_start: int = selection.start
        sel_end: int = selection.end

        ordered: List[Replacement] = sorted(replacements, key=lambda r: r.match.start, reverse=True)
        for replacement in ordered:
            start, end = replacement.match.start, replacement.match.end
            length: int = len(replacement.text)
            new_text = new_text[:start] + replacement.text + new_text[end:]
            sel_start = TextPatcher.remap_offset(sel_start, start, end, length)
            sel_end = TextPatcher.remap_offset(sel_end, start, end, length)

        if new_text == text:
            return PatchResult(text=text, selection=selection, changed=False)

        return PatchResult(
            text=new_text,
            selection=Selection(start=max(0, sel_start), end=max(0, sel_end)),
            changed=True,
        )
