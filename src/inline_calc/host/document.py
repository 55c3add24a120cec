"""Read a text document, hand it to the engine and write the result back."""
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from inline_calc.common.logger import logger
from inline_calc.common.models import PatchResult, Selection
from inline_calc.engine.engine import InlineCalcEngine


def resolve_selection(text: str, start: Optional[int] = None, end: Optional[int] = None) -> Selection:
    """
    Convert raw caret offsets into a Selection over ``text``.

    Offsets that are missing or fall outside the text give ``(0, 0)``.

    :param str text: Text the offsets refer to
    :param int start: Selection start, or None
    :param int end: Selection end, or None to collapse onto ``start``

    :return: Selection over ``text``
    :rtype: Selection
    """
    if start is None:
        return Selection()
    if end is None:
        end = start
    if not (0 <= start <= len(text) and 0 <= end <= len(text)):
        logger.debug(f"📍 Selection ({start}, {end}) is outside the text, using (0, 0)")
        return Selection()
    return Selection(start=start, end=end)


class TextDocument(BaseModel):
    """
    Text snapshot of a file together with the caret position in it.

    Line endings are kept as they are on disk, so caret offsets count every character
    of the file, ``\\r`` included, and a rewrite does not convert them.
    """

    model_config = ConfigDict(frozen=True)

    source: Path = Field(..., description="File the text was read from")
    text: str = Field(..., description="File content, line endings untouched")
    selection: Selection = Field(default_factory=Selection, description="Caret or selection in text")

    @classmethod
    def load(cls, path: Path, start: Optional[int] = None, end: Optional[int] = None) -> "TextDocument":
        """
        Load a document and resolve its selection.

        :param Path path: Path to a UTF-8 text file
        :param int start: Selection start, or None
        :param int end: Selection end, or None

        :return: Document snapshot
        :rtype: TextDocument
        :raises OSError: If the file cannot be read
        :raises ValueError: If the file is not valid UTF-8
        """
        with path.open("r", encoding="utf-8", newline="") as f_in:
            text = f_in.read()
        return cls(source=path, text=text, selection=resolve_selection(text, start, end))

    def process(self, engine: InlineCalcEngine) -> PatchResult:
        """Run the engine over this snapshot."""
        return engine.process(self.text, self.selection)

    def write_back(self, result: PatchResult, target: Optional[Path] = None) -> Selection:
        """
        Write the processed text and return the caret to place in it.

        Offsets are clamped to the new text; an end of 0 collapses onto the start.

        :param PatchResult result: Engine output for this document
        :param Path target: Destination file, defaults to the source file

        :return: Caret position in the written text
        :rtype: Selection
        """
        target = target or self.source
        with target.open("w", encoding="utf-8", newline="") as f_out:
            f_out.write(result.text)
        logger.info(f"💾 Wrote {len(result.text)} characters to {target}")

        length: int = len(result.text)
        start: int = min(result.selection.start, length)
        end: int = min(result.selection.end or result.selection.start, length)
        return Selection(start=start, end=end)
