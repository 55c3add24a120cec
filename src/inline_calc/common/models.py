"""Pydantic models shared by the scanner, evaluator and patcher."""
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class EngineConfig(BaseModel):
    """Settings of an InlineCalcEngine."""

    model_config = ConfigDict(frozen=True)

    max_depth: int = Field(default=32, ge=1, le=200, description="Maximum nesting of bracket expressions")
    precision: int = Field(default=2, ge=0, le=10, description="Maximum number of fraction digits in results")


class Match(BaseModel):
    """A bracket expression found in a text buffer."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., ge=0, description="Offset of the '=' opening the expression")
    end: int = Field(..., ge=0, description="Offset just past the closing ')'")
    raw: str = Field(..., description="Unparsed payload between '=(' and the matching ')'")

    @model_validator(mode="after")
    def end_after_start(self) -> "Match":
        """Ensure the range is not reversed."""
        if self.end < self.start:
            raise ValueError(f"Match end {self.end} is before start {self.start}")
        return self

    @property
    def length(self) -> int:
        return self.end - self.start


class Token(BaseModel):
    """Lexical token: a number or a single-character operator."""

    model_config = ConfigDict(frozen=True)

    type: Literal["number", "operator"] = Field(..., description="Token kind")
    value: Union[float, str] = Field(..., description="Numeric value or operator symbol")

    @classmethod
    def number(cls, value: float) -> "Token":
        return cls(type="number", value=float(value))

    @classmethod
    def operator(cls, symbol: str) -> "Token":
        return cls(type="operator", value=symbol)

    @property
    def is_number(self) -> bool:
        return self.type == "number"


class Selection(BaseModel):
    """
    Caret or selection range as two character offsets.

    ``start <= end`` is not enforced: each offset is remapped on its own.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(default=0, description="Selection start offset")
    end: int = Field(default=0, description="Selection end offset")


class Replacement(BaseModel):
    """A match paired with the text that replaces it."""

    model_config = ConfigDict(frozen=True)

    match: Match = Field(..., description="Bracket expression being replaced")
    text: str = Field(..., description="Evaluated value or the ERROR sentinel")


class PatchResult(BaseModel):
    """Outcome of processing one buffer snapshot."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="Buffer after all replacements")
    selection: Selection = Field(..., description="Remapped selection")
    changed: bool = Field(..., description="True when text differs from the input buffer")
