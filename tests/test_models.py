"""Test the pydantic models of inline_calc.common.models."""
from pydantic import ValidationError
import pytest

from inline_calc.common.models import EngineConfig, Match, PatchResult, Replacement, Selection, Token


def test_match_valid() -> None:
    """Test that a valid Match can be created and reports its length."""
    match = Match(start=4, end=10, raw="2+2")
    assert match.raw == "2+2"
    assert match.length == 6


def test_match_rejects_reversed_range() -> None:
    """Test that a Match ending before it starts raises a validation error."""
    with pytest.raises(ValidationError):
        Match(start=10, end=4, raw="2+2")


def test_match_rejects_negative_offsets() -> None:
    """Test that negative offsets raise a validation error."""
    with pytest.raises(ValidationError):
        Match(start=-1, end=4, raw="2+2")


def test_match_is_frozen() -> None:
    """Test that a Match cannot be modified once found."""
    match = Match(start=0, end=6, raw="2+2")
    with pytest.raises(ValidationError):
        match.start = 1


def test_token_constructors() -> None:
    """Test the number and operator helpers."""
    number = Token.number(3)
    assert number.is_number
    assert isinstance(number.value, float)
    plus = Token.operator("+")
    assert not plus.is_number
    assert plus.value == "+"


def test_token_invalid_type() -> None:
    """Test that an unknown token kind raises a validation error."""
    with pytest.raises(ValidationError):
        Token(type="variable", value="x")


def test_selection_allows_reversed_offsets() -> None:
    """Test that start > end is accepted: each offset is handled on its own."""
    selection = Selection(start=5, end=2)
    assert (selection.start, selection.end) == (5, 2)
    assert Selection() == Selection(start=0, end=0)


def test_replacement_and_patch_result() -> None:
    """Test that replacement and result models hold their values."""
    replacement = Replacement(match=Match(start=0, end=6, raw="2+2"), text="4")
    assert replacement.text == "4"
    result = PatchResult(text="4", selection=Selection(start=1, end=1), changed=True)
    assert result.changed


@pytest.mark.parametrize("kwargs", [
    {"max_depth": 0},
    {"max_depth": 500},
    {"precision": -1},
])
def test_engine_config_bounds(kwargs) -> None:
    """Test that out-of-range settings raise a validation error."""
    with pytest.raises(ValidationError):
        EngineConfig(**kwargs)
