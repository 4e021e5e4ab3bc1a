"""
Semantic test: ExpSetup validation.

Invariant:
A setup name matches [a-z][a-z0-9]* and has 3 to 8 characters. The format
check runs first, then the short check, then the long check.
"""

from __future__ import annotations

import pytest

from legend_data.core.domain.errors import FormatError, FormatReason
from legend_data.core.domain.filekey import ExpSetup


def test_valid_setup_parses_and_prints_verbatim() -> None:
    setup = ExpSetup.parse("l200")

    assert setup == ExpSetup("l200")
    assert setup.label == "l200"
    assert str(setup) == "l200"


@pytest.mark.parametrize("label", ["abc", "abcdefgh", "l60", "gerda2"])
def test_length_bounds_are_inclusive(label: str) -> None:
    assert str(ExpSetup.parse(label)) == label


def test_too_short_setup_is_rejected() -> None:
    with pytest.raises(FormatError) as exc_info:
        ExpSetup.parse("ab")

    assert exc_info.value.reason == FormatReason.TOO_SHORT
    assert exc_info.value.value == "ab"
    assert '"ab"' in str(exc_info.value)


def test_too_long_setup_is_rejected() -> None:
    with pytest.raises(FormatError) as exc_info:
        ExpSetup.parse("abcdefghi")

    assert exc_info.value.reason == FormatReason.TOO_LONG


@pytest.mark.parametrize("label", ["L200", "2l00", "l-200", "", "l200\n"])
def test_bad_charset_is_invalid_format(label: str) -> None:
    with pytest.raises(FormatError) as exc_info:
        ExpSetup.parse(label)

    assert exc_info.value.reason == FormatReason.INVALID_FORMAT


def test_format_check_runs_before_length_checks() -> None:
    # Both malformed and too short: the format error wins.
    with pytest.raises(FormatError) as exc_info:
        ExpSetup.parse("A")

    assert exc_info.value.reason == FormatReason.INVALID_FORMAT


def test_format_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        ExpSetup.parse("ab")
