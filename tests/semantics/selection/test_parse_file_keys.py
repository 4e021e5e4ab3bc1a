"""
Semantic test: batch parsing of filenames.

Invariant:
Strict mode raises on the first unrecognized name. Lenient mode logs a
warning per unrecognized name and skips it. Results are sorted.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from legend_data.core.domain.errors import FormatError, FormatReason
from legend_data.core.selection.filenames import parse_file_keys

NAMES = [
    "raw/l200-p02-r007-cal-20221231T120000Z-tier_raw.lh5",
    Path("raw") / "l200-p02-r006-cal-20221226T200846Z-tier_raw.lh5",
    "raw/README.md",
]


def test_strict_mode_raises_on_unrecognized_name() -> None:
    with pytest.raises(FormatError) as exc_info:
        parse_file_keys(NAMES)

    assert exc_info.value.reason == FormatReason.INVALID_FORMAT
    assert exc_info.value.value == "raw/README.md"


def test_lenient_mode_skips_and_logs(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="legend_data.core.selection.filenames"):
        keys = parse_file_keys(NAMES, strict=False)

    assert [str(k) for k in keys] == [
        "l200-p02-r006-cal-20221226T200846Z",
        "l200-p02-r007-cal-20221231T120000Z",
    ]
    assert len(caplog.records) == 1
    assert "raw/README.md" in caplog.records[0].getMessage()


def test_empty_input_gives_empty_list() -> None:
    assert parse_file_keys([]) == []
