"""
Semantic test: explicit conversions and component projection.

Invariant:
from_value on an instance of the same type is the identity. Every component
can be projected out of a FileKey by type. Unsupported input types raise
TypeError instead of being coerced.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from legend_data.core.domain.filekey import (
    DataCategory,
    DataPeriod,
    DataRun,
    ExpSetup,
    FileKey,
    Timestamp,
)

KEY = FileKey.parse("l200-p02-r006-cal-20221226T200846Z")


@pytest.mark.parametrize(
    "value",
    [
        ExpSetup("l200"),
        DataPeriod(2),
        DataRun(6),
        DataCategory("cal"),
        Timestamp(1672085326),
        KEY,
    ],
)
def test_from_value_on_same_type_is_identity(value) -> None:
    assert type(value).from_value(value) is value


def test_from_value_parses_strings() -> None:
    assert ExpSetup.from_value("l200") == ExpSetup("l200")
    assert DataPeriod.from_value("p02") == DataPeriod(2)
    assert DataRun.from_value("r006") == DataRun(6)
    assert DataCategory.from_value("cal") == DataCategory("cal")
    assert Timestamp.from_value("20221226T200846Z") == Timestamp(1672085326)
    assert FileKey.from_value("l200-p02-r006-cal-20221226T200846Z") == KEY
    assert FileKey.from_value(Path("l200-p02-r006-cal-20221226T200846Z.lh5")) == KEY


def test_from_value_takes_backing_values() -> None:
    assert DataPeriod.from_value(2) == DataPeriod(2)
    assert DataRun.from_value(6) == DataRun(6)
    assert Timestamp.from_value(1672085326) == Timestamp(1672085326)
    assert Timestamp.from_value(datetime(2022, 12, 26, 20, 8, 46, tzinfo=timezone.utc)) == Timestamp(1672085326)


def test_from_value_projects_file_keys() -> None:
    assert ExpSetup.from_value(KEY) == ExpSetup("l200")
    assert DataPeriod.from_value(KEY) == DataPeriod(2)
    assert DataRun.from_value(KEY) == DataRun(6)
    assert DataCategory.from_value(KEY) == DataCategory("cal")
    assert Timestamp.from_value(KEY) == Timestamp(1672085326)


def test_component_projection_by_type() -> None:
    assert KEY.component(ExpSetup) is KEY.setup
    assert KEY.component(DataPeriod) is KEY.period
    assert KEY.component(DataRun) is KEY.run
    assert KEY.component(DataCategory) is KEY.category
    assert KEY.component(Timestamp) is KEY.time
    assert KEY.to_datetime() == datetime(2022, 12, 26, 20, 8, 46, tzinfo=timezone.utc)


def test_component_projection_rejects_unknown_types() -> None:
    with pytest.raises(TypeError):
        KEY.component(str)


@pytest.mark.parametrize(
    ("target", "value"),
    [
        (ExpSetup, 200),
        (DataPeriod, 2.0),
        (DataPeriod, True),
        (DataRun, None),
        (DataCategory, b"cal"),
        (Timestamp, 1.5),
        (FileKey, 42),
    ],
)
def test_unsupported_types_raise_type_error(target, value) -> None:
    with pytest.raises(TypeError):
        target.from_value(value)


def test_components_are_immutable() -> None:
    with pytest.raises(AttributeError):
        KEY.run = DataRun(7)  # type: ignore[misc]
