"""LEGEND file keys and their components.

A file key names one data file by experimental setup, data-taking period,
run, data category and UTC start time::

    l200-p02-r006-cal-20221226T200846Z

Every component is an immutable value type that parses from and prints to
its own canonical string form. ``FileKey`` aggregates the five components and
orders lexicographically over them in that field order.

Each type offers three ways in:

- ``T(...)``: the plain constructor, trusted and unvalidated.
- ``T.parse(s)``: the validating string parser.
- ``T.from_value(x)``: explicit conversion from anything convertible to ``T``.
"""

# pylint: disable=missing-function-docstring
from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from fractions import Fraction
from typing import Any, ClassVar, TypeVar

from pydantic import GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema

from legend_data.core.domain.errors import FormatError, FormatReason

# ---------------------------------------------------------------------------
# Grammar constants
# ---------------------------------------------------------------------------

SETUP_PATTERN = re.compile(r"[a-z][a-z0-9]*")
PERIOD_PATTERN = re.compile(r"p([0-9]{2})")
RUN_PATTERN = re.compile(r"r([0-9]{3})")
CATEGORY_PATTERN = re.compile(r"[a-z]+")
TIMESTAMP_PATTERN = re.compile(r"([0-9]{4})([0-9]{2})([0-9]{2})T([0-9]{2})([0-9]{2})([0-9]{2})Z")

FILEKEY_PATTERN = re.compile(
    r"([a-z][a-z0-9]*)-(p[0-9]{2})-(r[0-9]{3})-([a-z]+)-([0-9]{8}T[0-9]{6}Z)"
)

# Filenames may carry a "-suffix" or a file extension after the timestamp.
FILEKEY_RELAXED_PATTERN = re.compile(
    r"([a-z][a-z0-9]*)-(p[0-9]{2})-(r[0-9]{3})-([a-z]+)-([0-9]{8}T[0-9]{6}Z)([-.].*)?"
)

SETUP_MIN_LENGTH = 3
SETUP_MAX_LENGTH = 8

CATEGORY_MIN_LENGTH = 3
CATEGORY_MAX_LENGTH = 6

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

C = TypeVar("C", bound="_KeyComponent")


def is_timestamp_string(s: str) -> bool:
    """Return True if ``s`` has the shape of a canonical timestamp."""
    return TIMESTAMP_PATTERN.fullmatch(s) is not None


def is_filekey_string(s: str) -> bool:
    """Return True if ``s`` is exactly a canonical file key (no path, no suffix)."""
    return FILEKEY_PATTERN.fullmatch(s) is not None


def _check_label(
    s: str,
    pattern: re.Pattern[str],
    min_length: int,
    max_length: int,
    noun: str,
) -> str:
    if pattern.fullmatch(s) is None:
        raise FormatError(
            FormatReason.INVALID_FORMAT,
            s,
            f'String "{s}" does not look like a valid LEGEND {noun}',
        )
    if len(s) < min_length:
        raise FormatError(
            FormatReason.TOO_SHORT,
            s,
            f'String "{s}" is too short to be a valid LEGEND {noun}',
        )
    if len(s) > max_length:
        raise FormatError(
            FormatReason.TOO_LONG,
            s,
            f'String "{s}" is too long to be a valid LEGEND {noun}',
        )
    return s


def _parse_number(s: str, pattern: re.Pattern[str], noun: str) -> int:
    match = pattern.fullmatch(s)
    if match is None:
        raise FormatError(
            FormatReason.INVALID_FORMAT,
            s,
            f'String "{s}" does not look like a valid LEGEND {noun}',
        )
    return int(match.group(1))


# ---------------------------------------------------------------------------
# Calendar arithmetic
# ---------------------------------------------------------------------------
#
# Proleptic Gregorian calendar on plain integers, so that every Unix time has
# a civil date (including year 0 and years past 9999, which datetime lacks).

_SECONDS_PER_DAY = 86_400
_DAYS_PER_ERA = 146_097  # 400 years
_EPOCH_DAY_SHIFT = 719_468  # days from 0000-03-01 to 1970-01-01


def _is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def _days_in_month(year: int, month: int) -> int:
    if month == 2:
        return 29 if _is_leap_year(year) else 28
    return 30 if month in (4, 6, 9, 11) else 31


def _days_from_civil(year: int, month: int, day: int) -> int:
    year -= month <= 2
    era = year // 400
    year_of_era = year - era * 400
    day_of_year = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    day_of_era = year_of_era * 365 + year_of_era // 4 - year_of_era // 100 + day_of_year
    return era * _DAYS_PER_ERA + day_of_era - _EPOCH_DAY_SHIFT


def _civil_from_days(days: int) -> tuple[int, int, int]:
    days += _EPOCH_DAY_SHIFT
    era = days // _DAYS_PER_ERA
    day_of_era = days - era * _DAYS_PER_ERA
    year_of_era = (
        day_of_era - day_of_era // 1460 + day_of_era // 36524 - day_of_era // 146096
    ) // 365
    day_of_year = day_of_era - (365 * year_of_era + year_of_era // 4 - year_of_era // 100)
    shifted_month = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * shifted_month + 2) // 5 + 1
    month = shifted_month + 3 if shifted_month < 10 else shifted_month - 9
    year = year_of_era + era * 400 + (month <= 2)
    return year, month, day


def _unsupported(target: type, value: Any) -> TypeError:
    return TypeError(
        f"Cannot convert value of type {type(value).__name__} to {target.__name__}"
    )


# ---------------------------------------------------------------------------
# pydantic integration
# ---------------------------------------------------------------------------


class _KeyComponent:
    """Lets key types be used as pydantic model fields.

    Fields take an instance or its canonical string, matching ``json_schema``;
    output is the canonical string.
    """

    __slots__ = ()

    json_schema: ClassVar[dict[str, Any]] = {"type": "string"}

    @classmethod
    def parse(cls: type[C], s: str) -> C:
        raise NotImplementedError

    @classmethod
    def _pydantic_validate(cls: type[C], value: Any) -> C:
        # pydantic only reports ValueError / AssertionError as validation errors
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.parse(value)
        raise ValueError(
            f"Expected a {cls.__name__} or its canonical string, got {type(value).__name__}"
        )

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,
        handler: GetCoreSchemaHandler,
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._pydantic_validate,
            serialization=core_schema.to_string_ser_schema(),
        )

    @classmethod
    def __get_pydantic_json_schema__(
        cls,
        schema: core_schema.CoreSchema,
        handler: GetJsonSchemaHandler,
    ) -> JsonSchemaValue:
        return dict(cls.json_schema)


# ---------------------------------------------------------------------------
# Leaf components
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True)
class ExpSetup(_KeyComponent):
    """A LEGEND experimental setup like ``l200``.

    Example:
        >>> ExpSetup.parse("l200") == ExpSetup("l200")
        True
        >>> str(ExpSetup("l200"))
        'l200'
    """

    json_schema: ClassVar[dict[str, Any]] = {
        "type": "string",
        "pattern": "^[a-z][a-z0-9]*$",
        "minLength": SETUP_MIN_LENGTH,
        "maxLength": SETUP_MAX_LENGTH,
    }

    label: str

    @classmethod
    def parse(cls, s: str) -> ExpSetup:
        """Validate ``s`` as a setup name.

        Checks run in order (format, too short, too long) and the first
        failing one raises ``FormatError``.
        """
        return cls(_check_label(s, SETUP_PATTERN, SETUP_MIN_LENGTH, SETUP_MAX_LENGTH, "setup name"))

    @classmethod
    def from_value(cls, value: ExpSetup | FileKey | str) -> ExpSetup:
        if isinstance(value, ExpSetup):
            return value
        if isinstance(value, FileKey):
            return value.setup
        if isinstance(value, str):
            return cls.parse(value)
        raise _unsupported(cls, value)

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, slots=True, order=True)
class DataPeriod(_KeyComponent):
    """A LEGEND data-taking period.

    Example:
        >>> str(DataPeriod(2))
        'p02'
        >>> DataPeriod.parse("p02").no
        2

    Numbers of three or more digits print unpadded (``DataPeriod(100)`` is
    ``p100``) and such strings do not parse back.
    """

    json_schema: ClassVar[dict[str, Any]] = {"type": "string", "pattern": "^p[0-9]{2}$"}

    no: int

    @classmethod
    def parse(cls, s: str) -> DataPeriod:
        return cls(_parse_number(s, PERIOD_PATTERN, "data-period name"))

    @classmethod
    def from_value(cls, value: DataPeriod | FileKey | int | str) -> DataPeriod:
        if isinstance(value, DataPeriod):
            return value
        if isinstance(value, FileKey):
            return value.period
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise _unsupported(cls, value)

    def __str__(self) -> str:
        return f"p{self.no:02d}"


@dataclass(frozen=True, slots=True, order=True)
class DataRun(_KeyComponent):
    """A LEGEND data-taking run.

    Example:
        >>> str(DataRun(6))
        'r006'
        >>> DataRun.parse("r006") == DataRun(6)
        True
    """

    json_schema: ClassVar[dict[str, Any]] = {"type": "string", "pattern": "^r[0-9]{3}$"}

    no: int

    @classmethod
    def parse(cls, s: str) -> DataRun:
        return cls(_parse_number(s, RUN_PATTERN, "data-run name"))

    @classmethod
    def from_value(cls, value: DataRun | FileKey | int | str) -> DataRun:
        if isinstance(value, DataRun):
            return value
        if isinstance(value, FileKey):
            return value.run
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise _unsupported(cls, value)

    def __str__(self) -> str:
        return f"r{self.no:03d}"


@dataclass(frozen=True, slots=True, order=True)
class DataCategory(_KeyComponent):
    """A LEGEND data category (DAQ / measuring mode) like ``cal`` or ``phy``."""

    json_schema: ClassVar[dict[str, Any]] = {
        "type": "string",
        "pattern": "^[a-z]+$",
        "minLength": CATEGORY_MIN_LENGTH,
        "maxLength": CATEGORY_MAX_LENGTH,
    }

    label: str

    @classmethod
    def parse(cls, s: str) -> DataCategory:
        return cls(
            _check_label(s, CATEGORY_PATTERN, CATEGORY_MIN_LENGTH, CATEGORY_MAX_LENGTH, "data category")
        )

    @classmethod
    def from_value(cls, value: DataCategory | FileKey | str) -> DataCategory:
        if isinstance(value, DataCategory):
            return value
        if isinstance(value, FileKey):
            return value.category
        if isinstance(value, str):
            return cls.parse(value)
        raise _unsupported(cls, value)

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, slots=True, order=True)
class Timestamp(_KeyComponent):
    """A UTC instant with one-second resolution, stored as Unix time.

    Example:
        >>> Timestamp.parse("20221226T200846Z").unixtime
        1672085326
        >>> str(Timestamp(1672085326))
        '20221226T200846Z'
    """

    json_schema: ClassVar[dict[str, Any]] = {
        "type": "string",
        "pattern": "^[0-9]{8}T[0-9]{6}Z$",
    }

    unixtime: int

    @classmethod
    def from_datetime(cls, dt: datetime) -> Timestamp:
        """Convert ``dt`` to the nearest whole second (ties to even).

        Naive datetimes are taken to be UTC.
        """
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        delta = dt - _UNIX_EPOCH
        micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
        return cls(round(Fraction(micros, 1_000_000)))

    @classmethod
    def parse(cls, s: str) -> Timestamp:
        """Parse a canonical timestamp, or take the time of a canonical file key.

        Any four-digit year from 0000 to 9999 is accepted; month, day and time
        of day must exist in the proleptic Gregorian calendar.
        """
        match = TIMESTAMP_PATTERN.fullmatch(s)
        if match is not None:
            year, month, day, hour, minute, second = (int(g) for g in match.groups())
            if not (
                1 <= month <= 12
                and 1 <= day <= _days_in_month(year, month)
                and hour < 24
                and minute < 60
                and second < 60
            ):
                raise FormatError(
                    FormatReason.INVALID_FORMAT,
                    s,
                    f'String "{s}" is not a valid calendar date and time',
                )
            days = _days_from_civil(year, month, day)
            return cls(days * _SECONDS_PER_DAY + hour * 3600 + minute * 60 + second)
        if is_filekey_string(s):
            return FileKey.parse(s).time
        raise FormatError(
            FormatReason.INVALID_FORMAT,
            s,
            f'String "{s}" doesn\'t seem to be or contain a LEGEND-compatible timestamp',
        )

    @classmethod
    def from_value(cls, value: Timestamp | FileKey | datetime | int | str) -> Timestamp:
        if isinstance(value, Timestamp):
            return value
        if isinstance(value, FileKey):
            return value.time
        if isinstance(value, str):
            return cls.parse(value)
        if isinstance(value, datetime):
            return cls.from_datetime(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise _unsupported(cls, value)

    def to_datetime(self) -> datetime:
        """Return the instant as a timezone-aware UTC datetime.

        Raises ``OverflowError`` outside the years 1 to 9999 that datetime supports.
        """
        return _UNIX_EPOCH + timedelta(seconds=self.unixtime)

    def __str__(self) -> str:
        # Years outside 0000..9999 print wider (or signed) and do not parse back.
        days, seconds = divmod(self.unixtime, _SECONDS_PER_DAY)
        year, month, day = _civil_from_days(days)
        hour, seconds = divmod(seconds, 3600)
        minute, second = divmod(seconds, 60)
        return f"{year:04d}{month:02d}{day:02d}T{hour:02d}{minute:02d}{second:02d}Z"


def timestamp_to_unix(value: Timestamp | FileKey | datetime | int | str) -> int:
    """Return Unix seconds for anything convertible to a ``Timestamp``."""
    return Timestamp.from_value(value).unixtime


# ---------------------------------------------------------------------------
# File key
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, order=True, repr=False)
class FileKey(_KeyComponent):
    """Key of a single LEGEND data file.

    Keys sort by setup, then period, run, category and finally time.

    Example:
        >>> key = FileKey.parse("l200-p02-r006-cal-20221226T200846Z")
        >>> key.period
        DataPeriod(no=2)
        >>> str(key)
        'l200-p02-r006-cal-20221226T200846Z'
    """

    json_schema: ClassVar[dict[str, Any]] = {
        "type": "string",
        "pattern": "^[a-z][a-z0-9]*-p[0-9]{2}-r[0-9]{3}-[a-z]+-[0-9]{8}T[0-9]{6}Z$",
    }

    setup: ExpSetup
    period: DataPeriod
    run: DataRun
    category: DataCategory
    time: Timestamp

    @classmethod
    def parse(cls, s: str | os.PathLike[str]) -> FileKey:
        """Parse a file key from a key string, a filename or a path.

        Only the last path component is considered; a path ending in a
        separator has an empty last component and is rejected. A trailing ``-suffix`` or
        file extension after the timestamp is accepted and dropped.
        """
        raw = os.fspath(s)
        match = FILEKEY_RELAXED_PATTERN.fullmatch(os.path.basename(raw))
        if match is None:
            raise FormatError(
                FormatReason.INVALID_FORMAT,
                raw,
                f'String "{raw}" does not represent a valid file key or a compatible filename',
            )
        setup, period, run, category, time, _suffix = match.groups()
        return cls(
            ExpSetup.parse(setup),
            DataPeriod.parse(period),
            DataRun.parse(run),
            DataCategory.parse(category),
            Timestamp.parse(time),
        )

    @classmethod
    def from_value(cls, value: FileKey | str | os.PathLike[str]) -> FileKey:
        if isinstance(value, FileKey):
            return value
        if isinstance(value, (str, os.PathLike)):
            return cls.parse(value)
        raise _unsupported(cls, value)

    def component(self, component_type: type[C]) -> C:
        """Return the component of the given type, e.g. ``key.component(DataRun)``."""
        field_name = _COMPONENT_FIELDS.get(component_type)
        if field_name is None:
            raise TypeError(f"FileKey has no component of type {component_type.__name__}")
        return getattr(self, field_name)

    @property
    def period_str(self) -> str:
        return str(self.period)

    @property
    def run_str(self) -> str:
        return str(self.run)

    def to_datetime(self) -> datetime:
        return self.time.to_datetime()

    def __str__(self) -> str:
        return "-".join(
            str(part)
            for part in (self.setup, self.period, self.run, self.category, self.time)
        )

    def __repr__(self) -> str:
        return f'FileKey("{self}")'


_COMPONENT_FIELDS: dict[type, str] = {
    ExpSetup: "setup",
    DataPeriod: "period",
    DataRun: "run",
    DataCategory: "category",
    Timestamp: "time",
}
