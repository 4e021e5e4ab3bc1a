"""Public API for the legend_data package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------
from legend_data.core.domain.errors import FormatError, FormatReason

# ----------------------------------------------------------------------
# File keys and their components
# ----------------------------------------------------------------------
from legend_data.core.domain.filekey import (
    DataCategory,
    DataPeriod,
    DataRun,
    ExpSetup,
    FileKey,
    Timestamp,
    is_filekey_string,
    is_timestamp_string,
    timestamp_to_unix,
)

# ----------------------------------------------------------------------
# Selection API (used by consumers)
# ----------------------------------------------------------------------
from legend_data.core.selection.filenames import parse_file_keys
from legend_data.core.selection.key_selection import KeySelection

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Keys
    "ExpSetup",
    "DataPeriod",
    "DataRun",
    "DataCategory",
    "Timestamp",
    "FileKey",
    "is_filekey_string",
    "is_timestamp_string",
    "timestamp_to_unix",

    # Errors
    "FormatError",
    "FormatReason",

    # Selection
    "KeySelection",
    "parse_file_keys",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("legend-data")
except PackageNotFoundError:
    __version__ = "0.0.0"
