"""
Batch parsing of file keys from filenames.

The key types themselves never log. This module is where unrecognized names
found in a listing are reported.
"""
from __future__ import annotations

import logging
import os
from typing import Iterable

from legend_data.core.domain.errors import FormatError
from legend_data.core.domain.filekey import FileKey

LOGGER = logging.getLogger(__name__)


def parse_file_keys(
    names: Iterable[str | os.PathLike[str]],
    *,
    strict: bool = True,
) -> list[FileKey]:
    """
    Parse file keys from filenames or paths and return them sorted.

    In strict mode the first unrecognized name raises ``FormatError``.
    Otherwise unrecognized names are logged and skipped.
    """
    keys: list[FileKey] = []

    for name in names:
        try:
            keys.append(FileKey.parse(name))
        except FormatError as exc:
            if strict:
                raise
            LOGGER.warning(
                "Skipping unrecognized file name %s: %s",
                os.fspath(name),
                exc.reason.value,
            )

    keys.sort()
    return keys
