"""Key selection configuration model.

A ``KeySelection`` describes which file keys a consumer wants, e.g. as read
from a JSON / property configuration::

    "selection": {
      "setup": "l200",
      "period": "p02",
      "category": "cal",
      "start": "20221201T000000Z",
      "end": "20230101T000000Z"
    }

Every filter is optional; an empty selection matches every key.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, model_validator

from legend_data.core.domain.filekey import (
    DataCategory,
    DataPeriod,
    DataRun,
    ExpSetup,
    FileKey,
    Timestamp,
)

LOGGER = logging.getLogger(__name__)


class KeySelection(BaseModel):
    """Filter over file keys with an optional half-open time window ``[start, end)``."""

    setup: ExpSetup | None = None
    period: DataPeriod | None = None
    run: DataRun | None = None
    category: DataCategory | None = None

    start: Timestamp | None = None
    end: Timestamp | None = None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, selection_obj: dict[str, Any]) -> KeySelection:
        """Create a KeySelection instance from a JSON-compatible object."""
        return cls.model_validate(selection_obj)

    @model_validator(mode="after")
    def validate_time_window(self) -> KeySelection:
        if self.start is not None and self.end is not None and self.start >= self.end:
            raise ValueError(f"start ({self.start}) must be before end ({self.end})")
        return self

    def matches(self, key: FileKey) -> bool:
        """Return True if ``key`` passes every configured filter."""
        if self.setup is not None and key.setup != self.setup:
            return False
        if self.period is not None and key.period != self.period:
            return False
        if self.run is not None and key.run != self.run:
            return False
        if self.category is not None and key.category != self.category:
            return False
        if self.start is not None and key.time < self.start:
            return False
        if self.end is not None and key.time >= self.end:
            return False
        return True

    def select(self, keys: Iterable[FileKey]) -> list[FileKey]:
        """Return the matching keys in canonical key order."""
        candidates = list(keys)
        selected = sorted(key for key in candidates if self.matches(key))
        LOGGER.debug(
            "key_selection",
            extra={"selected": len(selected), "total": len(candidates)},
        )
        return selected
