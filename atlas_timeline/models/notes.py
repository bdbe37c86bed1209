"""
Note and date models for Atlas Timeline.

A note carries one sparse AtlasDate: every temporal field is independently
optional, so a note may name a century without a millennium or a year without
anything else. The models never enforce consistency between fields.
"""

import time
import uuid
from enum import Enum
from typing import Any, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Level(str, Enum):
    """Granularity levels, broadest first."""

    ERA = "ERA"
    MILLENNIUM = "MILLENNIUM"
    CENTURY = "CENTURY"
    DECADE = "DECADE"
    YEAR = "YEAR"


LEVELS = (Level.ERA, Level.MILLENNIUM, Level.CENTURY, Level.DECADE, Level.YEAR)


class GroupLevel(str, Enum):
    """Grouping choices offered by the text export."""

    NONE = "NONE"
    ERA = "ERA"
    MILLENNIUM = "MILLENNIUM"
    CENTURY = "CENTURY"
    DECADE = "DECADE"


class RelativeEra(str, Enum):
    """Whether a year counts backward (AU) or forward (DU) from the Union."""

    AU = "AU"
    DU = "DU"


class AtlasDate(BaseModel):
    """
    A partially specified point on the Atlas calendar.
    """

    model_config = ConfigDict(populate_by_name=True)

    era: Optional[str] = Field(None, description="Free-text era name")
    millennium: Optional[int] = Field(None, description="Millennium number")
    century: Optional[int] = Field(None, description="Century number")
    decade: Optional[int] = Field(None, description="Decade number")
    year: Optional[int] = Field(None, description="Year number")
    month: Optional[int] = Field(None, description="1-based index into the calendar months")
    day: Optional[int] = Field(None, description="Day of the month")

    relative_era: RelativeEra = Field(
        RelativeEra.DU,
        alias="relativeEra",
        description="AU for years before the Union, DU for years after it"
    )

    @model_validator(mode="before")
    @classmethod
    def _infer_relative_era(cls, data: Any) -> Any:
        # Legacy records have no relative flag and encode "before" as a negative year.
        if isinstance(data, dict) and not (data.get("relativeEra") or data.get("relative_era")):
            data = dict(data)
            data.pop("relative_era", None)
            year = data.get("year")
            if isinstance(year, (int, float)) and year < 0:
                data["year"] = -year
                data["relativeEra"] = RelativeEra.AU
            else:
                data["relativeEra"] = RelativeEra.DU
        return data

    def field_for(self, level: Level) -> Any:
        """Return the single date field that corresponds to a granularity level."""
        return {
            Level.ERA: self.era,
            Level.MILLENNIUM: self.millennium,
            Level.CENTURY: self.century,
            Level.DECADE: self.decade,
            Level.YEAR: self.year,
        }[Level(level)]

    def is_empty(self) -> bool:
        """True when no temporal field is filled in."""
        return all(
            value is None or value == ""
            for value in (self.era, self.millennium, self.century, self.decade,
                          self.year, self.month, self.day)
        )


def _now_ms() -> int:
    return int(time.time() * 1000)


class Note(BaseModel):
    """
    A dated item on the timeline.

    The title is expected to be non-empty, but that is enforced by whoever
    creates the note (the CLI), not here: the engine must accept anything
    that was persisted.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Globally unique, immutable identifier"
    )

    title: str = Field(
        ...,
        description="Display title"
    )

    description: Optional[str] = Field(
        None,
        description="Optional long-form description"
    )

    date: AtlasDate = Field(
        default_factory=AtlasDate,
        description="The note's position on the calendar"
    )

    level: Level = Field(
        Level.YEAR,
        description="Granularity the note was recorded at"
    )

    images: List[str] = Field(
        default_factory=list,
        description="Image payloads (data URLs or paths)"
    )

    pinned: bool = Field(
        False,
        description="Whether the note is pinned for analysis"
    )

    weight: float = Field(
        1.0,
        description="Size of the note's marker; also orders notes inside a year"
    )

    created_at: int = Field(
        default_factory=_now_ms,
        alias="createdAt",
        description="Creation timestamp in milliseconds since the epoch"
    )

    tags: List[str] = Field(
        default_factory=list,
        description="Free-text tags in display order"
    )

    @field_validator("weight", mode="before")
    @classmethod
    def _default_weight(cls, value: Any) -> Any:
        if not value or (isinstance(value, (int, float)) and value <= 0):
            return 1.0
        return value

    @field_validator("images", "tags", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("pinned", mode="before")
    @classmethod
    def _none_as_false(cls, value: Any) -> Any:
        return False if value is None else value

    @property
    def tag_set(self) -> Set[str]:
        """Tags as a set, for order-insensitive matching."""
        return set(self.tags)

    def to_storage(self) -> dict:
        """Serialize to the persisted JSON mirror (camelCase keys)."""
        return self.model_dump(by_alias=True, mode="json")


class ExportOptions(BaseModel):
    """
    Options chosen in the export dialog.
    """

    include_description: bool = Field(
        True,
        description="Emit the description line of each note"
    )

    include_tags: bool = Field(
        False,
        description="Emit a 'Tags:' line for notes that have tags"
    )

    include_images: bool = Field(
        False,
        description="Reserved; the text export never renders images"
    )

    group_by: GroupLevel = Field(
        GroupLevel.NONE,
        description="Group notes under a header for this level"
    )
