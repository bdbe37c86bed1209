"""
Calendar configuration models for Atlas Timeline.

The calendar describes the fictional week, the named months and the scale
constants of the world. It is only consulted to render month names; it never
takes part in ordering or grouping.
"""

from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field


DEFAULT_MONTH_DAYS = 30


class MonthSpec(BaseModel):
    """
    A single named month and how many days it has.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Display name of the month"
    )

    days: int = Field(
        DEFAULT_MONTH_DAYS,
        ge=1,
        description="Number of days in the month"
    )


class CalendarConfig(BaseModel):
    """
    Complete calendar configuration.

    Instances are immutable: every edit produces a new, complete configuration
    through `with_updates`, mirroring how the settings dialog replaces the
    whole calendar at once.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    days_of_week: Tuple[str, ...] = Field(
        default=("Dya", "Lun", "Var", "Tyr", "Kyr", "Saa", "Nox"),
        alias="daysOfWeek",
        description="Ordered week-day names"
    )

    months: Tuple[MonthSpec, ...] = Field(
        default_factory=lambda: tuple(
            MonthSpec(name=name, days=DEFAULT_MONTH_DAYS)
            for name in ("Lume", "Vera", "Nara", "Siri", "Dora", "Mira",
                         "Kora", "Tala", "Vion", "Zala", "Orin", "Ysar")
        ),
        description="Ordered months; notes reference them by 1-based index"
    )

    years_per_century: int = Field(
        100,
        ge=1,
        alias="yearsPerCentury",
        description="How many years make a century"
    )

    centuries_per_millennium: int = Field(
        10,
        ge=1,
        alias="centuriesPerMillennium",
        description="How many centuries make a millennium"
    )

    decades_per_century: int = Field(
        10,
        ge=1,
        alias="decadesPerCentury",
        description="How many decades make a century"
    )

    def month_name(self, index: Optional[int]) -> Optional[str]:
        """
        Resolve a 1-based month index to its name.

        Args:
            index: Month index as stored on a date

        Returns:
            The month name, or None when the index has no matching month
        """
        if index is None or index < 1 or index > len(self.months):
            return None
        return self.months[index - 1].name

    def with_updates(self, **changes) -> "CalendarConfig":
        """
        Return a new configuration with the given fields replaced.

        Fields passed as None keep their current value.
        """
        data = self.model_dump()
        data.update({key: value for key, value in changes.items() if value is not None})
        return CalendarConfig.model_validate(data)

    def to_storage(self) -> dict:
        """Serialize to the persisted JSON mirror (camelCase keys)."""
        return self.model_dump(by_alias=True, mode="json")


def parse_days(text: str) -> List[str]:
    """Parse a comma-separated list of week-day names."""
    return [part.strip() for part in text.split(",") if part.strip()]


def parse_months(text: str) -> List[MonthSpec]:
    """
    Parse the settings text form "Name:Days, Name:Days".

    A missing or non-numeric day count falls back to 30 days.
    """
    months = []
    for pair in text.split(","):
        pair = pair.strip()
        if not pair:
            continue
        name, _, days = pair.partition(":")
        name = name.strip()
        if not name:
            continue
        try:
            day_count = int(days.strip())
        except ValueError:
            day_count = DEFAULT_MONTH_DAYS
        if day_count < 1:
            day_count = DEFAULT_MONTH_DAYS
        months.append(MonthSpec(name=name, days=day_count))
    return months


DEFAULT_CALENDAR = CalendarConfig()
