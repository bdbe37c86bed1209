"""
Human-readable date labels.

Every function here is total: a field that is missing for the requested
level renders as an empty string, and the caller decides whether to show a
placeholder instead.
"""

from typing import Iterable, List, Optional

from ..models import AtlasDate, CalendarConfig, Level, RelativeEra


LABEL_SEPARATOR = " • "
BEFORE_UNION_SUFFIX = " a.U."

ROMAN_NUMERALS = [
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
]


def to_roman(number: int) -> str:
    """
    Convert a positive integer to Roman numerals.

    Zero and negative values have no Roman form and come back as plain
    decimals.
    """
    if number <= 0:
        return str(number)
    result = []
    for value, symbol in ROMAN_NUMERALS:
        while number >= value:
            result.append(symbol)
            number -= value
    return "".join(result)


def format_date(date: AtlasDate, calendar: CalendarConfig, level: Level) -> str:
    """
    Render one level of a date.

    Args:
        date: The date to render
        calendar: Active calendar configuration
        level: Which single level to render

    Returns:
        The label for that level, or "" when the field is absent
    """
    level = Level(level)
    if level == Level.ERA:
        return date.era or ""
    if level == Level.MILLENNIUM:
        return f"{date.millennium}º milênio" if date.millennium is not None else ""
    if level == Level.CENTURY:
        return f"Século {date.century} ({to_roman(date.century)})" if date.century is not None else ""
    if level == Level.DECADE:
        return f"Década de {date.decade}" if date.decade is not None else ""
    if date.year is None:
        return ""
    # Only years before the Union carry a suffix
    suffix = BEFORE_UNION_SUFFIX if date.relative_era == RelativeEra.AU else ""
    return f"{date.year}{suffix}"


def format_day_month(date: AtlasDate, calendar: CalendarConfig) -> str:
    """
    Render the day and month refinement, e.g. "12 de Vera".

    A month index with no matching calendar entry drops the month name.
    """
    if date.month is None and date.day is None:
        return ""
    day = str(date.day) if date.day else "Dia ?"
    month_name = calendar.month_name(date.month)
    if not month_name:
        return day
    return f"{day} de {month_name}"


def format_full(date: AtlasDate, calendar: CalendarConfig,
                levels: Optional[Iterable[Level]] = None,
                include_day_month: bool = True) -> str:
    """
    Compose a multi-level label from the non-empty fragments.

    Args:
        date: The date to render
        calendar: Active calendar configuration
        levels: Levels to include, broadest first (defaults to all five)
        include_day_month: Append the day/month fragment when present

    Returns:
        Fragments joined with " • "
    """
    if levels is None:
        levels = (Level.ERA, Level.MILLENNIUM, Level.CENTURY, Level.DECADE, Level.YEAR)
    fragments: List[str] = [format_date(date, calendar, level) for level in levels]
    if include_day_month:
        fragments.append(format_day_month(date, calendar))
    return LABEL_SEPARATOR.join(fragment for fragment in fragments if fragment)
