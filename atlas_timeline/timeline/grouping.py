"""
Grouping engine for the timeline.

Two passes live here:

- `group_notes` is the flat pass behind the main timeline. It buckets notes
  by a cumulative key (era, millennium, century, ... down to the zoom level)
  so identically numbered periods under different eras never merge.
- `expand` is the recursive pass behind a group's drill-down view. It walks a
  fixed descent chain below the root level, partitioning by one field at a
  time, and ends in per-year buckets of notes.

Both order sibling groups by comparing each group's first note, which means
ordering only ever looks at years (see `compare.py`).
"""

from functools import cmp_to_key
from typing import Dict, Iterator, List, Sequence

from pydantic import BaseModel, Field

from ..models import CalendarConfig, DEFAULT_CALENDAR, Level, Note
from .compare import compare_notes, sort_notes
from .formatting import format_date


PLACEHOLDER = "?"
KEY_SEPARATOR = "::"
NO_ERA_KEY = "(Sem Era)"
PERIOD_FALLBACK_LABEL = "(período)"
DIRECT_BUCKET_KEY = "direct"

DESCENT_CHAINS: Dict[Level, List[Level]] = {
    Level.ERA: [Level.MILLENNIUM, Level.CENTURY, Level.DECADE, Level.YEAR],
    Level.MILLENNIUM: [Level.CENTURY, Level.DECADE, Level.YEAR],
    Level.CENTURY: [Level.DECADE, Level.YEAR],
    # Decade is repeated so a decade-rooted view mirrors the flat pass, which
    # buckets DECADE zoom by century.
    Level.DECADE: [Level.DECADE, Level.YEAR],
    Level.YEAR: [],
}


class NoteGroup(BaseModel):
    """One bucket of the flat pass."""

    key: str = Field(
        ...,
        description="Cumulative grouping key, e.g. 'Ouro::2::?'"
    )

    notes: List[Note] = Field(
        default_factory=list,
        description="Members of the group in chronological order"
    )


class YearBucket(BaseModel):
    """
    A leaf bucket of the recursive pass.

    `direct` buckets hold notes recorded at YEAR granularity, rendered as a
    flat list without a year header.
    """

    key: str = Field(
        ...,
        description="Relative flag and year, e.g. 'AU::3', or 'direct'"
    )

    label: str = Field(
        "",
        description="Formatted year header; empty for direct buckets"
    )

    notes: List[Note] = Field(
        default_factory=list,
        description="Notes of the bucket, sorted by weight"
    )

    direct: bool = Field(
        False,
        description="Whether the notes render without a year header"
    )


class PeriodNode(BaseModel):
    """A labeled period header in the recursive pass."""

    level: Level = Field(..., description="Level this node partitions on")

    key: str = Field(..., description="Value of the level's field, or '?'")

    node_id: str = Field(
        ...,
        description="Stable id for expand/collapse state: level, key, century, millennium and era"
    )

    label: str = Field(..., description="Formatted label of the first member")

    notes: List[Note] = Field(
        default_factory=list,
        description="All notes under this period"
    )

    children: List['PeriodNode'] = Field(
        default_factory=list,
        description="Finer periods, empty at the end of the descent chain"
    )

    leaves: List[YearBucket] = Field(
        default_factory=list,
        description="Year buckets, filled only at the end of the descent chain"
    )


# Enable forward references for self-referencing model
PeriodNode.model_rebuild()


class TimelineTree(BaseModel):
    """
    Result of `expand`.

    When the root level has no descent chain, `nodes` is empty and the notes
    sit directly in `leaves`.
    """

    root_level: Level = Field(..., description="Level of the expanded group")

    nodes: List[PeriodNode] = Field(
        default_factory=list,
        description="Top-level periods below the root"
    )

    leaves: List[YearBucket] = Field(
        default_factory=list,
        description="Year buckets when the root has no descent chain"
    )


def _text(value) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    return str(value)


def build_key(note: Note, level: Level) -> str:
    """
    Cumulative grouping key for a note down to `level`.

    Every coarser field takes part in the key; absent fields become "?".
    """
    level = Level(level)
    date = note.date
    if level == Level.ERA:
        return date.era or NO_ERA_KEY
    parts = [date.era, date.millennium, date.century, date.decade, date.year]
    depth = {
        Level.MILLENNIUM: 2,
        Level.CENTURY: 3,
        Level.DECADE: 4,
        Level.YEAR: 5,
    }[level]
    return KEY_SEPARATOR.join(_text(part) for part in parts[:depth])


def group_key_level(level: Level) -> Level:
    """Level whose key the flat pass uses; DECADE zoom groups by century."""
    level = Level(level)
    return Level.CENTURY if level == Level.DECADE else level


def header_level(level: Level) -> Level:
    """Level used to label flat-pass groups; DECADE zoom shows the century."""
    return group_key_level(level)


def _order_by_first_member(buckets: Dict[str, List[Note]]) -> List[tuple]:
    # sorted() is stable, so ties stay in first-seen order
    return sorted(
        buckets.items(),
        key=cmp_to_key(lambda a, b: compare_notes(a[1][0], b[1][0]))
    )


def group_notes(notes: Sequence[Note], level: Level) -> List[NoteGroup]:
    """
    Flat pass: partition notes into ordered groups for a zoom level.

    Groups are ordered by their first member; members are sorted
    chronologically within each group.
    """
    key_level = group_key_level(level)
    buckets: Dict[str, List[Note]] = {}
    for note in notes:
        buckets.setdefault(build_key(note, key_level), []).append(note)

    return [
        NoteGroup(key=key, notes=sort_notes(members))
        for key, members in _order_by_first_member(buckets)
    ]


def group_label(group: NoteGroup, level: Level,
                calendar: CalendarConfig = DEFAULT_CALENDAR) -> str:
    """Header label for a flat-pass group."""
    if not group.notes:
        return PERIOD_FALLBACK_LABEL
    label = format_date(group.notes[0].date, calendar, header_level(level))
    return label or PERIOD_FALLBACK_LABEL


def marker_size(notes: Sequence[Note]) -> float:
    """Size of a group's timeline marker, grown by the total weight and capped at 42."""
    total_weight = sum(note.weight or 1 for note in notes)
    return min(42, 8 + total_weight * 4)


def _single_field_key(note: Note, level: Level) -> str:
    return _text(note.date.field_for(level))


def partition_by_level(notes: Sequence[Note], level: Level) -> List[NoteGroup]:
    """
    Partition by a single date field, ordering groups by their first member.

    Members keep their input order.
    """
    buckets: Dict[str, List[Note]] = {}
    for note in notes:
        buckets.setdefault(_single_field_key(note, level), []).append(note)
    return [NoteGroup(key=key, notes=members) for key, members in _order_by_first_member(buckets)]


def _by_weight(notes: Sequence[Note]) -> List[Note]:
    return sorted(notes, key=lambda note: note.weight or 1)


def aggregate_by_year(notes: Sequence[Note],
                      calendar: CalendarConfig = DEFAULT_CALENDAR) -> List[YearBucket]:
    """
    Leaf grouping: bucket notes by their relative-flag-qualified year.

    When the first note was recorded at YEAR granularity the whole list is
    returned as one flat `direct` bucket instead. Notes inside a bucket are
    sorted by weight.
    """
    if not notes:
        return []
    if notes[0].level == Level.YEAR:
        return [YearBucket(key=DIRECT_BUCKET_KEY, label="", notes=_by_weight(notes), direct=True)]

    buckets: Dict[str, List[Note]] = {}
    for note in notes:
        key = f"{note.date.relative_era.value}{KEY_SEPARATOR}{_text(note.date.year)}"
        buckets.setdefault(key, []).append(note)

    return [
        YearBucket(
            key=key,
            label=format_date(members[0].date, calendar, Level.YEAR),
            notes=_by_weight(members),
        )
        for key, members in _order_by_first_member(buckets)
    ]


def _node_id(level: Level, key: str, sample: Note) -> str:
    date = sample.date
    return ":".join([
        level.value, key, _text(date.century), _text(date.millennium), _text(date.era)
    ])


def _expand_chain(chain: List[Level], notes: Sequence[Note],
                  calendar: CalendarConfig) -> List[PeriodNode]:
    level, rest = chain[0], chain[1:]
    nodes = []
    for group in partition_by_level(notes, level):
        sample = group.notes[0]
        nodes.append(PeriodNode(
            level=level,
            key=group.key,
            node_id=_node_id(level, group.key, sample),
            label=format_date(sample.date, calendar, level),
            notes=group.notes,
            children=_expand_chain(rest, group.notes, calendar) if rest else [],
            leaves=[] if rest else aggregate_by_year(group.notes, calendar),
        ))
    return nodes


def expand(root_level: Level, notes: Sequence[Note],
           calendar: CalendarConfig = DEFAULT_CALENDAR) -> TimelineTree:
    """
    Recursive pass: build the drill-down tree below a root level.

    Args:
        root_level: Zoom level of the group being expanded
        notes: Notes of that group
        calendar: Active calendar configuration, used for labels

    Returns:
        A TimelineTree whose leaves hold every input note exactly once
    """
    root_level = Level(root_level)
    chain = DESCENT_CHAINS[root_level]
    if not chain:
        return TimelineTree(root_level=root_level, leaves=aggregate_by_year(notes, calendar))
    return TimelineTree(root_level=root_level, nodes=_expand_chain(chain, notes, calendar))


def iter_leaf_buckets(tree: TimelineTree) -> Iterator[YearBucket]:
    """Yield every leaf bucket of a tree, depth first."""
    yield from tree.leaves
    stack = list(reversed(tree.nodes))
    while stack:
        node = stack.pop()
        yield from node.leaves
        stack.extend(reversed(node.children))


def iter_leaf_notes(tree: TimelineTree) -> Iterator[Note]:
    """Yield every note found in the leaves of a tree."""
    for bucket in iter_leaf_buckets(tree):
        yield from bucket.notes
