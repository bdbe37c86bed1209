#!/usr/bin/env python3
"""
Atlas Timeline - notes on a fictional calendar

Main entry point for Atlas Timeline. Each subcommand loads a fresh snapshot
of the notes and calendar from the database, runs the timeline engine on it
and persists the result of any change.
"""

import logging
import sys
import argparse
from typing import List, Optional

from atlas_timeline.models import (
    AtlasDate, CalendarConfig, ExportOptions, GroupLevel, Level, LEVELS, Note, RelativeEra,
    parse_days, parse_months,
)
from atlas_timeline.database import DatabaseManager
from atlas_timeline.importers import JsonImporter, SampleImporter, export_json
from atlas_timeline.timeline import (
    PeriodNode, YearBucket, all_tags, build_timeline, expand, export_to_file,
    format_date, format_full, group_label, marker_size, pinned_notes,
)
from atlas_timeline.config import config

NO_DATE_LABEL = "(sem data)"


def setup_logging():
    """Configure logging for the application."""
    level = getattr(logging, str(config.get("logging.level", "INFO")).upper(), logging.INFO)
    format_str = config.get("logging.format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    log_file = config.log_filename

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(log_file)
        ]
    )


def open_database() -> DatabaseManager:
    """Create a database manager for the configured file."""
    return DatabaseManager(config.database_filename, default_calendar=config.default_calendar)


def parse_tags(text: Optional[str]) -> List[str]:
    """Split a comma-separated tag string, dropping blanks."""
    if not text:
        return []
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def date_from_args(args, base: Optional[AtlasDate] = None) -> AtlasDate:
    """Build a date from CLI options, keeping fields of `base` that were not given."""
    data = base.model_dump() if base else {}
    for name in ("era", "millennium", "century", "decade", "year", "month", "day"):
        value = getattr(args, name, None)
        if value is not None:
            data[name] = value
    if args.relative:
        data["relative_era"] = RelativeEra(args.relative)
    return AtlasDate.model_validate(data)


def describe_note(note: Note, calendar: CalendarConfig) -> str:
    """One-line summary used in listings."""
    pin = "* " if note.pinned else ""
    when = format_date(note.date, calendar, note.level) or NO_DATE_LABEL
    return f"{pin}{note.title} [{when}] ({note.id[:8]})"


def print_note_details(note: Note, calendar: CalendarConfig):
    """Print everything known about a note."""
    print("=" * 60)
    print(note.title)
    print("=" * 60)
    if note.description:
        print(note.description)
        print()
    when = NO_DATE_LABEL if note.date.is_empty() else format_full(note.date, calendar)
    print(f"Linha do tempo: {when}")
    print(f"Granularidade: {note.level.value}")
    print(f"Peso: {note.weight:g}")
    print(f"Fixada: {'sim' if note.pinned else 'não'}")
    if note.tags:
        print(f"Tags: {', '.join(note.tags)}")
    if note.images:
        print(f"Imagens: {len(note.images)}")
    print(f"ID: {note.id}")


def print_leaves(leaves: List[YearBucket], calendar: CalendarConfig, indent: int):
    pad = "  " * indent
    for bucket in leaves:
        if bucket.direct:
            for note in bucket.notes:
                print(f"{pad}- {describe_note(note, calendar)}")
            continue
        print(f"{pad}{bucket.label or '(ano ?)'}")
        for note in bucket.notes:
            print(f"{pad}  - {describe_note(note, calendar)}")


def print_nodes(nodes: List[PeriodNode], calendar: CalendarConfig, indent: int):
    pad = "  " * indent
    for node in nodes:
        print(f"{pad}{node.label or '(período)'}")
        if node.children:
            print_nodes(node.children, calendar, indent + 1)
        else:
            print_leaves(node.leaves, calendar, indent + 1)


def run_add(args):
    """Create a new note."""
    title = args.title.strip()
    if not title:
        raise ValueError("Title must not be empty")

    note = Note(
        title=title,
        description=args.description or None,
        level=Level(args.level),
        date=date_from_args(args),
        images=args.image or [],
        weight=args.weight,
        tags=parse_tags(args.tags),
    )
    with open_database() as db:
        db.initialize_database()
        db.add_note(note)
    print(f"Added {note.id}")


def run_edit(args):
    """Replace fields of an existing note."""
    with open_database() as db:
        db.initialize_database()
        note = db.get_note(args.note_id)
        if note is None:
            raise KeyError(f"No note with id {args.note_id}")

        changes = {"date": date_from_args(args, note.date)}
        if args.title is not None:
            if not args.title.strip():
                raise ValueError("Title must not be empty")
            changes["title"] = args.title.strip()
        if args.description is not None:
            changes["description"] = args.description or None
        if args.level is not None:
            changes["level"] = Level(args.level)
        if args.weight is not None:
            changes["weight"] = args.weight if args.weight > 0 else 1.0
        if args.tags is not None:
            changes["tags"] = parse_tags(args.tags)
        if args.image:
            changes["images"] = note.images + args.image

        db.update_note(note.model_copy(update=changes))
    print(f"Updated {args.note_id}")


def run_list(args):
    """Print the timeline at the chosen zoom level."""
    zoom = Level(args.zoom) if args.zoom else config.default_zoom
    with open_database() as db:
        db.initialize_database()
        notes = db.load_notes()
        calendar = db.load_calendar()

    if args.pinned:
        notes = pinned_notes(notes)

    groups = build_timeline(notes, zoom, args.search or "", args.tag or [])
    if not groups:
        print("(nenhuma nota)")
        return

    for group in groups:
        print(f"{group_label(group, zoom, calendar)}  [{len(group.notes)} notas, marcador {marker_size(group.notes):g}]")
        if args.tree:
            tree = expand(zoom, group.notes, calendar)
            print_nodes(tree.nodes, calendar, 1)
            print_leaves(tree.leaves, calendar, 1)
        else:
            for note in group.notes:
                print(f"  - {describe_note(note, calendar)}")


def run_show(args):
    """Print one note in full."""
    with open_database() as db:
        db.initialize_database()
        note = db.get_note(args.note_id)
        calendar = db.load_calendar()
    if note is None:
        raise KeyError(f"No note with id {args.note_id}")
    print_note_details(note, calendar)


def run_pin(args):
    """Toggle the pinned flag."""
    with open_database() as db:
        db.initialize_database()
        note = db.toggle_pin(args.note_id)
    if note is None:
        raise KeyError(f"No note with id {args.note_id}")
    print("Pinned" if note.pinned else "Unpinned")


def run_remove(args):
    """Delete a note."""
    with open_database() as db:
        db.initialize_database()
        removed = db.remove_note(args.note_id)
    if not removed:
        raise KeyError(f"No note with id {args.note_id}")
    print(f"Removed {args.note_id}")


def run_tags(args):
    """List tags in use."""
    with open_database() as db:
        db.initialize_database()
        tags = all_tags(db.load_notes())
    print("\n".join(tags) if tags else "(sem tags)")


def run_export_txt(args):
    """Export the timeline as plain text."""
    defaults = config.export_options
    options = ExportOptions(
        include_description=defaults.include_description and not args.no_description,
        include_tags=defaults.include_tags or args.tags,
        group_by=GroupLevel(args.group_by) if args.group_by else defaults.group_by,
    )
    with open_database() as db:
        db.initialize_database()
        notes = db.load_notes()
        calendar = db.load_calendar()
    path = export_to_file(args.output or config.export_filename, notes, calendar, options)
    print(f"Exported {len(notes)} notes to {path}")


def run_export_json(args):
    """Export the raw notes as JSON."""
    with open_database() as db:
        db.initialize_database()
        notes = db.load_notes()
    path = export_json(args.output or config.json_export_filename, notes)
    print(f"Exported {len(notes)} notes to {path}")


def run_import_json(args):
    """Replace the timeline with the notes of a JSON file."""
    notes = JsonImporter(args.path).get_all_notes()
    with open_database() as db:
        db.initialize_database()
        db.replace_notes(notes)
    print(f"Imported {len(notes)} notes")


def run_sample(args):
    """Append the demo notes."""
    sample = SampleImporter().get_all_notes()
    with open_database() as db:
        db.initialize_database()
        db.replace_notes(db.load_notes() + sample)
    print(f"Added {len(sample)} sample notes")


def confirm_reset() -> bool:
    """
    Ask user to confirm deleting the whole timeline.

    Returns:
        True if user confirms, False otherwise
    """
    print("\nThis will DELETE every note in the timeline. This cannot be undone!")

    while True:
        response = input("\nDo you want to continue? (yes/no): ").strip().lower()
        if response in ['yes', 'y']:
            return True
        elif response in ['no', 'n']:
            return False
        else:
            print("Please enter 'yes' or 'no'")


def run_reset(args):
    """Delete all notes."""
    if not args.yes and not confirm_reset():
        logging.info("Reset cancelled by user")
        return
    with open_database() as db:
        db.initialize_database()
        db.clear_notes()
    print("Timeline cleared")


def run_calendar(args):
    """Show or update the calendar."""
    changes = {}
    if args.days is not None:
        changes["days_of_week"] = parse_days(args.days)
    if args.months is not None:
        changes["months"] = parse_months(args.months)
    if args.years_per_century is not None:
        changes["years_per_century"] = args.years_per_century
    if args.centuries_per_millennium is not None:
        changes["centuries_per_millennium"] = args.centuries_per_millennium
    if args.decades_per_century is not None:
        changes["decades_per_century"] = args.decades_per_century

    with open_database() as db:
        db.initialize_database()
        calendar = db.update_calendar(**changes) if changes else db.load_calendar()

    print(f"Dias da semana: {', '.join(calendar.days_of_week)}")
    print("Meses: " + ", ".join(f"{m.name}:{m.days}" for m in calendar.months))
    print(f"Anos por século: {calendar.years_per_century}")
    print(f"Séculos por milênio: {calendar.centuries_per_millennium}")
    print(f"Décadas por século: {calendar.decades_per_century}")


def add_date_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--era", type=str, help="Era name")
    parser.add_argument("--millennium", type=int, help="Millennium number")
    parser.add_argument("--century", type=int, help="Century number")
    parser.add_argument("--decade", type=int, help="Decade number")
    parser.add_argument("--year", type=int, help="Year number")
    parser.add_argument("--month", type=int, help="Month index (1-based)")
    parser.add_argument("--day", type=int, help="Day of the month")
    parser.add_argument(
        "--relative",
        choices=[r.value for r in RelativeEra],
        help="AU (before the Union) or DU (after the Union)"
    )


def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    level_choices = [level.value for level in LEVELS]

    parser = argparse.ArgumentParser(
        description="Atlas Timeline - notes on a fictional calendar",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py add --title "Tratado" --year 1 --relative DU
  python main.py list --zoom CENTURY --tree
  python main.py list --search guerra --tag Humanos
  python main.py export-txt --group-by ERA --tags
  python main.py calendar --months "Lume:30, Vera:28"
        """
    )
    parser.add_argument(
        "--version",
        action="version",
        version="Atlas Timeline 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Add a note")
    add.add_argument("--title", required=True, help="Note title")
    add.add_argument("--description", help="Optional description")
    add.add_argument("--level", choices=level_choices, default=Level.YEAR.value,
                     help="Granularity (default: YEAR)")
    add.add_argument("--weight", type=float, default=1.0, help="Marker weight (default: 1)")
    add.add_argument("--tags", help="Comma-separated tags")
    add.add_argument("--image", action="append", help="Image reference (repeatable)")
    add_date_arguments(add)
    add.set_defaults(handler=run_add)

    edit = subparsers.add_parser("edit", help="Edit a note")
    edit.add_argument("note_id")
    edit.add_argument("--title")
    edit.add_argument("--description")
    edit.add_argument("--level", choices=level_choices)
    edit.add_argument("--weight", type=float)
    edit.add_argument("--tags", help="Comma-separated tags (replaces existing)")
    edit.add_argument("--image", action="append", help="Image reference to append")
    add_date_arguments(edit)
    edit.set_defaults(handler=run_edit)

    listing = subparsers.add_parser("list", help="Show the timeline")
    listing.add_argument("--zoom", choices=level_choices, help="Zoom level")
    listing.add_argument("--search", help="Search title and description")
    listing.add_argument("--tag", action="append", help="Only notes with this tag (repeatable)")
    listing.add_argument("--pinned", action="store_true", help="Only pinned notes")
    listing.add_argument("--tree", action="store_true", help="Expand each group into periods")
    listing.set_defaults(handler=run_list)

    show = subparsers.add_parser("show", help="Show one note")
    show.add_argument("note_id")
    show.set_defaults(handler=run_show)

    pin = subparsers.add_parser("pin", help="Pin or unpin a note")
    pin.add_argument("note_id")
    pin.set_defaults(handler=run_pin)

    remove = subparsers.add_parser("remove", help="Delete a note")
    remove.add_argument("note_id")
    remove.set_defaults(handler=run_remove)

    tags = subparsers.add_parser("tags", help="List tags in use")
    tags.set_defaults(handler=run_tags)

    export_txt = subparsers.add_parser("export-txt", help="Export as plain text")
    export_txt.add_argument("--output", help="Output file")
    export_txt.add_argument("--no-description", action="store_true", help="Leave descriptions out")
    export_txt.add_argument("--tags", action="store_true", help="Include tags")
    export_txt.add_argument("--group-by", choices=[g.value for g in GroupLevel], help="Group notes")
    export_txt.set_defaults(handler=run_export_txt)

    export_js = subparsers.add_parser("export-json", help="Export notes as JSON")
    export_js.add_argument("--output", help="Output file")
    export_js.set_defaults(handler=run_export_json)

    import_js = subparsers.add_parser("import-json", help="Replace the timeline from a JSON file")
    import_js.add_argument("path")
    import_js.set_defaults(handler=run_import_json)

    sample = subparsers.add_parser("sample", help="Add demo notes")
    sample.set_defaults(handler=run_sample)

    reset = subparsers.add_parser("reset", help="Delete every note")
    reset.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    reset.set_defaults(handler=run_reset)

    calendar = subparsers.add_parser("calendar", help="Show or edit the calendar")
    calendar.add_argument("--days", help="Week days, comma-separated")
    calendar.add_argument("--months", help='Months as "Name:Days, Name:Days"')
    calendar.add_argument("--years-per-century", type=int)
    calendar.add_argument("--centuries-per-millennium", type=int)
    calendar.add_argument("--decades-per-century", type=int)
    calendar.set_defaults(handler=run_calendar)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging()

    try:
        args.handler(args)
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        print("\nInterrupted.")
    except Exception as e:
        logging.error(f"{args.command} failed: {e}")
        print(f"\n{args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
