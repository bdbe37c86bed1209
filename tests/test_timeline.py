"""
Tests for ordering, formatting, grouping and filtering of notes.
"""

import itertools
import unittest

from atlas_timeline.models import AtlasDate, DEFAULT_CALENDAR, Level, LEVELS, Note, RelativeEra
from atlas_timeline.timeline import (
    DESCENT_CHAINS, aggregate_by_year, all_tags, build_key, build_timeline, compare_notes,
    effective_year, expand, filter_notes, format_date, format_day_month, format_full,
    group_label, group_notes, iter_leaf_notes, known_values, marker_size, pinned_notes, sort_notes, to_roman,
)


def make_note(title, level=Level.YEAR, weight=1, **date_fields):
    relative = date_fields.pop("relative", RelativeEra.DU)
    return Note(title=title, level=level, weight=weight,
                date=AtlasDate(relative_era=relative, **date_fields))


AU = RelativeEra.AU


class TestComparator(unittest.TestCase):
    """Test chronological ordering."""

    def test_effective_year(self):
        """Test sign handling and missing years."""
        self.assertEqual(effective_year(make_note("a", year=5)), 5)
        self.assertEqual(effective_year(make_note("a", year=5, relative=AU)), -5)
        self.assertEqual(effective_year(make_note("a")), 0)
        self.assertEqual(effective_year(make_note("a", year=0, relative=AU)), 0)

    def test_before_union_sorts_first(self):
        """Test year 50 AU comes before year 1 DU."""
        old = make_note("old", year=50, relative=AU)
        new = make_note("new", year=1)

        self.assertLess(compare_notes(old, new), 0)
        self.assertGreater(compare_notes(new, old), 0)

    def test_sort_scenario(self):
        """Test the founding/war/treaty ordering."""
        founding = make_note("Founding", year=5)
        old_war = make_note("Old War", year=20, relative=AU)
        treaty = make_note("Treaty", year=1)

        ordered = sort_notes([founding, old_war, treaty])
        self.assertEqual([n.title for n in ordered], ["Old War", "Treaty", "Founding"])

    def test_ties_keep_input_order(self):
        """Test notes differing only in coarser fields compare equal."""
        a = make_note("a", era="Iron", century=9, year=3)
        b = make_note("b", era="Gold", century=1, year=3)

        self.assertEqual(compare_notes(a, b), 0)
        self.assertEqual([n.title for n in sort_notes([a, b])], ["a", "b"])
        self.assertEqual([n.title for n in sort_notes([b, a])], ["b", "a"])

    def test_transitivity(self):
        """Test ordering is consistent across triples."""
        notes = [
            make_note("a", year=7, relative=AU),
            make_note("b"),
            make_note("c", year=2),
            make_note("d", year=2, relative=AU),
            make_note("e", year=40),
        ]
        for a, b, c in itertools.permutations(notes, 3):
            if compare_notes(a, b) <= 0 and compare_notes(b, c) <= 0:
                self.assertLessEqual(compare_notes(a, c), 0)


class TestFormatter(unittest.TestCase):
    """Test date labels."""

    def test_roman_numerals(self):
        """Test conversion including subtractive forms."""
        self.assertEqual(to_roman(19), "XIX")
        self.assertEqual(to_roman(4), "IV")
        self.assertEqual(to_roman(9), "IX")
        self.assertEqual(to_roman(39), "XXXIX")
        self.assertEqual(to_roman(1994), "MCMXCIV")

    def test_roman_non_positive_is_decimal(self):
        """Test degenerate centuries."""
        self.assertEqual(to_roman(0), "0")
        self.assertEqual(to_roman(-3), "-3")

    def test_levels(self):
        """Test each level's label."""
        date = AtlasDate(era="Ouro", millennium=2, century=3, decade=4, year=12)

        self.assertEqual(format_date(date, DEFAULT_CALENDAR, Level.ERA), "Ouro")
        self.assertEqual(format_date(date, DEFAULT_CALENDAR, Level.MILLENNIUM), "2º milênio")
        self.assertEqual(format_date(date, DEFAULT_CALENDAR, Level.CENTURY), "Século 3 (III)")
        self.assertEqual(format_date(date, DEFAULT_CALENDAR, Level.DECADE), "Década de 4")
        self.assertEqual(format_date(date, DEFAULT_CALENDAR, Level.YEAR), "12")

    def test_century_scenario(self):
        """Test a century-only date."""
        self.assertEqual(format_date(AtlasDate(century=3), DEFAULT_CALENDAR, Level.CENTURY), "Século 3 (III)")
        self.assertIn("XIX", format_date(AtlasDate(century=19), DEFAULT_CALENDAR, Level.CENTURY))
        self.assertEqual(format_date(AtlasDate(century=0), DEFAULT_CALENDAR, Level.CENTURY), "Século 0 (0)")

    def test_before_union_suffix(self):
        """Test the a.U. suffix only appears for AU years."""
        self.assertEqual(format_date(AtlasDate(year=4, relative_era=AU), DEFAULT_CALENDAR, Level.YEAR), "4 a.U.")
        self.assertEqual(format_date(AtlasDate(year=4), DEFAULT_CALENDAR, Level.YEAR), "4")

    def test_missing_fields_are_empty(self):
        """Test absent fields render as empty strings."""
        empty = AtlasDate()
        for level in LEVELS:
            self.assertEqual(format_date(empty, DEFAULT_CALENDAR, level), "")

    def test_day_month(self):
        """Test day/month refinement and dangling months."""
        self.assertEqual(format_day_month(AtlasDate(day=12, month=2), DEFAULT_CALENDAR), "12 de Vera")
        self.assertEqual(format_day_month(AtlasDate(month=1), DEFAULT_CALENDAR), "Dia ? de Lume")
        self.assertEqual(format_day_month(AtlasDate(day=3, month=40), DEFAULT_CALENDAR), "3")
        self.assertEqual(format_day_month(AtlasDate(), DEFAULT_CALENDAR), "")

    def test_full_label(self):
        """Test composition of several levels."""
        date = AtlasDate(era="Ferro", century=1, year=1, month=3, day=12)

        self.assertEqual(
            format_full(date, DEFAULT_CALENDAR),
            "Ferro • Século 1 (I) • 1 • 12 de Nara"
        )
        self.assertEqual(
            format_full(date, DEFAULT_CALENDAR, levels=[Level.ERA, Level.YEAR], include_day_month=False),
            "Ferro • 1"
        )
        self.assertEqual(format_full(AtlasDate(), DEFAULT_CALENDAR), "")


class TestFlatGrouping(unittest.TestCase):
    """Test the flat grouping pass."""

    def test_keys(self):
        """Test cumulative keys with placeholders."""
        note = make_note("a", era="Gold", century=5, year=3)

        self.assertEqual(build_key(note, Level.ERA), "Gold")
        self.assertEqual(build_key(note, Level.MILLENNIUM), "Gold::?")
        self.assertEqual(build_key(note, Level.CENTURY), "Gold::?::5")
        self.assertEqual(build_key(note, Level.DECADE), "Gold::?::5::?")
        self.assertEqual(build_key(note, Level.YEAR), "Gold::?::5::?::3")
        self.assertEqual(build_key(make_note("b"), Level.ERA), "(Sem Era)")

    def test_same_century_different_eras_do_not_merge(self):
        """Test era disambiguates identically numbered centuries."""
        gold = make_note("gold", era="Gold", century=5)
        iron = make_note("iron", era="Iron", century=5)

        groups = group_notes([gold, iron], Level.CENTURY)
        self.assertEqual(len(groups), 2)
        self.assertEqual({g.key for g in groups}, {"Gold::?::5", "Iron::?::5"})

    def test_decade_zoom_groups_by_century(self):
        """Test DECADE zoom keeps century headers."""
        a = make_note("a", era="Gold", century=5, decade=1, year=3)
        b = make_note("b", era="Gold", century=5, decade=2, year=1)

        groups = group_notes([a, b], Level.DECADE)
        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0].key, "Gold::?::5")
        self.assertEqual([n.title for n in groups[0].notes], ["b", "a"])
        self.assertEqual(group_label(groups[0], Level.DECADE), "Século 5 (V)")

    def test_group_order_and_member_order(self):
        """Test groups follow their first member and members are sorted."""
        late = make_note("late", era="B", year=30)
        early = make_note("early", era="A", year=10, relative=AU)
        late_sibling = make_note("late-sibling", era="B", year=2)

        groups = group_notes([late, early, late_sibling], Level.ERA)
        self.assertEqual([g.key for g in groups], ["A", "B"])
        self.assertEqual([n.title for n in groups[1].notes], ["late-sibling", "late"])

    def test_grouping_completeness(self):
        """Test every note lands in exactly one group at every level."""
        notes = [
            make_note("a", era="Gold", millennium=1, century=2, decade=3, year=4),
            make_note("b", era="Gold", century=2),
            make_note("c"),
            make_note("d", year=9, relative=AU),
            make_note("e", era="Iron", millennium=1, decade=3),
        ]
        for level in LEVELS:
            members = [n.id for g in group_notes(notes, level) for n in g.notes]
            self.assertEqual(sorted(members), sorted(n.id for n in notes))

    def test_group_label_fallback(self):
        """Test groups without the header field."""
        groups = group_notes([make_note("a")], Level.CENTURY)
        self.assertEqual(group_label(groups[0], Level.CENTURY), "(período)")

    def test_empty_input(self):
        self.assertEqual(group_notes([], Level.YEAR), [])

    def test_marker_size(self):
        """Test marker size grows with total weight and is capped."""
        self.assertEqual(marker_size([make_note("a")]), 12)
        self.assertEqual(marker_size([make_note("a", weight=2), make_note("b")]), 20)
        self.assertEqual(marker_size([make_note("a", weight=50)]), 42)


class TestRecursiveExpansion(unittest.TestCase):
    """Test the drill-down tree."""

    def setUp(self):
        self.notes = [
            make_note("a", level=Level.CENTURY, era="Gold", millennium=1, century=2, decade=3, year=4),
            make_note("b", level=Level.DECADE, era="Gold", millennium=1, century=2, decade=1, year=4),
            make_note("c", level=Level.ERA, era="Gold"),
            make_note("d", level=Level.MILLENNIUM, year=9, relative=AU),
            make_note("e", level=Level.CENTURY, millennium=2, century=7, decade=3, year=9, relative=AU),
            make_note("f", level=Level.YEAR, millennium=1, year=1),
        ]

    def test_descent_chains(self):
        """Test the fixed chains."""
        self.assertEqual(DESCENT_CHAINS[Level.DECADE], [Level.DECADE, Level.YEAR])
        self.assertEqual(DESCENT_CHAINS[Level.YEAR], [])
        self.assertEqual(DESCENT_CHAINS[Level.ERA][0], Level.MILLENNIUM)

    def test_leaf_coverage_for_every_root(self):
        """Test each note appears exactly once across the leaves."""
        for level in LEVELS:
            leaves = [n.id for n in iter_leaf_notes(expand(level, self.notes))]
            self.assertEqual(sorted(leaves), sorted(n.id for n in self.notes), level)

    def test_era_root_structure(self):
        """Test the tree walks millennium, century, decade, year."""
        tree = expand(Level.ERA, self.notes)

        self.assertEqual(tree.leaves, [])
        self.assertTrue(all(node.level == Level.MILLENNIUM for node in tree.nodes))
        # Ordered by first member: "e" (9 a.U.), then "c" (no year), then "a" (4)
        self.assertEqual([node.key for node in tree.nodes], ["2", "?", "1"])

        millennium_one = tree.nodes[2]
        self.assertEqual(millennium_one.label, "1º milênio")
        century_level = millennium_one.children
        self.assertEqual([node.level for node in century_level], [Level.CENTURY] * len(century_level))

        decade_nodes = century_level[0].children
        year_nodes = decade_nodes[0].children
        self.assertEqual(year_nodes[0].level, Level.YEAR)
        self.assertTrue(year_nodes[0].leaves)
        self.assertEqual(year_nodes[0].children, [])

    def test_tree_serializes_nested_periods(self):
        """Test the tree dumps with its nested children and leaves."""
        data = expand(Level.CENTURY, self.notes).model_dump(mode="json")

        self.assertEqual(data["root_level"], "CENTURY")
        self.assertEqual(data["leaves"], [])
        decade = data["nodes"][0]
        self.assertEqual(decade["level"], "DECADE")
        year = decade["children"][0]
        self.assertEqual(year["level"], "YEAR")
        self.assertEqual(year["children"], [])
        self.assertTrue(year["leaves"][0]["notes"][0]["title"])

    def test_sibling_order_follows_first_member(self):
        """Test siblings are ordered by the year of their first note."""
        tree = expand(Level.CENTURY, self.notes)
        decade_keys = [node.key for node in tree.nodes]
        # "?" is led by "c" (no year); "3" and "1" tie on year 4 and keep first-seen order
        self.assertEqual(decade_keys, ["?", "3", "1"])

    def test_decade_root_repeats_decade(self):
        """Test a decade-rooted tree starts with decade headers."""
        tree = expand(Level.DECADE, self.notes)
        self.assertTrue(all(node.level == Level.DECADE for node in tree.nodes))
        self.assertTrue(all(child.level == Level.YEAR
                            for node in tree.nodes for child in node.children))

    def test_node_id_format(self):
        """Test node ids carry century, millennium and era of the first note."""
        gold = make_note("gold", level=Level.CENTURY, era="Gold", century=5)
        iron = make_note("iron", level=Level.CENTURY, era="Iron", century=5)
        tree = expand(Level.ERA, [gold, iron])

        self.assertEqual(len(tree.nodes[0].children), 1)
        self.assertEqual(tree.nodes[0].children[0].node_id, "CENTURY:5:5:?:Gold")

    def test_year_root_is_flat(self):
        """Test YEAR root has no period headers."""
        tree = expand(Level.YEAR, self.notes)
        self.assertEqual(tree.nodes, [])
        self.assertTrue(tree.leaves)

    def test_empty_expand(self):
        tree = expand(Level.ERA, [])
        self.assertEqual(tree.nodes, [])
        self.assertEqual(list(iter_leaf_notes(tree)), [])


class TestYearAggregation(unittest.TestCase):
    """Test leaf buckets."""

    def test_year_level_notes_are_direct(self):
        """Test YEAR notes bypass year buckets and sort by weight."""
        heavy = make_note("heavy", weight=5, year=1)
        light = make_note("light", weight=1, year=9)
        buckets = aggregate_by_year([heavy, light])

        self.assertEqual(len(buckets), 1)
        self.assertTrue(buckets[0].direct)
        self.assertEqual([n.title for n in buckets[0].notes], ["light", "heavy"])

    def test_buckets_by_relative_year(self):
        """Test same number on both sides of the Union stays apart."""
        before = make_note("before", level=Level.CENTURY, year=3, relative=AU)
        after = make_note("after", level=Level.CENTURY, year=3)
        after_heavy = make_note("after-heavy", level=Level.CENTURY, year=3, weight=4)
        undated = make_note("undated", level=Level.CENTURY)

        buckets = aggregate_by_year([after_heavy, before, undated, after])
        self.assertEqual([b.key for b in buckets], ["AU::3", "DU::?", "DU::3"])
        self.assertEqual([b.label for b in buckets], ["3 a.U.", "", "3"])
        self.assertEqual([n.title for n in buckets[2].notes], ["after", "after-heavy"])

    def test_empty(self):
        self.assertEqual(aggregate_by_year([]), [])


class TestFiltering(unittest.TestCase):
    """Test search and tag filters."""

    def setUp(self):
        self.war = Note(title="Old War", description="Clãs do norte", tags=["Guerra"])
        self.treaty = Note(title="Treaty", tags=["Guerra", "Humanos"], pinned=True)
        self.city = Note(title="Lumen", description="A city of WAR machines", tags=["Cidades"])

    def test_search_title_and_description(self):
        """Test case-insensitive substring matching."""
        found = filter_notes([self.war, self.treaty, self.city], search="war")
        self.assertEqual([n.title for n in found], ["Old War", "Lumen"])

    def test_blank_search_is_ignored(self):
        self.assertEqual(len(filter_notes([self.war, self.treaty], search="   ")), 2)

    def test_tag_filter_matches_any(self):
        """Test a note needs only one of the active tags."""
        found = filter_notes([self.war, self.treaty, self.city], tags=["Humanos", "Cidades"])
        self.assertEqual([n.title for n in found], ["Treaty", "Lumen"])

    def test_build_timeline(self):
        """Test filters apply before grouping."""
        groups = build_timeline([self.war, self.treaty, self.city], Level.YEAR, tags=["Guerra"])
        self.assertEqual(sum(len(g.notes) for g in groups), 2)

    def test_helpers(self):
        """Test tag listing, pinned notes and suggestions."""
        notes = [self.war, self.treaty, self.city]
        self.assertEqual(all_tags(notes), ["Guerra", "Humanos", "Cidades"])
        self.assertEqual(pinned_notes(notes), [self.treaty])

        dated = [make_note("a", era="Gold", century=2), make_note("b", era="Gold", century=3, decade=1)]
        values = known_values(dated)
        self.assertEqual(values["era"], ["Gold"])
        self.assertEqual(values["century"], [2, 3])
        self.assertEqual(values["decade"], [1])
        self.assertEqual(values["millennium"], [])


if __name__ == '__main__':
    unittest.main()
