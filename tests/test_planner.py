"""Tests for the sync planner"""

from tvdb_sync.core.planner import SyncPlanner


class TestFirstRun:
    def test_plans_whole_library(self):
        plan = SyncPlanner().plan(["A", "B"], ["A", "B", "C"], None)
        assert plan == ["A", "B", "C"]

    def test_independent_of_cache_contents(self):
        planner = SyncPlanner()
        library = ["A", "B"]
        assert planner.plan([], library, None) == ["A", "B"]
        assert planner.plan(["A", "B", "Z"], library, None) == ["A", "B"]

    def test_duplicates_and_blanks_collapse(self):
        plan = SyncPlanner().plan([], ["A", "a", "", "  ", "B", "A"], None)
        assert plan == ["A", "B"]


class TestIncremental:
    def test_changed_and_cached_plus_uncached(self):
        # Library {A, B, C}, cache {A, B}, feed reports B changed -> {B, C}
        plan = SyncPlanner().plan(["A", "B"], ["A", "B", "C"], ["B"])
        assert sorted(plan) == ["B", "C"]

    def test_changed_but_not_cached_is_ignored(self):
        plan = SyncPlanner().plan(["A"], ["A"], ["A", "X", "Y"])
        assert plan == ["A"]

    def test_uncached_library_items_are_backfilled_without_feed_entry(self):
        plan = SyncPlanner().plan(["A"], ["A", "NEW"], [])
        assert plan == ["NEW"]

    def test_cached_series_outside_library_still_refreshed_when_changed(self):
        plan = SyncPlanner().plan(["A", "OLD"], ["A"], ["OLD"])
        assert plan == ["OLD"]

    def test_case_insensitive_matching(self):
        plan = SyncPlanner().plan(["abc"], ["ABC", "def"], ["AbC"])
        # Changed id takes the cache directory's spelling
        assert plan == ["abc", "def"]

    def test_no_duplicates_when_feed_repeats_ids(self):
        plan = SyncPlanner().plan(["A", "B"], ["A", "B"], ["B", "b", "B", "A"])
        assert plan == ["B", "A"]

    def test_order_is_feed_order_then_library_order(self):
        plan = SyncPlanner().plan(["1", "2", "3"], ["9", "3", "8", "1"], ["3", "1"])
        assert plan == ["3", "1", "9", "8"]

    def test_blank_feed_entries_are_dropped(self):
        plan = SyncPlanner().plan(["A"], ["A"], ["", "  ", "A"])
        assert plan == ["A"]

    def test_nothing_to_do(self):
        assert SyncPlanner().plan(["A", "B"], ["A", "B"], []) == []
