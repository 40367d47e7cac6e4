"""
Tests for the Query Engine (whatsnew/query/query_engine.py)

Tests cover:
- Category and stability filters (restartable, order-preserving)
- Keyword search
- Inclusive version ranges and range errors
- Combined queries and stats
- Properties of the embedded document
"""

import pytest

from whatsnew.core.exceptions import ValidationError, VersionRangeError
from whatsnew.query.query_engine import LazyResults, QueryEngine
from whatsnew.records.models import Category, Stability
from whatsnew.records.record_store import RecordStore


def titles(items):
    return [item.title for item in items]


class TestLazyResults:
    """Tests for LazyResults."""

    def test_restartable(self):
        """Test that each iteration calls the producer again."""
        calls = []

        def produce():
            calls.append(1)
            yield from (1, 2, 3)

        results = LazyResults(produce)
        assert calls == []
        assert list(results) == [1, 2, 3]
        assert list(results) == [1, 2, 3]
        assert len(calls) == 2

    def test_helpers(self):
        """Test count, first and truthiness."""
        assert LazyResults(lambda: iter([4, 5])).count() == 2
        assert LazyResults(lambda: iter([4, 5])).first() == 4
        assert LazyResults(lambda: iter(())).first() is None
        assert not LazyResults(lambda: iter(()))


class TestFilterByCategory:
    """Tests for filter_by_category."""

    def test_filter(self, sample_engine):
        """Test filtering in chronological order."""
        assert titles(sample_engine.filter_by_category(Category.LANGUAGE)) == [
            "Inline classes",
            "Fun interfaces",
        ]

    def test_idempotent(self, sample_engine):
        """Test that running the filter twice gives identical results."""
        first = list(sample_engine.filter_by_category("Standard library"))
        second = list(sample_engine.filter_by_category("Standard library"))
        assert first == second
        assert titles(first) == ["Result type", "UUID helpers"]

    def test_reiterate_same_view(self, sample_engine):
        """Test that a single result view can be iterated again."""
        view = sample_engine.filter_by_category("StandardLibrary")
        assert list(view) == list(view)

    def test_empty_category(self, sample_engine):
        """Test a category with no changes."""
        assert list(sample_engine.filter_by_category(Category.NATIVE)) == []

    def test_unknown_category(self, sample_engine):
        """Test that unknown categories raise ValidationError."""
        with pytest.raises(ValidationError):
            sample_engine.filter_by_category("Gadgets")


class TestFilterByStability:
    """Tests for filter_by_stability."""

    def test_filter(self, sample_engine):
        """Test filtering by tag name."""
        assert titles(sample_engine.filter_by_stability("beta")) == ["Fun interfaces"]

    def test_stable_default(self, sample_engine):
        """Test that untagged changes count as Stable."""
        assert titles(sample_engine.filter_by_stability(Stability.STABLE)) == ["Result type", "Flow API"]


class TestSearch:
    """Tests for search."""

    def test_case_insensitive_title(self, sample_engine):
        """Test matching a title regardless of case."""
        hits = list(sample_engine.search("FLOW"))
        assert [(entry.version, item.title) for entry, item in hits] == [("1.1.0", "Flow API")]

    def test_description_match(self, sample_engine):
        """Test matching a description."""
        hits = list(sample_engine.search("allocation"))
        assert [item.title for _, item in hits] == ["Inline classes"]

    def test_code_not_searched(self, sample_engine):
        """Test that code illustrations are not searched."""
        assert list(sample_engine.search("val s: String")) == []

    def test_no_match(self, sample_engine):
        """Test that no match is an empty result, not an error."""
        hits = sample_engine.search("nothing-here")
        assert list(hits) == []
        assert not hits

    def test_blank_keyword(self, sample_engine):
        """Test that a blank keyword matches nothing."""
        assert list(sample_engine.search("   ")) == []
        assert list(sample_engine.search("")) == []

    def test_surrounding_spaces_kept(self, sample_engine):
        """Test that spaces around a keyword are part of the substring."""
        assert [item.title for _, item in sample_engine.search("API")] == ["Flow API"]
        assert list(sample_engine.search("API ")) == []
        assert [item.title for _, item in sample_engine.search(" Flow")] == ["Flow API"]

    def test_query_keyword_spaces_kept(self, sample_engine):
        """Test that query() matches a spaced keyword as given."""
        assert list(sample_engine.query(keyword="API ")) == []
        assert len(list(sample_engine.query(keyword="  "))) == 5


class TestChangesBetween:
    """Tests for changes_between and entries_between."""

    def test_single_version(self, sample_engine, sample_store):
        """Test that a one-version range returns that version's items in order."""
        assert sample_engine.changes_between("1.0.0", "1.0.0") == sample_store.find_by_version("1.0.0").changes

    def test_inclusive_range(self, sample_engine):
        """Test that both endpoints are included."""
        assert titles(sample_engine.changes_between("1.0.0", "1.1.0")) == [
            "Inline classes",
            "Result type",
            "Flow API",
            "Fun interfaces",
        ]

    def test_entries_between(self, sample_engine):
        """Test the entry-level range."""
        entries = sample_engine.entries_between("1.1.0", "1.2.0")
        assert [entry.version for entry in entries] == ["1.1.0", "1.2.0"]

    def test_reversed_range(self, sample_engine):
        """Test that a reversed range raises VersionRangeError."""
        with pytest.raises(VersionRangeError) as exc_info:
            sample_engine.changes_between("1.2.0", "1.0.0")
        assert exc_info.value.from_version == "1.2.0"
        assert exc_info.value.to_version == "1.0.0"

    def test_unknown_endpoint(self, sample_engine):
        """Test that an unknown endpoint raises VersionRangeError."""
        with pytest.raises(VersionRangeError):
            sample_engine.changes_between("1.0.0", "3.0.0")
        with pytest.raises(VersionRangeError):
            sample_engine.changes_between("0.9.0", "1.0.0")


class TestQuery:
    """Tests for the combined query."""

    def test_no_criteria(self, sample_engine):
        """Test that no criteria returns every change."""
        assert len(list(sample_engine.query())) == 5

    def test_category_and_since(self, sample_engine):
        """Test combining a category with a lower bound."""
        hits = list(sample_engine.query(category="Language", since="1.1.0"))
        assert [(entry.version, item.title) for entry, item in hits] == [("1.1.0", "Fun interfaces")]

    def test_stability_and_keyword(self, sample_engine):
        """Test combining a stability tag with a keyword."""
        hits = list(sample_engine.query(stability="Experimental", keyword="uuid"))
        assert [item.title for _, item in hits] == ["UUID helpers"]

    def test_until(self, sample_engine):
        """Test an upper bound only."""
        hits = list(sample_engine.query(until="1.0.0"))
        assert {entry.version for entry, _ in hits} == {"1.0.0"}

    def test_unknown_bound(self, sample_engine):
        """Test that an unknown bound raises VersionRangeError."""
        with pytest.raises(VersionRangeError):
            sample_engine.query(until="9.9.9")

    def test_empty_store_with_bound(self):
        """Test that a bound on an empty store is an unknown endpoint."""
        engine = QueryEngine(RecordStore([]))
        assert list(engine.query()) == []
        with pytest.raises(VersionRangeError):
            engine.query(since="1.0.0")


class TestStats:
    """Tests for stats."""

    def test_counts(self, sample_engine):
        """Test version, change, category and stability counts."""
        stats = sample_engine.stats()
        assert stats.version_count == 3
        assert stats.change_count == 5
        assert stats.by_category == {
            Category.LANGUAGE: 2,
            Category.COROUTINES: 1,
            Category.STANDARD_LIBRARY: 2,
        }
        assert list(stats.by_category) == [Category.LANGUAGE, Category.COROUTINES, Category.STANDARD_LIBRARY]
        assert stats.by_stability[Stability.STABLE] == 2
        assert Stability.DEPRECATED not in stats.by_stability


class TestDefaultDocument:
    """Tests against the embedded document."""

    def test_find_every_version(self, default_store):
        """Test lookups for every version in the document."""
        for version in default_store.versions():
            assert default_store.find_by_version(version).version == version

    def test_search_uuid(self, default_engine):
        """Test that UUID support is documented under 2.0.20."""
        hits = list(default_engine.search("uuid"))
        assert any(
            entry.version == "2.0.20" and "UUID support" in item.description
            for entry, item in hits
        )

    def test_changes_of_1_6_0(self, default_engine, default_store):
        """Test that a one-version range returns exactly its items in order."""
        changes = default_engine.changes_between("1.6.0", "1.6.0")
        assert changes == default_store.find_by_version("1.6.0").changes
        assert titles(changes) == [
            "Stable exhaustive when statements for sealed and Boolean subjects",
            "Stable suspending functions as supertypes",
            "Improved type inference for recursive generic types",
            "Stable typeOf()",
            "Stable Duration API",
            "Dispatchers.IO.limitedParallelism()",
        ]

    def test_reversed_range(self, default_engine):
        """Test that 2.0.0 back to 1.9.0 is rejected."""
        with pytest.raises(VersionRangeError):
            default_engine.changes_between("2.0.0", "1.9.0")

    def test_category_idempotent(self, default_engine):
        """Test that the coroutines filter is stable across runs."""
        first = list(default_engine.filter_by_category(Category.COROUTINES))
        assert first == list(default_engine.filter_by_category(Category.COROUTINES))
        assert len(first) > 0

    def test_every_category_present(self, default_engine):
        """Test that the document covers every category."""
        assert set(default_engine.stats().by_category) == set(Category)
