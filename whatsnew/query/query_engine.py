"""
Query Engine over loaded version-change records.

All queries are read-only and synchronous. Filters return LazyResults:
finite views that walk the already-loaded store each time they are
iterated, so they can be iterated repeatedly without re-parsing anything.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar, Union

from whatsnew.core.exceptions import VersionNotFoundError, VersionRangeError
from whatsnew.records.models import Category, ChangeItem, Stability, VersionEntry
from whatsnew.records.record_store import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

SearchHit = Tuple[VersionEntry, ChangeItem]


class LazyResults(Generic[T]):
    """Finite, restartable sequence produced on demand."""

    def __init__(self, producer: Callable[[], Iterator[T]]):
        self._producer = producer

    def __iter__(self) -> Iterator[T]:
        return iter(self._producer())

    def __bool__(self) -> bool:
        return any(True for _ in self)

    def count(self) -> int:
        return sum(1 for _ in self)

    def first(self) -> Optional[T]:
        return next(iter(self), None)


@dataclass
class QueryStats:
    """Counts of changes across the loaded records."""
    version_count: int = 0
    change_count: int = 0
    by_category: Dict[Category, int] = field(default_factory=dict)
    by_stability: Dict[Stability, int] = field(default_factory=dict)


class QueryEngine:
    """
    Answers read-only queries over a RecordStore.

    Handles:
    - Category and stability filters
    - Keyword search on titles and descriptions
    - Inclusive version ranges
    - Combined queries and summary counts
    """

    def __init__(self, store: RecordStore):
        self.store = store

    def filter_by_category(self, category: Union[Category, str]) -> LazyResults[ChangeItem]:
        """
        Changes in a category, in chronological and document order.

        Args:
            category: Category or its identifier/label ("StandardLibrary", "Standard library")

        Raises:
            ValidationError: If the category name is unknown
        """
        wanted = Category.parse(category)

        def produce() -> Iterator[ChangeItem]:
            for entry in self.store:
                for item in entry.changes:
                    if item.category is wanted:
                        yield item

        return LazyResults(produce)

    def filter_by_stability(self, stability: Union[Stability, str]) -> LazyResults[ChangeItem]:
        """
        Changes carrying a stability tag, in chronological and document order.

        Raises:
            ValidationError: If the stability name is unknown
        """
        wanted = Stability.parse(stability)

        def produce() -> Iterator[ChangeItem]:
            for entry in self.store:
                for item in entry.changes:
                    if item.stability is wanted:
                        yield item

        return LazyResults(produce)

    def search(self, keyword: str) -> LazyResults[SearchHit]:
        """
        Changes whose title or description contains keyword, case-insensitively.

        The keyword is matched as given, surrounding spaces included. An empty
        or all-whitespace keyword matches nothing. No match is an empty
        result, never an error.

        Returns:
            LazyResults of (VersionEntry, ChangeItem) pairs
        """
        needle = keyword or ""
        if not needle.strip():
            return LazyResults(lambda: iter(()))

        def produce() -> Iterator[SearchHit]:
            for entry in self.store:
                for item in entry.changes:
                    if item.matches(needle):
                        yield entry, item

        return LazyResults(produce)

    def entries_between(self, from_version: str, to_version: str) -> Tuple[VersionEntry, ...]:
        """
        Version entries over an inclusive range, in chronological order.

        Raises:
            VersionRangeError: If an endpoint is unknown or from_version
                               was released after to_version
        """
        start, end = self._range_positions(from_version, to_version)
        return self.store.entries[start:end + 1]

    def changes_between(self, from_version: str, to_version: str) -> Tuple[ChangeItem, ...]:
        """
        Change items over an inclusive version range, in original order.

        Raises:
            VersionRangeError: If an endpoint is unknown or from_version
                               was released after to_version
        """
        return tuple(
            item
            for entry in self.entries_between(from_version, to_version)
            for item in entry.changes
        )

    def query(
        self,
        category: Union[Category, str, None] = None,
        stability: Union[Stability, str, None] = None,
        keyword: Optional[str] = None,
        since: Optional[str] = None,
        until: Optional[str] = None,
    ) -> LazyResults[SearchHit]:
        """
        Combined filter; every criterion left as None is not applied.

        Args:
            category: Only changes in this category
            stability: Only changes with this stability tag
            keyword: Case-insensitive substring of title or description
                     (blank means no keyword filter)
            since: Oldest version to include (inclusive)
            until: Newest version to include (inclusive)

        Returns:
            LazyResults of (VersionEntry, ChangeItem) pairs

        Raises:
            ValidationError: If category or stability is unknown
            VersionRangeError: If since/until is unknown or reversed
        """
        wanted_category = Category.parse(category) if category is not None else None
        wanted_stability = Stability.parse(stability) if stability is not None else None
        needle = keyword if keyword and keyword.strip() else ""

        entries = self.store.entries
        if since is not None or until is not None:
            start, end = self._range_positions(
                since if since is not None else (entries[0].version if entries else None),
                until if until is not None else (entries[-1].version if entries else None),
            )
            entries = entries[start:end + 1]

        def produce() -> Iterator[SearchHit]:
            for entry in entries:
                for item in entry.changes:
                    if wanted_category is not None and item.category is not wanted_category:
                        continue
                    if wanted_stability is not None and item.stability is not wanted_stability:
                        continue
                    if needle and not item.matches(needle):
                        continue
                    yield entry, item

        return LazyResults(produce)

    def stats(self) -> QueryStats:
        """Count versions and changes per category and per stability tag."""
        categories = Counter()
        stabilities = Counter()
        change_count = 0

        for entry in self.store:
            for item in entry.changes:
                categories[item.category] += 1
                stabilities[item.stability] += 1
                change_count += 1

        return QueryStats(
            version_count=len(self.store),
            change_count=change_count,
            by_category={c: categories[c] for c in Category if categories[c]},
            by_stability={s: stabilities[s] for s in Stability if stabilities[s]},
        )

    def _range_positions(self, from_version: str, to_version: str) -> Tuple[int, int]:
        try:
            start = self.store.position(from_version)
            end = self.store.position(to_version)
        except VersionNotFoundError as e:
            raise VersionRangeError(
                f"Unknown version in range: '{e.version}'",
                from_version=from_version,
                to_version=to_version,
            ) from e

        if start > end:
            raise VersionRangeError(
                "Range start was released after range end",
                from_version=from_version,
                to_version=to_version,
            )

        logger.debug(f"Resolved range {from_version}..{to_version} to positions {start}..{end}")
        return start, end
