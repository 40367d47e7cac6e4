"""
Plain-text renderer for query results.

Rendering is pure and deterministic: the same input always produces the
same text, and an empty input produces an empty string.
"""
import textwrap
from typing import Iterable, List, Optional, Union

from whatsnew.core.config import RENDER_INDENT, RENDER_WIDTH
from whatsnew.query.query_engine import QueryStats, SearchHit
from whatsnew.records.models import ChangeItem, Stability, VersionEntry

Renderable = Union[VersionEntry, ChangeItem, SearchHit]


def _wrap(text: str, indent: str, width: int) -> List[str]:
    """Wrap description text, keeping paragraphs and list items apart."""
    lines: List[str] = []
    for number, paragraph in enumerate(text.split("\n\n")):
        if number:
            lines.append("")
        for line in paragraph.split("\n"):
            hanging = indent + "  " if line.startswith(("- ", "* ", "+ ")) else indent
            lines.extend(
                textwrap.wrap(
                    line,
                    width=width,
                    initial_indent=indent,
                    subsequent_indent=hanging,
                    break_on_hyphens=False,
                )
                or [indent.rstrip()]
            )
    return lines


def _item_heading(item: ChangeItem, version: Optional[str] = None) -> str:
    heading = f"[{item.category.label}] {item.title}"
    if item.stability is not Stability.STABLE:
        heading += f" ({item.stability.value})"
    if version:
        heading = f"{version} {heading}"
    return heading


def render_item(
    item: ChangeItem,
    version: Optional[str] = None,
    include_code: bool = True,
    width: int = RENDER_WIDTH,
) -> str:
    """Render one change item; version, when given, prefixes the heading."""
    lines = [_item_heading(item, version)]
    if item.description:
        lines.extend(_wrap(item.description, RENDER_INDENT, width))
    if include_code and item.code:
        lines.append("")
        lines.extend(
            (RENDER_INDENT * 2 + code_line).rstrip()
            for code_line in item.code.split("\n")
        )
    return "\n".join(lines)


def render_entry(entry: VersionEntry, include_code: bool = True, width: int = RENDER_WIDTH) -> str:
    """Render a version heading followed by all of its change items."""
    heading = entry.version
    if entry.release_date:
        heading += f" ({entry.release_date})"

    blocks = [f"{heading}\n{'=' * len(heading)}"]
    if not entry.changes:
        blocks.append(f"{RENDER_INDENT}No documented changes.")
    blocks.extend(render_item(item, include_code=include_code, width=width) for item in entry.changes)
    return "\n\n".join(blocks)


def render(
    items: Iterable[Renderable],
    include_code: bool = True,
    width: int = RENDER_WIDTH,
) -> str:
    """
    Render entries, change items or (entry, item) search hits as text.

    Args:
        items: Any mix of VersionEntry, ChangeItem and (VersionEntry, ChangeItem)
        include_code: Whether to include code illustrations
        width: Maximum line width for wrapped descriptions

    Returns:
        Rendered text; blocks separated by a blank line, "" for empty input

    Raises:
        TypeError: If an element is none of the supported types
    """
    blocks: List[str] = []

    for element in items:
        if isinstance(element, VersionEntry):
            blocks.append(render_entry(element, include_code=include_code, width=width))
        elif isinstance(element, ChangeItem):
            blocks.append(render_item(element, include_code=include_code, width=width))
        elif (
            isinstance(element, tuple)
            and len(element) == 2
            and isinstance(element[0], VersionEntry)
            and isinstance(element[1], ChangeItem)
        ):
            entry, item = element
            blocks.append(
                render_item(item, version=entry.version, include_code=include_code, width=width)
            )
        else:
            raise TypeError(f"Cannot render object of type {type(element).__name__}")

    return "\n\n".join(blocks)


def render_stats(stats: QueryStats) -> str:
    """Render summary counts as an aligned text table."""
    lines = [
        f"Versions: {stats.version_count}",
        f"Changes:  {stats.change_count}",
    ]

    if stats.by_category:
        lines.extend(["", "By category:"])
        label_width = max(len(category.label) for category in stats.by_category)
        for category, count in stats.by_category.items():
            lines.append(f"{RENDER_INDENT}{category.label:<{label_width}}  {count}")

    if stats.by_stability:
        lines.extend(["", "By stability:"])
        label_width = max(len(stability.value) for stability in stats.by_stability)
        for stability, count in stats.by_stability.items():
            lines.append(f"{RENDER_INDENT}{stability.value:<{label_width}}  {count}")

    return "\n".join(lines)
