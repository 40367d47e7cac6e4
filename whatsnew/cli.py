"""
Command-line interface for querying a "what's new" document.

Usage:
    whatsnew versions
    whatsnew show 2.0.20
    whatsnew category "Standard library"
    whatsnew search uuid
    whatsnew between 1.9.0 2.0.20 --no-code
    whatsnew --file docs/whats-new.md stats

The document is read once from --file, WHATSNEW_DOCUMENT_PATH or the
embedded default, then queried. Results go to stdout, logs and errors to stderr.
"""
import argparse
import logging
import sys
from typing import List, Optional

from whatsnew import __version__
from whatsnew.core.config import RENDER_WIDTH
from whatsnew.core.exceptions import WhatsNewError
from whatsnew.core.logging import setup_logging
from whatsnew.query.query_engine import QueryEngine
from whatsnew.records.record_store import RecordStore
from whatsnew.render.renderer import render, render_stats

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per query."""
    parser = argparse.ArgumentParser(
        prog="whatsnew",
        description="Query language and library changes across versions",
    )
    parser.add_argument(
        '--file',
        help='Document to load (markdown or HTML); defaults to WHATSNEW_DOCUMENT_PATH or the embedded document',
    )
    parser.add_argument(
        '--no-code',
        action='store_true',
        help='Omit code illustrations from the output',
    )
    parser.add_argument(
        '--width',
        type=int,
        default=RENDER_WIDTH,
        help='Maximum line width for descriptions',
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging',
    )
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser('versions', help='List documented versions in release order')

    show = subparsers.add_parser('show', help='Show every change of one version')
    show.add_argument('version', help='Version identifier, e.g. 2.0.20')

    category = subparsers.add_parser('category', help='List changes in a category')
    category.add_argument('name', help='Category, e.g. Language or "Standard library"')

    stability = subparsers.add_parser('stability', help='List changes with a stability tag')
    stability.add_argument('tag', help='Stable, Beta, Alpha, Experimental, Preview or Deprecated')

    search = subparsers.add_parser('search', help='Search titles and descriptions')
    search.add_argument('keyword', help='Case-insensitive keyword')

    between = subparsers.add_parser('between', help='List changes over an inclusive version range')
    between.add_argument('from_version', help='Oldest version to include')
    between.add_argument('to_version', help='Newest version to include')

    subparsers.add_parser('stats', help='Count changes per category and stability')

    return parser


def run_command(args: argparse.Namespace, engine: QueryEngine) -> str:
    """Execute a parsed command against the engine and return the rendered text."""
    include_code = not args.no_code
    store = engine.store

    if args.command == "versions":
        return "\n".join(
            f"{entry.version}  {entry.release_date}" if entry.release_date else entry.version
            for entry in store
        )
    if args.command == "show":
        return render([store.find_by_version(args.version)], include_code=include_code, width=args.width)
    if args.command == "category":
        return render(engine.filter_by_category(args.name), include_code=include_code, width=args.width)
    if args.command == "stability":
        return render(engine.query(stability=args.tag), include_code=include_code, width=args.width)
    if args.command == "search":
        return render(engine.search(args.keyword), include_code=include_code, width=args.width)
    if args.command == "between":
        entries = engine.entries_between(args.from_version, args.to_version)
        return render(entries, include_code=include_code, width=args.width)
    if args.command == "stats":
        return render_stats(engine.stats())

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for command-line usage."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Without --verbose the level comes from WHATSNEW_LOG_LEVEL
    setup_logging("whatsnew", level="DEBUG" if args.verbose else None)

    try:
        store = RecordStore.from_config(args.file)
        output = run_command(args, QueryEngine(store))
    except WhatsNewError as e:
        logger.debug(f"Command {args.command} failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: cannot read document: {e}", file=sys.stderr)
        return 1

    if output:
        print(output)
    else:
        print("No matching changes.", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
