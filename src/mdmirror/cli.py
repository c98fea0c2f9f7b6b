"""Command-line entry point.

Runs the forward and reverse pipelines on files without a GUI host, which
is handy for checking how a document will render and what the editor will
write back after a round trip through the preview.
"""

import argparse
import asyncio
import logging
import sys

from . import __version__
from .converters.tree_to_markdown import convert_with_warnings
from .file_handler import list_directory_async, read_file_async
from .lifespan import build_pipeline, load_runtime_config
from .logger import setup_logging
from .models import DirectoryEntry
from .stats import document_stats
from .tree.html import to_html
from .tree.nodes import outline

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdmirror",
        description="mdmirror - Markdown editor sync engine tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the rendered tree of a document
  mdmirror render README.md

  # Render to HTML without invoking the Mermaid CLI
  mdmirror render README.md --html --no-diagrams

  # Show what the editor writes back after editing in the preview
  mdmirror normalize README.md

  # Word, character and line counts
  mdmirror stats README.md

  # Browse Markdown files
  mdmirror ls docs/
        """,
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    parser.add_argument("--log-file", help="Also write log records to this file")
    parser.add_argument(
        "--debug-format",
        choices=["text", "json"],
        default="text",
        help="Log record format (default: text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"mdmirror version {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a Markdown file")
    render.add_argument("file")
    render.add_argument(
        "--html", action="store_true", help="Print HTML instead of the tree"
    )
    render.add_argument(
        "--no-diagrams",
        action="store_true",
        help="Leave diagram blocks as code blocks",
    )

    normalize = sub.add_parser(
        "normalize", help="Round-trip a file through the rendered view"
    )
    normalize.add_argument("file")
    normalize.add_argument(
        "--no-diagrams",
        action="store_true",
        help="Leave diagram blocks as code blocks",
    )

    stats = sub.add_parser("stats", help="Print document statistics")
    stats.add_argument("file")

    ls = sub.add_parser("ls", help="List Markdown files under a directory")
    ls.add_argument("directory", nargs="?", default=".")
    return parser


def _format_entries(entries: list[DirectoryEntry], indent: int = 0) -> str:
    lines = []
    for entry in entries:
        pad = "  " * indent
        if entry.kind == "directory":
            lines.append(f"{pad}{entry.name}/")
            if entry.children:
                lines.append(_format_entries(entry.children, indent + 1))
        else:
            lines.append(f"{pad}{entry.name}")
    return "\n".join(line for line in lines if line)


async def _render(args: argparse.Namespace) -> int:
    config = load_runtime_config({"no_diagrams": args.no_diagrams})
    content, _, _ = await read_file_async(args.file)
    pipeline = build_pipeline(config, config.theme)
    tree = await pipeline.render(content)

    if args.command == "normalize":
        result = convert_with_warnings(tree)
        for warning in result.warnings:
            logger.warning(warning)
        sys.stdout.write(result.text)
    elif args.html:
        print(to_html(tree))
    else:
        sys.stdout.write(outline(tree))
    return 0


async def _stats(args: argparse.Namespace) -> int:
    content, _, _ = await read_file_async(args.file)
    stats = document_stats(content)
    print(f"words: {stats.words}")
    print(f"chars: {stats.chars}")
    print(f"lines: {stats.lines}")
    return 0


async def _ls(args: argparse.Namespace) -> int:
    _, entries = await list_directory_async(args.directory)
    text = _format_entries(entries)
    if text:
        print(text)
    return 0


_COMMANDS = {
    "render": _render,
    "normalize": _render,
    "stats": _stats,
    "ls": _ls,
}


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = _build_parser().parse_args(argv)
    setup_logging(
        debug=args.debug,
        log_file=args.log_file,
        debug_format=args.debug_format,
    )

    try:
        return asyncio.run(_COMMANDS[args.command](args))
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
