"""Command-line front door for lazynav.

Builds a navigation stack for the target directory, waits for background loads
to settle, and prints the current listing plus the highlighted file's preview.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from platformdirs import user_log_dir

from .errors import NavError
from .listing import UNKNOWN_COUNT, LinkState, Listing
from .navigation import NavigationStack
from .options import SORT_KEYS, NavOptions
from .preview import Register
from .runtime.config import APP_NAME, load_nav_options

DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / "lazynav.log"


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_height() -> int:
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.lines - 2)


def configure_logging(log_file: Path, debug: bool) -> None:
    """Send log records to ``log_file``; the terminal stays reserved for output."""
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        handler = logging.NullHandler()
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[handler],
    )


def apply_cli_options(options: NavOptions, args: argparse.Namespace) -> NavOptions:
    """Layer explicit command-line flags over configured options."""
    changes: dict[str, object] = {}
    if args.sort is not None:
        changes["sort_by"] = args.sort
    if args.reverse:
        changes["reverse"] = True
    if args.hidden:
        changes["hidden"] = True
    if args.no_dirfirst:
        changes["dir_first"] = False
    if args.glob:
        changes["globsearch"] = True
    if args.previewer is not None:
        changes["previewer"] = args.previewer or None
    if args.highlight:
        changes["highlight"] = True
    return options.with_changes(**changes)


def format_listing(nav: NavigationStack, listing: Listing) -> list[str]:
    """Render listing rows: ``>`` marks the cursor and ``*`` marked entries.

    Directories are followed by their child count when it can be read.
    """
    if listing.loading:
        return ["loading..."]
    if not listing.visible:
        return ["empty"]
    rows: list[str] = []
    for i, entry in enumerate(listing.visible):
        cursor = ">" if i == listing.ind else " "
        mark = "*" if entry.path in nav.marks else " "
        name = entry.name + ("/" if entry.is_dir else "")
        if entry.link_state is LinkState.BROKEN:
            name += " (broken link)"
        elif entry.link_state is LinkState.WORKING:
            name += "@"
        if entry.is_dir:
            count = entry.count_children(nav.options.hidden)
            if count != UNKNOWN_COUNT:
                name += f"  {count}"
        rows.append(f"{cursor}{mark} {name}")
    return rows


def render_current(nav: NavigationStack) -> str:
    listing = nav.current_dir()
    out = [str(listing.path)]
    out.extend(format_listing(nav, listing))

    preview = nav.preview()
    nav.wait_until_idle()
    if isinstance(preview, Listing):
        preview = nav.loader.listings.get(preview.path, preview)
        out.append("")
        out.extend(format_listing(nav, preview))
    elif isinstance(preview, Register):
        preview = nav.loader.registers.get(preview.path, preview)
        out.append("")
        out.extend(preview.lines)
    return "\n".join(out) + "\n"


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print the listing for a directory."""
    parser = argparse.ArgumentParser(description="Browse a directory and print its listing and preview.")
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument("--select", metavar="FILE", help="Put the cursor on FILE (changes to its directory).")
    parser.add_argument("--sort", choices=SORT_KEYS, default=None, help="Sort key.")
    parser.add_argument("--reverse", action="store_true", help="Reverse the sort order.")
    parser.add_argument("--hidden", action="store_true", help="Show dot files.")
    parser.add_argument("--no-dirfirst", action="store_true", help="Do not list directories first.")
    parser.add_argument("--search", metavar="PATTERN", help="Move the cursor to the next entry matching PATTERN.")
    parser.add_argument("--glob", action="store_true", help="Treat search patterns as shell globs.")
    parser.add_argument("--previewer", default=None, help="Previewer program invoked as PROGRAM FILE HEIGHT.")
    parser.add_argument("--highlight", action="store_true", help="Syntax-highlight direct file previews.")
    parser.add_argument("--height", type=_positive_int, default=None, help="Viewport height (default: terminal).")
    parser.add_argument("--timeout", type=float, default=5.0, help="Seconds to wait for directory loads.")
    parser.add_argument("--log-file", type=Path, default=DEFAULT_LOG_PATH, help="Log file path.")
    parser.add_argument("--debug", action="store_true", help="Log debug messages.")
    args = parser.parse_args(argv)

    configure_logging(args.log_file, args.debug)
    options = apply_cli_options(load_nav_options(), args)
    height = args.height if args.height is not None else _default_height()

    try:
        nav = NavigationStack(height, options, path=args.path)
        if args.select is not None:
            nav.select_path(args.select)
        if not nav.wait_until_idle(timeout=args.timeout):
            raise SystemExit("Timed out waiting for directory loads.")
        if args.search:
            nav.search = args.search
            nav.search_next()
    except NavError as exc:
        raise SystemExit(str(exc)) from exc

    sys.stdout.write(render_current(nav))


if __name__ == "__main__":
    main()
