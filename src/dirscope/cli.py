"""
CLI entrypoint for dirscope.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from colorama import Fore, Style, init as colorama_init

from .config import ScanSettings, load_pattern_file, split_patterns
from .core import resolve_module_patterns, scan_tree
from .errors import DirscopeError, ModuleError
from .modules import load_module_graph
from .size import estimate_size
from .tree import render_tree

_LEVEL_COLORS = {
    logging.DEBUG: Style.DIM,
    logging.INFO: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
}


class ColorHandler(logging.StreamHandler):
    """Stderr handler colouring records by level."""

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        color = _LEVEL_COLORS.get(record.levelno, "")
        return f"{color}{msg}{Style.RESET_ALL}" if color else msg


def _setup_logging(verbosity: int) -> None:
    colorama_init()
    handler = ColorHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[dirscope] %(message)s"))
    logger = logging.getLogger("dirscope")
    logger.handlers[:] = [handler]
    logger.propagate = False
    if verbosity >= 2:
        logger.setLevel(logging.DEBUG)
    elif verbosity == 1:
        logger.setLevel(logging.INFO)
    else:
        logger.setLevel(logging.WARNING)


def _add_pattern_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("root", type=Path, help="Project root dir")
    p.add_argument("--exclude", default="", help="Comma-separated exclude patterns")
    p.add_argument(
        "--config",
        type=Path,
        help="Path to a file with extra exclude patterns (one per line)",
    )
    p.add_argument("--no-gitignore", action="store_true", help="Ignore the root .gitignore")
    p.add_argument("--no-vcs", action="store_true", help="Do not exclude .git")
    p.add_argument("--include-dotfiles", action="store_true", help="Do not exclude dotfiles")


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="dirscope",
        description="Scan a project tree and flag excluded entries.",
    )
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbose logging (-vv for debug)")
    sub = p.add_subparsers(dest="command", required=True)

    scan = sub.add_parser("scan", help="Scan a directory and print the tree")
    _add_pattern_args(scan)
    scan.add_argument("--include", default="", help="Comma-separated include (allow-list) patterns")
    scan.add_argument("--format", choices=("json", "tree"), default="json", help="Output format")
    scan.add_argument("--hide-excluded", action="store_true", help="Leave excluded entries out of tree output")
    scan.add_argument("--out", type=Path, help="Write output to this file instead of stdout")

    size = sub.add_parser("size", help="Estimate file count and size before scanning")
    _add_pattern_args(size)

    modules = sub.add_parser("modules", help="Resolve the pattern closure of a module")
    modules.add_argument("file", type=Path, help="JSON file with a 'modules' list")
    modules.add_argument("module_id", help="Module id to resolve")
    return p.parse_args(argv)


def _settings(ns: argparse.Namespace) -> ScanSettings:
    return ScanSettings(
        respect_gitignore=not ns.no_gitignore,
        ignore_vcs=not ns.no_vcs,
        ignore_dotfiles=not ns.include_dotfiles,
    )


def _exclude_patterns(ns: argparse.Namespace) -> list:
    patterns = split_patterns(ns.exclude)
    if ns.config:
        patterns.extend(load_pattern_file(ns.config.resolve()))
        logging.getLogger("dirscope").info("Loaded extra patterns from %s", ns.config)
    return patterns


def _emit(text: str, out_path) -> None:
    if out_path is None:
        print(text)
        return
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        raise DirscopeError(f"Could not write output file '{out_path}': {e}")
    logging.getLogger("dirscope").info("Done → %s", out_path)


def _run_scan(ns: argparse.Namespace) -> int:
    tree = scan_tree(ns.root.resolve(), _exclude_patterns(ns), ns.include, _settings(ns))
    if ns.format == "tree":
        text = render_tree(tree, show_excluded=not ns.hide_excluded)
    else:
        text = json.dumps(tree.to_dict(), indent=2)
    _emit(text, ns.out)
    return 1 if tree.error else 0


def _run_size(ns: argparse.Namespace) -> int:
    report = estimate_size(ns.root.resolve(), _exclude_patterns(ns), _settings(ns))
    print(json.dumps(report.to_dict(), indent=2))
    return 0


def _run_modules(ns: argparse.Namespace) -> int:
    graph = load_module_graph(ns.file)
    module_id = ns.module_id
    if module_id not in graph and module_id.isdigit() and int(module_id) in graph:
        module_id = int(module_id)
    if module_id not in graph:
        raise ModuleError(f"Module {ns.module_id!r} not found in '{ns.file}'")
    for pattern in sorted(resolve_module_patterns(module_id, graph)):
        print(pattern)
    return 0


_COMMANDS = {
    "scan": _run_scan,
    "size": _run_size,
    "modules": _run_modules,
}


def main(argv=None) -> None:
    try:
        ns = _parse_args(argv)
        _setup_logging(ns.verbose)
        sys.exit(_COMMANDS[ns.command](ns))
    except DirscopeError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
