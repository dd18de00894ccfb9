#!/usr/bin/env python3
"""
Dependency Mapper CLI

A tool for discovering the project and NuGet package dependency graph of a
.NET source tree from restored project.assets.json files, and printing it
in various formats.
"""

import argparse
import logging
import sys
from pathlib import Path

from scanner.builder import discover
from scanner.config import ConfigError, load_config
from scanner.manifest import ManifestError
from exporters import to_mermaid, to_ascii, to_json


def non_negative_int(value):
    """Argparse type for depth limits."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be a non-negative integer, got {number}")
    return number


def parse_args(args=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="depmap",
        description="Discover project and package references of a restored .NET source tree.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  depmap .                                   # Outbound graph, ASCII output
  depmap ./src -f mermaid                    # Mermaid output for src directory
  depmap . --inbound                         # What depends on each package
  depmap . --exclude-packages Microsoft.,System. --include-packages Contoso.
  depmap . --include-projects "Contoso.Api, Contoso.Web"
  depmap . -f json -o graph.json             # JSON output to file
  depmap . --config depmap.yaml              # Settings from a YAML file
        """,
    )

    # Positional arguments
    parser.add_argument(
        "root",
        nargs="?",
        default=None,
        help="Root directory of the source tree (default: current directory)",
    )

    # Output options
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file (default: stdout)",
    )

    parser.add_argument(
        "-f", "--format",
        choices=["ascii", "mermaid", "json"],
        default="ascii",
        help="Output format (default: ascii)",
    )

    # Mermaid-specific options
    parser.add_argument(
        "--orientation",
        choices=["LR", "TD", "TB", "RL", "BT"],
        default="LR",
        help="Mermaid flowchart orientation (default: LR)",
    )

    parser.add_argument(
        "--group-by-kind",
        action="store_true",
        help="Group projects and packages into separate subgraphs in Mermaid output",
    )

    # ASCII-specific options
    parser.add_argument(
        "--ascii-style",
        choices=["tree", "ascii"],
        default="tree",
        help="ASCII output style: 'tree' (Unicode) or 'ascii' (pure ASCII)",
    )

    # Discovery options
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file (default: $DEPMAP_CONFIG if set)",
    )

    parser.add_argument(
        "--inbound",
        action="store_true",
        default=None,
        help="Graph inbound references (what depends on each package) instead of outbound",
    )

    parser.add_argument(
        "--no-recurse",
        dest="recurse",
        action="store_false",
        default=None,
        help="Only inspect the root directory",
    )

    parser.add_argument(
        "--include-packages",
        default=None,
        help="Comma-separated package name prefixes to include; all others are excluded",
    )

    parser.add_argument(
        "--exclude-packages",
        default=None,
        help="Comma-separated package name prefixes to exclude (applies with --include-packages)",
    )

    parser.add_argument(
        "--include-projects",
        default=None,
        help="Comma-separated project name prefixes to include; all others are excluded",
    )

    parser.add_argument(
        "--exclude-projects",
        default=None,
        help="Comma-separated project name prefixes to exclude (applies with --include-projects)",
    )

    parser.add_argument(
        "--exclude-dir",
        nargs="+",
        default=None,
        help="Directory names not to descend into",
    )

    parser.add_argument(
        "--max-depth",
        type=non_negative_int,
        default=None,
        help="Maximum directory depth to scan",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log output (-v for info, -vv for debug)",
    )

    return parser.parse_args(args)


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(args=None):
    """Main entry point."""
    parsed = parse_args(args)
    _configure_logging(parsed.verbose)

    try:
        config = load_config(parsed.config).merge(
            root=parsed.root,
            recurse=parsed.recurse,
            inbound=parsed.inbound,
            include_packages=parsed.include_packages,
            exclude_packages=parsed.exclude_packages,
            include_projects=parsed.include_projects,
            exclude_projects=parsed.exclude_projects,
            exclude_dirs=parsed.exclude_dir,
            max_depth=parsed.max_depth,
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Resolve paths
    root = Path(config.root).resolve()
    if not root.is_dir():
        print(f"Error: '{config.root}' is not a directory", file=sys.stderr)
        return 1

    # Discover the graph
    try:
        result = discover(
            root,
            recurse=config.recurse,
            mode=config.mode,
            project_filter=config.project_filter(),
            package_filter=config.package_filter(),
            exclude_dirs=config.exclude_dirs,
            max_depth=config.max_depth,
        )
    except ManifestError as e:
        print(f"Error reading manifest: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error scanning directory tree: {e}", file=sys.stderr)
        return 1

    # Generate output
    if parsed.format == "mermaid":
        output = to_mermaid(
            result,
            orientation=parsed.orientation,
            group_by_kind=parsed.group_by_kind,
        )
    elif parsed.format == "json":
        output = to_json(result)
    else:  # ascii (default)
        output = to_ascii(result, style=parsed.ascii_style)

    # Write output
    if parsed.output:
        try:
            output_path = Path(parsed.output)
            output_path.write_text(output, encoding="utf-8")
            print(f"Output written to: {output_path}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
