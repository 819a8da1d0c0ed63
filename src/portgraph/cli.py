"""Command-line interface for portgraph: list ports, print dependency closures and graphs."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from portgraph import __version__
from portgraph.api import depend_info
from portgraph.core.closure import UnknownPackageError
from portgraph.core.finder import find_ports_root
from portgraph.core.registry import Registry, load_registry


def _load(ports: str | None) -> Registry | None:
    """Load the registry, printing an error if there is no ports tree."""
    root = find_ports_root(ports)
    if root is None:
        if ports:
            print(f"Ports directory not found: {ports}", file=sys.stderr)
        else:
            print(
                "No ports directory found. Use --ports, or set PORTGRAPH_PORTS or VCPKG_ROOT.",
                file=sys.stderr,
            )
        return None
    return load_registry(root)


def cmd_depend_info(args: argparse.Namespace) -> int:
    """Print the dependencies of the given ports (or of all ports)."""
    registry = _load(args.ports)
    if registry is None:
        return 1

    try:
        output = depend_info(
            args.packages,
            registry,
            fmt=args.format,
            strict=args.strict,
        )
    except UnknownPackageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.output:
        Path(args.output).write_text(output + "\n")
        print(f"Graph written to: {args.output}", file=sys.stderr)
    elif output:
        print(output)
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List known ports."""
    registry = _load(args.ports)
    if registry is None:
        return 1

    ports = sorted(registry, key=lambda p: p.name)
    if args.json:
        print(json.dumps({p.name: p.to_dict() for p in ports}, indent=2))
        return 0
    if not ports:
        print("No ports found.")
        return 0
    print(f"Found {len(ports)} port(s):\n")
    for port in ports:
        if args.verbose:
            version = f" ({port.version})" if port.version else ""
            print(f"  {port.name}{version}: {port.path}")
        else:
            print(f"  {port.name}")
    return 0


def cmd_tui(args: argparse.Namespace) -> int:
    """Launch the interactive TUI."""
    from portgraph.tui.app import ClosureApp

    app = ClosureApp(root_package=args.package, ports=args.ports)
    app.run()
    return 0


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="portgraph",
        description="Explore port dependency closures from the command line.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        dest="log_verbose",
        action="store_true",
        help="Log debug messages to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # portgraph depend-info
    info_parser = subparsers.add_parser(
        "depend-info",
        help="Show the dependencies of ports",
        description=(
            "Without arguments, list the direct dependencies of every port. "
            "With package names, list every port reachable from them."
        ),
    )
    info_parser.add_argument(
        "packages",
        nargs="*",
        help="Ports to start from (default: all ports)",
    )
    fmt_group = info_parser.add_mutually_exclusive_group()
    fmt_group.add_argument(
        "--dot",
        dest="format",
        action="store_const",
        const="dot",
        help="Output a Graphviz (DOT) graph",
    )
    fmt_group.add_argument(
        "--dgml",
        dest="format",
        action="store_const",
        const="dgml",
        help="Output a DGML graph (includes feature dependencies)",
    )
    fmt_group.add_argument(
        "--mermaid",
        dest="format",
        action="store_const",
        const="mermaid",
        help="Output a Mermaid flowchart",
    )
    fmt_group.add_argument(
        "--json",
        dest="format",
        action="store_const",
        const="json",
        help="Output the dependency map as JSON",
    )
    info_parser.set_defaults(format="text")
    info_parser.add_argument(
        "-p",
        "--ports",
        metavar="PATH",
        help="Ports directory (default: $PORTGRAPH_PORTS, $VCPKG_ROOT/ports or ./ports)",
    )
    info_parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    info_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if a requested or reached port is not in the ports directory",
    )
    info_parser.set_defaults(func=cmd_depend_info)

    # portgraph list
    list_parser = subparsers.add_parser(
        "list",
        help="List known ports",
        description="List the ports found in the ports directory.",
    )
    list_parser.add_argument(
        "-p",
        "--ports",
        metavar="PATH",
        help="Ports directory (default: $PORTGRAPH_PORTS, $VCPKG_ROOT/ports or ./ports)",
    )
    list_parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show versions and definition files",
    )
    list_parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    list_parser.set_defaults(func=cmd_list)

    # portgraph tui
    tui_parser = subparsers.add_parser(
        "tui",
        help="Launch the interactive terminal UI",
        description="Browse dependency closures interactively.",
    )
    tui_parser.add_argument(
        "package",
        nargs="?",
        help="Optional: start with this port's closure",
    )
    tui_parser.add_argument(
        "-p",
        "--ports",
        metavar="PATH",
        help="Ports directory (default: $PORTGRAPH_PORTS, $VCPKG_ROOT/ports or ./ports)",
    )
    tui_parser.set_defaults(func=cmd_tui)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the portgraph CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_verbose)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
