"""hashroute CLI — route inspection and pattern testing.

Entry point registered as ``hashroute`` in ``pyproject.toml``::

    [project.scripts]
    hashroute = "hashroute.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``hashroute`` command."""
    parser = argparse.ArgumentParser(
        prog="hashroute",
        description="hashroute — client-side hash-fragment routing.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- hashroute routes --------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered redirects and routes")
    routes_parser.add_argument("router", help="Router or RouterConfig factory (e.g. myapp:router)")
    routes_parser.add_argument("--root", help="Root handed to a factory (e.g. /app)")

    # -- hashroute resolve -------------------------------------------------
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Show what a hash resolves to, without running callbacks",
    )
    resolve_parser.add_argument("router", help="Router or RouterConfig factory (e.g. myapp:router)")
    resolve_parser.add_argument("hash", help="Hash to resolve (e.g. '#/pages/test/')")
    resolve_parser.add_argument("--root", help="Root handed to a factory (e.g. /app)")

    # -- hashroute match ---------------------------------------------------
    match_parser = subparsers.add_parser("match", help="Test a pattern against a path")
    match_parser.add_argument("pattern", help="Route pattern (e.g. '/pages/:key/*rest')")
    match_parser.add_argument("path", help="Path to match")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "routes":
        from hashroute.cli._routes import run_routes

        run_routes(args)
    elif args.command == "resolve":
        from hashroute.cli._inspect import run_resolve

        run_resolve(args)
    elif args.command == "match":
        from hashroute.cli._inspect import run_match

        run_match(args)
