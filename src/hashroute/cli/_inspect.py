"""``hashroute resolve`` and ``hashroute match`` — dry-run inspection.

Neither command calls route callbacks, writes a base href, or navigates.
"""

import argparse
import json
import sys

from hashroute.cli._resolve import router_from_args
from hashroute.errors import PatternCompileError
from hashroute.routing.pattern import compile_pattern


def run_resolve(args: argparse.Namespace) -> None:
    """Print the resolution plan for ``args.hash``. Exit 1 when nothing matches."""
    router = router_from_args(args)

    resolution = router.plan(args.hash)
    print(f"path:     {resolution.path!r}")

    if resolution.redirect is not None:
        print(f"redirect: {resolution.redirect.from_pattern!r} -> {resolution.target!r}")
        return

    print(f"base:     {resolution.base!r}")
    if resolution.match is None:
        print("route:    (no match)")
        raise SystemExit(1)

    route = resolution.match.route
    handler_name = getattr(route.callback, "__name__", str(route.callback))
    print(f"route:    {route.pattern!r} ({handler_name})")
    print(f"params:   {json.dumps(resolution.match.params, sort_keys=True)}")


def run_match(args: argparse.Namespace) -> None:
    """Print the captures as JSON. Exit 1 on no match, 2 on a bad pattern."""
    try:
        matcher = compile_pattern(args.pattern)
    except PatternCompileError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    params = matcher.match(args.path)
    if params is None:
        print("no match", file=sys.stderr)
        raise SystemExit(1)
    print(json.dumps(params, sort_keys=True))
