"""``hashroute routes`` — list registered redirects and routes.

Resolves an import string to a Router and prints one row per entry in
the order resolution tries them: redirects first, then routes.
"""

import argparse

from hashroute.cli._resolve import router_from_args


def run_routes(args: argparse.Namespace) -> None:
    """Print a KIND / PATTERN / TARGET table for the router."""
    router = router_from_args(args)

    rows: list[tuple[str, str, str]] = []
    for redirect in router.redirects:
        rows.append(("redirect", repr(redirect.from_pattern), router.config.root + redirect.to_path))
    for route in router.routes:
        handler_name = getattr(route.callback, "__name__", str(route.callback))
        if not route.update_history:
            handler_name = f"{handler_name} (no history)"
        rows.append(("route", repr(route.pattern), handler_name))

    max_kind = max(max(len(r[0]) for r in rows), 4)  # "KIND" header
    max_pattern = max(max(len(r[1]) for r in rows), 7)  # "PATTERN" header

    fmt = f"{{:<{max_kind}}}  {{:<{max_pattern}}}  {{}}"
    print(fmt.format("KIND", "PATTERN", "TARGET"))
    sep_len = max_kind + max_pattern + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for kind, pattern, target in rows:
        print(fmt.format(kind, pattern, target))
