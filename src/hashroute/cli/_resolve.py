"""Locate the Router that ``hashroute routes`` and ``hashroute resolve`` inspect.

``ROUTER`` is ``module[:name]``, with ``name`` defaulting to ``router``.
The name may refer to a configured Router, or to a factory that takes a
``RouterConfig`` and returns one::

    def create_router(config: RouterConfig) -> Router:
        return Router(config).redirect("", "/home").route("/home", show_home)

``--root`` builds the config handed to a factory.
"""

import argparse
import importlib
import sys

from hashroute.config import RouterConfig
from hashroute.errors import ConfigurationError
from hashroute.routing.router import Router


def load_router(target: str, root: str | None = None) -> Router:
    """Import *target* and return a Router with at least one entry.

    Raises:
        ImportError: If the module cannot be imported.
        AttributeError: If the module has no such name.
        TypeError: If the name is neither a Router nor a factory returning one.
        ConfigurationError: If *root* is given for a Router that already
            has a different one, is itself invalid, or the router has no
            routes or redirects.

    """
    module_name, _, name = target.partition(":")
    obj = getattr(importlib.import_module(module_name), name or "router")

    if isinstance(obj, Router):
        if root is not None and root != obj.config.root:
            msg = f"{target!r} is already configured with root {obj.config.root!r}; --root only applies to factories"
            raise ConfigurationError(msg)
        router = obj
    elif callable(obj):
        router = obj(RouterConfig() if root is None else RouterConfig(root=root))
        if not isinstance(router, Router):
            msg = f"factory {target!r} returned {type(router).__name__}, expected a Router"
            raise TypeError(msg)
    else:
        msg = f"{target!r} is a {type(obj).__name__}, not a Router or a RouterConfig factory"
        raise TypeError(msg)

    if not router.routes and not router.redirects:
        msg = f"{target!r} has no routes or redirects registered"
        raise ConfigurationError(msg)
    return router


def router_from_args(args: argparse.Namespace) -> Router:
    """``load_router`` for a command; prints the error and exits 1 on failure."""
    try:
        return load_router(args.router, args.root)
    except (ImportError, AttributeError, TypeError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
