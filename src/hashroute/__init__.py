"""hashroute — client-side hash-fragment routing.

Resolves the part of a URL after ``#`` to a redirect or a route callback,
extracting ``:name`` and ``*name`` captures, and keeps a ``<base>`` href
pointed at the directory of the current path.

Basic usage::

    from hashroute import Router

    router = Router()

    router.redirect("", "/home")
    router.route("/home", lambda params, path: show("home"))
    router.route("/pages/:key/*rest", lambda params, path: show(params["key"]))

    router.start()
"""

__version__ = "0.1.0"
__all__ = [
    "BaseSink",
    "ConfigurationError",
    "DocumentHead",
    "HashChange",
    "HashRouteError",
    "Location",
    "PatternCompileError",
    "RedirectLoop",
    "Resolution",
    "Router",
    "RouterConfig",
    "UnmatchedPath",
    "compile_pattern",
    "derive_base",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import hashroute`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from hashroute.routing.router import Router

        return Router

    if name == "RouterConfig":
        from hashroute.config import RouterConfig

        return RouterConfig

    if name == "Resolution":
        from hashroute.routing.route import Resolution

        return Resolution

    if name == "compile_pattern":
        from hashroute.routing.pattern import compile_pattern

        return compile_pattern

    if name in ("BaseSink", "DocumentHead", "derive_base"):
        from hashroute import base as _base

        return getattr(_base, name)

    if name in ("HashChange", "Location"):
        from hashroute import events as _events

        return getattr(_events, name)

    if name in (
        "ConfigurationError",
        "HashRouteError",
        "PatternCompileError",
        "RedirectLoop",
        "UnmatchedPath",
    ):
        from hashroute import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
