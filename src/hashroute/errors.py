"""hashroute exception hierarchy.

Shared across the pattern compiler, the router, and the CLI so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class HashRouteError(Exception):
    """Base for all hashroute-specific errors."""


class ConfigurationError(HashRouteError):
    """Raised when router configuration is invalid.

    Typically raised while constructing ``RouterConfig`` or registering
    routes, before ``Router.start()``.
    """


@dataclass(frozen=True, slots=True)
class PatternCompileError(ConfigurationError):
    """A route or redirect pattern could not be compiled.

    Raised from ``Router.route()`` / ``Router.redirect()`` so a broken
    pattern aborts setup instead of failing on the first navigation.
    """

    pattern: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"Invalid pattern {self.pattern!r}: {self.detail}"
        return f"Invalid pattern {self.pattern!r}"


class UnmatchedPath(HashRouteError):  # noqa: N818 — mirrors the 404 naming of web routers
    """No redirect or route matched the resolved path.

    ``Router.match()`` raises it; ``Router.resolve()`` catches it and
    logs a warning instead.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No route matched: {path}")


class RedirectLoop(HashRouteError):  # noqa: N818
    """A redirect would revisit a path already in the current redirect chain."""

    def __init__(self, chain: tuple[str, ...]) -> None:
        self.chain = chain
        super().__init__("Redirect loop: " + " -> ".join(repr(p) for p in chain))
