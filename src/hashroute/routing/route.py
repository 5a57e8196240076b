"""Route, Redirect, RouteMatch and Resolution frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from hashroute.routing.pattern import CompiledPattern

# callback(params, full_path)
RouteCallback = Callable[[dict[str, str], str], Any]


@dataclass(frozen=True, slots=True)
class Route:
    """A registered route.

    Created by ``Router.route()``; the pattern is compiled at that point.
    """

    pattern: str
    callback: RouteCallback
    matcher: CompiledPattern
    update_history: bool = True


@dataclass(frozen=True, slots=True)
class Redirect:
    """A registered redirect. ``to_path`` is relative to the router root."""

    from_pattern: str
    to_path: str
    matcher: CompiledPattern


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str]
    path: str


@dataclass(frozen=True, slots=True)
class Resolution:
    """What one resolution pass does for a hash.

    Exactly one of three outcomes:

    - redirect: ``redirect`` and ``target`` are set, nothing else is
    - route: ``match`` and ``base`` are set
    - unmatched: only ``base`` is set
    """

    path: str
    redirect: Redirect | None = None
    target: str | None = None
    match: RouteMatch | None = None
    base: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect is not None

    @property
    def is_unmatched(self) -> bool:
        return self.redirect is None and self.match is None
