"""Hash router — ordered redirects and routes, first match wins.

Patterns are compiled at registration. Resolution strips the configured
root, tries every redirect, then every route, each in registration
order.
"""

import logging
from collections.abc import Callable
from typing import Any

from hashroute.base import BaseSink, DocumentHead, derive_base
from hashroute.config import RouterConfig
from hashroute.errors import RedirectLoop, UnmatchedPath
from hashroute.events import HashChange, Location
from hashroute.routing.pattern import compile_pattern
from hashroute.routing.route import Redirect, Resolution, Route, RouteCallback, RouteMatch

logger = logging.getLogger("hashroute.router")


class Router:
    """Client-side hash router.

    Usage::

        router = Router(RouterConfig(root="/app"))
        router.redirect("", "/home").route("/home", show_home)
        router.route("/pages/:key/*rest", show_page)
        router.start()

    Register everything before ``start()``. Changing the route or
    redirect lists while a resolution is running is not supported.
    """

    __slots__ = (
        "_config",
        "_location",
        "_owns_location",
        "_page_loader",
        "_redirect_chain",
        "_redirects",
        "_routes",
        "_sink",
        "_unsubscribe",
    )

    def __init__(
        self,
        config: RouterConfig | None = None,
        *,
        location: Location | None = None,
        sink: BaseSink | None = None,
    ) -> None:
        self._config = config or RouterConfig()
        # Created on first use when not supplied; closed again by stop()
        self._location = location
        self._owns_location = location is None
        self._sink = sink if sink is not None else DocumentHead()
        self._routes: list[Route] = []
        self._redirects: list[Redirect] = []
        self._page_loader: Callable[..., Any] | None = None
        self._redirect_chain: list[str] = []
        self._unsubscribe: Callable[[], None] | None = None

    # -- Registration ------------------------------------------------------

    def route(self, pattern: str, callback: RouteCallback, update_history: bool = True) -> "Router":
        """Register a route. Raises ``PatternCompileError`` for a bad pattern."""
        matcher = compile_pattern(pattern)
        self._routes.append(
            Route(pattern=pattern, callback=callback, matcher=matcher, update_history=update_history)
        )
        return self

    def on(self, pattern: str, *, update_history: bool = True) -> Callable[[RouteCallback], RouteCallback]:
        """Decorator form of ``route()``::

        @router.on("/pages/:key/")
        def show(params, path): ...
        """

        def decorator(callback: RouteCallback) -> RouteCallback:
            self.route(pattern, callback, update_history)
            return callback

        return decorator

    def redirect(self, from_pattern: str, to_path: str) -> "Router":
        """Register a redirect. ``to_path`` is relative to the root."""
        matcher = compile_pattern(from_pattern)
        self._redirects.append(Redirect(from_pattern=from_pattern, to_path=to_path, matcher=matcher))
        return self

    def set_page_loader(self, loader: Callable[..., Any]) -> "Router":
        """Store a page loader for route callbacks to use. The router never calls it."""
        self._page_loader = loader
        return self

    # -- Introspection -----------------------------------------------------

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def location(self) -> Location:
        if self._location is None:
            self._location = Location()
        return self._location

    @property
    def sink(self) -> BaseSink:
        return self._sink

    @property
    def page_loader(self) -> Callable[..., Any] | None:
        return self._page_loader

    @property
    def routes(self) -> tuple[Route, ...]:
        return tuple(self._routes)

    @property
    def redirects(self) -> tuple[Redirect, ...]:
        return tuple(self._redirects)

    # -- Lifecycle ---------------------------------------------------------

    def start(self) -> None:
        """Resolve the current hash, then follow hash changes."""
        self.resolve(self.location.hash)
        if self._unsubscribe is None:
            self._unsubscribe = self.location.subscribe(self.handle_hash_change)

    def stop(self) -> None:
        """Stop following hash changes. Safe to call more than once.

        A location the router created itself is closed, dropping any
        queued events; the next ``start()`` gets a fresh one.
        """
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._owns_location and self._location is not None:
            self._location.close(discard_pending=True)
            self._location = None

    def handle_hash_change(self, event: HashChange) -> None:
        self.resolve(event.hash)

    # -- Matching ----------------------------------------------------------

    def normalize(self, raw_hash: str) -> str:
        """Drop the leading ``#`` (``""`` becomes ``"/"``), then the root prefix."""
        path = raw_hash.removeprefix("#") or "/"
        root = self._config.root
        if root and path.startswith(root):
            path = path[len(root) :]
        return path

    def find_redirect(self, path: str) -> Redirect | None:
        """Return the first redirect whose pattern matches *path*."""
        for redirect in self._redirects:
            if redirect.matcher.match(path) is not None:
                return redirect
        return None

    def match(self, path: str) -> RouteMatch:
        """Match an already-normalized path against the routes.

        Raises ``UnmatchedPath`` if no route matches.
        """
        for route in self._routes:
            params = route.matcher.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params, path=path)
        raise UnmatchedPath(path)

    def plan(self, raw_hash: str) -> Resolution:
        """Decide what resolving *raw_hash* would do, without doing it."""
        path = self.normalize(raw_hash)
        redirect = self.find_redirect(path)
        if redirect is not None:
            return Resolution(path=path, redirect=redirect, target=self._config.root + redirect.to_path)

        base = derive_base(self._config.root, path)
        try:
            match = self.match(path)
        except UnmatchedPath:
            return Resolution(path=path, base=base)
        return Resolution(path=path, match=match, base=base)

    # -- Resolution --------------------------------------------------------

    def resolve(self, raw_hash: str) -> None:
        """Resolve a hash: redirect, or update the base and run the first matching route.

        An unmatched path or a detected redirect loop is logged, never
        raised. Exceptions from route callbacks propagate.
        """
        resolution = self.plan(raw_hash)
        logger.debug("Resolving %r", resolution.path)

        if resolution.redirect is not None:
            self._follow_redirect(resolution)
            return

        self._redirect_chain.clear()
        self._sink.set_base(resolution.base)

        if resolution.match is None:
            logger.warning("No route matched: %s", resolution.path)
            return

        match = resolution.match
        match.route.callback(match.params, match.path)

    def _follow_redirect(self, resolution: Resolution) -> None:
        target = resolution.target
        if self._config.detect_redirect_loops:
            # A chain continues only from the path its last redirect led to.
            if not self._redirect_chain or self._redirect_chain[-1] != resolution.path:
                self._redirect_chain[:] = [resolution.path]
            target_path = self.normalize(target)
            if target_path in self._redirect_chain:
                error = RedirectLoop((*self._redirect_chain, target_path))
                self._redirect_chain.clear()
                logger.error("%s", error)
                return
            self._redirect_chain.append(target_path)

        logger.debug("Redirecting %r -> %r", resolution.path, target)
        self.location.set_hash(target)
