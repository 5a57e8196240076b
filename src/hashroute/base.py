"""Base-path derivation and the ``<base>`` sink.

After every settled (non-redirect) resolution the router pushes a base
href so relative URLs in the loaded page resolve against the directory
of the current hash path.
"""

import html
import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

logger = logging.getLogger("hashroute.base")


def derive_base(root: str, path: str) -> str:
    """Return ``root`` joined with the directory part of ``path``.

    Examples::

        derive_base("", "/pages/test/")           -> "/pages/test/"
        derive_base("", "/pages/test/something")  -> "/pages/test/"
        derive_base("/app", "home")               -> "/app"
    """
    if not path.endswith("/"):
        path = path[: path.rfind("/") + 1]
    return root + path


@runtime_checkable
class BaseSink(Protocol):
    """Anything that can receive the current base href."""

    def set_base(self, href: str) -> None: ...


@dataclass(slots=True)
class BaseElement:
    """An in-memory ``<base>`` element."""

    href: str | None = None

    def render(self) -> str:
        if self.href is None:
            return "<base>"
        return f'<base href="{html.escape(self.href)}">'


class DocumentHead:
    """Default ``BaseSink``: a document head holding at most one ``<base>``.

    The element is created on the first write when none exists.
    """

    __slots__ = ("_base",)

    def __init__(self, base: BaseElement | None = None) -> None:
        self._base = base

    @property
    def base(self) -> BaseElement | None:
        return self._base

    @property
    def base_href(self) -> str | None:
        return self._base.href if self._base is not None else None

    def set_base(self, href: str) -> None:
        if self._base is None:
            self._base = BaseElement()
            logger.debug("Created <base> element")
        self._base.href = href

    def render(self) -> str:
        """Render the head's ``<base>`` tag, or ``""`` if there is none yet."""
        return self._base.render() if self._base is not None else ""
