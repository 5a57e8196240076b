"""Hash-change events and the ``Location`` that raises them.

``Location`` stands in for a browser's ``window.location``: setting the
hash queues a ``HashChange`` instead of notifying listeners in-line, so a
redirect issued from inside a resolution is handled on a later turn.

Delivery happens either synchronously::

    location.set_hash("/home")
    location.dispatch_pending()

or from a task::

    async with anyio.create_task_group() as tg:
        tg.start_soon(location.serve)
        ...
        location.close()
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

import anyio

logger = logging.getLogger("hashroute.events")

HashChangeListener = Callable[["HashChange"], object]


@dataclass(frozen=True, slots=True)
class HashChange:
    """A single hash-change notification."""

    old_url: str
    new_url: str

    @property
    def hash(self) -> str:
        """The new URL's fragment with its ``#``, or ``""`` when it has none."""
        fragment = urlsplit(self.new_url).fragment
        return f"#{fragment}" if fragment else ""


class Location:
    """Current URL plus a queue of pending hash-change notifications.

    Listeners are called in subscription order. A listener that raises is
    logged and skipped; later listeners and later events still run.

    The queue holds a pair of anyio memory object streams. ``close()``
    releases them once the queued events have been delivered; using the
    location as a context manager releases them on exit, dropping any
    events still queued.
    """

    __slots__ = ("_listeners", "_receive", "_send", "_serving", "_url")

    def __init__(self, url: str = "http://localhost/") -> None:
        self._url = url
        self._listeners: list[HashChangeListener] = []
        self._send, self._receive = anyio.create_memory_object_stream[HashChange](math.inf)
        self._serving = False

    def __enter__(self) -> "Location":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close(discard_pending=True)

    @property
    def href(self) -> str:
        return self._url

    @property
    def hash(self) -> str:
        fragment = urlsplit(self._url).fragment
        return f"#{fragment}" if fragment else ""

    @property
    def closed(self) -> bool:
        return self._send.statistics().open_send_streams == 0

    def set_hash(self, value: str) -> None:
        """Replace the fragment and queue a ``HashChange``.

        Like a browser, nothing is queued when the hash does not change.
        Raises ``anyio.ClosedResourceError`` after ``close()``, leaving
        the URL as it was.
        """
        fragment = value.removeprefix("#")
        parts = urlsplit(self._url)
        if fragment == parts.fragment:
            return
        new_url = urlunsplit(parts._replace(fragment=fragment))
        self._send.send_nowait(HashChange(old_url=self._url, new_url=new_url))
        self._url = new_url

    def subscribe(self, listener: HashChangeListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch_pending(self) -> int:
        """Deliver the events queued so far; returns how many were delivered.

        Events queued while delivering (a redirect's new hash) wait for
        the next call, the way a browser handles them on a later task.
        """
        pending = self._receive.statistics().current_buffer_used
        for _ in range(pending):
            self._notify(self._receive.receive_nowait())
        self._release_if_drained()
        return pending

    async def serve(self) -> None:
        """Deliver events as they arrive until ``close()`` is called."""
        if self._receive.statistics().open_receive_streams == 0:
            return
        self._serving = True
        try:
            async for event in self._receive:
                self._notify(event)
        finally:
            self._serving = False
            self._release_if_drained()

    def close(self, *, discard_pending: bool = False) -> None:
        """Stop accepting events.

        Queued events are still delivered by ``serve()`` or
        ``dispatch_pending()`` unless *discard_pending* is set. The
        streams are released once nothing is left to deliver.
        """
        self._send.close()
        if discard_pending:
            for _ in range(self._receive.statistics().current_buffer_used):
                self._receive.receive_nowait()
        self._release_if_drained()

    def _release_if_drained(self) -> None:
        stats = self._receive.statistics()
        if not self._serving and stats.open_send_streams == 0 and stats.current_buffer_used == 0:
            self._receive.close()

    def _notify(self, event: HashChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("hashchange listener failed for %s", event.new_url)
