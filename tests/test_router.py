"""Tests for hashroute.routing.router — registration, matching, resolution."""

import gc
import logging

import pytest

from hashroute.base import DocumentHead
from hashroute.config import RouterConfig
from hashroute.errors import PatternCompileError, UnmatchedPath
from hashroute.events import Location
from hashroute.routing.router import Router


class Recorder:
    """Route callback that records every call."""

    def __init__(self, name: str = "handler") -> None:
        self.__name__ = name
        self.calls: list[tuple[dict[str, str], str]] = []

    def __call__(self, params: dict[str, str], path: str) -> None:
        self.calls.append((params, path))


def _router(root: str = "", url: str = "http://localhost/") -> Router:
    return Router(RouterConfig(root=root), location=Location(url), sink=DocumentHead())


class TestRegistration:
    def test_route_is_chainable(self) -> None:
        r = _router()
        assert r.route("/a", Recorder()) is r
        assert r.redirect("/b", "/a") is r
        assert r.set_page_loader(print) is r

    def test_registration_order_kept(self) -> None:
        r = _router()
        r.route("/a", Recorder()).route("/b", Recorder())
        assert [route.pattern for route in r.routes] == ["/a", "/b"]

    def test_update_history_default(self) -> None:
        r = _router()
        r.route("/a", Recorder()).route("/b", Recorder(), update_history=False)
        assert [route.update_history for route in r.routes] == [True, False]

    def test_invalid_route_pattern_raises_at_registration(self) -> None:
        r = _router()
        with pytest.raises(PatternCompileError):
            r.route("/:id/:id", Recorder())
        assert r.routes == ()

    def test_invalid_redirect_pattern_raises_at_registration(self) -> None:
        r = _router()
        with pytest.raises(PatternCompileError):
            r.redirect("/*x/*x", "/home")
        assert r.redirects == ()

    def test_decorator(self) -> None:
        r = _router()

        @r.on("/pages/:key/", update_history=False)
        def show(params: dict[str, str], path: str) -> None:
            pass

        assert r.routes[0].callback is show
        assert r.routes[0].update_history is False

    def test_page_loader_stored_not_called(self) -> None:
        calls: list[object] = []
        r = _router()
        r.set_page_loader(calls.append)
        r.route("/home", Recorder())
        r.resolve("#/home")
        assert r.page_loader == calls.append
        assert calls == []

    def test_routes_are_a_snapshot(self) -> None:
        r = _router()
        snapshot = r.routes
        r.route("/a", Recorder())
        assert snapshot == ()


class TestNormalize:
    def test_drops_hash(self) -> None:
        assert _router().normalize("#/home") == "/home"

    def test_empty_becomes_slash(self) -> None:
        assert _router().normalize("") == "/"
        assert _router().normalize("#") == "/"

    def test_bare_path_kept(self) -> None:
        assert _router().normalize("/home") == "/home"

    def test_root_stripped(self) -> None:
        assert _router("/app").normalize("#/app/home") == "/home"

    def test_root_stripping_is_literal(self) -> None:
        assert _router("/app").normalize("#/apple") == "le"

    def test_root_not_present(self) -> None:
        assert _router("/app").normalize("#/home") == "/home"

    def test_hash_equal_to_root(self) -> None:
        assert _router("/app").normalize("#/app") == ""


class TestMatch:
    def test_first_match_wins(self) -> None:
        first, second = Recorder("first"), Recorder("second")
        r = _router().route("/pages/:key", first).route("/pages/*rest", second)
        assert r.match("/pages/x").route.callback is first

    def test_unmatched_raises(self) -> None:
        r = _router().route("/home", Recorder())
        with pytest.raises(UnmatchedPath) as exc_info:
            r.match("/nope")
        assert exc_info.value.path == "/nope"

    def test_zero_captures_is_empty_dict(self) -> None:
        r = _router().route("/home", Recorder())
        assert r.match("/home").params == {}

    def test_find_redirect_order(self) -> None:
        r = _router().redirect("/old/*x", "/a").redirect("/old/:y", "/b")
        redirect = r.find_redirect("/old/z")
        assert redirect is not None
        assert redirect.to_path == "/a"

    def test_find_redirect_none(self) -> None:
        assert _router().redirect("/old", "/new").find_redirect("/other") is None


class TestPlan:
    def test_redirect(self) -> None:
        r = _router("/app").redirect("/old", "/new").route("/old", Recorder())
        plan = r.plan("#/app/old")
        assert plan.is_redirect
        assert plan.target == "/app/new"
        assert plan.match is None
        assert plan.base is None

    def test_route(self) -> None:
        r = _router().route("/pages/:key/*rest", Recorder())
        plan = r.plan("#/pages/test/something/deep")
        assert plan.match is not None
        assert plan.match.params == {"key": "test", "rest": "something/deep"}
        assert plan.base == "/pages/test/something/"

    def test_unmatched(self) -> None:
        plan = _router().plan("#/nothing/here")
        assert plan.is_unmatched
        assert plan.base == "/nothing/"

    def test_has_no_side_effects(self) -> None:
        handler = Recorder()
        r = _router().redirect("/old", "/home").route("/home", handler)
        r.plan("#/old")
        r.plan("#/home")
        assert handler.calls == []
        assert r.location.hash == ""
        assert r.sink.base_href is None  # type: ignore[attr-defined]


class TestResolve:
    def test_callback_receives_params_and_stripped_path(self) -> None:
        handler = Recorder()
        r = _router("/app").route("/pages/:key/*rest", handler)
        r.resolve("#/app/pages/test/something/deep")
        assert handler.calls == [({"key": "test", "rest": "something/deep"}, "/pages/test/something/deep")]

    def test_only_first_matching_route_fires(self) -> None:
        first, second = Recorder(), Recorder()
        r = _router().route("/pages/:key", first).route("/pages/:other", second)
        r.resolve("#/pages/x")
        assert len(first.calls) == 1
        assert second.calls == []

    def test_redirect_beats_route(self) -> None:
        handler = Recorder()
        r = _router().route("/old", handler).redirect("/old", "/new")
        r.resolve("#/old")
        assert handler.calls == []
        assert r.location.hash == "#/new"

    def test_redirect_does_not_update_base(self) -> None:
        r = _router().redirect("/old/page", "/new")
        r.resolve("#/old/page")
        assert r.sink.base_href is None  # type: ignore[attr-defined]

    def test_redirect_target_gets_root(self) -> None:
        r = _router("/app").redirect("/old", "/new")
        r.resolve("#/app/old")
        assert r.location.hash == "#/app/new"

    def test_redirect_is_not_followed_in_line(self) -> None:
        handler = Recorder()
        r = _router().redirect("/old", "/new").route("/new", handler)
        r.start()
        r.resolve("#/old")
        assert handler.calls == []
        assert r.location.dispatch_pending() == 1
        assert handler.calls == [({}, "/new")]

    def test_base_updated_before_callback(self) -> None:
        seen: list[str | None] = []
        r = _router("/app")
        r.route("/pages/:key/*rest", lambda params, path: seen.append(r.sink.base_href))  # type: ignore[attr-defined]
        r.resolve("#/app/pages/test/a/b")
        assert seen == ["/app/pages/test/a/"]

    def test_unmatched_logs_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        r = _router().route("/home", Recorder())
        with caplog.at_level(logging.WARNING, logger="hashroute.router"):
            r.resolve("#/missing")
        assert "No route matched: /missing" in caplog.text

    def test_unmatched_still_updates_base(self) -> None:
        r = _router()
        r.resolve("#/missing/page")
        assert r.sink.base_href == "/missing/"  # type: ignore[attr-defined]

    def test_idempotent(self) -> None:
        handler = Recorder()
        r = _router().route("/pages/:key/", handler)
        r.resolve("#/pages/test/")
        r.resolve("#/pages/test/")
        assert handler.calls == [({"key": "test"}, "/pages/test/")] * 2

    def test_callback_errors_propagate(self) -> None:
        def boom(params: dict[str, str], path: str) -> None:
            raise RuntimeError("boom")

        r = _router().route("/home", boom)
        with pytest.raises(RuntimeError, match="boom"):
            r.resolve("#/home")


class TestRedirectLoops:
    def test_two_step_loop_stops(self, caplog: pytest.LogCaptureFixture) -> None:
        r = _router("", "http://localhost/#/a").redirect("/a", "/b").redirect("/b", "/a")
        with caplog.at_level(logging.ERROR, logger="hashroute.router"):
            r.start()
            delivered = r.location.dispatch_pending()
        assert delivered == 1
        assert r.location.hash == "#/b"
        assert "Redirect loop" in caplog.text
        assert "'/a' -> '/b' -> '/a'" in caplog.text

    def test_self_redirect_detected(self, caplog: pytest.LogCaptureFixture) -> None:
        r = _router().redirect("/a", "/a")
        with caplog.at_level(logging.ERROR, logger="hashroute.router"):
            r.resolve("#/a")
        assert "Redirect loop" in caplog.text

    def test_chain_resets_after_settling(self, caplog: pytest.LogCaptureFixture) -> None:
        handler = Recorder()
        r = _router("", "http://localhost/#/old").redirect("/old", "/new").route("/new", handler)
        r.start()
        r.location.dispatch_pending()
        r.location.set_hash("/old")
        with caplog.at_level(logging.ERROR, logger="hashroute.router"):
            r.location.dispatch_pending()
            r.location.dispatch_pending()
        assert "Redirect loop" not in caplog.text
        assert len(handler.calls) == 2

    def test_same_redirecting_hash_twice_is_not_a_loop(self, caplog: pytest.LogCaptureFixture) -> None:
        r = _router().redirect("", "/home")
        with caplog.at_level(logging.ERROR, logger="hashroute.router"):
            r.resolve("")
            r.resolve("")
        assert "Redirect loop" not in caplog.text
        assert r.location.hash == "#/home"

    def test_two_hashes_redirecting_to_one_target(self, caplog: pytest.LogCaptureFixture) -> None:
        handler = Recorder()
        r = _router().redirect("/a", "/c").redirect("/x", "/c").route("/c", handler)
        r.start()
        r.location.set_hash("/a")
        r.location.set_hash("/x")
        with caplog.at_level(logging.ERROR, logger="hashroute.router"):
            r.location.dispatch_pending()
            r.location.dispatch_pending()
        assert "Redirect loop" not in caplog.text
        assert r.location.hash == "#/c"
        assert handler.calls == [({}, "/c")]

    def test_stale_chain_does_not_block_new_redirect(self) -> None:
        handler = Recorder()
        r = _router(url="http://localhost/#/c")
        r.redirect("/a", "/c").redirect("/x", "/c").route("/c", handler)
        r.start()
        # Already on /c: the redirect's set_hash queues nothing and the chain is left open.
        r.resolve("#/a")
        r.location.set_hash("/x")
        r.location.dispatch_pending()
        assert r.location.hash == "#/c"
        r.location.dispatch_pending()
        assert handler.calls == [({}, "/c"), ({}, "/c")]

    def test_detection_can_be_disabled(self) -> None:
        location = Location("http://localhost/#/a")
        r = Router(RouterConfig(detect_redirect_loops=False), location=location)
        r.redirect("/a", "/b").redirect("/b", "/a")
        r.start()
        # Each turn delivers one hop and queues the next.
        for expected in ("#/a", "#/b", "#/a", "#/b"):
            assert location.dispatch_pending() == 1
            assert location.hash == expected
        r.stop()


class TestLifecycle:
    def test_start_resolves_current_hash(self) -> None:
        handler = Recorder()
        r = _router(url="http://localhost/#/home").route("/home", handler)
        r.start()
        assert handler.calls == [({}, "/home")]
        assert r.sink.base_href == "/"  # type: ignore[attr-defined]

    def test_start_subscribes(self) -> None:
        handler = Recorder()
        r = _router().route("/pages/:key/", handler)
        r.start()
        r.location.set_hash("/pages/x/")
        r.location.dispatch_pending()
        assert handler.calls[-1] == ({"key": "x"}, "/pages/x/")

    def test_start_twice_subscribes_once(self) -> None:
        handler = Recorder()
        r = _router().route("/home", handler)
        r.start()
        r.start()
        r.location.set_hash("/home")
        r.location.dispatch_pending()
        assert len(handler.calls) == 1

    def test_stop_unsubscribes(self) -> None:
        handler = Recorder()
        r = _router().route("/home", handler)
        r.start()
        r.stop()
        r.stop()
        r.location.set_hash("/home")
        r.location.dispatch_pending()
        assert handler.calls == []

    def test_failing_callback_does_not_end_subscription(self) -> None:
        handler = Recorder()

        def boom(params: dict[str, str], path: str) -> None:
            raise RuntimeError("boom")

        r = _router().route("/bad", boom).route("/good", handler)
        r.start()
        r.location.set_hash("/bad")
        r.location.dispatch_pending()
        r.location.set_hash("/good")
        r.location.dispatch_pending()
        assert handler.calls == [({}, "/good")]

    def test_default_collaborators(self) -> None:
        r = Router()
        assert r.config == RouterConfig()
        assert isinstance(r.location, Location)
        assert isinstance(r.sink, DocumentHead)
        r.stop()

    def test_location_created_on_first_use(self) -> None:
        r = Router()
        r.stop()
        assert r._location is None

    def test_stop_closes_owned_location(self) -> None:
        handler = Recorder()
        r = Router(sink=DocumentHead()).route("/home", handler)
        r.start()
        first = r.location
        first.set_hash("/home")
        r.stop()
        assert first.closed
        assert first.dispatch_pending() == 0
        assert handler.calls == []

        r.start()
        assert r.location is not first
        assert not r.location.closed
        r.location.set_hash("/home")
        r.location.dispatch_pending()
        assert handler.calls == [({}, "/home")]
        r.stop()

    def test_stop_leaves_supplied_location_open(self) -> None:
        location = Location()
        r = Router(location=location, sink=DocumentHead())
        r.start()
        r.stop()
        assert r.location is location
        assert not location.closed
        location.close()

    def test_start_stop_releases_streams(self, recwarn: pytest.WarningsRecorder) -> None:
        r = Router(sink=DocumentHead()).redirect("", "/home").route("/home", Recorder())
        r.start()
        r.stop()
        del r
        gc.collect()
        assert not [w for w in recwarn if "Unclosed" in str(w.message)]
