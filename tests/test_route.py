"""Tests del router: verbos, peticiones, flags y el composite ordenado."""

import pytest

from arc.core import aaa
from arc.core.errors import AuthorizationError, ConfigError
from arc.datacenter.base import guarded
from arc.resource import Lifecycle, Resources
from arc.route import Command, Flags, Path, Request, Response


def new_request(*params):
    return Request("dc1", "alice", "now").parse(params)


class TestCommand:
    def test_aliases_map_to_canonical_verb(self):
        assert Command.lookup("show") is Command.INFO
        assert Command.lookup("list") is Command.INFO
        assert Command.lookup("refresh") is Command.PROVISION
        assert Command.lookup("update") is Command.PROVISION
        assert Command.lookup("reboot") is Command.RESTART
        assert Command.lookup("upgrade") is Command.REPLACE
        assert Command.lookup("nuke") is Command.DESTROY

    def test_unknown_token_is_not_a_verb(self):
        assert Command.lookup("web-01") is Command.NONE
        assert Command.lookup("") is Command.NONE

    def test_str_is_canonical_alias(self):
        assert str(Command.DESTROY) == "destroy"
        assert str(Command.INFO) == "info"


class TestRequest:
    def test_parse_splits_path_command_and_flags(self):
        req = new_request("pod", "web", "create", "noprovision", "podonly")
        assert req.path.get() == ["pod", "web"]
        assert req.command is Command.CREATE
        assert req.flags.get() == ["noprovision", "podonly"]

    def test_parse_without_verb(self):
        req = new_request("instance", "web-01")
        assert req.command is Command.NONE
        assert req.path.get() == ["instance", "web-01"]

    def test_parse_ignores_empty_tokens(self):
        req = new_request("", "dns", "", "create", "", "test")
        assert req.path.get() == ["dns"]
        assert req.flags.get() == ["test"]
        assert req.test_flag()

    def test_only_first_verb_is_the_command(self):
        req = new_request("instance", "create", "destroy")
        assert req.command is Command.CREATE
        assert req.flags.get() == ["destroy"]

    def test_pop_consumes_path(self):
        req = new_request("cluster", "prod", "info")
        assert req.top() == "cluster"
        assert req.pop().top() == "prod"
        assert req.pop().top() == ""
        req.pop()
        assert len(req.path) == 0

    def test_clone_keeps_identity_and_copies_flags(self):
        req = new_request("instance", "web-01", "create", "hard")
        clone = req.clone(Command.LOAD)
        assert clone.command is Command.LOAD
        assert clone.path.get() == []
        assert (clone.datacenter, clone.user_id, clone.time) == ("dc1", "alice", "now")
        clone.flags.append("reload")
        assert clone.flag("hard")
        assert not req.flag("reload")


class TestFlags:
    def test_append_is_idempotent(self):
        flags = Flags(["a", "b", "a"])
        flags.append("b").append("c")
        assert flags.get() == ["a", "b", "c"]
        assert len(flags) == 3

    def test_remove_and_empty(self):
        flags = Flags(["initial"])
        flags.remove("initial").remove("missing")
        assert flags.empty()


class TestPath:
    def test_push_and_append(self):
        path = Path(["b"])
        path.push("a").append("c")
        assert path.get() == ["a", "b", "c"]
        assert path.top() == "a"


class Leaf:
    def __init__(self, name, trail, resp=Response.OK, created=True):
        self.name = name
        self.trail = trail
        self.resp = resp
        self._created = created

    def route(self, req):
        self.trail.append(self.name)
        return self.resp

    def created(self):
        return self._created

    def destroyed(self):
        return not self._created


class TestResources:
    def test_reverse_order_is_exact_inverse(self):
        trail = []
        resources = Resources()
        for name in ("network", "compute", "dns"):
            resources.append(Leaf(name, trail))
        assert resources.route_in_order(new_request("load")) == Response.OK
        assert resources.route_reverse_order(new_request("destroy")) == Response.OK
        assert trail == ["network", "compute", "dns", "dns", "compute", "network"]

    def test_stops_at_first_failure(self):
        trail = []
        resources = Resources()
        resources.append(Leaf("a", trail))
        resources.append(Leaf("b", trail, Response.UNAUTHORIZED))
        resources.append(Leaf("c", trail))
        assert resources.route_in_order(new_request("create")) == Response.UNAUTHORIZED
        assert trail == ["a", "b"]

    def test_created_requires_children(self):
        resources = Resources()
        assert not resources.created()
        assert resources.destroyed()
        resources.append(Leaf("a", [], created=True))
        resources.append(Leaf("b", [], created=False))
        assert not resources.created()
        assert not resources.destroyed()


class Widget(Resources, Lifecycle):
    kind = "Widget"
    scope_flag = "widgetonly"

    def __init__(self, trail):
        super().__init__()
        self.name = "w"
        self.trail = trail
        self.append(Leaf("child-1", trail, created=False))
        self.append(Leaf("child-2", trail, created=False))

    def pre_create(self, req):
        self.trail.append("pre")
        return Response.OK

    def post_create(self, req):
        self.trail.append("post")
        return Response.OK


class TestLifecycle:
    def test_hooks_wrap_children(self):
        trail = []
        assert Widget(trail).lifecycle(new_request("create")) == Response.OK
        assert trail == ["pre", "child-1", "child-2", "post"]
        assert "Widget created: w" in aaa.accounting_buffer()

    def test_scope_flag_skips_children(self):
        trail = []
        assert Widget(trail).lifecycle(new_request("create", "widgetonly")) == Response.OK
        assert trail == ["pre", "post"]

    def test_destroy_skipped_when_nothing_exists(self):
        trail = []
        widget = Widget(trail)
        widget._children.clear()
        assert widget.lifecycle(new_request("destroy")) == Response.OK
        assert trail == []


class Failing:
    def __init__(self, exc):
        self.exc = exc

    @guarded
    def route(self, req):
        raise self.exc


class TestGuarded:
    def test_authorization_error_is_unauthorized(self):
        assert Failing(AuthorizationError("nope")).route(new_request("info")) == Response.UNAUTHORIZED

    def test_arc_error_is_fail(self):
        from arc.core import msg
        assert Failing(ConfigError("bad config")).route(new_request("info")) == Response.FAIL
        assert any("bad config" in e for e in msg.last_errors())

    def test_other_errors_propagate(self):
        with pytest.raises(KeyError):
            Failing(KeyError("x")).route(new_request("info"))
