"""Tests de arc.core: CIDR, espera, accounting, auditorías y entorno."""

import pytest

from arc.config import Directory
from arc.config.users import UsersDocument
from arc.core import aaa, cidr, env, msg
from arc.core.errors import ArcError, AuthorizationError, ConfigError
from arc.route import Request


class TestCidr:
    def test_next_block_keeps_prefix(self):
        assert cidr.next_cidr_block("10.0.0.0/24") == "10.0.1.0/24"
        assert cidr.next_cidr_block("10.0.0.0/23") == "10.0.2.0/23"
        assert cidr.next_cidr_block("10.0.255.0/24") == "10.1.0.0/24"

    def test_next_block_of_host_address_uses_network(self):
        assert cidr.next_cidr_block("10.0.0.7/24") == "10.0.1.0/24"

    def test_no_successor_at_end_of_space(self):
        with pytest.raises(ConfigError):
            cidr.next_cidr_block("255.255.255.0/24")

    def test_invalid_block(self):
        with pytest.raises(ConfigError):
            cidr.next_cidr_block("10.0.0.0/33")

    def test_contains_and_overlaps(self):
        assert cidr.contains("10.0.0.0/16", "10.0.8.0/24")
        assert not cidr.contains("10.0.0.0/16", "10.1.0.0/24")
        assert cidr.overlaps("10.0.0.0/23", "10.0.1.0/24")
        assert not cidr.overlaps("10.0.0.0/24", "10.0.1.0/24")


class TestWait:
    def test_immediate_success(self, monkeypatch):
        monkeypatch.setattr(msg.time, "sleep", lambda s: None)
        assert msg.wait("title", "err", 10, lambda: True, lambda: True)

    def test_load_failure_aborts(self, monkeypatch):
        monkeypatch.setattr(msg.time, "sleep", lambda s: None)
        loads = []

        def load():
            loads.append(1)
            return False

        assert not msg.wait("title", "err", 10, lambda: False, load)
        assert len(loads) == 1

    def test_timeout_reports_error(self, monkeypatch):
        monkeypatch.setattr(msg.time, "sleep", lambda s: None)
        assert not msg.wait("title", "timed out", 3, lambda: False, lambda: True)
        assert any("timed out" in e for e in msg.last_errors())

    def test_negative_duration(self):
        assert not msg.wait("title", "err", -1, lambda: True, lambda: True)


class TestAccounting:
    def test_header_names_both_users(self):
        env.set("SSH_USER", "deploy")
        aaa.pre_accounting(["dc1", "pod", "web", "create"])
        assert aaa.accounting_buffer()[0] == "**alice(deploy) | 1.0.0 | dc1 pod web create**"

    def test_init_clears_buffers(self):
        aaa.accounting("Instance created: web-01")
        aaa.new_audit("Instance")
        aaa.init(None)
        assert aaa.accounting_buffer() == []
        assert aaa.get_audit("Instance") is None


class TestAudit:
    def test_buffers_by_kind(self):
        audit = aaa.new_audit("Instance")
        assert audit.clean()
        audit.audit(aaa.AuditKind.DEPLOYED, "rogue-01, i-1")
        audit.audit(aaa.AuditKind.MISMATCHED, "web-01 type")
        assert audit.buffers[aaa.AuditKind.DEPLOYED] == ["rogue-01, i-1"]
        assert audit.buffers[aaa.AuditKind.CONFIGURED] == []
        assert not audit.clean()
        assert aaa.get_audit("Instance") is audit

    def test_audit_needs_name(self):
        with pytest.raises(ArcError):
            aaa.new_audit("")


class TestAuthorization:
    @pytest.fixture
    def policy(self):
        doc = UsersDocument.model_validate({
            "users": [{"name": "alice"}, {"name": "bob"}],
            "teams": [{"name": "ops", "users": ["alice"]}],
            "datacenters": [{"name": "prod1", "teams": ["ops"]}],
        })
        return Directory(doc)

    def test_members_are_authorized(self, policy):
        aaa.init(policy)
        aaa.authorized(Request("prod1", "alice", "now"), "pod", "web")

    def test_outsiders_are_rejected(self, policy):
        aaa.init(policy)
        with pytest.raises(AuthorizationError):
            aaa.authorized(Request("prod1", "bob", "now"), "pod", "web")

    def test_unlisted_datacenter_is_open(self, policy):
        aaa.init(policy)
        aaa.authorized(Request("dev1", "bob", "now"), "pod", "web")


class TestEnv:
    def test_registered_values_win(self, monkeypatch):
        monkeypatch.setenv("VERSION", "9.9.9")
        assert env.lookup("VERSION") == "1.0.0"

    def test_ssh_user_falls_back_to_user(self, monkeypatch):
        env.reset()
        monkeypatch.delenv("SSH_USER", raising=False)
        monkeypatch.setenv("USER", "carol")
        assert env.lookup("SSH_USER") == "carol"

    def test_init_creates_run_directory(self, tmp_path, monkeypatch):
        base = tmp_path / "runs"
        base.mkdir()
        monkeypatch.setenv("ARC", str(base))
        monkeypatch.setenv("ROOT", str(tmp_path))
        env.init("arc", "1.2.3")
        run_dir = env.lookup("ARC")
        assert run_dir.startswith(str(base))
        assert (base / "latest").is_symlink()
        assert env.lookup("VERSION") == "1.2.3"
