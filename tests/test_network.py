"""Tests de la red: expansión de subredes, grupos de seguridad en dos pasadas y auditoría."""

import pytest

from arc.core import aaa
from arc.core.errors import ConfigError
from arc.mock import Record, cloud


class TestSubnets:
    def test_one_subnet_per_zone_with_successive_blocks(self, arc):
        group = arc.datacenter.network.subnet_groups.find("private")
        assert [s.name for s in group] == ["private-az-a", "private-az-b"]
        assert [s.cidr for s in group] == ["10.0.8.0/24", "10.0.9.0/24"]
        assert [s.availability_zone for s in group] == ["az-a", "az-b"]

    def test_duplicate_subnet_group(self, make_arc, document):
        groups = document["datacenter"]["network"]["subnet_groups"]
        groups.append(dict(groups[0]))
        with pytest.raises(ConfigError):
            make_arc(document)

    def test_overlapping_subnet_groups(self, make_arc, document):
        groups = document["datacenter"]["network"]["subnet_groups"]
        groups[2]["cidr"] = "10.0.1.0/24"
        with pytest.raises(ConfigError, match="private-az-a cidr 10.0.1.0/24 overlaps subnet public-az-b"):
            make_arc(document)

    def test_subnet_outside_network(self, make_arc, document):
        groups = document["datacenter"]["network"]["subnet_groups"]
        groups[2]["cidr"] = "10.0.255.0/24"
        with pytest.raises(ConfigError, match="private-az-b cidr 10.1.0.0/24 is outside network cidr 10.0.0.0/16"):
            make_arc(document)

    def test_missing_security_groups(self, make_arc, document):
        del document["datacenter"]["network"]["security_groups"]
        with pytest.raises(ConfigError):
            make_arc(document)

    def test_create_subnet_group(self, call):
        assert call("subnet", "public", "create") == 0
        assert sorted(cloud.keys("subnet")) == ["public-az-a", "public-az-b"]
        assert cloud.get("subnet", "public-az-b").data["cidr"] == "10.0.1.0/24"

    def test_unknown_subnet_group(self, call):
        assert call("subnet", "nope", "create") == 1


class TestSecurityGroups:
    def test_rules_resolve_aliases_groups_and_references(self, arc):
        web = arc.datacenter.network.security_groups.find("web")
        rules = web.resolved_rules()
        assert [r.group for r in rules if r.group] == ["common"]
        assert sorted(r.cidr for r in rules if r.cidr) == ["172.16.0.0/24", "192.168.0.0/24"]
        assert all(r.ports == "443" and r.direction == "ingress" for r in rules)

    def test_unknown_remote_reference(self, make_arc, document):
        groups = document["datacenter"]["network"]["security_groups"]
        groups[0]["rules"][0]["remotes"] = ["security_group:ghost"]
        arc = make_arc(document)
        with pytest.raises(ConfigError):
            arc.datacenter.network.security_groups.find("common").resolved_rules()

    def test_create_is_two_pass(self, call):
        assert call("secgroup", "create") == 0
        writes = [c for c in cloud.writes() if c[1] == "secgroup"]
        assert writes == [
            ("create", "secgroup", "common"),
            ("create", "secgroup", "web"),
            ("provision", "secgroup", "common"),
            ("provision", "secgroup", "web"),
        ]
        assert len(cloud.get("secgroup", "web").data["rules"]) == 3

    def test_destroy_removes_rules_before_groups(self, call):
        assert call("secgroup", "create") == 0
        cloud.calls.clear()
        assert call("secgroup", "destroy") == 0
        writes = [c for c in cloud.writes() if c[1] == "secgroup"]
        assert writes == [
            ("destroy_rules", "secgroup", "web"),
            ("destroy_rules", "secgroup", "common"),
            ("destroy", "secgroup", "web"),
            ("destroy", "secgroup", "common"),
        ]
        assert cloud.keys("secgroup") == []

    def test_named_group_create_provisions_rules(self, call):
        assert call("secgroup", "common", "create") == 0
        assert len(cloud.get("secgroup", "common").data["rules"]) == 1

    def test_single_group_with_unresolved_reference_fails(self, call):
        assert call("secgroup", "web", "create") == 1

    def test_single_group_create_reloads_siblings(self, call):
        assert call("secgroup", "common", "create") == 0
        cloud.calls.clear()
        assert call("secgroup", "web", "create") == 0
        created = cloud.calls.index(("create", "secgroup", "web"))
        assert ("load", "secgroup", "common") in cloud.calls[created:]
        assert len(cloud.get("secgroup", "web").data["rules"]) == 3


class TestNetwork:
    def test_create_and_destroy(self, call):
        assert call("network", "create") == 0
        assert cloud.get("network", "dc1") is not None
        assert len(cloud.keys("subnet")) == 6
        assert sorted(cloud.keys("secgroup")) == ["common", "web"]

        assert call("network", "destroy") == 0
        assert cloud.get("network", "dc1") is None
        assert cloud.keys("subnet") == []
        assert cloud.keys("secgroup") == []

    def test_create_is_idempotent(self, call):
        assert call("network", "create") == 0
        count = len(cloud.writes())
        assert call("network", "create") == 0
        assert len(cloud.writes()) == count

    def test_test_flag_touches_nothing(self, call, capsys):
        assert call("network", "create", "test") == 0
        assert cloud.writes() == []
        assert "Test. Skipping..." in capsys.readouterr().out

    def test_audit_reports_rogue_and_missing_subnets(self, call):
        cloud.put("subnet", "rogue-subnet", Record(id="subnet-rogue"))
        assert call("subnet", "audit") == 0
        audit = aaa.get_audit("Subnet")
        assert audit.buffers[aaa.AuditKind.DEPLOYED] == ["rogue-subnet, subnet-rogue"]
        assert len(audit.buffers[aaa.AuditKind.CONFIGURED]) == 6

    def test_audit_detects_cidr_mismatch(self, call):
        assert call("network", "create") == 0
        cloud.get("subnet", "public-az-a").data["cidr"] = "10.0.50.0/24"
        assert call("subnet", "audit") == 0
        mismatches = aaa.get_audit("Subnet").buffers[aaa.AuditKind.MISMATCHED]
        assert len(mismatches) == 1
        assert mismatches[0].startswith("public-az-a: cidr block mismatch")
