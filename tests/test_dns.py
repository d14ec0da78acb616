"""Tests de DNS: registros A estáticos y dinámicos, y CNAME de pods."""

import pytest

from arc.core import aaa, msg
from arc.core.errors import ConfigError
from arc.mock import Record, cloud

WEB = ["web-01-internal.dc1.example.com", "web-02-internal.dc1.example.com", "web-03-internal.dc1.example.com"]


@pytest.fixture
def web_pod(call):
    assert call("network", "create") == 0
    assert call("pod", "web", "create", "noprovision") == 0


def cname_values(name="web"):
    return cloud.get("dns_record", ("CNAME", name)).data["values"]


class TestStaticRecords:
    def test_create_static_a_record(self, call):
        assert call("dns", "a", "static", "create") == 0
        assert cloud.get("dns_record", ("A", "static")).data["values"] == ["10.9.9.9"]

    def test_find_accepts_fqdn(self, arc):
        records = arc.dns.a_records
        assert records.find("static.dc1.example.com") is records.find("static")

    def test_duplicate_record(self, make_arc, document):
        document["dns"]["a_records"].append({"name": "static", "values": ["10.9.9.8"]})
        with pytest.raises(ConfigError, match="must be unique"):
            make_arc(document)

    def test_missing_cname_records(self, make_arc, document):
        del document["dns"]["cname_records"]
        with pytest.raises(ConfigError):
            make_arc(document)

    def test_cname_without_values_or_pod(self, make_arc, document):
        document["dns"]["cname_records"].append({"name": "orphan"})
        arc = make_arc(document)
        assert arc.run(["dns", "info"]) == 1
        assert any("no values nor pod present" in e for e in msg.last_errors())

    def test_unknown_record(self, call):
        assert call("dns", "cname", "nope", "create") == 1
        assert any("Unknown dns record 'nope'" in e for e in msg.last_errors())


class TestPodCname:
    def test_create_points_to_first_created_instance(self, web_pod, call):
        assert call("dns", "cname", "web", "create") == 0
        assert cname_values() == [WEB[0]]

    def test_pod_create_registers_cname(self, web_pod):
        assert cname_values() == [WEB[0]]
        assert "Dns CNAME Record created: web.dc1.example.com" in aaa.accounting_buffer()

    def test_pod_destroy_removes_cname(self, web_pod, call):
        assert call("pod", "web", "destroy") == 0
        assert cloud.get("dns_record", ("CNAME", "web")) is None
        assert "web-01" not in cloud.keys("instance")

    def test_nothing_created_skips_record(self, call):
        assert call("dns", "cname", "web", "create") == 0
        assert cloud.get("dns_record", ("CNAME", "web")) is None

    def test_provision_rotates_to_next_instance(self, web_pod, call, arc):
        assert call("dns", "cname", "web", "create") == 0
        pod = arc.datacenter.compute.find_pod("web")

        assert call("dns", "cname", "web", "provision") == 0
        assert cname_values() == [WEB[1]]
        assert call("dns", "cname", "web", "provision") == 0
        assert cname_values() == [WEB[2]]
        assert call("dns", "cname", "web", "provision") == 0
        assert cname_values() == [WEB[0]]
        assert pod.primary_instance().name == "web-01"
        assert [i.name for i in pod.secondary_instances()] == ["web-02", "web-03"]

    def test_provision_with_named_instance(self, web_pod, call):
        assert call("dns", "cname", "web", "create") == 0
        assert call("dns", "cname", "web", "provision", "web-03") == 0
        assert cname_values() == [WEB[2]]

    def test_secondaries_skip_missing_instances(self, web_pod, call):
        assert call("dns", "cname", "web", "create") == 0
        assert call("instance", "web-02", "destroy") == 0
        assert call("dns", "cname", "web", "provision") == 0
        assert cname_values() == [WEB[2]]

    def test_single_instance_has_no_secondaries(self, make_arc, document):
        document["datacenter"]["compute"]["clusters"][1]["pods"][0]["count"] = 1
        arc = make_arc(document)
        assert arc.run(["network", "create"]) == 0
        assert arc.run(["pod", "web", "create", "noprovision"]) == 0
        assert arc.run(["dns", "cname", "web", "create"]) == 0
        assert arc.run(["dns", "cname", "web", "provision"]) == 0
        assert cname_values() == [WEB[0]]
        assert arc.datacenter.compute.find_pod("web").secondary_instances() == []


class TestDynamicRecords:
    def test_instance_records_registered_on_load(self, call, arc):
        assert call("info") == 0
        names = sorted(arc.dns.a_records.records)
        assert "web-01-internal" in names
        assert "bastion-01" in names
        assert "bastion-01-internal" in names
        assert "proxy-01" in names
        assert "web-01" not in names

    def test_mismatched_record_is_updated(self, web_pod, call):
        cloud.get("dns_record", ("A", "web-02-internal")).data["values"] = ["10.0.99.99"]
        assert call("instance", "web-02", "info") == 0
        assert cloud.get("dns_record", ("A", "web-02-internal")).data["values"] == ["10.0.9.1"]
        assert ("update", "dns_record", ("A", "web-02-internal")) in cloud.calls

    def test_bastion_public_record(self, call):
        assert call("network", "create") == 0
        assert call("instance", "bastion-01", "create", "noprovision") == 0
        public_ip = cloud.get("instance", "bastion-01").data["public_ip"]
        assert cloud.get("dns_record", ("A", "bastion-01")).data["values"] == [public_ip]


class TestDnsAudit:
    def test_audit_finds_rogue_and_mismatch(self, call):
        assert call("dns", "a", "static", "create") == 0
        cloud.get("dns_record", ("A", "static")).data["values"] = ["10.1.1.1"]
        cloud.put("dns_record", ("A", "rogue"), Record(id="rr-rogue"))

        assert call("dns", "audit") == 0
        audit = aaa.get_audit("Dns Record")
        assert audit.buffers[aaa.AuditKind.DEPLOYED] == ["('A', 'rogue'), rr-rogue"]
        assert len(audit.buffers[aaa.AuditKind.MISMATCHED]) == 1
        assert "CNAME web.dc1.example.com" in audit.buffers[aaa.AuditKind.CONFIGURED]

    def test_destroy_all_records(self, call):
        assert call("dns", "create") == 0
        assert cloud.get("dns_record", ("A", "static")) is not None
        assert call("dns", "destroy") == 0
        assert cloud.keys("dns_record") == []
