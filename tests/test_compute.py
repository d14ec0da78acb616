"""Tests de compute: keypair, clusters, pods, fábricas y autorización."""

import pytest

from arc.config.users import DataCenterAccess
from arc.core import aaa, env, msg
from arc.core.errors import ConfigError
from arc.datacenter import Arc, keypair, register_cluster_factory, register_instance_factory, register_pod_factory
from arc.datacenter.cluster import Cluster
from arc.datacenter.instance import Instance
from arc.datacenter.pod import Pod
from arc.mock import Record, cloud


def pods(document):
    return [pod for cluster in document["datacenter"]["compute"]["clusters"] for pod in cluster["pods"]]


class TestKeyPair:
    def test_selected_from_agent(self, arc):
        kp = arc.datacenter.compute.keypair
        assert kp.name == "alice"
        assert kp.cfg.local_name == "id_rsa"

    def test_ssh_user_selects_named_key(self, make_arc, monkeypatch):
        env.set("SSH_USER", "deploy")
        keys = [
            ("ssh-rsa", "ssh-rsa AAAA /home/alice/.ssh/id_rsa", "/home/alice/.ssh/id_rsa"),
            ("ssh-ed25519", "ssh-ed25519 CCCC /home/alice/.ssh/deploy", "/home/alice/.ssh/deploy"),
        ]
        monkeypatch.setattr(keypair, "key_source", lambda: keys)
        kp = make_arc().datacenter.compute.keypair
        assert kp.name == "deploy"
        assert kp.cfg.format == "ssh-ed25519"

    def test_missing_key(self, make_arc, monkeypatch):
        monkeypatch.setattr(keypair, "key_source", lambda: [])
        with pytest.raises(ConfigError, match="Cannot find id_rsa"):
            make_arc()

    def test_create_sets_fingerprint(self, call, arc):
        assert call("keypair", "create") == 0
        assert cloud.get("keypair", "alice") is not None
        assert arc.datacenter.compute.keypair.fingerprint.count(":") == 15


class TestPods:
    def test_names_and_round_robin_subnets(self, arc):
        pod = arc.datacenter.compute.find_pod("web")
        instances = list(pod.instances)
        assert [i.name for i in instances] == ["web-01", "web-02", "web-03"]
        assert [i.subnet.name for i in instances] == ["private-az-a", "private-az-b", "private-az-a"]

    def test_package_name_by_image(self, arc):
        compute = arc.datacenter.compute
        assert compute.find_pod("web").pkg_name == "servertype-web-1.0.0-3.x86_64.rpm"
        assert compute.find_pod("proxy").pkg_name == "servertype-proxy_1.0.0-1_amd64.deb"

    def test_package_name_override(self, make_arc, document):
        pods(document)[1]["package_name"] = "{servertype}-{version}.tgz"
        assert make_arc(document).datacenter.compute.find_pod("web").pkg_name == "web-3.tgz"

    def test_zero_count_pod_is_empty(self, make_arc, document):
        pods(document)[1]["count"] = 0
        pod = make_arc(document).datacenter.compute.find_pod("web")
        assert len(pod.instances) == 0

    def test_unknown_subnet_group(self, make_arc, document):
        pods(document)[1]["subnet_group"] = "nowhere"
        with pytest.raises(ConfigError, match="Cannot find subnet group nowhere"):
            make_arc(document)

    def test_unknown_security_group(self, make_arc, document):
        pods(document)[1]["security_groups"] = ["ghost"]
        with pytest.raises(ConfigError, match="unknown secgroup name ghost"):
            make_arc(document)

    def test_duplicate_pod(self, make_arc, document):
        cluster = document["datacenter"]["compute"]["clusters"][1]
        cluster["pods"].append(dict(cluster["pods"][0]))
        with pytest.raises(ConfigError, match="must be unique"):
            make_arc(document)

    def test_missing_pods(self, make_arc, document):
        del document["datacenter"]["compute"]["clusters"][0]["pods"]
        with pytest.raises(ConfigError):
            make_arc(document)

    def test_finders(self, arc):
        compute = arc.datacenter.compute
        assert compute.find_instance("web-02").pod.name == "web"
        assert compute.find_cluster("edge").find_pod("proxy") is not None
        assert compute.find_instance("web-09") is None

    def test_unknown_pod(self, call):
        assert call("pod", "nope", "info") == 1
        assert any("Unknown pod 'nope'" in e for e in msg.last_errors())


class TestClusters:
    def test_create_cluster(self, call):
        assert call("network", "create") == 0
        assert call("cluster", "prod", "create", "noprovision") == 0
        assert sorted(cloud.keys("instance")) == ["web-01", "web-02", "web-03"]
        assert "Cluster created: prod" in aaa.accounting_buffer()

    def test_scope_flag_limits_to_cluster(self, call):
        assert call("network", "create") == 0
        assert call("cluster", "prod", "create", "clusteronly") == 0
        assert cloud.keys("instance") == []

    def test_pod_only_destroy(self, call):
        assert call("network", "create") == 0
        assert call("pod", "web", "create", "noprovision") == 0
        assert call("pod", "web", "destroy", "podonly") == 0
        assert len(cloud.keys("instance")) == 3
        assert call("pod", "web", "destroy") == 0
        assert cloud.keys("instance") == []

    def test_destroy_visits_instances_in_reverse(self, call):
        assert call("network", "create") == 0
        assert call("pod", "web", "create", "noprovision") == 0
        cloud.calls.clear()
        assert call("pod", "web", "destroy") == 0
        destroyed = [c[2] for c in cloud.writes() if c[:2] == ("destroy", "instance")]
        assert destroyed == ["web-03", "web-02", "web-01"]

    def test_stop_visits_instances_in_reverse(self, call):
        assert call("network", "create") == 0
        assert call("pod", "web", "create", "noprovision") == 0
        cloud.calls.clear()
        assert call("pod", "web", "stop", "hard") == 0
        stopped = [c[2] for c in cloud.calls if c[:2] == ("stop", "instance")]
        assert stopped == ["web-03", "web-02", "web-01"]

    def test_unknown_cluster(self, call):
        assert call("cluster", "nope", "create") == 1


class TestComputeAudit:
    def test_instance_audit(self, call):
        assert call("network", "create") == 0
        assert call("instance", "web-01", "create", "noprovision") == 0
        cloud.get("instance", "web-01").data["instance_type"] = "t2.large"
        cloud.put("instance", "rogue-01", Record(id="i-rogue"))

        assert call("instance", "audit") == 0
        audit = aaa.get_audit("Instance")
        assert audit.buffers[aaa.AuditKind.DEPLOYED] == ["rogue-01, i-rogue"]
        assert len(audit.buffers[aaa.AuditKind.MISMATCHED]) == 1
        assert "'t2.large'" in audit.buffers[aaa.AuditKind.MISMATCHED][0]
        assert "web-02" in audit.buffers[aaa.AuditKind.CONFIGURED]
        assert "web-01" not in audit.buffers[aaa.AuditKind.CONFIGURED]

    def test_audit_ignore_cluster(self, make_arc, document):
        document["datacenter"]["compute"]["clusters"][1]["audit_ignore"] = True
        arc = make_arc(document)
        assert arc.run(["instance", "audit"]) == 0
        configured = aaa.get_audit("Instance").buffers[aaa.AuditKind.CONFIGURED]
        assert configured == ["bastion-01", "proxy-01"]

    def test_compute_audit_runs_all_three(self, call):
        assert call("compute", "audit") == 0
        assert all(aaa.get_audit(name) is not None for name in ("Instance", "Volume", "EIP"))

    def test_volume_only_supports_audit(self, call):
        assert call("volume", "create") == 1
        assert call("eip", "audit") == 0


class TestAuthorization:
    def test_unauthorized_user_cannot_load(self, make_arc, users):
        users.datacenters["dc1"] = DataCenterAccess(name="dc1", teams=["dev"])
        aaa.init(users)
        arc = make_arc()
        assert arc.run(["pod", "web", "info"], "alice") == 1
        assert any("not authorized" in e for e in msg.last_errors())

    def test_team_member_is_authorized(self, make_arc, users):
        users.datacenters["dc1"] = DataCenterAccess(name="dc1", teams=["dev"])
        aaa.init(users)
        assert make_arc().run(["pod", "web", "info"], "bob") == 0


class TestFactories:
    def test_custom_instance_type(self, make_arc):
        class WebInstance(Instance):
            pass

        register_instance_factory("web", WebInstance)
        pod = make_arc().datacenter.compute.find_pod("web")
        assert all(isinstance(i, WebInstance) for i in pod.instances)

    def test_custom_pod_and_cluster(self, make_arc):
        class EdgeCluster(Cluster):
            pass

        class ProxyPod(Pod):
            pass

        register_cluster_factory("edge", EdgeCluster)
        register_pod_factory("proxy", ProxyPod)
        compute = make_arc().datacenter.compute
        assert isinstance(compute.find_cluster("edge"), EdgeCluster)
        assert isinstance(compute.find_pod("proxy"), ProxyPod)
        assert type(compute.find_pod("web")) is Pod


def test_arc_is_importable_from_package():
    assert Arc.__name__ == "Arc"
