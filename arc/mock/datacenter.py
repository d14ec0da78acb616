"""
Provider de datacenter del vendor mock.
"""

import hashlib
import logging
from typing import Dict, List, Optional, Set, Tuple

from arc.config import models
from arc.core import aaa, msg
from arc.core.errors import ProviderError
from arc.mock.base import MockResource, _audit, audit_rogue
from arc.mock.cloud import Record, cloud
from arc.route import Command, Request

logger = logging.getLogger(__name__)


class MockNetwork(MockResource):
    table = "network"
    prefix = "vpc"
    kind = "Network"

    def __init__(self, dc: "MockDataCenter", network):
        self.dc = dc
        self.network = network
        super().__init__(network.name, dc.provider)

    def allocate(self) -> Record:
        record = super().allocate()
        record.data["cidr"] = self.network.cidr
        return record

    def audit_subnets(self, name: str) -> None:
        audit_rogue(name, MockSubnet.table, self.dc.subnets)

    def audit_secgroups(self, name: str) -> None:
        audit_rogue(name, MockSecurityGroup.table, self.dc.secgroups)


class MockSubnet(MockResource):
    table = "subnet"
    prefix = "subnet"
    kind = "Subnet"

    def __init__(self, dc: "MockDataCenter", cfg: models.Subnet):
        self.cfg = cfg
        dc.subnets.add(cfg.name)
        super().__init__(cfg.name, dc.provider)

    def allocate(self) -> Record:
        record = super().allocate()
        record.data.update(cidr=self.cfg.cidr, availability_zone=self.cfg.availability_zone)
        return record

    def audit(self, name: str) -> None:
        record = self.record
        if record is None:
            _audit(name).audit(aaa.AuditKind.CONFIGURED, self.cfg.name)
            return
        if record.data.get("cidr") != self.cfg.cidr:
            _audit(name).audit(
                aaa.AuditKind.MISMATCHED,
                f"{self.cfg.name}: cidr block mismatch - configured: {self.cfg.cidr}, deployed: {record.data.get('cidr')}",
            )


class MockSecurityGroup(MockResource):
    """Grupo con reglas; norules crea solo el grupo, rules_only borra solo las reglas."""

    table = "secgroup"
    prefix = "sg"
    kind = "SecurityGroup"

    def __init__(self, dc: "MockDataCenter", security_group):
        self.security_group = security_group
        dc.secgroups.add(security_group.name)
        super().__init__(security_group.name, dc.provider)

    def allocate(self) -> Record:
        record = super().allocate()
        record.data["rules"] = []
        return record

    def create(self, req: Request) -> None:
        super().create(req)
        if not req.flag("norules"):
            self.provision(req)

    def destroy(self, req: Request) -> None:
        if req.flag("rules_only"):
            cloud.record("destroy_rules", self.table, self.key)
            self.record.data["rules"] = []
            return
        super().destroy(req)

    def _destroy(self, req: Request) -> None:
        if req.flag("rules_only"):
            msg.info(f"SecurityGroup Rules Destruction: {self.key}")
            if self.created():
                self.destroy(req)
            return
        super()._destroy(req)

    def provision(self, req: Request) -> None:
        if self.destroyed():
            msg.detail("SecurityGroup does not exist, skipping...")
            return
        rules = self.security_group.resolved_rules()
        for rule in rules:
            if rule.group and cloud.get(self.table, rule.group) is None:
                raise ProviderError(f"Cannot find security group {rule.group!r} referenced by {self.key!r}")
        cloud.record("provision", self.table, self.key)
        self.record.data["rules"] = rules
        msg.detail(f"Rules provisioned: {len(rules)}")

    def audit(self, name: str) -> None:
        record = self.record
        if record is None:
            _audit(name).audit(aaa.AuditKind.CONFIGURED, self.key)
            return
        if record.data["rules"] != self.security_group.resolved_rules():
            _audit(name).audit(aaa.AuditKind.MISMATCHED, f"{self.key}: rules mismatch")


class MockCompute:
    def __init__(self, dc: "MockDataCenter"):
        self.dc = dc

    def audit_instances(self, name: str) -> None:
        audit_rogue(name, MockInstance.table, self.dc.instances)

    def audit_volumes(self, name: str) -> None:
        audit_rogue(name, MockVolume.table, self.dc.volumes)

    def audit_eips(self, name: str) -> None:
        audit_rogue(name, MockElasticIP.table, self.dc.eips)


class MockKeyPair(MockResource):
    table = "keypair"
    prefix = "key"
    kind = "KeyPair"

    def __init__(self, dc: "MockDataCenter", cfg: models.KeyPair):
        self.cfg = cfg
        super().__init__(cfg.name, dc.provider)

    @property
    def fingerprint(self) -> str:
        record = self.record
        return record.data.get("fingerprint", "") if record else ""

    def allocate(self) -> Record:
        record = super().allocate()
        digest = hashlib.md5(self.cfg.key_material.encode()).hexdigest()
        record.data["fingerprint"] = ":".join(digest[i:i + 2] for i in range(0, len(digest), 2))
        return record

    def info(self) -> None:
        if self.destroyed():
            return
        msg.detail(f"{'fingerprint':<20}\t{self.fingerprint}")


class MockInstance(MockResource):
    """
    Instancia. Create asigna IPs y crea los volúmenes que aún no existen
    (los preservados se reutilizan); destroy elimina los volúmenes que siguen
    conectados salvo los marcados keep.
    """

    table = "instance"
    prefix = "i"
    kind = "Instance"
    envelope = False

    def __init__(self, dc: "MockDataCenter", instance):
        self.dc = dc
        self.instance = instance
        dc.instances.add(instance.name)
        super().__init__(instance.name, dc.provider)

    def _data(self, key: str) -> str:
        record = self.record
        return record.data.get(key, "") if record else ""

    @property
    def image_id(self) -> str:
        return self._data("image_id")

    @property
    def key_name(self) -> str:
        return self._data("key_name")

    @property
    def private_ip_address(self) -> str:
        return self._data("private_ip")

    @property
    def public_ip_address(self) -> str:
        return self._data("public_ip")

    def started(self) -> bool:
        return self.state == "running"

    def stopped(self) -> bool:
        return self.state == "stopped"

    def set_tags(self, tags: Dict[str, str]) -> None:
        record = self.record
        if record is None:
            raise ProviderError(f"Instance {self.key} does not exist")
        cloud.record("set_tags", self.table, self.key)
        record.tags.update(tags)

    def create(self, req: Request) -> None:
        cloud.record("create", self.table, self.key)
        subnet = self.instance.subnet
        record = Record(id=cloud.new_id(self.prefix), state="running")
        record.data.update(
            private_ip=cloud.private_ip(subnet.cidr),
            public_ip=cloud.public_ip() if subnet.access == "public" else "",
            image_id=f"img-{self.instance.image}",
            key_name=self.instance.keypair.name,
            instance_type=self.instance.instance_type,
            subnet=subnet.name,
            security_groups=[g.name for g in self.instance.security_groups],
        )
        cloud.put(self.table, self.key, record)
        for volume in self.instance.volumes:
            key = (self.key, volume.device)
            if cloud.get(MockVolume.table, key) is None:
                cloud.put(MockVolume.table, key, Record(
                    id=cloud.new_id("vol"),
                    state="in-use",
                    data={"instance": self.key, "size": volume.cfg.size},
                ))

    def destroy(self, req: Request) -> None:
        cloud.record("destroy", self.table, self.key)
        keep = {v.device for v in self.instance.volumes if v.cfg.keep}
        for key in cloud.keys(MockVolume.table):
            record = cloud.get(MockVolume.table, key)
            if record.data.get("instance") == self.key and key[1] not in keep:
                cloud.remove(MockVolume.table, key)
        record = cloud.remove(self.table, self.key)
        cloud.release_ip(record.data["private_ip"])

    def power(self, req: Request) -> None:
        record = self.record
        if record is None:
            raise ProviderError(f"Instance {self.key} does not exist")
        cloud.record(str(req.command), self.table, self.key)
        record.state = "stopped" if req.command is Command.STOP else "running"

    def audit(self, name: str) -> None:
        record = self.record
        if record is None:
            _audit(name).audit(aaa.AuditKind.CONFIGURED, self.key)
            return
        if record.data["instance_type"] != self.instance.instance_type:
            _audit(name).audit(
                aaa.AuditKind.MISMATCHED,
                f"Instance {self.key!r} | Configured Instance Type: {self.instance.instance_type!r}"
                f" - Deployed Instance Type: {record.data['instance_type']!r}",
            )

    def info(self) -> None:
        if self.destroyed():
            return
        msg.detail(f"{'instance type':<20}\t{self._data('instance_type')}")
        msg.detail(f"{'subnet':<20}\t{self._data('subnet')}")


class MockVolume(MockResource):
    """Volumen identificado por (instancia, dispositivo)."""

    table = "volume"
    prefix = "vol"
    kind = "Volume"
    envelope = False

    def __init__(self, dc: "MockDataCenter", instance, cfg: models.Volume):
        self.instance_name = instance.name
        self.cfg = cfg
        key = (instance.name, cfg.device)
        dc.volumes.add(key)
        super().__init__(key, dc.provider)

    def attached(self) -> bool:
        record = self.record
        return record is not None and record.data.get("instance") == self.instance_name

    def detached(self) -> bool:
        return not self.attached()

    def attach(self) -> None:
        record = self.record
        if record is None:
            raise ProviderError(f"Volume {self.cfg.device} of {self.instance_name} does not exist")
        cloud.record("attach", self.table, self.key)
        record.data["instance"] = self.instance_name
        record.state = "in-use"

    def detach(self) -> None:
        record = self.record
        if record is None:
            return
        cloud.record("detach", self.table, self.key)
        record.data["instance"] = ""
        record.state = "available"

    def destroy(self, req: Optional[Request] = None) -> None:
        cloud.record("destroy", self.table, self.key)
        self.release()

    def set_tags(self, tags: Dict[str, str]) -> None:
        record = self.record
        if record is None:
            raise ProviderError(f"Volume {self.cfg.device} of {self.instance_name} does not exist")
        record.tags.update(tags)

    def reset(self) -> None:
        logger.debug("reset volume %s", self.key)

    def info(self) -> None:
        if self.destroyed():
            return
        msg.detail(f"{self.cfg.device:<20}\t{self.id}, {self.state}")


class MockElasticIP:
    """IP elástica de una instancia; asignación y asociación son independientes."""

    table = "eip"

    def __init__(self, dc: "MockDataCenter", instance):
        self.instance = instance
        self.key = instance.name
        dc.eips.add(self.key)

    @property
    def record(self):
        return cloud.get(self.table, self.key)

    @property
    def id(self) -> str:
        return self.record.id if self.record else ""

    @property
    def ip_address(self) -> str:
        return self.record.data["ip"] if self.record else ""

    def load(self) -> None:
        cloud.record("load", self.table, self.key)

    def created(self) -> bool:
        return self.record is not None

    def destroyed(self) -> bool:
        return self.record is None

    def attached(self) -> bool:
        return self.record is not None and bool(self.record.data.get("instance"))

    def detached(self) -> bool:
        return not self.attached()

    def create(self) -> None:
        if self.created():
            return
        cloud.record("create", self.table, self.key)
        cloud.put(self.table, self.key, Record(id=cloud.new_id("eipalloc"), data={"ip": cloud.public_ip()}))

    def destroy(self) -> None:
        cloud.record("destroy", self.table, self.key)
        cloud.remove(self.table, self.key)

    def attach(self) -> None:
        if self.record is None:
            raise ProviderError(f"Elastic IP for {self.key} has not been allocated")
        cloud.record("attach", self.table, self.key)
        self.record.data["instance"] = self.key

    def detach(self) -> None:
        if self.record is None:
            return
        cloud.record("detach", self.table, self.key)
        self.record.data["instance"] = ""


class MockRole:
    """Rol (perfil de identidad); existe siempre que tenga nombre."""

    table = "role"

    def __init__(self, name: str, instance):
        self.name = name
        self.instance = instance
        self._instance_id = ""

    @property
    def id(self) -> str:
        return f"role-{self.name}" if self.name else ""

    @property
    def instance_id(self) -> str:
        return self._instance_id

    def load(self) -> None:
        cloud.record("load", self.table, self.name)
        record = cloud.get(MockInstance.table, self.instance.name)
        self._instance_id = record.id if record and record.data.get("role") == self.name else ""

    def created(self) -> bool:
        return bool(self.name)

    def destroyed(self) -> bool:
        return not self.name

    def attached(self) -> bool:
        return bool(self._instance_id)

    def detached(self) -> bool:
        return not self._instance_id

    def attach(self) -> None:
        record = cloud.get(MockInstance.table, self.instance.name)
        if record is None:
            raise ProviderError(f"Cannot attach role {self.name}, instance {self.instance.name} does not exist")
        cloud.record("attach", self.table, self.name)
        record.data["role"] = self.name
        self._instance_id = record.id

    def detach(self) -> None:
        record = cloud.get(MockInstance.table, self.instance.name)
        if record is not None:
            cloud.record("detach", self.table, self.name)
            record.data["role"] = ""
        self._instance_id = ""

    def update(self) -> None:
        cloud.record("update", self.table, self.name)


class MockDataCenter:
    """Fábrica de handles; recuerda las claves configuradas para las auditorías."""

    def __init__(self, cfg: models.DataCenter):
        self.cfg = cfg
        self.provider = cfg.provider
        self.subnets: Set[str] = set()
        self.secgroups: Set[str] = set()
        self.instances: Set[str] = set()
        self.volumes: Set[Tuple[str, str]] = set()
        self.eips: Set[str] = set()
        self.keypairs: List[MockKeyPair] = []

    def new_network(self, network, cfg: models.Network) -> MockNetwork:
        return MockNetwork(self, network)

    def new_subnet(self, network, cfg: models.Subnet) -> MockSubnet:
        return MockSubnet(self, cfg)

    def new_security_group(self, network, security_group) -> MockSecurityGroup:
        return MockSecurityGroup(self, security_group)

    def new_compute(self, compute, cfg: models.Compute) -> MockCompute:
        return MockCompute(self)

    def new_keypair(self, cfg: models.KeyPair) -> MockKeyPair:
        keypair = MockKeyPair(self, cfg)
        self.keypairs.append(keypair)
        return keypair

    def new_instance(self, instance) -> MockInstance:
        return MockInstance(self, instance)

    def new_volume(self, instance, cfg: models.Volume) -> MockVolume:
        return MockVolume(self, instance, cfg)

    def new_elastic_ip(self, instance) -> MockElasticIP:
        return MockElasticIP(self, instance)

    def new_role(self, name: str, instance) -> MockRole:
        return MockRole(name, instance)
