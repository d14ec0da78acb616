"""
Provider DNS del vendor mock: una zona por dominio y registros indexados por
(tipo, nombre).
"""

import logging
from typing import List, Set, Tuple

from arc.config import models
from arc.core import aaa, msg
from arc.mock.base import MockResource, _audit, audit_rogue
from arc.mock.cloud import Record, cloud
from arc.route import Request

logger = logging.getLogger(__name__)


class MockDns:
    def __init__(self, provider: "MockDnsProvider", dns):
        self.provider = provider
        self.dns = dns
        if cloud.get("zone", dns.domain) is None:
            cloud.put("zone", dns.domain, Record(id=cloud.new_id("zone")))

    @property
    def id(self) -> str:
        return cloud.get("zone", self.dns.domain).id

    def audit_dns_records(self, name: str) -> None:
        audit_rogue(name, MockDnsRecord.table, self.provider.records)


class MockDnsRecord(MockResource):
    """Registro; su valor desplegado se guarda en data["values"]."""

    table = "dns_record"
    prefix = "rr"
    kind = "Dns Record"

    def __init__(self, provider: "MockDnsProvider", record):
        self.dns_record = record
        key = (record.type, record.name)
        provider.records.add(key)
        super().__init__(key, provider.cfg.provider)

    def allocate(self) -> Record:
        record = super().allocate()
        record.data["values"] = list(self.dns_record.values)
        record.data["ttl"] = self.dns_record.ttl
        return record

    def _create(self, req: Request) -> None:
        msg.info(f"Dns {self.dns_record.type} Record Creation: {self.dns_record.name}")
        if self.created() and not req.flag("skip_created_check"):
            msg.detail(f"Dns {self.dns_record.type} Record exists, skipping...")
            return
        if self.created():
            self._upsert("update")
        else:
            self.create(req)
        msg.detail(f"Created {self.id}, {', '.join(self.dns_record.values)}")
        aaa.accounting(f"Dns {self.dns_record.type} Record created: {self.dns_record.fqdn}")

    def _destroy(self, req: Request) -> None:
        msg.info(f"Dns {self.dns_record.type} Record Destruction: {self.dns_record.name}")
        if self.destroyed():
            msg.detail(f"Dns {self.dns_record.type} Record does not exist, skipping...")
            return
        ident = self.id
        self.destroy(req)
        msg.detail(f"Destroyed {ident}")
        aaa.accounting(f"Dns {self.dns_record.type} Record destroyed: {self.dns_record.fqdn}")

    def provision(self, req: Request) -> None:
        msg.info(f"Dns {self.dns_record.type} Record Provision: {self.dns_record.name}")
        if self.destroyed():
            msg.detail(f"Dns {self.dns_record.type} Record does not exist, skipping...")
            return
        self._upsert("provision")
        msg.detail(f"Provisioned {self.id}, {', '.join(self.dns_record.values)}")

    def _upsert(self, call: str) -> None:
        cloud.record(call, self.table, self.key)
        self.record.data["values"] = list(self.dns_record.values)

    def dynamic_values(self) -> List[str]:
        record = self.record
        return list(record.data["values"]) if record else []

    def audit(self, name: str) -> None:
        record = self.record
        if record is None:
            _audit(name).audit(aaa.AuditKind.CONFIGURED, f"{self.dns_record.type} {self.dns_record.fqdn}")
            return
        if self.dns_record.values and record.data["values"] != self.dns_record.values:
            _audit(name).audit(
                aaa.AuditKind.MISMATCHED,
                f"{self.dns_record.type} {self.dns_record.fqdn} | Configured: {self.dns_record.values} - Deployed: {record.data['values']}",
            )

    def info(self) -> None:
        record = self.record
        if record is None:
            return
        msg.detail(f"{'id':<20}\t{record.id}")
        msg.detail(f"{'values':<20}\t{', '.join(record.data['values'])}")


class MockDnsProvider:
    def __init__(self, cfg: models.Dns):
        self.cfg = cfg
        self.records: Set[Tuple[str, str]] = set()

    def new_dns(self, dns) -> MockDns:
        return MockDns(self, dns)

    def new_dns_record(self, record) -> MockDnsRecord:
        return MockDnsRecord(self, record)
