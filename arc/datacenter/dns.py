"""
DNS del datacenter: registros A y CNAME.

Los registros A pueden ser dinámicos: la instancia los crea durante su load y
su valor es la IP desplegada. Los CNAME pueden apuntar a un pod; el valor es
el FQDN de una de sus instancias.
"""

import logging
from typing import Dict, List, Optional

from arc.config import models
from arc.core import aaa, log, msg
from arc.core.errors import ConfigError
from arc.datacenter.base import commands, guarded, show_help, test_skip, trailer, unknown_command
from arc.provider import registry
from arc.resource import Resources
from arc.resource.provider import DnsProvider, ProviderDns, ProviderDnsRecord
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)

A = "A"
CNAME = "CNAME"

PUBLIC_ACCESS = ("public", "public_elastic")


class DnsRecord:
    """
    Registro A o CNAME.

    Args:
        dns: Subárbol dns propietario
        cfg: Configuración del registro
        record_type: A o CNAME
        instance: Instancia de la que deriva el valor (registros A dinámicos)
        ip_type: private, public o public_elastic (registros A dinámicos)
        audit_ignore: No auditar este registro
    """

    def __init__(self, dns: "Dns", cfg: models.DnsRecord, record_type: str,
                 instance=None, ip_type: str = "", audit_ignore: bool = False):
        logger.debug("Initializing DNS %s Record %r", record_type, cfg.name)
        self.cfg = cfg
        self.dns = dns
        self.type = record_type
        self.values: List[str] = list(cfg.values)
        self.instance = instance
        self.ip_type = ip_type
        self.audit_ignore = audit_ignore
        self.pod = None
        self.provider: ProviderDnsRecord = dns.provider.new_dns_record(self)

    @property
    def name(self) -> str:
        return self.cfg.name

    @property
    def ttl(self) -> int:
        return self.cfg.ttl

    @property
    def fqdn(self) -> str:
        return f"{self.name}.{self.dns.domain}"

    @property
    def id(self) -> str:
        return self.provider.id

    def dynamic_values(self) -> List[str]:
        return self.provider.dynamic_values()

    def created(self) -> bool:
        return self.provider.created()

    def destroyed(self) -> bool:
        return self.provider.destroyed()

    def audit(self, name: str) -> None:
        if self.audit_ignore:
            return
        self.provider.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"DnsRecord {self.type} {self.name!r}")
        if req.top():
            self.help()
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command is Command.LOAD:
            if self.type == CNAME:
                self._preload()
            self.provider.load()
            return Response.OK
        if req.command is Command.CREATE:
            resp = self._pre_create()
            return self.provider.route(req) if resp is Response.CONTINUE else resp
        if req.command is Command.PROVISION:
            resp = self._pre_provision(req)
            return self.provider.route(req) if resp is Response.CONTINUE else resp
        if req.command is Command.DESTROY:
            return self.provider.route(req)
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            self.info(req)
            return Response.OK
        return unknown_command(f"dns {self.type.lower()}", req)

    def _preload(self) -> None:
        if self.values:
            return
        if not self.cfg.pod:
            raise ConfigError(f"Cannot create dns cname record for {self.name}, no values nor pod present.")
        pod = self.dns.datacenter.compute.find_pod(self.cfg.pod) if self.dns.datacenter else None
        if pod is None:
            raise ConfigError(f"Cannot find pod {self.cfg.pod} configured for dns cname record {self.name}")
        logger.debug("Dns %s Record Load: Using pod %s, servertype: %s", self.type, pod.name, pod.servertype)
        self.pod = pod
        self.audit_ignore = pod.cluster.audit_ignore

    def _value(self, instance) -> str:
        if self.cfg.access in PUBLIC_ACCESS:
            return instance.public_fqdn
        return instance.private_fqdn

    def _pre_create(self) -> Response:
        if self.type == A:
            return self._pre_create_a()
        if self.pod is None:
            return Response.CONTINUE
        for instance in self.pod.instances:
            if instance.created():
                self.values = [self._value(instance)]
                logger.debug("Dns CNAME Record Create: Using value %s for pod %s", self.values[0], self.pod.name)
                return Response.CONTINUE
        return Response.OK

    def _pre_create_a(self) -> Response:
        if self.instance is None:
            return Response.CONTINUE
        if not self.instance.created():
            return Response.OK
        if self.ip_type == "private":
            ip = self.instance.private_ip_address
        else:
            ip = self.instance.public_ip_address
        if not ip:
            msg.error(f"Missing ip address for dns A record {self.name}")
            return Response.FAIL
        self.values = [ip]
        return Response.CONTINUE

    def _pre_provision(self, req: Request) -> Response:
        if self.type == A:
            return self._pre_create_a()
        if self.pod is None:
            return Response.CONTINUE

        for flag in req.flags:
            if flag.startswith(self.pod.name):
                instance = self.pod.find_instance(flag)
                if instance is not None:
                    self.values = [self._value(instance)]
                    return Response.CONTINUE

        secondaries = self.pod.secondary_instances()
        if not secondaries:
            return Response.OK
        self.values = [self._value(secondaries[0])]
        logger.debug("Dns CNAME Record Update: Using value %s for pod %s", self.values[0], self.pod.name)
        return Response.CONTINUE

    def help(self) -> None:
        kind = self.type.lower()
        rows = commands(
            (Command.CREATE, f"create {self.name} dns {kind} record"),
            (Command.DESTROY, f"destroy {self.name} dns {kind} record"),
        )
        show_help(f"dns {kind} {self.name}", rows + trailer(f"{self.name} dns {kind} record"))

    def info(self, req: Request) -> None:
        if self.destroyed():
            return
        msg.info(f"Dns {self.type} Record")
        msg.indent_inc()
        msg.detail(f"{'name':<20}\t{self.name}")
        msg.detail(f"{'ttl':<20}\t{self.ttl}")
        self.provider.route(req)
        msg.indent_dec()


class DnsRecords(Resources):
    """Colección de registros de un tipo, indexada por nombre y por pod."""

    def __init__(self, dns: "Dns", cfgs: List[models.DnsRecord], record_type: str):
        super().__init__()
        logger.debug("Initializing DNS %s Records", record_type)
        self.dns = dns
        self.type = record_type
        self.cfgs = cfgs
        self.records: Dict[str, DnsRecord] = {}
        self.pod_records: Dict[str, List[DnsRecord]] = {}
        for conf in cfgs:
            if conf.name in self.records:
                raise ConfigError(f"DNS {record_type} Record name {conf.name!r} must be unique but is used multiple times")
            record = DnsRecord(dns, conf, record_type)
            self.records[conf.name] = record
            self.append(record)
            if conf.pod:
                self.pod_records.setdefault(conf.pod, []).append(record)

    def append_dynamic(self, record: DnsRecord) -> None:
        """Registra un registro A dinámico (único cambio del árbol tras construirlo)."""
        self.records[record.name] = record
        self.append(record)

    def find(self, name: str) -> Optional[DnsRecord]:
        suffix = "." + self.dns.domain
        if name.endswith(suffix):
            name = name[: -len(suffix)]
        return self.records.get(name)

    def find_by_pod(self, pod: str) -> List[DnsRecord]:
        return list(self.pod_records.get(pod, []))

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"Dns {self.type} Records")
        record = self.find(req.top())
        if record is not None:
            return record.route(req.pop())
        if req.top():
            msg.error(f"Unknown dns record {req.top()!r}.")
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command in (Command.LOAD, Command.CREATE, Command.PROVISION):
            return self.route_in_order(req)
        if req.command is Command.DESTROY:
            return self.route_reverse_order(req)
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            for conf in self.cfgs:
                conf.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info(f"Dns {self.type} Records")
                msg.indent_inc()
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        return unknown_command("dns record", req)

    def help(self) -> None:
        kind = self.type.lower()
        rows = commands(
            (Command.CREATE, f"create all dns {kind} records"),
            (Command.DESTROY, f"destroy all dns {kind} records"),
            ("'name'", f"manage named dns {kind} record"),
        )
        show_help(f"dns {kind}", rows + trailer(f"dns {kind} records"))


class Dns(Resources):
    def __init__(self, arc, cfg: models.Dns):
        super().__init__()
        logger.debug("Initializing Dns")
        if cfg.cname_records is None:
            raise ConfigError("The records element is missing from the dns configuration")
        self.cfg = cfg
        self.arc = arc
        self.datacenter = None

        self.provider: DnsProvider = registry.dns.new(cfg)
        self.provider_dns: ProviderDns = self.provider.new_dns(self)
        self.a_records = DnsRecords(self, cfg.a_records, A)
        self.append(self.a_records)
        self.cname_records = DnsRecords(self, cfg.cname_records, CNAME)
        self.append(self.cname_records)

    @property
    def domain(self) -> str:
        return self.cfg.domain

    @property
    def subdomain(self) -> str:
        return self.cfg.subdomain

    @property
    def id(self) -> str:
        return self.provider_dns.id

    def associate(self, datacenter) -> None:
        self.datacenter = datacenter

    def new_dynamic_a_record(self, instance, hostname: str, ip_type: str, audit_ignore: bool) -> DnsRecord:
        record = DnsRecord(self, models.DnsRecord(name=hostname, ttl=300), A, instance, ip_type, audit_ignore)
        self.a_records.append_dynamic(record)
        return record

    def audit(self, name: str) -> None:
        aaa.new_audit(name)
        self.provider_dns.audit_dns_records(name)
        for records in (self.a_records, self.cname_records):
            for record in records.records.values():
                record.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "Dns")
        if req.top() == "a":
            return self.a_records.route(req.pop())
        if req.top() == "cname":
            return self.cname_records.route(req.pop())
        if req.top():
            self.help()
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command in (Command.LOAD, Command.CREATE, Command.PROVISION):
            return self.route_in_order(req)
        if req.command is Command.DESTROY:
            return self.route_reverse_order(req)
        if req.command is Command.AUDIT:
            self.audit("Dns Record")
            return Response.OK
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("Dns")
                msg.indent_inc()
                msg.detail(f"{'domain':<20}\t{self.domain}")
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        return unknown_command("dns", req)

    def help(self) -> None:
        rows = commands(
            (Command.CREATE, "create all dns records"),
            (Command.DESTROY, "destroy all dns records"),
            (Command.AUDIT, "audit all dns records"),
            ("a", "manage dns a records"),
            ("a 'name'", "manage named dns a record"),
            ("cname", "manage dns cname records"),
            ("cname 'name'", "manage named dns cname record"),
        )
        show_help("dns", rows + trailer("dns"))
