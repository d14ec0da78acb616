"""
Grupos de seguridad.

Las reglas pueden referenciar otros grupos por nombre, por eso la creación y
la destrucción van en dos pasadas:

    create:  create norules -> load -> provision (instala reglas)
    destroy: destroy rules_only -> destroy (orden inverso)
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from arc.config import models
from arc.core import aaa, log, msg
from arc.core.errors import ConfigError
from arc.datacenter.base import commands, guarded, show_help, test_skip, trailer, unknown_command
from arc.resource import Resources
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rule:
    """Regla resuelta: un remoto concreto (CIDR o grupo) por dirección y protocolo."""
    direction: str
    protocol: str
    ports: str
    cidr: str = ""
    group: str = ""
    description: str = ""


def _two_pass(req: Request) -> bool:
    return req.flags.empty()


class SecurityGroup:
    def __init__(self, network, prov, cfg: models.SecurityGroup):
        logger.debug("Initializing SecurityGroup %r", cfg.name)
        if cfg.rules is None:
            raise ConfigError("The rules element is missing from the security_groups configuration")
        self.cfg = cfg
        self.network = network
        self.provider = prov.new_security_group(network, self)

    @property
    def name(self) -> str:
        return self.cfg.name

    @property
    def id(self) -> str:
        return self.provider.id

    def created(self) -> bool:
        return self.provider.created()

    def destroyed(self) -> bool:
        return self.provider.destroyed()

    def resolved_rules(self) -> List[Rule]:
        """
        Expande las reglas configuradas.

        Raises:
            ConfigError: si un remoto referencia un alias, grupo o subred desconocido
        """
        rules: List[Rule] = []
        for conf in self.cfg.rules or []:
            ports = ",".join(conf.ports)
            for remote in conf.remotes:
                cidrs, groups = self.network.resolve_remote(remote)
                for direction in conf.directions:
                    for protocol in conf.protocols:
                        for block in cidrs:
                            rules.append(Rule(direction, protocol, ports, cidr=block, description=conf.description))
                        for group in groups:
                            rules.append(Rule(direction, protocol, ports, group=group, description=conf.description))
        return rules

    def audit(self, name: str) -> None:
        if aaa.get_audit(name) is None:
            aaa.new_audit(name)
        self.provider.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"SecurityGroup {self.name!r}")
        if req.top():
            self.help()
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command is Command.LOAD:
            self.provider.load()
            return Response.OK
        if req.command is Command.CREATE:
            if not _two_pass(req):
                return self.provider.route(req)
            return self._create(req)
        if req.command is Command.DESTROY:
            if not _two_pass(req):
                return self.provider.route(req)
            return self._destroy(req)
        if req.command in (Command.PROVISION, Command.INFO):
            return self.provider.route(req)
        if req.command is Command.AUDIT:
            self.audit("Secgroup")
            return Response.OK
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        return unknown_command("secgroup", req)

    def _create(self, req: Request) -> Response:
        if self.created():
            msg.detail("SecurityGroup exists, skipping...")
            return Response.OK
        create = req.clone(Command.CREATE)
        create.flags.append("norules")
        resp = self.route(create)
        if resp != Response.OK:
            return resp
        # los remotos pueden apuntar a grupos hermanos
        resp = self.network.security_groups.route(req.clone(Command.LOAD))
        if resp != Response.OK:
            return resp
        return self.route(req.clone(Command.PROVISION))

    def _destroy(self, req: Request) -> Response:
        if self.destroyed():
            msg.detail("SecurityGroup does not exist, skipping...")
            return Response.OK
        rules = req.clone(Command.DESTROY)
        rules.flags.append("rules_only")
        resp = self.route(rules)
        if resp != Response.OK:
            return resp
        return self.provider.route(req.clone(Command.DESTROY))

    def help(self) -> None:
        rows = commands(
            (Command.CREATE, f"create {self.name} security group"),
            (Command.AUDIT, f"audit {self.name} security group"),
            (Command.PROVISION, f"update {self.name} security group"),
            (Command.DESTROY, f"destroy {self.name} security group"),
        )
        show_help(f"secgroup {self.name}", rows + trailer(f"{self.name} security group"))


class SecurityGroups(Resources):
    def __init__(self, network, prov, cfgs: List[models.SecurityGroup]):
        super().__init__()
        logger.debug("Initializing SecurityGroups")
        self.cfgs = cfgs
        self.network = network
        self.groups: Dict[str, SecurityGroup] = {}
        for conf in cfgs:
            if conf.name in self.groups:
                raise ConfigError(f"Security group name {conf.name!r} must be unique but is used multiple times")
            group = SecurityGroup(network, prov, conf)
            self.groups[conf.name] = group
            self.append(group)

    def find(self, name: str) -> Optional[SecurityGroup]:
        return self.groups.get(name)

    def audit(self) -> None:
        aaa.new_audit("Secgroup")
        self.network.provider.audit_secgroups("Secgroup")
        for group in self.groups.values():
            group.audit("Secgroup")

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "SecurityGroups")
        group = self.find(req.top())
        if group is not None:
            return group.route(req.pop())
        if req.top():
            msg.error(f"Unknown secgroup {req.top()!r}.")
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command is Command.LOAD or req.command is Command.PROVISION:
            return self.route_in_order(req)
        if req.command is Command.CREATE:
            return self._create(req)
        if req.command is Command.DESTROY:
            return self._destroy(req)
        if req.command is Command.AUDIT:
            self.audit()
            return Response.OK
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            for conf in self.cfgs:
                conf.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("SecurityGroups")
                msg.indent_inc()
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        return unknown_command("secgroup", req)

    def _create(self, req: Request) -> Response:
        if self.created():
            msg.detail("SecurityGroups exists, skipping...")
            return Response.OK
        if not _two_pass(req):
            return self.route_in_order(req)
        create = req.clone(Command.CREATE)
        create.flags.append("norules")
        for step in (create, req.clone(Command.LOAD), req.clone(Command.PROVISION)):
            resp = self.route_in_order(step)
            if resp != Response.OK:
                return resp
        return Response.OK

    def _destroy(self, req: Request) -> Response:
        if self.destroyed():
            msg.detail("SecurityGroups does not exist, skipping...")
            return Response.OK
        if not _two_pass(req):
            return self.route_reverse_order(req)
        rules = req.clone(Command.DESTROY)
        rules.flags.append("rules_only")
        resp = self.route_reverse_order(rules)
        if resp != Response.OK:
            return resp
        destroy = req.clone(Command.DESTROY)
        for group in reversed(self.get()):
            resp = group.provider.route(destroy)
            if resp != Response.OK:
                return resp
        return Response.OK

    def help(self) -> None:
        rows = commands(
            (Command.CREATE, "create all security groups"),
            (Command.AUDIT, "audit all security groups"),
            (Command.PROVISION, "update all security groups"),
            (Command.DESTROY, "destroy all security groups"),
            ("'name'", "manage named security group"),
        )
        show_help("secgroup", rows + trailer("security groups"))
