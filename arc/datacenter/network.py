"""
Red del datacenter: provider de red, grupos de subredes y grupos de seguridad,
en ese orden (destroy en orden inverso).
"""

import logging
from typing import List, Tuple

from arc.config import models
from arc.core import aaa, log, msg
from arc.core.errors import ConfigError
from arc.datacenter.base import commands, guarded, show_help, test_skip, trailer, unknown_command
from arc.datacenter.security_group import SecurityGroups
from arc.datacenter.subnet import SubnetGroups
from arc.resource import Resources
from arc.resource.provider import DataCenterProvider
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)


class Network(Resources):
    def __init__(self, datacenter, prov: DataCenterProvider, cfg: models.Network):
        super().__init__()
        logger.debug("Initializing Network")
        if cfg.subnet_groups is None:
            raise ConfigError("The subnet_groups element is missing from the network configuration")
        if cfg.security_groups is None:
            raise ConfigError("The security_groups element is missing from the network configuration")
        self.cfg = cfg
        self.datacenter = datacenter

        self.provider = prov.new_network(self, cfg)
        self.append(self.provider)
        self.subnet_groups = SubnetGroups(self, prov, cfg.subnet_groups)
        self.append(self.subnet_groups)
        self.security_groups = SecurityGroups(self, prov, cfg.security_groups)
        self.append(self.security_groups)

    @property
    def name(self) -> str:
        return self.cfg.name

    @property
    def cidr(self) -> str:
        return self.cfg.cidr

    @property
    def availability_zones(self) -> List[str]:
        return self.cfg.availability_zones

    @property
    def id(self) -> str:
        return self.provider.id

    def cidr_alias(self, name: str) -> str:
        return self.cfg.cidr_aliases.get(name, "")

    def cidr_group(self, name: str) -> List[str]:
        return self.cfg.cidr_groups.get(name, [])

    def resolve_remote(self, remote: str) -> Tuple[List[str], List[str]]:
        """
        Resuelve el remoto de una regla a (bloques CIDR, nombres de grupo).

        Formatos: cidr:<cidr o alias>, cidr_group:<nombre>,
        subnet_group:<nombre>, security_group:<nombre>.

        Raises:
            ConfigError: referencia desconocida
        """
        kind, _, value = remote.partition(":")
        if kind == "cidr":
            return [self.cidr_alias(value) or value], []
        if kind == "cidr_group":
            group = self.cidr_group(value)
            if not group:
                raise ConfigError(f"Unknown cidr group {value!r}")
            return [self.cidr_alias(v) or v for v in group], []
        if kind == "subnet_group":
            subnet_group = self.subnet_groups.find(value)
            if subnet_group is None:
                raise ConfigError(f"Unknown subnet group {value!r}")
            return [subnet.cidr for subnet in subnet_group], []
        if kind == "security_group":
            if self.security_groups.find(value) is None:
                raise ConfigError(f"Unknown security group {value!r}")
            return [], [value]
        raise ConfigError(f"Unknown remote {remote!r}")

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "Network")
        aaa.authorized(req, "network", self.name)

        if req.top() == "subnet":
            return self.subnet_groups.route(req.pop())
        if req.top() == "secgroup":
            return self.security_groups.route(req.pop())
        if self.provider.can_route(req):
            return self.provider.route(req)
        if req.top():
            self.help()
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command in (Command.LOAD, Command.CREATE, Command.AUDIT):
            return self.route_in_order(req)
        if req.command is Command.DESTROY:
            return self.route_reverse_order(req)
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("Network")
                msg.indent_inc()
                msg.detail(f"{'name':<20}\t{self.name}")
                msg.detail(f"{'cidr':<20}\t{self.cidr}")
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        return unknown_command("network", req)

    def help(self) -> None:
        rows = self.provider.help_commands() + commands(
            (Command.CREATE, "create all network resources"),
            (Command.DESTROY, "destroy all network resources"),
            (Command.AUDIT, "audit all network resources"),
        )
        show_help("network", rows + trailer("network"))
