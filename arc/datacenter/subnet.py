"""
Grupos de subredes: un SubnetGroup se expande en una subred por zona de
disponibilidad, con bloques CIDR consecutivos a partir del bloque base.
"""

import logging
from typing import Dict, List, Optional

from arc.config import models
from arc.core import aaa, cidr, log, msg
from arc.core.errors import ConfigError, InternalError
from arc.datacenter.base import commands, guarded, show_help, test_skip, trailer, unknown_command
from arc.resource import Resources
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)


class Subnet:
    """Subred de una zona. Load/Create/Destroy/Info se delegan al provider."""

    def __init__(self, network, prov, cfg: models.Subnet):
        logger.debug("Initializing Subnet %r", cfg.name)
        self.cfg = cfg
        self.network = network
        self.provider = prov.new_subnet(network, cfg)

    @property
    def name(self) -> str:
        return self.cfg.name

    @property
    def group_name(self) -> str:
        return self.cfg.group_name

    @property
    def cidr(self) -> str:
        return self.cfg.cidr

    @property
    def access(self) -> str:
        return self.cfg.access

    @property
    def availability_zone(self) -> str:
        return self.cfg.availability_zone

    @property
    def id(self) -> str:
        return self.provider.id

    def created(self) -> bool:
        return self.provider.created()

    def destroyed(self) -> bool:
        return self.provider.destroyed()

    def audit(self, name: str) -> None:
        self.provider.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"Subnet {self.name!r}")
        if req.top():
            raise InternalError(f"Internal Error: Unknown resource {req.top()}")
        if req.command is Command.LOAD:
            self.provider.load()
            return Response.OK
        if req.command in (Command.CREATE, Command.DESTROY, Command.INFO):
            return self.provider.route(req)
        msg.error(f"Internal Error: subnet {self.name}. Unknown command {req.command}")
        return Response.FAIL


class SubnetGroup(Resources):
    def __init__(self, network, prov, cfg: models.SubnetGroup):
        super().__init__()
        logger.debug("Initializing SubnetGroup %r", cfg.name)
        self.cfg = cfg
        self.network = network
        self.subnets: Dict[str, Subnet] = {}

        block = cfg.cidr
        for n, az in enumerate(network.availability_zones):
            if n:
                block = cidr.next_cidr_block(block)
            conf = models.Subnet(
                name=f"{cfg.name}-{az}",
                group_name=cfg.name,
                cidr=block,
                access=cfg.access,
                availability_zone=az,
                manage_routes=cfg.manage_routes,
            )
            subnet = Subnet(network, prov, conf)
            self.subnets[conf.name] = subnet
            self.append(subnet)

    @property
    def name(self) -> str:
        return self.cfg.name

    def find(self, name: str) -> Optional[Subnet]:
        return self.subnets.get(name)

    def audit(self, name: str) -> None:
        if aaa.get_audit(name) is None:
            aaa.new_audit(name)
        for subnet in self.subnets.values():
            subnet.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"SubnetGroup {self.name!r}")
        if req.top():
            self.help()
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command in (Command.LOAD, Command.CREATE):
            return self.route_in_order(req)
        if req.command is Command.DESTROY:
            return self.route_reverse_order(req)
        if req.command is Command.AUDIT:
            self.audit("Subnet")
            return Response.OK
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            self.info(req)
            return Response.OK
        return unknown_command("subnet", req)

    def help(self) -> None:
        rows = commands(
            (Command.CREATE, f"create {self.name} subnet group"),
            (Command.DESTROY, f"destroy {self.name} subnet group"),
        )
        show_help(f"subnet {self.name}", rows + trailer(f"{self.name} subnet group"))

    def info(self, req: Request) -> None:
        if not self.created():
            return
        msg.info("SubnetGroup")
        msg.indent_inc()
        msg.detail(f"{'name':<20}\t{self.name}")
        msg.detail(f"{'cidr':<20}\t{self.cfg.cidr}")
        msg.detail(f"{'access':<20}\t{self.cfg.access}")
        self.route_in_order(req)
        msg.indent_dec()


class SubnetGroups(Resources):
    def __init__(self, network, prov, cfgs: List[models.SubnetGroup]):
        super().__init__()
        logger.debug("Initializing SubnetGroups")
        self.cfgs = cfgs
        self.network = network
        self.groups: Dict[str, SubnetGroup] = {}
        for conf in cfgs:
            if conf.name in self.groups:
                raise ConfigError(f"Subnet group name {conf.name!r} must be unique but is used multiple times")
            group = SubnetGroup(network, prov, conf)
            self.groups[conf.name] = group
            self.append(group)
        self._check_blocks()

    def _check_blocks(self) -> None:
        """
        Las subredes generadas deben caer dentro de la red y no solaparse.

        Raises:
            ConfigError: con la primera subred fuera de la red o solapada
        """
        seen: List[Subnet] = []
        for group in self.groups.values():
            for subnet in group:
                if not cidr.contains(self.network.cidr, subnet.cidr):
                    raise ConfigError(
                        f"Subnet {subnet.name} cidr {subnet.cidr} is outside network cidr {self.network.cidr}")
                for other in seen:
                    if cidr.overlaps(subnet.cidr, other.cidr):
                        raise ConfigError(
                            f"Subnet {subnet.name} cidr {subnet.cidr} overlaps subnet {other.name} cidr {other.cidr}")
                seen.append(subnet)

    def find(self, name: str) -> Optional[SubnetGroup]:
        return self.groups.get(name)

    def find_subnet(self, group: str, az: str) -> Optional[Subnet]:
        subnet_group = self.find(group)
        if subnet_group is None:
            return None
        return subnet_group.find(f"{group}-{az}")

    def audit(self) -> None:
        aaa.new_audit("Subnet")
        self.network.provider.audit_subnets("Subnet")
        for group in self.groups.values():
            group.audit("Subnet")

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "SubnetGroups")
        group = self.find(req.top())
        if group is not None:
            return group.route(req.pop())
        if req.top():
            msg.error(f"Unknown subnet {req.top()!r}.")
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command in (Command.LOAD, Command.CREATE):
            return self.route_in_order(req)
        if req.command is Command.DESTROY:
            return self.route_reverse_order(req)
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
                msg.info("SubnetGroups")
                msg.indent_inc()
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        return unknown_command("subnet", req)

    def help(self) -> None:
        rows = commands(
            (Command.CREATE, "create all subnet groups"),
            (Command.DESTROY, "destroy all subnet groups"),
            (Command.AUDIT, "audit all subnet groups"),
            ("'name'", "manage named subnet group"),
        )
        show_help("subnet", rows + trailer("subnet groups"))
