"""
Datacenter: red y compute de un vendor.
"""

import logging
from typing import Dict

from arc.config import models
from arc.core import log, msg
from arc.core.errors import ConfigError, InternalError
from arc.datacenter.base import guarded, test_skip
from arc.datacenter.compute import Compute
from arc.datacenter.network import Network
from arc.provider import registry
from arc.resource import Resources
from arc.resource.provider import DataCenterProvider
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)

NETWORK_PATHS = ("subnet", "secgroup")
COMPUTE_PATHS = ("keypair", "cluster", "pod", "instance", "volume", "eip")


class DataCenter(Resources):
    def __init__(self, arc, cfg: models.DataCenter):
        super().__init__()
        logger.debug("Initializing Datacenter")
        if cfg.provider is None:
            raise ConfigError("The provider element is missing from the datacenter configuration")
        if cfg.network is None and cfg.compute is not None:
            raise ConfigError("The network element is missing from the datacenter configuration")
        self.cfg = cfg
        self.arc = arc
        self.dns = None
        self.network = None
        self.compute = None

        prov: DataCenterProvider = registry.datacenters.new(cfg)
        if cfg.network is not None:
            cfg.network.name = arc.name
            self.network = Network(self, prov, cfg.network)
            self.append(self.network)
        if cfg.compute is not None:
            cfg.compute.name = arc.name
            self.compute = Compute(self, prov, cfg.compute)
            self.append(self.compute)

    @property
    def name(self) -> str:
        return self.arc.name

    @property
    def security_tags(self) -> Dict[str, str]:
        return self.cfg.security_tags

    def associate(self, dns) -> None:
        self.dns = dns

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "DataCenter")
        top = req.top()
        if top == "network" or top in NETWORK_PATHS:
            if self.network is None:
                msg.error("Network not defined in the config file")
                return Response.FAIL
            return self.network.route(req.pop() if top == "network" else req)
        if top == "compute" or top in COMPUTE_PATHS:
            if self.compute is None:
                msg.error("Compute not defined in the config file")
                return Response.FAIL
            return self.compute.route(req.pop() if top == "compute" else req)
        if top:
            raise InternalError(f"Internal Error: Unknown path {top}")

        if test_skip(req):
            return Response.OK
        if req.command in (Command.LOAD, Command.AUDIT):
            return self.route_in_order(req)
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("DataCenter")
                msg.indent_inc()
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        raise InternalError(f"Internal Error: Unknown command {req.command}")
