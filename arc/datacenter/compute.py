"""
Compute: keypair y clusters, más las auditorías de instancias, volúmenes e
IPs elásticas.
"""

import logging
from typing import Optional

from arc.config import models
from arc.core import aaa, log, msg
from arc.core.errors import ConfigError
from arc.datacenter.base import commands, guarded, show_help, test_skip, trailer, unknown_command
from arc.datacenter.cluster import Cluster, Clusters
from arc.datacenter.keypair import KeyPair
from arc.resource import Resources
from arc.resource.provider import DataCenterProvider, ProviderCompute
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)


class Compute(Resources):
    def __init__(self, datacenter, prov: DataCenterProvider, cfg: models.Compute):
        super().__init__()
        logger.debug("Initializing Compute")
        if cfg.clusters is None:
            raise ConfigError("The clusters element is missing from the compute configuration")
        self.cfg = cfg
        self.datacenter = datacenter
        self.provider: ProviderCompute = prov.new_compute(self, cfg)

        self.keypair = KeyPair(prov)
        self.append(self.keypair)
        self.clusters = Clusters(self, prov, cfg.clusters)
        self.append(self.clusters)

    @property
    def name(self) -> str:
        return self.cfg.name

    def find_cluster(self, name: str) -> Optional[Cluster]:
        return self.clusters.find(name)

    def find_pod(self, name: str):
        return self.clusters.find_pod(name)

    def find_instance(self, name: str):
        return self.clusters.find_instance(name)

    def audit(self, name: str) -> None:
        aaa.new_audit(name)
        self.provider.audit_instances(name)
        self.clusters.audit(name)

    def _audit_instances(self, req: Request) -> Response:
        """
        "instance audit" audita todas las instancias; "instance <name> audit"
        se delega en los clusters para que pase por la autorización del pod.
        """
        if len(req.path) > 1:
            return self.clusters.route(req)
        if test_skip(req):
            return Response.OK
        self.audit("Instance")
        return Response.OK

    def _audit_volumes(self, req: Request) -> Response:
        if test_skip(req):
            return Response.OK
        aaa.new_audit("Volume")
        self.provider.audit_volumes("Volume")
        return Response.OK

    def _audit_eips(self, req: Request) -> Response:
        if test_skip(req):
            return Response.OK
        aaa.new_audit("EIP")
        self.provider.audit_eips("EIP")
        return Response.OK

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "Compute")
        top = req.top()
        if top == "keypair":
            return self.keypair.route(req.pop())
        if top == "cluster":
            return self.clusters.route(req.pop())
        if top == "pod":
            return self.clusters.route(req)
        if top == "instance":
            if req.command is not Command.AUDIT:
                return self.clusters.route(req)
            return self._audit_instances(req)
        if top == "volume":
            if req.command is not Command.AUDIT:
                msg.error(f"No command {str(req.command)!r} found for volumes")
                return Response.FAIL
            return self._audit_volumes(req)
        if top == "eip":
            if req.command is not Command.AUDIT:
                msg.error(f"No command {str(req.command)!r} found for elastic IPs")
                return Response.FAIL
            return self._audit_eips(req)
        if top:
            self.help()
            return Response.FAIL

        if test_skip(req):
            return Response.OK

        if req.command is Command.LOAD:
            return self.route_in_order(req)
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("Compute")
                msg.indent_inc()
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        if req.command is Command.AUDIT:
            for audit in (self._audit_instances, self._audit_volumes, self._audit_eips):
                resp = audit(req)
                if resp != Response.OK:
                    return resp
            return Response.OK
        return unknown_command("compute", req)

    def help(self) -> None:
        rows = commands(
            (Command.AUDIT, "audit instances, volumes and elastic IPs"),
            (f"instance {Command.AUDIT}", "audit the instances"),
            (f"volume {Command.AUDIT}", "audit the volumes"),
            (f"eip {Command.AUDIT}", "audit the elastic IPs"),
        )
        show_help("compute", rows + trailer("compute"))
