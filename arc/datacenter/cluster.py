"""
Clusters: agrupación de pods con tags de seguridad comunes.
"""

import logging
from typing import Dict, List, Optional

from arc.config import models
from arc.core import aaa, log, msg
from arc.core.errors import ConfigError
from arc.datacenter import factory
from arc.datacenter.base import commands, guarded, show_help, test_skip, trailer, unknown_command
from arc.datacenter.pod import Pod, Pods, pod_help, route_instance
from arc.resource import Lifecycle, Resources
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)


class Cluster(Resources, Lifecycle):
    kind = "Cluster"
    scope_flag = "clusteronly"

    def __init__(self, compute, prov, cfg: models.Cluster):
        super().__init__()
        logger.debug("Initializing Cluster %r", cfg.name)
        self.cfg = cfg
        self.compute = compute
        self.pods = Pods(self, prov, cfg.pods)
        self.append(self.pods)

    @property
    def name(self) -> str:
        return self.cfg.name

    @property
    def audit_ignore(self) -> bool:
        return self.cfg.audit_ignore

    @property
    def security_tags(self) -> Dict[str, str]:
        return self.cfg.security_tags

    def find_pod(self, name: str) -> Optional[Pod]:
        return self.pods.find(name)

    def find_instance(self, name: str):
        return self.pods.find_instance(name)

    def audit(self, name: str) -> None:
        self.pods.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"Cluster {self.name!r}")
        if req.top() == "pod":
            req.pop()
            if not req.top():
                pod_help()
                return Response.FAIL
            pod = self.find_pod(req.top())
            if pod is None:
                msg.error(f"Unknown pod {req.top()!r}.")
                return Response.FAIL
            return pod.route(req.pop())
        if req.top():
            self.help()
            return Response.FAIL

        aaa.authorized(req, "cluster", self.name)
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
                msg.info("Cluster")
                msg.detail(f"{'name':<20}\t{self.name}")
                msg.indent_inc()
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        if req.command is Command.AUDIT:
            aaa.new_audit("Instance")
            self.audit("Instance")
            return Response.OK
        if req.command in (Command.CREATE, Command.DESTROY, Command.PROVISION, Command.START,
                           Command.STOP, Command.RESTART, Command.REPLACE):
            return self.lifecycle(req)
        return unknown_command("cluster", req)

    def help(self) -> None:
        n = self.name
        rows = commands(
            (Command.CREATE, f"create {n} cluster"),
            (Command.PROVISION, f"provision {n} cluster"),
            (f"{Command.PROVISION} users", f"update {n} cluster users"),
            (Command.START, f"start {n} cluster"),
            (Command.STOP, f"stop {n} cluster"),
            (Command.RESTART, f"restart {n} cluster"),
            (Command.REPLACE, f"replace {n} cluster"),
            (Command.AUDIT, f"audit {n} cluster"),
            (Command.DESTROY, f"destroy {n} cluster"),
        )
        show_help(f"cluster {n}", rows + trailer(f"{n} cluster"))


def new_cluster(compute, prov, cfg: models.Cluster) -> Cluster:
    if cfg.pods is None:
        raise ConfigError("The pods element is missing from the compute configuration")
    ctor = factory.cluster_factories.get(cfg.name, Cluster)
    return ctor(compute, prov, cfg)


class Clusters(Resources):
    def __init__(self, compute, prov, cfgs: List[models.Cluster]):
        super().__init__()
        logger.debug("Initializing Clusters")
        self.cfgs = cfgs
        self.clusters: Dict[str, Cluster] = {}
        for conf in cfgs:
            if conf.name in self.clusters:
                raise ConfigError(f"Cluster name {conf.name!r} must be unique but is used multiple times")
            cluster = new_cluster(compute, prov, conf)
            self.clusters[conf.name] = cluster
            self.append(cluster)

    def find(self, name: str) -> Optional[Cluster]:
        return self.clusters.get(name)

    def find_pod(self, name: str) -> Optional[Pod]:
        for cluster in self.clusters.values():
            pod = cluster.find_pod(name)
            if pod is not None:
                return pod
        return None

    def find_instance(self, name: str):
        for cluster in self.clusters.values():
            instance = cluster.find_instance(name)
            if instance is not None:
                return instance
        return None

    def audit(self, name: str) -> None:
        for cluster in self.clusters.values():
            cluster.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "Clusters")
        if req.top() == "pod":
            req.pop()
            if not req.top():
                pod_help()
                return Response.FAIL
            pod = self.find_pod(req.top())
            if pod is None:
                msg.error(f"Unknown pod {req.top()!r}.")
                return Response.FAIL
            return pod.route(req.pop())
        if req.top() == "instance":
            return route_instance(req, self.find_instance)

        cluster = self.find(req.top())
        if cluster is not None:
            return cluster.route(req.pop())
        if req.top():
            msg.error(f"Unknown cluster {req.top()!r}.")
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command in (Command.LOAD, Command.PROVISION):
            return self.route_in_order(req)
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            for conf in self.cfgs:
                conf.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("Clusters")
                msg.indent_inc()
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        return unknown_command("cluster", req)

    def help(self) -> None:
        rows = commands(("'name'", "manage named cluster"))
        show_help("cluster", rows + trailer("clusters"))
