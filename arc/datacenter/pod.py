"""
Pods y sus instancias.

Un pod crea `count` instancias llamadas <pod>-NN; la subred de cada una se
elige en round-robin sobre las zonas de disponibilidad de la red, empezando
por la primera.
"""

import logging
from typing import Dict, List, Optional

from arc.config import models
from arc.core import aaa, log, msg
from arc.core.errors import ConfigError
from arc.datacenter import factory
from arc.datacenter.base import commands, guarded, show_help, test_skip, trailer, unknown_command
from arc.datacenter.instance import Instance, instance_help
from arc.resource import Lifecycle, Resources
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)


def new_instance(pod, subnet, keypair, prov, name: str) -> Instance:
    ctor = factory.instance_factories.get(pod.servertype, Instance)
    return ctor(pod, subnet, keypair, prov, name)


def route_instance(req: Request, find) -> Response:
    """Consume "instance <name>" y delega en la instancia."""
    req.pop()
    if not req.top():
        instance_help()
        return Response.FAIL
    instance = find(req.top())
    if instance is None:
        msg.error(f"Unknown instance {req.top()!r}.")
        return Response.FAIL
    return instance.route(req.pop())


class Instances(Resources):
    def __init__(self, pod: "Pod", prov):
        super().__init__()
        logger.debug("Initializing Instances")
        self.pod = pod
        self.instances: Dict[str, Instance] = {}

        network = pod.cluster.compute.datacenter.network
        zones = network.availability_zones
        group = network.subnet_groups.find(pod.cfg.subnet_group)
        if group is None:
            raise ConfigError(f"Cannot find subnet group {pod.cfg.subnet_group} configured for pod {pod.name}")
        keypair = pod.cluster.compute.keypair

        for n in range(pod.cfg.count):
            name = f"{pod.name}-{n + 1:02d}"
            if name in self.instances:
                raise ConfigError(f"Instance name {name!r} must be unique but is used multiple times")
            subnet_name = f"{pod.cfg.subnet_group}-{zones[n % len(zones)]}"
            subnet = group.find(subnet_name)
            if subnet is None:
                raise ConfigError(f"Cannot find subnet {subnet_name} configured for instance {name}")
            instance = new_instance(pod, subnet, keypair, prov, name)
            self.instances[name] = instance
            self.append(instance)

    def find(self, name: str) -> Optional[Instance]:
        return self.instances.get(name)

    def audit(self, name: str) -> None:
        for instance in self.instances.values():
            instance.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "Instances")
        if req.top() == "instance":
            return route_instance(req, self.find)

        if req.command in (Command.DESTROY, Command.STOP):
            return self.route_reverse_order(req)
        if req.command in (Command.LOAD, Command.CREATE, Command.PROVISION, Command.START,
                           Command.RESTART, Command.REPLACE):
            return self.route_in_order(req)
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            for instance in self:
                instance.config()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("Instances")
                msg.indent_inc()
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        return unknown_command("instances", req)

    def help(self) -> None:
        rows = commands(
            (Command.CREATE, "create all instances"),
            (Command.PROVISION, "provision all instances"),
            (Command.START, "start all instances"),
            (Command.STOP, "stop all instances"),
            (Command.RESTART, "restart all instances"),
            (Command.REPLACE, "replace all instances"),
            (Command.AUDIT, "audit all instances"),
            (Command.DESTROY, "destroy all instances"),
            ("'name'", "manage named instance"),
        )
        show_help("instance", rows + trailer("instances"))


class Pod(Resources, Lifecycle):
    """
    Conjunto de instancias idénticas con un servertype común.

    El registro CNAME primario del pod (el que tiene el nombre del pod) decide
    cuál de las instancias creadas es la primaria.
    """

    kind = "Pod"
    scope_flag = "podonly"

    def __init__(self, cluster, prov, cfg: models.Pod):
        super().__init__()
        logger.debug("Initializing Pod %r", cfg.name)
        self.cfg = cfg
        self.cluster = cluster
        self.cname_records: List = []
        self.primary_cname = None
        self.instances = Instances(self, prov)
        self.append(self.instances)

    @property
    def name(self) -> str:
        return self.cfg.name

    @property
    def servertype(self) -> str:
        return self.cfg.servertype

    @property
    def audit_ignore(self) -> bool:
        return self.cluster.audit_ignore

    @property
    def pkg_name(self) -> str:
        """Nombre del paquete del servertype según la familia de la imagen."""
        if self.cfg.package_name:
            return self.cfg.package_name.format(servertype=self.servertype, version=self.cfg.version)
        image = self.cfg.image
        if image.startswith(("centos", "ucxn")):
            return f"servertype-{self.servertype}-1.0.0-{self.cfg.version}.x86_64.rpm"
        if image.startswith("ubuntu"):
            return f"servertype-{self.servertype}_1.0.0-{self.cfg.version}_amd64.deb"
        return ""

    def find_instance(self, name: str) -> Optional[Instance]:
        return self.instances.find(name)

    def _primary_index(self) -> int:
        if self.primary_cname is None:
            return -1
        values = self.primary_cname.dynamic_values()
        for n, instance in enumerate(self.instances):
            if instance.created() and instance.fqdn_match(values):
                return n
        return -1

    def primary_instance(self) -> Optional[Instance]:
        n = self._primary_index()
        if n < 0:
            return None
        return self.instances.get()[n]

    def secondary_instances(self) -> List[Instance]:
        """Instancias creadas rotadas para empezar justo después de la primaria."""
        n = self._primary_index()
        instances = self.instances.get()
        if n < 0 or len(instances) < 2:
            return []
        rotated = instances[n + 1:] + instances[:n]
        return [i for i in rotated if i.created()]

    def audit(self, name: str) -> None:
        self.instances.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"Pod {self.name!r}")
        if req.top() == "instance":
            return route_instance(req, self.find_instance)
        if req.top():
            self.help()
            return Response.FAIL

        aaa.authorized(req, "pod", self.name)
        if test_skip(req):
            return Response.OK

        if req.command is Command.LOAD:
            return self.load(req)
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            self.info(req)
            return Response.OK
        if req.command is Command.AUDIT:
            aaa.new_audit("Instance")
            self.audit("Instance")
            return Response.OK
        if req.command in (Command.CREATE, Command.DESTROY, Command.PROVISION, Command.START,
                           Command.STOP, Command.RESTART, Command.REPLACE):
            return self.lifecycle(req)
        return unknown_command("pod", req)

    def load(self, req: Request) -> Response:
        dns = self.cluster.compute.datacenter.dns
        if dns is not None:
            self.cname_records = dns.cname_records.find_by_pod(self.name)
            self.primary_cname = dns.cname_records.find(self.name)
        return self.route_in_order(req)

    def post_create(self, req: Request) -> Response:
        return self._route_cnames(req.clone(Command.CREATE))

    def pre_destroy(self, req: Request) -> Response:
        return self._route_cnames(req.clone(Command.DESTROY))

    def _route_cnames(self, req: Request) -> Response:
        """Los CNAME que apuntan al pod siguen su ciclo de vida."""
        for record in self.cname_records:
            resp = record.route(req)
            if resp != Response.OK:
                return resp
        return Response.OK

    def info(self, req: Request) -> None:
        if self.destroyed():
            return
        msg.info("Pod")
        msg.detail(f"{'name':<20}\t{self.name}")
        msg.indent_inc()
        self.route_in_order(req)
        msg.indent_dec()

    def help(self) -> None:
        pod_help(self.name)


def pod_help(name: str = "") -> None:
    n = f" {name}" if name else ""
    rows = commands(
        (Command.CREATE, f"create{n} pod"),
        (Command.PROVISION, f"provision{n} pod"),
        (f"{Command.PROVISION} users", f"update{n} pod users"),
        (Command.START, f"start{n} pod"),
        (Command.STOP, f"stop{n} pod"),
        (Command.RESTART, f"restart{n} pod"),
        (Command.REPLACE, f"replace{n} pod"),
        (Command.AUDIT, f"audit{n} pod"),
        (Command.DESTROY, f"destroy{n} pod"),
    )
    show_help(f"pod{n or ' [name]'}", rows + trailer(f"{n.strip()} pod".strip()))


def new_pod(cluster, prov, cfg: models.Pod) -> Pod:
    ctor = factory.pod_factories.get(cfg.servertype, Pod)
    return ctor(cluster, prov, cfg)


class Pods(Resources):
    def __init__(self, cluster, prov, cfgs: List[models.Pod]):
        super().__init__()
        logger.debug("Initializing Pods")
        self.cluster = cluster
        self.pods: Dict[str, Pod] = {}
        for conf in cfgs:
            if conf.name in self.pods:
                raise ConfigError(f"Pod name {conf.name!r} must be unique but is used multiple times")
            pod = new_pod(cluster, prov, conf)
            self.pods[conf.name] = pod
            self.append(pod)

    def find(self, name: str) -> Optional[Pod]:
        return self.pods.get(name)

    def find_instance(self, name: str) -> Optional[Instance]:
        for pod in self.pods.values():
            instance = pod.find_instance(name)
            if instance is not None:
                return instance
        return None

    def audit(self, name: str) -> None:
        for pod in self.pods.values():
            pod.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "Pods")
        if req.top() == "instance":
            return route_instance(req, self.find_instance)
        pod = self.find(req.top())
        if pod is not None:
            return pod.route(req.pop())
        if req.top():
            msg.error(f"Unknown pod {req.top()!r}.")
            return Response.FAIL

        if req.command in (Command.DESTROY, Command.STOP):
            return self.route_reverse_order(req)
        if req.command in (Command.LOAD, Command.CREATE, Command.PROVISION, Command.START,
                           Command.RESTART, Command.REPLACE, Command.INFO):
            return self.route_in_order(req)
        if req.command is Command.HELP:
            pod_help()
            return Response.OK
        if req.command is Command.CONFIG:
            for pod in self.pods.values():
                pod.cfg.print()
            return Response.OK
        return unknown_command("pods", req)
