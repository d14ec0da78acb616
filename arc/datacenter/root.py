"""
Raíz del árbol: construye los subárboles a partir del documento, ejecuta la
fase load y despacha la petición.
"""

import getpass
import logging
from datetime import datetime, timezone
from typing import List, Optional

from arc.command import Runner
from arc.config import Directory, models
from arc.core import env, log, msg
from arc.core.help import Command as HelpCommand
from arc.core.help import print_help
from arc.datacenter.base import guarded, test_skip, unknown_command
from arc.datacenter.datacenter import COMPUTE_PATHS, NETWORK_PATHS, DataCenter
from arc.datacenter.dns import Dns
from arc.datacenter.services import ContainerService, DatabaseService
from arc.resource import Resources
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)

NO_LOAD = (Command.HELP, Command.CONFIG)


def root_help() -> None:
    rows = [
        HelpCommand("network", "manage network"),
        HelpCommand("subnet", "manage subnet groups"),
        HelpCommand("subnet 'name'", "manage named subnet group"),
        HelpCommand("secgroup", "manage security groups"),
        HelpCommand("secgroup 'name'", "manage named security group"),
        HelpCommand("compute", "manage compute"),
        HelpCommand("keypair", "manage keypair"),
        HelpCommand("cluster 'name'", "manage named cluster"),
        HelpCommand("pod 'name'", "manage named pod"),
        HelpCommand("instance 'name'", "manage named instance"),
        HelpCommand("db", "manage database service"),
        HelpCommand("db 'name'", "manage named database"),
        HelpCommand("dns", "manage dns"),
        HelpCommand("container", "manage container service"),
        HelpCommand(str(Command.CONFIG), "show the arc configuration for the given datacenter"),
        HelpCommand(str(Command.INFO), "show information about allocated arc resources"),
        HelpCommand(str(Command.HELP), "show this help"),
    ]
    print_help("", rows)


class Arc(Resources):
    """
    Args:
        cfg: Documento del datacenter
        users: Directorio de usuarios y equipos
        runner: Ejecutor de lotes de comandos (por defecto SSH)
    """

    def __init__(self, cfg: models.Arc, users: Optional[Directory] = None, runner: Optional[Runner] = None):
        super().__init__()
        logger.info("Initializing Arc: %r", cfg.name)
        self.cfg = cfg
        self.users = users or Directory()
        self.runner = runner or Runner()
        self.datacenter: Optional[DataCenter] = None
        self.database_service: Optional[DatabaseService] = None
        self.dns: Optional[Dns] = None
        self.container_service: Optional[ContainerService] = None
        msg.heading(f"arc, {env.lookup('VERSION')}")

        if cfg.datacenter is not None:
            self.datacenter = DataCenter(self, cfg.datacenter)
            self.append(self.datacenter)
        if cfg.database_service is not None:
            self.database_service = DatabaseService(self, cfg.database_service)
            self.append(self.database_service)
        if cfg.dns is not None:
            self.dns = Dns(self, cfg.dns)
            self.append(self.dns)
        if cfg.container_service is not None:
            self.container_service = ContainerService(self, cfg.container_service, cfg.provider)
            self.append(self.container_service)

        if self.datacenter is not None:
            if self.dns is not None:
                self.datacenter.associate(self.dns)
                self.dns.associate(self.datacenter)
            if self.database_service is not None:
                self.database_service.associate(self.datacenter)

    @property
    def name(self) -> str:
        return self.cfg.name

    def request(self, params: List[str], user: str = "") -> Request:
        req = Request(self.name, user or getpass.getuser(), str(datetime.now(timezone.utc)))
        return req.parse(params)

    def run(self, params: List[str], user: str = "") -> int:
        """
        Ejecuta una invocación: load (salvo help/config/test) y después el verbo.

        Returns:
            Código de salida: 0 si todo fue OK, 1 en otro caso
        """
        req = self.request(params, user)
        logger.info("Creating %s request for user %r", req, req.user_id)

        if req.command in (Command.NONE, Command.LOAD):
            req.command = Command.HELP
            self.route(req)
            return 1

        if req.command not in NO_LOAD and not req.test_flag():
            logger.info("Loading arc: %r", self.name)
            if self.route(req.clone(Command.LOAD)) != Response.OK:
                msg.error(f"Failed to load datacenter {self.name}")
                return 1
            logger.info("Loading complete")

        logger.info("Routing request: %s", req)
        if self.route(req) != Response.OK:
            logger.info("Exiting, %s request failed", req)
            return 1
        logger.info("Exiting successfully")
        return 0

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "Arc")
        top = req.top()
        if top in ("network", "compute") + NETWORK_PATHS + COMPUTE_PATHS:
            if self.datacenter is None:
                msg.error("Datacenter not defined in the config file")
                return Response.FAIL
            return self.datacenter.route(req)
        if top in ("database", "db"):
            if self.database_service is None:
                msg.error("DatabaseService not defined in the config file")
                return Response.FAIL
            return self.database_service.route(req.pop())
        if top == "dns":
            if self.dns is None:
                msg.error("Dns not defined in the config file")
                return Response.FAIL
            return self.dns.route(req.pop())
        if top == "container":
            if self.container_service is None:
                msg.error("ContainerService not defined in the config file")
                return Response.FAIL
            return self.container_service.route(req.pop())
        if top:
            root_help()
            return Response.FAIL

        if test_skip(req):
            return Response.OK
        if req.command in (Command.LOAD, Command.AUDIT):
            return self.route_in_order(req)
        if req.command is Command.HELP:
            root_help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.indent_inc()
                self.cfg.print_local()
                self.route_in_order(req)
                msg.indent_dec()
            return Response.OK
        return unknown_command("arc", req)
