"""
Servicios hoja del datacenter: bases de datos y servicio de contenedores.
"""

import logging
from typing import Dict, List, Optional

from arc.config import models
from arc.core import aaa, log, msg
from arc.core.errors import ConfigError
from arc.datacenter.base import commands, guarded, show_help, test_skip, trailer, unknown_command
from arc.provider import registry
from arc.resource import Resources
from arc.resource.provider import (
    ContainerServiceProvider,
    DatabaseServiceProvider,
    ProviderDatabase,
)
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)


class Database:
    """Base de datos; conserva el handle del provider para todas las operaciones."""

    def __init__(self, cfg: models.Database, service, prov: DatabaseServiceProvider):
        logger.debug("Initializing Database %r", cfg.name)
        self.cfg = cfg
        self.provider: ProviderDatabase = prov.new_database(cfg, service)

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

    def audit(self, name: str) -> None:
        self.provider.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, f"Database {self.name!r}")
        if req.top():
            self.help()
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command is Command.LOAD:
            self.provider.load()
            return Response.OK
        if req.command is Command.CREATE:
            msg.info(f"Database Creation: {self.name}")
            if self.created():
                msg.detail("Database exists, skipping...")
                return Response.OK
            self.provider.create(req.flags.get())
            msg.detail(f"Database Created: {self.id}")
            aaa.accounting(f"Database created: {self.id}")
            return Response.OK
        if req.command is Command.DESTROY:
            msg.info(f"Database Destruction: {self.name}")
            if self.destroyed():
                msg.detail("Database does not exist, skipping...")
                return Response.OK
            ident = self.id
            self.provider.destroy(req.flags.get())
            msg.detail(f"Database Destroyed: {ident}")
            aaa.accounting(f"Database destroyed: {ident}")
            return Response.OK
        if req.command is Command.PROVISION:
            msg.info(f"Database Provision: {self.name}")
            if self.destroyed():
                msg.detail("Database does not exist, skipping...")
                return Response.OK
            self.provider.provision(req.flags.get())
            msg.detail(f"Database Provisioned: {self.id}")
            aaa.accounting(f"Database provisioned: {self.id}")
            return Response.OK
        if req.command is Command.AUDIT:
            aaa.new_audit("Database")
            self.audit("Database")
            return Response.OK
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("Database")
                msg.indent_inc()
                msg.detail(f"{'name':<20}\t{self.name}")
                msg.detail(f"{'id':<20}\t{self.id}")
                self.provider.info()
                msg.indent_dec()
            return Response.OK
        return unknown_command("database", req)

    def help(self) -> None:
        n = self.name
        rows = commands(
            (Command.CREATE, f"create {n} database"),
            (Command.PROVISION, f"update {n} database"),
            (Command.AUDIT, f"audit {n} database"),
            (Command.DESTROY, f"destroy {n} database"),
        )
        show_help(f"db {n}", rows + trailer(f"{n} database"))


class Databases(Resources):
    def __init__(self, cfgs: List[models.Database], service, prov):
        super().__init__()
        logger.debug("Initializing Databases")
        self.databases: Dict[str, Database] = {}
        for conf in cfgs:
            if conf.name in self.databases:
                raise ConfigError(f"Database name {conf.name!r} must be unique but is used multiple times")
            db = Database(conf, service, prov)
            self.databases[conf.name] = db
            self.append(db)

    def find(self, name: str) -> Optional[Database]:
        return self.databases.get(name)

    def audit(self, name: str) -> None:
        for db in self.databases.values():
            db.audit(name)


class DatabaseService(Resources):
    """
    Servicio de bases de datos.

    El primer hijo es el handle del servicio en el provider (p. ej. el grupo
    de subredes de las bases de datos); después van las bases de datos.
    """

    def __init__(self, arc, cfg: models.DatabaseService):
        super().__init__()
        logger.debug("Initializing Database Service")
        if cfg.provider is None:
            raise ConfigError("The provider element is missing from the database_service configuration")
        self.cfg = cfg
        self.arc = arc
        self.datacenter = None

        prov: DatabaseServiceProvider = registry.database_services.new(cfg)
        self.provider = prov.new_database_service(cfg)
        self.append(self.provider)
        self.databases = Databases(cfg.databases, self.provider, prov)
        self.append(self.databases)

    def associate(self, datacenter) -> None:
        self.datacenter = datacenter

    def find(self, name: str) -> Optional[Database]:
        return self.databases.find(name)

    def audit(self, name: str) -> None:
        aaa.new_audit(name)
        self.provider.audit(name)
        self.databases.audit(name)

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "DatabaseService")
        db = self.find(req.top())
        if db is not None:
            return db.route(req.pop())
        if req.top():
            msg.error(f"Unknown database {req.top()!r}.")
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command in (Command.LOAD, Command.CREATE, Command.PROVISION):
            return self._route_children(req, reverse=False)
        if req.command is Command.DESTROY:
            return self._route_children(req, reverse=True)
        if req.command is Command.AUDIT:
            self.audit("Database")
            return Response.OK
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("Database Service")
                msg.indent_inc()
                self._route_children(req, reverse=False)
                msg.indent_dec()
            return Response.OK
        return unknown_command("database service", req)

    def _route_children(self, req: Request, reverse: bool) -> Response:
        children = [self.provider] + self.databases.get()
        if reverse:
            children.reverse()
        for child in children:
            resp = child.route(req)
            if resp != Response.OK:
                return resp
        return Response.OK

    def help(self) -> None:
        rows = commands(
            (Command.CREATE, "create the database service and all databases"),
            (Command.PROVISION, "update all databases"),
            (Command.AUDIT, "audit the database service"),
            (Command.DESTROY, "destroy all databases and the database service"),
            ("'name'", "manage named database"),
        )
        show_help("db", rows + trailer("database service"))


class ContainerService:
    """
    Servicio de contenedores. Si su configuración no trae provider se usa el
    provider de la raíz del documento.
    """

    def __init__(self, arc, cfg: models.ContainerService, default: Optional[models.Provider] = None):
        logger.debug("Initializing Container Service %r", cfg.name)
        if cfg.provider is None:
            if default is None:
                raise ConfigError("The provider element is missing from the container_service configuration")
            cfg = cfg.model_copy(update={"provider": default})
        self.cfg = cfg
        self.arc = arc
        prov: ContainerServiceProvider = registry.container_services.new(cfg)
        self.provider = prov.new_container_service(cfg)

    @property
    def name(self) -> str:
        return self.cfg.name

    def created(self) -> bool:
        return self.provider.created()

    def destroyed(self) -> bool:
        return self.provider.destroyed()

    @guarded
    def route(self, req: Request) -> Response:
        log.route(req, "ContainerService")
        if req.top():
            self.help()
            return Response.FAIL
        if test_skip(req):
            return Response.OK

        if req.command is Command.LOAD:
            self.provider.load()
            return Response.OK
        if req.command is Command.CREATE:
            msg.info(f"Container Service Creation: {self.name}")
            if self.created():
                msg.detail("Container Service exists, skipping...")
                return Response.OK
            self.provider.create(req.flags.get())
            msg.detail(f"Container Service Created: {self.name}")
            aaa.accounting(f"Container Service created: {self.name}")
            return Response.OK
        if req.command is Command.DESTROY:
            msg.info(f"Container Service Destruction: {self.name}")
            if self.destroyed():
                msg.detail("Container Service does not exist, skipping...")
                return Response.OK
            self.provider.destroy(req.flags.get())
            msg.detail(f"Container Service Destroyed: {self.name}")
            aaa.accounting(f"Container Service destroyed: {self.name}")
            return Response.OK
        if req.command is Command.PROVISION:
            msg.info(f"Container Service Provision: {self.name}")
            if self.destroyed():
                msg.detail("Container Service does not exist, skipping...")
                return Response.OK
            self.provider.provision(req.flags.get())
            msg.detail(f"Container Service Provisioned: {self.name}")
            return Response.OK
        if req.command is Command.AUDIT:
            aaa.new_audit("ContainerService")
            self.provider.audit(["ContainerService"])
            return Response.OK
        if req.command is Command.HELP:
            self.help()
            return Response.OK
        if req.command is Command.CONFIG:
            self.cfg.print()
            return Response.OK
        if req.command is Command.INFO:
            if not self.destroyed():
                msg.info("Container Service")
                msg.indent_inc()
                msg.detail(f"{'name':<20}\t{self.name}")
                self.provider.info()
                msg.indent_dec()
            return Response.OK
        return unknown_command("container service", req)

    def help(self) -> None:
        rows = commands(
            (Command.CREATE, "create the container service"),
            (Command.PROVISION, "update the container service"),
            (Command.AUDIT, "audit the container service"),
            (Command.DESTROY, "destroy the container service"),
        )
        show_help("container", rows + trailer("container service"))
