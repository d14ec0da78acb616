"""
Handle base del vendor mock.

El estado se consulta siempre en la nube en memoria: created() y destroyed()
son complementarios y load() no tiene nada que refrescar.
"""

import logging
from typing import Collection, Dict, Hashable, List, Optional

from arc.config.models import Provider
from arc.core import aaa, msg
from arc.core.errors import ArcError
from arc.core.help import Command as HelpCommand
from arc.mock.cloud import Record, cloud
from arc.route import Command, Request, Response

logger = logging.getLogger(__name__)


class MockResource:
    """
    Args:
        key: Clave del registro en la tabla
        provider: Configuración del provider; data["created"] == "yes" crea el
            registro al construir y data["route"] == "no" hace fallar route()
    """

    table = "resource"
    prefix = "mock"
    kind = "Resource"
    # Los handles hoja imprimen su propio envelope; los que envuelve el core no.
    envelope = True

    def __init__(self, key: Hashable, provider: Optional[Provider] = None):
        self.key = key
        data: Dict[str, str] = provider.data if provider else {}
        self.routable = data.get("route", "yes") != "no"
        if data.get("created") == "yes" and self.record is None:
            self.allocate()

    @property
    def record(self) -> Optional[Record]:
        return cloud.get(self.table, self.key)

    @property
    def id(self) -> str:
        record = self.record
        return record.id if record else ""

    @property
    def state(self) -> str:
        record = self.record
        return record.state if record else ""

    def created(self) -> bool:
        return self.record is not None

    def destroyed(self) -> bool:
        return self.record is None

    def load(self) -> None:
        cloud.record("load", self.table, self.key)

    def allocate(self) -> Record:
        """Crea el registro en la nube."""
        return cloud.put(self.table, self.key, Record(id=cloud.new_id(self.prefix), state="available"))

    def release(self) -> None:
        cloud.remove(self.table, self.key)

    def can_route(self, req: Request) -> bool:
        return False

    def help_commands(self) -> List[HelpCommand]:
        return []

    def route(self, req: Request) -> Response:
        if not self.routable:
            msg.error(f"{self.kind} {self.key}: routing disabled by the provider")
            return Response.FAIL
        try:
            return self._route(req)
        except ArcError as e:
            msg.error(str(e))
            return Response.FAIL

    def _route(self, req: Request) -> Response:
        if req.command is Command.LOAD:
            self.load()
        elif req.command is Command.CREATE:
            self._create(req)
        elif req.command is Command.DESTROY:
            self._destroy(req)
        elif req.command is Command.PROVISION:
            self.provision(req)
        elif req.command is Command.INFO:
            self.info()
        elif req.command in (Command.START, Command.STOP, Command.RESTART):
            self.power(req)
        return Response.OK

    def _create(self, req: Request) -> None:
        if self.envelope:
            msg.info(f"{self.kind} Creation: {self.key}")
        if self.created() and not req.flag("skip_created_check"):
            if self.envelope:
                msg.detail(f"{self.kind} exists, skipping...")
            return
        self.create(req)
        if self.envelope:
            msg.detail(f"Created {self.id}")
            aaa.accounting(f"{self.kind} created: {self.id}")

    def _destroy(self, req: Request) -> None:
        if self.envelope:
            msg.info(f"{self.kind} Destruction: {self.key}")
        if self.destroyed():
            if self.envelope:
                msg.detail(f"{self.kind} does not exist, skipping...")
            return
        ident = self.id
        self.destroy(req)
        if self.envelope:
            msg.detail(f"Destroyed: {ident}")
            aaa.accounting(f"{self.kind} destroyed: {ident}")

    def create(self, req: Request) -> None:
        cloud.record("create", self.table, self.key)
        self.allocate()

    def destroy(self, req: Request) -> None:
        cloud.record("destroy", self.table, self.key)
        self.release()

    def provision(self, req: Request) -> None:
        cloud.record("provision", self.table, self.key)

    def power(self, req: Request) -> None:
        pass

    def info(self) -> None:
        if self.destroyed():
            return
        msg.info(self.kind)
        msg.detail(f"{'name':<20}\t{self.key}")
        msg.detail(f"{'id':<20}\t{self.id}")
        msg.detail(f"{'state':<20}\t{self.state}")

    def audit(self, name: str) -> None:
        if not self.created():
            _audit(name).audit(aaa.AuditKind.CONFIGURED, f"{self.key}")


def _audit(name: str) -> aaa.Audit:
    return aaa.get_audit(name) or aaa.new_audit(name)


def audit_rogue(name: str, table: str, configured: Collection[Hashable]) -> None:
    """Registra como desplegados los registros de `table` que no están configurados."""
    audit = _audit(name)
    for key in cloud.keys(table):
        if key not in configured:
            audit.audit(aaa.AuditKind.DEPLOYED, f"{key}, {cloud.get(table, key).id}")
