"""
Providers de servicios del vendor mock: bases de datos y contenedores.
"""

import logging
from typing import List

from arc.config import models
from arc.core import aaa, msg
from arc.mock.base import MockResource, _audit, audit_rogue
from arc.mock.cloud import Record, cloud

logger = logging.getLogger(__name__)


class MockDatabaseService(MockResource):
    """Grupo de subredes de las bases de datos del servicio."""

    table = "db_subnet_group"
    prefix = "dbsg"
    kind = "Database Subnet Group"

    def __init__(self, provider: "MockDatabaseServiceProvider"):
        self.provider = provider
        super().__init__("database_service", provider.cfg.provider)

    def audit(self, name: str) -> None:
        super().audit(name)
        audit_rogue(name, MockDatabase.table, self.provider.databases)


class MockDatabase:
    table = "database"
    prefix = "db"

    def __init__(self, provider: "MockDatabaseServiceProvider", cfg: models.Database):
        self.cfg = cfg
        self.key = cfg.name
        provider.databases.add(cfg.name)
        if provider.cfg.provider.data.get("created") == "yes" and self.record is None:
            self._allocate()

    @property
    def record(self):
        return cloud.get(self.table, self.key)

    @property
    def id(self) -> str:
        record = self.record
        return record.id if record else ""

    def created(self) -> bool:
        return self.record is not None

    def destroyed(self) -> bool:
        return self.record is None

    def load(self) -> None:
        cloud.record("load", self.table, self.key)

    def _allocate(self) -> Record:
        return cloud.put(self.table, self.key, Record(
            id=cloud.new_id(self.prefix),
            state="available",
            data={
                "engine": self.cfg.engine,
                "version": self.cfg.version,
                "instance_type": self.cfg.instance_type,
                "storage": self.cfg.storage.size,
            },
        ))

    def create(self, flags: List[str]) -> None:
        cloud.record("create", self.table, self.key)
        self._allocate()

    def destroy(self, flags: List[str]) -> None:
        cloud.record("destroy", self.table, self.key)
        cloud.remove(self.table, self.key)

    def provision(self, flags: List[str]) -> None:
        cloud.record("provision", self.table, self.key)
        record = self.record
        record.data.update(instance_type=self.cfg.instance_type, storage=self.cfg.storage.size)

    def audit(self, name: str) -> None:
        record = self.record
        if record is None:
            _audit(name).audit(aaa.AuditKind.CONFIGURED, self.key)
            return
        if record.data["instance_type"] != self.cfg.instance_type:
            _audit(name).audit(
                aaa.AuditKind.MISMATCHED,
                f"Database {self.key!r} | Configured Type: {self.cfg.instance_type!r}"
                f" - Deployed Type: {record.data['instance_type']!r}",
            )

    def info(self) -> None:
        record = self.record
        if record is None:
            return
        msg.detail(f"{'engine':<20}\t{record.data['engine']} {record.data['version']}")
        msg.detail(f"{'type':<20}\t{record.data['instance_type']}")


class MockDatabaseServiceProvider:
    def __init__(self, cfg: models.DatabaseService):
        self.cfg = cfg
        self.databases = set()

    def new_database_service(self, cfg: models.DatabaseService) -> MockDatabaseService:
        return MockDatabaseService(self)

    def new_database(self, cfg: models.Database, service) -> MockDatabase:
        return MockDatabase(self, cfg)


class MockContainerService:
    table = "container_service"
    prefix = "ecs"

    def __init__(self, cfg: models.ContainerService):
        self.cfg = cfg
        self.key = cfg.name
        if cfg.provider.data.get("created") == "yes" and self.record is None:
            cloud.put(self.table, self.key, Record(id=cloud.new_id(self.prefix), state="active"))

    @property
    def record(self):
        return cloud.get(self.table, self.key)

    def created(self) -> bool:
        return self.record is not None

    def destroyed(self) -> bool:
        return self.record is None

    def load(self) -> None:
        cloud.record("load", self.table, self.key)

    def create(self, flags: List[str]) -> None:
        cloud.record("create", self.table, self.key)
        cloud.put(self.table, self.key, Record(id=cloud.new_id(self.prefix), state="active", data=dict(self.cfg.data)))

    def destroy(self, flags: List[str]) -> None:
        cloud.record("destroy", self.table, self.key)
        cloud.remove(self.table, self.key)

    def provision(self, flags: List[str]) -> None:
        cloud.record("provision", self.table, self.key)
        self.record.data.update(self.cfg.data)

    def audit(self, flags: List[str]) -> None:
        name = flags[0] if flags else "ContainerService"
        if self.record is None:
            _audit(name).audit(aaa.AuditKind.CONFIGURED, self.key)

    def info(self) -> None:
        record = self.record
        if record is None:
            return
        msg.detail(f"{'id':<20}\t{record.id}")
        msg.detail(f"{'state':<20}\t{record.state}")


class MockContainerServiceProvider:
    def __init__(self, cfg: models.ContainerService):
        self.cfg = cfg

    def new_container_service(self, cfg: models.ContainerService) -> MockContainerService:
        return MockContainerService(cfg)
