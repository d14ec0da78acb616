"""
Vendor "mock": nube en memoria para pruebas y demostraciones.
"""

from arc.mock.cloud import Cloud, Record, cloud, reset
from arc.mock.datacenter import MockDataCenter
from arc.mock.dns import MockDnsProvider
from arc.mock.services import MockContainerServiceProvider, MockDatabaseServiceProvider
from arc.provider import registry

VENDOR = "mock"


def register() -> None:
    """Registra el vendor en las cuatro familias de providers."""
    registry.datacenters.register(VENDOR, MockDataCenter)
    registry.dns.register(VENDOR, MockDnsProvider)
    registry.database_services.register(VENDOR, MockDatabaseServiceProvider)
    registry.container_services.register(VENDOR, MockContainerServiceProvider)


__all__ = ["Cloud", "Record", "cloud", "register", "reset", "VENDOR"]
