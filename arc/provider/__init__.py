"""
Registros de providers (datacenter, dns, database_service, container_service).
"""

from arc.provider.registry import Registry, container_services, database_services, datacenters, dns

__all__ = ["Registry", "container_services", "database_services", "datacenters", "dns"]
