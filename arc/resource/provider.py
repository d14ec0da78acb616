"""
Contratos que deben implementar los providers (mock, nube pública, etc.).

El core solo define interfaces; la implementación vive en el paquete de cada
vendor y se registra en arc.provider. Los errores se reportan lanzando
ProviderError; las operaciones con route() devuelven un Response.
"""

from typing import Dict, List, Protocol

from arc.core.help import Command as HelpCommand
from arc.route import Request, Response


class ProviderResource(Protocol):
    """Handle genérico: enruta load/create/destroy/info y expone su estado."""

    def route(self, req: Request) -> Response:
        ...

    def created(self) -> bool:
        ...

    def destroyed(self) -> bool:
        ...


class Routable(Protocol):
    """Sub-verbos propios del vendor que el core despacha si los reconoce."""

    def can_route(self, req: Request) -> bool:
        ...

    def help_commands(self) -> List[HelpCommand]:
        ...


# --- Datacenter ---

class ProviderNetwork(ProviderResource, Routable, Protocol):
    @property
    def id(self) -> str:
        ...

    @property
    def state(self) -> str:
        ...

    def audit_subnets(self, name: str) -> None:
        ...

    def audit_secgroups(self, name: str) -> None:
        ...


class ProviderSubnet(ProviderResource, Protocol):
    @property
    def id(self) -> str:
        ...

    @property
    def state(self) -> str:
        ...

    def load(self) -> None:
        ...

    def audit(self, name: str) -> None:
        ...


class ProviderSecurityGroup(ProviderResource, Protocol):
    """create con "norules" solo reserva el grupo; provision instala las reglas."""

    @property
    def id(self) -> str:
        ...

    def load(self) -> None:
        ...

    def audit(self, name: str) -> None:
        ...


class ProviderCompute(Protocol):
    def audit_instances(self, name: str) -> None:
        ...

    def audit_volumes(self, name: str) -> None:
        ...

    def audit_eips(self, name: str) -> None:
        ...


class ProviderKeyPair(ProviderResource, Protocol):
    def load(self) -> None:
        ...

    @property
    def fingerprint(self) -> str:
        ...


class ProviderInstance(ProviderResource, Protocol):
    @property
    def id(self) -> str:
        ...

    @property
    def image_id(self) -> str:
        ...

    @property
    def key_name(self) -> str:
        ...

    @property
    def state(self) -> str:
        ...

    @property
    def private_ip_address(self) -> str:
        ...

    @property
    def public_ip_address(self) -> str:
        ...

    def started(self) -> bool:
        ...

    def stopped(self) -> bool:
        ...

    def set_tags(self, tags: Dict[str, str]) -> None:
        ...

    def audit(self, name: str) -> None:
        ...

    def info(self) -> None:
        ...


class ProviderVolume(Protocol):
    @property
    def id(self) -> str:
        ...

    @property
    def state(self) -> str:
        ...

    def load(self) -> None:
        ...

    def created(self) -> bool:
        ...

    def destroyed(self) -> bool:
        ...

    def attached(self) -> bool:
        ...

    def detached(self) -> bool:
        ...

    def attach(self) -> None:
        ...

    def detach(self) -> None:
        ...

    def destroy(self) -> None:
        ...

    def set_tags(self, tags: Dict[str, str]) -> None:
        ...

    def reset(self) -> None:
        """Olvida el volumen en memoria; el provider lo recoge con la instancia."""
        ...

    def audit(self, name: str) -> None:
        ...

    def info(self) -> None:
        ...


class ProviderElasticIP(Protocol):
    """Reserva y asociación son estados independientes."""

    @property
    def id(self) -> str:
        ...

    @property
    def ip_address(self) -> str:
        ...

    def load(self) -> None:
        ...

    def created(self) -> bool:
        ...

    def destroyed(self) -> bool:
        ...

    def attached(self) -> bool:
        ...

    def detached(self) -> bool:
        ...

    def create(self) -> None:
        ...

    def destroy(self) -> None:
        ...

    def attach(self) -> None:
        ...

    def detach(self) -> None:
        ...


class ProviderRole(Protocol):
    @property
    def id(self) -> str:
        ...

    @property
    def instance_id(self) -> str:
        ...

    def load(self) -> None:
        ...

    def created(self) -> bool:
        ...

    def destroyed(self) -> bool:
        ...

    def attached(self) -> bool:
        ...

    def detached(self) -> bool:
        ...

    def attach(self) -> None:
        ...

    def detach(self) -> None:
        ...

    def update(self) -> None:
        ...


class DataCenterProvider(Protocol):
    """Fábrica de handles de un vendor para el subárbol datacenter."""

    def new_network(self, network, cfg) -> ProviderNetwork:
        ...

    def new_subnet(self, network, cfg) -> ProviderSubnet:
        ...

    def new_security_group(self, network, security_group) -> ProviderSecurityGroup:
        ...

    def new_compute(self, compute, cfg) -> ProviderCompute:
        ...

    def new_keypair(self, cfg) -> ProviderKeyPair:
        ...

    def new_instance(self, instance) -> ProviderInstance:
        ...

    def new_volume(self, instance, cfg) -> ProviderVolume:
        ...

    def new_elastic_ip(self, instance) -> ProviderElasticIP:
        ...

    def new_role(self, name: str, instance) -> ProviderRole:
        ...


# --- DNS ---

class ProviderDns(Protocol):
    @property
    def id(self) -> str:
        ...

    def audit_dns_records(self, name: str) -> None:
        ...


class ProviderDnsRecord(ProviderResource, Protocol):
    @property
    def id(self) -> str:
        ...

    def load(self) -> None:
        ...

    def dynamic_values(self) -> List[str]:
        ...

    def audit(self, name: str) -> None:
        ...


class DnsProvider(Protocol):
    def new_dns(self, dns) -> ProviderDns:
        ...

    def new_dns_record(self, record) -> ProviderDnsRecord:
        ...


# --- Servicios ---

class ProviderDatabaseService(ProviderResource, Protocol):
    def load(self) -> None:
        ...

    def audit(self, name: str) -> None:
        ...


class ProviderDatabase(Protocol):
    @property
    def id(self) -> str:
        ...

    def load(self) -> None:
        ...

    def created(self) -> bool:
        ...

    def destroyed(self) -> bool:
        ...

    def create(self, flags: List[str]) -> None:
        ...

    def destroy(self, flags: List[str]) -> None:
        ...

    def provision(self, flags: List[str]) -> None:
        ...

    def audit(self, name: str) -> None:
        ...

    def info(self) -> None:
        ...


class DatabaseServiceProvider(Protocol):
    def new_database_service(self, cfg) -> ProviderDatabaseService:
        ...

    def new_database(self, cfg, service) -> ProviderDatabase:
        ...


class ProviderContainerService(Protocol):
    def load(self) -> None:
        ...

    def created(self) -> bool:
        ...

    def destroyed(self) -> bool:
        ...

    def create(self, flags: List[str]) -> None:
        ...

    def destroy(self, flags: List[str]) -> None:
        ...

    def provision(self, flags: List[str]) -> None:
        ...

    def audit(self, flags: List[str]) -> None:
        ...

    def info(self) -> None:
        ...


class ContainerServiceProvider(Protocol):
    def new_container_service(self, cfg) -> ProviderContainerService:
        ...
