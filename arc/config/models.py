"""
Modelos de configuración del datacenter (pydantic v2).

Los alias de Field coinciden con las claves del documento YAML; los nombres de
atributo son los que usa el árbol de recursos.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from arc.core import msg


class ConfigModel(BaseModel):
    """Base común: acepta alias o nombre de campo e ignora claves desconocidas."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def print(self) -> None:
        """Muestra la configuración (verbo config)."""
        _print_fields(self.model_dump(by_alias=True, exclude_none=True))


def _print_fields(data: Dict[str, Any]) -> None:
    for key, value in data.items():
        if isinstance(value, dict):
            if not value:
                continue
            msg.detail(f"{key}:")
            msg.indent_inc()
            _print_fields(value)
            msg.indent_dec()
        elif isinstance(value, list) and value and isinstance(value[0], dict):
            msg.detail(f"{key}:")
            msg.indent_inc()
            for item in value:
                _print_fields(item)
                msg.detail("")
            msg.indent_dec()
        elif isinstance(value, list):
            msg.detail(f"{key:<20}\t{', '.join(str(v) for v in value)}")
        else:
            msg.detail(f"{key:<20}\t{value}")


class Provider(ConfigModel):
    vendor: str
    data: Dict[str, str] = Field(default_factory=dict)


# --- Network ---

class SecurityRule(ConfigModel):
    description: str = ""
    directions: List[str] = Field(default_factory=list)
    remotes: List[str] = Field(default_factory=list)
    protocols: List[str] = Field(default_factory=list)
    ports: List[str] = Field(default_factory=list)


class SecurityGroup(ConfigModel):
    name: str = Field(..., alias="security_group")
    rules: Optional[List[SecurityRule]] = None


class SubnetGroup(ConfigModel):
    name: str = Field(..., alias="subnet")
    cidr: str
    access: str = ""
    manage_routes: bool = True


class Subnet(ConfigModel):
    """Subred derivada de un SubnetGroup (una por zona de disponibilidad)."""
    name: str
    group_name: str
    cidr: str
    access: str = ""
    availability_zone: str
    manage_routes: bool = True


class Network(ConfigModel):
    name: str = ""
    cidr: str
    availability_zones: List[str]
    dns_name_servers: List[str] = Field(default_factory=list)
    cidr_aliases: Dict[str, str] = Field(default_factory=dict)
    cidr_groups: Dict[str, List[str]] = Field(default_factory=dict)
    subnet_groups: Optional[List[SubnetGroup]] = None
    security_groups: Optional[List[SecurityGroup]] = None

    @model_validator(mode="after")
    def _check_zones(self) -> "Network":
        if not self.availability_zones:
            raise ValueError("availability_zones must list at least one zone")
        return self


# --- Compute ---

class Volume(ConfigModel):
    device: str
    type: str = ""
    size: int = 0
    keep: bool = False
    boot: bool = False
    fstype: str = ""
    inodes: int = 0
    mount_point: str = ""
    preserve: bool = False


class Pod(ConfigModel):
    name: str = Field(..., alias="pod")
    servertype: str
    version: str = ""
    package_name: str = ""
    image: str = ""
    instance_type: str = Field("", alias="type")
    role: str = ""
    subnet_group: str
    security_groups: List[str] = Field(default_factory=list)
    count: int = 1
    teams: List[str] = Field(default_factory=list)
    volumes: List[Volume] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_count(self) -> "Pod":
        if self.count < 0:
            raise ValueError(f"pod {self.name}: count must not be negative")
        return self


class Cluster(ConfigModel):
    name: str = Field(..., alias="cluster")
    security_tags: Dict[str, str] = Field(default_factory=dict)
    audit_ignore: bool = False
    pods: Optional[List[Pod]] = None


class Compute(ConfigModel):
    name: str = ""
    bootstrap_version: str = ""
    deploy_version: str = ""
    secrets_version: str = ""
    aide_version: str = ""
    clusters: Optional[List[Cluster]] = None


class KeyPair(ConfigModel):
    """Clave pública tomada del ssh-agent (no viene del documento)."""
    name: str
    local_name: str = ""
    format: str = ""
    comment: str = ""
    key_material: str = ""


class DataCenter(ConfigModel):
    provider: Optional[Provider] = None
    security_tags: Dict[str, str] = Field(default_factory=dict)
    network: Optional[Network] = None
    compute: Optional[Compute] = None


# --- DNS ---

class DnsRecord(ConfigModel):
    name: str
    ttl: int = 300
    pod: str = ""
    access: str = ""
    values: List[str] = Field(default_factory=list)


class Dns(ConfigModel):
    provider: Optional[Provider] = None
    domain_name: str
    subdomain: str = ""
    a_records: List[DnsRecord] = Field(default_factory=list)
    cname_records: Optional[List[DnsRecord]] = None
    cache_ignore: bool = False

    @property
    def domain(self) -> str:
        if self.subdomain:
            return f"{self.subdomain}.{self.domain_name}"
        return self.domain_name


# --- Servicios ---

class Storage(ConfigModel):
    type: str = ""
    size: int = 0
    iops: int = 0


class Master(ConfigModel):
    username: str = ""
    password: str = ""

    def print(self) -> None:
        msg.detail(f"{'username':<20}\t{self.username}")
        msg.detail(f"{'password':<20}\t{'*' * 8 if self.password else ''}")


class Database(ConfigModel):
    name: str = Field(..., alias="database")
    engine: str = ""
    version: str = ""
    instance_type: str = Field("", alias="type")
    port: int = 0
    subnet_group: str = ""
    security_groups: List[str] = Field(default_factory=list)
    storage: Storage = Field(default_factory=Storage)
    master: Master = Field(default_factory=Master)

    def print(self) -> None:
        _print_fields(self.model_dump(by_alias=True, exclude={"master"}))
        msg.detail("master:")
        msg.indent_inc()
        self.master.print()
        msg.indent_dec()


class DatabaseService(ConfigModel):
    provider: Optional[Provider] = None
    databases: List[Database] = Field(default_factory=list)


class ContainerService(ConfigModel):
    provider: Optional[Provider] = None
    name: str = ""
    data: Dict[str, str] = Field(default_factory=dict)


class Arc(ConfigModel):
    """Documento raíz de un datacenter."""
    name: str
    title: str = ""
    provider: Optional[Provider] = None
    notifications: Dict[str, Any] = Field(default_factory=dict)
    datacenter: Optional[DataCenter] = None
    database_service: Optional[DatabaseService] = None
    container_service: Optional[ContainerService] = None
    dns: Optional[Dns] = None

    def print_local(self) -> None:
        msg.detail(f"{'name':<20}\t{self.name}")
        if self.title:
            msg.detail(f"{'title':<20}\t{self.title}")
