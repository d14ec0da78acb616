"""
Registros de fábricas por nombre.

Los clusters se registran por nombre; los pods y las instancias por
servertype. Sin fábrica registrada se usa la clase por defecto. El registro
se hace explícitamente desde el punto de composición (la CLI o los tests).
"""

from typing import Callable, Dict

ClusterFactory = Callable[..., object]
PodFactory = Callable[..., object]
InstanceFactory = Callable[..., object]

cluster_factories: Dict[str, ClusterFactory] = {}
pod_factories: Dict[str, PodFactory] = {}
instance_factories: Dict[str, InstanceFactory] = {}


def register_cluster_factory(name: str, factory: ClusterFactory) -> None:
    """factory(compute, prov, cfg) -> Cluster"""
    cluster_factories[name] = factory


def register_pod_factory(servertype: str, factory: PodFactory) -> None:
    """factory(cluster, prov, cfg) -> Pod"""
    pod_factories[servertype] = factory


def register_instance_factory(servertype: str, factory: InstanceFactory) -> None:
    """factory(pod, subnet, keypair, prov, name) -> Instance"""
    instance_factories[servertype] = factory


def clear() -> None:
    cluster_factories.clear()
    pod_factories.clear()
    instance_factories.clear()
