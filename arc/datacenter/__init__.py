"""
Árbol de recursos: raíz, datacenter, red, compute, instancias, DNS y servicios.
"""

from arc.datacenter.factory import register_cluster_factory, register_instance_factory, register_pod_factory
from arc.datacenter.root import Arc, root_help

__all__ = [
    "Arc",
    "register_cluster_factory",
    "register_instance_factory",
    "register_pod_factory",
    "root_help",
]
