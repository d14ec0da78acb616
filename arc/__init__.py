"""
arc - Orquestador declarativo de datacenters multi-cloud.

Un datacenter (red, cómputo, DNS, bases de datos y contenedores) se describe en
un único documento y se opera con verbos (create, destroy, provision, ...)
sobre el árbol completo o sobre cualquier subárbol.
"""

__version__ = "1.0.0"
